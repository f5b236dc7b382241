#!/usr/bin/env python3
"""
Palate profile preview script.

Evaluates a profile JSON file against onboarding answers, or maps the
answers through the text model first and evaluates the result.

Usage:
    python scripts/palate_preview.py answers.json --profile profile.json
    python scripts/palate_preview.py answers.json --map --experience expert
"""

import argparse
import json
import sys
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from palate.error_handling import LLMError, MappingFailed, SchemaViolation
from palate.evaluator import ConsistencyEvaluator
from palate.llm import OpenAICompletionClient
from palate.mapper import ProfileMapper
from palate.preview import preview_profile
from palate.schema import validate


def create_checks_table(evaluation):
    """Table of every check that fired."""
    table = Table(
        title="🍷 Consistency Checks",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan",
        title_style="bold white"
    )

    table.add_column("Check", style="cyan")
    table.add_column("", justify="center", width=3)
    table.add_column("Expected", style="dim white")
    table.add_column("Actual", style="bold white")
    table.add_column("Weight", justify="right")
    table.add_column("Message", style="dim white")

    for check in evaluation.checks:
        mark = "[green]✓[/green]" if check.passed else "[red]✗[/red]"
        table.add_row(
            check.id,
            mark,
            str(check.expected),
            str(check.actual),
            f"{check.weight:.1f}",
            check.message
        )

    return table


def create_confidence_panel(evaluation, summary=None):
    """Confidence and commentary, colored by confidence band."""
    if evaluation.confidence >= 0.75:
        border_style = "bold blue"
    elif evaluation.confidence >= 0.5:
        border_style = "bold yellow"
    else:
        border_style = "dim yellow"

    content = f"[bold white]Confidence:[/bold white] {evaluation.confidence * 100:.0f}%\n\n{evaluation.commentary}"
    if summary:
        content += f"\n\n[dim]{summary}[/dim]"

    return Panel(content, title="🎯 Palate Profile", border_style=border_style, box=box.DOUBLE, padding=(1, 2))


def load_json(path):
    with open(path, 'r') as f:
        return json.load(f)


def main():
    """Main execution function."""
    parser = argparse.ArgumentParser(description="Preview a palate profile against onboarding answers")
    parser.add_argument("answers", help="JSON file: question id -> free text")
    parser.add_argument("--profile", help="Profile JSON file to evaluate")
    parser.add_argument("--map", action="store_true", help="Map answers through the text model first")
    parser.add_argument("--experience", default="intermediate", choices=["novice", "intermediate", "expert"])
    parser.add_argument("--user-id", default="preview")
    parser.add_argument("--json", action="store_true", help="Print raw JSON instead of tables")
    args = parser.parse_args()

    console = Console()

    if not args.profile and not args.map:
        parser.error("either --profile or --map is required")

    try:
        answers = load_json(args.answers)

        if args.map:
            with console.status("[bold cyan]Mapping answers to a profile...", spinner="dots"):
                mapper = ProfileMapper(OpenAICompletionClient())
                result = preview_profile(mapper, args.user_id, args.experience, answers)
            evaluation, summary = result.evaluation, result.summary
            payload = result.to_dict()
        else:
            profile = validate(load_json(args.profile))
            evaluation = ConsistencyEvaluator().evaluate(profile, answers, args.experience)
            summary = None
            payload = evaluation.to_dict()

        if args.json:
            console.print_json(json.dumps(payload))
            return

        console.print()
        console.print(create_checks_table(evaluation))
        console.print()
        console.print(create_confidence_panel(evaluation, summary))
        console.print()

    except SchemaViolation as e:
        console.print(f"[bold red]Invalid profile:[/bold red] {e.path}: {e.constraint}")
        sys.exit(1)
    except MappingFailed as e:
        console.print(f"[bold red]Mapping failed:[/bold red] {e}")
        sys.exit(1)
    except LLMError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        console.print("\n[yellow]Make sure OPENAI_API_KEY is set in your .env file[/yellow]")
        sys.exit(1)
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[bold red]Could not read input:[/bold red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
