"""
Utility functions for Palate.

Includes logging, input sanitization, JSON extraction and text normalization.
"""

import logging
import re
import unicodedata
from typing import Any, Mapping, Optional

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# =======================
# INPUT SANITIZATION
# =======================

MAX_ANSWER_LENGTH = 2000

# Handles multi-line, punctuation-separated and case variations
_INJECTION_PATTERNS = [
    r'ignore[\s\.\,\:\;]+previous',
    r'ignore[\s\.\,\:\;]+all',
    r'ignore[\s\.\,\:\;]+above',
    r'disregard[\s\.\,\:\;]+previous',
    r'forget[\s\.\,\:\;]+previous',

    # System/role markers
    r'system[\s\.\,\:\;]*:',
    r'assistant[\s\.\,\:\;]*:',
    r'user[\s\.\,\:\;]*:',
    r'\[INST\]',
    r'\[/INST\]',
    r'<\|im_start\|>',
    r'<\|im_end\|>',
    r'<\|system\|>',
    r'<\|assistant\|>',

    # Direct instruction injection
    r'new\s+instruction',
    r'override\s+instruction',
    r'system\s+message',
    r'you\s+are\s+now',
    r'pretend\s+to\s+be',

    r'===+\s*system',
    r'---+\s*system',
    r'```\s*system',

    # Exfiltration
    r'print\s+your',
    r'reveal\s+your',
    r'show\s+me\s+your',
]


def sanitize_text_input(text: str, max_length: int = MAX_ANSWER_LENGTH) -> str:
    """
    Sanitize a free-text answer before it is placed in a prompt.

    Args:
        text: Raw user input
        max_length: Maximum allowed length

    Returns:
        Sanitized text
    """
    if not text:
        return ""

    text = text[:max_length]

    for pattern in _INJECTION_PATTERNS:
        text = re.sub(pattern, '', text, flags=re.IGNORECASE | re.MULTILINE)

    # Keep max 2 consecutive newlines
    text = re.sub(r'\n{3,}', '\n\n', text)

    text = ''.join(char for char in text if char.isprintable() or char in '\n\t')

    return text.strip()


def sanitize_answers(answers: Optional[Mapping[str, Any]]) -> dict:
    """
    Sanitize every answer value, dropping the ones left empty.

    Keys are kept as given; non-string values are stringified.
    """
    if not answers:
        return {}

    cleaned = {}
    for key, value in answers.items():
        if value is None:
            continue
        text = sanitize_text_input(str(value))
        if text:
            cleaned[str(key)] = text
        else:
            logger.debug(f"Dropped empty answer '{key}' after sanitization")
    return cleaned


# =======================
# TEXT NORMALIZATION
# =======================

def fold_accents(text: str) -> str:
    """Strip combining marks: 'Rhône' -> 'Rhone', 'rosé' -> 'rose'."""
    decomposed = unicodedata.normalize('NFKD', text)
    return ''.join(char for char in decomposed if not unicodedata.combining(char))


def normalize_answers(answers: Optional[Mapping[str, Any]]) -> str:
    """
    Collapse all answer values into one lower-cased, accent-folded string.

    Falsy values are skipped. Keys are ignored; only the text matters.
    """
    if not answers:
        return ""
    parts = [fold_accents(str(value)).lower() for value in answers.values() if value]
    return ' '.join(parts)


# =======================
# JSON EXTRACTION
# =======================

def extract_first_json_object(text: str) -> Optional[str]:
    """
    Find the first balanced {...} object in text that may include prose or
    markdown fences.

    Braces inside JSON strings are skipped.

    Returns:
        The object substring, or None if no balanced object exists
    """
    if not text:
        return None

    start = text.find('{')
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        char = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif char == '\\':
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
            if depth == 0:
                return text[start:i + 1]

    return None
