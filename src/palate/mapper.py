"""
Profile Mapper: free-text onboarding answers -> validated taste profile.

One outbound call to the text model per mapping. Unparseable replies
degrade to a neutral default profile; parseable replies with the wrong
shape raise MappingFailed.
"""

import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from palate.config import PROMPT_VERSION
from palate.constants import BudgetTier, FieldNames, WineKnowledge
from palate.error_handling import MappingFailed, SchemaViolation
from palate.llm import CompletionClient
from palate.prompt import build_mapping_messages
from palate.schema import (
    FlavorMaps,
    Preferences,
    SparklingOverrides,
    StablePalate,
    StyleLevers,
    UserProfileInput,
    validate,
)
from palate.utils import extract_first_json_object, logger, sanitize_answers

# Returned by _parse when the reply is not JSON at all; a parsed `null` is
# a shape failure, not a parse failure
_UNPARSEABLE = object()


@dataclass(frozen=True)
class MappingResult:
    """Validated profile plus provenance of one mapping run."""
    profile: UserProfileInput
    summary: str  # Short provenance string
    used_model: str
    fallback: bool  # True if the model reply was unparseable


def default_profile(user_id: str, experience: WineKnowledge) -> UserProfileInput:
    """
    Neutral profile used when the model reply cannot be parsed.

    Built from typed models, so it is schema-valid by construction.
    """
    return UserProfileInput(
        user_id=user_id,
        stable_palate=StablePalate(
            sweetness=0.5,
            acidity=0.5,
            tannin=0.5,
            bitterness=0.5,
            body=0.5,
            alcohol_warmth=0.5,
            sparkle_intensity=0.5,
        ),
        aroma_affinities=[],
        style_levers=StyleLevers(
            oak=0.3,
            malolactic_butter=0.2,
            oxidative=0.2,
            minerality=0.5,
            fruit_ripeness=0.5,
        ),
        context_weights=[],
        food_profile=None,
        preferences=Preferences(novelty=0.5, budget_tier=BudgetTier.WEEKEND, values=[]),
        dislikes=[],
        sparkling=SparklingOverrides(),
        wine_knowledge=experience,
        flavor_maps=FlavorMaps(),
    )


def count_populated_fields(profile: UserProfileInput) -> int:
    """Count top-level fields that are present and non-empty."""
    data = profile.to_dict()
    return sum(
        1 for key in FieldNames.top_level()
        if key in data and data[key] not in ({}, [], "")
    )


class ProfileMapper:
    """
    Maps onboarding answers to a UserProfileInput via a text model.

    Stateless apart from the injected client; safe to share between
    requests if the client is.
    """

    def __init__(self, client: CompletionClient):
        self.client = client

    def map_profile(
        self,
        user_id: str,
        experience: str,
        answers: Optional[Mapping[str, Any]] = None
    ) -> MappingResult:
        """
        Map free-text answers to a validated profile.

        Args:
            user_id: Opaque user identifier
            experience: novice, intermediate or expert
            answers: Question id -> free text

        Returns:
            MappingResult

        Raises:
            ValueError: Unknown experience tier
            MappingFailed: Model returned JSON that violates the schema
            LLMError: Model call failed (propagated from the client)
        """
        tier = WineKnowledge(experience)
        cleaned = sanitize_answers(answers)

        messages = build_mapping_messages(user_id, tier.value, cleaned)
        logger.info(
            f"Mapping profile for {user_id} (experience={tier.value}, {len(cleaned)} answers, "
            f"prompt v{PROMPT_VERSION})"
        )
        content = self.client.complete(messages)

        candidate = self._parse(content)
        if candidate is _UNPARSEABLE:
            profile = default_profile(user_id, tier)
            summary = (
                f"default profile (unparseable model output); experience={tier.value}; "
                f"fields populated={count_populated_fields(profile)}"
            )
            return MappingResult(profile, summary, self.client.model, fallback=True)

        try:
            profile = validate(candidate)
        except SchemaViolation as e:
            logger.error(f"Model output violates profile schema at {e.path}: {e.constraint}")
            raise MappingFailed(f"Model output violates profile schema: {e}", violation=e) from e

        if profile.wine_knowledge != tier:
            logger.warning(
                f"Model returned wineKnowledge={profile.wine_knowledge.value}, "
                f"expected {tier.value}; using caller's tier"
            )
            profile = profile.model_copy(update={"wine_knowledge": tier})

        summary = (
            f"mapped from free text; experience={tier.value}; "
            f"fields populated={count_populated_fields(profile)}"
        )
        logger.info(f"Profile mapped for {user_id}: {summary}")
        return MappingResult(profile, summary, self.client.model, fallback=False)

    def _parse(self, content: str) -> Any:
        """Parse the reply as JSON, or _UNPARSEABLE if it is not JSON."""
        text = extract_first_json_object(content) or content
        try:
            return json.loads(text)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Unparseable model output, falling back to default profile: {e}")
            return _UNPARSEABLE
