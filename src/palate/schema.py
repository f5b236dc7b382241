"""Pydantic schemas for Palate profile validation."""

from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from palate.constants import AromaFamily, BudgetTier, OccasionCode, WineKnowledge
from palate.error_handling import SchemaViolation

# Numeric fields are strict: "0.5" is a type error, not a float
Scale01 = Annotated[float, Field(ge=0.0, le=1.0, strict=True)]
Affinity = Annotated[float, Field(ge=-1.0, le=1.0, strict=True)]
HeatLevel = Annotated[int, Field(ge=0, le=5, strict=True)]


class ProfileModel(BaseModel):
    """Base for profile models: camelCase on the wire, immutable once built."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class StablePalate(ProfileModel):
    """Long-lived, category-independent taste baseline."""

    sweetness: Scale01
    acidity: Scale01
    tannin: Scale01
    bitterness: Scale01
    body: Scale01
    alcohol_warmth: Scale01
    sparkle_intensity: Scale01


class StyleLevers(ProfileModel):
    """Winemaking-style sensitivities."""

    oak: Scale01
    malolactic_butter: Scale01
    oxidative: Scale01
    minerality: Scale01
    fruit_ripeness: Scale01


class AromaAffinity(ProfileModel):
    family: AromaFamily
    affinity: Affinity = Field(..., description="-1 strong aversion, 1 strong affinity")


class ContextWeightsEntry(ProfileModel):
    """How the ideal wine shifts for one occasion."""

    occasion: OccasionCode
    weights: Dict[str, Scale01] = Field(
        default_factory=dict,
        description="Palate/style axis name -> override value"
    )


class FoodProfile(ProfileModel):
    heat_level: HeatLevel
    salt: Scale01
    fat: Scale01
    sauce_sweetness: Scale01
    sauce_acidity: Scale01
    cuisines: List[str]
    proteins: List[str]


class FlavorMapCategory(ProfileModel):
    """Category projection (red/white/sparkling) of palate and style values."""

    tannin: Optional[Scale01] = None
    acidity: Optional[Scale01] = None
    body: Optional[Scale01] = None
    oak: Optional[Scale01] = None
    fruit_ripeness: Optional[Scale01] = None
    aroma_affinities_top: Optional[List[AromaFamily]] = None
    dryness: Optional[str] = Field(None, description="Dryness band label, e.g. Brut")
    bubble_intensity: Optional[Scale01] = None

    def is_populated(self) -> bool:
        """True if any field carries a value."""
        return bool(self.model_dump(exclude_none=True))


class FlavorMaps(ProfileModel):
    red: Optional[FlavorMapCategory] = None
    white: Optional[FlavorMapCategory] = None
    sparkling: Optional[FlavorMapCategory] = None


class Preferences(ProfileModel):
    novelty: Scale01
    budget_tier: BudgetTier
    values: Optional[List[str]] = None


class SparklingOverrides(ProfileModel):
    dryness_band: Optional[str] = None
    bubble_intensity: Optional[Scale01] = None


class UserProfileInput(ProfileModel):
    """Complete taste profile produced by one mapping run.

    Validated as a single unit; a new instance replaces the previous one
    wholesale on recalibration.
    """

    user_id: str
    stable_palate: StablePalate
    aroma_affinities: List[AromaAffinity]
    style_levers: StyleLevers
    context_weights: List[ContextWeightsEntry]
    food_profile: Optional[FoodProfile] = None
    preferences: Preferences
    dislikes: List[str]
    sparkling: SparklingOverrides
    wine_knowledge: WineKnowledge
    flavor_maps: FlavorMaps

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with wire (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def _format_loc(loc: tuple) -> str:
    return ".".join(str(part) for part in loc)


def validate(candidate: Any) -> UserProfileInput:
    """
    Validate an untyped candidate (e.g. parsed model output) as a profile.

    Args:
        candidate: Dict with wire field names, or an existing UserProfileInput

    Returns:
        Validated, immutable UserProfileInput

    Raises:
        SchemaViolation: On the first missing, mistyped, out-of-range or
            non-enum field. `path` is the dotted wire path.
    """
    if isinstance(candidate, UserProfileInput):
        return candidate

    try:
        # Wire input must use camelCase keys; snake_case names are for Python callers
        return UserProfileInput.model_validate(candidate, by_alias=True, by_name=False)
    except ValidationError as e:
        first = e.errors(include_url=False)[0]
        raise SchemaViolation(
            path=_format_loc(first["loc"]),
            constraint=first["msg"],
            value=first.get("input"),
        ) from e


__all__ = [
    'StablePalate',
    'StyleLevers',
    'AromaAffinity',
    'ContextWeightsEntry',
    'FoodProfile',
    'FlavorMapCategory',
    'FlavorMaps',
    'Preferences',
    'SparklingOverrides',
    'UserProfileInput',
    'validate',
]
