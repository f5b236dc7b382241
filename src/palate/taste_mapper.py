"""
Projection of a palate profile into the app-facing taste profile.

The app's recommendation views work per category on a 1-10 scale; this
module converts the [0,1] profile (and its flavor maps) into that shape.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from palate.constants import PriceRange
from palate.schema import FlavorMapCategory, UserProfileInput

DEFAULT_CONFIDENCE = 0.8


@dataclass
class FlavorProfile:
    """Per-category preferences on a 1-10 scale."""
    fruitiness: int
    earthiness: int
    oakiness: int
    acidity: int
    tannins: int
    sweetness: int
    body: str  # light, medium or full
    disliked_characteristics: List[str] = field(default_factory=list)


@dataclass
class TasteProfile:
    user_id: str
    red: FlavorProfile
    white: FlavorProfile
    sparkling: FlavorProfile
    price_min: int
    price_max: int
    currency: str
    confidence_score: float


def to_scale10(value: Optional[float], fallback: float = 0.5) -> int:
    """Map a [0,1] value (or fallback when None) to an integer 1-10."""
    v = fallback if value is None else value
    v = max(0.0, min(1.0, v))
    # Half-up rounding: 0.5 maps to 6, not 5
    return max(1, min(10, int(v * 9 + 0.5) + 1))


def to_body(value: Optional[float]) -> str:
    """Body band: light below 0.4, full above 0.7."""
    v = 0.5 if value is None else value
    if v < 0.4:
        return "light"
    if v > 0.7:
        return "full"
    return "medium"


def build_flavor_profile(category: Optional[FlavorMapCategory], profile: UserProfileInput) -> FlavorProfile:
    """
    Build one category's FlavorProfile.

    Structure (acidity, tannins, sweetness, body) always comes from the
    stable palate; the category only contributes fruit and oak.
    """
    category = category or FlavorMapCategory()
    palate = profile.stable_palate
    oak = profile.style_levers.oak if category.oak is None else category.oak

    return FlavorProfile(
        fruitiness=to_scale10(category.fruit_ripeness),
        # Flavor maps carry no earthiness axis
        earthiness=to_scale10(None),
        oakiness=to_scale10(oak, fallback=0.3),
        acidity=to_scale10(palate.acidity),
        tannins=to_scale10(palate.tannin),
        sweetness=to_scale10(palate.sweetness, fallback=0.3),
        body=to_body(palate.body),
        disliked_characteristics=list(profile.dislikes),
    )


def to_taste_profile(profile: UserProfileInput, confidence: Optional[float] = None) -> TasteProfile:
    """
    Project a validated profile into a TasteProfile.

    Args:
        profile: Validated profile
        confidence: Evaluator confidence; DEFAULT_CONFIDENCE if not evaluated

    Returns:
        TasteProfile with red/white/sparkling FlavorProfiles and a price range
    """
    maps = profile.flavor_maps
    price_min, price_max = PriceRange.BY_TIER.get(profile.preferences.budget_tier, PriceRange.FALLBACK)

    return TasteProfile(
        user_id=profile.user_id,
        red=build_flavor_profile(maps.red, profile),
        white=build_flavor_profile(maps.white, profile),
        sparkling=build_flavor_profile(maps.sparkling, profile),
        price_min=price_min,
        price_max=price_max,
        currency=PriceRange.CURRENCY,
        confidence_score=DEFAULT_CONFIDENCE if confidence is None else confidence,
    )
