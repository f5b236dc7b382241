"""
Palate Constants and Enums

Centralized enumerations, check weights and thresholds for the profile
schema and the consistency evaluator.
"""

from enum import Enum
from typing import Dict


# =======================
# PROFILE ENUMS
# =======================

class AromaFamily(str, Enum):
    """Aroma families a user can show affinity (or aversion) for."""
    CITRUS = "citrus"
    STONE_FRUIT = "stone_fruit"
    TROPICAL = "tropical"
    RED_FRUIT = "red_fruit"
    BLACK_FRUIT = "black_fruit"
    FLORAL = "floral"
    HERBAL_GREEN = "herbal_green"
    PEPPER_SPICE = "pepper_spice"
    EARTH_MINERAL = "earth_mineral"
    OAK_VANILLA_SMOKE = "oak_vanilla_smoke"
    DAIRY_BUTTER = "dairy_butter"
    HONEY_OXIDATIVE = "honey_oxidative"


class OccasionCode(str, Enum):
    """Situations that shift the user's ideal wine."""
    EVERYDAY = "everyday"
    HOT_DAY_PATIO = "hot_day_patio"
    COZY_WINTER = "cozy_winter"
    SPICY_FOOD_NIGHT = "spicy_food_night"
    STEAK_NIGHT = "steak_night"
    SEAFOOD_SUSHI = "seafood_sushi"
    PIZZA_PASTA = "pizza_pasta"
    CELEBRATION_TOAST = "celebration_toast"
    DESSERT_NIGHT = "dessert_night"
    APERITIF = "aperitif"


class BudgetTier(str, Enum):
    """Spending tiers."""
    WEEKNIGHT = "weeknight"
    WEEKEND = "weekend"
    CELEBRATION = "celebration"


class WineKnowledge(str, Enum):
    """Self-declared experience tier."""
    NOVICE = "novice"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"


class Qualitative(Enum):
    """Qualitative bands with lower thresholds, used in commentary."""
    HIGH = ("high", 0.75)
    MODERATE = ("moderate", 0.55)
    MEDIUM = ("medium", 0.35)
    LOW = ("low", 0.0)

    def __init__(self, label: str, threshold: float):
        self.label = label
        self.threshold = threshold

    @classmethod
    def from_value(cls, value: float) -> 'Qualitative':
        """Get the band for a [0,1] scalar."""
        if value >= cls.HIGH.threshold:
            return cls.HIGH
        elif value >= cls.MODERATE.threshold:
            return cls.MODERATE
        elif value >= cls.MEDIUM.threshold:
            return cls.MEDIUM
        else:
            return cls.LOW


# =======================
# FIELD NAME CONSTANTS
# =======================

class FieldNames:
    """Wire (camelCase) names of profile fields."""

    USER_ID = "userId"
    STABLE_PALATE = "stablePalate"
    AROMA_AFFINITIES = "aromaAffinities"
    STYLE_LEVERS = "styleLevers"
    CONTEXT_WEIGHTS = "contextWeights"
    FOOD_PROFILE = "foodProfile"
    PREFERENCES = "preferences"
    DISLIKES = "dislikes"
    SPARKLING = "sparkling"
    WINE_KNOWLEDGE = "wineKnowledge"
    FLAVOR_MAPS = "flavorMaps"

    @classmethod
    def top_level(cls) -> list:
        """Get the top-level keys of a profile, in wire order."""
        return [
            cls.USER_ID, cls.STABLE_PALATE, cls.AROMA_AFFINITIES, cls.STYLE_LEVERS,
            cls.CONTEXT_WEIGHTS, cls.FOOD_PROFILE, cls.PREFERENCES, cls.DISLIKES,
            cls.SPARKLING, cls.WINE_KNOWLEDGE, cls.FLAVOR_MAPS,
        ]


# =======================
# EVALUATOR CONSTANTS
# =======================

class EvaluatorConstants:
    """
    Thresholds and default weights for the consistency evaluator.

    Weights are empirical: they rank how strongly a text signal should pin
    down a profile field. Override them per check id through
    ConsistencyEvaluator(weights=...).
    """

    # STRUCTURED REDS
    REDS_TANNIN_MIN = 0.7
    REDS_BODY_MIN = 0.7
    REDS_OAK_RANGE = (0.55, 0.75)

    # MINERAL WHITES
    WHITE_MINERALITY_MIN = 0.55
    WHITE_SWEETNESS_MAX = 0.35

    # ACIDITY
    ACIDITY_CAP = 0.65

    # Population variance of the five core palate scalars must exceed this.
    # 0.0025 is a standard deviation of 0.05 around the mean.
    NONFLAT_VARIANCE_MIN = 0.0025

    # Absolute tolerance between a flavor map value and its top-level axis
    COHERENCE_TOLERANCE = 0.2

    # Whites are compared against the top-level oak capped at this value
    WHITE_OAK_CEILING = 0.5

    # Confidence reported when no check fired at all
    NEUTRAL_CONFIDENCE = 0.5

    DEFAULT_WEIGHTS: Dict[str, float] = {
        "reds-tannin": 2.0,
        "reds-body": 2.0,
        "reds-oak": 1.2,
        "white-minerality": 1.0,
        "white-sweetness": 0.8,
        "acidity-cap": 1.2,
        "balance-nonflat": 0.6,
        "ctx-steak": 0.7,
        "ctx-pizza": 0.6,
        "ctx-celebration": 0.5,
        "ctx-aperitif": 0.4,
        "coherence-red-tannin": 0.7,
        "coherence-red-acidity": 0.5,
        "coherence-red-body": 0.5,
        "coherence-red-oak": 0.5,
        "coherence-white-acidity": 0.5,
        "coherence-white-body": 0.4,
        "coherence-white-oak": 0.4,
        "coherence-sparkling-bubbles": 0.3,
    }


# =======================
# TASTE PROJECTION CONSTANTS
# =======================

class PriceRange:
    """Price ranges (USD) implied by a budget tier."""

    BY_TIER = {
        BudgetTier.WEEKNIGHT: (10, 25),
        BudgetTier.WEEKEND: (20, 50),
        BudgetTier.CELEBRATION: (50, 150),
    }
    FALLBACK = (15, 40)
    CURRENCY = "USD"


# Export all
__all__ = [
    'AromaFamily',
    'OccasionCode',
    'BudgetTier',
    'WineKnowledge',
    'Qualitative',
    'FieldNames',
    'EvaluatorConstants',
    'PriceRange',
]
