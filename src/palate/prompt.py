"""
Prompt construction for free-text -> profile mapping.

Builds the chat messages sent to the text model: a strict-JSON system
instruction, a compact schema excerpt, worked few-shot pairs and the
user's answers as the final turn.
"""

import json
from typing import Any, Dict, List, Mapping

from palate.constants import AromaFamily, BudgetTier, OccasionCode, WineKnowledge


def _choices(enum_cls) -> str:
    return "|".join(member.value for member in enum_cls)


SYSTEM_INSTRUCTION = "\n".join([
    "You are a sommelier data normalizer.",
    "Return STRICT JSON that conforms exactly to the requested schema keys.",
    "Rules:",
    "- Infer reasonable values from user free-text.",
    "- When uncertain, choose sensible midpoints/defaults rather than refusing.",
    "- All numeric intensities are in [0,1]; aroma affinity is in [-1,1]; heatLevel is an integer 0-5.",
    "- wineKnowledge must equal the experience you are given.",
    "- Only include keys present in the requested schema; no markdown fences, no commentary.",
])

SCHEMA_EXCERPT = "\n".join([
    "SCHEMA (all [0,1] unless noted):",
    "{userId: string,",
    " stablePalate: {sweetness, acidity, tannin, bitterness, body, alcoholWarmth, sparkleIntensity},",
    f" aromaAffinities: [{{family: {_choices(AromaFamily)}, affinity: [-1,1]}}],",
    " styleLevers: {oak, malolacticButter, oxidative, minerality, fruitRipeness},",
    f" contextWeights: [{{occasion: {_choices(OccasionCode)}, weights: {{axisName: [0,1]}}}}],",
    " foodProfile?: {heatLevel: int 0-5, salt, fat, sauceSweetness, sauceAcidity, cuisines: [string], proteins: [string]},",
    f" preferences: {{novelty, budgetTier: {_choices(BudgetTier)}, values?: [string]}},",
    " dislikes: [string],",
    " sparkling: {drynessBand?: string, bubbleIntensity?},",
    f" wineKnowledge: {_choices(WineKnowledge)},",
    " flavorMaps: {red?|white?|sparkling?: {tannin?, acidity?, body?, oak?, fruitRipeness?,"
    " aromaAffinitiesTop?: [family], dryness?: string, bubbleIntensity?}}}",
])


# Worked examples: (user turn, assistant turn). Assistant turns must stay
# schema-valid; tests validate them.
FEW_SHOT_EXAMPLES: List[Dict[str, Any]] = [
    {
        "input": {
            "experience": "novice",
            "answers": {
                "free_enjoyed": "I liked a light white that tasted crisp and citrusy",
                "free_disliked": "Too oaky and buttery",
                "free_contexts": "Sunny afternoons on the patio, sushi with friends",
            },
        },
        "output": {
            "userId": "example-novice",
            "stablePalate": {
                "sweetness": 0.3, "acidity": 0.7, "tannin": 0.1, "bitterness": 0.2,
                "body": 0.3, "alcoholWarmth": 0.3, "sparkleIntensity": 0.4,
            },
            "aromaAffinities": [
                {"family": "citrus", "affinity": 0.6},
                {"family": "oak_vanilla_smoke", "affinity": -0.5},
                {"family": "dairy_butter", "affinity": -0.6},
            ],
            "styleLevers": {
                "oak": 0.1, "malolacticButter": 0.1, "oxidative": 0.2,
                "minerality": 0.6, "fruitRipeness": 0.4,
            },
            "contextWeights": [
                {"occasion": "hot_day_patio", "weights": {"acidity": 0.75}},
                {"occasion": "seafood_sushi", "weights": {}},
            ],
            "foodProfile": {
                "heatLevel": 2, "salt": 0.5, "fat": 0.4, "sauceSweetness": 0.3,
                "sauceAcidity": 0.6, "cuisines": ["japanese"], "proteins": ["fish"],
            },
            "preferences": {"novelty": 0.5, "budgetTier": "weeknight", "values": []},
            "dislikes": ["oaky", "buttery"],
            "sparkling": {},
            "wineKnowledge": "novice",
            "flavorMaps": {
                "white": {"acidity": 0.7, "body": 0.3, "oak": 0.1, "aromaAffinitiesTop": ["citrus"]},
            },
        },
    },
    {
        "input": {
            "experience": "expert",
            "answers": {
                "free_enjoyed": "Napa Cabernet, Northern Rhone Syrah and right-bank Bordeaux; Sancerre with oysters",
                "free_disliked": "Overly acidic, thin reds",
                "free_contexts": "Steak night, celebrations with friends",
                "free_descriptors": "structured, savory, peppery, graphite",
            },
        },
        "output": {
            "userId": "example-expert",
            "stablePalate": {
                "sweetness": 0.15, "acidity": 0.55, "tannin": 0.8, "bitterness": 0.45,
                "body": 0.8, "alcoholWarmth": 0.65, "sparkleIntensity": 0.3,
            },
            "aromaAffinities": [
                {"family": "black_fruit", "affinity": 0.7},
                {"family": "pepper_spice", "affinity": 0.7},
                {"family": "earth_mineral", "affinity": 0.5},
            ],
            "styleLevers": {
                "oak": 0.65, "malolacticButter": 0.25, "oxidative": 0.2,
                "minerality": 0.6, "fruitRipeness": 0.6,
            },
            "contextWeights": [
                {"occasion": "steak_night", "weights": {"tannin": 0.85, "body": 0.85}},
                {"occasion": "celebration_toast", "weights": {"sparkleIntensity": 0.6}},
            ],
            "preferences": {"novelty": 0.4, "budgetTier": "weekend", "values": ["terroir-driven"]},
            "dislikes": ["overly acidic", "thin reds"],
            "sparkling": {"drynessBand": "Brut", "bubbleIntensity": 0.35},
            "wineKnowledge": "expert",
            "flavorMaps": {
                "red": {
                    "tannin": 0.8, "acidity": 0.55, "body": 0.8, "oak": 0.65,
                    "fruitRipeness": 0.6, "aromaAffinitiesTop": ["black_fruit", "pepper_spice"],
                },
                "white": {"acidity": 0.6, "body": 0.5, "oak": 0.2, "aromaAffinitiesTop": ["citrus"]},
                "sparkling": {"dryness": "Brut", "bubbleIntensity": 0.35},
            },
        },
    },
]


def build_mapping_messages(
    user_id: str,
    experience: str,
    answers: Mapping[str, Any]
) -> List[Dict[str, str]]:
    """
    Build chat messages for the mapping request.

    Args:
        user_id: Opaque user identifier, echoed back as userId
        experience: novice, intermediate or expert
        answers: Sanitized free-text answers keyed by question id

    Returns:
        List of {"role", "content"} messages, final turn last
    """
    messages = [{"role": "system", "content": f"{SYSTEM_INSTRUCTION}\n\n{SCHEMA_EXCERPT}"}]

    for example in FEW_SHOT_EXAMPLES:
        messages.append({"role": "user", "content": json.dumps(example["input"])})
        messages.append({"role": "assistant", "content": json.dumps(example["output"])})

    messages.append({
        "role": "user",
        "content": json.dumps({"userId": user_id, "experience": experience, "answers": dict(answers)}),
    })
    return messages
