"""Shared fixtures: wire-format profile dicts and a scripted completion client."""

import copy

import pytest

from palate.llm import CompletionClient


BASE_PROFILE = {
    "userId": "u-123",
    "stablePalate": {
        "sweetness": 0.2,
        "acidity": 0.5,
        "tannin": 0.75,
        "bitterness": 0.45,
        "body": 0.75,
        "alcoholWarmth": 0.7,
        "sparkleIntensity": 0.2,
    },
    "aromaAffinities": [
        {"family": "black_fruit", "affinity": 0.6},
        {"family": "pepper_spice", "affinity": 0.7},
    ],
    "styleLevers": {
        "oak": 0.6,
        "malolacticButter": 0.3,
        "oxidative": 0.3,
        "minerality": 0.6,
        "fruitRipeness": 0.6,
    },
    "contextWeights": [
        {"occasion": "steak_night", "weights": {}},
        {"occasion": "pizza_pasta", "weights": {}},
        {"occasion": "celebration_toast", "weights": {}},
    ],
    "preferences": {"novelty": 0.4, "budgetTier": "weekend", "values": []},
    "dislikes": [],
    "sparkling": {},
    "wineKnowledge": "expert",
    "flavorMaps": {
        "red": {"tannin": 0.75, "acidity": 0.5, "body": 0.75, "oak": 0.6, "fruitRipeness": 0.6},
        "white": {"acidity": 0.55, "body": 0.5, "oak": 0.2, "aromaAffinitiesTop": ["citrus"]},
        "sparkling": {"dryness": "Brut", "bubbleIntensity": 0.2},
    },
}


class ScriptedClient(CompletionClient):
    """Completion client returning a fixed reply and recording requests."""

    model = "scripted-model"

    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def complete(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def profile_data():
    """Fresh, schema-valid profile dict (safe to mutate)."""
    return copy.deepcopy(BASE_PROFILE)
