"""
Signal detectors over normalized free text.

Each detector is a named, pure predicate: it fires when the text contains
any of its tokens. Text is expected to be lower-cased and accent-folded
(see palate.utils.normalize_answers).
"""

from typing import Dict, NamedTuple, Tuple


class Detector(NamedTuple):
    """A named token set; calling it tests normalized text."""
    name: str
    tokens: Tuple[str, ...]

    def __call__(self, text: str) -> bool:
        return any(token in text for token in self.tokens)


STRUCTURED_REDS = Detector("structured_reds", (
    "napa cab", "napa cabernet", "heitz", "cabernet",
    "northern rhone", "syrah", "cote rotie", "cote-rotie", "hermitage",
    "bordeaux", "merlot",
))

MINERAL_WHITES = Detector("mineral_whites", (
    "pinot gris", "elk cove", "sancerre", "sauvignon blanc",
))

DISLIKES_HIGH_ACID = Detector("dislikes_high_acid", (
    "overly acidic", "extremely acidic", "too acidic", "razor-sharp", "too crisp",
))

STEAK_OCCASION = Detector("steak_occasion", ("steak", "grilled", "kabob"))

PIZZA_OCCASION = Detector("pizza_occasion", ("pizza", "burger"))

CELEBRATION_OCCASION = Detector("celebration_occasion", (
    "celebration", "special occasion", "date night",
))

# "rose" also covers "rosé" once accents are folded
BRUNCH_OCCASION = Detector("brunch_occasion", ("lunch", "brunch", "rose"))

DETECTORS = (
    STRUCTURED_REDS,
    MINERAL_WHITES,
    DISLIKES_HIGH_ACID,
    STEAK_OCCASION,
    PIZZA_OCCASION,
    CELEBRATION_OCCASION,
    BRUNCH_OCCASION,
)


def detect_signals(text: str) -> Dict[str, bool]:
    """Run every detector over normalized text."""
    return {detector.name: detector(text) for detector in DETECTORS}
