"""
Consistency Evaluator: cross-checks an inferred profile against the free
text it was inferred from.

Detectors fire on the normalized answers; each firing detector contributes
weighted checks on profile fields. Coherence checks compare the category
flavor maps with the top-level palate. Confidence is the passed share of
total weight.

The evaluator is a pure function of its inputs: no I/O, no shared state,
identical inputs give identical output.
"""

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional, Tuple

import numpy as np

from palate.constants import EvaluatorConstants, OccasionCode, Qualitative
from palate.detectors import (
    BRUNCH_OCCASION,
    CELEBRATION_OCCASION,
    DISLIKES_HIGH_ACID,
    MINERAL_WHITES,
    PIZZA_OCCASION,
    STEAK_OCCASION,
    STRUCTURED_REDS,
    detect_signals,
)
from palate.schema import UserProfileInput
from palate.utils import logger, normalize_answers

ProfileFn = Callable[[UserProfileInput], Any]

# Absorbs float noise such as 0.8 - 0.6 = 0.20000000000000007
_FLOAT_SLACK = 1e-9


@dataclass
class EvaluationCheck:
    """Outcome of one weighted check."""
    id: str
    passed: bool
    expected: Any
    actual: Any
    weight: float
    message: str


@dataclass
class EvaluationResult:
    """Confidence, per-check diagnostics and user-facing commentary."""
    confidence: float  # 0-1
    checks: List[EvaluationCheck] = field(default_factory=list)
    commentary: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "confidence": self.confidence,
            "checks": [asdict(check) for check in self.checks],
            "commentary": self.commentary,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)


class CheckRule(NamedTuple):
    """A single check: predicate over a profile plus its diagnostics."""
    id: str
    predicate: Callable[[UserProfileInput], bool]
    expected: ProfileFn
    actual: ProfileFn
    weight: float
    message: str

    def run(self, profile: UserProfileInput) -> EvaluationCheck:
        return EvaluationCheck(
            id=self.id,
            passed=bool(self.predicate(profile)),
            expected=self.expected(profile),
            actual=self.actual(profile),
            weight=self.weight,
            message=self.message,
        )


# =======================
# PROFILE ACCESSORS
# =======================

def _fixed(value: Any) -> ProfileFn:
    return lambda profile: value


def _palate(axis: str) -> ProfileFn:
    return lambda profile: getattr(profile.stable_palate, axis)


def _style(axis: str) -> ProfileFn:
    return lambda profile: getattr(profile.style_levers, axis)


def _map_field(category: str, name: str) -> ProfileFn:
    return lambda profile: getattr(getattr(profile.flavor_maps, category), name)


def _white_oak_ceiling(profile: UserProfileInput) -> float:
    return min(profile.style_levers.oak, EvaluatorConstants.WHITE_OAK_CEILING)


def palate_variance(profile: UserProfileInput) -> float:
    """Population variance of sweetness, acidity, tannin, bitterness, body."""
    palate = profile.stable_palate
    values = [palate.sweetness, palate.acidity, palate.tannin, palate.bitterness, palate.body]
    return float(np.var(values))


def context_occasions(profile: UserProfileInput) -> List[str]:
    """Occasion codes present in contextWeights, first-seen order, no repeats."""
    seen: List[str] = []
    for entry in profile.context_weights:
        if entry.occasion.value not in seen:
            seen.append(entry.occasion.value)
    return seen


def qualitative(value: float) -> str:
    """Bucket a [0,1] scalar: high, moderate, medium or low."""
    return Qualitative.from_value(value).label


class ConsistencyEvaluator:
    """
    Weighted rule engine scoring a profile against free-text evidence.

    Args:
        weights: Per-check-id overrides of EvaluatorConstants.DEFAULT_WEIGHTS
        tolerance: Absolute tolerance for flavor map coherence checks
    """

    def __init__(
        self,
        weights: Optional[Mapping[str, float]] = None,
        tolerance: float = EvaluatorConstants.COHERENCE_TOLERANCE
    ):
        merged = dict(EvaluatorConstants.DEFAULT_WEIGHTS)
        for check_id, weight in (weights or {}).items():
            if check_id not in merged:
                raise ValueError(f"Unknown check id: {check_id}")
            if weight <= 0:
                raise ValueError(f"Weight for {check_id} must be positive, got {weight}")
            merged[check_id] = float(weight)

        self.weights = merged
        self.tolerance = tolerance

        self.signal_rules = self._build_signal_rules()
        self.acidity_cap_rule, self.nonflat_rule = self._build_balance_rules()
        self.coherence_rules = self._build_coherence_rules()

    # -----------------------
    # RULE TABLES
    # -----------------------

    def _rule(self, rule_id, predicate, expected, actual, message) -> CheckRule:
        return CheckRule(rule_id, predicate, expected, actual, self.weights[rule_id], message)

    def _occasion_rule(self, rule_id: str, accepted: Tuple[OccasionCode, ...], message: str) -> CheckRule:
        codes = [code.value for code in accepted]
        return self._rule(
            rule_id,
            lambda p: any(code in codes for code in context_occasions(p)),
            _fixed("|".join(codes) + " in contexts"),
            context_occasions,
            message,
        )

    def _build_signal_rules(self) -> Dict[str, Tuple[CheckRule, ...]]:
        c = EvaluatorConstants
        oak_low, oak_high = c.REDS_OAK_RANGE
        return {
            STRUCTURED_REDS.name: (
                self._rule(
                    "reds-tannin",
                    lambda p: p.stable_palate.tannin >= c.REDS_TANNIN_MIN,
                    _fixed(f">={c.REDS_TANNIN_MIN}"), _palate("tannin"),
                    "Structured reds should show higher tannin",
                ),
                self._rule(
                    "reds-body",
                    lambda p: p.stable_palate.body >= c.REDS_BODY_MIN,
                    _fixed(f">={c.REDS_BODY_MIN}"), _palate("body"),
                    "Structured reds should show fuller body",
                ),
                self._rule(
                    "reds-oak",
                    lambda p: oak_low <= p.style_levers.oak <= oak_high,
                    _fixed(f"{oak_low}-{oak_high}"), _style("oak"),
                    "Moderate oak expected for Napa/Bordeaux styles",
                ),
            ),
            MINERAL_WHITES.name: (
                self._rule(
                    "white-minerality",
                    lambda p: p.style_levers.minerality >= c.WHITE_MINERALITY_MIN,
                    _fixed(f">={c.WHITE_MINERALITY_MIN}"), _style("minerality"),
                    "Sancerre/Pinot Gris imply mineral whites",
                ),
                self._rule(
                    "white-sweetness",
                    lambda p: p.stable_palate.sweetness <= c.WHITE_SWEETNESS_MAX,
                    _fixed(f"<={c.WHITE_SWEETNESS_MAX}"), _palate("sweetness"),
                    "Balanced/dry whites preferred",
                ),
            ),
            STEAK_OCCASION.name: (
                self._occasion_rule("ctx-steak", (OccasionCode.STEAK_NIGHT,), "Expect steak night context"),
            ),
            PIZZA_OCCASION.name: (
                self._occasion_rule("ctx-pizza", (OccasionCode.PIZZA_PASTA,), "Expect pizza/pasta context"),
            ),
            CELEBRATION_OCCASION.name: (
                self._occasion_rule(
                    "ctx-celebration", (OccasionCode.CELEBRATION_TOAST,),
                    "Expect celebration/date-night context",
                ),
            ),
            BRUNCH_OCCASION.name: (
                self._occasion_rule(
                    "ctx-aperitif", (OccasionCode.APERITIF, OccasionCode.EVERYDAY),
                    "Expect aperitif/brunch/lighter context",
                ),
            ),
        }

    def _build_balance_rules(self) -> Tuple[CheckRule, CheckRule]:
        c = EvaluatorConstants
        acidity_cap = self._rule(
            "acidity-cap",
            lambda p: p.stable_palate.acidity <= c.ACIDITY_CAP,
            _fixed(f"<={c.ACIDITY_CAP}"), _palate("acidity"),
            "User dislikes overly acidic wines",
        )
        nonflat = self._rule(
            "balance-nonflat",
            lambda p: palate_variance(p) > c.NONFLAT_VARIANCE_MIN,
            _fixed(f"variance>{c.NONFLAT_VARIANCE_MIN}"),
            lambda p: round(palate_variance(p), 6),
            "Palate should not be flat at 0.5",
        )
        return acidity_cap, nonflat

    def _coherence_rule(
        self, rule_id: str, category: str, name: str, counterpart: ProfileFn, message: str
    ) -> CheckRule:
        value = _map_field(category, name)
        tolerance = self.tolerance

        def within(profile: UserProfileInput) -> bool:
            mapped = value(profile)
            # No value in the map means no evidence against the palate
            if mapped is None:
                return True
            return abs(mapped - counterpart(profile)) <= tolerance + _FLOAT_SLACK

        return self._rule(rule_id, within, counterpart, value, message)

    def _build_coherence_rules(self) -> Dict[str, Tuple[CheckRule, ...]]:
        return {
            "red": (
                self._coherence_rule("coherence-red-tannin", "red", "tannin", _palate("tannin"), "Red map tannin should reflect stable palate"),
                self._coherence_rule("coherence-red-acidity", "red", "acidity", _palate("acidity"), "Red map acidity should reflect stable palate"),
                self._coherence_rule("coherence-red-body", "red", "body", _palate("body"), "Red map body should reflect stable palate"),
                self._coherence_rule("coherence-red-oak", "red", "oak", _style("oak"), "Red map oak should reflect style levers"),
            ),
            "white": (
                self._coherence_rule("coherence-white-acidity", "white", "acidity", _palate("acidity"), "White map acidity should reflect stable palate"),
                self._coherence_rule("coherence-white-body", "white", "body", _palate("body"), "White map body should reflect stable palate"),
                self._coherence_rule("coherence-white-oak", "white", "oak", _white_oak_ceiling, "Whites usually show lower oak in this preference set"),
            ),
            "sparkling": (
                self._coherence_rule(
                    "coherence-sparkling-bubbles", "sparkling", "bubble_intensity", _palate("sparkle_intensity"),
                    "Sparkling bubble intensity should reflect palate",
                ),
            ),
        }

    # -----------------------
    # EVALUATION
    # -----------------------

    def select_rules(self, profile: UserProfileInput, signals: Mapping[str, bool]) -> List[CheckRule]:
        """Rules that apply for the fired signals and populated flavor maps, in report order."""
        rules: List[CheckRule] = []

        for name in (STRUCTURED_REDS.name, MINERAL_WHITES.name):
            if signals.get(name):
                rules.extend(self.signal_rules[name])

        if signals.get(DISLIKES_HIGH_ACID.name):
            rules.append(self.acidity_cap_rule)
        else:
            rules.append(self.nonflat_rule)

        for name in (STEAK_OCCASION.name, PIZZA_OCCASION.name, CELEBRATION_OCCASION.name, BRUNCH_OCCASION.name):
            if signals.get(name):
                rules.extend(self.signal_rules[name])

        for category, category_rules in self.coherence_rules.items():
            flavor_map = getattr(profile.flavor_maps, category)
            if flavor_map is not None and flavor_map.is_populated():
                rules.extend(category_rules)

        return rules

    def evaluate(
        self,
        profile: UserProfileInput,
        answers: Optional[Mapping[str, Any]] = None,
        experience: Optional[str] = None
    ) -> EvaluationResult:
        """
        Score a validated profile against the answers it was mapped from.

        Args:
            profile: Validated profile
            answers: Free-text answers (optional; empty text still runs the
                balance and coherence checks)
            experience: Experience tier, informational only

        Returns:
            EvaluationResult with confidence in [0, 1]
        """
        text = normalize_answers(answers)
        signals = detect_signals(text)

        checks = [rule.run(profile) for rule in self.select_rules(profile, signals)]
        confidence = self._aggregate(checks)
        commentary = self._commentary(profile, signals)

        logger.debug(
            f"Evaluated profile {profile.user_id} (experience={experience}): "
            f"{sum(c.passed for c in checks)}/{len(checks)} checks passed, confidence={confidence:.2f}"
        )
        return EvaluationResult(confidence=confidence, checks=checks, commentary=commentary)

    @staticmethod
    def _aggregate(checks: List[EvaluationCheck]) -> float:
        if not checks:
            return EvaluatorConstants.NEUTRAL_CONFIDENCE

        total = sum(check.weight for check in checks)
        passed = sum(check.weight for check in checks if check.passed)
        return max(0.0, min(1.0, passed / total))

    @staticmethod
    def _commentary(profile: UserProfileInput, signals: Mapping[str, bool]) -> str:
        palate = profile.stable_palate
        levers = profile.style_levers

        if signals.get(STRUCTURED_REDS.name):
            reds = (
                f"Your reds lean structured and savory (tannin {qualitative(palate.tannin)}, "
                f"body {qualitative(palate.body)}, oak {qualitative(levers.oak)})."
            )
        else:
            reds = "Your reds sit around a balanced midpoint with easy drinking structure."

        if signals.get(MINERAL_WHITES.name):
            whites = (
                f"For whites you favor mineral, balanced styles like Sancerre/Pinot Gris "
                f"(sweetness {qualitative(palate.sweetness)}, acidity {qualitative(palate.acidity)})."
            )
        else:
            whites = "Whites look balanced without extremes of sugar or acid."

        if signals.get(STEAK_OCCASION.name):
            tip = (
                "For steak or grilled nights, try a Napa Cab or N. Rhone Syrah; "
                "for pizza/burger, a robust Pinot or Rioja works well."
            )
        else:
            tip = "Pair richer reds with protein and keep whites crisp-mineral for seafood and salads."

        return f"{reds} {whites} {tip}"
