"""
Onboarding preview: map answers to a profile and evaluate it in one call.
"""

import time
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from palate.evaluator import ConsistencyEvaluator, EvaluationResult
from palate.mapper import ProfileMapper
from palate.schema import UserProfileInput
from palate.utils import logger


@dataclass
class PreviewResult:
    profile: UserProfileInput
    summary: str
    evaluation: EvaluationResult
    used_model: str
    fallback: bool
    latency_ms: int  # Mapping latency only

    def to_dict(self) -> Dict[str, Any]:
        return {
            "profile": self.profile.to_dict(),
            "summary": self.summary,
            "evaluation": self.evaluation.to_dict(),
            "usedModel": self.used_model,
            "fallback": self.fallback,
            "latencyMs": self.latency_ms,
        }


def preview_profile(
    mapper: ProfileMapper,
    user_id: str,
    experience: str,
    answers: Optional[Mapping[str, Any]] = None,
    evaluator: Optional[ConsistencyEvaluator] = None
) -> PreviewResult:
    """
    Map free-text answers and score the result against the same answers.

    A MappingFailed or LLMError from the mapper propagates unchanged.
    """
    evaluator = evaluator or ConsistencyEvaluator()

    logger.info(f"preview_map_started (experience={experience})")
    started = time.monotonic()
    mapping = mapper.map_profile(user_id, experience, answers)
    latency_ms = int((time.monotonic() - started) * 1000)
    logger.info(f"preview_map_completed in {latency_ms}ms (fallback={mapping.fallback})")

    evaluation = evaluator.evaluate(mapping.profile, answers, experience)

    return PreviewResult(
        profile=mapping.profile,
        summary=mapping.summary,
        evaluation=evaluation,
        used_model=mapping.used_model,
        fallback=mapping.fallback,
        latency_ms=latency_ms,
    )
