"""Palate - free-text taste profile inference and consistency evaluation."""

from palate.error_handling import LLMError, MappingFailed, SchemaViolation
from palate.evaluator import ConsistencyEvaluator, EvaluationResult
from palate.mapper import MappingResult, ProfileMapper
from palate.schema import UserProfileInput, validate

__version__ = "0.1.0"

__all__ = [
    'ConsistencyEvaluator',
    'EvaluationResult',
    'ProfileMapper',
    'MappingResult',
    'UserProfileInput',
    'validate',
    'SchemaViolation',
    'MappingFailed',
    'LLMError',
    '__version__',
]
