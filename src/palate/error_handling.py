"""
Standardized Error Handling for Palate

Exception taxonomy for schema validation, profile mapping and calls to the
text-generation model.
"""

import logging
from typing import NoReturn, Optional

logger = logging.getLogger(__name__)


class PalateError(Exception):
    """Base exception for the palate library."""
    pass


class LLMError(PalateError):
    """Text-model failures (missing credentials, API errors, empty responses)."""
    pass


class SchemaViolation(PalateError):
    """A candidate profile failed structural, range or enum validation."""

    def __init__(self, path: str, constraint: str, value: object = None):
        self.path = path
        self.constraint = constraint
        self.value = value
        super().__init__(f"{path or '<root>'}: {constraint}")


class MappingFailed(PalateError):
    """The model returned well-formed JSON that does not fit the profile schema."""

    def __init__(self, message: str, violation: Optional[SchemaViolation] = None):
        self.violation = violation
        super().__init__(message)


def handle_llm_error(error: Exception, operation: str) -> NoReturn:
    """
    Log a text-model failure and re-raise it as LLMError.

    Args:
        error: Exception raised by the model client
        operation: Description of operation

    Raises:
        LLMError: always
    """
    error_type = type(error).__name__

    if "rate limit" in str(error).lower() or error_type == "RateLimitError":
        logger.warning(f"Rate limit hit during {operation}: {error}")
        raise LLMError(f"Rate limit during {operation}") from error

    if "api" in error_type.lower():
        logger.error(f"API error during {operation}: {error}")
        raise LLMError(f"API error during {operation}") from error

    logger.error(f"Unexpected error during {operation}: {error_type} - {error}")
    raise LLMError(f"Unexpected error during {operation}") from error


# Export key functions and classes
__all__ = [
    'PalateError',
    'LLMError',
    'SchemaViolation',
    'MappingFailed',
    'handle_llm_error',
]
