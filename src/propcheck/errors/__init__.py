"""propcheck error handling module.

Provides the exception hierarchy with error codes and structured context.
"""

from propcheck.errors.base import (
    ConfigValidationError,
    DefinitionError,
    ErrorCode,
    ErrorContext,
    GenerationExhausted,
    InvalidRange,
    MalformedWeights,
    MissingArbitrary,
    PropCheckError,
    PropertyFalsified,
    PropertyGaveUp,
    PropertyNotFound,
)

__all__ = [
    # Base exceptions
    "PropCheckError",
    "ErrorCode",
    "ErrorContext",
    # Generation errors
    "GenerationExhausted",
    # Definition errors
    "DefinitionError",
    "MalformedWeights",
    "InvalidRange",
    "MissingArbitrary",
    "ConfigValidationError",
    # Verdict errors
    "PropertyFalsified",
    "PropertyGaveUp",
    # Runner errors
    "PropertyNotFound",
]
