"""Custom exception hierarchy for propcheck.

propcheck separates two kinds of trouble:

- Data conditions that the engine absorbs (a ``such_that`` filter that
  could not be satisfied becomes a Discard, a property body that raises
  becomes a Failure). These never reach the caller as exceptions.
- Programming errors in the test definition itself (malformed weights,
  an empty range, a type with no registered arbitrary, bad configuration).
  These fail fast and loudly at property-definition time.

All propcheck errors inherit from PropCheckError and include:
- error_code: A unique ErrorCode enum for categorization
- context: ErrorContext with property/generator details
- suggestions: List of actionable steps to resolve the issue

Example:
    try:
        gen.frequency((0, gen.pure(1)))
    except MalformedWeights as e:
        print(f"Error: {e}")
        print(f"Suggestions: {e.suggestions}")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for propcheck.

    Error codes are organized by category:
    - E1xx: Generation errors
    - E2xx: Definition errors (weights, ranges, registry, config)
    - E3xx: Property verdict errors raised by the registration glue
    - E4xx: Runner errors
    - E9xx: Unknown/internal errors
    """

    # Generation errors (E1xx)
    GENERATION_EXHAUSTED = "E101"

    # Definition errors (E2xx)
    INVALID_DEFINITION = "E200"
    MALFORMED_WEIGHTS = "E201"
    INVALID_RANGE = "E202"
    MISSING_ARBITRARY = "E203"
    INVALID_CONFIG = "E204"

    # Verdict errors (E3xx)
    PROPERTY_FALSIFIED = "E301"
    PROPERTY_GAVE_UP = "E302"

    # Runner errors (E4xx)
    PROPERTY_NOT_FOUND = "E401"

    # Unknown/internal errors (E9xx)
    UNKNOWN = "E999"

    @property
    def category(self) -> str:
        """Get the error category name."""
        code_num = int(self.value[1:])
        if code_num < 200:
            return "generation"
        elif code_num < 300:
            return "definition"
        elif code_num < 400:
            return "verdict"
        elif code_num < 500:
            return "runner"
        else:
            return "unknown"


@dataclass
class ErrorContext:
    """Structured context for error logging and debugging.

    Attributes:
        property_name: Name of the property being checked (if known).
        generator: Short description of the generator involved.
        seed: Seed of the run, for replay.
        size: Size parameter at the time of the error.
        extra: Additional context-specific information.
        timestamp: When the error occurred.
    """

    property_name: str | None = None
    generator: str | None = None
    seed: int | None = None
    size: int | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Convert context to dictionary for serialization."""
        result = {
            "property_name": self.property_name,
            "generator": self.generator,
            "seed": self.seed,
            "size": self.size,
            "extra": self.extra,
            "timestamp": self.timestamp.isoformat(),
        }
        return {k: v for k, v in result.items() if v is not None}

    def format_location(self) -> str:
        """Format the error location as a readable string."""
        parts = []
        if self.property_name:
            parts.append(f"property={self.property_name}")
        if self.generator:
            parts.append(f"generator={self.generator}")
        if self.seed is not None:
            parts.append(f"seed={self.seed}")
        if self.size is not None:
            parts.append(f"size={self.size}")
        return " > ".join(parts) if parts else "unknown location"


class PropCheckError(Exception):
    """Base exception for all propcheck errors.

    Attributes:
        error_code: Unique ErrorCode for this error type
        message: Human-readable error description
        context: ErrorContext with execution details
        suggestions: List of actionable steps to resolve the issue
        cause: The underlying exception (if any)
    """

    error_code: ErrorCode = ErrorCode.UNKNOWN
    default_message: str = "An unexpected error occurred"
    default_suggestions: list[str] = []

    def __init__(
        self,
        message: str | None = None,
        error_code: ErrorCode | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
        suggestions: list[str] | None = None,
        **extra_context: Any,
    ) -> None:
        self.message = message or self.default_message
        self.error_code = error_code or self.error_code
        self.context = context or ErrorContext()
        self.cause = cause
        self._suggestions = suggestions

        if extra_context:
            self.context.extra.update(extra_context)

        super().__init__(self.message)

    @property
    def suggestions(self) -> list[str]:
        """Get actionable suggestions for resolving this error."""
        if self._suggestions is not None:
            return self._suggestions
        return self.default_suggestions.copy()

    def __str__(self) -> str:
        parts = [f"[{self.error_code.value}] {self.message}"]

        location = self.context.format_location()
        if location != "unknown location":
            parts.append(f"at {location}")

        return " | ".join(parts)

    def format_verbose(self) -> str:
        """Format error with full details including suggestions."""
        lines = [
            f"Error [{self.error_code.value}]: {self.message}",
            "",
        ]

        location = self.context.format_location()
        if location != "unknown location":
            lines.append(f"Location: {location}")

        if self.suggestions:
            lines.append("")
            lines.append("Suggestions:")
            for suggestion in self.suggestions:
                lines.append(f"  - {suggestion}")

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_code": self.error_code.value,
            "error_type": self.__class__.__name__,
            "category": self.error_code.category,
            "message": self.message,
            "suggestions": self.suggestions,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
        }


class GenerationExhausted(PropCheckError):
    """A filtered generator could not satisfy its predicate.

    Raised by ``such_that`` once its retry bound is spent. The property
    layer turns it into a Discard; it only escapes when a generator is
    sampled directly.
    """

    error_code = ErrorCode.GENERATION_EXHAUSTED
    default_message = "Generator exhausted its retries without satisfying the predicate"
    default_suggestions = [
        "Generate valid values directly instead of filtering (e.g. map over a smaller range)",
        "Loosen the such_that predicate",
        "Raise such_that_tries in the configuration",
    ]

    def __init__(self, attempts: int, message: str | None = None, **kwargs: Any) -> None:
        self.attempts = attempts
        super().__init__(
            message or f"such_that gave up after {attempts} attempts",
            **kwargs,
        )


class DefinitionError(PropCheckError):
    """A property, generator or registry was defined incorrectly.

    These indicate a broken test rather than a data condition and are
    raised as soon as the offending value is constructed.
    """

    error_code = ErrorCode.INVALID_DEFINITION
    default_message = "Invalid property definition"


class MalformedWeights(DefinitionError):
    """frequency/one_of/elements got an empty or non-positive weight set."""

    error_code = ErrorCode.MALFORMED_WEIGHTS
    default_message = "Weights must be a non-empty list of positive integers"
    default_suggestions = [
        "Pass at least one alternative",
        "Use positive integer weights, e.g. frequency((3, a), (1, b))",
    ]


class InvalidRange(DefinitionError):
    """A range or size argument is empty or negative."""

    error_code = ErrorCode.INVALID_RANGE
    default_message = "Invalid range"
    default_suggestions = [
        "Make sure the lower bound is not greater than the upper bound",
        "Sizes passed to resize() must be >= 0",
    ]


class MissingArbitrary(DefinitionError):
    """The registry has no arbitrary for the requested type."""

    error_code = ErrorCode.MISSING_ARBITRARY
    default_message = "No arbitrary registered for type"
    default_suggestions = [
        "Register one with registry.register(YourType, Arbitrary(gen, shrinker))",
        "Pass an explicit Arbitrary or Gen to for_all instead of a type",
    ]

    def __init__(self, type_hint: Any, message: str | None = None, **kwargs: Any) -> None:
        self.type_hint = type_hint
        super().__init__(message or f"No arbitrary registered for {type_hint!r}", **kwargs)


class ConfigValidationError(PropCheckError):
    """Configuration value is invalid.

    A configuration value failed validation. Check the field name
    and expected format in the error details.
    """

    error_code = ErrorCode.INVALID_CONFIG
    default_message = "Invalid configuration value"
    default_suggestions = [
        "Check the field name and value in propcheck.yaml",
        "Environment overrides use the PROPCHECK_ prefix (e.g. PROPCHECK_MAX_TESTS=500)",
    ]

    def __init__(
        self,
        message: str | None = None,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        if field:
            self.context.extra["field"] = field
        if value is not None:
            self.context.extra["value"] = value


def _report_context(report: Any) -> ErrorContext:
    """Locate a verdict error by the run that produced it."""
    return ErrorContext(
        property_name=report.name,
        seed=report.seed,
        size=report.failing_size,
        extra={"verdict": report.verdict.value},
    )


class PropertyFalsified(PropCheckError, AssertionError):
    """Raised by the registration glue when a property is falsified.

    Carries the final Report so test runners can print the witness.
    """

    error_code = ErrorCode.PROPERTY_FALSIFIED
    default_message = "Property falsified"

    def __init__(self, report: Any, message: str | None = None, **kwargs: Any) -> None:
        self.report = report
        kwargs.setdefault("context", _report_context(report))
        super().__init__(message or report.describe(), **kwargs)


class PropertyGaveUp(PropCheckError, AssertionError):
    """Raised by the registration glue when too many cases were discarded."""

    error_code = ErrorCode.PROPERTY_GAVE_UP
    default_message = "Gave up: insufficient valid data"
    default_suggestions = [
        "Weaken the implies() precondition or generate valid data directly",
        "Raise max_discard_ratio in the configuration",
    ]

    def __init__(self, report: Any, message: str | None = None, **kwargs: Any) -> None:
        self.report = report
        kwargs.setdefault("context", _report_context(report))
        super().__init__(message or report.describe(), **kwargs)


class PropertyNotFound(PropCheckError):
    """The runner could not find the requested property."""

    error_code = ErrorCode.PROPERTY_NOT_FOUND
    default_message = "Property not found"
