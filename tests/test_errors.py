"""Tests for the error hierarchy."""

import pytest

from propcheck.core import gen
from propcheck.core.result import Report, Verdict
from propcheck.errors import (
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


class TestErrorCodes:
    @pytest.mark.parametrize(
        "code,category",
        [
            (ErrorCode.GENERATION_EXHAUSTED, "generation"),
            (ErrorCode.INVALID_DEFINITION, "definition"),
            (ErrorCode.MISSING_ARBITRARY, "definition"),
            (ErrorCode.PROPERTY_FALSIFIED, "verdict"),
            (ErrorCode.PROPERTY_NOT_FOUND, "runner"),
            (ErrorCode.UNKNOWN, "unknown"),
        ],
    )
    def test_categories(self, code, category):
        assert code.category == category

    def test_codes_are_unique(self):
        values = [code.value for code in ErrorCode]
        assert len(values) == len(set(values))


class TestHierarchy:
    @pytest.mark.parametrize("cls", [MalformedWeights, InvalidRange])
    def test_definition_errors(self, cls):
        assert issubclass(cls, DefinitionError)
        assert issubclass(cls, PropCheckError)

    def test_verdict_errors_are_assertion_errors(self):
        assert issubclass(PropertyFalsified, AssertionError)
        assert issubclass(PropertyGaveUp, AssertionError)

    def test_generation_exhausted_is_not_a_definition_error(self):
        assert not issubclass(GenerationExhausted, DefinitionError)


class TestPropCheckError:
    def test_str_includes_code_and_location(self):
        error = InvalidRange("bad range", context=ErrorContext(generator="choose", size=3))
        assert str(error) == "[E202] bad range | at generator=choose > size=3"

    def test_default_message_and_suggestions(self):
        error = MalformedWeights()
        assert error.message == MalformedWeights.default_message
        assert error.suggestions
        assert error.suggestions is not MalformedWeights.default_suggestions

    def test_extra_context(self):
        error = PropertyNotFound("missing", suite="lists")
        assert error.context.extra == {"suite": "lists"}

    def test_to_dict(self):
        data = GenerationExhausted(7).to_dict()
        assert data["error_code"] == "E101"
        assert data["error_type"] == "GenerationExhausted"
        assert data["message"] == "such_that gave up after 7 attempts"
        assert data["category"] == "generation"

    def test_format_verbose(self):
        text = MissingArbitrary(complex).format_verbose()
        assert "E203" in text
        assert "Suggestions:" in text

    def test_config_error_records_field(self):
        error = ConfigValidationError("bad", field="max_tests", value=0)
        assert error.field == "max_tests"
        assert error.context.extra == {"field": "max_tests", "value": 0}

    def test_verdict_errors_carry_report(self):
        report = Report(verdict=Verdict.FALSIFIED, name="p", shrunk_witness=(4,), witness=(8,), seed=1)
        error = PropertyFalsified(report)
        assert error.report is report
        assert "Counterexample: 4" in error.message

    def test_verdict_errors_locate_the_run(self):
        report = Report(verdict=Verdict.FALSIFIED, name="p", shrunk_witness=(4,), seed=1, failing_size=7)
        error = PropertyFalsified(report)
        assert (error.context.property_name, error.context.seed, error.context.size) == ("p", 1, 7)
        assert "at property=p > seed=1 > size=7" in str(error)
        assert "Location: property=p > seed=1 > size=7" in error.format_verbose()

        gave_up = PropertyGaveUp(Report(verdict=Verdict.GAVE_UP, name="never", seed=2))
        assert gave_up.context.to_dict()["extra"] == {"verdict": "gave_up"}
        assert gave_up.to_dict()["category"] == "verdict"


class TestRaisedAtDefinitionTime:
    def test_choose(self):
        with pytest.raises(InvalidRange) as exc_info:
            gen.choose(2, 1)
        assert exc_info.value.context.extra == {"low": 2, "high": 1}

    def test_frequency(self):
        with pytest.raises(MalformedWeights) as exc_info:
            gen.frequency((0, gen.pure(1)))
        assert exc_info.value.error_code is ErrorCode.MALFORMED_WEIGHTS
