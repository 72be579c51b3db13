"""Tests for @property_test and PropertySuite."""

import pytest

from propcheck import arbitrary as arb
from propcheck.config import CheckConfig
from propcheck.core.property import Property
from propcheck.core.result import Verdict
from propcheck.decorators import PropertySuite, property_test
from propcheck.errors import DefinitionError, PropertyFalsified, PropertyGaveUp, PropertyNotFound


@property_test(arb.lists(arb.integers()), seed=42)
def test_reverse_involution(xs):
    """Reversing twice is the identity."""
    assert list(reversed(list(reversed(xs)))) == xs


@property_test(max_tests=50)
def test_addition_commutes(a: int, b: int):
    return a + b == b + a


class TestPropertyTest:
    def test_wrapper_takes_no_arguments(self):
        test_reverse_involution()
        assert test_reverse_involution.__name__ == "test_reverse_involution"
        assert test_reverse_involution.__doc__ == "Reversing twice is the identity."
        assert isinstance(test_reverse_involution.property, Property)
        assert not hasattr(test_reverse_involution, "__wrapped__")

    def test_falsified_raises_assertion_error(self):
        @property_test(arb.integers(), seed=1)
        def small(n):
            assert n < 10

        with pytest.raises(AssertionError) as exc_info:
            small()
        assert isinstance(exc_info.value, PropertyFalsified)
        assert exc_info.value.report.shrunk_witness == (10,)
        assert "Counterexample: 10" in str(exc_info.value)

    def test_gave_up_raises(self):
        @property_test(arb.integers().filter(lambda n: False), max_tests=5, seed=1)
        def never(n):
            return True

        with pytest.raises(PropertyGaveUp) as exc_info:
            never()
        assert exc_info.value.report.verdict is Verdict.GAVE_UP

    def test_custom_name(self):
        @property_test(arb.integers(), name="renamed")
        def original(n):
            return True

        assert original.property.description == "renamed"
        assert original.__name__ == "original"

    def test_custom_name_from_annotations(self):
        @property_test(name="renamed", seed=1)
        def original(n: int) -> bool:
            return n < 10

        assert original.property.description == "renamed"
        with pytest.raises(PropertyFalsified) as exc_info:
            original()
        assert exc_info.value.report.name == "renamed"


class TestPropertySuite:
    def test_registration(self):
        suite = PropertySuite("lists")

        @suite.property(arb.lists(arb.integers()))
        def sort_idempotent(xs):
            return sorted(sorted(xs)) == sorted(xs)

        suite.add("always", True)
        assert len(suite) == 2
        assert "sort_idempotent" in suite
        assert suite.names == ["sort_idempotent", "always"]
        assert sort_idempotent([3, 1]) is True
        assert isinstance(suite.get("always"), Property)

    def test_duplicate_name(self):
        suite = PropertySuite()
        suite.add("p", True)
        with pytest.raises(DefinitionError):
            suite.add("p", False)

    def test_missing_name(self):
        with pytest.raises(PropertyNotFound):
            PropertySuite().get("nope")

    def test_annotation_based_property(self):
        suite = PropertySuite()

        @suite.property(name="abs_non_negative")
        def prop(n: int) -> bool:
            return abs(n) >= 0

        assert suite.names == ["abs_non_negative"]

    def test_run(self):
        suite = PropertySuite()
        suite.add("ok", True)

        @suite.property(arb.integers())
        def bounded(n):
            return n < 10

        result = suite.run(CheckConfig(seed=0))
        assert [r.name for r in result.reports] == ["ok", "bounded"]
        assert result.count(Verdict.PASSED) == 1
        assert result.count(Verdict.FALSIFIED) == 1
        assert not result.passed
        assert [r.name for r in result.failures] == ["bounded"]
