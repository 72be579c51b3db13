"""Tests for outcomes, properties and the property combinators."""

import pytest

from propcheck import arbitrary as arb
from propcheck.core import gen
from propcheck.core.outcome import Binding, Outcome, OutcomeKind, conjunction, disjunction
from propcheck.core.property import (
    EvalContext,
    Property,
    as_property,
    classify,
    collect,
    conjoin,
    counterexample,
    describe_exception,
    disjoin,
    for_all,
    implies,
    label,
)
from propcheck.core.random import RandomSource
from propcheck.errors import MissingArbitrary

S = Outcome.success()
F = Outcome.failure("left")
D = Outcome.discard()


def run(testable, seed: int = 0, size: int = 10, context: EvalContext | None = None) -> Outcome:
    return as_property(testable).evaluate(RandomSource.from_seed(seed), size, context)


def boom():
    raise AssertionError("boom")


class TestOutcomeAlgebra:
    @pytest.mark.parametrize(
        "left,right,expected",
        [
            (S, S, OutcomeKind.SUCCESS),
            (S, F, OutcomeKind.FAILURE),
            (F, S, OutcomeKind.FAILURE),
            (F, F, OutcomeKind.FAILURE),
            (D, S, OutcomeKind.DISCARD),
            (S, D, OutcomeKind.DISCARD),
            (D, F, OutcomeKind.DISCARD),
            (F, D, OutcomeKind.DISCARD),
            (D, D, OutcomeKind.DISCARD),
        ],
    )
    def test_conjunction_table(self, left, right, expected):
        assert conjunction(left, right).kind is expected

    @pytest.mark.parametrize(
        "left,right,expected",
        [
            (S, S, OutcomeKind.SUCCESS),
            (S, F, OutcomeKind.SUCCESS),
            (F, S, OutcomeKind.SUCCESS),
            (F, F, OutcomeKind.FAILURE),
            (D, S, OutcomeKind.SUCCESS),
            (S, D, OutcomeKind.SUCCESS),
            (D, F, OutcomeKind.DISCARD),
            (F, D, OutcomeKind.DISCARD),
            (D, D, OutcomeKind.DISCARD),
        ],
    )
    def test_disjunction_table(self, left, right, expected):
        assert disjunction(left, right).kind is expected

    def test_conjunction_keeps_left_witness(self):
        left = Outcome.failure("l").with_binding(Binding((0,), (1,)))
        right = Outcome.failure("r").with_binding(Binding((1,), (2,)))
        assert conjunction(left, right).witness == (1,)

    def test_disjunction_merges_failure_reasons(self):
        left = Outcome.failure("l").with_binding(Binding((0,), (1,)))
        right = Outcome.failure("r").with_binding(Binding((1,), (2,)))
        combined = disjunction(left, right)
        assert combined.witness == (1,)
        assert combined.reason == "l; r"

    def test_labels_and_classes_merge(self):
        left = S.with_labels("a").with_classes("x")
        right = S.with_labels("b").with_classes("y")
        merged = conjunction(left, right)
        assert merged.labels == {"a", "b"}
        assert merged.classes == ("x", "y")

    def test_with_note_only_touches_failures(self):
        assert Outcome.failure("first").with_note("second").reason == "first\nsecond"
        assert Outcome.failure().with_note("only").reason == "only"
        assert S.with_note("ignored").reason is None

    def test_witness_flattens_bindings(self):
        outcome = Outcome.failure().with_binding(Binding((0,), (3,))).with_binding(Binding((), (1, 2)))
        assert outcome.witness == (1, 2, 3)


class TestTestables:
    @pytest.mark.parametrize(
        "testable,expected",
        [
            (True, OutcomeKind.SUCCESS),
            (None, OutcomeKind.SUCCESS),
            (False, OutcomeKind.FAILURE),
            (Outcome.discard(), OutcomeKind.DISCARD),
            (lambda: True, OutcomeKind.SUCCESS),
            (lambda: lambda: False, OutcomeKind.FAILURE),
        ],
    )
    def test_testable_results(self, testable, expected):
        assert run(testable).kind is expected

    def test_non_testable_result_fails(self):
        outcome = run(lambda: 42)
        assert outcome.is_failure
        assert "not a testable result" in outcome.reason

    def test_exception_becomes_failure(self):
        outcome = run(boom)
        assert outcome.is_failure
        assert outcome.reason == "AssertionError: boom"
        assert isinstance(outcome.exception, AssertionError)

    def test_keyboard_interrupt_propagates(self):
        def interrupted():
            raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            run(interrupted)

    def test_describe_exception(self):
        assert describe_exception(ValueError("bad")) == "ValueError: bad"
        assert describe_exception(ValueError()) == "ValueError"


class TestForAll:
    def test_records_witness(self):
        outcome = run(for_all(arb.integers(), body=lambda n: False))
        assert outcome.is_failure
        assert len(outcome.witness) == 1
        assert isinstance(outcome.witness[0], int)

    def test_decorator_form(self):
        @for_all(arb.booleans(), arb.integers(0, 3))
        def prop(flag, n):
            return 0 <= n <= 3

        assert isinstance(prop, Property)
        assert prop.description == "prop"
        assert run(prop).is_success

    def test_accepts_types_and_gens(self):
        prop = for_all(int, gen.pure("x"), body=lambda n, s: isinstance(n, int) and s == "x")
        assert run(prop).is_success

    def test_body_exception(self):
        def body(n):
            raise AssertionError("boom")

        outcome = run(for_all(arb.integers(), body=body))
        assert outcome.reason == "AssertionError: boom"

    def test_generation_exhausted_discards(self):
        never = arb.integers().filter(lambda n: False, max_tries=3)
        assert run(for_all(never, body=lambda n: True)).is_discard

    def test_generator_error_fails(self):
        def broken(n):
            raise ValueError("no")

        prop = for_all(gen.integers().map(broken), body=lambda n: True)
        outcome = run(prop)
        assert outcome.is_failure
        assert outcome.reason == "error while generating arguments: ValueError: no"

    def test_same_seed_same_witness(self):
        prop = for_all(arb.lists(arb.integers()), body=lambda xs: False)
        assert run(prop, seed=9).witness == run(prop, seed=9).witness

    def test_nested_bindings_and_paths(self):
        prop = for_all(arb.integers(), body=lambda a: for_all(arb.integers(), body=lambda b: False))
        context = EvalContext()
        outcome = run(prop, context=context)
        assert [b.path for b in outcome.bindings] == [(), (0,)]
        assert [b.path for b in context.seen] == [(), (0,)]
        assert len(outcome.witness) == 2

    def test_overrides_force_arguments(self):
        prop = for_all(arb.integers(), body=lambda a: for_all(arb.integers(), body=lambda b: a < b))
        context = EvalContext(overrides={(): (5,), (0,): (3,)})
        outcome = run(prop, context=context)
        assert outcome.is_failure
        assert outcome.witness == (5, 3)


class TestImplies:
    def test_false_condition_discards(self):
        assert run(implies(False, False)).is_discard

    def test_true_condition_evaluates(self):
        assert run(implies(True, False)).is_failure
        assert run(implies(lambda: True, True)).is_success

    def test_raising_condition_fails(self):
        outcome = run(implies(lambda: 1 // 0, True))
        assert outcome.is_failure
        assert outcome.reason.startswith("ZeroDivisionError")

    def test_when(self):
        assert run(as_property(True).when(False)).is_discard


class TestAnnotations:
    def test_label(self):
        assert run(label("small", True)).labels == {"small"}
        assert run(as_property(False).label("x")).labels == {"x"}

    def test_classify(self):
        assert run(classify(True, "hit", True)).classes == ("hit",)
        assert run(classify(False, "miss", True)).classes == ()

    def test_collect(self):
        assert run(collect(3, True)).classes == ("3",)

    def test_counterexample(self):
        assert run(counterexample("extra", False)).reason == "extra"
        assert run(counterexample("extra", True)).reason is None


class TestCombinators:
    def test_conjoin_short_circuits_on_left_discard(self):
        calls = []
        prop = conjoin(Outcome.discard(), lambda: calls.append(1))
        assert run(prop).is_discard
        assert calls == []

    def test_conjoin_failure_is_left_biased(self):
        outcome = run(conjoin(counterexample("l", False), counterexample("r", False)))
        assert outcome.reason == "l"

    def test_conjoin_right_discard_wins(self):
        assert run(conjoin(False, Outcome.discard())).is_discard

    def test_disjoin_short_circuits_on_left_success(self):
        calls = []
        prop = disjoin(True, lambda: calls.append(1))
        assert run(prop).is_success
        assert calls == []

    def test_disjoin_two_failures(self):
        outcome = run(disjoin(counterexample("l", False), counterexample("r", False)))
        assert outcome.is_failure
        assert outcome.reason == "l; r"

    def test_many_way_folds(self):
        assert run(conjoin(True, True, True)).is_success
        assert run(conjoin(True, True, False)).is_failure
        assert run(disjoin(False, False, True)).is_success

    def test_sides_bind_at_distinct_paths(self):
        left = for_all(arb.integers(), body=lambda a: False)
        right = for_all(arb.integers(), body=lambda b: True)
        context = EvalContext()
        run(left.and_then(right), context=context)
        assert [b.path for b in context.seen] == [(0,), (1,)]

    def test_method_aliases(self):
        assert run(as_property(False).or_else(True)).is_success
        assert run(as_property(True).and_then(False)).is_failure


class TestFromFunction:
    def test_uses_annotations(self):
        def prop(xs: list[int], flag: bool) -> bool:
            return isinstance(xs, list) and isinstance(flag, bool)

        built = Property.from_function(prop)
        assert built.description == "prop"
        assert run(built).is_success

    def test_explicit_name(self):
        def prop(n: int) -> bool:
            return True

        assert Property.from_function(prop, name="renamed").description == "renamed"

    def test_description_is_read_only(self):
        prop = as_property(True)
        with pytest.raises(AttributeError):
            prop.description = "changed"

    def test_unannotated_parameter(self):
        def prop(x):
            return True

        with pytest.raises(MissingArbitrary):
            Property.from_function(prop)

    def test_unregistered_type(self):
        class Money:
            pass

        def prop(m: Money) -> bool:
            return True

        with pytest.raises(MissingArbitrary):
            Property.from_function(prop)
