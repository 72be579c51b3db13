"""Properties and the combinators that build them.

A Property is an immutable value wrapping
``(RandomSource, size, EvalContext) -> Outcome``. ``for_all`` lifts a
function over generated arguments into a Property; the other combinators
transform or combine Outcomes.

A *testable* is anything a property body may return:

- ``True`` or ``None``: success
- ``False``: failure
- an ``Outcome``
- a ``Property`` (evaluated in place, e.g. a nested ``for_all``)
- a zero-argument callable returning any of the above

Exceptions raised while evaluating a testable become failures, except
``GenerationExhausted`` which becomes a discard.

Example::

    from propcheck import arbitrary as arb
    from propcheck import for_all, implies

    reverse_twice = for_all(arb.lists(arb.integers()))(
        lambda xs: list(reversed(list(reversed(xs)))) == xs
    )

    @for_all(int, int)
    def division(a, b):
        return implies(b != 0, lambda: (a // b) * b + a % b == a)
"""

from __future__ import annotations

import inspect
import logging
import typing
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

from propcheck.core.arbitrary import Arbitrary, ArbitraryRegistry, from_gen
from propcheck.core.gen import Gen
from propcheck.core.outcome import Binding, Outcome, OutcomeKind, conjunction, disjunction
from propcheck.core.random import RandomSource
from propcheck.errors import GenerationExhausted, MissingArbitrary

if TYPE_CHECKING:
    from propcheck.config.settings import CheckConfig
    from propcheck.core.result import Report

logger = logging.getLogger(__name__)

Testable = Union["Property", Outcome, bool, None, Callable[[], Any]]


@dataclass
class EvalContext:
    """Per-evaluation bookkeeping shared by every node of one property tree.

    Attributes:
        path: Position of the node currently being evaluated.
        overrides: Arguments to force into ``for_all`` nodes, keyed by path.
            Used by the shrink search to replay a property with candidates.
        seen: Every binding drawn during this evaluation, in draw order.
    """

    path: tuple[int, ...] = ()
    overrides: dict[tuple[int, ...], tuple[Any, ...]] = field(default_factory=dict)
    seen: list[Binding] = field(default_factory=list)

    def child(self, index: int) -> EvalContext:
        return EvalContext(self.path + (index,), self.overrides, self.seen)


def describe_exception(exc: BaseException) -> str:
    """Render an exception as ``"<Type>: <message>"``."""
    message = str(exc)
    name = type(exc).__name__
    return f"{name}: {message}" if message else name


class Property:
    """An immutable, composable property."""

    __slots__ = ("_run", "_description")

    def __init__(
        self,
        run: Callable[[RandomSource, int, EvalContext], Outcome],
        description: str = "property",
    ) -> None:
        self._run = run
        self._description = description

    @property
    def description(self) -> str:
        return self._description

    def __repr__(self) -> str:
        return f"Property({self.description})"

    def evaluate(self, source: RandomSource, size: int, context: EvalContext | None = None) -> Outcome:
        """Evaluate once with the given random source and size."""
        return self._run(source, size, context if context is not None else EvalContext())

    def and_then(self, other: Testable) -> Property:
        return conjoin(self, other)

    def or_else(self, other: Testable) -> Property:
        return disjoin(self, other)

    def label(self, name: str) -> Property:
        return label(name, self)

    def classify(self, condition: bool, tag: str) -> Property:
        return classify(condition, tag, self)

    def collect(self, value: Any) -> Property:
        return collect(value, self)

    def counterexample(self, text: str) -> Property:
        return counterexample(text, self)

    def when(self, condition: bool | Callable[[], bool]) -> Property:
        """Only check this property when ``condition`` holds; discard otherwise."""
        return implies(condition, self)

    def check(self, config: CheckConfig | None = None, **overrides: Any) -> Report:
        """Run the property through the driver. See ``propcheck.runner.driver.check``."""
        from propcheck.runner.driver import check

        return check(self, config, name=self.description, **overrides)

    @classmethod
    def from_function(
        cls,
        fn: Callable[..., Any],
        registry: ArbitraryRegistry | None = None,
        name: str | None = None,
    ) -> Property:
        """Build a ``for_all`` property whose arbitraries come from ``fn``'s annotations.

        ``name`` defaults to the function's name.

        Raises:
            MissingArbitrary: If a parameter is unannotated or its type is not registered.
        """
        registry = registry if registry is not None else ArbitraryRegistry.with_defaults()
        hints = typing.get_type_hints(fn)
        arbitraries = []
        for param in inspect.signature(fn).parameters:
            if param not in hints:
                raise MissingArbitrary(
                    None,
                    f"Parameter {param!r} of {getattr(fn, '__name__', fn)!r} has no type annotation",
                    parameter=param,
                )
            arbitraries.append(registry.resolve(hints[param]))
        return for_all(*arbitraries, body=fn, name=name or getattr(fn, "__name__", None))


def evaluate_testable(testable: Testable, source: RandomSource, size: int, context: EvalContext) -> Outcome:
    """Turn any testable into an Outcome, converting exceptions into failures."""
    while True:
        if isinstance(testable, Property):
            return testable.evaluate(source, size, context)
        if isinstance(testable, Outcome):
            return testable
        if testable is None or testable is True:
            return Outcome.success()
        if testable is False:
            return Outcome.failure()
        if callable(testable):
            try:
                testable = testable()
            except GenerationExhausted as exc:
                return Outcome.discard(str(exc))
            except Exception as exc:
                return Outcome.failure(describe_exception(exc), exc)
            continue
        return Outcome.failure(f"TypeError: {type(testable).__name__} is not a testable result")


def evaluate_guarded(prop: Property, source: RandomSource, size: int, context: EvalContext) -> Outcome:
    """Evaluate ``prop``, turning anything it raises into an Outcome.

    ``for_all`` bodies already catch their own errors; this covers
    hand-built Property objects. A failure built here keeps the bindings
    drawn before the error so it can still be shrunk. KeyboardInterrupt
    still propagates.
    """
    try:
        return prop.evaluate(source, size, context)
    except GenerationExhausted as exc:
        return Outcome.discard(str(exc))
    except Exception as exc:
        return Outcome(
            OutcomeKind.FAILURE,
            bindings=tuple(context.seen),
            reason=describe_exception(exc),
            exception=exc,
        )


def as_property(testable: Testable) -> Property:
    """Wrap any testable as a Property."""
    if isinstance(testable, Property):
        return testable
    return Property(
        lambda source, size, context: evaluate_testable(testable, source, size, context),
        getattr(testable, "__name__", "property"),
    )


ArgumentSpec = Union[Arbitrary[Any], Gen[Any], type, Any]


def _as_arbitrary(spec: ArgumentSpec, registry: ArbitraryRegistry | None) -> Arbitrary[Any]:
    if isinstance(spec, Arbitrary):
        return spec
    if isinstance(spec, Gen):
        return from_gen(spec)
    if registry is None:
        registry = ArbitraryRegistry.with_defaults()
    return registry.resolve(spec)


def for_all(
    *arguments: ArgumentSpec,
    body: Callable[..., Testable] | None = None,
    registry: ArbitraryRegistry | None = None,
    name: str | None = None,
) -> Any:
    """Quantify a body over generated arguments.

    Each argument may be an ``Arbitrary``, a bare ``Gen`` (never shrunk)
    or a type hint resolved through ``registry`` (a default registry when
    omitted). With ``body`` returns the Property directly; otherwise
    returns a decorator.
    """
    resolved = tuple(_as_arbitrary(spec, registry) for spec in arguments)
    shrinkers = tuple(arb.shrink for arb in resolved)

    def decorate(fn: Callable[..., Testable]) -> Property:
        def run(source: RandomSource, size: int, context: EvalContext) -> Outcome:
            sources = source.split_n(len(resolved) + 1)
            forced = context.overrides.get(context.path)
            if forced is not None:
                args = forced
            else:
                try:
                    args = tuple(arb.generate(src, size) for arb, src in zip(resolved, sources))
                except GenerationExhausted as exc:
                    logger.debug(
                        "Argument generation exhausted",
                        extra={"structured_data": {"path": context.path, "size": size}},
                    )
                    return Outcome.discard(str(exc))
                except Exception as exc:
                    return Outcome.failure(f"error while generating arguments: {describe_exception(exc)}", exc)

            binding = Binding(context.path, args, shrinkers)
            context.seen.append(binding)
            outcome = evaluate_testable(lambda: fn(*args), sources[-1], size, context.child(0))
            return outcome.with_binding(binding)

        return Property(run, name or getattr(fn, "__name__", "for_all"))

    if body is not None:
        return decorate(body)
    return decorate


def implies(condition: bool | Callable[[], bool], testable: Testable) -> Property:
    """Discard unless ``condition`` holds; only then evaluate ``testable``.

    ``condition`` may be a callable, evaluated once per run.
    """

    def run(source: RandomSource, size: int, context: EvalContext) -> Outcome:
        if callable(condition):
            try:
                holds = condition()
            except Exception as exc:
                return Outcome.failure(describe_exception(exc), exc)
        else:
            holds = condition
        if not holds:
            return Outcome.discard()
        return evaluate_testable(testable, source, size, context)

    return Property(run, "implies")


def label(name: str, testable: Testable) -> Property:
    """Attach ``name`` to the outcome for the label statistics."""

    def run(source: RandomSource, size: int, context: EvalContext) -> Outcome:
        return evaluate_testable(testable, source, size, context).with_labels(name)

    return Property(run, f"label({name})")


def classify(condition: bool, tag: str, testable: Testable) -> Property:
    """Tag the outcome with ``tag`` when ``condition`` is true."""

    def run(source: RandomSource, size: int, context: EvalContext) -> Outcome:
        outcome = evaluate_testable(testable, source, size, context)
        return outcome.with_classes(tag) if condition else outcome

    return Property(run, f"classify({tag})")


def collect(value: Any, testable: Testable) -> Property:
    """Tag the outcome with ``repr(value)``."""
    return classify(True, repr(value), testable)


def counterexample(text: str, testable: Testable) -> Property:
    """Add ``text`` to the reason when the outcome is a failure."""

    def run(source: RandomSource, size: int, context: EvalContext) -> Outcome:
        return evaluate_testable(testable, source, size, context).with_note(text)

    return Property(run, "counterexample")


def _conjoin2(left: Testable, right: Testable) -> Property:
    def run(source: RandomSource, size: int, context: EvalContext) -> Outcome:
        left_source, right_source = source.split()
        first = evaluate_testable(left, left_source, size, context.child(0))
        if first.is_discard:
            return first
        second = evaluate_testable(right, right_source, size, context.child(1))
        return conjunction(first, second)

    return Property(run, "conjoin")


def _disjoin2(left: Testable, right: Testable) -> Property:
    def run(source: RandomSource, size: int, context: EvalContext) -> Outcome:
        left_source, right_source = source.split()
        first = evaluate_testable(left, left_source, size, context.child(0))
        if first.is_success:
            return first
        second = evaluate_testable(right, right_source, size, context.child(1))
        return disjunction(first, second)

    return Property(run, "disjoin")


def conjoin(first: Testable, *rest: Testable) -> Property:
    """Logical *and* of testables, folded left."""
    result = as_property(first)
    for other in rest:
        result = _conjoin2(result, other)
    return result


def disjoin(first: Testable, *rest: Testable) -> Property:
    """Logical *or* of testables, folded left."""
    result = as_property(first)
    for other in rest:
        result = _disjoin2(result, other)
    return result
