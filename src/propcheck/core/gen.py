"""Composable random-value generators.

A ``Gen[T]`` is a recipe ``(RandomSource, size) -> T``. Generators are
plain values: they hold no state, can be shared between properties and
threads, and compose purely through the combinators below. Whenever a
combinator runs more than one sub-generator it splits the random source
first, so siblings draw from independent streams.

Example::

    from propcheck.core import gen

    pairs = gen.tuples(gen.integers(), gen.text())
    small_lists = gen.list_of(gen.choose(0, 9)).resize(5)
    evens = gen.integers().map(lambda n: n * 2)
    positive = gen.integers().such_that(lambda n: n > 0)

Definition errors (an empty range, empty or non-positive weights) are
raised when the generator is built, not when it is sampled.
"""

from __future__ import annotations

import math
import string
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Generic, TypeVar

from propcheck.config.settings import DEFAULT_SUCH_THAT_TRIES
from propcheck.core.random import RandomSource
from propcheck.errors import ErrorContext, GenerationExhausted, InvalidRange, MalformedWeights
from propcheck.observability.logging import get_context

T = TypeVar("T")
U = TypeVar("U")

DEFAULT_ALPHABET = string.ascii_letters + string.digits + string.punctuation + " "

_such_that_tries: ContextVar[int] = ContextVar("propcheck_such_that_tries", default=DEFAULT_SUCH_THAT_TRIES)


@contextmanager
def generation_limits(such_that_tries: int) -> Iterator[None]:
    """Set the default ``such_that`` retry bound for generators run inside the block.

    The driver wraps each run in this so the configured bound applies to
    every filter that was built without an explicit ``max_tries``.
    """
    token = _such_that_tries.set(such_that_tries)
    try:
        yield
    finally:
        _such_that_tries.reset(token)


class Gen(Generic[T]):
    """A generator of values of type T."""

    __slots__ = ("_run", "description")

    def __init__(self, run: Callable[[RandomSource, int], T], description: str = "gen") -> None:
        self._run = run
        self.description = description

    def __repr__(self) -> str:
        return f"Gen({self.description})"

    def generate(self, source: RandomSource, size: int) -> T:
        """Produce one value from ``source`` at the given size."""
        return self._run(source, size)

    def map(self, f: Callable[[T], U]) -> Gen[U]:
        return map_gen(self, f)

    def bind(self, f: Callable[[T], Gen[U]]) -> Gen[U]:
        return bind(self, f)

    def such_that(self, predicate: Callable[[T], bool], max_tries: int | None = None) -> Gen[T]:
        return such_that(self, predicate, max_tries)

    def resize(self, size: int) -> Gen[T]:
        return resize(size, self)

    def scale(self, f: Callable[[int], int]) -> Gen[T]:
        return scale(f, self)

    def sample(self, count: int = 10, size: int = 10, seed: int | None = None) -> list[T]:
        """Draw ``count`` values, mostly for eyeballing a generator."""
        source = RandomSource.from_seed(seed) if seed is not None else RandomSource.fresh()
        return [self.generate(s, size) for s in source.split_n(count)]


def pure(value: T) -> Gen[T]:
    """Always produce ``value``."""
    return Gen(lambda source, size: value, f"pure({value!r})")


def map_gen(g: Gen[T], f: Callable[[T], U]) -> Gen[U]:
    """Transform every value produced by ``g``."""
    return Gen(lambda source, size: f(g.generate(source, size)), f"{g.description}.map")


def bind(g: Gen[T], f: Callable[[T], Gen[U]]) -> Gen[U]:
    """Generate a value, then run the generator ``f`` builds from it.

    The source is split first, so the dependent generator does not reuse
    the bits that produced its input.
    """

    def run(source: RandomSource, size: int) -> U:
        left, right = source.split()
        return f(g.generate(left, size)).generate(right, size)

    return Gen(run, f"{g.description}.bind")


def choose(low: int, high: int) -> Gen[int]:
    """Uniform integer in ``[low, high]`` inclusive."""
    if low > high:
        raise InvalidRange(
            f"choose() needs low <= high, got low={low}, high={high}",
            context=ErrorContext(generator="choose", extra={"low": low, "high": high}),
        )
    return Gen(lambda source, size: source.next_in_range(low, high)[0], f"choose({low}, {high})")


def one_of(*gens: Gen[T]) -> Gen[T]:
    """Pick one of ``gens`` uniformly, then run it."""
    if not gens:
        raise MalformedWeights("one_of() needs at least one generator")
    options = tuple(gens)

    def run(source: RandomSource, size: int) -> T:
        pick, rest = source.split()
        index, _ = pick.next_below(len(options))
        return options[index].generate(rest, size)

    return Gen(run, f"one_of({len(options)})")


def frequency(*weighted: tuple[int, Gen[T]]) -> Gen[T]:
    """Pick an alternative with probability proportional to its weight.

    Weights must be positive integers.
    """
    if not weighted:
        raise MalformedWeights("frequency() needs at least one (weight, generator) pair")
    for weight, _ in weighted:
        if isinstance(weight, bool) or not isinstance(weight, int) or weight <= 0:
            raise MalformedWeights(
                f"frequency() weights must be positive integers, got {weight!r}",
                context=ErrorContext(generator="frequency", extra={"weights": [w for w, _ in weighted]}),
            )
    options = tuple(weighted)
    total = sum(weight for weight, _ in options)

    def run(source: RandomSource, size: int) -> T:
        pick, rest = source.split()
        n, _ = pick.next_below(total)
        for weight, g in options:
            if n < weight:
                return g.generate(rest, size)
            n -= weight
        raise AssertionError("unreachable: weights exhausted")

    return Gen(run, f"frequency({[w for w, _ in options]})")


def elements(values: Sequence[T]) -> Gen[T]:
    """Pick one of ``values`` uniformly."""
    options = tuple(values)
    if not options:
        raise MalformedWeights("elements() needs a non-empty sequence")
    return Gen(lambda source, size: options[source.next_below(len(options))[0]], f"elements({len(options)})")


def such_that(g: Gen[T], predicate: Callable[[T], bool], max_tries: int | None = None) -> Gen[T]:
    """Keep sampling ``g`` until ``predicate`` holds.

    Attempt ``k`` (0-based) runs at size ``size + 2k`` so that filters
    which reject small values can still succeed. After ``max_tries``
    attempts (default: the active ``generation_limits``, 100 unless
    configured) raises GenerationExhausted.
    """
    if max_tries is not None and max_tries < 1:
        raise InvalidRange(f"such_that() max_tries must be >= 1, got {max_tries}")

    def run(source: RandomSource, size: int) -> T:
        tries = max_tries if max_tries is not None else _such_that_tries.get()
        for attempt in range(tries):
            source, child = source.split()
            value = g.generate(child, size + 2 * attempt)
            if predicate(value):
                return value
        run_context = get_context()
        raise GenerationExhausted(
            tries,
            context=ErrorContext(
                property_name=run_context.get("property"),
                generator=g.description,
                seed=run_context.get("seed"),
                size=size,
            ),
        )

    return Gen(run, f"{g.description}.such_that")


def sized(f: Callable[[int], Gen[T]]) -> Gen[T]:
    """Build a generator from the current size."""
    return Gen(lambda source, size: f(size).generate(source, size), "sized")


def resize(size: int, g: Gen[T]) -> Gen[T]:
    """Run ``g`` at a fixed size, ignoring the ambient one."""
    if size < 0:
        raise InvalidRange(f"resize() needs a non-negative size, got {size}")
    return Gen(lambda source, _: g.generate(source, size), f"{g.description}.resize({size})")


def scale(f: Callable[[int], int], g: Gen[T]) -> Gen[T]:
    """Run ``g`` at ``f(size)`` (clamped at zero)."""
    return Gen(lambda source, size: g.generate(source, max(0, f(size))), f"{g.description}.scale")


def vector_of(length: int, g: Gen[T]) -> Gen[list[T]]:
    """A list of exactly ``length`` values."""
    if length < 0:
        raise InvalidRange(f"vector_of() needs a non-negative length, got {length}")
    return Gen(
        lambda source, size: [g.generate(s, size) for s in source.split_n(length)],
        f"vector_of({length}, {g.description})",
    )


def list_of(g: Gen[T], min_length: int = 0) -> Gen[list[T]]:
    """A list whose length is uniform in ``[min_length, max(min_length, size)]``."""
    if min_length < 0:
        raise InvalidRange(f"list_of() needs a non-negative min_length, got {min_length}")

    def run(source: RandomSource, size: int) -> list[T]:
        pick, rest = source.split()
        length, _ = pick.next_in_range(min_length, max(min_length, size))
        return [g.generate(s, size) for s in rest.split_n(length)]

    return Gen(run, f"list_of({g.description})")


def non_empty_list_of(g: Gen[T]) -> Gen[list[T]]:
    return list_of(g, min_length=1)


def tuples(*gens: Gen[Any]) -> Gen[tuple[Any, ...]]:
    """A tuple with one value from each generator."""
    return Gen(
        lambda source, size: tuple(g.generate(s, size) for g, s in zip(gens, source.split_n(len(gens)))),
        f"tuples({', '.join(g.description for g in gens)})",
    )


def optional(g: Gen[T]) -> Gen[T | None]:
    """``None`` a quarter of the time, otherwise a value from ``g``."""
    return frequency((1, pure(None)), (3, g))


def integers(min_value: int | None = None, max_value: int | None = None) -> Gen[int]:
    """Integers scaled by size.

    Without bounds the range is ``[-size, size]``. With one bound the
    other end sits ``size`` away from it; with both, the size is ignored.
    """
    if min_value is not None and max_value is not None:
        return choose(min_value, max_value)

    def run(source: RandomSource, size: int) -> int:
        if min_value is not None:
            low, high = min_value, min_value + size
        elif max_value is not None:
            low, high = max_value - size, max_value
        else:
            low, high = -size, size
        return source.next_in_range(low, high)[0]

    return Gen(run, "integers")


def booleans() -> Gen[bool]:
    return Gen(lambda source, size: bool(source.next()[0] >> 63), "booleans")


def floats(min_value: float | None = None, max_value: float | None = None) -> Gen[float]:
    """Finite floats, uniform in ``[min_value, max_value]`` or ``[-size, size]``."""
    for bound in (min_value, max_value):
        if bound is not None and not math.isfinite(bound):
            raise InvalidRange(f"floats() bounds must be finite, got {bound}")
    if min_value is not None and max_value is not None and min_value > max_value:
        raise InvalidRange(f"floats() needs min_value <= max_value, got {min_value} > {max_value}")

    def run(source: RandomSource, size: int) -> float:
        if min_value is not None and max_value is not None:
            low, high = min_value, max_value
        elif min_value is not None:
            low, high = min_value, min_value + size
        elif max_value is not None:
            low, high = max_value - size, max_value
        else:
            low, high = -float(size), float(size)
        fraction, _ = source.next_float()
        return min(high, low + fraction * (high - low))

    return Gen(run, "floats")


def characters(alphabet: str | None = None) -> Gen[str]:
    """Single characters drawn from ``alphabet`` (printable ASCII by default)."""
    return elements(DEFAULT_ALPHABET if alphabet is None else alphabet)


def text(alphabet: str | None = None) -> Gen[str]:
    return list_of(characters(alphabet)).map("".join)


def dict_of(keys: Gen[Any], values: Gen[Any]) -> Gen[dict[Any, Any]]:
    """Dictionaries built from generated key/value pairs (duplicate keys collapse)."""
    return list_of(tuples(keys, values)).map(dict)
