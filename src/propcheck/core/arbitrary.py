"""Arbitrary values: a generator paired with a shrinker.

An ``Arbitrary[T]`` is everything the engine needs to know about a type
to test with it: how to generate values and how to make a failing value
simpler. The engine never looks inside T.

Arbitraries can be built by hand::

    from propcheck.core import arbitrary as arb

    small = arb.integers(0, 10)
    words = arb.lists(arb.text())

or looked up by type through an explicit registry::

    registry = ArbitraryRegistry.with_defaults()
    registry.resolve(list[int])         # same as arb.lists(arb.integers())
    registry.register(Money, money_arbitrary)
"""

from __future__ import annotations

import logging
import types
import typing
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from propcheck.core import gen as g
from propcheck.core import shrink as s
from propcheck.core.gen import Gen
from propcheck.core.random import RandomSource
from propcheck.errors import MissingArbitrary

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")
T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class SupportsGeneration(Protocol[T_co]):
    """Anything that can produce values from a random source and a size."""

    def generate(self, source: RandomSource, size: int) -> T_co: ...


@runtime_checkable
class SupportsShrinking(Protocol[T]):
    """Anything that can propose simpler versions of a value."""

    def shrink(self, value: T) -> Iterator[T]: ...


@dataclass(frozen=True)
class Arbitrary(Generic[T]):
    """A generator and a shrinker for the same type.

    Attributes:
        gen: Produces values.
        shrinker: Proposes simpler candidates for a value.
        description: Human-readable name used in reports and logs.
    """

    gen: Gen[T]
    shrinker: s.Shrinker[T] = field(default=s.shrink_nothing)
    description: str = ""

    def __repr__(self) -> str:
        return f"Arbitrary({self.description or self.gen.description})"

    def generate(self, source: RandomSource, size: int) -> T:
        return self.gen.generate(source, size)

    def shrink(self, value: T) -> Iterator[T]:
        return self.shrinker(value)

    def map(self, forward: Callable[[T], U], backward: Callable[[U], T]) -> Arbitrary[U]:
        """Transform through an isomorphism, keeping shrinking."""
        return Arbitrary(
            self.gen.map(forward),
            s.shrink_map(self.shrinker, forward, backward),
            f"{self.description}.map",
        )

    def filter(self, predicate: Callable[[T], bool], max_tries: int | None = None) -> Arbitrary[T]:
        """Restrict to values satisfying ``predicate``; shrink candidates are filtered too."""
        shrinker = self.shrinker

        def filtered(value: T) -> Iterator[T]:
            return (candidate for candidate in shrinker(value) if predicate(candidate))

        return Arbitrary(self.gen.such_that(predicate, max_tries), filtered, f"{self.description}.filter")

    def no_shrink(self) -> Arbitrary[T]:
        return Arbitrary(self.gen, s.shrink_nothing, self.description)


def from_gen(gen: Gen[T], shrinker: s.Shrinker[T] | None = None) -> Arbitrary[T]:
    """Wrap a bare generator (no shrinking unless a shrinker is given)."""
    return Arbitrary(gen, shrinker or s.shrink_nothing, gen.description)


def just(value: T) -> Arbitrary[T]:
    return Arbitrary(g.pure(value), s.shrink_nothing, f"just({value!r})")


def integers(min_value: int | None = None, max_value: int | None = None) -> Arbitrary[int]:
    if min_value is None and max_value is None:
        return Arbitrary(g.integers(), s.shrink_int, "integers")
    return Arbitrary(g.integers(min_value, max_value), s.shrink_int_in_range(min_value, max_value), "integers")


def booleans() -> Arbitrary[bool]:
    return Arbitrary(g.booleans(), s.shrink_bool, "booleans")


def floats(min_value: float | None = None, max_value: float | None = None) -> Arbitrary[float]:
    gen = g.floats(min_value, max_value)
    if min_value is None and max_value is None:
        return Arbitrary(gen, s.shrink_float, "floats")

    low = float("-inf") if min_value is None else min_value
    high = float("inf") if max_value is None else max_value

    def bounded(value: float) -> Iterator[float]:
        return (candidate for candidate in s.shrink_float(value) if low <= candidate <= high)

    return Arbitrary(gen, bounded, "floats")


def characters(alphabet: str | None = None) -> Arbitrary[str]:
    if alphabet is None:
        return Arbitrary(g.characters(), s.shrink_char, "characters")
    allowed = frozenset(alphabet)

    def shrinker(char: str) -> Iterator[str]:
        return (candidate for candidate in s.shrink_char(char) if candidate in allowed)

    return Arbitrary(g.characters(alphabet), shrinker, "characters")


def text(alphabet: str | None = None) -> Arbitrary[str]:
    return lists(characters(alphabet)).map("".join, list)


def elements(values: Sequence[T]) -> Arbitrary[T]:
    """Pick from ``values``; shrinks toward the front of the sequence."""
    options = tuple(values)

    def shrinker(value: T) -> Iterator[T]:
        try:
            index = options.index(value)
        except ValueError:
            return iter(())
        return iter(options[:index])

    return Arbitrary(g.elements(options), shrinker, f"elements({len(options)})")


def lists(element: Arbitrary[T], min_length: int = 0) -> Arbitrary[list[T]]:
    return Arbitrary(
        g.list_of(element.gen, min_length),
        s.shrink_list(element.shrinker, min_length),
        f"lists({element.description})",
    )


def non_empty_lists(element: Arbitrary[T]) -> Arbitrary[list[T]]:
    return lists(element, min_length=1)


def tuples(*elements: Arbitrary[Any]) -> Arbitrary[tuple[Any, ...]]:
    return Arbitrary(
        g.tuples(*(e.gen for e in elements)),
        s.shrink_tuple(*(e.shrinker for e in elements)),
        f"tuples({', '.join(e.description for e in elements)})",
    )


def optionals(inner: Arbitrary[T]) -> Arbitrary[T | None]:
    return Arbitrary(g.optional(inner.gen), s.shrink_optional(inner.shrinker), f"optionals({inner.description})")


def dicts(keys: Arbitrary[Any], values: Arbitrary[Any]) -> Arbitrary[dict[Any, Any]]:
    return Arbitrary(
        g.dict_of(keys.gen, values.gen),
        s.shrink_dict(values.shrinker),
        f"dicts({keys.description}, {values.description})",
    )


GenericFactory = Callable[..., Arbitrary[Any]]


class ArbitraryRegistry:
    """Type-indexed lookup of arbitraries.

    Registries are ordinary objects: build one, register what you need
    and pass it to ``for_all`` or ``Property.from_function``. Nothing is
    shared between registries.

    Plain types map to an Arbitrary; generic origins (``list``, ``dict``)
    map to a factory that receives the resolved arbitraries of the type
    arguments.
    """

    def __init__(self) -> None:
        self._exact: dict[Any, Arbitrary[Any]] = {}
        self._generic: dict[Any, GenericFactory] = {}

    def __contains__(self, type_hint: Any) -> bool:
        try:
            self.resolve(type_hint)
        except MissingArbitrary:
            return False
        return True

    def __len__(self) -> int:
        return len(self._exact) + len(self._generic)

    def register(self, type_hint: Any, arbitrary: Arbitrary[Any]) -> ArbitraryRegistry:
        """Register (or replace) the arbitrary for ``type_hint``. Returns self for chaining."""
        self._exact[type_hint] = arbitrary
        logger.debug("Registered arbitrary", extra={"structured_data": {"type": repr(type_hint)}})
        return self

    def register_generic(self, origin: Any, factory: GenericFactory) -> ArbitraryRegistry:
        """Register a factory for a generic origin such as ``list`` or ``frozenset``."""
        self._generic[origin] = factory
        return self

    def resolve(self, type_hint: Any) -> Arbitrary[Any]:
        """Return the arbitrary for ``type_hint``.

        Raises:
            MissingArbitrary: If neither the type nor its generic origin is registered.
        """
        if type_hint in self._exact:
            return self._exact[type_hint]

        origin = typing.get_origin(type_hint)
        args = typing.get_args(type_hint)

        if origin is typing.Union or origin is types.UnionType:
            members = [a for a in args if a is not type(None)]
            if len(members) == 1 and len(members) < len(args):
                return optionals(self.resolve(members[0]))
            raise MissingArbitrary(type_hint)

        if origin is tuple and len(args) == 2 and args[1] is Ellipsis:
            return lists(self.resolve(args[0])).map(tuple, list)

        if origin is not None and origin in self._generic:
            return self._generic[origin](*(self.resolve(a) for a in args))

        raise MissingArbitrary(type_hint)

    @classmethod
    def with_defaults(cls) -> ArbitraryRegistry:
        """A fresh registry covering ``int``, ``bool``, ``float``, ``str``,
        ``list[T]``, ``tuple[...]``, ``dict[K, V]`` and ``T | None``."""
        registry = cls()
        registry.register(int, integers())
        registry.register(bool, booleans())
        registry.register(float, floats())
        registry.register(str, text())
        registry.register_generic(list, lists)
        registry.register_generic(tuple, tuples)
        registry.register_generic(dict, dicts)
        return registry
