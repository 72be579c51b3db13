"""Per-type shrinkers.

A shrinker maps a value to a lazy iterator of strictly simpler candidates
of the same type. Two rules hold for every shrinker here:

- the input value itself is never yielded,
- every candidate is smaller under a well-founded order for its type, so
  repeatedly taking any candidate always reaches a value with no
  candidates.

Shrinkers for containers are built from shrinkers for their elements::

    shrink_list(shrink_int)([10, -3])
    shrink_tuple(shrink_int, shrink_text)((4, "abc"))
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Iterator
from typing import Any, TypeVar

T = TypeVar("T")

Shrinker = Callable[[T], Iterator[T]]

# Integers up to this magnitude are also swept exhaustively after the
# halving candidates, which makes the local minimum exact for small values.
INT_SWEEP_LIMIT = 256

_CHAR_TARGETS = ("a", "b", "c", "A", "B", "C", "1", "2", "3", " ", "\n")


def _unique(candidates: Iterable[T], original: T) -> Iterator[T]:
    seen: list[T] = [original]
    for candidate in candidates:
        if candidate not in seen:
            seen.append(candidate)
            yield candidate


def shrink_nothing(value: Any) -> Iterator[Any]:
    """Shrinker for values with no simpler form."""
    return iter(())


def shrink_bool(value: bool) -> Iterator[bool]:
    if value:
        yield False


def _int_candidates(value: int) -> Iterator[int]:
    sign = -1 if value < 0 else 1
    magnitude = abs(value)
    if value < 0:
        yield magnitude
    yield 0
    distance = magnitude // 2
    while distance > 0:
        yield sign * (magnitude - distance)
        distance //= 2
    if magnitude <= INT_SWEEP_LIMIT:
        for smaller in range(1, magnitude):
            yield sign * smaller


def shrink_int(value: int) -> Iterator[int]:
    """Shrink toward zero.

    Order: the positive twin of a negative value, zero, then values
    approaching ``value`` by halving the distance (``v/2, 3v/4, ..., v-1``),
    then every smaller magnitude of the same sign for small values.
    """
    if value == 0:
        return iter(())
    # set-based dedup is fine for ints and much faster than _unique
    seen = {value}

    def fresh() -> Iterator[int]:
        for candidate in _int_candidates(value):
            if candidate not in seen:
                seen.add(candidate)
                yield candidate

    return fresh()


def shrink_int_in_range(low: int | None, high: int | None) -> Shrinker[int]:
    """Shrink toward the value of ``[low, high]`` closest to zero, never leaving the range.

    A bound of ``None`` leaves that side open.
    """
    origin = 0
    if low is not None and low > 0:
        origin = low
    elif high is not None and high < 0:
        origin = high

    def shrinker(value: int) -> Iterator[int]:
        for offset in shrink_int(value - origin):
            candidate = origin + offset
            if (low is None or low <= candidate) and (high is None or candidate <= high):
                yield candidate

    return shrinker


def _float_candidates(value: float) -> Iterator[float]:
    if value < 0:
        yield -value
    yield 0.0
    truncated = float(math.trunc(value))
    if truncated != value:
        yield truncated
    yield value / 2


def shrink_float(value: float) -> Iterator[float]:
    """Shrink toward ``0.0``; non-finite values go straight to ``0.0``."""
    if math.isnan(value) or math.isinf(value):
        yield 0.0
        return
    if value == 0.0:
        return
    for candidate in _unique(_float_candidates(value), value):
        if abs(candidate) < abs(value) or (abs(candidate) == abs(value) and candidate > value):
            yield candidate


def _char_rank(char: str) -> tuple[bool, bool, bool, bool, bool, int]:
    return (
        not char.islower(),
        not char.isupper(),
        not char.isdigit(),
        char != " ",
        not char.isspace(),
        ord(char),
    )


def shrink_char(char: str) -> Iterator[str]:
    """Shrink toward ``a``, then upper case, digits and whitespace."""
    rank = _char_rank(char)
    lowered = char.lower()
    targets = _CHAR_TARGETS[:3] + ((lowered,) if len(lowered) == 1 else ()) + _CHAR_TARGETS[3:]
    for candidate in _unique(targets, char):
        if _char_rank(candidate) < rank:
            yield candidate


def shrink_list(element: Shrinker[Any] = shrink_nothing, min_length: int = 0) -> Shrinker[list[Any]]:
    """Shrinker for lists.

    First removes aligned contiguous chunks of size ``n, n/2, ..., 1``
    (never going below ``min_length``), then shrinks each element in place
    with ``element``.
    """

    def shrinker(values: list[Any]) -> Iterator[list[Any]]:
        items = list(values)
        n = len(items)
        chunk = n - min_length
        while chunk > 0:
            for start in range(0, n - chunk + 1, chunk):
                yield items[:start] + items[start + chunk :]
            chunk //= 2
        for index, item in enumerate(items):
            for candidate in element(item):
                yield items[:index] + [candidate] + items[index + 1 :]

    return shrinker


def shrink_text(value: str) -> Iterator[str]:
    for chars in shrink_list(shrink_char)(list(value)):
        yield "".join(chars)


def shrink_tuple(*shrinkers: Shrinker[Any]) -> Shrinker[tuple[Any, ...]]:
    """Shrink one component at a time, left to right."""

    def shrinker(value: tuple[Any, ...]) -> Iterator[tuple[Any, ...]]:
        for index, (component, shrink) in enumerate(zip(value, shrinkers)):
            for candidate in shrink(component):
                yield value[:index] + (candidate,) + value[index + 1 :]

    return shrinker


def shrink_optional(inner: Shrinker[T]) -> Shrinker[T | None]:
    """``None`` first, then shrunk payloads."""

    def shrinker(value: T | None) -> Iterator[T | None]:
        if value is None:
            return
        yield None
        yield from inner(value)

    return shrinker


def shrink_dict(value_shrinker: Shrinker[Any] = shrink_nothing) -> Shrinker[dict[Any, Any]]:
    """Remove entries (in chunks, like lists), then shrink values in place."""
    items_shrinker = shrink_list(shrink_tuple(shrink_nothing, value_shrinker))

    def shrinker(value: dict[Any, Any]) -> Iterator[dict[Any, Any]]:
        for items in items_shrinker(list(value.items())):
            yield dict(items)

    return shrinker


def shrink_map(shrinker: Shrinker[Any], forward: Callable[[Any], T], backward: Callable[[T], Any]) -> Shrinker[T]:
    """Shrink a value through an isomorphism with a type that already has a shrinker."""

    def mapped(value: T) -> Iterator[T]:
        for candidate in shrinker(backward(value)):
            yield forward(candidate)

    return mapped
