"""Splittable, seedable pseudo-random source.

RandomSource is an immutable SplitMix64 state (Steele, Lea & Flood,
"Fast Splittable Pseudorandom Number Generators", OOPSLA 2014). Every
operation returns the next state instead of mutating, and ``split`` yields
two streams that are independent of each other and of the parent, so
sibling generators never correlate and may be evaluated in any order or
on different threads.
"""

from __future__ import annotations

import itertools
import os
import threading
import time
from dataclasses import dataclass

from propcheck.errors import InvalidRange

MASK64 = (1 << 64) - 1
GOLDEN_GAMMA = 0x9E3779B97F4A7C15

_seed_lock = threading.Lock()
_seed_counter = itertools.count()


def _mix64(z: int) -> int:
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & MASK64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & MASK64
    return z ^ (z >> 31)


def _mix_gamma(z: int) -> int:
    z = ((z ^ (z >> 33)) * 0xFF51AFD7ED558CCD) & MASK64
    z = ((z ^ (z >> 33)) * 0xC4CEB9FE1A85EC53) & MASK64
    z = (z ^ (z >> 33)) | 1
    # Gammas with too few bit transitions produce weak streams.
    if bin(z ^ (z >> 1)).count("1") < 24:
        z ^= 0xAAAAAAAAAAAAAAAA
    return z


def fresh_seed() -> int:
    """Derive a new 64-bit seed from the clock, the pid and a process counter.

    Safe to call from several threads at once.
    """
    with _seed_lock:
        n = next(_seed_counter)
    return _mix64((time.time_ns() ^ (os.getpid() << 32)) + n * GOLDEN_GAMMA & MASK64)


@dataclass(frozen=True)
class RandomSource:
    """Immutable SplitMix64 state.

    Attributes:
        state: Current 64-bit seed value.
        gamma: Odd 64-bit increment identifying the stream.
    """

    state: int
    gamma: int = GOLDEN_GAMMA

    @classmethod
    def from_seed(cls, seed: int) -> RandomSource:
        """Build a source from any integer seed (reduced to 64 bits)."""
        return cls(state=seed & MASK64, gamma=GOLDEN_GAMMA)

    @classmethod
    def fresh(cls) -> RandomSource:
        return cls.from_seed(fresh_seed())

    def next(self) -> tuple[int, RandomSource]:
        """Return 64 random bits and the advanced source."""
        state = (self.state + self.gamma) & MASK64
        return _mix64(state), RandomSource(state, self.gamma)

    def split(self) -> tuple[RandomSource, RandomSource]:
        """Return (continuation, child): two independent sources."""
        s1 = (self.state + self.gamma) & MASK64
        s2 = (s1 + self.gamma) & MASK64
        child = RandomSource(_mix64(s1), _mix_gamma(s2))
        return RandomSource(s2, self.gamma), child

    def split_n(self, n: int) -> list[RandomSource]:
        """Split into ``n`` independent sources."""
        sources = []
        current = self
        for _ in range(n):
            current, child = current.split()
            sources.append(child)
        return sources

    def next_below(self, bound: int) -> tuple[int, RandomSource]:
        """Uniform integer in ``[0, bound)``.

        Uses bit-mask rejection sampling over as many 64-bit words as the
        bound needs, so there is no modulo bias for any bound.
        """
        if bound <= 0:
            raise InvalidRange(f"next_below bound must be positive, got {bound}")
        if bound == 1:
            return 0, self
        bits = (bound - 1).bit_length()
        words = (bits + 63) // 64
        mask = (1 << bits) - 1
        source = self
        while True:
            value = 0
            for _ in range(words):
                word, source = source.next()
                value = (value << 64) | word
            value &= mask
            if value < bound:
                return value, source

    def next_in_range(self, low: int, high: int) -> tuple[int, RandomSource]:
        """Uniform integer in ``[low, high]`` (inclusive)."""
        if low > high:
            raise InvalidRange(f"empty range: low={low} > high={high}")
        offset, source = self.next_below(high - low + 1)
        return low + offset, source

    def next_float(self) -> tuple[float, RandomSource]:
        """Uniform float in ``[0.0, 1.0)`` with 53 bits of precision."""
        word, source = self.next()
        return (word >> 11) * (1.0 / (1 << 53)), source
