"""Shrink search: reduce a failing witness to a locally minimal one.

The search works on the bindings recorded by ``for_all`` nodes. For one
argument at a time it walks that argument's shrink candidates in order
and descends into the first candidate that still fails (eager descent,
siblings are dropped). When no candidate fails the argument is at a local
minimum and the search moves to the next argument, outer bindings before
inner ones. Passes repeat until one full pass changes nothing.

Every candidate is checked by replaying the *top-level* property with the
original random source and size, forcing the candidate into its binding
and pinning all other bindings that are not nested inside it. Nested
``for_all`` nodes below the shrunk binding regenerate from the same
source, so dependent generators stay reproducible.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from propcheck.core.outcome import Binding, Outcome
from propcheck.core.property import EvalContext, Property, describe_exception, evaluate_guarded
from propcheck.core.random import RandomSource

logger = logging.getLogger(__name__)


@dataclass
class ShrinkResult:
    """Where the search ended.

    Attributes:
        outcome: The smallest failing outcome found.
        steps: Accepted shrinks (each one produced a smaller failing witness).
        attempts: Candidates evaluated, accepted or not.
        capped: True if ``max_shrinks`` stopped the search early.
    """

    outcome: Outcome
    steps: int = 0
    attempts: int = 0
    capped: bool = False


def _nested(path: tuple[int, ...], ancestor: tuple[int, ...]) -> bool:
    return len(path) > len(ancestor) and path[: len(ancestor)] == ancestor


class ShrinkSearch:
    """Minimize the witness of one failing evaluation.

    Args:
        prop: The top-level property that failed.
        source: Random source the failing evaluation used.
        size: Size the failing evaluation used.
        max_shrinks: Optional cap on accepted shrink steps.
    """

    def __init__(
        self,
        prop: Property,
        source: RandomSource,
        size: int,
        max_shrinks: int | None = None,
    ) -> None:
        self.prop = prop
        self.source = source
        self.size = size
        self.max_shrinks = max_shrinks
        self._current: Outcome | None = None
        self._assignment: dict[tuple[int, ...], tuple[Any, ...]] = {}
        self._steps = 0
        self._attempts = 0

    @property
    def _capped(self) -> bool:
        return self.max_shrinks is not None and self._steps >= self.max_shrinks

    def run(self, failure: Outcome, seen: list[Binding]) -> ShrinkResult:
        """Shrink ``failure``; ``seen`` is every binding its evaluation drew."""
        self._current = failure
        self._assignment = {binding.path: binding.args for binding in seen}
        self._steps = 0
        self._attempts = 0

        progress = True
        while progress and not self._capped:
            progress = False
            for path in [binding.path for binding in self._current.bindings]:
                binding = self._binding_at(path)
                if binding is None:
                    continue
                for position in range(len(binding.args)):
                    if self._descend(path, position):
                        progress = True

        logger.debug(
            "Shrink search finished",
            extra={
                "structured_data": {
                    "steps": self._steps,
                    "attempts": self._attempts,
                    "capped": self._capped,
                }
            },
        )
        return ShrinkResult(self._current, self._steps, self._attempts, self._capped)

    def _binding_at(self, path: tuple[int, ...]) -> Binding | None:
        assert self._current is not None
        for binding in self._current.bindings:
            if binding.path == path:
                return binding
        return None

    def _descend(self, path: tuple[int, ...], position: int) -> bool:
        """Shrink one argument to a local minimum. Returns True if it moved."""
        moved = False
        while not self._capped:
            binding = self._binding_at(path)
            if binding is None or position >= len(binding.args) or position >= len(binding.shrinkers):
                return moved
            for candidate in self._candidates(binding.shrinkers[position], binding.args[position], path):
                args = binding.args[:position] + (candidate,) + binding.args[position + 1 :]
                if self._still_fails(path, args):
                    moved = True
                    break
            else:
                return moved
        return moved

    def _candidates(self, shrinker: Callable[[Any], Iterable[Any]], value: Any, path: tuple[int, ...]) -> Iterator[Any]:
        """Candidates from ``shrinker``; a shrinker that raises has no more to offer."""
        try:
            yield from shrinker(value)
        except Exception as exc:
            logger.warning(
                f"Shrinker raised {describe_exception(exc)}, keeping the current witness",
                extra={"structured_data": {"path": path, "value": repr(value)}},
            )

    def _still_fails(self, path: tuple[int, ...], args: tuple[Any, ...]) -> bool:
        overrides = {
            pinned: values
            for pinned, values in self._assignment.items()
            if pinned != path and not _nested(pinned, path)
        }
        overrides[path] = args
        context = EvalContext(overrides=overrides)
        outcome = evaluate_guarded(self.prop, self.source, self.size, context)
        self._attempts += 1
        if not outcome.is_failure:
            return False

        self._current = outcome
        self._assignment = {binding.path: binding.args for binding in context.seen}
        self._steps += 1
        logger.debug(
            "Shrink step accepted",
            extra={"structured_data": {"step": self._steps, "path": path, "witness": repr(outcome.witness)}},
        )
        return True
