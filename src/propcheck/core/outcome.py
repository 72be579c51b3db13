"""Outcome of one property evaluation and the verdict algebra."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    DISCARD = "discard"


@dataclass(frozen=True)
class Binding:
    """Arguments drawn by one ``for_all`` node during an evaluation.

    Attributes:
        path: Position of the node in the property tree. Nested nodes
            extend their parent's path.
        args: The generated (or forced) argument values.
        shrinkers: One shrinker per argument.
    """

    path: tuple[int, ...]
    args: tuple[Any, ...]
    shrinkers: tuple[Callable[[Any], Iterator[Any]], ...] = field(default=(), compare=False, repr=False)


@dataclass(frozen=True)
class Outcome:
    """Verdict of a single evaluation plus what is needed to report it.

    ``bindings`` are ordered outermost first; ``witness`` flattens their
    arguments into the tuple shown to the user.
    """

    kind: OutcomeKind
    bindings: tuple[Binding, ...] = ()
    labels: frozenset[str] = frozenset()
    classes: tuple[str, ...] = ()
    reason: str | None = None
    exception: BaseException | None = field(default=None, compare=False, repr=False)

    @classmethod
    def success(cls) -> Outcome:
        return cls(OutcomeKind.SUCCESS)

    @classmethod
    def failure(cls, reason: str | None = None, exception: BaseException | None = None) -> Outcome:
        return cls(OutcomeKind.FAILURE, reason=reason, exception=exception)

    @classmethod
    def discard(cls, reason: str | None = None) -> Outcome:
        return cls(OutcomeKind.DISCARD, reason=reason)

    @property
    def is_success(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    @property
    def is_failure(self) -> bool:
        return self.kind is OutcomeKind.FAILURE

    @property
    def is_discard(self) -> bool:
        return self.kind is OutcomeKind.DISCARD

    @property
    def witness(self) -> tuple[Any, ...]:
        return tuple(arg for binding in self.bindings for arg in binding.args)

    def with_binding(self, binding: Binding) -> Outcome:
        return replace(self, bindings=(binding,) + self.bindings)

    def with_labels(self, *labels: str) -> Outcome:
        return replace(self, labels=self.labels | frozenset(labels))

    def with_classes(self, *tags: str) -> Outcome:
        return replace(self, classes=self.classes + tags)

    def with_note(self, text: str) -> Outcome:
        """Append ``text`` to the reason of a failure; other outcomes are unchanged."""
        if not self.is_failure:
            return self
        reason = text if not self.reason else f"{self.reason}\n{text}"
        return replace(self, reason=reason)


def _merge_reasons(*reasons: str | None) -> str | None:
    present = [r for r in reasons if r]
    return "; ".join(present) if present else None


def conjunction(left: Outcome, right: Outcome) -> Outcome:
    """Combine two outcomes with logical *and*.

    Discard on either side wins; otherwise the first failing side (left
    first) is the result; otherwise success. Labels and tags of both
    sides are kept.
    """
    labels = left.labels | right.labels
    classes = left.classes + right.classes
    if left.is_discard:
        chosen = left
    elif right.is_discard:
        chosen = right
    elif left.is_failure:
        chosen = left
    elif right.is_failure:
        chosen = right
    else:
        chosen = left
    return replace(chosen, labels=labels, classes=classes)


def disjunction(left: Outcome, right: Outcome) -> Outcome:
    """Combine two outcomes with logical *or*.

    Success on either side wins; two failures give a failure carrying the
    left witness and both reasons; anything else is a discard.
    """
    labels = left.labels | right.labels
    classes = left.classes + right.classes
    if left.is_success:
        chosen = left
    elif right.is_success:
        chosen = right
    elif left.is_failure and right.is_failure:
        chosen = replace(left, reason=_merge_reasons(left.reason, right.reason))
    else:
        chosen = Outcome.discard()
    return replace(chosen, labels=labels, classes=classes)
