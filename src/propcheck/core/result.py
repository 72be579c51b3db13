"""Report dataclass produced by a driver run."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class Verdict(str, Enum):
    PASSED = "passed"
    FALSIFIED = "falsified"
    GAVE_UP = "gave_up"
    ABORTED = "aborted"


@dataclass
class Report:
    """The complete output of one property run."""

    verdict: Verdict
    name: str = "property"
    tests_run: int = 0
    discarded: int = 0
    seed: int | None = None
    max_tests: int = 0
    witness: tuple[Any, ...] | None = None
    shrunk_witness: tuple[Any, ...] | None = None
    shrink_steps: int = 0
    shrink_attempts: int = 0
    failing_size: int | None = None
    reason: str | None = None
    exception: BaseException | None = field(default=None, repr=False, compare=False)
    labels: dict[str, int] = field(default_factory=dict)
    classes: dict[str, int] = field(default_factory=dict)
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: datetime | None = None
    duration_ms: float = 0.0

    @property
    def passed(self) -> bool:
        return self.verdict is Verdict.PASSED

    @property
    def falsified(self) -> bool:
        return self.verdict is Verdict.FALSIFIED

    @property
    def gave_up(self) -> bool:
        return self.verdict is Verdict.GAVE_UP

    @property
    def evaluated(self) -> int:
        """Runs that counted toward the statistics (successes plus the failure, if any)."""
        return self.tests_run + (1 if self.falsified else 0)

    @property
    def discard_ratio(self) -> float:
        """Discards per successful test (the GaveUp threshold is compared against this)."""
        if self.tests_run == 0:
            return float(self.discarded)
        return self.discarded / self.tests_run

    def label_percentages(self) -> dict[str, float]:
        return self._percentages(self.labels)

    def class_percentages(self) -> dict[str, float]:
        return self._percentages(self.classes)

    def _percentages(self, counts: dict[str, int]) -> dict[str, float]:
        total = self.evaluated
        if total == 0:
            return {}
        ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return {name: count * 100.0 / total for name, count in ordered}

    def summary(self) -> str:
        """One-line description of the verdict."""
        if self.verdict is Verdict.PASSED:
            return f"+++ OK, passed {self.tests_run} tests."
        if self.verdict is Verdict.FALSIFIED:
            plural = "" if self.shrink_steps == 1 else "s"
            return (
                f"*** Failed! Falsified after {self.tests_run + 1} tests "
                f"and {self.shrink_steps} shrink{plural}."
            )
        if self.verdict is Verdict.GAVE_UP:
            return (
                f"*** Gave up after {self.tests_run} tests and {self.discarded} discards "
                f"(insufficient valid data)."
            )
        return f"*** Aborted after {self.tests_run} tests and {self.discarded} discards."

    def describe(self) -> str:
        """Multi-line description including witnesses, seed and statistics."""
        lines = [f"{self.name}: {self.summary()}"]
        if self.verdict is Verdict.FALSIFIED:
            lines.append(f"Counterexample: {_format_args(self.shrunk_witness)}")
            if self.witness != self.shrunk_witness:
                lines.append(f"Original: {_format_args(self.witness)}")
            if self.reason:
                lines.append(f"Reason: {self.reason}")
        if self.verdict is Verdict.GAVE_UP:
            lines.append(f"Discard ratio: {self.discard_ratio:.1f}")
        if self.seed is not None:
            lines.append(f"Seed: {self.seed} (replay with seed={self.seed})")
        for title, table in (("Labels", self.label_percentages()), ("Classes", self.class_percentages())):
            if table:
                lines.append(f"{title}:")
                lines.extend(f"  {pct:5.1f}% {name}" for name, pct in table.items())
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "verdict": self.verdict.value,
            "tests_run": self.tests_run,
            "discarded": self.discarded,
            "max_tests": self.max_tests,
            "seed": self.seed,
            "witness": _jsonable(self.witness),
            "shrunk_witness": _jsonable(self.shrunk_witness),
            "shrink_steps": self.shrink_steps,
            "shrink_attempts": self.shrink_attempts,
            "failing_size": self.failing_size,
            "reason": self.reason,
            "labels": self.label_percentages(),
            "classes": self.class_percentages(),
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "duration_ms": self.duration_ms,
        }


def _format_args(args: tuple[Any, ...] | None) -> str:
    if args is None:
        return "<none>"
    return ", ".join(repr(a) for a in args) if args else "()"


def _jsonable(args: tuple[Any, ...] | None) -> list[str] | None:
    if args is None:
        return None
    return [repr(a) for a in args]
