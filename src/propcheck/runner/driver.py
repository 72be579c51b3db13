"""Driver: runs a property until it passes, fails or gives up.

State machine::

    Idle -> Running(tests_run, discarded, size) -> Passed | Falsified | GaveUp | Aborted

Each iteration checks the cancellation flag, splits the random source,
picks the size for this iteration and evaluates the top-level property
once. A failure is handed to the shrink search before the run ends.

Example:
    >>> from propcheck import arbitrary as arb, for_all
    >>> prop = for_all(arb.integers())(lambda i: i == i)
    >>> check(prop, seed=42).tests_run
    100
"""

from __future__ import annotations

import logging
import threading
import time
from collections import Counter
from datetime import datetime
from typing import Any

from propcheck.config.settings import CheckConfig
from propcheck.core.gen import generation_limits
from propcheck.core.outcome import Outcome
from propcheck.core.property import EvalContext, Property, Testable, as_property, evaluate_guarded
from propcheck.core.random import RandomSource, fresh_seed
from propcheck.core.result import Report, Verdict
from propcheck.observability.logging import log_context
from propcheck.runner.shrinking import ShrinkSearch

logger = logging.getLogger(__name__)


class Driver:
    """Runs properties under one configuration.

    A Driver holds no per-run state, so one instance can run many
    properties, including concurrently from several threads.

    Args:
        config: Run configuration. Defaults to ``CheckConfig()`` (which
            reads ``PROPCHECK_*`` environment variables).
        cancel: Optional event; when set, runs stop before their next
            iteration with verdict ABORTED.
    """

    def __init__(self, config: CheckConfig | None = None, cancel: threading.Event | None = None) -> None:
        self.config = config if config is not None else CheckConfig()
        self.cancel = cancel if cancel is not None else threading.Event()

    def run(self, testable: Testable, name: str | None = None) -> Report:
        """Run one property to a terminal verdict."""
        prop = as_property(testable)
        name = name or prop.description
        config = self.config
        seed = config.seed if config.seed is not None else fresh_seed()
        start = time.perf_counter()
        report = Report(verdict=Verdict.ABORTED, name=name, seed=seed, max_tests=config.max_tests)

        with log_context(property=name, seed=seed), generation_limits(config.such_that_tries):
            logger.info(
                f"Checking {name}",
                extra={"structured_data": {"max_tests": config.max_tests, "max_size": config.max_size}},
            )
            self._loop(prop, RandomSource.from_seed(seed), report)

            report.finished_at = datetime.now()
            report.duration_ms = (time.perf_counter() - start) * 1000
            logger.info(
                f"{name}: {report.verdict.value}",
                extra={
                    "structured_data": {
                        "tests_run": report.tests_run,
                        "discarded": report.discarded,
                        "shrink_steps": report.shrink_steps,
                        "duration_ms": round(report.duration_ms, 2),
                    }
                },
            )
        return report

    def _loop(self, prop: Property, source: RandomSource, report: Report) -> None:
        config = self.config
        labels: Counter[str] = Counter()
        classes: Counter[str] = Counter()

        try:
            while True:
                if self.cancel.is_set():
                    report.verdict = Verdict.ABORTED
                    logger.info("Run cancelled")
                    return

                source, test_source = source.split()
                size = config.size_for(report.tests_run + report.discarded)
                context = EvalContext()
                outcome = evaluate_guarded(prop, test_source, size, context)

                if outcome.is_discard:
                    report.discarded += 1
                    if report.discarded >= config.max_discards:
                        report.verdict = Verdict.GAVE_UP
                        return
                    continue

                labels.update(outcome.labels)
                classes.update(outcome.classes)

                if outcome.is_success:
                    report.tests_run += 1
                    if report.tests_run >= config.max_tests:
                        report.verdict = Verdict.PASSED
                        return
                    continue

                self._falsified(prop, test_source, size, outcome, context, report)
                return
        finally:
            report.labels = dict(labels)
            report.classes = dict(classes)

    def _falsified(
        self,
        prop: Property,
        source: RandomSource,
        size: int,
        outcome: Outcome,
        context: EvalContext,
        report: Report,
    ) -> None:
        logger.debug(
            "Property falsified, shrinking",
            extra={"structured_data": {"size": size, "witness": repr(outcome.witness), "reason": outcome.reason}},
        )
        search = ShrinkSearch(prop, source, size, max_shrinks=self.config.max_shrinks)
        shrunk = search.run(outcome, context.seen)

        report.verdict = Verdict.FALSIFIED
        report.witness = outcome.witness
        report.shrunk_witness = shrunk.outcome.witness
        report.shrink_steps = shrunk.steps
        report.shrink_attempts = shrunk.attempts
        report.failing_size = size
        report.reason = shrunk.outcome.reason
        report.exception = shrunk.outcome.exception


def check(
    testable: Testable,
    config: CheckConfig | None = None,
    *,
    name: str | None = None,
    cancel: threading.Event | None = None,
    **overrides: Any,
) -> Report:
    """Run ``testable`` and return its Report.

    Keyword overrides (``seed``, ``max_tests``, ``max_size``,
    ``max_discard_ratio``, ...) are applied on top of ``config``.
    """
    base = config if config is not None else CheckConfig()
    if overrides:
        base = base.with_overrides(**overrides)
    return Driver(base, cancel).run(testable, name)
