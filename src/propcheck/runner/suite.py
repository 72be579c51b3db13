"""Run many named properties, optionally in parallel."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime

from propcheck.config.settings import CheckConfig
from propcheck.core.property import Testable, describe_exception
from propcheck.core.result import Report, Verdict
from propcheck.runner.driver import Driver

logger = logging.getLogger(__name__)


@dataclass
class SuiteResult:
    """Reports of a suite run, in the order the properties were given."""

    reports: list[Report] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: datetime | None = None
    duration_ms: float = 0.0

    @property
    def passed(self) -> bool:
        return all(report.passed for report in self.reports)

    @property
    def total(self) -> int:
        return len(self.reports)

    def count(self, verdict: Verdict) -> int:
        return sum(1 for report in self.reports if report.verdict is verdict)

    @property
    def failures(self) -> list[Report]:
        return [report for report in self.reports if not report.passed]


def run_suite(
    properties: Mapping[str, Testable] | Iterable[tuple[str, Testable]],
    config: CheckConfig | None = None,
    workers: int | None = None,
    cancel: threading.Event | None = None,
) -> SuiteResult:
    """Run every ``(name, property)`` pair and collect the reports.

    With ``workers > 1`` properties run concurrently on a thread pool.
    Each run keeps its own driver state; the only thing shared is the
    (frozen) configuration and the cancellation event.
    """
    config = config if config is not None else CheckConfig()
    items = list(properties.items() if isinstance(properties, Mapping) else properties)
    workers = workers if workers is not None else config.workers
    driver = Driver(config, cancel)
    result = SuiteResult()
    start = time.perf_counter()

    logger.info(f"Running {len(items)} properties with {workers} worker(s)")

    if workers <= 1 or len(items) <= 1:
        result.reports = [driver.run(prop, name) for name, prop in items]
    else:
        reports: dict[int, Report] = {}
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(driver.run, prop, name): (index, name) for index, (name, prop) in enumerate(items)}

            for future in as_completed(futures):
                index, name = futures[future]
                try:
                    reports[index] = future.result()
                except Exception as e:
                    logger.exception(f"Property {name} raised outside evaluation")
                    reports[index] = Report(
                        verdict=Verdict.FALSIFIED,
                        name=name,
                        reason=describe_exception(e),
                        exception=e,
                    )
        result.reports = [reports[index] for index in range(len(items))]

    result.finished_at = datetime.now()
    result.duration_ms = (time.perf_counter() - start) * 1000
    return result
