"""JSON reporter for machine consumption.

Example:
    >>> reporter = JSONReporter(indent=4)
    >>> data = json.loads(reporter.generate(reports))
    >>> data["summary"]["falsified"]
    0
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from propcheck import __version__
from propcheck.core.result import Report, Verdict
from propcheck.reporters.base import BaseReporter


class JSONReporter(BaseReporter):
    """Generate a JSON document with a summary and one entry per property.

    Attributes:
        output_path: Optional default path for saving reports.
        indent: Spaces for pretty-printing; None for compact output.
    """

    def __init__(self, output_path: str | Path | None = None, indent: int | None = 2) -> None:
        super().__init__(output_path)
        self.indent = indent

    @property
    def file_extension(self) -> str:
        return ".json"

    def generate(self, reports: list[Report]) -> str:
        return json.dumps(self._build_report(reports), indent=self.indent, default=str)

    def _build_report(self, reports: list[Report]) -> dict[str, Any]:
        return {
            "report_type": "propcheck",
            "version": __version__,
            "generated_at": datetime.now().isoformat(),
            "summary": self._build_summary(reports),
            "properties": [report.to_dict() for report in reports],
        }

    def _build_summary(self, reports: list[Report]) -> dict[str, Any]:
        counts = {verdict.value: 0 for verdict in Verdict}
        for report in reports:
            counts[report.verdict.value] += 1
        return {
            "total": len(reports),
            **counts,
            "success": all(report.passed for report in reports),
            "tests_run": sum(report.tests_run for report in reports),
            "discarded": sum(report.discarded for report in reports),
            "duration_ms": sum(report.duration_ms for report in reports),
        }
