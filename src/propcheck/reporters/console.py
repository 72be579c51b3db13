"""Console reporter for terminal output."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, TextIO

from propcheck.core.result import Report, Verdict
from propcheck.reporters.base import BaseReporter


class ConsoleReporter(BaseReporter):
    """Formats Reports for the terminal.

    Features:
    - One box per property that did not pass, with witness and shrunk witness
    - Label and class frequency tables
    - Verdict-based coloring
    """

    # ANSI color codes
    RED = "\033[91m"
    YELLOW = "\033[93m"
    GREEN = "\033[92m"
    CYAN = "\033[96m"
    DIM = "\033[2m"
    BOLD = "\033[1m"
    RESET = "\033[0m"

    # Box drawing characters
    BOX_TL = "┌"
    BOX_TR = "┐"
    BOX_BL = "└"
    BOX_BR = "┘"
    BOX_H = "─"
    BOX_V = "│"

    WIDTH = 58

    def __init__(
        self,
        file: TextIO | None = None,
        color: bool = True,
        output_path: str | Path | None = None,
    ) -> None:
        super().__init__(output_path)
        self.file = file if file is not None else sys.stdout
        self.color = color

    @property
    def file_extension(self) -> str:
        return ".txt"

    def _c(self, text: str, code: str) -> str:
        """Apply color if enabled."""
        if self.color:
            return f"{code}{text}{self.RESET}"
        return text

    def report(self, reports: list[Report]) -> None:
        """Print the reports to ``self.file``."""
        print(self.generate(reports), file=self.file)

    def save(self, reports: list[Report], path: str | Path | None = None) -> Path:
        color, self.color = self.color, False
        try:
            return super().save(reports, path)
        finally:
            self.color = color

    def generate(self, reports: list[Report]) -> str:
        lines: list[str] = [""]
        passed = sum(1 for r in reports if r.passed)
        success = passed == len(reports)

        # Header
        if success:
            status = self._c("PASSED", self.GREEN + self.BOLD)
            icon = self._c("✓", self.GREEN)
        else:
            status = self._c(f"FAILED ({len(reports) - passed} of {len(reports)})", self.RED + self.BOLD)
            icon = self._c("✗", self.RED)
        lines.append(f"  {icon} propcheck: {status}")
        lines.append(self._c("  " + "─" * 60, self.DIM))
        lines.append("")

        # One line per property
        for report in reports:
            lines.append(f"  {self._verdict_badge(report)} {report.name}: {report.summary()}")
        lines.append("")

        # Details
        for report in reports:
            if not report.passed:
                lines.extend(self._box(report))
                lines.append("")
            lines.extend(self._statistics(report))

        # Footer
        lines.append(self._c("  " + "─" * 60, self.DIM))
        total_tests = sum(r.tests_run for r in reports)
        duration = sum(r.duration_ms for r in reports)
        lines.append(f"  {self._c('Summary:', self.BOLD)} {len(reports)} properties │ {total_tests} tests │ {duration:.0f}ms")
        lines.append("")
        return "\n".join(lines)

    def _verdict_badge(self, report: Report) -> str:
        colors = {
            Verdict.PASSED: self.GREEN,
            Verdict.FALSIFIED: self.RED + self.BOLD,
            Verdict.GAVE_UP: self.YELLOW,
            Verdict.ABORTED: self.DIM,
        }
        return self._c(f"[{report.verdict.value.upper()}]", colors[report.verdict])

    def _box(self, report: Report) -> list[str]:
        lines = [f"  {self.BOX_TL}{self.BOX_H * self.WIDTH}{self.BOX_TR}"]
        lines.append(f"  {self.BOX_V} {self._verdict_badge(report)} {self._c(report.name, self.BOLD)}")

        if report.verdict is Verdict.FALSIFIED:
            lines.append(f"  {self.BOX_V}")
            lines.append(f"  {self.BOX_V}   {self._c('Counterexample:', self.CYAN)} {self._args(report.shrunk_witness)}")
            if report.witness != report.shrunk_witness:
                lines.append(f"  {self.BOX_V}   {self._c('Original:', self.DIM)} {self._args(report.witness)}")
            lines.append(f"  {self.BOX_V}   Shrinks: {report.shrink_steps} ({report.shrink_attempts} tried)")
            if report.reason:
                lines.append(f"  {self.BOX_V}")
                for reason_line in report.reason.splitlines():
                    lines.append(f"  {self.BOX_V}   {self._truncate(reason_line, 54)}")
        elif report.verdict is Verdict.GAVE_UP:
            lines.append(f"  {self.BOX_V}")
            lines.append(f"  {self.BOX_V}   Insufficient valid data: {report.discarded} discarded")
            lines.append(f"  {self.BOX_V}   Discard ratio: {report.discard_ratio:.1f}")

        if report.seed is not None:
            lines.append(f"  {self.BOX_V}")
            lines.append(f"  {self.BOX_V}   {self._c('Seed:', self.DIM)} {report.seed}")
        lines.append(f"  {self.BOX_BL}{self.BOX_H * self.WIDTH}{self.BOX_BR}")
        return lines

    def _statistics(self, report: Report) -> list[str]:
        lines: list[str] = []
        for title, table in (("labels", report.label_percentages()), ("classes", report.class_percentages())):
            if not table:
                continue
            lines.append(f"  {self._c(f'{report.name} {title}:', self.BOLD)}")
            for name, pct in table.items():
                lines.append(f"    {pct:5.1f}% {self._truncate(name, 50)}")
            lines.append("")
        return lines

    def _args(self, args: tuple[Any, ...] | None) -> str:
        if args is None:
            return "<none>"
        return self._truncate(", ".join(repr(a) for a in args), 40)

    def _truncate(self, text: str, max_chars: int = 200) -> str:
        if len(text) <= max_chars:
            return text
        return text[: max_chars - 3] + "..."
