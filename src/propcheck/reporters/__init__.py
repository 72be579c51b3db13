"""Reporters for property run results."""

from propcheck.reporters.base import BaseReporter
from propcheck.reporters.console import ConsoleReporter
from propcheck.reporters.json_report import JSONReporter
from propcheck.reporters.junit import JUnitReporter

__all__ = [
    "BaseReporter",
    "ConsoleReporter",
    "JSONReporter",
    "JUnitReporter",
]
