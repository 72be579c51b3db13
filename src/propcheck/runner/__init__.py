"""Running properties: the driver, the shrink search and suites."""

from propcheck.runner.driver import Driver, check
from propcheck.runner.shrinking import ShrinkResult, ShrinkSearch
from propcheck.runner.suite import SuiteResult, run_suite

__all__ = [
    "Driver",
    "check",
    "ShrinkSearch",
    "ShrinkResult",
    "run_suite",
    "SuiteResult",
]
