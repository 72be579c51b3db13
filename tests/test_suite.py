"""Tests for running many properties, sequentially and on a thread pool."""

import threading

from propcheck import arbitrary as arb
from propcheck.config import CheckConfig
from propcheck.core.property import for_all
from propcheck.core.result import Verdict
from propcheck.runner import run_suite


def make_properties() -> dict:
    return {
        "reflexive": for_all(arb.integers(), body=lambda n: n == n),
        "small": for_all(arb.integers(), body=lambda n: n < 10),
        "pairs": for_all(arb.integers(), arb.integers(), body=lambda a, b: a < 10 or b < 10),
        "reverse": for_all(arb.lists(arb.integers()), body=lambda xs: xs[::-1][::-1] == xs),
        "never": for_all(arb.integers().filter(lambda n: False, max_tries=2), body=lambda n: True),
    }


class TestRunSuite:
    def test_sequential(self):
        result = run_suite(make_properties(), CheckConfig(seed=5))
        assert [r.name for r in result.reports] == ["reflexive", "small", "pairs", "reverse", "never"]
        assert [r.verdict for r in result.reports] == [
            Verdict.PASSED,
            Verdict.FALSIFIED,
            Verdict.FALSIFIED,
            Verdict.PASSED,
            Verdict.GAVE_UP,
        ]
        assert result.total == 5
        assert not result.passed
        assert result.finished_at is not None

    def test_parallel_matches_sequential(self):
        config = CheckConfig(seed=5)
        sequential = run_suite(make_properties(), config, workers=1)
        parallel = run_suite(make_properties(), config, workers=4)
        assert [r.name for r in parallel.reports] == [r.name for r in sequential.reports]
        assert [(r.verdict, r.shrunk_witness, r.tests_run) for r in parallel.reports] == [
            (r.verdict, r.shrunk_witness, r.tests_run) for r in sequential.reports
        ]
        assert parallel.reports[1].shrunk_witness == (10,)
        assert parallel.reports[2].shrunk_witness == (10, 10)

    def test_accepts_pairs(self):
        result = run_suite([("a", True), ("b", False)], CheckConfig(seed=1))
        assert [r.verdict for r in result.reports] == [Verdict.PASSED, Verdict.FALSIFIED]

    def test_workers_from_config(self):
        result = run_suite(make_properties(), CheckConfig(seed=5, workers=3))
        assert result.count(Verdict.PASSED) == 2

    def test_cancel_aborts_every_property(self):
        cancel = threading.Event()
        cancel.set()
        result = run_suite(make_properties(), CheckConfig(seed=5), workers=2, cancel=cancel)
        assert result.count(Verdict.ABORTED) == 5

    def test_empty(self):
        result = run_suite({})
        assert result.reports == []
        assert result.passed
