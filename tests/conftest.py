"""Pytest fixtures for propcheck tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator

import pytest

from propcheck.core.arbitrary import ArbitraryRegistry
from propcheck.core.random import RandomSource


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep PROPCHECK_* variables from the outer environment out of the tests."""
    for key in list(os.environ):
        if key.startswith("PROPCHECK_"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    yield
    logger = logging.getLogger("propcheck")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def source() -> RandomSource:
    return RandomSource.from_seed(1234)


@pytest.fixture
def registry() -> ArbitraryRegistry:
    return ArbitraryRegistry.with_defaults()

