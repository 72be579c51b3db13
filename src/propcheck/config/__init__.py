"""Configuration for propcheck runs."""

from propcheck.config.settings import (
    DEFAULT_MAX_DISCARD_RATIO,
    DEFAULT_MAX_SIZE,
    DEFAULT_MAX_TESTS,
    DEFAULT_SUCH_THAT_TRIES,
    CheckConfig,
    load_config,
)

__all__ = [
    "CheckConfig",
    "load_config",
    "DEFAULT_MAX_TESTS",
    "DEFAULT_MAX_DISCARD_RATIO",
    "DEFAULT_MAX_SIZE",
    "DEFAULT_SUCH_THAT_TRIES",
]
