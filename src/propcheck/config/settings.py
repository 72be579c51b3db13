"""Configuration settings and loading."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from propcheck.errors import ConfigValidationError, ErrorContext

DEFAULT_MAX_TESTS = 100
DEFAULT_MAX_DISCARD_RATIO = 10
DEFAULT_MAX_SIZE = 100
DEFAULT_SUCH_THAT_TRIES = 100


class CheckConfig(BaseSettings):
    """Configuration for one or more property runs.

    Instances are frozen. Build a modified copy with ``with_overrides``
    rather than mutating fields, so the same value can be shared across
    concurrently running properties.
    """

    model_config = SettingsConfigDict(
        env_prefix="PROPCHECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    max_tests: int = DEFAULT_MAX_TESTS
    max_discard_ratio: int = DEFAULT_MAX_DISCARD_RATIO
    max_size: int = DEFAULT_MAX_SIZE
    start_size: int = 0
    size_step: int | None = Field(
        default=None,
        description="Size increase per iteration; defaults to max(1, max_size // max_tests)",
    )
    such_that_tries: int = Field(
        default=DEFAULT_SUCH_THAT_TRIES,
        description="Attempts a such_that filter makes before raising GenerationExhausted",
    )
    max_shrinks: int | None = Field(
        default=None,
        description="Cap on accepted shrink steps; None means shrink to a fixpoint",
    )
    seed: int | None = Field(default=None, description="Seed for reproducing a previous run")
    workers: int = 1
    log_level: str = "WARNING"
    json_logs: bool = False

    @field_validator("max_tests", "such_that_tries", "workers")
    @classmethod
    def validate_positive(cls, v: int, info: Any) -> int:
        if v < 1:
            raise ConfigValidationError(
                message=f"{info.field_name} must be >= 1, got {v}",
                field=info.field_name,
                value=v,
            )
        return v

    @field_validator("max_discard_ratio", "max_size", "start_size")
    @classmethod
    def validate_non_negative(cls, v: int, info: Any) -> int:
        if v < 0:
            raise ConfigValidationError(
                message=f"{info.field_name} must be >= 0, got {v}",
                field=info.field_name,
                value=v,
            )
        return v

    @field_validator("size_step", "max_shrinks")
    @classmethod
    def validate_optional_count(cls, v: int | None, info: Any) -> int | None:
        if v is None:
            return None
        minimum = 1 if info.field_name == "size_step" else 0
        if v < minimum:
            raise ConfigValidationError(
                message=f"{info.field_name} must be >= {minimum}, got {v}",
                field=info.field_name,
                value=v,
                context=ErrorContext(extra={"minimum": minimum}),
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level = v.upper()
        if level not in valid:
            raise ConfigValidationError(
                message=f"Invalid log level: {v}. Valid: {sorted(valid)}",
                field="log_level",
                value=v,
                context=ErrorContext(extra={"valid_levels": sorted(valid)}),
            )
        return level

    @property
    def max_discards(self) -> int:
        """Number of discards at which a run gives up."""
        return self.max_discard_ratio * self.max_tests

    @property
    def effective_size_step(self) -> int:
        if self.size_step is not None:
            return self.size_step
        return max(1, self.max_size // self.max_tests)

    def size_for(self, iteration: int) -> int:
        """Size used for the ``iteration``-th evaluation (0-based).

        Grows linearly by ``effective_size_step`` and is capped at
        ``max_size``; never decreases within a run.
        """
        return min(self.max_size, self.start_size + iteration * self.effective_size_step)

    def with_overrides(self, **overrides: Any) -> CheckConfig:
        """Return a new config with ``overrides`` applied.

        Every given key is applied, ``None`` included, so
        ``with_overrides(seed=None)`` goes back to a fresh seed per run.
        """
        data = self.model_dump()
        data.update(overrides)
        return type(self)(**data)


def load_config(config_path: str | Path | None = None) -> CheckConfig:
    """Load configuration from file and environment.

    Priority: explicit overrides > env vars > config file > defaults
    """
    config_data: dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path) as f:
                config_data = yaml.safe_load(f) or {}
            if not isinstance(config_data, dict):
                raise ConfigValidationError(
                    message=f"{config_path} must contain a mapping at the top level",
                    value=type(config_data).__name__,
                )

    env_overrides = _get_env_overrides()
    config_data.update(env_overrides)

    return CheckConfig(**config_data)


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    env_mappings = {
        "PROPCHECK_MAX_TESTS": ("max_tests", int),
        "PROPCHECK_MAX_DISCARD_RATIO": ("max_discard_ratio", int),
        "PROPCHECK_MAX_SIZE": ("max_size", int),
        "PROPCHECK_SEED": ("seed", int),
        "PROPCHECK_WORKERS": ("workers", int),
        "PROPCHECK_LOG_LEVEL": "log_level",
        "PROPCHECK_JSON_LOGS": ("json_logs", lambda x: x.lower() in ("true", "1", "yes")),
    }

    for env_key, config_key in env_mappings.items():
        value = os.environ.get(env_key)
        if value is not None:
            if isinstance(config_key, tuple):
                key, converter = config_key
                overrides[key] = converter(value)
            else:
                overrides[config_key] = value

    return overrides
