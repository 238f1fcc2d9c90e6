"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from kubeawait.errors import ConfigError
from kubeawait.models.config import BackoffConfig, KubeAwaitConfig, LogConfig, WatchConfig

_VALID_LOG_LEVELS = ("debug", "info", "warning", "error")
_VALID_LOG_FORMATS = ("console", "json")


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"KUBEAWAIT_{key}", default)


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    raw = _env(key, str(default))
    try:
        val = int(raw)
    except ValueError as exc:
        raise ConfigError(f"KUBEAWAIT_{key} must be an integer, got {raw!r}") from exc
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _env_float(key: str, default: float, min_val: float | None = None) -> float:
    raw = _env(key, str(default))
    try:
        val = float(raw)
    except ValueError as exc:
        raise ConfigError(f"KUBEAWAIT_{key} must be a number, got {raw!r}") from exc
    if min_val is not None:
        val = max(val, min_val)
    return val


def validate_log_level(value: str) -> str:
    if value.lower() not in _VALID_LOG_LEVELS:
        raise ConfigError(f"Invalid log level: {value}. Must be one of {', '.join(_VALID_LOG_LEVELS)}")
    return value.lower()


def _validate_log_format(value: str) -> str:
    if value.lower() not in _VALID_LOG_FORMATS:
        raise ConfigError(f"Invalid log format: {value}. Must be one of {', '.join(_VALID_LOG_FORMATS)}")
    return value.lower()


def load_config() -> KubeAwaitConfig:
    """Load configuration from KUBEAWAIT_* environment variables."""
    backoff = BackoffConfig(
        initial_seconds=_env_float("BACKOFF_INITIAL", 0.8, min_val=0.0),
        max_seconds=_env_float("BACKOFF_MAX", 30.0, min_val=0.0),
        factor=_env_float("BACKOFF_FACTOR", 2.0, min_val=1.0),
        reset_after_seconds=_env_float("BACKOFF_RESET_AFTER", 120.0, min_val=0.0),
    )
    if backoff.max_seconds < backoff.initial_seconds:
        raise ConfigError("KUBEAWAIT_BACKOFF_MAX must not be lower than KUBEAWAIT_BACKOFF_INITIAL")

    return KubeAwaitConfig(
        backoff=backoff,
        watch=WatchConfig(
            timeout_seconds=_env_int("WATCH_TIMEOUT_SECONDS", 290, min_val=1, max_val=3600),
        ),
        log=LogConfig(
            level=validate_log_level(_env("LOG_LEVEL", "warning")),
            format=_validate_log_format(_env("LOG_FORMAT", "console")),
        ),
    )
