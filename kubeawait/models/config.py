"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class BackoffConfig:
    """Exponential back-off applied between watch reconnects."""

    initial_seconds: float = 0.8
    max_seconds: float = 30.0
    factor: float = 2.0
    reset_after_seconds: float = 120.0


@dataclass
class WatchConfig:
    """Watch request configuration."""

    # Server-side timeout per watch request; the subscription resumes after it.
    timeout_seconds: int = 290


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "warning"
    format: str = "console"


@dataclass
class KubeAwaitConfig:
    """Top-level kubeawait configuration."""

    backoff: BackoffConfig = field(default_factory=BackoffConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)
    log: LogConfig = field(default_factory=LogConfig)
