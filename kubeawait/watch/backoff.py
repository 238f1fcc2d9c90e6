"""Exponential back-off with jitter and a reset timer."""

from __future__ import annotations

import random
import time
from collections.abc import Callable

from kubeawait.models.config import BackoffConfig


class ExponentialBackoff:
    """Growing retry delay for watch reconnects.

    The n-th consecutive delay is ``initial * factor ** n`` capped at
    ``max_seconds``, then randomized by ``jitter`` (1.0 spreads the delay
    over ``[0, 2 * delay]``).  If no delay was requested for
    ``reset_after_seconds`` the sequence starts over: a stream that stayed
    healthy that long is not penalized for failures that came before.
    """

    def __init__(
        self,
        initial_seconds: float = 0.8,
        max_seconds: float = 30.0,
        factor: float = 2.0,
        reset_after_seconds: float = 120.0,
        jitter: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        rng: Callable[[], float] = random.random,
    ) -> None:
        self._initial = initial_seconds
        self._max = max_seconds
        self._factor = factor
        self._reset_after = reset_after_seconds
        self._jitter = jitter
        self._clock = clock
        self._rng = rng
        self._attempt = 0
        self._last_request: float | None = None

    @classmethod
    def from_config(cls, config: BackoffConfig) -> ExponentialBackoff:
        return cls(
            initial_seconds=config.initial_seconds,
            max_seconds=config.max_seconds,
            factor=config.factor,
            reset_after_seconds=config.reset_after_seconds,
        )

    @property
    def attempt(self) -> int:
        return self._attempt

    def reset(self) -> None:
        self._attempt = 0
        self._last_request = None

    def next_delay(self) -> float:
        """Return the delay (seconds) to sleep before the next retry."""
        now = self._clock()
        if self._last_request is not None and now - self._last_request >= self._reset_after:
            self._attempt = 0
        self._last_request = now

        delay = min(self._initial * self._factor**self._attempt, self._max)
        if delay < self._max:
            self._attempt += 1
        if self._jitter:
            delay *= 1.0 - self._jitter + 2.0 * self._jitter * self._rng()
        return min(max(delay, 0.0), self._max)
