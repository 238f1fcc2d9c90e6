"""Consume watch events until the resource state matches the filter."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterable
from typing import Any, Protocol

import structlog

from kubeawait.errors import StreamEndedError, WatchTimeoutError
from kubeawait.matching import match_state
from kubeawait.models.events import Applied, Deleted, Restarted, WatchEvent

_log = structlog.get_logger(component="watch")


class Subscription(AsyncIterable[WatchEvent], Protocol):
    """An event stream the watch loop owns and must close on exit."""

    async def close(self) -> None: ...


async def watch_until_match(events: AsyncIterable[WatchEvent], state_filter: Any) -> Any:
    """Return the first state in *events* that matches *state_filter*.

    Stops consuming as soon as a match is found.

    Raises:
        StreamEndedError: the stream finished without a match.
    """
    async for event in events:
        if isinstance(event, Applied):
            if match_state(state_filter, event.state):
                _log.debug("state_matched", source="applied")
                return event.state
            _log.debug("state_not_matched", source="applied")
        elif isinstance(event, Restarted):
            for state in event.states:
                if match_state(state_filter, state):
                    _log.debug("state_matched", source="restarted", snapshots=len(event.states))
                    return state
            _log.debug("state_not_matched", source="restarted", snapshots=len(event.states))
        elif isinstance(event, Deleted):
            _log.debug("resource_deleted")
        else:
            raise TypeError(f"unexpected watch event: {event!r}")

    raise StreamEndedError()


async def await_state(
    subscription: Subscription,
    state_filter: Any,
    timeout: float | None = None,
) -> Any:
    """Race :func:`watch_until_match` against an optional deadline.

    The subscription is closed on every exit path: match, stream end,
    timeout, error or cancellation.  ``timeout=None`` waits indefinitely.

    Raises:
        WatchTimeoutError: *timeout* seconds elapsed before a match.
        StreamEndedError: the stream finished without a match.
    """
    deadline = asyncio.timeout(timeout)
    try:
        async with deadline:
            return await watch_until_match(subscription, state_filter)
    except TimeoutError as exc:
        if not deadline.expired():
            raise
        _log.info("watch_timeout", timeout_seconds=timeout)
        raise WatchTimeoutError(timeout if timeout is not None else 0.0) from exc
    finally:
        await subscription.close()
