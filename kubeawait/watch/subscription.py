"""Self-reconnecting list-then-watch subscription for one named object.

The subscription lists the collection (narrowed by ``metadata.name``),
emits the snapshot as a Restarted event, then watches from the list's
resourceVersion.  Failures are handled here and never reach the consumer:

* watch ERROR 410 (resourceVersion too old): relist immediately;
* any other API error, connection error or read timeout: log, sleep the
  back-off delay, relist;
* a watch response that ends normally (server-side timeout): resume from
  the last seen resourceVersion.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import aclosing
from types import TracebackType
from typing import Any, Protocol

import aiohttp
import structlog
from kubernetes_asyncio.client.exceptions import ApiException  # type: ignore[import-untyped]

from kubeawait.errors import TransientStreamError
from kubeawait.k8s import QueryParams, collection_path
from kubeawait.models.events import Applied, Deleted, Restarted, WatchEvent
from kubeawait.models.resources import ResourceDescriptor
from kubeawait.watch.backoff import ExponentialBackoff

_log = structlog.get_logger(component="watch.subscription")

_HTTP_GONE = 410
_END = object()
# Client-side read timeout on top of the server-side watch timeout.
_REQUEST_TIMEOUT_SLACK_SECONDS = 30


class WatchClient(Protocol):
    """The two ClusterClient calls a subscription needs."""

    async def get_json(self, path: str, query: QueryParams | None = None) -> Any: ...

    def stream_lines(
        self,
        path: str,
        query: QueryParams | None = None,
        timeout: float | None = None,
    ) -> Any: ...


class _ResourceVersionExpired(Exception):
    """The watch resourceVersion is no longer served; a relist is required."""


def _resource_version(obj: Any) -> str | None:
    if not isinstance(obj, dict):
        return None
    metadata = obj.get("metadata") or {}
    rv = metadata.get("resourceVersion")
    return str(rv) if rv else None


class ResourceSubscription:
    """Async iterator of WatchEvent for a single resource.

    Use as an async context manager so the in-flight request is released on
    every exit path::

        async with ResourceSubscription(client, descriptor, "web") as events:
            async for event in events:
                ...
    """

    def __init__(
        self,
        client: WatchClient,
        descriptor: ResourceDescriptor,
        name: str,
        namespace: str | None = None,
        backoff: ExponentialBackoff | None = None,
        watch_timeout_seconds: int = 290,
    ) -> None:
        self._client = client
        self._descriptor = descriptor
        self._name = name
        self._namespace = namespace if descriptor.is_namespaced else None
        self._backoff = backoff or ExponentialBackoff()
        self._watch_timeout = watch_timeout_seconds
        self._path = collection_path(descriptor, self._namespace)
        self._resource_version: str | None = None
        self._events: AsyncGenerator[WatchEvent, None] | None = None
        self._step: asyncio.Task[Any] | None = None
        self._closing = False
        self._closed = False

    @property
    def path(self) -> str:
        return self._path

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> ResourceSubscription:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def __aiter__(self) -> AsyncIterator[WatchEvent]:
        return self

    async def __anext__(self) -> WatchEvent:
        if self._closing:
            raise StopAsyncIteration
        if self._events is None:
            self._events = self._run()
        # The pending step runs as its own task so close() can cancel it
        # from another task.
        self._step = asyncio.create_task(self._next_event(self._events))
        try:
            event = await self._step
        except asyncio.CancelledError:
            task = asyncio.current_task()
            if self._closing and task is not None and not task.cancelling():
                raise StopAsyncIteration from None
            raise
        finally:
            self._step = None
        if event is _END:
            raise StopAsyncIteration
        return event

    @staticmethod
    async def _next_event(events: AsyncGenerator[WatchEvent, None]) -> Any:
        try:
            return await events.__anext__()
        except StopAsyncIteration:
            return _END

    async def close(self) -> None:
        """Stop the subscription and release the in-flight request.

        Safe to call from a task other than the one reading events; a reader
        blocked on the next event sees the iteration end.
        """
        if self._closed:
            return
        self._closing = True
        step = self._step
        if step is not None and not step.done():
            step.cancel()
            await asyncio.wait([step])
        if self._events is not None:
            await self._events.aclose()
        self._closed = True
        _log.debug("subscription_closed", path=self._path, name=self._name)

    # ------------------------------------------------------------------
    # Event production
    # ------------------------------------------------------------------

    async def _run(self) -> AsyncGenerator[WatchEvent, None]:
        log = _log.bind(path=self._path, name=self._name)
        while not self._closing:
            try:
                if self._resource_version is None:
                    yield await self._relist()
                async with aclosing(self._watch()) as events:
                    async for event in events:
                        yield event
                log.debug("watch_resumed", resource_version=self._resource_version)
            except _ResourceVersionExpired:
                log.info("watch_relist", reason="resource version expired")
                self._resource_version = None
            except TransientStreamError as exc:
                delay = self._backoff.next_delay()
                log.warning(
                    "watch_stream_error",
                    error=str(exc),
                    retry_in_seconds=round(delay, 3),
                    attempt=self._backoff.attempt,
                )
                self._resource_version = None
                await asyncio.sleep(delay)

    async def _relist(self) -> Restarted:
        query: QueryParams = [("fieldSelector", f"metadata.name={self._name}")]
        try:
            body = await self._client.get_json(self._path, query)
        except (ApiException, aiohttp.ClientError, TimeoutError, ValueError) as exc:
            raise TransientStreamError(f"list {self._path} failed: {exc}") from exc

        items = tuple(body.get("items") or ())
        self._resource_version = _resource_version(body)
        _log.debug("watch_listed", path=self._path, items=len(items), resource_version=self._resource_version)
        return Restarted(items)

    async def _watch(self) -> AsyncGenerator[WatchEvent, None]:
        query: QueryParams = [
            ("watch", "true"),
            ("fieldSelector", f"metadata.name={self._name}"),
            ("allowWatchBookmarks", "true"),
            ("timeoutSeconds", str(self._watch_timeout)),
        ]
        if self._resource_version:
            query.append(("resourceVersion", self._resource_version))

        try:
            async with self._client.stream_lines(
                self._path,
                query,
                timeout=self._watch_timeout + _REQUEST_TIMEOUT_SLACK_SECONDS,
            ) as lines:
                async for line in lines:
                    if not line.strip():
                        continue
                    event = self._decode(json.loads(line))
                    if event is not None:
                        yield event
        except (ApiException, aiohttp.ClientError, TimeoutError, ValueError) as exc:
            raise TransientStreamError(f"watch {self._path} failed: {exc}") from exc

    def _decode(self, raw: dict[str, Any]) -> WatchEvent | None:
        event_type = raw.get("type")
        obj = raw.get("object")

        if event_type == "ERROR":
            status = obj if isinstance(obj, dict) else {}
            if status.get("code") == _HTTP_GONE:
                raise _ResourceVersionExpired()
            raise TransientStreamError(f"watch error event: {status.get('message') or status}")

        rv = _resource_version(obj)
        if rv:
            self._resource_version = rv

        if event_type in ("ADDED", "MODIFIED"):
            return Applied(obj)
        if event_type == "DELETED":
            return Deleted(obj)
        if event_type != "BOOKMARK":
            _log.debug("watch_event_ignored", event_type=event_type)
        return None
