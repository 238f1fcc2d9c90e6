"""Shared fixtures for kubeawait integration tests.

Provides a FakeClusterClient that serves discovery documents, collection
lists and scripted watch streams, so the full run (discovery → resolution →
subscription → matching → rendering) can be exercised without a cluster.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import pytest

# ---------------------------------------------------------------------------
# Object factories
# ---------------------------------------------------------------------------


def make_deployment(name: str = "web", ready: int = 0, replicas: int = 3, rv: str = "1") -> dict[str, Any]:
    """Create a Deployment state with sensible defaults for testing."""
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {"name": name, "namespace": "default", "resourceVersion": rv},
        "spec": {"replicas": replicas},
        "status": {"replicas": replicas, "readyReplicas": ready},
    }


def watch_line(event_type: str, obj: dict[str, Any]) -> bytes:
    return json.dumps({"type": event_type, "object": obj}).encode() + b"\n"


def _resource(name: str, kind: str, namespaced: bool = True) -> dict[str, Any]:
    return {"name": name, "kind": kind, "namespaced": namespaced, "verbs": ["get", "list", "watch"]}


DISCOVERY: dict[str, Any] = {
    "/api": {"versions": ["v1"]},
    "/api/v1": {
        "resources": [
            _resource("pods", "Pod"),
            _resource("namespaces", "Namespace", namespaced=False),
        ]
    },
    "/apis": {
        "groups": [
            {
                "name": "apps",
                "versions": [{"version": "v1"}],
                "preferredVersion": {"version": "v1"},
            },
            {
                "name": "extensions",
                "versions": [{"version": "v1beta1"}],
                "preferredVersion": {"version": "v1beta1"},
            },
        ]
    },
    "/apis/apps/v1": {"resources": [_resource("deployments", "Deployment"), _resource("deployments/scale", "Scale")]},
    "/apis/extensions/v1beta1": {"resources": [_resource("deployments", "Deployment")]},
}


# ---------------------------------------------------------------------------
# Fake cluster client
# ---------------------------------------------------------------------------


class FakeClusterClient:
    """Stand-in for kubeawait.k8s.ClusterClient.

    ``lists[path]`` is a queue of list bodies; ``watches[path]`` a queue of
    line scripts.  A watch with no script left blocks until cancelled.
    """

    def __init__(self, default_namespace: str = "default") -> None:
        self.default_namespace = default_namespace
        self.discovery: dict[str, Any] = dict(DISCOVERY)
        self.lists: dict[str, list[dict[str, Any]]] = {}
        self.watches: dict[str, list[list[bytes]]] = {}
        self.requested: list[str] = []
        self.open_streams = 0
        self.closed = False

    async def get_json(self, path: str, query: list[tuple[str, str]] | None = None) -> Any:
        self.requested.append(path)
        if query:
            return self.lists[path].pop(0)
        return self.discovery[path]

    @asynccontextmanager
    async def stream_lines(
        self,
        path: str,
        query: list[tuple[str, str]] | None = None,
        timeout: float | None = None,
    ) -> AsyncIterator[AsyncIterator[bytes]]:
        self.requested.append(path)
        scripts = self.watches.get(path) or []
        script = scripts.pop(0) if scripts else None
        self.open_streams += 1
        try:
            yield self._lines(script)
        finally:
            self.open_streams -= 1

    @staticmethod
    async def _lines(script: list[bytes] | None) -> AsyncIterator[bytes]:
        if script is None:
            await asyncio.Event().wait()
            return
        for line in script:
            yield line

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_cluster() -> FakeClusterClient:
    return FakeClusterClient()


@pytest.fixture
def ready_filter_file(tmp_path: Path) -> Path:
    path = tmp_path / "filter.yaml"
    path.write_text("status:\n  readyReplicas: 3\n")
    return path
