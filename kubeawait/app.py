"""Orchestration for one kubeawait run.

Order: state filter → K8s client → catalog discovery → resolution →
       subscription → watch under deadline → YAML rendering

The filter is loaded before any cluster I/O so that input errors fail fast.
The K8s client is closed on every path; nothing is rendered unless a state
matched.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from kubeawait.discovery import discover_resources, resolve_resource
from kubeawait.documents import dump_state, load_state_filter
from kubeawait.k8s import ClusterClient
from kubeawait.models.config import KubeAwaitConfig
from kubeawait.models.resources import ResourceDescriptor, ResourceFilterCriteria
from kubeawait.watch import ExponentialBackoff, ResourceSubscription, await_state

_log = structlog.get_logger(component="app")


@dataclass(frozen=True)
class WaitRequest:
    """Everything the user supplied for one run."""

    criteria: ResourceFilterCriteria
    name: str
    namespace: str | None = None
    timeout: float | None = None
    filter_path: str | Path | None = None


def _target_namespace(descriptor: ResourceDescriptor, request: WaitRequest, client: ClusterClient) -> str | None:
    if not descriptor.is_namespaced:
        return None
    return request.namespace or client.default_namespace


async def wait_for_state(
    request: WaitRequest,
    config: KubeAwaitConfig,
    client: ClusterClient,
    state_filter: Any,
) -> Any:
    """Resolve the resource type and block until its state matches."""
    catalog = await discover_resources(client)
    descriptor, _ = resolve_resource(request.criteria, catalog)
    namespace = _target_namespace(descriptor, request, client)

    log = _log.bind(
        api_version=descriptor.api_version,
        kind=descriptor.kind,
        name=request.name,
        namespace=namespace,
    )
    log.info("watch_started", timeout_seconds=request.timeout)

    subscription = ResourceSubscription(
        client,
        descriptor,
        request.name,
        namespace=namespace,
        backoff=ExponentialBackoff.from_config(config.backoff),
        watch_timeout_seconds=config.watch.timeout_seconds,
    )
    state = await await_state(subscription, state_filter, timeout=request.timeout)
    log.info("watch_matched")
    return state


async def run(request: WaitRequest, config: KubeAwaitConfig) -> str:
    """Execute *request* and return the matched state rendered as YAML.

    Raises:
        KubeAwaitError: any fatal failure; nothing has been rendered.
    """
    state_filter = load_state_filter(request.filter_path)

    client = await ClusterClient.connect()
    try:
        state = await wait_for_state(request, config, client, state_filter)
    finally:
        await client.close()

    return dump_state(state)
