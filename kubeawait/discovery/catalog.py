"""Catalog query: list the recommended resources of every served API group."""

from __future__ import annotations

import asyncio
from typing import Any, Protocol

import aiohttp
import structlog
from kubernetes_asyncio.client.exceptions import ApiException  # type: ignore[import-untyped]

from kubeawait.errors import ClusterConnectionError
from kubeawait.k8s import QueryParams
from kubeawait.models.resources import (
    CatalogEntry,
    ResourceCapabilities,
    ResourceDescriptor,
    Scope,
)

_log = structlog.get_logger(component="discovery.catalog")

_REQUEST_ERRORS = (ApiException, aiohttp.ClientError, TimeoutError, ValueError)


class DiscoveryClient(Protocol):
    async def get_json(self, path: str, query: QueryParams | None = None) -> Any: ...


def _group_version_path(group: str, version: str) -> str:
    return f"/apis/{group}/{version}" if group else f"/api/{version}"


def _ordered_versions(group: dict[str, Any]) -> list[str]:
    """Return the group's versions with the preferred one first."""
    versions = [v["version"] for v in group.get("versions", []) if v.get("version")]
    preferred = (group.get("preferredVersion") or {}).get("version")
    if preferred in versions:
        versions.remove(preferred)
        versions.insert(0, preferred)
    return versions


async def _fetch_resource_list(client: DiscoveryClient, group: str, version: str) -> list[dict[str, Any]] | None:
    path = _group_version_path(group, version)
    try:
        body = await client.get_json(path)
    except _REQUEST_ERRORS as exc:
        # Aggregated API servers may be unavailable; skip rather than fail.
        _log.warning("discovery_group_version_failed", path=path, error=str(exc))
        return None
    return list(body.get("resources") or [])


def recommended_resources(
    group: str,
    versions: list[str],
    resource_lists: list[list[dict[str, Any]] | None],
) -> list[CatalogEntry]:
    """Pick one entry per kind: the first version in *versions* serving it.

    *versions* must be ordered preferred first; subresources are skipped.
    """
    entries: list[CatalogEntry] = []
    seen_kinds: set[str] = set()
    for version, resources in zip(versions, resource_lists):
        for resource in resources or []:
            name = resource.get("name", "")
            kind = resource.get("kind", "")
            if not name or not kind or "/" in name or kind in seen_kinds:
                continue
            seen_kinds.add(kind)
            scope = Scope.NAMESPACED if resource.get("namespaced") else Scope.CLUSTER
            descriptor = ResourceDescriptor.build(
                group=group,
                version=version,
                kind=kind,
                plural=name,
                scope=scope,
            )
            capabilities = ResourceCapabilities(scope=scope, verbs=tuple(resource.get("verbs") or ()))
            entries.append((descriptor, capabilities))
    return entries


async def discover_resources(client: DiscoveryClient) -> list[CatalogEntry]:
    """Query the API server for every watchable resource type.

    Raises:
        ClusterConnectionError: the core or group list could not be fetched.
    """
    try:
        core = await client.get_json("/api")
        group_list = await client.get_json("/apis")
    except _REQUEST_ERRORS as exc:
        raise ClusterConnectionError(f"failed to discover API groups: {exc}") from exc

    groups: list[tuple[str, list[str]]] = [("", list(core.get("versions") or []))]
    for group in group_list.get("groups") or []:
        groups.append((group.get("name", ""), _ordered_versions(group)))

    fetches = [
        asyncio.gather(*(_fetch_resource_list(client, name, version) for version in versions))
        for name, versions in groups
    ]
    results = await asyncio.gather(*fetches)

    catalog: list[CatalogEntry] = []
    for (name, versions), resource_lists in zip(groups, results):
        catalog.extend(recommended_resources(name, versions, list(resource_lists)))

    _log.info("discovery_complete", groups=len(groups), resources=len(catalog))
    return catalog
