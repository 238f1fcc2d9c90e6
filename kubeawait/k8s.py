"""Thin kubernetes-asyncio wrapper used by discovery and the watch subscription.

Resources are handled as plain JSON trees rather than generated model
classes: any resource type served by the cluster, custom resources included,
can be listed and watched through the same two calls.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import structlog
from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]
from kubernetes_asyncio import config as k8s_config  # type: ignore[import-untyped]
from kubernetes_asyncio.client.exceptions import ApiException  # type: ignore[import-untyped]

from kubeawait.errors import ClusterConnectionError
from kubeawait.models.resources import ResourceDescriptor

_log = structlog.get_logger(component="k8s")

_SERVICE_ACCOUNT_NAMESPACE = Path("/var/run/secrets/kubernetes.io/serviceaccount/namespace")
_DEFAULT_NAMESPACE = "default"
_AUTH_SETTINGS = ["BearerToken"]
_JSON_HEADERS = {"Accept": "application/json"}

QueryParams = list[tuple[str, str]]


def collection_path(descriptor: ResourceDescriptor, namespace: str | None = None) -> str:
    """Return the API path of the collection holding *descriptor* objects.

    *namespace* is ignored for cluster-scoped resources.
    """
    prefix = f"/apis/{descriptor.group}/{descriptor.version}" if descriptor.group else f"/api/{descriptor.version}"
    if descriptor.is_namespaced and namespace:
        prefix = f"{prefix}/namespaces/{namespace}"
    return f"{prefix}/{descriptor.plural}"


def _kubeconfig_namespace() -> str | None:
    try:
        _, active_context = k8s_config.list_kube_config_contexts()
    except (k8s_config.ConfigException, OSError):
        return None
    if not active_context:
        return None
    return active_context.get("context", {}).get("namespace") or None


class ClusterClient:
    """Owns a kubernetes-asyncio ApiClient for the lifetime of one run.

    Use ``ClusterClient.connect()`` to load in-cluster or kubeconfig
    credentials; tests construct it directly around a stub ApiClient.
    """

    def __init__(self, api_client: Any, default_namespace: str = _DEFAULT_NAMESPACE) -> None:
        self._api = api_client
        self.default_namespace = default_namespace

    @classmethod
    async def connect(cls) -> ClusterClient:
        """Configure credentials from the service account, then kubeconfig."""
        try:
            try:
                # load_incluster_config() is synchronous in kubernetes-asyncio
                k8s_config.load_incluster_config()
                namespace = _SERVICE_ACCOUNT_NAMESPACE.read_text().strip() or _DEFAULT_NAMESPACE
                _log.info("k8s_client_configured", source="incluster", namespace=namespace)
            except k8s_config.ConfigException:
                # load_kube_config() is async in kubernetes-asyncio
                await k8s_config.load_kube_config()
                namespace = _kubeconfig_namespace() or _DEFAULT_NAMESPACE
                _log.info("k8s_client_configured", source="kubeconfig", namespace=namespace)
        except (k8s_config.ConfigException, OSError) as exc:
            raise ClusterConnectionError(f"failed to load Kubernetes client configuration: {exc}") from exc
        return cls(k8s_client.ApiClient(), default_namespace=namespace)

    async def close(self) -> None:
        """Close the ApiClient connection pool."""
        await self._api.close()

    async def _request(self, path: str, query: QueryParams | None, timeout: float | None) -> Any:
        response = await self._api.call_api(
            path,
            "GET",
            query_params=query or [],
            header_params=dict(_JSON_HEADERS),
            auth_settings=_AUTH_SETTINGS,
            _preload_content=False,
            _request_timeout=timeout,
        )
        if not 200 <= response.status <= 299:
            body = await response.text()
            response.release()
            exc = ApiException(status=response.status, reason=response.reason)
            exc.body = body
            raise exc
        return response

    async def get_json(self, path: str, query: QueryParams | None = None) -> Any:
        """GET *path* and return the decoded JSON body.

        Raises:
            ApiException: on a non-2xx status.
        """
        response = await self._request(path, query, None)
        try:
            return json.loads(await response.read())
        finally:
            response.release()

    @asynccontextmanager
    async def stream_lines(
        self,
        path: str,
        query: QueryParams | None = None,
        timeout: float | None = None,
    ) -> AsyncIterator[AsyncIterator[bytes]]:
        """Open a streaming GET of *path* and yield its body line by line.

        The underlying response is released when the context exits, including
        on cancellation.
        """
        response = await self._request(path, query, timeout)
        try:
            yield response.content
        finally:
            # An unfinished watch body cannot go back to the pool.
            response.close()
