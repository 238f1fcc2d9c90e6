"""Core data structures for kubeawait."""

from kubeawait.models.config import BackoffConfig, KubeAwaitConfig, LogConfig, WatchConfig
from kubeawait.models.events import (
    Applied,
    Deleted,
    Restarted,
    WatchEvent,
    WatchEventType,
)
from kubeawait.models.resources import (
    CatalogEntry,
    ResourceCapabilities,
    ResourceDescriptor,
    ResourceFilterCriteria,
    Scope,
)

__all__ = [
    "Applied",
    "BackoffConfig",
    "CatalogEntry",
    "Deleted",
    "KubeAwaitConfig",
    "LogConfig",
    "ResourceCapabilities",
    "ResourceDescriptor",
    "ResourceFilterCriteria",
    "Restarted",
    "Scope",
    "WatchConfig",
    "WatchEvent",
    "WatchEventType",
]
