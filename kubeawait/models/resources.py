"""API resource descriptors and the criteria used to select one."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import StrEnum


class Scope(StrEnum):
    """Whether a resource lives in a namespace or cluster-wide."""

    CLUSTER = "cluster"
    NAMESPACED = "namespaced"


@dataclass(frozen=True)
class ResourceDescriptor:
    """Identity of a watchable resource type.

    Produced once by catalog discovery and read-only thereafter.
    ``api_version`` is ``"v1"`` for the core group and ``"<group>/<version>"``
    for every other group.
    """

    group: str
    version: str
    api_version: str
    kind: str
    plural: str
    scope: Scope

    @classmethod
    def build(cls, group: str, version: str, kind: str, plural: str, scope: Scope) -> ResourceDescriptor:
        api_version = f"{group}/{version}" if group else version
        return cls(
            group=group,
            version=version,
            api_version=api_version,
            kind=kind,
            plural=plural,
            scope=scope,
        )

    @property
    def is_namespaced(self) -> bool:
        return self.scope == Scope.NAMESPACED


@dataclass(frozen=True)
class ResourceCapabilities:
    """Scope and verbs advertised by the API server for a resource."""

    scope: Scope
    verbs: tuple[str, ...] = ()

    def supports(self, verb: str) -> bool:
        return verb in self.verbs


CatalogEntry = tuple[ResourceDescriptor, ResourceCapabilities]


@dataclass(frozen=True)
class ResourceFilterCriteria:
    """User-supplied narrowing criteria.

    ``kind`` must equal the descriptor's kind exactly.  Every other field is
    optional; ``None`` acts as a wildcard.
    """

    kind: str
    group: str | None = None
    version: str | None = None
    api_version: str | None = None
    plural: str | None = None

    def matches(self, descriptor: ResourceDescriptor) -> bool:
        """Return True if *descriptor* satisfies every non-wildcard criterion."""
        if self.group is not None and self.group != descriptor.group:
            return False
        if self.version is not None and self.version != descriptor.version:
            return False
        if self.api_version is not None and self.api_version != descriptor.api_version:
            return False
        if self.kind != descriptor.kind:
            return False
        # Compared against the plural name, not apiVersion.
        return self.plural is None or self.plural == descriptor.plural

    def describe(self) -> str:
        """Render the non-wildcard criteria as ``key=value`` pairs."""
        parts = [f"{f.name}={getattr(self, f.name)}" for f in fields(self) if getattr(self, f.name) is not None]
        return ", ".join(parts)
