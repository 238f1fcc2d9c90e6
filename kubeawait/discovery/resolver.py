"""Pick exactly one resource type from the discovered catalog."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from kubeawait.errors import AmbiguousResourceError, ResourceNotFoundError
from kubeawait.models.resources import CatalogEntry, ResourceFilterCriteria

_log = structlog.get_logger(component="discovery.resolver")


def resolve_resource(criteria: ResourceFilterCriteria, catalog: Iterable[CatalogEntry]) -> CatalogEntry:
    """Return the single catalog entry satisfying *criteria*.

    Raises:
        ResourceNotFoundError: no entry matches.
        AmbiguousResourceError: two or more entries match.
    """
    found = [entry for entry in catalog if criteria.matches(entry[0])]

    if not found:
        raise ResourceNotFoundError(criteria)
    if len(found) > 1:
        raise AmbiguousResourceError(criteria, [descriptor for descriptor, _ in found])

    descriptor, capabilities = found[0]
    _log.debug(
        "resource_resolved",
        api_version=descriptor.api_version,
        kind=descriptor.kind,
        plural=descriptor.plural,
        scope=str(descriptor.scope),
    )
    return descriptor, capabilities
