"""Resource discovery for kubeawait.

Submodules
----------
catalog  -- discover_resources: recommended resources of every served API group.
resolver -- resolve_resource: narrow the catalog down to exactly one entry.
"""

from kubeawait.discovery.catalog import discover_resources
from kubeawait.discovery.resolver import resolve_resource

__all__ = ["discover_resources", "resolve_resource"]
