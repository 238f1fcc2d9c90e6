"""Tests for ResourceFilterCriteria and resolve_resource()."""

from __future__ import annotations

import pytest

from kubeawait.discovery.resolver import resolve_resource
from kubeawait.errors import AmbiguousResourceError, ResourceNotFoundError
from kubeawait.models.resources import (
    CatalogEntry,
    ResourceCapabilities,
    ResourceDescriptor,
    ResourceFilterCriteria,
    Scope,
)

# ---------------------------------------------------------------------------
# Helper factories
# ---------------------------------------------------------------------------


def _entry(
    group: str,
    version: str,
    kind: str,
    plural: str,
    scope: Scope = Scope.NAMESPACED,
) -> CatalogEntry:
    return (
        ResourceDescriptor.build(group=group, version=version, kind=kind, plural=plural, scope=scope),
        ResourceCapabilities(scope=scope, verbs=("get", "list", "watch")),
    )


def _catalog() -> list[CatalogEntry]:
    return [
        _entry("", "v1", "Pod", "pods"),
        _entry("", "v1", "Node", "nodes", Scope.CLUSTER),
        _entry("apps", "v1", "Deployment", "deployments"),
        _entry("extensions", "v1beta1", "Deployment", "deployments"),
        _entry("example.com", "v1", "Widget", "widgets"),
        _entry("other.io", "v1", "Widget", "gadgets"),
    ]


# ---------------------------------------------------------------------------
# ResourceDescriptor
# ---------------------------------------------------------------------------


class TestResourceDescriptor:
    def test_core_group_api_version(self) -> None:
        descriptor, _ = _entry("", "v1", "Pod", "pods")
        assert descriptor.api_version == "v1"

    def test_named_group_api_version(self) -> None:
        descriptor, _ = _entry("apps", "v1", "Deployment", "deployments")
        assert descriptor.api_version == "apps/v1"

    def test_scope(self) -> None:
        assert _entry("", "v1", "Pod", "pods")[0].is_namespaced is True
        assert _entry("", "v1", "Node", "nodes", Scope.CLUSTER)[0].is_namespaced is False

    def test_is_immutable(self) -> None:
        descriptor, _ = _entry("", "v1", "Pod", "pods")
        with pytest.raises(AttributeError):
            descriptor.kind = "Node"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# ResourceFilterCriteria.matches
# ---------------------------------------------------------------------------


class TestCriteriaMatches:
    def test_kind_only(self) -> None:
        descriptor, _ = _entry("apps", "v1", "Deployment", "deployments")
        assert ResourceFilterCriteria(kind="Deployment").matches(descriptor) is True

    def test_kind_is_case_sensitive(self) -> None:
        descriptor, _ = _entry("apps", "v1", "Deployment", "deployments")
        assert ResourceFilterCriteria(kind="deployment").matches(descriptor) is False

    def test_group_mismatch(self) -> None:
        descriptor, _ = _entry("apps", "v1", "Deployment", "deployments")
        assert ResourceFilterCriteria(kind="Deployment", group="extensions").matches(descriptor) is False

    def test_version_mismatch(self) -> None:
        descriptor, _ = _entry("apps", "v1", "Deployment", "deployments")
        assert ResourceFilterCriteria(kind="Deployment", version="v1beta1").matches(descriptor) is False

    def test_api_version(self) -> None:
        descriptor, _ = _entry("apps", "v1", "Deployment", "deployments")
        assert ResourceFilterCriteria(kind="Deployment", api_version="apps/v1").matches(descriptor) is True
        assert ResourceFilterCriteria(kind="Deployment", api_version="v1").matches(descriptor) is False

    def test_plural_compared_against_plural_name(self) -> None:
        descriptor, _ = _entry("apps", "v1", "Deployment", "deployments")
        assert ResourceFilterCriteria(kind="Deployment", plural="deployments").matches(descriptor) is True
        assert ResourceFilterCriteria(kind="Deployment", plural="apps/v1").matches(descriptor) is False

    def test_describe_lists_only_set_fields(self) -> None:
        criteria = ResourceFilterCriteria(kind="Deployment", group="apps")
        assert criteria.describe() == "kind=Deployment, group=apps"


# ---------------------------------------------------------------------------
# resolve_resource
# ---------------------------------------------------------------------------


class TestResolveResource:
    def test_single_match(self) -> None:
        descriptor, capabilities = resolve_resource(ResourceFilterCriteria(kind="Pod"), _catalog())
        assert descriptor.plural == "pods"
        assert descriptor.api_version == "v1"
        assert capabilities.supports("watch")

    def test_no_match_raises_not_found(self) -> None:
        with pytest.raises(ResourceNotFoundError, match="No API resources matching"):
            resolve_resource(ResourceFilterCriteria(kind="CronJob"), _catalog())

    def test_empty_catalog_raises_not_found(self) -> None:
        with pytest.raises(ResourceNotFoundError):
            resolve_resource(ResourceFilterCriteria(kind="Pod"), [])

    def test_multiple_matches_raise_ambiguous(self) -> None:
        with pytest.raises(AmbiguousResourceError, match="narrowing") as exc_info:
            resolve_resource(ResourceFilterCriteria(kind="Deployment"), _catalog())
        assert {c.api_version for c in exc_info.value.candidates} == {"apps/v1", "extensions/v1beta1"}

    def test_group_narrows_ambiguity(self) -> None:
        descriptor, _ = resolve_resource(ResourceFilterCriteria(kind="Deployment", group="apps"), _catalog())
        assert descriptor.api_version == "apps/v1"

    def test_plural_narrows_ambiguity(self) -> None:
        descriptor, _ = resolve_resource(ResourceFilterCriteria(kind="Widget", plural="gadgets"), _catalog())
        assert descriptor.group == "other.io"

    def test_non_matching_narrowing_field_raises_not_found(self) -> None:
        with pytest.raises(ResourceNotFoundError):
            resolve_resource(ResourceFilterCriteria(kind="Pod", group="apps"), _catalog())

    def test_accepts_any_iterable_catalog(self) -> None:
        descriptor, _ = resolve_resource(ResourceFilterCriteria(kind="Node"), iter(_catalog()))
        assert descriptor.scope == Scope.CLUSTER
