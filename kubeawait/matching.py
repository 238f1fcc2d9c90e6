"""Structural partial matching of a state filter against a resource state.

The filter is a sparse tree with the same shape as the resource document:

* mappings require a subset of keys; extra keys in the document are ignored;
* sequences require every filter element to match every document element;
* everything else is compared as a canonical scalar.

Every node is classified into a NodeKind before comparison so that each
variant is handled explicitly; values of any other Python type are rejected.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import StrEnum
from typing import Any


class NodeKind(StrEnum):
    """Variants of a generic state tree node."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def node_kind(value: Any) -> NodeKind:
    """Classify *value* into its NodeKind.

    Raises:
        TypeError: if *value* is not a JSON/YAML-representable tree node.
    """
    if value is None:
        return NodeKind.NULL
    # bool is an int subclass: check it first.
    if isinstance(value, bool):
        return NodeKind.BOOL
    if isinstance(value, (int, float)):
        return NodeKind.NUMBER
    if isinstance(value, str):
        return NodeKind.STRING
    if isinstance(value, Mapping):
        return NodeKind.MAPPING
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return NodeKind.SEQUENCE
    raise TypeError(f"unsupported state node type: {type(value).__name__}")


def canonical_scalar(value: Any) -> tuple[NodeKind, Any]:
    """Normalize *value* to a ``(kind, value)`` pair for equality checks.

    Numbers compare by value regardless of int/float representation; a bool
    never equals a number because the kinds differ.  Containers are
    canonicalized recursively so that mismatched containers compare by
    content when they meet on the scalar path.
    """
    kind = node_kind(value)
    if kind == NodeKind.MAPPING:
        items = ((str(k), canonical_scalar(v)) for k, v in value.items())
        return kind, tuple(sorted(items, key=lambda item: item[0]))
    if kind == NodeKind.SEQUENCE:
        return kind, tuple(canonical_scalar(v) for v in value)
    if kind == NodeKind.NUMBER:
        return kind, float(value) if isinstance(value, float) and not value.is_integer() else int(value)
    return kind, value


def match_state(state_filter: Any, state: Any) -> bool:
    """Return True if *state* satisfies *state_filter*.

    Pure: neither argument is modified.
    """
    filter_kind = node_kind(state_filter)
    state_kind = node_kind(state)

    if filter_kind == NodeKind.MAPPING and state_kind == NodeKind.MAPPING:
        for key, expected in state_filter.items():
            if key not in state:
                return False
            if not match_state(expected, state[key]):
                return False
        return True

    if filter_kind == NodeKind.SEQUENCE and state_kind == NodeKind.SEQUENCE:
        # All-against-all: each filter element must match each document element.
        return all(match_state(expected, actual) for expected in state_filter for actual in state)

    return canonical_scalar(state_filter) == canonical_scalar(state)
