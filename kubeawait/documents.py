"""Reading the state filter and rendering the matched state as YAML."""

from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import Any, TextIO

from ruamel.yaml import YAML
from ruamel.yaml.constructor import SafeConstructor
from ruamel.yaml.error import YAMLError

from kubeawait.errors import InputError
from kubeawait.matching import NodeKind, node_kind

STDIN_PATH = "-"


class _FilterConstructor(SafeConstructor):
    """Safe constructor that keeps timestamps as strings.

    Resource states arrive as JSON where timestamps are strings; a filter
    must compare against them verbatim.
    """


_FilterConstructor.add_constructor("tag:yaml.org,2002:timestamp", SafeConstructor.construct_yaml_str)


def _loader() -> YAML:
    yaml = YAML(typ="safe", pure=True)
    yaml.Constructor = _FilterConstructor
    return yaml


def _dumper() -> YAML:
    yaml = YAML(typ="safe", pure=True)
    yaml.default_flow_style = False
    # Keep the key order the API server sent.
    yaml.sort_base_mapping_type_on_output = False
    return yaml


def parse_state_filter(text: str) -> Any:
    """Parse *text* as a single YAML document.

    Raises:
        InputError: the text is not valid YAML, or holds values (such as
            ``!!binary`` or ``!!set``) that a resource state cannot contain.
    """
    try:
        state_filter = _loader().load(text)
    except YAMLError as exc:
        raise InputError(f"failed to deserialize state filter: {exc}") from exc
    try:
        _check_nodes(state_filter)
    except TypeError as exc:
        raise InputError(f"invalid state filter: {exc}") from exc
    return state_filter


def _check_nodes(value: Any) -> None:
    kind = node_kind(value)
    if kind == NodeKind.MAPPING:
        for key, child in value.items():
            node_kind(key)
            _check_nodes(child)
    elif kind == NodeKind.SEQUENCE:
        for child in value:
            _check_nodes(child)


def load_state_filter(path: str | Path | None = None, stdin: TextIO | None = None) -> Any:
    """Read and parse the state filter from *path*.

    ``None`` or ``"-"`` reads standard input.

    Raises:
        InputError: the source cannot be read or does not parse.
    """
    if path is None or str(path) == STDIN_PATH:
        source = stdin or sys.stdin
        try:
            text = source.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise InputError(f"failed to read state filter from standard input: {exc}") from exc
    else:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise InputError(f"failed to read state filter from file: {exc}") from exc
    return parse_state_filter(text)


def dump_state(state: Any) -> str:
    """Render *state* as a YAML document."""
    stream = io.StringIO()
    _dumper().dump(state, stream)
    return stream.getvalue()
