"""Dotted-path lookup into a parsed JSON tree.

Missing steps propagate as an empty read-only mapping so the walk never has
to special-case a dead branch; the placeholder collapses to None at the end.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import re2

if TYPE_CHECKING:
    from json_match_maker._types import JsonValue

INDEX_SEGMENT = re2.compile(r"^\d+$")

_MISSING: Mapping[str, Any] = MappingProxyType({})


def is_index(segment: str) -> bool:
    """True if the segment addresses a list position (``"0"``, ``"12"``)."""
    return INDEX_SEGMENT.match(segment) is not None


def extract_path(path: str, tree: JsonValue) -> JsonValue:
    """Resolve ``path`` against ``tree``.

    >>> extract_path("a.1.b", {"a": [{}, {"b": 2}]})
    2
    >>> extract_path("a.5.b", {"a": []}) is None
    True
    """
    node: Any = tree
    for segment in path.split("."):
        node = _step(node, segment)
    if node is _MISSING:
        return None
    return node


def _step(node: Any, segment: str) -> Any:
    if _is_sequence(node):
        if not is_index(segment):
            return _MISSING
        idx = int(segment)
        if idx >= len(node):
            return _MISSING
        return node[idx]
    if isinstance(node, Mapping):
        return node.get(segment, _MISSING)
    return _MISSING


def _is_sequence(node: Any) -> bool:
    return isinstance(node, Sequence) and not isinstance(node, (str, bytes, bytearray))
