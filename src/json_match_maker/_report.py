"""Mismatch collection for one matching pass."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

MESSAGE_TEMPLATE = (
    "Mismatch in field: '{key}'\n"
    "  expected: '{expected}'\n"
    "  received: '{received}'"
)
SEPARATOR = "\n\n"


def format_mismatch(key: str, expected: Any, received: Any) -> str:
    """Render one mismatch entry.

    >>> print(format_mismatch("id", 1, 2))
    Mismatch in field: 'id'
      expected: '1'
      received: '2'
    """
    return MESSAGE_TEMPLATE.format(key=key, expected=expected, received=received)


class MismatchReport:
    """Formatted mismatch messages keyed by error key.

    Recording the same key twice keeps the latest message in the position of
    the first one. Iteration yields error keys in recording order.
    """

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}

    def record(self, key: str, message: str) -> None:
        self._entries[key] = message

    def clear(self) -> None:
        self._entries.clear()

    def is_empty(self) -> bool:
        return not self._entries

    def messages(self) -> list[str]:
        return list(self._entries.values())

    def as_mapping(self) -> Mapping[str, str]:
        """Read-only snapshot of key -> message."""
        return MappingProxyType(dict(self._entries))

    def render(self) -> str:
        return SEPARATOR.join(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __repr__(self) -> str:
        return f"MismatchReport({list(self._entries)!r})"
