"""Core protocols and type aliases for json_match_maker.

The type system has two sides:
- JsonValue is the target tree (anything json.loads could hand back)
- Extractor is the expected-side port: instance in, comparable value out
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, TypeVar, runtime_checkable

# None doubles as "absent": a missing key and an explicit null compare equal.
type JsonScalar = str | int | float | bool | None
type JsonValue = JsonScalar | Mapping[str, JsonValue] | Sequence[JsonValue]

T_contra = TypeVar("T_contra", contravariant=True)


@runtime_checkable
class Extractor(Protocol[T_contra]):
    """Compute an expected value from an expected-side instance.

    Any single-argument callable satisfies this, including lambdas and
    ``operator.attrgetter``.
    """

    def __call__(self, instance: T_contra, /) -> Any: ...
