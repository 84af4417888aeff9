"""Expected-side and target-side values for a single field.

ExpectedValue reads from the in-memory instance, TargetValue from the JSON
tree. The two only compare against each other; comparing either with
anything else is an engine bug and fails fast.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from json_match_maker._definition import Compute, Default, Each
from json_match_maker._path import extract_path

if TYPE_CHECKING:
    from json_match_maker._definition import Rule
    from json_match_maker._types import JsonValue

ATTRIBUTES_SUFFIX = "_attributes"

_NOT_FOUND = object()


class InvalidComparisonError(TypeError):
    """An ExpectedValue was compared with something other than a TargetValue."""

    def __init__(self, left: object, right: object) -> None:
        super().__init__(
            f"cannot compare {type(left).__name__} with {type(right).__name__}"
        )


@dataclass(frozen=True, slots=True, eq=False)
class ExpectedValue:
    """The value the instance says a field should have."""

    value: Any

    @classmethod
    def resolve(
        cls, rule: Rule, instance: Any, key: str, prefix: str | None = None
    ) -> ExpectedValue:
        match rule:
            case Default():
                return cls(resolve_accessor_path(instance, key, prefix))
            case Compute(function=function):
                return cls(function(instance))
            case Each():
                msg = f"each rule at {key!r} has no single expected value"
                raise TypeError(msg)
        msg = f"unknown rule type {type(rule).__name__}"  # pragma: no cover
        raise TypeError(msg)  # pragma: no cover

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TargetValue):
            raise InvalidComparisonError(self, other)
        return values_equal(self.value, other.value)

    __hash__ = None  # type: ignore[assignment]


@dataclass(frozen=True, slots=True, eq=False)
class TargetValue:
    """The value found in the target tree, with the key it is reported under."""

    error_key: str
    value: JsonValue

    @classmethod
    def resolve(cls, key: str, tree: JsonValue) -> TargetValue:
        return cls(error_key=key, value=extract_path(key, tree))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExpectedValue):
            raise InvalidComparisonError(self, other)
        return values_equal(self.value, other.value)

    __hash__ = None  # type: ignore[assignment]


def resolve_accessor_path(instance: Any, path: str, prefix: str | None = None) -> Any:
    """Walk a dotted path of accessors on ``instance``.

    Each segment is looked up as a mapping key or an attribute; bound methods
    are called with no arguments. A segment whose name, minus a trailing
    ``_attributes``, equals ``prefix`` is skipped so an envelope key in the
    target does not have to exist on the instance. Anything missing along the
    way resolves to None.

    >>> resolve_accessor_path({"a": {"b": 1}}, "a.b")
    1
    >>> resolve_accessor_path({"id": 7}, "testy.id", prefix="testy")
    7
    """
    value = instance
    for segment in path.split("."):
        bare = segment.removesuffix(ATTRIBUTES_SUFFIX)
        if prefix and bare == prefix:
            continue
        if value is None:
            return None
        value = _access(value, segment, bare)
    return value


def _access(value: Any, segment: str, bare: str) -> Any:
    found = _lookup(value, segment)
    if found is _NOT_FOUND and bare != segment:
        found = _lookup(value, bare)
    if found is _NOT_FOUND:
        return None
    if _is_bound_method(found):
        return found()
    return found


def _is_bound_method(found: Any) -> bool:
    if inspect.ismethod(found):
        return True
    # C-implemented methods (str.upper, date.isoformat); module-level builtins
    # such as len also report as builtins but are bound to a module.
    return inspect.isbuiltin(found) and not inspect.ismodule(found.__self__)


def _lookup(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(name, _NOT_FOUND)
    if not name.isidentifier():
        return _NOT_FOUND
    return getattr(value, name, _NOT_FOUND)


def values_equal(expected: Any, received: Any) -> bool:
    """Value equality without bool/number coercion, applied through containers.

    >>> values_equal(True, 1)
    False
    >>> values_equal({"a": [1, 2]}, {"a": [1, 2]})
    True
    >>> values_equal([True], [1])
    False
    """
    if isinstance(expected, bool) or isinstance(received, bool):
        return type(expected) is type(received) and expected == received
    if isinstance(expected, Mapping) and isinstance(received, Mapping):
        return expected.keys() == received.keys() and all(
            values_equal(expected[key], received[key]) for key in expected
        )
    if _is_sequence(expected) and _is_sequence(received):
        return len(expected) == len(received) and all(
            values_equal(e, r) for e, r in zip(expected, received, strict=True)
        )
    return expected == received


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))
