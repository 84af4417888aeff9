"""Match definition rules and the expansion of authoring forms.

A canonical definition is a read-only mapping of field key -> Rule, where
Rule is a closed union:

| Rule      | Expected value comes from                          |
|-----------|----------------------------------------------------|
| Default   | dotted accessor lookup of the field key            |
| Compute   | ``function(instance)``                             |
| Each      | ``each(instance)``, then ``attributes`` per element |

expand_definition() accepts the looser authoring forms (plain dicts, the
"default" string, bare callables, terse lists of keys) and returns the
canonical form. It is pure: the input is never mutated.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from json_match_maker._types import Extractor


class ConfigurationError(Exception):
    """A matcher was set up wrongly. Raised for programmer errors, never for data."""


class DefinitionError(ConfigurationError):
    """A match definition has a shape that cannot be expanded."""

    label = "match definition"

    def __init__(self, key: str | None, reason: str) -> None:
        self.key = key
        self.reason = reason
        where = f" at {key!r}" if key is not None else ""
        super().__init__(f"invalid {self.label}{where}: {reason}")


# ═══════════════════════════════════════════════════════════════════════════════
# Rules
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Default:
    """Resolve the expected value by walking the field key on the instance."""


DEFAULT = Default()


@dataclass(frozen=True, slots=True)
class Compute:
    """Resolve the expected value by calling ``function(instance)``."""

    function: Extractor[Any]


@dataclass(frozen=True, slots=True)
class Each:
    """The field key addresses a list in the target.

    ``each`` produces the expected elements; ``attributes`` is checked
    against every element, positionally against the target list.
    """

    each: Callable[[Any], Iterable[Any]]
    attributes: Mapping[str, Rule]


type Rule = Default | Compute | Each
type MatchDefinition = Mapping[str, Rule]

DEFAULT_NAME = "default"
EACH_KEYS = frozenset({"each", "attributes"})


# ═══════════════════════════════════════════════════════════════════════════════
# Expansion
# ═══════════════════════════════════════════════════════════════════════════════


def expand_definition(definition: Any) -> MatchDefinition:
    """Normalize any accepted authoring form into a canonical definition.

    Accepted forms:
    - mapping of key -> rule, where a rule may be a Rule instance,
      ``"default"``, a callable, or ``{"each": fn, "attributes": ...}``
    - list/tuple of plain keys (default rules) and mappings (merged in order)

    Raises:
        DefinitionError: If any part of the definition is malformed.
    """
    return MappingProxyType(_expand(definition, parent=None))


def _expand(definition: Any, parent: str | None) -> dict[str, Rule]:
    if isinstance(definition, Mapping):
        return {
            _check_key(key, parent): _expand_rule(_qualify(parent, key), value)
            for key, value in definition.items()
        }

    if isinstance(definition, (list, tuple)):
        result: dict[str, Rule] = {}
        for item in definition:
            if isinstance(item, str):
                result[_check_key(item, parent)] = DEFAULT
            elif isinstance(item, Mapping):
                result.update(_expand(item, parent))
            else:
                msg = f"list entries must be keys or mappings, got {type(item).__name__}"
                raise DefinitionError(parent, msg)
        return result

    msg = f"expected a mapping or a list, got {type(definition).__name__}"
    raise DefinitionError(parent, msg)


def _expand_rule(key: str, value: Any) -> Rule:
    match value:
        case Default() | Compute():
            return value
        case Each(each=each, attributes=attributes):
            return _each(key, each, attributes)
        case str() if value == DEFAULT_NAME:
            return DEFAULT
        case Mapping():
            unknown = set(value) - EACH_KEYS
            if unknown:
                msg = f"unexpected keys in each rule: {sorted(unknown)}"
                raise DefinitionError(key, msg)
            if "each" not in value or "attributes" not in value:
                msg = "each rule requires both 'each' and 'attributes'"
                raise DefinitionError(key, msg)
            return _each(key, value["each"], value["attributes"])
        case _ if callable(value):
            return Compute(value)
    msg = f"unsupported rule {value!r}"
    raise DefinitionError(key, msg)


def _each(key: str, each: Any, attributes: Any) -> Each:
    if not callable(each):
        msg = f"'each' must be callable, got {type(each).__name__}"
        raise DefinitionError(key, msg)
    return Each(each=each, attributes=MappingProxyType(_expand(attributes, key)))


def _check_key(key: Any, parent: str | None) -> str:
    if not isinstance(key, str) or not key:
        msg = f"field keys must be non-empty strings, got {key!r}"
        raise DefinitionError(parent, msg)
    return key


def _qualify(parent: str | None, key: str) -> str:
    return key if parent is None else f"{parent}.{key}"
