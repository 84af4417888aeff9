"""Declarative match definitions loaded from dicts or YAML.

A definition document carries no code, so rules that would be lambdas in
Python are written as dotted accessor paths and compiled into callables:

    prefix: testy
    fields:
      - testy.id
      - name: full_name
      - many_association:
          each: many_association
          attributes: [id, description]

Loading path:
  YAML → load_match_config() → dict → parse_match_config() → MatchConfig

| Document value              | Rule                              |
|-----------------------------|-----------------------------------|
| plain key in a list         | DEFAULT                           |
| ``null`` / ``"default"``    | DEFAULT                           |
| any other string            | Compute(AccessorPath(value))      |
| ``{each, attributes}``      | Each(EachPath(each), attributes)  |
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import yaml

from json_match_maker._definition import (
    DEFAULT,
    DEFAULT_NAME,
    EACH_KEYS,
    Compute,
    DefinitionError,
    Each,
)
from json_match_maker._values import resolve_accessor_path

if TYPE_CHECKING:
    from os import PathLike

    from json_match_maker._definition import MatchDefinition, Rule

_TOP_LEVEL_KEYS = frozenset({"prefix", "fields"})


class ConfigParseError(DefinitionError):
    """Error parsing a definition document. ``key`` is the path inside the document."""

    label = "match config"


# ═══════════════════════════════════════════════════════════════════════════════
# Config types
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class AccessorPath:
    """Callable reading a dotted accessor path from an instance."""

    path: str

    def __call__(self, instance: Any, /) -> Any:
        return resolve_accessor_path(instance, self.path)


@dataclass(frozen=True, slots=True)
class EachPath:
    """Callable reading a collection by dotted path. A missing collection is empty."""

    path: str

    def __call__(self, instance: Any, /) -> Any:
        elements = resolve_accessor_path(instance, self.path)
        return () if elements is None else elements


@dataclass(frozen=True, slots=True)
class MatchConfig:
    """A parsed definition document, ready to hand to JsonMatcher."""

    definition: MatchDefinition
    prefix: str | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Parsing (dict → config types)
# ═══════════════════════════════════════════════════════════════════════════════


def parse_match_config(data: Mapping[str, Any]) -> MatchConfig:
    """Parse a definition document.

    Raises:
        ConfigParseError: If the document is malformed.
    """
    if not isinstance(data, Mapping):
        msg = f"expected dict, got {type(data).__name__}"
        raise ConfigParseError(None, msg)

    unknown = set(data) - _TOP_LEVEL_KEYS
    if unknown:
        msg = f"unexpected top-level keys: {sorted(unknown)}"
        raise ConfigParseError(None, msg)

    prefix = data.get("prefix")
    if prefix is not None and not isinstance(prefix, str):
        msg = f"'prefix' must be a string, got {type(prefix).__name__}"
        raise ConfigParseError("prefix", msg)

    if "fields" not in data:
        msg = "missing required field 'fields'"
        raise ConfigParseError(None, msg)

    definition = _parse_fields(data["fields"], "fields")
    return MatchConfig(definition=MappingProxyType(definition), prefix=prefix)


def load_match_config(path: str | PathLike[str]) -> MatchConfig:
    """Read and parse a YAML definition document.

    Raises:
        ConfigParseError: If the file is not valid YAML or not a valid document.
    """
    with Path(path).open() as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            msg = f"invalid YAML in {path}: {e}"
            raise ConfigParseError(None, msg) from e
    if data is None:
        msg = f"{path} is empty"
        raise ConfigParseError(None, msg)
    return parse_match_config(data)


def _parse_fields(data: Any, path: str) -> dict[str, Rule]:
    """Parse a field list (terse) or field mapping."""
    if isinstance(data, Mapping):
        return _parse_entries(data, path)

    if isinstance(data, list):
        rules: dict[str, Rule] = {}
        for idx, item in enumerate(data):
            if isinstance(item, str):
                rules[_check_key(item, f"{path}.{idx}")] = DEFAULT
            elif isinstance(item, Mapping):
                rules.update(_parse_entries(item, f"{path}.{idx}"))
            else:
                msg = f"entries must be keys or mappings, got {type(item).__name__}"
                raise ConfigParseError(f"{path}.{idx}", msg)
        return rules

    msg = f"must be a list or a mapping, got {type(data).__name__}"
    raise ConfigParseError(path, msg)


def _parse_entries(data: Mapping[Any, Any], path: str) -> dict[str, Rule]:
    rules: dict[str, Rule] = {}
    for key, value in data.items():
        rules[_check_key(key, path)] = _parse_rule(value, f"{path}.{key}")
    return rules


def _check_key(key: Any, path: str) -> str:
    if not isinstance(key, str) or not key:
        msg = f"field keys must be non-empty strings, got {key!r}"
        raise ConfigParseError(path, msg)
    return key


def _parse_rule(value: Any, path: str) -> Rule:
    if value is None or value == DEFAULT_NAME:
        return DEFAULT

    if isinstance(value, str):
        return Compute(AccessorPath(value))

    if isinstance(value, Mapping):
        unknown = set(value) - EACH_KEYS
        if unknown:
            msg = f"unexpected keys in each rule: {sorted(unknown)}"
            raise ConfigParseError(path, msg)
        if "each" not in value:
            msg = "each rule missing required field 'each'"
            raise ConfigParseError(path, msg)
        if "attributes" not in value:
            msg = "each rule missing required field 'attributes'"
            raise ConfigParseError(path, msg)
        each = value["each"]
        if not isinstance(each, str):
            msg = f"'each' must be an accessor path string, got {type(each).__name__}"
            raise ConfigParseError(path, msg)
        attributes = _parse_fields(value["attributes"], f"{path}.attributes")
        return Each(each=EachPath(each), attributes=MappingProxyType(attributes))

    msg = f"unsupported rule value of type {type(value).__name__}"
    raise ConfigParseError(path, msg)
