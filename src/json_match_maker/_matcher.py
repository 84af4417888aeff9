"""JsonMatcher: walks a match definition and compares an instance to a JSON tree.

Evaluation semantics:
- Every entry of the definition is checked; there is no short-circuit
- Each rules recurse per element, extending the error key with the index
- A field missing on either side resolves to None and compares like a value
- Mismatches are data, never exceptions; only misconfiguration raises
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, ClassVar

from json_match_maker._config import load_match_config, parse_match_config
from json_match_maker._definition import ConfigurationError, Each, expand_definition
from json_match_maker._report import MismatchReport, format_mismatch
from json_match_maker._values import ExpectedValue, TargetValue

if TYPE_CHECKING:
    from collections.abc import Mapping
    from os import PathLike

    from json_match_maker._definition import MatchDefinition, Rule
    from json_match_maker._types import JsonValue

logger = logging.getLogger(__name__)


class MatchDefinitionNotFound(ConfigurationError):
    """A matcher was used without a match definition."""

    def __init__(self, matcher: type) -> None:
        self.matcher = matcher
        super().__init__(
            f"{matcher.__name__} has no match definition: pass one to the "
            "constructor or set the match_definition class attribute"
        )


class JsonMatcher:
    """Compare an expected instance against JSON trees, field by field.

    The definition can be passed to the constructor or declared on a
    subclass::

        class UserMatcher(JsonMatcher):
            match_definition = ["id", "email", {"name": lambda u: u.full_name()}]

        matcher = UserMatcher(user)
        assert matcher.matches(response.json()), matcher.failure_message()

    The definition is expanded once at construction. Each call to
    :meth:`matches` starts a fresh report, so the matcher can be reused
    sequentially; it is not safe to share between threads.
    """

    match_definition: ClassVar[Any] = None
    prefix: ClassVar[str | None] = None

    def __init__(
        self,
        expected: Any,
        match_definition: Any = None,
        *,
        prefix: str | None = None,
    ) -> None:
        self._expected = expected
        raw = match_definition if match_definition is not None else type(self).match_definition
        self._definition: MatchDefinition | None = (
            expand_definition(raw) if raw is not None else None
        )
        self._prefix = prefix if prefix is not None else type(self).prefix
        self._target: JsonValue = None
        self._report = MismatchReport()

    @classmethod
    def from_config(cls, expected: Any, data: Mapping[str, Any]) -> JsonMatcher:
        """Build a matcher from a declarative definition document (a dict)."""
        config = parse_match_config(data)
        return cls(expected, config.definition, prefix=config.prefix)

    @classmethod
    def from_yaml(cls, expected: Any, path: str | PathLike[str]) -> JsonMatcher:
        """Build a matcher from a YAML definition file."""
        config = load_match_config(path)
        return cls(expected, config.definition, prefix=config.prefix)

    @property
    def expected(self) -> Any:
        return self._expected

    @property
    def target(self) -> JsonValue:
        """The tree passed to the most recent :meth:`matches` call."""
        return self._target

    @property
    def definition(self) -> MatchDefinition:
        return self._require_definition()

    @property
    def mismatches(self) -> Mapping[str, str]:
        """Error key -> message for the most recent pass."""
        return self._report.as_mapping()

    def matches(self, target: JsonValue) -> bool:
        """Check every field of the definition against ``target``.

        Raises:
            MatchDefinitionNotFound: If no definition was ever supplied.
        """
        definition = self._require_definition()
        self._target = target
        self._report.clear()
        self._check_definition(definition, self._expected)
        logger.debug(
            "%s pass finished with %d mismatch(es)", type(self).__name__, len(self._report)
        )
        return self._report.is_empty()

    def failure_message(self) -> str:
        """All mismatches of the most recent pass, separated by blank lines."""
        return self._report.render()

    def _require_definition(self) -> MatchDefinition:
        if self._definition is None:
            raise MatchDefinitionNotFound(type(self))
        return self._definition

    def _check_definition(
        self, definition: MatchDefinition, instance: Any, key_prefix: str | None = None
    ) -> None:
        for key, rule in definition.items():
            match rule:
                case Each():
                    self._check_each(_join(key_prefix, key), rule, instance)
                case _:
                    self._check_value(key_prefix, key, rule, instance)

    def _check_each(self, error_key: str, rule: Each, instance: Any) -> None:
        elements = rule.each(instance)
        if elements is None:
            return
        for idx, element in enumerate(elements):
            self._check_definition(rule.attributes, element, f"{error_key}.{idx}")

    def _check_value(self, key_prefix: str | None, key: str, rule: Rule, instance: Any) -> None:
        expected = ExpectedValue.resolve(rule, instance, key, self._prefix)
        target = TargetValue.resolve(_join(key_prefix, key), self._target)
        if expected != target:
            self._add_error(expected, target)

    def _add_error(self, expected: ExpectedValue, target: TargetValue) -> None:
        logger.debug("mismatch in %s", target.error_key)
        self._report.record(
            target.error_key,
            format_mismatch(target.error_key, expected.value, target.value),
        )


def _join(key_prefix: str | None, key: str) -> str:
    return key if key_prefix is None else f"{key_prefix}.{key}"
