"""Test utilities for json_match_maker.

Bridges JsonMatcher's predicate-plus-message protocol to plain ``assert``
based test runners such as pytest.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from json_match_maker._matcher import JsonMatcher
    from json_match_maker._types import JsonValue


def assert_json_matches(matcher: JsonMatcher, target: JsonValue) -> None:
    """Fail the current test with the full mismatch report if ``target`` differs.

    >>> from json_match_maker import JsonMatcher
    >>> assert_json_matches(JsonMatcher({"id": 1}, ["id"]), {"id": 1})
    """
    __tracebackhide__ = True
    if not matcher.matches(target):
        raise AssertionError(matcher.failure_message())
