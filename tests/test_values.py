"""Tests for ExpectedValue / TargetValue resolution and comparison."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

import pytest

from json_match_maker import (
    DEFAULT,
    Compute,
    Each,
    ExpectedValue,
    InvalidComparisonError,
    TargetValue,
    resolve_accessor_path,
    values_equal,
)


@dataclass
class Address:
    city: str


@dataclass
class User:
    id: int
    address: Address | None
    nickname: str | None = None

    def display_name(self) -> str:
        return f"user-{self.id}"

    @property
    def city(self) -> str | None:
        return self.address.city if self.address else None


class TestResolveAccessorPath:
    def test_attribute_chain(self) -> None:
        assert resolve_accessor_path(User(1, Address("Oslo")), "address.city") == "Oslo"

    def test_property(self) -> None:
        assert resolve_accessor_path(User(1, Address("Oslo")), "city") == "Oslo"

    def test_method_is_called(self) -> None:
        assert resolve_accessor_path(User(7, None), "display_name") == "user-7"

    def test_mapping_keys(self) -> None:
        assert resolve_accessor_path({"a": {"b": 2}}, "a.b") == 2

    def test_missing_attribute_is_none(self) -> None:
        assert resolve_accessor_path(User(1, None), "email") is None

    def test_none_intermediate_short_circuits(self) -> None:
        assert resolve_accessor_path(User(1, None), "address.city.name") is None

    def test_prefix_segment_is_skipped(self) -> None:
        assert resolve_accessor_path(User(1, None), "testy.id", prefix="testy") == 1

    def test_prefix_with_attributes_suffix_is_skipped(self) -> None:
        assert resolve_accessor_path(User(1, None), "testy_attributes.id", prefix="testy") == 1

    def test_prefix_only_applies_when_set(self) -> None:
        assert resolve_accessor_path(User(1, None), "testy.id") is None

    def test_attributes_suffix_falls_back_to_bare_name(self) -> None:
        user = User(1, Address("Oslo"))
        assert resolve_accessor_path(user, "address_attributes.city") == "Oslo"

    def test_literal_attributes_name_wins(self) -> None:
        data = {"tag_attributes": "literal", "tag": "bare"}
        assert resolve_accessor_path(data, "tag_attributes") == "literal"

    def test_non_identifier_segment_on_object(self) -> None:
        assert resolve_accessor_path(User(1, None), "0") is None

    def test_callable_attribute_value_is_not_called(self) -> None:
        holder = {"fn": len}
        assert resolve_accessor_path(holder, "fn") is len

    def test_builtin_method_is_called(self) -> None:
        assert resolve_accessor_path({"created": date(2020, 1, 2)}, "created.isoformat") == (
            "2020-01-02"
        )

    def test_str_method_is_called(self) -> None:
        assert resolve_accessor_path(User(1, Address("oslo")), "address.city.upper") == "OSLO"

    def test_decimal_method_is_called(self) -> None:
        assert resolve_accessor_path({"n": Decimal("1.50")}, "n.normalize") == Decimal("1.5")


class TestExpectedValue:
    def test_default_rule(self) -> None:
        value = ExpectedValue.resolve(DEFAULT, User(1, Address("Oslo")), "address.city")
        assert value.value == "Oslo"

    def test_default_rule_uses_prefix(self) -> None:
        value = ExpectedValue.resolve(DEFAULT, User(4, None), "env.id", "env")
        assert value.value == 4

    def test_compute_rule_ignores_key(self) -> None:
        rule = Compute(lambda u: u.nickname or "anon")
        value = ExpectedValue.resolve(rule, User(1, None), "does.not.matter", "does")
        assert value.value == "anon"

    def test_compute_errors_propagate(self) -> None:
        def boom(_: Any) -> Any:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            ExpectedValue.resolve(Compute(boom), object(), "x")

    def test_each_rule_has_no_single_value(self) -> None:
        with pytest.raises(TypeError, match="each rule"):
            ExpectedValue.resolve(Each(list, {}), [], "items")


class TestTargetValue:
    def test_resolve_keeps_error_key(self) -> None:
        target = TargetValue.resolve("items.0.id", {"items": [{"id": 9}]})
        assert target.error_key == "items.0.id"
        assert target.value == 9

    def test_missing_is_none(self) -> None:
        assert TargetValue.resolve("items.3.id", {"items": []}).value is None


class TestComparison:
    def test_equal_values(self) -> None:
        assert ExpectedValue(1) == TargetValue("id", 1)
        assert TargetValue("id", 1) == ExpectedValue(1)

    def test_unequal_values(self) -> None:
        assert ExpectedValue("a") != TargetValue("id", "b")

    def test_none_equals_none(self) -> None:
        assert ExpectedValue(None) == TargetValue("gone", None)

    def test_no_type_coercion(self) -> None:
        assert ExpectedValue("1") != TargetValue("id", 1)

    def test_bool_is_not_a_number(self) -> None:
        assert ExpectedValue(True) != TargetValue("active", 1)
        assert ExpectedValue(0) != TargetValue("count", False)
        assert ExpectedValue(False) == TargetValue("flag", False)

    def test_bool_inside_containers(self) -> None:
        assert ExpectedValue([True]) != TargetValue("flags", [1])
        assert ExpectedValue({"on": 1}) != TargetValue("opts", {"on": True})
        assert ExpectedValue({"on": [True]}) == TargetValue("opts", {"on": [True]})

    def test_container_shape_differences(self) -> None:
        assert ExpectedValue([1, 2]) != TargetValue("xs", [1, 2, 3])
        assert ExpectedValue({"a": 1}) != TargetValue("m", {"a": 1, "b": 2})
        assert ExpectedValue((1, 2)) == TargetValue("xs", [1, 2])

    def test_int_float_still_equal(self) -> None:
        assert values_equal(1, 1.0)

    def test_expected_vs_raw_value_fails_fast(self) -> None:
        with pytest.raises(InvalidComparisonError, match="ExpectedValue with int"):
            _ = ExpectedValue(1) == 1

    def test_target_vs_target_fails_fast(self) -> None:
        with pytest.raises(InvalidComparisonError):
            _ = TargetValue("a", 1) == TargetValue("a", 1)

    def test_invalid_comparison_is_type_error(self) -> None:
        with pytest.raises(TypeError):
            _ = ExpectedValue(1) == ExpectedValue(1)

    def test_unhashable(self) -> None:
        with pytest.raises(TypeError):
            hash(ExpectedValue(1))
