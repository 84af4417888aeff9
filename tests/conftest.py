"""Shared fixtures: a small object graph and the JSON it serializes to.

The graph has a scalar field, a computed field, a single association and a
list association whose elements carry a nested list, so every rule shape
and both levels of each-nesting are exercised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from json_match_maker import DEFAULT

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


@dataclass(frozen=True)
class SingleAssociated:
    id: int
    type: str


@dataclass(frozen=True)
class ManyAssociated:
    id: int
    description: str
    something_else: SingleAssociated
    more_things: list[SingleAssociated] = field(default_factory=list)


@dataclass
class Person:
    id: int
    first_name: str
    last_name: str
    many_association: list[ManyAssociated]
    single_association: SingleAssociated

    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


# ─── Objects ────────────────────────────────────────────────────────────────


@pytest.fixture
def single_associated() -> SingleAssociated:
    return SingleAssociated(id=3, type="foo")


@pytest.fixture
def many_associated(single_associated: SingleAssociated) -> ManyAssociated:
    return ManyAssociated(
        id=2,
        description="An associated record in a list",
        something_else=single_associated,
        more_things=[single_associated],
    )


@pytest.fixture
def person(many_associated: ManyAssociated, single_associated: SingleAssociated) -> Person:
    return Person(
        id=1,
        first_name="John",
        last_name="Johnson",
        many_association=[many_associated],
        single_association=single_associated,
    )


# ─── Definitions ────────────────────────────────────────────────────────────


@pytest.fixture
def complex_definition() -> dict[str, Any]:
    """Mapping form with explicit rules everywhere."""
    return {
        "testy.id": lambda p: p.id,
        "name": lambda p: p.full_name(),
        "non.existant.nested.key.value": lambda _: None,
        "single_association_attributes.id": DEFAULT,
        "single_association_attributes.type": lambda p: p.single_association.type,
        "many_association": {
            "each": lambda p: p.many_association,
            "attributes": {
                "id": lambda m: m.id,
                "description": lambda m: m.description,
                "something_else.id": lambda m: m.something_else.id,
                "something_else.type": lambda m: m.something_else.type,
                "more_things": {
                    "each": lambda m: m.more_things,
                    "attributes": {
                        "id": lambda t: t.id,
                        "type": lambda t: t.type,
                    },
                },
            },
        },
    }


@pytest.fixture
def simple_definition() -> list[Any]:
    """Terse list form relying on default accessor lookup."""
    return [
        "testy.id",
        "non.existant.key.value",
        "single_association_attributes.id",
        "single_association_attributes.type",
        {
            "name": lambda p: p.full_name(),
            "many_association": {
                "each": lambda p: p.many_association,
                "attributes": [
                    "id",
                    "description",
                    "something_else.id",
                    "something_else.type",
                    {
                        "more_things": {
                            "each": lambda m: m.more_things,
                            "attributes": ["id", "type"],
                        },
                    },
                ],
            },
        },
    ]


# ─── Targets ────────────────────────────────────────────────────────────────


@pytest.fixture
def matching_json() -> dict[str, Any]:
    return {
        "testy": {"id": 1},
        "name": "John Johnson",
        "single_association_attributes": {"id": 3, "type": "foo"},
        "many_association": [
            {
                "id": 2,
                "description": "An associated record in a list",
                "something_else": {"id": 3, "type": "foo"},
                "more_things": [{"id": 3, "type": "foo"}],
            }
        ],
    }


@pytest.fixture
def person_yaml() -> Path:
    return FIXTURES_DIR / "person.yaml"
