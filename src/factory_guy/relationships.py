"""
Relationship metadata.

The fixup engine only needs to know, for each model type, which attributes
are ``belongs_to`` or ``has_many`` relationships and which model type they
point at. Host data layers describe that with ``Relationship`` objects;
``Schema`` is a small declarative source of them.

Example::

    schema = Schema()
    schema.model("user", projects=has_many("project"))
    schema.model("project", user=belongs_to("user"))

    schema.relationships_by_name("user")
    # [Relationship(name='projects', kind=<RelationshipKind.HAS_MANY: 'has_many'>, ...)]
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class RelationshipKind(StrEnum):
    BELONGS_TO = "belongs_to"
    HAS_MANY = "has_many"


class Relationship(BaseModel):
    """
    One named relationship declared on a model type.

    Attributes:
        name: Attribute holding the relationship, e.g. ``"projects"``.
        kind: ``belongs_to`` (scalar reference) or ``has_many`` (collection).
        target_type: Model type on the other side, e.g. ``"project"``.
        parent_type: Model type declaring the relationship.
        inverse: Name of the inverse relationship on the target, if known.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    kind: RelationshipKind
    target_type: str = Field(min_length=1)
    parent_type: str = Field(min_length=1)
    inverse: str | None = None

    @property
    def is_belongs_to(self) -> bool:
        return self.kind is RelationshipKind.BELONGS_TO

    @property
    def is_has_many(self) -> bool:
        return self.kind is RelationshipKind.HAS_MANY


@dataclass(frozen=True)
class _RelationshipDecl:
    kind: RelationshipKind
    target_type: str
    inverse: str | None = None


def belongs_to(target_type: str, inverse: str | None = None) -> _RelationshipDecl:
    """Declare a scalar reference to *target_type* (for ``Schema.model``)."""
    return _RelationshipDecl(RelationshipKind.BELONGS_TO, target_type, inverse)


def has_many(target_type: str, inverse: str | None = None) -> _RelationshipDecl:
    """Declare a collection of *target_type* records (for ``Schema.model``)."""
    return _RelationshipDecl(RelationshipKind.HAS_MANY, target_type, inverse)


class Schema:
    """Declarative in-memory ``RelationshipSource``."""

    def __init__(self) -> None:
        self._relationships: dict[str, list[Relationship]] = {}

    def model(self, model_name: str, **relationships: _RelationshipDecl) -> Schema:
        """
        Declare a model type and its relationships.

        Declaring the same model again replaces its relationships.

        Returns:
            The schema, so declarations can be chained.
        """
        self._relationships[model_name] = [
            Relationship(
                name=name,
                kind=decl.kind,
                target_type=decl.target_type,
                parent_type=model_name,
                inverse=decl.inverse,
            )
            for name, decl in relationships.items()
        ]
        return self

    def add(self, relationships: Iterable[Relationship]) -> Schema:
        """Register prebuilt ``Relationship`` objects (e.g. from a host adapter)."""
        for relationship in relationships:
            self._relationships.setdefault(relationship.parent_type, []).append(relationship)
        return self

    def relationships_by_name(self, model_name: str) -> list[Relationship]:
        """Relationships declared on *model_name*, in declaration order."""
        return list(self._relationships.get(model_name, []))

    @property
    def model_names(self) -> list[str]:
        return list(self._relationships)

    def __contains__(self, model_name: object) -> bool:
        return model_name in self._relationships


__all__ = [
    "Relationship",
    "RelationshipKind",
    "Schema",
    "belongs_to",
    "has_many",
]
