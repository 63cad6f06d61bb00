"""
Relationship fixup: keep both sides of belongs_to/has_many pairs in sync.

After a fixture or record for model A is created, the relationships declared
on A are walked and the missing inverse links are filled in, so that it does
not matter which side of a relationship a test creates first.

Two backing strategies are supported:

- ``FixtureArrayFixup``: every model type owns a static list of fixture
  dicts and relationships hold raw ids.
- ``LiveRecordFixup``: records are managed objects living in a host store
  and relationships hold records (or futures resolving to records).

A relationship whose other side cannot be found is skipped, not an error.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
from collections.abc import Mapping
from typing import Any

from .host import HostStore, ManagedRecord, RelationshipSource
from .relationships import Relationship, RelationshipKind

logger = logging.getLogger(__name__)


def find_inverse_has_many(
    relationships: RelationshipSource,
    target_type: str,
    child_type: str,
    hint: str | None = None,
) -> str | None:
    """
    Find the has_many on *target_type* that holds *child_type* records.

    Args:
        relationships: Source of relationship metadata.
        target_type: The model type owning the collection (the parent).
        child_type: The model type of the collection's elements.
        hint: Preferred relationship name, e.g. a declared ``inverse``.

    Returns:
        The relationship name, or None when the parent has no such has_many.
        With several candidates and no matching hint, the last one wins.
    """
    inverse = None
    for relationship in relationships.relationships_by_name(target_type):
        if relationship.is_has_many and relationship.target_type == child_type:
            if hint is not None and relationship.name == hint:
                return relationship.name
            inverse = relationship.name
    return inverse


def _back_reference_name(relationship: Relationship, parent_type: str) -> str:
    return relationship.inverse or parent_type


class FixtureArrayFixup:
    """
    Fixup for stores whose adapter keeps static per-type fixture arrays.

    Example, with ``user`` has_many ``projects`` and ``project`` belongs_to
    ``user``::

        project = store.make_fixture("project")
        user = store.make_fixture("user", projects=[project["id"]])
        # project["user"] == user["id"]

        user = store.make_fixture("user")
        project = store.make_fixture("project", user=user["id"])
        # user["projects"] == [project["id"]]
    """

    def __init__(self, store: HostStore, adapter_name: str = "application") -> None:
        self.store = store
        self.adapter = store.adapter_for(adapter_name)

    def push_fixture(self, model_name: str, fixture: dict[str, Any]) -> dict[str, Any]:
        """Append *fixture* to the fixture array of *model_name*."""
        self._fixtures_for(model_name).append(fixture)
        return fixture

    def find_fixture(self, model_name: str, fixture_id: Any) -> dict[str, Any] | None:
        return self.adapter.find_fixture_by_id(self._fixtures_for(model_name), fixture_id)

    def link(self, model_name: str, fixture: dict[str, Any]) -> None:
        """Fill in the inverse side of every relationship of *fixture*."""
        for relationship in self.store.relationships_by_name(model_name):
            match relationship.kind:
                case RelationshipKind.HAS_MANY:
                    self._link_children(model_name, fixture, relationship)
                case RelationshipKind.BELONGS_TO:
                    self._link_parent(model_name, fixture, relationship)

    def _fixtures_for(self, model_name: str) -> list[dict[str, Any]]:
        return self.adapter.fixtures_for_type(self.store.model_for(model_name))

    def _link_children(self, model_name: str, fixture: dict[str, Any], relationship: Relationship) -> None:
        child_ids = fixture.get(relationship.name)
        if not child_ids:
            return

        back_reference = _back_reference_name(relationship, model_name)
        resolved_ids = []
        for child_id in child_ids:
            if isinstance(child_id, Mapping):
                if child_id.get("id") in (None, ""):
                    logger.debug(
                        "Fixup skipped: inline %r fixture without an id for %s.%s",
                        relationship.target_type,
                        model_name,
                        relationship.name,
                    )
                    continue
                # Inline child fixture: store it and keep only its id.
                child_fixture = self.push_fixture(relationship.target_type, dict(child_id))
                child_id = child_fixture["id"]
            resolved_ids.append(child_id)

            child = self.find_fixture(relationship.target_type, child_id)
            if child is None:
                logger.debug(
                    "Fixup skipped: no %r fixture with id %r for %s.%s",
                    relationship.target_type,
                    child_id,
                    model_name,
                    relationship.name,
                )
                continue
            child[back_reference] = fixture["id"]
        fixture[relationship.name] = resolved_ids

    def _link_parent(self, model_name: str, fixture: dict[str, Any], relationship: Relationship) -> None:
        parent_ref = fixture.get(relationship.name)
        if parent_ref in (None, ""):
            return

        if isinstance(parent_ref, Mapping):
            if parent_ref.get("id") in (None, ""):
                logger.debug(
                    "Fixup skipped: inline %r fixture without an id for %s.%s",
                    relationship.target_type,
                    model_name,
                    relationship.name,
                )
                return
            parent_fixture = self.push_fixture(relationship.target_type, dict(parent_ref))
            parent_ref = parent_fixture.get("id")
            fixture[relationship.name] = parent_ref

        inverse = find_inverse_has_many(self.store, relationship.target_type, model_name, relationship.inverse)
        if inverse is None:
            logger.debug("Fixup skipped: %r has no has_many of %r", relationship.target_type, model_name)
            return

        parent = self.find_fixture(relationship.target_type, parent_ref)
        if parent is None:
            logger.debug("Fixup skipped: no %r fixture with id %r", relationship.target_type, parent_ref)
            return

        children = parent.setdefault(inverse, [])
        if fixture["id"] not in children:
            children.append(fixture["id"])


class LiveRecordFixup:
    """
    Fixup for stores holding live records.

    Example::

        project = store.make_fixture("project")
        user = store.make_fixture("user", projects=[project])
        # project.get("user") is user

        user = store.make_fixture("user")
        project = store.make_fixture("project", user=user)
        # project in user.get("projects")

    A belongs_to value that is still pending (a future, or any awaitable)
    is linked once it resolves. Other awaitables are wrapped in a task that
    replaces them on the record, and need a running event loop. Futures that
    are cancelled or fail are never linked, and neither are ones that never
    settle.
    """

    def __init__(self, store: HostStore) -> None:
        self.store = store

    def embed_belongs_to(self, model_name: str, fixture: dict[str, Any]) -> None:
        """Push inline belongs_to fixtures as records before *fixture* is pushed."""
        for relationship in self.store.relationships_by_name(model_name):
            value = fixture.get(relationship.name)
            if relationship.is_belongs_to and isinstance(value, Mapping):
                fixture[relationship.name] = self.store.push(relationship.target_type, dict(value))

    def link(self, record: ManagedRecord) -> None:
        """Fill in the inverse side of every relationship of *record*."""
        for relationship in self.store.relationships_by_name(record.model_name):
            match relationship.kind:
                case RelationshipKind.HAS_MANY:
                    back_reference = _back_reference_name(relationship, record.model_name)
                    for child in list(record.get(relationship.name) or []):
                        child.set(back_reference, record)
                case RelationshipKind.BELONGS_TO:
                    self._link_parent(record, relationship)

    def link_created_record(self, record: ManagedRecord) -> None:
        """Add a newly created record to the has_many of each parent it belongs to."""
        for relationship in self.store.relationships_by_name(record.model_name):
            if relationship.is_belongs_to:
                self._link_parent(record, relationship)

    def _link_parent(self, record: ManagedRecord, relationship: Relationship) -> None:
        parent = record.get(relationship.name)
        if parent is None:
            return

        if inspect.isawaitable(parent):
            if isinstance(parent, asyncio.Future):
                future = parent
            else:
                try:
                    loop = asyncio.get_running_loop()
                except RuntimeError:
                    logger.debug(
                        "Fixup skipped: %s.%s is pending and no event loop is running",
                        record.model_name,
                        relationship.name,
                    )
                    return
                # The awaitable can only be awaited once; the record keeps the task.
                future = asyncio.ensure_future(parent, loop=loop)
                record.set(relationship.name, future)
            future.add_done_callback(functools.partial(self._on_parent_settled, record, relationship))
            logger.debug("Fixup deferred: %s.%s is pending", record.model_name, relationship.name)
            return

        self._add_to_inverse(parent, record, relationship)

    def _on_parent_settled(
        self,
        record: ManagedRecord,
        relationship: Relationship,
        future: asyncio.Future[Any],
    ) -> None:
        if future.cancelled():
            return
        if future.exception() is not None:
            logger.debug(
                "Fixup skipped: %s.%s failed to resolve",
                record.model_name,
                relationship.name,
                exc_info=future.exception(),
            )
            return
        parent = future.result()
        if parent is not None:
            self._add_to_inverse(parent, record, relationship)

    def _add_to_inverse(self, parent: ManagedRecord, record: ManagedRecord, relationship: Relationship) -> None:
        inverse = find_inverse_has_many(self.store, parent.model_name, record.model_name, relationship.inverse)
        if inverse is None:
            logger.debug("Fixup skipped: %r has no has_many of %r", parent.model_name, record.model_name)
            return
        parent.get(inverse).add_object(record)


__all__ = ["FixtureArrayFixup", "LiveRecordFixup", "find_inverse_has_many"]
