"""
In-memory host data layer.

A small store with an identity map, live records and the two adapter
flavours factory-guy distinguishes:

- ``FixtureAdapter``: each ``ModelType`` keeps a static list of fixture
  dicts (``uses_fixture_arrays = True``)
- ``RESTAdapter``: fixtures are pushed into the store as ``Record`` objects

Relationship metadata comes from any ``RelationshipSource``, usually a
``Schema``.

Example::

    schema = Schema()
    schema.model("user", projects=has_many("project"))
    schema.model("project", user=belongs_to("user"))

    store = MemoryStore(schema)
    user = store.push("user", {"id": 1, "name": "Dude"})
    project = store.push("project", {"id": 1, "user": 1})
    project.get("user") is user  # True
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .fixup import LiveRecordFixup
from .host import RelationshipSource
from .relationships import Relationship

logger = logging.getLogger(__name__)


def _id_key(record_id: Any) -> str:
    # Ids compare as strings: 1 and "1" name the same record.
    return str(record_id)


@dataclass
class ModelType:
    """A model type known to the store, with its static fixture array."""

    name: str
    fixtures: list[dict[str, Any]] = field(default_factory=list)


class FixtureAdapter:
    """Adapter keeping every model type's data in its fixture array."""

    uses_fixture_arrays = True

    def fixtures_for_type(self, model_type: ModelType) -> list[dict[str, Any]]:
        return model_type.fixtures

    def find_fixture_by_id(self, fixtures: list[dict[str, Any]], fixture_id: Any) -> dict[str, Any] | None:
        key = _id_key(fixture_id)
        for fixture in fixtures:
            if _id_key(fixture.get("id")) == key:
                return fixture
        return None

    def __repr__(self) -> str:
        return "FixtureAdapter()"


class RESTAdapter:
    """Adapter for live records pushed into the store."""

    uses_fixture_arrays = False

    def __repr__(self) -> str:
        return "RESTAdapter()"


class RecordArray(list):
    """The records of a has_many relationship."""

    def add_object(self, record: Record) -> None:
        """Append *record* unless it is already present."""
        if not any(existing is record for existing in self):
            self.append(record)

    def ids(self) -> list[Any]:
        return [record.id for record in self]


class Record:
    """
    A live record managed by a ``MemoryStore``.

    Plain attributes are stored as given. belongs_to attributes hold a
    ``Record`` (or a pending awaitable); has_many attributes hold a
    ``RecordArray``. Ids and nested dicts assigned to relationships are
    turned into records of the target type.
    """

    def __init__(self, store: MemoryStore, model_name: str, record_id: Any) -> None:
        self.model_name = model_name
        self._store = store
        self._id = record_id
        self._data: dict[str, Any] = {}

    @property
    def id(self) -> Any:
        return self._id

    def get(self, key: str) -> Any:
        if key == "id":
            return self._id
        relationship = self._store.relationship_for(self.model_name, key)
        if relationship is not None and relationship.is_has_many:
            return self._data.setdefault(key, RecordArray())
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        if key == "id":
            raise ValueError(f"Cannot change the id of {self!r}")
        relationship = self._store.relationship_for(self.model_name, key)
        if relationship is None:
            self._data[key] = value
        elif relationship.is_has_many:
            self._data[key] = RecordArray(self._store.to_record(relationship.target_type, item) for item in value or [])
        else:
            self._data[key] = self._store.to_record(relationship.target_type, value)

    def serialize(self) -> dict[str, Any]:
        """Plain dict of the record with relationships as ids."""
        data: dict[str, Any] = {"id": self._id}
        for key, value in self._data.items():
            if isinstance(value, RecordArray):
                data[key] = value.ids()
            elif isinstance(value, Record):
                data[key] = value.id
            elif inspect.isawaitable(value):
                data[key] = None
            else:
                data[key] = value
        return data

    def __repr__(self) -> str:
        return f"<Record {self.model_name}:{self._id}>"


class MemoryStore:
    """
    In-memory store implementing the ``HostStore`` interface.

    Args:
        relationships: Where relationship metadata comes from.
        adapter: ``RESTAdapter()`` (default) or ``FixtureAdapter()``.
    """

    def __init__(self, relationships: RelationshipSource, adapter: Any = None) -> None:
        self.relationships = relationships
        self.adapter = adapter if adapter is not None else RESTAdapter()
        self._model_types: dict[str, ModelType] = {}
        self._records: dict[str, dict[str, Record]] = {}

    # ── Relationship metadata ────────────────────────────────────────────

    def relationships_by_name(self, model_name: str) -> list[Relationship]:
        return list(self.relationships.relationships_by_name(model_name))

    def relationship_for(self, model_name: str, key: str) -> Relationship | None:
        for relationship in self.relationships_by_name(model_name):
            if relationship.name == key:
                return relationship
        return None

    # ── HostStore interface ──────────────────────────────────────────────

    def model_for(self, model_name: str) -> ModelType:
        model_type = self._model_types.get(model_name)
        if model_type is None:
            model_type = self._model_types[model_name] = ModelType(model_name)
        return model_type

    def adapter_for(self, name: str) -> Any:
        return self.adapter

    def push(self, model_name: str, data: Mapping[str, Any]) -> Record:
        """
        Load *data* into the record with its id, creating it if needed.

        Raises:
            ValueError: If *data* has no id.
        """
        data = dict(data)
        record_id = data.pop("id", None)
        if record_id in (None, ""):
            raise ValueError(f"Cannot push a {model_name!r} without an id")
        record = self._identity(model_name, record_id)
        for key, value in data.items():
            record.set(key, value)
        return record

    def push_payload(self, model_name: str, payload: Mapping[str, Any]) -> list[Record]:
        """
        Push a payload of records.

        *payload* is either one record (it has an ``id``) of *model_name*, or a
        mapping of model names to a record or a list of records.
        """
        if "id" in payload:
            return [self.push(model_name, payload)]
        records = []
        for type_name, value in payload.items():
            items = value if isinstance(value, list) else [value]
            records.extend(self.push(type_name, item) for item in items)
        return records

    def unload_all(self, model_name: str) -> None:
        self._records.pop(model_name, None)

    # ── Lookup ───────────────────────────────────────────────────────────

    def peek(self, model_name: str, record_id: Any) -> Record | None:
        return self._records.get(model_name, {}).get(_id_key(record_id))

    def all(self, model_name: str) -> list[Record]:
        return list(self._records.get(model_name, {}).values())

    async def find(self, model_name: str, record_id: Any) -> Record:
        """
        Find a record, loading it from the fixture array in fixture mode.

        Raises:
            LookupError: If there is no such record.
        """
        record = self.peek(model_name, record_id)
        if record is not None:
            return record
        if getattr(self.adapter, "uses_fixture_arrays", False):
            fixtures = self.adapter.fixtures_for_type(self.model_for(model_name))
            fixture = self.adapter.find_fixture_by_id(fixtures, record_id)
            if fixture is not None:
                return self.push(model_name, fixture)
        raise LookupError(f"No {model_name!r} record with id {record_id!r}")

    async def create_record(self, model_name: str, /, **attributes: Any) -> Record:
        """
        Create and save a record, then add it to its parents' has_many.

        In fixture mode the saved record is also appended, as a fixture, to
        the model's fixture array.
        """
        attributes.setdefault("id", self._next_id(model_name))
        record = self.push(model_name, attributes)
        # Saving completes on a later tick, as with a real adapter.
        await asyncio.sleep(0)
        if getattr(self.adapter, "uses_fixture_arrays", False):
            self.adapter.fixtures_for_type(self.model_for(model_name)).append(record.serialize())
        LiveRecordFixup(self).link_created_record(record)
        return record

    # ── Internals ────────────────────────────────────────────────────────

    def to_record(self, model_name: str, value: Any) -> Any:
        """Turn an id or dict into a record of *model_name*; pass others through."""
        if value is None or isinstance(value, Record) or inspect.isawaitable(value):
            return value
        if isinstance(value, Mapping):
            return self.push(model_name, value)
        return self._identity(model_name, value)

    def _identity(self, model_name: str, record_id: Any) -> Record:
        records = self._records.setdefault(model_name, {})
        key = _id_key(record_id)
        record = records.get(key)
        if record is None:
            record = records[key] = Record(self, model_name, record_id)
        return record

    def _next_id(self, model_name: str) -> int:
        ids: Iterable[Any] = [record.id for record in self.all(model_name)]
        if getattr(self.adapter, "uses_fixture_arrays", False):
            ids = [*ids, *(fixture.get("id") for fixture in self.model_for(model_name).fixtures)]
        numeric = [int(i) for i in ids if str(i).isdigit()]
        return max(numeric, default=0) + 1

    def __repr__(self) -> str:
        return f"MemoryStore(adapter={self.adapter!r}, models={list(self._records)})"


__all__ = [
    "FixtureAdapter",
    "MemoryStore",
    "ModelType",
    "RESTAdapter",
    "Record",
    "RecordArray",
]
