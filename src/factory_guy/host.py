"""
Capabilities consumed from the host data layer.

factory-guy does not own a store. Whatever data layer it is pointed at
supplies relationship metadata and a store exposing the operations below;
``factory_guy.memory`` is a complete in-memory implementation.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from .relationships import Relationship


@runtime_checkable
class RelationshipSource(Protocol):
    """Answers which relationships a model type declares."""

    def relationships_by_name(self, model_name: str) -> Sequence[Relationship]: ...


@runtime_checkable
class ManagedRecord(Protocol):
    """A live record owned by the host store."""

    model_name: str

    @property
    def id(self) -> Any: ...

    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


class FixtureArrayAdapter(Protocol):
    """Adapter backing each model type with a static list of fixture dicts."""

    uses_fixture_arrays: bool

    def fixtures_for_type(self, model_type: Any) -> list[dict[str, Any]]: ...

    def find_fixture_by_id(self, fixtures: list[dict[str, Any]], fixture_id: Any) -> dict[str, Any] | None: ...


class HostStore(RelationshipSource, Protocol):
    """The host data store factory-guy pushes fixtures and records into."""

    def model_for(self, model_name: str) -> Any: ...

    def push(self, model_name: str, data: dict[str, Any]) -> Any: ...

    def push_payload(self, model_name: str, payload: dict[str, Any]) -> Any: ...

    def unload_all(self, model_name: str) -> None: ...

    def adapter_for(self, name: str) -> Any: ...


def uses_fixture_arrays(store: HostStore, adapter_name: str = "application") -> bool:
    """True if the store's adapter keeps fixtures in static per-type arrays."""
    adapter = store.adapter_for(adapter_name)
    return bool(getattr(adapter, "uses_fixture_arrays", False))


__all__ = [
    "FixtureArrayAdapter",
    "HostStore",
    "ManagedRecord",
    "RelationshipSource",
    "uses_fixture_arrays",
]
