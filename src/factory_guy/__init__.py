"""
factory-guy: fixture definitions and relationship-aware test doubles.

Example::

    from factory_guy import FactoryGuy

    guy = FactoryGuy()
    guy.define("person", {
        "sequences": {"person_name": lambda n: f"person #{n}"},
        "default": {"name": guy.generate("person_name")},
    })

    guy.build("person")  # {"name": "person #1", "id": 1}
"""

from .attributes import Generated, NestedSpec, StaticValue
from .config import FixtureStoreConfig
from .definition import ModelDefinition
from .exceptions import (
    FactoryGuyError,
    InvalidSequenceDefinitionError,
    UnknownFixtureError,
    UnknownSequenceError,
)
from .fixup import FixtureArrayFixup, LiveRecordFixup, find_inverse_has_many
from .host import FixtureArrayAdapter, HostStore, ManagedRecord, RelationshipSource
from .memory import FixtureAdapter, MemoryStore, Record, RecordArray, RESTAdapter
from .registry import FactoryGuy
from .relationships import Relationship, RelationshipKind, Schema, belongs_to, has_many
from .sequence import Sequence
from .store import FixtureStore

__version__ = "0.1.0"

__all__ = [
    "FactoryGuy",
    "FactoryGuyError",
    "FixtureAdapter",
    "FixtureArrayAdapter",
    "FixtureArrayFixup",
    "FixtureStore",
    "FixtureStoreConfig",
    "Generated",
    "HostStore",
    "InvalidSequenceDefinitionError",
    "LiveRecordFixup",
    "ManagedRecord",
    "MemoryStore",
    "ModelDefinition",
    "NestedSpec",
    "RESTAdapter",
    "Record",
    "RecordArray",
    "Relationship",
    "RelationshipKind",
    "RelationshipSource",
    "Schema",
    "Sequence",
    "StaticValue",
    "UnknownFixtureError",
    "UnknownSequenceError",
    "belongs_to",
    "find_inverse_has_many",
    "has_many",
]
