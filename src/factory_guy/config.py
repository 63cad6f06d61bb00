"""
Configuration for the store integration.

Provides an immutable configuration container used by ``FixtureStore``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FixtureStoreConfig:
    """
    Immutable configuration for a ``FixtureStore``.

    Attributes:
        adapter_name: Name passed to ``store.adapter_for()`` to find the
            adapter deciding between fixture-array and live-record mode.
        infer_polymorphic_type: When True, a live-record fixture carrying
            ``polymorphic_type_key`` is pushed as the model that attribute
            names (``"BigGroup"`` is pushed as ``"big_group"``). This is a
            heuristic and only makes sense for adapters that store
            polymorphic types that way.
        polymorphic_type_key: Attribute read when inferring the type.
    """

    adapter_name: str = "application"
    infer_polymorphic_type: bool = False
    polymorphic_type_key: str = "type"


__all__ = ["FixtureStoreConfig"]
