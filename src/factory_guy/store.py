"""
Store integration: build fixtures straight into a host store.

``FixtureStore`` pairs a ``FactoryGuy`` registry with a host store and picks
the fixup strategy from the store's adapter: fixture-array adapters get
linked fixture dicts appended to their arrays, every other adapter gets live
records pushed and linked.

Example::

    guy = FactoryGuy()
    store = MemoryStore(schema, adapter=RESTAdapter())
    fixtures = FixtureStore(store, guy)

    user = fixtures.make_fixture("user")
    project = fixtures.make_fixture("project", user=user)
    assert project in user.get("projects")
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from .config import FixtureStoreConfig
from .exceptions import UnknownFixtureError
from .fixup import FixtureArrayFixup, LiveRecordFixup
from .host import HostStore, uses_fixture_arrays
from .registry import FactoryGuy

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def underscore(name: str) -> str:
    """``"BigGroup"`` -> ``"big_group"``, ``"big-group"`` -> ``"big_group"``."""
    return _CAMEL_BOUNDARY_RE.sub("_", name).replace("-", "_").lower()


class FixtureStore:
    """Builds fixtures through a registry and stores them in a host store."""

    def __init__(
        self,
        store: HostStore,
        guy: FactoryGuy,
        config: FixtureStoreConfig | None = None,
    ) -> None:
        self.store = store
        self.guy = guy
        self.config = config or FixtureStoreConfig()

    @property
    def using_fixture_adapter(self) -> bool:
        """True if the store's adapter keeps static fixture arrays."""
        return uses_fixture_arrays(self.store, self.config.adapter_name)

    def make_fixture(self, fixture_name: str, /, **overrides: Any) -> Any:
        """
        Build a fixture and put it in the store.

        Returns:
            The linked fixture dict in fixture-array mode, the pushed record
            otherwise.

        Raises:
            UnknownFixtureError: If no definition matches *fixture_name*.
        """
        model_name = self.guy.lookup_model_for_fixture_name(fixture_name)
        if model_name is None:
            raise UnknownFixtureError(fixture_name)
        fixture = self.guy.build(fixture_name, **overrides)
        self._build_inline_associations(model_name, fixture)

        if self.using_fixture_adapter:
            fixup = FixtureArrayFixup(self.store, self.config.adapter_name)
            fixup.link(model_name, fixture)
            return fixup.push_fixture(model_name, fixture)

        live = LiveRecordFixup(self.store)
        live.embed_belongs_to(model_name, fixture)
        model_name = self._concrete_model_name(model_name, fixture)
        record = self.store.push(model_name, fixture)
        live.link(record)
        return record

    def make_list(self, fixture_name: str, count: int, /, **overrides: Any) -> list[Any]:
        """Call ``make_fixture()`` *count* times."""
        return [self.make_fixture(fixture_name, **overrides) for _ in range(count)]

    def push_payload(self, model_name: str, payload: dict[str, Any]) -> Any:
        """
        Load raw data into the store.

        In fixture-array mode the payload is appended to the model's fixture
        array as-is; otherwise the store's own ``push_payload`` is used.
        """
        if self.using_fixture_adapter:
            return FixtureArrayFixup(self.store, self.config.adapter_name).push_fixture(model_name, payload)
        return self.store.push_payload(model_name, payload)

    def reset(self) -> None:
        """Reset the registry and clear its models from the store."""
        self.guy.reset_models(self.store, self.config.adapter_name)

    def _build_inline_associations(self, model_name: str, fixture: dict[str, Any]) -> None:
        # Inline related dicts without an id are built through the registry
        # when their model is defined, so they get an id like any fixture.
        for relationship in self.store.relationships_by_name(model_name):
            value = fixture.get(relationship.name)
            if relationship.is_has_many and isinstance(value, list):
                fixture[relationship.name] = [self._build_inline(relationship.target_type, item) for item in value]
            elif relationship.is_belongs_to and relationship.name in fixture:
                fixture[relationship.name] = self._build_inline(relationship.target_type, value)

    def _build_inline(self, model_name: str, value: Any) -> Any:
        if not isinstance(value, Mapping) or value.get("id") not in (None, ""):
            return value
        if self.guy.lookup_definition_for_fixture_name(model_name) is None:
            return value
        return self.guy.build(model_name, **value)

    def _concrete_model_name(self, model_name: str, fixture: dict[str, Any]) -> str:
        if not self.config.infer_polymorphic_type:
            return model_name
        type_name = fixture.get(self.config.polymorphic_type_key)
        if not isinstance(type_name, str) or not type_name:
            return model_name
        concrete = underscore(type_name)
        if concrete != model_name:
            logger.debug("Pushing %r fixture as polymorphic type %r", model_name, concrete)
        return concrete


__all__ = ["FixtureStore", "underscore"]
