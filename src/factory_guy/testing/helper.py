"""
Test helper pairing a ``FactoryGuy`` registry with a host store.

Example::

    helper = FactoryGuyTestHelper(guy, MemoryStore(schema))

    with helper.session():
        user = helper.make("user")
        response = helper.build_create_response("project", user=user.id)
        # {"project": {"title": "Project", "user": 1, "id": 1}}
    # on exit: ids and sequences reset, store data cleared
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from factory_guy.config import FixtureStoreConfig
from factory_guy.exceptions import UnknownFixtureError
from factory_guy.host import HostStore
from factory_guy.memory import FixtureAdapter
from factory_guy.registry import FactoryGuy
from factory_guy.store import FixtureStore

logger = logging.getLogger(__name__)


class FactoryGuyTestHelper:
    """
    Convenience layer used from test cases.

    Attributes:
        guy: The definition registry.
        store: The host store fixtures are made into.
        fixtures: The ``FixtureStore`` doing the work.
    """

    def __init__(self, guy: FactoryGuy, store: HostStore, config: FixtureStoreConfig | None = None) -> None:
        self.guy = guy
        self.store = store
        self.fixtures = FixtureStore(store, guy, config)

    def use_fixture_adapter(self, adapter: Any = None) -> None:
        """Switch the store to fixture-array mode (stores with an ``adapter`` attribute)."""
        self.store.adapter = adapter if adapter is not None else FixtureAdapter()  # type: ignore[attr-defined]

    def make(self, fixture_name: str, /, **overrides: Any) -> Any:
        return self.fixtures.make_fixture(fixture_name, **overrides)

    def make_list(self, fixture_name: str, count: int, /, **overrides: Any) -> list[Any]:
        return self.fixtures.make_list(fixture_name, count, **overrides)

    async def find(self, model_name: str, record_id: Any) -> Any:
        """Proxy to the store's ``find``."""
        return await self.store.find(model_name, record_id)  # type: ignore[attr-defined]

    def push_payload(self, model_name: str, payload: dict[str, Any]) -> Any:
        return self.fixtures.push_payload(model_name, payload)

    def push_record(self, model_name: str, data: dict[str, Any]) -> Any:
        return self.store.push(model_name, data)

    def build_create_response(self, fixture_name: str, /, **overrides: Any) -> dict[str, dict[str, Any]]:
        """
        Build the body a server would answer a create request with.

        Returns:
            ``{model_name: fixture}``

        Raises:
            UnknownFixtureError: If no definition matches *fixture_name*.
        """
        model_name = self.guy.lookup_model_for_fixture_name(fixture_name)
        if model_name is None:
            raise UnknownFixtureError(fixture_name)
        return {model_name: self.guy.build(fixture_name, **overrides)}

    def teardown(self) -> None:
        """Reset ids and sequences and clear every defined model from the store."""
        self.fixtures.reset()

    @contextmanager
    def session(self) -> Iterator[FactoryGuyTestHelper]:
        """Yield the helper and tear down on exit (best-effort)."""
        try:
            yield self
        finally:
            try:
                self.teardown()
            except Exception:
                logger.debug("Test helper teardown failed", exc_info=True)


__all__ = ["FactoryGuyTestHelper"]
