"""
Tests for the testing module: FactoryGuyTestHelper and the pytest plugin.
"""

from __future__ import annotations

import logging
from typing import Any

import pytest

from factory_guy import FactoryGuy, FixtureAdapter, MemoryStore, Record, Schema, UnknownFixtureError
from factory_guy.testing import FactoryGuyTestHelper
from tests.conftest import define_factories


@pytest.fixture
def helper(guy: FactoryGuy, schema: Schema) -> FactoryGuyTestHelper:
    return FactoryGuyTestHelper(guy, MemoryStore(schema))


class TestFactoryGuyTestHelper:
    def test_make(self, helper: FactoryGuyTestHelper) -> None:
        project = helper.make("project_with_user")
        assert isinstance(project, Record)
        assert project in project.get("user").get("projects")

    def test_make_list(self, helper: FactoryGuyTestHelper) -> None:
        users = helper.make_list("admin", 2)
        assert [u.get("name") for u in users] == ["Admin", "Admin"]

    def test_use_fixture_adapter(self, helper: FactoryGuyTestHelper) -> None:
        helper.use_fixture_adapter()
        assert isinstance(helper.store.adapter_for("application"), FixtureAdapter)
        user = helper.make("user")
        assert user == {"name": "User1", "id": 1}

    async def test_find_after_make_in_fixture_mode(self, helper: FactoryGuyTestHelper) -> None:
        helper.use_fixture_adapter()
        user_json = helper.make("user")
        helper.make("project", user=user_json["id"])
        user = await helper.find("user", user_json["id"])
        assert user.get("projects").ids() == [1]

    def test_push_record(self, helper: FactoryGuyTestHelper) -> None:
        user = helper.push_record("user", {"id": 3, "name": "Pushed"})
        assert user.get("name") == "Pushed"

    def test_push_payload(self, helper: FactoryGuyTestHelper) -> None:
        helper.use_fixture_adapter()
        helper.push_payload("user", {"id": 3})
        assert helper.store.model_for("user").fixtures == [{"id": 3}]

    def test_build_create_response(self, helper: FactoryGuyTestHelper) -> None:
        assert helper.build_create_response("admin", age=30) == {"user": {"name": "Admin", "age": 30, "id": 1}}

    def test_build_create_response_unknown(self, helper: FactoryGuyTestHelper) -> None:
        with pytest.raises(UnknownFixtureError):
            helper.build_create_response("nope")

    def test_session_tears_down(self, helper: FactoryGuyTestHelper) -> None:
        with helper.session() as active:
            assert active is helper
            helper.make("user")
        assert helper.store.all("user") == []  # type: ignore[attr-defined]
        assert helper.make("user").id == 1

    def test_session_tears_down_on_error(self, helper: FactoryGuyTestHelper) -> None:
        with pytest.raises(RuntimeError):
            with helper.session():
                helper.make("user")
                raise RuntimeError("test failed")
        assert helper.store.all("user") == []  # type: ignore[attr-defined]

    def test_session_teardown_failure_is_logged(
        self, helper: FactoryGuyTestHelper, caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def broken_teardown() -> None:
            raise RuntimeError("boom")

        monkeypatch.setattr(helper, "teardown", broken_teardown)
        with caplog.at_level(logging.DEBUG, logger="factory_guy.testing.helper"):
            with helper.session():
                pass
        assert "teardown failed" in caplog.text


@pytest.fixture(scope="module")
def factory_guy_registry() -> Any:
    """Module registry with the shared definitions, as a project conftest would set up."""
    guy = define_factories(FactoryGuy())
    yield guy
    guy.clear()


class TestPlugin:
    """The plugin fixtures reset ids between tests."""

    def test_first_build(self, factory_guy: FactoryGuy) -> None:
        assert factory_guy.build("person") == {"name": "person #1", "id": 1}

    def test_second_build_starts_over(self, factory_guy: FactoryGuy) -> None:
        assert factory_guy.build("person") == {"name": "person #1", "id": 1}

    def test_memory_store_uses_schema(self, memory_store: MemoryStore) -> None:
        assert [r.name for r in memory_store.relationships_by_name("user")] == ["projects"]

    def test_helper_fixture(self, factory_guy_helper: FactoryGuyTestHelper) -> None:
        user = factory_guy_helper.make("user")
        project = factory_guy_helper.make("project", user=user)
        assert list(user.get("projects")) == [project]

    def test_helper_fixture_was_torn_down(self, factory_guy_helper: FactoryGuyTestHelper) -> None:
        assert factory_guy_helper.make("user").id == 1
