"""
Pytest configuration for factory-guy tests.

Registers the factory-guy pytest plugin and provides the model definitions
and relationship schema shared by the test modules:

- user has_many projects, project belongs_to user
- comment belongs_to user, with no inverse on user
- person has no relationships
"""

import pytest

from factory_guy import FactoryGuy, Schema, belongs_to, has_many

pytest_plugins = ["factory_guy.testing.plugin"]


def define_factories(guy: FactoryGuy) -> FactoryGuy:
    """Register the definitions used across the test suite on *guy*."""
    guy.define(
        "person",
        {
            "sequences": {"person_name": lambda n: f"person #{n}"},
            "default": {"name": guy.generate("person_name")},
        },
    )
    guy.define(
        "user",
        {
            "default": {"name": "User1"},
            "admin": {"name": "Admin"},
        },
    )
    guy.define(
        "project",
        {
            "default": {"title": "Project"},
            "project_with_user": {"user": guy.association("user")},
            "project_with_admin": {"user": guy.association("admin")},
            "project_with_dude": {"user": {"name": "Dude"}},
        },
    )
    guy.define(
        "comment",
        {
            "default": {"body": "Nice"},
            "comment_with_user": {"user": guy.association("user")},
        },
    )
    return guy


def build_schema() -> Schema:
    schema = Schema()
    schema.model("user", projects=has_many("project"))
    schema.model("project", user=belongs_to("user"))
    schema.model("comment", user=belongs_to("user"))
    schema.model("person")
    return schema


@pytest.fixture
def guy() -> FactoryGuy:
    """A fresh registry with the shared definitions."""
    return define_factories(FactoryGuy())


@pytest.fixture
def schema() -> Schema:
    return build_schema()


@pytest.fixture
def factory_guy_schema() -> Schema:
    """Schema used by the plugin's ``memory_store`` fixture."""
    return build_schema()
