"""
Testing utilities built on factory-guy.

Provides a test helper wrapping a registry and a store, and a pytest plugin
with ready-made fixtures.

Example::

    # conftest.py
    pytest_plugins = ["factory_guy.testing.plugin"]

    # test_projects.py
    def test_project_user(factory_guy_helper):
        project = factory_guy_helper.make("project_with_user")
        assert project in project.get("user").get("projects")
"""

from .helper import FactoryGuyTestHelper

__all__ = ["FactoryGuyTestHelper"]
