"""
The definition registry.

``FactoryGuy`` maps model and fixture names to ``ModelDefinition`` objects
and is the entry point test code talks to. There is no global instance: the
test harness owns one and calls ``reset()``/``reset_models()`` between tests
and ``clear()`` between suites.

Example::

    guy = FactoryGuy()

    guy.define("user", {
        "default": {"name": "User1"},
        "admin": {"name": "Admin"},
    })
    guy.define("project", {
        "default": {"title": "Project"},
        "project_with_admin": {"user": guy.association("admin")},
    })

    guy.build("project_with_admin")
    # {"title": "Project", "user": {"name": "Admin", "id": 1}, "id": 1}
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from .attributes import Generated
from .definition import ModelDefinition
from .exceptions import UnknownFixtureError
from .host import uses_fixture_arrays

if TYPE_CHECKING:
    from .host import HostStore

logger = logging.getLogger(__name__)


class FactoryGuy:
    """Registry of model definitions and the fixture-building façade."""

    def __init__(self) -> None:
        self._definitions: dict[str, ModelDefinition] = {}

    @property
    def definitions(self) -> Mapping[str, ModelDefinition]:
        """Registered definitions keyed by model name (read-only)."""
        return MappingProxyType(self._definitions)

    def define(self, model_name: str, config: Mapping[str, Any] | None = None) -> None:
        """
        Define a model's fixtures.

        ``config`` holds an optional ``sequences`` block, an optional
        ``default`` block, and any number of named fixtures::

            guy.define("person", {
                "sequences": {"person_name": lambda n: f"person #{n}"},
                "default": {"type": "normal", "name": guy.generate("person_name")},
                "dude": {"type": "dude"},
            })

        Defining an already registered model is ignored (see
        ``ModelDefinition.merge``).

        Raises:
            InvalidSequenceDefinitionError: If a sequence is not a one-argument
                callable. The model is not registered.
        """
        existing = self._definitions.get(model_name)
        if existing is not None:
            existing.merge(config)
            return
        self._definitions[model_name] = ModelDefinition(model_name, config, self)
        logger.debug("Defined model %r", model_name)

    def generate(self, sequence_name: str) -> Generated:
        """
        Reference a sequence from a definition's attributes.

        The returned value calls ``generate()`` on whichever definition is
        building, so a definition can use its own sequences before it exists.
        """
        return Generated(
            lambda definition, fixture: definition.generate(sequence_name),
            description=f"generate({sequence_name!r})",
        )

    def association(self, fixture_name: str, /, **overrides: Any) -> Generated:
        """Embed a fixture built from *fixture_name* as an attribute value."""
        return Generated(
            lambda definition, fixture: self.build(fixture_name, **overrides),
            description=f"association({fixture_name!r})",
        )

    def lookup_definition_for_fixture_name(self, name: str) -> ModelDefinition | None:
        """Return the first definition whose model or variant name is *name*."""
        for definition in self._definitions.values():
            if definition.matches_name(name):
                return definition
        return None

    def lookup_model_for_fixture_name(self, name: str) -> str | None:
        """Model name a fixture name belongs to (``"admin"`` -> ``"user"``)."""
        definition = self.lookup_definition_for_fixture_name(name)
        if definition is None:
            return None
        return definition.model_name

    def build(self, fixture_name: str, /, **overrides: Any) -> dict[str, Any]:
        """
        Build a fixture for a model name or named fixture.

        Raises:
            UnknownFixtureError: If no definition matches *fixture_name*.
        """
        return self._definition_for(fixture_name).build(fixture_name, overrides)

    def build_list(self, fixture_name: str, count: int, /, **overrides: Any) -> list[dict[str, Any]]:
        """
        Build *count* fixtures for a model name or named fixture.

        Raises:
            UnknownFixtureError: If no definition matches *fixture_name*.
        """
        return self._definition_for(fixture_name).build_list(fixture_name, count, overrides)

    def reset(self) -> None:
        """Reset ids and sequences of every definition."""
        for definition in self._definitions.values():
            definition.reset()

    def reset_models(self, store: HostStore, adapter_name: str = "application") -> None:
        """
        Reset every definition and clear its model's data from *store*.

        Cleanup is best-effort: a model whose cleanup fails is logged and
        skipped, and the remaining models are still cleared.
        """
        for definition in self._definitions.values():
            definition.reset()
            try:
                model_type = store.model_for(definition.model_name)
                if uses_fixture_arrays(store, adapter_name):
                    store.adapter_for(adapter_name).fixtures_for_type(model_type).clear()
                store.unload_all(definition.model_name)
            except Exception:
                logger.debug(
                    "Model reset: failed to clear store data for %r",
                    definition.model_name,
                    exc_info=True,
                )

    def clear(self) -> None:
        """Discard every definition."""
        self._definitions.clear()

    def _definition_for(self, fixture_name: str) -> ModelDefinition:
        definition = self.lookup_definition_for_fixture_name(fixture_name)
        if definition is None:
            raise UnknownFixtureError(fixture_name)
        return definition

    def __repr__(self) -> str:
        return f"FactoryGuy(models={list(self._definitions)})"


__all__ = ["FactoryGuy"]
