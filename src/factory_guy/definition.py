"""
Model definitions: defaults, named variants and sequences for one model.

Example::

    guy.define("person", {
        "sequences": {"person_name": lambda n: f"person #{n}"},
        "default": {"name": guy.generate("person_name"), "type": "normal"},
        "dude": {"type": "dude"},
    })

    guy.build("person")  # {"name": "person #1", "type": "normal", "id": 1}
    guy.build("dude")    # {"name": "person #2", "type": "dude", "id": 2}
"""

from __future__ import annotations

import copy
import inspect
import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from .attributes import AttributeValue, Generated, NestedSpec, StaticValue, to_attributes
from .exceptions import FactoryGuyError, InvalidSequenceDefinitionError, UnknownSequenceError
from .sequence import Sequence

if TYPE_CHECKING:
    from .registry import FactoryGuy

logger = logging.getLogger(__name__)

SEQUENCES_KEY = "sequences"
DEFAULT_KEY = "default"


def _accepts_one_argument(fn: Callable[..., Any]) -> bool:
    try:
        inspect.signature(fn).bind(1)
    except TypeError:
        return False
    except ValueError:
        # No signature available (some builtins); trust that it is callable.
        return True
    return True


class ModelDefinition:
    """
    Template from which fixtures of one model type are built.

    Attributes:
        model_name: Registered model name, e.g. ``"user"``.
        default_attributes: Attributes every fixture of the model starts from.
        named_variants: Named fixture variants (``"admin"``) and their attributes.
        sequences: Sequences this definition can ``generate()`` from.
        next_id: Id given to the next fixture built without an explicit id.
    """

    def __init__(self, model_name: str, config: Mapping[str, Any] | None, registry: FactoryGuy) -> None:
        self.model_name = model_name
        self.next_id = 1
        self.sequences: dict[str, Sequence] = {}
        self.default_attributes: dict[str, AttributeValue] = {}
        self.named_variants: dict[str, dict[str, AttributeValue]] = {}
        self._registry = registry
        self._parse_config(dict(config or {}))

    # ── Config parsing ───────────────────────────────────────────────────

    def _parse_config(self, config: dict[str, Any]) -> None:
        sequences = self._parse_sequences(config.pop(SEQUENCES_KEY, None))
        default_attributes = to_attributes(config.pop(DEFAULT_KEY, None))

        named_variants: dict[str, dict[str, AttributeValue]] = {}
        for variant_name, attributes in config.items():
            if attributes is not None and not isinstance(attributes, Mapping):
                raise FactoryGuyError(
                    f"Problem with [{variant_name}] in '{self.model_name}' definition. "
                    "Named fixtures must be attribute mappings"
                )
            named_variants[variant_name] = to_attributes(attributes)

        self.sequences = sequences
        self.default_attributes = default_attributes
        self.named_variants = named_variants

    def _parse_sequences(self, config: Mapping[str, Any] | None) -> dict[str, Sequence]:
        sequences: dict[str, Sequence] = {}
        for sequence_name, fn in (config or {}).items():
            if not callable(fn) or not _accepts_one_argument(fn):
                raise InvalidSequenceDefinitionError(sequence_name, self.model_name)
            sequences[sequence_name] = Sequence(fn)
        return sequences

    # ── Public API ───────────────────────────────────────────────────────

    def matches_name(self, name: str) -> bool:
        """True if *name* is this model's name or one of its named variants."""
        return name == self.model_name or name in self.named_variants

    def merge(self, config: Mapping[str, Any] | None) -> None:
        """
        Placeholder for merging a second ``define()`` of the same model.

        Redefinition is intentionally a no-op: the first definition stays
        in place unchanged.
        """
        logger.warning(
            "Model %r is already defined; ignoring redefinition with keys %s",
            self.model_name,
            sorted(config or {}),
        )

    def generate(self, sequence_name: str) -> Any:
        """
        Call ``next()`` on the named sequence.

        Raises:
            UnknownSequenceError: If the sequence is not declared here.
        """
        sequence = self.sequences.get(sequence_name)
        if sequence is None:
            raise UnknownSequenceError(sequence_name, self.model_name)
        return sequence.next()

    def build(self, fixture_name: str, overrides: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """
        Build a fixture by name.

        Defaults, then the named variant, then *overrides* are merged (later
        wins). Literal values are filled in first, then generated and nested
        values are resolved in order, so a generator sees every literal and
        the generated values before it. An id is assigned unless one was
        supplied.

        Args:
            fixture_name: The model name or one of its variant names.
            overrides: Attribute values overriding the definition.

        Returns:
            The fixture as a plain dict.
        """
        override_attributes = to_attributes(overrides)
        merged: dict[str, AttributeValue] = {
            **self.default_attributes,
            **self.named_variants.get(fixture_name, {}),
            **override_attributes,
        }

        # Literals go in first so every generator sees the whole merged fixture.
        fixture: dict[str, Any] = {}
        for attribute, value in merged.items():
            if isinstance(value, StaticValue):
                # Definition literals are shared between builds; caller overrides are not.
                owned = attribute not in override_attributes
                fixture[attribute] = self._resolve(attribute, value, fixture, copy_static=owned)
        for attribute, value in merged.items():
            if not isinstance(value, StaticValue):
                fixture[attribute] = self._resolve(attribute, value, fixture)
        fixture = {attribute: fixture[attribute] for attribute in merged}

        if fixture.get("id") in (None, ""):
            fixture["id"] = self.next_id
            self.next_id += 1

        logger.debug("Built %r fixture for model %r with id %r", fixture_name, self.model_name, fixture["id"])
        return fixture

    def build_list(
        self,
        fixture_name: str,
        count: int,
        overrides: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Build *count* fixtures, each one an independent ``build()``."""
        return [self.build(fixture_name, overrides) for _ in range(count)]

    def reset(self) -> None:
        """Set the id counter back to 1 and reset every sequence."""
        self.next_id = 1
        for sequence in self.sequences.values():
            sequence.reset()

    def _resolve(
        self,
        attribute: str,
        value: AttributeValue,
        fixture: dict[str, Any],
        copy_static: bool = True,
    ) -> Any:
        match value:
            case StaticValue(value=literal):
                if copy_static and isinstance(literal, (list, dict, tuple, set)):
                    return copy.deepcopy(literal)
                return literal
            case Generated():
                return value(self, fixture)
            case NestedSpec(attributes=attributes):
                return self._registry.build(attribute, **attributes)

    def __repr__(self) -> str:
        return f"ModelDefinition({self.model_name!r}, variants={list(self.named_variants)})"


__all__ = ["ModelDefinition"]
