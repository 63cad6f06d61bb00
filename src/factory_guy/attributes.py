"""
Tagged attribute values for model definitions.

Every attribute of a definition (and every build override) is held as one of
three variants:

- ``StaticValue``: a literal, copied into each fixture
- ``Generated``: a function called at build time with the definition and
  the in-progress fixture (sequences and associations are ``Generated``)
- ``NestedSpec``: an attribute map built into a nested fixture through the
  registry, using the attribute name as the fixture name

Plain values are classified once by ``to_attribute()``: a plain callable is
called with the in-progress fixture, or with no arguments if it takes none.
Resolution then matches on the variant instead of inspecting runtime types.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .definition import ModelDefinition

GeneratorFn = Callable[["ModelDefinition", dict[str, Any]], Any]


@dataclass(frozen=True, slots=True)
class StaticValue:
    """A literal attribute value. Wrap a dict in it to keep it literal."""

    value: Any


@dataclass(frozen=True, slots=True)
class Generated:
    """A value computed per build from the definition and the fixture so far."""

    fn: GeneratorFn
    description: str = field(default="generated", compare=False)

    def __call__(self, definition: ModelDefinition, fixture: dict[str, Any]) -> Any:
        return self.fn(definition, fixture)


@dataclass(frozen=True, slots=True)
class NestedSpec:
    """An inline association: attribute overrides for a nested fixture."""

    attributes: Mapping[str, Any]


AttributeValue = StaticValue | Generated | NestedSpec


def to_attribute(value: Any) -> AttributeValue:
    """Classify a plain config or override value into its tagged variant."""
    if isinstance(value, (StaticValue, Generated, NestedSpec)):
        return value
    if isinstance(value, Mapping):
        return NestedSpec(dict(value))
    if callable(value) and not isinstance(value, type):
        fn = value
        description = getattr(fn, "__name__", repr(fn))
        if _accepts_fixture(fn):
            return Generated(lambda definition, fixture: fn(fixture), description=description)
        return Generated(lambda definition, fixture: fn(), description=description)
    return StaticValue(value)


def _accepts_fixture(fn: Callable[..., Any]) -> bool:
    try:
        inspect.signature(fn).bind({})
    except TypeError:
        return False
    except ValueError:
        # No signature available (some builtins); pass the fixture.
        return True
    return True


def to_attributes(values: Mapping[str, Any] | None) -> dict[str, AttributeValue]:
    """Classify every value of *values*, keeping key order."""
    if not values:
        return {}
    return {key: to_attribute(value) for key, value in values.items()}


__all__ = [
    "AttributeValue",
    "Generated",
    "GeneratorFn",
    "NestedSpec",
    "StaticValue",
    "to_attribute",
    "to_attributes",
]
