"""
Counter-backed value sequences.

A ``Sequence`` wraps a function of the sequence number and hands out
``fn(1)``, ``fn(2)``, ... on successive ``next()`` calls.

Example::

    seq = Sequence(lambda n: f"person #{n}")
    seq.next()  # "person #1"
    seq.next()  # "person #2"
    seq.reset()
    seq.next()  # "person #1"
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any


class Sequence:
    """Resettable counter-driven value generator owned by one definition."""

    def __init__(self, fn: Callable[[int], Any]) -> None:
        self.fn = fn
        self.index = 1

    def next(self) -> Any:
        """Return ``fn(index)`` and advance the index."""
        value = self.fn(self.index)
        self.index += 1
        return value

    def reset(self) -> None:
        self.index = 1

    def __repr__(self) -> str:
        return f"Sequence({getattr(self.fn, '__name__', self.fn)!r}, index={self.index})"


__all__ = ["Sequence"]
