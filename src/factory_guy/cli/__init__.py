"""
factory-guy command line interface.

Inspect fixture definitions from a shell:
- definitions: List defined models, their named fixtures and sequences
- build: Build fixtures and print them as JSON
"""

from .commands import cli

__all__ = ["cli"]
