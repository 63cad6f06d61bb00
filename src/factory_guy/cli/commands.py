"""
CLI commands for factory-guy.

Uses click for command-line argument parsing. Definitions are loaded from an
explicitly named module that either exposes ``register(guy)`` or a
``FactoryGuy`` instance called ``guy``.
"""

import importlib
import json
import logging
from typing import Any

import click
from pydantic_core import to_jsonable_python

from ..exceptions import FactoryGuyError
from ..registry import FactoryGuy


def load_registry(module_path: str | None) -> FactoryGuy:
    """Import *module_path* and return the registry it defines."""
    if not module_path:
        raise click.UsageError("No factories module given. Use --factories or FACTORY_GUY_FACTORIES.")
    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise click.ClickException(f"Error importing {module_path}: {e}") from e

    register = getattr(module, "register", None)
    if callable(register):
        guy = FactoryGuy()
        register(guy)
        return guy

    guy = getattr(module, "guy", None)
    if isinstance(guy, FactoryGuy):
        return guy
    raise click.ClickException(f"{module_path} defines neither register(guy) nor a FactoryGuy named 'guy'")


def parse_override(raw: str) -> tuple[str, Any]:
    """``"age=30"`` -> ``("age", 30)``; values that are not JSON stay strings."""
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise click.BadParameter(f"expected key=value, got {raw!r}", param_hint="--set")
    try:
        return key, json.loads(value)
    except json.JSONDecodeError:
        return key, value


@click.group()
@click.option(
    "--factories",
    "-f",
    envvar="FACTORY_GUY_FACTORIES",
    help="Module defining the fixtures (register(guy) or a FactoryGuy named 'guy')",
)
@click.option("--verbose", "-v", is_flag=True, help="Log fixture building at debug level")
@click.pass_context
def cli(ctx: click.Context, factories: str | None, verbose: bool) -> None:
    """factory-guy fixture definition tool."""
    ctx.ensure_object(dict)
    ctx.obj["factories"] = factories
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@click.pass_context
def definitions(ctx: click.Context) -> None:
    """List defined models with their named fixtures and sequences."""
    guy = load_registry(ctx.obj["factories"])

    if not guy.definitions:
        click.echo("No definitions found.")
        return

    for model_name, definition in guy.definitions.items():
        click.echo(model_name)
        if definition.named_variants:
            click.echo(f"  fixtures: {', '.join(definition.named_variants)}")
        if definition.sequences:
            click.echo(f"  sequences: {', '.join(definition.sequences)}")


@cli.command()
@click.argument("name")
@click.option("--count", "-n", default=1, show_default=True, type=click.IntRange(min=1), help="Fixtures to build")
@click.option("--set", "-s", "overrides", multiple=True, help="Attribute override as key=value (JSON values)")
@click.pass_context
def build(ctx: click.Context, name: str, count: int, overrides: tuple[str, ...]) -> None:
    """Build fixture NAME and print it as JSON."""
    guy = load_registry(ctx.obj["factories"])
    attributes = dict(parse_override(raw) for raw in overrides)

    try:
        if count == 1:
            result: Any = guy.build(name, **attributes)
        else:
            result = guy.build_list(name, count, **attributes)
    except FactoryGuyError as e:
        raise click.ClickException(e.message) from e

    click.echo(json.dumps(to_jsonable_python(result, fallback=str), indent=2))
