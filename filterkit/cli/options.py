"""Shared click options for filterkit commands."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

import click

from filterkit.parser import DEFAULT_MAX_DEPTH

from .context import CLIContext

F = TypeVar("F", bound=Callable[..., object])

OUTPUT_FORMATS = ("table", "json")

# Upper bound for --max-depth that stays well below the interpreter recursion limit.
MAX_DEPTH_LIMIT = 2 * DEFAULT_MAX_DEPTH


def _apply_output(ctx: click.Context, output: str) -> None:
    obj = ctx.obj
    if isinstance(obj, CLIContext):
        obj.output = output  # type: ignore[assignment]


def _set_output(ctx: click.Context, _param: click.Parameter, value: str | None) -> str | None:
    if value is not None:
        _apply_output(ctx, value)
    return value


def _set_json(ctx: click.Context, _param: click.Parameter, value: bool) -> bool:
    if value:
        _apply_output(ctx, "json")
    return value


def output_options(fn: F) -> F:
    """Let a command override the group's output format (`--output`, `--json`)."""
    fn = click.option(
        "--output",
        type=click.Choice(OUTPUT_FORMATS),
        default=None,
        help="Override output format for this command.",
        callback=_set_output,
        expose_value=False,
    )(fn)
    fn = click.option(
        "--json",
        is_flag=True,
        help="Alias for --output json.",
        callback=_set_json,
        expose_value=False,
    )(fn)
    return fn


def catalog_options(fn: F) -> F:
    """Options describing the property catalog and engine settings for a parse."""
    decorators = [
        click.option(
            "--schema",
            "schema_path",
            type=click.Path(dir_okay=False, path_type=Path),
            default=None,
            help="JSON property catalog file.",
        ),
        click.option(
            "-p",
            "--property",
            "property_specs",
            multiple=True,
            metavar="NAME:TYPE",
            help="Filterable property (repeatable), e.g. -p age:int.",
        ),
        click.option("--locale", type=str, default=None, help="Locale for numbers and dates."),
        click.option("--null-sentinel", type=str, default=None, help="Literal meaning NULL."),
        click.option("--no-null-sentinel", is_flag=True, help="Treat no literal as NULL."),
        click.option(
            "--empty-sentinel", type=str, default=None, help="Literal meaning empty string."
        ),
        click.option(
            "--no-empty-sentinel", is_flag=True, help="Treat no literal as empty string."
        ),
        click.option(
            "--quoted", is_flag=True, help="Allow double-quoted values containing spaces."
        ),
        click.option(
            "--max-depth",
            type=click.IntRange(min=1, max=MAX_DEPTH_LIMIT),
            default=DEFAULT_MAX_DEPTH,
            show_default=True,
            help="Maximum nesting depth.",
        ),
    ]
    for decorator in reversed(decorators):
        fn = decorator(fn)
    return fn
