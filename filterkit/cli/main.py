from __future__ import annotations

import click
import rich_click

import filterkit

from .context import CLIContext
from .logging import configure_logging, restore_logging
from .options import OUTPUT_FORMATS


@click.group(
    name="filterkit",
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    cls=rich_click.RichGroup,
)
@click.option(
    "--output",
    type=click.Choice(OUTPUT_FORMATS),
    default="table",
)
@click.option("--json", "json_flag", is_flag=True, help="Alias for --output json.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-essential stderr output.")
@click.option("-v", "verbose", count=True, help="Increase verbosity (-v, -vv).")
@click.version_option(version=filterkit.__version__, prog_name="filterkit")
@click.pass_context
def cli(
    click_ctx: click.Context,
    *,
    output: str,
    json_flag: bool,
    quiet: bool,
    verbose: int,
) -> None:
    if click_ctx.invoked_subcommand is None:
        click.echo(click_ctx.get_help())
        raise click.exceptions.Exit(0)

    out = "json" if json_flag else output
    click_ctx.obj = CLIContext(
        output=out,  # type: ignore[arg-type]
        quiet=quiet,
        verbosity=verbose,
    )

    previous_logging = configure_logging(verbosity=verbose)
    click_ctx.call_on_close(lambda: restore_logging(previous_logging))


# Register commands
from .commands.operators_cmd import operators_cmd as _operators_cmd  # noqa: E402
from .commands.parse_cmd import parse_cmd as _parse_cmd  # noqa: E402
from .commands.version_cmd import version_cmd as _version_cmd  # noqa: E402

cli.add_command(_parse_cmd)
cli.add_command(_operators_cmd)
cli.add_command(_version_cmd)
