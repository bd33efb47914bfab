from __future__ import annotations

import click
import rich_click

from filterkit.operations import BINARY_OPERATIONS, PROPERTY_OPERATIONS, UNARY_OPERATIONS

from ..context import CLIContext
from ..options import output_options
from ..runner import CommandOutput, run_command


@click.command(name="operators", cls=rich_click.RichCommand)
@output_options
@click.pass_obj
def operators_cmd(ctx: CLIContext) -> None:
    """List the default operator vocabulary."""

    def fn(_: CLIContext, _warnings: list[str]) -> CommandOutput:
        rows = [
            {"keyword": op.keyword, "kind": "binary", "arity": 2, "node": op.__name__}
            for op in BINARY_OPERATIONS
        ]
        rows += [
            {"keyword": op.keyword, "kind": "unary", "arity": 1, "node": op.__name__}
            for op in UNARY_OPERATIONS
        ]
        rows += [
            {"keyword": op.keyword, "kind": "property", "arity": 2, "node": op.__name__}
            for op in PROPERTY_OPERATIONS
        ]
        return CommandOutput(data=rows)

    run_command(ctx, command="operators", fn=fn)
