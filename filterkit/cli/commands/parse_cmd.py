from __future__ import annotations

from pathlib import Path

import click
import rich_click

from filterkit.operations import Operation
from filterkit.parser import FilterPolishNotationParser

from ..context import CLIContext
from ..errors import CLIError
from ..options import catalog_options, output_options
from ..runner import CommandOutput, run_command
from ..schema import CatalogSchema, load_catalog, parse_property_spec


def _resolve_sentinel(
    *, name: str, value: str | None, disabled: bool, current: str | None
) -> str | None:
    if value is not None and disabled:
        raise CLIError(f"--{name}-sentinel and --no-{name}-sentinel are mutually exclusive.")
    if disabled:
        return None
    return value if value is not None else current


@click.command(name="parse", cls=rich_click.RichCommand)
@click.argument("expression")
@catalog_options
@output_options
@click.pass_obj
def parse_cmd(
    ctx: CLIContext,
    *,
    expression: str,
    schema_path: Path | None,
    property_specs: tuple[str, ...],
    locale: str | None,
    null_sentinel: str | None,
    no_null_sentinel: bool,
    empty_sentinel: str | None,
    no_empty_sentinel: bool,
    quoted: bool,
    max_depth: int,
) -> None:
    """
    Parse a prefix-notation filter and show the resulting tree.

    Properties come from `-p NAME:TYPE` options and/or a JSON `--schema` file
    of the form {"properties": [{"name": "age", "type": "int"}], "locale": "de-DE"}.

    Example: filterkit parse "and eq firstname John gt age 30" -p firstname:str -p age:int
    """

    def fn(_: CLIContext, warnings: list[str]) -> CommandOutput:
        catalog = load_catalog(schema_path) if schema_path is not None else CatalogSchema()
        updates = {
            "properties": [*catalog.properties, *(parse_property_spec(s) for s in property_specs)],
            "null_sentinel": _resolve_sentinel(
                name="null",
                value=null_sentinel,
                disabled=no_null_sentinel,
                current=catalog.null_sentinel,
            ),
            "empty_sentinel": _resolve_sentinel(
                name="empty",
                value=empty_sentinel,
                disabled=no_empty_sentinel,
                current=catalog.empty_sentinel,
            ),
        }
        if locale is not None:
            if schema_path is not None and catalog.locale.lower() != locale.lower():
                warnings.append(
                    f"--locale {locale} overrides locale {catalog.locale} from {schema_path}"
                )
            updates["locale"] = locale
        if quoted:
            updates["tokenizer"] = "quoted"
        catalog = catalog.model_copy(update=updates)

        options = catalog.build_options()
        parsed = FilterPolishNotationParser(options, max_depth=max_depth).parse(expression)
        operation: Operation = parsed.operation
        canonical = operation.to_string(
            null_literal=options.null_value or "NULL",
            empty_literal=options.empty_string_value or "EMPTY",
            locale=options.locale,
        )
        data = {
            "filter": canonical,
            "tokens": list(options.tokenizer.tokenize(expression)),
            "tree": operation.to_dict(),
        }
        return CommandOutput(data=data)

    run_command(ctx, command="parse", fn=fn)
