from __future__ import annotations

import json
import logging
import sys
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import click
from rich.console import Console

from .context import (
    CLIContext,
    build_result,
    error_info_for_exception,
    exit_code_for_exception,
)
from .render import RenderSettings, render_result
from .results import CommandResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandOutput:
    data: Any | None = None


def _emit_json(result: CommandResult) -> None:
    payload = result.model_dump(by_alias=True, mode="json")
    sys.stdout.write(json.dumps(payload, ensure_ascii=False) + "\n")


def _emit_warnings(*, ctx: CLIContext, warnings: list[str]) -> None:
    if ctx.quiet or not warnings:
        return
    stderr = Console(file=sys.stderr, force_terminal=False)
    for w in warnings:
        stderr.print(f"Warning: {w}")


def emit_result(ctx: CLIContext, result: CommandResult) -> None:
    if ctx.output == "json":
        _emit_json(result)
        return

    render_result(
        result,
        settings=RenderSettings(quiet=ctx.quiet, verbosity=ctx.verbosity),
    )
    _emit_warnings(ctx=ctx, warnings=result.warnings)


CommandFn = Callable[[CLIContext, list[str]], CommandOutput]


def run_command(ctx: CLIContext, *, command: str, fn: CommandFn) -> None:
    started = time.time()
    warnings: list[str] = []
    try:
        out = fn(ctx, warnings)
        result = build_result(
            ok=True,
            command=command,
            started_at=started,
            data=out.data,
            warnings=warnings,
        )
    except Exception as exc:
        code = exit_code_for_exception(exc)
        if code == 1:
            logger.debug("Unexpected error in %s", command, exc_info=True)
        result = build_result(
            ok=False,
            command=command,
            started_at=started,
            data=None,
            warnings=warnings,
            error=error_info_for_exception(exc),
        )
        emit_result(ctx, result)
        raise click.exceptions.Exit(code) from exc
    emit_result(ctx, result)
