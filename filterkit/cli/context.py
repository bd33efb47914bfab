from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Literal

from filterkit.exceptions import (
    ConversionError,
    FilterConfigurationError,
    FilterError,
    FilterParseError,
)

from .errors import CLIError
from .results import CommandMeta, CommandResult, ErrorInfo

OutputFormat = Literal["table", "json"]


@dataclass
class CLIContext:
    output: OutputFormat
    quiet: bool
    verbosity: int


def exit_code_for_exception(exc: Exception) -> int:
    if isinstance(exc, CLIError):
        return exc.exit_code
    if isinstance(exc, FilterError):
        return 2
    return 1


def _error_type_for_filter_error(exc: FilterError) -> str:
    if isinstance(exc, FilterParseError):
        return "parse_error"
    if isinstance(exc, ConversionError):
        return "conversion_error"
    if isinstance(exc, FilterConfigurationError):
        return "config_error"
    return "filter_error"


def error_info_for_exception(exc: Exception) -> ErrorInfo:
    if isinstance(exc, CLIError):
        return ErrorInfo(
            type=exc.error_type, message=exc.message, hint=exc.hint, details=exc.details
        )
    if isinstance(exc, FilterError):
        details: dict[str, Any] = {"kind": exc.__class__.__name__, **exc.details}
        return ErrorInfo(
            type=_error_type_for_filter_error(exc), message=exc.message, details=details
        )
    return ErrorInfo(type="internal_error", message=f"{exc.__class__.__name__}: {exc}")


def build_result(
    *,
    ok: bool,
    command: str,
    started_at: float,
    data: Any | None,
    warnings: list[str],
    error: ErrorInfo | None = None,
) -> CommandResult:
    duration_ms = int(max(0.0, (time.time() - started_at) * 1000))
    return CommandResult(
        ok=ok,
        command=command,
        data=data,
        warnings=warnings,
        meta=CommandMeta(duration_ms=duration_ms),
        error=error,
    )
