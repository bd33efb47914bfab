from __future__ import annotations

from pathlib import Path
from typing import Any


class CLIError(Exception):
    """A command line failure rendered as `<title>: <message>`."""

    def __init__(
        self,
        message: str,
        *,
        exit_code: int = 2,
        error_type: str = "usage_error",
        hint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code
        self.error_type = error_type
        self.hint = hint
        self.details = details

    def __str__(self) -> str:  # pragma: no cover
        return self.message


class SchemaFileError(CLIError):
    """The `--schema` catalog file is unreadable (exit 1) or invalid (exit 2)."""

    def __init__(self, message: str, path: Path, *, unreadable: bool = False) -> None:
        super().__init__(
            message,
            exit_code=1 if unreadable else 2,
            error_type="io_error" if unreadable else "config_error",
            hint=None if unreadable else "See `filterkit parse --help` for the file format",
            details={"path": str(path)},
        )
        self.path = path
