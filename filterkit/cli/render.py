from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Any

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from .results import CommandResult


@dataclass(frozen=True, slots=True)
class RenderSettings:
    quiet: bool
    verbosity: int


def _error_title(error_type: str) -> str:
    normalized = (error_type or "").strip()
    mapping = {
        "usage_error": "Usage error",
        "parse_error": "Parse error",
        "conversion_error": "Conversion error",
        "config_error": "Configuration error",
        "filter_error": "Filter error",
        "io_error": "I/O error",
        "internal_error": "Internal error",
    }
    return mapping.get(normalized, "Error")


def _render_error_details(
    *,
    stderr: Console,
    command: str,
    error_type: str,
    hint: str | None,
    details: dict[str, Any] | None,
    settings: RenderSettings,
) -> None:
    if settings.quiet:
        return

    if hint:
        stderr.print(f"Hint: {hint}")
    elif error_type == "usage_error":
        stderr.print(f"Hint: run `filterkit {command} --help`")

    if details and settings.verbosity >= 1:
        stderr.print(Panel.fit(Text(json.dumps(details, ensure_ascii=False, indent=2))))


def _node_label(node: dict[str, Any]) -> Text:
    label = Text(str(node.get("op", "?")), style="bold")
    if "property" in node:
        label.append(f" {node['property']} ")
        label.append(repr(node.get("value")), style="cyan")
    return label


def _add_subtree(parent: Tree, node: dict[str, Any]) -> None:
    branch = parent.add(_node_label(node))
    for key in ("left", "right", "operation"):
        child = node.get(key)
        if isinstance(child, dict):
            _add_subtree(branch, child)


def _render_tree(data: dict[str, Any]) -> Any:
    tree_data = data.get("tree")
    if not isinstance(tree_data, dict):
        return Text(str(data.get("filter", "")))
    root = Tree(_node_label(tree_data))
    for key in ("left", "right", "operation"):
        child = tree_data.get(key)
        if isinstance(child, dict):
            _add_subtree(root, child)
    return Group(root, Text(str(data.get("filter", "")), style="dim"))


_OPERATOR_COLUMNS = ("keyword", "kind", "arity", "node")


def _render_operators(rows: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, header_style="bold")
    for column in _OPERATOR_COLUMNS:
        table.add_column(column)
    for row in rows:
        table.add_row(*[str(row.get(column, "")) for column in _OPERATOR_COLUMNS])
    return table


def render_result(result: CommandResult, *, settings: RenderSettings) -> None:
    stdout = Console(file=sys.stdout, force_terminal=False)
    stderr = Console(file=sys.stderr, force_terminal=False)

    if not result.ok:
        if result.error is not None:
            title = _error_title(result.error.type)
            stderr.print(
                f"{title}: {result.error.message}", markup=False, highlight=False, soft_wrap=True
            )
            _render_error_details(
                stderr=stderr,
                command=result.command,
                error_type=result.error.type,
                hint=result.error.hint,
                details=result.error.details,
                settings=settings,
            )
        else:
            stderr.print("Error")
        return

    renderable: Any
    if result.command == "version" and isinstance(result.data, dict):
        renderable = Text(result.data.get("version", ""), style="bold")
    elif result.command == "parse" and isinstance(result.data, dict):
        renderable = _render_tree(result.data)
    elif result.command == "operators" and isinstance(result.data, list):
        renderable = _render_operators(result.data)
    else:
        renderable = Text(json.dumps(result.data, ensure_ascii=False, default=str))

    stdout.print(renderable)
