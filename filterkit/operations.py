"""
Default operation nodes.

These are the nodes built by the default operator vocabulary. The parser
treats nodes as opaque: it only passes them between registered constructors.
The classes here carry data and render themselves back to prefix notation;
evaluating them against records is left to downstream code.

Example:
    from filterkit.operations import EqualOperation

    expr = EqualOperation("firstname", "John") & ~EqualOperation("lastname", "Doe")
    expr.to_string()  # 'AND EQ firstname John NOT EQ lastname Doe'
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar

from .locale import FilterLocale

_WHITESPACE = frozenset(" \t\n\r\f\v")


def _escape_string(value: str) -> str:
    """Escape a string for a double-quoted token (backslashes first)."""
    result = value.replace("\\", "\\\\")
    result = result.replace('"', '\\"')
    result = result.replace("\n", "\\n")
    result = result.replace("\t", "\\t")
    result = result.replace("\r", "\\r")
    return result


def _format_timedelta(value: timedelta) -> str:
    sign = "-" if value < timedelta(0) else ""
    value = abs(value)
    hours, remainder = divmod(value.seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    text = f"{hours:02}:{minutes:02}:{seconds:02}"
    if value.days:
        text = f"{value.days}.{text}"
    if value.microseconds:
        text = f"{text}.{value.microseconds:06}"
    return sign + text


def format_literal(
    value: Any,
    *,
    null_literal: str = "NULL",
    empty_literal: str = "EMPTY",
    locale: FilterLocale | None = None,
) -> str:
    """
    Format a Python value as a single filter token.

    Strings containing whitespace, quotes or backslashes come out quoted in
    the form `QuotedTokenizer` reads back. Floats and decimals use the decimal
    separator of `locale` (invariant by default) so the token converts back to
    the same number under that locale.
    """
    if value is None:
        return null_literal
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return value.name
    # datetime before date (datetime is a subclass of date)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return _format_timedelta(value)
    if isinstance(value, (float, Decimal)):
        text = str(value)
        separator = (locale or FilterLocale.INVARIANT).decimal_separator
        return text if separator == "." else text.replace(".", separator)
    if not isinstance(value, str):
        return str(value)
    if value == "":
        return empty_literal
    if value[0] == '"' or "\\" in value or any(ch in _WHITESPACE for ch in value):
        return f'"{_escape_string(value)}"'
    return value


class Operation(ABC):
    """Base class for the default operation nodes."""

    keyword: ClassVar[str]

    @abstractmethod
    def to_string(
        self,
        *,
        null_literal: str = "NULL",
        empty_literal: str = "EMPTY",
        locale: FilterLocale | None = None,
    ) -> str:
        """Render the node (and its children) in prefix notation."""
        ...

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Nested dict form, handy for JSON output."""
        ...

    def __and__(self, other: Operation) -> Operation:
        """Combine two nodes with `&`."""
        return AndOperation(self, other)

    def __or__(self, other: Operation) -> Operation:
        """Combine two nodes with `|`."""
        return OrOperation(self, other)

    def __invert__(self) -> Operation:
        """Negate the node with `~`."""
        return NotOperation(self)

    def __str__(self) -> str:
        return self.to_string()


# =============================================================================
# Combinators
# =============================================================================


@dataclass(frozen=True)
class BinaryOperation(Operation):
    """Node combining two sub-expressions."""

    left: Operation
    right: Operation

    def to_string(
        self,
        *,
        null_literal: str = "NULL",
        empty_literal: str = "EMPTY",
        locale: FilterLocale | None = None,
    ) -> str:
        left = self.left.to_string(
            null_literal=null_literal, empty_literal=empty_literal, locale=locale
        )
        right = self.right.to_string(
            null_literal=null_literal, empty_literal=empty_literal, locale=locale
        )
        return f"{self.keyword} {left} {right}"

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.keyword, "left": self.left.to_dict(), "right": self.right.to_dict()}


@dataclass(frozen=True)
class AndOperation(BinaryOperation):
    keyword: ClassVar[str] = "AND"


@dataclass(frozen=True)
class OrOperation(BinaryOperation):
    keyword: ClassVar[str] = "OR"


@dataclass(frozen=True)
class UnaryOperation(Operation):
    """Node wrapping a single sub-expression."""

    operation: Operation

    def to_string(
        self,
        *,
        null_literal: str = "NULL",
        empty_literal: str = "EMPTY",
        locale: FilterLocale | None = None,
    ) -> str:
        inner = self.operation.to_string(
            null_literal=null_literal, empty_literal=empty_literal, locale=locale
        )
        return f"{self.keyword} {inner}"

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.keyword, "operation": self.operation.to_dict()}


@dataclass(frozen=True)
class NotOperation(UnaryOperation):
    keyword: ClassVar[str] = "NOT"


# =============================================================================
# Property comparisons (leaves)
# =============================================================================


@dataclass(frozen=True)
class PropertyOperation(Operation):
    """Leaf binding a property name to an already converted value."""

    name: str
    value: Any

    def to_string(
        self,
        *,
        null_literal: str = "NULL",
        empty_literal: str = "EMPTY",
        locale: FilterLocale | None = None,
    ) -> str:
        literal = format_literal(
            self.value, null_literal=null_literal, empty_literal=empty_literal, locale=locale
        )
        return f"{self.keyword} {self.name} {literal}"

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.keyword, "property": self.name, "value": self.value}


@dataclass(frozen=True)
class EqualOperation(PropertyOperation):
    keyword: ClassVar[str] = "EQ"


@dataclass(frozen=True)
class GreaterThanOperation(PropertyOperation):
    keyword: ClassVar[str] = "GT"


@dataclass(frozen=True)
class GreaterThanOrEqualOperation(PropertyOperation):
    keyword: ClassVar[str] = "GTE"


@dataclass(frozen=True)
class LessThanOperation(PropertyOperation):
    keyword: ClassVar[str] = "LT"


@dataclass(frozen=True)
class LessThanOrEqualOperation(PropertyOperation):
    keyword: ClassVar[str] = "LTE"


@dataclass(frozen=True)
class ContainsOperation(PropertyOperation):
    keyword: ClassVar[str] = "CONTAINS"


@dataclass(frozen=True)
class StartWithOperation(PropertyOperation):
    keyword: ClassVar[str] = "START"


@dataclass(frozen=True)
class EndWithOperation(PropertyOperation):
    keyword: ClassVar[str] = "END"


BINARY_OPERATIONS: tuple[type[BinaryOperation], ...] = (AndOperation, OrOperation)
UNARY_OPERATIONS: tuple[type[UnaryOperation], ...] = (NotOperation,)
PROPERTY_OPERATIONS: tuple[type[PropertyOperation], ...] = (
    EqualOperation,
    GreaterThanOperation,
    GreaterThanOrEqualOperation,
    LessThanOperation,
    LessThanOrEqualOperation,
    ContainsOperation,
    StartWithOperation,
    EndWithOperation,
)
