"""
Type conversion registry: turns literal filter text into typed values.

Converters are keyed by target type. Built-in converters cover the usual
scalar types; callers may register converters for any other type (or replace
a built-in) with `TypeConverters.add`.

Example:
    converters = TypeConverters(FilterLocale.get("de-DE"))
    converters.convert("1.234,5", float)   # 1234.5
    converters.convert("NULL", int)        # None
"""

from __future__ import annotations

import logging
import re
import struct
from collections.abc import Callable, Mapping
from datetime import date, datetime, time, timedelta
from decimal import Decimal, InvalidOperation
from enum import Enum
from types import MappingProxyType
from typing import Any, NewType, TypeVar

from dateutil import parser as date_parser

from .exceptions import LiteralFormatError, UnsupportedTypeError
from .locale import FilterLocale

logger = logging.getLogger(__name__)

# Type tags for values Python has no dedicated type for.
Char = NewType("Char", str)
Int32 = NewType("Int32", int)
Int64 = NewType("Int64", int)
Float32 = NewType("Float32", float)

Converter = Callable[[str], Any]

E = TypeVar("E", bound=Enum)
T = TypeVar("T")

_INTEGER_RE = re.compile(r"[+-]?\d+")
_DAYS_RE = re.compile(r"-?\d+")
_DURATION_RE = re.compile(
    r"(?P<sign>-)?(?:(?P<days>\d+)\.)?(?P<hours>\d{1,2}):(?P<minutes>\d{1,2})"
    r"(?::(?P<seconds>\d{1,2})(?:[.,](?P<fraction>\d{1,7}))?)?"
)
_TRUE_LITERALS = frozenset(["true", "1"])
_FALSE_LITERALS = frozenset(["false", "0"])

# dateutil fills missing components from its `default`. Parsing with two
# defaults that differ in every field shows which parts the literal carried.
_DEFAULT_DATETIME = datetime(1, 1, 1)
_ALTERNATE_DEFAULT = datetime(2, 2, 2, 1, 1, 1)

_ISO_PARSER = date_parser.isoparser()


def _try_iso(parse: Callable[[str], T], literal: str) -> T | None:
    """Strict ISO 8601 parse; None when the literal is not in ISO form."""
    try:
        return parse(literal.strip())
    except ValueError:
        return None


def type_name(target: Any) -> str:
    """Readable name of a type tag (works for classes and NewTypes)."""
    return getattr(target, "__name__", repr(target))


def enum_converter(enum_type: type[E]) -> Callable[[str], E]:
    """
    Build a converter for an enumeration.

    Member names match case-insensitively; a literal equal to the string form
    of a member value is accepted as well.
    """
    members = {name.casefold(): member for name, member in enum_type.__members__.items()}

    def convert(literal: str) -> E:
        member = members.get(literal.casefold())
        if member is not None:
            return member
        for candidate in enum_type:
            if str(candidate.value) == literal:
                return candidate
        raise LiteralFormatError(literal, enum_type.__name__)

    return convert


class TypeConverters:
    """
    Registry of literal converters plus the sentinel and locale policy.

    A literal equal to `null_sentinel` converts to None whatever the target
    type. The `str` converter maps `empty_sentinel` to an empty string.
    Setting either sentinel to None disables it.
    """

    def __init__(
        self,
        locale: FilterLocale | None = None,
        *,
        null_sentinel: str | None = "NULL",
        empty_sentinel: str | None = "EMPTY",
    ) -> None:
        self.locale = locale or FilterLocale.INVARIANT
        self.null_sentinel = null_sentinel
        self.empty_sentinel = empty_sentinel
        self._converters: dict[Any, Converter] = {
            str: self._to_str,
            Char: self._to_char,
            int: self._to_int,
            Int32: self._to_int32,
            Int64: self._to_int64,
            float: self._to_float,
            Float32: self._to_float32,
            Decimal: self._to_decimal,
            date: self._to_date,
            datetime: self._to_datetime,
            time: self._to_time,
            timedelta: self._to_timedelta,
            bool: self._to_bool,
        }

    @property
    def converters(self) -> Mapping[Any, Converter]:
        return MappingProxyType(self._converters)

    def add(self, target: Any, converter: Converter) -> None:
        """Register a converter for `target`, replacing any existing one."""
        if target in self._converters:
            logger.debug("Replacing converter for %s", type_name(target))
        self._converters[target] = converter

    def convert(self, literal: str, target: Any) -> Any:
        """
        Convert `literal` to a value of type `target`.

        Raises:
            UnsupportedTypeError: No converter is registered for `target`.
            Exception: Whatever the converter raises for a malformed literal
                (built-ins raise `LiteralFormatError`).
        """
        if self.null_sentinel is not None and literal == self.null_sentinel:
            return None
        converter = self._converters.get(target)
        if converter is None:
            raise UnsupportedTypeError(target)
        return converter(literal)

    # -------------------------------------------------------------------------
    # Built-in converters
    # -------------------------------------------------------------------------

    def _to_str(self, literal: str) -> str:
        if self.empty_sentinel is not None and literal == self.empty_sentinel:
            return ""
        return literal

    def _to_char(self, literal: str) -> str:
        if len(literal) != 1:
            raise LiteralFormatError(literal, "char")
        return literal

    def _to_int(self, literal: str) -> int:
        text = literal.strip()
        if not _INTEGER_RE.fullmatch(text):
            raise LiteralFormatError(literal, "int")
        return int(text)

    def _to_int32(self, literal: str) -> int:
        value = self._to_int(literal)
        if not -(2**31) <= value < 2**31:
            raise LiteralFormatError(literal, "Int32")
        return value

    def _to_int64(self, literal: str) -> int:
        value = self._to_int(literal)
        if not -(2**63) <= value < 2**63:
            raise LiteralFormatError(literal, "Int64")
        return value

    def _normalize_number(self, literal: str, name: str) -> str:
        """Strip group separators and map the locale decimal separator to '.'."""
        text = literal.strip()
        if not text or "_" in text:
            raise LiteralFormatError(literal, name)
        separator = self.locale.decimal_separator
        if self.locale.group_separator:
            text = text.replace(self.locale.group_separator, "")
        if separator != ".":
            if "." in text:
                raise LiteralFormatError(literal, name)
            text = text.replace(separator, ".")
        return text

    def _to_float(self, literal: str) -> float:
        text = self._normalize_number(literal, "float")
        try:
            return float(text)
        except ValueError as exc:
            raise LiteralFormatError(literal, "float") from exc

    def _to_float32(self, literal: str) -> float:
        value = self._to_float(literal)
        try:
            return float(struct.unpack("f", struct.pack("f", value))[0])
        except OverflowError as exc:
            raise LiteralFormatError(literal, "Float32") from exc

    def _to_decimal(self, literal: str) -> Decimal:
        text = self._normalize_number(literal, "Decimal")
        try:
            return Decimal(text)
        except InvalidOperation as exc:
            raise LiteralFormatError(literal, "Decimal") from exc

    def _parse_localized(self, literal: str, name: str) -> tuple[datetime, datetime]:
        """
        Parse a non-ISO literal with the locale's day/month order.

        Returns the literal parsed against two different defaults; a field
        that is equal in both was present in the literal.
        """
        try:
            return (
                date_parser.parse(
                    literal, dayfirst=self.locale.dayfirst, default=_DEFAULT_DATETIME
                ),
                date_parser.parse(
                    literal, dayfirst=self.locale.dayfirst, default=_ALTERNATE_DEFAULT
                ),
            )
        except (ValueError, OverflowError) as exc:
            raise LiteralFormatError(literal, name) from exc

    def _to_date(self, literal: str) -> date:
        value = _try_iso(_ISO_PARSER.parse_isodate, literal)
        if value is not None:
            return value
        parsed, alternate = self._parse_localized(literal, "date")
        if (
            parsed.date() != alternate.date()
            or parsed.hour == alternate.hour
            or parsed.tzinfo is not None
        ):
            raise LiteralFormatError(literal, "date")
        return parsed.date()

    def _to_datetime(self, literal: str) -> datetime:
        value = _try_iso(date_parser.isoparse, literal)
        if value is not None:
            return value
        parsed, alternate = self._parse_localized(literal, "datetime")
        if parsed.date() != alternate.date():
            raise LiteralFormatError(literal, "datetime")
        return parsed

    def _to_time(self, literal: str) -> time:
        value = _try_iso(_ISO_PARSER.parse_isotime, literal)
        if value is not None:
            return value
        parsed, alternate = self._parse_localized(literal, "time")
        if parsed.hour != alternate.hour or any(
            getattr(parsed, part) == getattr(alternate, part) for part in ("year", "month", "day")
        ):
            raise LiteralFormatError(literal, "time")
        return parsed.timetz()

    def _to_timedelta(self, literal: str) -> timedelta:
        text = literal.strip()
        if _DAYS_RE.fullmatch(text):
            return timedelta(days=int(text))
        match = _DURATION_RE.fullmatch(text)
        if match is None:
            raise LiteralFormatError(literal, "timedelta")
        hours = int(match["hours"])
        minutes = int(match["minutes"])
        seconds = int(match["seconds"] or 0)
        if hours > 23 or minutes > 59 or seconds > 59:
            raise LiteralFormatError(literal, "timedelta")
        microseconds = int(((match["fraction"] or "") + "000000")[:6])
        value = timedelta(
            days=int(match["days"] or 0),
            hours=hours,
            minutes=minutes,
            seconds=seconds,
            microseconds=microseconds,
        )
        return -value if match["sign"] else value

    def _to_bool(self, literal: str) -> bool:
        lowered = literal.lower()
        if lowered in _TRUE_LITERALS:
            return True
        if lowered in _FALSE_LITERALS:
            return False
        raise LiteralFormatError(literal, "bool")
