"""
Exception hierarchy for filterkit.

All errors raised by the engine derive from `FilterError`. Each carries a
human-readable message plus a `details` mapping with the offending keyword,
property, literal or token position so callers can render precise diagnostics.
"""

from __future__ import annotations

from typing import Any


class FilterError(Exception):
    """Base class for every filterkit error."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


# =============================================================================
# Configuration errors
# =============================================================================


class FilterConfigurationError(FilterError):
    """Invalid engine configuration (raised while building `FilterOptions`)."""


class EmptyPropertyCatalogError(FilterConfigurationError):
    def __init__(self) -> None:
        super().__init__("At least one filter property is required.")


class DuplicateOperatorError(FilterConfigurationError):
    def __init__(self, keyword: str, kind: str) -> None:
        super().__init__(
            f"Operator '{keyword}' is already registered as a {kind} operation.",
            details={"keyword": keyword, "kind": kind},
        )
        self.keyword = keyword
        self.kind = kind


class DuplicatePropertyError(FilterConfigurationError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f"Filter property '{name}' is already registered.",
            details={"property": name},
        )
        self.name = name


class OptionsFrozenError(FilterConfigurationError):
    def __init__(self, action: str) -> None:
        super().__init__(
            f"Cannot {action}: filter options are frozen.",
            details={"action": action},
        )


class UnknownLocaleError(FilterConfigurationError):
    def __init__(self, name: str, available: list[str]) -> None:
        super().__init__(
            f"Unknown locale '{name}'. Available locales: {', '.join(available)}",
            details={"locale": name, "available": available},
        )
        self.name = name


# =============================================================================
# Conversion errors
# =============================================================================


class ConversionError(FilterError):
    """A literal could not be turned into a typed value."""


class UnsupportedTypeError(ConversionError):
    def __init__(self, target: Any) -> None:
        type_name = getattr(target, "__name__", repr(target))
        super().__init__(
            f"No converter registered for type {type_name}.",
            details={"type": type_name},
        )
        self.target = target


class LiteralFormatError(ConversionError, ValueError):
    """A literal does not have the textual form its target type requires."""

    def __init__(self, literal: str, type_name: str) -> None:
        super().__init__(
            f"Cannot convert {literal!r} to {type_name}.",
            details={"literal": literal, "type": type_name},
        )
        self.literal = literal


# =============================================================================
# Parse errors
# =============================================================================


class FilterParseError(FilterError):
    """The filter text is not a single well-formed expression."""

    def __init__(
        self,
        message: str,
        *,
        position: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        merged = dict(details or {})
        if position is not None:
            merged["position"] = position
        super().__init__(message, details=merged)
        self.position = position


class TokenizeError(FilterParseError):
    """The tokenizer rejected the raw input (e.g. an unterminated quote)."""


class UnknownOperatorError(FilterParseError):
    def __init__(self, keyword: str, *, position: int | None = None) -> None:
        super().__init__(
            f"Unknown operator '{keyword}'",
            position=position,
            details={"keyword": keyword},
        )
        self.keyword = keyword


class UnknownPropertyError(FilterParseError):
    def __init__(self, name: str, *, position: int | None = None) -> None:
        super().__init__(
            f"Unknown property '{name}'",
            position=position,
            details={"property": name},
        )
        self.name = name


class UnexpectedEndOfInputError(FilterParseError):
    def __init__(self, expected: str, *, position: int | None = None) -> None:
        super().__init__(
            f"Unexpected end of filter: expected {expected}",
            position=position,
            details={"expected": expected},
        )
        self.expected = expected


class TrailingTokensError(FilterParseError):
    def __init__(self, tokens: list[str], *, position: int | None = None) -> None:
        super().__init__(
            f"Unexpected token '{tokens[0]}' after end of filter",
            position=position,
            details={"tokens": tokens},
        )
        self.tokens = tokens


class InvalidLiteralError(FilterParseError):
    def __init__(
        self,
        property_name: str,
        literal: str,
        cause: BaseException,
        *,
        position: int | None = None,
    ) -> None:
        super().__init__(
            f"Invalid value {literal!r} for property '{property_name}': {cause}",
            position=position,
            details={"property": property_name, "literal": literal, "cause": str(cause)},
        )
        self.property_name = property_name
        self.literal = literal
        self.cause = cause


class MaxDepthExceededError(FilterParseError):
    """
    Nesting is deeper than the parser allows.

    `max_depth` is None when the interpreter recursion limit was hit first.
    """

    def __init__(self, max_depth: int | None, *, position: int | None = None) -> None:
        super().__init__(
            f"Filter nesting exceeds the maximum depth of {max_depth}"
            if max_depth is not None
            else "Filter nesting exceeds the interpreter recursion limit",
            position=position,
            details={"maxDepth": max_depth},
        )
        self.max_depth = max_depth
