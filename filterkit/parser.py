"""
Prefix-notation ("Polish notation") filter parser.

Grammar (keywords come from the options' registries):

    Expr       := BinaryExpr | UnaryExpr | LeafExpr
    BinaryExpr := BINARY_KEYWORD Expr Expr
    UnaryExpr  := UNARY_KEYWORD Expr
    LeafExpr   := PROPERTY_KEYWORD PROPERTY_NAME VALUE

Keywords are matched case-insensitively and resolved in the order binary,
unary, property.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .exceptions import (
    InvalidLiteralError,
    MaxDepthExceededError,
    TrailingTokensError,
    UnexpectedEndOfInputError,
    UnknownOperatorError,
    UnknownPropertyError,
    UnsupportedTypeError,
)
from .options import FilterOptions

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 256


@dataclass(frozen=True)
class ParsedFilter:
    """Result of a successful parse: the root operation node."""

    operation: Any


class _Parser:
    """Recursive descent over one token list; one instance per parse call."""

    def __init__(self, options: FilterOptions, tokens: list[str], max_depth: int | None) -> None:
        self.options = options
        self.tokens = tokens
        self.pos = 0
        self.max_depth = max_depth

    def _current(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _advance(self, expected: str) -> str:
        """Consume and return the next token."""
        token = self._current()
        if token is None:
            raise UnexpectedEndOfInputError(expected, position=self.pos)
        self.pos += 1
        return token

    def parse(self) -> Any:
        operation = self._parse_expression(depth=1)
        if self.pos < len(self.tokens):
            raise TrailingTokensError(self.tokens[self.pos :], position=self.pos)
        return operation

    def _parse_expression(self, depth: int) -> Any:
        if self.max_depth is not None and depth > self.max_depth:
            raise MaxDepthExceededError(self.max_depth, position=self.pos)

        position = self.pos
        keyword = self._advance("an operator").upper()
        options = self.options

        create_binary = options.binary_operations.get(keyword)
        if create_binary is not None:
            left = self._parse_expression(depth + 1)
            right = self._parse_expression(depth + 1)
            return create_binary(left, right)

        create_unary = options.unary_operations.get(keyword)
        if create_unary is not None:
            return create_unary(self._parse_expression(depth + 1))

        create_leaf = options.property_operations.get(keyword)
        if create_leaf is not None:
            return self._parse_leaf(create_leaf)

        raise UnknownOperatorError(keyword, position=position)

    def _parse_leaf(self, create: Any) -> Any:
        name_position = self.pos
        name = self._advance("a property name")
        prop = self.options.get_property(name)
        if prop is None:
            raise UnknownPropertyError(name, position=name_position)

        literal_position = self.pos
        literal = self._advance(f"a value for property '{prop.name}'")
        try:
            value = self.options.convert(literal, prop.type)
        except UnsupportedTypeError:
            raise
        except Exception as exc:
            raise InvalidLiteralError(
                prop.name, literal, exc, position=literal_position
            ) from exc
        return create(prop.name, value)


class FilterPolishNotationParser:
    """
    Parses prefix-notation filter strings against a `FilterOptions` instance.

    The parser holds no per-parse state, so one instance may serve any number
    of (concurrent) parse calls as long as the options are not mutated.

    Args:
        options: The engine configuration.
        max_depth: Maximum nesting depth; None leaves only the interpreter
            recursion limit, which is reported as `MaxDepthExceededError` too.
    """

    def __init__(self, options: FilterOptions, *, max_depth: int | None = DEFAULT_MAX_DEPTH):
        self.options = options
        self.max_depth = max_depth

    def parse(self, text: str) -> ParsedFilter:
        """
        Parse `text` into a `ParsedFilter`.

        Raises:
            FilterParseError: Any of its subclasses; parsing is all-or-nothing.
            UnsupportedTypeError: A property's type has no registered converter.
        """
        tokens = list(self.options.tokenizer.tokenize(text))
        logger.debug("Parsing filter with %d tokens", len(tokens))
        parser = _Parser(self.options, tokens, self.max_depth)
        try:
            operation = parser.parse()
        except RecursionError as exc:
            raise MaxDepthExceededError(None, position=parser.pos) from exc
        logger.debug("Parsed filter into %s", type(operation).__name__)
        return ParsedFilter(operation)


def parse(
    text: str, options: FilterOptions, *, max_depth: int | None = DEFAULT_MAX_DEPTH
) -> ParsedFilter:
    """
    Parse a prefix-notation filter string.

    Examples:
        >>> from filterkit import FilterOptions, FilterProperty
        >>> options = FilterOptions([FilterProperty("firstname", str)])
        >>> parse("eq firstname John", options).operation
        EqualOperation(name='firstname', value='John')
    """
    return FilterPolishNotationParser(options, max_depth=max_depth).parse(text)
