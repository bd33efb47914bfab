"""
Tokenizer strategies.

A tokenizer turns raw filter text into an ordered sequence of string tokens.
Each token is exactly one operator keyword, property name, or literal value;
quoting and escaping rules belong to the strategy, not to the parser.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from .exceptions import TokenizeError

_WHITESPACE = " \t\n\r\f\v"
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}


@runtime_checkable
class Tokenizer(Protocol):
    """Splits filter text into tokens."""

    def tokenize(self, text: str) -> Iterable[str]: ...


class WhitespaceTokenizer:
    """Default strategy: tokens are separated by runs of whitespace."""

    def tokenize(self, text: str) -> list[str]:
        return text.split()

    def __repr__(self) -> str:
        return "WhitespaceTokenizer()"


class QuotedTokenizer:
    """
    Whitespace-separated tokens plus double-quoted tokens.

    A quoted token may contain whitespace and supports the escapes `\\"`,
    `\\\\`, `\\n`, `\\t` and `\\r`. Quotes only delimit a token when they start
    it, so `O"Brien` stays a single plain token.

    Example:
        QuotedTokenizer().tokenize('eq name "John Smith"')
        # ['eq', 'name', 'John Smith']
    """

    def tokenize(self, text: str) -> list[str]:
        return _QuotedReader(text).read_all()

    def __repr__(self) -> str:
        return "QuotedTokenizer()"


class _QuotedReader:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.length = len(text)

    def _skip_whitespace(self) -> None:
        while self.pos < self.length and self.text[self.pos] in _WHITESPACE:
            self.pos += 1

    def _read_quoted(self) -> str:
        start_pos = self.pos
        self.pos += 1  # opening quote
        result: list[str] = []

        while self.pos < self.length:
            ch = self.text[self.pos]
            if ch == '"':
                self.pos += 1
                if self.pos < self.length and self.text[self.pos] not in _WHITESPACE:
                    raise TokenizeError(
                        f"Expected whitespace after closing quote at position {self.pos}",
                        details={"offset": self.pos},
                    )
                return "".join(result)
            if ch == "\\":
                self.pos += 1
                if self.pos >= self.length:
                    raise TokenizeError(
                        f"Unexpected end of string after backslash at position {self.pos}",
                        details={"offset": self.pos},
                    )
                escaped = self.text[self.pos]
                result.append(_ESCAPES.get(escaped, escaped))
            else:
                result.append(ch)
            self.pos += 1

        raise TokenizeError(
            f"Unterminated quoted string starting at position {start_pos}",
            details={"offset": start_pos},
        )

    def _read_unquoted(self) -> str:
        start = self.pos
        while self.pos < self.length and self.text[self.pos] not in _WHITESPACE:
            self.pos += 1
        return self.text[start : self.pos]

    def read_all(self) -> list[str]:
        tokens: list[str] = []
        while True:
            self._skip_whitespace()
            if self.pos >= self.length:
                return tokens
            if self.text[self.pos] == '"':
                tokens.append(self._read_quoted())
            else:
                tokens.append(self._read_unquoted())
