"""Tests for tokenizer strategies."""

from __future__ import annotations

import pytest

from filterkit import QuotedTokenizer, TokenizeError, Tokenizer, WhitespaceTokenizer


def test_whitespace_tokenizer_splits_on_runs() -> None:
    tokens = WhitespaceTokenizer().tokenize("  and\teq firstname John\n eq lastname Doe ")
    assert tokens == ["and", "eq", "firstname", "John", "eq", "lastname", "Doe"]


def test_whitespace_tokenizer_empty() -> None:
    assert WhitespaceTokenizer().tokenize("") == []
    assert WhitespaceTokenizer().tokenize(" \t\n") == []


def test_whitespace_tokenizer_keeps_quotes() -> None:
    """Quotes have no meaning for the default strategy."""
    assert WhitespaceTokenizer().tokenize('eq name "John Smith"') == [
        "eq",
        "name",
        '"John',
        'Smith"',
    ]


def test_strategies_satisfy_protocol() -> None:
    assert isinstance(WhitespaceTokenizer(), Tokenizer)
    assert isinstance(QuotedTokenizer(), Tokenizer)


# =============================================================================
# QuotedTokenizer
# =============================================================================


def test_quoted_token_with_whitespace() -> None:
    tokens = QuotedTokenizer().tokenize('eq name "John Smith"')
    assert tokens == ["eq", "name", "John Smith"]


def test_quoted_empty_string() -> None:
    assert QuotedTokenizer().tokenize('eq name ""') == ["eq", "name", ""]


def test_quoted_escapes() -> None:
    text = r'eq name "say \"hi\"\n\ttab \\ \x"'
    assert QuotedTokenizer().tokenize(text) == ["eq", "name", 'say "hi"\n\ttab \\ x']


def test_quote_inside_plain_token_is_literal() -> None:
    assert QuotedTokenizer().tokenize('eq name O"Brien') == ["eq", "name", 'O"Brien']


def test_quoted_tokenizer_plain_input_matches_whitespace() -> None:
    text = "and eq a 1  eq b 2"
    assert QuotedTokenizer().tokenize(text) == WhitespaceTokenizer().tokenize(text)


def test_unterminated_quote() -> None:
    with pytest.raises(TokenizeError) as exc:
        QuotedTokenizer().tokenize('eq name "John')
    assert exc.value.details["offset"] == 8


def test_trailing_backslash() -> None:
    with pytest.raises(TokenizeError):
        QuotedTokenizer().tokenize('eq name "John\\')


def test_text_glued_to_closing_quote() -> None:
    with pytest.raises(TokenizeError):
        QuotedTokenizer().tokenize('eq name "John"Smith')
