"""Tests for the prefix-notation filter parser."""

from __future__ import annotations

import doctest
import logging
from enum import Enum

import pytest

from filterkit import (
    FilterOptions,
    FilterPolishNotationParser,
    FilterProperty,
    InvalidLiteralError,
    LiteralFormatError,
    MaxDepthExceededError,
    ParsedFilter,
    QuotedTokenizer,
    TrailingTokensError,
    UnexpectedEndOfInputError,
    UnknownOperatorError,
    UnknownPropertyError,
    UnsupportedTypeError,
    parse,
)
from filterkit.operations import (
    AndOperation,
    ContainsOperation,
    EqualOperation,
    GreaterThanOperation,
    NotOperation,
    OrOperation,
)


class SampleEnum(Enum):
    Val1 = 1
    Val2 = 2
    Val3 = 3


@pytest.fixture
def options() -> FilterOptions:
    return FilterOptions(
        [
            FilterProperty("firstname", str),
            FilterProperty("lastname", str),
            FilterProperty("age", int),
        ]
    )


# =============================================================================
# Successful parses
# =============================================================================


@pytest.mark.req("PARSE-001")
def test_parse_single_leaf(options: FilterOptions) -> None:
    """A property keyword, a property name and a literal build one leaf."""
    result = parse("eq firstname John", options)
    assert isinstance(result, ParsedFilter)
    assert result.operation == EqualOperation("firstname", "John")


@pytest.mark.req("PARSE-001")
def test_parse_nested_composition(options: FilterOptions) -> None:
    """AND takes its two children in left-to-right token order."""
    result = parse("and eq firstname John eq lastname Doe", options)
    operation = result.operation
    assert isinstance(operation, AndOperation)
    assert operation.left == EqualOperation("firstname", "John")
    assert operation.right == EqualOperation("lastname", "Doe")


def test_parse_deeper_tree(options: FilterOptions) -> None:
    """Left subtree is fully consumed before the right one starts."""
    result = parse("or and eq firstname John gt age 30 not contains lastname oe", options)
    assert result.operation == OrOperation(
        AndOperation(EqualOperation("firstname", "John"), GreaterThanOperation("age", 30)),
        NotOperation(ContainsOperation("lastname", "oe")),
    )


def test_parse_converts_literal_with_declared_type(options: FilterOptions) -> None:
    """Literals are converted using the catalog type of the property."""
    result = parse("gt age 42", options)
    assert result.operation == GreaterThanOperation("age", 42)
    assert isinstance(result.operation.value, int)


@pytest.mark.req("PARSE-002")
def test_parse_is_case_insensitive(options: FilterOptions) -> None:
    """Keyword casing does not change the tree."""
    lower = parse("and eq firstname John eq lastname Doe", options)
    upper = parse("AND EQ firstname John EQ lastname Doe", options)
    mixed = parse("And Eq firstname John eQ lastname Doe", options)
    assert lower == upper == mixed


def test_parse_uses_declared_property_name(options: FilterOptions) -> None:
    """The leaf carries the catalog spelling, not the typed one."""
    result = parse("eq FIRSTNAME John", options)
    assert result.operation == EqualOperation("firstname", "John")


def test_parse_literal_keeps_its_case(options: FilterOptions) -> None:
    """Only keywords are uppercased; literal values are passed through."""
    result = parse("eq firstname jOhN", options)
    assert result.operation.value == "jOhN"


def test_parse_literal_that_looks_like_keyword(options: FilterOptions) -> None:
    """The value slot is never resolved as an operator."""
    result = parse("eq firstname and", options)
    assert result.operation == EqualOperation("firstname", "and")


@pytest.mark.req("PARSE-003")
def test_parse_is_deterministic(options: FilterOptions) -> None:
    """Parsing the same text twice yields equal trees."""
    text = "or not eq age 3 and eq firstname A eq lastname B"
    assert parse(text, options) == parse(text, options)


def test_parser_instance_is_reusable(options: FilterOptions) -> None:
    """A parser keeps no per-parse state."""
    parser = FilterPolishNotationParser(options)
    first = parser.parse("eq age 1")
    parser.parse("eq age 2")
    assert parser.parse("eq age 1") == first


def test_parse_extra_whitespace(options: FilterOptions) -> None:
    """Tabs, newlines and repeated spaces separate tokens."""
    result = parse("  and\teq firstname John \n eq  lastname Doe ", options)
    assert isinstance(result.operation, AndOperation)


def test_parse_with_quoted_tokenizer(options: FilterOptions) -> None:
    """A swapped-in tokenizer lets values contain whitespace."""
    options.with_tokenizer(QuotedTokenizer())
    result = parse('eq firstname "John Paul"', options)
    assert result.operation == EqualOperation("firstname", "John Paul")


# =============================================================================
# Sentinels and converters
# =============================================================================


@pytest.mark.req("PARSE-004")
def test_null_sentinel_converts_to_none(options: FilterOptions) -> None:
    """NULL becomes None whatever the declared type."""
    assert parse("eq firstname NULL", options).operation.value is None
    assert parse("eq age NULL", options).operation.value is None


@pytest.mark.req("PARSE-004")
def test_disabled_null_sentinel_is_ordinary_literal(options: FilterOptions) -> None:
    """Without a null sentinel, NULL is converted like any other literal."""
    options.without_null_value()
    assert parse("eq firstname NULL", options).operation.value == "NULL"
    with pytest.raises(InvalidLiteralError):
        parse("eq age NULL", options)


def test_custom_null_sentinel(options: FilterOptions) -> None:
    """A custom null literal replaces the default one."""
    options.with_null_value_as("nil")
    assert parse("eq firstname nil", options).operation.value is None
    assert parse("eq firstname NULL", options).operation.value == "NULL"


def test_empty_sentinel(options: FilterOptions) -> None:
    """EMPTY becomes the empty string for str properties."""
    assert parse("eq firstname EMPTY", options).operation.value == ""
    options.without_empty_string()
    assert parse("eq firstname EMPTY", options).operation.value == "EMPTY"


@pytest.mark.req("PARSE-005")
def test_custom_converter_for_enum() -> None:
    """A converter registered for an enum type is used for its properties."""
    options = FilterOptions([FilterProperty("enu", SampleEnum)])
    options.add_converter(SampleEnum, lambda text: SampleEnum[text])

    result = parse("eq enu Val1", options)

    assert isinstance(result.operation, EqualOperation)
    assert result.operation.value is SampleEnum.Val1


def test_custom_converter_failure_is_invalid_literal() -> None:
    """Whatever a custom converter raises is wrapped with context."""
    options = FilterOptions([FilterProperty("enu", SampleEnum)])
    options.add_converter(SampleEnum, lambda text: SampleEnum[text])

    with pytest.raises(InvalidLiteralError) as exc:
        parse("eq enu Val9", options)
    assert exc.value.property_name == "enu"
    assert exc.value.literal == "Val9"
    assert isinstance(exc.value.cause, KeyError)


# =============================================================================
# Custom vocabulary
# =============================================================================


def test_custom_binary_operation(options: FilterOptions) -> None:
    """User keywords get the same treatment as built-in ones."""
    options.add_binary_operation("xor", lambda left, right: ("XOR", left, right))
    result = parse("XoR eq age 1 eq age 2", options)
    assert result.operation == ("XOR", EqualOperation("age", 1), EqualOperation("age", 2))


def test_custom_property_operation(options: FilterOptions) -> None:
    """Property constructors receive the declared name and converted value."""
    options.add_property_operation("between_ten", lambda name, value: (name, value, 10))
    result = parse("BETWEEN_TEN age 5", options)
    assert result.operation == ("age", 5, 10)


def test_binary_namespace_wins_over_property(
    options: FilterOptions, caplog: pytest.LogCaptureFixture
) -> None:
    """A keyword in several namespaces resolves as binary first."""
    with caplog.at_level(logging.WARNING, logger="filterkit"):
        options.add_property_operation("AND", lambda name, value: ("leaf", name, value))
    assert "AND" in caplog.text

    result = parse("and eq age 1 eq age 2", options)
    assert isinstance(result.operation, AndOperation)


def test_unary_namespace_wins_over_property(options: FilterOptions) -> None:
    """Unary lookup comes before property lookup."""
    options.add_property_operation("NOT", lambda name, value: ("leaf", name, value))
    result = parse("not eq age 1", options)
    assert result.operation == NotOperation(EqualOperation("age", 1))


# =============================================================================
# Errors
# =============================================================================


@pytest.mark.req("PARSE-006")
def test_unknown_operator(options: FilterOptions) -> None:
    """An unregistered leading keyword is reported uppercased."""
    with pytest.raises(UnknownOperatorError) as exc:
        parse("xor a b", options)
    assert exc.value.keyword == "XOR"
    assert exc.value.position == 0


def test_unknown_operator_in_nested_position(options: FilterOptions) -> None:
    """The position points at the offending token."""
    with pytest.raises(UnknownOperatorError) as exc:
        parse("and eq age 1 nand eq age 2", options)
    assert exc.value.keyword == "NAND"
    assert exc.value.position == 4


@pytest.mark.req("PARSE-007")
def test_unary_without_operand() -> None:
    """A unary keyword with nothing after it hits the end of input."""
    options = FilterOptions([FilterProperty("age", int)])
    options.clear_operations().add_unary_operation("NOT", NotOperation)
    with pytest.raises(UnexpectedEndOfInputError):
        parse("not", options)


def test_binary_with_one_operand(options: FilterOptions) -> None:
    """A binary keyword with a single operand fails instead of returning a partial tree."""
    with pytest.raises(UnexpectedEndOfInputError):
        parse("and eq age 1", options)


def test_leaf_missing_value(options: FilterOptions) -> None:
    """A leaf needs both a property name and a value."""
    with pytest.raises(UnexpectedEndOfInputError, match="value for property 'age'"):
        parse("eq age", options)
    with pytest.raises(UnexpectedEndOfInputError, match="property name"):
        parse("eq", options)


def test_empty_input(options: FilterOptions) -> None:
    """Empty or whitespace-only text is not a filter."""
    with pytest.raises(UnexpectedEndOfInputError):
        parse("", options)
    with pytest.raises(UnexpectedEndOfInputError):
        parse("   ", options)


@pytest.mark.req("PARSE-008")
def test_trailing_tokens(options: FilterOptions) -> None:
    """Exactly one root expression is allowed."""
    with pytest.raises(TrailingTokensError) as exc:
        parse("eq firstname John extra", options)
    assert exc.value.tokens == ["extra"]
    assert exc.value.position == 3


def test_unknown_property(options: FilterOptions) -> None:
    """Property names must come from the catalog."""
    with pytest.raises(UnknownPropertyError) as exc:
        parse("eq email a@b.c", options)
    assert exc.value.name == "email"
    assert exc.value.position == 1


def test_invalid_literal(options: FilterOptions) -> None:
    """Conversion failures carry the property, literal and cause."""
    with pytest.raises(InvalidLiteralError) as exc:
        parse("gt age old", options)
    assert exc.value.property_name == "age"
    assert exc.value.literal == "old"
    assert isinstance(exc.value.cause, LiteralFormatError)
    assert exc.value.details["property"] == "age"


def test_unsupported_type_propagates() -> None:
    """A property type without converter is not reported as a bad literal."""
    options = FilterOptions([FilterProperty("point", complex)])
    with pytest.raises(UnsupportedTypeError):
        parse("eq point 1+2j", options)


def test_max_depth_exceeded(options: FilterOptions) -> None:
    """Adversarially deep input fails cleanly."""
    text = "not " * 300 + "eq age 1"
    with pytest.raises(MaxDepthExceededError):
        parse(text, options)


def test_max_depth_can_be_raised(options: FilterOptions) -> None:
    """The nesting limit is configurable per parser."""
    text = "not " * 300 + "eq age 1"
    result = FilterPolishNotationParser(options, max_depth=400).parse(text)
    assert isinstance(result.operation, NotOperation)


def test_max_depth_counts_root(options: FilterOptions) -> None:
    """A depth of one allows a single leaf and nothing more."""
    assert parse("eq age 1", options, max_depth=1).operation == EqualOperation("age", 1)
    with pytest.raises(MaxDepthExceededError):
        parse("not eq age 1", options, max_depth=1)


def test_unbounded_depth_still_fails_cleanly(options: FilterOptions) -> None:
    """Without a depth limit, input deeper than the interpreter allows is still a parse error."""
    text = "not " * 5000 + "eq age 1"
    with pytest.raises(MaxDepthExceededError) as exc:
        FilterPolishNotationParser(options, max_depth=None).parse(text)
    assert exc.value.max_depth is None
    assert exc.value.details["maxDepth"] is None


def test_docstring_examples_run() -> None:
    """The usage example in the `parse` docstring is self-contained."""
    from filterkit import parser as parser_module

    results = doctest.testmod(parser_module)
    assert results.attempted > 0
    assert results.failed == 0
