"""
filterkit: prefix-notation filter expressions over typed properties.

Example:
    from filterkit import FilterOptions, FilterProperty, parse

    options = FilterOptions([
        FilterProperty("firstname", str),
        FilterProperty("lastname", str),
    ])
    result = parse("and eq firstname John eq lastname Doe", options)
    result.operation  # AndOperation(left=EqualOperation(...), right=EqualOperation(...))
"""

from __future__ import annotations

from .converters import Char, Float32, Int32, Int64, TypeConverters, enum_converter
from .exceptions import (
    ConversionError,
    DuplicateOperatorError,
    DuplicatePropertyError,
    EmptyPropertyCatalogError,
    FilterConfigurationError,
    FilterError,
    FilterParseError,
    InvalidLiteralError,
    LiteralFormatError,
    MaxDepthExceededError,
    OptionsFrozenError,
    TokenizeError,
    TrailingTokensError,
    UnexpectedEndOfInputError,
    UnknownLocaleError,
    UnknownOperatorError,
    UnknownPropertyError,
    UnsupportedTypeError,
)
from .locale import FilterLocale
from .options import FilterOptions, FilterProperty, OperationKind, properties_from_type
from .parser import FilterPolishNotationParser, ParsedFilter, parse
from .tokenizers import QuotedTokenizer, Tokenizer, WhitespaceTokenizer

__version__ = "0.3.0"

__all__ = [
    "Char",
    "ConversionError",
    "DuplicateOperatorError",
    "DuplicatePropertyError",
    "EmptyPropertyCatalogError",
    "FilterConfigurationError",
    "FilterError",
    "FilterLocale",
    "FilterOptions",
    "FilterParseError",
    "FilterPolishNotationParser",
    "FilterProperty",
    "Float32",
    "Int32",
    "Int64",
    "InvalidLiteralError",
    "LiteralFormatError",
    "MaxDepthExceededError",
    "OperationKind",
    "OptionsFrozenError",
    "ParsedFilter",
    "QuotedTokenizer",
    "TokenizeError",
    "Tokenizer",
    "TrailingTokensError",
    "TypeConverters",
    "UnexpectedEndOfInputError",
    "UnknownLocaleError",
    "UnknownOperatorError",
    "UnknownPropertyError",
    "UnsupportedTypeError",
    "WhitespaceTokenizer",
    "__version__",
    "enum_converter",
    "parse",
    "properties_from_type",
]
