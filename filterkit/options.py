"""
Filter options: the engine configuration.

`FilterOptions` composes the property catalog, the three operator namespaces
(binary, unary, property), the type conversion registry, the sentinel
settings and the tokenizer strategy. Builder methods mutate the instance and
return it for chaining; call `freeze()` before sharing an instance between
threads.

Example:
    options = (
        FilterOptions([FilterProperty("age", int)])
        .add_property("name", str)
        .without_null_value()
        .freeze()
    )
"""

from __future__ import annotations

import dataclasses
import logging
import types
import typing
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Union

from pydantic import BaseModel

from .converters import Converter, TypeConverters
from .exceptions import (
    DuplicateOperatorError,
    DuplicatePropertyError,
    EmptyPropertyCatalogError,
    OptionsFrozenError,
)
from .locale import FilterLocale
from .operations import BINARY_OPERATIONS, PROPERTY_OPERATIONS, UNARY_OPERATIONS
from .tokenizers import Tokenizer, WhitespaceTokenizer

logger = logging.getLogger(__name__)

CreateBinaryOperation = Callable[[Any, Any], Any]
CreateUnaryOperation = Callable[[Any], Any]
CreatePropertyOperation = Callable[[str, Any], Any]


class OperationKind(str, Enum):
    """The three independent operator namespaces, in lookup order."""

    BINARY = "binary"
    UNARY = "unary"
    PROPERTY = "property"


@dataclass(frozen=True, slots=True)
class FilterProperty:
    """A filterable property: its name and the Python type of its values."""

    name: str
    type: Any

    def matches(self, name: str) -> bool:
        """Case-insensitive name comparison."""
        return self.name.casefold() == name.casefold()


def _unwrap_optional(annotation: Any) -> Any:
    """`X | None` and `Optional[X]` become `X`; other annotations are unchanged."""
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def properties_from_type(record_type: type) -> list[FilterProperty]:
    """
    Enumerate the public fields of a record type as filter properties.

    Supports pydantic models, dataclasses and plain annotated classes.
    Optional annotations are unwrapped to their inner type.
    """
    if isinstance(record_type, type) and issubclass(record_type, BaseModel):
        return [
            FilterProperty(name, _unwrap_optional(info.annotation))
            for name, info in record_type.model_fields.items()
        ]

    hints = typing.get_type_hints(record_type)
    if dataclasses.is_dataclass(record_type):
        names = [f.name for f in dataclasses.fields(record_type)]
    else:
        names = [
            name
            for name, hint in hints.items()
            if not name.startswith("_") and typing.get_origin(hint) is not ClassVar
        ]
    return [FilterProperty(name, _unwrap_optional(hints[name])) for name in names]


class FilterOptions:
    """
    Engine configuration shared by any number of parse calls.

    Args:
        properties: The filterable properties (at least one).
        locale: Locale for numeric and temporal conversions; defaults to
            `FilterLocale.INVARIANT`.

    Raises:
        EmptyPropertyCatalogError: If `properties` is empty.
        DuplicatePropertyError: If two properties share a name.
    """

    DEFAULT_NULL_VALUE: ClassVar[str] = "NULL"
    DEFAULT_EMPTY_STRING_VALUE: ClassVar[str] = "EMPTY"

    def __init__(
        self,
        properties: Iterable[FilterProperty],
        locale: FilterLocale | None = None,
    ) -> None:
        self._frozen = False
        self._properties: list[FilterProperty] = []
        for prop in properties:
            self._append_property(prop)
        if not self._properties:
            raise EmptyPropertyCatalogError()

        self._binary_operations: dict[str, CreateBinaryOperation] = {}
        self._unary_operations: dict[str, CreateUnaryOperation] = {}
        self._property_operations: dict[str, CreatePropertyOperation] = {}
        self._converters = TypeConverters(
            locale,
            null_sentinel=self.DEFAULT_NULL_VALUE,
            empty_sentinel=self.DEFAULT_EMPTY_STRING_VALUE,
        )
        self._tokenizer: Tokenizer = WhitespaceTokenizer()

        for binary in BINARY_OPERATIONS:
            self.add_binary_operation(binary.keyword, binary)
        for unary in UNARY_OPERATIONS:
            self.add_unary_operation(unary.keyword, unary)
        for leaf in PROPERTY_OPERATIONS:
            self.add_property_operation(leaf.keyword, leaf)

    @classmethod
    def for_type(cls, record_type: type, locale: FilterLocale | None = None) -> FilterOptions:
        """Build options whose catalog is the public fields of `record_type`."""
        return cls(properties_from_type(record_type), locale)

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    @property
    def locale(self) -> FilterLocale:
        return self._converters.locale

    @property
    def null_value(self) -> str | None:
        """Literal treated as NULL for every type (None when disabled)."""
        return self._converters.null_sentinel

    @property
    def empty_string_value(self) -> str | None:
        """Literal treated as the empty string (None when disabled)."""
        return self._converters.empty_sentinel

    @property
    def tokenizer(self) -> Tokenizer:
        return self._tokenizer

    @property
    def properties(self) -> tuple[FilterProperty, ...]:
        return tuple(self._properties)

    @property
    def binary_operations(self) -> Mapping[str, CreateBinaryOperation]:
        return MappingProxyType(self._binary_operations)

    @property
    def unary_operations(self) -> Mapping[str, CreateUnaryOperation]:
        return MappingProxyType(self._unary_operations)

    @property
    def property_operations(self) -> Mapping[str, CreatePropertyOperation]:
        return MappingProxyType(self._property_operations)

    @property
    def converters(self) -> Mapping[Any, Converter]:
        return self._converters.converters

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get_property(self, name: str) -> FilterProperty | None:
        """Find a property by name, ignoring case."""
        for prop in self._properties:
            if prop.matches(name):
                return prop
        return None

    def convert(self, literal: str, target: Any) -> Any:
        """Convert a literal to `target` using the configured converters."""
        return self._converters.convert(literal, target)

    # -------------------------------------------------------------------------
    # Builder methods
    # -------------------------------------------------------------------------

    def _check_mutable(self, action: str) -> None:
        if self._frozen:
            raise OptionsFrozenError(action)

    def _append_property(self, prop: FilterProperty) -> None:
        if self.get_property(prop.name) is not None:
            raise DuplicatePropertyError(prop.name)
        self._properties.append(prop)

    def _namespaces(self) -> dict[OperationKind, dict[str, Any]]:
        return {
            OperationKind.BINARY: self._binary_operations,
            OperationKind.UNARY: self._unary_operations,
            OperationKind.PROPERTY: self._property_operations,
        }

    def _add_operation(
        self, kind: OperationKind, name: str, create: Callable[..., Any], *, replace: bool
    ) -> FilterOptions:
        self._check_mutable(f"add {kind.value} operation '{name}'")
        keyword = name.upper()
        namespaces = self._namespaces()
        registry = namespaces[kind]
        if keyword in registry:
            if not replace:
                raise DuplicateOperatorError(keyword, kind.value)
            logger.debug("Replacing %s operation %s", kind.value, keyword)

        others = [
            other.value for other, ops in namespaces.items() if other is not kind and keyword in ops
        ]
        if others:
            logger.warning(
                "Operator %s is registered as %s and %s; lookup order is binary, unary, property",
                keyword,
                kind.value,
                " and ".join(others),
            )
        registry[keyword] = create
        return self

    def add_binary_operation(
        self, name: str, create: CreateBinaryOperation, *, replace: bool = False
    ) -> FilterOptions:
        """
        Register a binary operator: `create(left, right)` builds the node.

        Raises:
            DuplicateOperatorError: If the keyword is taken and `replace` is False.
        """
        return self._add_operation(OperationKind.BINARY, name, create, replace=replace)

    def add_unary_operation(
        self, name: str, create: CreateUnaryOperation, *, replace: bool = False
    ) -> FilterOptions:
        """Register a unary operator: `create(operand)` builds the node."""
        return self._add_operation(OperationKind.UNARY, name, create, replace=replace)

    def add_property_operation(
        self, name: str, create: CreatePropertyOperation, *, replace: bool = False
    ) -> FilterOptions:
        """Register a property operator: `create(property_name, value)` builds the leaf."""
        return self._add_operation(OperationKind.PROPERTY, name, create, replace=replace)

    def clear_operations(self) -> FilterOptions:
        """Remove every operator from all three namespaces."""
        self._check_mutable("clear operations")
        self._binary_operations.clear()
        self._unary_operations.clear()
        self._property_operations.clear()
        return self

    def add_converter(self, target: Any, converter: Converter) -> FilterOptions:
        """Register (or replace) the converter used for properties of type `target`."""
        self._check_mutable("add converter")
        self._converters.add(target, converter)
        return self

    def with_null_value_as(self, literal: str) -> FilterOptions:
        self._check_mutable("set null value")
        self._converters.null_sentinel = literal
        return self

    def without_null_value(self) -> FilterOptions:
        self._check_mutable("disable null value")
        self._converters.null_sentinel = None
        return self

    def with_empty_string_as(self, literal: str) -> FilterOptions:
        self._check_mutable("set empty string value")
        self._converters.empty_sentinel = literal
        return self

    def without_empty_string(self) -> FilterOptions:
        self._check_mutable("disable empty string value")
        self._converters.empty_sentinel = None
        return self

    def with_tokenizer(self, tokenizer: Tokenizer) -> FilterOptions:
        self._check_mutable("set tokenizer")
        self._tokenizer = tokenizer
        return self

    def add_property(self, name: str, value_type: Any) -> FilterOptions:
        """
        Add one more filterable property.

        Raises:
            DuplicatePropertyError: If a property with that name (ignoring case) exists.
        """
        self._check_mutable(f"add property '{name}'")
        self._append_property(FilterProperty(name, value_type))
        return self

    def freeze(self) -> FilterOptions:
        """Reject any further mutation; safe to share between threads afterwards."""
        self._frozen = True
        return self

    def __repr__(self) -> str:
        names = ", ".join(p.name for p in self._properties)
        return f"FilterOptions(properties=[{names}], locale={self.locale.name!r})"
