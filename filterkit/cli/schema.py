"""Property catalog files for the command line.

A catalog file is JSON:

    {
      "properties": [
        {"name": "firstname", "type": "str"},
        {"name": "age", "type": "int"}
      ],
      "locale": "fr-FR",
      "nullSentinel": "NULL",
      "emptySentinel": "EMPTY",
      "tokenizer": "quoted"
    }

Everything except `properties` is optional.
"""

from __future__ import annotations

import json
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, ValidationError, field_validator

from filterkit.converters import Char, Float32, Int32, Int64
from filterkit.locale import FilterLocale
from filterkit.options import FilterOptions, FilterProperty
from filterkit.tokenizers import QuotedTokenizer

from .errors import CLIError, SchemaFileError
from .results import CLIModel

TYPE_NAMES: dict[str, Any] = {
    "str": str,
    "char": Char,
    "int": int,
    "int32": Int32,
    "int64": Int64,
    "float": float,
    "float32": Float32,
    "decimal": Decimal,
    "bool": bool,
    "date": date,
    "datetime": datetime,
    "time": time,
    "timedelta": timedelta,
}


class PropertySchema(CLIModel):
    name: str = Field(..., min_length=1)
    type: str

    @field_validator("type")
    @classmethod
    def _known_type(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in TYPE_NAMES:
            raise ValueError(
                f"unknown type '{value}'. Supported types: {', '.join(sorted(TYPE_NAMES))}"
            )
        return normalized

    def to_property(self) -> FilterProperty:
        return FilterProperty(self.name, TYPE_NAMES[self.type])


class CatalogSchema(CLIModel):
    properties: list[PropertySchema] = Field(default_factory=list)
    locale: str = "invariant"
    null_sentinel: str | None = Field("NULL", alias="nullSentinel")
    empty_sentinel: str | None = Field("EMPTY", alias="emptySentinel")
    tokenizer: Literal["whitespace", "quoted"] = "whitespace"

    def build_options(self) -> FilterOptions:
        """Build `FilterOptions`; engine configuration errors propagate unchanged."""
        options = FilterOptions(
            [p.to_property() for p in self.properties],
            FilterLocale.get(self.locale),
        )
        if self.null_sentinel is None:
            options.without_null_value()
        else:
            options.with_null_value_as(self.null_sentinel)
        if self.empty_sentinel is None:
            options.without_empty_string()
        else:
            options.with_empty_string_as(self.empty_sentinel)
        if self.tokenizer == "quoted":
            options.with_tokenizer(QuotedTokenizer())
        return options.freeze()


def _validation_message(exc: ValidationError) -> str:
    parts: list[str] = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts)


def load_catalog(path: Path) -> CatalogSchema:
    """Read and validate a catalog file."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise SchemaFileError(
            f"Cannot read schema file {path}: {exc}", path, unreadable=True
        ) from exc
    except json.JSONDecodeError as exc:
        raise SchemaFileError(f"Schema file {path} is not valid JSON: {exc}", path) from exc
    try:
        return CatalogSchema.model_validate(raw)
    except ValidationError as exc:
        raise SchemaFileError(
            f"Invalid schema file {path}: {_validation_message(exc)}", path
        ) from exc


def parse_property_spec(spec: str) -> PropertySchema:
    """Parse a `name:type` command line property."""
    name, sep, type_name = spec.partition(":")
    if not sep or not name.strip():
        raise CLIError(
            f"Invalid property '{spec}'. Expected NAME:TYPE, for example age:int",
        )
    try:
        return PropertySchema(name=name.strip(), type=type_name)
    except ValidationError as exc:
        raise CLIError(f"Invalid property '{spec}': {_validation_message(exc)}") from exc
