"""
Locale settings used when converting numeric and temporal literals.

Locales never affect keyword or property-name matching, which is always
case-insensitive and culture-invariant.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .exceptions import UnknownLocaleError


@dataclass(frozen=True, slots=True)
class FilterLocale:
    """Number and date formatting conventions for literal conversion."""

    name: str
    decimal_separator: str = "."
    group_separator: str = ","
    dayfirst: bool = False

    INVARIANT: ClassVar[FilterLocale]

    @classmethod
    def get(cls, name: str) -> FilterLocale:
        """Return a built-in locale by name (case-insensitive)."""
        locale = _PRESETS.get(name.casefold())
        if locale is None:
            raise UnknownLocaleError(name, available=sorted(p.name for p in _PRESETS.values()))
        return locale


FilterLocale.INVARIANT = FilterLocale("invariant")

_PRESETS: dict[str, FilterLocale] = {
    locale.name.casefold(): locale
    for locale in (
        FilterLocale.INVARIANT,
        FilterLocale("en-US"),
        FilterLocale("en-GB", dayfirst=True),
        FilterLocale("fr-FR", decimal_separator=",", group_separator=" ", dayfirst=True),
        FilterLocale("de-DE", decimal_separator=",", group_separator=".", dayfirst=True),
    )
}
