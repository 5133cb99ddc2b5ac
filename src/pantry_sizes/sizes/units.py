"""Unit table and per-market display rules.

Every recognised unit token maps to exactly one ``UnitConversion``. The token
table is the only stringly-typed boundary: lookups return the closed
``CanonicalUnit`` / ``UnitCategory`` enums, so nothing past the parser ever
handles a raw unit string.

``SizeLocale`` bundles the table with the display heuristic and common-size
knowledge for one market. Only the UK locale ships today.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Optional, Tuple

from ..logging import get_logger
from .constants import (
    COMMON_COUNTS,
    COMMON_VOLUMES_ML,
    COMMON_WEIGHTS_G,
    DEFAULT_CURRENCY_SYMBOL,
    LARGE_UNIT_THRESHOLD,
    ML_PER_UK_PINT,
    MULTIPLE_EPSILON,
    PINT_DISPLAY_MAX_ML,
    PINT_DISPLAY_MIN_ML,
    PRICE_PER_UNIT_LABELS,
    CanonicalUnit,
    UnitCategory,
)

LOG = get_logger("units")

_WS_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class UnitConversion:
    factor: float
    base_unit: CanonicalUnit
    category: UnitCategory


def _table(groups: Tuple[Tuple[Tuple[str, ...], UnitConversion], ...]) -> Mapping[str, UnitConversion]:
    table: Dict[str, UnitConversion] = {}
    for tokens, conversion in groups:
        for token in tokens:
            if token in table:
                raise ValueError(f"duplicate unit token: {token}")
            table[token] = conversion
    return MappingProxyType(table)


_ML = UnitCategory.VOLUME
_G = UnitCategory.WEIGHT
_N = UnitCategory.COUNT

UNIT_CONVERSIONS: Mapping[str, UnitConversion] = _table(
    (
        # Volume (base ml)
        (("pt", "pint", "pints"), UnitConversion(ML_PER_UK_PINT, CanonicalUnit.ML, _ML)),
        (("l", "litre", "liter", "litres", "liters"), UnitConversion(1000, CanonicalUnit.ML, _ML)),
        (
            ("ml", "millilitre", "milliliter", "millilitres", "milliliters"),
            UnitConversion(1, CanonicalUnit.ML, _ML),
        ),
        (("cl", "centilitre", "centiliter"), UnitConversion(10, CanonicalUnit.ML, _ML)),
        # Weight (base g)
        (("kg", "kilogram", "kilograms", "kilo", "kilos"), UnitConversion(1000, CanonicalUnit.G, _G)),
        (("g", "gram", "grams"), UnitConversion(1, CanonicalUnit.G, _G)),
        (("oz", "ounce", "ounces"), UnitConversion(28.35, CanonicalUnit.G, _G)),
        (("lb", "lbs", "pound", "pounds"), UnitConversion(453.6, CanonicalUnit.G, _G)),
        # Count (base 1)
        (("pk", "pack", "packs", "x"), UnitConversion(1, CanonicalUnit.PK, _N)),
        (("each", "ea", "pcs", "pieces"), UnitConversion(1, CanonicalUnit.EACH, _N)),
    )
)


def normalize_token(token: str) -> str:
    """Trim, lower-case and collapse internal whitespace."""
    return _WS_RE.sub(" ", token.strip().lower())


def is_multiple(value: float, divisor: float) -> bool:
    if divisor <= 0:
        return False
    remainder = value % divisor
    return remainder <= MULTIPLE_EPSILON or divisor - remainder <= MULTIPLE_EPSILON


def in_set(value: float, members: FrozenSet[float]) -> bool:
    return any(abs(value - m) <= MULTIPLE_EPSILON for m in members)


@dataclass(frozen=True)
class SizeLocale:
    """Market-specific unit table and display preferences."""

    code: str
    conversions: Mapping[str, UnitConversion] = field(default_factory=lambda: UNIT_CONVERSIONS)
    pint_ml: Optional[float] = ML_PER_UK_PINT
    pint_window: Tuple[float, float] = (PINT_DISPLAY_MIN_ML, PINT_DISPLAY_MAX_ML)
    large_unit_threshold: float = LARGE_UNIT_THRESHOLD
    common_sizes: Mapping[UnitCategory, FrozenSet[float]] = field(
        default_factory=lambda: MappingProxyType(
            {
                UnitCategory.VOLUME: COMMON_VOLUMES_ML,
                UnitCategory.WEIGHT: COMMON_WEIGHTS_G,
                UnitCategory.COUNT: COMMON_COUNTS,
            }
        )
    )
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
    price_labels: Mapping[UnitCategory, str] = field(default_factory=lambda: PRICE_PER_UNIT_LABELS)

    def lookup(self, token: str) -> Optional[UnitConversion]:
        if not isinstance(token, str):
            return None
        return self.conversions.get(normalize_token(token))

    def display_unit(
        self, category: UnitCategory, normalized_value: float, base_unit: CanonicalUnit
    ) -> Tuple[CanonicalUnit, float]:
        """Pick the unit a shopper expects to read for this magnitude."""
        if category is UnitCategory.VOLUME:
            low, high = self.pint_window
            if self.pint_ml and low <= normalized_value <= high and is_multiple(normalized_value, self.pint_ml):
                return CanonicalUnit.PT, normalized_value / self.pint_ml
            if normalized_value >= self.large_unit_threshold:
                return CanonicalUnit.L, normalized_value / 1000
            return CanonicalUnit.ML, normalized_value
        if category is UnitCategory.WEIGHT:
            if normalized_value >= self.large_unit_threshold:
                return CanonicalUnit.KG, normalized_value / 1000
            return CanonicalUnit.G, normalized_value
        return base_unit, normalized_value


UK_LOCALE = SizeLocale(code="uk")

_LOCALES: Dict[str, SizeLocale] = {UK_LOCALE.code: UK_LOCALE}


def register_locale(locale: SizeLocale) -> None:
    code = locale.code.strip().lower()
    if code in _LOCALES:
        raise ValueError(f"locale already registered: {code}")
    missing = set(UnitCategory) - set(locale.price_labels)
    if missing:
        raise ValueError(f"locale {code} lacks price labels for: {sorted(c.value for c in missing)}")
    _LOCALES[code] = locale


def get_locale(code: Optional[str] = None) -> SizeLocale:
    if not code:
        return UK_LOCALE
    key = code.strip().lower()
    locale = _LOCALES.get(key)
    if locale is None:
        LOG.warning("Unknown size locale '%s'; falling back to %s", code, UK_LOCALE.code)
        return UK_LOCALE
    return locale


def lookup_unit(token: str, locale: Optional[SizeLocale] = None) -> Optional[UnitConversion]:
    return (locale or UK_LOCALE).lookup(token)
