from __future__ import annotations

import math
import re
from typing import Any, Optional, Union

from ..logging import get_logger
from .constants import UNIT_DISPLAY, CanonicalUnit, UnitCategory
from .models import ParsedSize
from .units import UK_LOCALE, SizeLocale, UnitConversion, normalize_token


LOG = get_logger("size-parser")

# "2pt", "500 ml", "6-pack", "1.5kg"
_SIMPLE_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*[-x]?\s*([a-z]+)$")
# "6 x 500ml", "4x100g"
_MULTI_RE = re.compile(r"^(\d+)\s*x\s*(\d+(?:\.\d+)?)\s*([a-z]+)$")
# "pack of 6", "packs of 12"
_PACK_OF_RE = re.compile(r"^(pack|packs|pk)\s+of\s+(\d+)$")


def _finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


def format_size_value(value: float) -> str:
    """Whole numbers without decimals, everything else with one decimal.

    A one-decimal rendering that rounds to a whole number loses its ".0"
    (2.96 -> "3").
    """
    if float(value).is_integer():
        return str(int(value))
    text = f"{value:.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    return text


def _display(
    conversion: UnitConversion, normalized_value: float, locale: SizeLocale
) -> str:
    unit, display_value = locale.display_unit(conversion.category, normalized_value, conversion.base_unit)
    return f"{format_size_value(display_value)}{UNIT_DISPLAY[unit]}"


def _parse_simple(cleaned: str, original: str, locale: SizeLocale) -> Optional[ParsedSize]:
    m = _SIMPLE_RE.match(cleaned)
    if not m:
        return None
    conversion = locale.lookup(m.group(2))
    if conversion is None:
        return None
    value = float(m.group(1))
    normalized_value = value * conversion.factor
    if not _finite(value, normalized_value):
        return None
    return ParsedSize(
        value=value,
        unit=conversion.base_unit,
        category=conversion.category,
        normalized_value=normalized_value,
        display=_display(conversion, normalized_value, locale),
        original=original,
    )


def _parse_multiplied(cleaned: str, original: str, locale: SizeLocale) -> Optional[ParsedSize]:
    m = _MULTI_RE.match(cleaned)
    if not m:
        return None
    conversion = locale.lookup(m.group(3))
    if conversion is None:
        return None
    count = float(m.group(1))
    per_unit = float(m.group(2))
    total = count * per_unit
    if not _finite(count, per_unit, total, total * conversion.factor):
        return None
    per_unit_display = _display(conversion, per_unit * conversion.factor, locale)
    return ParsedSize(
        value=total,
        unit=conversion.base_unit,
        category=conversion.category,
        normalized_value=total * conversion.factor,
        display=f"{format_size_value(count)}x{per_unit_display}",
        original=original,
    )


def _parse_pack_of(cleaned: str, original: str, locale: SizeLocale) -> Optional[ParsedSize]:
    m = _PACK_OF_RE.match(cleaned)
    if not m:
        return None
    conversion = locale.lookup(m.group(1))
    if conversion is None or conversion.category is not UnitCategory.COUNT:
        return None
    value = float(m.group(2))
    if not _finite(value, value * conversion.factor):
        return None
    return ParsedSize(
        value=value,
        unit=conversion.base_unit,
        category=conversion.category,
        normalized_value=value * conversion.factor,
        display=_display(conversion, value * conversion.factor, locale),
        original=original,
    )


_GRAMMARS = (_parse_simple, _parse_multiplied, _parse_pack_of)


def parse_size(size: Any, *, locale: Optional[SizeLocale] = None) -> Optional[ParsedSize]:
    """Parse a free-form size string like "2 pints", "500ml" or "6 x 330ml".

    Returns ``None`` for anything that is not a recognisable size: non-strings,
    empty text, a bare number, unknown unit tokens. Never raises.
    """
    if not isinstance(size, str):
        return None
    cleaned = normalize_token(size)
    if not cleaned:
        return None
    loc = locale or UK_LOCALE
    for grammar in _GRAMMARS:
        parsed = grammar(cleaned, size, loc)
        if parsed is not None:
            return parsed
    LOG.debug("Unparseable size: %r", size)
    return None


def normalize_size(size: str, *, locale: Optional[SizeLocale] = None) -> str:
    """Return the display form of ``size``, or ``size`` itself if unparseable."""
    parsed = parse_size(size, locale=locale)
    return parsed.display if parsed else size


def are_sizes_comparable(a: str, b: str, *, locale: Optional[SizeLocale] = None) -> bool:
    pa = parse_size(a, locale=locale)
    pb = parse_size(b, locale=locale)
    return pa is not None and pb is not None and pa.category is pb.category


def convert_size(
    size: str,
    target_unit: Union[str, CanonicalUnit],
    *,
    locale: Optional[SizeLocale] = None,
) -> Optional[str]:
    """Express ``size`` in ``target_unit`` of the same category.

    >>> convert_size("2pt", "ml")
    '1136ml'
    >>> convert_size("500g", "kg")
    '0.5kg'
    """
    loc = locale or UK_LOCALE
    parsed = parse_size(size, locale=loc)
    if parsed is None:
        return None
    try:
        unit = CanonicalUnit(str(getattr(target_unit, "value", target_unit)).strip().lower())
    except ValueError:
        return None
    target = loc.lookup(unit.value)
    if target is None or target.category is not parsed.category:
        return None
    return f"{format_size_value(parsed.normalized_value / target.factor)}{UNIT_DISPLAY[unit]}"
