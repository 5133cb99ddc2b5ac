"""Size normalization and matching engine.

Modules:
- constants: unit enums, thresholds and common-size tables
- units: token -> conversion table and per-market display rules
- models: ParsedSize / SizeMatch / SizeMatchResult / SizeOption records
- parser: free-text size parsing and display formatting
- pricing: price per 100ml / 100g / item and "best value" ranking
- matching: closest-size matching, equivalence, ranking, standard-size pick
"""

from .constants import DEFAULT_TOLERANCE, EXACT_TOLERANCE, CanonicalUnit, UnitCategory
from .matching import (
    are_sizes_equivalent,
    find_closest_size,
    group_by_category,
    rank_by_value,
    size_percent_diff,
    suggest_standard_size,
)
from .models import ParsedSize, SizeMatch, SizeMatchResult, SizeOption
from .parser import are_sizes_comparable, convert_size, normalize_size, parse_size
from .pricing import (
    format_price_per_unit,
    price_per_unit,
    price_per_unit_label,
    rank_by_price_per_unit,
)
from .units import UK_LOCALE, UNIT_CONVERSIONS, SizeLocale, UnitConversion, get_locale, lookup_unit, register_locale

__all__ = [
    "DEFAULT_TOLERANCE",
    "EXACT_TOLERANCE",
    "CanonicalUnit",
    "UnitCategory",
    "UnitConversion",
    "UNIT_CONVERSIONS",
    "SizeLocale",
    "UK_LOCALE",
    "get_locale",
    "register_locale",
    "lookup_unit",
    "ParsedSize",
    "SizeMatch",
    "SizeMatchResult",
    "SizeOption",
    "parse_size",
    "normalize_size",
    "convert_size",
    "are_sizes_comparable",
    "price_per_unit",
    "format_price_per_unit",
    "price_per_unit_label",
    "rank_by_price_per_unit",
    "find_closest_size",
    "are_sizes_equivalent",
    "size_percent_diff",
    "rank_by_value",
    "group_by_category",
    "suggest_standard_size",
]
