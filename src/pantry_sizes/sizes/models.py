from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .constants import CanonicalUnit, UnitCategory


@dataclass(frozen=True)
class ParsedSize:
    value: float
    unit: CanonicalUnit          # base unit of the matched token: ml | g | pk | each
    category: UnitCategory
    normalized_value: float      # ml, g or count-of-1
    display: str                 # e.g. "2pt", "1.5kg", "6x500ml"
    original: str                # input, verbatim

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "unit": self.unit.value,
            "category": self.category.value,
            "normalizedValue": self.normalized_value,
            "display": self.display,
            "original": self.original,
        }


@dataclass(frozen=True)
class SizeMatch:
    size: str
    parsed: ParsedSize
    match_score: float           # 0 = identical, 1 = at or past tolerance
    is_exact: bool
    is_auto_matchable: bool
    percent_diff: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "size": self.size,
            "parsed": self.parsed.to_dict(),
            "matchScore": self.match_score,
            "isExact": self.is_exact,
            "isAutoMatchable": self.is_auto_matchable,
            "percentDiff": self.percent_diff,
        }


@dataclass(frozen=True)
class SizeMatchResult:
    best_match: Optional[SizeMatch] = None
    all_matches: List[SizeMatch] = field(default_factory=list)
    has_exact_match: bool = False
    has_auto_match: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bestMatch": self.best_match.to_dict() if self.best_match else None,
            "allMatches": [m.to_dict() for m in self.all_matches],
            "hasExactMatch": self.has_exact_match,
            "hasAutoMatch": self.has_auto_match,
        }


@dataclass(frozen=True)
class SizeOption:
    """One priced size offer, as ranked for a "best value" badge."""

    size: str
    price: Optional[float]
    parsed: Optional[ParsedSize]
    price_per_unit: Optional[float]
    price_per_unit_display: Optional[str]
    is_best_value: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "size": self.size,
            "price": self.price,
            "display": self.parsed.display if self.parsed else self.size,
            "category": self.parsed.category.value if self.parsed else None,
            "pricePerUnit": self.price_per_unit,
            "pricePerUnitDisplay": self.price_per_unit_display,
            "isBestValue": self.is_best_value,
        }
