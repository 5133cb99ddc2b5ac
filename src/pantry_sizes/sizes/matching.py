"""Closest-size matching for store switching, plus ranking helpers.

When a shopper moves a list to another store, each item's size is matched
against what that store stocks. Candidates only ever compete inside the
target's unit category; a 500g pack is never offered for 500ml.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple, Union

from ..logging import get_logger
from .constants import (
    COMMON_SIZE_BONUS,
    DEFAULT_TOLERANCE,
    EXACT_TOLERANCE,
    ROUND_VALUE_TIERS,
    UnitCategory,
)
from .models import ParsedSize, SizeMatch, SizeMatchResult
from .parser import parse_size
from .units import UK_LOCALE, SizeLocale, in_set, is_multiple


LOG = get_logger("size-matching")


def _parse_all(
    sizes: Iterable[str], locale: SizeLocale
) -> List[Tuple[str, ParsedSize]]:
    out: List[Tuple[str, ParsedSize]] = []
    for size in sizes:
        parsed = parse_size(size, locale=locale)
        if parsed is not None:
            out.append((size, parsed))
    return out


def _symmetric_diff(a: ParsedSize, b: ParsedSize) -> Optional[float]:
    if a.category is not b.category:
        return None
    denominator = max(a.normalized_value, b.normalized_value)
    if denominator <= 0:
        return None
    return abs(a.normalized_value - b.normalized_value) / denominator


def find_closest_size(
    target: str,
    candidates: Iterable[str],
    tolerance: float = DEFAULT_TOLERANCE,
    *,
    locale: Optional[SizeLocale] = None,
) -> SizeMatchResult:
    """Rank ``candidates`` by how close they are to ``target``.

    Differences are relative to the target. ``tolerance`` bounds what counts
    as an auto-matchable substitute; anything within 1% is exact regardless.

    >>> find_closest_size("250g", ["227g", "500g", "1kg"]).best_match.size
    '227g'
    """
    loc = locale or UK_LOCALE
    if not isinstance(tolerance, (int, float)) or isinstance(tolerance, bool) or not tolerance > 0:
        LOG.warning("Invalid tolerance %r; using %.2f", tolerance, DEFAULT_TOLERANCE)
        tolerance = DEFAULT_TOLERANCE

    target_parsed = parse_size(target, locale=loc)
    if target_parsed is None or target_parsed.normalized_value <= 0:
        return SizeMatchResult()

    matches: List[SizeMatch] = []
    for size, parsed in _parse_all(candidates, loc):
        if parsed.category is not target_parsed.category:
            continue
        percent_diff = abs(parsed.normalized_value - target_parsed.normalized_value) / target_parsed.normalized_value
        matches.append(
            SizeMatch(
                size=size,
                parsed=parsed,
                match_score=min(percent_diff / tolerance, 1.0),
                is_exact=percent_diff <= EXACT_TOLERANCE,
                is_auto_matchable=percent_diff <= tolerance,
                percent_diff=percent_diff,
            )
        )

    # sorted() is stable: equally close candidates keep catalog order
    matches = sorted(matches, key=lambda m: m.percent_diff)
    return SizeMatchResult(
        best_match=matches[0] if matches else None,
        all_matches=matches,
        has_exact_match=any(m.is_exact for m in matches),
        has_auto_match=any(m.is_auto_matchable for m in matches),
    )


def size_percent_diff(a: str, b: str, *, locale: Optional[SizeLocale] = None) -> Optional[float]:
    """Fractional difference between two sizes, relative to the larger one."""
    pa = parse_size(a, locale=locale)
    pb = parse_size(b, locale=locale)
    if pa is None or pb is None:
        return None
    return _symmetric_diff(pa, pb)


def are_sizes_equivalent(a: str, b: str, *, locale: Optional[SizeLocale] = None) -> bool:
    """True when both sizes are the same amount, give or take 1%.

    Symmetric: "1L" vs "1000ml" and "1000ml" vs "1L" agree.
    """
    diff = size_percent_diff(a, b, locale=locale)
    return diff is not None and diff <= EXACT_TOLERANCE


def rank_by_value(sizes: Iterable[str], *, locale: Optional[SizeLocale] = None) -> List[str]:
    """Parseable sizes, smallest normalized value first."""
    parsed = _parse_all(sizes, locale or UK_LOCALE)
    return [size for size, _ in sorted(parsed, key=lambda item: item[1].normalized_value)]


def group_by_category(
    sizes: Iterable[str], *, locale: Optional[SizeLocale] = None
) -> Dict[str, List[str]]:
    groups: Dict[str, List[str]] = {cat.value: [] for cat in UnitCategory}
    for size, parsed in _parse_all(sizes, locale or UK_LOCALE):
        groups[parsed.category.value].append(size)
    return groups


def _standard_score(parsed: ParsedSize, locale: SizeLocale) -> int:
    score = 0
    if parsed.category is not UnitCategory.COUNT:
        for divisor, points in ROUND_VALUE_TIERS:
            if is_multiple(parsed.normalized_value, divisor):
                score += points
                break
    common = locale.common_sizes.get(parsed.category, frozenset())
    # Packs are judged on the literal count, not the normalized value
    probe = parsed.value if parsed.category is UnitCategory.COUNT else parsed.normalized_value
    if in_set(probe, common):
        score += COMMON_SIZE_BONUS
    return score


def suggest_standard_size(
    sizes: Iterable[str],
    category: Union[UnitCategory, str, None] = None,
    *,
    locale: Optional[SizeLocale] = None,
) -> Optional[str]:
    """Pick the most "standard" looking size: round numbers, familiar packs.

    >>> suggest_standard_size(["227g", "250g", "500g"], "weight")
    '500g'
    """
    loc = locale or UK_LOCALE
    wanted = UnitCategory(category) if category is not None else None
    candidates = [
        (size, parsed)
        for size, parsed in _parse_all(sizes, loc)
        if parsed.normalized_value > 0 and (wanted is None or parsed.category is wanted)
    ]
    if not candidates:
        return None
    best_size, best_score = candidates[0][0], _standard_score(candidates[0][1], loc)
    for size, parsed in candidates[1:]:
        score = _standard_score(parsed, loc)
        if score > best_score:
            best_size, best_score = size, score
    return best_size
