from __future__ import annotations

import math
from dataclasses import replace
from typing import Any, Iterable, List, Optional, Tuple, Union

from ..logging import get_logger
from .constants import PRICE_PER_UNIT_QUANTITY, SMALL_PRICE_THRESHOLD, UnitCategory
from .models import ParsedSize, SizeOption
from .parser import parse_size
from .units import UK_LOCALE, SizeLocale


LOG = get_logger("size-pricing")


def _as_price(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    return price if math.isfinite(price) else None


def price_per_parsed(price: float, parsed: ParsedSize) -> Optional[float]:
    """Price per item (count) or per 100 base units (volume/weight)."""
    if parsed.category is UnitCategory.COUNT:
        if parsed.value <= 0:
            return None
        result = price / parsed.value
    else:
        if parsed.normalized_value <= 0:
            return None
        result = (price / parsed.normalized_value) * PRICE_PER_UNIT_QUANTITY
    # A non-zero price never comes out free or infinite
    if not math.isfinite(result) or (result == 0 and price != 0):
        return None
    return result


def price_per_unit(price: Any, size: str, *, locale: Optional[SizeLocale] = None) -> Optional[float]:
    """Unit price for comparing value across pack sizes.

    ``None`` means "unknown", never zero: the size did not parse, the price
    is not a finite number, or the size is zero.
    """
    amount = _as_price(price)
    if amount is None:
        return None
    parsed = parse_size(size, locale=locale)
    if parsed is None:
        return None
    return price_per_parsed(amount, parsed)


def format_price_per_unit(
    value: float, category: Union[UnitCategory, str], *, locale: Optional[SizeLocale] = None
) -> str:
    """Render e.g. "£0.73/100ml"; sub-penny values keep three decimals."""
    loc = locale or UK_LOCALE
    cat = UnitCategory(category)
    formatted = f"{value:.3f}" if value < SMALL_PRICE_THRESHOLD else f"{value:.2f}"
    return f"{loc.currency_symbol}{formatted}{loc.price_labels[cat]}"


def price_per_unit_label(size: str, *, locale: Optional[SizeLocale] = None) -> str:
    loc = locale or UK_LOCALE
    parsed = parse_size(size, locale=loc)
    if parsed is None:
        return ""
    return loc.price_labels[parsed.category]


def rank_by_price_per_unit(
    offers: Iterable[Tuple[str, Any]], *, locale: Optional[SizeLocale] = None
) -> List[SizeOption]:
    """Order ``(size, price)`` offers cheapest-per-unit first.

    Unit prices only compare within a category, so ranking happens inside the
    category holding the most priced offers; everything else (other
    categories, unparseable sizes, missing prices) follows in input order.
    The first ranked row carries the best-value flag.
    """
    loc = locale or UK_LOCALE
    rows: List[SizeOption] = []
    for size, raw_price in offers:
        price = _as_price(raw_price)
        parsed = parse_size(size, locale=loc)
        ppu = price_per_parsed(price, parsed) if (parsed is not None and price is not None) else None
        rows.append(
            SizeOption(
                size=size,
                price=price,
                parsed=parsed,
                price_per_unit=ppu,
                price_per_unit_display=(
                    format_price_per_unit(ppu, parsed.category, locale=loc) if ppu is not None else None
                ),
            )
        )

    priced = [r for r in rows if r.price_per_unit is not None]
    if not priced:
        if rows:
            LOG.info("No comparable unit prices among %d offer(s)", len(rows))
        return rows

    counts = {cat: 0 for cat in UnitCategory}
    for r in priced:
        counts[r.parsed.category] += 1
    # Ties go to the category seen first.
    dominant = max((r.parsed.category for r in priced), key=lambda c: counts[c])

    ranked = sorted(
        (r for r in priced if r.parsed.category is dominant),
        key=lambda r: r.price_per_unit,
    )
    ranked_ids = {id(r) for r in ranked}
    rest = [r for r in rows if id(r) not in ranked_ids]
    unpriced = len(rows) - len(priced)
    if unpriced:
        LOG.info("%d of %d offer(s) have no comparable unit price", unpriced, len(rows))

    ranked[0] = replace(ranked[0], is_best_value=True)
    return ranked + rest
