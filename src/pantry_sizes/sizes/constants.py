from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Tuple


class UnitCategory(str, Enum):
    """Family a size belongs to. Sizes only compare within one category."""

    VOLUME = "volume"
    WEIGHT = "weight"
    COUNT = "count"


class CanonicalUnit(str, Enum):
    ML = "ml"
    L = "l"
    PT = "pt"
    G = "g"
    KG = "kg"
    OZ = "oz"
    LB = "lb"
    PK = "pk"
    EACH = "each"


# Abbreviation rendered after the number in display strings.
UNIT_DISPLAY: Dict[CanonicalUnit, str] = {
    CanonicalUnit.ML: "ml",
    CanonicalUnit.L: "L",
    CanonicalUnit.PT: "pt",
    CanonicalUnit.G: "g",
    CanonicalUnit.KG: "kg",
    CanonicalUnit.OZ: "oz",
    CanonicalUnit.LB: "lb",
    CanonicalUnit.PK: "pk",
    CanonicalUnit.EACH: "each",
}

PRICE_PER_UNIT_LABELS: Dict[UnitCategory, str] = {
    UnitCategory.VOLUME: "/100ml",
    UnitCategory.WEIGHT: "/100g",
    UnitCategory.COUNT: "/each",
}

# Volume/weight prices are quoted per 100 base units (100ml, 100g).
PRICE_PER_UNIT_QUANTITY = 100

# Below this, price-per-unit is rendered with three decimals.
SMALL_PRICE_THRESHOLD = 0.01

ML_PER_UK_PINT = 568
# Pint display window: 1pt .. 6pt
PINT_DISPLAY_MIN_ML = ML_PER_UK_PINT
PINT_DISPLAY_MAX_ML = ML_PER_UK_PINT * 6

# Base units at or above this switch to L / kg for display.
LARGE_UNIT_THRESHOLD = 1000

DEFAULT_TOLERANCE = 0.2
EXACT_TOLERANCE = 0.01

# Float slack for "is an exact multiple of" checks.
MULTIPLE_EPSILON = 1e-9

# Standard-size scoring: (divisor, points), highest tier wins.
ROUND_VALUE_TIERS: Tuple[Tuple[int, int], ...] = (
    (1000, 3),
    (500, 2),
    (100, 1),
)
COMMON_SIZE_BONUS = 2

COMMON_VOLUMES_ML: FrozenSet[float] = frozenset({568, 1136, 1000, 2000, 2272})  # 1pt, 2pt, 1L, 2L, 4pt
COMMON_WEIGHTS_G: FrozenSet[float] = frozenset({250, 500, 1000, 400, 800})
COMMON_COUNTS: FrozenSet[float] = frozenset({6, 12, 4, 8, 10})

DEFAULT_CURRENCY_SYMBOL = "£"
