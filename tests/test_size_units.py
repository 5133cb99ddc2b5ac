import pytest

from pantry_sizes.sizes import units
from pantry_sizes.sizes import (
    UK_LOCALE,
    UNIT_CONVERSIONS,
    CanonicalUnit,
    SizeLocale,
    UnitCategory,
    get_locale,
    lookup_unit,
    parse_size,
    register_locale,
)


VOLUME_TOKENS = [
    "pt", "pint", "pints", "l", "litre", "liter", "litres", "liters",
    "ml", "millilitre", "milliliter", "millilitres", "milliliters",
    "cl", "centilitre", "centiliter",
]
WEIGHT_TOKENS = [
    "kg", "kilogram", "kilograms", "kilo", "kilos", "g", "gram", "grams",
    "oz", "ounce", "ounces", "lb", "lbs", "pound", "pounds",
]
COUNT_TOKENS = ["pk", "pack", "packs", "each", "ea", "pcs", "pieces", "x"]


def test_core_factors():
    assert UNIT_CONVERSIONS["pt"].factor == 568
    assert UNIT_CONVERSIONS["l"].factor == 1000
    assert UNIT_CONVERSIONS["kg"].factor == 1000
    assert UNIT_CONVERSIONS["cl"].factor == 10
    assert UNIT_CONVERSIONS["oz"].factor == 28.35
    assert UNIT_CONVERSIONS["lb"].factor == 453.6
    assert UNIT_CONVERSIONS["pt"].base_unit is CanonicalUnit.ML
    assert UNIT_CONVERSIONS["kg"].base_unit is CanonicalUnit.G
    assert UNIT_CONVERSIONS["pack"].base_unit is CanonicalUnit.PK
    assert UNIT_CONVERSIONS["pcs"].base_unit is CanonicalUnit.EACH


@pytest.mark.parametrize(
    "tokens,category",
    [
        (VOLUME_TOKENS, UnitCategory.VOLUME),
        (WEIGHT_TOKENS, UnitCategory.WEIGHT),
        (COUNT_TOKENS, UnitCategory.COUNT),
    ],
)
def test_token_categories(tokens, category):
    for token in tokens:
        assert UNIT_CONVERSIONS[token].category is category


def test_table_is_read_only():
    with pytest.raises(TypeError):
        UNIT_CONVERSIONS["gallon"] = UNIT_CONVERSIONS["l"]  # type: ignore[index]


def test_lookup_normalizes_token():
    assert lookup_unit("L") is UNIT_CONVERSIONS["l"]
    assert lookup_unit("  ML ") is UNIT_CONVERSIONS["ml"]
    assert lookup_unit("Pints") is UNIT_CONVERSIONS["pints"]


def test_lookup_unknown_token():
    assert lookup_unit("gallon") is None
    assert lookup_unit("") is None
    assert lookup_unit(None) is None  # type: ignore[arg-type]


@pytest.mark.parametrize("n", [1, 2, 3, 12, 2.5])
@pytest.mark.parametrize("token", sorted(UNIT_CONVERSIONS))
def test_every_token_round_trips(token, n):
    parsed = parse_size(f"{n}{token}")
    assert parsed is not None
    assert parsed.normalized_value == pytest.approx(n * UNIT_CONVERSIONS[token].factor)
    assert parsed.category is UNIT_CONVERSIONS[token].category


def test_get_locale_defaults_to_uk():
    assert get_locale() is UK_LOCALE
    assert get_locale("UK") is UK_LOCALE
    assert get_locale("atlantis") is UK_LOCALE


def test_register_locale_rejects_duplicates():
    with pytest.raises(ValueError):
        register_locale(SizeLocale(code="uk"))


def test_registered_locale_changes_display_rules(monkeypatch):
    monkeypatch.setattr(units, "_LOCALES", dict(units._LOCALES))
    metric = SizeLocale(code="metric-only", pint_ml=None, currency_symbol="€")
    register_locale(metric)
    assert get_locale("metric-only") is metric

    parsed = parse_size("2pt", locale=metric)
    assert parsed.normalized_value == 1136
    assert parsed.display == "1.1L"
    assert parse_size("2pt").display == "2pt"


def test_count_display_keeps_base_unit():
    unit, value = UK_LOCALE.display_unit(UnitCategory.COUNT, 12, CanonicalUnit.EACH)
    assert unit is CanonicalUnit.EACH
    assert value == 12
