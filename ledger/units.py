"""Unit normalization and conversions for harvest and delivery quantities."""

from decimal import Decimal

COUNT = "count"
GRAM = "g"
KILOGRAM = "kg"
POUND = "lb"
OUNCE = "oz"

_UNIT_ALIASES = {
    "count": COUNT,
    "g": GRAM,
    "gram": GRAM,
    "grams": GRAM,
    "kg": KILOGRAM,
    "kilogram": KILOGRAM,
    "kilograms": KILOGRAM,
    "lb": POUND,
    "lbs": POUND,
    "pound": POUND,
    "pounds": POUND,
    "oz": OUNCE,
    "ounce": OUNCE,
    "ounces": OUNCE,
}

GRAMS_PER_UNIT = {
    GRAM: 1,
    KILOGRAM: 1000,
    POUND: 453.59237,
    OUNCE: 28.349523125,
}


def normalize_unit(unit):
    """Return the canonical unit for a free-form unit string, or None."""
    if not unit or not isinstance(unit, str):
        return None
    return _UNIT_ALIASES.get(unit.strip().lower())


def is_weight_unit(unit):
    canonical = normalize_unit(unit)
    return canonical is not None and canonical != COUNT


def is_count_unit(unit):
    """True for 'count' and for anything that is not a recognised unit."""
    canonical = normalize_unit(unit)
    return canonical is None or canonical == COUNT


def to_grams(qty, unit):
    """Convert a quantity to grams.

    Count and unrecognised units, and non-numeric quantities, are returned
    unchanged.
    """
    factor = GRAMS_PER_UNIT.get(normalize_unit(unit))
    if factor is None or factor == 1:
        return qty
    if isinstance(qty, bool) or not isinstance(qty, (int, float, Decimal)):
        return qty
    if isinstance(qty, Decimal):
        qty = float(qty)
    return qty * factor
