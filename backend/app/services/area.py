"""
Area unit conversion for land and plot listings.

All conversions go through square feet as the base unit. Regional units
(bigha, guntha, cents, ...) use the common standard definitions.
"""

import logging
from typing import Callable

from app.services.formatting import fixed

logger = logging.getLogger(__name__)

BASE_UNIT = "sq.ft"

# Square feet per unit
AREA_CONVERSION_FACTORS: dict[str, float] = {
    "sq.ft": 1,
    "sq.m": 10.764,
    "sq.yards": 9,
    "acres": 43560,
    "hectare": 107639,
    "bigha": 27225,  # varies by region
    "marla": 272.25,
    "kanal": 5445,
    "cents": 435.6,
    "grounds": 2400,
    "guntha": 1089,
}

PLOT_AREA_UNIT_ALIASES: dict[str, str] = {
    "sq-ft": "sq.ft",
    "sq_ft": "sq.ft",
    "sq.ft": "sq.ft",
    "sqft": "sq.ft",
    "square feet": "sq.ft",
    "square foot": "sq.ft",
    "sq ft": "sq.ft",
    "sq. ft": "sq.ft",
    "sq. ft.": "sq.ft",
    "sq.ft.": "sq.ft",
    "ft²": "sq.ft",
    "sq-yard": "sq.yards",
    "sq_yard": "sq.yards",
    "sq.yard": "sq.yards",
    "sq.yards": "sq.yards",
    "sq yards": "sq.yards",
    "sq. yards": "sq.yards",
    "sq. yard": "sq.yards",
    "sqyd": "sq.yards",
    "sq yd": "sq.yards",
    "yd²": "sq.yards",
    "sq-m": "sq.m",
    "sq_m": "sq.m",
    "sq.m": "sq.m",
    "sqm": "sq.m",
    "square meter": "sq.m",
    "square meters": "sq.m",
    "square metre": "sq.m",
    "square metres": "sq.m",
    "sq meter": "sq.m",
    "sq. meter": "sq.m",
    "m²": "sq.m",
    "acre": "acres",
    "acres": "acres",
    "ac": "acres",
    "hectare": "hectare",
    "hectares": "hectare",
    "ha": "hectare",
    "bigha": "bigha",
    "biswa": "bigha",
    "gunta": "guntha",
    "guntha": "guntha",
    "cents": "cents",
    "marla": "marla",
    "kanal": "kanal",
    "grounds": "grounds",
}

# Large units read better with decimals
_TWO_DECIMAL_UNITS = {"acres", "hectare", "bigha"}


def _known_unit(unit: str) -> str:
    if unit in AREA_CONVERSION_FACTORS:
        return unit
    logger.warning(f"Unknown area unit '{unit}', defaulting to {BASE_UNIT}")
    return BASE_UNIT


def convert_area(value: float | None, from_unit: str, to_unit: str) -> float:
    """Convert ``value`` between area units. Non-positive input converts to 0."""
    if not value or value <= 0:
        return 0
    if from_unit == to_unit:
        return value

    from_unit = _known_unit(from_unit)
    to_unit = _known_unit(to_unit)

    value_in_sqft = value * AREA_CONVERSION_FACTORS[from_unit]
    return value_in_sqft / AREA_CONVERSION_FACTORS[to_unit]


def standardize_area_unit(raw_unit: str | None) -> str:
    """Map a free-form stored unit ("Sq Ft", "acre", "m²") to a known unit."""
    if not raw_unit:
        return BASE_UNIT

    normalized = raw_unit.lower().strip()
    unit = PLOT_AREA_UNIT_ALIASES.get(normalized)
    if unit is None:
        logger.warning(f"Unknown area unit '{raw_unit}', defaulting to {BASE_UNIT}")
        return BASE_UNIT
    return unit


def format_area_with_unit(value: float, unit: str) -> str:
    places = 2 if unit in _TWO_DECIMAL_UNITS or value < 1 else 0
    return f"{fixed(value, places, trim=True)} {unit}"


def area_range_filter(
    min_value: float, max_value: float, filter_unit: str
) -> Callable[[float, str], bool]:
    """Build a predicate that checks an area, in any unit, against a range."""

    def matches(area_value: float, area_unit: str) -> bool:
        converted = convert_area(area_value, area_unit, filter_unit)
        return min_value <= converted <= max_value

    return matches
