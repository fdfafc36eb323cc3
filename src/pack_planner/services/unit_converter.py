"""
Weight conversion and display formatting for Pack Planner.

This module provides:
- Conversion between canonical grams and the display unit (grams or ounces)
- Two-tier major/minor display ("2 Kg 500.0 Grams", "3 Lb 4.2 Oz")
- The inverse of the two-tier split for round-tripping

Conversion Strategy:
- Weights are always stored in grams
- Display values are computed on demand and never stored, so toggling
  the unit system cannot accumulate rounding error
"""

import math
from dataclasses import dataclass

from pack_planner.utils.constants import (
    GRAMS_PER_KILOGRAM,
    GRAMS_PER_OUNCE,
    IMPERIAL_MAJOR_UNIT,
    IMPERIAL_MINOR_UNIT,
    IMPERIAL_UNIT_LABEL,
    METRIC_MAJOR_UNIT,
    METRIC_MINOR_UNIT,
    METRIC_UNIT_LABEL,
    OUNCES_PER_POUND,
)

# Precision of the minor part in formatted strings
MINOR_DECIMAL_PLACES = 1


@dataclass(frozen=True)
class WeightUnit:
    """A weight split into major and minor display units."""

    major: int
    minor: float
    major_unit: str
    minor_unit: str

    def __str__(self) -> str:
        return f"{self.major} {self.major_unit} {self.minor:.{MINOR_DECIMAL_PLACES}f} {self.minor_unit}"


# ============================================================================
# Single-value conversion
# ============================================================================


def to_display_value(weight_grams: float, imperial: bool) -> float:
    """
    Convert a canonical gram weight to the single-field display value.

    Args:
        weight_grams: Weight in grams
        imperial: True for ounces, False for grams

    Returns:
        Weight in ounces if imperial, otherwise the gram value unchanged
    """
    if imperial:
        return weight_grams / GRAMS_PER_OUNCE
    return weight_grams


def from_display_value(value: float, imperial: bool) -> float:
    """
    Convert a user-entered display value back to grams.

    Args:
        value: Weight in ounces (imperial) or grams (metric)
        imperial: Unit system the value was entered in

    Returns:
        Weight in grams
    """
    if imperial:
        return value * GRAMS_PER_OUNCE
    return value


def unit_label(imperial: bool) -> str:
    """Short label for the unit system ("lbs/oz" or "kg/g")."""
    return IMPERIAL_UNIT_LABEL if imperial else METRIC_UNIT_LABEL


# ============================================================================
# Two-tier display
# ============================================================================


def split_major_minor(weight_grams: float, imperial: bool) -> WeightUnit:
    """
    Split a gram weight into major and minor units.

    The primary value (ounces or grams) is rounded to the displayed
    precision first, so 15.99997 oz becomes 1 Lb 0.0 Oz rather than
    0 Lb 16.0 Oz.

    Args:
        weight_grams: Non-negative weight in grams
        imperial: True for Lb/Oz, False for Kg/Grams

    Returns:
        WeightUnit with truncated major part and remainder minor part
    """
    if imperial:
        primary = weight_grams / GRAMS_PER_OUNCE
        divisor = OUNCES_PER_POUND
        major_unit, minor_unit = IMPERIAL_MAJOR_UNIT, IMPERIAL_MINOR_UNIT
    else:
        primary = weight_grams
        divisor = GRAMS_PER_KILOGRAM
        major_unit, minor_unit = METRIC_MAJOR_UNIT, METRIC_MINOR_UNIT

    primary = round(primary, MINOR_DECIMAL_PLACES)
    major = int(primary / divisor)
    minor = math.fmod(primary, divisor)

    return WeightUnit(major=major, minor=minor, major_unit=major_unit, minor_unit=minor_unit)


def format_major_minor(weight_grams: float, imperial: bool) -> str:
    """
    Format a gram weight as a two-tier string.

    Examples:
        >>> format_major_minor(2500, False)
        '2 Kg 500.0 Grams'
        >>> format_major_minor(16 * 28.34952, True)
        '1 Lb 0.0 Oz'
        >>> format_major_minor(0, False)
        '0 Kg 0.0 Grams'
    """
    return str(split_major_minor(weight_grams, imperial))


def major_minor_to_grams(major: int, minor: float, imperial: bool) -> float:
    """
    Convert a major/minor pair back to grams.

    Args:
        major: Pounds (imperial) or kilograms (metric)
        minor: Ounces (imperial) or grams (metric)
        imperial: Unit system of the pair

    Returns:
        Weight in grams
    """
    if imperial:
        return (major * OUNCES_PER_POUND + minor) * GRAMS_PER_OUNCE
    return major * GRAMS_PER_KILOGRAM + minor
