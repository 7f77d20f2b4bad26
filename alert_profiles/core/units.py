"""Glucose unit conversion.

Threshold values are always stored in the native unit (mg/dL, integer).
Conversion to mmol/L happens only at the edges, for display and for
parsing user input, and only for alert kinds whose value is a glucose
concentration.

The transform is lossy: mg/dL -> mmol/L rounds to one decimal and
mmol/L -> mg/dL rounds to the nearest integer, so a single round trip
can move a value by up to one mg/dL. Repeated round trips are not
guaranteed to be stable.
"""

import math
from enum import StrEnum
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from alert_profiles.core.alert_kinds import AlertKindInfo

MGDL_PER_MMOL: Final[float] = 18.0182


class GlucoseUnit(StrEnum):
    """Glucose display unit. ``mgdl`` is the native storage unit."""

    MGDL = "mgdl"
    MMOL = "mmol"

    @property
    def label(self) -> str:
        return "mg/dL" if self is GlucoseUnit.MGDL else "mmol/L"


def mgdl_to_mmol(mgdl: float) -> float:
    """Convert mg/dL to mmol/L, rounded to one decimal."""
    return round(mgdl / MGDL_PER_MMOL, 1)


def mmol_to_mgdl(mmol: float) -> int:
    """Convert mmol/L to mg/dL, rounded to the nearest integer."""
    return round(mmol * MGDL_PER_MMOL)


def _converts(kind: "AlertKindInfo", unit: GlucoseUnit) -> bool:
    return kind.needs_mmol_conversion and unit is GlucoseUnit.MMOL


def to_display(native_value: int, kind: "AlertKindInfo", unit: GlucoseUnit) -> float | int:
    """Convert a stored value to the unit it is displayed in.

    Args:
        native_value: Stored threshold value.
        kind: Catalog entry of the alert kind the value belongs to.
        unit: Active display unit.

    Returns:
        The value in mmol/L when the kind holds a glucose concentration
        and the display unit is mmol/L, otherwise the native value.
    """
    if _converts(kind, unit):
        return mgdl_to_mmol(native_value)
    return native_value


def to_native(display_value: float, kind: "AlertKindInfo", unit: GlucoseUnit) -> int:
    """Inverse of :func:`to_display`. Always returns an integer."""
    if _converts(kind, unit):
        return mmol_to_mgdl(display_value)
    return round(display_value)


def format_display(native_value: int, kind: "AlertKindInfo", unit: GlucoseUnit) -> str:
    """Render a stored value as text in the active display unit."""
    if _converts(kind, unit):
        return f"{mgdl_to_mmol(native_value):.1f}"
    return str(native_value)


def parse_display(text: str, kind: "AlertKindInfo", unit: GlucoseUnit) -> int:
    """Parse user input in the display unit into a native value.

    Accepts a comma as decimal separator.

    Raises:
        ValueError: If the text is not a number.
    """
    cleaned = text.strip().replace(",", ".")
    try:
        number = float(cleaned)
    except ValueError:
        number = math.nan
    if not math.isfinite(number):
        msg = f"'{text}' is not a valid number"
        raise ValueError(msg)
    return to_native(number, kind, unit)
