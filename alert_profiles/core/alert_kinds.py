"""Alert kind catalog.

Static classification of alert conditions. The catalog is built once at
import time and never modified; everything here is pure.
"""

from enum import IntEnum, StrEnum, auto
from typing import Final

from pydantic import BaseModel, ConfigDict

from alert_profiles.core.errors import UnknownKindError, ValueOutOfRangeError
from alert_profiles.core.units import GlucoseUnit


# Accepted threshold range, native units
MIN_VALUE: Final[int] = 0
MAX_VALUE: Final[int] = 32767


class AlertKind(IntEnum):
    """Alert condition categories. Values are the persisted codes."""

    LOW = 0
    HIGH = 1
    VERY_LOW = 2
    VERY_HIGH = 3
    MISSED_READING = 4
    CALIBRATION = 5
    TRANSMITTER_BATTERY_LOW = 6
    PHONE_BATTERY_LOW = 7
    FAST_DROP = 8
    FAST_RISE = 9
    SENSOR_EXPIRED = 10


class ValueUnit(StrEnum):
    """What the threshold value of an alert kind measures."""

    none = auto()
    glucose_concentration = auto()


class AlertKindInfo(BaseModel):
    """Immutable catalog entry for one alert kind."""

    model_config = ConfigDict(frozen=True)

    code: int
    title: str
    needs_value: bool
    value_unit: ValueUnit
    needs_mmol_conversion: bool
    # Label for kinds whose value is not a glucose concentration
    unit_label: str = ""
    default_value: int = 0


def _glucose(kind: AlertKind, title: str, default_value: int) -> AlertKindInfo:
    return AlertKindInfo(
        code=int(kind),
        title=title,
        needs_value=True,
        value_unit=ValueUnit.glucose_concentration,
        needs_mmol_conversion=True,
        default_value=default_value,
    )


def _plain(
    kind: AlertKind,
    title: str,
    default_value: int,
    unit_label: str = "",
    needs_value: bool = True,
) -> AlertKindInfo:
    return AlertKindInfo(
        code=int(kind),
        title=title,
        needs_value=needs_value,
        value_unit=ValueUnit.none,
        needs_mmol_conversion=False,
        unit_label=unit_label,
        default_value=default_value,
    )


_CATALOG: Final[dict[int, AlertKindInfo]] = {
    info.code: info
    for info in (
        _glucose(AlertKind.LOW, "Low Alert", 70),
        _glucose(AlertKind.HIGH, "High Alert", 170),
        _glucose(AlertKind.VERY_LOW, "Very Low Alert", 50),
        _glucose(AlertKind.VERY_HIGH, "Very High Alert", 250),
        _plain(AlertKind.MISSED_READING, "Missed Reading Alert", 30, "min"),
        _plain(AlertKind.CALIBRATION, "Calibration Request", 24, "hrs"),
        _plain(AlertKind.TRANSMITTER_BATTERY_LOW, "Transmitter Battery Low", 300),
        _plain(AlertKind.PHONE_BATTERY_LOW, "Phone Battery Low", 20, "%"),
        _glucose(AlertKind.FAST_DROP, "Fast Drop Alert", 10),
        _glucose(AlertKind.FAST_RISE, "Fast Rise Alert", 10),
        _plain(AlertKind.SENSOR_EXPIRED, "Sensor Expired", 0, needs_value=False),
    )
}


def lookup(code: int) -> AlertKindInfo:
    """Get the catalog entry for a kind code.

    Raises:
        UnknownKindError: If the code is not in the catalog.
    """
    try:
        return _CATALOG[int(code)]
    except (KeyError, TypeError, ValueError):
        raise UnknownKindError(code) from None


def needs_value(code: int) -> bool:
    """Whether entries of this kind carry a threshold value."""
    return lookup(code).needs_value


def value_unit_label(code: int, glucose_unit: GlucoseUnit) -> str:
    """Unit text shown next to the value of an entry of this kind."""
    info = lookup(code)
    if info.value_unit is ValueUnit.glucose_concentration:
        return glucose_unit.label
    return info.unit_label


def all_kinds() -> list[AlertKindInfo]:
    """All catalog entries, ordered by code."""
    return [_CATALOG[code] for code in sorted(_CATALOG)]


def check_value(value: int) -> int:
    """Return ``value`` if it fits the stored threshold range.

    Raises:
        ValueOutOfRangeError: If the value is negative or too large.
    """
    if not MIN_VALUE <= value <= MAX_VALUE:
        raise ValueOutOfRangeError(value, MIN_VALUE, MAX_VALUE)
    return value
