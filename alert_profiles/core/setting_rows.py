"""Rows of the alert type and alert entry edit forms.

Each form is a closed set of settings. The functions here decide which
rows are visible and what each row shows; they are pure and take plain
values, so a front end only has to render the result.
"""

from dataclasses import dataclass
from enum import IntEnum

from alert_profiles.core import alert_kinds
from alert_profiles.core.time_of_day import minutes_to_time_string
from alert_profiles.core.units import GlucoseUnit, format_display

DEFAULT_SOUND_MARKER = "default"
NO_SOUND_MARKER = "none"


class AlertTypeSetting(IntEnum):
    """Rows of the alert type form, in display order."""

    ENABLED = 0
    NAME = 1
    VIBRATE = 2
    SOUND_NAME = 3
    OVERRIDE_MUTE = 4
    SNOOZE_VIA_NOTIFICATION = 5
    DEFAULT_SNOOZE_PERIOD = 6


class AlertEntrySetting(IntEnum):
    """Rows of the alert entry form, in display order.

    VALUE must stay last: it is the row that gets hidden.
    """

    START = 0
    ALERT_TYPE = 1
    VALUE = 2


@dataclass(frozen=True)
class SettingRow:
    """One visible row: which setting, the text it shows, whether selecting it edits it."""

    setting: IntEnum
    detail: str
    editable: bool


# Rows toggled with a switch are edited in place, not by selecting the row
_SWITCH_SETTINGS = frozenset(
    {
        AlertTypeSetting.ENABLED,
        AlertTypeSetting.VIBRATE,
        AlertTypeSetting.OVERRIDE_MUTE,
        AlertTypeSetting.SNOOZE_VIA_NOTIFICATION,
    }
)


def visible_alert_type_settings(enabled: bool) -> list[AlertTypeSetting]:
    """A disabled alert type only shows its enabled switch."""
    if not enabled:
        return [AlertTypeSetting.ENABLED]
    return list(AlertTypeSetting)


def visible_alert_entry_settings(
    alert_kind: int,
    alert_type_enabled: bool,
) -> list[AlertEntrySetting]:
    """Entry rows; VALUE only when the kind takes a value or the alert type is enabled."""
    if alert_kinds.needs_value(alert_kind) or alert_type_enabled:
        return list(AlertEntrySetting)
    return [s for s in AlertEntrySetting if s is not AlertEntrySetting.VALUE]


def sound_detail(sound_name: str | None) -> str:
    if sound_name is None:
        return DEFAULT_SOUND_MARKER
    if sound_name == "":
        return NO_SOUND_MARKER
    return sound_name


_ALERT_TYPE_DETAIL = {
    AlertTypeSetting.ENABLED: lambda f: str(f.enabled).lower(),
    AlertTypeSetting.NAME: lambda f: f.name,
    AlertTypeSetting.VIBRATE: lambda f: str(f.vibrate).lower(),
    AlertTypeSetting.SOUND_NAME: lambda f: sound_detail(f.sound_name),
    AlertTypeSetting.OVERRIDE_MUTE: lambda f: str(f.override_mute).lower(),
    AlertTypeSetting.SNOOZE_VIA_NOTIFICATION: lambda f: str(f.snooze_via_notification).lower(),
    AlertTypeSetting.DEFAULT_SNOOZE_PERIOD: lambda f: str(f.default_snooze_period_minutes),
}


def describe_alert_type_setting(setting: AlertTypeSetting, fields) -> SettingRow:
    """Row for one alert type setting.

    Args:
        setting: Which row.
        fields: Object with the alert type's field attributes (an ORM row,
            a schema or an editing session).
    """
    detail = _ALERT_TYPE_DETAIL[setting](fields)
    return SettingRow(setting, detail, setting not in _SWITCH_SETTINGS)


def describe_alert_entry_setting(
    setting: AlertEntrySetting,
    *,
    alert_kind: int,
    start_minutes: int,
    value: int,
    alert_type_name: str,
    unit: GlucoseUnit,
) -> SettingRow:
    """Row for one alert entry setting.

    The default entry's start is read-only, and so is the value of a kind
    that takes none.
    """
    if setting is AlertEntrySetting.START:
        return SettingRow(
            setting, minutes_to_time_string(start_minutes), start_minutes != 0
        )
    if setting is AlertEntrySetting.ALERT_TYPE:
        return SettingRow(setting, alert_type_name, True)
    info = alert_kinds.lookup(alert_kind)
    # Also visible for kinds without a value when the alert type is enabled
    return SettingRow(setting, format_display(value, info, unit), info.needs_value)


def alert_type_rows(fields) -> list[SettingRow]:
    return [
        describe_alert_type_setting(setting, fields)
        for setting in visible_alert_type_settings(fields.enabled)
    ]


def alert_entry_rows(
    *,
    alert_kind: int,
    start_minutes: int,
    value: int,
    alert_type_name: str,
    alert_type_enabled: bool,
    unit: GlucoseUnit,
) -> list[SettingRow]:
    return [
        describe_alert_entry_setting(
            setting,
            alert_kind=alert_kind,
            start_minutes=start_minutes,
            value=value,
            alert_type_name=alert_type_name,
            unit=unit,
        )
        for setting in visible_alert_entry_settings(alert_kind, alert_type_enabled)
    ]
