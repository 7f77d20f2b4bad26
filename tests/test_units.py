"""Tests for glucose unit conversion."""

import pytest

from alert_profiles.core import alert_kinds
from alert_profiles.core.alert_kinds import AlertKind
from alert_profiles.core.units import (
    GlucoseUnit,
    format_display,
    mgdl_to_mmol,
    mmol_to_mgdl,
    parse_display,
    to_display,
    to_native,
)

LOW = alert_kinds.lookup(AlertKind.LOW)
MISSED_READING = alert_kinds.lookup(AlertKind.MISSED_READING)


class TestConversion:
    """Tests for the raw mg/dL <-> mmol/L conversion."""

    def test_mgdl_to_mmol_rounds_to_one_decimal(self):
        assert mgdl_to_mmol(70) == 3.9
        assert mgdl_to_mmol(180) == 10.0

    def test_mmol_to_mgdl_rounds_to_int(self):
        assert mmol_to_mgdl(3.9) == 70
        assert mmol_to_mgdl(10.0) == 180
        assert isinstance(mmol_to_mgdl(5.5), int)

    def test_unit_labels(self):
        assert GlucoseUnit.MGDL.label == "mg/dL"
        assert GlucoseUnit.MMOL.label == "mmol/L"


class TestDisplay:
    """Tests for to_display / to_native / format_display."""

    def test_mgdl_is_unchanged(self):
        assert to_display(70, LOW, GlucoseUnit.MGDL) == 70
        assert format_display(70, LOW, GlucoseUnit.MGDL) == "70"

    def test_mmol_for_glucose_kind(self):
        assert to_display(70, LOW, GlucoseUnit.MMOL) == 3.9
        assert format_display(70, LOW, GlucoseUnit.MMOL) == "3.9"
        assert format_display(180, LOW, GlucoseUnit.MMOL) == "10.0"

    def test_non_glucose_kind_never_converts(self):
        assert to_display(30, MISSED_READING, GlucoseUnit.MMOL) == 30
        assert format_display(30, MISSED_READING, GlucoseUnit.MMOL) == "30"
        assert to_native(30.6, MISSED_READING, GlucoseUnit.MMOL) == 31

    @pytest.mark.parametrize("unit", list(GlucoseUnit))
    def test_round_trip_error_is_bounded(self, unit):
        for native in range(0, 401):
            back = to_native(to_display(native, LOW, unit), LOW, unit)
            assert abs(back - native) <= 1


class TestParseDisplay:
    """Tests for parse_display."""

    def test_parses_mgdl(self):
        assert parse_display("85", LOW, GlucoseUnit.MGDL) == 85

    def test_parses_mmol_to_native(self):
        assert parse_display("10.0", LOW, GlucoseUnit.MMOL) == 180

    def test_accepts_comma_separator(self):
        assert parse_display(" 3,9 ", LOW, GlucoseUnit.MMOL) == 70

    @pytest.mark.parametrize("text", ["", "abc", "nan", "inf", "1.2.3"])
    def test_rejects_non_numeric_text(self, text):
        with pytest.raises(ValueError, match="not a valid number"):
            parse_display(text, LOW, GlucoseUnit.MGDL)
