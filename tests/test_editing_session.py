"""Tests for alert type and alert entry editing sessions."""

import pytest
from pydantic import ValidationError

from alert_profiles.core.alert_kinds import AlertKind
from alert_profiles.core.errors import (
    DuplicateNameError,
    IsDefaultEntryError,
    KindHasNoValueError,
    OutOfBoundsError,
    SessionClosedError,
    ValueOutOfRangeError,
)
from alert_profiles.core.setting_rows import AlertEntrySetting, AlertTypeSetting
from alert_profiles.core.units import GlucoseUnit
from alert_profiles.logging_config import session_id_ctx
from alert_profiles.schemas.alert_type import AlertTypeCreate
from alert_profiles.services.alert_entry import create_entry, get_entry, list_for_kind
from alert_profiles.services.alert_type import (
    create_alert_type,
    get_alert_type,
    list_alert_types,
)
from alert_profiles.services.editing_session import (
    NEW_ENTRY_BOUNDS,
    AlertEntryEditingSession,
    AlertTypeEditingSession,
    EditingSession,
    SessionState,
)


class TestAlertTypeSession:
    """Tests for AlertTypeEditingSession."""

    def test_new_session_uses_defaults(self):
        session = AlertTypeEditingSession.for_new()

        assert session.is_new
        assert session.state is SessionState.open
        assert session.name == "Default"
        assert session.enabled is True
        assert session.default_snooze_period_minutes == 60

    def test_setter_marks_mutated(self):
        session = AlertTypeEditingSession.for_new()
        session.set_vibrate(False)

        assert session.state is SessionState.mutated
        assert session.vibrate is False

    def test_snooze_period_from_text(self):
        session = AlertTypeEditingSession.for_new()

        session.set_default_snooze_period("15.7")
        assert session.default_snooze_period_minutes == 15

        session.set_default_snooze_period(30)
        assert session.default_snooze_period_minutes == 30

    @pytest.mark.parametrize("text", ["abc", "", "-5", -1])
    def test_invalid_snooze_period_keeps_previous(self, text):
        session = AlertTypeEditingSession.for_new()

        with pytest.raises(ValueError):
            session.set_default_snooze_period(text)

        assert session.default_snooze_period_minutes == 60
        assert session.state is SessionState.open

    def test_rows_follow_pending_enabled(self):
        session = AlertTypeEditingSession.for_new()
        assert len(session.rows()) == len(AlertTypeSetting)

        session.set_enabled(False)
        assert [r.setting for r in session.rows()] == [AlertTypeSetting.ENABLED]

    def test_empty_name_fails_validation(self):
        session = AlertTypeEditingSession.for_new()
        session.set_name("")

        with pytest.raises(ValidationError):
            session.fields()

    @pytest.mark.asyncio
    async def test_commit_new(self, db_session):
        session = AlertTypeEditingSession.for_new()
        session.set_name("Night")
        session.set_sound_name("")

        alert_type = await session.commit(db_session)

        assert session.state is SessionState.committed
        assert session.alert_type_id == alert_type.id
        assert alert_type.name == "Night"
        assert alert_type.sound_name == ""

    @pytest.mark.asyncio
    async def test_existing_record_untouched_until_commit(self, db_session):
        alert_type = await create_alert_type(AlertTypeCreate(name="Night"), db_session)
        session = AlertTypeEditingSession.for_existing(alert_type)

        session.set_vibrate(False)
        session.set_override_mute(True)
        assert (await get_alert_type(alert_type.id, db_session)).vibrate is True

        updated = await session.commit(db_session)
        assert updated.vibrate is False
        assert updated.override_mute is True
        assert updated.name == "Night"

    @pytest.mark.asyncio
    async def test_failed_commit_keeps_session_open(self, db_session):
        await create_alert_type(AlertTypeCreate(name="Low"), db_session)
        session = AlertTypeEditingSession.for_new()
        session.set_name("Low")

        with pytest.raises(DuplicateNameError):
            await session.commit(db_session)
        assert session.state is SessionState.mutated
        assert session_id_ctx.get() is None

        session.set_name("Low 2")
        await session.commit(db_session)
        assert session.state is SessionState.committed

    @pytest.mark.asyncio
    async def test_discard_writes_nothing(self, db_session):
        session = AlertTypeEditingSession.for_new()
        session.set_name("Never")
        session.discard()

        assert session.state is SessionState.discarded
        assert await list_alert_types(db_session) == []

    @pytest.mark.asyncio
    async def test_closed_session_rejects_calls(self, db_session):
        session = AlertTypeEditingSession.for_new()
        await session.commit(db_session)

        with pytest.raises(SessionClosedError):
            session.set_name("Again")
        with pytest.raises(SessionClosedError):
            session.discard()
        with pytest.raises(SessionClosedError):
            await session.commit(db_session)


class TestAlertEntrySession:
    """Tests for AlertEntryEditingSession."""

    @pytest.mark.asyncio
    async def test_default_entry_start_locked(self, db_session):
        default = (await list_for_kind(AlertKind.LOW, db_session))[0]
        session = await AlertEntryEditingSession.open(default.id, db_session)

        assert session.bounds.immutable is True
        with pytest.raises(IsDefaultEntryError):
            session.set_start(5)
        assert session.start == 0

    @pytest.mark.asyncio
    async def test_start_checked_against_bounds(self, db_session, default_alert_type):
        await list_for_kind(AlertKind.HIGH, db_session)
        entry = await create_entry(AlertKind.HIGH, 480, 180, default_alert_type.id, db_session)
        await create_entry(AlertKind.HIGH, 1320, 200, default_alert_type.id, db_session)

        session = await AlertEntryEditingSession.open(entry.id, db_session)

        with pytest.raises(OutOfBoundsError):
            session.set_start(1320)
        assert session.start == 480

        session.set_start(600)
        await session.commit(db_session)
        assert (await get_entry(entry.id, db_session)).start_minutes == 600

    @pytest.mark.asyncio
    async def test_value_from_display_text(self, db_session):
        default = (await list_for_kind(AlertKind.HIGH, db_session))[0]
        session = await AlertEntryEditingSession.open(default.id, db_session)

        session.set_value_from_display("10.0", GlucoseUnit.MMOL)
        assert session.value == 180

        with pytest.raises(ValueError):
            session.set_value_from_display("abc", GlucoseUnit.MMOL)
        assert session.value == 180

        updated = await session.commit(db_session)
        assert updated.value == 180

    @pytest.mark.asyncio
    async def test_kind_without_value(self, db_session):
        default = (await list_for_kind(AlertKind.SENSOR_EXPIRED, db_session))[0]
        session = await AlertEntryEditingSession.open(default.id, db_session)

        with pytest.raises(KindHasNoValueError):
            session.set_value(5)
        assert session.value_visible(False) is False
        assert session.value_visible(True) is True

    @pytest.mark.asyncio
    async def test_new_entry(self, db_session, default_alert_type):
        await list_for_kind(AlertKind.HIGH, db_session)
        session = AlertEntryEditingSession.for_new(
            AlertKind.HIGH, 600, default_alert_type.id
        )

        assert session.is_new
        assert session.bounds == NEW_ENTRY_BOUNDS
        assert session.value == 170

        entry = await session.commit(db_session)

        assert session.entry_id == entry.id
        assert entry.start_minutes == 600
        assert entry.value == 170

    @pytest.mark.asyncio
    async def test_new_entry_on_used_start_stays_open(self, db_session, default_alert_type):
        await list_for_kind(AlertKind.HIGH, db_session)
        await create_entry(AlertKind.HIGH, 600, 180, default_alert_type.id, db_session)
        session = AlertEntryEditingSession.for_new(
            AlertKind.HIGH, 600, default_alert_type.id
        )

        with pytest.raises(ValueError):
            await session.commit(db_session)
        assert session.state is SessionState.open

        session.set_start(601)
        await session.commit(db_session)
        assert session.state is SessionState.committed

    @pytest.mark.asyncio
    async def test_rows(self, db_session):
        off = await create_alert_type(
            AlertTypeCreate(name="Off", enabled=False), db_session
        )
        default = (await list_for_kind(AlertKind.SENSOR_EXPIRED, db_session))[0]
        session = await AlertEntryEditingSession.open(default.id, db_session)

        rows = session.rows(off, GlucoseUnit.MGDL)

        assert [r.setting for r in rows] == [
            AlertEntrySetting.START,
            AlertEntrySetting.ALERT_TYPE,
        ]
        assert rows[1].detail == "Off"

    @pytest.mark.asyncio
    async def test_discard(self, db_session):
        default = (await list_for_kind(AlertKind.LOW, db_session))[0]
        session = await AlertEntryEditingSession.open(default.id, db_session)
        session.set_value(60)
        session.discard()

        with pytest.raises(SessionClosedError):
            session.set_value(65)
        assert (await get_entry(default.id, db_session)).value == 70

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["1e30", "-40", "40000"])
    async def test_out_of_range_display_value_kept_out(self, db_session, text):
        default = (await list_for_kind(AlertKind.LOW, db_session))[0]
        session = await AlertEntryEditingSession.open(default.id, db_session)

        with pytest.raises(ValueOutOfRangeError):
            session.set_value_from_display(text, GlucoseUnit.MGDL)
        assert session.value == 70
        assert session.state is SessionState.open

        session.set_value_from_display("65", GlucoseUnit.MGDL)
        await session.commit(db_session)
        assert (await get_entry(default.id, db_session)).value == 65

    @pytest.mark.asyncio
    async def test_out_of_range_new_entry_commit_rejected(self, db_session, default_alert_type):
        await list_for_kind(AlertKind.LOW, db_session)
        session = AlertEntryEditingSession.for_new(
            AlertKind.LOW, 600, default_alert_type.id, value=-1
        )

        with pytest.raises(ValueOutOfRangeError):
            await session.commit(db_session)
        assert session.state is SessionState.open

        session.set_value(60)
        entry = await session.commit(db_session)
        assert entry.value == 60


def test_base_session_is_abstract():
    with pytest.raises(TypeError):
        EditingSession()
