"""Editing sessions for alert types and alert entries.

An edit form works on a private copy of the record's fields. Nothing is
written until ``commit``; ``discard`` drops the copy. A session is
resolved exactly once:

    open -> mutated -> committed | discarded

A failed commit (duplicate name, start out of bounds, ...) leaves the
session where it was so the caller can correct the input and retry.
"""

import uuid
from abc import ABC, abstractmethod
from enum import StrEnum, auto

from sqlalchemy.ext.asyncio import AsyncSession

from alert_profiles.config import settings
from alert_profiles.core import alert_kinds
from alert_profiles.core.errors import (
    IsDefaultEntryError,
    KindHasNoValueError,
    OutOfBoundsError,
    SessionClosedError,
)
from alert_profiles.core.setting_rows import SettingRow, alert_entry_rows, alert_type_rows
from alert_profiles.core.time_of_day import LAST_MINUTE_OF_DAY
from alert_profiles.core.units import GlucoseUnit, parse_display
from alert_profiles.logging_config import get_logger, session_id_ctx
from alert_profiles.models.alert_entry import AlertEntry
from alert_profiles.models.alert_type import AlertType
from alert_profiles.schemas.alert_type import AlertTypeFields, AlertTypeUpdate
from alert_profiles.services import alert_entry as schedule
from alert_profiles.services import alert_type as registry
from alert_profiles.services.alert_entry import EditableBounds

logger = get_logger(__name__)

# Window for an entry that does not exist yet: anywhere but the default slot
NEW_ENTRY_BOUNDS = EditableBounds(1, LAST_MINUTE_OF_DAY)


class SessionState(StrEnum):
    """Lifecycle of an editing session."""

    open = auto()
    mutated = auto()
    committed = auto()
    discarded = auto()


class EditingSession(ABC):
    """State handling shared by both session types."""

    def __init__(self) -> None:
        self.session_id = uuid.uuid4().hex[:12]
        self.state = SessionState.open

    @property
    def is_closed(self) -> bool:
        return self.state in (SessionState.committed, SessionState.discarded)

    def _ensure_open(self) -> None:
        if self.is_closed:
            msg = f"Editing session {self.session_id} is already {self.state}"
            raise SessionClosedError(msg)

    def _mutated(self) -> None:
        self.state = SessionState.mutated

    def discard(self) -> None:
        """Drop all pending changes."""
        self._ensure_open()
        self.state = SessionState.discarded
        logger.debug("Editing session discarded", session_id=self.session_id)

    @abstractmethod
    async def _write(self, db: AsyncSession):
        """Create or update the record through the owning service."""

    async def commit(self, db: AsyncSession):
        """Validate and write the pending changes.

        Returns:
            The created or updated ORM record.

        Raises:
            SessionClosedError: If the session was already resolved.
            AlertConfigError: Whatever the owning service raises. The
                session stays open for another attempt.
        """
        self._ensure_open()
        token = session_id_ctx.set(self.session_id)
        try:
            record = await self._write(db)
        except ValueError as exc:
            logger.warning(
                "Editing session commit rejected",
                error=type(exc).__name__,
                detail=str(exc),
            )
            raise
        finally:
            session_id_ctx.reset(token)
        self.state = SessionState.committed
        return record


class AlertTypeEditingSession(EditingSession):
    """Pending edits to a new or existing alert type."""

    def __init__(
        self,
        alert_type_id: uuid.UUID | None,
        fields: AlertTypeFields,
    ) -> None:
        super().__init__()
        self.alert_type_id = alert_type_id
        self.enabled = fields.enabled
        self.name = fields.name
        self.vibrate = fields.vibrate
        self.sound_name = fields.sound_name
        self.override_mute = fields.override_mute
        self.snooze_via_notification = fields.snooze_via_notification
        self.default_snooze_period_minutes = fields.default_snooze_period_minutes

    @classmethod
    def for_new(cls) -> "AlertTypeEditingSession":
        """Session seeded with the default alert type settings."""
        return cls(
            None,
            AlertTypeFields(
                name=settings.default_alert_type_name,
                default_snooze_period_minutes=settings.default_snooze_period_minutes,
            ),
        )

    @classmethod
    def for_existing(cls, alert_type: AlertType) -> "AlertTypeEditingSession":
        """Session seeded with a copy of a stored alert type's values."""
        return cls(
            alert_type.id,
            AlertTypeFields(
                name=alert_type.name,
                enabled=alert_type.enabled,
                vibrate=alert_type.vibrate,
                sound_name=alert_type.sound_name,
                override_mute=alert_type.override_mute,
                snooze_via_notification=alert_type.snooze_via_notification,
                default_snooze_period_minutes=alert_type.default_snooze_period_minutes,
            ),
        )

    @property
    def is_new(self) -> bool:
        return self.alert_type_id is None

    def set_enabled(self, enabled: bool) -> None:
        self._ensure_open()
        self.enabled = enabled
        self._mutated()

    def set_name(self, name: str) -> None:
        self._ensure_open()
        self.name = name
        self._mutated()

    def set_vibrate(self, vibrate: bool) -> None:
        self._ensure_open()
        self.vibrate = vibrate
        self._mutated()

    def set_sound_name(self, sound_name: str | None) -> None:
        """None selects the platform default sound, "" selects no sound."""
        self._ensure_open()
        self.sound_name = sound_name
        self._mutated()

    def set_override_mute(self, override_mute: bool) -> None:
        self._ensure_open()
        self.override_mute = override_mute
        self._mutated()

    def set_snooze_via_notification(self, snooze: bool) -> None:
        self._ensure_open()
        self.snooze_via_notification = snooze
        self._mutated()

    def set_default_snooze_period(self, period: int | str) -> None:
        """Set the snooze period from a number or from typed text.

        Fractional input is truncated to whole minutes.

        Raises:
            ValueError: If the text is not a number or the period is negative.
                The previous value is kept.
        """
        self._ensure_open()
        if isinstance(period, str):
            try:
                period = int(float(period.strip()))
            except (ValueError, OverflowError):
                msg = f"'{period}' is not a valid snooze period"
                raise ValueError(msg) from None
        if period < 0:
            msg = "Snooze period can't be negative"
            raise ValueError(msg)
        self.default_snooze_period_minutes = period
        self._mutated()

    def fields(self) -> AlertTypeFields:
        """The pending values, validated.

        Raises:
            pydantic.ValidationError: If a value is invalid (e.g. empty name).
        """
        return AlertTypeFields(
            name=self.name,
            enabled=self.enabled,
            vibrate=self.vibrate,
            sound_name=self.sound_name,
            override_mute=self.override_mute,
            snooze_via_notification=self.snooze_via_notification,
            default_snooze_period_minutes=self.default_snooze_period_minutes,
        )

    def rows(self) -> list[SettingRow]:
        """Visible form rows for the pending values."""
        return alert_type_rows(self)

    async def _write(self, db: AsyncSession) -> AlertType:
        fields = self.fields()
        if self.alert_type_id is None:
            alert_type = await registry.create_alert_type(fields, db)
            self.alert_type_id = alert_type.id
            return alert_type
        return await registry.update_alert_type(
            self.alert_type_id,
            AlertTypeUpdate(**fields.model_dump()),
            db,
        )


class AlertEntryEditingSession(EditingSession):
    """Pending edits to a new or existing alert entry."""

    def __init__(
        self,
        entry_id: uuid.UUID | None,
        alert_kind: int,
        start: int,
        value: int,
        alert_type_id: uuid.UUID,
        bounds: EditableBounds,
    ) -> None:
        super().__init__()
        self.kind = alert_kinds.lookup(alert_kind)
        self.entry_id = entry_id
        self.alert_kind = self.kind.code
        self.start = start
        self.value = value
        self.alert_type_id = alert_type_id
        self.bounds = bounds

    @classmethod
    def for_new(
        cls,
        alert_kind: int,
        start: int,
        alert_type_id: uuid.UUID,
        value: int | None = None,
        bounds: EditableBounds = NEW_ENTRY_BOUNDS,
    ) -> "AlertEntryEditingSession":
        """Session for an entry to be added; value defaults to the kind's default."""
        if value is None:
            value = alert_kinds.lookup(alert_kind).default_value
        return cls(None, alert_kind, start, value, alert_type_id, bounds)

    @classmethod
    def for_existing(
        cls,
        entry: AlertEntry,
        bounds: EditableBounds,
    ) -> "AlertEntryEditingSession":
        """Session seeded with a copy of a stored entry's values."""
        return cls(
            entry.id,
            entry.alert_kind,
            entry.start_minutes,
            entry.value,
            entry.alert_type_id,
            bounds,
        )

    @classmethod
    async def open(cls, entry_id: uuid.UUID, db: AsyncSession) -> "AlertEntryEditingSession":
        """Load an entry and its editable bounds into a new session."""
        entry = await schedule.get_entry(entry_id, db)
        bounds = await schedule.editable_bounds(entry, db)
        return cls.for_existing(entry, bounds)

    @property
    def is_new(self) -> bool:
        return self.entry_id is None

    def set_start(self, start: int) -> None:
        """Move the start within the seeded bounds.

        Raises:
            IsDefaultEntryError: If this is the default (start 0) entry.
            OutOfBoundsError: If start is outside the bounds.
        """
        self._ensure_open()
        if self.bounds.immutable:
            raise IsDefaultEntryError("The start of the default alert entry can't be changed")
        if not self.bounds.contains(start):
            raise OutOfBoundsError(start, self.bounds.minimum_start, self.bounds.maximum_start)
        self.start = start
        self._mutated()

    def set_value(self, value: int) -> None:
        """Set the threshold in native units.

        Raises:
            KindHasNoValueError: If the kind takes no value.
            ValueOutOfRangeError: If the value does not fit the stored range;
                the value is unchanged.
        """
        self._ensure_open()
        if not self.kind.needs_value:
            raise KindHasNoValueError(self.alert_kind)
        self.value = alert_kinds.check_value(value)
        self._mutated()

    def set_value_from_display(self, text: str, unit: GlucoseUnit) -> None:
        """Set the threshold from text typed in the display unit.

        Raises:
            ValueError: If the text is not a number; the value is unchanged.
            KindHasNoValueError: If the kind takes no value.
            ValueOutOfRangeError: If the parsed value does not fit the stored range.
        """
        self._ensure_open()
        self.set_value(parse_display(text, self.kind, unit))

    def set_alert_type(self, alert_type_id: uuid.UUID) -> None:
        self._ensure_open()
        self.alert_type_id = alert_type_id
        self._mutated()

    def value_visible(self, alert_type_enabled: bool) -> bool:
        return self.kind.needs_value or alert_type_enabled

    def rows(self, alert_type: AlertType, unit: GlucoseUnit) -> list[SettingRow]:
        """Visible form rows for the pending values."""
        return alert_entry_rows(
            alert_kind=self.alert_kind,
            start_minutes=self.start,
            value=self.value,
            alert_type_name=alert_type.name,
            alert_type_enabled=alert_type.enabled,
            unit=unit,
        )

    async def _write(self, db: AsyncSession) -> AlertEntry:
        if self.entry_id is None:
            entry = await schedule.create_entry(
                self.alert_kind,
                self.start,
                self.value if self.kind.needs_value else 0,
                self.alert_type_id,
                db,
            )
            self.entry_id = entry.id
            return entry
        return await schedule.update_entry(
            self.entry_id,
            db,
            start=self.start,
            value=self.value,
            alert_type_id=self.alert_type_id,
        )
