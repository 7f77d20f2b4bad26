"""Alert entry schedule.

Each alert kind has a schedule: alert entries ordered by start minute.
An entry applies from its start until the next entry's start; the last
entry runs until midnight. The entry starting at minute 0 is the default
entry of the kind. It is created on first access, its start can't be
changed and it can't be deleted, so every minute of the day is covered.

Start times of the other entries stay strictly between their neighbours:
an entry can be moved within its window but never onto or past another
entry.
"""

import uuid
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from alert_profiles.core import alert_kinds
from alert_profiles.core.errors import (
    IsDefaultEntryError,
    KindHasNoValueError,
    NotFoundError,
    OutOfBoundsError,
    OverlapError,
)
from alert_profiles.core.time_of_day import LAST_MINUTE_OF_DAY, is_valid_start
from alert_profiles.logging_config import get_logger
from alert_profiles.models.alert_entry import AlertEntry
from alert_profiles.models.alert_type import AlertType
from alert_profiles.services.alert_type import (
    get_alert_type,
    get_or_create_default_alert_type,
)

logger = get_logger(__name__)

DEFAULT_ENTRY_START = 0


@dataclass(frozen=True)
class EditableBounds:
    """Inclusive window an entry's start may be moved within."""

    minimum_start: int
    maximum_start: int
    immutable: bool = False

    def contains(self, start: int) -> bool:
        return not self.immutable and self.minimum_start <= start <= self.maximum_start


IMMUTABLE_BOUNDS = EditableBounds(DEFAULT_ENTRY_START, DEFAULT_ENTRY_START, immutable=True)


def value_is_visible(alert_kind: int, alert_type: AlertType) -> bool:
    """Whether an entry's value is shown and editable.

    The value applies when the kind takes a value, or when the referenced
    alert type is enabled.
    """
    return alert_kinds.needs_value(alert_kind) or alert_type.enabled


async def _entries_for_kind(alert_kind: int, db: AsyncSession) -> list[AlertEntry]:
    result = await db.execute(
        select(AlertEntry)
        .where(AlertEntry.alert_kind == alert_kind)
        .order_by(AlertEntry.start_minutes)
    )
    return list(result.scalars().all())


async def list_for_kind(alert_kind: int, db: AsyncSession) -> list[AlertEntry]:
    """Get a kind's schedule sorted by start, seeding the default entry if needed.

    Raises:
        UnknownKindError: If the kind code is not in the catalog.
    """
    info = alert_kinds.lookup(alert_kind)
    entries = await _entries_for_kind(info.code, db)
    if entries and entries[0].start_minutes == DEFAULT_ENTRY_START:
        return entries

    alert_type = await get_or_create_default_alert_type(db)
    default_entry = AlertEntry(
        alert_kind=info.code,
        start_minutes=DEFAULT_ENTRY_START,
        value=info.default_value,
        alert_type_id=alert_type.id,
    )
    db.add(default_entry)
    try:
        await db.commit()
    except IntegrityError:
        # Concurrent request already seeded the schedule
        await db.rollback()
        return await _entries_for_kind(info.code, db)

    await db.refresh(default_entry)

    logger.info(
        "Created default alert entry",
        alert_kind=info.code,
        value=default_entry.value,
        alert_type_id=str(alert_type.id),
    )

    return [default_entry, *entries]


async def get_entry(entry_id: uuid.UUID, db: AsyncSession) -> AlertEntry:
    """Get a single alert entry.

    Raises:
        NotFoundError: If no alert entry has this id.
    """
    entry = await db.get(AlertEntry, entry_id)
    if entry is None:
        msg = f"Alert entry {entry_id} not found"
        raise NotFoundError(msg)
    return entry


def bounds_within(entries: list[AlertEntry], entry: AlertEntry) -> EditableBounds:
    """Compute an entry's start window from its neighbours in a sorted schedule."""
    if entry.start_minutes == DEFAULT_ENTRY_START:
        return IMMUTABLE_BOUNDS

    minimum_start = DEFAULT_ENTRY_START + 1
    maximum_start = LAST_MINUTE_OF_DAY
    for other in entries:
        if other.id == entry.id:
            continue
        if other.start_minutes < entry.start_minutes:
            minimum_start = max(minimum_start, other.start_minutes + 1)
        elif other.start_minutes > entry.start_minutes:
            maximum_start = min(maximum_start, other.start_minutes - 1)
    return EditableBounds(minimum_start, maximum_start)


async def editable_bounds(entry: AlertEntry, db: AsyncSession) -> EditableBounds:
    """Window the entry's start may be moved within.

    The default entry returns bounds flagged ``immutable``.
    """
    entries = await list_for_kind(entry.alert_kind, db)
    return bounds_within(entries, entry)


async def update_entry(
    entry_id: uuid.UUID,
    db: AsyncSession,
    *,
    start: int | None = None,
    value: int | None = None,
    alert_type_id: uuid.UUID | None = None,
) -> AlertEntry:
    """Apply several field changes to an entry in one commit.

    Every change is validated before anything is written; on any error the
    entry is left untouched.

    Raises:
        NotFoundError: If the entry or the alert type does not exist.
        IsDefaultEntryError: If moving the start of the default entry.
        OutOfBoundsError: If the new start is not strictly between the
            neighbouring entries' starts.
        KindHasNoValueError: If setting a value on a kind without one.
        ValueOutOfRangeError: If the value does not fit the stored range.
        OverlapError: If a concurrent write took the new start.
    """
    entry = await get_entry(entry_id, db)
    changed: list[str] = []

    if start is not None and start != entry.start_minutes:
        if entry.start_minutes == DEFAULT_ENTRY_START:
            logger.warning("Refused to move default alert entry", entry_id=str(entry_id))
            raise IsDefaultEntryError("The start of the default alert entry can't be changed")
        bounds = await editable_bounds(entry, db)
        if not bounds.contains(start):
            logger.warning(
                "Alert entry start out of bounds",
                entry_id=str(entry_id),
                start=start,
                minimum_start=bounds.minimum_start,
                maximum_start=bounds.maximum_start,
            )
            raise OutOfBoundsError(start, bounds.minimum_start, bounds.maximum_start)
        changed.append("start_minutes")

    if value is not None and value != entry.value:
        if not alert_kinds.needs_value(entry.alert_kind):
            raise KindHasNoValueError(entry.alert_kind)
        alert_kinds.check_value(value)
        changed.append("value")

    if alert_type_id is not None and alert_type_id != entry.alert_type_id:
        await get_alert_type(alert_type_id, db)
        changed.append("alert_type_id")

    if not changed:
        return entry

    if "start_minutes" in changed:
        entry.start_minutes = start
    if "value" in changed:
        entry.value = value
    if "alert_type_id" in changed:
        entry.alert_type_id = alert_type_id

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        if "start_minutes" in changed:
            raise OverlapError(start)  # noqa: B904
        if "alert_type_id" in changed:
            msg = f"Alert type {alert_type_id} not found"
            raise NotFoundError(msg)  # noqa: B904
        raise
    except SQLAlchemyError:
        await db.rollback()
        raise

    await db.refresh(entry)

    logger.info(
        "Updated alert entry",
        entry_id=str(entry_id),
        alert_kind=entry.alert_kind,
        fields=changed,
    )

    return entry


async def set_start(entry_id: uuid.UUID, new_start: int, db: AsyncSession) -> AlertEntry:
    """Move an entry's start. See :func:`update_entry` for errors."""
    entry = await get_entry(entry_id, db)
    if entry.start_minutes == DEFAULT_ENTRY_START:
        raise IsDefaultEntryError("The start of the default alert entry can't be changed")
    return await update_entry(entry_id, db, start=new_start)


async def set_value(entry_id: uuid.UUID, value: int, db: AsyncSession) -> AlertEntry:
    """Change an entry's threshold (native units).

    Raises:
        KindHasNoValueError: If the entry's kind takes no value.
    """
    entry = await get_entry(entry_id, db)
    if not alert_kinds.needs_value(entry.alert_kind):
        raise KindHasNoValueError(entry.alert_kind)
    return await update_entry(entry_id, db, value=value)


async def set_alert_type(
    entry_id: uuid.UUID,
    alert_type_id: uuid.UUID,
    db: AsyncSession,
) -> AlertEntry:
    """Point an entry at another alert type."""
    return await update_entry(entry_id, db, alert_type_id=alert_type_id)


async def create_entry(
    alert_kind: int,
    start: int,
    value: int,
    alert_type_id: uuid.UUID,
    db: AsyncSession,
) -> AlertEntry:
    """Add an entry to a kind's schedule.

    Raises:
        UnknownKindError: If the kind code is not in the catalog.
        OutOfBoundsError: If start is not a minute of the day.
        OverlapError: If another entry of this kind starts at the same minute.
        KindHasNoValueError: If a non-zero value is given for a kind without one.
        ValueOutOfRangeError: If the value does not fit the stored range.
        NotFoundError: If the alert type does not exist.
    """
    info = alert_kinds.lookup(alert_kind)
    if not is_valid_start(start):
        raise OutOfBoundsError(start, DEFAULT_ENTRY_START, LAST_MINUTE_OF_DAY)
    if value and not info.needs_value:
        raise KindHasNoValueError(info.code)
    alert_kinds.check_value(value)
    await get_alert_type(alert_type_id, db)

    entries = await list_for_kind(info.code, db)
    if any(e.start_minutes == start for e in entries):
        logger.warning("Alert entry start already used", alert_kind=info.code, start=start)
        raise OverlapError(start)

    entry = AlertEntry(
        alert_kind=info.code,
        start_minutes=start,
        value=value,
        alert_type_id=alert_type_id,
    )
    db.add(entry)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise OverlapError(start)  # noqa: B904
    except SQLAlchemyError:
        await db.rollback()
        raise

    await db.refresh(entry)

    logger.info(
        "Created alert entry",
        entry_id=str(entry.id),
        alert_kind=info.code,
        start=start,
        alert_type_id=str(alert_type_id),
    )

    return entry


async def delete_entry(entry_id: uuid.UUID, db: AsyncSession) -> None:
    """Remove an entry; its window is absorbed by the previous entry.

    Raises:
        NotFoundError: If no alert entry has this id.
        IsDefaultEntryError: If the entry is the kind's default entry.
    """
    entry = await get_entry(entry_id, db)
    if entry.start_minutes == DEFAULT_ENTRY_START:
        logger.warning("Refused to delete default alert entry", entry_id=str(entry_id))
        raise IsDefaultEntryError("The default alert entry can't be deleted")

    await db.delete(entry)
    await db.commit()

    logger.info(
        "Deleted alert entry",
        entry_id=str(entry_id),
        alert_kind=entry.alert_kind,
    )


async def get_current_and_next_entries(
    alert_kind: int,
    minutes: int,
    db: AsyncSession,
) -> tuple[AlertEntry, AlertEntry | None]:
    """Find the entry in force at a minute of the day, and the one after it.

    Raises:
        OutOfBoundsError: If minutes is not a minute of the day.
    """
    if not is_valid_start(minutes):
        raise OutOfBoundsError(minutes, DEFAULT_ENTRY_START, LAST_MINUTE_OF_DAY)

    entries = await list_for_kind(alert_kind, db)
    current = entries[0]
    following: AlertEntry | None = None
    for entry in entries[1:]:
        if entry.start_minutes <= minutes:
            current = entry
        else:
            following = entry
            break
    return current, following
