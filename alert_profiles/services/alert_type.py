"""Alert type registry.

CRUD for alert types. Names are unique (exact, case-sensitive match) and
an alert type can only be deleted once no alert entry references it.
"""

import uuid

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from alert_profiles.config import settings
from alert_profiles.core.errors import DuplicateNameError, InUseError, NotFoundError
from alert_profiles.logging_config import get_logger
from alert_profiles.models.alert_entry import AlertEntry
from alert_profiles.models.alert_type import AlertType
from alert_profiles.schemas.alert_type import AlertTypeFields, AlertTypeUpdate

logger = get_logger(__name__)


async def list_alert_types(db: AsyncSession) -> list[AlertType]:
    """List all alert types in the order they were created."""
    result = await db.execute(
        select(AlertType).order_by(AlertType.position, AlertType.created_at)
    )
    return list(result.scalars().all())


async def get_alert_type(alert_type_id: uuid.UUID, db: AsyncSession) -> AlertType:
    """Get a single alert type.

    Raises:
        NotFoundError: If no alert type has this id.
    """
    alert_type = await db.get(AlertType, alert_type_id)
    if alert_type is None:
        msg = f"Alert type {alert_type_id} not found"
        raise NotFoundError(msg)
    return alert_type


async def _name_taken(
    name: str,
    db: AsyncSession,
    exclude_id: uuid.UUID | None = None,
) -> bool:
    query = select(AlertType.id).where(AlertType.name == name)
    if exclude_id is not None:
        query = query.where(AlertType.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none() is not None


async def create_alert_type(data: AlertTypeFields, db: AsyncSession) -> AlertType:
    """Create a new alert type.

    Raises:
        DuplicateNameError: If another alert type already has this name.
    """
    if await _name_taken(data.name, db):
        logger.warning("Alert type name already in use", name=data.name)
        raise DuplicateNameError(data.name)

    result = await db.execute(select(func.max(AlertType.position)))
    max_position = result.scalar_one_or_none()
    position = 0 if max_position is None else max_position + 1

    alert_type = AlertType(**data.model_dump(), position=position)
    db.add(alert_type)

    try:
        await db.commit()
    except IntegrityError:
        # Lost a race against a concurrent insert of the same name
        await db.rollback()
        raise DuplicateNameError(data.name)  # noqa: B904

    await db.refresh(alert_type)

    logger.info(
        "Created alert type",
        alert_type_id=str(alert_type.id),
        name=alert_type.name,
    )

    return alert_type


async def update_alert_type(
    alert_type_id: uuid.UUID,
    updates: AlertTypeUpdate,
    db: AsyncSession,
) -> AlertType:
    """Update an alert type. Only fields present in ``updates`` change.

    Raises:
        NotFoundError: If no alert type has this id.
        DuplicateNameError: If renaming to a name another alert type uses.
    """
    alert_type = await get_alert_type(alert_type_id, db)
    changes = updates.changes()

    new_name = changes.get("name")
    if new_name is not None and await _name_taken(new_name, db, exclude_id=alert_type_id):
        logger.warning("Alert type name already in use", name=new_name)
        raise DuplicateNameError(new_name)

    for field, value in changes.items():
        setattr(alert_type, field, value)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateNameError(new_name or alert_type.name)  # noqa: B904

    await db.refresh(alert_type)

    logger.info(
        "Updated alert type",
        alert_type_id=str(alert_type_id),
        fields=list(changes.keys()),
    )

    return alert_type


async def count_references(alert_type_id: uuid.UUID, db: AsyncSession) -> int:
    """Number of alert entries that use this alert type."""
    result = await db.execute(
        select(func.count())
        .select_from(AlertEntry)
        .where(AlertEntry.alert_type_id == alert_type_id)
    )
    return result.scalar_one()


async def is_deletable(alert_type_id: uuid.UUID, db: AsyncSession) -> bool:
    return await count_references(alert_type_id, db) == 0


async def delete_alert_type(alert_type_id: uuid.UUID, db: AsyncSession) -> None:
    """Delete an alert type.

    Raises:
        NotFoundError: If no alert type has this id.
        InUseError: If any alert entry still references it.
    """
    alert_type = await get_alert_type(alert_type_id, db)

    references = await count_references(alert_type_id, db)
    if references:
        logger.warning(
            "Refused to delete alert type in use",
            alert_type_id=str(alert_type_id),
            reference_count=references,
        )
        raise InUseError(alert_type.name, references)

    await db.delete(alert_type)
    await db.commit()

    logger.info(
        "Deleted alert type",
        alert_type_id=str(alert_type_id),
        name=alert_type.name,
    )


async def get_or_create_default_alert_type(db: AsyncSession) -> AlertType:
    """Get the alert type new schedules start with, creating it if missing.

    The default alert type is looked up by the configured name.
    """
    name = settings.default_alert_type_name
    result = await db.execute(select(AlertType).where(AlertType.name == name))
    alert_type = result.scalar_one_or_none()
    if alert_type is not None:
        return alert_type

    try:
        return await create_alert_type(
            AlertTypeFields(
                name=name,
                default_snooze_period_minutes=settings.default_snooze_period_minutes,
            ),
            db,
        )
    except DuplicateNameError:
        # Concurrent request already created the row, fetch it
        result = await db.execute(select(AlertType).where(AlertType.name == name))
        return result.scalar_one()
