"""Alert entries router.

Endpoints for the per-kind alert schedules and the alert kind catalog.
Values are returned both in native units and formatted in the display
unit (configured default, or ``?unit=`` per request).
"""

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from alert_profiles.config import settings
from alert_profiles.core import alert_kinds
from alert_profiles.core.errors import AlertConfigError, to_http_exception
from alert_profiles.core.setting_rows import alert_entry_rows
from alert_profiles.core.time_of_day import minutes_since_midnight, minutes_to_time_string
from alert_profiles.core.units import GlucoseUnit, format_display
from alert_profiles.database import get_db
from alert_profiles.models.alert_entry import AlertEntry
from alert_profiles.models.alert_type import AlertType
from alert_profiles.schemas.alert_entry import (
    ActiveEntriesResponse,
    AlertEntryCreate,
    AlertEntryListResponse,
    AlertEntryResponse,
    AlertEntryUpdate,
    AlertKindResponse,
    EditableBoundsResponse,
    SettingRowResponse,
)
from alert_profiles.services.alert_entry import (
    create_entry,
    delete_entry,
    editable_bounds,
    get_current_and_next_entries,
    get_entry,
    list_for_kind,
    update_entry,
    value_is_visible,
)
from alert_profiles.services.alert_type import get_alert_type, list_alert_types

router = APIRouter(tags=["alert-entries"])


def _unit(unit: GlucoseUnit | None) -> GlucoseUnit:
    return unit or settings.glucose_unit


def _entry_response(
    entry: AlertEntry,
    alert_type: AlertType,
    unit: GlucoseUnit,
) -> AlertEntryResponse:
    info = alert_kinds.lookup(entry.alert_kind)
    return AlertEntryResponse(
        id=entry.id,
        alert_kind=entry.alert_kind,
        start_minutes=entry.start_minutes,
        start_time=minutes_to_time_string(entry.start_minutes),
        value=entry.value,
        display_value=format_display(entry.value, info, unit),
        value_unit=alert_kinds.value_unit_label(entry.alert_kind, unit),
        value_visible=value_is_visible(entry.alert_kind, alert_type),
        alert_type_id=entry.alert_type_id,
    )


async def _single_entry_response(
    entry: AlertEntry,
    db: AsyncSession,
    unit: GlucoseUnit,
) -> AlertEntryResponse:
    alert_type = await get_alert_type(entry.alert_type_id, db)
    return _entry_response(entry, alert_type, unit)


@router.get("/api/alert-kinds", response_model=list[AlertKindResponse])
async def get_alert_kinds(
    unit: GlucoseUnit | None = None,
) -> list[AlertKindResponse]:
    """List the alert kind catalog."""
    display_unit = _unit(unit)
    return [
        AlertKindResponse(
            code=info.code,
            title=info.title,
            needs_value=info.needs_value,
            value_unit=info.value_unit,
            needs_mmol_conversion=info.needs_mmol_conversion,
            unit_label=alert_kinds.value_unit_label(info.code, display_unit),
        )
        for info in alert_kinds.all_kinds()
    ]


@router.get("/api/alert-entries", response_model=AlertEntryListResponse)
async def get_schedule(
    kind: int = Query(..., description="Alert kind code."),
    unit: GlucoseUnit | None = None,
    db: AsyncSession = Depends(get_db),
) -> AlertEntryListResponse:
    """Get the schedule of one alert kind, sorted by start."""
    try:
        info = alert_kinds.lookup(kind)
        entries = await list_for_kind(kind, db)
    except AlertConfigError as exc:
        raise to_http_exception(exc) from exc

    alert_types = {t.id: t for t in await list_alert_types(db)}
    display_unit = _unit(unit)
    return AlertEntryListResponse(
        alert_kind=info.code,
        title=info.title,
        entries=[
            _entry_response(e, alert_types[e.alert_type_id], display_unit)
            for e in entries
        ],
        count=len(entries),
    )


@router.get("/api/alert-entries/active", response_model=ActiveEntriesResponse)
async def get_active_entries(
    kind: int = Query(..., description="Alert kind code."),
    minutes: int | None = Query(
        None, description="Minute of the day, 0-1439. Defaults to the current local time."
    ),
    unit: GlucoseUnit | None = None,
    db: AsyncSession = Depends(get_db),
) -> ActiveEntriesResponse:
    """Get the entry in force at a minute of the day and the next one."""
    if minutes is None:
        minutes = minutes_since_midnight(datetime.now())

    try:
        current, following = await get_current_and_next_entries(kind, minutes, db)
        display_unit = _unit(unit)
        current_response = await _single_entry_response(current, db, display_unit)
        next_response = (
            await _single_entry_response(following, db, display_unit)
            if following is not None
            else None
        )
    except AlertConfigError as exc:
        raise to_http_exception(exc) from exc

    return ActiveEntriesResponse(
        alert_kind=current.alert_kind,
        minutes=minutes,
        current=current_response,
        next=next_response,
    )


@router.post(
    "/api/alert-entries",
    response_model=AlertEntryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_entry(
    data: AlertEntryCreate,
    unit: GlucoseUnit | None = None,
    db: AsyncSession = Depends(get_db),
) -> AlertEntryResponse:
    """Add an entry to a kind's schedule."""
    try:
        entry = await create_entry(
            data.alert_kind,
            data.start_minutes,
            data.value,
            data.alert_type_id,
            db,
        )
        return await _single_entry_response(entry, db, _unit(unit))
    except AlertConfigError as exc:
        raise to_http_exception(exc) from exc


@router.get("/api/alert-entries/{entry_id}", response_model=AlertEntryResponse)
async def get_one_entry(
    entry_id: uuid.UUID,
    unit: GlucoseUnit | None = None,
    db: AsyncSession = Depends(get_db),
) -> AlertEntryResponse:
    """Get a single alert entry."""
    try:
        entry = await get_entry(entry_id, db)
        return await _single_entry_response(entry, db, _unit(unit))
    except AlertConfigError as exc:
        raise to_http_exception(exc) from exc


@router.get(
    "/api/alert-entries/{entry_id}/bounds",
    response_model=EditableBoundsResponse,
)
async def get_entry_bounds(
    entry_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> EditableBoundsResponse:
    """Get the window the entry's start may be moved within."""
    try:
        entry = await get_entry(entry_id, db)
        bounds = await editable_bounds(entry, db)
    except AlertConfigError as exc:
        raise to_http_exception(exc) from exc

    return EditableBoundsResponse(
        minimum_start=bounds.minimum_start,
        maximum_start=bounds.maximum_start,
        immutable=bounds.immutable,
    )


@router.get(
    "/api/alert-entries/{entry_id}/settings",
    response_model=list[SettingRowResponse],
)
async def get_entry_settings(
    entry_id: uuid.UUID,
    unit: GlucoseUnit | None = None,
    db: AsyncSession = Depends(get_db),
) -> list[SettingRowResponse]:
    """Get the visible rows of the entry's edit form."""
    try:
        entry = await get_entry(entry_id, db)
        alert_type = await get_alert_type(entry.alert_type_id, db)
    except AlertConfigError as exc:
        raise to_http_exception(exc) from exc

    rows = alert_entry_rows(
        alert_kind=entry.alert_kind,
        start_minutes=entry.start_minutes,
        value=entry.value,
        alert_type_name=alert_type.name,
        alert_type_enabled=alert_type.enabled,
        unit=_unit(unit),
    )
    return [
        SettingRowResponse(
            setting=row.setting.name.lower(),
            detail=row.detail,
            editable=row.editable,
        )
        for row in rows
    ]


@router.patch("/api/alert-entries/{entry_id}", response_model=AlertEntryResponse)
async def edit_entry(
    entry_id: uuid.UUID,
    data: AlertEntryUpdate,
    unit: GlucoseUnit | None = None,
    db: AsyncSession = Depends(get_db),
) -> AlertEntryResponse:
    """Update an entry's start, value and/or alert type in one step."""
    try:
        entry = await update_entry(
            entry_id,
            db,
            start=data.start_minutes,
            value=data.value,
            alert_type_id=data.alert_type_id,
        )
        return await _single_entry_response(entry, db, _unit(unit))
    except AlertConfigError as exc:
        raise to_http_exception(exc) from exc


@router.delete("/api/alert-entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_entry(
    entry_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete an entry. The default (start 0) entry can't be deleted."""
    try:
        await delete_entry(entry_id, db)
    except AlertConfigError as exc:
        raise to_http_exception(exc) from exc
