"""Alert types router.

CRUD endpoints for alert types (notification profiles).
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from alert_profiles.core.errors import AlertConfigError, to_http_exception
from alert_profiles.database import get_db
from alert_profiles.schemas.alert_type import (
    AlertTypeCreate,
    AlertTypeDetailResponse,
    AlertTypeListResponse,
    AlertTypeResponse,
    AlertTypeUpdate,
)
from alert_profiles.services.alert_type import (
    count_references,
    create_alert_type,
    delete_alert_type,
    get_alert_type,
    list_alert_types,
    update_alert_type,
)

router = APIRouter(
    prefix="/api/alert-types",
    tags=["alert-types"],
)


async def _detail(alert_type, db: AsyncSession) -> AlertTypeDetailResponse:
    references = await count_references(alert_type.id, db)
    return AlertTypeDetailResponse.model_validate(
        {
            **AlertTypeResponse.model_validate(alert_type).model_dump(),
            "reference_count": references,
            "deletable": references == 0,
        }
    )


@router.get("", response_model=AlertTypeListResponse)
async def get_alert_types(
    db: AsyncSession = Depends(get_db),
) -> AlertTypeListResponse:
    """List all alert types in stored order."""
    alert_types = await list_alert_types(db)
    return AlertTypeListResponse(
        alert_types=[AlertTypeResponse.model_validate(t) for t in alert_types],
        count=len(alert_types),
    )


@router.post(
    "",
    response_model=AlertTypeDetailResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_alert_type(
    data: AlertTypeCreate,
    db: AsyncSession = Depends(get_db),
) -> AlertTypeDetailResponse:
    """Create an alert type. Returns 409 if the name is already used."""
    try:
        alert_type = await create_alert_type(data, db)
    except AlertConfigError as exc:
        raise to_http_exception(exc) from exc

    return await _detail(alert_type, db)


@router.get("/{alert_type_id}", response_model=AlertTypeDetailResponse)
async def get_one_alert_type(
    alert_type_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> AlertTypeDetailResponse:
    """Get an alert type with its usage count."""
    try:
        alert_type = await get_alert_type(alert_type_id, db)
    except AlertConfigError as exc:
        raise to_http_exception(exc) from exc

    return await _detail(alert_type, db)


@router.patch("/{alert_type_id}", response_model=AlertTypeDetailResponse)
async def edit_alert_type(
    alert_type_id: uuid.UUID,
    data: AlertTypeUpdate,
    db: AsyncSession = Depends(get_db),
) -> AlertTypeDetailResponse:
    """Update an alert type. Only fields present in the body change."""
    try:
        alert_type = await update_alert_type(alert_type_id, data, db)
    except AlertConfigError as exc:
        raise to_http_exception(exc) from exc

    return await _detail(alert_type, db)


@router.delete("/{alert_type_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_alert_type(
    alert_type_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete an alert type. Returns 409 while alert entries still use it."""
    try:
        await delete_alert_type(alert_type_id, db)
    except AlertConfigError as exc:
        raise to_http_exception(exc) from exc
