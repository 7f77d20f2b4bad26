"""Alert type schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class AlertTypeFields(BaseModel):
    """All mutable fields of an alert type, with defaults for a new one.

    Names are compared exactly: no trimming, case-sensitive.
    """

    name: str = Field(
        default="Default",
        min_length=1,
        max_length=100,
        description="Alert type name, unique across all alert types.",
    )
    enabled: bool = True
    vibrate: bool = True
    sound_name: str | None = Field(
        default=None,
        max_length=255,
        description="Sound to play. null = platform default sound, empty = silent.",
    )
    override_mute: bool = False
    snooze_via_notification: bool = False
    default_snooze_period_minutes: int = Field(
        default=60,
        ge=0,
        le=32767,
        description="Snooze period (minutes) used when snoozing from the notification.",
    )


class AlertTypeCreate(AlertTypeFields):
    """Request schema for creating an alert type."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Alert type name, unique across all alert types.",
    )


class AlertTypeUpdate(BaseModel):
    """Request schema for updating an alert type. All fields optional.

    ``sound_name`` is nullable on purpose, so it is applied whenever it is
    present in the request body, even as null.
    """

    name: str | None = Field(default=None, min_length=1, max_length=100)
    enabled: bool | None = None
    vibrate: bool | None = None
    sound_name: str | None = Field(default=None, max_length=255)
    override_mute: bool | None = None
    snooze_via_notification: bool | None = None
    default_snooze_period_minutes: int | None = Field(default=None, ge=0, le=32767)

    def changes(self) -> dict:
        """Fields to apply: everything set explicitly, nulls dropped except sound_name."""
        data = self.model_dump(exclude_unset=True)
        return {
            field: value
            for field, value in data.items()
            if value is not None or field == "sound_name"
        }


class AlertTypeResponse(BaseModel):
    """Response schema for a single alert type."""

    model_config = {"from_attributes": True}

    id: uuid.UUID
    name: str
    enabled: bool
    vibrate: bool
    sound_name: str | None
    override_mute: bool
    snooze_via_notification: bool
    default_snooze_period_minutes: int
    created_at: datetime
    updated_at: datetime


class AlertTypeDetailResponse(AlertTypeResponse):
    """Alert type plus how many entries use it."""

    reference_count: int
    deletable: bool


class AlertTypeListResponse(BaseModel):
    """Response schema for listing alert types."""

    alert_types: list[AlertTypeResponse]
    count: int
