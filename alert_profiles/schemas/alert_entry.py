"""Alert entry schemas."""

import uuid

from pydantic import BaseModel, Field

from alert_profiles.core.alert_kinds import ValueUnit


class AlertEntryCreate(BaseModel):
    """Request schema for adding an entry to a kind's schedule.

    Start bounds are checked by the schedule service so the error names
    the allowed window.
    """

    alert_kind: int = Field(..., description="Alert kind code.")
    start_minutes: int = Field(..., description="Minutes since midnight, 1-1439.")
    value: int = Field(default=0, ge=0, le=32767, description="Threshold in native units.")
    alert_type_id: uuid.UUID


class AlertEntryUpdate(BaseModel):
    """Request schema for updating an entry. All fields optional."""

    start_minutes: int | None = None
    value: int | None = Field(default=None, ge=0, le=32767)
    alert_type_id: uuid.UUID | None = None


class AlertEntryResponse(BaseModel):
    """Response schema for a single alert entry."""

    model_config = {"from_attributes": True}

    id: uuid.UUID
    alert_kind: int
    start_minutes: int
    start_time: str
    value: int
    display_value: str
    value_unit: str
    value_visible: bool
    alert_type_id: uuid.UUID


class EditableBoundsResponse(BaseModel):
    """Window a start time may be moved within."""

    minimum_start: int
    maximum_start: int
    immutable: bool


class AlertEntryListResponse(BaseModel):
    """Schedule of one alert kind."""

    alert_kind: int
    title: str
    entries: list[AlertEntryResponse]
    count: int


class ActiveEntriesResponse(BaseModel):
    """Entry in force at a minute of the day and the one after it."""

    alert_kind: int
    minutes: int
    current: AlertEntryResponse
    next: AlertEntryResponse | None


class AlertKindResponse(BaseModel):
    """Catalog entry for one alert kind."""

    model_config = {"from_attributes": True}

    code: int
    title: str
    needs_value: bool
    value_unit: ValueUnit
    needs_mmol_conversion: bool
    unit_label: str


class SettingRowResponse(BaseModel):
    """One visible row of an edit form."""

    setting: str
    detail: str
    editable: bool
