# Business Logic Services
from alert_profiles.services.alert_entry import (
    EditableBounds,
    create_entry,
    delete_entry,
    editable_bounds,
    get_current_and_next_entries,
    list_for_kind,
    set_alert_type,
    set_start,
    set_value,
    update_entry,
    value_is_visible,
)
from alert_profiles.services.alert_type import (
    create_alert_type,
    delete_alert_type,
    get_or_create_default_alert_type,
    list_alert_types,
    update_alert_type,
)
from alert_profiles.services.editing_session import (
    AlertEntryEditingSession,
    AlertTypeEditingSession,
    SessionState,
)

__all__ = [
    "AlertEntryEditingSession",
    "AlertTypeEditingSession",
    "EditableBounds",
    "SessionState",
    "create_alert_type",
    "create_entry",
    "delete_alert_type",
    "delete_entry",
    "editable_bounds",
    "get_current_and_next_entries",
    "get_or_create_default_alert_type",
    "list_alert_types",
    "list_for_kind",
    "set_alert_type",
    "set_start",
    "set_value",
    "update_alert_type",
    "update_entry",
    "value_is_visible",
]
