# Database Models
from alert_profiles.models.alert_entry import AlertEntry
from alert_profiles.models.alert_type import AlertType
from alert_profiles.models.base import Base, TimestampMixin

__all__ = [
    "AlertEntry",
    "AlertType",
    "Base",
    "TimestampMixin",
]
