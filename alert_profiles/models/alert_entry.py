"""Alert entry model.

One time-of-day window of an alert kind's schedule. The window runs from
``start_minutes`` until the start of the next entry of the same kind.
"""

import uuid

from sqlalchemy import ForeignKey, Integer, SmallInteger, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from alert_profiles.models.base import Base, TimestampMixin


class AlertEntry(Base, TimestampMixin):
    """Scheduled threshold for one alert kind.

    The entry with ``start_minutes == 0`` is the default entry of its kind.
    """

    __tablename__ = "alert_entries"
    __table_args__ = (
        UniqueConstraint("alert_kind", "start_minutes", name="uq_alert_entry_kind_start"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    alert_kind: Mapped[int] = mapped_column(
        SmallInteger,
        nullable=False,
        index=True,
    )

    # Minutes since local midnight, 0-1439
    start_minutes: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    # Native unit (mg/dL for glucose kinds)
    value: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    alert_type_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("alert_types.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return (
            f"<AlertEntry(kind={self.alert_kind}, start={self.start_minutes}, "
            f"value={self.value})>"
        )
