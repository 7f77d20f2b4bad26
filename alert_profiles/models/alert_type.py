"""Alert type model.

A named, reusable notification profile referenced by alert entries.
"""

import uuid

from sqlalchemy import Boolean, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from alert_profiles.models.base import Base, TimestampMixin


class AlertType(Base, TimestampMixin):
    """Notification profile: sound, vibration, mute override and snooze policy.

    Attributes:
        id: Unique identifier (UUID)
        name: Display name, unique across all alert types (exact match)
        enabled: When False the alert never fires
        vibrate: Vibrate when the alert fires
        sound_name: None plays the platform default sound, "" is silent
        override_mute: Play sound even when the device is muted
        snooze_via_notification: Allow snoozing from the notification
        default_snooze_period_minutes: Snooze length used from the notification
        position: Insertion order, used to keep listing order stable
    """

    __tablename__ = "alert_types"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
    )

    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    vibrate: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    sound_name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        default=None,
    )

    override_mute: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    snooze_via_notification: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    default_snooze_period_minutes: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=60,
    )

    position: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    def __repr__(self) -> str:
        return (
            f"<AlertType(name={self.name!r}, enabled={self.enabled}, "
            f"sound={self.sound_name!r})>"
        )
