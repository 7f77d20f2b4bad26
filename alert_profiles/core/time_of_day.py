"""Minutes-since-midnight helpers for alert entry start times."""

from datetime import datetime, time
from typing import Final

MINUTES_PER_DAY: Final[int] = 24 * 60
# One minute before midnight
LAST_MINUTE_OF_DAY: Final[int] = MINUTES_PER_DAY - 1


def minutes_to_time_string(minutes: int) -> str:
    """Format minutes since midnight as ``HH:MM``."""
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def minutes_since_midnight(moment: datetime | time) -> int:
    """Minutes elapsed since local midnight for a time or datetime."""
    return moment.hour * 60 + moment.minute


def is_valid_start(minutes: int) -> bool:
    return 0 <= minutes <= LAST_MINUTE_OF_DAY
