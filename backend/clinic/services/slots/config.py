# backend/clinic/services/slots/config.py
"""
Scheduling configuration and clock-string helpers.
"""

from dataclasses import dataclass
from functools import lru_cache


WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


@dataclass(frozen=True)
class BookingConfig:
    """
    Configuration for the slot grid and plan allocation.

    Attributes:
        slot_step_minutes: Slot width in minutes (15/30/60)
        default_day_start: Start of the conventional clinic day ("HH:MM")
        default_day_end: End of the conventional clinic day ("HH:MM")
        max_sessions: Upper bound on sessions in one treatment plan
        session_duration_minutes: Length of a treatment session
    """
    slot_step_minutes: int = 30  # 15 / 30 / 60
    default_day_start: str = "09:00"
    default_day_end: str = "17:00"
    max_sessions: int = 50
    session_duration_minutes: int = 30

    def __post_init__(self):
        """Validate configuration."""
        if self.slot_step_minutes not in (15, 30, 60):
            raise ValueError(f"slot_step_minutes must be 15, 30, or 60, got {self.slot_step_minutes}")
        if self.max_sessions < 1:
            raise ValueError(f"max_sessions must be positive, got {self.max_sessions}")

    @property
    def slots_per_default_day(self) -> int:
        """Number of slots in the conventional 09:00-17:00 day (16 at 30 min)."""
        span = time_str_to_seconds(self.default_day_end) - time_str_to_seconds(self.default_day_start)
        return max(span, 0) // (self.slot_step_minutes * 60)


@lru_cache
def get_booking_config() -> BookingConfig:
    """Get booking configuration (singleton)."""
    return BookingConfig()


def time_str_to_seconds(value: str) -> int:
    """
    Convert "HH:MM" or "HH:MM:SS" to seconds since midnight.

    Raises ValueError for anything else.
    """
    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise ValueError(f"Time must be in HH:MM or HH:MM:SS format, got {value!r}")
    hours, minutes = int(parts[0]), int(parts[1])
    seconds = int(parts[2]) if len(parts) == 3 else 0
    if hours > 23 or minutes > 59 or seconds > 59:
        raise ValueError(f"Time out of range: {value!r}")
    return hours * 3600 + minutes * 60 + seconds


def seconds_to_time_str(total: int) -> str:
    """Format seconds since midnight as "HH:MM" (or "HH:MM:SS" off the minute)."""
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    if seconds:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{hours:02d}:{minutes:02d}"


def normalize_time_str(value: str) -> str:
    """Canonical stored form of a clock string: "09:00:00" -> "09:00"."""
    return seconds_to_time_str(time_str_to_seconds(value))


def weekday_name(target) -> str:
    """Lowercase weekday name of a date: date(2024, 1, 1) -> "monday"."""
    return WEEKDAYS[target.weekday()]
