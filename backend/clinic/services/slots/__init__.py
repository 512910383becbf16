# backend/clinic/services/slots/__init__.py
"""
Slot grid and availability.

Slicer: fixed-width decomposition of a wall-clock range
Calendar: per-provider working hours and leave days
Store: persisted weekly slot grid (free / booked / leave)
Availability: ad hoc "who is free at date + time"
"""

from .config import BookingConfig, get_booking_config
from .slicer import TimeSlot, slice_time_range
from .calendar import WorkingHoursCalendar
from .store import SlotStore
from .availability import find_available_providers

__all__ = [
    "BookingConfig",
    "get_booking_config",
    "TimeSlot",
    "slice_time_range",
    "WorkingHoursCalendar",
    "SlotStore",
    "find_available_providers",
]
