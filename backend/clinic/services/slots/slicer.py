# backend/clinic/services/slots/slicer.py
"""
Slot slicing: decompose [start, end) into consecutive fixed-width slots.

Pure and deterministic. A slot is emitted only if its end does not exceed
the requested end; a trailing remainder shorter than the step is dropped.
"""

from typing import NamedTuple

from .config import seconds_to_time_str, time_str_to_seconds


class TimeSlot(NamedTuple):
    start: str
    end: str


def slice_time_range(
    start_time: str,
    end_time: str,
    granularity_minutes: int = 30,
) -> list[TimeSlot]:
    """
    Slice a same-day wall-clock range into fixed-width slots.

    slice_time_range("09:00", "10:15") -> [("09:00", "09:30"), ("09:30", "10:00")]

    Returns an empty list when start >= end (ranges crossing midnight are
    not supported and yield nothing).
    """
    if granularity_minutes <= 0:
        raise ValueError(f"granularity_minutes must be positive, got {granularity_minutes}")

    start = time_str_to_seconds(start_time)
    end = time_str_to_seconds(end_time)
    step = granularity_minutes * 60

    slots: list[TimeSlot] = []
    t = start
    while t + step <= end:
        slots.append(TimeSlot(seconds_to_time_str(t), seconds_to_time_str(t + step)))
        t += step

    return slots
