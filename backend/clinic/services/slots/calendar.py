# backend/clinic/services/slots/calendar.py
"""
Working-hours calendar of a provider.

Resolution order for the weekly calendar:
1. `working_hours` JSON, list form (profile editor):
       [{"day": "monday", "isWorking": true, "startTime": "09:00", "endTime": "17:00"}, ...]
   or keyed form:
       {"mon": {"start": "09:00", "end": "17:00"}, "sat": null}
   Days absent from a non-empty configuration are non-working.
2. Flat `start_time` / `end_time` pair -> that window on all seven days.
3. Default: Mon-Fri 09:00-17:00 working, Sat/Sun off.

Leave days (JSON list of weekday names) override all of the above.
"""

import json
import logging
from dataclasses import dataclass

from .config import WEEKDAYS, BookingConfig, get_booking_config, normalize_time_str, time_str_to_seconds

logger = logging.getLogger(__name__)

_SHORT_NAMES = {name[:3]: name for name in WEEKDAYS}


@dataclass(frozen=True)
class DaySchedule:
    day: str
    is_working: bool
    start_time: str
    end_time: str


@dataclass(frozen=True)
class WorkingHoursCalendar:
    """Weekly availability of one provider plus its leave days."""

    days: dict[str, DaySchedule]
    leave_days: frozenset[str] = frozenset()

    @classmethod
    def default(cls, config: BookingConfig | None = None) -> "WorkingHoursCalendar":
        config = config or get_booking_config()
        days = {
            day: DaySchedule(
                day=day,
                is_working=day not in ("saturday", "sunday"),
                start_time=config.default_day_start,
                end_time=config.default_day_end,
            )
            for day in WEEKDAYS
        }
        return cls(days=days)

    @classmethod
    def uniform(
        cls,
        start_time: str,
        end_time: str,
        leave_days: frozenset[str] = frozenset(),
    ) -> "WorkingHoursCalendar":
        """Same window on every weekday."""
        start, end = normalize_time_str(start_time), normalize_time_str(end_time)
        days = {day: DaySchedule(day, True, start, end) for day in WEEKDAYS}
        return cls(days=days, leave_days=leave_days)

    @classmethod
    def from_provider(cls, provider, config: BookingConfig | None = None) -> "WorkingHoursCalendar":
        """Build the calendar from a `Providers` row."""
        config = config or get_booking_config()
        leave_days = parse_leave_days(provider.leave_days)

        days = parse_working_hours(provider.working_hours, config)
        if days:
            return cls(days=days, leave_days=leave_days)

        if provider.start_time and provider.end_time:
            return cls.uniform(provider.start_time, provider.end_time, leave_days)

        base = cls.default(config)
        return cls(days=base.days, leave_days=leave_days)

    def is_leave_day(self, day: str) -> bool:
        return day.lower() in self.leave_days

    def is_working(self, day: str) -> bool:
        day = day.lower()
        if self.is_leave_day(day):
            return False
        schedule = self.days.get(day)
        return bool(schedule and schedule.is_working)

    def window_for(self, day: str) -> tuple[str, str] | None:
        """Active (start, end) window for a weekday, or None when not working."""
        if not self.is_working(day):
            return None
        schedule = self.days[day.lower()]
        return schedule.start_time, schedule.end_time


# ── Parsing ──────────────────────────────────────────────────────────────


def _canonical_day(value) -> str | None:
    if not isinstance(value, str):
        return None
    key = value.strip().lower()
    if key in WEEKDAYS:
        return key
    return _SHORT_NAMES.get(key[:3]) if len(key) >= 3 else None


def _parse_is_working(value) -> bool | None:
    """Strict flag: a bool or "true"/"false"; anything else is None."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return None


def parse_leave_days(raw) -> frozenset[str]:
    """Leave days from JSON text or a list; unknown names are ignored."""
    if not raw:
        return frozenset()
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Unparseable leave_days value: {raw!r}")
            return frozenset()
    if not isinstance(raw, list):
        return frozenset()
    return frozenset(d for d in (_canonical_day(v) for v in raw) if d)


def parse_working_hours(raw, config: BookingConfig) -> dict[str, DaySchedule]:
    """
    Parse a working_hours configuration (JSON text, list or dict).

    Returns an empty dict when nothing usable is configured, so the caller
    can fall back.
    """
    if not raw:
        return {}
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Unparseable working_hours value: {raw!r}")
            return {}

    entries: list[tuple[str | None, bool, str | None, str | None]] = []

    if isinstance(raw, list):
        for item in raw:
            if not isinstance(item, dict):
                continue
            is_working = _parse_is_working(item.get("isWorking", True))
            if is_working is None:
                logger.warning(f"Invalid isWorking flag in working hours: {item!r}")
                continue
            entries.append((
                _canonical_day(item.get("day")),
                is_working,
                item.get("startTime"),
                item.get("endTime"),
            ))
    elif isinstance(raw, dict):
        for key, val in raw.items():
            if isinstance(val, dict):
                entries.append((_canonical_day(key), True, val.get("start"), val.get("end")))
            elif val is None:
                entries.append((_canonical_day(key), False, None, None))

    days: dict[str, DaySchedule] = {}
    for day, is_working, start, end in entries:
        if day is None:
            continue
        try:
            start = normalize_time_str(start) if start else config.default_day_start
            end = normalize_time_str(end) if end else config.default_day_end
        except ValueError:
            logger.warning(f"Invalid working hours for {day}: {start!r}-{end!r}")
            continue
        days[day] = DaySchedule(day, is_working, start, end)

    if not days:
        return {}

    # Days not mentioned in an explicit configuration are off
    for day in WEEKDAYS:
        days.setdefault(
            day,
            DaySchedule(day, False, config.default_day_start, config.default_day_end),
        )
    return days


def validate_working_hours(raw) -> list | dict:
    """
    Check a working_hours configuration before it is stored.

    Accepts the list or keyed form parsed by `parse_working_hours` and
    returns a copy with canonical day names and "HH:MM" times. Raises
    ValueError on the first malformed entry instead of dropping it.
    """
    if raw is None:
        return []

    if isinstance(raw, list):
        result = []
        for item in raw:
            if not isinstance(item, dict):
                raise ValueError(f"Working hours entry must be an object, got {item!r}")
            day = _require_day(item.get("day"))
            is_working = _parse_is_working(item.get("isWorking", True))
            if is_working is None:
                raise ValueError(f"isWorking for {day} must be true or false")
            start, end = _require_window(day, item.get("startTime"), item.get("endTime"), is_working)
            entry = {"day": day, "isWorking": is_working}
            if start is not None:
                entry["startTime"] = start
            if end is not None:
                entry["endTime"] = end
            result.append(entry)
        return result

    if isinstance(raw, dict):
        result = {}
        for key, val in raw.items():
            day = _require_day(key)
            if val is None:
                result[day] = None
            elif isinstance(val, dict):
                start, end = _require_window(day, val.get("start"), val.get("end"), True)
                result[day] = {k: v for k, v in (("start", start), ("end", end)) if v is not None}
            else:
                raise ValueError(f"Working hours for {day} must be an object or null")
        return result

    raise ValueError("Working hours must be a list of days or an object keyed by day")


def _require_day(value) -> str:
    day = _canonical_day(value)
    if day is None:
        raise ValueError(f"Unknown day in working hours: {value!r}")
    return day


def _require_window(day: str, start, end, is_working: bool) -> tuple[str | None, str | None]:
    try:
        start = normalize_time_str(start) if start else None
        end = normalize_time_str(end) if end else None
    except (ValueError, AttributeError):
        raise ValueError(f"Invalid working hours for {day}: {start!r}-{end!r}")

    if is_working and start and end and time_str_to_seconds(start) >= time_str_to_seconds(end):
        raise ValueError(f"Working hours for {day} must end after they start")
    return start, end
