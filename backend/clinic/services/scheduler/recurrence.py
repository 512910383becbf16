# backend/clinic/services/scheduler/recurrence.py
"""
Session date recurrence.

daily +1 day, weekly +7, biweekly +14, monthly +1 calendar month.

Monthly dates are computed from the start date (start + i months), with
the day clamped to the month length: 2024-01-31 -> 02-29 -> 03-31 -> 04-30.
Offsets are never chained, so one short month does not drag later
sessions earlier.
"""

from datetime import date, datetime, timedelta

from dateutil.relativedelta import relativedelta

from ...exceptions import ValidationError

FREQUENCY_STEPS = {
    "daily": relativedelta(days=1),
    "weekly": relativedelta(days=7),
    "biweekly": relativedelta(days=14),
    "monthly": relativedelta(months=1),
}


def parse_session_count(value, max_sessions: int = 50) -> int:
    """Parse the requested session count; must be an integer in [1, max_sessions]."""
    if isinstance(value, bool):
        count = None
    elif isinstance(value, int):
        count = value
    elif isinstance(value, float) and value.is_integer():
        count = int(value)
    elif isinstance(value, str):
        try:
            count = int(value.strip())
        except ValueError:
            count = None
    else:
        count = None

    if count is None or count < 1 or count > max_sessions:
        raise ValidationError(
            f"Number of sessions must be a positive integer between 1 and {max_sessions}"
        )
    return count


def parse_start_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError("Start date must be in YYYY-MM-DD format")


def compute_session_dates(start_date: date, num_sessions: int, frequency: str) -> list[date]:
    """
    Calendar dates of each session, first one on start_date.

    compute_session_dates(date(2024, 1, 1), 3, "weekly")
        -> [2024-01-01, 2024-01-08, 2024-01-15]
    """
    step = FREQUENCY_STEPS.get(frequency)
    if step is None:
        raise ValidationError(
            f"Invalid frequency {frequency!r}. Supported: {', '.join(FREQUENCY_STEPS)}"
        )
    if num_sessions < 1:
        return []

    if step.months:
        return [start_date + relativedelta(months=i * step.months) for i in range(num_sessions)]
    return [start_date + timedelta(days=i * step.days) for i in range(num_sessions)]
