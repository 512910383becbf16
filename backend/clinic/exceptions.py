# backend/clinic/exceptions.py
"""
Scheduling error taxonomy.

Every error is a structured, user-facing failure. The HTTP layer renders
`to_dict()` with the class `status_code`; nothing here knows about FastAPI.
"""

from datetime import date


class SchedulingError(Exception):
    """Base class for all domain failures of the scheduling core."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationError(SchedulingError):
    """Malformed input: bad session count, unknown frequency, bad time string."""


class NotFoundError(SchedulingError):
    status_code = 404


class StockInsufficientError(SchedulingError):
    """One or more therapy items are short. Carries the full shortfall list."""

    def __init__(self, shortfalls: list[dict]):
        super().__init__("Insufficient stock for required items")
        self.shortfalls = shortfalls

    def to_dict(self) -> dict:
        return {"error": self.message, "insufficientItems": self.shortfalls}


class NoStaffAvailableError(SchedulingError):
    def __init__(self, message: str = "No staff found who have updated stock"):
        super().__init__(message)


class NoAvailableSlotError(SchedulingError):
    """The therapist pool is exhausted for one session date."""

    status_code = 409

    def __init__(self, session_index: int, session_date: date):
        super().__init__(
            f"No available 30-minute slots found for session "
            f"{session_index + 1} on {session_date.isoformat()}"
        )
        self.session_index = session_index
        self.session_date = session_date

    def to_dict(self) -> dict:
        return {
            "error": self.message,
            "sessionIndex": self.session_index,
            "sessionDate": self.session_date.isoformat(),
        }


class ConflictError(SchedulingError):
    """A concurrent write claimed the same provider time first."""

    status_code = 409
