# backend/clinic/services/scheduler/__init__.py
"""
Treatment-plan scheduling.

Recurrence: session dates from start date + frequency
Inventory: stock sufficiency and staff rotation pool
Allocator: first-fit therapist/slot search per session date
"""

from .recurrence import FREQUENCY_STEPS, compute_session_dates, parse_session_count
from .inventory import RequiredItem, check_stock, get_required_items, list_active_staff
from .allocator import (
    AllocationResult,
    AssignedSession,
    CandidatePolicy,
    FirstFitPolicy,
    SessionAllocator,
    allocate_treatment_plan,
)

__all__ = [
    "FREQUENCY_STEPS",
    "compute_session_dates",
    "parse_session_count",
    "RequiredItem",
    "check_stock",
    "get_required_items",
    "list_active_staff",
    "AllocationResult",
    "AssignedSession",
    "CandidatePolicy",
    "FirstFitPolicy",
    "SessionAllocator",
    "allocate_treatment_plan",
]
