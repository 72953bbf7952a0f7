"""
Domain layer - Pure scheduling logic, no I/O.
"""

from .all_day import consolidate_to_all_day, revert_all_day, will_consolidate
from .intervals import find_first_overlap, is_all_day, is_contained, is_ordered, to_minutes
from .limit_editor import LimitEditorSession, commit_limits, validate_limits
from .models import (
    Channel,
    DateRange,
    DaySetting,
    LimitType,
    OperatingHours,
    Schedule,
    Time,
    TimeRange,
    TimeSlotLimit,
)
from .results import CommitResult, DayEditResult, EditOutcome, ValidationReport
from .window_generator import WindowGenerator

__all__ = [
    "Channel",
    "CommitResult",
    "DateRange",
    "DayEditResult",
    "DaySetting",
    "EditOutcome",
    "LimitEditorSession",
    "LimitType",
    "OperatingHours",
    "Schedule",
    "Time",
    "TimeRange",
    "TimeSlotLimit",
    "ValidationReport",
    "WindowGenerator",
    "commit_limits",
    "consolidate_to_all_day",
    "find_first_overlap",
    "is_all_day",
    "is_contained",
    "is_ordered",
    "revert_all_day",
    "to_minutes",
    "validate_limits",
    "will_consolidate",
]
