"""
Domain-specific exception hierarchy for the operating hours engine.

Refused edits are never raised; they come back as ``DayEditResult`` values.
"""


class OperatingHoursError(Exception):
    """Base class for all application-level errors."""


class ScheduleNotFoundError(OperatingHoursError):
    """Raised when a day index or window id does not exist in the week."""


class ScheduleFileError(OperatingHoursError):
    """Raised when a schedule document cannot be loaded or parsed."""
