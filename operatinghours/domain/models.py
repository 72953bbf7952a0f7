"""
Domain models for weekly operating hours and time-slot capacity limits.

All models are immutable. Edits build new values with ``dataclasses.replace``
so a caller can hold on to an old week while the engine produces a new one.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple

MAX_HOUR = 47
MAX_MINUTE = 59
MAX_MINUTES = MAX_HOUR * 60 + MAX_MINUTE  # 47:59, last addressable minute
HOURS_PER_DAY = 24

REPEATING_INTERVALS = (15, 30, 45, 60)


@dataclass(frozen=True, order=True)
class Time:
    """
    Minute-precision time of day over a 48-hour addressable range.

    Hours 24..47 belong to the following day.
    """
    hour: int
    minute: int = 0

    def __post_init__(self):
        if not 0 <= self.hour <= MAX_HOUR:
            raise ValueError(f"Hour must be between 0 and {MAX_HOUR}, got {self.hour}")
        if not 0 <= self.minute <= MAX_MINUTE:
            raise ValueError(f"Minute must be between 0 and {MAX_MINUTE}, got {self.minute}")

    @classmethod
    def from_minutes(cls, minutes: int) -> "Time":
        """Build a time from an absolute minute offset (0..2879)."""
        return cls(hour=minutes // 60, minute=minutes % 60)

    def to_minutes(self) -> int:
        """Return the absolute minute offset from midnight of the current day."""
        return self.hour * 60 + self.minute

    @property
    def day_offset(self) -> int:
        return self.hour // HOURS_PER_DAY

    def __str__(self) -> str:
        return format_time(self)


ALL_DAY_START = Time(0, 0)
ALL_DAY_END = Time(23, 59)


@dataclass(frozen=True)
class TimeRange:
    """
    A start/end pair of times.

    Unlike most range types this one does not enforce ``start < end``: an
    operating window may be ill-ordered while the user is still editing it.
    Consumers decide how strict to be (see ``intervals.is_ordered``).
    """
    start: Time
    end: Time

    def duration_minutes(self) -> int:
        """Return the duration in minutes (negative when ill-ordered)."""
        return self.end.to_minutes() - self.start.to_minutes()

    def is_all_day(self) -> bool:
        """Exact match against 00:00 - 23:59."""
        return self.start == ALL_DAY_START and self.end == ALL_DAY_END

    def __str__(self) -> str:
        return f"{format_time(self.start)} - {format_time(self.end)}"


ALL_DAY_RANGE = TimeRange(start=ALL_DAY_START, end=ALL_DAY_END)
DEFAULT_BUSINESS_RANGE = TimeRange(start=Time(9, 30), end=Time(18, 0))


class LimitType(str, Enum):
    """What a capacity limit counts."""
    ORDER = "order"
    ITEM = "item"


class Channel(str, Enum):
    """Fulfilment channel that owns a schedule inside a window."""
    PICKUP = "pickup"
    DELIVERY = "delivery"


@dataclass(frozen=True)
class TimeSlotLimit:
    """
    A cap on orders or items over a sub-interval of a channel's pickup time.

    ``repeating_interval`` of ``0`` is accepted and stored as ``None``.
    """
    id: int
    interval: TimeRange
    limit_type: LimitType = LimitType.ORDER
    limit_value: int = 2
    repeating_interval: Optional[int] = None

    def __post_init__(self):
        if self.limit_value < 1:
            raise ValueError(f"Limit value must be at least 1, got {self.limit_value}")
        if self.repeating_interval == 0:
            object.__setattr__(self, "repeating_interval", None)
        elif (
            self.repeating_interval is not None
            and self.repeating_interval not in REPEATING_INTERVALS
        ):
            raise ValueError(
                f"Repeating interval must be one of {REPEATING_INTERVALS}, "
                f"got {self.repeating_interval}"
            )
        object.__setattr__(self, "limit_type", LimitType(self.limit_type))

    def describe(self) -> str:
        """
        Format the limit for display.
        Format: HH:MM - HH:MM: [every N min ]<type> limit <value>
        """
        repeat = f"every {self.repeating_interval} min " if self.repeating_interval else ""
        return f"{self.interval}: {repeat}{self.limit_type.value} limit {self.limit_value}"


@dataclass(frozen=True)
class DateRange:
    """Symbolic booking window, e.g. ``today`` .. ``in 9 days``."""
    start: str
    end: str


@dataclass(frozen=True)
class Schedule:
    """Per-channel configuration of one operating window."""
    date_range: DateRange
    pickup_time: TimeRange
    cutoff_time: Time
    limits: Tuple[TimeSlotLimit, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "limits", tuple(self.limits))

    def with_limits(self, limits) -> "Schedule":
        return replace(self, limits=tuple(limits))


@dataclass(frozen=True)
class OperatingHours:
    """One window of a day's business hours."""
    id: int
    time_range: TimeRange
    pickup: Schedule
    delivery: Schedule

    def schedule_for(self, channel: Channel) -> Schedule:
        """Return the schedule of the given channel."""
        return self.pickup if Channel(channel) is Channel.PICKUP else self.delivery

    def with_schedule(self, channel: Channel, schedule: Schedule) -> "OperatingHours":
        """Return a copy with one channel's schedule replaced."""
        return replace(self, **{Channel(channel).value: schedule})


@dataclass(frozen=True)
class DaySetting:
    """
    A day of the week with its ordered operating windows.

    Invariant (kept by the window generator and consolidation): a day with
    an all-day window has no other windows.
    """
    day: str
    is_open: bool = True
    operating_hours: Tuple[OperatingHours, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "operating_hours", tuple(self.operating_hours))

    def has_all_day_window(self) -> bool:
        return any(window.time_range.is_all_day() for window in self.operating_hours)

    def find_window(self, window_id: int) -> OperatingHours | None:
        """Find a window by id. Returns None if it does not exist."""
        for window in self.operating_hours:
            if window.id == window_id:
                return window
        return None

    def with_windows(self, windows) -> "DaySetting":
        return replace(self, operating_hours=tuple(windows))


def format_time(time: Time) -> str:
    """
    Format a time as ``HH:MM``, tagging next-day hours.

    Example: Time(25, 5) -> "01:05 (+1 day)"
    """
    display_hour = time.hour % HOURS_PER_DAY
    label = f"{display_hour:02d}:{time.minute:02d}"
    if time.day_offset > 0:
        label += f" (+{time.day_offset} day)"
    return label
