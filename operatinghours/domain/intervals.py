"""
Interval validation and overlap detection.

Intervals are closed-open: ``09:00-10:00`` and ``10:00-11:00`` touch but do
not overlap.
"""

from dataclasses import dataclass
from typing import List, Sequence

from .models import Time, TimeRange


def to_minutes(time: Time) -> int:
    """Return ``hour * 60 + minute`` (0..2879)."""
    return time.to_minutes()


def is_all_day(time_range: TimeRange) -> bool:
    """True iff the range is exactly 00:00 - 23:59."""
    return time_range.is_all_day()


def is_ordered(time_range: TimeRange) -> bool:
    """True iff the range ends strictly after it starts."""
    return to_minutes(time_range.end) > to_minutes(time_range.start)


def is_contained(inner: TimeRange, outer: TimeRange) -> bool:
    """True iff ``inner`` lies within the bounds of ``outer``."""
    return (
        to_minutes(inner.start) >= to_minutes(outer.start)
        and to_minutes(inner.end) <= to_minutes(outer.end)
    )


@dataclass(frozen=True)
class IndexedInterval:
    """An interval tagged with its position in the caller's unsorted list."""
    origin_index: int
    start: int
    end: int


@dataclass(frozen=True)
class Overlap:
    """
    First conflicting pair found by ``find_first_overlap``.

    ``first`` and ``second`` are 0-based origin indices; ``first`` is the
    interval that starts earlier.
    """
    first: int
    second: int

    def positions(self) -> tuple:
        """1-based positions for human-readable messages."""
        return self.first + 1, self.second + 1


def index_intervals(ranges: Sequence[TimeRange]) -> List[IndexedInterval]:
    """Tag each range with its origin index and convert it to minutes."""
    return [
        IndexedInterval(
            origin_index=index,
            start=to_minutes(time_range.start),
            end=to_minutes(time_range.end),
        )
        for index, time_range in enumerate(ranges)
    ]


def sort_by_start(intervals: Sequence[IndexedInterval]) -> List[IndexedInterval]:
    """Sort by start minute; ``sorted`` is stable so ties keep origin order."""
    return sorted(intervals, key=lambda interval: interval.start)


def find_first_overlap(ranges: Sequence[TimeRange]) -> Overlap | None:
    """
    Return the first overlapping pair in start order, or None.

    Only adjacent pairs are compared after sorting. That is enough to detect
    any overlap as long as every range is well-ordered, so ill-ordered
    ranges should be rejected with ``is_ordered`` first.
    """
    if len(ranges) < 2:
        return None

    sorted_intervals = sort_by_start(index_intervals(ranges))

    for previous, current in zip(sorted_intervals, sorted_intervals[1:]):
        if current.start < previous.end:
            return Overlap(first=previous.origin_index, second=current.origin_index)

    return None


def overlaps(first: TimeRange, second: TimeRange) -> bool:
    """Check if two well-ordered ranges overlap."""
    return (
        to_minutes(first.start) < to_minutes(second.end)
        and to_minutes(second.start) < to_minutes(first.end)
    )
