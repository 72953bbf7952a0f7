"""
Generation of the next operating window of a day.

Pure domain logic: the only outside input is the id source used for the
new window.
"""

import logging
from dataclasses import replace
from typing import Optional

from .ids import IdSource
from .intervals import to_minutes
from .models import MAX_HOUR, MAX_MINUTES, DaySetting, OperatingHours, Time, TimeRange
from .results import DayEditResult
from .weekly import default_operating_hours

logger = logging.getLogger(__name__)


def shift_range(last_end: Time) -> TimeRange:
    """
    Derive a one-hour range starting where the previous one ended.

    The end hour is clamped to 47. If clamping collapses the range (e.g. a
    start of 47:30 gives an end of 47:30) the end becomes 47:59 instead.

    Example: 23:00 -> 23:00 - 24:00
    """
    start = Time(hour=last_end.hour, minute=last_end.minute)
    end = Time(hour=min(start.hour + 1, MAX_HOUR), minute=start.minute)

    if to_minutes(end) <= to_minutes(start):
        end = Time.from_minutes(MAX_MINUTES)

    return TimeRange(start=start, end=end)


class WindowGenerator:
    """
    Appends a new window after the last one of a day.

    Algorithm:
    1. Refuse if any window is all-day
    2. Refuse if the last window already ends at 47:59
    3. Shift the last window's range by one hour (clamped)
    4. Shift each channel's pickup time the same way from its own end
    5. Copy channel settings, drop limits, assign a fresh id
    """

    def __init__(self, id_source: IdSource, template: Optional[OperatingHours] = None):
        self.id_source = id_source
        self.template = template or default_operating_hours(window_id=0)

    def generate_next_window(self, day: DaySetting) -> DayEditResult:
        """
        Return the day with one more window, or the unchanged day if there
        is no room for one.
        """
        if day.has_all_day_window():
            logger.info("Not adding a window to %s: an all-day window exists", day.day)
            return DayEditResult.refused(day, "all-day window exists")

        if not day.operating_hours:
            window = replace(self.template, id=self.id_source.next_id())
            logger.debug("Seeded %s with default window %s", day.day, window.id)
            return DayEditResult.applied_to(day.with_windows([window]))

        last_window = day.operating_hours[-1]

        if to_minutes(last_window.time_range.end) >= MAX_MINUTES:
            logger.info("Not adding a window to %s: last window ends at 47:59", day.day)
            return DayEditResult.refused(day, "no room left in the 48-hour day")

        new_window = self._next_window(last_window)
        logger.debug("Added window %s (%s) to %s", new_window.id, new_window.time_range, day.day)

        return DayEditResult.applied_to(
            day.with_windows([*day.operating_hours, new_window])
        )

    def _next_window(self, last_window: OperatingHours) -> OperatingHours:
        """
        Build the follow-up window.

        Limits are cleared on both channels because their containment
        constraint moves with the new pickup time.
        """
        pickup = replace(
            last_window.pickup,
            pickup_time=shift_range(last_window.pickup.pickup_time.end),
            limits=(),
        )
        delivery = replace(
            last_window.delivery,
            pickup_time=shift_range(last_window.delivery.pickup_time.end),
            limits=(),
        )

        return OperatingHours(
            id=self.id_source.next_id(),
            time_range=shift_range(last_window.time_range.end),
            pickup=pickup,
            delivery=delivery,
        )
