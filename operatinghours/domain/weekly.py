"""
Week-level operations: default week, open/closed days, window removal and
copying one day's windows to the rest of the week.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from .ids import IdSource
from .intervals import is_ordered
from .models import (
    Channel,
    DateRange,
    DaySetting,
    OperatingHours,
    Schedule,
    Time,
    TimeRange,
    TimeSlotLimit,
)
from .options import date_range_labels
from .results import DayEditResult, EditOutcome

logger = logging.getLogger(__name__)

Week = Tuple[DaySetting, ...]

DAYS_OF_WEEK = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


def default_operating_hours(window_id: int) -> OperatingHours:
    """The window every new day starts with: 09:30 - 18:00, no limits."""
    return OperatingHours(
        id=window_id,
        time_range=TimeRange(start=Time(9, 30), end=Time(18, 0)),
        pickup=Schedule(
            date_range=DateRange(start="in 7 days", end="in 9 days"),
            pickup_time=TimeRange(start=Time(10, 0), end=Time(20, 0)),
            cutoff_time=Time(19, 30),
        ),
        delivery=Schedule(
            date_range=DateRange(start="in 3 days", end="in 10 days"),
            pickup_time=TimeRange(start=Time(10, 0), end=Time(20, 0)),
            cutoff_time=Time(19, 30),
        ),
    )


def default_week(
    id_source: IdSource,
    days: Sequence[str] = DAYS_OF_WEEK,
    template: OperatingHours | None = None,
) -> Week:
    """
    Build a week where every day is open with one default window.

    Each day gets its own copy of the template under a fresh id.
    """
    template = template or default_operating_hours(window_id=0)
    return tuple(
        DaySetting(
            day=day,
            is_open=True,
            operating_hours=(replace(template, id=id_source.next_id()),),
        )
        for day in days
    )


def toggle_day_open(week: Week, day_index: int, is_open: bool) -> Week:
    """Return the week with one day's open flag set."""
    days = list(week)
    days[day_index] = replace(days[day_index], is_open=is_open)
    return tuple(days)


def replace_window(day: DaySetting, window: OperatingHours) -> DaySetting:
    """Swap the window that has the same id. Unknown ids leave the day as is."""
    return day.with_windows(
        window if existing.id == window.id else existing
        for existing in day.operating_hours
    )


def remove_window(day: DaySetting, window_id: int) -> DayEditResult:
    """
    Remove a window by id.

    The first window of a day is its anchor and cannot be removed.
    """
    if not day.operating_hours or day.operating_hours[0].id == window_id:
        logger.info("Refusing to remove the first window of %s", day.day)
        return DayEditResult.refused(day, "the first window of a day cannot be removed")

    if day.find_window(window_id) is None:
        return DayEditResult.refused(day, f"unknown window {window_id}")

    return DayEditResult.applied_to(
        day.with_windows(w for w in day.operating_hours if w.id != window_id)
    )


def _time_part(field: str, part: str) -> None:
    if field not in ("start", "end") or part not in ("hour", "minute"):
        raise ValueError(f"Unknown time field {field}.{part}")


def update_window_range(
    day: DaySetting,
    window_id: int,
    field: str,
    part: str,
    value: int,
) -> DayEditResult:
    """
    Change one part ('hour' or 'minute') of a window's 'start' or 'end'.

    No ordering check happens here; an ill-ordered window is only a warning
    (see ``window_warnings``). An edit that lands exactly on 00:00 - 23:59 in
    a day with other windows would discard them, so the day is left as is
    and NEEDS_CONFIRMATION is returned; confirm with
    ``all_day.consolidate_to_all_day(day, window_id, confirmed=True)``.
    """
    _time_part(field, part)

    window = day.find_window(window_id)
    if window is None:
        return DayEditResult.refused(day, f"unknown window {window_id}")

    current = getattr(window.time_range, field)
    new_time = replace(current, **{part: value})
    new_range = replace(window.time_range, **{field: new_time})

    others = len(day.operating_hours) - 1
    if new_range.is_all_day() and others > 0:
        return DayEditResult(
            day=day,
            outcome=EditOutcome.NEEDS_CONFIRMATION,
            reason=f"will discard {others} other window(s)",
            will_discard=others,
        )

    return DayEditResult.applied_to(
        replace_window(day, replace(window, time_range=new_range))
    )


def update_channel_time(
    day: DaySetting,
    window_id: int,
    channel: Channel,
    target: str,
    field: Optional[str],
    part: str,
    value: int,
) -> DayEditResult:
    """
    Change one part of a channel's 'pickup_time' or 'cutoff_time'.

    ``field`` selects 'start' or 'end' of the pickup time and must be None
    for the cutoff time. Existing limits are kept; they are checked against
    the new pickup time the next time they are saved.
    """
    window = day.find_window(window_id)
    if window is None:
        return DayEditResult.refused(day, f"unknown window {window_id}")

    schedule = window.schedule_for(channel)

    if target == "pickup_time":
        _time_part(field, part)
        new_time = replace(getattr(schedule.pickup_time, field), **{part: value})
        schedule = replace(
            schedule, pickup_time=replace(schedule.pickup_time, **{field: new_time})
        )
    elif target == "cutoff_time" and field is None and part in ("hour", "minute"):
        schedule = replace(schedule, cutoff_time=replace(schedule.cutoff_time, **{part: value}))
    else:
        raise ValueError(f"Unknown channel time {target}.{field}.{part}")

    return DayEditResult.applied_to(
        replace_window(day, window.with_schedule(channel, schedule))
    )


def update_channel_dates(
    day: DaySetting,
    window_id: int,
    channel: Channel,
    field: str,
    label: str,
) -> DayEditResult:
    """Change the 'start' or 'end' label of a channel's date range."""
    if field not in ("start", "end"):
        raise ValueError(f"Unknown date range field {field}")
    if label not in date_range_labels():
        raise ValueError(f"Unknown date label '{label}'")

    window = day.find_window(window_id)
    if window is None:
        return DayEditResult.refused(day, f"unknown window {window_id}")

    schedule = window.schedule_for(channel)
    schedule = replace(schedule, date_range=replace(schedule.date_range, **{field: label}))

    return DayEditResult.applied_to(
        replace_window(day, window.with_schedule(channel, schedule))
    )


def with_channel_limits(
    window: OperatingHours,
    channel: Channel,
    limits: Sequence[TimeSlotLimit],
) -> OperatingHours:
    """Return the window with one channel's limits replaced."""
    schedule = window.schedule_for(channel)
    return window.with_schedule(channel, schedule.with_limits(limits))


def copy_first_day_to_all(week: Week, id_source: IdSource) -> Week:
    """
    Copy the first day's open flag and windows to every other day.

    Copied windows and their limits get fresh ids so no two days share one.
    """
    if not week:
        return week

    first = week[0]
    copied: List[DaySetting] = [first]

    for day in week[1:]:
        windows = [_copy_window(w, id_source) for w in first.operating_hours]
        copied.append(replace(day, is_open=first.is_open, operating_hours=tuple(windows)))

    return tuple(copied)


def window_warnings(day: DaySetting) -> List[str]:
    """
    Advisory messages for windows whose end is not after their start.

    An all-day window is never ill-ordered; it is flagged only when it shares
    its day with other windows.
    """
    warnings: List[str] = []
    for position, window in enumerate(day.operating_hours, 1):
        if window.time_range.is_all_day():
            if len(day.operating_hours) > 1:
                warnings.append(
                    f"{day.day} window {position} ({window.time_range}): "
                    "an all-day window must be the only window of the day"
                )
            continue
        if not is_ordered(window.time_range):
            warnings.append(
                f"{day.day} window {position} ({window.time_range}): "
                "end time must be later than start time"
            )
    return warnings


def _copy_window(window: OperatingHours, id_source: IdSource) -> OperatingHours:
    copied = replace(window, id=id_source.next_id())
    for channel in Channel:
        schedule = copied.schedule_for(channel)
        limits = [replace(limit, id=id_source.next_id()) for limit in schedule.limits]
        copied = copied.with_schedule(channel, schedule.with_limits(limits))
    return copied
