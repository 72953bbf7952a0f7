"""
All-day consolidation and its (lossy) inverse.

Turning a window into an all-day window discards every other window of the
day, so with more than one window the caller has to confirm first:

    result = consolidate_to_all_day(day, window_id)
    if result.outcome is EditOutcome.NEEDS_CONFIRMATION:
        # ask the user about result.will_discard windows, then
        result = consolidate_to_all_day(day, window_id, confirmed=True)
"""

import logging
from dataclasses import replace

from .models import ALL_DAY_RANGE, DEFAULT_BUSINESS_RANGE, DaySetting
from .results import DayEditResult, EditOutcome
from .weekly import replace_window

logger = logging.getLogger(__name__)


def will_consolidate(day: DaySetting, window_id: int) -> int:
    """Number of other windows that making ``window_id`` all-day would discard."""
    window = day.find_window(window_id)
    if window is None or window.time_range.is_all_day():
        return 0
    return len(day.operating_hours) - 1


def consolidate_to_all_day(
    day: DaySetting,
    window_id: int,
    confirmed: bool = False,
) -> DayEditResult:
    """
    Make a window span 00:00 - 23:59.

    With other windows present the first call returns NEEDS_CONFIRMATION
    and the unchanged day; calling again with ``confirmed=True`` keeps the
    target window (limits and channels untouched) as the day's only window.
    """
    window = day.find_window(window_id)

    if window is None:
        return DayEditResult.refused(day, f"unknown window {window_id}")

    if window.time_range.is_all_day():
        return DayEditResult.refused(day, "window is already all-day")

    all_day_window = replace(window, time_range=ALL_DAY_RANGE)
    discard = will_consolidate(day, window_id)

    if discard == 0:
        return DayEditResult.applied_to(day.with_windows([all_day_window]))

    if not confirmed:
        return DayEditResult(
            day=day,
            outcome=EditOutcome.NEEDS_CONFIRMATION,
            reason=f"will discard {discard} other window(s)",
            will_discard=discard,
        )

    logger.info(
        "Consolidating %s to all-day window %s, discarding %d window(s)",
        day.day,
        window_id,
        discard,
    )
    return DayEditResult.applied_to(day.with_windows([all_day_window]))


def revert_all_day(day: DaySetting, window_id: int) -> DayEditResult:
    """
    Leave all-day mode by resetting the window to 09:30 - 18:00.

    The range before consolidation is not remembered.
    """
    window = day.find_window(window_id)
    if window is None:
        return DayEditResult.refused(day, f"unknown window {window_id}")

    reverted = replace(window, time_range=DEFAULT_BUSINESS_RANGE)
    return DayEditResult.applied_to(replace_window(day, reverted))
