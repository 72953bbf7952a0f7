"""
Tests for all-day consolidation.
"""

from dataclasses import replace

from operatinghours.domain.all_day import consolidate_to_all_day, revert_all_day, will_consolidate
from operatinghours.domain.models import DaySetting, Time, TimeRange, TimeSlotLimit
from operatinghours.domain.results import EditOutcome
from operatinghours.domain.weekly import default_operating_hours

ALL_DAY = TimeRange(Time(0, 0), Time(23, 59))


def _three_window_day() -> DaySetting:
    windows = []
    for window_id, (start, end) in enumerate(((8, 10), (11, 14), (15, 18)), 1):
        window = default_operating_hours(window_id)
        limit = TimeSlotLimit(id=window_id * 10, interval=TimeRange(Time(10, 0), Time(11, 0)))
        windows.append(
            replace(
                window,
                time_range=TimeRange(Time(start, 0), Time(end, 0)),
                pickup=window.pickup.with_limits([limit]),
            )
        )
    return DaySetting(day="Tuesday", operating_hours=windows)


class TestConsolidation:
    """Tests for consolidate_to_all_day."""

    def test_single_window_becomes_all_day(self):
        """Test that a lone window is switched without confirmation."""
        day = DaySetting(day="Monday", operating_hours=[default_operating_hours(1)])

        result = consolidate_to_all_day(day, 1)

        assert result.outcome is EditOutcome.APPLIED
        assert result.day.operating_hours[0].time_range == ALL_DAY

    def test_multiple_windows_need_confirmation(self):
        """Test the first phase reports how many windows would be discarded."""
        day = _three_window_day()

        result = consolidate_to_all_day(day, 2)

        assert result.outcome is EditOutcome.NEEDS_CONFIRMATION
        assert result.will_discard == 2
        assert result.day is day

    def test_confirmed_consolidation_keeps_target_window(self):
        """Test that confirming keeps only window 2 with its own limits."""
        day = _three_window_day()
        original = day.operating_hours[1]

        result = consolidate_to_all_day(day, 2, confirmed=True)

        assert result.applied
        assert len(result.day.operating_hours) == 1
        kept = result.day.operating_hours[0]
        assert kept.id == 2
        assert kept.time_range == ALL_DAY
        assert kept.pickup == original.pickup
        assert kept.delivery == original.delivery

    def test_already_all_day_is_noop(self):
        """Test that consolidating an all-day window changes nothing."""
        window = replace(default_operating_hours(1), time_range=ALL_DAY)
        day = DaySetting(day="Monday", operating_hours=[window])

        result = consolidate_to_all_day(day, 1, confirmed=True)

        assert result.outcome is EditOutcome.REFUSED
        assert result.day is day

    def test_unknown_window_is_refused(self):
        day = _three_window_day()

        assert consolidate_to_all_day(day, 99).outcome is EditOutcome.REFUSED

    def test_will_consolidate_flag(self):
        """Test the discard count offered before the toggle."""
        day = _three_window_day()

        assert will_consolidate(day, 1) == 2
        assert will_consolidate(DaySetting(day="x", operating_hours=[default_operating_hours(1)]), 1) == 0
        assert will_consolidate(day, 99) == 0


class TestRevertAllDay:
    """Tests for revert_all_day."""

    def test_revert_resets_to_default_business_hours(self):
        """Test that unchecking all-day yields 09:30 - 18:00."""
        window = replace(default_operating_hours(1), time_range=ALL_DAY)
        day = DaySetting(day="Monday", operating_hours=[window])

        result = revert_all_day(day, 1)

        assert result.applied
        assert result.day.operating_hours[0].time_range == TimeRange(Time(9, 30), Time(18, 0))

    def test_revert_ignores_previous_range(self):
        """Test that the range before all-day is not restored."""
        day = _three_window_day()
        consolidated = consolidate_to_all_day(day, 3, confirmed=True).day

        reverted = revert_all_day(consolidated, 3).day

        assert reverted.operating_hours[0].time_range == TimeRange(Time(9, 30), Time(18, 0))
        assert len(reverted.operating_hours) == 1
