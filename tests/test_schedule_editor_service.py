"""
Tests for the ScheduleEditorService orchestration layer.
"""

from dataclasses import replace

import pytest

from operatinghours.config import AppConfig
from operatinghours.domain.exceptions import ScheduleNotFoundError
from operatinghours.domain.ids import CounterIdSource
from operatinghours.domain.models import Channel, Time, TimeRange, TimeSlotLimit
from operatinghours.domain.results import EditOutcome
from operatinghours.services.schedule_editor import ScheduleEditorService


def _build_service(config: AppConfig | None = None) -> ScheduleEditorService:
    return ScheduleEditorService(config=config, id_source=CounterIdSource(start=1))


def test_add_window_replaces_only_that_day():
    """Adding a window returns a new week with the other days untouched."""
    service = _build_service()
    week = service.default_week()

    new_week, result = service.add_window(week, 2)

    assert result.applied
    assert len(new_week[2].operating_hours) == 2
    assert len(week[2].operating_hours) == 1
    assert new_week[0] is week[0]
    assert new_week[2].operating_hours[1].time_range == TimeRange(Time(18, 0), Time(19, 0))


def test_refused_edit_returns_same_week():
    service = _build_service()
    week = service.default_week()
    window_id = week[0].operating_hours[0].id

    new_week, result = service.remove_window(week, 0, window_id)

    assert result.outcome is EditOutcome.REFUSED
    assert new_week is week


def test_all_day_two_phase_protocol():
    """Consolidation needs a second, confirmed call when windows would be lost."""
    service = _build_service()
    week, _ = service.add_window(service.default_week(), 0)
    week, _ = service.add_window(week, 0)
    target = week[0].operating_hours[1].id

    unchanged, first = service.request_all_day(week, 0, target)
    assert first.outcome is EditOutcome.NEEDS_CONFIRMATION
    assert first.will_discard == 2
    assert unchanged is week

    consolidated, second = service.request_all_day(week, 0, target, confirmed=True)
    assert second.applied
    assert [w.id for w in consolidated[0].operating_hours] == [target]

    blocked, third = service.add_window(consolidated, 0)
    assert third.outcome is EditOutcome.REFUSED
    assert blocked is consolidated

    reverted, _ = service.revert_all_day(consolidated, 0, target)
    assert reverted[0].operating_hours[0].time_range == TimeRange(Time(9, 30), Time(18, 0))


def test_save_limits_commits_into_week():
    """An accepted session replaces the channel's limits in the week."""
    service = _build_service()
    week = service.default_week()
    window_id = week[1].operating_hours[0].id

    session = service.open_limit_editor(week, 1, window_id, Channel.DELIVERY)
    seeded_id = session.limits[0].id
    session.update_time(seeded_id, "end", "hour", 14)
    session.add_limit()

    new_week, result = service.save_limits(week, 1, window_id, Channel.DELIVERY, session)

    assert result.accepted
    delivery = new_week[1].operating_hours[0].delivery
    assert [limit.interval for limit in delivery.limits] == [
        TimeRange(Time(10, 0), Time(14, 0)),
        TimeRange(Time(14, 0), Time(20, 0)),
    ]
    assert new_week[1].operating_hours[0].pickup.limits == ()


def test_rejected_limits_leave_week_unchanged():
    service = _build_service()
    week = service.default_week()
    window_id = week[0].operating_hours[0].id

    session = service.open_limit_editor(week, 0, window_id, Channel.PICKUP)
    session.update_time(session.limits[0].id, "start", "hour", 8)

    new_week, result = service.save_limits(week, 0, window_id, Channel.PICKUP, session)

    assert not result.accepted
    assert new_week is week


def test_limit_editor_uses_configured_seed():
    config = AppConfig(limits={"limit_type": "item", "limit_value": 6})
    service = _build_service(config)
    week = service.default_week()

    session = service.open_limit_editor(week, 0, week[0].operating_hours[0].id, Channel.PICKUP)

    assert session.limits[0].limit_value == 6
    assert session.limits[0].limit_type.value == "item"


def test_unknown_day_or_window_raises():
    service = _build_service()
    week = service.default_week()

    with pytest.raises(ScheduleNotFoundError):
        service.add_window(week, 7)
    with pytest.raises(ScheduleNotFoundError):
        service.open_limit_editor(week, 0, 999, Channel.PICKUP)


def test_validate_week_collects_warnings_and_errors():
    """Warnings do not block; invalid limits do."""
    service = _build_service()
    week = service.default_week()
    window = week[0].operating_hours[0]
    bad_limit = TimeSlotLimit(id=77, interval=TimeRange(Time(8, 0), Time(9, 0)))
    window = replace(
        window,
        time_range=TimeRange(Time(18, 0), Time(9, 0)),
        pickup=window.pickup.with_limits([bad_limit]),
    )
    week = (week[0].with_windows([window]), *week[1:])

    report = service.validate_week(week)

    assert len(report.warnings) == 1
    assert report.has_blocking_errors
    invalid = report.invalid_channels()
    assert len(invalid) == 1
    assert invalid[0].channel is Channel.PICKUP
    assert invalid[0].window_position == 1


def test_validate_week_skips_closed_days():
    service = _build_service()
    week = service.set_day_open(service.default_week(), 0, False)

    report = service.validate_week(week)

    assert all(entry.day != week[0].day for entry in report.channel_reports)
    assert not report.has_blocking_errors


def test_copy_first_day_and_update_window_time():
    service = _build_service()
    week = service.default_week()
    first_id = week[0].operating_hours[0].id

    week, result = service.update_window_time(week, 0, first_id, "start", "minute", 0)
    copied = service.copy_first_day(week)

    assert result.applied
    assert all(day.operating_hours[0].time_range.start == Time(9, 0) for day in copied)


def test_update_window_time_to_all_day_needs_confirmation():
    """An edit reaching 00:00 - 23:59 next to other windows leaves the week as is."""
    service = _build_service()
    week, _ = service.add_window(service.default_week(), 0)
    first_id = week[0].operating_hours[0].id

    week, _ = service.update_window_time(week, 0, first_id, "start", "hour", 0)
    week, _ = service.update_window_time(week, 0, first_id, "start", "minute", 0)
    week, _ = service.update_window_time(week, 0, first_id, "end", "hour", 23)
    unchanged, result = service.update_window_time(week, 0, first_id, "end", "minute", 59)

    assert result.outcome is EditOutcome.NEEDS_CONFIRMATION
    assert result.will_discard == 1
    assert unchanged is week

    consolidated, confirmed = service.request_all_day(week, 0, first_id, confirmed=True)
    assert confirmed.applied
    assert len(consolidated[0].operating_hours) == 1
    assert consolidated[0].has_all_day_window()


def test_update_channel_time_and_dates():
    service = _build_service()
    week = service.default_week()
    window_id = week[3].operating_hours[0].id

    week, times = service.update_channel_time(
        week, 3, window_id, Channel.DELIVERY, "pickup_time", "end", "hour", 22
    )
    week, cutoff = service.update_channel_time(
        week, 3, window_id, Channel.DELIVERY, "cutoff_time", None, "minute", 0
    )
    week, dates = service.update_channel_dates(
        week, 3, window_id, Channel.PICKUP, "start", "tomorrow"
    )

    assert times.applied and cutoff.applied and dates.applied
    window = week[3].operating_hours[0]
    assert window.delivery.pickup_time == TimeRange(Time(10, 0), Time(22, 0))
    assert window.delivery.cutoff_time == Time(19, 0)
    assert window.pickup.date_range.start == "tomorrow"
    assert week[2].operating_hours[0].pickup.date_range.start == "in 7 days"


def test_update_channel_time_unknown_window_raises():
    service = _build_service()
    week = service.default_week()

    with pytest.raises(ScheduleNotFoundError):
        service.update_channel_dates(week, 0, 999, Channel.PICKUP, "end", "today")


def test_limit_editor_honours_new_pickup_time():
    """A session opened after a pickup time edit validates against the new range."""
    service = _build_service()
    week = service.default_week()
    window_id = week[0].operating_hours[0].id
    week, _ = service.update_channel_time(
        week, 0, window_id, Channel.PICKUP, "pickup_time", "start", "hour", 8
    )

    session = service.open_limit_editor(week, 0, window_id, Channel.PICKUP)

    assert session.constraint == TimeRange(Time(8, 0), Time(20, 0))
    assert session.limits[0].interval == TimeRange(Time(8, 0), Time(20, 0))


def test_save_limits_rejects_session_for_other_pickup_time():
    """A session opened against another channel's pickup time cannot be saved."""
    service = _build_service()
    week = service.default_week()
    window_id = week[0].operating_hours[0].id
    week, _ = service.update_channel_time(
        week, 0, window_id, Channel.DELIVERY, "pickup_time", "end", "hour", 16
    )
    session = service.open_limit_editor(week, 0, window_id, Channel.PICKUP)

    with pytest.raises(ValueError, match="pickup time"):
        service.save_limits(week, 0, window_id, Channel.DELIVERY, session)


def test_save_limits_rejects_stale_session():
    """Editing the pickup time after opening a session makes the session stale."""
    service = _build_service()
    week = service.default_week()
    window_id = week[0].operating_hours[0].id
    session = service.open_limit_editor(week, 0, window_id, Channel.PICKUP)
    week, _ = service.update_channel_time(
        week, 0, window_id, Channel.PICKUP, "pickup_time", "start", "hour", 12
    )

    with pytest.raises(ValueError):
        service.save_limits(week, 0, window_id, Channel.PICKUP, session)


def test_default_clock_uses_configured_timezone():
    """Notices expire against a clock in the configured timezone."""
    service = ScheduleEditorService(
        config=AppConfig(timezone="Asia/Tokyo"), id_source=CounterIdSource(start=1)
    )
    week = service.default_week()
    session = service.open_limit_editor(week, 0, week[0].operating_hours[0].id, Channel.PICKUP)

    assert session.add_limit() is False
    assert session._notices[0].expires_at.timezone_name == "Asia/Tokyo"
