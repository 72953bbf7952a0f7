"""
Application service for editing a weekly schedule.

The service applies domain operations to one day of a week and hands back a
new week. The caller owns the week and replaces it wholesale after every
edit; the service keeps no schedule state of its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from pendulum import DateTime

from ..config import AppConfig, build_default_week
from ..domain import all_day, weekly
from ..domain.exceptions import ScheduleNotFoundError
from ..domain.ids import IdSource, MonotonicIdSource
from ..domain.limit_editor import LimitEditorSession, validate_limits
from ..domain.models import Channel, DaySetting, OperatingHours
from ..domain.results import CommitResult, DayEditResult, ValidationReport
from ..domain.weekly import Week
from ..domain.window_generator import WindowGenerator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChannelReport:
    """Validation result of one channel's limits."""
    day: str
    window_position: int
    channel: Channel
    report: ValidationReport


@dataclass
class WeekReport:
    """Advisory warnings and blocking limit errors for a whole week."""
    warnings: List[str] = field(default_factory=list)
    channel_reports: List[ChannelReport] = field(default_factory=list)

    @property
    def has_blocking_errors(self) -> bool:
        return any(not entry.report.is_valid for entry in self.channel_reports)

    def invalid_channels(self) -> List[ChannelReport]:
        return [entry for entry in self.channel_reports if not entry.report.is_valid]


class ScheduleEditorService:
    """
    Orchestrates window and limit edits on a week.

    Every edit method returns ``(new_week, result)``. When the result is not
    applied the returned week is the input week.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        id_source: Optional[IdSource] = None,
        clock: Optional[Callable[[], DateTime]] = None,
    ) -> None:
        self._config = config or AppConfig()
        self._clock = clock or self._config.now
        self._id_source = id_source or MonotonicIdSource(clock=self._clock)
        self._generator = WindowGenerator(
            id_source=self._id_source,
            template=self._config.default_window(0),
        )

    def default_week(self) -> Week:
        return build_default_week(self._config, self._id_source)

    def add_window(self, week: Week, day_index: int) -> Tuple[Week, DayEditResult]:
        """Append the next window to a day."""
        result = self._generator.generate_next_window(self._day(week, day_index))
        return self._apply(week, day_index, result), result

    def request_all_day(
        self,
        week: Week,
        day_index: int,
        window_id: int,
        confirmed: bool = False,
    ) -> Tuple[Week, DayEditResult]:
        """
        Make a window all-day.

        Without ``confirmed`` a day with several windows is left unchanged and
        the result reports how many windows would be discarded.
        """
        result = all_day.consolidate_to_all_day(
            self._day(week, day_index), window_id, confirmed=confirmed
        )
        return self._apply(week, day_index, result), result

    def revert_all_day(
        self, week: Week, day_index: int, window_id: int
    ) -> Tuple[Week, DayEditResult]:
        result = all_day.revert_all_day(self._day(week, day_index), window_id)
        return self._apply(week, day_index, result), result

    def remove_window(
        self, week: Week, day_index: int, window_id: int
    ) -> Tuple[Week, DayEditResult]:
        result = weekly.remove_window(self._day(week, day_index), window_id)
        return self._apply(week, day_index, result), result

    def update_window_time(
        self,
        week: Week,
        day_index: int,
        window_id: int,
        field_name: str,
        part: str,
        value: int,
    ) -> Tuple[Week, DayEditResult]:
        """
        Change one hour/minute of a window; ill-ordered ranges only warn.

        An edit that would make the window all-day next to other windows needs
        confirmation through ``request_all_day(..., confirmed=True)``.
        """
        result = weekly.update_window_range(
            self._day(week, day_index), window_id, field_name, part, value
        )
        for warning in weekly.window_warnings(result.day):
            logger.warning(warning)
        return self._apply(week, day_index, result), result

    def update_channel_time(
        self,
        week: Week,
        day_index: int,
        window_id: int,
        channel: Channel,
        target: str,
        field_name: Optional[str],
        part: str,
        value: int,
    ) -> Tuple[Week, DayEditResult]:
        """Change one hour/minute of a channel's pickup time or cutoff time."""
        self._window(week, day_index, window_id)
        result = weekly.update_channel_time(
            week[day_index], window_id, channel, target, field_name, part, value
        )
        return self._apply(week, day_index, result), result

    def update_channel_dates(
        self,
        week: Week,
        day_index: int,
        window_id: int,
        channel: Channel,
        field_name: str,
        label: str,
    ) -> Tuple[Week, DayEditResult]:
        """Set the start or end label of a channel's date range."""
        self._window(week, day_index, window_id)
        result = weekly.update_channel_dates(
            week[day_index], window_id, channel, field_name, label
        )
        return self._apply(week, day_index, result), result

    def set_day_open(self, week: Week, day_index: int, is_open: bool) -> Week:
        self._day(week, day_index)
        return weekly.toggle_day_open(week, day_index, is_open)

    def copy_first_day(self, week: Week) -> Week:
        """Copy the first day's windows to the rest of the week."""
        return weekly.copy_first_day_to_all(week, self._id_source)

    def open_limit_editor(
        self,
        week: Week,
        day_index: int,
        window_id: int,
        channel: Channel,
    ) -> LimitEditorSession:
        """Start an editing session on one channel's limits."""
        window = self._window(week, day_index, window_id)
        schedule = window.schedule_for(channel)
        defaults = self._config.limits

        return LimitEditorSession(
            initial_limits=schedule.limits,
            constraint=schedule.pickup_time,
            id_source=self._id_source,
            clock=self._clock,
            notice_seconds=defaults.notice_seconds,
            seed_type=defaults.limit_type,
            seed_value=defaults.limit_value,
        )

    def save_limits(
        self,
        week: Week,
        day_index: int,
        window_id: int,
        channel: Channel,
        session: LimitEditorSession,
    ) -> Tuple[Week, CommitResult]:
        """
        Commit a session's limits into the week.

        A rejected commit leaves the week as it was. The session must have been
        opened against the channel's current pickup time.
        """
        window = self._window(week, day_index, window_id)
        pickup_time = window.schedule_for(channel).pickup_time
        if session.constraint != pickup_time:
            raise ValueError(
                f"Session was opened for pickup time {session.constraint}, "
                f"but the {Channel(channel).value} pickup time is {pickup_time}"
            )
        result = session.save()

        if not result.accepted:
            return week, result

        updated = weekly.with_channel_limits(window, channel, result.limits)
        day = weekly.replace_window(week[day_index], updated)
        logger.debug(
            "Saved %d %s limit(s) on %s window %s",
            len(result.limits),
            Channel(channel).value,
            day.day,
            window_id,
        )
        return self._replace_day(week, day_index, day), result

    def validate_week(self, week: Week) -> WeekReport:
        """
        Collect window warnings and limit validation for every channel.

        Closed days are skipped.
        """
        report = WeekReport()

        for day in week:
            if not day.is_open:
                continue
            report.warnings.extend(weekly.window_warnings(day))
            for position, window in enumerate(day.operating_hours, 1):
                for channel in Channel:
                    schedule = window.schedule_for(channel)
                    report.channel_reports.append(
                        ChannelReport(
                            day=day.day,
                            window_position=position,
                            channel=channel,
                            report=validate_limits(schedule.limits, schedule.pickup_time),
                        )
                    )

        for warning in report.warnings:
            logger.warning(warning)

        return report

    @staticmethod
    def _day(week: Week, day_index: int) -> DaySetting:
        if not 0 <= day_index < len(week):
            raise ScheduleNotFoundError(f"No day at index {day_index}")
        return week[day_index]

    def _window(self, week: Week, day_index: int, window_id: int) -> OperatingHours:
        day = self._day(week, day_index)
        window = day.find_window(window_id)
        if window is None:
            raise ScheduleNotFoundError(f"No window {window_id} on {day.day}")
        return window

    def _apply(self, week: Week, day_index: int, result: DayEditResult) -> Week:
        if not result.applied:
            return week
        return self._replace_day(week, day_index, result.day)

    @staticmethod
    def _replace_day(week: Week, day_index: int, day: DaySetting) -> Week:
        days = list(week)
        days[day_index] = day
        return tuple(days)
