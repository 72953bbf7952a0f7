"""
Tests for configuration and schedule document loading.
"""

import pytest
from pydantic import ValidationError

from operatinghours.config import AppConfig, TimeConfig, build_default_week, load_schedule
from operatinghours.domain.exceptions import ScheduleFileError
from operatinghours.domain.ids import CounterIdSource
from operatinghours.domain.models import LimitType, Time, TimeRange

SCHEDULE_YAML = """
days:
  - day: Monday
    is_open: true
    operating_hours:
      - id: 1
        time_range: {start: "22:00", end: "26:30"}
        pickup:
          date_range: {start: today, end: "in 2 days"}
          pickup_time: {start: "22:00", end: "26:00"}
          cutoff_time: "25:30"
          limits:
            - id: 11
              interval: {start: "22:00", end: "24:00"}
              limit_type: item
              limit_value: 3
              repeating_interval: 0
        delivery:
          date_range: {start: tomorrow, end: "in 3 days"}
          pickup_time: {start: {hour: 22, minute: 0}, end: {hour: 26}}
          cutoff_time: "25:00"
  - day: Tuesday
    is_open: false
"""


class TestAppConfig:
    """Tests for AppConfig."""

    def test_defaults(self):
        config = AppConfig()

        assert config.days[0] == "Monday"
        window = config.default_window(5)
        assert window.id == 5
        assert window.time_range == TimeRange(Time(9, 30), Time(18, 0))
        assert config.limits.notice_seconds == 3

    def test_load_from_yaml(self, tmp_path):
        path = tmp_path / "operatinghours.yaml"
        path.write_text(
            "timezone: Europe/Berlin\n"
            "windows:\n"
            "  time_range: {start: '10:00', end: '22:00'}\n"
            "limits: {limit_value: 4}\n",
            encoding="utf-8",
        )

        config = AppConfig.load_from_yaml(path)

        assert config.timezone == "Europe/Berlin"
        assert config.windows.time_range.to_domain() == TimeRange(Time(10, 0), Time(22, 0))
        assert config.limits.limit_value == 4

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_now_uses_configured_timezone(self):
        assert AppConfig(timezone="Europe/Berlin").now().timezone_name == "Europe/Berlin"
        assert AppConfig().now().timezone_name == "UTC"

    def test_unknown_timezone_rejected(self):
        with pytest.raises(ValidationError, match="Unknown timezone"):
            AppConfig(timezone="Mars/Olympus_Mons")

    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "operatinghours.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(path)

    def test_days_must_be_seven_unique(self):
        with pytest.raises(ValidationError):
            AppConfig(days=["Mon"] * 7)
        with pytest.raises(ValidationError):
            AppConfig(days=["Mon", "Tue"])

    def test_default_windows_cannot_have_limits(self):
        limit = {"id": 1, "interval": {"start": "10:00", "end": "11:00"}}
        with pytest.raises(ValidationError, match="cannot define limits"):
            AppConfig(windows={"pickup": {
                "date_range": {"start": "today", "end": "tomorrow"},
                "pickup_time": {"start": "10:00", "end": "20:00"},
                "cutoff_time": "19:00",
                "limits": [limit],
            }})

    def test_build_default_week(self):
        week = build_default_week(AppConfig(), CounterIdSource(start=1))

        assert len(week) == 7
        assert [day.operating_hours[0].id for day in week] == list(range(1, 8))


class TestTimeConfig:
    """Tests for time parsing."""

    def test_parse_string(self):
        assert TimeConfig.model_validate("25:30").to_domain() == Time(25, 30)

    def test_hour_out_of_range(self):
        with pytest.raises(ValidationError, match="Hour must be between 0 and 47"):
            TimeConfig.model_validate("48:00")

    def test_garbage_string(self):
        with pytest.raises(ValidationError):
            TimeConfig.model_validate("noon")


class TestLoadSchedule:
    """Tests for load_schedule."""

    def test_load_week(self, tmp_path):
        path = tmp_path / "week.yaml"
        path.write_text(SCHEDULE_YAML, encoding="utf-8")

        week = load_schedule(path)

        assert [day.day for day in week] == ["Monday", "Tuesday"]
        window = week[0].operating_hours[0]
        assert window.time_range == TimeRange(Time(22, 0), Time(26, 30))
        limit = window.pickup.limits[0]
        assert limit.limit_type is LimitType.ITEM
        assert limit.repeating_interval is None
        assert window.delivery.pickup_time.end == Time(26, 0)
        assert week[1].is_open is False
        assert week[1].operating_hours == ()

    def test_missing_schedule(self, tmp_path):
        with pytest.raises(ScheduleFileError, match="not found"):
            load_schedule(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "week.yaml"
        path.write_text("days: [unclosed\n", encoding="utf-8")

        with pytest.raises(ScheduleFileError, match="Invalid YAML"):
            load_schedule(path)

    def test_unknown_date_label(self, tmp_path):
        path = tmp_path / "week.yaml"
        path.write_text(SCHEDULE_YAML.replace("in 2 days", "next month"), encoding="utf-8")

        with pytest.raises(ScheduleFileError, match="Invalid schedule"):
            load_schedule(path)

    def test_duplicate_window_ids(self, tmp_path):
        window = (
            "      - id: 1\n"
            "        time_range: {start: '09:00', end: '10:00'}\n"
            "        pickup:\n"
            "          date_range: {start: today, end: tomorrow}\n"
            "          pickup_time: {start: '09:00', end: '10:00'}\n"
            "          cutoff_time: '09:30'\n"
            "        delivery:\n"
            "          date_range: {start: today, end: tomorrow}\n"
            "          pickup_time: {start: '09:00', end: '10:00'}\n"
            "          cutoff_time: '09:30'\n"
        )
        path = tmp_path / "week.yaml"
        path.write_text(
            "days:\n  - day: Monday\n    operating_hours:\n" + window * 2,
            encoding="utf-8",
        )

        with pytest.raises(ScheduleFileError, match="Duplicate window id"):
            load_schedule(path)
