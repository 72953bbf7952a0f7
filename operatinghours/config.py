"""
Configuration and schedule documents using Pydantic models loaded from YAML.
"""

import logging
from pathlib import Path
from typing import List, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .domain.exceptions import ScheduleFileError
from .domain.ids import IdSource
from .domain.limit_editor import DEFAULT_LIMIT_VALUE, DEFAULT_NOTICE_SECONDS
from .domain.models import (
    MAX_HOUR,
    DateRange,
    DaySetting,
    LimitType,
    OperatingHours,
    Schedule,
    Time,
    TimeRange,
    TimeSlotLimit,
)
from .domain.options import date_range_labels
from .domain.weekly import DAYS_OF_WEEK, Week, default_week

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "operatinghours.yaml"


class TimeConfig(BaseModel):
    """A time of day, written as ``"HH:MM"`` or ``{hour, minute}``."""
    hour: int
    minute: int = 0

    @model_validator(mode="before")
    @classmethod
    def parse_string(cls, value):
        """Accept ``"25:30"`` as shorthand."""
        if isinstance(value, str):
            hour, _, minute = value.partition(":")
            try:
                return {"hour": int(hour), "minute": int(minute or 0)}
            except ValueError as exc:
                raise ValueError(f"Invalid time '{value}', expected HH:MM") from exc
        return value

    @field_validator("hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 47."""
        if not 0 <= v <= MAX_HOUR:
            raise ValueError(f"Hour must be between 0 and {MAX_HOUR}, got {v}")
        return v

    @field_validator("minute")
    @classmethod
    def validate_minute(cls, v: int) -> int:
        if not 0 <= v <= 59:
            raise ValueError(f"Minute must be between 0 and 59, got {v}")
        return v

    def to_domain(self) -> Time:
        return Time(hour=self.hour, minute=self.minute)


class RangeConfig(BaseModel):
    """A start/end pair. Ordering is not checked here."""
    start: TimeConfig
    end: TimeConfig

    def to_domain(self) -> TimeRange:
        return TimeRange(start=self.start.to_domain(), end=self.end.to_domain())


class DateRangeConfig(BaseModel):
    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def validate_label(cls, value: str) -> str:
        """Only the known day-offset labels are allowed."""
        if value not in date_range_labels():
            raise ValueError(f"Unknown date label '{value}'")
        return value

    def to_domain(self) -> DateRange:
        return DateRange(start=self.start, end=self.end)


class LimitConfig(BaseModel):
    id: int
    interval: RangeConfig
    limit_type: LimitType = LimitType.ORDER
    limit_value: int = Field(default=DEFAULT_LIMIT_VALUE, ge=1)
    repeating_interval: Optional[int] = None

    @field_validator("repeating_interval")
    @classmethod
    def validate_repeat(cls, value: Optional[int]) -> Optional[int]:
        if value not in (None, 0, 15, 30, 45, 60):
            raise ValueError(f"repeating_interval must be 0, 15, 30, 45 or 60, got {value}")
        return value or None

    def to_domain(self) -> TimeSlotLimit:
        return TimeSlotLimit(
            id=self.id,
            interval=self.interval.to_domain(),
            limit_type=self.limit_type,
            limit_value=self.limit_value,
            repeating_interval=self.repeating_interval,
        )


class ScheduleConfig(BaseModel):
    """Per-channel settings of a window."""
    date_range: DateRangeConfig
    pickup_time: RangeConfig
    cutoff_time: TimeConfig
    limits: List[LimitConfig] = Field(default_factory=list)

    def to_domain(self) -> Schedule:
        return Schedule(
            date_range=self.date_range.to_domain(),
            pickup_time=self.pickup_time.to_domain(),
            cutoff_time=self.cutoff_time.to_domain(),
            limits=[limit.to_domain() for limit in self.limits],
        )


def _default_pickup() -> ScheduleConfig:
    return ScheduleConfig(
        date_range=DateRangeConfig(start="in 7 days", end="in 9 days"),
        pickup_time=RangeConfig(start="10:00", end="20:00"),
        cutoff_time="19:30",
    )


def _default_delivery() -> ScheduleConfig:
    return ScheduleConfig(
        date_range=DateRangeConfig(start="in 3 days", end="in 10 days"),
        pickup_time=RangeConfig(start="10:00", end="20:00"),
        cutoff_time="19:30",
    )


class WindowDefaults(BaseModel):
    """Settings every newly created day or window starts from."""
    time_range: RangeConfig = Field(
        default_factory=lambda: RangeConfig(start="09:30", end="18:00")
    )
    pickup: ScheduleConfig = Field(default_factory=_default_pickup)
    delivery: ScheduleConfig = Field(default_factory=_default_delivery)

    @model_validator(mode="after")
    def validate_no_limits(self) -> "WindowDefaults":
        """Template windows never carry limits."""
        if self.pickup.limits or self.delivery.limits:
            raise ValueError("Default windows cannot define limits")
        return self

    def to_window(self, window_id: int) -> OperatingHours:
        return OperatingHours(
            id=window_id,
            time_range=self.time_range.to_domain(),
            pickup=self.pickup.to_domain(),
            delivery=self.delivery.to_domain(),
        )


class LimitDefaults(BaseModel):
    """Defaults for the limit editor."""
    limit_type: LimitType = LimitType.ORDER
    limit_value: int = Field(default=DEFAULT_LIMIT_VALUE, ge=1)
    notice_seconds: int = Field(default=DEFAULT_NOTICE_SECONDS, ge=0)


class AppConfig(BaseModel):
    """Application configuration."""
    days: List[str] = Field(default_factory=lambda: list(DAYS_OF_WEEK))
    timezone: str = "UTC"
    windows: WindowDefaults = Field(default_factory=WindowDefaults)
    limits: LimitDefaults = Field(default_factory=LimitDefaults)

    @field_validator("days")
    @classmethod
    def validate_days(cls, value: List[str]) -> List[str]:
        """Ensure there are seven unique day labels."""
        if len(value) != 7:
            raise ValueError(f"days must list 7 labels, got {len(value)}")
        duplicates = sorted({day for day in value if value.count(day) > 1})
        if duplicates:
            raise ValueError(f"Duplicate day label(s): {', '.join(duplicates)}")
        return value

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        if value not in pendulum.timezones():
            raise ValueError(f"Unknown timezone: {value}")
        return value

    def now(self) -> pendulum.DateTime:
        """Current time in the configured timezone."""
        return pendulum.now(self.timezone)

    def default_window(self, window_id: int) -> OperatingHours:
        return self.windows.to_window(window_id)

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create an {CONFIG_FILE_NAME} file or run without --config."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        logger.debug("Loaded configuration from %s", config_path)
        return cls(**data)


class WindowDocument(BaseModel):
    id: int
    time_range: RangeConfig
    pickup: ScheduleConfig
    delivery: ScheduleConfig

    def to_domain(self) -> OperatingHours:
        return OperatingHours(
            id=self.id,
            time_range=self.time_range.to_domain(),
            pickup=self.pickup.to_domain(),
            delivery=self.delivery.to_domain(),
        )


class DayDocument(BaseModel):
    day: str
    is_open: bool = True
    operating_hours: List[WindowDocument] = Field(default_factory=list)

    @field_validator("operating_hours")
    @classmethod
    def validate_unique_ids(cls, value: List[WindowDocument]) -> List[WindowDocument]:
        seen: set[int] = set()
        for window in value:
            if window.id in seen:
                raise ValueError(f"Duplicate window id detected: {window.id}")
            seen.add(window.id)
        return value

    def to_domain(self) -> DaySetting:
        return DaySetting(
            day=self.day,
            is_open=self.is_open,
            operating_hours=[window.to_domain() for window in self.operating_hours],
        )


class ScheduleDocument(BaseModel):
    """A full week as written in a YAML schedule file."""
    days: List[DayDocument]

    def to_domain(self) -> Week:
        return tuple(day.to_domain() for day in self.days)


def load_schedule(schedule_path: Path) -> Week:
    """
    Read a week from a YAML schedule file.

    Raises:
        ScheduleFileError: If the file is missing, not YAML, or not a schedule
    """
    if not schedule_path.exists():
        raise ScheduleFileError(f"Schedule file not found: {schedule_path}")

    try:
        with open(schedule_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ScheduleFileError(f"Invalid YAML in {schedule_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ScheduleFileError("Schedule file must contain a mapping at the root level.")

    try:
        document = ScheduleDocument(**data)
    except ValidationError as exc:
        raise ScheduleFileError(f"Invalid schedule in {schedule_path}: {exc}") from exc

    return document.to_domain()


def build_default_week(config: AppConfig, id_source: IdSource) -> Week:
    """Seven open days, each with the configured default window."""
    return default_week(id_source, days=config.days, template=config.default_window(0))


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for operatinghours.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / CONFIG_FILE_NAME

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / CONFIG_FILE_NAME

    return config_path
