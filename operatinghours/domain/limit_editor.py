"""
Editing and validation of a channel's time-slot capacity limits.

The module-level functions are pure. ``LimitEditorSession`` wraps them for a
caller that edits one channel's limits step by step before saving.
"""

import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pendulum
from pendulum import DateTime

from .ids import IdSource
from .intervals import find_first_overlap, is_contained, is_ordered, to_minutes
from .models import LimitType, TimeRange, TimeSlotLimit
from .results import CommitResult, ValidationReport

logger = logging.getLogger(__name__)

NO_ROOM_MESSAGE = "Limit would exceed the pickup time, cannot add another one"
OUT_OF_RANGE_MESSAGE = "Limit interval must lie within the pickup time"
ILL_ORDERED_MESSAGE = "End time must be later than start time"

DEFAULT_LIMIT_TYPE = LimitType.ORDER
DEFAULT_LIMIT_VALUE = 2
DEFAULT_NOTICE_SECONDS = 3


def overlap_message(first: int, second: int) -> str:
    return f"Limit {first} and limit {second} have overlapping intervals"


def seed_limits(
    limits: Sequence[TimeSlotLimit],
    constraint: TimeRange,
    id_source: IdSource,
    limit_type: LimitType = DEFAULT_LIMIT_TYPE,
    limit_value: int = DEFAULT_LIMIT_VALUE,
) -> Tuple[TimeSlotLimit, ...]:
    """
    Return the limits unchanged, or one default limit spanning the whole
    constraint if there are none.
    """
    if limits:
        return tuple(limits)

    return (
        TimeSlotLimit(
            id=id_source.next_id(),
            interval=TimeRange(start=constraint.start, end=constraint.end),
            limit_type=limit_type,
            limit_value=limit_value,
        ),
    )


def latest_limit(limits: Sequence[TimeSlotLimit]) -> TimeSlotLimit:
    """The limit with the latest start; ties resolve to the last in list order."""
    return sorted(limits, key=lambda limit: to_minutes(limit.interval.start))[-1]


def next_limit(
    limits: Sequence[TimeSlotLimit],
    constraint: TimeRange,
    id_source: IdSource,
) -> TimeSlotLimit | None:
    """
    Build the limit that follows the latest one, up to the constraint's end.

    The new limit copies type, value and repeat from the latest limit.
    Returns None when the latest limit already reaches the constraint's end.
    """
    latest = latest_limit(limits)

    if to_minutes(latest.interval.end) >= to_minutes(constraint.end):
        return None

    return TimeSlotLimit(
        id=id_source.next_id(),
        interval=TimeRange(start=latest.interval.end, end=constraint.end),
        limit_type=latest.limit_type,
        limit_value=latest.limit_value,
        repeating_interval=latest.repeating_interval,
    )


def validate_limits(
    limits: Sequence[TimeSlotLimit],
    constraint: TimeRange,
) -> ValidationReport:
    """
    Check every limit against the constraint and the set for overlaps.

    Per-limit errors are keyed by limit id. At most one overlap is reported,
    naming 1-based list positions in ascending order.
    """
    limit_errors: Dict[int, List[str]] = {}

    for limit in limits:
        errors: List[str] = []
        if not is_contained(limit.interval, constraint):
            errors.append(OUT_OF_RANGE_MESSAGE)
        if not is_ordered(limit.interval):
            errors.append(ILL_ORDERED_MESSAGE)
        if errors:
            limit_errors.setdefault(limit.id, []).extend(errors)

    general_errors: List[str] = []
    overlap = find_first_overlap([limit.interval for limit in limits])
    if overlap is not None:
        first, second = sorted(overlap.positions())
        general_errors.append(overlap_message(first, second))

    return ValidationReport(general_errors=general_errors, limit_errors=limit_errors)


def commit_limits(
    limits: Sequence[TimeSlotLimit],
    constraint: TimeRange,
) -> CommitResult:
    """Validate and, if clean, accept the limit set as is."""
    report = validate_limits(limits, constraint)
    if not report.is_valid:
        return CommitResult(report=report)
    return CommitResult(report=report, limits=tuple(limits))


@dataclass(frozen=True)
class Notice:
    """A general message that disappears on its own."""
    message: str
    expires_at: DateTime


class LimitEditorSession:
    """
    Holds one channel's limits while they are being edited.

    Every edit replaces ``limits`` with a new tuple. Editing a limit clears
    its own errors and all general errors; ``save`` re-validates everything.
    """

    def __init__(
        self,
        initial_limits: Sequence[TimeSlotLimit],
        constraint: TimeRange,
        id_source: IdSource,
        clock: Callable[[], DateTime] = pendulum.now,
        notice_seconds: int = DEFAULT_NOTICE_SECONDS,
        seed_type: LimitType = DEFAULT_LIMIT_TYPE,
        seed_value: int = DEFAULT_LIMIT_VALUE,
    ):
        self.constraint = constraint
        self._id_source = id_source
        self._clock = clock
        self._notice_seconds = notice_seconds
        self._seed_type = seed_type
        self._seed_value = seed_value
        self._notices: List[Notice] = []
        self._report = ValidationReport()
        self.limits = self._seed(initial_limits)

    @property
    def report(self) -> ValidationReport:
        """Current errors, including notices that have not expired yet."""
        now = self._clock()
        self._notices = [notice for notice in self._notices if notice.expires_at > now]
        if not self._notices:
            return self._report
        return ValidationReport(
            general_errors=[*self._report.general_errors, *(n.message for n in self._notices)],
            limit_errors=self._report.limit_errors,
        )

    def add_limit(self) -> bool:
        """
        Append a limit after the latest one.

        Returns False (and posts a short-lived notice) when there is no room.
        """
        self._notices = [n for n in self._notices if n.message != NO_ROOM_MESSAGE]

        if not self.limits:
            self.limits = self._seed(())
            return True

        new_limit = next_limit(self.limits, self.constraint, self._id_source)
        if new_limit is None:
            logger.info("No room for another limit within %s", self.constraint)
            self._notices.append(
                Notice(
                    message=NO_ROOM_MESSAGE,
                    expires_at=self._clock().add(seconds=self._notice_seconds),
                )
            )
            return False

        self.limits = (*self.limits, new_limit)
        return True

    def update_limit(
        self,
        limit_id: int,
        limit_type: Optional[LimitType] = None,
        limit_value: Optional[int] = None,
        repeating_interval: Optional[int] = None,
    ) -> None:
        """Change type, value or repeat of one limit (``None`` leaves a field as is)."""
        changes = {
            name: value
            for name, value in (
                ("limit_type", limit_type),
                ("limit_value", limit_value),
                ("repeating_interval", repeating_interval),
            )
            if value is not None
        }
        self._replace_limit(limit_id, lambda limit: replace(limit, **changes))

    def update_time(self, limit_id: int, field: str, part: str, value: int) -> None:
        """Change one part ('hour' or 'minute') of a limit's 'start' or 'end'."""
        if field not in ("start", "end") or part not in ("hour", "minute"):
            raise ValueError(f"Unknown time field {field}.{part}")

        def change(limit: TimeSlotLimit) -> TimeSlotLimit:
            new_time = replace(getattr(limit.interval, field), **{part: value})
            return replace(limit, interval=replace(limit.interval, **{field: new_time}))

        self._replace_limit(limit_id, change)

    def remove_limit(self, limit_id: int) -> None:
        self.limits = tuple(limit for limit in self.limits if limit.id != limit_id)

    def save(self) -> CommitResult:
        """Validate all limits; the result carries them only if they are clean."""
        result = commit_limits(self.limits, self.constraint)
        self._report = result.report
        if not result.accepted:
            logger.debug(
                "Rejected limits: %d general, %d per-limit error(s)",
                len(result.report.general_errors),
                len(result.report.limit_errors),
            )
        return result

    def _seed(self, limits: Sequence[TimeSlotLimit]) -> Tuple[TimeSlotLimit, ...]:
        return seed_limits(
            limits,
            self.constraint,
            self._id_source,
            limit_type=self._seed_type,
            limit_value=self._seed_value,
        )

    def _replace_limit(
        self,
        limit_id: int,
        change: Callable[[TimeSlotLimit], TimeSlotLimit],
    ) -> None:
        self.limits = tuple(
            change(limit) if limit.id == limit_id else limit for limit in self.limits
        )
        remaining = {
            key: value for key, value in self._report.limit_errors.items() if key != limit_id
        }
        self._report = ValidationReport(limit_errors=remaining)
        self._notices = []
