"""
Result values returned by engine operations.

A refused edit is a normal outcome, not an error: the caller gets the input
back together with an outcome it can check.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from .models import DaySetting, TimeSlotLimit


class EditOutcome(str, Enum):
    APPLIED = "applied"
    REFUSED = "refused"
    NEEDS_CONFIRMATION = "needs_confirmation"


@dataclass(frozen=True)
class DayEditResult:
    """
    Outcome of a day-level edit.

    ``day`` is the new day when applied and the untouched input otherwise.
    ``will_discard`` is only set for ``NEEDS_CONFIRMATION``.
    """
    day: DaySetting
    outcome: EditOutcome
    reason: Optional[str] = None
    will_discard: int = 0

    @property
    def applied(self) -> bool:
        return self.outcome is EditOutcome.APPLIED

    @classmethod
    def applied_to(cls, day: DaySetting) -> "DayEditResult":
        return cls(day=day, outcome=EditOutcome.APPLIED)

    @classmethod
    def refused(cls, day: DaySetting, reason: str) -> "DayEditResult":
        return cls(day=day, outcome=EditOutcome.REFUSED, reason=reason)


@dataclass(frozen=True)
class ValidationReport:
    """
    Structured validation errors.

    ``general_errors`` are not tied to a single limit (e.g. overlaps);
    ``limit_errors`` maps a limit id to its own messages.
    """
    general_errors: Tuple[str, ...] = ()
    limit_errors: Mapping[int, Tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "general_errors", tuple(self.general_errors))
        object.__setattr__(
            self,
            "limit_errors",
            MappingProxyType({key: tuple(value) for key, value in self.limit_errors.items()}),
        )

    @property
    def is_valid(self) -> bool:
        return not self.general_errors and not self.limit_errors

    def errors_for(self, limit_id: int) -> Tuple[str, ...]:
        return self.limit_errors.get(limit_id, ())


@dataclass(frozen=True)
class CommitResult:
    """Result of committing a limit set: accepted limits or the report."""
    report: ValidationReport
    limits: Tuple[TimeSlotLimit, ...] = ()

    @property
    def accepted(self) -> bool:
        return self.report.is_valid
