from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Sequence


@dataclass(frozen=True)
class StaffSchedule:
    """Assignment of one worker to one shift template on one calendar day."""

    schedule_id: int
    staff_id: int
    shift_template_id: int
    work_date: date
    created_by: int
    notes: Optional[str] = None


@dataclass(frozen=True)
class PlannedAssignment:
    staff_id: int
    shift_template_id: int
    work_date: date


@dataclass(frozen=True)
class Shortfall:
    """A shift that could not reach its required headcount on one day."""

    work_date: date
    shift_template_id: int
    shift_name: str
    assigned: int
    required: int


@dataclass(frozen=True)
class BulkCreateResult:
    created: int
    skipped: int
    total: int
    skipped_dates: Sequence[date] = field(default_factory=tuple)


@dataclass(frozen=True)
class BulkDeleteResult:
    deleted: int
    blocked: Sequence[int] = field(default_factory=tuple)


@dataclass(frozen=True)
class AutoGenerateReport:
    created: int
    skipped: int
    dates: int
    staff_count: int
    shifts_per_day: int
    required_per_day: int
    shortfalls: Sequence[Shortfall] = field(default_factory=tuple)
