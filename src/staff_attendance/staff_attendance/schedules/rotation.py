from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterable, List, Mapping, Sequence, Set, Tuple

from ..core.constants import MAX_CONSECUTIVE_SAME_SHIFT_DAYS, ROTATION_ATTEMPTS_PER_WORKER
from ..shifts.model import ShiftTemplate
from .model import PlannedAssignment, Shortfall, StaffSchedule


class AssignmentIndex:
    """Who works which shift on which day.

    Two views over the same facts: (staff, template) -> days, and
    day -> {staff: template}. A worker holds at most one template per day.
    """

    def __init__(self) -> None:
        self._days_by_pair: Dict[Tuple[int, int], Set[date]] = defaultdict(set)
        self._staff_by_day: Dict[date, Dict[int, int]] = defaultdict(dict)

    @classmethod
    def from_schedules(cls, schedules: Iterable[StaffSchedule]) -> "AssignmentIndex":
        index = cls()
        for s in schedules:
            index.add(s.staff_id, s.shift_template_id, s.work_date)
        return index

    def add(self, staff_id: int, template_id: int, work_date: date) -> None:
        self._days_by_pair[(staff_id, template_id)].add(work_date)
        self._staff_by_day[work_date][staff_id] = template_id

    def copy(self) -> "AssignmentIndex":
        clone = AssignmentIndex()
        for pair, days in self._days_by_pair.items():
            clone._days_by_pair[pair] = set(days)
        for day, staff in self._staff_by_day.items():
            clone._staff_by_day[day] = dict(staff)
        return clone

    def staff_on(self, work_date: date) -> Mapping[int, int]:
        return self._staff_by_day.get(work_date, {})

    def holders(self, template_id: int, work_date: date) -> List[int]:
        return [s for s, t in self.staff_on(work_date).items() if t == template_id]

    def worked_on(self, staff_id: int, template_id: int, work_date: date) -> bool:
        return work_date in self._days_by_pair.get((staff_id, template_id), ())

    def worked_consecutively(
        self,
        staff_id: int,
        template_id: int,
        work_date: date,
        days: int = MAX_CONSECUTIVE_SAME_SHIFT_DAYS,
    ) -> bool:
        """True when the worker held this template on each of the ``days`` days before ``work_date``."""
        return all(
            self.worked_on(staff_id, template_id, work_date - timedelta(days=k)) for k in range(1, days + 1)
        )


@dataclass
class RotationCursor:
    """Position in the roster where the next candidate search starts."""

    position: int = 0

    def take(self, roster: Sequence[int]) -> int:
        staff_id = roster[self.position]
        self.position = (self.position + 1) % len(roster)
        return staff_id


@dataclass(frozen=True)
class RotationPlan:
    assignments: Sequence[PlannedAssignment] = field(default_factory=tuple)
    shortfalls: Sequence[Shortfall] = field(default_factory=tuple)


def fill_shift(
    roster: Sequence[int],
    template: ShiftTemplate,
    work_date: date,
    index: AssignmentIndex,
    cursor: RotationCursor,
    needed: int,
) -> List[int]:
    """Pick up to ``needed`` workers for one shift, recording each pick in ``index``.

    A candidate is skipped when they already hold any shift that day or held
    this template on each of the previous two days. The search is bounded to
    a fixed number of passes over the roster.
    """
    picked: List[int] = []
    attempts = 0
    max_attempts = ROTATION_ATTEMPTS_PER_WORKER * len(roster)

    while len(picked) < needed and attempts < max_attempts:
        attempts += 1
        staff_id = cursor.take(roster)

        if staff_id in index.staff_on(work_date):
            continue
        if index.worked_consecutively(staff_id, template.template_id, work_date):
            continue

        index.add(staff_id, template.template_id, work_date)
        picked.append(staff_id)

    return picked


def plan_rotation(
    roster: Sequence[int],
    templates: Sequence[ShiftTemplate],
    dates: Sequence[date],
    index: AssignmentIndex,
) -> RotationPlan:
    """Plan additive assignments for every (day, shift) in the range.

    ``roster`` is ordered; ``templates`` are processed in the given order. The
    starting cursor moves one position per day and carries over between the
    shifts of the same day. Workers who already hold a template on a day count
    toward its headcount, so planning over an already-covered range yields no
    assignments. ``index`` is not modified.
    """
    if not roster:
        return RotationPlan()

    working = index.copy()
    assignments: List[PlannedAssignment] = []
    shortfalls: List[Shortfall] = []

    for day_index, work_date in enumerate(dates):
        cursor = RotationCursor(day_index % len(roster))

        for template in templates:
            already = len(working.holders(template.template_id, work_date))
            needed = max(template.required_staff_count - already, 0)

            picked = fill_shift(roster, template, work_date, working, cursor, needed) if needed else []
            assignments.extend(PlannedAssignment(s, template.template_id, work_date) for s in picked)

            assigned = already + len(picked)
            if assigned < template.required_staff_count:
                shortfalls.append(
                    Shortfall(
                        work_date=work_date,
                        shift_template_id=template.template_id,
                        shift_name=template.shift_name,
                        assigned=assigned,
                        required=template.required_staff_count,
                    )
                )

    return RotationPlan(assignments=tuple(assignments), shortfalls=tuple(shortfalls))
