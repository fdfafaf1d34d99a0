from __future__ import annotations

import logging

from app.schemas.timetable import PERIODS_PER_DAY, Subject
from app.services.allocation_state import (
    LAB_SESSION_PERIODS,
    AllocationState,
    Assignment,
    SubjectKey,
    is_faculty_free,
)
from app.services.diagnostics import AllocationDiagnostics
from app.services.reservation_registry import FacultyReservationRegistry
from app.services.time_slots import TEACHING_PERIODS

logger = logging.getLogger(__name__)


def continuous_block_size(subject: Subject) -> int:
    return subject.continuous_periods or subject.periods_per_week


def candidate_runs(size: int) -> list[tuple[int, ...]]:
    return [tuple(range(start, start + size)) for start in range(1, PERIODS_PER_DAY - size + 2)]


def block_fits(state: AllocationState, faculty_id: str, day: str, periods: tuple[int, ...]) -> bool:
    return all(
        state.is_slot_empty(day, period) and not state.is_faculty_booked(faculty_id, day, period)
        for period in periods
    )


def lab_days(state: AllocationState, days: list[str]) -> list[str]:
    return [day for day in days if state.lab_entry_count(day) >= LAB_SESSION_PERIODS]


def is_adjacent_to_same_subject(state: AllocationState, key: SubjectKey, day: str, period: int) -> bool:
    for neighbour in (period - 1, period + 1):
        for entry in state.entries_at(day, neighbour):
            if (entry.faculty_id, entry.subject_name) == key:
                return True
    return False


def preference_tier(*, used_in_period: bool, used_today: bool, adjacent: bool) -> int:
    """Return 1 (best) to 4 (any free faculty) for a candidate subject in one slot."""
    if not used_in_period and not used_today and not adjacent:
        return 1
    if not used_in_period and not adjacent:
        return 2
    if not adjacent:
        return 3
    return 4


class TheoryAllocator:
    """Fills the slots left by labs with continuous blocks first, then single periods."""

    def __init__(
        self,
        *,
        state: AllocationState,
        registry: FacultyReservationRegistry,
        diagnostics: AllocationDiagnostics,
        days: list[str],
    ) -> None:
        self.state = state
        self.registry = registry
        self.diagnostics = diagnostics
        self.days = list(days)
        # subject -> periods held back after its contiguous block failed
        self.unplaced_blocks: dict[SubjectKey, int] = {}
        self._failed: list[Assignment] = []

    def allocate(self, subjects: list[Assignment]) -> None:
        if not subjects:
            return
        continuous = [
            assignment
            for assignment in subjects
            if assignment.subject.allocation == "continuous" and continuous_block_size(assignment.subject) >= 2
        ]
        long_blocks = sorted(
            (assignment for assignment in continuous if continuous_block_size(assignment.subject) >= 3),
            key=lambda assignment: -continuous_block_size(assignment.subject),
        )
        pair_blocks = [assignment for assignment in continuous if continuous_block_size(assignment.subject) == 2]

        for assignment in long_blocks:
            self._place_block(assignment, avoid_lab_days=True)
        for assignment in pair_blocks:
            self._place_block(assignment, avoid_lab_days=False)
        self._fill_random(subjects)
        self._report_failed_blocks()

    def _block_days(self, assignment: Assignment, *, avoid_lab_days: bool) -> list[str]:
        if assignment.subject.preferred_day is not None:
            return [assignment.subject.preferred_day]
        if not avoid_lab_days:
            return list(self.days)
        busy = set(lab_days(self.state, self.days))
        return [day for day in self.days if day not in busy] + [day for day in self.days if day in busy]

    def _place_block(self, assignment: Assignment, *, avoid_lab_days: bool) -> bool:
        size = continuous_block_size(assignment.subject)
        faculty_id = assignment.faculty.id
        for day in self._block_days(assignment, avoid_lab_days=avoid_lab_days):
            for run in candidate_runs(size):
                if not block_fits(self.state, faculty_id, day, run):
                    continue
                if not all(self.registry.is_available(faculty_id, day, period) for period in run):
                    continue
                if not self.registry.reserve_many(faculty_id, day, run, self.state.class_info):
                    continue
                for index, period in enumerate(run):
                    self.state.place(assignment, day, period, is_continuation=index > 0)
                return True

        self.unplaced_blocks[assignment.key] = size
        self._failed.append(assignment)
        return False

    def _weekly_target(self, assignment: Assignment) -> int:
        return assignment.subject.periods_per_week - self.unplaced_blocks.get(assignment.key, 0)

    def _report_failed_blocks(self) -> None:
        for assignment in self._failed:
            requested = assignment.subject.periods_per_week
            allocated = self.state.weekly_counts[assignment.key]
            if assignment.subject.preferred_day is not None:
                self.diagnostics.preferred_day_conflict(
                    assignment,
                    requested=requested,
                    allocated=allocated,
                    detail=f"Continuous block of {self.unplaced_blocks[assignment.key]} periods could not be placed",
                )
            else:
                self.diagnostics.shortfall(assignment, requested=requested, allocated=allocated)

    def _fill_random(self, subjects: list[Assignment]) -> None:
        for day in self.days:
            for period in TEACHING_PERIODS:
                pending = [
                    assignment
                    for assignment in subjects
                    if self.state.weekly_counts[assignment.key] < self._weekly_target(assignment)
                ]
                if not pending:
                    return
                if not self.state.is_slot_empty(day, period):
                    continue
                choice = self._select_candidate(pending, day, period)
                if choice is None:
                    continue
                if not self.registry.reserve(choice.faculty.id, day, period, self.state.class_info):
                    logger.info(
                        "THEORY SLOT SKIPPED | class=%s | faculty_id=%s | subject=%s | day=%s | period=%s",
                        self.state.class_info,
                        choice.faculty.id,
                        choice.subject.name,
                        day,
                        period,
                    )
                    continue
                self.state.place(choice, day, period)

    def _select_candidate(self, pending: list[Assignment], day: str, period: int) -> Assignment | None:
        ranked: list[tuple[int, int, Assignment]] = []
        for position, assignment in enumerate(pending):
            preferred_day = assignment.subject.preferred_day
            if preferred_day is not None and preferred_day != day:
                continue
            key = assignment.key
            tier = preference_tier(
                used_in_period=period in self.state.period_usage.get(key, ()),
                used_today=self.state.daily_counts[(key, day)] > 0,
                adjacent=(
                    assignment.subject.allocation == "random"
                    and is_adjacent_to_same_subject(self.state, key, day, period)
                ),
            )
            ranked.append((tier, position, assignment))
        ranked.sort(key=lambda item: (item[0], item[1]))
        for _, _, assignment in ranked:
            if is_faculty_free(self.state, self.registry, assignment.faculty.id, day, period):
                return assignment
        return None
