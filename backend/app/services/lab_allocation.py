from __future__ import annotations

import logging
import math
from collections import defaultdict

from app.services.allocation_state import (
    LAB_BATCHES,
    LAB_SESSION_PERIODS,
    AllocationState,
    Assignment,
    SubjectKey,
    requested_periods,
)
from app.services.diagnostics import AllocationDiagnostics
from app.services.reservation_registry import FacultyReservationRegistry

logger = logging.getLogger(__name__)

# Contiguous triples that do not straddle an incompatible break.
LAB_SLOT_PATTERNS: tuple[tuple[int, int, int], ...] = (
    (1, 2, 3),
    (5, 6, 7),
    (6, 7, 8),
    (3, 4, 5),
    (4, 5, 6),
)


def other_batch(batch: str) -> str:
    return "B" if batch == "A" else "A"


def rotation_offset(count: int) -> int:
    if count < 2:
        return 0
    return math.ceil(count / 2)


def pattern_is_empty(state: AllocationState, day: str, pattern: tuple[int, ...]) -> bool:
    return all(state.is_slot_empty(day, period) for period in pattern)


def lab_pattern_fits(
    state: AllocationState,
    assignment: Assignment,
    day: str,
    pattern: tuple[int, ...],
    batch: str,
) -> bool:
    faculty_id = assignment.faculty.id
    for period in pattern:
        if state.is_faculty_booked(faculty_id, day, period):
            return False
        if state.theory_at(day, period) is not None:
            return False
        if state.lab_at(day, period, batch) is not None:
            return False
        parallel = state.lab_at(day, period, other_batch(batch))
        if parallel is not None and (
            parallel.subject_name == assignment.subject.name or parallel.faculty_id == faculty_id
        ):
            return False
    return True


class LabAllocator:
    """Places two three-period batch sessions for every lab subject."""

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
        self.placed_days: dict[SubjectKey, dict[str, str]] = defaultdict(dict)

    def allocate(self, labs: list[Assignment]) -> None:
        if not labs:
            return
        preferred = [lab for lab in labs if lab.subject.preferred_day is not None]
        rotating = [lab for lab in labs if lab.subject.preferred_day is None]

        for lab in preferred:
            self._allocate_preferred(lab)
        if rotating:
            self._allocate_rotation(rotating)
            self._reassign_pending(rotating)
            self._report_pending(rotating)

    def _is_placed(self, assignment: Assignment, batch: str) -> bool:
        return batch in self.placed_days[assignment.key]

    def _globally_free(self, assignment: Assignment, day: str, pattern: tuple[int, ...]) -> bool:
        return all(self.registry.is_available(assignment.faculty.id, day, period) for period in pattern)

    def _commit(self, assignment: Assignment, day: str, pattern: tuple[int, ...], batch: str) -> bool:
        if not self.registry.reserve_many(assignment.faculty.id, day, pattern, self.state.class_info):
            logger.warning(
                "LAB PLACEMENT ABORTED | class=%s | faculty_id=%s | subject=%s | batch=%s | day=%s | periods=%s",
                self.state.class_info,
                assignment.faculty.id,
                assignment.subject.name,
                batch,
                day,
                pattern,
            )
            return False
        for index, period in enumerate(pattern):
            self.state.place(assignment, day, period, batch=batch, is_continuation=index > 0)
        self.placed_days[assignment.key][batch] = day
        return True

    def _place_on_day(self, assignment: Assignment, day: str, batch: str, *, allow_same_day: bool = False) -> bool:
        if not allow_same_day and self.placed_days[assignment.key].get(other_batch(batch)) == day:
            return False
        for pattern in LAB_SLOT_PATTERNS:
            if not lab_pattern_fits(self.state, assignment, day, pattern, batch):
                continue
            if not self._globally_free(assignment, day, pattern):
                continue
            if self._commit(assignment, day, pattern, batch):
                return True
        return False

    def _allocate_preferred(self, lab: Assignment) -> None:
        day = lab.subject.preferred_day
        missing = [batch for batch in LAB_BATCHES if not self._place_on_day(lab, day, batch, allow_same_day=True)]
        if missing:
            placed = len(LAB_BATCHES) - len(missing)
            self.diagnostics.preferred_day_conflict(
                lab,
                requested=requested_periods(lab.subject),
                allocated=placed * LAB_SESSION_PERIODS,
                detail=f"Batch {' and '.join(missing)} lab session could not be placed",
            )

    def _allocate_rotation(self, labs: list[Assignment]) -> None:
        count = len(labs)
        offset = rotation_offset(count)
        for index in range(count):
            day = self.days[index % len(self.days)]
            batch_a_lab = labs[index]
            batch_b_lab = labs[(index + offset) % count] if offset else None
            self._place_pair(day, batch_a_lab, batch_b_lab)

    def _place_pair(self, day: str, batch_a_lab: Assignment, batch_b_lab: Assignment | None) -> None:
        if batch_b_lab is not None and batch_a_lab.faculty.id != batch_b_lab.faculty.id:
            for pattern in LAB_SLOT_PATTERNS:
                if not pattern_is_empty(self.state, day, pattern):
                    continue
                if not lab_pattern_fits(self.state, batch_a_lab, day, pattern, "A"):
                    continue
                if not lab_pattern_fits(self.state, batch_b_lab, day, pattern, "B"):
                    continue
                if not (
                    self._globally_free(batch_a_lab, day, pattern)
                    and self._globally_free(batch_b_lab, day, pattern)
                ):
                    continue
                if not self._commit(batch_a_lab, day, pattern, "A"):
                    continue
                self._commit(batch_b_lab, day, pattern, "B")
                break

        if not self._is_placed(batch_a_lab, "A"):
            self._place_on_day(batch_a_lab, day, "A")
        if batch_b_lab is not None and not self._is_placed(batch_b_lab, "B"):
            self._place_on_day(batch_b_lab, day, "B")

    def _batch_days(self, batch: str) -> set[str]:
        return {placed[batch] for placed in self.placed_days.values() if batch in placed}

    def _reassign_pending(self, labs: list[Assignment]) -> None:
        for batch in LAB_BATCHES:
            for lab in labs:
                if self._is_placed(lab, batch):
                    continue
                busy_days = self._batch_days(batch)
                ordered_days = [day for day in self.days if day not in busy_days]
                ordered_days += [day for day in self.days if day in busy_days]
                for day in ordered_days:
                    if self._place_on_day(lab, day, batch):
                        break

    def _report_pending(self, labs: list[Assignment]) -> None:
        for lab in labs:
            placed = sum(1 for batch in LAB_BATCHES if self._is_placed(lab, batch))
            if placed < len(LAB_BATCHES):
                self.diagnostics.shortfall(
                    lab,
                    requested=requested_periods(lab.subject),
                    allocated=placed * LAB_SESSION_PERIODS,
                )
