from __future__ import annotations

import logging
from typing import Iterable

from app.schemas.timetable import AllocationWarning, WarningCategory
from app.services.allocation_state import AllocationState, Assignment, SubjectKey, requested_periods
from app.services.reservation_registry import FacultyReservationRegistry

logger = logging.getLogger(__name__)


class AllocationDiagnostics:
    """Collects one warning per subject whose requested periods were not all placed."""

    def __init__(self, *, registry: FacultyReservationRegistry, class_info: str) -> None:
        self.registry = registry
        self.class_info = class_info
        self._warnings: list[AllocationWarning] = []
        self._warned: set[SubjectKey] = set()

    @property
    def warnings(self) -> list[AllocationWarning]:
        return list(self._warnings)

    def has_warning(self, key: SubjectKey) -> bool:
        return key in self._warned

    def record(
        self,
        assignment: Assignment,
        *,
        requested: int,
        allocated: int,
        category: WarningCategory,
        reason: str,
    ) -> AllocationWarning | None:
        if assignment.key in self._warned:
            return None
        warning = AllocationWarning(
            subject_name=assignment.subject.name,
            faculty_name=assignment.faculty.name,
            faculty_id=assignment.faculty.id,
            requested_periods=requested,
            allocated_periods=allocated,
            category=category,
            reason=reason,
        )
        self._warnings.append(warning)
        self._warned.add(assignment.key)
        logger.warning(
            "ALLOCATION SHORTFALL | class=%s | faculty_id=%s | subject=%s | requested=%s | allocated=%s | category=%s",
            self.class_info,
            assignment.faculty.id,
            assignment.subject.name,
            requested,
            allocated,
            category,
        )
        return warning

    def preferred_day_conflict(
        self,
        assignment: Assignment,
        *,
        requested: int,
        allocated: int,
        detail: str,
    ) -> AllocationWarning | None:
        day = assignment.subject.preferred_day
        return self.record(
            assignment,
            requested=requested,
            allocated=allocated,
            category="preferred_day_conflict",
            reason=(
                f"{detail} on preferred day {day}: {assignment.faculty.name} has no free slot "
                "(preferred-day conflict)"
            ),
        )

    def shortfall(self, assignment: Assignment, *, requested: int, allocated: int) -> AllocationWarning | None:
        if assignment.subject.preferred_day is not None:
            return self.preferred_day_conflict(
                assignment,
                requested=requested,
                allocated=allocated,
                detail=f"Only {allocated}/{requested} periods placed",
            )
        foreign = self.registry.foreign_reservation_count(assignment.faculty.id, self.class_info)
        if foreign:
            return self.record(
                assignment,
                requested=requested,
                allocated=allocated,
                category="cross_section_conflict",
                reason=(
                    f"Only {allocated}/{requested} periods placed: {assignment.faculty.name} is already booked "
                    f"for {foreign} period(s) by other sections (cross-section faculty conflict)"
                ),
            )
        return self.record(
            assignment,
            requested=requested,
            allocated=allocated,
            category="under_allocated",
            reason=f"Only {allocated}/{requested} periods placed: not enough free periods left in the week",
        )

    def check_completeness(self, assignments: Iterable[Assignment], state: AllocationState) -> None:
        for assignment in assignments:
            if self.has_warning(assignment.key):
                continue
            requested = requested_periods(assignment.subject)
            allocated = state.weekly_counts[assignment.key]
            if allocated < requested:
                self.shortfall(assignment, requested=requested, allocated=allocated)
