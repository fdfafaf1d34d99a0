from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timezone
from time import perf_counter

from app.schemas.timetable import DAY_VALUES, ClassIdentity, Faculty, GeneratedTimetable, TimetableEntry
from app.services.allocation_state import AllocationState, Assignment
from app.services.diagnostics import AllocationDiagnostics
from app.services.lab_allocation import LabAllocator
from app.services.reservation_registry import FacultyReservationRegistry
from app.services.seeding import SeededRandom, seed_for
from app.services.theory_allocation import TheoryAllocator

logger = logging.getLogger(__name__)

# One generation at a time per process: the registry's check-then-reserve
# cycles of two runs must not interleave.
_generation_lock = threading.Lock()


def entry_sort_key(entry: TimetableEntry) -> tuple[int, int, str]:
    return (DAY_VALUES.index(entry.time_slot.day), entry.time_slot.period, entry.batch or "")


class TimetableGenerator:
    def __init__(self, *, registry: FacultyReservationRegistry) -> None:
        self.registry = registry

    def generate(
        self,
        faculties: list[Faculty],
        identity: ClassIdentity,
        created_by: str,
    ) -> GeneratedTimetable:
        with _generation_lock:
            return self._generate(faculties, identity, created_by)

    def _generate(self, faculties: list[Faculty], identity: ClassIdentity, created_by: str) -> GeneratedTimetable:
        started = perf_counter()
        class_info = identity.class_info
        assignments = [Assignment(faculty=faculty, subject=subject) for faculty in faculties for subject in faculty.subjects]
        logger.info(
            "TIMETABLE GENERATION START | class=%s | faculty=%s | subjects=%s | created_by=%s",
            class_info,
            len(faculties),
            len(assignments),
            created_by,
        )

        self.registry.release_class(class_info)

        seed = seed_for(class_info)
        shuffler = SeededRandom(seed)
        days = shuffler.shuffle(DAY_VALUES)
        labs = shuffler.shuffle([assignment for assignment in assignments if assignment.is_lab])
        theory = shuffler.shuffle([assignment for assignment in assignments if not assignment.is_lab])

        state = AllocationState(class_info=class_info)
        diagnostics = AllocationDiagnostics(registry=self.registry, class_info=class_info)
        LabAllocator(state=state, registry=self.registry, diagnostics=diagnostics, days=days).allocate(labs)
        TheoryAllocator(state=state, registry=self.registry, diagnostics=diagnostics, days=days).allocate(theory)
        diagnostics.check_completeness(assignments, state)

        timetable = GeneratedTimetable(
            id=str(uuid.uuid4()),
            class_name=identity.class_name,
            year=identity.year,
            section=identity.section,
            semester=identity.semester,
            entries=sorted(state.entries, key=entry_sort_key),
            created_at=datetime.now(timezone.utc),
            created_by=created_by,
            warnings=diagnostics.warnings,
        )
        logger.info(
            "TIMETABLE GENERATION COMPLETE | class=%s | seed=%s | entries=%s | warnings=%s | runtime_ms=%s",
            class_info,
            seed,
            len(timetable.entries),
            len(timetable.warnings),
            int((perf_counter() - started) * 1000),
        )
        return timetable
