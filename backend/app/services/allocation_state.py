from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass, field

from app.schemas.timetable import Faculty, Subject, TimetableEntry
from app.services.reservation_registry import FacultyReservationRegistry
from app.services.time_slots import slot_for

LAB_BATCHES: tuple[str, str] = ("A", "B")
LAB_SESSION_PERIODS = 3

SubjectKey = tuple[str, str]


@dataclass(frozen=True, eq=False)
class Assignment:
    """A subject as taught by one faculty member."""

    faculty: Faculty
    subject: Subject

    @property
    def key(self) -> SubjectKey:
        return (self.faculty.id, self.subject.name)

    @property
    def is_lab(self) -> bool:
        return self.subject.type == "lab"


def requested_periods(subject: Subject) -> int:
    if subject.type == "lab":
        return LAB_SESSION_PERIODS * len(LAB_BATCHES)
    return subject.periods_per_week


@dataclass
class AllocationState:
    """In-progress entries of one generation run plus the usage counters the engines consult."""

    class_info: str
    entries: list[TimetableEntry] = field(default_factory=list)
    faculty_slots: dict[str, set[tuple[str, int]]] = field(default_factory=lambda: defaultdict(set))
    weekly_counts: Counter = field(default_factory=Counter)
    daily_counts: Counter = field(default_factory=Counter)
    period_usage: dict[SubjectKey, set[int]] = field(default_factory=lambda: defaultdict(set))
    _by_slot: dict[tuple[str, int], list[TimetableEntry]] = field(default_factory=lambda: defaultdict(list))

    def entries_at(self, day: str, period: int) -> list[TimetableEntry]:
        return list(self._by_slot.get((day, period), ()))

    def is_slot_empty(self, day: str, period: int) -> bool:
        return not self._by_slot.get((day, period))

    def theory_at(self, day: str, period: int) -> TimetableEntry | None:
        for entry in self._by_slot.get((day, period), ()):
            if entry.subject_type == "theory":
                return entry
        return None

    def lab_at(self, day: str, period: int, batch: str) -> TimetableEntry | None:
        for entry in self._by_slot.get((day, period), ()):
            if entry.subject_type == "lab" and entry.batch == batch:
                return entry
        return None

    def lab_entry_count(self, day: str) -> int:
        return sum(1 for entry in self.entries if entry.subject_type == "lab" and entry.time_slot.day == day)

    def is_faculty_booked(self, faculty_id: str, day: str, period: int) -> bool:
        return (day, period) in self.faculty_slots.get(faculty_id, ())

    def place(
        self,
        assignment: Assignment,
        day: str,
        period: int,
        *,
        batch: str | None = None,
        is_continuation: bool = False,
    ) -> TimetableEntry:
        entry_id = f"{day}-{period}-{assignment.faculty.id}"
        if batch is not None:
            entry_id = f"{entry_id}-{batch}"
        entry = TimetableEntry(
            id=entry_id,
            time_slot=slot_for(day, period),
            faculty_id=assignment.faculty.id,
            faculty_name=assignment.faculty.name,
            subject_name=assignment.subject.name,
            subject_type=assignment.subject.type,
            batch=batch,
            is_continuation=is_continuation,
        )
        self.entries.append(entry)
        self._by_slot[(day, period)].append(entry)
        self.faculty_slots[assignment.faculty.id].add((day, period))
        self.weekly_counts[assignment.key] += 1
        self.daily_counts[(assignment.key, day)] += 1
        self.period_usage[assignment.key].add(period)
        return entry


def is_faculty_free(
    state: AllocationState,
    registry: FacultyReservationRegistry,
    faculty_id: str,
    day: str,
    period: int,
) -> bool:
    if state.is_faculty_booked(faculty_id, day, period):
        return False
    return registry.is_available(faculty_id, day, period)
