"""Generate timetables for a few sections that share the same faculty pool.

Run:
  PYTHONPATH=backend python scripts/seed_demo_sections.py
"""

from __future__ import annotations

import os

from app.db.bootstrap import ensure_runtime_schema_compatibility
from app.db.session import SessionLocal
from app.schemas.timetable import ClassIdentity, Faculty, GeneratedTimetable
from app.services.reservation_registry import FacultyReservationRegistry
from app.services.timetable_generator import TimetableGenerator
from app.services.timetable_store import save_timetable

CLASS_NAME = os.getenv("DEMO_CLASS_NAME", "CSE")
SECTIONS = [item.strip() for item in os.getenv("DEMO_SECTIONS", "A,B,C").split(",") if item.strip()]
CREATED_BY = "Demo Seeder"

FACULTIES = [
    Faculty(
        id="FAC-101",
        name="Dr. Asha Menon",
        subjects=[
            {"name": "Database Systems", "periods_per_week": 4},
            {"name": "Database Lab", "type": "lab", "periods_per_week": 3},
        ],
    ),
    Faculty(
        id="FAC-102",
        name="Prof. Ravi Iyer",
        subjects=[
            {"name": "Operating Systems", "periods_per_week": 4, "allocation": "continuous", "continuous_periods": 2},
            {"name": "Systems Lab", "type": "lab", "periods_per_week": 3},
        ],
    ),
    Faculty(
        id="FAC-103",
        name="Dr. Meera Pillai",
        subjects=[
            {"name": "Discrete Mathematics", "periods_per_week": 5},
            {"name": "Compiler Design", "periods_per_week": 3, "allocation": "continuous"},
        ],
    ),
    Faculty(
        id="FAC-104",
        name="Prof. Kiran Rao",
        subjects=[{"name": "Professional Ethics", "periods_per_week": 2, "preferred_day": "Friday"}],
    ),
]


def _print_summary(timetable: GeneratedTimetable) -> None:
    print(f"{timetable.class_info}: {len(timetable.entries)} entries, {len(timetable.warnings)} warning(s)")
    for warning in timetable.warnings:
        print(f"  - [{warning.category}] {warning.subject_name}: {warning.reason}")


def main() -> None:
    ensure_runtime_schema_compatibility()
    db = SessionLocal()
    try:
        generator = TimetableGenerator(registry=FacultyReservationRegistry(db))
        for section in SECTIONS:
            identity = ClassIdentity(class_name=CLASS_NAME, year=2, section=section, semester=3)
            timetable = generator.generate(FACULTIES, identity, CREATED_BY)
            if timetable.entries:
                save_timetable(db, timetable)
            _print_summary(timetable)
    finally:
        db.close()


if __name__ == "__main__":
    main()
