from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.models.timetable import GeneratedTimetableRecord
from app.schemas.timetable import GeneratedTimetable, TimetableSummary
from app.services.reservation_registry import FacultyReservationRegistry


def save_timetable(db: Session, timetable: GeneratedTimetable) -> GeneratedTimetableRecord:
    """Store a timetable, replacing whatever was stored earlier for the same class.

    Generation released the earlier timetable's reservations already, so keeping
    it around would show a schedule the registry no longer protects.
    """
    class_info = timetable.class_info
    delete_class_timetables(db, class_info, commit=False)
    record = GeneratedTimetableRecord(
        id=timetable.id,
        class_name=timetable.class_name,
        year=timetable.year,
        section=timetable.section,
        semester=timetable.semester,
        class_info=class_info,
        created_by=timetable.created_by,
        created_at=timetable.created_at,
        payload=timetable.model_dump(mode="json"),
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


def load_timetable(record: GeneratedTimetableRecord) -> GeneratedTimetable:
    return GeneratedTimetable.model_validate(record.payload)


def summarize(record: GeneratedTimetableRecord) -> TimetableSummary:
    payload = record.payload or {}
    return TimetableSummary(
        id=record.id,
        class_name=record.class_name,
        year=record.year,
        section=record.section,
        semester=record.semester,
        class_info=record.class_info,
        created_by=record.created_by,
        created_at=record.created_at,
        entry_count=len(payload.get("entries", [])),
        warning_count=len(payload.get("warnings", [])),
    )


def list_timetables(db: Session, *, class_name: str | None = None) -> list[GeneratedTimetableRecord]:
    query = select(GeneratedTimetableRecord).order_by(GeneratedTimetableRecord.created_at.desc())
    if class_name:
        query = query.where(GeneratedTimetableRecord.class_name == class_name)
    return list(db.execute(query).scalars())


def delete_timetable(db: Session, record: GeneratedTimetableRecord) -> int:
    """Delete a stored timetable and free its faculty reservations for other sections."""
    class_info = record.class_info
    db.delete(record)
    db.commit()
    return FacultyReservationRegistry(db).release_class(class_info)


def delete_class_timetables(db: Session, class_info: str, *, commit: bool = True) -> int:
    result = db.execute(delete(GeneratedTimetableRecord).where(GeneratedTimetableRecord.class_info == class_info))
    if commit:
        db.commit()
    return result.rowcount or 0
