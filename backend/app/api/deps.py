from collections.abc import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from app.db.session import SessionLocal
from app.services.reservation_registry import FacultyReservationRegistry
from app.services.timetable_generator import TimetableGenerator


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_registry(db: Session = Depends(get_db)) -> FacultyReservationRegistry:
    return FacultyReservationRegistry(db)


def get_generator(registry: FacultyReservationRegistry = Depends(get_registry)) -> TimetableGenerator:
    return TimetableGenerator(registry=registry)
