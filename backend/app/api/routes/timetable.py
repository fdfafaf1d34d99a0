import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.core.exceptions import ResourceNotFoundError
from app.models.timetable import GeneratedTimetableRecord
from app.schemas.timetable import GeneratedTimetable, TimetableSummary
from app.services.timetable_store import delete_timetable, list_timetables, load_timetable, summarize

router = APIRouter()
logger = logging.getLogger(__name__)


def _get_record(db: Session, timetable_id: str) -> GeneratedTimetableRecord:
    record = db.get(GeneratedTimetableRecord, timetable_id)
    if record is None:
        raise ResourceNotFoundError("Timetable", timetable_id)
    return record


@router.get("/timetables", response_model=list[TimetableSummary])
def list_generated_timetables(
    class_name: str | None = Query(default=None, max_length=200),
    db: Session = Depends(get_db),
) -> list[TimetableSummary]:
    return [summarize(record) for record in list_timetables(db, class_name=class_name)]


@router.get("/timetables/{timetable_id}", response_model=GeneratedTimetable)
def get_generated_timetable(timetable_id: str, db: Session = Depends(get_db)) -> GeneratedTimetable:
    return load_timetable(_get_record(db, timetable_id))


@router.delete("/timetables/{timetable_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_generated_timetable(timetable_id: str, db: Session = Depends(get_db)) -> None:
    record = _get_record(db, timetable_id)
    class_info = record.class_info
    released = delete_timetable(db, record)
    logger.info("TIMETABLE DELETED | id=%s | class=%s | released=%s", timetable_id, class_info, released)
