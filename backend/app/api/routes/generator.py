import logging
from time import perf_counter

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_generator
from app.core.config import get_settings
from app.core.exceptions import SchedulerError
from app.schemas.generator import GenerateTimetableRequest
from app.schemas.timetable import GeneratedTimetable
from app.services.timetable_generator import TimetableGenerator
from app.services.timetable_store import delete_class_timetables, save_timetable

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/timetables/generate", response_model=GeneratedTimetable, status_code=status.HTTP_201_CREATED)
def generate_timetable(
    payload: GenerateTimetableRequest,
    generator: TimetableGenerator = Depends(get_generator),
    db: Session = Depends(get_db),
) -> GeneratedTimetable:
    started = perf_counter()
    identity = payload.identity()
    created_by = payload.created_by or get_settings().default_created_by
    faculties = payload.selected_faculties()

    timetable = generator.generate(faculties, identity, created_by)
    if not timetable.entries:
        # Generation already released the class reservations, so an older stored copy is stale.
        delete_class_timetables(db, identity.class_info)
        logger.warning(
            "TIMETABLE GENERATION EMPTY | class=%s | faculty=%s | warnings=%s",
            identity.class_info,
            len(faculties),
            len(timetable.warnings),
        )
        raise SchedulerError(
            message=(
                "Could not generate timetable. All faculty members have conflicts "
                "with other sections at every available time slot."
            ),
            details={
                "class_info": identity.class_info,
                "warnings": [warning.model_dump() for warning in timetable.warnings],
            },
        )

    save_timetable(db, timetable)
    logger.info(
        "TIMETABLE STORED | id=%s | class=%s | entries=%s | warnings=%s | wall_ms=%s",
        timetable.id,
        identity.class_info,
        len(timetable.entries),
        len(timetable.warnings),
        int((perf_counter() - started) * 1000),
    )
    return timetable
