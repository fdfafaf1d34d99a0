from fastapi import APIRouter, Depends, Query

from app.api.deps import get_registry
from app.schemas.registry import FacultyAvailabilityOut, FacultyScheduleOut, ReleaseResponse
from app.schemas.timetable import PERIODS_PER_DAY, DayName
from app.services.reservation_registry import FacultyReservationRegistry

router = APIRouter()


@router.get("/registry/faculty/{faculty_id}", response_model=FacultyScheduleOut)
def get_faculty_schedule(
    faculty_id: str,
    registry: FacultyReservationRegistry = Depends(get_registry),
) -> FacultyScheduleOut:
    return FacultyScheduleOut(faculty_id=faculty_id, reservations=registry.schedule_for(faculty_id))


@router.get("/registry/faculty/{faculty_id}/availability", response_model=FacultyAvailabilityOut)
def get_faculty_availability(
    faculty_id: str,
    day: DayName,
    period: int = Query(ge=1, le=PERIODS_PER_DAY),
    registry: FacultyReservationRegistry = Depends(get_registry),
) -> FacultyAvailabilityOut:
    return FacultyAvailabilityOut(
        faculty_id=faculty_id,
        day=day,
        period=period,
        available=registry.is_available(faculty_id, day, period),
    )


@router.delete("/registry/classes/{class_info}", response_model=ReleaseResponse)
def release_class_reservations(
    class_info: str,
    registry: FacultyReservationRegistry = Depends(get_registry),
) -> ReleaseResponse:
    return ReleaseResponse(released=registry.release_class(class_info))


@router.delete("/registry", response_model=ReleaseResponse)
def clear_registry(registry: FacultyReservationRegistry = Depends(get_registry)) -> ReleaseResponse:
    return ReleaseResponse(released=registry.clear_all())
