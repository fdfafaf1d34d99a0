from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.timetable import DayName


class ReservationRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    faculty_id: str
    day: str
    period: int
    class_info: str


class FacultyScheduleOut(BaseModel):
    faculty_id: str
    reservations: list[ReservationRecord] = Field(default_factory=list)


class FacultyAvailabilityOut(BaseModel):
    faculty_id: str
    day: DayName
    period: int
    available: bool


class ReleaseResponse(BaseModel):
    released: int
