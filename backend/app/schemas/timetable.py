from __future__ import annotations

import re
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DayName = Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

DAY_VALUES: tuple[str, ...] = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
PERIODS_PER_DAY = 8

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

WarningCategory = Literal["preferred_day_conflict", "cross_section_conflict", "under_allocated"]


def parse_time_to_minutes(value: str) -> int:
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class TimeSlot(BaseModel):
    model_config = ConfigDict(frozen=True)

    day: DayName
    period: int = Field(ge=0, le=PERIODS_PER_DAY)
    start_time: str
    end_time: str
    type: Literal["class", "break", "lunch"]

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        if not TIME_PATTERN.match(value):
            raise ValueError("Time must be in HH:MM 24-hour format")
        return value

    @model_validator(mode="after")
    def validate_period_kind(self) -> "TimeSlot":
        if parse_time_to_minutes(self.end_time) <= parse_time_to_minutes(self.start_time):
            raise ValueError("end_time must be after start_time")
        if (self.type == "class") != (self.period > 0):
            raise ValueError("Only class slots carry a teaching period")
        return self


class Subject(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    type: Literal["theory", "lab"] = "theory"
    periods_per_week: int = Field(default=4, ge=1, le=PERIODS_PER_DAY * len(DAY_VALUES))
    allocation: Literal["continuous", "random"] = "random"
    continuous_periods: int | None = Field(default=None, ge=1, le=PERIODS_PER_DAY)
    preferred_day: DayName | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        name = value.strip()
        if not name:
            raise ValueError("Subject name cannot be blank")
        return name

    @model_validator(mode="after")
    def validate_continuous_periods(self) -> "Subject":
        if self.continuous_periods is not None and self.continuous_periods > self.periods_per_week:
            raise ValueError("continuous_periods cannot exceed periods_per_week")
        return self


class Faculty(BaseModel):
    id: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=200)
    subjects: list[Subject] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_subjects(self) -> "Faculty":
        seen: set[str] = set()
        duplicates: set[str] = set()
        for subject in self.subjects:
            if subject.name in seen:
                duplicates.add(subject.name)
            seen.add(subject.name)
        if duplicates:
            raise ValueError(f"Duplicate subject name(s) for faculty {self.id}: {', '.join(sorted(duplicates))}")
        return self


class ClassIdentity(BaseModel):
    class_name: str = Field(min_length=1, max_length=200)
    year: int = Field(ge=1, le=10)
    section: str = Field(min_length=1, max_length=50)
    semester: int = Field(ge=1, le=20)

    @field_validator("class_name", "section")
    @classmethod
    def strip_text(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("Value cannot be blank")
        return text

    @property
    def class_info(self) -> str:
        return f"{self.class_name}-{self.year}-{self.section}-{self.semester}"


class TimetableEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    time_slot: TimeSlot
    faculty_id: str
    faculty_name: str
    subject_name: str
    subject_type: Literal["theory", "lab"]
    batch: Literal["A", "B"] | None = None
    is_continuation: bool = False


class AllocationWarning(BaseModel):
    subject_name: str
    faculty_name: str
    faculty_id: str
    requested_periods: int = Field(ge=0)
    allocated_periods: int = Field(ge=0)
    category: WarningCategory
    reason: str


class GeneratedTimetable(BaseModel):
    id: str
    class_name: str
    year: int
    section: str
    semester: int
    entries: list[TimetableEntry] = Field(default_factory=list)
    created_at: datetime
    created_by: str
    warnings: list[AllocationWarning] = Field(default_factory=list)

    @property
    def class_info(self) -> str:
        return ClassIdentity(
            class_name=self.class_name,
            year=self.year,
            section=self.section,
            semester=self.semester,
        ).class_info


class TimetableSummary(BaseModel):
    id: str
    class_name: str
    year: int
    section: str
    semester: int
    class_info: str
    created_by: str
    created_at: datetime
    entry_count: int
    warning_count: int
