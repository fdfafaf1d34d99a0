from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from app.schemas.timetable import ClassIdentity, Faculty


class GenerateTimetableRequest(BaseModel):
    faculties: list[Faculty] = Field(min_length=1)
    class_name: str = Field(min_length=1, max_length=200)
    year: int = Field(default=1, ge=1, le=10)
    section: str = Field(default="A", min_length=1, max_length=50)
    semester: int = Field(default=1, ge=1, le=20)
    created_by: str | None = Field(default=None, max_length=200)
    # faculty id -> names of the subjects to include; None selects everything
    subject_selection: dict[str, list[str]] | None = None

    @field_validator("class_name", "section")
    @classmethod
    def strip_text(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("Value cannot be blank")
        return text

    @model_validator(mode="after")
    def validate_references(self) -> "GenerateTimetableRequest":
        seen: set[str] = set()
        duplicates: set[str] = set()
        for faculty in self.faculties:
            if faculty.id in seen:
                duplicates.add(faculty.id)
            seen.add(faculty.id)
        if duplicates:
            raise ValueError(f"Duplicate faculty id(s): {', '.join(sorted(duplicates))}")
        empty = [faculty.id for faculty in self.faculties if not faculty.subjects]
        if empty:
            raise ValueError(f"Faculty without subjects: {', '.join(empty)}")

        if self.subject_selection is not None:
            faculty_by_id = {faculty.id: faculty for faculty in self.faculties}
            for faculty_id, subject_names in self.subject_selection.items():
                faculty = faculty_by_id.get(faculty_id)
                if faculty is None:
                    raise ValueError(f"Subject selection references unknown faculty id {faculty_id}")
                known = {subject.name for subject in faculty.subjects}
                unknown = sorted(set(subject_names) - known)
                if unknown:
                    raise ValueError(
                        f"Subject selection for faculty {faculty_id} references unknown subject(s): {', '.join(unknown)}"
                    )
            if not any(self.subject_selection.values()):
                raise ValueError("Select at least one subject to generate a timetable")
        return self

    def identity(self) -> ClassIdentity:
        return ClassIdentity(
            class_name=self.class_name,
            year=self.year,
            section=self.section,
            semester=self.semester,
        )

    def selected_faculties(self) -> list[Faculty]:
        if self.subject_selection is None:
            return list(self.faculties)
        selected: list[Faculty] = []
        for faculty in self.faculties:
            names = set(self.subject_selection.get(faculty.id, []))
            subjects = [subject for subject in faculty.subjects if subject.name in names]
            if subjects:
                selected.append(faculty.model_copy(update={"subjects": subjects}))
        return selected
