from app.models.faculty_reservation import FacultyReservation  # noqa: F401
from app.models.timetable import GeneratedTimetableRecord  # noqa: F401
