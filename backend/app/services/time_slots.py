from __future__ import annotations

from functools import lru_cache

from app.schemas.timetable import DAY_VALUES, TimeSlot

# (period, start, end, type); breaks and lunch carry period 0
WEEKLY_TEMPLATE: tuple[tuple[int, str, str, str], ...] = (
    (1, "09:00", "09:50", "class"),
    (2, "09:50", "10:40", "class"),
    (0, "10:40", "10:55", "break"),
    (3, "10:55", "11:45", "class"),
    (4, "11:45", "12:35", "class"),
    (0, "12:35", "13:15", "lunch"),
    (5, "13:15", "14:05", "class"),
    (6, "14:05", "14:55", "class"),
    (0, "14:55", "15:10", "break"),
    (7, "15:10", "16:00", "class"),
    (8, "16:00", "16:50", "class"),
)

TEACHING_PERIODS: tuple[int, ...] = tuple(period for period, *_ in WEEKLY_TEMPLATE if period > 0)


@lru_cache
def generate_time_slots() -> tuple[TimeSlot, ...]:
    return tuple(
        TimeSlot(day=day, period=period, start_time=start, end_time=end, type=kind)
        for day in DAY_VALUES
        for period, start, end, kind in WEEKLY_TEMPLATE
    )


@lru_cache
def _class_slots() -> dict[tuple[str, int], TimeSlot]:
    return {(slot.day, slot.period): slot for slot in generate_time_slots() if slot.type == "class"}


def slot_for(day: str, period: int) -> TimeSlot:
    try:
        return _class_slots()[(day, period)]
    except KeyError as exc:
        raise ValueError(f"No teaching period {period} on {day}") from exc
