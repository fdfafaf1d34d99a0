from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.faculty_reservation import FacultyReservation
from app.schemas.registry import ReservationRecord

logger = logging.getLogger(__name__)


class FacultyReservationRegistry:
    """Durable faculty -> (day, period, class) commitments shared by every section.

    Every read goes to the database because other generation runs may have
    committed reservations since the last call. The unique constraint on
    (faculty_id, day, period) is the only mutation gate: ``reserve`` returns
    False instead of raising when the slot is taken.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def is_available(self, faculty_id: str, day: str, period: int) -> bool:
        existing = self.db.scalar(
            select(FacultyReservation.id)
            .where(
                FacultyReservation.faculty_id == faculty_id,
                FacultyReservation.day == day,
                FacultyReservation.period == period,
            )
            .limit(1)
        )
        return existing is None

    def reserve(self, faculty_id: str, day: str, period: int, class_info: str) -> bool:
        if not self.is_available(faculty_id, day, period):
            return False
        self.db.add(
            FacultyReservation(
                faculty_id=faculty_id,
                day=day,
                period=period,
                class_info=class_info,
            )
        )
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(
                "RESERVATION RACE LOST | faculty_id=%s | day=%s | period=%s | class=%s",
                faculty_id,
                day,
                period,
                class_info,
            )
            return False
        return True

    def reserve_many(self, faculty_id: str, day: str, periods: Iterable[int], class_info: str) -> bool:
        reserved: list[int] = []
        for period in periods:
            if not self.reserve(faculty_id, day, period, class_info):
                if reserved:
                    self.release_slots(faculty_id, day, reserved, class_info)
                return False
            reserved.append(period)
        return True

    def release_slots(self, faculty_id: str, day: str, periods: Iterable[int], class_info: str) -> int:
        period_list = list(periods)
        if not period_list:
            return 0
        result = self.db.execute(
            delete(FacultyReservation).where(
                FacultyReservation.faculty_id == faculty_id,
                FacultyReservation.day == day,
                FacultyReservation.class_info == class_info,
                or_(*(FacultyReservation.period == period for period in period_list)),
            )
        )
        self.db.commit()
        return result.rowcount or 0

    def release_class(self, class_info: str) -> int:
        result = self.db.execute(delete(FacultyReservation).where(FacultyReservation.class_info == class_info))
        self.db.commit()
        released = result.rowcount or 0
        if released:
            logger.info("RESERVATIONS RELEASED | class=%s | count=%s", class_info, released)
        return released

    def schedule_for(self, faculty_id: str) -> list[ReservationRecord]:
        rows = self.db.execute(
            select(FacultyReservation)
            .where(FacultyReservation.faculty_id == faculty_id)
            .order_by(FacultyReservation.id)
        ).scalars()
        return [ReservationRecord.model_validate(row) for row in rows]

    def foreign_reservation_count(self, faculty_id: str, class_info: str) -> int:
        count = self.db.scalar(
            select(func.count(FacultyReservation.id)).where(
                and_(
                    FacultyReservation.faculty_id == faculty_id,
                    FacultyReservation.class_info != class_info,
                )
            )
        )
        return count or 0

    def clear_all(self) -> int:
        result = self.db.execute(delete(FacultyReservation))
        self.db.commit()
        logger.info("RESERVATIONS CLEARED | count=%s", result.rowcount or 0)
        return result.rowcount or 0
