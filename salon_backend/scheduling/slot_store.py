"""Durable slot registry.

Slot identity is the ``(barber_id, salon_id, date, start_time)`` unique key
and reservation state is the ``is_booked`` flag. Both are only ever changed
through conditional statements that the database applies atomically, so the
store stays correct with several service instances sharing one database.
Every operation commits its own unit of work.
"""

import logging
from datetime import date

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from salon_backend.models.schedule_slot import ScheduleSlot
from salon_backend.scheduling.clock import day_of_week
from salon_backend.scheduling.errors import (
    AlreadyBooked,
    SlotAlreadyExists,
    SlotInUse,
    SlotNotFound,
    SlotNotReserved,
)
from salon_backend.scheduling.slot_generator import Reservation

logger = logging.getLogger(__name__)

MATERIALIZE_ATTEMPTS = 3


class SlotStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, slot_id: str) -> ScheduleSlot | None:
        return self.db.get(ScheduleSlot, slot_id)

    def find(self, barber_id: str, salon_id: str, slot_date: date, start_time: str) -> ScheduleSlot | None:
        return self.db.query(ScheduleSlot).filter(
            ScheduleSlot.barber_id == barber_id,
            ScheduleSlot.salon_id == salon_id,
            ScheduleSlot.date == slot_date,
            ScheduleSlot.start_time == start_time,
        ).first()

    def materialize_or_fetch(
        self,
        barber_id: str,
        salon_id: str,
        slot_date: date,
        start_time: str,
        end_time: str,
    ) -> ScheduleSlot:
        """Return the slot for this key, inserting it as free when absent.

        Concurrent callers race on the unique key. The loser's insert fails
        with an integrity error, which is absorbed here and followed by a
        re-read of the winner's row.
        """
        for attempt in range(1, MATERIALIZE_ATTEMPTS + 1):
            existing = self.find(barber_id, salon_id, slot_date, start_time)
            if existing is not None:
                return existing

            slot = ScheduleSlot(
                barber_id=barber_id,
                salon_id=salon_id,
                date=slot_date,
                day_of_week=day_of_week(slot_date),
                start_time=start_time,
                end_time=end_time,
                is_booked=False,
            )
            self.db.add(slot)
            try:
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                logger.debug(
                    'Slot insert lost race for barber=%s salon=%s date=%s start=%s (attempt %d)',
                    barber_id, salon_id, slot_date, start_time, attempt,
                )
                continue

            self.db.refresh(slot)
            logger.info('Materialized slot %s for barber=%s date=%s start=%s', slot.id, barber_id, slot_date, start_time)
            return slot

        raise SlotNotFound()

    def create_slot(
        self,
        barber_id: str,
        salon_id: str,
        slot_date: date,
        start_time: str,
        end_time: str,
    ) -> ScheduleSlot:
        slot = ScheduleSlot(
            barber_id=barber_id,
            salon_id=salon_id,
            date=slot_date,
            day_of_week=day_of_week(slot_date),
            start_time=start_time,
            end_time=end_time,
            is_booked=False,
        )
        self.db.add(slot)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise SlotAlreadyExists() from exc

        self.db.refresh(slot)
        return slot

    def reserve_if_free(self, slot_id: str) -> ScheduleSlot:
        result = self.db.execute(
            update(ScheduleSlot)
            .where(ScheduleSlot.id == slot_id, ScheduleSlot.is_booked.is_(False))
            .values(is_booked=True)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self.db.rollback()
            if self.get(slot_id) is None:
                raise SlotNotFound()
            raise AlreadyBooked()

        self.db.commit()
        return self.get(slot_id)

    def release(self, slot_id: str) -> None:
        self.db.execute(
            update(ScheduleSlot)
            .where(ScheduleSlot.id == slot_id)
            .values(is_booked=False, appointment_id=None)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()

    def attach_appointment(self, slot_id: str, appointment_id: str) -> None:
        result = self.db.execute(
            update(ScheduleSlot)
            .where(ScheduleSlot.id == slot_id, ScheduleSlot.is_booked.is_(True))
            .values(appointment_id=appointment_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self.db.rollback()
            raise SlotNotReserved()

        self.db.commit()

    def delete(self, slot_id: str) -> None:
        result = self.db.execute(
            delete(ScheduleSlot)
            .where(ScheduleSlot.id == slot_id, ScheduleSlot.is_booked.is_(False))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self.db.rollback()
            if self.get(slot_id) is None:
                raise SlotNotFound()
            raise SlotInUse()

        self.db.commit()

    def list_slots(
        self,
        barber_id: str | None = None,
        salon_id: str | None = None,
        slot_date: date | None = None,
        is_booked: bool | None = None,
    ) -> list[ScheduleSlot]:
        query = self.db.query(ScheduleSlot)
        if barber_id:
            query = query.filter(ScheduleSlot.barber_id == barber_id)
        if salon_id:
            query = query.filter(ScheduleSlot.salon_id == salon_id)
        if slot_date:
            query = query.filter(ScheduleSlot.date == slot_date)
        if is_booked is not None:
            query = query.filter(ScheduleSlot.is_booked.is_(is_booked))

        return query.order_by(ScheduleSlot.date.asc(), ScheduleSlot.start_time.asc()).all()

    def reserved_for(self, salon_id: str, slot_date: date) -> list[Reservation]:
        rows = self.db.query(ScheduleSlot.barber_id, ScheduleSlot.start_time, ScheduleSlot.end_time).filter(
            ScheduleSlot.salon_id == salon_id,
            ScheduleSlot.date == slot_date,
            ScheduleSlot.is_booked.is_(True),
        ).all()

        return [Reservation(staff_id, start_time, end_time) for staff_id, start_time, end_time in rows]

    def overlapping_reservations(self, slot: ScheduleSlot) -> list[ScheduleSlot]:
        """Other reserved slots of the same staff member on the same date that overlap ``slot``."""
        return self.db.query(ScheduleSlot).filter(
            ScheduleSlot.id != slot.id,
            ScheduleSlot.barber_id == slot.barber_id,
            ScheduleSlot.date == slot.date,
            ScheduleSlot.is_booked.is_(True),
            ScheduleSlot.start_time < slot.end_time,
            ScheduleSlot.end_time > slot.start_time,
        ).all()

    def find_orphans(self) -> list[ScheduleSlot]:
        return self.db.query(ScheduleSlot).filter(
            ScheduleSlot.is_booked.is_(True),
            ScheduleSlot.appointment_id.is_(None),
        ).order_by(ScheduleSlot.date.asc(), ScheduleSlot.start_time.asc()).all()

    def check_availability(
        self,
        barber_id: str,
        slot_date: date,
        start_time: str,
        end_time: str,
    ) -> tuple[bool, list[ScheduleSlot]]:
        # Zero-padded HH:MM strings order the same way as the times they encode.
        overlapping = self.db.query(ScheduleSlot).filter(
            ScheduleSlot.barber_id == barber_id,
            ScheduleSlot.date == slot_date,
            ScheduleSlot.start_time < end_time,
            ScheduleSlot.end_time > start_time,
        ).all()
        conflicts = [slot for slot in overlapping if slot.is_booked]

        return not conflicts, conflicts
