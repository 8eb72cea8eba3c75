"""Booking transaction with explicit compensation.

A booking attempt moves through::

    ValidatingRequest -> ResolvingSlot -> ReservingSlot -> CreatingAppointment
        -> LinkingSlot -> Committed

and leaves early through ``Rejected`` (nothing held) or ``RolledBack`` (the
reservation taken by this attempt was released). Once the appointment exists
it is the source of truth: a failed back-link is logged, never undone.
"""

import enum
import logging
from datetime import datetime
from typing import Callable

from salon_backend.models.appointment import Appointment
from salon_backend.models.schedule_slot import ScheduleSlot
from salon_backend.scheduling.appointment_store import AppointmentStore
from salon_backend.scheduling.clock import format_clock, is_inside_buffer, parse_clock, slot_end_time
from salon_backend.scheduling.errors import (
    AlreadyBooked,
    SlotMismatch,
    SlotNotFound,
    TooSoon,
    ValidationFailed,
)
from salon_backend.scheduling.notifications import LoggingNotifier, Notifier
from salon_backend.scheduling.slot_generator import parse_virtual_slot_id
from salon_backend.scheduling.slot_store import SlotStore

logger = logging.getLogger(__name__)


class BookingState(enum.Enum):
    VALIDATING_REQUEST = 'ValidatingRequest'
    RESOLVING_SLOT = 'ResolvingSlot'
    RESERVING_SLOT = 'ReservingSlot'
    CREATING_APPOINTMENT = 'CreatingAppointment'
    LINKING_SLOT = 'LinkingSlot'
    COMMITTED = 'Committed'
    ROLLED_BACK = 'RolledBack'
    REJECTED = 'Rejected'


class BookingCoordinator:
    def __init__(
        self,
        slots: SlotStore,
        appointments: AppointmentStore,
        notifier: Notifier | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.slots = slots
        self.appointments = appointments
        self.notifier = notifier or LoggingNotifier()
        self.clock = clock

    def _enter(self, state: BookingState, slot_selector: str) -> BookingState:
        logger.debug('Booking %s: %s', slot_selector, state.value)
        return state

    def book_appointment(
        self,
        customer_id: str,
        barber_id: str,
        salon_id: str,
        service_id: str,
        slot_selector: str,
        appointment_date_time: datetime,
        notes: str | None = None,
    ) -> Appointment:
        self._enter(BookingState.VALIDATING_REQUEST, slot_selector)
        now = self.clock()
        if is_inside_buffer(appointment_date_time, now):
            self._enter(BookingState.REJECTED, slot_selector)
            raise TooSoon()

        self._enter(BookingState.RESOLVING_SLOT, slot_selector)
        try:
            slot = self._resolve_slot(barber_id, salon_id, slot_selector, appointment_date_time)
            slot_start = datetime.combine(slot.date, parse_clock(slot.start_time))
            if is_inside_buffer(slot_start, now):
                raise TooSoon()
            if slot_start != appointment_date_time:
                raise ValidationFailed('Appointment time does not match the selected slot.')
        except Exception:
            self._enter(BookingState.REJECTED, slot_selector)
            raise

        self._enter(BookingState.RESERVING_SLOT, slot_selector)
        try:
            slot = self.slots.reserve_if_free(slot.id)
        except Exception:
            self._enter(BookingState.REJECTED, slot_selector)
            raise

        try:
            self._verify_reservation(slot, barber_id)
        except Exception:
            self._compensate(slot.id, slot_selector)
            raise

        self._enter(BookingState.CREATING_APPOINTMENT, slot_selector)
        try:
            appointment = self.appointments.create(
                customer_id=customer_id,
                barber_id=barber_id,
                salon_id=salon_id,
                service_id=service_id,
                schedule_slot_id=slot.id,
                appointment_date_time=appointment_date_time,
                notes=notes,
            )
        except Exception:
            logger.warning('Appointment creation failed for slot %s, releasing reservation', slot.id, exc_info=True)
            self._compensate(slot.id, slot_selector)
            raise

        self._enter(BookingState.LINKING_SLOT, slot_selector)
        try:
            self.slots.attach_appointment(slot.id, appointment.id)
        except Exception:
            logger.exception(
                'Appointment %s created but slot %s could not be linked to it', appointment.id, slot.id,
            )

        self._enter(BookingState.COMMITTED, slot_selector)
        self._notify(appointment)
        return appointment

    def cancel_appointment(self, appointment_id: str) -> Appointment:
        appointment = self.appointments.require(appointment_id)
        if appointment.status == 'cancelled':
            return appointment
        if appointment.status != 'scheduled':
            raise ValidationFailed(f'Cannot cancel a {appointment.status} appointment.')

        # The slot is released first so a failure before the status write
        # never leaves a reserved slot behind a cancelled appointment.
        self.slots.release(appointment.schedule_slot_id)
        logger.info('Released slot %s for appointment %s', appointment.schedule_slot_id, appointment_id)

        return self.appointments.mark_cancelled(appointment_id)

    def _resolve_slot(
        self,
        barber_id: str,
        salon_id: str,
        slot_selector: str,
        appointment_date_time: datetime,
    ) -> ScheduleSlot:
        selected = parse_virtual_slot_id(slot_selector)
        if selected is None:
            slot = self.slots.get(slot_selector)
            if slot is None:
                raise SlotNotFound()
            if slot.salon_id != salon_id:
                logger.warning('Slot %s belongs to salon %s, not requested salon %s', slot.id, slot.salon_id, salon_id)
                raise SlotMismatch()
            return slot

        start = parse_clock(selected)
        if start is None:
            raise ValidationFailed('Invalid virtual slot time.')
        start_time = format_clock(start)
        end_time = slot_end_time(start_time)
        if end_time is None:
            raise ValidationFailed('Virtual slot must end before midnight.')
        if appointment_date_time.time() != start:
            raise ValidationFailed('Appointment time does not match the selected slot.')

        return self.slots.materialize_or_fetch(
            barber_id=barber_id,
            salon_id=salon_id,
            slot_date=appointment_date_time.date(),
            start_time=start_time,
            end_time=end_time,
        )

    def _verify_reservation(self, slot: ScheduleSlot, barber_id: str) -> None:
        if slot.barber_id != barber_id:
            logger.error(
                'Reserved slot %s belongs to barber %s, not requested barber %s',
                slot.id, slot.barber_id, barber_id,
            )
            raise SlotMismatch()

        # Checked after our own reservation is committed: of two racing
        # overlapping reservations at least the later one sees the other.
        overlapping = self.slots.overlapping_reservations(slot)
        if overlapping:
            logger.info(
                'Slot %s overlaps reserved slot(s) %s for barber %s',
                slot.id, ', '.join(other.id for other in overlapping), barber_id,
            )
            raise AlreadyBooked()

    def _compensate(self, slot_id: str, slot_selector: str) -> None:
        try:
            self.slots.release(slot_id)
        except Exception:
            logger.exception('Failed to release slot %s during rollback', slot_id)
        else:
            logger.info('Released slot %s after failed booking', slot_id)
        self._enter(BookingState.ROLLED_BACK, slot_selector)

    def _notify(self, appointment: Appointment) -> None:
        try:
            self.notifier.send_booking_confirmation(appointment)
        except Exception:
            logger.exception('Booking confirmation failed for appointment %s', appointment.id)
