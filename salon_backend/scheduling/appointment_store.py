"""Durable appointment registry. Appointments are never hard-deleted."""

from datetime import datetime

from sqlalchemy.orm import Session

from salon_backend.models.appointment import Appointment
from salon_backend.models.service import Service
from salon_backend.scheduling.errors import AppointmentNotFound, ValidationFailed

STATUS_TRANSITIONS = {
    'scheduled': {'completed', 'cancelled', 'no-show'},
}


class AppointmentStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, appointment_id: str) -> Appointment | None:
        return self.db.get(Appointment, appointment_id)

    def require(self, appointment_id: str) -> Appointment:
        appointment = self.get(appointment_id)
        if appointment is None:
            raise AppointmentNotFound()
        return appointment

    def create(
        self,
        customer_id: str,
        barber_id: str,
        salon_id: str,
        service_id: str,
        schedule_slot_id: str,
        appointment_date_time: datetime,
        notes: str | None = None,
    ) -> Appointment:
        service = self.db.get(Service, service_id)
        if service is None or service.salon_id != salon_id:
            raise ValidationFailed('Service not found for this salon.')
        if not service.is_active:
            raise ValidationFailed('This service is not currently offered.')

        appointment = Appointment(
            customer_id=customer_id,
            barber_id=barber_id,
            salon_id=salon_id,
            service_id=service_id,
            schedule_slot_id=schedule_slot_id,
            appointment_date_time=appointment_date_time,
            notes=notes,
            status='scheduled',
            payment_status='pending',
        )
        self.db.add(appointment)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(appointment)
        return appointment

    def list_for(
        self,
        customer_id: str | None = None,
        barber_id: str | None = None,
        salon_id: str | None = None,
    ) -> list[Appointment]:
        query = self.db.query(Appointment)
        if customer_id:
            query = query.filter(Appointment.customer_id == customer_id)
        if barber_id:
            query = query.filter(Appointment.barber_id == barber_id)
        if salon_id:
            query = query.filter(Appointment.salon_id == salon_id)

        return query.order_by(Appointment.appointment_date_time.desc()).all()

    def mark_cancelled(self, appointment_id: str) -> Appointment:
        appointment = self.require(appointment_id)
        appointment.status = 'cancelled'
        self.db.commit()
        self.db.refresh(appointment)
        return appointment

    def update_status(self, appointment_id: str, status: str) -> Appointment:
        appointment = self.require(appointment_id)
        if status == 'cancelled':
            raise ValidationFailed('Use cancellation to cancel an appointment.')
        if status not in STATUS_TRANSITIONS.get(appointment.status, set()):
            raise ValidationFailed(f'Cannot change appointment status from {appointment.status} to {status}.')

        appointment.status = status
        self.db.commit()
        self.db.refresh(appointment)
        return appointment

    def confirm_payment(self, appointment_id: str) -> Appointment:
        appointment = self.require(appointment_id)
        if appointment.payment_status != 'pending':
            raise ValidationFailed(f'Payment is already {appointment.payment_status}.')
        if appointment.status == 'cancelled':
            raise ValidationFailed('Cannot confirm payment for a cancelled appointment.')

        appointment.payment_status = 'paid'
        self.db.commit()
        self.db.refresh(appointment)
        return appointment
