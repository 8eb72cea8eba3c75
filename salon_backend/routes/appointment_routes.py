import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from salon_backend.core import config
from salon_backend.routes.dependencies import (
    booking_http_error,
    database_unavailable,
    ensure_database_ready,
    get_db,
)
from salon_backend.scheduling.appointment_store import AppointmentStore
from salon_backend.scheduling.coordinator import BookingCoordinator
from salon_backend.scheduling.errors import BookingError
from salon_backend.scheduling.slot_store import SlotStore

router = APIRouter(tags=['appointments'])

logger = logging.getLogger(__name__)

UPDATABLE_STATUSES = ('completed', 'no-show')


class CreateAppointmentRequest(BaseModel):
    customer_id: str
    barber_id: str
    salon_id: str
    service_id: str
    schedule_slot_id: str
    appointment_date_time: datetime
    notes: str | None = None

    @field_validator('customer_id', 'barber_id', 'salon_id', 'service_id', 'schedule_slot_id')
    @classmethod
    def validate_identifier(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Identifier is required.')
        return normalized

    @field_validator('appointment_date_time')
    @classmethod
    def validate_appointment_date_time(cls, value: datetime) -> datetime:
        # Stored times are naive local times.
        if value.tzinfo is not None:
            value = value.astimezone().replace(tzinfo=None)
        return value.replace(second=0, microsecond=0)

    @field_validator('notes')
    @classmethod
    def validate_notes(cls, value: str | None) -> str | None:
        if value is None:
            return None

        normalized = value.strip()
        if not normalized:
            return None

        if len(normalized) > config.MAX_APPOINTMENT_NOTES_LENGTH:
            raise ValueError(f'Notes must be {config.MAX_APPOINTMENT_NOTES_LENGTH} characters or fewer.')

        return normalized


class UpdateAppointmentStatusRequest(BaseModel):
    status: str

    @field_validator('status')
    @classmethod
    def validate_status(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in UPDATABLE_STATUSES:
            raise ValueError('Status must be completed or no-show.')
        return normalized


class AppointmentResponse(BaseModel):
    id: str
    customer_id: str
    barber_id: str
    salon_id: str
    service_id: str
    schedule_slot_id: str
    appointment_date_time: datetime
    status: str
    payment_status: str
    notes: str | None = None

    class Config:
        from_attributes = True


def build_coordinator(db: Session) -> BookingCoordinator:
    return BookingCoordinator(SlotStore(db), AppointmentStore(db))


@router.post('', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(data: CreateAppointmentRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return build_coordinator(db).book_appointment(
            customer_id=data.customer_id,
            barber_id=data.barber_id,
            salon_id=data.salon_id,
            service_id=data.service_id,
            slot_selector=data.schedule_slot_id,
            appointment_date_time=data.appointment_date_time,
            notes=data.notes,
        )
    except BookingError as exc:
        raise booking_http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Booking failed for slot %s', data.schedule_slot_id)
        raise database_unavailable() from exc


@router.get('', response_model=list[AppointmentResponse])
def list_appointments(
    customer_id: str | None = Query(default=None),
    barber_id: str | None = Query(default=None),
    salon_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return AppointmentStore(db).list_for(customer_id=customer_id, barber_id=barber_id, salon_id=salon_id)
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.get('/{appointment_id}', response_model=AppointmentResponse)
def get_appointment(appointment_id: str, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return AppointmentStore(db).require(appointment_id)
    except BookingError as exc:
        raise booking_http_error(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.delete('/{appointment_id}', response_model=AppointmentResponse)
def cancel_appointment(appointment_id: str, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return build_coordinator(db).cancel_appointment(appointment_id)
    except BookingError as exc:
        raise booking_http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.put('/{appointment_id}/payment', response_model=AppointmentResponse)
def confirm_payment(appointment_id: str, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return AppointmentStore(db).confirm_payment(appointment_id)
    except BookingError as exc:
        raise booking_http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.put('/{appointment_id}/status', response_model=AppointmentResponse)
def update_appointment_status(
    appointment_id: str,
    data: UpdateAppointmentStatusRequest,
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return AppointmentStore(db).update_status(appointment_id, data.status)
    except BookingError as exc:
        raise booking_http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc
