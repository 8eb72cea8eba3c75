from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, field_validator, model_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from salon_backend.models.staff import Barber
from salon_backend.routes.dependencies import (
    booking_http_error,
    database_unavailable,
    ensure_database_ready,
    get_db,
)
from salon_backend.scheduling.availability import list_available_windows
from salon_backend.scheduling.clock import parse_clock
from salon_backend.scheduling.errors import BookingError
from salon_backend.scheduling.roster import GenericStylist, StaffMember, load_roster
from salon_backend.scheduling.slot_generator import TimeWindow
from salon_backend.scheduling.slot_store import SlotStore

router = APIRouter(tags=['schedules'])


def _normalize_clock(value: str) -> str:
    parsed = parse_clock(value)
    if parsed is None:
        raise ValueError('Times must use the HH:MM format.')
    return f'{parsed.hour:02d}:{parsed.minute:02d}'


class StaffResponse(BaseModel):
    id: str
    name: str
    kind: str
    specialty: str
    rating: float
    experience_years: int
    total_reviews: int


class TimeWindowResponse(BaseModel):
    id: str
    salon_id: str
    date: date
    start_time: str
    end_time: str
    segment: str
    is_booked: bool = False
    is_virtual: bool = True
    barber_id: str
    available_barbers: list[StaffResponse]


class ScheduleSlotResponse(BaseModel):
    id: str
    barber_id: str
    salon_id: str
    date: date
    day_of_week: str | None = None
    start_time: str
    end_time: str
    is_booked: bool
    appointment_id: str | None = None

    class Config:
        from_attributes = True


class AvailabilityCheckResponse(BaseModel):
    is_available: bool
    conflicting_slots: list[ScheduleSlotResponse]


class CreateScheduleSlotRequest(BaseModel):
    barber_id: str
    salon_id: str
    date: date
    start_time: str
    end_time: str

    @field_validator('barber_id', 'salon_id')
    @classmethod
    def validate_identifier(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Identifier is required.')
        return normalized

    @field_validator('start_time', 'end_time')
    @classmethod
    def validate_clock(cls, value: str) -> str:
        return _normalize_clock(value)

    @model_validator(mode='after')
    def validate_interval(self) -> 'CreateScheduleSlotRequest':
        if self.end_time <= self.start_time:
            raise ValueError('End time must be after start time.')
        return self


def to_staff_response(member: StaffMember) -> StaffResponse:
    return StaffResponse(
        id=member.id,
        name=member.name,
        kind='stylist' if isinstance(member, GenericStylist) else 'barber',
        specialty=member.specialty,
        rating=member.rating,
        experience_years=member.experience_years,
        total_reviews=member.total_reviews,
    )


def to_window_response(salon_id: str, window: TimeWindow) -> TimeWindowResponse:
    available = [to_staff_response(member) for member in window.available_staff]
    return TimeWindowResponse(
        id=window.slot_id,
        salon_id=salon_id,
        date=window.date,
        start_time=window.start_time,
        end_time=window.end_time,
        segment=window.segment,
        barber_id=available[0].id,
        available_barbers=available,
    )


@router.get('/available', response_model=list[TimeWindowResponse])
def list_available_slots(
    salon_id: str = Query(...),
    slot_date: date = Query(..., alias='date'),
    barber_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        windows = list_available_windows(db, salon_id, slot_date, staff_filter=barber_id)
        return [to_window_response(salon_id, window) for window in windows]
    except BookingError as exc:
        raise booking_http_error(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.get('/check-availability', response_model=AvailabilityCheckResponse)
def check_availability(
    barber_id: str = Query(...),
    slot_date: date = Query(..., alias='date'),
    start_time: str = Query(...),
    end_time: str = Query(...),
    db: Session = Depends(get_db),
):
    try:
        start_time = _normalize_clock(start_time)
        end_time = _normalize_clock(end_time)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    ensure_database_ready()

    try:
        is_available, conflicts = SlotStore(db).check_availability(barber_id, slot_date, start_time, end_time)
        return AvailabilityCheckResponse(
            is_available=is_available,
            conflicting_slots=[ScheduleSlotResponse.model_validate(slot) for slot in conflicts],
        )
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.get('/orphans', response_model=list[ScheduleSlotResponse])
def list_orphaned_slots(db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return SlotStore(db).find_orphans()
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.get('', response_model=list[ScheduleSlotResponse])
def list_schedule_slots(
    barber_id: str | None = Query(default=None),
    salon_id: str | None = Query(default=None),
    slot_date: date | None = Query(default=None, alias='date'),
    is_booked: bool | None = Query(default=None),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return SlotStore(db).list_slots(
            barber_id=barber_id,
            salon_id=salon_id,
            slot_date=slot_date,
            is_booked=is_booked,
        )
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.post('', response_model=ScheduleSlotResponse, status_code=status.HTTP_201_CREATED)
def add_schedule_slot(data: CreateScheduleSlotRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        roster_ids = {member.id for member in load_roster(db, data.salon_id)}
        if data.barber_id not in roster_ids:
            if db.get(Barber, data.barber_id) is not None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail='Barber does not belong to this salon.',
                )
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail='Barber not found.',
            )

        return SlotStore(db).create_slot(
            barber_id=data.barber_id,
            salon_id=data.salon_id,
            slot_date=data.date,
            start_time=data.start_time,
            end_time=data.end_time,
        )
    except BookingError as exc:
        raise booking_http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.delete('/{slot_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_schedule_slot(slot_id: str, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        SlotStore(db).delete(slot_id)
    except BookingError as exc:
        raise booking_http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc
