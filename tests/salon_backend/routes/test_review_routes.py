from datetime import date, datetime, timedelta

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from salon_backend.models.salon import Salon
from salon_backend.models.staff import Barber
from salon_backend.routes.review_routes import CreateReviewRequest, submit_review
from salon_backend.scheduling.appointment_store import AppointmentStore
from salon_backend.scheduling.slot_store import SlotStore

VISIT_DAY = date.today() + timedelta(days=2)


@pytest.fixture(autouse=True)
def skip_schema_checks(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr('salon_backend.routes.review_routes.ensure_database_ready', lambda: None)


def _appointment(db, seeded, customer_id: str = 'customer-1', start_time: str = '10:00', completed: bool = True):
    slot = SlotStore(db).create_slot(seeded.ids.barber, seeded.ids.salon, VISIT_DAY, start_time, '23:00')
    store = AppointmentStore(db)
    appointment = store.create(
        customer_id=customer_id,
        barber_id=seeded.ids.barber,
        salon_id=seeded.ids.salon,
        service_id=seeded.ids.service,
        schedule_slot_id=slot.id,
        appointment_date_time=datetime.combine(VISIT_DAY, datetime.strptime(start_time, '%H:%M').time()),
    )
    if completed:
        appointment = store.update_status(appointment.id, 'completed')
    return appointment


def test_review_request_validates_rating_and_text() -> None:
    request = CreateReviewRequest(customer_id='c', appointment_id='a', rating=5, review_text='  Great fade  ')
    assert request.review_text == 'Great fade'

    with pytest.raises(ValidationError):
        CreateReviewRequest(customer_id='c', appointment_id='a', rating=6, review_text='Too good')
    with pytest.raises(ValidationError):
        CreateReviewRequest(customer_id='c', appointment_id='a', rating=3, review_text='   ')


def test_submit_review_refreshes_salon_and_barber_ratings(booking_db, seed_salon) -> None:
    seeded = seed_salon(booking_db)
    first = _appointment(booking_db, seeded, start_time='10:00')
    second = _appointment(booking_db, seeded, start_time='12:00')

    submit_review(
        CreateReviewRequest(customer_id='customer-1', appointment_id=first.id, rating=5, review_text='Sharp.'),
        db=booking_db,
    )
    review = submit_review(
        CreateReviewRequest(customer_id='customer-1', appointment_id=second.id, rating=4, review_text='Good.'),
        db=booking_db,
    )

    assert review.salon_id == seeded.ids.salon
    assert review.barber_id == seeded.ids.barber
    salon = booking_db.get(Salon, seeded.ids.salon)
    barber = booking_db.get(Barber, seeded.ids.barber)
    assert (salon.rating, salon.total_reviews) == (4.5, 2)
    assert (barber.rating, barber.total_reviews) == (4.5, 2)


def test_submit_review_requires_completed_appointment(booking_db, seed_salon) -> None:
    seeded = seed_salon(booking_db)
    appointment = _appointment(booking_db, seeded, completed=False)

    with pytest.raises(HTTPException) as exception_info:
        submit_review(
            CreateReviewRequest(customer_id='customer-1', appointment_id=appointment.id, rating=3, review_text='Ok.'),
            db=booking_db,
        )

    assert exception_info.value.status_code == 400
    assert exception_info.value.detail == 'Can only review completed appointments.'


def test_submit_review_rejects_other_customer(booking_db, seed_salon) -> None:
    seeded = seed_salon(booking_db)
    appointment = _appointment(booking_db, seeded)

    with pytest.raises(HTTPException) as exception_info:
        submit_review(
            CreateReviewRequest(customer_id='customer-2', appointment_id=appointment.id, rating=1, review_text='Bad.'),
            db=booking_db,
        )

    assert exception_info.value.status_code == 403


def test_submit_review_rejects_second_review(booking_db, seed_salon) -> None:
    seeded = seed_salon(booking_db)
    appointment = _appointment(booking_db, seeded)
    request = CreateReviewRequest(customer_id='customer-1', appointment_id=appointment.id, rating=4, review_text='Nice.')
    submit_review(request, db=booking_db)

    with pytest.raises(HTTPException) as exception_info:
        submit_review(request, db=booking_db)

    assert exception_info.value.status_code == 400
    assert exception_info.value.detail == 'Review already submitted for this appointment.'


def test_submit_review_reports_unknown_appointment(booking_db) -> None:
    with pytest.raises(HTTPException) as exception_info:
        submit_review(
            CreateReviewRequest(customer_id='customer-1', appointment_id='missing', rating=4, review_text='Nice.'),
            db=booking_db,
        )

    assert exception_info.value.status_code == 404
