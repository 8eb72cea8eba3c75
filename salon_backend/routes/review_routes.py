from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from salon_backend.core import config
from salon_backend.models.appointment import Appointment
from salon_backend.models.review import Review
from salon_backend.routes.dependencies import database_unavailable, ensure_database_ready, get_db
from salon_backend.scheduling.ratings import refresh_barber_rating, refresh_salon_rating

router = APIRouter(tags=['reviews'])


class CreateReviewRequest(BaseModel):
    customer_id: str
    appointment_id: str
    rating: int
    review_text: str

    @field_validator('rating')
    @classmethod
    def validate_rating(cls, value: int) -> int:
        if not 1 <= value <= 5:
            raise ValueError('Rating must be between 1 and 5.')
        return value

    @field_validator('review_text')
    @classmethod
    def validate_review_text(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Review text is required.')
        if len(normalized) > config.MAX_REVIEW_TEXT_LENGTH:
            raise ValueError(f'Review text must be {config.MAX_REVIEW_TEXT_LENGTH} characters or fewer.')
        return normalized


class ReviewResponse(BaseModel):
    id: str
    customer_id: str
    salon_id: str
    appointment_id: str
    barber_id: str | None = None
    rating: int
    review_text: str
    created_at: datetime

    class Config:
        from_attributes = True


@router.post('', response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def submit_review(data: CreateReviewRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        appointment = db.get(Appointment, data.appointment_id)
        if appointment is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail='Appointment not found.',
            )

        if appointment.customer_id != data.customer_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail='Not authorized to review this appointment.',
            )

        if appointment.status != 'completed':
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail='Can only review completed appointments.',
            )

        existing_review = db.query(Review).filter(Review.appointment_id == appointment.id).first()
        if existing_review:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail='Review already submitted for this appointment.',
            )

        review = Review(
            customer_id=data.customer_id,
            salon_id=appointment.salon_id,
            appointment_id=appointment.id,
            barber_id=appointment.barber_id,
            rating=data.rating,
            review_text=data.review_text,
        )
        db.add(review)
        db.commit()
        db.refresh(review)

        refresh_salon_rating(db, review.salon_id)
        refresh_barber_rating(db, review.barber_id)

        return review
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc
