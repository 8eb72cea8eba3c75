"""Average rating recomputation for salons and barbers."""

from typing import Iterable

from sqlalchemy.orm import Session

from salon_backend.models.review import Review
from salon_backend.models.salon import Salon
from salon_backend.models.staff import Barber


def compute_average_rating(ratings: Iterable[int]) -> tuple[float, int] | None:
    """Return ``(average rounded to one decimal, review count)``, or None when there are no ratings."""
    ratings = list(ratings)
    if not ratings:
        return None

    return round(sum(ratings) / len(ratings), 1), len(ratings)


def refresh_salon_rating(db: Session, salon_id: str) -> Salon | None:
    salon = db.get(Salon, salon_id)
    if salon is None:
        return None

    ratings = [rating for (rating,) in db.query(Review.rating).filter(Review.salon_id == salon_id).all()]
    summary = compute_average_rating(ratings)
    if summary is not None:
        salon.rating, salon.total_reviews = summary
        db.commit()

    return salon


def refresh_barber_rating(db: Session, barber_id: str) -> Barber | None:
    barber = db.get(Barber, barber_id)
    if barber is None:
        return None

    ratings = [rating for (rating,) in db.query(Review.rating).filter(Review.barber_id == barber_id).all()]
    summary = compute_average_rating(ratings)
    if summary is not None:
        barber.rating, barber.total_reviews = summary
        db.commit()

    return barber
