"""Staff roster for a salon.

Barbers and active salon staff are merged into one roster. A staff member
that maps to no barber profile is booked as a generic stylist.
"""

from dataclasses import dataclass
from typing import Iterable, Union

from sqlalchemy.orm import Session

from salon_backend.models.staff import Barber, SalonStaff

GENERIC_STYLIST_SPECIALTY = 'Stylist'


@dataclass(frozen=True)
class RealBarber:
    id: str
    name: str
    specialty: str
    rating: float = 0.0
    experience_years: int = 0
    total_reviews: int = 0


@dataclass(frozen=True)
class GenericStylist:
    id: str
    name: str

    @property
    def specialty(self) -> str:
        return GENERIC_STYLIST_SPECIALTY

    @property
    def rating(self) -> float:
        return 0.0

    @property
    def experience_years(self) -> int:
        return 0

    @property
    def total_reviews(self) -> int:
        return 0


StaffMember = Union[RealBarber, GenericStylist]


def _full_name(first_name: str | None, last_name: str | None) -> str:
    return ' '.join(part for part in (first_name, last_name) if part)


def merge_roster(barbers: Iterable[Barber], staff: Iterable[SalonStaff]) -> list[StaffMember]:
    barbers = list(barbers)
    roster: list[StaffMember] = [
        RealBarber(
            id=barber.id,
            name=_full_name(barber.first_name, barber.last_name),
            specialty=barber.specialty,
            rating=barber.rating or 0.0,
            experience_years=barber.experience_years or 0,
            total_reviews=barber.total_reviews or 0,
        )
        for barber in barbers
    ]
    barber_ids = {barber.id for barber in barbers}
    barber_user_ids = {barber.user_id for barber in barbers}

    for member in staff:
        if member.barber_id in barber_ids or member.user_id in barber_user_ids:
            continue
        roster.append(GenericStylist(id=member.id, name=_full_name(member.first_name, member.last_name)))

    return roster


def load_roster(db: Session, salon_id: str) -> list[StaffMember]:
    barbers = db.query(Barber).filter(Barber.salon_id == salon_id).order_by(Barber.created_at.asc()).all()
    staff = db.query(SalonStaff).filter(
        SalonStaff.salon_id == salon_id,
        SalonStaff.is_active.is_(True),
    ).order_by(SalonStaff.created_at.asc()).all()

    return merge_roster(barbers, staff)
