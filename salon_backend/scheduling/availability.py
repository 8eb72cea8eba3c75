from datetime import date, datetime

from sqlalchemy.orm import Session

from salon_backend.models.salon import Salon
from salon_backend.scheduling.errors import SalonNotFound
from salon_backend.scheduling.roster import load_roster
from salon_backend.scheduling.slot_generator import TimeWindow, generate_windows
from salon_backend.scheduling.slot_store import SlotStore


def list_available_windows(
    db: Session,
    salon_id: str,
    target_date: date,
    staff_filter: str | None = None,
    now: datetime | None = None,
) -> list[TimeWindow]:
    """Bookable windows for a salon on one date. Read-only."""
    salon = db.get(Salon, salon_id)
    if salon is None:
        raise SalonNotFound()

    return generate_windows(
        opening_time=salon.opening_time,
        closing_time=salon.closing_time,
        target_date=target_date,
        now=now or datetime.now(),
        roster=load_roster(db, salon_id),
        reservations=SlotStore(db).reserved_for(salon_id, target_date),
        staff_filter=staff_filter,
    )
