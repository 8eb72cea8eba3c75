"""Schedule slot model definitions."""

from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, String, UniqueConstraint
from salon_backend.database import Base, generate_id


class ScheduleSlot(Base):
    """Represents one bookable window for one staff member on one date."""
    __tablename__ = "schedule_slots"

    id = Column(String(32), primary_key=True, default=generate_id)
    # Either a barber id or a generic stylist (salon staff) id.
    barber_id = Column(String(32), nullable=False)
    salon_id = Column(String(32), ForeignKey("salons.id"), nullable=False)
    date = Column(Date, nullable=False)
    day_of_week = Column(String)
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)  # HH:MM
    is_booked = Column(Boolean, nullable=False, default=False)
    appointment_id = Column(String(32), nullable=True)
    created_at = Column(DateTime, default=datetime.now)

    __table_args__ = (
        UniqueConstraint("barber_id", "salon_id", "date", "start_time", name="uq_schedule_slot_key"),
    )
