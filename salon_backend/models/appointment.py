"""Appointment model definitions."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String
from salon_backend.database import Base, generate_id

APPOINTMENT_STATUSES = ('scheduled', 'completed', 'cancelled', 'no-show')
PAYMENT_STATUSES = ('pending', 'paid', 'cancelled', 'refunded')


class Appointment(Base):
    """Represents a confirmed booking against a reserved schedule slot."""
    __tablename__ = "appointments"

    id = Column(String(32), primary_key=True, default=generate_id)
    customer_id = Column(String(32), nullable=False, index=True)
    barber_id = Column(String(32), nullable=False)
    salon_id = Column(String(32), ForeignKey("salons.id"), nullable=False)
    service_id = Column(String(32), ForeignKey("services.id"), nullable=False)
    schedule_slot_id = Column(String(32), ForeignKey("schedule_slots.id"), nullable=False)
    appointment_date_time = Column(DateTime, nullable=False)
    status = Column(String, nullable=False, default="scheduled")
    payment_status = Column(String, nullable=False, default="pending")
    notes = Column(String)
    created_at = Column(DateTime, default=datetime.now)
