"""Review model definitions."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from salon_backend.database import Base, generate_id


class Review(Base):
    """Represents a customer review of a completed appointment."""
    __tablename__ = "reviews"

    id = Column(String(32), primary_key=True, default=generate_id)
    customer_id = Column(String(32), nullable=False)
    salon_id = Column(String(32), ForeignKey("salons.id"), nullable=False, index=True)
    appointment_id = Column(String(32), ForeignKey("appointments.id"), nullable=False)
    barber_id = Column(String(32), nullable=True, index=True)
    rating = Column(Integer, nullable=False)
    review_text = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.now)
