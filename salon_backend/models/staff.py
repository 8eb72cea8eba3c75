"""Barber and salon staff model definitions."""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String
from salon_backend.database import Base, generate_id


class Barber(Base):
    """Represents a barber profile attached to a salon."""
    __tablename__ = "barbers"

    id = Column(String(32), primary_key=True, default=generate_id)
    user_id = Column(String(32), nullable=False, index=True)
    salon_id = Column(String(32), ForeignKey("salons.id"), nullable=False, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    specialty = Column(String, nullable=False)
    experience_years = Column(Integer, default=0)
    rating = Column(Float, default=0.0)
    total_reviews = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.now)


class SalonStaff(Base):
    """Represents a salon employee, optionally linked to a barber profile."""
    __tablename__ = "salon_staff"

    id = Column(String(32), primary_key=True, default=generate_id)
    user_id = Column(String(32), nullable=False, index=True)
    salon_id = Column(String(32), ForeignKey("salons.id"), nullable=False, index=True)
    barber_id = Column(String(32), ForeignKey("barbers.id"), nullable=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    shift = Column(String, default="Full Day")  # Morning/Afternoon/Evening/Full Day
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.now)
