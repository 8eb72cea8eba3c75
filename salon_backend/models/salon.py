"""Salon model definitions."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Float, Integer, String
from salon_backend.database import Base, generate_id


class Salon(Base):
    """Represents a salon and its daily operating hours."""
    __tablename__ = "salons"

    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    address = Column(String)
    city = Column(String)
    email = Column(String)
    phone = Column(String)
    opening_time = Column(String(5))  # HH:MM
    closing_time = Column(String(5))  # HH:MM
    description = Column(String)
    rating = Column(Float, default=0.0)
    total_reviews = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.now)
