"""Service model definitions."""

from sqlalchemy import Boolean, Column, Float, ForeignKey, Integer, String
from salon_backend.database import Base, generate_id


class Service(Base):
    """Represents a bookable salon service."""
    __tablename__ = "services"

    id = Column(String(32), primary_key=True, default=generate_id)
    salon_id = Column(String(32), ForeignKey("salons.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    category = Column(String, default="Other")
    price = Column(Float, default=0.0)
    duration_minutes = Column(Integer, default=60)
    is_active = Column(Boolean, default=True)
