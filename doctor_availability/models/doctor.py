"""Doctor profile model definitions."""

from sqlalchemy import JSON, Column, ForeignKey, Integer, String
from doctor_availability.database import Base


class Doctor(Base):
    """Represents the doctor profile attached to a user with the doctor role."""
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True)
    specialization = Column(String)
    consultation_fee = Column(Integer, default=0)
    # Weekly availability map in its camelCase wire format.
    availability = Column(JSON, default=dict)
