"""Appointment model definitions."""

import uuid

from sqlalchemy import Column, Date, ForeignKey, Integer, String, Time
from dental_backend.database import Base


class Appointment(Base):
    """Represents a booked appointment."""
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    patient_id = Column(String(36), ForeignKey("profiles.id"))
    doctor_id = Column(String(36), ForeignKey("profiles.id"))
    branch = Column(String)
    appointment_date = Column(Date)
    appointment_time = Column(Time)
    duration_minutes = Column(Integer)
    status = Column(String, default="pending")
