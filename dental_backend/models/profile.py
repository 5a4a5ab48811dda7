"""Profile model definitions."""

import uuid

from sqlalchemy import Boolean, Column, String
from sqlalchemy.orm import relationship

from dental_backend.database import Base


class Profile(Base):
    """Represents an application user (patient, staff, doctor or admin)."""
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, index=True)
    full_name = Column(String)
    role = Column(String, index=True)  # patient/staff/doctor/admin
    disabled = Column(Boolean, default=False, nullable=False)

    specialties = relationship("DoctorSpecialty", back_populates="doctor", cascade="all, delete-orphan")
