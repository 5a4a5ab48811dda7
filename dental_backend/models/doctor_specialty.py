"""Doctor specialty model definitions."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from dental_backend.database import Base


class DoctorSpecialty(Base):
    """A specialty tag (e.g. orthodontics) carried by a doctor."""
    __tablename__ = "doctor_specialties"

    id = Column(Integer, primary_key=True)
    doctor_id = Column(String(36), ForeignKey("profiles.id"), index=True, nullable=False)
    specialty = Column(String, nullable=False)

    doctor = relationship("Profile", back_populates="specialties")
