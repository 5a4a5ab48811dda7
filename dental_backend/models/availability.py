"""Doctor availability model definitions."""

from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, String, Time
from dental_backend.database import Base


class DoctorAvailability(Base):
    """A doctor's working window at a branch.

    Recurring rows are keyed by ``day_of_week`` (0 = Sunday); one-off rows
    carry a ``specific_date`` and take precedence over recurring rows.
    """
    __tablename__ = "doctor_availability"

    id = Column(Integer, primary_key=True)
    doctor_id = Column(String(36), ForeignKey("profiles.id"), nullable=False)
    branch = Column(String, nullable=False)
    recurring = Column(Boolean, default=True, nullable=False)
    day_of_week = Column(Integer)
    specific_date = Column(Date)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)
