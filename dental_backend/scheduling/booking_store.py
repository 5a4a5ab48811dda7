"""Read-only access to schedules, bookings and doctor profiles."""

import logging
from contextlib import contextmanager
from datetime import date, time

from pydantic import BaseModel
from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from dental_backend.core import config
from dental_backend.database import SessionLocal
from dental_backend.models.appointment import Appointment
from dental_backend.models.availability import DoctorAvailability
from dental_backend.models.doctor_specialty import DoctorSpecialty  # noqa: F401
from dental_backend.models.profile import Profile

logger = logging.getLogger(__name__)

INACTIVE_APPOINTMENT_STATUSES = ('cancelled', 'rejected')
DOCTOR_ROLE = 'doctor'


class StoreAccessError(Exception):
    """Raised when the booking store cannot be read."""


class AvailabilityWindow(BaseModel):
    doctor_id: str
    branch: str
    recurring: bool
    day_of_week: int | None = None
    specific_date: date | None = None
    start_time: time
    end_time: time
    is_available: bool = True

    class Config:
        from_attributes = True


class BookedAppointment(BaseModel):
    id: str
    doctor_id: str | None = None
    appointment_date: date | None = None
    appointment_time: time | None = None
    duration_minutes: int | None = None
    status: str | None = None

    class Config:
        from_attributes = True

    @property
    def effective_duration_minutes(self) -> int:
        if self.duration_minutes and self.duration_minutes > 0:
            return self.duration_minutes
        return config.DEFAULT_APPOINTMENT_DURATION_MINUTES


class DoctorProfile(BaseModel):
    id: str
    full_name: str | None = None
    specialties: list[str] = []


class SqlAlchemyBookingStore:
    """BookingStore backed by the clinic's SQL tables.

    Every read opens and closes its own session so the store can be shared
    by worker threads.
    """

    def __init__(self, session_factory=SessionLocal):
        self._session_factory = session_factory

    @contextmanager
    def _session(self, operation: str):
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as exc:
            logger.exception('Booking store read failed during %s.', operation)
            raise StoreAccessError(f'Unable to {operation}.') from exc
        finally:
            db.close()

    def fetch_recurring_availability(self, doctor_id: str, branch: str, day_of_week: int) -> list[AvailabilityWindow]:
        with self._session('fetch recurring availability') as db:
            rows = db.query(DoctorAvailability).filter(
                DoctorAvailability.doctor_id == doctor_id,
                DoctorAvailability.branch == branch,
                DoctorAvailability.recurring.is_(True),
                DoctorAvailability.day_of_week == day_of_week,
                DoctorAvailability.is_available.is_(True),
            ).order_by(DoctorAvailability.start_time.asc()).all()

            return [AvailabilityWindow.model_validate(row) for row in rows]

    def fetch_specific_availability(self, doctor_id: str, branch: str, target_date: date) -> list[AvailabilityWindow]:
        with self._session('fetch specific-date availability') as db:
            rows = db.query(DoctorAvailability).filter(
                DoctorAvailability.doctor_id == doctor_id,
                DoctorAvailability.branch == branch,
                DoctorAvailability.recurring.is_(False),
                DoctorAvailability.specific_date == target_date,
                DoctorAvailability.is_available.is_(True),
            ).order_by(DoctorAvailability.start_time.asc()).all()

            return [AvailabilityWindow.model_validate(row) for row in rows]

    def fetch_appointments(
        self,
        doctor_id: str,
        target_date: date,
        exclude_id: str | None = None,
    ) -> list[BookedAppointment]:
        with self._session('fetch appointments') as db:
            query = db.query(Appointment).filter(
                Appointment.doctor_id == doctor_id,
                Appointment.appointment_date == target_date,
                or_(
                    Appointment.status.is_(None),
                    func.lower(Appointment.status).notin_(INACTIVE_APPOINTMENT_STATUSES),
                ),
            )
            if exclude_id:
                query = query.filter(Appointment.id != exclude_id)

            rows = query.order_by(Appointment.appointment_time.asc()).all()
            return [BookedAppointment.model_validate(row) for row in rows]

    def fetch_doctors(self, branch: str | None = None) -> list[DoctorProfile]:
        with self._session('fetch doctors') as db:
            query = db.query(Profile).options(selectinload(Profile.specialties)).filter(
                Profile.role == DOCTOR_ROLE,
                or_(Profile.disabled.is_(False), Profile.disabled.is_(None)),
            )
            if branch:
                query = query.filter(
                    Profile.id.in_(
                        select(DoctorAvailability.doctor_id).where(DoctorAvailability.branch == branch)
                    )
                )

            doctors = query.order_by(Profile.full_name.asc(), Profile.id.asc()).all()
            return [
                DoctorProfile(
                    id=doctor.id,
                    full_name=doctor.full_name,
                    specialties=[entry.specialty for entry in doctor.specialties],
                )
                for doctor in doctors
            ]
