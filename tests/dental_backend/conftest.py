import os
from datetime import time

import pytest

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')
os.environ.setdefault('AUTH_JWT_SECRET', 'test-signing-secret-for-the-clinic-suite')

from dental_backend.scheduling.availability_resolver import AvailabilityResolver  # noqa: E402
from dental_backend.scheduling.booking_store import (  # noqa: E402
    INACTIVE_APPOINTMENT_STATUSES,
    AvailabilityWindow,
    BookedAppointment,
    DoctorProfile,
    StoreAccessError,
)


def _to_time(value: str | time) -> time:
    return value if isinstance(value, time) else time.fromisoformat(value)


class FakeBookingStore:
    """In-memory stand-in for the SQL booking store."""

    def __init__(self):
        self.windows: list[AvailabilityWindow] = []
        self.appointments: list[BookedAppointment] = []
        self.doctors: list[DoctorProfile] = []
        self.failing: set[str] = set()

    def add_weekly(self, doctor_id, day_of_week, start, end, branch='Cabugao', is_available=True):
        self.windows.append(AvailabilityWindow(
            doctor_id=doctor_id,
            branch=branch,
            recurring=True,
            day_of_week=day_of_week,
            start_time=_to_time(start),
            end_time=_to_time(end),
            is_available=is_available,
        ))

    def add_one_off(self, doctor_id, on_date, start, end, branch='Cabugao', is_available=True):
        self.windows.append(AvailabilityWindow(
            doctor_id=doctor_id,
            branch=branch,
            recurring=False,
            specific_date=on_date,
            start_time=_to_time(start),
            end_time=_to_time(end),
            is_available=is_available,
        ))

    def add_booking(self, doctor_id, on_date, at, minutes=None, status='confirmed', appointment_id=None):
        self.appointments.append(BookedAppointment(
            id=appointment_id or f'appt-{len(self.appointments) + 1}',
            doctor_id=doctor_id,
            appointment_date=on_date,
            appointment_time=_to_time(at),
            duration_minutes=minutes,
            status=status,
        ))

    def add_doctor(self, doctor_id, name, specialties=()):
        self.doctors.append(DoctorProfile(id=doctor_id, full_name=name, specialties=list(specialties)))

    def fail(self, *operations):
        self.failing.update(operations)

    def _guard(self, operation):
        if operation in self.failing:
            raise StoreAccessError(f'{operation} unavailable')

    def fetch_recurring_availability(self, doctor_id, branch, day_of_week):
        self._guard('recurring')
        return [
            window for window in self.windows
            if window.recurring
            and window.is_available
            and window.doctor_id == doctor_id
            and window.branch == branch
            and window.day_of_week == day_of_week
        ]

    def fetch_specific_availability(self, doctor_id, branch, target_date):
        self._guard('specific')
        return [
            window for window in self.windows
            if not window.recurring
            and window.is_available
            and window.doctor_id == doctor_id
            and window.branch == branch
            and window.specific_date == target_date
        ]

    def fetch_appointments(self, doctor_id, target_date, exclude_id=None):
        self._guard('appointments')
        return [
            appointment for appointment in self.appointments
            if appointment.doctor_id == doctor_id
            and appointment.appointment_date == target_date
            and (appointment.status or '').lower() not in INACTIVE_APPOINTMENT_STATUSES
            and appointment.id != exclude_id
        ]

    def fetch_doctors(self, branch=None):
        self._guard('doctors')
        return list(self.doctors)


@pytest.fixture
def fake_store() -> FakeBookingStore:
    return FakeBookingStore()


@pytest.fixture
def resolver(fake_store: FakeBookingStore) -> AvailabilityResolver:
    return AvailabilityResolver(fake_store, slot_interval=30, lookahead_days=90, max_workers=4)
