"""Doctor availability and appointment-slot resolution.

Open slots are derived from a doctor's availability windows for a branch:
specific-date windows replace the recurring weekly windows for that date,
and the branch's own opening hours are the fallback when there is no
doctor window at all. Booked appointments are subtracted using their own
durations. On top of that the resolver finds the next slot long enough for
a procedure, confirms a requested interval, and ranks doctors for
auto-assignment.

Every call reads a fresh snapshot from the store and never writes.
"""

import datetime
import logging
import math
from concurrent.futures import ThreadPoolExecutor
from datetime import date, time, timedelta

from pydantic import BaseModel

from dental_backend.core import config
from dental_backend.scheduling.booking_store import (
    AvailabilityWindow,
    BookedAppointment,
    DoctorProfile,
    StoreAccessError,
)
from dental_backend.scheduling.branch_hours import get_branch_hours, is_branch_closed
from dental_backend.scheduling.time_slots import (
    day_of_week,
    format_slot,
    intervals_overlap,
    iterate_slots,
    next_day,
    parse_date,
    parse_time,
    slot_to_minutes,
    to_minutes,
)

logger = logging.getLogger(__name__)

DAY_START = '00:00'


class NextAvailableSlot(BaseModel):
    next_available: str | None = None
    time_slots: list[str] = []


class DoctorCandidate(BaseModel):
    id: str
    name: str | None = None
    specialties: list[str] = []
    appointment_count: int = 0
    specialty_match_score: int = 0
    next_available_time: str | None = None
    available_time_slots: list[str] = []


class ScheduleProvider(BaseModel):
    id: str
    name: str | None = None


class ScheduleStatus(BaseModel):
    branch: str
    date: datetime.date | None = None
    is_open: bool = False
    hours: str | None = None
    provider_count: int = 0
    providers: list[ScheduleProvider] = []


class DaySummary(ScheduleStatus):
    day_name: str


def specialty_match_score(service_categories: list[str], specialties: list[str]) -> int:
    if not service_categories or not specialties:
        return 0
    owned = set(specialties)
    return len([category for category in service_categories if category in owned])


def _is_valid_window(window: AvailabilityWindow) -> bool:
    return window.start_time < window.end_time


def _appointment_interval(appointment: BookedAppointment) -> tuple[int, int] | None:
    if appointment.appointment_time is None:
        return None
    start = to_minutes(appointment.appointment_time)
    return start, start + appointment.effective_duration_minutes


class AvailabilityResolver:
    def __init__(
        self,
        store,
        slot_interval: int | None = None,
        lookahead_days: int | None = None,
        max_workers: int | None = None,
    ):
        self._store = store
        self.slot_interval = slot_interval or config.SLOT_INTERVAL_MINUTES
        self.lookahead_days = config.MAX_LOOKAHEAD_DAYS if lookahead_days is None else lookahead_days
        self.max_workers = max_workers or config.RESOLVER_MAX_WORKERS

    def _effective_windows(self, doctor_id: str, branch: str, target_date: date) -> list[AvailabilityWindow]:
        # Specific-date windows replace the weekly pattern for that date.
        specific = [
            window
            for window in self._store.fetch_specific_availability(doctor_id, branch, target_date)
            if _is_valid_window(window)
        ]
        if specific:
            return specific

        return [
            window
            for window in self._store.fetch_recurring_availability(doctor_id, branch, day_of_week(target_date))
            if _is_valid_window(window)
        ]

    def _map_doctors(self, func, doctors: list[DoctorProfile]) -> list:
        if not doctors:
            return []
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(doctors))) as executor:
            return list(executor.map(func, doctors))

    def get_available_time_slots(self, doctor_id: str | None, target_date: date | str | None, branch: str | None) -> list[str]:
        parsed_date = parse_date(target_date)
        if parsed_date is None or not branch:
            logger.debug('Slot lookup skipped: date=%r branch=%r', target_date, branch)
            return []

        if is_branch_closed(branch, parsed_date):
            return []

        windows: list[AvailabilityWindow] = []
        if doctor_id:
            try:
                windows = self._effective_windows(doctor_id, branch, parsed_date)
            except StoreAccessError:
                logger.warning('Falling back to branch hours for doctor %s on %s.', doctor_id, parsed_date)

        if windows:
            slot_starts = sorted({
                slot
                for window in windows
                for slot in iterate_slots(window.start_time, window.end_time, self.slot_interval)
            })
        else:
            hours = get_branch_hours(branch, parsed_date)
            if not hours.open:
                return []
            slot_starts = iterate_slots(hours.start_time, hours.end_time, self.slot_interval)

        if not doctor_id:
            return [format_slot(slot) for slot in slot_starts]

        try:
            appointments = self._store.fetch_appointments(doctor_id, parsed_date)
        except StoreAccessError:
            logger.warning('Could not load bookings for doctor %s on %s; returning unfiltered slots.', doctor_id, parsed_date)
            return [format_slot(slot) for slot in slot_starts]

        booked = [interval for interval in map(_appointment_interval, appointments) if interval is not None]

        return [
            format_slot(slot)
            for slot in slot_starts
            if not any(
                intervals_overlap(slot, slot + self.slot_interval, booked_start, booked_end)
                for booked_start, booked_end in booked
            )
        ]

    def _first_fitting_slot(self, slots: list[str], slots_needed: int) -> str | None:
        present = set(slots)
        for slot in slots:
            start = slot_to_minutes(slot)
            if all(
                format_slot(start + step * self.slot_interval) in present
                for step in range(1, slots_needed)
            ):
                return slot
        return None

    def get_next_available_time_slot(
        self,
        doctor_id: str | None,
        target_date: date | str | None,
        requested_time: time | str | None,
        branch: str | None,
        duration_minutes: int = config.DEFAULT_APPOINTMENT_DURATION_MINUTES,
    ) -> NextAvailableSlot:
        """First slot at or after ``requested_time`` with room for the whole duration.

        When the requested day has slots but none fits, following days are
        searched from midnight, up to ``lookahead_days`` days ahead. Days
        without any slot are skipped during that search.
        """
        current_date = parse_date(target_date)
        start_time = parse_time(requested_time)
        if current_date is None or start_time is None:
            return NextAvailableSlot()

        duration_minutes = duration_minutes or config.DEFAULT_APPOINTMENT_DURATION_MINUTES
        slots_needed = max(1, math.ceil(duration_minutes / self.slot_interval))
        earliest = format_slot(to_minutes(start_time))

        for offset in range(self.lookahead_days + 1):
            available = self.get_available_time_slots(doctor_id, current_date, branch)
            if not available and offset == 0:
                return NextAvailableSlot()

            later_slots = [slot for slot in available if slot >= earliest]
            candidate = self._first_fitting_slot(later_slots, slots_needed)
            if candidate is not None:
                return NextAvailableSlot(next_available=candidate, time_slots=later_slots)

            current_date = next_day(current_date)
            earliest = DAY_START

        logger.info(
            'No %d-minute opening for doctor %s at %s within %d days of %s.',
            duration_minutes, doctor_id, branch, self.lookahead_days, target_date,
        )
        return NextAvailableSlot()

    def check_doctor_availability(
        self,
        doctor_id: str | None,
        target_date: date | str | None,
        requested_time: time | str | None,
        branch: str | None,
        duration_minutes: int = config.DEFAULT_APPOINTMENT_DURATION_MINUTES,
        exclude_appointment_id: str | None = None,
    ) -> bool:
        parsed_date = parse_date(target_date)
        start_time = parse_time(requested_time)
        if not doctor_id or not branch or parsed_date is None or start_time is None:
            return False
        if duration_minutes is None or duration_minutes < 0:
            return False

        if is_branch_closed(branch, parsed_date):
            return False

        requested_start = to_minutes(start_time)
        requested_end = requested_start + duration_minutes

        try:
            windows = self._effective_windows(doctor_id, branch, parsed_date)
        except StoreAccessError:
            logger.warning('Treating doctor %s as unavailable on %s: schedule unreadable.', doctor_id, parsed_date)
            return False

        if not windows:
            return False

        fits_window = any(
            to_minutes(window.start_time) <= requested_start and requested_end <= to_minutes(window.end_time)
            for window in windows
        )
        if not fits_window:
            return False

        try:
            appointments = self._store.fetch_appointments(doctor_id, parsed_date, exclude_id=exclude_appointment_id)
        except StoreAccessError:
            logger.warning('Treating doctor %s as unavailable on %s: bookings unreadable.', doctor_id, parsed_date)
            return False

        for appointment in appointments:
            interval = _appointment_interval(appointment)
            if interval is None:
                continue
            booked_start, booked_end = interval
            if intervals_overlap(requested_start, requested_end, booked_start, booked_end) or requested_start == booked_start:
                return False

        return True

    def _count_appointments(self, doctor_id: str, target_date: date) -> int:
        try:
            return len(self._store.fetch_appointments(doctor_id, target_date))
        except StoreAccessError:
            return 0

    def find_available_doctors(
        self,
        target_date: date | str | None,
        requested_time: time | str | None,
        branch: str | None,
        service_categories: list[str] | None = None,
        duration_minutes: int = config.DEFAULT_APPOINTMENT_DURATION_MINUTES,
        exclude_appointment_id: str | None = None,
    ) -> list[DoctorCandidate]:
        """Doctors free for the requested interval, best match first.

        Ranked by specialty match score (descending), then by how many
        appointments the doctor already has that day (ascending).
        """
        parsed_date = parse_date(target_date)
        start_time = parse_time(requested_time)
        if parsed_date is None or start_time is None or not branch:
            return []

        try:
            doctors = self._store.fetch_doctors(branch)
        except StoreAccessError:
            logger.warning('Doctor lookup failed for %s; no candidates returned.', branch)
            return []

        categories = list(service_categories or [])

        def evaluate(doctor: DoctorProfile) -> DoctorCandidate | None:
            if not self.check_doctor_availability(
                doctor.id, parsed_date, start_time, branch, duration_minutes, exclude_appointment_id,
            ):
                return None

            next_slot = self.get_next_available_time_slot(doctor.id, parsed_date, start_time, branch, duration_minutes)

            return DoctorCandidate(
                id=doctor.id,
                name=doctor.full_name,
                specialties=doctor.specialties,
                appointment_count=self._count_appointments(doctor.id, parsed_date),
                specialty_match_score=specialty_match_score(categories, doctor.specialties),
                next_available_time=next_slot.next_available,
                available_time_slots=next_slot.time_slots,
            )

        candidates = [candidate for candidate in self._map_doctors(evaluate, doctors) if candidate is not None]
        candidates.sort(key=lambda candidate: (-candidate.specialty_match_score, candidate.appointment_count))
        return candidates

    def get_schedule_status(self, branch: str | None, target_date: date | str | None) -> ScheduleStatus:
        parsed_date = parse_date(target_date)
        if parsed_date is None or not branch:
            return ScheduleStatus(branch=branch or '')

        hours = get_branch_hours(branch, parsed_date)
        status = ScheduleStatus(branch=branch, date=parsed_date, is_open=hours.open, hours=hours.display_hours)
        if not hours.open:
            return status

        try:
            doctors = self._store.fetch_doctors(branch)
        except StoreAccessError:
            logger.warning('Doctor lookup failed for %s; reporting no providers.', branch)
            return status

        def has_schedule(doctor: DoctorProfile) -> bool:
            try:
                return bool(self._effective_windows(doctor.id, branch, parsed_date))
            except StoreAccessError:
                return False

        scheduled = self._map_doctors(has_schedule, doctors)
        status.providers = [
            ScheduleProvider(id=doctor.id, name=doctor.full_name)
            for doctor, is_scheduled in zip(doctors, scheduled)
            if is_scheduled
        ]
        status.provider_count = len(status.providers)
        return status

    def get_weekly_schedule_summary(self, branch: str | None, start_date: date | str | None) -> list[DaySummary]:
        parsed_date = parse_date(start_date)
        if parsed_date is None or not branch:
            return []

        summary = []
        for offset in range(7):
            day = parsed_date + timedelta(days=offset)
            status = self.get_schedule_status(branch, day)
            summary.append(DaySummary(**status.model_dump(), day_name=day.strftime('%a')))
        return summary
