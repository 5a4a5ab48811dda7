from datetime import date, time

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from dental_backend.auth.dependencies import get_current_user
from dental_backend.core import config
from dental_backend.database import ensure_scheduling_indexes
from dental_backend.scheduling.availability_resolver import (
    AvailabilityResolver,
    DaySummary,
    DoctorCandidate,
    NextAvailableSlot,
    ScheduleStatus,
)
from dental_backend.scheduling.booking_store import SqlAlchemyBookingStore
from dental_backend.scheduling.branch_hours import describe_branches

router = APIRouter(tags=['availability'], dependencies=[Depends(get_current_user)])

MAX_DURATION_MINUTES = 480


class AvailabilityCheckResponse(BaseModel):
    doctor_id: str | None
    date: date | None
    time: str | None
    duration_minutes: int
    available: bool


class BranchResponse(BaseModel):
    branch: str
    start_time: time
    end_time: time
    closed_days: list[str]


def ensure_database_ready() -> None:
    try:
        ensure_scheduling_indexes()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail='Database unavailable. Verify DATABASE_URL and database credentials.',
        ) from exc


def get_resolver() -> AvailabilityResolver:
    ensure_database_ready()
    return AvailabilityResolver(SqlAlchemyBookingStore())


@router.get('/time-slots', response_model=list[str])
def list_time_slots(
    branch: str | None = Query(default=None),
    date: date | None = Query(default=None),
    doctor_id: str | None = Query(default=None),
    resolver: AvailabilityResolver = Depends(get_resolver),
):
    return resolver.get_available_time_slots(doctor_id, date, branch)


@router.get('/next-slot', response_model=NextAvailableSlot)
def get_next_slot(
    doctor_id: str | None = Query(default=None),
    date: date | None = Query(default=None),
    time: str = Query(default='00:00'),
    branch: str | None = Query(default=None),
    duration_minutes: int = Query(default=config.DEFAULT_APPOINTMENT_DURATION_MINUTES, ge=1, le=MAX_DURATION_MINUTES),
    resolver: AvailabilityResolver = Depends(get_resolver),
):
    return resolver.get_next_available_time_slot(doctor_id, date, time, branch, duration_minutes)


@router.get('/check', response_model=AvailabilityCheckResponse)
def check_availability(
    doctor_id: str | None = Query(default=None),
    date: date | None = Query(default=None),
    time: str | None = Query(default=None),
    branch: str | None = Query(default=None),
    duration_minutes: int = Query(default=config.DEFAULT_APPOINTMENT_DURATION_MINUTES, ge=1, le=MAX_DURATION_MINUTES),
    exclude_appointment_id: str | None = Query(default=None),
    resolver: AvailabilityResolver = Depends(get_resolver),
):
    available = resolver.check_doctor_availability(
        doctor_id,
        date,
        time,
        branch,
        duration_minutes,
        exclude_appointment_id,
    )

    return AvailabilityCheckResponse(
        doctor_id=doctor_id,
        date=date,
        time=time,
        duration_minutes=duration_minutes,
        available=available,
    )


@router.get('/doctors', response_model=list[DoctorCandidate])
def list_available_doctors(
    date: date | None = Query(default=None),
    time: str | None = Query(default=None),
    branch: str | None = Query(default=None),
    service_categories: list[str] = Query(default=[]),
    duration_minutes: int = Query(default=config.DEFAULT_APPOINTMENT_DURATION_MINUTES, ge=1, le=MAX_DURATION_MINUTES),
    exclude_appointment_id: str | None = Query(default=None),
    resolver: AvailabilityResolver = Depends(get_resolver),
):
    normalized_categories = [category.strip() for category in service_categories if category.strip()]

    return resolver.find_available_doctors(
        date,
        time,
        branch,
        normalized_categories,
        duration_minutes,
        exclude_appointment_id,
    )


@router.get('/branches', response_model=list[BranchResponse])
def list_branches():
    return describe_branches()


@router.get('/branches/{branch}/status', response_model=ScheduleStatus)
def get_branch_status(
    branch: str,
    date: date = Query(...),
    resolver: AvailabilityResolver = Depends(get_resolver),
):
    return resolver.get_schedule_status(branch, date)


@router.get('/branches/{branch}/week', response_model=list[DaySummary])
def get_branch_week(
    branch: str,
    start_date: date = Query(...),
    resolver: AvailabilityResolver = Depends(get_resolver),
):
    return resolver.get_weekly_schedule_summary(branch, start_date)
