import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, ValidationError, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from doctor_availability.auth.dependencies import get_current_doctor, get_current_user
from doctor_availability.database import ensure_doctor_schema, get_db
from doctor_availability.models.doctor import Doctor
from doctor_availability.models.user import User
from doctor_availability.schemas.availability import (
    DEFAULT_MAX_APPOINTMENTS,
    DEFAULT_SLOT_DURATION_MINUTES,
    WEEKDAYS,
    DayAvailability,
    WeeklyAvailability,
    describe_validation_error,
)
from doctor_availability.scheduling.errors import InvalidScheduleError
from doctor_availability.scheduling.slots import generate_day_slots
from doctor_availability.scheduling.transitions import validate_week

router = APIRouter(tags=['profile'])

logger = logging.getLogger(__name__)

DATABASE_UNAVAILABLE_DETAIL = 'Database unavailable. Verify DATABASE_URL and database credentials.'


class UserResponse(BaseModel):
    id: int
    email: str
    first_name: str | None = None
    last_name: str | None = None
    role: str | None = None

    class Config:
        from_attributes = True


class DoctorResponse(BaseModel):
    id: int
    user_id: int
    specialization: str | None = None
    consultation_fee: int = 0
    availability: dict[str, Any] = {}

    class Config:
        from_attributes = True

    @field_validator('consultation_fee', mode='before')
    @classmethod
    def default_consultation_fee(cls, value: int | None) -> int:
        return value or 0

    @field_validator('availability', mode='before')
    @classmethod
    def default_availability(cls, value: dict[str, Any] | None) -> dict[str, Any]:
        return value or {}


class ProfileResponse(BaseModel):
    user: UserResponse
    doctor: DoctorResponse | None = None


class UpdateAvailabilityRequest(BaseModel):
    availability: dict[str, Any] | None = None


class AvailabilityResponse(BaseModel):
    message: str
    availability: dict[str, Any]


class DaySlotsResponse(BaseModel):
    doctor_id: int
    date: date
    day: str
    slots: list[str]


def ensure_database_ready() -> None:
    try:
        ensure_doctor_schema()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


def parse_availability_payload(payload: dict[str, Any] | None) -> WeeklyAvailability:
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Availability data is required',
        )

    try:
        availability = WeeklyAvailability.from_payload(payload)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=describe_validation_error(exc),
        ) from exc
    except InvalidScheduleError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    for day, record in availability.items():
        if record is not None and record.is_available and (not record.start_time or not record.end_time):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f'Start time and end time are required for {day}',
            )

    try:
        validate_week(availability)
    except InvalidScheduleError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    return availability


def normalize_availability(availability: WeeklyAvailability) -> WeeklyAvailability:
    """Give every weekday a record carrying the stored defaults."""
    normalized = availability
    for day in WEEKDAYS:
        record = availability.get(day) or DayAvailability()
        updates: dict[str, Any] = {}
        if record.slot_duration is None:
            updates['slot_duration'] = DEFAULT_SLOT_DURATION_MINUTES
        if record.max_appointments is None:
            updates['max_appointments'] = DEFAULT_MAX_APPOINTMENTS
        normalized = normalized.with_day(day, record.model_copy(update=updates))

    return normalized


@router.get('/profile', response_model=ProfileResponse)
def get_profile(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        doctor = None
        if user.role == 'doctor':
            doctor = db.query(Doctor).filter(Doctor.user_id == user.id).first()

        return ProfileResponse(
            user=UserResponse.model_validate(user),
            doctor=DoctorResponse.model_validate(doctor) if doctor else None,
        )
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


@router.put('/doctors/{doctor_id}/availability', response_model=AvailabilityResponse)
def update_availability(
    doctor_id: int,
    data: UpdateAvailabilityRequest,
    doctor: Doctor = Depends(get_current_doctor),
    db: Session = Depends(get_db),
):
    if doctor.id != doctor_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail='Doctors can only update their own availability.',
        )

    availability = normalize_availability(parse_availability_payload(data.availability))

    ensure_database_ready()

    try:
        doctor.availability = availability.to_payload()
        db.commit()
        db.refresh(doctor)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Saving availability for doctor %s failed.', doctor_id)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    logger.info('Updated availability for doctor %s', doctor_id)
    return AvailabilityResponse(
        message='Availability updated successfully',
        availability=doctor.availability,
    )


@router.get('/doctors/{doctor_id}/slots', response_model=DaySlotsResponse)
def list_day_slots(
    doctor_id: int,
    slot_date: date = Query(..., alias='date'),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        doctor = db.query(Doctor).filter(Doctor.id == doctor_id).first()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    if doctor is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail='Doctor profile not found',
        )

    day = WEEKDAYS[slot_date.weekday()]
    availability = WeeklyAvailability.from_payload(doctor.availability)

    return DaySlotsResponse(
        doctor_id=doctor.id,
        date=slot_date,
        day=day,
        slots=generate_day_slots(availability.get(day)),
    )
