"""Weekly availability records shared by the editor, the gateway and the profile API."""

import re
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from doctor_availability.scheduling.errors import InvalidScheduleError

WEEKDAYS = (
    'monday',
    'tuesday',
    'wednesday',
    'thursday',
    'friday',
    'saturday',
    'sunday',
)

DEFAULT_START_TIME = '09:00'
DEFAULT_END_TIME = '17:00'
DEFAULT_SLOT_DURATION_MINUTES = 30
DEFAULT_MAX_APPOINTMENTS = 20

_CLOCK_PATTERN = re.compile(r'^(\d{1,2}):(\d{2})$')


def normalize_clock(value: Any) -> str | None:
    """Return ``value`` as a zero-padded ``HH:MM`` string, or None when blank."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError('Times must be HH:MM strings.')

    normalized = value.strip()
    if not normalized:
        return None

    match = _CLOCK_PATTERN.match(normalized)
    if not match:
        raise ValueError(f'Invalid time {value!r}; expected HH:MM.')

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f'Invalid time {value!r}; expected HH:MM.')

    return f'{hours:02d}:{minutes:02d}'


class DaySettings(BaseModel):
    """Time settings for a weekday; every field optional so it can act as a patch."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    start_time: str | None = Field(default=None, alias='startTime')
    end_time: str | None = Field(default=None, alias='endTime')
    break_start: str | None = Field(default=None, alias='breakStart')
    break_end: str | None = Field(default=None, alias='breakEnd')
    slot_duration: int | None = Field(default=None, alias='slotDuration')
    max_appointments: int | None = Field(default=None, alias='maxAppointments')

    @field_validator('start_time', 'end_time', 'break_start', 'break_end', mode='before')
    @classmethod
    def validate_clock(cls, value: Any) -> str | None:
        return normalize_clock(value)


class DayAvailability(DaySettings):
    """Configuration of one weekday."""

    is_available: bool = Field(default=False, alias='isAvailable')

    @model_validator(mode='after')
    def validate_break_pair(self) -> 'DayAvailability':
        if (self.break_start is None) != (self.break_end is None):
            raise ValueError('Break start and break end must be set together.')
        return self


class WeeklyAvailability(BaseModel):
    """The seven weekday records; a missing day is treated as unavailable."""

    model_config = ConfigDict(frozen=True, extra='forbid')

    monday: DayAvailability | None = None
    tuesday: DayAvailability | None = None
    wednesday: DayAvailability | None = None
    thursday: DayAvailability | None = None
    friday: DayAvailability | None = None
    saturday: DayAvailability | None = None
    sunday: DayAvailability | None = None

    def get(self, day: str) -> DayAvailability | None:
        return getattr(self, ensure_weekday(day))

    def with_day(self, day: str, record: DayAvailability | None) -> 'WeeklyAvailability':
        return self.model_copy(update={ensure_weekday(day): record})

    def items(self) -> list[tuple[str, DayAvailability | None]]:
        return [(day, getattr(self, day)) for day in WEEKDAYS]

    def to_payload(self) -> dict[str, dict[str, Any]]:
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> 'WeeklyAvailability':
        """Build the week from a wire map; weekday keys are matched like ``get``."""
        if payload is None:
            return cls()
        if not isinstance(payload, Mapping):
            raise InvalidScheduleError('Availability must map weekdays to day settings.')

        records: dict[str, Any] = {}
        for key, record in payload.items():
            day = ensure_weekday(str(key))
            if day in records:
                raise InvalidScheduleError(f'Weekday {day!r} is given more than once.')
            records[day] = record

        return cls.model_validate(records)


def describe_validation_error(exc: ValidationError) -> str:
    """First validation message, without pydantic's ``Value error,`` prefix."""
    errors = exc.errors()
    if not errors:
        return str(exc)
    return str(errors[0].get('msg', exc)).removeprefix('Value error, ')


def ensure_weekday(day: str) -> str:
    normalized = (day or '').strip().lower()
    if normalized not in WEEKDAYS:
        raise InvalidScheduleError(f'Unknown weekday {day!r}.')
    return normalized


def with_defaults(record: DayAvailability | None) -> DayAvailability:
    """Fill every absent field of ``record`` with the editor defaults."""
    if record is None:
        record = DayAvailability()

    defaults = {
        'start_time': DEFAULT_START_TIME,
        'end_time': DEFAULT_END_TIME,
        'slot_duration': DEFAULT_SLOT_DURATION_MINUTES,
        'max_appointments': DEFAULT_MAX_APPOINTMENTS,
    }
    return record.model_copy(
        update={field: value for field, value in defaults.items() if getattr(record, field) is None}
    )
