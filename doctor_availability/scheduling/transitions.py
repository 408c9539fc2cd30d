"""Pure transitions over the weekly availability model.

Every function takes a ``WeeklyAvailability`` and returns a new one; the input
is never modified. Records are frozen pydantic models, so a new record always
means a new object.
"""

from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from doctor_availability.schemas.availability import (
    DayAvailability,
    DaySettings,
    WeeklyAvailability,
    describe_validation_error,
    ensure_weekday,
    with_defaults,
)
from doctor_availability.scheduling.errors import InvalidScheduleError
from doctor_availability.scheduling.slots import validate_slot_duration
from doctor_availability.scheduling.templates import Template


def validate_day(day: str, record: DayAvailability | None) -> None:
    """Reject an available day whose window cannot produce a sane slot sequence."""
    if record is None or not record.is_available:
        return

    if not record.start_time or not record.end_time:
        raise InvalidScheduleError('Start time and end time are required.', day=day)

    if record.start_time >= record.end_time:
        raise InvalidScheduleError('Start time must be before end time.', day=day)

    if record.slot_duration is not None:
        try:
            validate_slot_duration(record.slot_duration)
        except InvalidScheduleError as exc:
            raise InvalidScheduleError(exc.message, day=day) from exc

    if record.max_appointments is not None and record.max_appointments < 0:
        raise InvalidScheduleError('Max appointments cannot be negative.', day=day)

    if record.break_start and record.break_end:
        if record.break_start >= record.break_end:
            raise InvalidScheduleError('Break start must be before break end.', day=day)
        if record.break_start < record.start_time or record.break_end > record.end_time:
            raise InvalidScheduleError('Break must fall within working hours.', day=day)


def validate_week(availability: WeeklyAvailability) -> None:
    for day, record in availability.items():
        validate_day(day, record)


def toggle_day(availability: WeeklyAvailability, day: str) -> WeeklyAvailability:
    """Flip a day's flag; enabling fills only the fields that are still absent."""
    current = availability.get(day) or DayAvailability()

    if current.is_available:
        return availability.with_day(day, current.model_copy(update={'is_available': False}))

    enabled = with_defaults(current).model_copy(update={'is_available': True})
    return availability.with_day(day, enabled)


def edit_day(availability: WeeklyAvailability, day: str) -> DayAvailability:
    return with_defaults(availability.get(day))


def commit_day(availability: WeeklyAvailability, day: str, draft: DayAvailability) -> WeeklyAvailability:
    day = ensure_weekday(day)
    validate_day(day, draft)
    return availability.with_day(day, draft)


def apply_template(availability: WeeklyAvailability, template: Template) -> WeeklyAvailability:
    del availability
    validate_week(template.template)
    return template.template


def _coerce_patch(patch: DaySettings | Mapping[str, Any]) -> DaySettings:
    if isinstance(patch, DaySettings):
        return patch
    try:
        return DaySettings.model_validate(dict(patch))
    except ValidationError as exc:
        raise InvalidScheduleError(describe_validation_error(exc)) from exc


def apply_bulk_settings(
    availability: WeeklyAvailability,
    selected_days: Iterable[str],
    patch: DaySettings | Mapping[str, Any],
) -> WeeklyAvailability:
    """Merge ``patch`` into each selected day and mark those days available.

    Fields neither the day nor the patch carries get the toggle defaults, so a
    day enabled through a bulk edit is always bookable.
    """
    settings = _coerce_patch(patch)
    changes = settings.model_dump(exclude_unset=True)

    updated = availability
    for day in selected_days:
        day = ensure_weekday(day)
        current = availability.get(day) or DayAvailability()
        merged = {**current.model_dump(), **changes, 'is_available': True}
        try:
            record = with_defaults(DayAvailability.model_validate(merged))
        except ValidationError as exc:
            raise InvalidScheduleError(describe_validation_error(exc), day=day) from exc
        validate_day(day, record)
        updated = updated.with_day(day, record)

    return updated


def clear_day(availability: WeeklyAvailability, day: str) -> WeeklyAvailability:
    return availability.with_day(day, DayAvailability(is_available=False))


def copy_day_schedule(availability: WeeklyAvailability, source: str, target: str) -> WeeklyAvailability:
    record = availability.get(source)
    if record is None:
        ensure_weekday(target)
        return availability
    return availability.with_day(target, record.model_copy())
