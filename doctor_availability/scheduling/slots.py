from datetime import date, datetime, time, timedelta

from doctor_availability.schemas.availability import (
    DayAvailability,
    WeeklyAvailability,
    normalize_clock,
    with_defaults,
)
from doctor_availability.scheduling.errors import InvalidScheduleError

# Slots are laid out on one nominal date so a window can never wrap past midnight.
NOMINAL_DATE = date(2000, 1, 1)


def parse_clock(value: str) -> time:
    try:
        normalized = normalize_clock(value)
    except ValueError as exc:
        raise InvalidScheduleError(str(exc)) from exc

    if normalized is None:
        raise InvalidScheduleError('A time is required.')

    hours, minutes = normalized.split(':')
    return time(int(hours), int(minutes))


def validate_slot_duration(slot_duration: int) -> int:
    if isinstance(slot_duration, bool) or not isinstance(slot_duration, int):
        raise InvalidScheduleError(f'Slot duration must be a whole number of minutes, got {slot_duration!r}.')
    if slot_duration <= 0:
        raise InvalidScheduleError('Slot duration must be greater than zero.')
    return slot_duration


def generate_time_slots(start_time: str, end_time: str, slot_duration: int) -> list[str]:
    """Return the ``HH:MM`` start of every slot in ``[start_time, end_time)``."""
    validate_slot_duration(slot_duration)
    current = datetime.combine(NOMINAL_DATE, parse_clock(start_time))
    end = datetime.combine(NOMINAL_DATE, parse_clock(end_time))

    slots: list[str] = []
    while current < end:
        slots.append(current.strftime('%H:%M'))
        current += timedelta(minutes=slot_duration)

    return slots


def is_break_slot(slot: str, record: DayAvailability) -> bool:
    if not record.break_start or not record.break_end:
        return False
    return record.break_start <= slot < record.break_end


def generate_day_slots(record: DayAvailability | None) -> list[str]:
    """Bookable slots of one weekday, skipping slots that start inside the break."""
    if record is None or not record.is_available:
        return []

    effective = with_defaults(record)
    return [
        slot
        for slot in generate_time_slots(effective.start_time, effective.end_time, effective.slot_duration)
        if not is_break_slot(slot, effective)
    ]


def availability_status(record: DayAvailability | None) -> tuple[str, str]:
    """Label and colour shown next to a weekday.

    A configured ``max_appointments`` wins over the number of slots that fit
    in the window.
    """
    if record is None or not record.is_available:
        return 'Unavailable', 'error'

    if record.max_appointments:
        slots_count = record.max_appointments
    else:
        effective = with_defaults(record)
        slots_count = len(generate_time_slots(effective.start_time, effective.end_time, effective.slot_duration))

    return f'{slots_count} slots available', 'success'


def available_day_count(availability: WeeklyAvailability) -> int:
    return sum(1 for _, record in availability.items() if record is not None and record.is_available)


def weekly_slot_count(availability: WeeklyAvailability) -> int:
    total = 0
    for _, record in availability.items():
        if record is None or not record.is_available:
            continue
        effective = with_defaults(record)
        total += len(generate_time_slots(effective.start_time, effective.end_time, effective.slot_duration))
    return total
