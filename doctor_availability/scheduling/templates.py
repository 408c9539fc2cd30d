"""Quick setup presets for the weekly availability editor."""

from dataclasses import dataclass

from doctor_availability.schemas.availability import WEEKDAYS, DayAvailability, WeeklyAvailability
from doctor_availability.scheduling.errors import InvalidScheduleError


@dataclass(frozen=True)
class Template:
    name: str
    description: str
    template: WeeklyAvailability


def _week(open_days: tuple[str, ...], start_time: str, end_time: str, max_appointments: int) -> WeeklyAvailability:
    open_record = DayAvailability(
        is_available=True,
        start_time=start_time,
        end_time=end_time,
        slot_duration=30,
        max_appointments=max_appointments,
    )
    closed_record = DayAvailability(is_available=False)
    return WeeklyAvailability(**{
        day: open_record if day in open_days else closed_record
        for day in WEEKDAYS
    })


QUICK_SETUP_TEMPLATES = (
    Template(
        name='Standard Business Hours',
        description='Monday-Friday, 9 AM - 5 PM',
        template=_week(WEEKDAYS[:5], '09:00', '17:00', 16),
    ),
    Template(
        name='Extended Hours',
        description='Monday-Saturday, 8 AM - 8 PM',
        template=_week(WEEKDAYS[:6], '08:00', '20:00', 24),
    ),
    Template(
        name='Weekend Focus',
        description='Friday-Sunday, flexible hours',
        template=_week(WEEKDAYS[4:], '10:00', '18:00', 16),
    ),
)


def get_template(name: str) -> Template:
    normalized = name.strip().lower()
    for template in QUICK_SETUP_TEMPLATES:
        if template.name.lower() == normalized:
            return template
    raise InvalidScheduleError(f'Unknown template {name!r}.')
