import pytest
from pydantic import ValidationError

from doctor_availability.schemas.availability import (
    DayAvailability,
    WeeklyAvailability,
    ensure_weekday,
    with_defaults,
)
from doctor_availability.scheduling.errors import InvalidScheduleError


def test_day_availability_reads_camel_case_payload() -> None:
    record = DayAvailability.model_validate(
        {'isAvailable': True, 'startTime': '9:00', 'endTime': '17:00', 'slotDuration': 15, 'maxAppointments': 12}
    )

    assert record.is_available is True
    assert record.start_time == '09:00'
    assert record.slot_duration == 15
    assert record.max_appointments == 12


def test_blank_break_fields_are_treated_as_absent() -> None:
    record = DayAvailability.model_validate({'isAvailable': True, 'breakStart': '', 'breakEnd': '  '})

    assert record.break_start is None
    assert record.break_end is None


def test_break_fields_must_be_set_together() -> None:
    with pytest.raises(ValidationError):
        DayAvailability(is_available=True, break_start='12:00')


@pytest.mark.parametrize('value', ['24:00', '12:60', 'noon', '1200', 900])
def test_invalid_clock_values_are_rejected(value) -> None:
    with pytest.raises(ValidationError):
        DayAvailability(start_time=value)


def test_day_records_are_immutable() -> None:
    record = DayAvailability(is_available=True)

    with pytest.raises(ValidationError):
        record.is_available = False


def test_weekly_payload_omits_missing_days_and_fields() -> None:
    availability = WeeklyAvailability.from_payload(
        {'monday': {'isAvailable': True, 'startTime': '09:00', 'endTime': '17:00'}, 'tuesday': None}
    )

    assert availability.to_payload() == {
        'monday': {'isAvailable': True, 'startTime': '09:00', 'endTime': '17:00'},
    }
    assert WeeklyAvailability.from_payload(availability.to_payload()) == availability


def test_from_payload_accepts_empty_profile_map() -> None:
    assert WeeklyAvailability.from_payload(None) == WeeklyAvailability()


def test_get_normalizes_day_names() -> None:
    availability = WeeklyAvailability(friday=DayAvailability(is_available=True))

    assert availability.get(' Friday ') is availability.friday


def test_ensure_weekday_rejects_unknown_keys() -> None:
    with pytest.raises(InvalidScheduleError):
        ensure_weekday('funday')


def test_with_defaults_fills_only_absent_fields() -> None:
    record = with_defaults(DayAvailability(is_available=True, end_time='13:00', max_appointments=0))

    assert record == DayAvailability(
        is_available=True,
        start_time='09:00',
        end_time='13:00',
        slot_duration=30,
        max_appointments=0,
    )


def test_with_defaults_for_missing_record() -> None:
    assert with_defaults(None) == DayAvailability(
        is_available=False,
        start_time='09:00',
        end_time='17:00',
        slot_duration=30,
        max_appointments=20,
    )


def test_from_payload_rejects_same_weekday_twice() -> None:
    with pytest.raises(InvalidScheduleError):
        WeeklyAvailability.from_payload({'monday': {'isAvailable': True}, 'MONDAY': {'isAvailable': False}})


def test_weekly_model_forbids_unknown_fields() -> None:
    with pytest.raises(ValidationError):
        WeeklyAvailability.model_validate({'mon': {'isAvailable': True}})
