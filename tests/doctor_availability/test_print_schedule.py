import pytest

from doctor_availability import print_schedule
from doctor_availability.client.profile_gateway import DoctorProfile
from doctor_availability.schemas.availability import DayAvailability, WeeklyAvailability
from doctor_availability.scheduling.errors import AvailabilityLoadError
from doctor_availability.scheduling.templates import get_template


def test_format_day_describes_available_day() -> None:
    availability = WeeklyAvailability(
        monday=DayAvailability(
            is_available=True,
            start_time='09:00',
            end_time='17:00',
            break_start='12:00',
            break_end='13:00',
            slot_duration=30,
            max_appointments=16,
        )
    )

    line = print_schedule.format_day('monday', availability)

    assert line.startswith('Monday')
    assert '09:00-17:00' in line
    assert '16 slots available' in line
    assert 'break 12:00-13:00' in line


def test_format_day_marks_missing_day_unavailable() -> None:
    assert print_schedule.format_day('sunday', WeeklyAvailability()).endswith('Unavailable')


def test_format_summary_includes_quick_stats() -> None:
    summary = print_schedule.format_summary(get_template('Standard Business Hours').template, consultation_fee=2500)

    assert 'Available Days: 5 / 7' in summary
    assert 'Total Weekly Slots: 80' in summary
    assert 'Consultation Fee: LKR 2500' in summary


def test_main_previews_template(capsys: pytest.CaptureFixture[str]) -> None:
    print_schedule.main(['--template', 'weekend focus'])

    output = capsys.readouterr().out
    assert output.startswith('Weekend Focus: Friday-Sunday, flexible hours')
    assert 'Available Days: 3 / 7' in output


def test_main_prints_saved_schedule(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    class FakeGateway:
        def __enter__(self):
            return self

        def __exit__(self, *exc_info):
            return None

        def fetch_profile(self) -> DoctorProfile:
            return DoctorProfile(
                id=1,
                specialization='Cardiology',
                consultation_fee=1800,
                availability=get_template('Extended Hours').template,
            )

    monkeypatch.setattr(print_schedule, 'AvailabilityGateway', FakeGateway)

    print_schedule.main([])

    output = capsys.readouterr().out
    assert 'Total Weekly Slots: 144' in output
    assert 'Consultation Fee: LKR 1800' in output


def test_main_exits_when_profile_cannot_load(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    class FailingGateway:
        def __enter__(self):
            return self

        def __exit__(self, *exc_info):
            return None

        def fetch_profile(self) -> DoctorProfile:
            raise AvailabilityLoadError('Failed to fetch doctor profile')

    monkeypatch.setattr(print_schedule, 'AvailabilityGateway', FailingGateway)

    with pytest.raises(SystemExit) as exception_info:
        print_schedule.main([])

    assert exception_info.value.code == 1
    assert 'Failed to fetch doctor profile' in capsys.readouterr().err


def test_main_rejects_unknown_template(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit):
        print_schedule.main(['--template', 'Night Shift'])

    assert 'Unknown template' in capsys.readouterr().err


def test_main_exits_when_saved_schedule_is_unusable(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    class LegacyGateway:
        def __enter__(self):
            return self

        def __exit__(self, *exc_info):
            return None

        def fetch_profile(self) -> DoctorProfile:
            return DoctorProfile(
                id=1,
                specialization=None,
                consultation_fee=0,
                availability=WeeklyAvailability.from_payload(
                    {'monday': {'isAvailable': True, 'startTime': '09:00', 'endTime': '17:00', 'slotDuration': 0}}
                ),
            )

    monkeypatch.setattr(print_schedule, 'AvailabilityGateway', LegacyGateway)

    with pytest.raises(SystemExit) as exception_info:
        print_schedule.main([])

    captured = capsys.readouterr()
    assert exception_info.value.code == 1
    assert captured.out == ''
    assert 'Slot duration must be greater than zero.' in captured.err
