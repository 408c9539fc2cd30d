"""Print a doctor's weekly availability summary to stdout.

Usage:
    python -m doctor_availability.print_schedule
    python -m doctor_availability.print_schedule --template "Extended Hours"

The profile is fetched from API_BASE_URL with the bearer token in API_TOKEN.
"""
import argparse
import sys

from doctor_availability.client.profile_gateway import AvailabilityGateway, DoctorProfile
from doctor_availability.schemas.availability import WeeklyAvailability
from doctor_availability.scheduling.errors import SchedulingError
from doctor_availability.scheduling.slots import availability_status, available_day_count, weekly_slot_count
from doctor_availability.scheduling.templates import get_template


def format_day(day: str, availability: WeeklyAvailability) -> str:
    record = availability.get(day)
    label, _ = availability_status(record)
    if record is None or not record.is_available:
        return f"{day.capitalize():<10} {'-':<13} {label}"

    hours = f"{record.start_time}-{record.end_time}"
    details = f"{record.slot_duration}min slots, max {record.max_appointments}"
    if record.break_start and record.break_end:
        details += f", break {record.break_start}-{record.break_end}"
    return f"{day.capitalize():<10} {hours:<13} {label} ({details})"


def format_summary(availability: WeeklyAvailability, consultation_fee: int | None = None) -> str:
    lines = [format_day(day, availability) for day, _ in availability.items()]
    lines.append("")
    lines.append(f"Available Days: {available_day_count(availability)} / 7")
    lines.append(f"Total Weekly Slots: {weekly_slot_count(availability)}")
    if consultation_fee is not None:
        lines.append(f"Consultation Fee: LKR {consultation_fee}")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Print a doctor's weekly availability.")
    parser.add_argument("--template", help="preview a quick setup template instead of the saved schedule")
    args = parser.parse_args(argv)

    try:
        if args.template:
            template = get_template(args.template)
            print(f"{template.name}: {template.description}")
            print(format_summary(template.template))
            return

        with AvailabilityGateway() as gateway:
            profile: DoctorProfile = gateway.fetch_profile()
        summary = format_summary(profile.availability, profile.consultation_fee)
    except SchedulingError as exc:
        print(f"Could not load availability: {exc}", file=sys.stderr)
        sys.exit(1)

    print(summary)


if __name__ == "__main__":
    main()
