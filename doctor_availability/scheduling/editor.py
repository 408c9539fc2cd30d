"""State container for the weekly availability editor.

The editor owns the in-memory ``WeeklyAvailability`` plus the purely local UI
state (selected days, the day being edited, status and messages). All schedule
changes go through the pure functions in ``transitions``; the editor only
swaps in their results.

Status moves ``LOADING -> READY -> (EDITING | SAVING) -> READY``. A failed
load or save lands in ``ERROR``; the next action on a loaded editor returns it
to ``READY``.
"""

import enum
import logging
from typing import Any, Iterable, Mapping, Protocol

from doctor_availability.schemas.availability import (
    DayAvailability,
    DaySettings,
    WeeklyAvailability,
    ensure_weekday,
)
from doctor_availability.scheduling import transitions
from doctor_availability.scheduling.errors import (
    AvailabilityGatewayError,
    EditorStateError,
    InvalidScheduleError,
)
from doctor_availability.scheduling.slots import (
    availability_status,
    available_day_count,
    generate_time_slots,
    weekly_slot_count,
)
from doctor_availability.scheduling.templates import Template, get_template

logger = logging.getLogger(__name__)


class AvailabilityStore(Protocol):
    def load(self) -> WeeklyAvailability: ...

    def save(self, availability: WeeklyAvailability) -> WeeklyAvailability: ...


class EditorStatus(str, enum.Enum):
    LOADING = 'loading'
    READY = 'ready'
    EDITING = 'editing'
    SAVING = 'saving'
    ERROR = 'error'


class AvailabilityEditor:
    def __init__(self, store: AvailabilityStore):
        self._store = store
        self.status = EditorStatus.LOADING
        self.availability = WeeklyAvailability()
        self.selected_days: list[str] = []
        self.editing_day: str | None = None
        self.draft: DayAvailability | None = None
        self.error: str | None = None
        self.notice: str | None = None
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    # Loading and saving

    def load(self) -> bool:
        """Fetch the stored map; an open day edit is discarded."""
        self._close_draft()
        self.status = EditorStatus.LOADING
        self.error = None
        try:
            availability = self._store.load()
        except AvailabilityGatewayError as exc:
            logger.warning('Availability load failed: %s', exc.message)
            self.status = EditorStatus.ERROR
            self.error = exc.message
            self._loaded = False
            return False

        self.availability = availability
        self.selected_days = []
        self._loaded = True
        self.status = EditorStatus.READY
        return True

    def save(self) -> bool:
        """Send the whole map; on failure keep local edits and report the error."""
        if self.status == EditorStatus.SAVING:
            raise EditorStateError('A save is already in progress.')
        self._begin_action()

        self.status = EditorStatus.SAVING
        self.error = None
        self.notice = None
        try:
            confirmed = self._store.save(self.availability)
        except AvailabilityGatewayError as exc:
            logger.warning('Availability save failed: %s', exc.message)
            self.status = EditorStatus.ERROR
            self.error = exc.message
            return False

        self.availability = confirmed
        self.status = EditorStatus.READY
        self.notice = 'Availability updated successfully'
        return True

    # Day-level actions

    def toggle_day(self, day: str) -> None:
        self._begin_action()
        self.availability = transitions.toggle_day(self.availability, day)

    def edit_day(self, day: str) -> DayAvailability:
        self._begin_action()
        day = ensure_weekday(day)
        self.draft = transitions.edit_day(self.availability, day)
        self.editing_day = day
        self.status = EditorStatus.EDITING
        return self.draft

    def update_draft(self, **changes: Any) -> DayAvailability:
        if self.status != EditorStatus.EDITING or self.draft is None:
            raise EditorStateError('No day is being edited.')
        merged = {**self.draft.model_dump(), **changes}
        try:
            self.draft = DayAvailability.model_validate(merged)
        except ValueError as exc:
            raise InvalidScheduleError(str(exc), day=self.editing_day) from exc
        return self.draft

    def preview_slots(self) -> list[str]:
        """Slots the draft would produce; empty while the draft is incomplete."""
        if self.draft is None:
            return []
        draft = self.draft
        if not draft.start_time or not draft.end_time or not draft.slot_duration:
            return []
        try:
            return generate_time_slots(draft.start_time, draft.end_time, draft.slot_duration)
        except InvalidScheduleError:
            return []

    def commit_day(self) -> None:
        if self.status != EditorStatus.EDITING or self.draft is None or self.editing_day is None:
            raise EditorStateError('No day is being edited.')
        self.availability = transitions.commit_day(self.availability, self.editing_day, self.draft)
        self._close_draft()

    def cancel_edit(self) -> None:
        if self.status == EditorStatus.EDITING:
            self._close_draft()

    def clear_day(self, day: str) -> None:
        self._begin_action()
        self.availability = transitions.clear_day(self.availability, day)
        self.notice = f'Cleared {day} schedule'

    def copy_day_schedule(self, source: str, target: str) -> None:
        self._begin_action()
        copied = transitions.copy_day_schedule(self.availability, source, target)
        if copied is self.availability:
            return
        self.availability = copied
        self.notice = f'Copied {source} schedule to {target}'

    # Templates and bulk edits

    def apply_template(self, template: Template | str) -> None:
        self._begin_action()
        if isinstance(template, str):
            template = get_template(template)
        self.availability = transitions.apply_template(self.availability, template)
        self.notice = f'Applied {template.name} template'

    def toggle_day_selection(self, day: str) -> None:
        day = ensure_weekday(day)
        if day in self.selected_days:
            self.selected_days.remove(day)
        else:
            self.selected_days.append(day)

    def apply_bulk_settings(self, patch: DaySettings | Mapping[str, Any], days: Iterable[str] | None = None) -> None:
        self._begin_action()
        selected = list(self.selected_days if days is None else days)
        self.availability = transitions.apply_bulk_settings(self.availability, selected, patch)
        self.selected_days = []
        self.notice = f'Applied settings to {len(selected)} days'

    # Read-only views

    def day_status(self, day: str) -> tuple[str, str]:
        return availability_status(self.availability.get(day))

    def stats(self) -> dict[str, int]:
        return {
            'available_days': available_day_count(self.availability),
            'weekly_slots': weekly_slot_count(self.availability),
        }

    def _begin_action(self) -> None:
        if not self._loaded:
            raise EditorStateError('The schedule has not been loaded.')
        if self.status == EditorStatus.EDITING:
            raise EditorStateError('Finish or cancel the open day edit first.')
        if self.status == EditorStatus.ERROR:
            self.status = EditorStatus.READY
            self.error = None

    def _close_draft(self) -> None:
        self.draft = None
        self.editing_day = None
        self.status = EditorStatus.READY
