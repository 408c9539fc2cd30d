"""Exceptions raised by the availability scheduler."""


class SchedulingError(Exception):
    """Base class for scheduler failures."""


class InvalidScheduleError(SchedulingError, ValueError):
    """A day record, template or bulk patch cannot describe a bookable schedule."""

    def __init__(self, message: str, day: str | None = None):
        self.day = day
        super().__init__(f"{day}: {message}" if day else message)
        self.message = message


class EditorStateError(SchedulingError):
    """The editor cannot perform the requested action in its current state."""


class AvailabilityGatewayError(SchedulingError):
    """Talking to the profile API failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AvailabilityLoadError(AvailabilityGatewayError):
    pass


class AvailabilitySaveError(AvailabilityGatewayError):
    pass
