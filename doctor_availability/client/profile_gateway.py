"""HTTP gateway that loads and saves a doctor's weekly availability."""

import logging
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import ValidationError

from doctor_availability.core import config
from doctor_availability.schemas.availability import WeeklyAvailability
from doctor_availability.scheduling.errors import (
    AvailabilityLoadError,
    AvailabilitySaveError,
    InvalidScheduleError,
)

logger = logging.getLogger(__name__)

PROFILE_PATH = '/users/profile'
AVAILABILITY_PATH = '/users/doctors/{doctor_id}/availability'

LOAD_FAILED_MESSAGE = 'Failed to fetch doctor profile'
SAVE_FAILED_MESSAGE = 'Failed to update availability'
MISSING_PROFILE_MESSAGE = 'Doctor profile not found. Please complete your doctor registration first.'


@dataclass
class DoctorProfile:
    id: int
    specialization: str | None
    consultation_fee: int
    availability: WeeklyAvailability


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        payload = response.json()
    except ValueError:
        return fallback

    if isinstance(payload, dict):
        for key in ('detail', 'message'):
            message = payload.get(key)
            if isinstance(message, str) and message:
                return message

    return fallback


class AvailabilityGateway:
    """Client for the profile API.

    ``load`` remembers the doctor id from the profile, which ``save`` needs for
    the update URL. A gateway therefore has to load before it can save.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        *,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
    ):
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=base_url or config.API_BASE_URL,
            timeout=timeout or config.HTTP_TIMEOUT_SECONDS,
        )
        self._token = config.API_TOKEN if token is None else token
        self._doctor_id: int | None = None

    @property
    def doctor_id(self) -> int | None:
        return self._doctor_id

    def _headers(self) -> dict[str, str]:
        if not self._token:
            return {}
        return {'Authorization': f'Bearer {self._token}'}

    def fetch_profile(self) -> DoctorProfile:
        try:
            response = self._client.get(PROFILE_PATH, headers=self._headers())
            response.raise_for_status()
            payload: dict[str, Any] = response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning('Profile request rejected with status %s', exc.response.status_code)
            raise AvailabilityLoadError(
                _error_message(exc.response, LOAD_FAILED_MESSAGE),
                status_code=exc.response.status_code,
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.exception('Fetching the doctor profile failed.')
            raise AvailabilityLoadError(LOAD_FAILED_MESSAGE) from exc

        if not isinstance(payload, dict):
            logger.warning('Profile response is not a JSON object.')
            raise AvailabilityLoadError(LOAD_FAILED_MESSAGE)

        doctor = payload.get('doctor')
        if not doctor:
            raise AvailabilityLoadError(MISSING_PROFILE_MESSAGE, status_code=404)
        if not isinstance(doctor, dict) or doctor.get('id') is None:
            logger.warning('Profile response carries a doctor without an id.')
            raise AvailabilityLoadError(LOAD_FAILED_MESSAGE)

        try:
            availability = WeeklyAvailability.from_payload(doctor.get('availability'))
        except (ValidationError, InvalidScheduleError) as exc:
            logger.exception('Doctor %s has an unreadable availability map.', doctor.get('id'))
            raise AvailabilityLoadError(LOAD_FAILED_MESSAGE) from exc

        self._doctor_id = doctor['id']
        logger.info('Loaded availability for doctor %s', self._doctor_id)

        return DoctorProfile(
            id=doctor['id'],
            specialization=doctor.get('specialization'),
            consultation_fee=doctor.get('consultation_fee') or 0,
            availability=availability,
        )

    def load(self) -> WeeklyAvailability:
        return self.fetch_profile().availability

    def save(self, availability: WeeklyAvailability) -> WeeklyAvailability:
        """Replace the stored map and return the server's normalized copy."""
        if self._doctor_id is None:
            raise AvailabilitySaveError(MISSING_PROFILE_MESSAGE)

        url = AVAILABILITY_PATH.format(doctor_id=self._doctor_id)
        try:
            response = self._client.put(
                url,
                json={'availability': availability.to_payload()},
                headers=self._headers(),
            )
            response.raise_for_status()
            payload: dict[str, Any] = response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning('Availability update rejected with status %s', exc.response.status_code)
            raise AvailabilitySaveError(
                _error_message(exc.response, SAVE_FAILED_MESSAGE),
                status_code=exc.response.status_code,
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.exception('Saving availability for doctor %s failed.', self._doctor_id)
            raise AvailabilitySaveError(SAVE_FAILED_MESSAGE) from exc

        if not isinstance(payload, dict):
            logger.warning('Availability update response is not a JSON object.')
            raise AvailabilitySaveError(SAVE_FAILED_MESSAGE)

        try:
            confirmed = WeeklyAvailability.from_payload(payload.get('availability'))
        except (ValidationError, InvalidScheduleError) as exc:
            logger.exception('Server returned an unreadable availability map.')
            raise AvailabilitySaveError(SAVE_FAILED_MESSAGE) from exc

        logger.info('Saved availability for doctor %s', self._doctor_id)
        return confirmed

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> 'AvailabilityGateway':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
