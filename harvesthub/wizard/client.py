"""HTTP client used by the wizard to submit a registration."""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger(__name__)

REGISTRATION_PATH = "/api/user-registration"


class SubmissionFailed(Exception):
    """The endpoint rejected the registration; message is shown to the user."""

    pass


@dataclass(frozen=True)
class Enrollment:
    """Material displayed on the success screen."""

    user_id: str
    two_factor_uri: str
    backup_codes: list[str]


class RegistrationClient:
    """Posts registration payloads to the HarvestHub API."""

    def __init__(self, http: httpx.Client) -> None:
        """
        Args:
            http: Client configured with the API base URL
        """
        self._http = http

    def register(self, payload: dict[str, Any]) -> Enrollment:
        """
        Submit one registration.

        Raises:
            SubmissionFailed: With the server's error message, or a generic
                message if none is available
        """
        try:
            response = self._http.post(REGISTRATION_PATH, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Registration request failed: {e}")
            raise SubmissionFailed("Registration failed") from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.is_error:
            raise SubmissionFailed(data.get("error") or "Registration failed")

        return Enrollment(
            user_id=data["userId"],
            two_factor_uri=data["twoFactorSecret"],
            backup_codes=list(data["backupCodes"]),
        )
