"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- Test settings
- An in-memory AccountRepository mimicking the Postgres adapter
- Valid registration payloads
- A FastAPI app wired with fakes
"""

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import pytest
from fastapi import FastAPI

from harvesthub.adapters.ratelimit import SlidingWindowRateLimiter
from harvesthub.api.dependencies import get_registration_service
from harvesthub.api.errors import install_error_handlers
from harvesthub.api.routes import router
from harvesthub.config.settings import Settings
from harvesthub.domain.account import NewAccount
from harvesthub.domain.exceptions import DuplicateEmail
from harvesthub.domain.registration import RegistrationService

TEST_JWT_SECRET = "test-signing-secret"


class InMemoryAccountRepository:
    """In-memory repository mimicking the Postgres adapter's transaction semantics."""

    def __init__(self) -> None:
        self.accounts: dict[str, NewAccount] = {}
        self.ids: dict[str, str] = {}

    def email_exists(self, email: str) -> bool:
        return email in self.accounts

    @contextmanager
    def insert_account(self, account: NewAccount) -> Iterator[str]:
        if account.email in self.accounts:
            raise DuplicateEmail(account.email)
        account_id = str(uuid.uuid4())
        self.accounts[account.email] = account
        self.ids[account.email] = account_id
        try:
            yield account_id
        except BaseException:
            # Roll back the uncommitted row
            del self.accounts[account.email]
            del self.ids[account.email]
            raise


class RecordingEmailSender:
    """Captures verification emails instead of sending them."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    def send_verification_email(self, email: str, verification_link: str) -> None:
        self.sent.append((email, verification_link))


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment."""
    return Settings(
        _env_file=None,
        jwt_secret=TEST_JWT_SECRET,
        email_backend="console",
        app_base_url="http://localhost:3000",
    )


@pytest.fixture
def repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def individual_payload() -> dict[str, Any]:
    return {
        "email": "ada@example.com",
        "password": "Harvest#2024",
        "firstName": "Ada",
        "lastName": "Lovelace",
        "phoneNumber": "07911123456",
        "dateOfBirth": "1990-05-01",
        "accountType": "individual",
    }


@pytest.fixture
def business_payload() -> dict[str, Any]:
    return {
        "email": "orders@greenacre.co.uk",
        "password": "Harvest#2024",
        "firstName": "Grace",
        "lastName": "Hopper",
        "accountType": "business",
        "businessName": "Green Acre Farms",
        "registrationNumber": "GB123456",
    }


@pytest.fixture
def app(
    settings: Settings,
    repository: InMemoryAccountRepository,
    email_sender: RecordingEmailSender,
) -> Iterator[FastAPI]:
    """
    FastAPI app with the registration router, error handlers and fakes.

    The real RegistrationService runs against the in-memory repository.
    """
    test_app = FastAPI()
    install_error_handlers(test_app)
    test_app.include_router(router)
    test_app.state.rate_limiter = SlidingWindowRateLimiter(
        max_requests=settings.rate_limit_points,
        window_seconds=settings.rate_limit_window_seconds,
    )

    def override_service() -> RegistrationService:
        return RegistrationService(
            repository=repository, email_sender=email_sender, settings=settings
        )

    test_app.dependency_overrides[get_registration_service] = override_service
    yield test_app
    test_app.dependency_overrides.clear()
