"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
The long-lived services (connection pool, rate limiter, email sender)
are created once in the application lifespan and read from app.state.
"""

from fastapi import Request
from psycopg_pool import ConnectionPool

from harvesthub.adapters.repository.postgres import PostgresAccountRepository
from harvesthub.adapters.smtp import ConsoleEmailSender, SmtpEmailSender
from harvesthub.config.settings import Settings, get_settings
from harvesthub.domain.ports import EmailSender, RateLimiter
from harvesthub.domain.registration import RegistrationService


def build_email_sender(settings: Settings) -> EmailSender:
    """Create the configured email sender (``console`` or ``smtp``)."""
    if settings.email_backend.lower() == "smtp":
        return SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            sender=settings.sender_email,
        )
    return ConsoleEmailSender()


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_repository(request: Request) -> PostgresAccountRepository:
    """Create repository with connection pool from app state."""
    pool = get_pool(request)
    return PostgresAccountRepository(pool)


def get_email_sender(request: Request) -> EmailSender:
    """Get the process-wide email sender."""
    return request.app.state.email_sender


def get_rate_limiter(request: Request) -> RateLimiter:
    """Get the process-wide registration rate limiter."""
    return request.app.state.rate_limiter


def get_registration_service(request: Request) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the repository and email sender for the domain service.
    """
    repository = get_repository(request)
    email_sender = get_email_sender(request)
    return RegistrationService(
        repository=repository, email_sender=email_sender, settings=get_settings()
    )


def get_client_ip(request: Request) -> str:
    """
    Identify the caller by the first address in X-Forwarded-For.

    Returns "unknown" when the header is missing, so all such callers
    share a single budget.
    """
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    return "unknown"
