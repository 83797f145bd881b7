"""
Domain exceptions - Semantic error types for registration.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
The API layer maps each of them onto a single HTTP status.
"""


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    pass


class RateLimited(RegistrationError):
    """Caller exhausted its registration budget for the current window."""

    pass


class InvalidInput(RegistrationError):
    """Payload failed schema validation; message names the first bad field."""

    pass


class DuplicateEmail(RegistrationError):
    """An account with this email already exists (pre-check or store constraint)."""

    pass


class EmailDeliveryFailed(RegistrationError):
    """The verification email could not be handed to the mail transport."""

    pass


class InternalError(RegistrationError):
    """Any other failure; never carries internal details to the caller."""

    pass
