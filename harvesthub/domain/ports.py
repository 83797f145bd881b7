"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from contextlib import AbstractContextManager
from typing import Protocol

from .account import NewAccount


class AccountRepository(Protocol):
    """Port interface for account persistence."""

    def email_exists(self, email: str) -> bool:
        """
        Check whether an account is already registered for ``email``.

        Args:
            email: Email address exactly as it would be stored

        Returns:
            True if an account row with this email exists
        """
        ...

    def insert_account(self, account: NewAccount) -> AbstractContextManager[str]:
        """
        Insert a new account row inside an open transaction.

        The context manager yields the generated account id. The row is
        committed when the ``with`` block exits normally and rolled back if
        the block raises, so work done inside the block (sending the
        verification email) decides whether the account is kept.

        Args:
            account: Fully provisioned account row

        Raises:
            DuplicateEmail: If the store's unique constraint on email rejects
                the insert (a concurrent registration won the race)
        """
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send_verification_email(self, email: str, verification_link: str) -> None:
        """
        Send the email-verification link to the registrant.

        Args:
            email: Recipient email address
            verification_link: Absolute URL embedding the verification token

        Raises:
            EmailDeliveryFailed: If the transport rejects the message
        """
        ...


class RateLimiter(Protocol):
    """Port interface for per-caller request budgets."""

    def allow(self, key: str) -> bool:
        """Consume one point for ``key``; False when the budget is spent."""
        ...
