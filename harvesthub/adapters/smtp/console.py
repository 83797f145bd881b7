"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging verification links for local development.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Selected with ``EMAIL_BACKEND=console``; never fails.
    """

    def send_verification_email(self, email: str, verification_link: str) -> None:
        """
        Log the verification link (simulates email delivery).

        Args:
            email: Recipient email address
            verification_link: URL embedding the verification token
        """
        logger.info("[VERIFICATION] Email: %s Link: %s", email, verification_link)
