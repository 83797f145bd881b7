"""
SMTP email sender adapter - Implements EmailSender protocol.

Delivers the verification email through an authenticated SMTP relay
(Brevo by default) upgraded with STARTTLS.
"""

import logging
import smtplib
import ssl
from email.message import EmailMessage

from harvesthub.domain.exceptions import EmailDeliveryFailed

logger = logging.getLogger(__name__)

SUBJECT = "Verify Your Email Address"


def render_verification_html(verification_link: str) -> str:
    return f'<p>Click <a href="{verification_link}">here</a> to verify your email.</p>'


class SmtpEmailSender:
    """
    Implements EmailSender protocol via smtplib.

    Opens one short-lived SMTP session per message; the relay settings are
    fixed for the lifetime of the process.
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        sender: str,
        timeout: float = 10.0,
    ) -> None:
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._sender = sender
        self._timeout = timeout

    def send_verification_email(self, email: str, verification_link: str) -> None:
        """
        Send the verification link as an HTML email.

        Args:
            email: Recipient email address
            verification_link: URL embedding the verification token

        Raises:
            EmailDeliveryFailed: If connecting, authenticating or sending fails
        """
        message = EmailMessage()
        message["From"] = self._sender
        message["To"] = email
        message["Subject"] = SUBJECT
        message.set_content(f"Verify your email: {verification_link}")
        message.add_alternative(render_verification_html(verification_link), subtype="html")

        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as client:
                client.starttls(context=ssl.create_default_context())
                if self._username:
                    client.login(self._username, self._password)
                client.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Verification email delivery failed via {self._host}: {e}")
            raise EmailDeliveryFailed("Verification email could not be sent") from e
