"""
Registration domain service - account provisioning sequence.

This module contains the core business logic for creating a HarvestHub
account once the request has passed rate limiting and schema validation:

1. Uniqueness check against the store
2. Credential provisioning (password hash, verification token,
   two-factor secret, backup codes, mock business document URL)
3. Atomic insert of the complete account row
4. Verification email dispatch, inside the insert transaction
5. Enrollment material returned to the caller

Email dispatch runs before the insert commits: if the mail transport fails
the row is rolled back, so the registrant can simply try again instead of
being left with an unverifiable account whose backup codes they never saw.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta

from harvesthub.config.settings import Settings

from . import credentials
from .account import BusinessProfile, NewAccount, Registration, RegistrationResult
from .exceptions import DuplicateEmail
from .ports import AccountRepository, EmailSender

logger = logging.getLogger(__name__)


@dataclass
class RegistrationService:
    """
    Domain service for user registration.

    Orchestrates the provisioning flow and delegates persistence and
    delivery to the injected ports.
    """

    repository: AccountRepository
    email_sender: EmailSender
    settings: Settings

    def register(self, registration: Registration) -> RegistrationResult:
        """
        Create a new account for a validated registration.

        Args:
            registration: Schema-validated registration input

        Returns:
            New account id, TOTP enrollment URI and plaintext backup codes

        Raises:
            DuplicateEmail: If the email is already registered
            EmailDeliveryFailed: If the verification email cannot be sent
        """
        if self.repository.email_exists(registration.email):
            logger.warning("Registration rejected: email already registered")
            raise DuplicateEmail(registration.email)

        enrollment = credentials.generate_two_factor_secret(
            registration.email, issuer=self.settings.two_factor_issuer
        )
        backup_codes = credentials.generate_backup_codes()
        token = credentials.issue_verification_token(
            registration.email,
            self.settings.jwt_secret,
            ttl=timedelta(hours=self.settings.verification_token_ttl_hours),
        )
        profile = registration.profile
        business_name = profile.business_name if isinstance(profile, BusinessProfile) else None

        account = NewAccount.from_registration(
            registration,
            password_hash=credentials.hash_password(
                registration.password, rounds=self.settings.bcrypt_cost
            ),
            verification_token=token,
            two_factor_secret=enrollment.secret,
            two_factor_backup_codes=backup_codes,
            business_document_url=credentials.mock_document_url(
                business_name, self.settings.document_base_url
            ),
        )

        link = credentials.verification_link(self.settings.app_base_url, token)
        with self.repository.insert_account(account) as account_id:
            self.email_sender.send_verification_email(registration.email, link)

        logger.info(
            "Registered %s account %s", registration.account_type.value, account_id
        )
        return RegistrationResult(
            account_id=account_id,
            two_factor_uri=enrollment.provisioning_uri,
            backup_codes=backup_codes,
        )
