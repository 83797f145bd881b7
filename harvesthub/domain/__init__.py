"""
Domain layer - Pure business logic with zero web framework imports.

This package contains the core business logic for HarvestHub account
registration. It defines its own port interfaces for infrastructure
abstraction, keeping HTTP, SQL and SMTP concerns in the adapters.
"""

from .account import (
    AccountType,
    BusinessProfile,
    IndividualProfile,
    NewAccount,
    Registration,
    RegistrationResult,
)
from .exceptions import (
    DuplicateEmail,
    EmailDeliveryFailed,
    InternalError,
    InvalidInput,
    RateLimited,
    RegistrationError,
)
from .ports import AccountRepository, EmailSender, RateLimiter
from .registration import RegistrationService

__all__ = [
    "AccountRepository",
    "AccountType",
    "BusinessProfile",
    "DuplicateEmail",
    "EmailDeliveryFailed",
    "EmailSender",
    "IndividualProfile",
    "InternalError",
    "InvalidInput",
    "NewAccount",
    "RateLimited",
    "RateLimiter",
    "Registration",
    "RegistrationError",
    "RegistrationResult",
    "RegistrationService",
]
