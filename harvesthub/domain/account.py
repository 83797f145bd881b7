"""
Account domain model.

The individual/business split is expressed as a tagged union of profile
types rather than as optional fields guarded by the account type: a
``BusinessProfile`` cannot exist without its business name and registration
number, and an ``IndividualProfile`` cannot carry them.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum


class AccountType(str, Enum):
    """Kind of account being registered."""

    INDIVIDUAL = "individual"
    BUSINESS = "business"


@dataclass(frozen=True)
class IndividualProfile:
    phone_number: str | None = None
    date_of_birth: date | None = None


@dataclass(frozen=True)
class BusinessProfile:
    business_name: str
    registration_number: str


Profile = IndividualProfile | BusinessProfile


def account_type_of(profile: Profile) -> AccountType:
    """Return the account type a profile variant belongs to."""
    match profile:
        case IndividualProfile():
            return AccountType.INDIVIDUAL
        case BusinessProfile():
            return AccountType.BUSINESS
    raise TypeError(f"Unknown profile type: {type(profile).__name__}")


@dataclass(frozen=True)
class Registration:
    """Validated registration input handed to the domain service."""

    email: str
    password: str
    first_name: str
    last_name: str
    profile: Profile

    @property
    def account_type(self) -> AccountType:
        return account_type_of(self.profile)


@dataclass(frozen=True)
class NewAccount:
    """
    A fully provisioned account row, ready for a single atomic insert.

    Holds the password hash only; the plaintext password never reaches
    the repository.
    """

    email: str
    password_hash: str
    first_name: str
    last_name: str
    account_type: AccountType
    verification_token: str
    two_factor_secret: str
    two_factor_backup_codes: list[str]
    phone_number: str | None = None
    date_of_birth: date | None = None
    business_name: str | None = None
    registration_number: str | None = None
    business_document_url: str | None = None

    @classmethod
    def from_registration(
        cls,
        registration: Registration,
        *,
        password_hash: str,
        verification_token: str,
        two_factor_secret: str,
        two_factor_backup_codes: list[str],
        business_document_url: str | None,
    ) -> "NewAccount":
        """Flatten the profile variant into the persisted columns."""
        common = dict(
            email=registration.email,
            password_hash=password_hash,
            first_name=registration.first_name,
            last_name=registration.last_name,
            account_type=registration.account_type,
            verification_token=verification_token,
            two_factor_secret=two_factor_secret,
            two_factor_backup_codes=two_factor_backup_codes,
        )
        match registration.profile:
            case IndividualProfile(phone_number=phone, date_of_birth=dob):
                return cls(**common, phone_number=phone, date_of_birth=dob)
            case BusinessProfile(business_name=name, registration_number=number):
                return cls(
                    **common,
                    business_name=name,
                    registration_number=number,
                    business_document_url=business_document_url,
                )
        raise TypeError(f"Unknown profile type: {type(registration.profile).__name__}")


@dataclass(frozen=True)
class RegistrationResult:
    """Enrollment material returned to the registrant exactly once."""

    account_id: str
    two_factor_uri: str
    backup_codes: list[str]
