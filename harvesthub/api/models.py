"""
API request and response models.

Pydantic models for the registration endpoint. The wire format uses
camelCase keys; Python attributes stay snake_case.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from harvesthub.domain.account import (
    AccountType,
    BusinessProfile,
    IndividualProfile,
    Registration,
)
from harvesthub.domain.validation import (
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    normalize_uk_mobile,
    password_problem,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(CamelModel):
    """Request model for user registration."""

    email: EmailStr
    password: str = Field(..., description="Password meeting the strength policy")
    first_name: str = Field(..., min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    last_name: str = Field(..., min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    phone_number: str | None = None
    date_of_birth: date | None = None
    account_type: AccountType
    business_name: str | None = None
    registration_number: str | None = None

    @field_validator(
        "phone_number", "date_of_birth", "business_name", "registration_number", mode="before"
    )
    @classmethod
    def blank_is_absent(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("password")
    @classmethod
    def password_is_strong(cls, value: str) -> str:
        problem = password_problem(value)
        if problem:
            raise PydanticCustomError("weak_password", problem)
        return value

    @model_validator(mode="after")
    def profile_fields_match_account_type(self) -> "RegisterRequest":
        if self.account_type is AccountType.BUSINESS:
            if not self.business_name:
                raise PydanticCustomError(
                    "missing_business_field", "businessName is required for business accounts"
                )
            if not self.registration_number:
                raise PydanticCustomError(
                    "missing_business_field",
                    "registrationNumber is required for business accounts",
                )
        elif self.phone_number is not None:
            # Only individual accounts keep a phone number
            try:
                self.phone_number = normalize_uk_mobile(self.phone_number)
            except ValueError as e:
                raise PydanticCustomError("uk_mobile", f"phoneNumber: {e}") from None
        return self

    def to_registration(self) -> Registration:
        """Build the domain registration with its tagged profile variant."""
        match self.account_type:
            case AccountType.BUSINESS:
                profile = BusinessProfile(
                    business_name=self.business_name,
                    registration_number=self.registration_number,
                )
            case AccountType.INDIVIDUAL:
                profile = IndividualProfile(
                    phone_number=self.phone_number,
                    date_of_birth=self.date_of_birth,
                )
        return Registration(
            email=self.email,
            password=self.password,
            first_name=self.first_name,
            last_name=self.last_name,
            profile=profile,
        )


class RegisterResponse(CamelModel):
    """Response model for successful registration."""

    message: str
    user_id: str
    two_factor_secret: str = Field(..., description="otpauth:// URI for QR enrollment")
    backup_codes: list[str]


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: str
