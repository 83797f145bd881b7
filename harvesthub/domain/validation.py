"""
Field validation rules shared by the registration endpoint and the wizard.

Keeping the rules in one place means the wizard can never accept input
that the endpoint would later reject.
"""

import re
from dataclasses import astuple, dataclass

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
SPECIAL_CHARACTERS = re.compile(r'[!@#$%^&*(),.?":{}|<>]')
UK_MOBILE_PATTERN = re.compile(r"^07\d{9}$")

PASSWORD_MIN_LENGTH = 8
NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 255

PHONE_REQUIRED_MESSAGE = "Phone number is required"
UK_MOBILE_MESSAGE = "Enter a valid UK mobile number (07xxxxxxxxx)"


@dataclass(frozen=True)
class PasswordStrength:
    """Outcome of the four independent password strength predicates."""

    has_min_length: bool
    has_number: bool
    has_special_char: bool
    has_upper_case: bool

    @property
    def is_strong(self) -> bool:
        return all(astuple(self))


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def check_password_strength(password: str) -> PasswordStrength:
    return PasswordStrength(
        has_min_length=len(password) >= PASSWORD_MIN_LENGTH,
        has_number=any(char.isdigit() for char in password),
        has_special_char=bool(SPECIAL_CHARACTERS.search(password)),
        has_upper_case=bool(re.search(r"[A-Z]", password)),
    )


def is_strong_password(password: str) -> bool:
    return check_password_strength(password).is_strong


def password_problem(password: str) -> str | None:
    """Return the first unmet password requirement, or None if all hold."""
    strength = check_password_strength(password)
    if not strength.has_min_length:
        return f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
    if not strength.has_number:
        return "Password must contain a number"
    if not strength.has_special_char:
        return "Password must contain a special character"
    if not strength.has_upper_case:
        return "Password must contain an uppercase letter"
    return None


def normalize_uk_mobile(phone: str) -> str:
    """
    Normalize a UK mobile number to its local 07xxxxxxxxx form.

    Non-digits are dropped and a leading 44 country code is replaced by 0,
    so "+44 7911 123456" becomes "07911123456".

    Raises:
        ValueError: If the number is empty or not a UK mobile number
    """
    digits = re.sub(r"\D+", "", phone)
    if not digits:
        raise ValueError(PHONE_REQUIRED_MESSAGE)
    if digits.startswith("44") and len(digits) == 12:
        digits = "0" + digits[2:]
    if not UK_MOBILE_PATTERN.match(digits):
        raise ValueError(UK_MOBILE_MESSAGE)
    return digits
