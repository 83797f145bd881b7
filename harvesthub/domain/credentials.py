"""
Credential and security artifact provisioning.

Password hashing (bcrypt), email verification tokens (PyJWT), two-factor
enrollment secrets and backup codes (pyotp).
"""

import re
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

import bcrypt
import jwt
import pyotp

VERIFICATION_PURPOSE = "email_verification"
VERIFY_EMAIL_PATH = "/api/user-registration-verify-email"
BACKUP_CODE_COUNT = 10
BACKUP_CODE_LENGTH = 10


@dataclass(frozen=True)
class TwoFactorEnrollment:
    """Base32 shared secret and the otpauth:// URI rendered as a QR code."""

    secret: str
    provisioning_uri: str


def hash_password(password: str, rounds: int = 10) -> str:
    """Hash password using bcrypt with the given cost factor."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time check of a plaintext password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        # Not a bcrypt hash at all
        return False


def issue_verification_token(email: str, secret: str, ttl: timedelta = timedelta(hours=24)) -> str:
    """
    Create a signed, single-purpose token proving ownership of ``email``.

    Args:
        email: Address the token is bound to
        secret: HMAC signing secret
        ttl: Lifetime of the token

    Returns:
        Encoded HS256 JWT
    """
    now = int(time.time())
    payload: dict[str, Any] = {
        "email": email,
        "purpose": VERIFICATION_PURPOSE,
        "iat": now,
        "exp": now + int(ttl.total_seconds()),
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def decode_verification_token(token: str, secret: str) -> dict[str, Any]:
    """
    Decode and verify a verification token.

    Raises:
        jwt.PyJWTError: If the signature, expiry or purpose check fails
    """
    payload = jwt.decode(
        token,
        secret,
        algorithms=["HS256"],
        options={"require": ["exp", "email"]},
    )
    if payload.get("purpose") != VERIFICATION_PURPOSE:
        raise jwt.InvalidTokenError("Token was not issued for email verification")
    return payload


def generate_two_factor_secret(email: str, issuer: str = "HarvestHub") -> TwoFactorEnrollment:
    """Generate a TOTP shared secret labelled ``<issuer>:<email>``."""
    secret = pyotp.random_base32()
    uri = pyotp.TOTP(secret).provisioning_uri(name=email, issuer_name=issuer)
    return TwoFactorEnrollment(secret=secret, provisioning_uri=uri)


def generate_backup_codes(count: int = BACKUP_CODE_COUNT, length: int = BACKUP_CODE_LENGTH) -> list[str]:
    """Each code is cut from its own freshly generated base32 secret."""
    return [pyotp.random_base32()[:length] for _ in range(count)]


def mock_document_url(business_name: str | None, base_url: str = "https://mock-s3.com") -> str | None:
    """Placeholder document location derived from the business name."""
    if not business_name:
        return None
    slug = re.sub(r"\s", "-", business_name)
    return f"{base_url.rstrip('/')}/{slug}-doc.pdf"


def verification_link(base_url: str, token: str) -> str:
    return f"{base_url.rstrip('/')}{VERIFY_EMAIL_PATH}?token={token}"
