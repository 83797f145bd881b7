"""
Unit tests for credential provisioning helpers.

Tests verify:
- bcrypt hashing and verification
- Verification token signing, expiry and purpose
- TOTP enrollment secrets and backup codes
- Mock business document URLs and verification links
"""

import re
from datetime import timedelta

import jwt
import pyotp
import pytest

from harvesthub.domain.credentials import (
    decode_verification_token,
    generate_backup_codes,
    generate_two_factor_secret,
    hash_password,
    issue_verification_token,
    mock_document_url,
    verification_link,
    verify_password,
)

SECRET = "unit-test-secret"


class TestPasswordHashing:
    """Tests for hash_password / verify_password."""

    def test_hash_differs_from_plaintext(self) -> None:
        assert hash_password("Harvest#2024") != "Harvest#2024"

    def test_hash_uses_requested_cost(self) -> None:
        assert hash_password("Harvest#2024", rounds=10).split("$")[2] == "10"

    def test_hashes_are_salted(self) -> None:
        assert hash_password("Harvest#2024") != hash_password("Harvest#2024")

    def test_verify_accepts_only_original_password(self) -> None:
        password_hash = hash_password("Harvest#2024")

        assert verify_password("Harvest#2024", password_hash)
        assert not verify_password("harvest#2024", password_hash)
        assert not verify_password("Harvest#2024 ", password_hash)

    def test_verify_rejects_non_bcrypt_hash(self) -> None:
        assert not verify_password("Harvest#2024", "Harvest#2024")


class TestVerificationToken:
    """Tests for email verification tokens."""

    def test_round_trip_claims(self) -> None:
        token = issue_verification_token("ada@example.com", SECRET)

        payload = decode_verification_token(token, SECRET)

        assert payload["email"] == "ada@example.com"
        assert payload["purpose"] == "email_verification"
        assert payload["exp"] - payload["iat"] == 24 * 3600

    def test_wrong_secret_rejected(self) -> None:
        token = issue_verification_token("ada@example.com", SECRET)

        with pytest.raises(jwt.InvalidSignatureError):
            decode_verification_token(token, "another-secret")

    def test_expired_token_rejected(self) -> None:
        token = issue_verification_token("ada@example.com", SECRET, ttl=timedelta(seconds=-1))

        with pytest.raises(jwt.ExpiredSignatureError):
            decode_verification_token(token, SECRET)

    def test_token_for_other_purpose_rejected(self) -> None:
        token = jwt.encode(
            {"email": "ada@example.com", "purpose": "password_reset", "exp": 4102444800},
            SECRET,
            algorithm="HS256",
        )

        with pytest.raises(jwt.InvalidTokenError):
            decode_verification_token(token, SECRET)


class TestTwoFactor:
    """Tests for TOTP enrollment and backup codes."""

    def test_secret_is_base32(self) -> None:
        enrollment = generate_two_factor_secret("ada@example.com")

        assert re.fullmatch(r"[A-Z2-7]+", enrollment.secret)

    def test_uri_labels_issuer_and_email(self) -> None:
        enrollment = generate_two_factor_secret("ada@example.com")

        assert enrollment.provisioning_uri.startswith("otpauth://totp/HarvestHub:ada")
        assert "issuer=HarvestHub" in enrollment.provisioning_uri
        assert f"secret={enrollment.secret}" in enrollment.provisioning_uri

    def test_uri_parses_back_to_the_secret(self) -> None:
        enrollment = generate_two_factor_secret("ada@example.com")

        totp = pyotp.parse_uri(enrollment.provisioning_uri)

        assert totp.secret == enrollment.secret
        assert totp.verify(pyotp.TOTP(enrollment.secret).now(), valid_window=1)

    def test_ten_backup_codes_of_ten_characters(self) -> None:
        codes = generate_backup_codes()

        assert len(codes) == 10
        assert all(re.fullmatch(r"[A-Z2-7]{10}", code) for code in codes)

    def test_backup_codes_are_independent(self) -> None:
        assert len(set(generate_backup_codes())) == 10


class TestMockDocumentUrl:
    def test_whitespace_becomes_hyphens(self) -> None:
        assert mock_document_url("Green Acre Farms") == "https://mock-s3.com/Green-Acre-Farms-doc.pdf"

    def test_each_whitespace_character_is_replaced(self) -> None:
        assert mock_document_url("Green  Acre\tLtd") == "https://mock-s3.com/Green--Acre-Ltd-doc.pdf"

    @pytest.mark.parametrize("name", [None, ""])
    def test_absent_without_business_name(self, name) -> None:
        assert mock_document_url(name) is None

    def test_custom_base_url(self) -> None:
        assert mock_document_url("Acme", "https://docs.example/") == "https://docs.example/Acme-doc.pdf"


def test_verification_link_format() -> None:
    assert (
        verification_link("http://localhost:3000/", "abc.def.ghi")
        == "http://localhost:3000/api/user-registration-verify-email?token=abc.def.ghi"
    )
