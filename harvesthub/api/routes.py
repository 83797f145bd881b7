"""
API routes - Registration endpoint.

This module defines the HTTP endpoint:
- POST /api/user-registration - Create an account and return 2FA enrollment

Processing order is strict and each step short-circuits the rest:
rate limiting, schema validation, then the domain service (uniqueness
check, provisioning, insert, verification email).
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from harvesthub.api.dependencies import get_client_ip, get_rate_limiter, get_registration_service
from harvesthub.api.models import ErrorResponse, RegisterRequest, RegisterResponse
from harvesthub.domain.account import Registration
from harvesthub.domain.exceptions import (
    InternalError,
    InvalidInput,
    RateLimited,
    RegistrationError,
)
from harvesthub.domain.ports import RateLimiter
from harvesthub.domain.registration import RegistrationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["registration"])

SUCCESS_MESSAGE = "Registration successful. Please verify your email and set up 2FA."


def first_error_message(exc: ValidationError) -> str:
    """Render the first pydantic error as ``<field>: <message>``."""
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error["loc"])
    return f"{field}: {error['msg']}" if field else error["msg"]


def parse_registration(body: Any) -> Registration:
    """
    Validate a decoded JSON body against the registration schema.

    Raises:
        InvalidInput: With the message of the first violated rule
    """
    try:
        request_data = RegisterRequest.model_validate(body)
    except ValidationError as e:
        raise InvalidInput(first_error_message(e)) from None
    return request_data.to_registration()


@router.post(
    "/user-registration",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input or email already registered"},
        429: {"model": ErrorResponse, "description": "Too many requests"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": RegisterRequest.model_json_schema()}},
        }
    },
    summary="Register a new account",
    description="Create an individual or business account. Returns the two-factor "
    "enrollment URI and backup codes; these are never returned again.",
)
async def register_user(
    request: Request,
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    service: RegistrationService = Depends(get_registration_service),
) -> RegisterResponse:
    """
    Register a new account.

    The JSON body is read by hand rather than declared as a parameter so
    that rate limiting runs before any validation work.
    """
    client_ip = get_client_ip(request)
    if not rate_limiter.allow(client_ip):
        logger.warning("Registration rate limit exceeded for %s", client_ip)
        raise RateLimited(client_ip)

    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidInput("Request body must be valid JSON") from None

    registration = parse_registration(body)

    try:
        result = await run_in_threadpool(service.register, registration)
    except RegistrationError:
        raise
    except Exception as e:
        logger.exception("Unexpected failure while registering account")
        raise InternalError() from e

    return RegisterResponse(
        message=SUCCESS_MESSAGE,
        user_id=result.account_id,
        two_factor_secret=result.two_factor_uri,
        backup_codes=result.backup_codes,
    )
