"""
Exception handlers mapping domain errors to HTTP responses.

Every failure leaves the API as ``{"error": <message>}`` with one of
400, 429 or 500. Only validation messages are passed through verbatim;
everything else uses a fixed public message.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from harvesthub.domain.exceptions import (
    DuplicateEmail,
    InternalError,
    InvalidInput,
    RateLimited,
    RegistrationError,
)

DUPLICATE_EMAIL_MESSAGE = "Email already registered"
RATE_LIMITED_MESSAGE = "Too many requests"
INTERNAL_ERROR_MESSAGE = "Internal server error"

logger = logging.getLogger(__name__)


def error_response(exc: RegistrationError) -> JSONResponse:
    """Translate a domain error into its HTTP status and public message."""
    if isinstance(exc, RateLimited):
        status_code, message = status.HTTP_429_TOO_MANY_REQUESTS, RATE_LIMITED_MESSAGE
    elif isinstance(exc, InvalidInput):
        status_code, message = status.HTTP_400_BAD_REQUEST, str(exc)
    elif isinstance(exc, DuplicateEmail):
        status_code, message = status.HTTP_400_BAD_REQUEST, DUPLICATE_EMAIL_MESSAGE
    else:
        status_code, message = status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE
    return JSONResponse(status_code=status_code, content={"error": message})


async def handle_registration_error(request: Request, exc: RegistrationError) -> JSONResponse:
    return error_response(exc)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Last resort for anything raised outside the domain error hierarchy."""
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(InternalError())


def install_error_handlers(app: FastAPI) -> None:
    """Register the domain error handler and the generic 500 fallback on an application."""
    app.add_exception_handler(RegistrationError, handle_registration_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
