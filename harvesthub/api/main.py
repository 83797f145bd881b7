"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures middleware, exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from psycopg_pool import ConnectionPool

from harvesthub.adapters.ratelimit import SlidingWindowRateLimiter
from harvesthub.adapters.repository.postgres import run_migrations
from harvesthub.api.dependencies import build_email_sender
from harvesthub.api.errors import install_error_handlers
from harvesthub.api.routes import router as registration_router
from harvesthub.config.settings import get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "registration",
        "description": "HarvestHub account registration with email verification and 2FA enrollment",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool on startup
    - Runs migrations on startup
    - Creates the shared rate limiter and email sender
    - Closes connection pool on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")
    logger.info("Connecting to database...")

    # Create connection pool with explicit sizing
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )

    # Run migrations
    logger.info("Running database migrations...")
    run_migrations(pool)

    # Process-wide services for dependency injection
    app.state.pool = pool
    app.state.rate_limiter = SlidingWindowRateLimiter(
        max_requests=settings.rate_limit_points,
        window_seconds=settings.rate_limit_window_seconds,
    )
    app.state.email_sender = build_email_sender(settings)
    logger.info("Email backend: %s", settings.email_backend)

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    pool.close()
    logger.info("Database connection pool closed")


app = FastAPI(
    title="harvesthub",
    description="HarvestHub registration API - account creation, email verification and 2FA enrollment",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[get_settings().cors_allowed_origin],
    allow_methods=["POST"],
    allow_headers=["Content-Type"],
)

install_error_handlers(app)
app.include_router(registration_router)


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    pool = request.app.state.pool
    with pool.connection() as conn:
        conn.execute("SELECT 1")

    return {"status": "healthy"}
