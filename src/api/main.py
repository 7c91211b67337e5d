"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures routers and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from src.adapters.mail import HttpEmailTransport, create_email_transport
from src.adapters.repository.postgres import run_migrations
from src.api.v1 import router as v1_router
from src.config.settings import get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Registration API v1 - Invite-gated signup with mailbox provisioning",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Validates settings (fails fast on missing secrets)
    - Creates database connection pool on startup
    - Runs migrations on startup
    - Creates the mail transport
    - Closes connection pool and transport on shutdown
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

    transport = create_email_transport(settings)
    logger.info(f"Mail transport: {settings.email_transport}")

    # Store shared resources in app state for dependency injection
    app.state.settings = settings
    app.state.pool = pool
    app.state.email_transport = transport

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if isinstance(transport, HttpEmailTransport):
        transport.close()
    pool.close()
    logger.info("Database connection pool closed")


app = FastAPI(
    title="emailthing-signup",
    description="Invite-gated registration API - Creates a user, mailbox and default alias",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    # Validate database connectivity
    pool = request.app.state.pool
    with pool.connection() as conn:
        conn.execute("SELECT 1")

    return {"status": "healthy"}
