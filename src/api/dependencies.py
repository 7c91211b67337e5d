"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
Settings are read from app state, never from the environment here.
"""

from datetime import timedelta

from fastapi import Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresAccountRepository, PostgresOutboxRepository
from src.adapters.session.jwt_signer import JwtTokenSigner
from src.config.settings import Settings
from src.domain.outbox import OutboxDispatcher
from src.domain.ports import EmailTransport
from src.domain.registration import RegistrationService


def get_app_settings(request: Request) -> Settings:
    """
    Get settings from app state.

    Settings are built once during app lifespan startup.
    """
    return request.app.state.settings


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_email_transport(request: Request) -> EmailTransport:
    """Get the mail transport created at startup."""
    return request.app.state.email_transport


def get_token_signer(request: Request) -> JwtTokenSigner:
    """Create the session token signer from configured secret."""
    settings = get_app_settings(request)
    return JwtTokenSigner(settings.jwt_token, ttl=timedelta(days=settings.session_ttl_days))


def get_registration_service(request: Request) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the repository, token signer and settings.
    """
    settings = get_app_settings(request)
    return RegistrationService(
        repository=PostgresAccountRepository(get_pool(request)),
        token_signer=get_token_signer(request),
        mail_domain=settings.mail_domain,
        app_url=settings.app_url,
        system_sender=settings.system_sender,
        contact_address=settings.contact_address,
        bcrypt_cost=settings.bcrypt_cost,
        session_ttl=timedelta(days=settings.session_ttl_days),
    )


def get_outbox_dispatcher(request: Request) -> OutboxDispatcher:
    """Create the outbox dispatcher used after each registration."""
    settings = get_app_settings(request)
    return OutboxDispatcher(
        repository=PostgresOutboxRepository(get_pool(request)),
        transport=get_email_transport(request),
        max_attempts=settings.outbox_max_attempts,
        batch_size=settings.outbox_batch_size,
        retry_delay_seconds=settings.outbox_retry_delay_seconds,
    )
