"""
Shared fixtures for adversarial tests.

Provides a registration service wired to the real database.
"""

import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresAccountRepository
from src.adapters.session.jwt_signer import JwtTokenSigner
from src.domain.registration import RegistrationService


@pytest.fixture
def service(pool: ConnectionPool) -> RegistrationService:
    """Registration service backed by PostgreSQL."""
    return RegistrationService(
        repository=PostgresAccountRepository(pool),
        token_signer=JwtTokenSigner("adversarial-secret"),
    )
