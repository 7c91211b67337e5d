"""Repository adapters - Database implementations of repository ports."""

from .postgres import PostgresAccountRepository, PostgresOutboxRepository, run_migrations

__all__ = ["PostgresAccountRepository", "PostgresOutboxRepository", "run_migrations"]
