"""
PostgreSQL repository adapter - Implements AccountRepository and OutboxRepository.

This module provides the PostgreSQL implementation of the domain's
repository ports using psycopg3 with raw SQL.

Consistency Design:
-------------------
1. **Single transaction for provisioning**: user, mailbox, ownership link,
   default alias, invite consumption and the welcome outbox row are written
   inside one `conn.transaction()` block. Any failure rolls back all of them.

2. **Unique constraints are the guarantee**: `users.username` and
   `mailbox_aliases.alias` are UNIQUE. Two concurrent registrations for the
   same name cannot both commit; the loser gets an IntegrityError, which is
   reported as a rejected batch.

3. **Single-use invites**: the invite update is filtered on
   `used_at IS NULL` and must touch exactly one row, so a code can be
   consumed by at most one committed registration.

4. **Outbox claiming**: `FOR UPDATE SKIP LOCKED` lets several dispatchers
   drain the outbox without picking the same message twice.
"""

import logging
import uuid
from pathlib import Path

from psycopg import IntegrityError
from psycopg_pool import ConnectionPool

from src.domain.ports import MailboxRole
from src.domain.results import NewAccount, OutboundEmail, OutboxMessage

logger = logging.getLogger(__name__)


class _InviteAlreadyUsed(Exception):
    """Raised inside the provisioning transaction to force a rollback."""


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def new_id(self) -> str:
        return uuid.uuid4().hex

    def find_valid_invite(self, code: str) -> bool:
        sql = """
            SELECT 1 FROM invite_codes
            WHERE code = %s
              AND expires_at >= NOW()
              AND used_at IS NULL
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (code,))
            return cursor.fetchone() is not None

    def username_exists(self, username: str) -> bool:
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT 1 FROM users WHERE username = %s", (username,))
            return cursor.fetchone() is not None

    def alias_exists(self, alias: str) -> bool:
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT 1 FROM mailbox_aliases WHERE alias = %s", (alias,))
            return cursor.fetchone() is not None

    def provision_account(
        self, account: NewAccount, invite_code: str, welcome: OutboundEmail
    ) -> bool:
        """
        Atomically create the account rows and consume the invite.

        Args:
            account: Identifiers and credentials for the new rows
            invite_code: Code consumed by this registration
            welcome: Welcome email queued in the outbox

        Returns:
            True if committed, False if a unique constraint fired or the
            invite was consumed concurrently (nothing written)
        """
        try:
            with self._pool.connection() as conn:
                with conn.transaction(), conn.cursor() as cursor:
                    cursor.execute(
                        "INSERT INTO users (id, username, password, email) VALUES (%s, %s, %s, %s)",
                        (account.user_id, account.username, account.password_hash, account.email),
                    )
                    cursor.execute(
                        "INSERT INTO mailboxes (id) VALUES (%s)",
                        (account.mailbox_id,),
                    )
                    cursor.execute(
                        "INSERT INTO mailbox_for_user (mailbox_id, user_id, role) VALUES (%s, %s, %s)",
                        (account.mailbox_id, account.user_id, MailboxRole.OWNER.value),
                    )
                    cursor.execute(
                        """
                        INSERT INTO mailbox_aliases (mailbox_id, alias, "default", name)
                        VALUES (%s, %s, TRUE, %s)
                        """,
                        (account.mailbox_id, account.email, account.alias_name),
                    )
                    cursor.execute(
                        """
                        UPDATE invite_codes
                        SET used_at = NOW(), used_by = %s
                        WHERE code = %s AND used_at IS NULL
                        """,
                        (account.user_id, invite_code),
                    )
                    if cursor.rowcount != 1:
                        raise _InviteAlreadyUsed(invite_code)
                    cursor.execute(
                        """
                        INSERT INTO email_outbox (sender, recipients, raw_message)
                        VALUES (%s, %s, %s)
                        """,
                        (welcome.sender, list(welcome.recipients), welcome.raw),
                    )
        except IntegrityError as e:
            logger.warning(f"Provisioning rolled back for {account.username}: {e}")
            return False
        except _InviteAlreadyUsed:
            logger.warning(f"Provisioning rolled back for {account.username}: invite already used")
            return False
        return True


class PostgresOutboxRepository:
    """Implements OutboxRepository protocol via psycopg3."""

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def claim_pending(
        self, limit: int, max_attempts: int, retry_delay_seconds: int
    ) -> list[OutboxMessage]:
        sql = """
            UPDATE email_outbox
            SET attempts = attempts + 1, last_attempt_at = NOW()
            WHERE id IN (
                SELECT id FROM email_outbox
                WHERE sent_at IS NULL
                  AND attempts < %s
                  AND (last_attempt_at IS NULL
                       OR last_attempt_at <= NOW() - %s * INTERVAL '1 second')
                ORDER BY created_at
                LIMIT %s
                FOR UPDATE SKIP LOCKED
            )
            RETURNING id, sender, recipients, raw_message, attempts
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (max_attempts, retry_delay_seconds, limit))
            rows = cursor.fetchall()
            conn.commit()

        return [
            OutboxMessage(
                id=row[0],
                email=OutboundEmail(sender=row[1], recipients=tuple(row[2]), raw=bytes(row[3])),
                attempts=row[4],
            )
            for row in rows
        ]

    def mark_sent(self, message_id: int) -> None:
        with self._pool.connection() as conn:
            conn.execute(
                "UPDATE email_outbox SET sent_at = NOW(), last_error = NULL WHERE id = %s",
                (message_id,),
            )
            conn.commit()

    def record_failure(self, message_id: int, error: str) -> None:
        with self._pool.connection() as conn:
            conn.execute(
                "UPDATE email_outbox SET last_error = %s WHERE id = %s",
                (error, message_id),
            )
            conn.commit()


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
