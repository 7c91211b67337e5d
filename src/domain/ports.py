"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from enum import Enum
from typing import Protocol

from .results import NewAccount, OutboundEmail, OutboxMessage


class MailboxRole(str, Enum):
    """
    Role a user holds on a mailbox (MailboxForUser.role).

    Mirrors the CHECK constraint on mailbox_for_user.role. Signup only
    ever grants OWNER; ADMIN and NONE exist for rows written elsewhere.
    """

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    NONE = "NONE"


class AccountRepository(Protocol):
    """Port interface for account persistence."""

    def new_id(self) -> str:
        """Return a fresh unique identifier for a user or mailbox row."""
        ...

    def find_valid_invite(self, code: str) -> bool:
        """
        Check whether an invite code can still be used.

        A code is usable when it exists, `expires_at >= NOW()` and
        `used_at IS NULL`. Point-in-time read, no lock taken.
        """
        ...

    def username_exists(self, username: str) -> bool:
        """Return True if a user with this username is registered."""
        ...

    def alias_exists(self, alias: str) -> bool:
        """Return True if any mailbox already owns this alias."""
        ...

    def provision_account(
        self, account: NewAccount, invite_code: str, welcome: OutboundEmail
    ) -> bool:
        """
        Atomically create the account and consume the invite code.

        Writes, in one transaction:
        1. User
        2. Mailbox
        3. MailboxForUser (role=OWNER)
        4. MailboxAlias (default=true)
        5. InviteCode used_at/used_by (only if still unused)
        6. email_outbox row holding the welcome message

        Args:
            account: Identifiers and credentials for the new rows
            invite_code: Code consumed by this registration
            welcome: Welcome email queued for delivery

        Returns:
            True if committed, False if the store rejected the batch
            (unique conflict or invite already consumed). Nothing is
            written in the False case.
        """
        ...


class OutboxRepository(Protocol):
    """Port interface for the notification outbox."""

    def claim_pending(
        self, limit: int, max_attempts: int, retry_delay_seconds: int
    ) -> list[OutboxMessage]:
        """
        Claim due, unsent messages for a delivery attempt.

        Claiming increments the attempt counter and stamps the attempt
        time, so concurrent dispatchers never pick the same message and
        failed messages wait `retry_delay_seconds` before the next try.
        """
        ...

    def mark_sent(self, message_id: int) -> None:
        """Record successful delivery."""
        ...

    def record_failure(self, message_id: int, error: str) -> None:
        """Record the reason the last attempt failed."""
        ...


class EmailTransport(Protocol):
    """Port interface for outbound email delivery."""

    def send(self, email: OutboundEmail) -> bool:
        """
        Hand a MIME message to the mail relay.

        Returns:
            True if the relay accepted the message, False otherwise.
            No delivery confirmation is implied.
        """
        ...


class TokenSigner(Protocol):
    """Port interface for session token issuance."""

    def issue(self, user_id: str) -> str:
        """Return a signed, opaque auth token bound to `user_id`."""
        ...
