"""
Registration results - Discriminated outcome of a signup attempt.

The service never performs the HTTP redirect itself. It returns either
a rejection carrying a user-facing message, or a redirect carrying the
target and the session cookies the caller must set.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal


@dataclass(frozen=True)
class SessionCookie:
    """Cookie to set on the response that completes a registration."""

    name: str
    value: str
    expires: datetime
    path: str = "/"
    httponly: bool = False


@dataclass(frozen=True)
class RegistrationRejected:
    """Registration refused before any write took place."""

    message: str
    status: Literal["error"] = "error"


@dataclass(frozen=True)
class RegistrationRedirect:
    """Registration committed; the caller should redirect to `target`."""

    target: str
    user_id: str
    mailbox_id: str
    cookies: tuple[SessionCookie, ...] = field(default_factory=tuple)
    status: Literal["redirect"] = "redirect"


RegistrationResult = RegistrationRejected | RegistrationRedirect


@dataclass(frozen=True)
class NewAccount:
    """Rows written together by the provisioning batch."""

    user_id: str
    mailbox_id: str
    username: str
    password_hash: str
    email: str
    alias_name: str


@dataclass(frozen=True)
class OutboundEmail:
    """Fully-formed MIME message ready for a mail transport."""

    sender: str
    recipients: tuple[str, ...]
    raw: bytes


@dataclass(frozen=True)
class OutboxMessage:
    """Queued outbound email claimed for a delivery attempt."""

    id: int
    email: OutboundEmail
    attempts: int
