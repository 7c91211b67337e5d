"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic for invite-gated account
registration and welcome-mail delivery. It defines its own port
interfaces for infrastructure abstraction, ensuring true hexagonal
architecture decoupling.
"""

from .exceptions import AccountCreationFailed, RegistrationError
from .outbox import OutboxDispatcher
from .ports import (
    AccountRepository,
    EmailTransport,
    MailboxRole,
    OutboxRepository,
    TokenSigner,
)
from .registration import RegistrationService
from .results import (
    NewAccount,
    OutboundEmail,
    OutboxMessage,
    RegistrationRedirect,
    RegistrationRejected,
    RegistrationResult,
    SessionCookie,
)

__all__ = [
    "AccountCreationFailed",
    "AccountRepository",
    "EmailTransport",
    "MailboxRole",
    "NewAccount",
    "OutboundEmail",
    "OutboxDispatcher",
    "OutboxMessage",
    "OutboxRepository",
    "RegistrationError",
    "RegistrationRedirect",
    "RegistrationRejected",
    "RegistrationResult",
    "RegistrationService",
    "SessionCookie",
    "TokenSigner",
]
