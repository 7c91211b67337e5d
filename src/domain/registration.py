"""
Registration domain service - Invite-gated account signup.

This module contains the core business logic for user registration.
The flow runs strictly forward and performs no writes until the final
provisioning step:

    1. Validate credentials against the schema
    2. Reject impersonating usernames
    3. Require a usable invite code from the referring URL
    4. Reject taken usernames and aliases
    5. Provision user, mailbox, ownership, default alias, invite
       consumption and the queued welcome email in one atomic batch
    6. Issue the session and hand back a redirect to onboarding

The uniqueness checks in step 4 only produce friendlier messages; the
store's unique constraints are what guarantee a username is taken once.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlsplit

import bcrypt

from .exceptions import AccountCreationFailed
from .ports import AccountRepository, TokenSigner
from .results import (
    NewAccount,
    RegistrationRedirect,
    RegistrationRejected,
    RegistrationResult,
    SessionCookie,
)
from .validation import is_impersonating, parse_credentials
from .welcome import compose_welcome_email

logger = logging.getLogger(__name__)

NO_INVITE = "You need an invite code to signup right now"
INVALID_USERNAME = "Invalid username"
USERNAME_TAKEN = "Username already taken"
EMAIL_TAKEN = "Email already taken"

ONBOARDING_TARGET = "/onboarding/welcome"
AUTH_COOKIE = "token"
MAILBOX_COOKIE = "mailboxId"
# Largest 32-bit unix timestamp, i.e. "never expires" for browsers
MAILBOX_COOKIE_EXPIRES = datetime(2038, 1, 19, 4, 14, 7, tzinfo=timezone.utc)


def extract_invite_code(referer: str | None) -> str | None:
    """
    Pull the `invite` query parameter out of the referring URL.

    Returns None for a missing or unparsable referer, or when the
    parameter is absent or empty.
    """
    if not referer:
        return None
    try:
        query = urlsplit(referer).query
    except ValueError:
        return None
    values = parse_qs(query).get("invite")
    if not values or not values[0]:
        return None
    return values[0]


@dataclass
class RegistrationService:
    """
    Domain service for user registration.

    Orchestrates validation, the invite gate, uniqueness checks,
    atomic provisioning and session issuance.
    """

    repository: AccountRepository
    token_signer: TokenSigner
    mail_domain: str = "emailthing.xyz"
    app_url: str = "https://emailthing.xyz"
    system_sender: str = "system@emailthing.dev"
    contact_address: str = "contact@emailthing.xyz"
    bcrypt_cost: int = 10
    session_ttl: timedelta = timedelta(days=30)

    def register(
        self, username: str | None, password: str | None, referer: str | None
    ) -> RegistrationResult:
        """
        Register a new user from submitted form fields.

        Args:
            username: Raw username form field
            password: Raw password form field
            referer: Referer header of the submission (carries ?invite=)

        Returns:
            RegistrationRejected with a user-facing message, or
            RegistrationRedirect with the onboarding target and cookies

        Raises:
            AccountCreationFailed: If the atomic provisioning write is
                rejected by the store (e.g. a concurrent registration won)
        """
        parsed = parse_credentials(username, password)
        if isinstance(parsed, str):
            return self._reject("schema", parsed)

        if is_impersonating(parsed.username):
            return self._reject("blocklist", INVALID_USERNAME)

        invite_code = extract_invite_code(referer)
        if invite_code is None or not self.repository.find_valid_invite(invite_code):
            return self._reject("invite", NO_INVITE)

        if self.repository.username_exists(parsed.username):
            return self._reject("username_taken", USERNAME_TAKEN)

        email = self._email_for(parsed.username)
        if self.repository.alias_exists(email):
            return self._reject("alias_taken", EMAIL_TAKEN)

        account = NewAccount(
            user_id=self.repository.new_id(),
            mailbox_id=self.repository.new_id(),
            username=parsed.username,
            password_hash=self._hash_password(parsed.password),
            email=email,
            alias_name=parsed.username,
        )
        welcome = compose_welcome_email(
            account.username,
            account.mailbox_id,
            mail_domain=self.mail_domain,
            app_url=self.app_url,
            sender=self.system_sender,
            reply_to=self.contact_address,
        )

        if not self.repository.provision_account(account, invite_code, welcome):
            logger.warning("Provisioning rejected for username %s", account.username)
            raise AccountCreationFailed(account.username)

        logger.info("Registered user %s with mailbox %s", account.user_id, account.mailbox_id)
        return RegistrationRedirect(
            target=ONBOARDING_TARGET,
            user_id=account.user_id,
            mailbox_id=account.mailbox_id,
            cookies=self._session_cookies(account),
        )

    def _session_cookies(self, account: NewAccount) -> tuple[SessionCookie, ...]:
        token = self.token_signer.issue(account.user_id)
        return (
            SessionCookie(
                name=AUTH_COOKIE,
                value=token,
                expires=datetime.now(timezone.utc) + self.session_ttl,
                httponly=True,
            ),
            SessionCookie(
                name=MAILBOX_COOKIE,
                value=account.mailbox_id,
                expires=MAILBOX_COOKIE_EXPIRES,
            ),
        )

    def _email_for(self, username: str) -> str:
        return f"{username}@{self.mail_domain}"

    def _reject(self, reason: str, message: str) -> RegistrationRejected:
        logger.info("Registration rejected: %s", reason)
        return RegistrationRejected(message=message)

    def _hash_password(self, password: str) -> str:
        """Hash password using bcrypt with the configured cost factor (>= 10)."""
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self.bcrypt_cost)).decode()
