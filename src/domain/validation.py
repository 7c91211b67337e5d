"""
Credential validation - Signup form schema and username policy.

The schema reports fixed human-readable messages so the first error can
be shown to the user verbatim.
"""

import re
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator
from pydantic_core import PydanticCustomError

USERNAME_MIN_LENGTH = 4
USERNAME_MAX_LENGTH = 20
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_BYTES = 72  # bcrypt ignores input past 72 bytes

_USERNAME_CHARACTERS = re.compile(r"^[a-zA-Z0-9_.-]+$")
# Default alias local part must be a dot-atom
_USERNAME_SHAPE = re.compile(r"^[a-zA-Z0-9](?:[a-zA-Z0-9_-]|\.(?!\.))*[a-zA-Z0-9]$")

# Usernames that could pass for staff or system senders
IMPERSONATING_TERMS: tuple[str, ...] = (
    "admin",
    "root",
    "system",
    "support",
    "contact",
    "emailthing",
    "riskymh",
    "postmaster",
    "abuse",
    "noreply",
    "no-reply",
    "security",
    "webmaster",
    "hostmaster",
    "mailer-daemon",
    "help",
    "official",
    "staff",
    "moderator",
)


def _error(kind: str, message: str) -> PydanticCustomError:
    return PydanticCustomError(kind, message)


class Credentials(BaseModel):
    """Validated signup credentials."""

    username: str
    password: str

    @field_validator("username", mode="before")
    @classmethod
    def check_username(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise _error("username_required", "Username is required")
        value = value.strip()
        if len(value) < USERNAME_MIN_LENGTH:
            raise _error(
                "username_too_short",
                f"Username must be at least {USERNAME_MIN_LENGTH} characters",
            )
        if len(value) > USERNAME_MAX_LENGTH:
            raise _error(
                "username_too_long",
                f"Username must be at most {USERNAME_MAX_LENGTH} characters",
            )
        if not _USERNAME_CHARACTERS.match(value):
            raise _error(
                "username_format",
                "Username can only contain letters, numbers, dots, dashes and underscores",
            )
        if not _USERNAME_SHAPE.match(value):
            raise _error(
                "username_shape",
                "Username must start and end with a letter or number and cannot contain consecutive dots",
            )
        return value.lower()

    @field_validator("password", mode="before")
    @classmethod
    def check_password(cls, value: Any) -> str:
        if not isinstance(value, str) or not value:
            raise _error("password_required", "Password is required")
        if len(value) < PASSWORD_MIN_LENGTH:
            raise _error(
                "password_too_short",
                f"Password must be at least {PASSWORD_MIN_LENGTH} characters",
            )
        if len(value.encode()) > PASSWORD_MAX_BYTES:
            raise _error("password_too_long", "Password is too long")
        return value


def parse_credentials(username: Any, password: Any) -> Credentials | str:
    """
    Validate raw form fields.

    Args:
        username: Submitted username (may be None if the field was absent)
        password: Submitted password (may be None if the field was absent)

    Returns:
        Credentials on success, otherwise the message of the first error.
    """
    try:
        return Credentials(username=username, password=password)
    except ValidationError as exc:
        return exc.errors()[0]["msg"]


def is_impersonating(username: str) -> bool:
    """Case-insensitive substring match against the impersonation blocklist."""
    lowered = username.lower()
    return any(term in lowered for term in IMPERSONATING_TERMS)
