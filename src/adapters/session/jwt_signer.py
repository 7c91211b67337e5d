"""
JWT token signer adapter - Implements TokenSigner protocol.

Session tokens are HS256 JWTs carrying the user id in `sub`.
"""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

ALGORITHM = "HS256"


class JwtTokenSigner:
    """Issues and verifies session tokens with a shared secret."""

    def __init__(self, secret: str, ttl: timedelta = timedelta(days=30)) -> None:
        if not secret:
            raise ValueError("JWT signing secret must not be empty")
        self._secret = secret
        self._ttl = ttl

    def issue(self, user_id: str) -> str:
        """Create a signed token for `user_id` valid for the configured TTL."""
        now = datetime.now(timezone.utc)
        claims = {"sub": user_id, "iat": now, "exp": now + self._ttl}
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> str | None:
        """Return the user id of a valid token, or None if invalid or expired."""
        try:
            payload = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except JWTError:
            return None
        return payload.get("sub")
