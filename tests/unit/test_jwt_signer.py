"""
Unit tests for JwtTokenSigner.
"""

from datetime import timedelta

import pytest
from jose import jwt

from src.adapters.session.jwt_signer import ALGORITHM, JwtTokenSigner


class TestIssue:
    """Tests for token issuance."""

    def test_token_carries_user_id_and_expiry(self) -> None:
        signer = JwtTokenSigner("secret", ttl=timedelta(days=30))

        token = signer.issue("user-1")

        claims = jwt.decode(token, "secret", algorithms=[ALGORITHM])
        assert claims["sub"] == "user-1"
        assert claims["exp"] - claims["iat"] == 30 * 24 * 3600

    def test_empty_secret_rejected(self) -> None:
        with pytest.raises(ValueError):
            JwtTokenSigner("")


class TestVerify:
    """Tests for token verification."""

    def test_valid_token_returns_user_id(self) -> None:
        signer = JwtTokenSigner("secret")
        assert signer.verify(signer.issue("user-1")) == "user-1"

    def test_token_from_other_secret_rejected(self) -> None:
        token = JwtTokenSigner("other-secret").issue("user-1")
        assert JwtTokenSigner("secret").verify(token) is None

    def test_expired_token_rejected(self) -> None:
        signer = JwtTokenSigner("secret", ttl=timedelta(seconds=-60))
        assert signer.verify(signer.issue("user-1")) is None

    def test_garbage_rejected(self) -> None:
        assert JwtTokenSigner("secret").verify("not-a-token") is None
