"""
Unit tests for API v1 routes.

Tests endpoint responses with mocked dependencies.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.dependencies import (
    get_outbox_dispatcher,
    get_registration_service,
    get_token_signer,
)
from src.api.v1.routes import router
from src.domain.exceptions import AccountCreationFailed
from src.domain.outbox import OutboxDispatcher
from src.domain.registration import NO_INVITE, RegistrationService
from src.domain.results import RegistrationRedirect, RegistrationRejected, SessionCookie
from tests.helpers import make_settings

REFERER = "https://emailthing.xyz/register?invite=ABC123"

REDIRECT = RegistrationRedirect(
    target="/onboarding/welcome",
    user_id="user-1",
    mailbox_id="mbx-1",
    cookies=(
        SessionCookie(
            name="token",
            value="signed-token",
            expires=datetime(2030, 1, 1, tzinfo=timezone.utc),
            httponly=True,
        ),
        SessionCookie(
            name="mailboxId",
            value="mbx-1",
            expires=datetime(2038, 1, 19, 4, 14, 7, tzinfo=timezone.utc),
        ),
    ),
)


@pytest.fixture
def service() -> MagicMock:
    return MagicMock(spec=RegistrationService)


@pytest.fixture
def dispatcher() -> MagicMock:
    return MagicMock(spec=OutboxDispatcher)


@pytest.fixture
def app(service: MagicMock, dispatcher: MagicMock) -> FastAPI:
    """Create test FastAPI application with mocked service and dispatcher."""
    test_app = FastAPI()
    test_app.include_router(router, prefix="/v1")
    test_app.dependency_overrides[get_registration_service] = lambda: service
    test_app.dependency_overrides[get_outbox_dispatcher] = lambda: dispatcher
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client that does not follow redirects."""
    return TestClient(app, follow_redirects=False)


def post_register(client: TestClient, referer: str | None = REFERER, **data: str):
    headers = {"referer": referer} if referer is not None else {}
    return client.post("/v1/register", data=data, headers=headers)


class TestRegisterSuccess:
    """Tests for the redirect outcome."""

    def test_redirects_to_onboarding(self, client: TestClient, service: MagicMock) -> None:
        service.register.return_value = REDIRECT

        response = post_register(client, username="alice", password="password123")

        assert response.status_code == 303
        assert response.headers["location"] == "/onboarding/welcome"

    def test_passes_form_fields_and_referer(self, client: TestClient, service: MagicMock) -> None:
        service.register.return_value = REDIRECT

        post_register(client, username="alice", password="password123")

        service.register.assert_called_once_with("alice", "password123", REFERER)

    def test_sets_session_cookies(self, client: TestClient, service: MagicMock) -> None:
        service.register.return_value = REDIRECT

        response = post_register(client, username="alice", password="password123")

        set_cookies = response.headers.get_list("set-cookie")
        token_cookie = next(c for c in set_cookies if c.startswith("token="))
        mailbox_cookie = next(c for c in set_cookies if c.startswith("mailboxId="))
        assert "token=signed-token" in token_cookie
        assert "HttpOnly" in token_cookie
        assert "Path=/" in token_cookie
        assert "mailboxId=mbx-1" in mailbox_cookie
        assert "Path=/" in mailbox_cookie
        assert "Tue, 19 Jan 2038 04:14:07 GMT" in mailbox_cookie
        assert "HttpOnly" not in mailbox_cookie

    def test_dispatches_outbox_after_response(
        self, client: TestClient, service: MagicMock, dispatcher: MagicMock
    ) -> None:
        service.register.return_value = REDIRECT

        post_register(client, username="alice", password="password123")

        dispatcher.dispatch_pending.assert_called_once_with()


class TestRegisterRejected:
    """Tests for validation and policy rejections."""

    def test_rejection_returns_400_with_error(
        self, client: TestClient, service: MagicMock, dispatcher: MagicMock
    ) -> None:
        service.register.return_value = RegistrationRejected(message=NO_INVITE)

        response = post_register(client, username="alice", password="password123")

        assert response.status_code == 400
        assert response.json() == {"error": NO_INVITE}
        assert response.headers.get_list("set-cookie") == []
        dispatcher.dispatch_pending.assert_not_called()

    def test_missing_fields_reach_service_as_none(
        self, client: TestClient, service: MagicMock
    ) -> None:
        service.register.return_value = RegistrationRejected(message="Username is required")

        response = post_register(client, referer=None)

        assert response.status_code == 400
        service.register.assert_called_once_with(None, None, None)

    def test_account_creation_failure_returns_409(
        self, client: TestClient, service: MagicMock, dispatcher: MagicMock
    ) -> None:
        service.register.side_effect = AccountCreationFailed("alice")

        response = post_register(client, username="alice", password="password123")

        assert response.status_code == 409
        assert response.json() == {"detail": "Registration failed"}
        dispatcher.dispatch_pending.assert_not_called()


class TestDependencyWiring:
    """Tests for dependency factories reading app state."""

    def make_request(self) -> MagicMock:
        request = MagicMock()
        request.app.state.settings = make_settings(mail_domain="example.org", bcrypt_cost=12)
        request.app.state.pool = MagicMock()
        request.app.state.email_transport = MagicMock()
        return request

    def test_registration_service_built_from_settings(self) -> None:
        service = get_registration_service(self.make_request())

        assert service.mail_domain == "example.org"
        assert service.bcrypt_cost == 12
        assert service.app_url == "https://emailthing.xyz"

    def test_token_signer_uses_configured_secret(self) -> None:
        signer = get_token_signer(self.make_request())
        token = signer.issue("user-1")

        assert signer.verify(token) == "user-1"

    def test_outbox_dispatcher_uses_app_transport(self) -> None:
        request = self.make_request()
        dispatcher = get_outbox_dispatcher(request)

        assert dispatcher.transport is request.app.state.email_transport
        assert dispatcher.max_attempts == 5
