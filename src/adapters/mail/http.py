"""
HTTP email transport adapter - Implements EmailTransport protocol.

Posts raw MIME messages to the mail relay worker, authenticated with the
shared `x-auth` token. The relay signs with DKIM when a key is supplied.
"""

import logging
from typing import Any

import httpx

from src.domain.results import OutboundEmail

logger = logging.getLogger(__name__)


class HttpEmailTransport:
    """
    Implements EmailTransport protocol via the mail relay HTTP API.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        api_url: str,
        auth_token: str,
        dkim_private_key: str | None = None,
        dkim_domain: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """
        Args:
            api_url: Relay endpoint receiving the message
            auth_token: Value of the `x-auth` header
            dkim_private_key: Optional DKIM signing key forwarded to the relay
            dkim_domain: Domain the DKIM signature is made for
            client: Optional preconfigured httpx client (tests, pooling)
        """
        self._api_url = api_url
        self._auth_token = auth_token
        self._dkim_private_key = dkim_private_key
        self._dkim_domain = dkim_domain
        self._client = client or httpx.Client(timeout=30.0)

    def send(self, email: OutboundEmail) -> bool:
        payload: dict[str, Any] = {
            "from": email.sender,
            "to": list(email.recipients),
            "data": email.raw.decode("utf-8"),
        }
        if self._dkim_private_key:
            payload["dkim"] = {
                "domain": self._dkim_domain,
                "selector": "emailthing",
                "privateKey": self._dkim_private_key,
            }

        try:
            response = self._client.post(
                self._api_url,
                json=payload,
                headers={"x-auth": self._auth_token},
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Mail relay unreachable: {e}")
            return False

        if not response.is_success:
            logger.warning(
                f"Mail relay rejected message to {', '.join(email.recipients)}: "
                f"HTTP {response.status_code}"
            )
            return False
        return True

    def close(self) -> None:
        self._client.close()
