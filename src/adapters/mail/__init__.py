"""Mail transport adapters - Implementations of the EmailTransport port."""

from src.config.settings import Settings

from .console import ConsoleEmailTransport
from .http import HttpEmailTransport


def create_email_transport(settings: Settings) -> ConsoleEmailTransport | HttpEmailTransport:
    """Build the transport selected by `settings.email_transport`."""
    if settings.email_transport == "console":
        return ConsoleEmailTransport()
    return HttpEmailTransport(
        api_url=settings.email_api_url,
        auth_token=settings.email_auth_token,
        dkim_private_key=settings.email_dkim_private_key,
        dkim_domain=settings.mail_domain,
    )


__all__ = ["ConsoleEmailTransport", "HttpEmailTransport", "create_email_transport"]
