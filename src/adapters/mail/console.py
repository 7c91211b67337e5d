"""
Console email transport adapter - Implements EmailTransport protocol.

This module provides a console-based implementation of the domain's
email transport port, logging outbound messages for local development.
"""

import logging
from email import message_from_bytes

from src.domain.results import OutboundEmail

logger = logging.getLogger(__name__)


class ConsoleEmailTransport:
    """
    Implements EmailTransport protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - nothing leaves the process.
    """

    def send(self, email: OutboundEmail) -> bool:
        """
        Log the message summary (simulates relay acceptance).

        Args:
            email: Fully-formed outbound message

        Returns:
            Always True
        """
        subject = message_from_bytes(email.raw).get("Subject", "")
        logger.info(
            "[MAIL] From: %s To: %s Subject: %s (%d bytes)",
            email.sender,
            ", ".join(email.recipients),
            subject,
            len(email.raw),
        )
        return True
