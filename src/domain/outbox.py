"""
Outbox dispatcher - Delivers queued notification emails.

Welcome emails are written to the outbox inside the registration
transaction. This dispatcher drains the outbox independently, so a mail
relay outage never undoes or fails a committed registration.
"""

import logging
from dataclasses import dataclass

from .ports import EmailTransport, OutboxRepository

logger = logging.getLogger(__name__)


@dataclass
class OutboxDispatcher:
    """Claims due outbox messages and hands them to the mail transport."""

    repository: OutboxRepository
    transport: EmailTransport
    max_attempts: int = 5
    batch_size: int = 20
    retry_delay_seconds: int = 60

    def dispatch_pending(self) -> int:
        """
        Attempt delivery of every due message in one batch.

        Returns:
            Number of messages the transport accepted
        """
        messages = self.repository.claim_pending(
            self.batch_size, self.max_attempts, self.retry_delay_seconds
        )
        delivered = 0
        for message in messages:
            if self.transport.send(message.email):
                self.repository.mark_sent(message.id)
                delivered += 1
                continue

            self.repository.record_failure(message.id, "transport rejected message")
            if message.attempts >= self.max_attempts:
                logger.error(
                    "Giving up on outbox message %s after %s attempts",
                    message.id,
                    message.attempts,
                )
            else:
                logger.warning(
                    "Outbox message %s failed (attempt %s/%s)",
                    message.id,
                    message.attempts,
                    self.max_attempts,
                )
        return delivered
