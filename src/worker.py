"""
Outbox worker - Polls the email outbox and delivers queued messages.

Run with: python -m src.worker
"""

import logging
import time

from psycopg_pool import ConnectionPool

from src.adapters.mail import create_email_transport
from src.adapters.repository.postgres import PostgresOutboxRepository
from src.config.settings import get_settings
from src.domain.outbox import OutboxDispatcher

logger = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    settings = get_settings()

    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=2,
    )
    dispatcher = OutboxDispatcher(
        repository=PostgresOutboxRepository(pool),
        transport=create_email_transport(settings),
        max_attempts=settings.outbox_max_attempts,
        batch_size=settings.outbox_batch_size,
        retry_delay_seconds=settings.outbox_retry_delay_seconds,
    )

    logger.info(f"Outbox worker started (poll every {settings.outbox_poll_interval_seconds}s)")
    try:
        while True:
            delivered = dispatcher.dispatch_pending()
            if delivered:
                logger.info(f"Delivered {delivered} outbox message(s)")
            time.sleep(settings.outbox_poll_interval_seconds)
    except KeyboardInterrupt:
        logger.info("Outbox worker stopping")
    finally:
        pool.close()


if __name__ == "__main__":
    main()
