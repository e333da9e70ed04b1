import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import logging

from hotel_booking.db.engine import engine
from hotel_booking.logging_config import setup_logging
from hotel_booking.services.events import LoggingEventSink
from hotel_booking.services.lifecycle import BookingLifecycle

setup_logging()
logger = logging.getLogger(__name__)


def main() -> None:
    """
    Delete every active hold whose end timestamp has passed.

    Housekeeping only: expired holds are already treated as invalid wherever
    they are read, so running this on a schedule just keeps the table small.
    """
    lifecycle = BookingLifecycle.from_engine(engine, events=LoggingEventSink())

    logger.info("Purging expired holds")

    try:
        purged = lifecycle.purge_expired_holds()
        logger.info("Purged %s expired holds", purged)
    except Exception:
        logger.exception("Expired hold purge failed")
        raise


if __name__ == "__main__":
    main()
