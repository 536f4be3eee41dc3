import logging

from rentroll.cli.app import main_menu
from rentroll.db import initialize_db
from rentroll.logging import configure_logging, reconfigure
from rentroll.settings import settings

logger = logging.getLogger("rentroll")


def main() -> None:
    configure_logging()
    initialize_db()
    reconfigure()
    logger.info(
        "Starting rentroll (database=%s, notifications=%s, storage=%s)",
        settings.db_backend,
        settings.notification_backend,
        settings.storage_backend,
    )
    main_menu()


if __name__ == "__main__":
    main()
