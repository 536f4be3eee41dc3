import logging

from rentroll.notifications.base import NotificationSender
from rentroll.settings import settings

logger = logging.getLogger(__name__)


def get_notification_sender() -> NotificationSender:
    backend = settings.notification_backend

    if backend == "log":
        from rentroll.notifications.log import LogNotificationSender

        logger.info("Using notification backend: log")
        return LogNotificationSender()

    if backend == "database":
        from rentroll.notifications.database import DatabaseNotificationSender
        from rentroll.repositories.factory import get_notification_repository

        logger.info("Using notification backend: database")
        return DatabaseNotificationSender(get_notification_repository())

    raise ValueError(f"Unsupported notification backend: {backend}")
