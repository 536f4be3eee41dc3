import logging

from rentroll.models.notification import Notification
from rentroll.notifications.base import NotificationSender
from rentroll.repositories.base import NotificationRepository

logger = logging.getLogger(__name__)


class DatabaseNotificationSender(NotificationSender):
    """Stores notifications in the tenant inbox table."""

    def __init__(self, repo: NotificationRepository) -> None:
        self.repo = repo

    def send(self, notification: Notification) -> None:
        stored = self.repo.create(notification)
        logger.debug("Notification %s stored for %s", stored.uuid, stored.recipient)
