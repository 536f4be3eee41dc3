import logging

from rentroll.models.notification import Notification
from rentroll.notifications.base import NotificationSender

logger = logging.getLogger(__name__)


class LogNotificationSender(NotificationSender):
    def send(self, notification: Notification) -> None:
        logger.info(
            "Notify %s (room %s): %s - %s",
            notification.recipient,
            notification.room_number,
            notification.title,
            notification.message,
        )
