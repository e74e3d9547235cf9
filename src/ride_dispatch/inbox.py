"""Recipient-side view of notifications."""

import logging

from ride_dispatch.notification import Notification
from ride_dispatch.store import DispatchStore

logger = logging.getLogger(__name__)


class NotificationInbox:
    def __init__(self, store: DispatchStore):
        self._store = store

    def list_for_user(self, user_id: str, unread_only: bool = False) -> list[Notification]:
        return self._store.list_notifications(user_id, unread_only)

    def mark_read(self, notification_id: str) -> None:
        self._store.mark_notification_read(notification_id)

    def mark_all_read(self, user_id: str) -> int:
        count = self._store.mark_all_notifications_read(user_id)
        logger.info(f"Marked {count} notifications read for user {user_id}")
        return count
