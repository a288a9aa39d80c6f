"""Notification service and live notification cache."""

import logging
from typing import Callable, Optional

from fintrack.database.base import Database
from fintrack.domain import errors
from fintrack.domain.entities import ChangeEvent, Notification, NotificationType
from fintrack.domain.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

NOTIFICATIONS_TABLE = "notifications"


class NotificationService:
    """Service for managing notifications."""

    def __init__(self, db: Database):
        self.db = db

    def create_notification(
        self,
        title: str,
        type: NotificationType = NotificationType.INFO,
        body: Optional[str] = None,
    ) -> int:
        """Create an unread notification.

        Raises:
            ValidationError: If title is empty
        """
        title = (title or "").strip()
        if not title:
            raise ValidationError("Notification title is required")
        notification_id = self.db.create_notification(
            title=title, type=NotificationType(type), body=body
        )
        logger.debug("Created notification %s: %s", notification_id, title)
        return notification_id

    def notify(
        self,
        title: str,
        type: NotificationType = NotificationType.INFO,
        body: Optional[str] = None,
    ) -> Optional[int]:
        """Create a notification, logging instead of raising on failure.

        Used after an operation has already succeeded, where a missing
        notification must not turn the result into an error.
        """
        try:
            return self.create_notification(title, type=type, body=body)
        except ValueError:
            logger.exception("Could not create notification '%s'", title)
            return None

    def list_notifications(self, unread_only: bool = False) -> list[Notification]:
        return self.db.list_notifications(unread_only=unread_only)

    def _require(self, notification_id: int) -> Notification:
        notification = self.db.get_notification(notification_id)
        if notification is None:
            raise NotFoundError(errors.notification_not_found(notification_id))
        return notification

    def mark_read(self, notification_id: int) -> None:
        self._require(notification_id)
        self.db.mark_notification_read(notification_id)

    def mark_all_read(self) -> int:
        return self.db.mark_all_notifications_read()

    def delete_notification(self, notification_id: int) -> None:
        self._require(notification_id)
        self.db.delete_notification(notification_id)

    def clear_all(self) -> int:
        count = self.db.delete_all_notifications()
        logger.info("Cleared %d notification(s)", count)
        return count


class NotificationStore:
    """Cached notifications kept current by a change subscription.

    ``fetch()`` reloads the cache. After ``start()`` every committed change
    to the notifications table triggers a reload, and registered listeners
    are called with the store once the reload is done.
    """

    def __init__(self, db: Database):
        self.db = db
        self.service = NotificationService(db)
        self.notifications: list[Notification] = []
        self.error: Optional[str] = None
        self._listeners: list[Callable[["NotificationStore"], None]] = []
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self.notifications if not n.is_read)

    @property
    def is_subscribed(self) -> bool:
        return self._unsubscribe is not None

    def on_change(self, listener: Callable[["NotificationStore"], None]) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def fetch(self) -> list[Notification]:
        try:
            self.notifications = self.service.list_notifications()
            self.error = None
        except ValueError as e:
            self.error = str(e)
            raise
        for listener in list(self._listeners):
            listener(self)
        return self.notifications

    def start(self) -> None:
        """Load notifications and subscribe to changes."""
        if self._unsubscribe is None:
            self._unsubscribe = self.db.subscribe(NOTIFICATIONS_TABLE, self._handle_change)
        self.fetch()

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _handle_change(self, event: ChangeEvent) -> None:
        logger.debug(
            "Notification change (%s %s); refreshing", event.operation, event.record_id
        )
        self.fetch()

    # Mutations
    def mark_read(self, notification_id: int) -> None:
        self._run(self.service.mark_read, notification_id)

    def mark_all_read(self) -> int:
        return self._run(self.service.mark_all_read)

    def delete(self, notification_id: int) -> None:
        self._run(self.service.delete_notification, notification_id)

    def clear_all(self) -> int:
        return self._run(self.service.clear_all)

    def _run(self, operation, *args):
        try:
            result = operation(*args)
        except ValueError as e:
            self.error = str(e)
            raise
        # Subscribed stores are refreshed by the change event
        if not self.is_subscribed:
            self.fetch()
        return result
