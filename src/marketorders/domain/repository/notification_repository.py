"""Abstract repository for notifications."""

from __future__ import annotations

from abc import ABC, abstractmethod

from marketorders.domain.model.notification import Notification


class NotificationRepository(ABC):

    @abstractmethod
    def get_by_id(self, notification_id: int) -> Notification | None:
        """Return a notification by its ID, or None if not found."""

    @abstractmethod
    def list_for(self, recipient: str) -> list[Notification]:
        """Return the recipient's notifications, newest first."""

    @abstractmethod
    def save(self, notification: Notification) -> None:
        """Persist a new or updated notification (assigns its ID)."""
