"""JSON-file-backed implementation of NotificationRepository."""

from __future__ import annotations

from datetime import datetime

from marketorders.domain.model.notification import Notification
from marketorders.domain.repository.notification_repository import (
    NotificationRepository,
)
from marketorders.infrastructure.persistence.json_file import JsonFileStore


class JsonNotificationRepository(JsonFileStore, NotificationRepository):

    def get_by_id(self, notification_id: int) -> Notification | None:
        for raw in self._load_raw():
            if raw["id"] == notification_id:
                return self._to_domain(raw)
        return None

    def list_for(self, recipient: str) -> list[Notification]:
        found = [self._to_domain(raw) for raw in self._load_raw()
                 if raw["recipient"] == recipient]
        return sorted(found, key=lambda n: (n.created_at, n.id), reverse=True)

    def save(self, notification: Notification) -> None:
        with self._lock():
            notifications = self._load_raw()

            if notification.id is None:
                notification.id = max((n["id"] for n in notifications), default=0) + 1

            for i, raw in enumerate(notifications):
                if raw["id"] == notification.id:
                    notifications[i] = self._to_raw(notification)
                    break
            else:
                notifications.append(self._to_raw(notification))

            self._persist_raw(notifications)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(notification: Notification) -> dict:
        return {
            "id": notification.id,
            "recipient": notification.recipient,
            "type": notification.type,
            "titre": notification.titre,
            "message": notification.message,
            "commande_id": notification.commande_id,
            "lu": notification.lu,
            "created_at": notification.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Notification:
        return Notification(
            id=raw["id"],
            recipient=raw["recipient"],
            type=raw["type"],
            titre=raw["titre"],
            message=raw["message"],
            commande_id=raw.get("commande_id"),
            lu=raw.get("lu", False),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
