"""Application service: notification inbox of a client, a boutique or the admins."""

from __future__ import annotations

from marketorders.domain.exceptions import EntityNotFoundError, GuardViolationError
from marketorders.domain.model.actor import Actor
from marketorders.domain.model.notification import (
    ADMIN_RECIPIENT,
    Notification,
    boutique_recipient,
)
from marketorders.domain.repository.notification_repository import (
    NotificationRepository,
)


def recipient_for(actor: Actor) -> str:
    if actor.is_admin:
        return ADMIN_RECIPIENT
    if actor.is_boutique:
        return boutique_recipient(actor.boutique_id)  # type: ignore[arg-type]
    return actor.user_id


class NotificationInboxHandler:

    def __init__(self, notification_repo: NotificationRepository) -> None:
        self._notification_repo = notification_repo

    def list(self, actor: Actor, unread_only: bool = False) -> list[Notification]:
        notifications = self._notification_repo.list_for(recipient_for(actor))
        if unread_only:
            notifications = [n for n in notifications if not n.lu]
        return notifications

    def mark_read(self, actor: Actor, notification_id: int) -> Notification:
        notification = self._notification_repo.get_by_id(notification_id)
        if notification is None:
            raise EntityNotFoundError(f"Notification #{notification_id} not found")
        if notification.recipient != recipient_for(actor):
            raise GuardViolationError("Access denied")
        notification.mark_read()
        self._notification_repo.save(notification)
        return notification
