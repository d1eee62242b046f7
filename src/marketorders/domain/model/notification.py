"""Notification record sent to a client, a boutique or the admins."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

ADMIN_RECIPIENT = "admin"


def boutique_recipient(boutique_id: str) -> str:
    return f"boutique:{boutique_id}"


@dataclass
class Notification:
    id: int | None
    recipient: str
    type: str
    titre: str
    message: str
    commande_id: int | None = None
    lu: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def mark_read(self) -> None:
        self.lu = True
