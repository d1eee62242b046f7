"""Who is acting on an order.

The actor is passed explicitly to every transition and query instead of
being looked up from an ambient session.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from marketorders.domain.exceptions import ValidationError


class Role(Enum):
    ADMIN = "admin"
    CLIENT = "client"
    BOUTIQUE = "boutique"


@dataclass(frozen=True)
class Actor:
    role: Role
    user_id: str
    boutique_id: str | None = None

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValidationError("Actor user id is required")
        if self.role is Role.BOUTIQUE and not self.boutique_id:
            raise ValidationError("A boutique actor must carry its boutique id")

    @staticmethod
    def admin(user_id: str = "admin") -> Actor:
        return Actor(Role.ADMIN, user_id)

    @staticmethod
    def client(user_id: str) -> Actor:
        return Actor(Role.CLIENT, user_id)

    @staticmethod
    def boutique(user_id: str, boutique_id: str) -> Actor:
        return Actor(Role.BOUTIQUE, user_id, boutique_id)

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def is_client(self) -> bool:
        return self.role is Role.CLIENT

    @property
    def is_boutique(self) -> bool:
        return self.role is Role.BOUTIQUE
