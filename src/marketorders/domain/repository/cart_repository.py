"""Abstract repository for Cart aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from marketorders.domain.model.cart import Cart


class CartRepository(ABC):

    @abstractmethod
    def get_for_client(self, client_id: str) -> Cart | None:
        """Return the client's cart, or None if they have none."""

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Persist a new or updated cart."""

    @abstractmethod
    def delete(self, client_id: str) -> None:
        """Remove the client's cart (after checkout or an explicit clear)."""
