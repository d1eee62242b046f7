"""Abstract repository for Order aggregate.

Implementations must apply each ``save`` as one atomic update and refuse
to overwrite an order that changed since it was loaded (``version``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from marketorders.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def count(self) -> int:
        """Return how many orders exist."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order, newest first."""

    @abstractmethod
    def list_for_client(self, client_id: str) -> list[Order]:
        """Return the orders placed by a client, newest first."""

    @abstractmethod
    def list_for_boutique(self, boutique_id: str) -> list[Order]:
        """Return the orders containing a lot of the boutique, newest first."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order, giving a new one the next free id."""
