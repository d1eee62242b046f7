"""Cart aggregate — what a buyer intends to order.

A cart is mutable until checkout, where it is turned into an Order and
deleted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from marketorders.domain.exceptions import EntityNotFoundError
from marketorders.domain.model.value_objects import DEFAULT_CURRENCY, Money, Quantity


@dataclass
class CartItem:
    produit_id: str
    boutique_id: str
    nom_produit: str
    quantite: Quantity
    prix_unitaire: Money  # snapshot taken when added
    variation_id: str | None = None

    @property
    def line_total(self) -> Money:
        return self.prix_unitaire * self.quantite.value

    def matches(self, produit_id: str, variation_id: str | None = None) -> bool:
        return self.produit_id == produit_id and self.variation_id == variation_id


@dataclass
class Cart:
    """Aggregate root for a buyer's cart.

    Invariant: every retained line has a positive quantity.
    """

    client_id: str
    items: list[CartItem] = field(default_factory=list)
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def add(self, item: CartItem) -> None:
        """Add a line, merging with an existing line for the same product."""
        existing = self._find(item.produit_id, item.variation_id)
        if existing is not None:
            existing.quantite = Quantity(existing.quantite.value + item.quantite.value)
        else:
            self.items.append(item)
        self._touch()

    def set_quantity(self, produit_id: str, quantite: int,
                     variation_id: str | None = None) -> None:
        """Change a line's quantity; zero or less removes the line."""
        item = self._get(produit_id, variation_id)
        if quantite <= 0:
            self.items.remove(item)
        else:
            item.quantite = Quantity(quantite)
        self._touch()

    def remove(self, produit_id: str, variation_id: str | None = None) -> None:
        self.items.remove(self._get(produit_id, variation_id))
        self._touch()

    def clear(self) -> None:
        self.items.clear()
        self._touch()

    # --- Computed properties --------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def currency(self) -> str:
        return self.items[0].prix_unitaire.currency if self.items else DEFAULT_CURRENCY

    @property
    def total(self) -> Money:
        result = Money.zero(self.currency)
        for item in self.items:
            result = result + item.line_total
        return result

    @property
    def boutique_ids(self) -> list[str]:
        """Distinct boutique ids in first-seen order."""
        return list(self.by_boutique())

    def by_boutique(self) -> dict[str, list[CartItem]]:
        groups: dict[str, list[CartItem]] = {}
        for item in self.items:
            groups.setdefault(item.boutique_id, []).append(item)
        return groups

    # --- Internal helpers -----------------------------------------------------

    def _find(self, produit_id: str, variation_id: str | None) -> CartItem | None:
        for item in self.items:
            if item.matches(produit_id, variation_id):
                return item
        return None

    def _get(self, produit_id: str, variation_id: str | None) -> CartItem:
        item = self._find(produit_id, variation_id)
        if item is None:
            raise EntityNotFoundError(f"Product '{produit_id}' is not in the cart")
        return item

    def _touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)
