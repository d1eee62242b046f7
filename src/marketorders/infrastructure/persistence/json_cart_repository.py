"""JSON-file-backed implementation of CartRepository (one cart per client)."""

from __future__ import annotations

from datetime import datetime

from marketorders.domain.model.cart import Cart, CartItem
from marketorders.domain.model.value_objects import Quantity
from marketorders.domain.repository.cart_repository import CartRepository
from marketorders.infrastructure.persistence.json_file import JsonFileStore
from marketorders.infrastructure.persistence.serialization import (
    money_from_raw,
    money_to_raw,
)


class JsonCartRepository(JsonFileStore, CartRepository):

    _EMPTY = {}

    def get_for_client(self, client_id: str) -> Cart | None:
        raw = self._load_raw().get(client_id)
        return self._to_domain(raw) if raw is not None else None

    def save(self, cart: Cart) -> None:
        with self._lock():
            carts = self._load_raw()
            carts[cart.client_id] = self._to_raw(cart)
            self._persist_raw(carts)

    def delete(self, client_id: str) -> None:
        with self._lock():
            carts = self._load_raw()
            if carts.pop(client_id, None) is not None:
                self._persist_raw(carts)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        return {
            "client_id": cart.client_id,
            "updated_at": cart.updated_at.isoformat(),
            "items": [
                {
                    "produit_id": item.produit_id,
                    "boutique_id": item.boutique_id,
                    "nom_produit": item.nom_produit,
                    "quantite": item.quantite.value,
                    "prix_unitaire": money_to_raw(item.prix_unitaire),
                    "variation_id": item.variation_id,
                }
                for item in cart.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Cart:
        return Cart(
            client_id=raw["client_id"],
            updated_at=datetime.fromisoformat(raw["updated_at"]),
            items=[
                CartItem(
                    produit_id=i["produit_id"],
                    boutique_id=i["boutique_id"],
                    nom_produit=i["nom_produit"],
                    quantite=Quantity(i["quantite"]),
                    prix_unitaire=money_from_raw(i["prix_unitaire"]),
                    variation_id=i.get("variation_id"),
                )
                for i in raw["items"]
            ],
        )
