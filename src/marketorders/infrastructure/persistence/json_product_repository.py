"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from marketorders.domain.model.product import Product
from marketorders.domain.repository.product_repository import ProductRepository
from marketorders.infrastructure.persistence.json_file import JsonFileStore
from marketorders.infrastructure.persistence.serialization import (
    money_from_raw,
    money_to_raw,
)


class JsonProductRepository(JsonFileStore, ProductRepository):

    def get_by_id(self, product_id: str) -> Product | None:
        for raw in self._load_raw():
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._load_raw()]

    def save(self, product: Product) -> None:
        with self._lock():
            products = self._load_raw()

            # Upsert: replace if exists, otherwise append
            for i, raw in enumerate(products):
                if raw["id"] == product.id:
                    products[i] = self._to_raw(product)
                    break
            else:
                products.append(self._to_raw(product))

            self._persist_raw(products)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "nom": product.nom,
            "boutique_id": product.boutique_id,
            "prix": money_to_raw(product.prix),
            "est_actif": product.est_actif,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            nom=raw["nom"],
            boutique_id=raw["boutique_id"],
            prix=money_from_raw(raw["prix"]),
            est_actif=raw.get("est_actif", True),
        )
