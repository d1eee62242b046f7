"""Application service: catalogue use cases."""

from __future__ import annotations

from marketorders.domain.exceptions import EntityNotFoundError, ValidationError
from marketorders.domain.model.product import Product
from marketorders.domain.model.value_objects import DEFAULT_CURRENCY, Money
from marketorders.domain.repository.boutique_repository import BoutiqueRepository
from marketorders.domain.repository.product_repository import ProductRepository


class AddProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        boutique_repo: BoutiqueRepository,
        currency: str = DEFAULT_CURRENCY,
    ) -> None:
        self._product_repo = product_repo
        self._boutique_repo = boutique_repo
        self._currency = currency

    def handle(self, name: str, boutique_id: str, price: str) -> Product:
        """Add a new product to a boutique's catalogue."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if self._boutique_repo.get_by_id(boutique_id) is None:
            raise EntityNotFoundError(f"Boutique not found: '{boutique_id}'")

        prix = Money.of(price, self._currency)
        if prix.is_zero:
            raise ValidationError("Product price must be greater than zero")

        # Auto-assign ID based on existing products
        all_products = self._product_repo.list_all()
        if all_products:
            next_id = str(max(int(p.id) for p in all_products) + 1)
        else:
            next_id = "1"

        product = Product(id=next_id, nom=name.strip(), boutique_id=boutique_id, prix=prix)
        self._product_repo.save(product)
        return product


class UpdateProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str, new_price: str) -> Product:
        """Update a product's price.

        This does NOT affect carts or orders: they captured a price
        snapshot when the product was added.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        product.update_price(Money.of(new_price, product.prix.currency))
        self._product_repo.save(product)
        return product


class ListProductsHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, boutique_id: str | None = None) -> list[Product]:
        products = self._product_repo.list_all()
        if boutique_id is not None:
            products = [p for p in products if p.boutique_id == boutique_id]
        return products
