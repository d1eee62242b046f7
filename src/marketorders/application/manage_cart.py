"""Application service: cart use cases.

A line keeps the product price at the moment it was added; later price
changes in the catalogue do not reach carts or orders.
"""

from __future__ import annotations

from marketorders.application.dto import CartDTO, CartLineDTO
from marketorders.domain.exceptions import EntityNotFoundError, ValidationError
from marketorders.domain.model.cart import Cart, CartItem
from marketorders.domain.model.value_objects import Quantity
from marketorders.domain.repository.cart_repository import CartRepository
from marketorders.domain.repository.product_repository import ProductRepository


def to_cart_dto(cart: Cart) -> CartDTO:
    return CartDTO(
        client_id=cart.client_id,
        items=[
            CartLineDTO(
                produit_id=item.produit_id,
                boutique_id=item.boutique_id,
                nom_produit=item.nom_produit,
                quantite=item.quantite.value,
                prix_unitaire=str(item.prix_unitaire),
                line_total=str(item.line_total),
                variation_id=item.variation_id,
            )
            for item in cart.items
        ],
        boutique_count=len(cart.boutique_ids),
        total=str(cart.total),
    )


class AddToCartHandler:

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo

    def handle(self, client_id: str, product_id: str, quantity: int,
               variation_id: str | None = None) -> CartDTO:
        if not client_id:
            raise ValidationError("Client id is required")
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product not found: '{product_id}'")
        if not product.est_actif:
            raise ValidationError(f"Product '{product.nom}' is no longer for sale")

        cart = self._cart_repo.get_for_client(client_id) or Cart(client_id=client_id)
        if not cart.is_empty and cart.currency != product.prix.currency:
            raise ValidationError(
                f"Cannot mix {cart.currency} and {product.prix.currency} in one cart"
            )
        cart.add(
            CartItem(
                produit_id=product.id,
                boutique_id=product.boutique_id,
                nom_produit=product.nom,
                quantite=Quantity(quantity),
                prix_unitaire=product.prix,  # <-- price snapshot
                variation_id=variation_id,
            )
        )
        self._cart_repo.save(cart)
        return to_cart_dto(cart)


class UpdateCartHandler:
    """Change or remove lines of an existing cart."""

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def set_quantity(self, client_id: str, product_id: str, quantity: int,
                     variation_id: str | None = None) -> CartDTO:
        cart = self._load(client_id)
        cart.set_quantity(product_id, quantity, variation_id)
        self._cart_repo.save(cart)
        return to_cart_dto(cart)

    def remove(self, client_id: str, product_id: str,
               variation_id: str | None = None) -> CartDTO:
        cart = self._load(client_id)
        cart.remove(product_id, variation_id)
        self._cart_repo.save(cart)
        return to_cart_dto(cart)

    def clear(self, client_id: str) -> None:
        self._cart_repo.delete(client_id)

    def _load(self, client_id: str) -> Cart:
        cart = self._cart_repo.get_for_client(client_id)
        if cart is None:
            raise EntityNotFoundError(f"No cart for client '{client_id}'")
        return cart


class ShowCartHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, client_id: str) -> CartDTO:
        cart = self._cart_repo.get_for_client(client_id) or Cart(client_id=client_id)
        return to_cart_dto(cart)
