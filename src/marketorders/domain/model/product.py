"""Product aggregate.

Products live independently of carts and orders. They have their own
lifecycle: prices change, products are withdrawn from sale.
"""

from __future__ import annotations

from dataclasses import dataclass

from marketorders.domain.exceptions import ValidationError
from marketorders.domain.model.value_objects import Money


@dataclass
class Product:
    """A product sold by one boutique.

    Kept as a mutable dataclass because price updates are a legitimate
    mutation on the aggregate.
    """

    id: str
    nom: str
    boutique_id: str
    prix: Money
    est_actif: bool = True

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        This does NOT affect carts or orders because they capture a
        price snapshot when the product is added.
        """
        if new_price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        self.prix = new_price
