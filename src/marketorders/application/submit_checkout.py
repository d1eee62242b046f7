"""Application service: Checkout use case.

Turns a buyer's cart into an Order.  Every gate runs before anything is
written: an empty cart, a missing address, a boutique that cannot take
the order or a date that is not available all leave the cart untouched.
On success the cart is deleted, the order saved and the parties notified;
if the order cannot be saved the cart is put back.
"""

from __future__ import annotations

import logging
import time
from datetime import date
from typing import Callable

from marketorders.application.dto import OrderDTO
from marketorders.application.notifier import OrderNotifier
from marketorders.application.show_order import to_order_dto
from marketorders.domain.exceptions import (
    DependencyError,
    EligibilityError,
    EntityNotFoundError,
    ValidationError,
)
from marketorders.domain.model.actor import Actor
from marketorders.domain.model.boutique import Boutique
from marketorders.domain.model.cart import Cart, CartItem
from marketorders.domain.model.order import BoutiqueLot, ItemLine, Order
from marketorders.domain.model.status import DeliveryMethod, PaymentMethod
from marketorders.domain.repository.boutique_repository import BoutiqueRepository
from marketorders.domain.repository.cart_repository import CartRepository
from marketorders.domain.repository.marketplace_repository import MarketplaceRepository
from marketorders.domain.repository.order_repository import OrderRepository
from marketorders.domain.service.eligibility import (
    DEFAULT_HORIZON_DAYS,
    EligibilityEvaluator,
)
from marketorders.domain.service.fee_calculator import FeeCalculator

logger = logging.getLogger(__name__)


class SubmitCheckoutHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        boutique_repo: BoutiqueRepository,
        marketplace_repo: MarketplaceRepository,
        fee_calculator: FeeCalculator,
        notifier: OrderNotifier | None = None,
        today: Callable[[], date] = date.today,
        horizon_days: int = DEFAULT_HORIZON_DAYS,
    ) -> None:
        self._order_repo = order_repo
        self._cart_repo = cart_repo
        self._boutique_repo = boutique_repo
        self._marketplace_repo = marketplace_repo
        self._fee_calculator = fee_calculator
        self._notifier = notifier
        self._today = today
        self._horizon_days = horizon_days

    def handle(
        self,
        client_id: str,
        method: DeliveryMethod,
        day: date,
        adresse: str | None = None,
        paiement_methode: PaymentMethod = PaymentMethod.ESPECES,
        note: str | None = None,
    ) -> OrderDTO:
        """Place an order from the client's cart.

        Steps:
        1. Load the cart (fail if empty).
        2. Check the address and the boutiques of the cart.
        3. Check the requested date is available for the method.
        4. Build one lot per boutique with the cart prices (snapshot).
        5. Compute the delivery fee, persist, clear the cart, notify.
        """
        cart = self._cart_repo.get_for_client(client_id)
        if cart is None or cart.is_empty:
            raise ValidationError("The cart is empty")

        if method.requires_address and (not adresse or not adresse.strip()):
            raise ValidationError("A delivery address is required")

        boutique_ids = cart.boutique_ids
        if method is DeliveryMethod.LIVRAISON_BOUTIQUE and len(boutique_ids) > 1:
            raise ValidationError(
                "Boutique delivery requires every product to come from the same boutique"
            )

        boutiques = self._load_boutiques(boutique_ids)
        self._check_eligibility(day, method, boutiques)

        lots = self._build_lots(cart, boutiques)
        fee = self._fee_calculator.applied_fee(
            method,
            cart.total,
            self._marketplace_repo.get_fee_schedule(),
            boutiques[0].delivery_fee_schedule,
        )

        order = Order.create(
            numero_commande=self._order_number(),
            client_id=client_id,
            typedelivery=method,
            date_livraison=day,
            boutiques=lots,
            paiement_methode=paiement_methode,
            frais_livraison=fee,
            adresse_livraison=adresse,
            notes=note,
        )
        self._convert_cart(cart, order)

        logger.info("Order %s (#%s) placed by %s: %d lot(s), total %s",
                    order.numero_commande, order.id, client_id,
                    len(order.boutiques), order.total)
        if self._notifier is not None:
            self._notifier.order_created(order)
        return to_order_dto(order, Actor.client(client_id))

    # --- Gates ----------------------------------------------------------------

    def _load_boutiques(self, boutique_ids: list[str]) -> list[Boutique]:
        boutiques: list[Boutique] = []
        for boutique_id in boutique_ids:
            boutique = self._boutique_repo.get_by_id(boutique_id)
            if boutique is None:
                raise EntityNotFoundError(f"Boutique not found: '{boutique_id}'")
            if not boutique.is_active:
                raise ValidationError(
                    f"Boutique '{boutique.nom}' is not accepting orders"
                )
            boutiques.append(boutique)
        return boutiques

    def _check_eligibility(self, day: date, method: DeliveryMethod,
                           boutiques: list[Boutique]) -> None:
        evaluator = EligibilityEvaluator(self._today(), self._horizon_days)
        closures = self._marketplace_repo.get_closures()
        reason = evaluator.refusal(day, method, boutiques, closures)
        if reason is None:
            return
        suggestion = evaluator.next_available(day, method, boutiques, closures)
        logger.warning("Checkout refused for %s on %s: %s",
                       method.value, day.isoformat(), reason)
        raise EligibilityError(reason, suggested_date=suggestion)

    # --- Building -------------------------------------------------------------

    @staticmethod
    def _build_lots(cart: Cart, boutiques: list[Boutique]) -> list[BoutiqueLot]:
        names = {b.id: b.nom for b in boutiques}
        return [
            BoutiqueLot(
                boutique_id=boutique_id,
                nom=names[boutique_id],
                items=[_to_item_line(item) for item in items],
            )
            for boutique_id, items in cart.by_boutique().items()
        ]

    def _convert_cart(self, cart: Cart, order: Order) -> None:
        # The cart goes first so a failure never leaves both an order and its cart.
        self._cart_repo.delete(cart.client_id)
        try:
            self._order_repo.save(order)
        except DependencyError:
            logger.error("Saving the order of %s failed, restoring the cart", cart.client_id)
            self._cart_repo.save(cart)
            raise

    def _order_number(self) -> str:
        epoch_ms = int(time.time() * 1000)
        return f"CMD{epoch_ms}{self._order_repo.count() + 1:06d}"


def _to_item_line(item: CartItem) -> ItemLine:
    return ItemLine(
        produit_id=item.produit_id,
        nom_produit=item.nom_produit,
        prix_unitaire=item.prix_unitaire,  # <-- price snapshot
        quantite=item.quantite,
        variation_id=item.variation_id,
    )
