"""Application service: apply one action to a stored order.

Loads the order, lets the Order aggregate check the guard and apply the
transition, persists the result as a single write and then notifies the
parties involved.  A refused action raises before anything is saved.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from marketorders.application.dto import OrderDTO
from marketorders.application.notifier import OrderNotifier
from marketorders.application.show_order import to_order_dto
from marketorders.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    ValidationError,
)
from marketorders.domain.model.actor import Actor
from marketorders.domain.model.order import Order
from marketorders.domain.model.permissions import Action
from marketorders.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class OrderActionHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        notifier: OrderNotifier | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._notifier = notifier
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def handle(
        self,
        order_id: int,
        action: Action,
        actor: Actor,
        boutique_id: str | None = None,
        produit_id: str | None = None,
        variation_id: str | None = None,
        reason: str | None = None,
    ) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        try:
            notify = self._apply(order, action, actor, boutique_id,
                                 produit_id, variation_id, reason)
        except DomainException as exc:
            logger.warning("Refused %s on order #%s by %s %s: %s",
                           action.value, order_id, actor.role.value,
                           actor.user_id, exc)
            raise

        self._order_repo.save(order)
        logger.info("Applied %s on order #%s by %s %s (status=%s)",
                    action.value, order_id, actor.role.value, actor.user_id,
                    order.status_livraison.value)

        if self._notifier is not None:
            notify(self._notifier)
        return to_order_dto(order, actor)

    def _apply(
        self,
        order: Order,
        action: Action,
        actor: Actor,
        boutique_id: str | None,
        produit_id: str | None,
        variation_id: str | None,
        reason: str | None,
    ) -> Callable[[OrderNotifier], None]:
        """Apply the transition and return how to announce it."""
        now = self._clock()

        if action is Action.ACCEPT:
            lot = order.accept(actor, boutique_id, now=now)
            return lambda n: n.lot_accepted(order, lot)

        if action is Action.START_DELIVERY:
            lot = order.start_delivery(actor, boutique_id, now=now)
            return lambda n: n.delivery_started(order, lot)

        if action is Action.MARK_DEPOT:
            lot = order.mark_depot(actor, boutique_id, now=now)
            return lambda n: n.depot_marked(order, lot)

        if action is Action.CONFIRM_DEPOT:
            order.confirm_depot(actor, boutique_id, now=now)  # type: ignore[arg-type]
            return lambda n: n.depot_confirmed(order)

        if action is Action.CANCEL_ORDER:
            lots = order.cancel(actor, reason, now=now)
            return lambda n: n.order_cancelled(order, actor, (reason or "").strip(), lots)

        if action is Action.CANCEL_ITEM:
            if not produit_id:
                raise ValidationError("A product id is required to cancel an item")
            item = order.cancel_item(actor, produit_id, reason,
                                     boutique_id=boutique_id,
                                     variation_id=variation_id, now=now)
            return lambda n: n.item_cancelled(order, item)

        order.confirm_final(actor, now=now)
        return lambda n: n.order_completed(order)
