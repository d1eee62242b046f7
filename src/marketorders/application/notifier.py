"""Application service: notifications about order events.

Notifications are a side channel: failing to store one is logged and
never undoes or fails the order operation that triggered it.
"""

from __future__ import annotations

import logging

from marketorders.domain.exceptions import DependencyError
from marketorders.domain.model.actor import Actor
from marketorders.domain.model.notification import (
    ADMIN_RECIPIENT,
    Notification,
    boutique_recipient,
)
from marketorders.domain.model.order import BoutiqueLot, ItemLine, Order
from marketorders.domain.model.status import DeliveryMethod, OrderStatus
from marketorders.domain.repository.notification_repository import (
    NotificationRepository,
)

logger = logging.getLogger(__name__)


class OrderNotifier:

    def __init__(self, notification_repo: NotificationRepository) -> None:
        self._notification_repo = notification_repo

    def order_created(self, order: Order) -> None:
        ref = order.numero_commande
        self._send(order, order.client_id, "commande_creee",
                   f"Order #{ref} received",
                   f"Your order {ref} is registered and awaits acceptance by the boutiques.")
        for lot in order.boutiques:
            self._send(order, boutique_recipient(lot.boutique_id), "boutique_order_notification",
                       f"New order #{ref}",
                       f"A new order {ref} needs your attention.")
        self._send(order, ADMIN_RECIPIENT, "admin_order_notification",
                   f"Order #{ref} placed",
                   f"A new order {ref} was placed by a client.")

    def lot_accepted(self, order: Order, lot: BoutiqueLot) -> None:
        ref = order.numero_commande
        self._send(order, order.client_id, "order_accepted",
                   f"Order #{ref} accepted",
                   f"Boutique {lot.nom} accepted its lot of order {ref}.")

    def delivery_started(self, order: Order, lot: BoutiqueLot) -> None:
        ref = order.numero_commande
        self._send(order, order.client_id, "order_in_delivery",
                   f"Order #{ref} out for delivery",
                   f"Your lot is on its way, delivered by boutique {lot.nom}.")

    def depot_marked(self, order: Order, lot: BoutiqueLot) -> None:
        ref = order.numero_commande
        self._send(order, ADMIN_RECIPIENT, "admin_order_notification",
                   f"Deposit made - #{ref}",
                   f"Boutique {lot.nom} dropped its items for order {ref} at the warehouse.")

    def depot_confirmed(self, order: Order) -> None:
        """Tell the client once every active lot reached the warehouse."""
        if not order.all_deposits_validated:
            return
        ref = order.numero_commande
        if order.typedelivery is DeliveryMethod.COLLECT:
            self._send(order, order.client_id, "order_ready_collect",
                       f"Order #{ref} ready",
                       f"Your order {ref} is ready to be collected at the warehouse.")
        else:
            self._send(order, order.client_id, "order_in_delivery",
                       f"Order #{ref} out for delivery",
                       f"Your order {ref} is on its way to your address.")

    def order_cancelled(self, order: Order, actor: Actor, reason: str,
                        lots: list[BoutiqueLot]) -> None:
        ref = order.numero_commande
        scope = "partially" if actor.is_boutique else "fully"
        recipients: list[str] = []
        if not actor.is_client:
            recipients.append(order.client_id)
        if not actor.is_boutique:
            recipients.extend(boutique_recipient(lot.boutique_id) for lot in lots)
        for recipient in recipients:
            self._send(order, recipient, "order_cancelled",
                       f"Order #{ref} cancelled",
                       f"Order {ref} was {scope} cancelled. Reason: {reason}")

    def item_cancelled(self, order: Order, item: ItemLine) -> None:
        ref = order.numero_commande
        self._send(order, order.client_id, "order_item_cancelled",
                   f"Item removed - #{ref}",
                   f"Item \"{item.nom_produit}\" was removed from your order {ref}.")

    def order_completed(self, order: Order) -> None:
        if order.status_livraison is not OrderStatus.LIVREE:
            return
        ref = order.numero_commande
        self._send(order, ADMIN_RECIPIENT, "admin_order_notification",
                   "Order completed",
                   f"Order {ref} was confirmed as received.")

    # --- Internal helpers -----------------------------------------------------

    def _send(self, order: Order, recipient: str, type_: str,
              titre: str, message: str) -> None:
        notification = Notification(
            id=None,
            recipient=recipient,
            type=type_,
            titre=titre,
            message=message,
            commande_id=order.id,
        )
        try:
            self._notification_repo.save(notification)
        except DependencyError:
            logger.warning("Could not store notification '%s' for %s",
                           type_, recipient, exc_info=True)
