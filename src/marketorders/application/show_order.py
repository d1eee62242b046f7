"""Application service: order queries (read side).

Projects orders for one actor: status labels and colours, lot subtotals,
and permission flags.  Flags are computed with ``permissions.can_perform``,
the same guard the Order aggregate applies, so nothing here mutates state.
"""

from __future__ import annotations

import logging

from marketorders.application.dto import (
    BoutiqueLotDTO,
    ItemLineDTO,
    OrderDTO,
    OrderSummaryDTO,
)
from marketorders.domain.exceptions import EntityNotFoundError, GuardViolationError
from marketorders.domain.model.actor import Actor
from marketorders.domain.model.order import BoutiqueLot, Order
from marketorders.domain.model.permissions import LOT_ACTIONS, Action, can_perform
from marketorders.domain.model.status import OrderStatus
from marketorders.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)

STATUS_COLORS: dict[OrderStatus, str] = {
    OrderStatus.EN_PREPARATION: "primary",
    OrderStatus.EN_LIVRAISON: "accent",
    OrderStatus.PEUT_ETRE_COLLECTE: "warn",
    OrderStatus.ANNULEE: "danger",
    OrderStatus.PRET_A_COLLECTE: "success",
    OrderStatus.EN_ATTENTE: "warning",
    OrderStatus.LIVREE: "success",
}
DEFAULT_COLOR = "primary"


def status_color(status: OrderStatus) -> str:
    return STATUS_COLORS.get(status, DEFAULT_COLOR)


def status_label(status: OrderStatus) -> str:
    return status.value.replace("_", " ").upper()


def ensure_can_view(order: Order, actor: Actor) -> None:
    """Clients see their own orders, boutiques the orders they take part in."""
    if actor.is_client and order.client_id != actor.user_id:
        raise GuardViolationError("Access denied")
    if actor.is_boutique and order.find_lot(actor.boutique_id) is None:
        raise GuardViolationError("Access denied")


def to_order_dto(order: Order, actor: Actor) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        numero_commande=order.numero_commande,
        client_id=order.client_id,
        status=order.status_livraison.value,
        status_label=status_label(order.status_livraison),
        status_color=status_color(order.status_livraison),
        typedelivery=order.typedelivery.value,
        date_livraison=order.date_livraison.isoformat(),
        adresse_livraison=order.adresse_livraison,
        paiement_methode=order.paiement.methode.value,
        paiement_statut=order.paiement.statut.value,
        base_total=str(order.base_total),
        frais_livraison=str(order.frais_livraison.montant),
        total=str(order.total),
        notes=order.notes,
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        lots=[_to_lot_dto(order, lot, actor) for lot in order.boutiques],
        can_cancel=_can_cancel_order(order, actor),
        can_confirm_final=can_perform(actor, Action.CONFIRM_FINAL, order),
    )


def to_summary_dto(order: Order) -> OrderSummaryDTO:
    return OrderSummaryDTO(
        id=order.id,  # type: ignore[arg-type]
        numero_commande=order.numero_commande,
        client_id=order.client_id,
        status=order.status_livraison.value,
        status_label=status_label(order.status_livraison),
        typedelivery=order.typedelivery.value,
        date_livraison=order.date_livraison.isoformat(),
        boutiques=[lot.nom for lot in order.boutiques],
        total=str(order.total),
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
    )


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int, actor: Actor) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        ensure_can_view(order, actor)
        return to_order_dto(order, actor)


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, actor: Actor) -> list[OrderSummaryDTO]:
        if actor.is_admin:
            orders = self._order_repo.list_all()
        elif actor.is_boutique:
            orders = self._order_repo.list_for_boutique(actor.boutique_id)  # type: ignore[arg-type]
        else:
            orders = self._order_repo.list_for_client(actor.user_id)
        logger.debug("Listing %d orders for %s %s",
                     len(orders), actor.role.value, actor.user_id)
        return [to_summary_dto(order) for order in orders]


# --- Permission flags ----------------------------------------------------------


def _can_cancel_order(order: Order, actor: Actor) -> bool:
    lot = order.find_lot(actor.boutique_id) if actor.is_boutique else None
    return can_perform(actor, Action.CANCEL_ORDER, order, lot)


def _to_lot_dto(order: Order, lot: BoutiqueLot, actor: Actor) -> BoutiqueLotDTO:
    allowed = [
        action.value for action in LOT_ACTIONS
        if can_perform(actor, action, order, lot)
    ]
    # Boutiques may only cancel their own lot; the rule checks ownership.
    lot_cancellable = not lot.is_cancelled and can_perform(
        actor, Action.CANCEL_ORDER, order, lot
    )
    return BoutiqueLotDTO(
        boutique_id=lot.boutique_id,
        nom=lot.nom,
        status=lot.status.value,
        status_label=status_label(lot.status),
        status_color=status_color(lot.status),
        est_accepte=lot.est_accepte,
        depot_fait=lot.depot_entrepot.est_fait,
        depot_valide=lot.depot_entrepot.is_validated,
        subtotal=str(lot.subtotal),
        items=[
            ItemLineDTO(
                produit_id=item.produit_id,
                nom_produit=item.nom_produit,
                quantite=item.quantite.value,
                prix_unitaire=str(item.prix_unitaire),
                line_total=str(item.line_total),
                status=item.status.value,
                can_cancel=can_perform(actor, Action.CANCEL_ITEM, order, lot, item),
            )
            for item in lot.items
        ],
        can_cancel=lot_cancellable,
        allowed_actions=allowed,
    )
