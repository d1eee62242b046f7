"""Who may do what to an order, and from which lot states.

``refusal`` is the one place where transition guards are written down.
The Order aggregate calls it before every mutation, and the read side calls
it to compute permission flags, so what the UI offers and what the domain
accepts cannot drift apart.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from marketorders.domain.model.actor import Actor
from marketorders.domain.model.status import DeliveryMethod, ItemStatus, OrderStatus

if TYPE_CHECKING:
    from marketorders.domain.model.order import BoutiqueLot, ItemLine, Order


class Action(Enum):
    ACCEPT = "accept"
    START_DELIVERY = "start_delivery"
    MARK_DEPOT = "mark_depot"
    CONFIRM_DEPOT = "confirm_depot"
    CANCEL_ORDER = "cancel_order"
    CANCEL_ITEM = "cancel_item"
    CONFIRM_FINAL = "confirm_final"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


_OPEN_LOT_STATES = frozenset(s for s in OrderStatus if not s.is_terminal)

# Lot states each lot-level action may start from, and the state it leads to.
# MARK_DEPOT only records the deposit and leaves the lot where it is.
LOT_TRANSITIONS: dict[Action, tuple[frozenset[OrderStatus], OrderStatus]] = {
    Action.ACCEPT: (frozenset({OrderStatus.EN_ATTENTE}), OrderStatus.EN_PREPARATION),
    Action.START_DELIVERY: (frozenset({OrderStatus.EN_PREPARATION}), OrderStatus.EN_LIVRAISON),
    Action.MARK_DEPOT: (frozenset({OrderStatus.EN_PREPARATION}), OrderStatus.EN_PREPARATION),
    Action.CONFIRM_DEPOT: (frozenset({OrderStatus.EN_PREPARATION}), OrderStatus.PRET_A_COLLECTE),
    Action.CANCEL_ORDER: (_OPEN_LOT_STATES, OrderStatus.ANNULEE),
    Action.CANCEL_ITEM: (_OPEN_LOT_STATES, OrderStatus.ANNULEE),
    Action.CONFIRM_FINAL: (_OPEN_LOT_STATES, OrderStatus.LIVREE),
}

# Lot state once its warehouse deposit is validated, per delivery method.
DEPOT_TARGETS: dict[DeliveryMethod, OrderStatus] = {
    DeliveryMethod.COLLECT: OrderStatus.PRET_A_COLLECTE,
    DeliveryMethod.LIVRAISON_SUPERMARCHE: OrderStatus.EN_LIVRAISON,
}

# Order states from which the buyer can confirm receipt.
FINAL_CONFIRMATION_STATES = frozenset(
    {OrderStatus.PEUT_ETRE_COLLECTE, OrderStatus.EN_LIVRAISON}
)

# Actions that target a single boutique lot.
LOT_ACTIONS = (
    Action.ACCEPT,
    Action.START_DELIVERY,
    Action.MARK_DEPOT,
    Action.CONFIRM_DEPOT,
)


def refusal(
    actor: Actor,
    action: Action,
    order: Order,
    lot: Optional[BoutiqueLot] = None,
    item: Optional[ItemLine] = None,
) -> str | None:
    """Return why ``actor`` may not perform ``action``, or None if allowed.

    Never mutates anything.
    """
    if order.status_livraison.is_terminal:
        return (
            f"Order {order.numero_commande} is already "
            f"{order.status_livraison.value}"
        )
    return _RULES[action](actor, order, lot, item)


def can_perform(
    actor: Actor,
    action: Action,
    order: Order,
    lot: Optional[BoutiqueLot] = None,
    item: Optional[ItemLine] = None,
) -> bool:
    return refusal(actor, action, order, lot, item) is None


def target_status(action: Action, method: DeliveryMethod | None = None) -> OrderStatus:
    if action is Action.CONFIRM_DEPOT and method is not None:
        return DEPOT_TARGETS[method]
    return LOT_TRANSITIONS[action][1]


# --- Rules ---------------------------------------------------------------------


def _owns_order(actor: Actor, order: Order) -> bool:
    return actor.is_client and actor.user_id == order.client_id


def _owns_lot(actor: Actor, lot: Optional[BoutiqueLot]) -> bool:
    return actor.is_boutique and lot is not None and lot.boutique_id == actor.boutique_id


def _lot_state(action: Action, lot: BoutiqueLot) -> str | None:
    sources, _ = LOT_TRANSITIONS[action]
    if lot.status not in sources:
        return (
            f"Lot of boutique '{lot.nom}' is {lot.status.value}, "
            f"cannot {action.label}"
        )
    return None


def _accept(actor, order, lot, item):
    if lot is None:
        return "No boutique lot selected"
    if not (actor.is_admin or _owns_lot(actor, lot)):
        return "Only the boutique owning this lot or an admin can accept it"
    return _lot_state(Action.ACCEPT, lot)


def _start_delivery(actor, order, lot, item):
    if lot is None:
        return "No boutique lot selected"
    if not _owns_lot(actor, lot):
        return "Only the boutique owning this lot can start its delivery"
    if order.typedelivery is not DeliveryMethod.LIVRAISON_BOUTIQUE:
        return "Direct delivery is reserved to orders delivered by the boutique"
    return _lot_state(Action.START_DELIVERY, lot)


def _mark_depot(actor, order, lot, item):
    if lot is None:
        return "No boutique lot selected"
    if not _owns_lot(actor, lot):
        return "Only the boutique owning this lot can mark it as deposited"
    if not order.typedelivery.uses_warehouse:
        return "Orders delivered by the boutique do not go through the warehouse"
    return _lot_state(Action.MARK_DEPOT, lot)


def _confirm_depot(actor, order, lot, item):
    if lot is None:
        return "No boutique lot selected"
    if not actor.is_admin:
        return "Only an admin can confirm a warehouse deposit"
    if not order.typedelivery.uses_warehouse:
        return "Orders delivered by the boutique do not go through the warehouse"
    if lot.depot_entrepot.is_validated:
        return f"Deposit of boutique '{lot.nom}' is already validated"
    return _lot_state(Action.CONFIRM_DEPOT, lot)


def _cancel_order(actor, order, lot, item):
    if actor.is_admin:
        return None
    if actor.is_client:
        if not _owns_order(actor, order):
            return "Only the client who placed the order can cancel it"
        if order.has_validated_depot:
            return (
                "Some items are already validated at the warehouse "
                "and can no longer be cancelled"
            )
        return None
    if not _owns_lot(actor, lot):
        return "Boutique is not part of this order"
    if lot.depot_entrepot.is_validated:
        return (
            "Your lot is already validated at the warehouse "
            "and can no longer be cancelled"
        )
    if lot.status is OrderStatus.ANNULEE:
        return "Your lot is already cancelled"
    return None


def _cancel_item(actor, order, lot, item):
    if actor.is_admin:
        return "An admin can only cancel the whole order, not individual items"
    if lot is None or item is None:
        return "No item selected"
    if item.status is ItemStatus.ANNULEE:
        return f"Item '{item.nom_produit}' is already cancelled"
    if actor.is_client and not _owns_order(actor, order):
        return "Only the client who placed the order can cancel its items"
    if actor.is_boutique and not _owns_lot(actor, lot):
        return "A boutique can only cancel items of its own lot"
    if lot.depot_entrepot.is_validated:
        return (
            "This lot is already validated at the warehouse "
            "and can no longer be changed"
        )
    return None


def _confirm_final(actor, order, lot, item):
    if not (actor.is_admin or _owns_order(actor, order)):
        return "Only the client who placed the order or an admin can confirm receipt"
    if order.status_livraison not in FINAL_CONFIRMATION_STATES:
        return (
            f"Order {order.numero_commande} is {order.status_livraison.value}; "
            f"it must be ready for collection or in delivery"
        )
    return None


_Rule = Callable[[Actor, "Order", Optional["BoutiqueLot"], Optional["ItemLine"]], Optional[str]]

_RULES: dict[Action, _Rule] = {
    Action.ACCEPT: _accept,
    Action.START_DELIVERY: _start_delivery,
    Action.MARK_DEPOT: _mark_depot,
    Action.CONFIRM_DEPOT: _confirm_depot,
    Action.CANCEL_ORDER: _cancel_order,
    Action.CANCEL_ITEM: _cancel_item,
    Action.CONFIRM_FINAL: _confirm_final,
}
