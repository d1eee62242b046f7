"""Order aggregate — the core of the domain.

An Order (commande) is created at checkout from a snapshot of the buyer's
cart.  It owns one BoutiqueLot per shop present in the cart, and each lot
owns its item lines.  Lots and items only change through the guarded
transition methods below; every guard is delegated to
``permissions.refusal`` and is checked before anything is mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from marketorders.domain.exceptions import (
    EntityNotFoundError,
    GuardViolationError,
    ValidationError,
)
from marketorders.domain.model.actor import Actor
from marketorders.domain.model.fees import AppliedFee
from marketorders.domain.model.permissions import Action, refusal, target_status
from marketorders.domain.model.status import (
    DeliveryMethod,
    ItemStatus,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from marketorders.domain.model.value_objects import Money, Quantity

COLLECT_ADDRESS = "Retrait en entrepôt"


@dataclass
class ItemLine:
    """A product line, with its price locked at checkout."""

    produit_id: str
    nom_produit: str
    prix_unitaire: Money
    quantite: Quantity
    status: ItemStatus = ItemStatus.ACTIVE
    variation_id: str | None = None

    @property
    def line_total(self) -> Money:
        return self.prix_unitaire * self.quantite.value

    @property
    def is_active(self) -> bool:
        return self.status is ItemStatus.ACTIVE


@dataclass
class DepotEntrepot:
    """Warehouse deposit of a lot.

    ``est_fait`` is set by the boutique when it drops the goods off;
    ``date_validation`` is set by an admin on receipt and is the point of
    no return for cancellations.
    """

    est_fait: bool = False
    date_depot: datetime | None = None
    date_validation: datetime | None = None
    admin_id: str | None = None

    @property
    def is_validated(self) -> bool:
        return self.date_validation is not None


@dataclass
class BoutiqueLot:
    boutique_id: str
    nom: str
    items: list[ItemLine]
    status: OrderStatus = OrderStatus.EN_ATTENTE
    est_accepte: bool = False
    date_acceptation: datetime | None = None
    depot_entrepot: DepotEntrepot = field(default_factory=DepotEntrepot)

    @property
    def subtotal(self) -> Money:
        currency = self.items[0].prix_unitaire.currency
        result = Money.zero(currency)
        for item in self.active_items:
            result = result + item.line_total
        return result

    @property
    def active_items(self) -> list[ItemLine]:
        return [item for item in self.items if item.is_active]

    @property
    def is_cancelled(self) -> bool:
        return self.status is OrderStatus.ANNULEE

    def find_item(self, produit_id: str, variation_id: str | None = None) -> ItemLine | None:
        """Return the matching line, preferring one that is still active."""
        matches = [
            item for item in self.items
            if item.produit_id == produit_id
            and (variation_id is None or item.variation_id == variation_id)
        ]
        for item in matches:
            if item.is_active:
                return item
        return matches[0] if matches else None

    def _cancel(self) -> None:
        self.status = OrderStatus.ANNULEE
        for item in self.items:
            item.status = ItemStatus.ANNULEE


@dataclass
class Payment:
    methode: PaymentMethod
    statut: PaymentStatus = PaymentStatus.NON_PAYE
    montant_paye: Money | None = None
    date_paiement: datetime | None = None


@dataclass
class Order:
    """Aggregate root for marketplace orders.

    Use the ``Order.create()`` factory for new orders — it enforces all
    creation rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.

    ``status_livraison`` is derived from the lots after every transition
    (see ``_refresh_status``); ``annulee`` and ``livree`` are final.
    """

    id: int | None
    numero_commande: str
    client_id: str
    typedelivery: DeliveryMethod
    date_livraison: date
    boutiques: list[BoutiqueLot]
    paiement: Payment
    frais_livraison: AppliedFee
    adresse_livraison: str = ""
    notes: str = ""
    status_livraison: OrderStatus = OrderStatus.EN_ATTENTE
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 0

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        numero_commande: str,
        client_id: str,
        typedelivery: DeliveryMethod,
        date_livraison: date,
        boutiques: list[BoutiqueLot],
        paiement_methode: PaymentMethod,
        frais_livraison: AppliedFee,
        adresse_livraison: str | None = None,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> Order:
        """Create a new order, enforcing all invariants."""
        if not numero_commande:
            raise ValidationError("Order number is required")
        if not client_id:
            raise ValidationError("Client id is required")
        if not boutiques:
            raise ValidationError("Order must contain at least one boutique lot")
        for lot in boutiques:
            if not lot.items:
                raise ValidationError(f"Lot of boutique '{lot.nom}' has no items")

        if typedelivery.requires_address:
            if not adresse_livraison or not adresse_livraison.strip():
                raise ValidationError("A delivery address is required")
            address = adresse_livraison.strip()
        else:
            address = COLLECT_ADDRESS

        created = now or datetime.now(timezone.utc)
        return Order(
            id=None,
            numero_commande=numero_commande,
            client_id=client_id,
            typedelivery=typedelivery,
            date_livraison=date_livraison,
            boutiques=list(boutiques),
            paiement=Payment(methode=paiement_methode),
            frais_livraison=frais_livraison,
            adresse_livraison=address,
            notes=(notes or "").strip(),
            created_at=created,
            updated_at=created,
        )

    # --- State transitions ----------------------------------------------------

    def accept(self, actor: Actor, boutique_id: str | None = None,
               now: datetime | None = None) -> BoutiqueLot:
        """Lot en_attente -> en_preparation."""
        lot = self._resolve_lot(actor, boutique_id)
        self._guard(actor, Action.ACCEPT, lot)
        stamp = self._touch(now)
        lot.est_accepte = True
        lot.date_acceptation = stamp
        lot.status = target_status(Action.ACCEPT)
        self._refresh_status()
        return lot

    def start_delivery(self, actor: Actor, boutique_id: str | None = None,
                       now: datetime | None = None) -> BoutiqueLot:
        """Lot en_preparation -> en_livraison (boutique delivers itself)."""
        lot = self._resolve_lot(actor, boutique_id)
        self._guard(actor, Action.START_DELIVERY, lot)
        self._touch(now)
        lot.status = target_status(Action.START_DELIVERY)
        self._refresh_status()
        return lot

    def mark_depot(self, actor: Actor, boutique_id: str | None = None,
                   now: datetime | None = None) -> BoutiqueLot:
        """Record that the boutique dropped its lot at the warehouse."""
        lot = self._resolve_lot(actor, boutique_id)
        self._guard(actor, Action.MARK_DEPOT, lot)
        stamp = self._touch(now)
        lot.depot_entrepot.est_fait = True
        lot.depot_entrepot.date_depot = stamp
        return lot

    def confirm_depot(self, actor: Actor, boutique_id: str,
                      now: datetime | None = None) -> BoutiqueLot:
        """Admin confirms receipt at the warehouse. Irreversible."""
        lot = self._resolve_lot(actor, boutique_id)
        self._guard(actor, Action.CONFIRM_DEPOT, lot)
        stamp = self._touch(now)
        depot = lot.depot_entrepot
        depot.est_fait = True
        if depot.date_depot is None:
            depot.date_depot = stamp
        depot.date_validation = stamp
        depot.admin_id = actor.user_id
        lot.status = target_status(Action.CONFIRM_DEPOT, self.typedelivery)
        self._refresh_status()
        return lot

    def cancel(self, actor: Actor, reason: str | None,
               now: datetime | None = None) -> list[BoutiqueLot]:
        """Cancel the whole order (admin, client) or one lot (boutique).

        Returns the lots that were cancelled.
        """
        reason = self._require_reason(reason)
        lot = self.find_lot(actor.boutique_id) if actor.is_boutique else None
        self._guard(actor, Action.CANCEL_ORDER, lot)

        self._touch(now)
        if actor.is_boutique:
            cancelled = [lot]
        else:
            cancelled = [b for b in self.boutiques if not b.is_cancelled]
        for target in cancelled:
            target._cancel()
        self._append_note(f"Cancellation ({actor.role.value}): {reason}")
        self._recalculate_totals()
        self._refresh_status()
        return cancelled

    def cancel_item(
        self,
        actor: Actor,
        produit_id: str,
        reason: str | None,
        boutique_id: str | None = None,
        variation_id: str | None = None,
        now: datetime | None = None,
    ) -> ItemLine:
        """Cancel one product line of a lot (client or boutique only)."""
        reason = self._require_reason(reason)
        if actor.is_admin:
            self._guard(actor, Action.CANCEL_ITEM)
        lot = self._resolve_lot(actor, boutique_id)
        item = lot.find_item(produit_id, variation_id)
        if item is None:
            raise EntityNotFoundError(
                f"Product '{produit_id}' not found in lot of boutique '{lot.nom}'"
            )
        self._guard(actor, Action.CANCEL_ITEM, lot, item)

        self._touch(now)
        item.status = ItemStatus.ANNULEE
        self._append_note(
            f"Item cancellation [{item.nom_produit}] ({actor.role.value}): {reason}"
        )
        if not lot.active_items:
            lot.status = target_status(Action.CANCEL_ITEM)
        self._recalculate_totals()
        self._refresh_status()
        return item

    def confirm_final(self, actor: Actor, now: datetime | None = None) -> None:
        """Buyer (or admin) confirms the goods were collected or delivered."""
        self._guard(actor, Action.CONFIRM_FINAL)
        stamp = self._touch(now)
        for lot in self.active_lots:
            lot.status = target_status(Action.CONFIRM_FINAL)
        self.paiement.statut = PaymentStatus.PAYE
        self.paiement.montant_paye = self.total
        self.paiement.date_paiement = stamp
        self._refresh_status()

    # --- Computed properties --------------------------------------------------

    @property
    def currency(self) -> str:
        return self.frais_livraison.montant.currency

    @property
    def base_total(self) -> Money:
        result = Money.zero(self.currency)
        for lot in self.boutiques:
            result = result + lot.subtotal
        return result

    @property
    def total(self) -> Money:
        return self.base_total + self.frais_livraison.montant

    @property
    def active_lots(self) -> list[BoutiqueLot]:
        return [lot for lot in self.boutiques if not lot.is_cancelled]

    @property
    def has_validated_depot(self) -> bool:
        return any(lot.depot_entrepot.is_validated for lot in self.boutiques)

    @property
    def all_deposits_validated(self) -> bool:
        active = self.active_lots
        return bool(active) and all(lot.depot_entrepot.is_validated for lot in active)

    def find_lot(self, boutique_id: str | None) -> BoutiqueLot | None:
        for lot in self.boutiques:
            if lot.boutique_id == boutique_id:
                return lot
        return None

    def lot_for(self, boutique_id: str) -> BoutiqueLot:
        lot = self.find_lot(boutique_id)
        if lot is None:
            raise EntityNotFoundError(
                f"Boutique '{boutique_id}' is not part of order {self.numero_commande}"
            )
        return lot

    # --- Internal helpers -----------------------------------------------------

    def _resolve_lot(self, actor: Actor, boutique_id: str | None) -> BoutiqueLot:
        target = boutique_id or actor.boutique_id
        if not target:
            raise ValidationError("A boutique id is required for this action")
        lot = self.find_lot(target)
        if lot is None and actor.is_boutique and target == actor.boutique_id:
            raise GuardViolationError("Boutique is not part of this order")
        if lot is None:
            return self.lot_for(target)
        return lot

    def _guard(self, actor: Actor, action: Action,
               lot: BoutiqueLot | None = None, item: ItemLine | None = None) -> None:
        reason = refusal(actor, action, self, lot, item)
        if reason is not None:
            raise GuardViolationError(reason)

    @staticmethod
    def _require_reason(reason: str | None) -> str:
        if not reason or not reason.strip():
            raise ValidationError("A cancellation reason is required")
        return reason.strip()

    def _refresh_status(self) -> None:
        active = self.active_lots
        if not active:
            status = OrderStatus.ANNULEE
        elif all(lot.status is OrderStatus.LIVREE for lot in active):
            status = OrderStatus.LIVREE
        elif self.typedelivery.uses_warehouse and self.all_deposits_validated:
            if self.typedelivery is DeliveryMethod.COLLECT:
                status = OrderStatus.PEUT_ETRE_COLLECTE
            else:
                status = OrderStatus.EN_LIVRAISON
        elif not self.typedelivery.uses_warehouse and any(
            lot.status is OrderStatus.EN_LIVRAISON for lot in active
        ):
            status = OrderStatus.EN_LIVRAISON
        elif all(lot.est_accepte for lot in active):
            status = OrderStatus.EN_PREPARATION
        else:
            status = OrderStatus.EN_ATTENTE
        self.status_livraison = status

    def _recalculate_totals(self) -> None:
        self.frais_livraison = self.frais_livraison.recomputed(self.base_total)

    def _append_note(self, line: str) -> None:
        self.notes = f"{self.notes}\n{line}" if self.notes else line

    def _touch(self, now: datetime | None) -> datetime:
        self.updated_at = now or datetime.now(timezone.utc)
        return self.updated_at
