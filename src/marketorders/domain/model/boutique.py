"""Boutique aggregate — a shop selling on the marketplace.

Carries what the fulfillment engine needs to know about a shop: when it is
open, when it is closed, how it delivers and what it charges for it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum

from marketorders.domain.exceptions import ValidationError
from marketorders.domain.model.calendar import (
    ClosureWindow,
    OpeningHours,
    is_closed,
    weekday_name,
)
from marketorders.domain.model.fees import FeeSchedule, FeeType
from marketorders.domain.model.status import DeliveryMethod


class BoutiqueStatus(Enum):
    EN_ATTENTE = "en_attente"
    ACTIVE = "active"
    SUSPENDUE = "suspendue"
    REJETEE = "rejetee"


@dataclass
class Boutique:
    """Aggregate root for a shop.

    ``frais_livraison`` is the legacy flat delivery fee; shops configured
    after fee schedules were introduced use ``frais_livraison_data``.
    """

    id: str
    nom: str
    status: BoutiqueStatus = BoutiqueStatus.EN_ATTENTE
    livraison_status: bool = False
    click_collect_actif: bool = False
    accepte_livraison_jour_j: bool = False
    horaires: list[OpeningHours] = field(default_factory=list)
    fermetures: list[ClosureWindow] = field(default_factory=list)
    frais_livraison_data: FeeSchedule | None = None
    frais_livraison: Decimal | None = None
    motif_suspension: str | None = None
    date_validation: datetime | None = None

    # --- Availability ---------------------------------------------------------

    def is_open_on(self, day: date) -> bool:
        name = weekday_name(day)
        return any(h.jour == name for h in self.horaires)

    def is_closed_on(self, day: date, method: DeliveryMethod | None = None) -> bool:
        return is_closed(day, self.fermetures, method)

    @property
    def is_active(self) -> bool:
        return self.status is BoutiqueStatus.ACTIVE

    @property
    def delivery_fee_schedule(self) -> FeeSchedule:
        if self.frais_livraison_data is not None:
            return self.frais_livraison_data
        if self.frais_livraison is not None:
            return FeeSchedule(Decimal(self.frais_livraison), FeeType.FIXE)
        return FeeSchedule.free()

    # --- Configuration --------------------------------------------------------

    def add_closure(self, closure: ClosureWindow) -> None:
        self.fermetures.append(closure)

    def set_delivery_fee(self, schedule: FeeSchedule) -> None:
        self.frais_livraison_data = schedule

    # --- Moderation -----------------------------------------------------------

    def approve(self, now: datetime | None = None) -> None:
        self.status = BoutiqueStatus.ACTIVE
        self.motif_suspension = None
        self.date_validation = now or datetime.now(timezone.utc)

    def suspend(self, motif: str) -> None:
        self._require_reason(motif)
        self.status = BoutiqueStatus.SUSPENDUE
        self.motif_suspension = motif.strip()

    def reject(self, motif: str) -> None:
        self._require_reason(motif)
        if self.status is BoutiqueStatus.ACTIVE:
            raise ValidationError(
                f"Boutique '{self.nom}' is already active, suspend it instead"
            )
        self.status = BoutiqueStatus.REJETEE
        self.motif_suspension = motif.strip()

    @staticmethod
    def _require_reason(motif: str | None) -> None:
        if not motif or not motif.strip():
            raise ValidationError("A reason is required")
