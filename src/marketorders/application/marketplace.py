"""Application service: marketplace-wide delivery settings.

The supermarket fee schedule prices ``livraison_supermarche``; marketplace
closures block collect and supermarket delivery.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from marketorders.domain.model.calendar import ClosureWindow
from marketorders.domain.model.fees import FeeSchedule
from marketorders.domain.model.status import DeliveryMethod
from marketorders.domain.repository.marketplace_repository import MarketplaceRepository


@dataclass(frozen=True)
class MarketplaceSettings:
    fee_schedule: FeeSchedule | None
    closures: list[ClosureWindow]


class MarketplaceHandler:

    def __init__(self, marketplace_repo: MarketplaceRepository) -> None:
        self._marketplace_repo = marketplace_repo

    def set_fee(self, montant: str, fee_type: str) -> FeeSchedule:
        schedule = FeeSchedule.of(montant, fee_type)
        self._marketplace_repo.set_fee_schedule(schedule)
        return schedule

    def add_closure(
        self,
        debut: date,
        fin: date,
        raison: str = "",
        scope: DeliveryMethod | None = None,
        annuel: bool = False,
    ) -> ClosureWindow:
        closure = ClosureWindow(debut, fin, raison, scope, annuel)
        self._marketplace_repo.add_closure(closure)
        return closure

    def show(self) -> MarketplaceSettings:
        return MarketplaceSettings(
            fee_schedule=self._marketplace_repo.get_fee_schedule(),
            closures=self._marketplace_repo.get_closures(),
        )
