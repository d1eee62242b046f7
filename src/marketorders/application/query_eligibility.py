"""Application service: is a date available for the client's cart?

Read-only.  Used before checkout to offer dates; the same evaluator runs
again at checkout, so a date offered here can still be refused later if
a closure was added in between.
"""

from __future__ import annotations

from datetime import date
from typing import Callable

from marketorders.application.dto import EligibilityDTO
from marketorders.domain.exceptions import EntityNotFoundError, ValidationError
from marketorders.domain.model.boutique import Boutique
from marketorders.domain.model.status import DeliveryMethod
from marketorders.domain.repository.boutique_repository import BoutiqueRepository
from marketorders.domain.repository.cart_repository import CartRepository
from marketorders.domain.repository.marketplace_repository import MarketplaceRepository
from marketorders.domain.service.eligibility import (
    DEFAULT_HORIZON_DAYS,
    EligibilityEvaluator,
)


class QueryEligibilityHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        boutique_repo: BoutiqueRepository,
        marketplace_repo: MarketplaceRepository,
        today: Callable[[], date] = date.today,
        horizon_days: int = DEFAULT_HORIZON_DAYS,
    ) -> None:
        self._cart_repo = cart_repo
        self._boutique_repo = boutique_repo
        self._marketplace_repo = marketplace_repo
        self._today = today
        self._horizon_days = horizon_days

    def handle(self, client_id: str, method: DeliveryMethod, day: date) -> EligibilityDTO:
        cart = self._cart_repo.get_for_client(client_id)
        if cart is None or cart.is_empty:
            raise ValidationError("The cart is empty")

        boutiques = [self._boutique(boutique_id) for boutique_id in cart.boutique_ids]
        closures = self._marketplace_repo.get_closures()
        evaluator = EligibilityEvaluator(self._today(), self._horizon_days)

        reason = evaluator.refusal(day, method, boutiques, closures)
        if reason is None:
            return EligibilityDTO(available=True)
        suggestion = evaluator.next_available(day, method, boutiques, closures)
        return EligibilityDTO(
            available=False,
            reason=reason,
            next_available=suggestion.isoformat() if suggestion else None,
        )

    def _boutique(self, boutique_id: str) -> Boutique:
        boutique = self._boutique_repo.get_by_id(boutique_id)
        if boutique is None:
            raise EntityNotFoundError(f"Boutique not found: '{boutique_id}'")
        return boutique
