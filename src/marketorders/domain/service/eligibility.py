"""Domain service: delivery/collection date eligibility.

Decides whether a date can be offered for a delivery method, given the
boutiques of the order and the marketplace closures.  Pure: the evaluator
only reads its inputs, and "today" is fixed when it is built, so it can be
shared and called concurrently.

Rules, in order of precedence:

  0. dates in the past are never available;
  1. same-day requests are only possible for boutique delivery, from a
     single boutique that accepts same-day delivery;
  2. collect and supermarket delivery are blocked by marketplace closures;
  3. collect needs every boutique to offer click & collect, be open that
     weekday and not be closed that day;
  4. boutique delivery needs a single boutique that delivers, is open that
     weekday and is not closed that day.

Every refusal carries a human-readable reason.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

from marketorders.domain.model.boutique import Boutique
from marketorders.domain.model.calendar import (
    ClosureWindow,
    as_day,
    is_closed,
    weekday_name,
)
from marketorders.domain.model.status import DeliveryMethod

DEFAULT_HORIZON_DAYS = 60


class EligibilityEvaluator:

    def __init__(self, today: date, horizon_days: int = DEFAULT_HORIZON_DAYS) -> None:
        self._today = as_day(today)
        self._horizon_days = horizon_days

    @property
    def today(self) -> date:
        return self._today

    def is_available(
        self,
        day: date | datetime,
        method: DeliveryMethod,
        boutiques: list[Boutique],
        closures: list[ClosureWindow],
    ) -> bool:
        return self.refusal(day, method, boutiques, closures) is None

    def next_available(
        self,
        day: date | datetime,
        method: DeliveryMethod,
        boutiques: list[Boutique],
        closures: list[ClosureWindow],
        horizon_days: int | None = None,
    ) -> date | None:
        """First available day after ``day``, or None within the horizon."""
        start = as_day(day)
        horizon = self._horizon_days if horizon_days is None else horizon_days
        for offset in range(1, horizon + 1):
            candidate = start + timedelta(days=offset)
            if self.is_available(candidate, method, boutiques, closures):
                return candidate
        return None

    def refusal(
        self,
        day: date | datetime,
        method: DeliveryMethod,
        boutiques: list[Boutique],
        closures: list[ClosureWindow],
    ) -> str | None:
        """Return why ``day`` is not available, or None if it is."""
        target = as_day(day)

        if target < self._today:
            return "The requested date is in the past"
        if not boutiques:
            return "No boutique to fulfil the order"

        if target == self._today:
            if method is not DeliveryMethod.LIVRAISON_BOUTIQUE:
                return "Same-day fulfilment is only possible with boutique delivery"
            if len(boutiques) != 1 or not boutiques[0].accepte_livraison_jour_j:
                return "This boutique does not accept same-day delivery"

        if method.uses_warehouse and is_closed(target, closures, method):
            return "The supermarket is closed on this date"

        if method is DeliveryMethod.COLLECT:
            return self._collect_refusal(target, boutiques)
        if method is DeliveryMethod.LIVRAISON_BOUTIQUE:
            return self._boutique_delivery_refusal(target, boutiques)
        return None

    # --- Method-specific rules ------------------------------------------------

    @staticmethod
    def _collect_refusal(day: date, boutiques: list[Boutique]) -> str | None:
        without_collect = [b.nom for b in boutiques if not b.click_collect_actif]
        if without_collect:
            return (
                "Click & collect is not available for every boutique in the cart "
                f"({', '.join(without_collect)})"
            )
        closed = [
            b.nom for b in boutiques
            if not b.is_open_on(day) or b.is_closed_on(day, DeliveryMethod.COLLECT)
        ]
        if closed:
            return (
                f"One or more boutiques are closed on {weekday_name(day)} "
                f"{day.isoformat()} ({', '.join(closed)})"
            )
        return None

    @staticmethod
    def _boutique_delivery_refusal(day: date, boutiques: list[Boutique]) -> str | None:
        if len(boutiques) != 1:
            return "Boutique delivery requires every product to come from the same boutique"
        boutique = boutiques[0]
        if not boutique.livraison_status:
            return f"Boutique '{boutique.nom}' does not offer home delivery"
        if not boutique.is_open_on(day):
            return f"Boutique '{boutique.nom}' is closed on {weekday_name(day)}"
        if boutique.is_closed_on(day, DeliveryMethod.LIVRAISON_BOUTIQUE):
            return f"Boutique '{boutique.nom}' is closed on {day.isoformat()}"
        return None
