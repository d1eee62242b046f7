"""Domain service: delivery fee computation.

Collect is free.  Supermarket delivery is charged with the marketplace
schedule, boutique delivery with the boutique's own schedule.  A schedule
is either a flat amount or a percentage of the cart total.
"""

from __future__ import annotations

from marketorders.domain.model.fees import AppliedFee, FeeSchedule
from marketorders.domain.model.status import DeliveryMethod
from marketorders.domain.model.value_objects import Money


class FeeCalculator:

    def __init__(self, fallback_market_fee: FeeSchedule) -> None:
        # Used when the marketplace has no active fee schedule.
        self._fallback_market_fee = fallback_market_fee

    def schedule_for(
        self,
        method: DeliveryMethod,
        market_fee: FeeSchedule | None,
        shop_fee: FeeSchedule | None,
    ) -> FeeSchedule:
        if method is DeliveryMethod.LIVRAISON_SUPERMARCHE:
            return market_fee if market_fee is not None else self._fallback_market_fee
        if method is DeliveryMethod.LIVRAISON_BOUTIQUE:
            return shop_fee if shop_fee is not None else FeeSchedule.free()
        return FeeSchedule.free()

    def fee_for(
        self,
        method: DeliveryMethod,
        cart_total: Money,
        market_fee: FeeSchedule | None,
        shop_fee: FeeSchedule | None,
    ) -> Money:
        if method is DeliveryMethod.COLLECT:
            return Money.zero(cart_total.currency)
        return self.schedule_for(method, market_fee, shop_fee).amount_for(cart_total)

    def final_total(
        self,
        method: DeliveryMethod,
        cart_total: Money,
        market_fee: FeeSchedule | None,
        shop_fee: FeeSchedule | None,
    ) -> Money:
        return cart_total + self.fee_for(method, cart_total, market_fee, shop_fee)

    def applied_fee(
        self,
        method: DeliveryMethod,
        cart_total: Money,
        market_fee: FeeSchedule | None,
        shop_fee: FeeSchedule | None,
    ) -> AppliedFee:
        """Snapshot of the fee agreed at checkout, stored on the order."""
        if method is DeliveryMethod.COLLECT:
            return AppliedFee.none(cart_total.currency)
        schedule = self.schedule_for(method, market_fee, shop_fee)
        return AppliedFee(schedule.type, schedule.montant, schedule.amount_for(cart_total))
