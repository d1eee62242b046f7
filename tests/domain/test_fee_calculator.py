"""Unit tests for delivery fee computation."""

from decimal import Decimal

import pytest

from marketorders.domain.model.fees import FeeSchedule, FeeType
from marketorders.domain.model.status import DeliveryMethod
from marketorders.domain.model.value_objects import Money
from marketorders.domain.service.fee_calculator import FeeCalculator


@pytest.fixture
def calculator() -> FeeCalculator:
    return FeeCalculator(fallback_market_fee=FeeSchedule.of("5000"))


class TestFeeFor:

    @pytest.mark.parametrize("total", ["0", "1", "1000", "250000.50"])
    def test_collect_is_free(self, calculator, total):
        fee = calculator.fee_for(
            DeliveryMethod.COLLECT, Money.of(total),
            FeeSchedule.of("10", "pourcentage"), FeeSchedule.of("3000"),
        )
        assert fee.is_zero

    def test_supermarket_percentage(self, calculator):
        fee = calculator.fee_for(
            DeliveryMethod.LIVRAISON_SUPERMARCHE, Money.of("1000"),
            FeeSchedule.of("10", "pourcentage"), None,
        )
        assert fee == Money.of("100")

    def test_supermarket_flat(self, calculator):
        fee = calculator.fee_for(
            DeliveryMethod.LIVRAISON_SUPERMARCHE, Money.of("1000"), FeeSchedule.of("2500"), None,
        )
        assert fee == Money.of("2500")

    def test_supermarket_falls_back_when_unset(self, calculator):
        fee = calculator.fee_for(DeliveryMethod.LIVRAISON_SUPERMARCHE, Money.of("1000"), None, None)
        assert fee == Money.of("5000")

    def test_boutique_uses_its_own_schedule(self, calculator):
        fee = calculator.fee_for(
            DeliveryMethod.LIVRAISON_BOUTIQUE, Money.of("20000"),
            FeeSchedule.of("9999"), FeeSchedule.of("5", "pourcentage"),
        )
        assert fee == Money.of("1000")

    def test_boutique_without_schedule_is_free(self, calculator):
        fee = calculator.fee_for(DeliveryMethod.LIVRAISON_BOUTIQUE, Money.of("20000"), None, None)
        assert fee.is_zero


class TestTotals:

    def test_final_total_adds_fee(self, calculator):
        total = calculator.final_total(
            DeliveryMethod.LIVRAISON_SUPERMARCHE, Money.of("1000"),
            FeeSchedule.of("10", "pourcentage"), None,
        )
        assert total == Money.of("1100")

    def test_applied_fee_snapshot(self, calculator):
        applied = calculator.applied_fee(
            DeliveryMethod.LIVRAISON_SUPERMARCHE, Money.of("1000"),
            FeeSchedule.of("10", "pourcentage"), None,
        )
        assert applied.type is FeeType.POURCENTAGE
        assert applied.valeur == Decimal("10")
        assert applied.montant == Money.of("100")

    def test_applied_fee_for_collect_is_none(self, calculator):
        applied = calculator.applied_fee(DeliveryMethod.COLLECT, Money.of("1000"),
                                         FeeSchedule.of("2500"), None)
        assert applied.montant.is_zero
