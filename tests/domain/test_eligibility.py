"""Unit tests for the delivery/collection date eligibility rules."""

from datetime import date, timedelta

import pytest

from marketorders.domain.model.calendar import ClosureWindow
from marketorders.domain.model.status import DeliveryMethod
from marketorders.domain.service.eligibility import EligibilityEvaluator
from tests.builders import TODAY, make_boutique

TOMORROW = TODAY + timedelta(days=1)

COLLECT = DeliveryMethod.COLLECT
SUPERMARCHE = DeliveryMethod.LIVRAISON_SUPERMARCHE
BOUTIQUE = DeliveryMethod.LIVRAISON_BOUTIQUE


@pytest.fixture
def evaluator() -> EligibilityEvaluator:
    return EligibilityEvaluator(TODAY)


class TestPastAndEmpty:

    def test_past_date_refused(self, evaluator):
        reason = evaluator.refusal(TODAY - timedelta(days=1), COLLECT, [make_boutique()], [])
        assert reason == "The requested date is in the past"

    def test_no_boutique_refused(self, evaluator):
        assert not evaluator.is_available(TOMORROW, COLLECT, [], [])


class TestSameDay:

    @pytest.mark.parametrize("jour_j", [True, False])
    def test_same_day_collect_is_never_available(self, evaluator, jour_j):
        boutiques = [make_boutique(jour_j=jour_j)]
        assert not evaluator.is_available(TODAY, COLLECT, boutiques, [])

    def test_same_day_supermarket_delivery_refused(self, evaluator):
        assert not evaluator.is_available(TODAY, SUPERMARCHE, [make_boutique(jour_j=True)], [])

    @pytest.mark.parametrize("jour_j", [True, False])
    def test_same_day_boutique_delivery_follows_flag(self, evaluator, jour_j):
        boutiques = [make_boutique(jour_j=jour_j)]
        assert evaluator.is_available(TODAY, BOUTIQUE, boutiques, []) is jour_j

    def test_same_day_refusal_has_reason(self, evaluator):
        reason = evaluator.refusal(TODAY, BOUTIQUE, [make_boutique(jour_j=False)], [])
        assert "same-day" in reason


class TestMarketplaceClosures:

    CLOSURE = ClosureWindow(date(2024, 6, 12), date(2024, 6, 14), raison="Inventory")

    @pytest.mark.parametrize("offset", [0, 1, 2])
    def test_every_day_inside_closure_is_unavailable_for_collect(self, evaluator, offset):
        day = self.CLOSURE.debut + timedelta(days=offset)
        assert not evaluator.is_available(day, COLLECT, [make_boutique()], [self.CLOSURE])

    def test_day_after_closure_is_available(self, evaluator):
        assert evaluator.is_available(date(2024, 6, 15), COLLECT, [make_boutique()], [self.CLOSURE])

    def test_supermarket_delivery_blocked(self, evaluator):
        reason = evaluator.refusal(date(2024, 6, 13), SUPERMARCHE, [make_boutique()], [self.CLOSURE])
        assert reason == "The supermarket is closed on this date"

    def test_boutique_delivery_ignores_supermarket_closure(self, evaluator):
        assert evaluator.is_available(date(2024, 6, 13), BOUTIQUE, [make_boutique()], [self.CLOSURE])


class TestCollect:

    def test_every_boutique_needs_click_and_collect(self, evaluator):
        boutiques = [make_boutique("b1"), make_boutique("b2", collect=False)]
        reason = evaluator.refusal(TOMORROW, COLLECT, boutiques, [])
        assert "Boutique b2" in reason

    def test_every_boutique_must_be_open_that_weekday(self, evaluator):
        # TOMORROW is a Tuesday.
        boutiques = [make_boutique("b1"), make_boutique("b2", jours=("lundi",))]
        reason = evaluator.refusal(TOMORROW, COLLECT, boutiques, [])
        assert "mardi" in reason

    def test_boutique_closure_blocks_collect(self, evaluator):
        closed = make_boutique("b2")
        closed.add_closure(ClosureWindow(TOMORROW, TOMORROW))
        assert not evaluator.is_available(TOMORROW, COLLECT, [make_boutique(), closed], [])

    def test_two_open_boutiques(self, evaluator):
        boutiques = [make_boutique("b1"), make_boutique("b2")]
        assert evaluator.is_available(TOMORROW, COLLECT, boutiques, [])


class TestBoutiqueDelivery:

    def test_requires_delivering_boutique(self, evaluator):
        reason = evaluator.refusal(TOMORROW, BOUTIQUE, [make_boutique(livraison=False)], [])
        assert "does not offer home delivery" in reason

    def test_multiple_boutiques_refused(self, evaluator):
        reason = evaluator.refusal(TOMORROW, BOUTIQUE, [make_boutique("b1"), make_boutique("b2")], [])
        assert "same boutique" in reason

    def test_closed_weekday_refused(self, evaluator):
        reason = evaluator.refusal(TOMORROW, BOUTIQUE, [make_boutique(jours=("lundi",))], [])
        assert "closed on mardi" in reason

    def test_closure_scoped_to_collect_does_not_block_delivery(self, evaluator):
        boutique = make_boutique()
        boutique.add_closure(ClosureWindow(TOMORROW, TOMORROW, scope=COLLECT))
        assert evaluator.is_available(TOMORROW, BOUTIQUE, [boutique], [])


class TestNextAvailable:

    def test_skips_closed_days(self, evaluator):
        boutique = make_boutique(jours=("jeudi",))
        found = evaluator.next_available(TODAY, COLLECT, [boutique], [])
        assert found == date(2024, 6, 13)

    def test_result_is_available_and_after_start(self, evaluator):
        closures = [ClosureWindow(date(2024, 6, 11), date(2024, 6, 20))]
        boutiques = [make_boutique(jours=("mercredi", "samedi"))]
        found = evaluator.next_available(TODAY, COLLECT, boutiques, closures)
        assert found is not None
        assert found > TODAY
        assert evaluator.is_available(found, COLLECT, boutiques, closures)
        assert found == date(2024, 6, 22)

    def test_none_when_nothing_in_horizon(self, evaluator):
        boutique = make_boutique(collect=False)
        assert evaluator.next_available(TODAY, COLLECT, [boutique], []) is None

    def test_horizon_is_respected(self):
        closures = [ClosureWindow(date(2024, 6, 11), date(2024, 6, 30))]
        short = EligibilityEvaluator(TODAY, horizon_days=10)
        assert short.next_available(TODAY, COLLECT, [make_boutique()], closures) is None
        assert short.next_available(TODAY, COLLECT, [make_boutique()], closures,
                                    horizon_days=30) == date(2024, 7, 1)
