"""Unit tests for the shared guard function."""

from copy import deepcopy

import pytest

from marketorders.domain.model.actor import Actor
from marketorders.domain.model.permissions import (
    LOT_TRANSITIONS,
    Action,
    can_perform,
    refusal,
    target_status,
)
from marketorders.domain.model.status import DeliveryMethod, OrderStatus
from tests.builders import make_item, make_lot, make_order

ADMIN = Actor.admin()
CLIENT = Actor.client("c1")
B1 = Actor.boutique("u1", "b1")
B2 = Actor.boutique("u2", "b2")


class TestTransitionTable:

    def test_every_action_has_a_transition(self):
        assert set(LOT_TRANSITIONS) == set(Action)

    def test_terminal_states_are_never_a_source(self):
        for sources, _ in LOT_TRANSITIONS.values():
            assert OrderStatus.LIVREE not in sources
            assert OrderStatus.ANNULEE not in sources

    def test_targets(self):
        assert target_status(Action.ACCEPT) is OrderStatus.EN_PREPARATION
        assert target_status(Action.CONFIRM_DEPOT) is OrderStatus.PRET_A_COLLECTE
        assert target_status(Action.CANCEL_ORDER) is OrderStatus.ANNULEE

    def test_deposit_target_depends_on_method(self):
        assert (target_status(Action.CONFIRM_DEPOT, DeliveryMethod.COLLECT)
                is OrderStatus.PRET_A_COLLECTE)
        assert (target_status(Action.CONFIRM_DEPOT, DeliveryMethod.LIVRAISON_SUPERMARCHE)
                is OrderStatus.EN_LIVRAISON)


class TestCanPerform:

    def test_dry_run_does_not_mutate(self):
        order = make_order()
        before = deepcopy(order)
        for action in Action:
            for actor in (ADMIN, CLIENT, B1, B2):
                can_perform(actor, action, order, order.boutiques[0], order.boutiques[0].items[0])
        assert order == before

    def test_matches_aggregate_for_accept(self):
        order = make_order()
        lot = order.boutiques[0]
        assert can_perform(B1, Action.ACCEPT, order, lot)
        assert can_perform(ADMIN, Action.ACCEPT, order, lot)
        assert not can_perform(CLIENT, Action.ACCEPT, order, lot)
        assert not can_perform(B2, Action.ACCEPT, order, lot)

    def test_mark_depot_not_offered_for_boutique_delivery(self):
        order = make_order(DeliveryMethod.LIVRAISON_BOUTIQUE)
        order.accept(B1)
        reason = refusal(B1, Action.MARK_DEPOT, order, order.boutiques[0])
        assert "do not go through the warehouse" in reason

    def test_client_cancel_blocked_by_any_validated_lot(self):
        order = make_order(lots=[make_lot("b1"), make_lot("b2", [make_item("p2")])])
        order.accept(B1)
        order.confirm_depot(ADMIN, "b1")
        assert not can_perform(CLIENT, Action.CANCEL_ORDER, order)
        assert can_perform(B2, Action.CANCEL_ORDER, order, order.boutiques[1])
        assert can_perform(ADMIN, Action.CANCEL_ORDER, order)

    @pytest.mark.parametrize("action", list(Action))
    def test_nothing_allowed_on_a_delivered_order(self, action):
        order = make_order()
        order.accept(B1)
        order.confirm_depot(ADMIN, "b1")
        order.confirm_final(CLIENT)
        lot = order.boutiques[0]
        for actor in (ADMIN, CLIENT, B1):
            assert not can_perform(actor, action, order, lot, lot.items[0])
