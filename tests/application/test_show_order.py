"""Tests for the order read side: labels, access and permission flags."""

from datetime import datetime, timedelta, timezone

import pytest

from marketorders.application.show_order import (
    ListOrdersHandler,
    ShowOrderHandler,
    status_color,
    status_label,
)
from marketorders.domain.exceptions import EntityNotFoundError, GuardViolationError
from marketorders.domain.model.actor import Actor
from marketorders.domain.model.status import DeliveryMethod, OrderStatus
from tests.builders import make_item, make_lot, make_order
from tests.fakes import FakeOrderRepository

ADMIN = Actor.admin()
CLIENT = Actor.client("c1")
B1 = Actor.boutique("u1", "b1")
B2 = Actor.boutique("u2", "b2")


def _two_lot_order(**kwargs):
    return make_order(lots=[
        make_lot("b1", [make_item("p1", "10000", 2)]),
        make_lot("b2", [make_item("p2", "3000", 1)]),
    ], **kwargs)


class TestStatusPresentation:

    @pytest.mark.parametrize("status, color", [
        (OrderStatus.EN_ATTENTE, "warning"),
        (OrderStatus.EN_PREPARATION, "primary"),
        (OrderStatus.EN_LIVRAISON, "accent"),
        (OrderStatus.PEUT_ETRE_COLLECTE, "warn"),
        (OrderStatus.PRET_A_COLLECTE, "success"),
        (OrderStatus.LIVREE, "success"),
        (OrderStatus.ANNULEE, "danger"),
    ])
    def test_colors(self, status, color):
        assert status_color(status) == color

    def test_label(self):
        assert status_label(OrderStatus.PEUT_ETRE_COLLECTE) == "PEUT ETRE COLLECTE"


class TestShowOrder:

    def test_client_sees_own_order(self):
        repo = FakeOrderRepository([_two_lot_order()])
        dto = ShowOrderHandler(repo).handle(1, CLIENT)

        assert dto.numero_commande == "CMD1000000001"
        assert dto.status_label == "EN ATTENTE"
        assert dto.status_color == "warning"
        assert [lot.subtotal for lot in dto.lots] == ["20000.00 MGA", "3000.00 MGA"]
        assert dto.lots[0].items[0].line_total == "20000.00 MGA"

    def test_other_client_is_denied(self):
        repo = FakeOrderRepository([_two_lot_order()])
        with pytest.raises(GuardViolationError, match="Access denied"):
            ShowOrderHandler(repo).handle(1, Actor.client("someone-else"))

    def test_boutique_outside_order_is_denied(self):
        repo = FakeOrderRepository([make_order()])
        with pytest.raises(GuardViolationError, match="Access denied"):
            ShowOrderHandler(repo).handle(1, B2)

    def test_missing_order(self):
        with pytest.raises(EntityNotFoundError):
            ShowOrderHandler(FakeOrderRepository()).handle(42, ADMIN)


class TestPermissionFlags:

    def test_pending_order_for_each_actor(self):
        repo = FakeOrderRepository([_two_lot_order()])
        handler = ShowOrderHandler(repo)

        client_view = handler.handle(1, CLIENT)
        assert client_view.can_cancel
        assert not client_view.can_confirm_final
        assert all(lot.allowed_actions == [] for lot in client_view.lots)
        assert all(item.can_cancel for lot in client_view.lots for item in lot.items)

        boutique_view = handler.handle(1, B1)
        assert boutique_view.lots[0].allowed_actions == ["accept"]
        assert boutique_view.lots[0].can_cancel
        assert boutique_view.lots[1].allowed_actions == []
        assert not boutique_view.lots[1].can_cancel
        assert not boutique_view.lots[1].items[0].can_cancel

        admin_view = handler.handle(1, ADMIN)
        assert admin_view.can_cancel
        assert admin_view.lots[0].allowed_actions == ["accept"]
        assert not admin_view.lots[0].items[0].can_cancel

    def test_accepted_warehouse_lot_offers_deposit_actions(self):
        order = _two_lot_order()
        order.accept(B1)
        repo = FakeOrderRepository([order])

        boutique_view = ShowOrderHandler(repo).handle(1, B1)
        assert boutique_view.lots[0].allowed_actions == ["mark_depot"]
        admin_view = ShowOrderHandler(repo).handle(1, ADMIN)
        assert admin_view.lots[0].allowed_actions == ["confirm_depot"]

    def test_boutique_delivery_offers_direct_delivery(self):
        order = make_order(DeliveryMethod.LIVRAISON_BOUTIQUE)
        order.accept(B1)
        repo = FakeOrderRepository([order])

        view = ShowOrderHandler(repo).handle(1, B1)
        assert view.lots[0].allowed_actions == ["start_delivery"]

    def test_validated_deposit_locks_client_cancellation(self):
        order = _two_lot_order()
        order.accept(B1)
        order.confirm_depot(ADMIN, "b1")
        repo = FakeOrderRepository([order])

        client_view = ShowOrderHandler(repo).handle(1, CLIENT)
        assert not client_view.can_cancel
        assert not client_view.lots[0].items[0].can_cancel
        assert client_view.lots[1].items[0].can_cancel
        assert ShowOrderHandler(repo).handle(1, B2).lots[1].can_cancel

    def test_ready_order_offers_final_confirmation(self):
        order = make_order()
        order.accept(B1)
        order.confirm_depot(ADMIN, "b1")
        repo = FakeOrderRepository([order])

        view = ShowOrderHandler(repo).handle(1, CLIENT)
        assert view.status == "peut_etre_collecte"
        assert view.can_confirm_final

    def test_delivered_order_offers_nothing(self):
        order = make_order()
        order.accept(B1)
        order.confirm_depot(ADMIN, "b1")
        order.confirm_final(CLIENT)
        repo = FakeOrderRepository([order])

        for actor in (ADMIN, CLIENT, B1):
            view = ShowOrderHandler(repo).handle(1, actor)
            assert not view.can_cancel
            assert not view.can_confirm_final
            assert view.lots[0].allowed_actions == []
            assert not view.lots[0].can_cancel


class TestListOrders:

    def _repo(self) -> FakeOrderRepository:
        base = datetime(2024, 6, 10, 8, 0, tzinfo=timezone.utc)
        first = make_order()
        first.created_at = base
        second = make_order(lots=[make_lot("b2")], client_id="c2")
        second.created_at = base + timedelta(hours=1)
        third = _two_lot_order()
        third.created_at = base + timedelta(hours=2)
        return FakeOrderRepository([first, second, third])

    def test_admin_sees_everything_newest_first(self):
        summaries = ListOrdersHandler(self._repo()).handle(ADMIN)
        assert [s.id for s in summaries] == [3, 2, 1]

    def test_client_sees_own_orders(self):
        summaries = ListOrdersHandler(self._repo()).handle(CLIENT)
        assert [s.id for s in summaries] == [3, 1]

    def test_boutique_sees_orders_with_its_lot(self):
        summaries = ListOrdersHandler(self._repo()).handle(B2)
        assert [s.id for s in summaries] == [3, 2]
        assert summaries[0].boutiques == ["Boutique b1", "Boutique b2"]
