"""Integration tests for the Checkout use case.

Uses in-memory fake repositories — no file I/O.
"""

from datetime import date, timedelta

import pytest

from marketorders.application.notifier import OrderNotifier
from marketorders.application.submit_checkout import SubmitCheckoutHandler
from marketorders.domain.exceptions import (
    DependencyError,
    EligibilityError,
    EntityNotFoundError,
    ValidationError,
)
from marketorders.domain.model.boutique import Boutique, BoutiqueStatus
from marketorders.domain.model.calendar import ClosureWindow
from marketorders.domain.model.cart import Cart
from marketorders.domain.model.fees import FeeSchedule
from marketorders.domain.model.status import DeliveryMethod, PaymentMethod
from marketorders.domain.service.fee_calculator import FeeCalculator
from tests.builders import TODAY, make_boutique, make_cart
from tests.fakes import (
    FailingNotificationRepository,
    FailingOrderRepository,
    FakeBoutiqueRepository,
    FakeCartRepository,
    FakeMarketplaceRepository,
    FakeNotificationRepository,
    FakeOrderRepository,
    UndeletableCartRepository,
)

TOMORROW = TODAY + timedelta(days=1)
ADDRESS = "Lot II A 12 Antananarivo"


class _World:
    """Handler plus the fake repositories behind it."""

    def __init__(
        self,
        cart: Cart | None = None,
        boutiques: list[Boutique] | None = None,
        market_fee: FeeSchedule | None = None,
        closures: list[ClosureWindow] | None = None,
        notifications: FakeNotificationRepository | None = None,
        orders: FakeOrderRepository | None = None,
        cart_repo: type[FakeCartRepository] = FakeCartRepository,
    ) -> None:
        self.orders = orders if orders is not None else FakeOrderRepository()
        self.carts = cart_repo([cart or make_cart()])
        self.boutiques = FakeBoutiqueRepository(
            boutiques if boutiques is not None else [make_boutique("b1")]
        )
        self.market = FakeMarketplaceRepository(market_fee, closures)
        self.notifications = notifications or FakeNotificationRepository()
        self.handler = SubmitCheckoutHandler(
            order_repo=self.orders,
            cart_repo=self.carts,
            boutique_repo=self.boutiques,
            marketplace_repo=self.market,
            fee_calculator=FeeCalculator(FeeSchedule.of("5000")),
            notifier=OrderNotifier(self.notifications),
            today=lambda: TODAY,
        )


def _two_shop_world(**kwargs) -> _World:
    cart = make_cart(lines=[("p1", "b1", "10000", 2), ("p2", "b2", "4000", 1)])
    return _World(cart=cart, boutiques=[make_boutique("b1"), make_boutique("b2")], **kwargs)


class TestCheckoutHappyPath:

    def test_two_shops_collect_tomorrow(self):
        world = _two_shop_world()
        dto = world.handler.handle("c1", DeliveryMethod.COLLECT, TOMORROW)

        assert dto.status == "en_attente"
        assert [lot.boutique_id for lot in dto.lots] == ["b1", "b2"]
        assert all(lot.status == "en_attente" for lot in dto.lots)
        assert dto.total == "24000.00 MGA"
        assert dto.frais_livraison == "0.00 MGA"

    def test_persists_order_and_clears_cart(self):
        world = _two_shop_world()
        dto = world.handler.handle("c1", DeliveryMethod.COLLECT, TOMORROW)

        saved = world.orders.get_by_id(dto.id)
        assert saved is not None
        assert saved.client_id == "c1"
        assert saved.numero_commande.startswith("CMD")
        assert saved.numero_commande.endswith("000001")
        assert world.carts.get_for_client("c1") is None

    def test_prices_are_snapshotted_from_cart(self):
        world = _World(cart=make_cart(lines=[("p1", "b1", "7500", 2)]))
        dto = world.handler.handle("c1", DeliveryMethod.COLLECT, TOMORROW)
        assert dto.lots[0].items[0].prix_unitaire == "7500.00 MGA"
        assert dto.base_total == "15000.00 MGA"

    def test_supermarket_delivery_percentage_fee(self):
        world = _World(cart=make_cart(lines=[("p1", "b1", "1000", 1)]),
                       market_fee=FeeSchedule.of("10", "pourcentage"))
        dto = world.handler.handle("c1", DeliveryMethod.LIVRAISON_SUPERMARCHE, TOMORROW,
                                   adresse=ADDRESS, paiement_methode=PaymentMethod.CARTE)
        assert dto.frais_livraison == "100.00 MGA"
        assert dto.total == "1100.00 MGA"
        assert dto.adresse_livraison == ADDRESS
        assert dto.paiement_methode == "carte"

    def test_supermarket_delivery_uses_fallback_fee(self):
        world = _World()
        dto = world.handler.handle("c1", DeliveryMethod.LIVRAISON_SUPERMARCHE, TOMORROW,
                                   adresse=ADDRESS)
        assert dto.frais_livraison == "5000.00 MGA"

    def test_boutique_delivery_uses_boutique_fee(self):
        world = _World(boutiques=[make_boutique("b1", fee=FeeSchedule.of("2000"))])
        dto = world.handler.handle("c1", DeliveryMethod.LIVRAISON_BOUTIQUE, TOMORROW,
                                   adresse=ADDRESS)
        assert dto.frais_livraison == "2000.00 MGA"

    def test_same_day_boutique_delivery_when_accepted(self):
        world = _World(boutiques=[make_boutique("b1", jour_j=True)])
        dto = world.handler.handle("c1", DeliveryMethod.LIVRAISON_BOUTIQUE, TODAY,
                                   adresse=ADDRESS)
        assert dto.date_livraison == TODAY.isoformat()

    def test_notifies_client_boutiques_and_admins(self):
        world = _two_shop_world()
        world.handler.handle("c1", DeliveryMethod.COLLECT, TOMORROW)
        recipients = sorted(n.recipient for n in world.notifications.all())
        assert recipients == ["admin", "boutique:b1", "boutique:b2", "c1"]

    def test_notification_outage_does_not_fail_checkout(self):
        world = _World(notifications=FailingNotificationRepository())
        dto = world.handler.handle("c1", DeliveryMethod.COLLECT, TOMORROW)
        assert world.orders.get_by_id(dto.id) is not None


class TestCheckoutGates:

    def test_empty_cart_rejected(self):
        world = _World(cart=Cart(client_id="c1"))
        with pytest.raises(ValidationError, match="cart is empty"):
            world.handler.handle("c1", DeliveryMethod.COLLECT, TOMORROW)

    def test_unknown_client_has_empty_cart(self):
        world = _World()
        with pytest.raises(ValidationError, match="cart is empty"):
            world.handler.handle("someone-else", DeliveryMethod.COLLECT, TOMORROW)

    @pytest.mark.parametrize("adresse", [None, "", "   "])
    def test_delivery_requires_address(self, adresse):
        world = _World()
        with pytest.raises(ValidationError, match="delivery address"):
            world.handler.handle("c1", DeliveryMethod.LIVRAISON_SUPERMARCHE, TOMORROW,
                                 adresse=adresse)

    def test_collect_needs_no_address(self):
        dto = _World().handler.handle("c1", DeliveryMethod.COLLECT, TOMORROW)
        assert dto.adresse_livraison == "Retrait en entrepôt"

    def test_multi_shop_boutique_delivery_rejected_upfront(self):
        world = _two_shop_world()
        with pytest.raises(ValidationError, match="same boutique") as exc_info:
            world.handler.handle("c1", DeliveryMethod.LIVRAISON_BOUTIQUE, TOMORROW,
                                 adresse=ADDRESS)
        assert not isinstance(exc_info.value, EligibilityError)

    def test_unknown_boutique_rejected(self):
        world = _World(boutiques=[])
        with pytest.raises(EntityNotFoundError, match="Boutique not found"):
            world.handler.handle("c1", DeliveryMethod.COLLECT, TOMORROW)

    def test_inactive_boutique_rejected(self):
        world = _World(boutiques=[make_boutique("b1", status=BoutiqueStatus.SUSPENDUE)])
        with pytest.raises(ValidationError, match="not accepting orders"):
            world.handler.handle("c1", DeliveryMethod.COLLECT, TOMORROW)

    def test_same_day_without_flag_suggests_next_date(self):
        world = _World(boutiques=[make_boutique("b1", jour_j=False)])
        with pytest.raises(EligibilityError) as exc_info:
            world.handler.handle("c1", DeliveryMethod.LIVRAISON_BOUTIQUE, TODAY,
                                 adresse=ADDRESS)

        error = exc_info.value
        assert error.suggested_date is not None
        assert TODAY < error.suggested_date <= TODAY + timedelta(days=60)
        assert error.suggested_date.isoformat() in str(error)

    def test_no_suggestion_when_nothing_is_available(self):
        world = _World(boutiques=[make_boutique("b1", collect=False)])
        with pytest.raises(EligibilityError) as exc_info:
            world.handler.handle("c1", DeliveryMethod.COLLECT, TOMORROW)
        assert exc_info.value.suggested_date is None

    def test_marketplace_closure_rejected(self):
        closure = ClosureWindow(TOMORROW, TOMORROW + timedelta(days=2))
        world = _World(closures=[closure])
        with pytest.raises(EligibilityError) as exc_info:
            world.handler.handle("c1", DeliveryMethod.COLLECT, TOMORROW)
        assert exc_info.value.suggested_date == date(2024, 6, 14)

    def test_refused_checkout_changes_nothing(self):
        world = _World(boutiques=[make_boutique("b1", jour_j=False)])
        with pytest.raises(EligibilityError):
            world.handler.handle("c1", DeliveryMethod.LIVRAISON_BOUTIQUE, TODAY,
                                 adresse=ADDRESS)
        assert world.orders.count() == 0
        assert world.carts.get_for_client("c1") is not None
        assert world.notifications.all() == []


class TestCheckoutStorageFailures:

    def test_cart_store_failure_saves_no_order(self):
        world = _World(cart_repo=UndeletableCartRepository)
        for _ in range(2):
            with pytest.raises(DependencyError):
                world.handler.handle("c1", DeliveryMethod.COLLECT, TOMORROW)
        assert world.orders.count() == 0
        assert world.carts.get_for_client("c1") is not None
        assert world.notifications.all() == []

    def test_order_store_failure_restores_cart(self):
        world = _World(orders=FailingOrderRepository())
        with pytest.raises(DependencyError):
            world.handler.handle("c1", DeliveryMethod.COLLECT, TOMORROW)
        cart = world.carts.get_for_client("c1")
        assert cart is not None
        assert not cart.is_empty
        assert world.notifications.all() == []
