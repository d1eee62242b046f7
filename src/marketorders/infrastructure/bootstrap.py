"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo

from marketorders.application.notifier import OrderNotifier
from marketorders.config import get_settings
from marketorders.domain.model.fees import FeeSchedule
from marketorders.domain.service.fee_calculator import FeeCalculator
from marketorders.infrastructure.persistence.json_boutique_repository import (
    JsonBoutiqueRepository,
)
from marketorders.infrastructure.persistence.json_cart_repository import (
    JsonCartRepository,
)
from marketorders.infrastructure.persistence.json_marketplace_repository import (
    JsonMarketplaceRepository,
)
from marketorders.infrastructure.persistence.json_notification_repository import (
    JsonNotificationRepository,
)
from marketorders.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from marketorders.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format=LOG_FORMAT,
        force=True,
    )


def today() -> date:
    """Current day in the marketplace time zone."""
    return datetime.now(ZoneInfo(get_settings().timezone)).date()


def horizon_days() -> int:
    return get_settings().availability_horizon_days


# --- Repositories -------------------------------------------------------------


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(get_settings().data_dir / "orders.json")


def cart_repository() -> JsonCartRepository:
    return JsonCartRepository(get_settings().data_dir / "carts.json")


def boutique_repository() -> JsonBoutiqueRepository:
    return JsonBoutiqueRepository(get_settings().data_dir / "boutiques.json")


def product_repository() -> JsonProductRepository:
    return JsonProductRepository(get_settings().data_dir / "products.json")


def marketplace_repository() -> JsonMarketplaceRepository:
    return JsonMarketplaceRepository(get_settings().data_dir / "marketplace.json")


def notification_repository() -> JsonNotificationRepository:
    return JsonNotificationRepository(get_settings().data_dir / "notifications.json")


# --- Services -----------------------------------------------------------------


def fee_calculator() -> FeeCalculator:
    return FeeCalculator(FeeSchedule(get_settings().default_market_fee))


def notifier() -> OrderNotifier:
    return OrderNotifier(notification_repository())
