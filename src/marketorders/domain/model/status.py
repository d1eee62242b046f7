"""Enumerations describing how an order is delivered and where it stands."""

from __future__ import annotations

from enum import Enum


class DeliveryMethod(Enum):
    COLLECT = "collect"
    LIVRAISON_SUPERMARCHE = "livraison_supermarche"
    LIVRAISON_BOUTIQUE = "livraison_boutique"

    @property
    def uses_warehouse(self) -> bool:
        """Lots travel through the marketplace warehouse (deposit flow)."""
        return self in (DeliveryMethod.COLLECT, DeliveryMethod.LIVRAISON_SUPERMARCHE)

    @property
    def requires_address(self) -> bool:
        return self is not DeliveryMethod.COLLECT


class OrderStatus(Enum):
    """Status vocabulary shared by orders and their boutique lots."""

    EN_ATTENTE = "en_attente"
    EN_PREPARATION = "en_preparation"
    PRET_A_COLLECTE = "pret_a_collecte"
    PEUT_ETRE_COLLECTE = "peut_etre_collecte"
    EN_LIVRAISON = "en_livraison"
    LIVREE = "livree"
    ANNULEE = "annulee"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.LIVREE, OrderStatus.ANNULEE)


class ItemStatus(Enum):
    ACTIVE = "active"
    ANNULEE = "annulee"


class PaymentMethod(Enum):
    CARTE = "carte"
    ESPECES = "especes"
    VIREMENT = "virement"


class PaymentStatus(Enum):
    NON_PAYE = "non_paye"
    PAYE = "paye"
