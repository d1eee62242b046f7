"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.  Amounts are formatted
strings, dates ISO strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ItemLineDTO:
    produit_id: str
    nom_produit: str
    quantite: int
    prix_unitaire: str
    line_total: str
    status: str
    can_cancel: bool = False


@dataclass(frozen=True)
class BoutiqueLotDTO:
    boutique_id: str
    nom: str
    status: str
    status_label: str
    status_color: str
    est_accepte: bool
    depot_fait: bool
    depot_valide: bool
    subtotal: str
    items: list[ItemLineDTO]
    can_cancel: bool = False
    allowed_actions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to one actor."""

    id: int
    numero_commande: str
    client_id: str
    status: str
    status_label: str
    status_color: str
    typedelivery: str
    date_livraison: str
    adresse_livraison: str
    paiement_methode: str
    paiement_statut: str
    base_total: str
    frais_livraison: str
    total: str
    notes: str
    created_at: str
    lots: list[BoutiqueLotDTO]
    can_cancel: bool = False
    can_confirm_final: bool = False


@dataclass(frozen=True)
class OrderSummaryDTO:
    id: int
    numero_commande: str
    client_id: str
    status: str
    status_label: str
    typedelivery: str
    date_livraison: str
    boutiques: list[str]
    total: str
    created_at: str


@dataclass(frozen=True)
class EligibilityDTO:
    available: bool
    reason: str | None = None
    next_available: str | None = None


@dataclass(frozen=True)
class CartLineDTO:
    produit_id: str
    boutique_id: str
    nom_produit: str
    quantite: int
    prix_unitaire: str
    line_total: str
    variation_id: str | None = None


@dataclass(frozen=True)
class CartDTO:
    client_id: str
    items: list[CartLineDTO]
    boutique_count: int
    total: str
