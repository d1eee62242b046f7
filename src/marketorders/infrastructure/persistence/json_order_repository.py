"""JSON-file-backed implementation of OrderRepository.

Each order carries a ``version``.  ``save`` refuses to overwrite a stored
order whose version differs from the one that was loaded, so two actors
acting on the same order cannot silently overwrite each other.  The
check, the id assignment and the write all happen under the file lock.
"""

from __future__ import annotations

import logging
from datetime import date, datetime

from marketorders.domain.exceptions import DependencyError
from marketorders.domain.model.order import (
    BoutiqueLot,
    DepotEntrepot,
    ItemLine,
    Order,
    Payment,
)
from marketorders.domain.model.status import (
    DeliveryMethod,
    ItemStatus,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from marketorders.domain.model.value_objects import Quantity
from marketorders.domain.repository.order_repository import OrderRepository
from marketorders.infrastructure.persistence.json_file import JsonFileStore
from marketorders.infrastructure.persistence.serialization import (
    applied_fee_from_raw,
    applied_fee_to_raw,
    datetime_from_raw,
    datetime_to_raw,
    money_from_raw,
    money_to_raw,
)

logger = logging.getLogger(__name__)


class JsonOrderRepository(JsonFileStore, OrderRepository):

    # --- OrderRepository interface --------------------------------------------

    def count(self) -> int:
        return len(self._load_raw())

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._load_raw():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Order]:
        return self._newest_first(self._to_domain(raw) for raw in self._load_raw())

    def list_for_client(self, client_id: str) -> list[Order]:
        return self._newest_first(
            self._to_domain(raw) for raw in self._load_raw()
            if raw["client_id"] == client_id
        )

    def list_for_boutique(self, boutique_id: str) -> list[Order]:
        return self._newest_first(
            self._to_domain(raw) for raw in self._load_raw()
            if any(lot["boutique_id"] == boutique_id for lot in raw["boutiques"])
        )

    def save(self, order: Order) -> None:
        with self._lock():
            orders = self._load_raw()

            new_id = None
            if order.id is None:
                new_id = max((o["id"] for o in orders), default=0) + 1

            # Upsert: replace if exists, otherwise append
            index = None
            for i, raw in enumerate(orders):
                if raw["id"] == order.id:
                    index = i
                    break
            if index is not None and orders[index].get("version", 0) != order.version:
                logger.warning("Stale write refused for order #%s (stored v%s, loaded v%s)",
                               order.id, orders[index].get("version", 0), order.version)
                raise DependencyError(
                    f"Order #{order.id} was modified by someone else, reload and retry"
                )

            raw_order = self._to_raw(order)
            if new_id is not None:
                raw_order["id"] = new_id
            raw_order["version"] = order.version + 1
            if index is None:
                orders.append(raw_order)
            else:
                orders[index] = raw_order

            self._persist_raw(orders)

        if new_id is not None:
            order.id = new_id
        order.version += 1

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "numero_commande": order.numero_commande,
            "client_id": order.client_id,
            "typedelivery": order.typedelivery.value,
            "date_livraison": order.date_livraison.isoformat(),
            "adresse_livraison": order.adresse_livraison,
            "notes": order.notes,
            "status_livraison": order.status_livraison.value,
            "frais_livraison": applied_fee_to_raw(order.frais_livraison),
            "paiement": {
                "methode": order.paiement.methode.value,
                "statut": order.paiement.statut.value,
                "montant_paye": (
                    money_to_raw(order.paiement.montant_paye)
                    if order.paiement.montant_paye is not None else None
                ),
                "date_paiement": datetime_to_raw(order.paiement.date_paiement),
            },
            "boutiques": [
                {
                    "boutique_id": lot.boutique_id,
                    "nom": lot.nom,
                    "status": lot.status.value,
                    "est_accepte": lot.est_accepte,
                    "date_acceptation": datetime_to_raw(lot.date_acceptation),
                    "depot_entrepot": {
                        "est_fait": lot.depot_entrepot.est_fait,
                        "date_depot": datetime_to_raw(lot.depot_entrepot.date_depot),
                        "date_validation": datetime_to_raw(lot.depot_entrepot.date_validation),
                        "admin_id": lot.depot_entrepot.admin_id,
                    },
                    "items": [
                        {
                            "produit_id": item.produit_id,
                            "nom_produit": item.nom_produit,
                            "prix_unitaire": money_to_raw(item.prix_unitaire),
                            "quantite": item.quantite.value,
                            "status": item.status.value,
                            "variation_id": item.variation_id,
                        }
                        for item in lot.items
                    ],
                }
                for lot in order.boutiques
            ],
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        lots = [
            BoutiqueLot(
                boutique_id=lot["boutique_id"],
                nom=lot["nom"],
                status=OrderStatus(lot["status"]),
                est_accepte=lot["est_accepte"],
                date_acceptation=datetime_from_raw(lot.get("date_acceptation")),
                depot_entrepot=DepotEntrepot(
                    est_fait=lot["depot_entrepot"]["est_fait"],
                    date_depot=datetime_from_raw(lot["depot_entrepot"].get("date_depot")),
                    date_validation=datetime_from_raw(
                        lot["depot_entrepot"].get("date_validation")
                    ),
                    admin_id=lot["depot_entrepot"].get("admin_id"),
                ),
                items=[
                    ItemLine(
                        produit_id=i["produit_id"],
                        nom_produit=i["nom_produit"],
                        prix_unitaire=money_from_raw(i["prix_unitaire"]),
                        quantite=Quantity(i["quantite"]),
                        status=ItemStatus(i["status"]),
                        variation_id=i.get("variation_id"),
                    )
                    for i in lot["items"]
                ],
            )
            for lot in raw["boutiques"]
        ]
        paiement = raw["paiement"]
        return Order(
            id=raw["id"],
            numero_commande=raw["numero_commande"],
            client_id=raw["client_id"],
            typedelivery=DeliveryMethod(raw["typedelivery"]),
            date_livraison=date.fromisoformat(raw["date_livraison"]),
            boutiques=lots,
            paiement=Payment(
                methode=PaymentMethod(paiement["methode"]),
                statut=PaymentStatus(paiement["statut"]),
                montant_paye=(
                    money_from_raw(paiement["montant_paye"])
                    if paiement.get("montant_paye") else None
                ),
                date_paiement=datetime_from_raw(paiement.get("date_paiement")),
            ),
            frais_livraison=applied_fee_from_raw(raw["frais_livraison"]),
            adresse_livraison=raw.get("adresse_livraison", ""),
            notes=raw.get("notes", ""),
            status_livraison=OrderStatus(raw["status_livraison"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
            version=raw.get("version", 0),
        )

    @staticmethod
    def _newest_first(orders) -> list[Order]:
        return sorted(orders, key=lambda o: (o.created_at, o.id), reverse=True)
