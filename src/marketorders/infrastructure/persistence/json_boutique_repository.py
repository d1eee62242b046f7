"""JSON-file-backed implementation of BoutiqueRepository."""

from __future__ import annotations

from decimal import Decimal

from marketorders.domain.model.boutique import Boutique, BoutiqueStatus
from marketorders.domain.model.calendar import OpeningHours
from marketorders.domain.repository.boutique_repository import BoutiqueRepository
from marketorders.infrastructure.persistence.json_file import JsonFileStore
from marketorders.infrastructure.persistence.serialization import (
    closure_from_raw,
    closure_to_raw,
    datetime_from_raw,
    datetime_to_raw,
    fee_from_raw,
    fee_to_raw,
)


class JsonBoutiqueRepository(JsonFileStore, BoutiqueRepository):

    def get_by_id(self, boutique_id: str) -> Boutique | None:
        for raw in self._load_raw():
            if raw["id"] == boutique_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Boutique]:
        return [self._to_domain(raw) for raw in self._load_raw()]

    def save(self, boutique: Boutique) -> None:
        with self._lock():
            boutiques = [b for b in self._load_raw() if b["id"] != boutique.id]
            boutiques.append(self._to_raw(boutique))
            boutiques.sort(key=lambda b: b["id"])
            self._persist_raw(boutiques)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(boutique: Boutique) -> dict:
        return {
            "id": boutique.id,
            "nom": boutique.nom,
            "status": boutique.status.value,
            "livraison_status": boutique.livraison_status,
            "click_collect_actif": boutique.click_collect_actif,
            "accepte_livraison_jour_j": boutique.accepte_livraison_jour_j,
            "horaires": [
                {"jour": h.jour, "ouverture": h.ouverture, "fermeture": h.fermeture}
                for h in boutique.horaires
            ],
            "fermetures": [closure_to_raw(c) for c in boutique.fermetures],
            "frais_livraison_data": fee_to_raw(boutique.frais_livraison_data),
            "frais_livraison": (
                str(boutique.frais_livraison)
                if boutique.frais_livraison is not None else None
            ),
            "motif_suspension": boutique.motif_suspension,
            "date_validation": datetime_to_raw(boutique.date_validation),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Boutique:
        return Boutique(
            id=raw["id"],
            nom=raw["nom"],
            status=BoutiqueStatus(raw.get("status", "en_attente")),
            livraison_status=raw.get("livraison_status", False),
            click_collect_actif=raw.get("click_collect_actif", False),
            accepte_livraison_jour_j=raw.get("accepte_livraison_jour_j", False),
            horaires=[OpeningHours(**h) for h in raw.get("horaires", [])],
            fermetures=[closure_from_raw(c) for c in raw.get("fermetures", [])],
            frais_livraison_data=fee_from_raw(raw.get("frais_livraison_data")),
            frais_livraison=(
                Decimal(raw["frais_livraison"])
                if raw.get("frais_livraison") is not None else None
            ),
            motif_suspension=raw.get("motif_suspension"),
            date_validation=datetime_from_raw(raw.get("date_validation")),
        )
