"""JSON-file-backed implementation of MarketplaceRepository."""

from __future__ import annotations

from marketorders.domain.model.calendar import ClosureWindow
from marketorders.domain.model.fees import FeeSchedule
from marketorders.domain.repository.marketplace_repository import MarketplaceRepository
from marketorders.infrastructure.persistence.json_file import JsonFileStore
from marketorders.infrastructure.persistence.serialization import (
    closure_from_raw,
    closure_to_raw,
    fee_from_raw,
    fee_to_raw,
)


class JsonMarketplaceRepository(JsonFileStore, MarketplaceRepository):

    _EMPTY = {"frais_livraison_supermarche": None, "fermetures": []}

    def get_fee_schedule(self) -> FeeSchedule | None:
        return fee_from_raw(self._load_raw().get("frais_livraison_supermarche"))

    def set_fee_schedule(self, schedule: FeeSchedule) -> None:
        with self._lock():
            data = self._load_raw()
            data["frais_livraison_supermarche"] = fee_to_raw(schedule)
            self._persist_raw(data)

    def get_closures(self) -> list[ClosureWindow]:
        return [closure_from_raw(c) for c in self._load_raw().get("fermetures", [])]

    def add_closure(self, closure: ClosureWindow) -> None:
        with self._lock():
            data = self._load_raw()
            data.setdefault("fermetures", []).append(closure_to_raw(closure))
            self._persist_raw(data)
