"""Abstract repository for Boutique aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from marketorders.domain.model.boutique import Boutique


class BoutiqueRepository(ABC):

    @abstractmethod
    def get_by_id(self, boutique_id: str) -> Boutique | None:
        """Return a boutique by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Boutique]:
        """Return every boutique."""

    @abstractmethod
    def save(self, boutique: Boutique) -> None:
        """Persist a new or updated boutique."""
