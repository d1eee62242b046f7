"""Abstract repository for marketplace-wide delivery settings."""

from __future__ import annotations

from abc import ABC, abstractmethod

from marketorders.domain.model.calendar import ClosureWindow
from marketorders.domain.model.fees import FeeSchedule


class MarketplaceRepository(ABC):

    @abstractmethod
    def get_fee_schedule(self) -> FeeSchedule | None:
        """Return the supermarket delivery fee schedule, if one is set."""

    @abstractmethod
    def set_fee_schedule(self, schedule: FeeSchedule) -> None:
        """Replace the supermarket delivery fee schedule."""

    @abstractmethod
    def get_closures(self) -> list[ClosureWindow]:
        """Return the supermarket closure windows."""

    @abstractmethod
    def add_closure(self, closure: ClosureWindow) -> None:
        """Add a supermarket closure window."""
