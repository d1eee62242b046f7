"""Calendar value objects: weekdays, opening hours and closure windows.

All comparisons are made at day granularity. A datetime is reduced to its
calendar day before it is compared with a window.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from marketorders.domain.exceptions import ValidationError
from marketorders.domain.model.status import DeliveryMethod

# Indexed by ``date.weekday()`` (Monday == 0).
WEEKDAYS = ("lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi", "dimanche")


def as_day(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def weekday_name(value: date | datetime) -> str:
    return WEEKDAYS[as_day(value).weekday()]


@dataclass(frozen=True)
class OpeningHours:
    jour: str
    ouverture: str = ""
    fermeture: str = ""

    def __post_init__(self) -> None:
        if self.jour not in WEEKDAYS:
            raise ValidationError(
                f"Unknown weekday '{self.jour}', expected one of {', '.join(WEEKDAYS)}"
            )


@dataclass(frozen=True)
class ClosureWindow:
    """A period during which a boutique or the marketplace is unavailable.

    ``scope`` limits the window to one delivery method; ``None`` closes
    everything.  An ``annuel`` window repeats every year on the same
    month/day span.
    """

    debut: date
    fin: date
    raison: str = ""
    scope: DeliveryMethod | None = None
    annuel: bool = False
    est_active: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "debut", as_day(self.debut))
        object.__setattr__(self, "fin", as_day(self.fin))
        if self.fin < self.debut:
            raise ValidationError("Closure end date must not be before its start date")

    def applies_to(self, method: DeliveryMethod) -> bool:
        return self.scope is None or self.scope is method

    def covers(self, value: date | datetime) -> bool:
        if not self.est_active:
            return False
        day = as_day(value)
        if not self.annuel:
            return self.debut <= day <= self.fin

        key = (day.month, day.day)
        start = (self.debut.month, self.debut.day)
        end = (self.fin.month, self.fin.day)
        if self.fin.year > self.debut.year and end < start:
            # Wraps over the new year, e.g. 24 Dec -> 2 Jan.
            return key >= start or key <= end
        return start <= key <= end


def is_closed(value: date | datetime, closures: list[ClosureWindow],
              method: DeliveryMethod | None = None) -> bool:
    """True if any window applying to ``method`` covers the day."""
    return any(
        window.covers(value) and (method is None or window.applies_to(method))
        for window in closures
    )
