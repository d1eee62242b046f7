"""Delivery fee value objects."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum

from marketorders.domain.exceptions import ValidationError
from marketorders.domain.model.value_objects import Money


class FeeType(Enum):
    FIXE = "fixe"
    POURCENTAGE = "pourcentage"


@dataclass(frozen=True)
class FeeSchedule:
    """A fee rule: a flat amount, or a percentage of the cart total."""

    montant: Decimal
    type: FeeType = FeeType.FIXE

    def __post_init__(self) -> None:
        if not isinstance(self.montant, Decimal):
            raise ValidationError(
                f"Fee amount must be a Decimal, got {type(self.montant).__name__}"
            )
        if self.montant < Decimal("0"):
            raise ValidationError(f"Fee amount cannot be negative, got {self.montant}")

    def amount_for(self, total: Money) -> Money:
        if self.type is FeeType.POURCENTAGE:
            return total.percent(self.montant)
        return Money(self.montant, total.currency)

    @staticmethod
    def of(
        montant: str | int | float | Decimal,
        fee_type: str | FeeType = FeeType.FIXE,
    ) -> FeeSchedule:
        try:
            amount = Decimal(str(montant))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid fee amount: {montant!r}") from exc
        try:
            kind = fee_type if isinstance(fee_type, FeeType) else FeeType(fee_type)
        except ValueError as exc:
            raise ValidationError(f"Unknown fee type: {fee_type!r}") from exc
        return FeeSchedule(amount, kind)

    @staticmethod
    def free() -> FeeSchedule:
        return FeeSchedule(Decimal("0"), FeeType.FIXE)


@dataclass(frozen=True)
class AppliedFee:
    """The fee agreed at checkout, as stored on the order.

    ``valeur`` is the schedule value (flat amount or rate), ``montant`` the
    amount actually charged.
    """

    type: FeeType
    valeur: Decimal
    montant: Money

    def recomputed(self, base_total: Money) -> AppliedFee:
        """Follow a change of the order's base total after cancellations."""
        if base_total.is_zero:
            return AppliedFee(self.type, self.valeur, Money.zero(base_total.currency))
        if self.type is FeeType.POURCENTAGE:
            return AppliedFee(self.type, self.valeur, base_total.percent(self.valeur))
        return self

    @staticmethod
    def none(currency: str) -> AppliedFee:
        return AppliedFee(FeeType.FIXE, Decimal("0"), Money.zero(currency))
