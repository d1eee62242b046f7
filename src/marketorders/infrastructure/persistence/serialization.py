"""Raw (JSON-ready) forms of the value objects shared by several repositories."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from marketorders.domain.model.calendar import ClosureWindow
from marketorders.domain.model.fees import AppliedFee, FeeSchedule, FeeType
from marketorders.domain.model.status import DeliveryMethod
from marketorders.domain.model.value_objects import DEFAULT_CURRENCY, Money


def money_to_raw(money: Money) -> dict:
    return {"amount": str(money.amount), "currency": money.currency}


def money_from_raw(raw: dict) -> Money:
    return Money(Decimal(raw["amount"]), raw.get("currency", DEFAULT_CURRENCY))


def datetime_to_raw(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def datetime_from_raw(raw: str | None) -> datetime | None:
    return datetime.fromisoformat(raw) if raw else None


def fee_to_raw(schedule: FeeSchedule | None) -> dict | None:
    if schedule is None:
        return None
    return {"montant": str(schedule.montant), "type": schedule.type.value}


def fee_from_raw(raw: dict | None) -> FeeSchedule | None:
    if raw is None:
        return None
    return FeeSchedule(Decimal(raw["montant"]), FeeType(raw["type"]))


def applied_fee_to_raw(fee: AppliedFee) -> dict:
    return {
        "type": fee.type.value,
        "valeur": str(fee.valeur),
        "montant": money_to_raw(fee.montant),
    }


def applied_fee_from_raw(raw: dict) -> AppliedFee:
    return AppliedFee(
        FeeType(raw["type"]), Decimal(raw["valeur"]), money_from_raw(raw["montant"])
    )


def closure_to_raw(closure: ClosureWindow) -> dict:
    return {
        "debut": closure.debut.isoformat(),
        "fin": closure.fin.isoformat(),
        "raison": closure.raison,
        "scope": closure.scope.value if closure.scope else None,
        "annuel": closure.annuel,
        "est_active": closure.est_active,
    }


def closure_from_raw(raw: dict) -> ClosureWindow:
    return ClosureWindow(
        debut=date.fromisoformat(raw["debut"]),
        fin=date.fromisoformat(raw["fin"]),
        raison=raw.get("raison", ""),
        scope=DeliveryMethod(raw["scope"]) if raw.get("scope") else None,
        annuel=raw.get("annuel", False),
        est_active=raw.get("est_active", True),
    )
