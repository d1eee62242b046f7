"""CLI commands for marketplace-wide delivery settings."""

from __future__ import annotations

import click

from marketorders.application.marketplace import MarketplaceHandler
from marketorders.config import get_settings
from marketorders.domain.exceptions import DomainException
from marketorders.domain.model.status import DeliveryMethod
from marketorders.infrastructure.bootstrap import marketplace_repository
from marketorders.infrastructure.cli.options import DAY, FEE_TYPE, METHOD, as_date


@click.command("set-fee")
@click.option("--amount", required=True, help="Flat amount or percentage.")
@click.option("--type", "fee_type", type=FEE_TYPE, default="fixe", show_default=True)
def market_set_fee(amount: str, fee_type: str) -> None:
    """Set the supermarket delivery fee."""
    try:
        schedule = MarketplaceHandler(marketplace_repository()).set_fee(amount, fee_type)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Supermarket delivery fee set to {schedule.montant} ({schedule.type.value}).")


@click.command("close")
@click.option("--from", "debut", required=True, type=DAY, help="First closed day (YYYY-MM-DD).")
@click.option("--to", "fin", required=True, type=DAY, help="Last closed day (YYYY-MM-DD).")
@click.option("--reason", default="", help="Reason shown to clients.")
@click.option("--scope", default=None, type=METHOD, help="Only close this delivery method.")
@click.option("--yearly", is_flag=True, default=False, help="Repeat every year.")
def market_close(debut, fin, reason: str, scope: str | None, yearly: bool) -> None:
    """Add a supermarket closure window."""
    try:
        closure = MarketplaceHandler(marketplace_repository()).add_closure(
            as_date(debut), as_date(fin), reason,
            DeliveryMethod(scope) if scope else None, yearly,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Supermarket closed from {closure.debut} to {closure.fin}.")


@click.command("show")
def market_show() -> None:
    """Show the supermarket delivery settings."""
    try:
        settings = MarketplaceHandler(marketplace_repository()).show()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if settings.fee_schedule is None:
        click.echo(f"Delivery fee:  {get_settings().default_market_fee} (fixe, default)")
    else:
        fee = settings.fee_schedule
        click.echo(f"Delivery fee:  {fee.montant} ({fee.type.value})")
    if not settings.closures:
        click.echo("No closures.")
    for c in settings.closures:
        scope = c.scope.value if c.scope else "all"
        yearly = ", yearly" if c.annuel else ""
        click.echo(f"Closed:        {c.debut} -> {c.fin} ({scope}{yearly}) {c.raison}")
