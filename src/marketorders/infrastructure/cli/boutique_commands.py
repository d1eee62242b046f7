"""CLI commands for boutiques: registration, moderation and settings."""

from __future__ import annotations

import click

from marketorders.application.manage_boutique import (
    ConfigureBoutiqueHandler,
    ModerateBoutiqueHandler,
    RegisterBoutiqueHandler,
)
from marketorders.domain.exceptions import DomainException
from marketorders.domain.model.boutique import Boutique
from marketorders.domain.model.calendar import WEEKDAYS
from marketorders.domain.model.status import DeliveryMethod
from marketorders.infrastructure.bootstrap import boutique_repository
from marketorders.infrastructure.cli.options import DAY, FEE_TYPE, METHOD, as_date


def _display_boutique(boutique: Boutique) -> None:
    click.echo(f"Boutique {boutique.id} '{boutique.nom}'  [{boutique.status.value}]")
    if boutique.motif_suspension:
        click.echo(f"Reason:        {boutique.motif_suspension}")
    click.echo(f"Open on:       {', '.join(h.jour for h in boutique.horaires) or '-'}")
    click.echo(f"Home delivery: {'yes' if boutique.livraison_status else 'no'}")
    click.echo(f"Collect:       {'yes' if boutique.click_collect_actif else 'no'}")
    click.echo(f"Same day:      {'yes' if boutique.accepte_livraison_jour_j else 'no'}")
    fee = boutique.delivery_fee_schedule
    click.echo(f"Delivery fee:  {fee.montant} ({fee.type.value})")
    for c in boutique.fermetures:
        scope = c.scope.value if c.scope else "all"
        yearly = ", yearly" if c.annuel else ""
        click.echo(f"Closed:        {c.debut} -> {c.fin} ({scope}{yearly}) {c.raison}")


@click.command("register")
@click.option("--name", required=True, help="Boutique name.")
@click.option("--id", "boutique_id", default=None, help="Boutique id (derived from the name by default).")
@click.option("--day", "jours", multiple=True, type=click.Choice(WEEKDAYS),
              help="Opening day; repeat for each day.")
@click.option("--delivery/--no-delivery", default=False, help="Delivers to clients itself.")
@click.option("--collect/--no-collect", default=False, help="Offers click & collect.")
@click.option("--same-day/--no-same-day", default=False, help="Accepts same-day delivery.")
def boutique_register(name: str, boutique_id: str | None, jours: tuple[str, ...],
                      delivery: bool, collect: bool, same_day: bool) -> None:
    """Register a new boutique (pending approval)."""
    handler = RegisterBoutiqueHandler(boutique_repo=boutique_repository())

    try:
        boutique = handler.handle(name, list(jours), boutique_id, delivery, collect, same_day)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Boutique '{boutique.id}' registered  (status={boutique.status.value})")


@click.command("approve")
@click.option("--id", "boutique_id", required=True, help="Boutique id.")
def boutique_approve(boutique_id: str) -> None:
    """Approve a boutique so it can take orders."""
    try:
        boutique = ModerateBoutiqueHandler(boutique_repository()).approve(boutique_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Boutique '{boutique.id}' is now {boutique.status.value}.")


@click.command("suspend")
@click.option("--id", "boutique_id", required=True, help="Boutique id.")
@click.option("--reason", required=True, help="Why the boutique is suspended.")
def boutique_suspend(boutique_id: str, reason: str) -> None:
    """Suspend a boutique."""
    try:
        boutique = ModerateBoutiqueHandler(boutique_repository()).suspend(boutique_id, reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Boutique '{boutique.id}' is now {boutique.status.value}.")


@click.command("reject")
@click.option("--id", "boutique_id", required=True, help="Boutique id.")
@click.option("--reason", required=True, help="Why the boutique is rejected.")
def boutique_reject(boutique_id: str, reason: str) -> None:
    """Reject a pending boutique."""
    try:
        boutique = ModerateBoutiqueHandler(boutique_repository()).reject(boutique_id, reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Boutique '{boutique.id}' is now {boutique.status.value}.")


@click.command("close")
@click.option("--id", "boutique_id", required=True, help="Boutique id.")
@click.option("--from", "debut", required=True, type=DAY, help="First closed day (YYYY-MM-DD).")
@click.option("--to", "fin", required=True, type=DAY, help="Last closed day (YYYY-MM-DD).")
@click.option("--reason", default="", help="Reason shown to clients.")
@click.option("--scope", default=None, type=METHOD, help="Only close this delivery method.")
@click.option("--yearly", is_flag=True, default=False, help="Repeat every year.")
def boutique_close(boutique_id: str, debut, fin, reason: str,
                   scope: str | None, yearly: bool) -> None:
    """Add a closure window to a boutique."""
    handler = ConfigureBoutiqueHandler(boutique_repo=boutique_repository())

    try:
        handler.add_closure(
            boutique_id, as_date(debut), as_date(fin), reason,
            DeliveryMethod(scope) if scope else None, yearly,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Boutique '{boutique_id}' closed from {as_date(debut)} to {as_date(fin)}.")


@click.command("set-fee")
@click.option("--id", "boutique_id", required=True, help="Boutique id.")
@click.option("--amount", required=True, help="Flat amount or percentage.")
@click.option("--type", "fee_type", type=FEE_TYPE, default="fixe", show_default=True)
def boutique_set_fee(boutique_id: str, amount: str, fee_type: str) -> None:
    """Set the boutique's home delivery fee."""
    handler = ConfigureBoutiqueHandler(boutique_repo=boutique_repository())

    try:
        handler.set_delivery_fee(boutique_id, amount, fee_type)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Delivery fee of '{boutique_id}' set to {amount} ({fee_type}).")


@click.command("show")
@click.option("--id", "boutique_id", required=True, help="Boutique id.")
def boutique_show(boutique_id: str) -> None:
    """Show a boutique."""
    try:
        boutique = ConfigureBoutiqueHandler(boutique_repository()).show(boutique_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    _display_boutique(boutique)
