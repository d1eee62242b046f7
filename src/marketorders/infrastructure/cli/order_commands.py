"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from marketorders.application.dto import OrderDTO
from marketorders.application.order_action import OrderActionHandler
from marketorders.application.query_eligibility import QueryEligibilityHandler
from marketorders.application.show_order import ListOrdersHandler, ShowOrderHandler
from marketorders.application.submit_checkout import SubmitCheckoutHandler
from marketorders.domain.exceptions import DomainException
from marketorders.domain.model.permissions import Action
from marketorders.domain.model.status import DeliveryMethod, PaymentMethod
from marketorders.infrastructure.bootstrap import (
    boutique_repository,
    cart_repository,
    fee_calculator,
    horizon_days,
    marketplace_repository,
    notifier,
    order_repository,
    today,
)
from marketorders.infrastructure.cli.options import (
    DAY,
    METHOD,
    actor_options,
    as_date,
    build_actor,
)


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id} {dto.numero_commande}  [{dto.status_label}]")
    click.echo(f"Client:   {dto.client_id}")
    click.echo(f"Method:   {dto.typedelivery} on {dto.date_livraison}")
    click.echo(f"Address:  {dto.adresse_livraison}")
    click.echo(f"Payment:  {dto.paiement_methode} ({dto.paiement_statut})")
    click.echo(f"Created:  {dto.created_at}")

    for lot in dto.lots:
        click.echo()
        depot = "validated" if lot.depot_valide else ("made" if lot.depot_fait else "-")
        click.echo(f"  {lot.nom} ({lot.boutique_id})  [{lot.status_label}]  deposit: {depot}")
        click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>14} {'Total':>14}  Status")
        click.echo(f"  {'-'*72}")
        for item in lot.items:
            click.echo(
                f"  {item.nom_produit:<24} {item.quantite:>5} "
                f"{item.prix_unitaire:>14} {item.line_total:>14}  {item.status}"
            )
        click.echo(f"  {'Subtotal':<30} {lot.subtotal:>29}")
        if lot.allowed_actions:
            click.echo(f"  Actions: {', '.join(lot.allowed_actions)}")

    click.echo()
    click.echo(f"  {'Items':<30} {dto.base_total:>29}")
    click.echo(f"  {'Delivery fee':<30} {dto.frais_livraison:>29}")
    click.echo(f"  {'Order Total':<30} {dto.total:>29}")
    if dto.notes:
        click.echo()
        click.echo("Notes:")
        for line in dto.notes.splitlines():
            click.echo(f"  {line}")


@click.command("checkout")
@click.option("--client", "client_id", required=True, help="Client id (cart owner).")
@click.option("--method", required=True, type=METHOD, help="Delivery method.")
@click.option("--date", "day", required=True, type=DAY, help="Delivery or collection date (YYYY-MM-DD).")
@click.option("--address", default=None, help="Delivery address (not needed for collect).")
@click.option("--payment", type=click.Choice([p.value for p in PaymentMethod]),
              default=PaymentMethod.ESPECES.value, show_default=True, help="Payment method.")
@click.option("--note", default=None, help="Note for the boutiques.")
def order_checkout(client_id: str, method: str, day, address: str | None,
                   payment: str, note: str | None) -> None:
    """Place an order from the client's cart."""
    handler = SubmitCheckoutHandler(
        order_repo=order_repository(),
        cart_repo=cart_repository(),
        boutique_repo=boutique_repository(),
        marketplace_repo=marketplace_repository(),
        fee_calculator=fee_calculator(),
        notifier=notifier(),
        today=today,
        horizon_days=horizon_days(),
    )

    try:
        dto = handler.handle(
            client_id=client_id,
            method=DeliveryMethod(method),
            day=as_date(day),
            adresse=address,
            paiement_methode=PaymentMethod(payment),
            note=note,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} created  (status={dto.status})")
    _display_order(dto)


@click.command("eligibility")
@click.option("--client", "client_id", required=True, help="Client id (cart owner).")
@click.option("--method", required=True, type=METHOD, help="Delivery method.")
@click.option("--date", "day", required=True, type=DAY, help="Date to check (YYYY-MM-DD).")
def order_eligibility(client_id: str, method: str, day) -> None:
    """Check whether a date is available for the client's cart."""
    handler = QueryEligibilityHandler(
        cart_repo=cart_repository(),
        boutique_repo=boutique_repository(),
        marketplace_repo=marketplace_repository(),
        today=today,
        horizon_days=horizon_days(),
    )

    try:
        dto = handler.handle(client_id, DeliveryMethod(method), as_date(day))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if dto.available:
        click.echo(f"{as_date(day).isoformat()} is available for {method}.")
        return
    click.echo(f"Not available: {dto.reason}")
    if dto.next_available:
        click.echo(f"Next available date: {dto.next_available}")
    else:
        click.echo("No available date found in the coming weeks.")


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@actor_options
def order_show(order_id: int, role: str, user_id: str | None, boutique_id: str | None) -> None:
    """Show details of an existing order."""
    actor = build_actor(role, user_id, boutique_id)
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id, actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@actor_options
def order_list(role: str, user_id: str | None, boutique_id: str | None) -> None:
    """List the orders visible to the actor, newest first."""
    actor = build_actor(role, user_id, boutique_id)
    handler = ListOrdersHandler(order_repo=order_repository())

    try:
        orders = handler.handle(actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<5} {'Number':<24} {'Client':<12} {'Status':<20} {'Date':<11} {'Total':>16}")
    click.echo("-" * 93)
    for o in orders:
        click.echo(
            f"{o.id:<5} {o.numero_commande:<24} {o.client_id:<12} "
            f"{o.status_label:<20} {o.date_livraison:<11} {o.total:>16}"
        )


def _run_action(order_id: int, action: Action, role: str, user_id: str | None,
                actor_boutique: str | None, **kwargs) -> OrderDTO:
    actor = build_actor(role, user_id, actor_boutique)
    handler = OrderActionHandler(order_repo=order_repository(), notifier=notifier())

    try:
        return handler.handle(order_id, action, actor, **kwargs)
    except DomainException as exc:
        raise click.ClickException(str(exc))


def _lot_command(name: str, action: Action, doc: str) -> click.Command:
    @click.command(name, help=doc)
    @click.option("--id", "order_id", required=True, type=int, help="Order ID.")
    @click.option("--lot", "lot_id", default=None,
                  help="Boutique id of the lot (defaults to the actor's boutique).")
    @actor_options
    def command(order_id: int, lot_id: str | None, role: str,
                user_id: str | None, boutique_id: str | None) -> None:
        dto = _run_action(order_id, action, role, user_id, boutique_id,
                          boutique_id=lot_id or boutique_id)
        click.echo(f"Order #{order_id}: {action.label} done  (status={dto.status})")

    return command


order_accept = _lot_command("accept", Action.ACCEPT, "Accept a lot of an order.")
order_start_delivery = _lot_command(
    "start-delivery", Action.START_DELIVERY, "Start delivering a lot (boutique delivery)."
)
order_mark_depot = _lot_command(
    "mark-depot", Action.MARK_DEPOT, "Record that a lot was dropped at the warehouse."
)
order_confirm_depot = _lot_command(
    "confirm-depot", Action.CONFIRM_DEPOT, "Confirm receipt of a lot at the warehouse."
)


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
@click.option("--reason", required=True, help="Why the order is cancelled.")
@actor_options
def order_cancel(order_id: int, reason: str, role: str,
                 user_id: str | None, boutique_id: str | None) -> None:
    """Cancel an order (a boutique cancels only its own lot)."""
    dto = _run_action(order_id, Action.CANCEL_ORDER, role, user_id, boutique_id,
                      reason=reason)
    click.echo(f"Order #{order_id} cancelled  (status={dto.status}, total={dto.total})")


@click.command("cancel-item")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--product", "produit_id", required=True, help="Product id of the line.")
@click.option("--lot", "lot_id", default=None,
              help="Boutique id of the lot (defaults to the actor's boutique).")
@click.option("--variation", "variation_id", default=None, help="Variation id of the line.")
@click.option("--reason", required=True, help="Why the item is cancelled.")
@actor_options
def order_cancel_item(order_id: int, produit_id: str, lot_id: str | None,
                      variation_id: str | None, reason: str, role: str,
                      user_id: str | None, boutique_id: str | None) -> None:
    """Cancel one product line of an order."""
    dto = _run_action(order_id, Action.CANCEL_ITEM, role, user_id, boutique_id,
                      boutique_id=lot_id or boutique_id, produit_id=produit_id,
                      variation_id=variation_id, reason=reason)
    click.echo(f"Item '{produit_id}' cancelled on order #{order_id}  (total={dto.total})")


@click.command("confirm-final")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@actor_options
def order_confirm_final(order_id: int, role: str, user_id: str | None,
                        boutique_id: str | None) -> None:
    """Confirm the order was collected or delivered."""
    dto = _run_action(order_id, Action.CONFIRM_FINAL, role, user_id, boutique_id)
    click.echo(f"Order #{order_id} completed  (status={dto.status}, paid={dto.paiement_statut})")
