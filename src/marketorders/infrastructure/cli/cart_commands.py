"""CLI commands for the Cart aggregate."""

from __future__ import annotations

import click

from marketorders.application.dto import CartDTO
from marketorders.application.manage_cart import (
    AddToCartHandler,
    ShowCartHandler,
    UpdateCartHandler,
)
from marketorders.domain.exceptions import DomainException
from marketorders.infrastructure.bootstrap import cart_repository, product_repository


def _display_cart(dto: CartDTO) -> None:
    if not dto.items:
        click.echo(f"Cart of {dto.client_id} is empty.")
        return
    click.echo(f"Cart of {dto.client_id}  ({dto.boutique_count} boutique(s))")
    click.echo(f"  {'Product':<24} {'Boutique':<14} {'Qty':>5} {'Price':>14} {'Total':>14}")
    click.echo(f"  {'-'*75}")
    for item in dto.items:
        click.echo(
            f"  {item.nom_produit:<24} {item.boutique_id:<14} {item.quantite:>5} "
            f"{item.prix_unitaire:>14} {item.line_total:>14}"
        )
    click.echo(f"  {'-'*75}")
    click.echo(f"  {'Cart Total':<30} {dto.total:>45}")


@click.command("add")
@click.option("--client", "client_id", required=True, help="Client id.")
@click.option("--product", "product_id", required=True, help="Product id.")
@click.option("--quantity", default=1, show_default=True, type=int, help="Quantity to add.")
@click.option("--variation", "variation_id", default=None, help="Variation id.")
def cart_add(client_id: str, product_id: str, quantity: int, variation_id: str | None) -> None:
    """Add a product to a client's cart."""
    handler = AddToCartHandler(cart_repo=cart_repository(), product_repo=product_repository())

    try:
        dto = handler.handle(client_id, product_id, quantity, variation_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)


@click.command("set")
@click.option("--client", "client_id", required=True, help="Client id.")
@click.option("--product", "product_id", required=True, help="Product id.")
@click.option("--quantity", required=True, type=int, help="New quantity (0 removes the line).")
@click.option("--variation", "variation_id", default=None, help="Variation id.")
def cart_set(client_id: str, product_id: str, quantity: int, variation_id: str | None) -> None:
    """Change the quantity of a cart line."""
    handler = UpdateCartHandler(cart_repo=cart_repository())

    try:
        dto = handler.set_quantity(client_id, product_id, quantity, variation_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)


@click.command("remove")
@click.option("--client", "client_id", required=True, help="Client id.")
@click.option("--product", "product_id", required=True, help="Product id.")
@click.option("--variation", "variation_id", default=None, help="Variation id.")
def cart_remove(client_id: str, product_id: str, variation_id: str | None) -> None:
    """Remove a line from the cart."""
    handler = UpdateCartHandler(cart_repo=cart_repository())

    try:
        dto = handler.remove(client_id, product_id, variation_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)


@click.command("clear")
@click.option("--client", "client_id", required=True, help="Client id.")
def cart_clear(client_id: str) -> None:
    """Empty the cart."""
    try:
        UpdateCartHandler(cart_repo=cart_repository()).clear(client_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Cart of {client_id} cleared.")


@click.command("show")
@click.option("--client", "client_id", required=True, help="Client id.")
def cart_show(client_id: str) -> None:
    """Show a client's cart."""
    try:
        dto = ShowCartHandler(cart_repo=cart_repository()).handle(client_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)
