"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from marketorders.application.manage_catalog import (
    AddProductHandler,
    ListProductsHandler,
    UpdateProductHandler,
)
from marketorders.config import get_settings
from marketorders.domain.exceptions import DomainException
from marketorders.infrastructure.bootstrap import boutique_repository, product_repository


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--boutique", "boutique_id", required=True, help="Boutique selling the product.")
@click.option("--price", required=True, help="Price (e.g. 15000).")
def product_add(name: str, boutique_id: str, price: str) -> None:
    """Add a new product to a boutique's catalogue."""
    handler = AddProductHandler(
        product_repo=product_repository(),
        boutique_repo=boutique_repository(),
        currency=get_settings().currency,
    )

    try:
        product = handler.handle(name=name, boutique_id=boutique_id, price=price)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.nom}' added to {boutique_id} at {product.prix}")


@click.command("list")
@click.option("--boutique", "boutique_id", default=None, help="Only this boutique's products.")
def product_list(boutique_id: str | None) -> None:
    """List products in the catalogue."""
    try:
        products = ListProductsHandler(product_repo=product_repository()).handle(boutique_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Boutique':<14} {'Price':>16}")
    click.echo("-" * 63)
    for p in products:
        click.echo(f"{p.id:<6} {p.nom:<24} {p.boutique_id:<14} {str(p.prix):>16}")


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", required=True, help="New price.")
def product_update(product_id: str, price: str) -> None:
    """Update a product's price."""
    handler = UpdateProductHandler(product_repo=product_repository())

    try:
        product = handler.handle(product_id=product_id, new_price=price)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} price updated to {product.prix}")
