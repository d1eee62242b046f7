import click

from marketorders.infrastructure.bootstrap import configure_logging
from marketorders.infrastructure.cli.boutique_commands import (
    boutique_approve,
    boutique_close,
    boutique_register,
    boutique_reject,
    boutique_set_fee,
    boutique_show,
    boutique_suspend,
)
from marketorders.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_remove,
    cart_set,
    cart_show,
)
from marketorders.infrastructure.cli.market_commands import (
    market_close,
    market_set_fee,
    market_show,
)
from marketorders.infrastructure.cli.notification_commands import (
    notification_list,
    notification_read,
)
from marketorders.infrastructure.cli.order_commands import (
    order_accept,
    order_cancel,
    order_cancel_item,
    order_checkout,
    order_confirm_depot,
    order_confirm_final,
    order_eligibility,
    order_list,
    order_mark_depot,
    order_show,
    order_start_delivery,
)
from marketorders.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_update,
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output.")
def cli(verbose: bool) -> None:
    """Marketorders — marketplace order fulfillment"""
    configure_logging("DEBUG" if verbose else None)


@cli.group()
def order() -> None:
    """Check out, follow and act on orders."""


@cli.group()
def cart() -> None:
    """Manage client carts."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def boutique() -> None:
    """Register, moderate and configure boutiques."""


@cli.group()
def market() -> None:
    """Supermarket delivery fee and closures."""


@cli.group()
def notification() -> None:
    """Read notifications."""


# Register subcommands
order.add_command(order_accept)
order.add_command(order_cancel)
order.add_command(order_cancel_item)
order.add_command(order_checkout)
order.add_command(order_confirm_depot)
order.add_command(order_confirm_final)
order.add_command(order_eligibility)
order.add_command(order_list)
order.add_command(order_mark_depot)
order.add_command(order_show)
order.add_command(order_start_delivery)
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_remove)
cart.add_command(cart_set)
cart.add_command(cart_show)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_update)
boutique.add_command(boutique_approve)
boutique.add_command(boutique_close)
boutique.add_command(boutique_register)
boutique.add_command(boutique_reject)
boutique.add_command(boutique_set_fee)
boutique.add_command(boutique_show)
boutique.add_command(boutique_suspend)
market.add_command(market_close)
market.add_command(market_set_fee)
market.add_command(market_show)
notification.add_command(notification_list)
notification.add_command(notification_read)
