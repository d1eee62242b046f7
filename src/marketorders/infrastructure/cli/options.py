"""Options shared by several command groups."""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable

import click

from marketorders.domain.exceptions import DomainException
from marketorders.domain.model.actor import Actor, Role
from marketorders.domain.model.status import DeliveryMethod

DAY = click.DateTime(formats=["%Y-%m-%d"])
METHOD = click.Choice([m.value for m in DeliveryMethod])
FEE_TYPE = click.Choice(["fixe", "pourcentage"])


def actor_options(func: Callable) -> Callable:
    """Add --role/--user/--boutique, describing who runs the command."""
    func = click.option(
        "--boutique", "boutique_id", default=None,
        help="Boutique id (required with --role boutique).",
    )(func)
    func = click.option("--user", "user_id", default=None, help="User id of the actor.")(func)
    func = click.option(
        "--role", type=click.Choice([r.value for r in Role]), default=Role.CLIENT.value,
        show_default=True, help="Role of the actor.",
    )(func)
    return func


def build_actor(role: str, user_id: str | None, boutique_id: str | None) -> Actor:
    if user_id is None and role == Role.ADMIN.value:
        user_id = "admin"
    if not user_id:
        raise click.BadParameter("--user is required", param_hint="--user")
    try:
        return Actor(Role(role), user_id, boutique_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))


def as_date(value: datetime | None) -> date | None:
    return value.date() if value is not None else None
