"""CLI commands for notification inboxes."""

from __future__ import annotations

import click

from marketorders.application.show_notifications import NotificationInboxHandler
from marketorders.domain.exceptions import DomainException
from marketorders.infrastructure.bootstrap import notification_repository
from marketorders.infrastructure.cli.options import actor_options, build_actor


@click.command("list")
@click.option("--unread", is_flag=True, default=False, help="Only unread notifications.")
@actor_options
def notification_list(unread: bool, role: str, user_id: str | None,
                      boutique_id: str | None) -> None:
    """List the actor's notifications, newest first."""
    actor = build_actor(role, user_id, boutique_id)
    try:
        notifications = NotificationInboxHandler(notification_repository()).list(actor, unread)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not notifications:
        click.echo("No notifications.")
        return
    for n in notifications:
        flag = " " if n.lu else "*"
        click.echo(f"{flag} #{n.id:<4} {n.created_at:%Y-%m-%d %H:%M}  {n.titre}")
        click.echo(f"         {n.message}")


@click.command("read")
@click.option("--id", "notification_id", required=True, type=int, help="Notification ID.")
@actor_options
def notification_read(notification_id: int, role: str, user_id: str | None,
                      boutique_id: str | None) -> None:
    """Mark a notification as read."""
    actor = build_actor(role, user_id, boutique_id)

    try:
        NotificationInboxHandler(notification_repository()).mark_read(actor, notification_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Notification #{notification_id} marked as read.")
