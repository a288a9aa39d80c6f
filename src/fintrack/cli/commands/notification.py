"""Notification commands."""

import click
from fintrack.cli.error_handling import handle_domain_error
from fintrack.domain.notification import NotificationService


@click.group()
def notification_group():
    """Read and manage notifications."""
    pass


@notification_group.command("list")
@click.option("--unread", "unread_only", is_flag=True, help="Only unread notifications")
@click.pass_context
def list_notifications(ctx, unread_only: bool):
    """List notifications, newest first."""
    db = ctx.obj["db"]
    notifications = NotificationService(db).list_notifications(unread_only=unread_only)
    if not notifications:
        click.echo("No notifications.")
        return

    unread = sum(1 for n in notifications if not n.is_read)
    click.echo(f"\n{len(notifications)} notification(s), {unread} unread")
    click.echo("-" * 70)
    for n in notifications:
        marker = "*" if not n.is_read else " "
        click.echo(
            f"{marker} {n.id:<5} {n.created_at:%Y-%m-%d %H:%M} [{n.type.value}] {n.title}"
        )
        if n.body:
            click.echo(f"        {n.body}")


@notification_group.command("read")
@click.argument("notification_id", type=int)
@click.pass_context
def mark_read(ctx, notification_id: int):
    """Mark a notification as read."""
    db = ctx.obj["db"]
    try:
        NotificationService(db).mark_read(notification_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Marked notification {notification_id} as read")


@notification_group.command("read-all")
@click.pass_context
def mark_all_read(ctx):
    """Mark every notification as read."""
    db = ctx.obj["db"]
    count = NotificationService(db).mark_all_read()
    click.echo(f"Marked {count} notification(s) as read")


@notification_group.command("delete")
@click.argument("notification_id", type=int)
@click.pass_context
def delete_notification(ctx, notification_id: int):
    """Delete a notification."""
    db = ctx.obj["db"]
    try:
        NotificationService(db).delete_notification(notification_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted notification {notification_id}")


@notification_group.command("clear")
@click.pass_context
def clear_notifications(ctx):
    """Delete all notifications."""
    db = ctx.obj["db"]
    count = NotificationService(db).clear_all()
    click.echo(f"Cleared {count} notification(s)")


def register_commands(cli):
    """Register notification commands with main CLI."""
    cli.add_command(notification_group, name="notification")
