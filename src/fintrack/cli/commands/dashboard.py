"""Dashboard command."""

import click
from fintrack.domain.notification import NotificationStore
from fintrack.domain.savings import dps_savings_totals
from fintrack.domain.store import FinanceStore
from fintrack.utils.currency import format_currency


def _signed(amount, currency: str) -> str:
    text = format_currency(amount, currency)
    return f"-{text}" if amount < 0 else text


@click.command("dashboard")
@click.pass_context
def dashboard(ctx):
    """Show balances and this month's totals per currency."""
    db = ctx.obj["db"]
    store = FinanceStore(db)
    store.fetch_all()
    stats = store.dashboard_stats()

    click.echo(
        f"\nActive accounts: {stats.accounts_count} | Transactions: {stats.transactions_count}"
    )
    if not stats.by_currency:
        click.echo("No active accounts.")
        return

    for bucket in stats.by_currency:
        currency = bucket.currency
        click.echo(f"\n{currency}")
        click.echo("-" * 40)
        click.echo(f"Total balance:     {_signed(bucket.total_balance, currency)}")
        click.echo(f"Monthly income:    {format_currency(bucket.monthly_income, currency)}")
        click.echo(f"Monthly expenses:  {format_currency(bucket.monthly_expenses, currency)}")
        click.echo(f"Savings rate:      {bucket.savings_rate:.1f}%")
        saved = dps_savings_totals(store.accounts, currency)
        if saved:
            click.echo(f"DPS savings:       {format_currency(saved, currency)}")

    notifications = NotificationStore(db)
    notifications.fetch()
    if notifications.unread_count:
        click.echo(f"\nUnread notifications: {notifications.unread_count}")


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard)
