"""Transaction management commands."""

from pathlib import Path

import click
from fintrack.cli.account_resolution import resolve_account_or_exit
from fintrack.cli.date_filters import resolve_cli_date_range
from fintrack.cli.error_handling import handle_domain_error
from fintrack.domain.account import AccountService
from fintrack.domain.csv_export import export_transactions_csv
from fintrack.domain.entities import RecurringFrequency, TransactionType
from fintrack.domain.savings import describe_saving_amount
from fintrack.domain.transaction import TransactionService
from fintrack.utils.amount_parser import parse_amount, parse_saving_amount
from fintrack.utils.currency import format_currency
from fintrack.utils.date_parser import PERIODS, parse_date

TRANSACTION_TYPES = [t.value for t in TransactionType]
FREQUENCIES = [f.value for f in RecurringFrequency]


def _split_tags(tags: str | None) -> list[str] | None:
    if tags is None:
        return None
    return [tag.strip() for tag in tags.split(",") if tag.strip()]


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--type", "txn_type", type=click.Choice(TRANSACTION_TYPES), required=True)
@click.option("--amount", required=True, help="Transaction amount (e.g., 123.45)")
@click.option("--date", "txn_date", default="today", help="Transaction date (default: today)")
@click.option("--category", default="", help="Category name")
@click.option("--description", default="", help="Transaction description")
@click.option("--tags", help="Comma separated tags")
@click.option("--saving", help="Saving from this income, e.g. '10%' or '50'")
@click.option(
    "--recurring", type=click.Choice(FREQUENCIES), help="Mark as recurring with this frequency"
)
@click.pass_context
def add_transaction(
    ctx,
    account: str,
    txn_type: str,
    amount: str,
    txn_date: str,
    category: str,
    description: str,
    tags: str | None,
    saving: str | None,
    recurring: str | None,
) -> None:
    """Add a transaction.

    Examples:
        fintrack transaction add --account Wallet --type expense --amount 12.50 --category "Food & Dining"
        fintrack transaction add --account Salary --type income --amount 3000 --saving 10%
    """
    db = ctx.obj["db"]
    service = TransactionService(db)
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)

    try:
        parsed_amount = parse_amount(amount)
        parsed_date = parse_date(txn_date)
        saving_amount = parse_saving_amount(saving) if saving else None
    except ValueError as e:
        handle_domain_error(ctx, e)

    try:
        transaction_id = service.create_transaction(
            account_id=account_id,
            type=TransactionType(txn_type),
            amount=parsed_amount,
            date=parsed_date,
            category=category,
            description=description,
            tags=_split_tags(tags),
            saving_amount=saving_amount,
            is_recurring=recurring is not None,
            recurring_frequency=RecurringFrequency(recurring) if recurring else None,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added transaction {transaction_id}")


@transaction_group.command("list")
@click.option("--account", help="Account name or ID")
@click.option("--category", help="Category name")
@click.option("--type", "txn_type", type=click.Choice(TRANSACTION_TYPES), help="Income or expense")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--period", type=click.Choice(PERIODS), help="Named period")
@click.option("--search", help="Match description or category")
@click.pass_context
def list_transactions(
    ctx,
    account: str | None,
    category: str | None,
    txn_type: str | None,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    search: str | None,
):
    """View transactions with optional filters, newest first."""
    db = ctx.obj["db"]
    service = TransactionService(db)
    account_service = AccountService(db)

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )
    account_id = resolve_account_or_exit(ctx, account_service, account) if account else None

    transactions = service.list_transactions(
        account_id=account_id,
        category=category,
        type=TransactionType(txn_type) if txn_type else None,
        start_date=start,
        end_date=end,
        search=search,
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    accounts = {acc.id: acc for acc in account_service.list_accounts()}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 110)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Type':<9} {'Amount':>14} {'Account':<20} "
        f"{'Category':<18} {'Saving':<8} {'Description':<20}"
    )
    click.echo("-" * 110)
    for txn in transactions:
        acc = accounts.get(txn.account_id)
        currency = acc.currency if acc else "USD"
        kind = "transfer" if txn.is_transfer else txn.type.value
        click.echo(
            f"{txn.id:<6} {str(txn.date):<12} {kind:<9} "
            f"{format_currency(txn.amount, currency):>14} "
            f"{(acc.name if acc else 'Unknown')[:20]:<20} {txn.category[:18]:<18} "
            f"{describe_saving_amount(txn.saving_amount, currency):<8} "
            f"{txn.description[:20]:<20}"
        )


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--account", help="Account name or ID")
@click.option("--type", "txn_type", type=click.Choice(TRANSACTION_TYPES), help="Income or expense")
@click.option("--amount", help="Transaction amount")
@click.option("--date", "txn_date", help="Transaction date")
@click.option("--category", help="Category name")
@click.option("--description", help="Transaction description")
@click.option("--tags", help="Comma separated tags; '' clears them")
@click.option("--saving", help="Saving rule, e.g. '10%' or '50'; '' clears it")
@click.option("--recurring", type=click.Choice(FREQUENCIES), help="Recurring frequency")
@click.option("--not-recurring", is_flag=True, help="Stop marking as recurring")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    account: str | None,
    txn_type: str | None,
    amount: str | None,
    txn_date: str | None,
    category: str | None,
    description: str | None,
    tags: str | None,
    saving: str | None,
    recurring: str | None,
    not_recurring: bool,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided.

    Examples:
        fintrack transaction update 1 --amount 75.00
        fintrack transaction update 1 --saving ""
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    changes = {}
    if account is not None:
        changes["account_id"] = resolve_account_or_exit(ctx, AccountService(db), account)
    try:
        if txn_type is not None:
            changes["type"] = TransactionType(txn_type)
        if amount is not None:
            changes["amount"] = parse_amount(amount)
        if txn_date is not None:
            changes["date"] = parse_date(txn_date)
        if saving is not None:
            changes["saving_amount"] = parse_saving_amount(saving) if saving else None
    except ValueError as e:
        handle_domain_error(ctx, e)
    if category is not None:
        changes["category"] = category
    if description is not None:
        changes["description"] = description
    if tags is not None:
        changes["tags"] = _split_tags(tags)
    if recurring is not None:
        changes["is_recurring"] = True
        changes["recurring_frequency"] = RecurringFrequency(recurring)
    elif not_recurring:
        changes["is_recurring"] = False

    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        service.update_transaction(transaction_id, **changes)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Delete a transaction."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    if service.get_transaction(transaction_id) is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"Are you sure you want to delete transaction {transaction_id}?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_transaction(transaction_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transaction {transaction_id}")


@transaction_group.command("export")
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--account", help="Account name or ID")
@click.option("--start-date", help="Start date")
@click.option("--end-date", help="End date")
@click.option("--period", type=click.Choice(PERIODS), help="Named period")
@click.pass_context
def export_transactions(
    ctx,
    output: Path,
    account: str | None,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
) -> None:
    """Export transactions to a CSV file."""
    db = ctx.obj["db"]
    account_service = AccountService(db)

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )
    account_id = resolve_account_or_exit(ctx, account_service, account) if account else None
    transactions = TransactionService(db).list_transactions(
        account_id=account_id, start_date=start, end_date=end
    )

    count = export_transactions_csv(transactions, account_service.list_accounts(), output)
    click.echo(f"Exported {count} transaction(s) to {output}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
