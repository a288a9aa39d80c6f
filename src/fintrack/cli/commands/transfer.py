"""Transfer commands."""

import click
from fintrack.cli.account_resolution import resolve_account_or_exit
from fintrack.cli.error_handling import handle_domain_error
from fintrack.domain.account import AccountService
from fintrack.domain.transfer import TransferService
from fintrack.utils.amount_parser import parse_amount
from fintrack.utils.currency import format_currency


@click.group()
def transfer_group():
    """Move money between accounts."""
    pass


@transfer_group.command("run")
@click.argument("from_account", metavar="FROM_ACCOUNT")
@click.argument("to_account", metavar="TO_ACCOUNT")
@click.argument("amount")
@click.option("--rate", default="1", help="Exchange rate applied to the amount (default: 1)")
@click.option("--note", help="Description for both transfer transactions")
@click.pass_context
def run_transfer(ctx, from_account: str, to_account: str, amount: str, rate: str, note: str | None):
    """Transfer AMOUNT from one account to another.

    Accounts can be given by name or ID.

    Examples:
        fintrack transfer run Wallet Savings 200
        fintrack transfer run "USD Account" "BDT Account" 100 --rate 110.5
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    from_id = resolve_account_or_exit(ctx, account_service, from_account)
    to_id = resolve_account_or_exit(ctx, account_service, to_account)

    try:
        from_amount = parse_amount(amount)
        exchange_rate = parse_amount(rate)
        result = TransferService(db).transfer(
            from_id, to_id, from_amount, exchange_rate=exchange_rate, note=note
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    source = account_service.require_account(from_id)
    destination = account_service.require_account(to_id)
    click.echo(
        f"Transferred {format_currency(result.from_amount, source.currency)} from "
        f"'{source.name}' to '{destination.name}' "
        f"({format_currency(result.to_amount, destination.currency)} received)"
    )
    click.echo(f"Transfer ID: {result.transfer_id}")


@transfer_group.command("dps")
@click.argument("account", metavar="ACCOUNT")
@click.option("--amount", help="Amount for flexible DPS schemes")
@click.pass_context
def run_dps_transfer(ctx, account: str, amount: str | None):
    """Move a DPS contribution into the account's DPS savings account.

    Fixed-amount schemes always move the configured amount.
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, account_service, account)

    try:
        parsed = parse_amount(amount) if amount is not None else None
        result = TransferService(db).transfer_dps(account_id, parsed)
    except ValueError as e:
        handle_domain_error(ctx, e)

    source = account_service.require_account(account_id)
    destination = account_service.require_account(result.to_account_id)
    click.echo(
        f"DPS transfer of {format_currency(result.from_amount, source.currency)} "
        f"from '{source.name}' to '{destination.name}' completed"
    )


@transfer_group.command("history")
@click.option("--account", help="Only show DPS transfers from this account")
@click.pass_context
def dps_history(ctx, account: str | None):
    """Show DPS transfer history."""
    db = ctx.obj["db"]
    account_service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, account_service, account) if account else None

    transfers = TransferService(db).list_dps_history(account_id=account_id)
    if not transfers:
        click.echo("No DPS transfers found.")
        return

    accounts = {acc.id: acc for acc in account_service.list_accounts()}
    click.echo(f"\n{'Date':<12} {'From':<24} {'To':<24} {'Amount':>14}")
    click.echo("-" * 78)
    for transfer in transfers:
        source = accounts.get(transfer.from_account_id)
        destination = accounts.get(transfer.to_account_id)
        currency = source.currency if source else "USD"
        click.echo(
            f"{str(transfer.date):<12} {(source.name if source else 'Unknown')[:24]:<24} "
            f"{(destination.name if destination else 'Unknown')[:24]:<24} "
            f"{format_currency(transfer.amount, currency):>14}"
        )


def register_commands(cli):
    """Register transfer commands with main CLI."""
    cli.add_command(transfer_group, name="transfer")
