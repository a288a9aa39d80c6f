"""Account management commands."""

import click
from fintrack.cli.account_resolution import resolve_account_or_exit
from fintrack.cli.error_handling import handle_domain_error
from fintrack.domain.account import AccountService
from fintrack.domain.entities import AccountType, DPSAmountType, DPSType
from fintrack.domain.savings import describe_donation_preference
from fintrack.utils.amount_parser import parse_amount, parse_saving_amount
from fintrack.utils.currency import format_currency

ACCOUNT_TYPES = [t.value for t in AccountType]
DPS_TYPES = [t.value for t in DPSType]
DPS_AMOUNT_TYPES = [t.value for t in DPSAmountType]


def _parse_or_exit(ctx, parser, value: str | None, label: str):
    if value is None:
        return None
    try:
        return parser(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type", "account_type", type=click.Choice(ACCOUNT_TYPES), default="checking",
    help="Account type (default: checking)",
)
@click.option("--currency", default="USD", help="Currency code (default: USD)")
@click.option("--balance", default="0", help="Initial balance")
@click.option("--description", help="Account description")
@click.option("--dps", "has_dps", is_flag=True, help="Enroll the account in DPS savings")
@click.option("--dps-type", type=click.Choice(DPS_TYPES), help="DPS schedule (default: monthly)")
@click.option(
    "--dps-amount-type", type=click.Choice(DPS_AMOUNT_TYPES),
    help="Fixed or flexible DPS amount (default: fixed)",
)
@click.option("--dps-amount", help="Fixed DPS amount")
@click.option("--donation", help="Donation preference, e.g. '10%' or '50'")
@click.pass_context
def create_account(
    ctx,
    name: str,
    account_type: str,
    currency: str,
    balance: str,
    description: str | None,
    has_dps: bool,
    dps_type: str | None,
    dps_amount_type: str | None,
    dps_amount: str | None,
    donation: str | None,
):
    """Create a new account.

    With --dps a linked savings account named "<name> (DPS)" is created too.

    Examples:
        fintrack account create "Wallet" --type cash --currency BDT
        fintrack account create "Salary" --dps --dps-amount 500 --donation 10%
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    initial_balance = _parse_or_exit(ctx, parse_amount, balance, "balance")
    fixed_amount = _parse_or_exit(ctx, parse_amount, dps_amount, "DPS amount")
    donation_preference = _parse_or_exit(ctx, parse_saving_amount, donation, "donation")

    try:
        account_id = service.create_account(
            name=name,
            type=AccountType(account_type),
            currency=currency,
            initial_balance=initial_balance,
            description=description,
            has_dps=has_dps,
            dps_type=DPSType(dps_type) if dps_type else None,
            dps_amount_type=DPSAmountType(dps_amount_type) if dps_amount_type else None,
            dps_fixed_amount=fixed_amount,
            donation_preference=donation_preference,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created account '{name}' (ID: {account_id})")
    account = service.get_account(account_id)
    if account.dps_savings_account_id is not None:
        click.echo(f"Linked DPS savings account ID: {account.dps_savings_account_id}")


@account_group.command("list")
@click.option("--active", "active_only", is_flag=True, help="Only show active accounts")
@click.pass_context
def list_accounts(ctx, active_only: bool):
    """List all accounts."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts(active_only=active_only)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 90)
    for acc in accounts:
        status = "" if acc.is_active else " (inactive)"
        dps = " [DPS]" if acc.has_dps else ""
        balance = format_currency(acc.calculated_balance, acc.currency)
        if acc.calculated_balance < 0:
            balance = f"-{balance}"
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:24s} | {acc.type.value:11s} | "
            f"{balance:>14s}{dps}{status}"
        )


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), help="Account type")
@click.option("--currency", help="Currency code")
@click.option("--balance", help="Initial balance")
@click.option("--description", help="Account description")
@click.option("--dps/--no-dps", "has_dps", default=None, help="Enable or disable DPS")
@click.option("--dps-type", type=click.Choice(DPS_TYPES), help="DPS schedule")
@click.option("--dps-amount-type", type=click.Choice(DPS_AMOUNT_TYPES), help="DPS amount type")
@click.option("--dps-amount", help="Fixed DPS amount")
@click.option("--donation", help="Donation preference, e.g. '10%' or '50'; '' clears it")
@click.pass_context
def update_account(
    ctx,
    account: str,
    name: str | None,
    account_type: str | None,
    currency: str | None,
    balance: str | None,
    description: str | None,
    has_dps: bool | None,
    dps_type: str | None,
    dps_amount_type: str | None,
    dps_amount: str | None,
    donation: str | None,
) -> None:
    """Update an account.

    ACCOUNT can be an account name or ID. Only the given fields change.

    Examples:
        fintrack account update "Wallet" --name "Cash Wallet"
        fintrack account update 1 --dps --dps-amount 300
        fintrack account update 1 --donation ""
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)

    changes = {}
    if name is not None:
        changes["name"] = name
    if account_type is not None:
        changes["type"] = AccountType(account_type)
    if currency is not None:
        changes["currency"] = currency
    if balance is not None:
        changes["initial_balance"] = _parse_or_exit(ctx, parse_amount, balance, "balance")
    if description is not None:
        changes["description"] = description or None
    if has_dps is not None:
        changes["has_dps"] = has_dps
    if dps_type is not None:
        changes["dps_type"] = DPSType(dps_type)
    if dps_amount_type is not None:
        changes["dps_amount_type"] = DPSAmountType(dps_amount_type)
    if dps_amount is not None:
        changes["dps_fixed_amount"] = _parse_or_exit(ctx, parse_amount, dps_amount, "DPS amount")
    if donation is not None:
        changes["donation_preference"] = (
            _parse_or_exit(ctx, parse_saving_amount, donation, "donation") if donation else None
        )

    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        service.update_account(account_id, **changes)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated account {account_id}")


@account_group.command("toggle")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def toggle_account(ctx, account: str) -> None:
    """Activate or deactivate an account."""
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)

    current = service.require_account(account_id)
    service.set_active(account_id, not current.is_active)
    state = "inactive" if current.is_active else "active"
    click.echo(f"Account '{current.name}' is now {state}")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID. Accounts with transactions, or
    that hold another account's DPS savings, cannot be deleted.
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.require_account(account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted account '{account_obj.name}'")


@account_group.command("savings")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def account_savings(ctx, account: str) -> None:
    """Show saved and donated totals over an account's income."""
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)
    acc = service.require_account(account_id)
    summary = service.get_savings_summary(account_id)

    def money(value):
        return format_currency(value, acc.currency)

    click.echo(f"\nSavings for '{acc.name}'")
    click.echo(f"Donation preference: {describe_donation_preference(acc.donation_preference, acc.currency)}")
    click.echo("-" * 80)
    click.echo(f"{'Date':<12} {'Income':>14} {'Saved':>14} {'Donated':>14} {'Remaining':>14}")
    for row in summary.rows:
        click.echo(
            f"{str(row.date):<12} {money(row.income):>14} {money(row.saved):>14} "
            f"{money(row.donated):>14} {money(row.remaining):>14}"
        )
    click.echo("-" * 80)
    click.echo(
        f"{'TOTAL':<12} {money(summary.total_income):>14} {money(summary.total_saved):>14} "
        f"{money(summary.total_donated):>14} {money(summary.total_remaining):>14}"
    )


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
