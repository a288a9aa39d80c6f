"""Savings goal commands."""

import click
from fintrack.cli.account_resolution import resolve_account_or_exit
from fintrack.cli.error_handling import handle_domain_error
from fintrack.domain.account import AccountService
from fintrack.domain.goal import SavingsGoalService
from fintrack.domain.transfer import TransferService
from fintrack.utils.amount_parser import parse_amount
from fintrack.utils.currency import format_currency


@click.group()
def goal_group():
    """Manage savings goals."""
    pass


@goal_group.command("create")
@click.argument("name")
@click.option("--target", required=True, help="Target amount")
@click.option("--source", "source_account", required=True, help="Source account name or ID")
@click.option("--description", help="Goal description")
@click.pass_context
def create_goal(ctx, name: str, target: str, source_account: str, description: str | None):
    """Create a savings goal with its own savings account."""
    db = ctx.obj["db"]
    source_id = resolve_account_or_exit(ctx, AccountService(db), source_account)

    try:
        goal_id = SavingsGoalService(db).create_goal(
            name=name,
            target_amount=parse_amount(target),
            source_account_id=source_id,
            description=description,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created savings goal '{name}' (ID: {goal_id})")


@goal_group.command("list")
@click.pass_context
def list_goals(ctx):
    """List savings goals and their progress."""
    db = ctx.obj["db"]
    goals = SavingsGoalService(db).list_goals()
    if not goals:
        click.echo("No savings goals found.")
        return

    accounts = {acc.id: acc for acc in AccountService(db).list_accounts()}
    for goal in goals:
        savings = accounts.get(goal.savings_account_id)
        currency = savings.currency if savings else "USD"
        click.echo(
            f"ID: {goal.id:3d} | {goal.name:24s} | "
            f"{format_currency(goal.current_amount, currency)} of "
            f"{format_currency(goal.target_amount, currency)} ({goal.progress:.0f}%)"
        )


@goal_group.command("save")
@click.argument("goal_id", type=int)
@click.argument("amount")
@click.pass_context
def save_to_goal(ctx, goal_id: int, amount: str):
    """Move AMOUNT from the goal's source account into its savings account."""
    db = ctx.obj["db"]
    try:
        TransferService(db).save_to_goal(goal_id, parse_amount(amount))
    except ValueError as e:
        handle_domain_error(ctx, e)
    goal = SavingsGoalService(db).require_goal(goal_id)
    click.echo(f"Saved towards '{goal.name}': {goal.progress:.0f}% reached")


@goal_group.command("delete")
@click.argument("goal_id", type=int)
@click.pass_context
def delete_goal(ctx, goal_id: int):
    """Delete a savings goal. Its savings account is kept."""
    db = ctx.obj["db"]
    try:
        SavingsGoalService(db).delete_goal(goal_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted savings goal {goal_id}")


def register_commands(cli):
    """Register savings goal commands with main CLI."""
    cli.add_command(goal_group, name="goal")
