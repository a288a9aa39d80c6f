"""CLI helpers for account resolution."""

from __future__ import annotations

import click
from fintrack.cli.error_handling import handle_domain_error
from fintrack.domain.account import AccountService
from fintrack.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int
) -> int:
    """Resolve an account name or ID, or exit with a CLI error."""
    try:
        return resolve_account(account_service, account)
    except ValueError as exc:
        handle_domain_error(ctx, exc)
