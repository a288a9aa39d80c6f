"""Saved / donated derivation for income transactions.

Both ``Transaction.saving_amount`` and ``Account.donation_preference`` use the
same sign convention: a negative value is a percentage (``-10`` means 10%),
a non-negative value is an absolute amount.

The saving is taken from the income first; the donation preference is then
applied to what is left (the donation base) and clamped so it never exceeds
that base.
"""

from decimal import Decimal
from typing import Iterable, Optional

from fintrack.domain.entities import (
    Account,
    AccountSavingsSummary,
    IncomeBreakdown,
    Transaction,
    TransactionType,
)
from fintrack.utils.currency import format_currency

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def _apply_rule(base: Decimal, rule: Optional[Decimal]) -> Decimal:
    """Interpret a negative-is-percent / non-negative-is-absolute rule."""
    if rule is None:
        return ZERO
    if rule < 0:
        return base * abs(rule) / HUNDRED
    return rule


def compute_saved(amount: Decimal, saving_amount: Optional[Decimal]) -> Decimal:
    """Return the amount saved out of an income of ``amount``."""
    return _apply_rule(amount, saving_amount)


def compute_donation(donation_base: Decimal, donation_preference: Optional[Decimal]) -> Decimal:
    """Return the donation taken from ``donation_base``.

    The result is clamped to ``[0, donation_base]``; a negative base yields 0.
    """
    if donation_base <= 0:
        return ZERO
    donation = _apply_rule(donation_base, donation_preference)
    return max(min(donation, donation_base), ZERO)


def derive_income_breakdown(
    transaction: Transaction, donation_preference: Optional[Decimal]
) -> IncomeBreakdown:
    """Split one income transaction into saved, donated and remaining."""
    income = transaction.amount
    saved = compute_saved(income, transaction.saving_amount)
    donation_base = income - saved
    donated = compute_donation(donation_base, donation_preference)
    return IncomeBreakdown(
        transaction_id=transaction.id,
        date=transaction.date,
        description=transaction.description,
        income=income,
        saved=saved,
        donated=donated,
        remaining=donation_base - donated,
    )


def summarize_account_savings(
    account: Account, transactions: Iterable[Transaction]
) -> AccountSavingsSummary:
    """Total saved and donated amounts over an account's income.

    Only income transactions of the account are considered; transfer legs are
    money moved between the user's own accounts and are skipped.
    """
    rows = tuple(
        derive_income_breakdown(txn, account.donation_preference)
        for txn in transactions
        if txn.account_id == account.id
        and txn.type == TransactionType.INCOME
        and not txn.is_transfer
    )
    return AccountSavingsSummary(
        account_id=account.id,
        total_income=sum((row.income for row in rows), ZERO),
        total_saved=sum((row.saved for row in rows), ZERO),
        total_donated=sum((row.donated for row in rows), ZERO),
        total_remaining=sum((row.remaining for row in rows), ZERO),
        rows=rows,
    )


def describe_donation_preference(value: Optional[Decimal], currency: str = "USD") -> str:
    """Human readable text for a donation preference."""
    if not value:
        return "None"
    if value < 0:
        return f"{abs(value).normalize():f}% of remaining income"
    return f"{format_currency(value, currency)} after saving"


def describe_saving_amount(value: Optional[Decimal], currency: str = "USD") -> str:
    if value is None:
        return "-"
    if value < 0:
        return f"{abs(value).normalize():f}%"
    return format_currency(value, currency)


def dps_savings_totals(accounts: Iterable[Account], currency: str) -> Decimal:
    """Balance held in the linked savings accounts of DPS accounts of a currency."""
    accounts = list(accounts)
    by_id = {acc.id: acc for acc in accounts}
    total = ZERO
    for account in accounts:
        if not account.has_dps or account.currency != currency:
            continue
        if account.dps_savings_account_id is None:
            continue
        savings = by_id.get(account.dps_savings_account_id)
        if savings is not None:
            total += savings.calculated_balance
    return total
