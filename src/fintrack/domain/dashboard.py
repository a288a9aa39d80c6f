"""Dashboard aggregation."""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from fintrack.domain.entities import (
    Account,
    CurrencyDashboardStats,
    DashboardStats,
    Transaction,
    TransactionType,
)

ZERO = Decimal("0")


def savings_rate(income: Decimal, expenses: Decimal) -> Decimal:
    """Share of income not spent, as a percentage. 0 when there is no income."""
    if income <= 0:
        return ZERO
    return (income - expenses) / income * 100


def build_dashboard_stats(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    today: Optional[date] = None,
) -> DashboardStats:
    """Group active accounts by currency and total the current month.

    Buckets keep the order in which their currency first appears among the
    active accounts. Monthly figures only count transactions of active
    accounts dated in the calendar month of ``today`` that are not transfer
    legs.

    Args:
        accounts: All accounts; inactive ones are ignored
        transactions: All transactions
        today: Reference date for the current month

    Returns:
        DashboardStats with one entry per currency
    """
    today = today or date.today()
    transactions = list(transactions)
    active = [acc for acc in accounts if acc.is_active]
    currency_of = {acc.id: acc.currency for acc in active}

    balances: dict[str, Decimal] = {}
    for acc in active:
        balances[acc.currency] = balances.get(acc.currency, ZERO) + acc.calculated_balance

    income = {currency: ZERO for currency in balances}
    expenses = {currency: ZERO for currency in balances}
    for txn in transactions:
        currency = currency_of.get(txn.account_id)
        if currency is None or txn.is_transfer:
            continue
        if txn.date.year != today.year or txn.date.month != today.month:
            continue
        if txn.type == TransactionType.INCOME:
            income[currency] += txn.amount
        else:
            expenses[currency] += txn.amount

    by_currency = tuple(
        CurrencyDashboardStats(
            currency=currency,
            total_balance=balance,
            monthly_income=income[currency],
            monthly_expenses=expenses[currency],
            savings_rate=savings_rate(income[currency], expenses[currency]),
        )
        for currency, balance in balances.items()
    )
    return DashboardStats(
        by_currency=by_currency,
        accounts_count=len(active),
        transactions_count=len(transactions),
    )
