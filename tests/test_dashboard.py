"""Tests for dashboard aggregation."""

from datetime import date, datetime
from decimal import Decimal

from fintrack.cli.main import cli
from fintrack.domain.dashboard import build_dashboard_stats, savings_rate
from fintrack.domain.entities import Account, AccountType, Transaction, TransactionType

NOW = datetime(2024, 5, 1)
TODAY = date(2024, 5, 20)


def make_account(id, currency="USD", balance="0", active=True):
    return Account(
        id=id,
        name=f"Account {id}",
        type=AccountType.CHECKING,
        currency=currency,
        initial_balance=Decimal(balance),
        calculated_balance=Decimal(balance),
        is_active=active,
        created_at=NOW,
    )


def make_txn(id, account_id, type, amount, on=date(2024, 5, 3), tags=()):
    return Transaction(
        id=id,
        account_id=account_id,
        type=type,
        amount=Decimal(amount),
        category="Other",
        description="",
        date=on,
        created_at=NOW,
        tags=tuple(tags),
    )


def test_savings_rate():
    assert savings_rate(Decimal("1000"), Decimal("250")) == Decimal("75")
    assert savings_rate(Decimal("0"), Decimal("50")) == 0
    assert savings_rate(Decimal("100"), Decimal("150")) == Decimal("-50")


def test_buckets_follow_first_seen_currency():
    accounts = [
        make_account(1, "BDT", "5000"),
        make_account(2, "USD", "100"),
        make_account(3, "BDT", "250"),
    ]

    stats = build_dashboard_stats(accounts, [], today=TODAY)

    assert [b.currency for b in stats.by_currency] == ["BDT", "USD"]
    assert stats.by_currency[0].total_balance == Decimal("5250")
    assert stats.accounts_count == 3


def test_inactive_accounts_ignored():
    accounts = [make_account(1, balance="100"), make_account(2, "EUR", "999", active=False)]
    transactions = [make_txn(1, 2, TransactionType.INCOME, "50")]

    stats = build_dashboard_stats(accounts, transactions, today=TODAY)

    assert [b.currency for b in stats.by_currency] == ["USD"]
    assert stats.by_currency[0].monthly_income == 0
    assert stats.accounts_count == 1
    assert stats.transactions_count == 1


def test_monthly_totals_use_calendar_month_and_year():
    accounts = [make_account(1)]
    transactions = [
        make_txn(1, 1, TransactionType.INCOME, "1000"),
        make_txn(2, 1, TransactionType.EXPENSE, "400"),
        make_txn(3, 1, TransactionType.EXPENSE, "70", on=date(2023, 5, 3)),
        make_txn(4, 1, TransactionType.INCOME, "80", on=date(2024, 4, 30)),
    ]

    usd = build_dashboard_stats(accounts, transactions, today=TODAY).by_currency[0]

    assert usd.monthly_income == Decimal("1000")
    assert usd.monthly_expenses == Decimal("400")
    assert usd.savings_rate == Decimal("60")


def test_transfer_legs_excluded():
    accounts = [make_account(1), make_account(2)]
    transactions = [
        make_txn(1, 1, TransactionType.EXPENSE, "300", tags=["transfer", "t1", "2", "300"]),
        make_txn(2, 2, TransactionType.INCOME, "300", tags=["transfer", "t1", "1", "300"]),
        make_txn(3, 1, TransactionType.EXPENSE, "20", tags=["dps_transfer_abc"]),
    ]

    usd = build_dashboard_stats(accounts, transactions, today=TODAY).by_currency[0]

    assert usd.monthly_income == 0
    assert usd.monthly_expenses == 0
    assert usd.savings_rate == 0


def test_dashboard_cli(cli_runner, temp_db, sample_account, dps_account, notification_service):
    notification_service.create_notification("Welcome")

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "dashboard"])

    assert result.exit_code == 0
    assert "USD" in result.output
    assert "BDT" in result.output
    assert "$1,000.00" in result.output
    assert "Unread notifications: 1" in result.output
