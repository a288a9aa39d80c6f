"""Tests for saved and donated amount derivation."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from fintrack.domain.entities import Account, AccountType, Transaction, TransactionType
from fintrack.domain.savings import (
    compute_donation,
    compute_saved,
    derive_income_breakdown,
    describe_donation_preference,
    describe_saving_amount,
    dps_savings_totals,
    summarize_account_savings,
)

NOW = datetime(2024, 1, 1, 12, 0)


def make_account(id=1, currency="USD", balance="0", **kwargs):
    return Account(
        id=id,
        name=f"Account {id}",
        type=AccountType.CHECKING,
        currency=currency,
        initial_balance=Decimal(balance),
        calculated_balance=Decimal(balance),
        is_active=True,
        created_at=NOW,
        **kwargs,
    )


def make_income(amount, saving=None, account_id=1, tags=(), id=1):
    return Transaction(
        id=id,
        account_id=account_id,
        type=TransactionType.INCOME,
        amount=Decimal(amount),
        category="Salary",
        description="Pay",
        date=date(2024, 1, 1),
        created_at=NOW,
        tags=tuple(tags),
        saving_amount=Decimal(saving) if saving is not None else None,
    )


@pytest.mark.parametrize(
    "amount,saving,expected",
    [
        ("1000", None, "0"),
        ("1000", "-10", "100"),
        ("1000", "250", "250"),
        ("1000", "0", "0"),
    ],
)
def test_compute_saved(amount, saving, expected):
    saving = Decimal(saving) if saving is not None else None
    assert compute_saved(Decimal(amount), saving) == Decimal(expected)


def test_fractional_preference_is_an_amount():
    # 0.5 means half a currency unit, not fifty percent
    assert compute_donation(Decimal("100"), Decimal("0.5")) == Decimal("0.5")


def test_donation_percentage():
    assert compute_donation(Decimal("900"), Decimal("-10")) == Decimal("90")


def test_donation_clamped_to_base():
    assert compute_donation(Decimal("40"), Decimal("100")) == Decimal("40")


def test_donation_zero_for_non_positive_base():
    assert compute_donation(Decimal("0"), Decimal("-10")) == Decimal("0")
    assert compute_donation(Decimal("-5"), Decimal("10")) == Decimal("0")


def test_breakdown_applies_saving_before_donation():
    row = derive_income_breakdown(make_income("1000", saving="-20"), Decimal("50"))

    assert row.saved == Decimal("200")
    assert row.donated == Decimal("50")
    assert row.remaining == Decimal("750")
    assert row.saved + row.donated + row.remaining == row.income


def test_summary_skips_transfers_and_other_accounts():
    account = make_account(donation_preference=Decimal("-10"))
    transactions = [
        make_income("500", id=1),
        make_income("300", id=2, tags=["transfer", "abc", "2", "300"]),
        make_income("700", id=3, account_id=2),
    ]

    summary = summarize_account_savings(account, transactions)

    assert summary.total_income == Decimal("500")
    assert summary.total_donated == Decimal("50")
    assert len(summary.rows) == 1


def test_describe_donation_preference():
    assert describe_donation_preference(None) == "None"
    assert describe_donation_preference(Decimal("-10")) == "10% of remaining income"
    assert describe_donation_preference(Decimal("50")) == "$50.00 after saving"


def test_describe_saving_amount():
    assert describe_saving_amount(None) == "-"
    assert describe_saving_amount(Decimal("-12.5")) == "12.5%"
    assert describe_saving_amount(Decimal("20"), "GBP") == "£20.00"


def test_dps_savings_totals():
    savings = make_account(id=2, balance="300")
    owner = make_account(id=1, has_dps=True, dps_savings_account_id=2)
    other_currency = make_account(id=3, currency="BDT", has_dps=True, dps_savings_account_id=4)
    other_savings = make_account(id=4, currency="BDT", balance="999")

    accounts = [owner, savings, other_currency, other_savings]
    assert dps_savings_totals(accounts, "USD") == Decimal("300")
    assert dps_savings_totals(accounts, "BDT") == Decimal("999")
