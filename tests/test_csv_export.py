"""Tests for CSV export of transactions."""

import io
from datetime import date, datetime
from decimal import Decimal

from fintrack.domain.csv_export import CSV_HEADERS, export_transactions_csv, transaction_row
from fintrack.domain.entities import Account, AccountType, Transaction, TransactionType

NOW = datetime(2024, 2, 1)

ACCOUNT = Account(
    id=1,
    name="Checking",
    type=AccountType.CHECKING,
    currency="USD",
    initial_balance=Decimal("0"),
    calculated_balance=Decimal("0"),
    is_active=True,
    created_at=NOW,
)


def make_txn(id, type=TransactionType.EXPENSE, amount="12.50", tags=(), account_id=1, description="Lunch"):
    return Transaction(
        id=id,
        account_id=account_id,
        type=type,
        amount=Decimal(amount),
        category="Food & Dining",
        description=description,
        date=date(2024, 2, 14),
        created_at=NOW,
        tags=tuple(tags),
    )


def test_every_field_is_quoted():
    out = io.StringIO()

    count = export_transactions_csv([make_txn(1, tags=["work", "team"])], [ACCOUNT], out)

    assert count == 1
    lines = out.getvalue().split("\n")
    assert lines[0] == ",".join(f'"{h}"' for h in CSV_HEADERS)
    assert lines[1] == (
        '"2024-02-14","Lunch","Food & Dining","Checking","expense","12.50","work; team"'
    )


def test_transfer_legs_exported_as_transfer():
    row = transaction_row(
        make_txn(1, type=TransactionType.INCOME, tags=["transfer", "abc", "2", "10"]),
        {1: "Checking"},
    )

    assert row[4] == "Transfer"


def test_unknown_account_and_embedded_quotes():
    out = io.StringIO()

    export_transactions_csv([make_txn(1, account_id=9, description='The "big" one')], [], out)

    row = out.getvalue().split("\n")[1]
    assert '"The ""big"" one"' in row
    assert '"Unknown"' in row


def test_empty_export_writes_header_only():
    out = io.StringIO()

    assert export_transactions_csv([], [ACCOUNT], out) == 0
    assert out.getvalue() == ",".join(f'"{h}"' for h in CSV_HEADERS) + "\n"


def test_export_to_path(tmp_path):
    path = tmp_path / "out.csv"

    export_transactions_csv([make_txn(1), make_txn(2, amount="3")], [ACCOUNT], path)

    assert path.read_text(encoding="utf-8").count("\n") == 3
