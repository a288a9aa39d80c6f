"""CSV export of transactions."""

import csv
from pathlib import Path
from typing import IO, Iterable, Union

from fintrack.domain.entities import Account, Transaction

CSV_HEADERS = ("Date", "Description", "Category", "Account", "Type", "Amount", "Tags")


def transaction_row(transaction: Transaction, account_names: dict[int, str]) -> list[str]:
    """Build the exported fields of one transaction."""
    tags = list(transaction.tags)
    return [
        transaction.date.isoformat(),
        transaction.description,
        transaction.category,
        account_names.get(transaction.account_id, "Unknown"),
        "Transfer" if "transfer" in tags else transaction.type.value,
        str(transaction.amount),
        "; ".join(tags),
    ]


def export_transactions_csv(
    transactions: Iterable[Transaction],
    accounts: Iterable[Account],
    destination: Union[str, Path, IO[str]],
) -> int:
    """Write transactions as CSV with every field quoted.

    Args:
        transactions: Transactions to export, in output order
        accounts: Accounts used to resolve account names
        destination: File path or open text stream

    Returns:
        Number of transaction rows written
    """
    account_names = {acc.id: acc.name for acc in accounts}

    if isinstance(destination, (str, Path)):
        with open(destination, "w", newline="", encoding="utf-8") as f:
            return _write_rows(f, transactions, account_names)
    return _write_rows(destination, transactions, account_names)


def _write_rows(
    stream: IO[str], transactions: Iterable[Transaction], account_names: dict[int, str]
) -> int:
    writer = csv.writer(stream, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    count = 0
    for transaction in transactions:
        writer.writerow(transaction_row(transaction, account_names))
        count += 1
    return count
