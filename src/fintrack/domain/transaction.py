"""Transaction domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from fintrack.database.base import Database
from fintrack.domain import errors
from fintrack.domain.entities import (
    RecurringFrequency,
    Transaction as TransactionEntity,
    TransactionType,
)
from fintrack.domain.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset(
    {
        "account_id",
        "type",
        "amount",
        "category",
        "description",
        "date",
        "tags",
        "saving_amount",
        "is_recurring",
        "recurring_frequency",
    }
)


def validate_saving_amount(
    txn_type: TransactionType, amount: Decimal, saving_amount: Optional[Decimal]
) -> None:
    """Check a saving annotation against its transaction.

    Raises:
        ValidationError: If the annotation is on an expense, is a percentage
            outside 0..100, or is a fixed amount above the income
    """
    if saving_amount is None:
        return
    if txn_type != TransactionType.INCOME:
        raise ValidationError("Saving amount is only allowed on income transactions")
    if saving_amount < 0:
        if abs(saving_amount) > 100:
            raise ValidationError("Saving percentage must be between 0 and 100")
    elif saving_amount > amount:
        raise ValidationError("Saving amount cannot exceed the income amount")


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(
        self,
        account_id: int,
        type: TransactionType,
        amount: Decimal,
        date: date,
        category: str = "",
        description: str = "",
        tags: Optional[list[str]] = None,
        saving_amount: Optional[Decimal] = None,
        is_recurring: bool = False,
        recurring_frequency: Optional[RecurringFrequency] = None,
    ) -> int:
        """Create a transaction.

        Args:
            account_id: Account ID
            type: Income or expense
            amount: Positive transaction amount
            date: Transaction date
            category: Category label
            description: Free-text description
            tags: Optional tag list
            saving_amount: Optional saving rule (negative = percent, income only)
            is_recurring: Whether the transaction repeats
            recurring_frequency: Required when recurring

        Returns:
            Transaction ID

        Raises:
            NotFoundError: If account doesn't exist
            ValidationError: If amount, saving or recurrence is invalid
        """
        if self.db.get_account(account_id) is None:
            raise NotFoundError(errors.account_not_found(account_id))

        txn_type = TransactionType(type)
        if amount is None or amount <= 0:
            raise ValidationError("Amount must be greater than zero")
        validate_saving_amount(txn_type, amount, saving_amount)
        if is_recurring and recurring_frequency is None:
            raise ValidationError("Recurring transactions need a frequency")

        transaction_id = self.db.create_transaction(
            account_id=account_id,
            type=txn_type,
            amount=amount,
            date=date,
            category=category or "",
            description=description or "",
            tags=list(tags or []),
            saving_amount=saving_amount,
            is_recurring=is_recurring,
            recurring_frequency=(
                RecurringFrequency(recurring_frequency) if is_recurring else None
            ),
        )
        logger.debug(
            "Created %s transaction %s of %s on account %s",
            txn_type.value,
            transaction_id,
            amount,
            account_id,
        )
        return transaction_id

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def require_transaction(self, transaction_id: int) -> TransactionEntity:
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(errors.transaction_not_found(transaction_id))
        return txn

    def update_transaction(self, transaction_id: int, **changes: Any) -> None:
        """Update transaction fields.

        Only the given fields change; the merged result is validated as a
        whole. Turning recurrence off clears the frequency.

        Raises:
            NotFoundError: If transaction or new account doesn't exist
            ValidationError: If a field is unknown or the result is invalid
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(
                f"Unknown transaction field(s): {', '.join(sorted(unknown))}"
            )
        txn = self.require_transaction(transaction_id)

        if "account_id" in changes and self.db.get_account(changes["account_id"]) is None:
            raise NotFoundError(errors.account_not_found(changes["account_id"]))

        txn_type = TransactionType(changes.get("type", txn.type))
        amount = changes.get("amount", txn.amount)
        if amount is None or amount <= 0:
            raise ValidationError("Amount must be greater than zero")
        saving_amount = changes.get("saving_amount", txn.saving_amount)
        if txn_type == TransactionType.EXPENSE and "saving_amount" not in changes:
            # Switching to expense drops the saving annotation
            saving_amount = None
            if txn.saving_amount is not None:
                changes["saving_amount"] = None
        validate_saving_amount(txn_type, amount, saving_amount)

        is_recurring = changes.get("is_recurring", txn.is_recurring)
        frequency = changes.get("recurring_frequency", txn.recurring_frequency)
        if is_recurring and frequency is None:
            raise ValidationError("Recurring transactions need a frequency")
        if not is_recurring and "is_recurring" in changes:
            changes["recurring_frequency"] = None

        self.db.update_transaction(transaction_id, changes)
        logger.debug("Updated transaction %s: %s", transaction_id, sorted(changes))

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        self.require_transaction(transaction_id)
        self.db.delete_transaction(transaction_id)

    def list_transactions(
        self,
        account_id: Optional[int] = None,
        category: Optional[str] = None,
        type: Optional[TransactionType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        search: Optional[str] = None,
    ) -> list[TransactionEntity]:
        """List transactions with filters, newest first."""
        return self.db.list_transactions(
            account_id=account_id,
            category=category,
            type=type,
            start_date=start_date,
            end_date=end_date,
            search=search,
        )
