"""Transfers between accounts.

A transfer is written as two transactions: an expense on the source account
and an income on the destination, sharing a generated transfer id in their
tags. The legs are separate writes, so when a later step fails the earlier
legs are removed again by tag before the error is raised.
"""

import logging
import uuid
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from fintrack.database.base import Database
from fintrack.domain import errors
from fintrack.domain.entities import (
    Account,
    DPSAmountType,
    DPSTransfer,
    NotificationType,
    TransactionType,
    TransferResult,
)
from fintrack.domain.errors import NotFoundError, TransferError, ValidationError
from fintrack.domain.notification import NotificationService
from fintrack.utils.currency import format_currency

logger = logging.getLogger(__name__)

TRANSFER_TAG = "transfer"
TRANSFER_CATEGORY = "Transfer"
DPS_CATEGORY = "DPS"
DPS_TAG_PREFIX = "dps_transfer_"
CENT = Decimal("0.01")


def dps_tag(transfer_id: str) -> str:
    return f"{DPS_TAG_PREFIX}{transfer_id}"


class TransferService:
    """Service for moving money between accounts."""

    def __init__(self, db: Database):
        self.db = db
        self.notifications = NotificationService(db)

    def _require_account(self, account_id: int) -> Account:
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(errors.account_not_found(account_id))
        return account

    def _compensate(self, tag: str) -> None:
        """Remove the legs already written for a failed transfer."""
        logger.warning("Rolling back transfer legs tagged %s", tag)
        try:
            removed = self.db.delete_transactions_by_tag(tag)
            logger.debug("Removed %d transfer leg(s) tagged %s", removed, tag)
        except Exception:
            logger.exception("Could not roll back transfer legs tagged %s", tag)

    def transfer(
        self,
        from_account_id: int,
        to_account_id: int,
        from_amount: Decimal,
        exchange_rate: Decimal = Decimal("1"),
        note: Optional[str] = None,
        on_date: Optional[date] = None,
    ) -> TransferResult:
        """Move money between two accounts.

        The destination receives ``from_amount * exchange_rate``, rounded to
        cents.

        Raises:
            ValidationError: If amounts are not positive, the accounts are the
                same, or the source balance is too low
            NotFoundError: If either account doesn't exist
            TransferError: If the destination leg could not be written
        """
        if from_amount is None or from_amount <= 0:
            raise ValidationError("Transfer amount must be greater than zero")
        if exchange_rate is None or exchange_rate <= 0:
            raise ValidationError("Exchange rate must be greater than zero")
        if from_account_id == to_account_id:
            raise ValidationError("Source and destination accounts must be different")

        from_acc = self._require_account(from_account_id)
        to_acc = self._require_account(to_account_id)
        if from_acc.calculated_balance < from_amount:
            raise ValidationError(
                errors.insufficient_funds(from_acc.name, from_acc.calculated_balance, from_amount)
            )

        to_amount = (from_amount * exchange_rate).quantize(CENT, rounding=ROUND_HALF_UP)
        transfer_id = str(uuid.uuid4())
        on_date = on_date or date.today()
        logger.debug(
            "Transfer %s: %s from %s to %s (rate %s)",
            transfer_id,
            from_amount,
            from_account_id,
            to_account_id,
            exchange_rate,
        )

        try:
            expense_id = self.db.create_transaction(
                account_id=from_account_id,
                type=TransactionType.EXPENSE,
                amount=from_amount,
                date=on_date,
                category=TRANSFER_CATEGORY,
                description=note or f"Transfer to {to_acc.name}",
                tags=[TRANSFER_TAG, transfer_id, str(to_account_id), str(to_amount)],
            )
        except Exception as e:
            raise TransferError(f"Failed to create source transaction: {e}") from e
        logger.debug("Transfer %s: wrote source leg %s", transfer_id, expense_id)

        try:
            income_id = self.db.create_transaction(
                account_id=to_account_id,
                type=TransactionType.INCOME,
                amount=to_amount,
                date=on_date,
                category=TRANSFER_CATEGORY,
                description=note or f"Transfer from {from_acc.name}",
                tags=[TRANSFER_TAG, transfer_id, str(from_account_id), str(from_amount)],
            )
        except Exception as e:
            self._compensate(transfer_id)
            raise TransferError(f"Failed to create destination transaction: {e}") from e
        logger.debug("Transfer %s: wrote destination leg %s", transfer_id, income_id)

        result = TransferResult(
            transfer_id=transfer_id,
            from_account_id=from_account_id,
            to_account_id=to_account_id,
            from_amount=from_amount,
            to_amount=to_amount,
            expense_transaction_id=expense_id,
            income_transaction_id=income_id,
            from_balance=from_acc.calculated_balance - from_amount,
            to_balance=to_acc.calculated_balance + to_amount,
        )
        logger.info(
            "Transferred %s from '%s' to '%s'", from_amount, from_acc.name, to_acc.name
        )
        self.notifications.notify(
            "Transfer completed",
            type=NotificationType.SUCCESS,
            body=(
                f"Moved {format_currency(from_amount, from_acc.currency)} from "
                f"{from_acc.name} to {to_acc.name}"
            ),
        )
        return result

    def transfer_dps(
        self,
        from_account_id: int,
        amount: Optional[Decimal] = None,
        on_date: Optional[date] = None,
    ) -> TransferResult:
        """Move a DPS contribution into the account's linked savings account.

        Fixed-amount schemes always transfer the configured amount; otherwise
        ``amount`` is required.

        Raises:
            NotFoundError: If the account or its savings account doesn't exist
            ValidationError: If DPS is not enabled or the amount is invalid
            TransferError: If a later write failed; earlier legs are removed
        """
        source = self._require_account(from_account_id)
        if not source.has_dps or source.dps_savings_account_id is None:
            raise ValidationError(f"DPS is not enabled for account '{source.name}'")
        destination = self.db.get_account(source.dps_savings_account_id)
        if destination is None:
            raise NotFoundError(
                f"DPS savings account {source.dps_savings_account_id} not found"
            )

        if source.dps_amount_type == DPSAmountType.FIXED and source.dps_fixed_amount:
            amount = source.dps_fixed_amount
        if amount is None or amount <= 0:
            raise ValidationError("DPS amount must be greater than zero")

        transfer_id = str(uuid.uuid4())
        tag = dps_tag(transfer_id)
        on_date = on_date or date.today()
        logger.debug("DPS transfer %s: %s from %s", transfer_id, amount, from_account_id)

        try:
            expense_id = self.db.create_transaction(
                account_id=source.id,
                type=TransactionType.EXPENSE,
                amount=amount,
                date=on_date,
                category=DPS_CATEGORY,
                description=f"DPS Transfer to {destination.name}",
                tags=[tag],
            )
        except Exception as e:
            raise TransferError(f"Failed to create DPS source transaction: {e}") from e

        try:
            income_id = self.db.create_transaction(
                account_id=destination.id,
                type=TransactionType.INCOME,
                amount=amount,
                date=on_date,
                category=DPS_CATEGORY,
                description=f"DPS Transfer from {source.name}",
                tags=[tag],
            )
        except Exception as e:
            self._compensate(tag)
            raise TransferError(f"Failed to create DPS destination transaction: {e}") from e

        try:
            self.db.create_dps_transfer(
                from_account_id=source.id,
                to_account_id=destination.id,
                amount=amount,
                date=on_date,
                transfer_id=transfer_id,
            )
        except Exception as e:
            self._compensate(tag)
            raise TransferError(f"Failed to record DPS transfer: {e}") from e

        logger.info("DPS transfer of %s from '%s' completed", amount, source.name)
        self.notifications.notify(
            "DPS transfer completed",
            type=NotificationType.SUCCESS,
            body=(
                f"Moved {format_currency(amount, source.currency)} from "
                f"{source.name} to {destination.name}"
            ),
        )
        return TransferResult(
            transfer_id=transfer_id,
            from_account_id=source.id,
            to_account_id=destination.id,
            from_amount=amount,
            to_amount=amount,
            expense_transaction_id=expense_id,
            income_transaction_id=income_id,
            from_balance=source.calculated_balance - amount,
            to_balance=destination.calculated_balance + amount,
        )

    def list_dps_history(self, account_id: Optional[int] = None) -> list[DPSTransfer]:
        """DPS transfers, newest first."""
        return self.db.list_dps_transfers(account_id=account_id)

    def save_to_goal(
        self, goal_id: int, amount: Decimal, on_date: Optional[date] = None
    ) -> TransferResult:
        """Move money from a goal's source account into its savings account.

        Raises:
            NotFoundError: If the goal or its accounts don't exist
            ValidationError: If the amount is not positive or not covered
            TransferError: If a later write failed; earlier legs are removed
        """
        goal = self.db.get_savings_goal(goal_id)
        if goal is None:
            raise NotFoundError(errors.savings_goal_not_found(goal_id))
        if amount is None or amount <= 0:
            raise ValidationError("Amount must be greater than zero")
        source = self._require_account(goal.source_account_id)
        savings = self._require_account(goal.savings_account_id)
        if source.calculated_balance < amount:
            raise ValidationError(
                errors.insufficient_funds(source.name, source.calculated_balance, amount)
            )

        transfer_id = str(uuid.uuid4())
        on_date = on_date or date.today()
        description = f"Savings: {goal.name}"

        try:
            expense_id = self.db.create_transaction(
                account_id=source.id,
                type=TransactionType.EXPENSE,
                amount=amount,
                date=on_date,
                category=TRANSFER_CATEGORY,
                description=description,
                tags=[TRANSFER_TAG, transfer_id, str(savings.id), "savings"],
            )
        except Exception as e:
            raise TransferError(f"Failed to create savings source transaction: {e}") from e

        try:
            income_id = self.db.create_transaction(
                account_id=savings.id,
                type=TransactionType.INCOME,
                amount=amount,
                date=on_date,
                category=TRANSFER_CATEGORY,
                description=description,
                tags=[TRANSFER_TAG, transfer_id, str(source.id), "savings"],
            )
            self.db.update_savings_goal(
                goal_id, {"current_amount": goal.current_amount + amount}
            )
        except Exception as e:
            self._compensate(transfer_id)
            raise TransferError(f"Failed to save to goal '{goal.name}': {e}") from e

        logger.info("Saved %s towards goal '%s'", amount, goal.name)
        self.notifications.notify(
            "Savings goal updated",
            type=NotificationType.SUCCESS,
            body=f"Added {format_currency(amount, source.currency)} to {goal.name}",
        )
        return TransferResult(
            transfer_id=transfer_id,
            from_account_id=source.id,
            to_account_id=savings.id,
            from_amount=amount,
            to_amount=amount,
            expense_transaction_id=expense_id,
            income_transaction_id=income_id,
            from_balance=source.calculated_balance - amount,
            to_balance=savings.calculated_balance + amount,
        )
