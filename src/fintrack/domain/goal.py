"""Savings goal domain service."""

import logging
from decimal import Decimal
from typing import Any, Optional

from fintrack.database.base import Database
from fintrack.domain import errors
from fintrack.domain.entities import AccountType, SavingsGoal
from fintrack.domain.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"name", "target_amount", "description"})


class SavingsGoalService:
    """Service for managing savings goals.

    Every goal owns a dedicated savings account; contributions are moved
    there with ``TransferService.save_to_goal``.
    """

    def __init__(self, db: Database):
        self.db = db

    def create_goal(
        self,
        name: str,
        target_amount: Decimal,
        source_account_id: int,
        description: Optional[str] = None,
    ) -> int:
        """Create a goal and its "<name> (Savings)" account.

        The savings account uses the source account's currency.

        Returns:
            Savings goal ID

        Raises:
            ValidationError: If name is empty or target is not positive
            NotFoundError: If the source account doesn't exist
            ConflictError: If the savings account name is taken
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Goal name is required")
        if target_amount is None or target_amount <= 0:
            raise ValidationError("Target amount must be greater than zero")
        source = self.db.get_account(source_account_id)
        if source is None:
            raise NotFoundError(errors.account_not_found(source_account_id))

        account_name = f"{name} (Savings)"
        if any(acc.name == account_name for acc in self.db.list_accounts()):
            raise ConflictError(errors.duplicate_account_name(account_name))

        savings_id = self.db.create_account(
            name=account_name,
            type=AccountType.SAVINGS,
            currency=source.currency,
            initial_balance=Decimal("0"),
            description=description,
        )
        try:
            goal_id = self.db.create_savings_goal(
                name=name,
                target_amount=target_amount,
                source_account_id=source_account_id,
                savings_account_id=savings_id,
                description=description,
            )
        except ValueError:
            logger.warning("Creating goal '%s' failed; removing account %s", name, savings_id)
            self.db.delete_account(savings_id)
            raise

        logger.info("Created savings goal %s (%s)", goal_id, name)
        return goal_id

    def get_goal(self, goal_id: int) -> Optional[SavingsGoal]:
        return self.db.get_savings_goal(goal_id)

    def require_goal(self, goal_id: int) -> SavingsGoal:
        goal = self.db.get_savings_goal(goal_id)
        if goal is None:
            raise NotFoundError(errors.savings_goal_not_found(goal_id))
        return goal

    def list_goals(self) -> list[SavingsGoal]:
        """List goals, newest first."""
        return self.db.list_savings_goals()

    def update_goal(self, goal_id: int, **changes: Any) -> None:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown goal field(s): {', '.join(sorted(unknown))}")
        self.require_goal(goal_id)
        if "target_amount" in changes and (
            changes["target_amount"] is None or changes["target_amount"] <= 0
        ):
            raise ValidationError("Target amount must be greater than zero")
        if "name" in changes and not (changes["name"] or "").strip():
            raise ValidationError("Goal name is required")
        self.db.update_savings_goal(goal_id, changes)

    def delete_goal(self, goal_id: int) -> None:
        """Delete a goal. Its savings account and history are kept."""
        self.require_goal(goal_id)
        self.db.delete_savings_goal(goal_id)
        logger.info("Deleted savings goal %s", goal_id)
