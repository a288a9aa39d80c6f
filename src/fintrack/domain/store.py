"""In-memory finance store.

``FinanceStore`` caches what a session works with and exposes the derived
views (dashboard, purchase analytics, searches) over those caches. Every
mutation goes through the domain services and then refreshes the caches it
touched. The message of the last failed operation is kept in ``error``.
"""

import dataclasses
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Optional

from fintrack.database.base import Database
from fintrack.domain.account import AccountService
from fintrack.domain.category import CategoryService
from fintrack.domain.dashboard import build_dashboard_stats
from fintrack.domain.entities import (
    Account,
    Category,
    DashboardStats,
    Purchase,
    PurchaseAnalytics,
    PurchaseCategory,
    PurchaseStatus,
    SavingsGoal,
    Transaction,
    TransferResult,
)
from fintrack.domain.goal import SavingsGoalService
from fintrack.domain.purchase import PurchaseService, build_purchase_analytics
from fintrack.domain.transaction import TransactionService
from fintrack.domain.transfer import TransferService

logger = logging.getLogger(__name__)

ACCOUNTS = "accounts"
TRANSACTIONS = "transactions"
CATEGORIES = "categories"
PURCHASES = "purchases"
PURCHASE_CATEGORIES = "purchase_categories"
SAVINGS_GOALS = "savings_goals"


class FinanceStore:
    """Cache of accounts, transactions, categories, purchases and goals."""

    def __init__(self, db: Database):
        self.db = db
        self.account_service = AccountService(db)
        self.transaction_service = TransactionService(db)
        self.category_service = CategoryService(db)
        self.purchase_service = PurchaseService(db)
        self.goal_service = SavingsGoalService(db)
        self.transfer_service = TransferService(db)

        self.accounts: list[Account] = []
        self.transactions: list[Transaction] = []
        self.categories: list[Category] = []
        self.purchases: list[Purchase] = []
        self.purchase_categories: list[PurchaseCategory] = []
        self.savings_goals: list[SavingsGoal] = []
        self.error: Optional[str] = None

        self._loaders: dict[str, Callable[[], None]] = {
            ACCOUNTS: self.fetch_accounts,
            TRANSACTIONS: self.fetch_transactions,
            CATEGORIES: self.fetch_categories,
            PURCHASES: self.fetch_purchases,
            PURCHASE_CATEGORIES: self.fetch_purchase_categories,
            SAVINGS_GOALS: self.fetch_savings_goals,
        }

    # Loading
    def fetch_accounts(self) -> None:
        self.accounts = self.account_service.list_accounts()

    def fetch_transactions(self) -> None:
        self.transactions = self.transaction_service.list_transactions()

    def fetch_categories(self) -> None:
        self.categories = self.category_service.list_categories()

    def fetch_purchases(self) -> None:
        self.purchases = self.purchase_service.list_purchases()

    def fetch_purchase_categories(self) -> None:
        self.purchase_categories = self.purchase_service.list_purchase_categories()

    def fetch_savings_goals(self) -> None:
        self.savings_goals = self.goal_service.list_goals()

    def fetch_all(self) -> None:
        """Load every cache."""
        self._refresh(*self._loaders)
        logger.debug(
            "Loaded %d account(s), %d transaction(s), %d purchase(s)",
            len(self.accounts),
            len(self.transactions),
            len(self.purchases),
        )

    def _refresh(self, *caches: str) -> None:
        try:
            for cache in caches:
                self._loaders[cache]()
        except ValueError as e:
            self.error = str(e)
            raise

    def _run(self, operation: Callable[..., Any], refresh: tuple[str, ...], *args, **kwargs):
        """Run a service call, record its error, and refresh the given caches."""
        self.error = None
        try:
            result = operation(*args, **kwargs)
        except ValueError as e:
            self.error = str(e)
            logger.debug("%s failed: %s", operation.__name__, e)
            raise
        self._refresh(*refresh)
        return result

    # Accounts
    def add_account(self, name: str, **fields: Any) -> int:
        return self._run(self.account_service.create_account, (ACCOUNTS,), name, **fields)

    def update_account(self, account_id: int, **changes: Any) -> None:
        self._run(self.account_service.update_account, (ACCOUNTS,), account_id, **changes)

    def toggle_account(self, account_id: int) -> None:
        account = self.account_service.require_account(account_id)
        self._run(
            self.account_service.set_active, (ACCOUNTS,), account_id, not account.is_active
        )

    def delete_account(self, account_id: int) -> None:
        self._run(self.account_service.delete_account, (ACCOUNTS,), account_id)

    # Transactions
    def add_transaction(self, account_id: int, **fields: Any) -> int:
        return self._run(
            self.transaction_service.create_transaction,
            (TRANSACTIONS, ACCOUNTS),
            account_id,
            **fields,
        )

    def update_transaction(self, transaction_id: int, **changes: Any) -> None:
        self._run(
            self.transaction_service.update_transaction,
            (TRANSACTIONS, ACCOUNTS),
            transaction_id,
            **changes,
        )

    def delete_transaction(self, transaction_id: int) -> None:
        self._run(
            self.transaction_service.delete_transaction,
            (TRANSACTIONS, ACCOUNTS),
            transaction_id,
        )

    # Categories
    def add_category(self, name: str, **fields: Any) -> str:
        return self._run(
            self.category_service.create_category,
            (CATEGORIES, PURCHASE_CATEGORIES),
            name,
            **fields,
        )

    def delete_category(self, category_id: str) -> None:
        self._run(self.category_service.delete_category, (CATEGORIES,), category_id)

    # Purchases
    def add_purchase(self, item_name: str, **fields: Any) -> int:
        return self._run(self.purchase_service.add_purchase, (PURCHASES,), item_name, **fields)

    def update_purchase(self, purchase_id: int, **changes: Any) -> None:
        self._run(self.purchase_service.update_purchase, (PURCHASES,), purchase_id, **changes)

    def bulk_update_purchase_status(self, purchase_ids: list[int], status: PurchaseStatus) -> int:
        return self._run(
            self.purchase_service.bulk_update_purchases,
            (PURCHASES,),
            purchase_ids,
            status=status,
        )

    def delete_purchase(self, purchase_id: int) -> None:
        self._run(self.purchase_service.delete_purchase, (PURCHASES,), purchase_id)

    def add_purchase_category(self, category_name: str, **fields: Any) -> int:
        return self._run(
            self.purchase_service.add_purchase_category,
            (PURCHASE_CATEGORIES,),
            category_name,
            **fields,
        )

    def update_purchase_category(self, category_id: int, **changes: Any) -> None:
        self._run(
            self.purchase_service.update_purchase_category,
            (PURCHASE_CATEGORIES,),
            category_id,
            **changes,
        )

    def delete_purchase_category(self, category_id: int) -> None:
        self._run(
            self.purchase_service.delete_purchase_category, (PURCHASE_CATEGORIES,), category_id
        )

    # Savings goals
    def create_goal(self, name: str, **fields: Any) -> int:
        return self._run(
            self.goal_service.create_goal, (SAVINGS_GOALS, ACCOUNTS), name, **fields
        )

    def update_goal(self, goal_id: int, **changes: Any) -> None:
        self._run(self.goal_service.update_goal, (SAVINGS_GOALS,), goal_id, **changes)

    def delete_goal(self, goal_id: int) -> None:
        self._run(self.goal_service.delete_goal, (SAVINGS_GOALS,), goal_id)

    def save_to_goal(self, goal_id: int, amount: Decimal) -> TransferResult:
        result = self._run(self.transfer_service.save_to_goal, (SAVINGS_GOALS,), goal_id, amount)
        self._settle_transfer(result)
        return result

    # Transfers
    def transfer(
        self,
        from_account_id: int,
        to_account_id: int,
        from_amount: Decimal,
        exchange_rate: Decimal = Decimal("1"),
        note: Optional[str] = None,
    ) -> TransferResult:
        """Transfer between accounts and reconcile the cached balances."""
        result = self._run(
            self.transfer_service.transfer,
            (),
            from_account_id,
            to_account_id,
            from_amount,
            exchange_rate=exchange_rate,
            note=note,
        )
        self._settle_transfer(result)
        return result

    def transfer_dps(self, from_account_id: int, amount: Optional[Decimal] = None) -> TransferResult:
        result = self._run(self.transfer_service.transfer_dps, (), from_account_id, amount)
        self._settle_transfer(result)
        return result

    def _settle_transfer(self, result: TransferResult) -> None:
        """Apply a transfer to the cached balances, then reload and compare.

        The stored balances are recomputed from transaction history; any
        difference from the locally applied delta is logged.
        """
        deltas = {
            result.from_account_id: -result.from_amount,
            result.to_account_id: result.to_amount,
        }
        self.accounts = [
            dataclasses.replace(acc, calculated_balance=acc.calculated_balance + deltas[acc.id])
            if acc.id in deltas
            else acc
            for acc in self.accounts
        ]
        expected = {
            acc.id: acc.calculated_balance for acc in self.accounts if acc.id in deltas
        }

        self._refresh(ACCOUNTS, TRANSACTIONS)
        for acc in self.accounts:
            if acc.id in expected and acc.calculated_balance != expected[acc.id]:
                logger.warning(
                    "Balance of account %s is %s after transfer %s, expected %s",
                    acc.id,
                    acc.calculated_balance,
                    result.transfer_id,
                    expected[acc.id],
                )

    # Derived views
    @property
    def active_accounts(self) -> list[Account]:
        return [acc for acc in self.accounts if acc.is_active]

    @property
    def active_transactions(self) -> list[Transaction]:
        active_ids = {acc.id for acc in self.active_accounts}
        return [txn for txn in self.transactions if txn.account_id in active_ids]

    def transactions_by_account(self, account_id: int) -> list[Transaction]:
        return [txn for txn in self.transactions if txn.account_id == account_id]

    def transactions_by_category(self, category: str) -> list[Transaction]:
        return [txn for txn in self.transactions if txn.category == category]

    def search_transactions(self, term: str) -> list[Transaction]:
        """Transactions whose description, category or a tag contains ``term``."""
        needle = (term or "").strip().lower()
        if not needle:
            return []
        return [
            txn
            for txn in self.transactions
            if needle in txn.description.lower()
            or needle in txn.category.lower()
            or any(needle in tag.lower() for tag in txn.tags)
        ]

    def search_accounts(self, term: str) -> list[Account]:
        needle = (term or "").strip().lower()
        if not needle:
            return []
        return [
            acc
            for acc in self.accounts
            if needle in acc.name.lower()
            or needle in acc.type.value
            or needle in acc.currency.lower()
        ]

    def dashboard_stats(self, today: Optional[date] = None) -> DashboardStats:
        return build_dashboard_stats(self.accounts, self.transactions, today=today)

    def purchase_analytics(self, today: Optional[date] = None) -> PurchaseAnalytics:
        return build_purchase_analytics(self.purchases, today=today)
