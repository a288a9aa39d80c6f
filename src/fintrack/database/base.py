"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from fintrack.domain.entities import (
    Account,
    AccountType,
    Category,
    ChangeEvent,
    DPSAmountType,
    DPSTransfer,
    DPSType,
    Notification,
    NotificationType,
    Purchase,
    PurchaseCategory,
    PurchasePriority,
    PurchaseStatus,
    RecurringFrequency,
    SavingsGoal,
    Transaction,
    TransactionType,
)

ChangeCallback = Callable[[ChangeEvent], None]


class Database(ABC):
    """Abstract database interface for fintrack.

    Every mutating call commits on its own. Partial updates take a mapping of
    column name to new value so that nullable columns can be cleared.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def subscribe(self, table: str, callback: ChangeCallback) -> Callable[[], None]:
        """Register a callback for committed row changes on a table.

        Returns a function that removes the subscription.
        """
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        name: str,
        type: AccountType,
        currency: str,
        initial_balance: Decimal = Decimal("0"),
        description: Optional[str] = None,
        is_active: bool = True,
        has_dps: bool = False,
        dps_type: Optional[DPSType] = None,
        dps_amount_type: Optional[DPSAmountType] = None,
        dps_fixed_amount: Optional[Decimal] = None,
        dps_savings_account_id: Optional[int] = None,
        donation_preference: Optional[Decimal] = None,
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, active_only: bool = False) -> list[Account]:
        """List accounts in creation order."""
        pass

    @abstractmethod
    def update_account(self, account_id: int, updates: dict[str, Any]) -> None:
        """Update account columns."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account."""
        pass

    @abstractmethod
    def get_account_transaction_count(self, account_id: int) -> int:
        """Get count of transactions associated with an account."""
        pass

    @abstractmethod
    def recalculate_account_balance(self, account_id: int) -> Decimal:
        """Recompute calculated_balance from initial balance and history."""
        pass

    # Transaction operations
    @abstractmethod
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
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        account_id: Optional[int] = None,
        category: Optional[str] = None,
        type: Optional[TransactionType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        search: Optional[str] = None,
    ) -> list[Transaction]:
        """List transactions, newest first, with optional filters.

        Args:
            account_id: Optional account ID filter
            category: Optional exact category label filter
            type: Optional direction filter
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            search: Optional case-insensitive text matched against
                description and category
        """
        pass

    @abstractmethod
    def update_transaction(self, transaction_id: int, updates: dict[str, Any]) -> None:
        """Update transaction columns."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def delete_transactions_by_tag(self, tag: str) -> int:
        """Delete every transaction carrying a tag. Returns deleted count."""
        pass

    # Category operations
    @abstractmethod
    def create_category(self, name: str, type: TransactionType, color: str, icon: str) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def list_categories(self, type: Optional[TransactionType] = None) -> list[Category]:
        """List user-created categories."""
        pass

    @abstractmethod
    def delete_category(self, category_id: int) -> None:
        """Delete a category."""
        pass

    # Purchase operations
    @abstractmethod
    def create_purchase(
        self,
        item_name: str,
        category: str,
        price: Decimal,
        purchase_date: date,
        status: PurchaseStatus = PurchaseStatus.PLANNED,
        priority: PurchasePriority = PurchasePriority.MEDIUM,
        notes: Optional[str] = None,
    ) -> int:
        """Create a purchase. Returns purchase ID."""
        pass

    @abstractmethod
    def get_purchase(self, purchase_id: int) -> Optional[Purchase]:
        pass

    @abstractmethod
    def list_purchases(
        self,
        category: Optional[str] = None,
        status: Optional[PurchaseStatus] = None,
    ) -> list[Purchase]:
        """List purchases, newest purchase date first."""
        pass

    @abstractmethod
    def update_purchase(self, purchase_id: int, updates: dict[str, Any]) -> None:
        pass

    @abstractmethod
    def bulk_update_purchases(self, purchase_ids: list[int], updates: dict[str, Any]) -> int:
        """Apply the same updates to several purchases. Returns updated count."""
        pass

    @abstractmethod
    def delete_purchase(self, purchase_id: int) -> None:
        pass

    # Purchase category operations
    @abstractmethod
    def create_purchase_category(
        self,
        category_name: str,
        monthly_budget: Decimal = Decimal("0"),
        category_color: str = "#3B82F6",
        description: Optional[str] = None,
    ) -> int:
        pass

    @abstractmethod
    def get_purchase_category(self, category_id: int) -> Optional[PurchaseCategory]:
        pass

    @abstractmethod
    def get_purchase_category_by_name(self, category_name: str) -> Optional[PurchaseCategory]:
        pass

    @abstractmethod
    def list_purchase_categories(self) -> list[PurchaseCategory]:
        pass

    @abstractmethod
    def update_purchase_category(self, category_id: int, updates: dict[str, Any]) -> None:
        pass

    @abstractmethod
    def delete_purchase_category(self, category_id: int) -> None:
        pass

    # Notification operations
    @abstractmethod
    def create_notification(
        self,
        title: str,
        type: NotificationType = NotificationType.INFO,
        body: Optional[str] = None,
    ) -> int:
        pass

    @abstractmethod
    def get_notification(self, notification_id: int) -> Optional[Notification]:
        pass

    @abstractmethod
    def list_notifications(self, unread_only: bool = False) -> list[Notification]:
        """List notifications, newest first."""
        pass

    @abstractmethod
    def mark_notification_read(self, notification_id: int) -> None:
        pass

    @abstractmethod
    def mark_all_notifications_read(self) -> int:
        """Mark every unread notification read. Returns updated count."""
        pass

    @abstractmethod
    def delete_notification(self, notification_id: int) -> None:
        pass

    @abstractmethod
    def delete_all_notifications(self) -> int:
        pass

    # DPS transfer history
    @abstractmethod
    def create_dps_transfer(
        self,
        from_account_id: int,
        to_account_id: int,
        amount: Decimal,
        date: date,
        transfer_id: str,
    ) -> int:
        pass

    @abstractmethod
    def list_dps_transfers(self, account_id: Optional[int] = None) -> list[DPSTransfer]:
        """List DPS transfers, newest first, optionally for one source account."""
        pass

    # Savings goal operations
    @abstractmethod
    def create_savings_goal(
        self,
        name: str,
        target_amount: Decimal,
        source_account_id: int,
        savings_account_id: int,
        description: Optional[str] = None,
    ) -> int:
        pass

    @abstractmethod
    def get_savings_goal(self, goal_id: int) -> Optional[SavingsGoal]:
        pass

    @abstractmethod
    def list_savings_goals(self) -> list[SavingsGoal]:
        pass

    @abstractmethod
    def update_savings_goal(self, goal_id: int, updates: dict[str, Any]) -> None:
        pass

    @abstractmethod
    def delete_savings_goal(self, goal_id: int) -> None:
        pass
