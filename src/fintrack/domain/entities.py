"""Domain model entities for fintrack.

These are pure data classes representing business concepts, independent of
database schema. Money values are Decimal; transaction amounts are always
non-negative and the direction is carried by the transaction type.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountType(str, Enum):
    """Kind of account."""

    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT = "credit"
    INVESTMENT = "investment"
    CASH = "cash"


class TransactionType(str, Enum):
    """Direction of a transaction."""

    INCOME = "income"
    EXPENSE = "expense"


class DPSType(str, Enum):
    """Schedule of a recurring savings (DPS) scheme."""

    MONTHLY = "monthly"
    FLEXIBLE = "flexible"


class DPSAmountType(str, Enum):
    """Whether a DPS transfer uses a fixed or a caller-supplied amount."""

    FIXED = "fixed"
    CUSTOM = "custom"


class RecurringFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class PurchaseStatus(str, Enum):
    PLANNED = "planned"
    PURCHASED = "purchased"
    CANCELLED = "cancelled"


class PurchasePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class NotificationType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Account:
    """Account domain entity."""

    id: int
    name: str
    type: AccountType
    currency: str
    initial_balance: Decimal
    calculated_balance: Decimal
    is_active: bool
    created_at: datetime
    description: Optional[str] = None
    has_dps: bool = False
    dps_type: Optional[DPSType] = None
    dps_amount_type: Optional[DPSAmountType] = None
    dps_fixed_amount: Optional[Decimal] = None
    dps_savings_account_id: Optional[int] = None
    donation_preference: Optional[Decimal] = None


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    account_id: int
    type: TransactionType
    amount: Decimal
    category: str
    description: str
    date: date
    created_at: datetime
    tags: tuple[str, ...] = ()
    saving_amount: Optional[Decimal] = None
    is_recurring: bool = False
    recurring_frequency: Optional[RecurringFrequency] = None
    updated_at: Optional[datetime] = None

    @property
    def is_transfer(self) -> bool:
        """True when any tag marks this transaction as a transfer leg."""
        return any("transfer" in tag for tag in self.tags)

    @property
    def signed_amount(self) -> Decimal:
        """Amount with expenses negated."""
        if self.type == TransactionType.EXPENSE:
            return -self.amount
        return self.amount


@dataclass(frozen=True)
class Category:
    """Category domain entity.

    Default categories are not persisted and have ``id`` values prefixed with
    ``default-``.
    """

    id: str
    name: str
    type: TransactionType
    color: str
    icon: str
    is_default: bool = False


@dataclass(frozen=True)
class Purchase:
    """Tracked discretionary spending item."""

    id: int
    item_name: str
    category: str
    price: Decimal
    purchase_date: date
    status: PurchaseStatus
    priority: PurchasePriority
    created_at: datetime
    updated_at: datetime
    notes: Optional[str] = None


@dataclass(frozen=True)
class PurchaseCategory:
    """Budget-bearing category for purchases."""

    id: int
    category_name: str
    monthly_budget: Decimal
    category_color: str
    created_at: datetime
    updated_at: datetime
    description: Optional[str] = None


@dataclass(frozen=True)
class Notification:
    id: int
    title: str
    type: NotificationType
    is_read: bool
    created_at: datetime
    body: Optional[str] = None


@dataclass(frozen=True)
class DPSTransfer:
    """History record for a completed DPS transfer."""

    id: int
    from_account_id: int
    to_account_id: int
    amount: Decimal
    date: date
    transfer_id: str
    created_at: datetime


@dataclass(frozen=True)
class SavingsGoal:
    id: int
    name: str
    target_amount: Decimal
    source_account_id: int
    savings_account_id: int
    current_amount: Decimal
    created_at: datetime
    description: Optional[str] = None

    @property
    def progress(self) -> Decimal:
        """Percentage of the target reached, capped at 100."""
        if self.target_amount <= 0:
            return Decimal("0")
        return min(self.current_amount / self.target_amount * 100, Decimal("100"))


@dataclass(frozen=True)
class ChangeEvent:
    """A committed row change on a table."""

    table: str
    operation: str
    record_id: int


@dataclass(frozen=True)
class TransferResult:
    """Outcome of a paired transfer."""

    transfer_id: str
    from_account_id: int
    to_account_id: int
    from_amount: Decimal
    to_amount: Decimal
    expense_transaction_id: int
    income_transaction_id: int
    from_balance: Decimal
    to_balance: Decimal


@dataclass(frozen=True)
class IncomeBreakdown:
    """Saved / donated / remaining split of one income transaction."""

    transaction_id: int
    date: date
    description: str
    income: Decimal
    saved: Decimal
    donated: Decimal
    remaining: Decimal


@dataclass(frozen=True)
class AccountSavingsSummary:
    account_id: int
    total_income: Decimal
    total_saved: Decimal
    total_donated: Decimal
    total_remaining: Decimal
    rows: tuple[IncomeBreakdown, ...] = ()


@dataclass(frozen=True)
class CurrencyDashboardStats:
    currency: str
    total_balance: Decimal
    monthly_income: Decimal
    monthly_expenses: Decimal
    savings_rate: Decimal


@dataclass(frozen=True)
class DashboardStats:
    by_currency: tuple[CurrencyDashboardStats, ...]
    accounts_count: int
    transactions_count: int


@dataclass(frozen=True)
class CategoryBreakdown:
    category: str
    total_spent: Decimal
    item_count: int
    percentage: Decimal


@dataclass(frozen=True)
class PurchaseAnalytics:
    total_spent: Decimal
    monthly_spent: Decimal
    planned_count: int
    purchased_count: int
    cancelled_count: int
    top_category: Optional[str]
    category_breakdown: tuple[CategoryBreakdown, ...] = field(default_factory=tuple)
