"""Purchase tracking service and purchase analytics."""

import logging
from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional

from fintrack.database.base import Database
from fintrack.domain import errors
from fintrack.domain.entities import (
    CategoryBreakdown,
    Purchase,
    PurchaseAnalytics,
    PurchaseCategory,
    PurchasePriority,
    PurchaseStatus,
)
from fintrack.domain.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

PURCHASE_FIELDS = frozenset(
    {"item_name", "category", "price", "purchase_date", "status", "priority", "notes"}
)
PURCHASE_CATEGORY_FIELDS = frozenset(
    {"category_name", "description", "monthly_budget", "category_color"}
)


def build_purchase_analytics(
    purchases: Iterable[Purchase], today: Optional[date] = None
) -> PurchaseAnalytics:
    """Spending figures over purchases.

    Spend figures only count purchases with status ``purchased``; the
    monthly figure is restricted to the calendar month of ``today``. The
    category breakdown is ranked by amount spent, highest first.
    """
    today = today or date.today()
    purchases = list(purchases)
    purchased = [p for p in purchases if p.status == PurchaseStatus.PURCHASED]

    total_spent = sum((p.price for p in purchased), ZERO)
    monthly_spent = sum(
        (
            p.price
            for p in purchased
            if p.purchase_date.year == today.year and p.purchase_date.month == today.month
        ),
        ZERO,
    )

    totals: OrderedDict[str, list] = OrderedDict()
    for purchase in purchased:
        entry = totals.setdefault(purchase.category, [ZERO, 0])
        entry[0] += purchase.price
        entry[1] += 1

    breakdown = sorted(
        (
            CategoryBreakdown(
                category=category,
                total_spent=total,
                item_count=count,
                percentage=(total / total_spent * 100) if total_spent > 0 else ZERO,
            )
            for category, (total, count) in totals.items()
        ),
        key=lambda item: item.total_spent,
        reverse=True,
    )

    return PurchaseAnalytics(
        total_spent=total_spent,
        monthly_spent=monthly_spent,
        planned_count=sum(1 for p in purchases if p.status == PurchaseStatus.PLANNED),
        purchased_count=len(purchased),
        cancelled_count=sum(1 for p in purchases if p.status == PurchaseStatus.CANCELLED),
        top_category=breakdown[0].category if breakdown else None,
        category_breakdown=tuple(breakdown),
    )


def filter_purchases(
    purchases: Iterable[Purchase],
    search: Optional[str] = None,
    status: Optional[PurchaseStatus] = None,
    category: Optional[str] = None,
    priority: Optional[PurchasePriority] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> list[Purchase]:
    """Filter purchases the way the purchase list does.

    ``search`` matches item name or notes case-insensitively. The date range
    only applies when both ends are given.
    """
    needle = (search or "").lower()
    result = []
    for purchase in purchases:
        if needle and needle not in purchase.item_name.lower() and needle not in (
            purchase.notes or ""
        ).lower():
            continue
        if status is not None and purchase.status != status:
            continue
        if category is not None and purchase.category != category:
            continue
        if priority is not None and purchase.priority != priority:
            continue
        if start_date is not None and end_date is not None:
            if not start_date <= purchase.purchase_date <= end_date:
                continue
        result.append(purchase)
    return result


class PurchaseService:
    """Service for managing purchases and purchase categories."""

    def __init__(self, db: Database):
        self.db = db

    # Purchases
    def add_purchase(
        self,
        item_name: str,
        category: str,
        price: Decimal,
        purchase_date: date,
        status: PurchaseStatus = PurchaseStatus.PLANNED,
        priority: PurchasePriority = PurchasePriority.MEDIUM,
        notes: Optional[str] = None,
    ) -> int:
        """Record a purchase.

        Raises:
            ValidationError: If item name or category is empty or price is negative
        """
        if not (item_name or "").strip():
            raise ValidationError("Item name is required")
        if not (category or "").strip():
            raise ValidationError("Category is required")
        if price is None or price < 0:
            raise ValidationError("Price cannot be negative")

        purchase_id = self.db.create_purchase(
            item_name=item_name.strip(),
            category=category.strip(),
            price=price,
            purchase_date=purchase_date,
            status=PurchaseStatus(status),
            priority=PurchasePriority(priority),
            notes=notes,
        )
        logger.debug("Added purchase %s (%s)", purchase_id, item_name)
        return purchase_id

    def get_purchase(self, purchase_id: int) -> Optional[Purchase]:
        return self.db.get_purchase(purchase_id)

    def list_purchases(
        self,
        category: Optional[str] = None,
        status: Optional[PurchaseStatus] = None,
    ) -> list[Purchase]:
        return self.db.list_purchases(category=category, status=status)

    def get_purchases_by_category(self, category: str) -> list[Purchase]:
        return self.db.list_purchases(category=category)

    def get_purchases_by_status(self, status: PurchaseStatus) -> list[Purchase]:
        return self.db.list_purchases(status=PurchaseStatus(status))

    def _validate_purchase_changes(self, changes: dict[str, Any]) -> dict[str, Any]:
        unknown = set(changes) - PURCHASE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown purchase field(s): {', '.join(sorted(unknown))}")
        if "price" in changes and (changes["price"] is None or changes["price"] < 0):
            raise ValidationError("Price cannot be negative")
        if "status" in changes:
            changes["status"] = PurchaseStatus(changes["status"])
        if "priority" in changes:
            changes["priority"] = PurchasePriority(changes["priority"])
        return changes

    def update_purchase(self, purchase_id: int, **changes: Any) -> None:
        """Update purchase fields.

        Raises:
            NotFoundError: If purchase doesn't exist
        """
        if self.db.get_purchase(purchase_id) is None:
            raise NotFoundError(errors.purchase_not_found(purchase_id))
        self.db.update_purchase(purchase_id, self._validate_purchase_changes(changes))

    def bulk_update_purchases(self, purchase_ids: list[int], **changes: Any) -> int:
        """Apply the same changes to several purchases.

        Returns:
            Number of purchases updated
        """
        if not purchase_ids:
            return 0
        count = self.db.bulk_update_purchases(
            list(purchase_ids), self._validate_purchase_changes(changes)
        )
        logger.info("Bulk updated %d purchase(s)", count)
        return count

    def delete_purchase(self, purchase_id: int) -> None:
        if self.db.get_purchase(purchase_id) is None:
            raise NotFoundError(errors.purchase_not_found(purchase_id))
        self.db.delete_purchase(purchase_id)

    def get_analytics(self, today: Optional[date] = None) -> PurchaseAnalytics:
        return build_purchase_analytics(self.db.list_purchases(), today=today)

    # Purchase categories
    def add_purchase_category(
        self,
        category_name: str,
        monthly_budget: Decimal = ZERO,
        category_color: str = "#3B82F6",
        description: Optional[str] = None,
    ) -> int:
        """Create a budget-bearing purchase category.

        Raises:
            ValidationError: If name is empty or budget negative
            ConflictError: If the name is taken
        """
        name = (category_name or "").strip()
        if not name:
            raise ValidationError("Category name is required")
        if monthly_budget < 0:
            raise ValidationError("Monthly budget cannot be negative")
        if self.db.get_purchase_category_by_name(name) is not None:
            raise ConflictError(f"Purchase category '{name}' already exists")
        return self.db.create_purchase_category(
            category_name=name,
            monthly_budget=monthly_budget,
            category_color=category_color,
            description=description,
        )

    def list_purchase_categories(self) -> list[PurchaseCategory]:
        return self.db.list_purchase_categories()

    def update_purchase_category(self, category_id: int, **changes: Any) -> None:
        unknown = set(changes) - PURCHASE_CATEGORY_FIELDS
        if unknown:
            raise ValidationError(
                f"Unknown purchase category field(s): {', '.join(sorted(unknown))}"
            )
        if self.db.get_purchase_category(category_id) is None:
            raise NotFoundError(errors.purchase_category_not_found(category_id))
        if "monthly_budget" in changes and changes["monthly_budget"] < 0:
            raise ValidationError("Monthly budget cannot be negative")
        if "category_name" in changes:
            existing = self.db.get_purchase_category_by_name(changes["category_name"])
            if existing is not None and existing.id != category_id:
                raise ConflictError(
                    f"Purchase category '{changes['category_name']}' already exists"
                )
        self.db.update_purchase_category(category_id, changes)

    def delete_purchase_category(self, category_id: int) -> None:
        if self.db.get_purchase_category(category_id) is None:
            raise NotFoundError(errors.purchase_category_not_found(category_id))
        self.db.delete_purchase_category(category_id)
