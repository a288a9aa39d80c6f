"""Category domain service."""

import logging
from typing import Optional

from fintrack.database.base import Database
from fintrack.domain.entities import Category, TransactionType
from fintrack.domain.errors import ConflictError, DependencyError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_COLOR = "#3B82F6"
DEFAULT_ICON = "Tag"

# Seeded on every install; never persisted.
DEFAULT_CATEGORIES = (
    Category("default-1", "Salary", TransactionType.INCOME, "#10B981", "Banknote", True),
    Category("default-2", "Freelance", TransactionType.INCOME, "#3B82F6", "Laptop", True),
    Category("default-3", "Investment", TransactionType.INCOME, "#8B5CF6", "TrendingUp", True),
    Category("default-4", "Food & Dining", TransactionType.EXPENSE, "#F59E0B", "UtensilsCrossed", True),
    Category("default-5", "Transportation", TransactionType.EXPENSE, "#EF4444", "Car", True),
    Category("default-6", "Shopping", TransactionType.EXPENSE, "#EC4899", "ShoppingBag", True),
    Category("default-7", "Entertainment", TransactionType.EXPENSE, "#14B8A6", "Film", True),
    Category("default-8", "Bills & Utilities", TransactionType.EXPENSE, "#6366F1", "Receipt", True),
)


class CategoryService:
    """Service for managing transaction categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_categories(self, type: Optional[TransactionType] = None) -> list[Category]:
        """Default categories followed by user-created ones."""
        defaults = [c for c in DEFAULT_CATEGORIES if type is None or c.type == type]
        return defaults + self.db.list_categories(type=type)

    def get_category_by_name(
        self, name: str, type: Optional[TransactionType] = None
    ) -> Optional[Category]:
        for category in self.list_categories(type=type):
            if category.name.lower() == name.lower():
                return category
        return None

    def create_category(
        self,
        name: str,
        type: TransactionType,
        color: str = DEFAULT_COLOR,
        icon: str = DEFAULT_ICON,
    ) -> str:
        """Create a category.

        Expense categories double as purchase categories, so a matching
        purchase category (zero budget, same color) is created when missing.

        Returns:
            Category ID

        Raises:
            ValidationError: If name is empty
            ConflictError: If a category with the same name and type exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name is required")
        category_type = TransactionType(type)
        if self.get_category_by_name(name, category_type) is not None:
            raise ConflictError(f"{category_type.value.title()} category '{name}' already exists")

        category_id = self.db.create_category(
            name=name, type=category_type, color=color or DEFAULT_COLOR, icon=icon or DEFAULT_ICON
        )

        if category_type == TransactionType.EXPENSE:
            if self.db.get_purchase_category_by_name(name) is None:
                self.db.create_purchase_category(
                    category_name=name,
                    monthly_budget=0,
                    category_color=color or DEFAULT_COLOR,
                    description=f"Category for {name}",
                )
                logger.debug("Created purchase category for expense category '%s'", name)

        return str(category_id)

    def delete_category(self, category_id: str) -> None:
        """Delete a user-created category.

        Raises:
            DependencyError: If the category is one of the defaults
            NotFoundError: If the category doesn't exist
        """
        if any(c.id == category_id for c in DEFAULT_CATEGORIES):
            raise DependencyError("Default categories cannot be deleted")
        try:
            db_id = int(category_id)
        except (TypeError, ValueError):
            raise NotFoundError(f"Category {category_id} not found")
        if self.db.get_category(db_id) is None:
            raise NotFoundError(f"Category {category_id} not found")
        self.db.delete_category(db_id)
