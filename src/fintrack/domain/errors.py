"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class TransferError(DomainError):
    """A multi-step transfer failed after some of its writes."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def purchase_not_found(purchase_id: int) -> str:
    return f"Purchase {purchase_id} not found"


def purchase_category_not_found(category_id: int) -> str:
    return f"Purchase category {category_id} not found"


def notification_not_found(notification_id: int) -> str:
    return f"Notification {notification_id} not found"


def savings_goal_not_found(goal_id: int) -> str:
    return f"Savings goal {goal_id} not found"


def duplicate_account_name(name: str) -> str:
    """Return message for duplicate account name."""
    return f"Account with name '{name}' already exists"


def insufficient_funds(account_name: str, balance: Decimal, amount: Decimal) -> str:
    """Return message when a source account cannot cover a transfer."""
    return (
        f"Insufficient funds in '{account_name}': balance {balance:,.2f}, "
        f"requested {amount:,.2f}"
    )


def account_delete_blocked(account_id: int, transaction_count: int, linked_count: int) -> str:
    """Return message when account has dependent transactions or DPS links."""
    parts = []
    if transaction_count > 0:
        parts.append(
            f"{transaction_count} transaction{'s' if transaction_count != 1 else ''}"
        )
    if linked_count > 0:
        parts.append(
            f"{linked_count} linked DPS account{'s' if linked_count != 1 else ''}"
        )
    return (
        f"Cannot delete account {account_id}: it has {', '.join(parts)}. "
        "Please reassign or delete them first."
    )
