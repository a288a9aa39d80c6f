"""Mapper functions to convert SQLAlchemy models into domain entities.

This layer isolates the conversion logic, including the string-to-enum and
JSON-to-tuple conversions the ORM columns need.
"""

from decimal import Decimal
from typing import Optional

from fintrack.domain import entities as domain
from fintrack.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    Transaction as ORMTransaction,
    Purchase as ORMPurchase,
    PurchaseCategory as ORMPurchaseCategory,
    Notification as ORMNotification,
    DPSTransfer as ORMDPSTransfer,
    SavingsGoal as ORMSavingsGoal,
)


def _decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _optional_decimal(value) -> Optional[Decimal]:
    if value is None:
        return None
    return _decimal(value)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        type=domain.AccountType(orm_account.type),
        currency=orm_account.currency,
        initial_balance=_decimal(orm_account.initial_balance),
        calculated_balance=_decimal(orm_account.calculated_balance),
        is_active=orm_account.is_active,
        created_at=orm_account.created_at,
        description=orm_account.description,
        has_dps=orm_account.has_dps,
        dps_type=domain.DPSType(orm_account.dps_type) if orm_account.dps_type else None,
        dps_amount_type=(
            domain.DPSAmountType(orm_account.dps_amount_type)
            if orm_account.dps_amount_type
            else None
        ),
        dps_fixed_amount=_optional_decimal(orm_account.dps_fixed_amount),
        dps_savings_account_id=orm_account.dps_savings_account_id,
        donation_preference=_optional_decimal(orm_account.donation_preference),
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    frequency = orm_transaction.recurring_frequency
    return domain.Transaction(
        id=orm_transaction.id,
        account_id=orm_transaction.account_id,
        type=domain.TransactionType(orm_transaction.type),
        amount=_decimal(orm_transaction.amount),
        category=orm_transaction.category or "",
        description=orm_transaction.description or "",
        date=orm_transaction.date,
        created_at=orm_transaction.created_at,
        tags=tuple(orm_transaction.tags or ()),
        saving_amount=_optional_decimal(orm_transaction.saving_amount),
        is_recurring=orm_transaction.is_recurring,
        recurring_frequency=domain.RecurringFrequency(frequency) if frequency else None,
        updated_at=orm_transaction.updated_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=str(orm_category.id),
        name=orm_category.name,
        type=domain.TransactionType(orm_category.type),
        color=orm_category.color,
        icon=orm_category.icon,
        is_default=False,
    )


def purchase_to_domain(orm_purchase: ORMPurchase) -> domain.Purchase:
    return domain.Purchase(
        id=orm_purchase.id,
        item_name=orm_purchase.item_name,
        category=orm_purchase.category,
        price=_decimal(orm_purchase.price),
        purchase_date=orm_purchase.purchase_date,
        status=domain.PurchaseStatus(orm_purchase.status),
        priority=domain.PurchasePriority(orm_purchase.priority),
        created_at=orm_purchase.created_at,
        updated_at=orm_purchase.updated_at,
        notes=orm_purchase.notes,
    )


def purchase_category_to_domain(
    orm_category: ORMPurchaseCategory,
) -> domain.PurchaseCategory:
    return domain.PurchaseCategory(
        id=orm_category.id,
        category_name=orm_category.category_name,
        monthly_budget=_decimal(orm_category.monthly_budget),
        category_color=orm_category.category_color,
        created_at=orm_category.created_at,
        updated_at=orm_category.updated_at,
        description=orm_category.description,
    )


def notification_to_domain(orm_notification: ORMNotification) -> domain.Notification:
    return domain.Notification(
        id=orm_notification.id,
        title=orm_notification.title,
        type=domain.NotificationType(orm_notification.type),
        is_read=orm_notification.is_read,
        created_at=orm_notification.created_at,
        body=orm_notification.body,
    )


def dps_transfer_to_domain(orm_transfer: ORMDPSTransfer) -> domain.DPSTransfer:
    return domain.DPSTransfer(
        id=orm_transfer.id,
        from_account_id=orm_transfer.from_account_id,
        to_account_id=orm_transfer.to_account_id,
        amount=_decimal(orm_transfer.amount),
        date=orm_transfer.date,
        transfer_id=orm_transfer.transfer_id,
        created_at=orm_transfer.created_at,
    )


def savings_goal_to_domain(orm_goal: ORMSavingsGoal) -> domain.SavingsGoal:
    return domain.SavingsGoal(
        id=orm_goal.id,
        name=orm_goal.name,
        target_amount=_decimal(orm_goal.target_amount),
        source_account_id=orm_goal.source_account_id,
        savings_account_id=orm_goal.savings_account_id,
        current_amount=_decimal(orm_goal.current_amount),
        created_at=orm_goal.created_at,
        description=orm_goal.description,
    )
