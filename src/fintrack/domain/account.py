"""Account domain service."""

import logging
from decimal import Decimal
from typing import Any, Optional

from fintrack.database.base import Database
from fintrack.domain import errors
from fintrack.domain.entities import (
    Account as AccountEntity,
    AccountSavingsSummary,
    AccountType,
    DPSAmountType,
    DPSType,
)
from fintrack.domain.errors import ConflictError, DependencyError, NotFoundError, ValidationError
from fintrack.domain.savings import summarize_account_savings

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "type",
        "currency",
        "description",
        "initial_balance",
        "is_active",
        "has_dps",
        "dps_type",
        "dps_amount_type",
        "dps_fixed_amount",
        "donation_preference",
    }
)


def _normalize_currency(currency: str) -> str:
    code = (currency or "").strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise ValidationError(f"Invalid currency code '{currency}'")
    return code


def _validate_donation_preference(value: Optional[Decimal]) -> None:
    if value is not None and value < -100:
        raise ValidationError("Donation percentage cannot exceed 100%")


def _dps_fields(
    has_dps: bool,
    dps_type: Optional[DPSType],
    dps_amount_type: Optional[DPSAmountType],
    dps_fixed_amount: Optional[Decimal],
) -> dict[str, Any]:
    """Normalize DPS configuration into column values.

    DPS settings are cleared when DPS is off, and the fixed amount is only
    kept for fixed-amount schemes.
    """
    if not has_dps:
        return {
            "has_dps": False,
            "dps_type": None,
            "dps_amount_type": None,
            "dps_fixed_amount": None,
        }

    dps_type = DPSType(dps_type) if dps_type is not None else DPSType.MONTHLY
    dps_amount_type = (
        DPSAmountType(dps_amount_type) if dps_amount_type is not None else DPSAmountType.FIXED
    )
    if dps_amount_type == DPSAmountType.FIXED:
        if dps_fixed_amount is None or dps_fixed_amount <= 0:
            raise ValidationError("A fixed DPS scheme needs a positive fixed amount")
    else:
        dps_fixed_amount = None

    return {
        "has_dps": True,
        "dps_type": dps_type,
        "dps_amount_type": dps_amount_type,
        "dps_fixed_amount": dps_fixed_amount,
    }


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        name: str,
        type: AccountType = AccountType.CHECKING,
        currency: str = "USD",
        initial_balance: Decimal = Decimal("0"),
        description: Optional[str] = None,
        has_dps: bool = False,
        dps_type: Optional[DPSType] = None,
        dps_amount_type: Optional[DPSAmountType] = None,
        dps_fixed_amount: Optional[Decimal] = None,
        donation_preference: Optional[Decimal] = None,
    ) -> int:
        """Create a new account.

        When ``has_dps`` is set, a savings account named "<name> (DPS)" in the
        same currency is created and linked as the DPS destination.

        Returns:
            Account ID

        Raises:
            ValidationError: If the name, currency or DPS settings are invalid
            ConflictError: If account name already exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Account name is required")
        currency = _normalize_currency(currency)
        _validate_donation_preference(donation_preference)
        dps = _dps_fields(has_dps, dps_type, dps_amount_type, dps_fixed_amount)
        self._ensure_unique_name(name)
        if dps["has_dps"]:
            self._ensure_unique_name(f"{name} (DPS)")

        account_id = self.db.create_account(
            name=name,
            type=AccountType(type),
            currency=currency,
            initial_balance=initial_balance,
            description=description,
            donation_preference=donation_preference,
            **dps,
        )
        logger.info("Created account %s (%s)", account_id, name)

        if dps["has_dps"]:
            try:
                savings_id = self._create_dps_savings_account(name, currency)
                self.db.update_account(account_id, {"dps_savings_account_id": savings_id})
            except ValueError:
                logger.warning(
                    "Linking DPS savings account failed; removing account %s", account_id
                )
                self.db.delete_account(account_id)
                raise

        return account_id

    def _create_dps_savings_account(self, owner_name: str, currency: str) -> int:
        savings_id = self.db.create_account(
            name=f"{owner_name} (DPS)",
            type=AccountType.SAVINGS,
            currency=currency,
            initial_balance=Decimal("0"),
            description=f"DPS account for {owner_name}",
        )
        logger.info("Created DPS savings account %s for '%s'", savings_id, owner_name)
        return savings_id

    def _ensure_unique_name(self, name: str, exclude_id: Optional[int] = None) -> None:
        for acc in self.db.list_accounts():
            if acc.id != exclude_id and acc.name == name:
                raise ConflictError(errors.duplicate_account_name(name))

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID or raise NotFoundError."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(errors.account_not_found(account_id))
        return account

    def list_accounts(self, active_only: bool = False) -> list[AccountEntity]:
        """List accounts.

        Args:
            active_only: Only return active accounts
        """
        return self.db.list_accounts(active_only=active_only)

    def update_account(self, account_id: int, **changes: Any) -> None:
        """Update account fields.

        Only the given fields change. Enabling DPS on an account without a
        linked savings account creates one; disabling DPS clears the DPS
        settings but keeps the link so re-enabling reuses it.

        Raises:
            NotFoundError: If account not found
            ValidationError: If a field is unknown or a value is invalid
            ConflictError: If the new name already exists
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown account field(s): {', '.join(sorted(unknown))}")

        current = self.require_account(account_id)
        updates: dict[str, Any] = {}

        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise ValidationError("Account name is required")
            self._ensure_unique_name(name, exclude_id=account_id)
            updates["name"] = name
        if "type" in changes:
            updates["type"] = AccountType(changes["type"])
        if "currency" in changes:
            updates["currency"] = _normalize_currency(changes["currency"])
        if "donation_preference" in changes:
            _validate_donation_preference(changes["donation_preference"])
            updates["donation_preference"] = changes["donation_preference"]
        for key in ("description", "initial_balance", "is_active"):
            if key in changes:
                updates[key] = changes[key]

        dps_keys = {"has_dps", "dps_type", "dps_amount_type", "dps_fixed_amount"}
        if dps_keys & set(changes):
            has_dps = changes.get("has_dps", current.has_dps)
            updates.update(
                _dps_fields(
                    has_dps,
                    changes.get("dps_type", current.dps_type),
                    changes.get("dps_amount_type", current.dps_amount_type),
                    changes.get("dps_fixed_amount", current.dps_fixed_amount),
                )
            )
            linked = (
                self.db.get_account(current.dps_savings_account_id)
                if current.dps_savings_account_id is not None
                else None
            )
            if has_dps and linked is None:
                owner_name = updates.get("name", current.name)
                currency = updates.get("currency", current.currency)
                self._ensure_unique_name(f"{owner_name} (DPS)")
                updates["dps_savings_account_id"] = self._create_dps_savings_account(
                    owner_name, currency
                )

        if updates:
            self.db.update_account(account_id, updates)
            logger.debug("Updated account %s: %s", account_id, sorted(updates))

    def set_active(self, account_id: int, is_active: bool) -> None:
        """Activate or deactivate an account."""
        self.require_account(account_id)
        self.db.update_account(account_id, {"is_active": is_active})

    def linked_dps_owners(self, account_id: int) -> list[AccountEntity]:
        """Accounts that use this account as their DPS savings account."""
        return [
            acc for acc in self.db.list_accounts() if acc.dps_savings_account_id == account_id
        ]

    def delete_account(self, account_id: int) -> None:
        """Delete an account.

        Raises:
            NotFoundError: If account not found
            DependencyError: If the account has transactions or holds another
                account's DPS savings
        """
        self.require_account(account_id)

        transaction_count = self.db.get_account_transaction_count(account_id)
        linked_count = len(self.linked_dps_owners(account_id))
        if transaction_count > 0 or linked_count > 0:
            raise DependencyError(
                errors.account_delete_blocked(account_id, transaction_count, linked_count)
            )

        self.db.delete_account(account_id)
        logger.info("Deleted account %s", account_id)

    def recalculate_balance(self, account_id: int) -> Decimal:
        """Recompute an account's balance from its transaction history."""
        self.require_account(account_id)
        return self.db.recalculate_account_balance(account_id)

    def get_savings_summary(self, account_id: int) -> AccountSavingsSummary:
        """Saved and donated totals over the account's income."""
        account = self.require_account(account_id)
        transactions = self.db.list_transactions(account_id=account_id)
        return summarize_account_savings(account, transactions)
