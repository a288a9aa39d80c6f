"""Domain layer for fintrack application."""

_SERVICES = {
    "AccountService": "fintrack.domain.account",
    "TransactionService": "fintrack.domain.transaction",
    "CategoryService": "fintrack.domain.category",
    "PurchaseService": "fintrack.domain.purchase",
    "NotificationService": "fintrack.domain.notification",
    "TransferService": "fintrack.domain.transfer",
    "SavingsGoalService": "fintrack.domain.goal",
    "FinanceStore": "fintrack.domain.store",
}

__all__ = list(_SERVICES)


# Services import the database layer, which imports domain entities, so the
# services are resolved lazily.
def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
