"""Tests for the in-memory finance store."""

from datetime import date
from decimal import Decimal

import pytest

from fintrack.domain.entities import PurchaseStatus, TransactionType
from fintrack.domain.errors import NotFoundError, ValidationError
from fintrack.domain.store import FinanceStore


@pytest.fixture
def store(temp_db):
    return FinanceStore(temp_db)


def test_fetch_all_loads_every_cache(store, sample_account, transaction_service, purchase_service):
    transaction_service.create_transaction(
        sample_account.id, TransactionType.EXPENSE, Decimal("5"), date(2024, 1, 1)
    )
    purchase_service.add_purchase("Book", "Books", Decimal("12"), date(2024, 1, 1))

    store.fetch_all()

    assert [a.name for a in store.accounts] == ["Checking"]
    assert len(store.transactions) == 1
    assert len(store.purchases) == 1
    assert len(store.categories) > 0
    assert store.error is None


def test_mutations_refresh_caches(store):
    account_id = store.add_account("Wallet", initial_balance=Decimal("100"))
    assert [a.name for a in store.accounts] == ["Wallet"]

    store.add_transaction(
        account_id, type=TransactionType.EXPENSE, amount=Decimal("30"), date=date(2024, 1, 1)
    )
    assert len(store.transactions) == 1
    assert store.accounts[0].calculated_balance == Decimal("70")

    store.toggle_account(account_id)
    assert store.active_accounts == []
    assert store.active_transactions == []


def test_failed_operation_sets_error(store):
    with pytest.raises(NotFoundError):
        store.delete_account(404)
    assert store.error == "Account 404 not found"

    store.add_account("Wallet")
    assert store.error is None


def test_category_creation_refreshes_purchase_categories(store):
    store.add_category("Pets", type=TransactionType.EXPENSE)

    assert "Pets" in [c.name for c in store.categories]
    assert [c.category_name for c in store.purchase_categories] == ["Pets"]


def test_bulk_status_update(store):
    first = store.add_purchase("A", category="Books", price=Decimal("1"), purchase_date=date(2024, 1, 1))
    store.add_purchase("B", category="Books", price=Decimal("2"), purchase_date=date(2024, 1, 2))

    assert store.bulk_update_purchase_status([first], PurchaseStatus.PURCHASED) == 1
    analytics = store.purchase_analytics(today=date(2024, 1, 15))
    assert analytics.total_spent == Decimal("1")
    assert analytics.planned_count == 1


def test_transfer_settles_cached_balances(store, sample_account, second_account, caplog):
    store.fetch_all()

    result = store.transfer(sample_account.id, second_account.id, Decimal("150"))

    balances = {a.id: a.calculated_balance for a in store.accounts}
    assert balances[sample_account.id] == Decimal("850")
    assert balances[second_account.id] == Decimal("350")
    assert len(store.transactions) == 2
    assert result.from_balance == Decimal("850")
    assert "after transfer" not in caplog.text


def test_transfer_logs_balance_mismatch(store, sample_account, second_account, transaction_service, caplog):
    store.fetch_all()
    # Written behind the store's back, so its cached balance is stale
    transaction_service.create_transaction(
        sample_account.id, TransactionType.EXPENSE, Decimal("100"), date(2024, 1, 1)
    )

    store.transfer(sample_account.id, second_account.id, Decimal("150"))

    assert store.accounts[0].calculated_balance == Decimal("750")
    assert "Balance of account" in caplog.text
    assert "expected 850" in caplog.text


def test_failed_transfer_keeps_cache(store, sample_account, second_account):
    store.fetch_all()

    with pytest.raises(ValidationError):
        store.transfer(sample_account.id, second_account.id, Decimal("5000"))

    assert "Insufficient funds" in store.error
    assert {a.calculated_balance for a in store.accounts} == {Decimal("1000"), Decimal("200")}


def test_goal_contribution_refreshes_goal(store, sample_account):
    store.fetch_all()
    goal_id = store.create_goal("Trip", target_amount=Decimal("500"), source_account_id=sample_account.id)
    assert len(store.accounts) == 2

    store.save_to_goal(goal_id, Decimal("50"))

    assert store.savings_goals[0].current_amount == Decimal("50")


def test_searches(store, sample_account, second_account):
    store.add_transaction(
        sample_account.id, type=TransactionType.EXPENSE, amount=Decimal("4"),
        date=date(2024, 1, 1), category="Food & Dining", description="Coffee", tags=["work"],
    )
    store.add_transaction(
        second_account.id, type=TransactionType.INCOME, amount=Decimal("9"),
        date=date(2024, 1, 2), category="Salary", description="Pay",
    )
    store.fetch_accounts()

    assert [t.description for t in store.search_transactions("coffee")] == ["Coffee"]
    assert [t.description for t in store.search_transactions("WORK")] == ["Coffee"]
    assert [t.description for t in store.search_transactions("salary")] == ["Pay"]
    assert store.search_transactions("  ") == []
    assert [t.description for t in store.transactions_by_account(second_account.id)] == ["Pay"]
    assert len(store.transactions_by_category("Food & Dining")) == 1

    assert [a.name for a in store.search_accounts("sav")] == ["Savings"]
    assert len(store.search_accounts("usd")) == 2


def test_dashboard_stats_from_cache(store, sample_account):
    store.add_transaction(
        sample_account.id, type=TransactionType.INCOME, amount=Decimal("500"), date=date(2024, 6, 1)
    )

    stats = store.dashboard_stats(today=date(2024, 6, 10))

    usd = stats.by_currency[0]
    assert usd.total_balance == Decimal("1500")
    assert usd.monthly_income == Decimal("500")
    assert usd.savings_rate == Decimal("100")
