"""Shared pytest fixtures for fintrack tests."""

import tempfile
import os
from decimal import Decimal
import pytest

from fintrack.database.factories import create_sqlite_database
from fintrack.domain.account import AccountService
from fintrack.domain.category import CategoryService
from fintrack.domain.entities import AccountType, DPSAmountType
from fintrack.domain.goal import SavingsGoalService
from fintrack.domain.notification import NotificationService
from fintrack.domain.purchase import PurchaseService
from fintrack.domain.transaction import TransactionService
from fintrack.domain.transfer import TransferService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    return AccountService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    return TransactionService(temp_db)


@pytest.fixture
def category_service(temp_db):
    return CategoryService(temp_db)


@pytest.fixture
def purchase_service(temp_db):
    return PurchaseService(temp_db)


@pytest.fixture
def notification_service(temp_db):
    return NotificationService(temp_db)


@pytest.fixture
def transfer_service(temp_db):
    return TransferService(temp_db)


@pytest.fixture
def goal_service(temp_db):
    return SavingsGoalService(temp_db)


@pytest.fixture
def sample_account(account_service):
    """A USD checking account holding 1000."""
    account_id = account_service.create_account(
        name="Checking",
        type=AccountType.CHECKING,
        currency="USD",
        initial_balance=Decimal("1000"),
    )
    return account_service.get_account(account_id)


@pytest.fixture
def second_account(account_service):
    """A USD savings account holding 200."""
    account_id = account_service.create_account(
        name="Savings",
        type=AccountType.SAVINGS,
        currency="USD",
        initial_balance=Decimal("200"),
    )
    return account_service.get_account(account_id)


@pytest.fixture
def dps_account(account_service):
    """A BDT account enrolled in a fixed 500 DPS scheme."""
    account_id = account_service.create_account(
        name="Salary",
        currency="BDT",
        initial_balance=Decimal("10000"),
        has_dps=True,
        dps_amount_type=DPSAmountType.FIXED,
        dps_fixed_amount=Decimal("500"),
    )
    return account_service.get_account(account_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
