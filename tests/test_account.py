"""Tests for account service and account commands."""

from datetime import date
from decimal import Decimal

import pytest

from fintrack.cli.main import cli
from fintrack.domain.entities import AccountType, DPSAmountType, DPSType, TransactionType
from fintrack.domain.errors import ConflictError, DependencyError, NotFoundError, ValidationError


class TestAccountService:
    def test_create_account(self, account_service):
        account_id = account_service.create_account(
            name="Wallet", type=AccountType.CASH, currency="bdt", initial_balance=Decimal("50")
        )
        account = account_service.get_account(account_id)

        assert account.name == "Wallet"
        assert account.type == AccountType.CASH
        assert account.currency == "BDT"
        assert account.initial_balance == Decimal("50")
        assert account.calculated_balance == Decimal("50")
        assert account.is_active is True
        assert account.has_dps is False

    def test_create_duplicate_name_rejected(self, account_service, sample_account):
        with pytest.raises(ConflictError, match="already exists"):
            account_service.create_account(name="Checking")

    def test_create_requires_name(self, account_service):
        with pytest.raises(ValidationError):
            account_service.create_account(name="   ")

    def test_create_rejects_bad_currency(self, account_service):
        with pytest.raises(ValidationError, match="currency"):
            account_service.create_account(name="Odd", currency="DOLLARS")

    def test_create_with_dps_creates_linked_savings_account(self, account_service, dps_account):
        savings = account_service.get_account(dps_account.dps_savings_account_id)

        assert savings is not None
        assert savings.name == "Salary (DPS)"
        assert savings.type == AccountType.SAVINGS
        assert savings.currency == "BDT"
        assert savings.calculated_balance == Decimal("0")
        assert dps_account.dps_type == DPSType.MONTHLY
        assert dps_account.dps_fixed_amount == Decimal("500")

    def test_fixed_dps_requires_amount(self, account_service):
        with pytest.raises(ValidationError, match="fixed amount"):
            account_service.create_account(
                name="No Amount", has_dps=True, dps_amount_type=DPSAmountType.FIXED
            )
        assert account_service.list_accounts() == []

    def test_custom_dps_drops_fixed_amount(self, account_service):
        account_id = account_service.create_account(
            name="Custom",
            has_dps=True,
            dps_amount_type=DPSAmountType.CUSTOM,
            dps_fixed_amount=Decimal("100"),
        )
        account = account_service.get_account(account_id)
        assert account.dps_amount_type == DPSAmountType.CUSTOM
        assert account.dps_fixed_amount is None

    def test_update_partial(self, account_service, sample_account):
        account_service.update_account(sample_account.id, description="Main account")
        account = account_service.get_account(sample_account.id)

        assert account.description == "Main account"
        assert account.name == "Checking"

    def test_update_initial_balance_recomputes_balance(
        self, account_service, transaction_service, sample_account
    ):
        transaction_service.create_transaction(
            sample_account.id, TransactionType.EXPENSE, Decimal("100"), date(2024, 1, 1)
        )
        account_service.update_account(sample_account.id, initial_balance=Decimal("500"))

        assert account_service.get_account(sample_account.id).calculated_balance == Decimal("400")

    def test_update_unknown_field_rejected(self, account_service, sample_account):
        with pytest.raises(ValidationError, match="Unknown"):
            account_service.update_account(sample_account.id, balance=Decimal("1"))

    def test_update_rename_to_existing_rejected(
        self, account_service, sample_account, second_account
    ):
        with pytest.raises(ConflictError):
            account_service.update_account(second_account.id, name="Checking")

    def test_enable_dps_creates_link(self, account_service, sample_account):
        account_service.update_account(
            sample_account.id, has_dps=True, dps_fixed_amount=Decimal("50")
        )
        account = account_service.get_account(sample_account.id)

        assert account.has_dps is True
        assert account.dps_savings_account_id is not None
        assert account_service.get_account(account.dps_savings_account_id).name == "Checking (DPS)"

    def test_disable_dps_clears_settings_and_keeps_link(self, account_service, dps_account):
        account_service.update_account(dps_account.id, has_dps=False)
        account = account_service.get_account(dps_account.id)

        assert account.has_dps is False
        assert account.dps_type is None
        assert account.dps_fixed_amount is None
        assert account.dps_savings_account_id == dps_account.dps_savings_account_id

        # Re-enabling reuses the existing savings account
        account_service.update_account(
            dps_account.id, has_dps=True, dps_fixed_amount=Decimal("100")
        )
        assert len(account_service.list_accounts()) == 2

    def test_set_active(self, account_service, sample_account):
        account_service.set_active(sample_account.id, False)

        assert account_service.get_account(sample_account.id).is_active is False
        assert account_service.list_accounts(active_only=True) == []

    def test_delete_account(self, account_service, sample_account):
        account_service.delete_account(sample_account.id)
        assert account_service.get_account(sample_account.id) is None

    def test_delete_missing_account(self, account_service):
        with pytest.raises(NotFoundError):
            account_service.delete_account(999)

    def test_delete_blocked_by_transactions(
        self, account_service, transaction_service, sample_account
    ):
        transaction_service.create_transaction(
            sample_account.id, TransactionType.INCOME, Decimal("10"), date(2024, 1, 1)
        )
        with pytest.raises(DependencyError, match="1 transaction"):
            account_service.delete_account(sample_account.id)

    def test_delete_blocked_by_dps_link(self, account_service, dps_account):
        with pytest.raises(DependencyError, match="linked DPS account"):
            account_service.delete_account(dps_account.dps_savings_account_id)

    def test_savings_summary(self, account_service, transaction_service, sample_account):
        account_service.update_account(sample_account.id, donation_preference=Decimal("-10"))
        transaction_service.create_transaction(
            sample_account.id,
            TransactionType.INCOME,
            Decimal("1000"),
            date(2024, 1, 1),
            saving_amount=Decimal("-20"),
        )
        transaction_service.create_transaction(
            sample_account.id, TransactionType.EXPENSE, Decimal("50"), date(2024, 1, 2)
        )

        summary = account_service.get_savings_summary(sample_account.id)

        assert summary.total_income == Decimal("1000")
        assert summary.total_saved == Decimal("200")
        assert summary.total_donated == Decimal("80")
        assert summary.total_remaining == Decimal("720")
        assert len(summary.rows) == 1


def test_account_create_cli(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", temp_db.database_path,
            "account", "create", "Wallet", "--type", "cash", "--currency", "BDT",
            "--balance", "৳1,500",
        ],
    )

    assert result.exit_code == 0
    assert "Created account 'Wallet'" in result.output
    account = temp_db.list_accounts()[0]
    assert account.currency == "BDT"
    assert account.calculated_balance == Decimal("1500")


def test_account_create_with_dps_cli(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", temp_db.database_path,
            "account", "create", "Salary", "--dps", "--dps-amount", "500", "--donation", "10%",
        ],
    )

    assert result.exit_code == 0
    assert "Linked DPS savings account" in result.output
    salary = temp_db.list_accounts()[0]
    assert salary.donation_preference == Decimal("-10")


def test_account_create_duplicate_cli(cli_runner, temp_db, sample_account):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "create", "Checking"]
    )

    assert result.exit_code == 1
    assert "already exists" in result.output.lower()


def test_account_list_empty(cli_runner, temp_db):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list"])

    assert result.exit_code == 0
    assert "No accounts found" in result.output


def test_account_list_with_data(cli_runner, temp_db, sample_account):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list"])

    assert result.exit_code == 0
    assert "Checking" in result.output
    assert "$1,000.00" in result.output


def test_account_toggle_cli(cli_runner, temp_db, sample_account):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "toggle", "Checking"]
    )

    assert result.exit_code == 0
    assert "now inactive" in result.output
    temp_db.disconnect()
    assert temp_db.get_account(sample_account.id).is_active is False


def test_account_update_cli(cli_runner, temp_db, sample_account):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "account", "update", "1", "--name", "Main"],
    )

    assert result.exit_code == 0
    temp_db.disconnect()
    assert temp_db.get_account(sample_account.id).name == "Main"


def test_account_delete_cli(cli_runner, temp_db, sample_account):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "delete", "Checking", "--yes"]
    )

    assert result.exit_code == 0
    assert "Deleted account 'Checking'" in result.output
    assert temp_db.list_accounts() == []


def test_account_delete_unknown_cli(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "delete", "Nope", "--yes"]
    )

    assert result.exit_code == 1
    assert "not found" in result.output


def test_account_savings_cli(cli_runner, temp_db, account_service, transaction_service, sample_account):
    account_service.update_account(sample_account.id, donation_preference=Decimal("-10"))
    transaction_service.create_transaction(
        sample_account.id, TransactionType.INCOME, Decimal("1000"), date(2024, 1, 1),
        saving_amount=Decimal("-20"),
    )

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "savings", "Checking"]
    )

    assert result.exit_code == 0
    assert "Donation preference: 10% of remaining income" in result.output
    assert "$200.00" in result.output
    assert "$80.00" in result.output
    assert "$720.00" in result.output
