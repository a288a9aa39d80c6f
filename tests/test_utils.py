"""Tests for parsing and formatting utilities."""

from datetime import date
from decimal import Decimal

import pytest

from fintrack.domain.errors import NotFoundError, ValidationError
from fintrack.utils.account_resolver import resolve_account
from fintrack.utils.amount_parser import parse_amount, parse_saving_amount
from fintrack.utils.currency import format_currency, get_currency_symbol
from fintrack.utils.date_parser import get_date_range, month_bounds, parse_date

TODAY = date(2024, 3, 15)


class TestParseAmount:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("123.45", "123.45"),
            ("$1,234.56", "1234.56"),
            ("৳500", "500"),
            ("C$20", "20"),
            ("-12", "-12"),
            ("(45.10)", "-45.10"),
            ("  €7 ", "7"),
        ],
    )
    def test_formats(self, text, expected):
        assert parse_amount(text) == Decimal(expected)

    @pytest.mark.parametrize("text", ["", "   ", "abc", "1.2.3", "NaN", "Infinity"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_amount(text)


class TestParseSavingAmount:
    def test_percentage_is_negative(self):
        assert parse_saving_amount("10%") == Decimal("-10")
        assert parse_saving_amount("0%") == Decimal("0")

    def test_fixed_amount(self):
        assert parse_saving_amount("$50") == Decimal("50")

    @pytest.mark.parametrize("text", ["101%", "-5%", "-5"])
    def test_out_of_range(self, text):
        with pytest.raises(ValueError):
            parse_saving_amount(text)


class TestParseDate:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("today", TODAY),
            ("Yesterday", date(2024, 3, 14)),
            ("tomorrow", date(2024, 3, 16)),
            ("this month", date(2024, 3, 1)),
            ("last month", date(2024, 2, 1)),
            ("2024-01-15", date(2024, 1, 15)),
            ("Jan 5 2023", date(2023, 1, 5)),
        ],
    )
    def test_parse(self, text, expected):
        assert parse_date(text, today=TODAY) == expected

    def test_invalid(self):
        with pytest.raises(ValueError, match="Could not parse date"):
            parse_date("someday")


class TestDateRanges:
    def test_month_bounds_leap_year(self):
        assert month_bounds(date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))

    @pytest.mark.parametrize(
        "period,expected",
        [
            ("this-month", (date(2024, 3, 1), date(2024, 3, 31))),
            ("last-month", (date(2024, 2, 1), date(2024, 2, 29))),
            ("this-year", (date(2024, 1, 1), date(2024, 12, 31))),
            ("last-year", (date(2023, 1, 1), date(2023, 12, 31))),
        ],
    )
    def test_periods(self, period, expected):
        assert get_date_range(period, today=TODAY) == expected

    def test_last_month_across_year(self):
        assert get_date_range("last-month", today=date(2024, 1, 20)) == (
            date(2023, 12, 1),
            date(2023, 12, 31),
        )

    def test_unknown_period(self):
        with pytest.raises(ValueError, match="Unknown period"):
            get_date_range("next-decade")


class TestCurrency:
    def test_symbols(self):
        assert get_currency_symbol("bdt") == "৳"
        assert get_currency_symbol("AUD") == "AUD"

    @pytest.mark.parametrize(
        "amount,currency,expected",
        [
            ("1234.5", "USD", "$1,234.50"),
            ("-20", "GBP", "£20.00"),
            ("0.005", "EUR", "€0.01"),
            ("10", "JPY", "JPY 10.00"),
            ("99999", "BDT", "৳99,999.00"),
        ],
    )
    def test_format(self, amount, currency, expected):
        assert format_currency(Decimal(amount), currency) == expected


class TestResolveAccount:
    def test_by_id_and_name(self, account_service, sample_account):
        assert resolve_account(account_service, sample_account.id) == sample_account.id
        assert resolve_account(account_service, str(sample_account.id)) == sample_account.id
        assert resolve_account(account_service, "Checking") == sample_account.id

    def test_case_insensitive_fallback(self, account_service, sample_account):
        assert resolve_account(account_service, "checking") == sample_account.id

    def test_ambiguous_name(self, account_service):
        account_service.create_account(name="Wallet")
        account_service.create_account(name="WALLET")

        assert resolve_account(account_service, "WALLET") == 2
        with pytest.raises(ValidationError, match="ambiguous"):
            resolve_account(account_service, "wallet")

    def test_missing(self, account_service):
        with pytest.raises(NotFoundError, match="Account ID 9 not found"):
            resolve_account(account_service, "9")
        with pytest.raises(NotFoundError, match="Account 'Nowhere' not found"):
            resolve_account(account_service, "Nowhere")
