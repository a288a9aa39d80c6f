"""Utility functions for fintrack."""

from fintrack.utils.date_parser import parse_date
from fintrack.utils.amount_parser import parse_amount, parse_saving_amount
from fintrack.utils.currency import format_currency, get_currency_symbol

__all__ = [
    "parse_date",
    "parse_amount",
    "parse_saving_amount",
    "format_currency",
    "get_currency_symbol",
]
