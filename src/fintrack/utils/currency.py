"""Currency display helpers."""

from decimal import Decimal, ROUND_HALF_UP

CURRENCY_SYMBOLS = {
    "BDT": "৳",
    "USD": "$",
    "GBP": "£",
    "EUR": "€",
    "CAD": "C$",
}

SUPPORTED_CURRENCIES = ("USD", "EUR", "GBP", "BDT", "JPY", "CAD", "AUD")


def get_currency_symbol(currency: str) -> str:
    """Return the display symbol for a currency code, or the code itself."""
    return CURRENCY_SYMBOLS.get(currency.upper(), currency.upper())


def format_currency(amount: Decimal, currency: str = "USD") -> str:
    """Format an amount with its currency symbol.

    The sign is dropped, matching how amounts are shown next to an explicit
    income/expense label. Codes without a symbol are followed by a space.

    Examples:
        format_currency(Decimal("1234.5"), "USD") -> "$1,234.50"
        format_currency(Decimal("10"), "JPY") -> "JPY 10.00"
    """
    value = abs(Decimal(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    symbol = get_currency_symbol(currency)
    if symbol == currency.upper():
        return f"{symbol} {value:,.2f}"
    return f"{symbol}{value:,.2f}"
