"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45", "৳500", "C$20"
    - "1,234.56"
    - "-123.45" and "(123.45)" (negative)

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = amount_str.strip()

    is_negative = False
    if text.startswith("(") and text.endswith(")"):
        is_negative = True
        text = text[1:-1]

    # Remove currency symbols and thousands separators
    text = re.sub(r"C\$|[$€£¥৳]", "", text).replace(",", "").strip()

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def parse_saving_amount(value: str) -> Decimal:
    """Parse a saving or donation rule.

    "10%" becomes -10 (ten percent), "50" or "$50" becomes 50 (fixed amount).

    Raises:
        ValueError: If the value is negative or a percentage above 100
    """
    text = value.strip()
    if text.endswith("%"):
        percent = parse_amount(text[:-1])
        if percent < 0 or percent > 100:
            raise ValueError(f"Percentage must be between 0 and 100, got {percent}")
        return -percent
    amount = parse_amount(text)
    if amount < 0:
        raise ValueError(f"Fixed amount must not be negative, got {amount}")
    return amount
