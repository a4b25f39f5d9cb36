"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

# Persian and Arabic-Indic digits, and their separators
_DIGIT_TABLE = str.maketrans(
    "۰۱۲۳۴۵۶۷۸۹٠١٢٣٤٥٦٧٨٩٫٬",
    "01234567890123456789.,",
)


def normalize_digits(text: str) -> str:
    """Replace Persian/Arabic-Indic digits and separators with ASCII ones."""
    return text.translate(_DIGIT_TABLE)


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "-123.45"
    - "1,234,000"
    - "1,250,000 ریال" or "IRR 1,250,000"
    - "۱۲۵۰۰۰۰" (Persian digits)
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = normalize_digits(amount_str.strip())

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Drop currency symbols and words, commas and whitespace
    amount_str = re.sub(r"[^0-9.\-+]", "", amount_str)

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount
