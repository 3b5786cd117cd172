"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re

_CURRENCY_SYMBOLS = re.compile(r"[$€£¥\s]")


def parse_amount_cents(amount_str: str) -> int:
    """Parse an amount string into integer minor units (cents).

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "-$123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    The value is parsed as a Decimal, so "87.43" becomes exactly 8743 with no
    binary floating-point drift; fractions of a cent are rounded half-up.

    Args:
        amount_str: Amount string

    Returns:
        Amount in cents

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    cleaned = _CURRENCY_SYMBOLS.sub("", amount_str).replace(",", "")

    try:
        amount = Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}'") from e

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")

    cents = int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return -cents if is_negative else cents


def format_cents(cents: int) -> str:
    """Render cents as a signed dollar string, e.g. -8743 -> "-$87.43"."""
    sign = "-" if cents < 0 else ""
    dollars, remainder = divmod(abs(cents), 100)
    return f"{sign}${dollars:,}.{remainder:02d}"
