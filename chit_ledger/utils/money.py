"""Currency helpers - all money is Decimal, quantized to 2 places"""

from decimal import Decimal, ROUND_HALF_UP

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Convert a numeric value to a 2-place Decimal (floats go through str to avoid binary noise)"""
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_currency(amount: Decimal | int | float, symbol: str = "₹") -> str:
    """Render an amount for user-facing messages, e.g. ₹5,000.00"""
    return f"{symbol}{to_money(amount):,.2f}"
