"""Fixed-point money helpers.

Amounts are persisted as decimal strings with two places ("19.99") and all
arithmetic happens on ``Decimal`` values quantised to cents.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Coerce a str/int/Decimal (or float, via its repr) to a cent-quantised Decimal."""
    if value is None or value == "":
        return ZERO
    if isinstance(value, float):
        value = repr(value)
    try:
        return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError):
        raise ValueError(f"Not a monetary amount: {value!r}") from None


def format_money(value) -> str:
    return str(to_money(value))


def multiply(unit_price, quantity: int) -> Decimal:
    return (to_money(unit_price) * quantity).quantize(CENTS, rounding=ROUND_HALF_UP)


def total(amounts) -> Decimal:
    return sum((to_money(amount) for amount in amounts), ZERO)
