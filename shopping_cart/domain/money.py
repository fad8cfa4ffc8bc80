# shopping_cart/domain/money.py
from decimal import Decimal, ROUND_HALF_UP

ZERO = Decimal("0.00")
CENT = Decimal("0.01")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps floats like 19.99 exact instead of their binary expansion
    return Decimal(str(value))


def round_money(value) -> Decimal:
    """Round half away from zero to currency precision."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
