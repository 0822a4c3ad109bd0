"""Order arithmetic shared by the order lifecycle and bill rendering.

All amounts are ``Decimal``. Totals are kept at full precision; rounding to
two places happens only when a value is displayed.
"""

from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP
from typing import Iterable, Tuple

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")
DISCOUNT_PLACES = 4
DISCOUNT_STEP = Decimal("0.0001")


def to_decimal(value) -> Decimal:
    """Coerce ints, floats and strings to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def line_total(price, quantity: int) -> Decimal:
    return to_decimal(price) * quantity


def compute_subtotal(lines: Iterable[Tuple[Decimal, int]]) -> Decimal:
    """Sum of price x quantity over (price, quantity) pairs."""
    return sum((line_total(price, qty) for price, qty in lines), ZERO)


def _to_discount_scale(value: Decimal, rounding) -> Decimal:
    if value.as_tuple().exponent < -DISCOUNT_PLACES:
        return value.quantize(DISCOUNT_STEP, rounding=rounding)
    return value


def clamp_discount(percentage, max_discount=HUNDRED) -> Decimal:
    """Clamp a discount percentage into [0, max_discount].

    Values finer than four decimal places, the scale orders are stored at,
    are rounded half up first.
    """
    upper = _to_discount_scale(min(max(to_decimal(max_discount), ZERO), HUNDRED), ROUND_DOWN)
    value = _to_discount_scale(to_decimal(percentage), ROUND_HALF_UP)
    return min(max(value, ZERO), upper)


def compute_total(subtotal, discount, redeemed_value=ZERO) -> Decimal:
    """subtotal x (1 - discount/100) - redeemed_value, floored at zero."""
    discounted = to_decimal(subtotal) * (1 - to_decimal(discount) / HUNDRED)
    return max(discounted - to_decimal(redeemed_value), ZERO)


def discount_amount(subtotal, discount) -> Decimal:
    subtotal = to_decimal(subtotal)
    return subtotal - subtotal * (1 - to_decimal(discount) / HUNDRED)


def quantize_money(value) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(value, currency: str = "") -> str:
    """Render an amount with exactly two decimals, e.g. ``₹25.17``."""
    amount = quantize_money(value)
    if amount < 0:
        return f"-{currency}{-amount}"
    return f"{currency}{amount}"
