"""Loyalty points accrual and redemption.

Every function here is pure: it returns an updated copy of the customer and
leaves persisting it to the caller.
"""

import logging
import math
from decimal import Decimal
from typing import Tuple

from restopos.schemas.customer import Customer
from restopos.services.pricing import ZERO, to_decimal

logger = logging.getLogger(__name__)

DEFAULT_POINTS_PER_CURRENCY_UNIT = Decimal("0.1")
DEFAULT_CURRENCY_UNIT_PER_POINT = Decimal("1.0")


def add_points_for_order(
    customer: Customer,
    order_total,
    points_per_currency_unit=DEFAULT_POINTS_PER_CURRENCY_UNIT,
) -> Tuple[Customer, int]:
    """Credit floor(order_total x rate) points.

    Returns the (possibly unchanged) customer and the points earned. Nothing
    is ever rounded up and a non-positive result earns nothing.
    """
    points_earned = math.floor(to_decimal(order_total) * to_decimal(points_per_currency_unit))
    if points_earned <= 0:
        return customer, 0

    updated = customer.model_copy(
        update={"loyalty_points": customer.loyalty_points + points_earned}
    )
    logger.info(f"Customer {customer.id} earned {points_earned} loyalty points")
    return updated, points_earned


def redeem_points(
    customer: Customer,
    points: int,
    currency_unit_per_point=DEFAULT_CURRENCY_UNIT_PER_POINT,
) -> Tuple[Customer, Decimal, int]:
    """Spend up to ``points`` from the customer's balance.

    Returns the updated customer, the currency value of the redemption and
    the number of points actually taken.
    """
    redeemable = min(points, customer.loyalty_points)
    if redeemable <= 0:
        return customer, ZERO, 0

    value = redeemable * to_decimal(currency_unit_per_point)
    updated = customer.model_copy(
        update={"loyalty_points": customer.loyalty_points - redeemable}
    )
    logger.info(f"Customer {customer.id} redeemed {redeemable} points worth {value}")
    return updated, value, redeemable


def revert_redemption(customer: Customer, points: int) -> Customer:
    """Give back points from a redemption that was undone."""
    if points <= 0:
        return customer
    return customer.model_copy(
        update={"loyalty_points": customer.loyalty_points + points}
    )
