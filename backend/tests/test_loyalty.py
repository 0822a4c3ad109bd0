"""Tests for loyalty points accrual and redemption."""

from decimal import Decimal

from restopos.services import loyalty_service


class TestAccrual:
    """Points are floor(total x rate), never rounded up."""

    def test_default_rate(self, customer):
        updated, earned = loyalty_service.add_points_for_order(customer, Decimal("25.0"))
        assert earned == 2
        assert updated.loyalty_points == 152

    def test_small_order_earns_nothing(self, customer):
        updated, earned = loyalty_service.add_points_for_order(customer, Decimal("5.0"))
        assert earned == 0
        assert updated.loyalty_points == 150

    def test_floor_not_round(self, customer):
        _, earned = loyalty_service.add_points_for_order(customer, Decimal("29.99"))
        assert earned == 2

    def test_custom_rate(self, customer):
        _, earned = loyalty_service.add_points_for_order(customer, Decimal("100"), Decimal("0.5"))
        assert earned == 50

    def test_original_customer_is_not_mutated(self, customer):
        loyalty_service.add_points_for_order(customer, Decimal("100"))
        assert customer.loyalty_points == 150


class TestRedemption:
    def test_redeem_within_balance(self, customer):
        updated, value, redeemed = loyalty_service.redeem_points(customer, 40, Decimal("0.5"))
        assert redeemed == 40
        assert value == Decimal("20.0")
        assert updated.loyalty_points == 110

    def test_redeem_capped_at_balance(self, customer):
        updated, _, redeemed = loyalty_service.redeem_points(customer, 500)
        assert redeemed == 150
        assert updated.loyalty_points == 0

    def test_redeem_zero(self, customer):
        updated, value, redeemed = loyalty_service.redeem_points(customer, 0)
        assert (redeemed, value) == (0, Decimal("0"))
        assert updated is customer

    def test_revert(self, customer):
        assert loyalty_service.revert_redemption(customer, 25).loyalty_points == 175
