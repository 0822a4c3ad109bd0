"""Tests for placing orders against a repository."""

from decimal import Decimal

import pytest

from restopos.core.exceptions import ExternalServiceError
from restopos.schemas.order import OrderCreate, OrderLineCreate
from restopos.schemas.table import Table, TableStatus
from restopos.services import order_service
from restopos.services.repositories.memory_repository import InMemoryRepository


class FailingTablesRepository(InMemoryRepository):
    def save_tables(self, tables):
        raise ExternalServiceError("memory", "tables unavailable")


def _stock(repo, menu, customer):
    repo.save_menu_items(menu)
    repo.save_customers([customer])


class TestPlaceOrder:
    def test_points_order_and_table_saved(self, memory_repo, menu, customer, app_config):
        _stock(memory_repo, menu, customer)
        memory_repo.save_tables([Table(id=1, capacity=4)])

        order, updated = order_service.place_order(
            memory_repo,
            app_config,
            OrderCreate(table_number=1, items=[OrderLineCreate(menu_item_id="m2", quantity=2)],
                        customer_id="CUST01"),
        )

        assert order.total == Decimal("31.98")
        assert order.points_earned == 3
        assert updated.loyalty_points == 153
        assert memory_repo.get_customers()[0].loyalty_points == 153
        assert [o.id for o in memory_repo.get_active_orders()] == [order.id]
        assert memory_repo.get_tables()[0].status == TableStatus.OCCUPIED

    def test_failed_table_save_keeps_order_and_points_together(self, menu, customer, app_config):
        repo = FailingTablesRepository()
        _stock(repo, menu, customer)

        with pytest.raises(ExternalServiceError):
            order_service.place_order(
                repo,
                app_config,
                OrderCreate(table_number=1, items=[OrderLineCreate(menu_item_id="m2", quantity=2)],
                            customer_id="CUST01"),
            )

        [saved] = repo.get_active_orders()
        assert saved.points_earned == 3
        assert repo.get_customers()[0].loyalty_points == 153
