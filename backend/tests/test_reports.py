"""Tests for archive reports."""

from datetime import datetime, timezone
from decimal import Decimal
from io import BytesIO

from openpyxl import load_workbook

from restopos.services.order_builder import OrderBuilder
from restopos.services.order_lifecycle import OrderLifecycleManager
from restopos.services.reports_service import (
    archive_summary,
    generate_archive_xlsx,
    search_orders,
)


def _archived(menu, customer=None):
    manager = OrderLifecycleManager()
    builder = OrderBuilder()
    builder.add_item(menu[0])
    builder.add_item(menu[0])
    builder.add_item(menu[1])
    first = manager.add(builder.submit(table_number=5, customer=customer))
    manager.apply_discount(first.id, 10)
    builder.add_item(menu[2])
    second = manager.add(builder.submit(table_number=2))
    manager.archive(first.id)
    manager.archive(second.id)
    return manager.archived


class TestSearch:
    def test_by_customer_name(self, menu, customer):
        orders = _archived(menu, customer)
        assert len(search_orders(orders, "john")) == 1

    def test_by_table_number(self, menu):
        orders = _archived(menu)
        assert 2 in [o.table_number for o in search_orders(orders, "2")]

    def test_by_order_id(self, menu):
        orders = _archived(menu)
        assert search_orders(orders, orders[1].id.lower()) == [orders[1]]

    def test_empty_term_returns_everything(self, menu):
        assert len(search_orders(_archived(menu), "")) == 2


class TestArchiveSummary:
    def test_month_totals(self, menu):
        orders = _archived(menu)
        now = datetime.now(timezone.utc)
        summary = archive_summary(orders, now.year, now.month)

        assert summary.order_count == 2
        assert summary.total_sales == Decimal("27.67")
        assert summary.total_discounts == Decimal("2.80")
        assert summary.average_order_value == Decimal("13.84")
        assert summary.sales_by_category[0].category == "Main Courses"

    def test_other_month_is_empty(self, menu):
        summary = archive_summary(_archived(menu), 1999, 1)
        assert summary.order_count == 0
        assert summary.total_sales == Decimal("0")


class TestXlsxExport:
    def test_workbook_rows(self, menu, app_config):
        orders = _archived(menu)
        wb = load_workbook(BytesIO(generate_archive_xlsx(orders, app_config)))
        ws = wb.active
        assert ws["A3"].value == "Order ID"
        assert ws["A4"].value == orders[0].id
        assert ws["H4"].value == 25.17
        assert ws["H6"].value == 27.67
