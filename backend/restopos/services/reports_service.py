"""Reports over the order archive: monthly dashboard figures and XLSX export."""

import io
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from restopos.schemas.config import AppConfig
from restopos.schemas.order import Order
from restopos.schemas.reports import ArchiveSummary, CategorySales, DailyRevenue
from restopos.services.billing import total_discount_given
from restopos.services.pricing import ZERO, discount_amount, quantize_money


def search_orders(orders: List[Order], term: Optional[str]) -> List[Order]:
    """Match on order id, customer name or table number."""
    if not term:
        return orders
    needle = term.strip().lower()
    return [
        order for order in orders
        if needle in order.id.lower()
        or (order.customer_name and needle in order.customer_name.lower())
        or needle == str(order.table_number)
    ]


def orders_in_month(orders: List[Order], year: int, month: int) -> List[Order]:
    return [o for o in orders if o.created_at.year == year and o.created_at.month == month]


def archive_summary(orders: List[Order], year: int, month: int) -> ArchiveSummary:
    in_month = orders_in_month(orders, year, month)
    total_sales = sum((o.total for o in in_month), ZERO)
    count = len(in_month)

    daily: Dict[date, Decimal] = defaultdict(lambda: ZERO)
    category_revenue: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    category_quantity: Dict[str, int] = defaultdict(int)
    for order in in_month:
        daily[order.created_at.date()] += order.total
        for line in order.items:
            category = line.menu_item.category.value
            category_revenue[category] += line.line_total
            category_quantity[category] += line.quantity

    return ArchiveSummary(
        year=year,
        month=month,
        total_sales=quantize_money(total_sales),
        total_discounts=quantize_money(total_discount_given(in_month)),
        order_count=count,
        average_order_value=quantize_money(total_sales / count) if count else ZERO,
        daily_revenue=[
            DailyRevenue(date=day, revenue=quantize_money(amount))
            for day, amount in sorted(daily.items())
        ],
        sales_by_category=sorted(
            (
                CategorySales(category=c, revenue=quantize_money(r), quantity=category_quantity[c])
                for c, r in category_revenue.items()
            ),
            key=lambda row: row.revenue,
            reverse=True,
        ),
    )


def generate_archive_xlsx(orders: List[Order], config: AppConfig) -> bytes:
    """Generate an Excel workbook listing archived orders."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Archived Orders"

    # Styles
    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
    border = Border(
        left=Side(style="thin"),
        right=Side(style="thin"),
        top=Side(style="thin"),
        bottom=Side(style="thin"),
    )

    ws["A1"] = f"{config.title} - Order Archive"
    ws["A1"].font = Font(bold=True, size=14)
    ws.merge_cells("A1:H1")

    headers = ["Order ID", "Date", "Table", "Customer", "Items", "Subtotal", "Discount", "Total"]
    for col, header in enumerate(headers, 1):
        cell = ws.cell(row=3, column=col, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.border = border
        cell.alignment = Alignment(horizontal="center")

    grand_total = ZERO
    for idx, order in enumerate(orders, 1):
        row = 3 + idx
        grand_total += order.total
        data = [
            order.id,
            order.created_at.strftime("%Y-%m-%d %H:%M"),
            order.table_number,
            order.customer_name or "",
            ", ".join(f"{line.quantity}x {line.menu_item.name}" for line in order.items),
            float(quantize_money(order.subtotal)),
            float(quantize_money(discount_amount(order.subtotal, order.discount))),
            float(quantize_money(order.total)),
        ]
        for col, value in enumerate(data, 1):
            cell = ws.cell(row=row, column=col, value=value)
            cell.border = border

    total_row = 4 + len(orders)
    ws.cell(row=total_row, column=7, value="Total:").font = Font(bold=True)
    ws.cell(row=total_row, column=8, value=float(quantize_money(grand_total))).font = Font(bold=True)

    for column, width in zip("ABCDEFGH", (26, 18, 8, 22, 45, 12, 12, 12)):
        ws.column_dimensions[column].width = width

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
