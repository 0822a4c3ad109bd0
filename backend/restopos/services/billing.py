"""Billing service: receipt and printable menu rendering."""

import io
import zlib
from collections import OrderedDict
from decimal import Decimal
from typing import Dict, List, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from restopos.schemas.config import AppConfig
from restopos.schemas.menu import MenuCategory, MenuItem
from restopos.schemas.order import Order
from restopos.services.pricing import discount_amount, format_money

RECEIPT_WIDTH = 40
THANK_YOU = "Thank you for dining with us!"


def token_number(order_id: str) -> int:
    """Stable 3-digit kitchen token for an order."""
    return zlib.crc32(order_id.encode("utf-8")) % 900 + 100


def bill_lines(order: Order, config: AppConfig) -> Dict:
    """Compute every displayed value of a bill, already formatted."""
    currency = config.currency
    discount_value = discount_amount(order.subtotal, order.discount)
    return {
        "title": config.title,
        "gst_number": config.gst_number,
        "bill_no": order.id,
        "token": token_number(order.id),
        "table_number": order.table_number,
        "date": order.created_at.strftime("%Y-%m-%d"),
        "time": order.created_at.strftime("%H:%M:%S"),
        "customer_name": order.customer_name,
        "items": [
            {
                "quantity": line.quantity,
                "name": line.menu_item.name,
                "price": format_money(line.line_total, currency),
            }
            for line in order.items
        ],
        "subtotal": format_money(order.subtotal, currency),
        "discount_label": f"Discount ({order.discount.normalize():f}%)" if order.discount > 0 else None,
        "discount": format_money(-discount_value, currency) if order.discount > 0 else None,
        "points_redeemed": order.points_redeemed,
        "redeemed": format_money(-order.redeemed_value, currency) if order.points_redeemed else None,
        "total": format_money(order.total, currency),
    }


def _row(left: str, right: str, width: int = RECEIPT_WIDTH) -> str:
    gap = max(width - len(left) - len(right), 1)
    return f"{left}{' ' * gap}{right}"


def render_text_receipt(order: Order, config: AppConfig) -> str:
    """Render a fixed-width plain-text receipt."""
    bill = bill_lines(order, config)
    rule = "-" * RECEIPT_WIDTH
    out: List[str] = [bill["title"].center(RECEIPT_WIDTH)]
    if bill["gst_number"]:
        out.append(f"GSTIN: {bill['gst_number']}".center(RECEIPT_WIDTH))
    out.append(rule)
    out.append(f"TOKEN {bill['token']}".center(RECEIPT_WIDTH))
    out.append(rule)
    out.append(_row(f"Bill No: {bill['bill_no']}", ""))
    out.append(_row(f"Table: {bill['table_number']}", ""))
    out.append(_row(f"Date: {bill['date']}", f"Time: {bill['time']}"))
    if bill["customer_name"]:
        out.append(f"Customer: {bill['customer_name']}")
    out.append(rule)
    out.append(_row("QTY  ITEM", "PRICE"))
    for item in bill["items"]:
        out.append(_row(f"{item['quantity']:<4} {item['name']}", item["price"]))
    out.append(rule)
    out.append(_row("Subtotal:", bill["subtotal"]))
    if bill["discount"]:
        out.append(_row(f"{bill['discount_label']}:", bill["discount"]))
    if bill["redeemed"]:
        out.append(_row(f"Points redeemed ({bill['points_redeemed']}):", bill["redeemed"]))
    out.append(_row("Total:", bill["total"]))
    out.append(rule)
    out.append(THANK_YOU.center(RECEIPT_WIDTH))
    return "\n".join(out) + "\n"


def _pdf_currency(currency: str) -> str:
    """Built-in PDF fonts only cover Latin-1."""
    try:
        currency.encode("latin-1")
        return currency
    except UnicodeEncodeError:
        return "Rs. " if currency == "₹" else ""


def _pdf_config(config: AppConfig) -> AppConfig:
    return config.model_copy(update={"currency": _pdf_currency(config.currency)})


def generate_bill_pdf(order: Order, config: AppConfig) -> bytes:
    """Generate a PDF receipt for an order."""
    bill = bill_lines(order, _pdf_config(config))

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, topMargin=2 * cm, bottomMargin=2 * cm)

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "BillTitle",
        parent=styles["Heading1"],
        fontSize=18,
        alignment=1,
        spaceAfter=6,
    )
    centered = ParagraphStyle("Centered", parent=styles["Normal"], alignment=1)

    elements = [Paragraph(bill["title"], title_style)]
    if bill["gst_number"]:
        elements.append(Paragraph(f"GSTIN: {bill['gst_number']}", centered))
    elements.append(Spacer(1, 0.3 * cm))
    elements.append(Paragraph(f"<b>Token {bill['token']}</b>", centered))
    elements.append(Spacer(1, 0.5 * cm))
    elements.append(Paragraph(f"<b>Bill No:</b> {bill['bill_no']}", styles["Normal"]))
    elements.append(Paragraph(f"<b>Table:</b> {bill['table_number']}", styles["Normal"]))
    elements.append(Paragraph(f"<b>Date:</b> {bill['date']} {bill['time']}", styles["Normal"]))
    if bill["customer_name"]:
        elements.append(Paragraph(f"<b>Customer:</b> {bill['customer_name']}", styles["Normal"]))
    elements.append(Spacer(1, 0.5 * cm))

    table_data = [["QTY", "ITEM", "PRICE"]]
    for item in bill["items"]:
        table_data.append([str(item["quantity"]), item["name"][:40], item["price"]])
    table_data.append(["", "Subtotal:", bill["subtotal"]])
    if bill["discount"]:
        table_data.append(["", f"{bill['discount_label']}:", bill["discount"]])
    if bill["redeemed"]:
        table_data.append(["", f"Points redeemed ({bill['points_redeemed']}):", bill["redeemed"]])
    table_data.append(["", "Total:", bill["total"]])

    table = Table(table_data, colWidths=[2 * cm, 10 * cm, 4 * cm])
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.grey),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("ALIGN", (2, 0), (2, -1), "RIGHT"),
        ("LINEBELOW", (0, len(order.items)), (-1, len(order.items)), 1, colors.black),
        ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
    ]))
    elements.append(table)
    elements.append(Spacer(1, 1 * cm))
    elements.append(Paragraph(THANK_YOU, centered))

    doc.build(elements)
    return buffer.getvalue()


def group_menu_by_category(items: List[MenuItem]) -> "OrderedDict[str, List[MenuItem]]":
    """Menu items grouped by category, categories in menu order, empty ones omitted."""
    grouped: "OrderedDict[str, List[MenuItem]]" = OrderedDict()
    for category in MenuCategory:
        in_category = [item for item in items if item.category == category]
        if in_category:
            grouped[category.value] = in_category
    return grouped


def generate_menu_pdf(items: List[MenuItem], config: AppConfig, subtitle: Optional[str] = None) -> bytes:
    """Generate a printable menu grouped by category."""
    currency = _pdf_currency(config.currency)

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, topMargin=2 * cm, bottomMargin=2 * cm)

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "MenuTitle",
        parent=styles["Heading1"],
        fontSize=22,
        alignment=1,
        spaceAfter=20,
    )

    elements = [Paragraph(config.title, title_style)]
    if subtitle:
        elements.append(Paragraph(subtitle, styles["Italic"]))
        elements.append(Spacer(1, 0.5 * cm))

    for category, category_items in group_menu_by_category(items).items():
        elements.append(Paragraph(category, styles["Heading2"]))
        rows = []
        for item in category_items:
            name = f"<b>{item.name}</b>"
            if item.description:
                name += f"<br/><font size=8>{item.description}</font>"
            rows.append([Paragraph(name, styles["Normal"]), format_money(item.price, currency)])
        table = Table(rows, colWidths=[13 * cm, 3 * cm])
        table.setStyle(TableStyle([
            ("ALIGN", (1, 0), (1, -1), "RIGHT"),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("LINEBELOW", (0, 0), (-1, -1), 0.25, colors.lightgrey),
        ]))
        elements.append(table)
        elements.append(Spacer(1, 0.5 * cm))

    doc.build(elements)
    return buffer.getvalue()


def total_discount_given(orders: List[Order]) -> Decimal:
    return sum((discount_amount(o.subtotal, o.discount) for o in orders), Decimal("0"))
