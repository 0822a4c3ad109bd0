"""Archive reporting schemas."""

from datetime import date
from decimal import Decimal
from typing import List

from pydantic import BaseModel


class DailyRevenue(BaseModel):
    date: date
    revenue: Decimal


class CategorySales(BaseModel):
    category: str
    revenue: Decimal
    quantity: int


class ArchiveSummary(BaseModel):
    year: int
    month: int
    total_sales: Decimal
    total_discounts: Decimal
    order_count: int
    average_order_value: Decimal
    daily_revenue: List[DailyRevenue]
    sales_by_category: List[CategorySales]
