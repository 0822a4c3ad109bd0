"""SQLAlchemy models."""

from restopos.models.menu import MenuItem
from restopos.models.order import Order
from restopos.models.restaurant import Table
from restopos.models.customer import Customer
from restopos.models.staff import StaffMember, StaffTransaction
from restopos.models.settings import AppSetting

__all__ = [
    "MenuItem",
    "Order",
    "Table",
    "Customer",
    "StaffMember",
    "StaffTransaction",
    "AppSetting",
]
