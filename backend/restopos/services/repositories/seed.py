"""Demo data for a fresh in-memory store."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import List

from restopos.schemas.customer import Customer
from restopos.schemas.menu import MenuCategory, MenuItem
from restopos.schemas.order import Order, OrderItem, OrderStatus
from restopos.schemas.staff import Shift, StaffMember, StaffRole
from restopos.schemas.table import Table, TableStatus

PLACEHOLDER_IMAGE = "https://placehold.co/600x400.png"


def demo_menu() -> List[MenuItem]:
    rows = [
        ("1", "Samosa", "60", MenuCategory.APPETIZERS, "Crispy pastry filled with spiced potatoes and peas."),
        ("2", "Pakora", "80", MenuCategory.APPETIZERS, "Mixed vegetables dipped in gram flour batter and deep-fried."),
        ("3", "Butter Chicken", "450", MenuCategory.MAIN_COURSES, "Grilled chicken simmered in a creamy tomato sauce."),
        ("4", "Palak Paneer", "380", MenuCategory.MAIN_COURSES, "Indian cheese cubes in a smooth spinach sauce."),
        ("5", "Chole Bhature", "250", MenuCategory.MAIN_COURSES, "Spicy chickpea curry served with fluffy fried bread."),
        ("6", "Gulab Jamun", "100", MenuCategory.DESSERTS, "Milk-solid dumplings soaked in rose-scented syrup."),
        ("7", "Rasmalai", "120", MenuCategory.DESSERTS, "Cottage cheese dumplings in sweetened, thickened milk."),
        ("8", "Mango Lassi", "150", MenuCategory.BEVERAGES, "A yogurt-based drink with mango pulp."),
        ("9", "Masala Chai", "50", MenuCategory.BEVERAGES, "Spiced milk tea."),
    ]
    return [
        MenuItem(id=i, name=n, price=Decimal(p), category=c, description=d, image=PLACEHOLDER_IMAGE)
        for i, n, p, c, d in rows
    ]


def demo_customers() -> List[Customer]:
    return [
        Customer(id="CUST01", name="John Doe", email="john.d@email.com", phone="555-0101", loyalty_points=150),
        Customer(id="CUST02", name="Jane Smith", email="jane.s@email.com", phone="555-0102", loyalty_points=75),
        Customer(id="CUST03", name="Peter Jones", email="peter.j@email.com", phone="555-0103", loyalty_points=20),
    ]


def demo_staff() -> List[StaffMember]:
    return [
        StaffMember(id="STAFF01", name="Alice Johnson", role=StaffRole.MANAGER, email="alice@example.com",
                    phone="123-456-7890", shift=Shift.MORNING, salary=Decimal("50000")),
        StaffMember(id="STAFF02", name="Bob Williams", role=StaffRole.CHEF, email="bob@example.com",
                    phone="123-456-7891", shift=Shift.AFTERNOON, salary=Decimal("45000")),
        StaffMember(id="STAFF03", name="Charlie Brown", role=StaffRole.WAITER, email="charlie@example.com",
                    phone="123-456-7892", shift=Shift.MORNING, salary=Decimal("30000")),
        StaffMember(id="STAFF04", name="Eve Adams", role=StaffRole.BUSBOY, email="eve@example.com",
                    phone="123-456-7894", shift=Shift.NIGHT, salary=Decimal("25000")),
    ]


def demo_orders() -> List[Order]:
    menu = {item.id: item for item in demo_menu()}
    now = datetime.now(timezone.utc)
    return [
        Order(
            id="ORD003", table_number=1, status=OrderStatus.RECEIVED,
            items=[OrderItem(menu_item=menu["1"], quantity=2), OrderItem(menu_item=menu["5"], quantity=1),
                   OrderItem(menu_item=menu["9"], quantity=2)],
            created_at=now - timedelta(minutes=2),
        ),
        Order(
            id="ORD002", table_number=5, status=OrderStatus.RECEIVED,
            items=[OrderItem(menu_item=menu["4"], quantity=1), OrderItem(menu_item=menu["1"], quantity=1)],
            created_at=now - timedelta(minutes=5),
        ),
        Order(
            id="ORD001", table_number=3, status=OrderStatus.PREPARING, discount=Decimal("10"),
            items=[OrderItem(menu_item=menu["3"], quantity=2), OrderItem(menu_item=menu["7"], quantity=2)],
            created_at=now - timedelta(minutes=10),
            customer_id="CUST01", customer_name="John Doe",
        ),
    ]


def demo_tables() -> List[Table]:
    occupied = {1: "ORD003", 3: "ORD001", 5: "ORD002"}
    reserved = {7, 12}
    capacities = [4, 2, 4, 6, 2, 4, 8, 2, 4, 4, 2, 6]
    tables = []
    for table_id, capacity in enumerate(capacities, 1):
        if table_id in occupied:
            tables.append(Table(id=table_id, capacity=capacity, status=TableStatus.OCCUPIED,
                                order_id=occupied[table_id]))
        elif table_id in reserved:
            tables.append(Table(id=table_id, capacity=capacity, status=TableStatus.RESERVED))
        else:
            tables.append(Table(id=table_id, capacity=capacity))
    return tables
