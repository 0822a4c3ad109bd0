"""Order service: ties the order domain to persistence.

Each function loads what it needs from the repository, runs one lifecycle
operation and saves the affected collections back.
"""

import logging
from typing import List, Optional, Tuple

from restopos.core.exceptions import NotFoundError, ValidationError
from restopos.schemas.config import AppConfig
from restopos.schemas.customer import Customer
from restopos.schemas.order import Order, OrderCreate
from restopos.schemas.table import Table, TableStatus
from restopos.services import loyalty_service
from restopos.services.order_builder import OrderBuilder
from restopos.services.order_lifecycle import OrderLifecycleManager
from restopos.services.repositories.base import DataRepository

logger = logging.getLogger(__name__)


def load_manager(repo: DataRepository, config: AppConfig) -> OrderLifecycleManager:
    return OrderLifecycleManager(
        active=repo.get_active_orders(),
        archived=repo.get_archived_orders(),
        max_discount=config.max_discount,
    )


def save_manager(repo: DataRepository, manager: OrderLifecycleManager) -> None:
    repo.save_all_orders(manager.active, manager.archived)


def find_customer(customers: List[Customer], customer_id: str) -> Customer:
    for customer in customers:
        if customer.id == customer_id:
            return customer
    logger.warning(f"Customer {customer_id} not found")
    raise NotFoundError("Customer", customer_id)


def replace_customer(customers: List[Customer], updated: Customer) -> List[Customer]:
    return [updated if c.id == updated.id else c for c in customers]


def occupy_table(tables: List[Table], table_number: int, order_id: str) -> List[Table]:
    """Mark the order's table occupied. Unknown tables are rejected."""
    if tables and not any(t.id == table_number for t in tables):
        raise ValidationError(f"Table {table_number} does not exist")
    return [
        t.model_copy(update={"status": TableStatus.OCCUPIED, "order_id": order_id})
        if t.id == table_number else t
        for t in tables
    ]


def release_table(tables: List[Table], order_id: str) -> List[Table]:
    """Free whichever table holds the order."""
    return [
        t.model_copy(update={"status": TableStatus.AVAILABLE, "order_id": None})
        if t.order_id == order_id else t
        for t in tables
    ]


def place_order(
    repo: DataRepository, config: AppConfig, data: OrderCreate
) -> Tuple[Order, Optional[Customer]]:
    """Build, submit and persist a new order.

    Loyalty points for the final total are credited to the customer, the
    table is marked occupied, and the order goes to the top of the board.

    Collections are saved one at a time, not in one transaction:
    customers, then orders, then tables.
    """
    menu = {item.id: item for item in repo.get_menu_items()}
    builder = OrderBuilder(currency_unit_per_point=config.loyalty.currency_unit_per_point)
    for line in data.items:
        menu_item = menu.get(line.menu_item_id)
        if menu_item is None:
            raise ValidationError(f"Menu item {line.menu_item_id} does not exist")
        for _ in range(line.quantity):
            builder.add_item(menu_item)

    customers = repo.get_customers()
    customer = find_customer(customers, data.customer_id) if data.customer_id else None

    order = builder.submit(data.table_number, customer=customer, points_to_redeem=data.points_to_redeem)
    customer = builder.customer

    if customer is not None:
        customer, earned = loyalty_service.add_points_for_order(
            customer, order.total, config.loyalty.points_per_currency_unit
        )
        order = order.model_copy(update={"points_earned": earned})

    tables = occupy_table(repo.get_tables(), order.table_number, order.id)

    if customer is not None:
        repo.save_customers(replace_customer(customers, customer))
    manager = load_manager(repo, config)
    manager.add(order)
    save_manager(repo, manager)
    repo.save_tables(tables)

    logger.info(f"Order {order.id} placed: total {order.total}, {order.points_earned} points earned")
    return order, customer


def archive_order(
    repo: DataRepository, config: AppConfig, order_id: str, expected_version: Optional[int] = None
) -> Order:
    manager = load_manager(repo, config)
    archived = manager.archive(order_id, expected_version)
    save_manager(repo, manager)
    repo.save_tables(release_table(repo.get_tables(), order_id))
    return archived


def cancel_order(
    repo: DataRepository, config: AppConfig, order_id: str, expected_version: Optional[int] = None
) -> Order:
    """Cancel a received order, returning any redeemed points and earned points."""
    manager = load_manager(repo, config)
    cancelled = manager.cancel(order_id, expected_version)

    customers = repo.get_customers()
    if cancelled.customer_id and (cancelled.points_redeemed or cancelled.points_earned):
        customer = find_customer(customers, cancelled.customer_id)
        balance = customer.loyalty_points + cancelled.points_redeemed - cancelled.points_earned
        customer = customer.model_copy(update={"loyalty_points": max(balance, 0)})
        repo.save_customers(replace_customer(customers, customer))

    save_manager(repo, manager)
    repo.save_tables(release_table(repo.get_tables(), order_id))
    return cancelled


def redeem_points(
    repo: DataRepository,
    config: AppConfig,
    order_id: str,
    points: int,
    customer_id: Optional[str] = None,
    expected_version: Optional[int] = None,
) -> Tuple[Order, Customer]:
    manager = load_manager(repo, config)
    order = manager.get(order_id)
    target = customer_id or order.customer_id
    if target is None:
        raise ValidationError(f"Order {order_id} has no customer to redeem points for")

    customers = repo.get_customers()
    customer = find_customer(customers, target)
    order, customer = manager.redeem_points(
        order_id, customer, points, config.loyalty.currency_unit_per_point, expected_version
    )
    save_manager(repo, manager)
    repo.save_customers(replace_customer(customers, customer))
    return order, customer


def revert_redemption(
    repo: DataRepository, config: AppConfig, order_id: str, expected_version: Optional[int] = None
) -> Tuple[Order, Customer]:
    manager = load_manager(repo, config)
    order = manager.get(order_id)
    if order.customer_id is None:
        raise ValidationError(f"Order {order_id} has no loyalty redemption to revert")

    customers = repo.get_customers()
    customer = find_customer(customers, order.customer_id)
    order, customer = manager.revert_redemption(order_id, customer, expected_version)
    save_manager(repo, manager)
    repo.save_customers(replace_customer(customers, customer))
    return order, customer
