"""SQLAlchemy-backed repository."""

import logging
from enum import Enum
from typing import List, Type

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from restopos import models
from restopos.core.exceptions import ExternalServiceError
from restopos.schemas.customer import Customer
from restopos.schemas.menu import MenuItem
from restopos.schemas.order import Order
from restopos.schemas.staff import StaffMember, StaffTransaction
from restopos.schemas.table import Table
from restopos.services.repositories.base import DataRepository

logger = logging.getLogger(__name__)


def _row_values(record) -> dict:
    """Plain column values for a schema object, enums unwrapped."""
    return {
        key: value.value if isinstance(value, Enum) else value
        for key, value in record.model_dump().items()
    }


def _order_from_row(row: models.Order) -> Order:
    return Order.model_validate({
        "id": row.id,
        "table_number": row.table_number,
        "items": row.items or [],
        "status": row.status,
        "discount": row.discount,
        "created_at": row.created_at,
        "customer_id": row.customer_id,
        "customer_name": row.customer_name,
        "points_earned": row.points_earned,
        "points_redeemed": row.points_redeemed,
        "redeemed_value": row.redeemed_value,
        "version": row.version,
    })


def _order_to_row(order: Order, position: int, is_archived: bool) -> models.Order:
    return models.Order(
        id=order.id,
        position=position,
        is_archived=is_archived,
        table_number=order.table_number,
        items=[line.model_dump(mode="json") for line in order.items],
        status=order.status.value,
        subtotal=order.subtotal,
        discount=order.discount,
        total=order.total,
        customer_id=order.customer_id,
        customer_name=order.customer_name,
        points_earned=order.points_earned,
        points_redeemed=order.points_redeemed,
        redeemed_value=order.redeemed_value,
        created_at=order.created_at,
        version=order.version,
    )


class SqlRepository(DataRepository):
    """Stores every collection in the relational database."""

    def __init__(self, db: Session):
        self.db = db

    @property
    def name(self) -> str:
        return "sql"

    def _replace(self, model: Type, rows: list, **filters) -> None:
        try:
            query = self.db.query(model)
            for column, value in filters.items():
                query = query.filter(getattr(model, column) == value)
            query.delete(synchronize_session=False)
            # Loaded rows would clash with the replacements on identity
            self.db.expunge_all()
            self.db.add_all(rows)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to save {model.__tablename__}: {e}")
            raise ExternalServiceError("database", f"Could not save {model.__tablename__}")

    # Menu

    def get_menu_items(self) -> List[MenuItem]:
        rows = self.db.query(models.MenuItem).order_by(models.MenuItem.position).all()
        return [MenuItem.model_validate(row) for row in rows]

    def save_menu_items(self, items: List[MenuItem]) -> None:
        rows = [
            models.MenuItem(position=i, **_row_values(item))
            for i, item in enumerate(items)
        ]
        self._replace(models.MenuItem, rows)

    # Orders

    def _orders(self, archived: bool) -> List[Order]:
        rows = (
            self.db.query(models.Order)
            .filter(models.Order.is_archived == archived)
            .order_by(models.Order.position)
            .all()
        )
        return [_order_from_row(row) for row in rows]

    def get_active_orders(self) -> List[Order]:
        return self._orders(archived=False)

    def get_archived_orders(self) -> List[Order]:
        return self._orders(archived=True)

    def save_all_orders(self, active: List[Order], archived: List[Order]) -> None:
        rows = [_order_to_row(o, i, False) for i, o in enumerate(active)]
        rows += [_order_to_row(o, i, True) for i, o in enumerate(archived)]
        self._replace(models.Order, rows)

    # Tables

    def get_tables(self) -> List[Table]:
        rows = self.db.query(models.Table).order_by(models.Table.id).all()
        return [Table.model_validate(row) for row in rows]

    def save_tables(self, tables: List[Table]) -> None:
        rows = [models.Table(**_row_values(table)) for table in tables]
        self._replace(models.Table, rows)

    # Staff

    def get_staff(self) -> List[StaffMember]:
        rows = self.db.query(models.StaffMember).order_by(models.StaffMember.position).all()
        return [StaffMember.model_validate(row) for row in rows]

    def save_staff(self, staff: List[StaffMember]) -> None:
        rows = [
            models.StaffMember(position=i, **_row_values(member))
            for i, member in enumerate(staff)
        ]
        self._replace(models.StaffMember, rows)

    def get_staff_transactions(self) -> List[StaffTransaction]:
        rows = self.db.query(models.StaffTransaction).order_by(models.StaffTransaction.position).all()
        return [StaffTransaction.model_validate(row) for row in rows]

    def save_staff_transactions(self, transactions: List[StaffTransaction]) -> None:
        rows = [
            models.StaffTransaction(position=i, **_row_values(tx))
            for i, tx in enumerate(transactions)
        ]
        self._replace(models.StaffTransaction, rows)

    # Customers

    def get_customers(self) -> List[Customer]:
        rows = self.db.query(models.Customer).order_by(models.Customer.position).all()
        return [Customer.model_validate(row) for row in rows]

    def save_customers(self, customers: List[Customer]) -> None:
        rows = [
            models.Customer(position=i, **_row_values(customer))
            for i, customer in enumerate(customers)
        ]
        self._replace(models.Customer, rows)
