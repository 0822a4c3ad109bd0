"""In-memory repository, for demos and tests."""

import logging
import threading
from typing import List, Optional

from restopos.schemas.customer import Customer
from restopos.schemas.menu import MenuItem
from restopos.schemas.order import Order
from restopos.schemas.staff import StaffMember, StaffTransaction
from restopos.schemas.table import Table
from restopos.services.repositories import seed
from restopos.services.repositories.base import DataRepository

logger = logging.getLogger(__name__)


def _copy(items):
    return [item.model_copy(deep=True) for item in items]


class InMemoryRepository(DataRepository):
    """Keeps every collection in process memory.

    Reads and writes hand out copies so callers can never mutate the stored
    lists behind the repository's back.
    """

    def __init__(self, seeded: bool = False):
        self._lock = threading.Lock()
        self._menu: List[MenuItem] = seed.demo_menu() if seeded else []
        self._active: List[Order] = seed.demo_orders() if seeded else []
        self._archived: List[Order] = []
        self._tables: List[Table] = seed.demo_tables() if seeded else []
        self._staff: List[StaffMember] = seed.demo_staff() if seeded else []
        self._transactions: List[StaffTransaction] = []
        self._customers: List[Customer] = seed.demo_customers() if seeded else []

    @property
    def name(self) -> str:
        return "memory"

    def get_menu_items(self) -> List[MenuItem]:
        with self._lock:
            return _copy(self._menu)

    def save_menu_items(self, items: List[MenuItem]) -> None:
        with self._lock:
            self._menu = _copy(items)

    def get_active_orders(self) -> List[Order]:
        with self._lock:
            return _copy(self._active)

    def get_archived_orders(self) -> List[Order]:
        with self._lock:
            return _copy(self._archived)

    def save_all_orders(self, active: List[Order], archived: List[Order]) -> None:
        with self._lock:
            self._active = _copy(active)
            self._archived = _copy(archived)

    def get_tables(self) -> List[Table]:
        with self._lock:
            return _copy(self._tables)

    def save_tables(self, tables: List[Table]) -> None:
        with self._lock:
            self._tables = _copy(tables)

    def get_staff(self) -> List[StaffMember]:
        with self._lock:
            return _copy(self._staff)

    def save_staff(self, staff: List[StaffMember]) -> None:
        with self._lock:
            self._staff = _copy(staff)

    def get_staff_transactions(self) -> List[StaffTransaction]:
        with self._lock:
            return _copy(self._transactions)

    def save_staff_transactions(self, transactions: List[StaffTransaction]) -> None:
        with self._lock:
            self._transactions = _copy(transactions)

    def get_customers(self) -> List[Customer]:
        with self._lock:
            return _copy(self._customers)

    def save_customers(self, customers: List[Customer]) -> None:
        with self._lock:
            self._customers = _copy(customers)


# Singleton instance
_memory_repository: Optional[InMemoryRepository] = None


def get_memory_repository() -> InMemoryRepository:
    """Get the process-wide seeded in-memory repository."""
    global _memory_repository
    if _memory_repository is None:
        logger.info("Creating seeded in-memory repository")
        _memory_repository = InMemoryRepository(seeded=True)
    return _memory_repository


def reset_memory_repository() -> None:
    global _memory_repository
    _memory_repository = None
