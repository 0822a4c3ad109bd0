"""Base class for data repositories.

This defines the interface every storage backend implements. Each ``save_*``
call replaces the whole collection; callers load, change and save back.
To add a backend:
1. Subclass DataRepository
2. Implement all abstract methods
3. Register it in ``build_repository``
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from restopos.schemas.customer import Customer
from restopos.schemas.menu import MenuItem
from restopos.schemas.order import ArchiveFileSize, Order
from restopos.schemas.staff import StaffMember, StaffTransaction
from restopos.schemas.table import Table


class DataRepository(ABC):
    """Abstract storage for every collection the restaurant keeps."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name (e.g., 'sql', 'csv', 'memory')."""
        pass

    @abstractmethod
    def get_menu_items(self) -> List[MenuItem]:
        pass

    @abstractmethod
    def save_menu_items(self, items: List[MenuItem]) -> None:
        pass

    @abstractmethod
    def get_active_orders(self) -> List[Order]:
        pass

    @abstractmethod
    def get_archived_orders(self) -> List[Order]:
        pass

    @abstractmethod
    def save_all_orders(self, active: List[Order], archived: List[Order]) -> None:
        pass

    @abstractmethod
    def get_tables(self) -> List[Table]:
        pass

    @abstractmethod
    def save_tables(self, tables: List[Table]) -> None:
        pass

    @abstractmethod
    def get_staff(self) -> List[StaffMember]:
        pass

    @abstractmethod
    def save_staff(self, staff: List[StaffMember]) -> None:
        pass

    @abstractmethod
    def get_staff_transactions(self) -> List[StaffTransaction]:
        pass

    @abstractmethod
    def save_staff_transactions(self, transactions: List[StaffTransaction]) -> None:
        pass

    @abstractmethod
    def get_customers(self) -> List[Customer]:
        pass

    @abstractmethod
    def save_customers(self, customers: List[Customer]) -> None:
        pass

    def get_archive_file_size(self) -> Optional[ArchiveFileSize]:
        """Size of the archive file, for backends that keep one."""
        return None
