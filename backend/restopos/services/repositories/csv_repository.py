"""CSV file repository.

One CSV file per collection in a data directory. Order lines are stored as a
JSON document in the ``items`` column, timestamps as ISO-8601 strings.

The archive file is rotated to ``orders_archived_<timestamp>.csv`` once it
grows past the configured byte limit; rotated files stay part of the archive
and are never rewritten.
"""

import csv
import glob
import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError as PydanticValidationError

from restopos.core.exceptions import ExternalServiceError
from restopos.schemas.config import DEFAULT_ARCHIVE_FILE_LIMIT
from restopos.schemas.customer import Customer
from restopos.schemas.menu import MenuItem
from restopos.schemas.order import ArchiveFileSize, Order
from restopos.schemas.staff import StaffMember, StaffTransaction
from restopos.schemas.table import Table
from restopos.services.repositories.base import DataRepository

logger = logging.getLogger(__name__)

MENU_FILE = "menu.csv"
ACTIVE_ORDERS_FILE = "orders_active.csv"
ARCHIVED_ORDERS_FILE = "orders_archived.csv"
ROTATED_ARCHIVE_PATTERN = "orders_archived_*.csv"
TABLES_FILE = "tables.csv"
STAFF_FILE = "staff.csv"
STAFF_TRANSACTIONS_FILE = "staff_transactions.csv"
CUSTOMERS_FILE = "customers.csv"

ORDER_COLUMNS = [
    "id", "table_number", "items", "status", "subtotal", "discount", "total",
    "created_at", "customer_id", "customer_name", "points_earned",
    "points_redeemed", "redeemed_value", "version",
]


def _cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


class CsvRepository(DataRepository):
    """Stores collections as CSV files under ``data_dir``."""

    def __init__(self, data_dir: str, archive_file_limit: int = DEFAULT_ARCHIVE_FILE_LIMIT):
        self.data_dir = data_dir
        self.archive_file_limit = archive_file_limit
        os.makedirs(self.data_dir, exist_ok=True)

    @property
    def name(self) -> str:
        return "csv"

    def _path(self, file_name: str) -> str:
        return os.path.join(self.data_dir, file_name)

    # ------------------------------------------------------------------
    # File helpers
    # ------------------------------------------------------------------

    def _read_rows(self, path: str) -> List[Dict[str, str]]:
        try:
            with open(path, newline="", encoding="utf-8") as f:
                return [row for row in csv.DictReader(f) if any(row.values())]
        except FileNotFoundError:
            logger.warning(f"CSV file not found: {os.path.basename(path)}. Returning empty list.")
            return []
        except OSError as e:
            logger.error(f"Error reading CSV file {path}: {e}")
            raise ExternalServiceError("csv", f"Could not read {os.path.basename(path)}")

    def _write_rows(self, path: str, columns: List[str], rows: List[Dict[str, str]]) -> None:
        """Write to a temp file in the same directory, then swap it in."""
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(dir=self.data_dir, suffix=".tmp")
            with os.fdopen(fd, "w", newline="", encoding="utf-8") as f:
                writer = csv.DictWriter(f, fieldnames=columns)
                writer.writeheader()
                writer.writerows(rows)
            os.replace(tmp_path, path)
            tmp_path = None
        except OSError as e:
            logger.error(f"Error writing CSV file {path}: {e}")
            raise ExternalServiceError("csv", f"Could not write {os.path.basename(path)}")
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)

    def _load(self, file_name: str, schema: Type[BaseModel]) -> list:
        return self._parse(self._read_rows(self._path(file_name)), schema, file_name)

    def _parse(self, rows: List[Dict[str, str]], schema: Type[BaseModel], source: str) -> list:
        records = []
        for row in rows:
            # Empty cells fall back to the field default
            data = {key: value for key, value in row.items() if key and value != ""}
            try:
                records.append(schema.model_validate(data))
            except PydanticValidationError as e:
                logger.warning(f"Skipping invalid row in {source}: {e.error_count()} errors")
        return records

    def _save(self, file_name: str, schema: Type[BaseModel], records: list) -> None:
        columns = list(schema.model_fields)
        rows = [
            {column: _cell(getattr(record, column)) for column in columns}
            for record in records
        ]
        self._write_rows(self._path(file_name), columns, rows)

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    def _order_rows(self, path: str) -> List[Dict[str, str]]:
        rows = self._read_rows(path)
        for row in rows:
            try:
                row["items"] = json.loads(row.get("items") or "[]")
            except json.JSONDecodeError:
                logger.error(f"Failed to parse items for order {row.get('id')}")
                row["items"] = []
        return rows

    def _load_orders(self, path: str) -> List[Order]:
        return self._parse(self._order_rows(path), Order, os.path.basename(path))

    def _save_orders(self, path: str, orders: List[Order]) -> None:
        rows = []
        for order in orders:
            row = {column: _cell(getattr(order, column)) for column in ORDER_COLUMNS}
            row["items"] = json.dumps(
                [line.model_dump(mode="json") for line in order.items], ensure_ascii=False
            )
            rows.append(row)
        self._write_rows(path, ORDER_COLUMNS, rows)

    def _rotated_archives(self) -> List[str]:
        return sorted(glob.glob(self._path(ROTATED_ARCHIVE_PATTERN)))

    def get_active_orders(self) -> List[Order]:
        return self._load_orders(self._path(ACTIVE_ORDERS_FILE))

    def get_archived_orders(self) -> List[Order]:
        orders: List[Order] = []
        for path in self._rotated_archives():
            orders.extend(self._load_orders(path))
        orders.extend(self._load_orders(self._path(ARCHIVED_ORDERS_FILE)))
        return orders

    def save_all_orders(self, active: List[Order], archived: List[Order]) -> None:
        rotated_ids = set()
        for path in self._rotated_archives():
            rotated_ids.update(row.get("id") for row in self._read_rows(path))

        self._save_orders(self._path(ACTIVE_ORDERS_FILE), active)
        self._save_orders(
            self._path(ARCHIVED_ORDERS_FILE),
            [order for order in archived if order.id not in rotated_ids],
        )
        self._rotate_archive_if_needed()

    def _rotate_archive_if_needed(self) -> Optional[str]:
        path = self._path(ARCHIVED_ORDERS_FILE)
        if not os.path.exists(path) or os.path.getsize(path) <= self.archive_file_limit:
            return None
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%f")
        rotated = self._path(f"orders_archived_{stamp}.csv")
        try:
            os.replace(path, rotated)
        except OSError as e:
            logger.error(f"Failed to rotate archive file: {e}")
            raise ExternalServiceError("csv", "Could not rotate the order archive")
        self._save_orders(path, [])
        logger.info(f"Archive file exceeded {self.archive_file_limit} bytes, rotated to {os.path.basename(rotated)}")
        return rotated

    def get_archive_file_size(self) -> Optional[ArchiveFileSize]:
        path = self._path(ARCHIVED_ORDERS_FILE)
        size = os.path.getsize(path) if os.path.exists(path) else 0
        return ArchiveFileSize(size=size, limit=self.archive_file_limit)

    # ------------------------------------------------------------------
    # Other collections
    # ------------------------------------------------------------------

    def get_menu_items(self) -> List[MenuItem]:
        return self._load(MENU_FILE, MenuItem)

    def save_menu_items(self, items: List[MenuItem]) -> None:
        self._save(MENU_FILE, MenuItem, items)

    def get_tables(self) -> List[Table]:
        return self._load(TABLES_FILE, Table)

    def save_tables(self, tables: List[Table]) -> None:
        self._save(TABLES_FILE, Table, tables)

    def get_staff(self) -> List[StaffMember]:
        return self._load(STAFF_FILE, StaffMember)

    def save_staff(self, staff: List[StaffMember]) -> None:
        self._save(STAFF_FILE, StaffMember, staff)

    def get_staff_transactions(self) -> List[StaffTransaction]:
        return self._load(STAFF_TRANSACTIONS_FILE, StaffTransaction)

    def save_staff_transactions(self, transactions: List[StaffTransaction]) -> None:
        self._save(STAFF_TRANSACTIONS_FILE, StaffTransaction, transactions)

    def get_customers(self) -> List[Customer]:
        return self._load(CUSTOMERS_FILE, Customer)

    def save_customers(self, customers: List[Customer]) -> None:
        self._save(CUSTOMERS_FILE, Customer, customers)
