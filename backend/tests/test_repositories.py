"""Tests for the storage backends."""

import json
import os
from decimal import Decimal

import pytest
from sqlalchemy import text

from restopos.core.exceptions import ExternalServiceError
from restopos.db.session import build_engine
from restopos.schemas.order import OrderStatus
from restopos.schemas.staff import PaymentMode, Shift, StaffMember, StaffRole, StaffTransaction, TransactionType
from restopos.schemas.table import Table, TableStatus
from restopos.services.order_builder import OrderBuilder
from restopos.services.order_lifecycle import OrderLifecycleManager
from restopos.services.repositories import build_repository, csv_repository
from restopos.services.repositories.csv_repository import (
    ACTIVE_ORDERS_FILE,
    ARCHIVED_ORDERS_FILE,
    CsvRepository,
)
from restopos.services.repositories.memory_repository import InMemoryRepository
from restopos.services.repositories.sql_repository import SqlRepository
from restopos.schemas.config import AppConfig


def _orders(menu, count=2):
    manager = OrderLifecycleManager()
    for table in range(1, count + 1):
        builder = OrderBuilder()
        builder.add_item(menu[0])
        builder.add_item(menu[1])
        manager.add(builder.submit(table_number=table))
    return manager


def _exercise(repo, menu, customer):
    """Common save/load checks every backend must pass."""
    repo.save_menu_items(menu)
    assert [item.id for item in repo.get_menu_items()] == ["m1", "m2", "m3"]
    assert repo.get_menu_items()[0].price == Decimal("5.99")

    manager = _orders(menu)
    first = manager.active[-1]
    manager.apply_discount(first.id, 10)
    manager.archive(manager.active[0].id)
    repo.save_all_orders(manager.active, manager.archived)

    active = repo.get_active_orders()
    archived = repo.get_archived_orders()
    assert [o.id for o in active] == [o.id for o in manager.active]
    assert [o.id for o in archived] == [o.id for o in manager.archived]
    assert active[0].total == Decimal("19.782")
    assert active[0].version == 2
    assert archived[0].status == OrderStatus.ARCHIVED
    assert archived[0].items[1].menu_item.name == "Butter Chicken"

    tables = [Table(id=1, status=TableStatus.OCCUPIED, order_id=first.id), Table(id=2, capacity=6)]
    repo.save_tables(tables)
    loaded = repo.get_tables()
    assert loaded[0].order_id == first.id
    assert loaded[1].capacity == 6
    assert loaded[1].status == TableStatus.AVAILABLE

    repo.save_customers([customer])
    assert repo.get_customers()[0].loyalty_points == 150

    member = StaffMember(id="STAFF01", name="Alice", role=StaffRole.MANAGER, shift=Shift.MORNING,
                         salary=Decimal("50000"))
    repo.save_staff([member])
    assert repo.get_staff()[0].role == StaffRole.MANAGER

    tx = StaffTransaction(id="TXN-1", staff_id="STAFF01", amount=Decimal("500"),
                          type=TransactionType.ADVANCE, payment_mode=PaymentMode.ONLINE)
    repo.save_staff_transactions([tx])
    assert repo.get_staff_transactions()[0].type == TransactionType.ADVANCE


class TestInMemoryRepository:
    def test_round_trip(self, menu, customer):
        _exercise(InMemoryRepository(), menu, customer)

    def test_returned_lists_are_copies(self, menu):
        repo = InMemoryRepository()
        repo.save_menu_items(menu)
        items = repo.get_menu_items()
        items[0].price = Decimal("1")
        assert repo.get_menu_items()[0].price == Decimal("5.99")

    def test_seeded_demo_data(self):
        repo = InMemoryRepository(seeded=True)
        assert len(repo.get_menu_items()) == 9
        assert [o.id for o in repo.get_active_orders()] == ["ORD003", "ORD002", "ORD001"]
        assert len(repo.get_tables()) == 12

    def test_no_archive_file(self):
        assert InMemoryRepository().get_archive_file_size() is None


class TestSqlRepository:
    def test_round_trip(self, db_session, menu, customer):
        _exercise(SqlRepository(db_session), menu, customer)

    def test_empty_database(self, db_session):
        repo = SqlRepository(db_session)
        assert repo.get_active_orders() == []
        assert repo.get_menu_items() == []


class TestCsvRepository:
    def test_round_trip(self, tmp_path, menu, customer):
        _exercise(CsvRepository(str(tmp_path)), menu, customer)

    def test_missing_files_read_as_empty(self, tmp_path):
        repo = CsvRepository(str(tmp_path))
        assert repo.get_active_orders() == []
        assert repo.get_customers() == []

    def test_items_stored_as_json(self, tmp_path, menu):
        repo = CsvRepository(str(tmp_path))
        manager = _orders(menu, count=1)
        repo.save_all_orders(manager.active, [])
        with open(tmp_path / ACTIVE_ORDERS_FILE, encoding="utf-8") as f:
            content = f.read()
        assert "Samosa" in content
        row_items = content.splitlines()[1]
        assert "menu_item" in row_items

    def test_bad_items_cell_reads_as_no_items(self, tmp_path):
        path = tmp_path / ACTIVE_ORDERS_FILE
        path.write_text("id,table_number,items,status\nORD-1,3,not-json,received\n", encoding="utf-8")
        orders = CsvRepository(str(tmp_path)).get_active_orders()
        assert orders[0].id == "ORD-1"
        assert orders[0].items == []
        assert orders[0].total == Decimal("0")

    def test_failed_write_leaves_no_temp_file(self, tmp_path, monkeypatch):
        repo = CsvRepository(str(tmp_path))

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(csv_repository.os, "replace", fail_replace)
        with pytest.raises(ExternalServiceError):
            repo.save_tables([Table(id=1, capacity=4)])
        assert [name for name in os.listdir(tmp_path) if name.endswith(".tmp")] == []

    def test_archive_rotation(self, tmp_path, menu):
        repo = CsvRepository(str(tmp_path), archive_file_limit=200)
        manager = _orders(menu, count=3)
        for order in manager.active:
            manager.archive(order.id)
        repo.save_all_orders(manager.active, manager.archived)

        rotated = [name for name in os.listdir(tmp_path) if name.startswith("orders_archived_")]
        assert len(rotated) == 1
        assert os.path.getsize(tmp_path / ARCHIVED_ORDERS_FILE) < 200

        # Rotated orders are still part of the archive and are not written twice
        archived = repo.get_archived_orders()
        assert sorted(o.id for o in archived) == sorted(o.id for o in manager.archived)
        repo.save_all_orders([], archived)
        assert len(repo.get_archived_orders()) == 3

    def test_archive_file_size(self, tmp_path, menu):
        repo = CsvRepository(str(tmp_path), archive_file_limit=1024 * 1024)
        assert repo.get_archive_file_size().size == 0
        manager = _orders(menu, count=1)
        manager.archive(manager.active[0].id)
        repo.save_all_orders(manager.active, manager.archived)
        size = repo.get_archive_file_size()
        assert size.size > 0
        assert size.limit == 1024 * 1024


class TestBuildRepository:
    def test_selects_backend_from_config(self, db_session, tmp_path, monkeypatch):
        from restopos.core.config import settings

        monkeypatch.setattr(settings, "csv_data_dir", str(tmp_path))
        assert build_repository(db_session, AppConfig(data_source="sql")).name == "sql"
        assert build_repository(db_session, AppConfig(data_source="csv")).name == "csv"
        assert build_repository(db_session, AppConfig(data_source="memory")).name == "memory"


class TestEngine:
    def test_memory_database_is_shared_between_sessions(self):
        engine = build_engine("sqlite:///:memory:")
        with engine.begin() as conn:
            conn.execute(text("CREATE TABLE scratch_rows (id INTEGER)"))
        with engine.connect() as conn:
            assert conn.execute(text("SELECT count(*) FROM scratch_rows")).scalar() == 0
        engine.dispose()

    def test_file_database_uses_wal(self, tmp_path):
        engine = build_engine(f"sqlite:///{tmp_path / 'pos.db'}")
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA journal_mode")).scalar() == "wal"
            assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1
        engine.dispose()
