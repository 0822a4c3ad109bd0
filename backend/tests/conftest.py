"""Pytest configuration and fixtures."""

import os

# Settings are read at import time; keep tests off the on-disk database
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("DATA_SOURCE", "sql")

import pytest
from decimal import Decimal
from typing import Generator, List

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from restopos.core.rbac import UserRole
from restopos.core.security import create_access_token
from restopos.db.base import Base
from restopos.db.session import get_db
from restopos.main import app
# Import all models to ensure they're registered with Base.metadata
from restopos.models import *
from restopos.schemas.config import AppConfig
from restopos.schemas.customer import Customer
from restopos.schemas.menu import MenuCategory, MenuItem
from restopos.services.repositories.memory_repository import (
    InMemoryRepository,
    reset_memory_repository,
)

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    # Disable rate limiting during tests to avoid flaky failures
    from restopos.core.rate_limit import limiter as global_limiter
    global_limiter.enabled = False
    reset_memory_repository()
    # Don't raise server exceptions so we can test error status codes
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    global_limiter.enabled = True
    reset_memory_repository()
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> dict:
    """Authorization headers carrying a super-admin token."""
    token = create_access_token({"sub": "admin", "role": UserRole.SUPER_ADMIN.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig()


@pytest.fixture
def menu() -> List[MenuItem]:
    """A small menu with prices that exercise decimal rounding."""
    return [
        MenuItem(id="m1", name="Samosa", price=Decimal("5.99"), category=MenuCategory.APPETIZERS),
        MenuItem(id="m2", name="Butter Chicken", price=Decimal("15.99"), category=MenuCategory.MAIN_COURSES),
        MenuItem(id="m3", name="Masala Chai", price=Decimal("2.50"), category=MenuCategory.BEVERAGES),
    ]


@pytest.fixture
def customer() -> Customer:
    return Customer(id="CUST01", name="John Doe", email="john@example.com", phone="+91 98765-43210",
                    loyalty_points=150)


@pytest.fixture
def memory_repo() -> InMemoryRepository:
    """An empty in-memory repository."""
    return InMemoryRepository()


@pytest.fixture
def seeded_menu(client: TestClient) -> List[dict]:
    """Menu items created through the API."""
    created = []
    for payload in (
        {"id": "m1", "name": "Samosa", "price": "5.99", "category": "Appetizers"},
        {"id": "m2", "name": "Butter Chicken", "price": "15.99", "category": "Main Courses"},
        {"id": "m3", "name": "Masala Chai", "price": "2.50", "category": "Beverages"},
    ):
        response = client.post("/api/v1/menu/", json=payload)
        assert response.status_code == 201
        created.append(response.json())
    return created


@pytest.fixture
def seeded_tables(client: TestClient) -> List[dict]:
    """Four tables created through the API."""
    tables = []
    for _ in range(4):
        response = client.post("/api/v1/tables/", json={"capacity": 4})
        assert response.status_code == 201
        tables.append(response.json())
    return tables
