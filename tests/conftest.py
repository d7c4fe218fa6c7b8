"""
Pytest configuration and shared fixtures.

Tests run against SQLite; the application's database handle is swapped on
``app.state`` so no PostgreSQL server is needed.
"""

import os

# Must be set before the application module reads its settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RUN_MIGRATIONS", "false")

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from inventory_service.infrastructure.db import Database
from inventory_service.domain.models import Warehouse, Product, InventoryRecord
from inventory_service.main import app


@pytest.fixture
def database() -> Generator[Database, None, None]:
    """A fresh in-memory database shared by every session of one test."""
    db = Database(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    db.init_models()
    yield db
    db.dispose()


@pytest.fixture
def file_database(tmp_path) -> Generator[Database, None, None]:
    """A file-backed database where every thread gets its own connection."""
    db = Database(
        f"sqlite:///{tmp_path / 'inventory.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    db.init_models()
    yield db
    db.dispose()


@pytest.fixture
def session(database: Database) -> Generator[Session, None, None]:
    yield from database.session()


@pytest.fixture
def client(database: Database) -> Generator[TestClient, None, None]:
    previous = app.state.database
    app.state.database = database
    try:
        yield TestClient(app)
    finally:
        app.state.database = previous


@pytest.fixture
def stocked(session: Session) -> dict:
    """
    Two warehouses and three products:

    - warehouse 1 stocks products 1 (10 @ 10.00) and 2 (5 @ 4.50, 10% off)
    - warehouse 2 stocks products 1 (3 @ 12.00) and 3 (7 @ 2.00)
    """
    session.add_all([
        Warehouse(id=1, address="1 Dock Road"),
        Warehouse(id=2, address="2 Harbour Lane"),
        Product(id=1, name="Bolt", attributes={"size": "M8"}, weight=0.02),
        Product(id=2, name="Anchor", attributes={}, weight=12.5, barcode="4006381333931"),
        Product(id=3, name="Chain", attributes={"length_m": 5}, weight=7.0),
    ])
    session.flush()
    session.add_all([
        InventoryRecord(id=1, product_id=1, warehouse_id=1, quantity=10, price=10.0, discount=0.0),
        InventoryRecord(id=2, product_id=2, warehouse_id=1, quantity=5, price=4.5, discount=0.1),
        InventoryRecord(id=3, product_id=1, warehouse_id=2, quantity=3, price=12.0, discount=0.0),
        InventoryRecord(id=4, product_id=3, warehouse_id=2, quantity=7, price=2.0, discount=0.0),
    ])
    session.commit()
    return {"warehouses": [1, 2], "products": [1, 2, 3], "records": [1, 2, 3, 4]}


@pytest.fixture
def read_stock(database: Database):
    """Returns a callable giving current stock keyed by (warehouse_id, product_id)."""
    def read() -> dict:
        with database.SessionLocal() as fresh:
            return {
                (record.warehouse_id, record.product_id): record.quantity
                for record in fresh.query(InventoryRecord).all()
            }
    return read
