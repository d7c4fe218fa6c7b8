import subprocess

import pytest
from fastapi.testclient import TestClient

from inventory_service.domain.errors import StoreUnavailableError
from inventory_service.infrastructure.db import Database
from inventory_service import main
from inventory_service.main import app
from shared.core import ServiceHealth, HealthStatus


@pytest.fixture
def unreachable(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'missing' / 'inventory.db'}")
    yield db
    db.dispose()


def test_health_endpoints(client):
    for endpoint in ["/health", "/health/live", "/health/ready"]:
        resp = client.get(endpoint)
        assert resp.status_code in [200, 503]
        assert "status" in resp.json()


def test_readiness_reports_database(client):
    body = client.get('/health/ready').json()
    assert body["checks"]["database:connectivity"]["status"] == "pass"


def test_readiness_fails_without_database(unreachable):
    previous = app.state.database
    app.state.database = unreachable
    try:
        resp = TestClient(app).get('/health/ready')
    finally:
        app.state.database = previous
    assert resp.status_code == 503
    assert resp.json()["checks"]["database:connectivity"]["status"] == "fail"


def test_metrics(client):
    body = client.get('/metrics').json()
    assert body["service"] == "inventory-service"
    assert "uptime_seconds" in body
    assert body["system"]["memory_rss_bytes"] > 0


def test_ping(database, unreachable):
    database.ping()
    with pytest.raises(StoreUnavailableError):
        unreachable.ping()


def test_startup_is_fatal_without_database(unreachable):
    previous = app.state.database
    app.state.database = unreachable
    try:
        with pytest.raises(Exception):
            with TestClient(app):
                pass
    finally:
        app.state.database = previous


def test_startup_initializes_schema(database):
    previous = app.state.database
    app.state.database = database
    try:
        with TestClient(app) as client:
            assert client.get('/warehouses').status_code == 200
    finally:
        app.state.database = previous


def fake_alembic(returncode, calls):
    def run(cmd, **kwargs):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, returncode, "", "migration failed")
    return run


def test_failed_migration_is_fatal(database, monkeypatch):
    calls = []
    monkeypatch.setattr(main.settings, "RUN_MIGRATIONS", True)
    monkeypatch.setattr(main.subprocess, "run", fake_alembic(1, calls))
    previous = app.state.database
    app.state.database = database
    try:
        with pytest.raises(Exception):
            with TestClient(app):
                pass
    finally:
        app.state.database = previous
    assert calls == [["alembic", "upgrade", "head"]]


def test_migrations_replace_create_all(database, monkeypatch):
    calls = []
    monkeypatch.setattr(main.settings, "RUN_MIGRATIONS", True)
    monkeypatch.setattr(main.subprocess, "run", fake_alembic(0, calls))
    monkeypatch.setattr(database, "init_models", lambda: pytest.fail("create_all ran after migrations"))
    previous = app.state.database
    app.state.database = database
    try:
        with TestClient(app) as client:
            assert client.get('/warehouses').status_code == 200
    finally:
        app.state.database = previous
    assert calls == [["alembic", "upgrade", "head"]]


@pytest.mark.parametrize("statuses, expected", [
    ([], HealthStatus.PASS),
    (["pass", "pass"], HealthStatus.PASS),
    (["pass", "warn"], HealthStatus.WARN),
    (["warn", "fail"], HealthStatus.FAIL),
])
def test_overall_status(statuses, expected):
    checks = {f"check:{i}": {"status": s} for i, s in enumerate(statuses)}
    assert ServiceHealth.calculate_overall_status(checks) == expected
