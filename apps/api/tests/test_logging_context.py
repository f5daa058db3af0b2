from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from offering_admin.catalog.seed import catalog_seed_helper
from offering_admin.context import reset_correlation_id, set_correlation_id
from offering_admin.core.config import get_settings
from offering_admin.core.database import Base, get_db
from offering_admin.logging import CorrelationIdFilter, JsonLogFormatter
from offering_admin.main import app


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    catalog_seed_helper.ensure_reference_data(session)
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def setup_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    monkeypatch.setenv("DATABASE_URL", "sqlite+pysqlite:///:memory:")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_logs_include_correlation_id_for_http(client: TestClient, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)

    response = client.get(f"/api/products/{uuid.uuid4()}", headers={"X-Correlation-Id": "abc-123"})
    assert response.status_code == 404

    records = [
        record
        for record in caplog.records
        if record.name == "offering_admin.request" and record.getMessage() == "http.request"
    ]
    assert records
    assert any(
        getattr(record, "correlation_id", None) == "abc-123"
        and getattr(record, "method", None) == "GET"
        and getattr(record, "path", None) == "/api/products/{id}"
        and getattr(record, "status_code", None) == 404
        and isinstance(getattr(record, "duration_ms", None), float)
        for record in records
    )


def test_catalog_writes_are_logged_with_offering_id(client: TestClient, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)

    response = client.post(
        "/api/products",
        json={"name": "Audit", "sku": "AUD-1", "brand_id": 1, "version_name": "v1.0", "base_price": "10"},
        headers={"X-Correlation-Id": "write-1"},
    )
    assert response.status_code == 201

    records = [
        record
        for record in caplog.records
        if record.name == "offering_admin.catalog" and record.getMessage() == "catalog.product.created"
    ]
    assert len(records) == 1
    assert getattr(records[0], "offering_id", None) == response.json()["offering_id"]
    assert getattr(records[0], "correlation_id", None) == "write-1"


def test_json_formatter_keeps_known_fields_only() -> None:
    record = logging.makeLogRecord(
        {
            "name": "offering_admin.catalog",
            "levelname": "INFO",
            "levelno": logging.INFO,
            "msg": "catalog.product.deleted",
            "offering_id": "abc",
            "operation": "delete_product",
            "password": "secret",
            "error": "e" * 900,
        }
    )
    token = set_correlation_id("fmt-1")
    try:
        CorrelationIdFilter().filter(record)
    finally:
        reset_correlation_id(token)

    payload = json.loads(JsonLogFormatter().format(record))

    assert payload["msg"] == "catalog.product.deleted"
    assert payload["level"] == "INFO"
    assert payload["correlation_id"] == "fmt-1"
    assert payload["fields"]["offering_id"] == "abc"
    assert payload["fields"]["operation"] == "delete_product"
    assert len(payload["fields"]["error"]) == 500
    assert "password" not in payload["fields"]
