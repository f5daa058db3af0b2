from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from offering_admin.catalog.seed import catalog_seed_helper
from offering_admin.core.config import get_settings
from offering_admin.core.database import Base, get_db
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
def configure_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    monkeypatch.setenv("DATABASE_URL", "sqlite+pysqlite:///:memory:")
    monkeypatch.setenv("METRICS_ENABLED", "true")
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


def test_metrics_expose_http_and_catalog_write_series(client: TestClient) -> None:
    created = client.post(
        "/api/products",
        json={"name": "Tax Update", "sku": "TAX-26", "brand_id": 1, "version_name": "v1.0", "base_price": "59"},
    )
    assert created.status_code == 201
    assert client.get(f"/api/products/{created.json()['offering_id']}").status_code == 200

    response = client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    body = response.text
    assert "http_requests_total" in body
    assert 'path="/api/products/{id}"' in body
    assert 'catalog_writes_total{operation="create_product",outcome="committed"}' in body
    assert "catalog_write_duration_seconds" in body


def test_rejected_writes_are_counted(client: TestClient) -> None:
    response = client.delete("/api/products/00000000-0000-4000-8000-000000000000")
    assert response.status_code == 404

    body = client.get("/metrics").text
    assert 'catalog_writes_total{operation="delete_product",outcome="rejected"}' in body


def test_metrics_disabled_returns_404(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("METRICS_ENABLED", "false")
    get_settings.cache_clear()

    response = client.get("/metrics")

    assert response.status_code == 404
