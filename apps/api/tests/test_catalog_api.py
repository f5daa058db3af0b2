from __future__ import annotations

import uuid
from collections.abc import Generator
from typing import Any
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from offering_admin import events
from offering_admin.catalog.api import get_catalog_service
from offering_admin.catalog.errors import StoreError
from offering_admin.catalog.models import Offering
from offering_admin.catalog.seed import catalog_seed_helper
from offering_admin.catalog.service import CatalogService
from offering_admin.core.config import get_settings
from offering_admin.core.database import Base, enable_sqlite_foreign_keys, get_db
from offering_admin.main import app


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
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
    events.published_events.clear()
    yield
    get_settings.cache_clear()
    events.published_events.clear()


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _product_body(**overrides: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "name": "Life Insurance Pre-Licensing",
        "sku": "LIFE-PRE",
        "brand_id": 2,
        "version_name": "v1.0",
        "base_price": "149.00",
        "discount_percentage": "10",
        "feature_ids": [1, 3],
        "fulfillment_platform_ids": [1, 2, 3],
        "content_format": "Video",
        "language_ids": [1],
    }
    body.update(overrides)
    return body


def _create(client: TestClient, **overrides: Any) -> dict[str, Any]:
    response = client.post("/api/products", json=_product_body(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


def test_create_then_read_product(client: TestClient) -> None:
    created = _create(client)

    assert created["sku"] == "LIFE-PRE"
    assert created["product_status"] == "active"
    assert created["ecosystem_id"] == 3

    response = client.get(f"/api/products/{created['offering_id']}")
    assert response.status_code == 200
    product = response.json()
    assert product["name"] == "Life Insurance Pre-Licensing"
    detail = product["sku_versions"][0]["sku_version_detail"]
    assert detail["sku_version_pricing"][0]["base_price"] == "149.00"
    assert detail["sku_version_pricing"][0]["discount_percentage"] == "10.00"
    assert len(detail["sku_version_features"]) == 2
    assert len(product["sku_versions"][0]["sku_version_fulfillment_platforms"]) == 3
    assert product["offering_brands"][0]["brand"]["name"] == "Kaplan"


def test_list_products_with_filters(client: TestClient) -> None:
    _create(client)
    _create(client, name="CPA Review", sku="CPA-1", brand_id=1)

    everything = client.get("/api/products")
    assert everything.status_code == 200
    assert [item["sku"] for item in everything.json()] == ["CPA-1", "LIFE-PRE"]

    by_search = client.get("/api/products", params={"search": "life"})
    assert [item["sku"] for item in by_search.json()] == ["LIFE-PRE"]

    by_brand = client.get("/api/products", params={"brand_id": 1})
    assert [item["sku"] for item in by_brand.json()] == ["CPA-1"]

    by_ecosystem = client.get("/api/products", params={"ecosystem_id": 3})
    assert [item["sku"] for item in by_ecosystem.json()] == ["LIFE-PRE"]


def test_create_rejects_invalid_payload_with_field_list(client: TestClient) -> None:
    body = _product_body(base_price="-1", discount_percentage="150")
    body.pop("name")

    response = client.post("/api/products", json=body)

    assert response.status_code == 400
    payload = response.json()
    assert payload["code"] == "VALIDATION_ERROR"
    fields = {item["field"] for item in payload["details"]}
    assert {"name", "base_price", "discount_percentage"} <= fields
    assert all(item["message"] for item in payload["details"])
    assert payload["correlation_id"]


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("sequence_order", 256),
        ("sequence_order", -1),
        ("credit_hours", -1),
        ("recognition_period_months", -3),
        ("msrp", "-0.01"),
        ("cogs", "-5"),
        ("delivery_cost", "-1"),
        ("subscription_price", "-1"),
        ("promotional_price", "-1"),
        ("additional_certificate_price", "-1"),
        ("discount_percentage", "-1"),
        ("discount_percentage", "100.01"),
        ("product_status", "archived"),
        ("brand_id", 0),
        ("ecosystem_id", 0),
    ],
)
def test_create_rejects_out_of_range_fields(client: TestClient, field: str, value: Any) -> None:
    response = client.post("/api/products", json=_product_body(**{field: value}))

    assert response.status_code == 400
    payload = response.json()
    assert payload["code"] == "VALIDATION_ERROR"
    assert [item["field"] for item in payload["details"]] == [field]
    assert client.get("/api/products").json() == []


def test_invalid_payload_never_reaches_the_store() -> None:
    store = MagicMock(spec=Session)
    service = MagicMock(spec=CatalogService)

    def override_get_db() -> Generator[Session, None, None]:
        yield store

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_catalog_service] = lambda: service
    try:
        with TestClient(app) as test_client:
            response = test_client.post("/api/products", json=_product_body(base_price=-1))
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 400
    assert [item["field"] for item in response.json()["details"]] == ["base_price"]
    assert store.mock_calls == []
    service.create_product.assert_not_called()


def test_get_unknown_product_returns_404(client: TestClient) -> None:
    response = client.get(f"/api/products/{uuid.uuid4()}", headers={"X-Correlation-Id": "missing-1"})

    assert response.status_code == 404
    payload = response.json()
    assert payload["code"] == "NOT_FOUND"
    assert payload["correlation_id"] == "missing-1"


def test_malformed_identifier_is_a_validation_error(client: TestClient) -> None:
    response = client.get("/api/products/not-a-uuid")

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "offering_id"


def test_update_product(client: TestClient) -> None:
    created = _create(client)

    response = client.put(
        f"/api/products/{created['offering_id']}",
        json=_product_body(name="Life Licensing", base_price="159.00", product_status="inactive"),
    )

    assert response.status_code == 200
    product = response.json()
    assert product["name"] == "Life Licensing"
    assert product["product_status"] == "inactive"
    assert product["active"] is False
    detail = product["sku_versions"][0]["sku_version_detail"]
    assert detail["sku_version_pricing"][0]["base_price"] == "159.00"


def test_update_unknown_product_returns_404(client: TestClient) -> None:
    response = client.put(f"/api/products/{uuid.uuid4()}", json=_product_body())

    assert response.status_code == 404


def test_delete_product(client: TestClient) -> None:
    created = _create(client)

    response = client.delete(f"/api/products/{created['offering_id']}")
    assert response.status_code == 204
    assert response.content == b""

    assert client.get(f"/api/products/{created['offering_id']}").status_code == 404
    assert client.delete(f"/api/products/{created['offering_id']}").status_code == 404
    assert client.get("/api/products").json() == []


def test_clone_product(client: TestClient) -> None:
    created = _create(client)

    response = client.post(f"/api/products/{created['offering_id']}/clone")

    assert response.status_code == 201
    clone = response.json()
    assert clone["offering_id"] != created["offering_id"]
    assert clone["name"] == "Life Insurance Pre-Licensing (Copy)"
    assert clone["sku"] == "LIFE-PRE-COPY"
    assert clone["product_status"] == "inactive"
    assert clone["ecosystem_id"] == created["ecosystem_id"]
    version = clone["sku_versions"][0]
    assert version["sku_version_fulfillment_platforms"] == []
    assert version["sku_version_detail"]["sku_version_features"] == []
    assert version["sku_version_detail"]["sku_version_pricing"][0]["base_price"] == "149.00"
    assert len(client.get("/api/products").json()) == 2


def test_clone_unknown_product_returns_404(client: TestClient) -> None:
    assert client.post(f"/api/products/{uuid.uuid4()}/clone").status_code == 404


def test_clone_without_brand_returns_409(client: TestClient, db_session: Session) -> None:
    offering = Offering(name="Orphan", sku="ORPHAN-1")
    db_session.add(offering)
    db_session.commit()

    response = client.post(f"/api/products/{offering.offering_id}/clone")

    assert response.status_code == 409
    assert response.json()["code"] == "INCOMPLETE_PRODUCT"


def test_add_version(client: TestClient) -> None:
    created = _create(client)

    response = client.post(
        f"/api/products/{created['offering_id']}/versions",
        json={"version_name": "v2.0", "base_price": "169.00", "feature_ids": [2]},
    )

    assert response.status_code == 201
    versions = response.json()["sku_versions"]
    assert [version["version_name"] for version in versions] == ["v1.0", "v2.0"]
    assert versions[1]["sku_version_detail"]["sku_version_features"][0]["feature_id"] == 2


def test_add_version_rejects_negative_price(client: TestClient) -> None:
    created = _create(client)

    response = client.post(
        f"/api/products/{created['offering_id']}/versions",
        json={"version_name": "v2.0", "base_price": "-5"},
    )

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "base_price"


def test_store_failure_returns_500(client: TestClient) -> None:
    service = MagicMock(spec=CatalogService)
    service.list_products.side_effect = StoreError("list_products")
    app.dependency_overrides[get_catalog_service] = lambda: service

    response = client.get("/api/products")

    assert response.status_code == 500
    payload = response.json()
    assert payload["code"] == "STORE_ERROR"
    assert payload["details"] is None


@pytest.mark.parametrize(
    ("path", "key", "expected"),
    [
        ("/api/brands", "name", ["Becker", "Kaplan", "Dalton"]),
        ("/api/ecosystems", "ecosystem_name", ["Accounting", "Financial Planning", "Insurance"]),
        ("/api/fulfillment-platforms", "name", ["Learning Management System", "Print Fulfillment", "Mobile App"]),
        ("/api/product-features", "feature_name", ["Practice Exams", "Live Instruction", "Pass Guarantee"]),
        ("/api/languages", "language_abbr", ["EN", "ES", "FR"]),
    ],
)
def test_lookup_endpoints(client: TestClient, path: str, key: str, expected: list[str]) -> None:
    response = client.get(path)

    assert response.status_code == 200
    assert [row[key] for row in response.json()] == expected
