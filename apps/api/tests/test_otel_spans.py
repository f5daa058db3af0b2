from __future__ import annotations

import uuid
from collections.abc import Generator

import pytest
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from offering_admin.catalog.errors import NotFoundError
from offering_admin.catalog.schemas import ProductFormData
from offering_admin.catalog.seed import catalog_seed_helper
from offering_admin.catalog.service import CatalogService
from offering_admin.core.database import Base
from offering_admin.otel import setup_inmemory_otel


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


@pytest.fixture()
def span_exporter() -> InMemorySpanExporter:
    exporter = setup_inmemory_otel("offering-admin")
    exporter.clear()
    return exporter


def _payload() -> ProductFormData:
    return ProductFormData(
        name="Estate Planning",
        sku="EST-PLAN",
        brand_id=3,
        version_name="v1.0",
        base_price="89.00",
    )


def test_clone_emits_nested_write_spans(db_session: Session, span_exporter: InMemorySpanExporter) -> None:
    service = CatalogService()
    source = service.create_product(db_session, _payload())
    span_exporter.clear()

    clone = service.clone_product(db_session, source.offering_id)

    spans = {span.name: span for span in span_exporter.get_finished_spans()}
    assert {"catalog.clone_product", "catalog.create_product"} <= set(spans)
    clone_span = spans["catalog.clone_product"]
    create_span = spans["catalog.create_product"]
    assert create_span.parent is not None
    assert create_span.parent.span_id == clone_span.context.span_id
    assert clone_span.attributes["source_offering_id"] == str(source.offering_id)
    assert clone_span.attributes["offering_id"] == str(clone.offering_id)


def test_rejected_write_records_exception_on_span(db_session: Session, span_exporter: InMemorySpanExporter) -> None:
    with pytest.raises(NotFoundError):
        CatalogService().delete_product(db_session, uuid.uuid4())

    spans = [span for span in span_exporter.get_finished_spans() if span.name == "catalog.delete_product"]
    assert len(spans) == 1
    assert any(event.name == "exception" for event in spans[0].events)
