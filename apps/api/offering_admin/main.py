from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from offering_admin.api.errors import register_exception_handlers
from offering_admin.api.routes import router as api_router
from offering_admin.catalog.seed import catalog_seed_helper
from offering_admin.core.config import Settings, get_settings
from offering_admin.core.database import Database
from offering_admin.events import DomainEvent, event_bus
from offering_admin.logging import configure_logging
from offering_admin.middleware.correlation_id import CorrelationIdMiddleware
from offering_admin.middleware.request_logging import RequestLoggingMiddleware
from offering_admin.otel import server_request_hook, setup_otel


configure_logging(get_settings().log_level)
logger = logging.getLogger("offering_admin.lifecycle")

CATALOG_EVENT_TYPES = (
    "catalog.product.created",
    "catalog.product.updated",
    "catalog.product.deleted",
    "catalog.product.cloned",
    "catalog.version.created",
)


def _on_catalog_event(event: DomainEvent) -> None:
    logger.info(
        "catalog_event",
        extra={"event_name": event.event_type, "offering_id": event.envelope.get("offering_id")},
    )


def _open_database(settings: Settings) -> Database:
    database = Database(settings.database_url, echo=settings.database_echo)
    database.init()
    if settings.database_create_all:
        database.create_all()
    if settings.seed_reference_data:
        session = database.session()
        try:
            seeded = catalog_seed_helper.ensure_reference_data(session)
        finally:
            session.close()
        logger.info("reference_data_seeded", extra={"operation": "seed", "seeded": seeded})
    return database


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    database = _open_database(get_settings())
    app.state.database = database
    event_bus.subscribe(CATALOG_EVENT_TYPES, _on_catalog_event)
    logger.info("startup", extra={"operation": "startup"})
    try:
        yield
    finally:
        event_bus.unsubscribe(CATALOG_EVENT_TYPES, _on_catalog_event)
        database.dispose()
        logger.info("shutdown", extra={"operation": "shutdown"})


def create_app() -> FastAPI:
    settings = get_settings()
    application = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
    application.add_middleware(RequestLoggingMiddleware)
    application.add_middleware(CorrelationIdMiddleware)
    register_exception_handlers(application)
    application.include_router(api_router)

    setup_otel(settings)
    if not getattr(application, "_is_instrumented_by_opentelemetry", False):
        FastAPIInstrumentor().instrument_app(application, server_request_hook=server_request_hook)
    return application


app = create_app()
