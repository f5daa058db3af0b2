from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from offering_admin.catalog.errors import IncompleteProductError, NotFoundError, StoreError
from offering_admin.context import get_correlation_id


logger = logging.getLogger("offering_admin.errors")


@dataclass
class ErrorEnvelope:
    code: str
    message: str
    details: Any
    correlation_id: str | None


def error_response(
    request: Request,
    *,
    status_code: int,
    code: str,
    message: str,
    details: Any = None,
) -> JSONResponse:
    correlation_id = get_correlation_id() or getattr(request.state, "correlation_id", None)
    payload = ErrorEnvelope(code=code, message=message, details=details, correlation_id=correlation_id)
    return JSONResponse(status_code=status_code, content=asdict(payload))


def field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    errors: list[dict[str, str]] = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in {"body", "query", "path"}]
        errors.append({"field": ".".join(location) or "body", "message": str(error.get("msg", "invalid value"))})
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return error_response(
            request,
            status_code=status.HTTP_400_BAD_REQUEST,
            code="VALIDATION_ERROR",
            message="Validation error",
            details=field_errors(exc),
        )

    @app.exception_handler(NotFoundError)
    async def _not_found_exception_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return error_response(
            request,
            status_code=status.HTTP_404_NOT_FOUND,
            code="NOT_FOUND",
            message="Product not found",
            details={"resource": exc.resource, "id": exc.identifier},
        )

    @app.exception_handler(IncompleteProductError)
    async def _incomplete_product_exception_handler(request: Request, exc: IncompleteProductError) -> JSONResponse:
        return error_response(
            request,
            status_code=status.HTTP_409_CONFLICT,
            code="INCOMPLETE_PRODUCT",
            message=str(exc),
        )

    @app.exception_handler(StoreError)
    async def _store_exception_handler(request: Request, exc: StoreError) -> JSONResponse:
        logger.error("catalog.store_error", extra={"operation": exc.operation, "error": str(exc.__cause__ or exc)})
        return error_response(
            request,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code="STORE_ERROR",
            message="Catalog store operation failed",
        )
