from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from opentelemetry import trace
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from offering_admin import events
from offering_admin.catalog.errors import CatalogError, IncompleteProductError, NotFoundError, StoreError
from offering_admin.catalog.models import (
    BrandLookup,
    ContentLanguage,
    Ecosystem,
    FulfillmentPlatform,
    LanguageLookup,
    Offering,
    OfferingBrand,
    OfferingProduct,
    ProductFeature,
    SkuVersion,
    SkuVersionContent,
    SkuVersionDetail,
    SkuVersionFeature,
    SkuVersionFulfillmentPlatform,
    SkuVersionPricing,
)
from offering_admin.catalog.repository import OfferingRepository
from offering_admin.catalog.schemas import (
    BrandRead,
    EcosystemRead,
    FulfillmentPlatformRead,
    LanguageRead,
    ProductFeatureRead,
    ProductFormData,
    ProductWithRelations,
    VersionFormData,
)
from offering_admin.metrics import observe_catalog_write


logger = logging.getLogger("offering_admin.catalog")
tracer = trace.get_tracer("offering_admin.catalog")

DEFAULT_VERSION_NAME = "v1.0"
NAME_MAX_LENGTH = 128
SKU_MAX_LENGTH = 255

_DETAIL_FIELDS = {
    "version_name",
    "description_short",
    "description_long",
    "qualifying_education",
    "continuing_education",
    "not_for_individual_sale",
    "credit_hours",
    "access_period",
    "platform",
    "hybrid_delivery",
    "certifications_awarded",
    "owner",
}
_PRICING_FIELDS = {
    "base_price",
    "msrp",
    "cogs",
    "delivery_cost",
    "subscription_price",
    "promotional_price",
    "discount_percentage",
    "recognition_period_months",
    "additional_certificate_price",
    "revenue_allocation_method",
    "discount_eligibility",
    "discount_type",
    "recognition_start_trigger",
}
_CONTENT_FIELDS = {
    "content_format",
    "mobile_compatible",
    "content_length",
    "instructor_information",
}


@dataclass(slots=True)
class CatalogService:
    offering_repository: OfferingRepository = OfferingRepository()
    clone_name_suffix: str = " (Copy)"
    clone_sku_suffix: str = "-COPY"

    # Reads

    def list_products(
        self,
        session: Session,
        *,
        search: str | None = None,
        ecosystem_id: int | None = None,
        brand_id: int | None = None,
    ) -> list[ProductWithRelations]:
        stmt = self.offering_repository.apply_filters(
            self.offering_repository.aggregate_query(),
            search=search,
            ecosystem_id=ecosystem_id,
            brand_id=brand_id,
        )
        return self._load_products(session, stmt, operation="list_products")

    def get_product(self, session: Session, offering_id: uuid.UUID) -> ProductWithRelations | None:
        stmt = self.offering_repository.apply_filters(
            self.offering_repository.aggregate_query(),
            offering_id=offering_id,
        )
        products = self._load_products(session, stmt, operation="get_product")
        return products[0] if products else None

    def list_brands(self, session: Session) -> list[BrandRead]:
        rows = self._read_all(session, select(BrandLookup).order_by(BrandLookup.id.asc()), "list_brands")
        return [BrandRead.model_validate(row) for row in rows]

    def list_ecosystems(self, session: Session) -> list[EcosystemRead]:
        rows = self._read_all(session, select(Ecosystem).order_by(Ecosystem.ecosystem_id.asc()), "list_ecosystems")
        return [EcosystemRead.model_validate(row) for row in rows]

    def list_fulfillment_platforms(self, session: Session) -> list[FulfillmentPlatformRead]:
        rows = self._read_all(
            session,
            select(FulfillmentPlatform).order_by(FulfillmentPlatform.fulfillment_platform_id.asc()),
            "list_fulfillment_platforms",
        )
        return [FulfillmentPlatformRead.model_validate(row) for row in rows]

    def list_product_features(self, session: Session) -> list[ProductFeatureRead]:
        rows = self._read_all(
            session,
            select(ProductFeature).order_by(ProductFeature.product_feature_id.asc()),
            "list_product_features",
        )
        return [ProductFeatureRead.model_validate(row) for row in rows]

    def list_languages(self, session: Session) -> list[LanguageRead]:
        rows = self._read_all(session, select(LanguageLookup).order_by(LanguageLookup.language_id.asc()), "list_languages")
        return [LanguageRead.model_validate(row) for row in rows]

    # Writes

    def create_product(self, session: Session, payload: ProductFormData) -> ProductWithRelations:
        with self._write_scope(session, "create_product") as span:
            ecosystem_id = self._resolve_ecosystem_id(session, payload)

            offering = Offering(
                name=payload.name,
                sku=payload.sku,
                description_short=payload.description_short,
                description_long=payload.description_long,
                sequence_order=payload.sequence_order,
                ecosystem_id=ecosystem_id,
                **payload.offering_flags(),
            )
            session.add(offering)
            session.flush()
            offering_id = offering.offering_id
            span.set_attribute("offering_id", str(offering_id))

            version_id = self._insert_version(session, offering_id, payload)
            session.add(OfferingProduct(offering_id=offering_id, sku_version=version_id))
            session.add(OfferingBrand(offering_id=offering_id, brand_id=payload.brand_id))
            session.flush()

        logger.info(
            "catalog.product.created",
            extra={"offering_id": str(offering_id), "brand_id": payload.brand_id, "ecosystem_id": ecosystem_id},
        )
        events.publish(
            {
                "event_type": "catalog.product.created",
                "offering_id": str(offering_id),
                "sku": payload.sku,
                "brand_id": payload.brand_id,
                "ecosystem_id": ecosystem_id,
            }
        )
        return self._require_product(session, offering_id)

    def update_product(
        self,
        session: Session,
        offering_id: uuid.UUID,
        payload: ProductFormData,
    ) -> ProductWithRelations:
        with self._write_scope(session, "update_product") as span:
            span.set_attribute("offering_id", str(offering_id))
            offering = session.scalar(
                self.offering_repository.apply_filters(
                    self.offering_repository.aggregate_query(),
                    offering_id=offering_id,
                )
            )
            if offering is None:
                raise NotFoundError("offering", offering_id)

            offering.name = payload.name
            offering.sku = payload.sku
            offering.description_short = payload.description_short
            offering.description_long = payload.description_long
            offering.sequence_order = payload.sequence_order
            offering.ecosystem_id = self._resolve_ecosystem_id(session, payload)
            for key, value in payload.offering_flags().items():
                setattr(offering, key, value)

            # Only the first version is kept in sync with the form.
            if offering.sku_versions:
                version = offering.sku_versions[0]
                version.version_name = payload.version_name

                detail = version.sku_version_detail
                if detail is None:
                    detail = SkuVersionDetail(sku_version=version.sku_version_id)
                    session.add(detail)
                _assign(detail, _pick(payload, _DETAIL_FIELDS))
                session.flush()

                pricing = detail.sku_version_pricing[0] if detail.sku_version_pricing else None
                if pricing is None:
                    pricing = SkuVersionPricing(sku_version_detail_id=detail.sku_version_detail_id)
                    session.add(pricing)
                _assign(pricing, _pick(payload, _PRICING_FIELDS))

            if offering.offering_brands:
                for link in offering.offering_brands:
                    link.brand_id = payload.brand_id
            else:
                session.add(OfferingBrand(offering_id=offering_id, brand_id=payload.brand_id))
            session.flush()

        logger.info("catalog.product.updated", extra={"offering_id": str(offering_id), "brand_id": payload.brand_id})
        events.publish(
            {
                "event_type": "catalog.product.updated",
                "offering_id": str(offering_id),
                "sku": payload.sku,
                "brand_id": payload.brand_id,
            }
        )
        return self._require_product(session, offering_id)

    def delete_product(self, session: Session, offering_id: uuid.UUID) -> None:
        with self._write_scope(session, "delete_product") as span:
            span.set_attribute("offering_id", str(offering_id))
            if not self.offering_repository.exists(session, offering_id):
                raise NotFoundError("offering", offering_id)

            child_ids = self.offering_repository.collect_child_ids(session, offering_id)
            for statement in self.offering_repository.delete_statements(offering_id, child_ids):
                session.execute(statement, execution_options={"synchronize_session": False})

        logger.info("catalog.product.deleted", extra={"offering_id": str(offering_id)})
        events.publish({"event_type": "catalog.product.deleted", "offering_id": str(offering_id)})

    def clone_product(self, session: Session, offering_id: uuid.UUID) -> ProductWithRelations:
        with tracer.start_as_current_span("catalog.clone_product") as span:
            span.set_attribute("source_offering_id", str(offering_id))
            source = self.get_product(session, offering_id)
            if source is None:
                raise NotFoundError("offering", offering_id)

            payload = self.build_clone_payload(source)
            clone = self.create_product(session, payload)
            span.set_attribute("offering_id", str(clone.offering_id))

        logger.info(
            "catalog.product.cloned",
            extra={"offering_id": str(clone.offering_id), "operation": "clone_product"},
        )
        events.publish(
            {
                "event_type": "catalog.product.cloned",
                "offering_id": str(clone.offering_id),
                "source_offering_id": str(offering_id),
                "sku": clone.sku,
            }
        )
        return clone

    def add_version(
        self,
        session: Session,
        offering_id: uuid.UUID,
        payload: VersionFormData,
    ) -> ProductWithRelations:
        with self._write_scope(session, "add_version") as span:
            span.set_attribute("offering_id", str(offering_id))
            if not self.offering_repository.exists(session, offering_id):
                raise NotFoundError("offering", offering_id)

            version_id = self._insert_version(session, offering_id, payload)
            session.add(OfferingProduct(offering_id=offering_id, sku_version=version_id))
            session.flush()

        logger.info("catalog.version.created", extra={"offering_id": str(offering_id), "operation": "add_version"})
        events.publish(
            {
                "event_type": "catalog.version.created",
                "offering_id": str(offering_id),
                "sku_version_id": version_id,
            }
        )
        return self._require_product(session, offering_id)

    def build_clone_payload(self, source: ProductWithRelations) -> ProductFormData:
        if not source.offering_brands or source.offering_brands[0].brand_id is None:
            raise IncompleteProductError(f"offering {source.offering_id} has no brand link and cannot be cloned")

        version = source.sku_versions[0] if source.sku_versions else None
        detail = version.sku_version_detail if version is not None else None
        pricing = detail.sku_version_pricing[0] if detail is not None and detail.sku_version_pricing else None
        content = detail.sku_version_contents[0] if detail is not None and detail.sku_version_contents else None

        data: dict[str, Any] = {
            "name": _with_suffix(source.name or source.sku, self.clone_name_suffix, NAME_MAX_LENGTH),
            "sku": _with_suffix(source.sku, self.clone_sku_suffix, SKU_MAX_LENGTH),
            "brand_id": source.offering_brands[0].brand_id,
            "ecosystem_id": source.ecosystem_id,
            "description_short": source.description_short,
            "description_long": source.description_long,
            "sequence_order": source.sequence_order,
            "product_status": "inactive",
            "version_name": (detail.version_name if detail is not None else None)
            or (version.version_name if version is not None else None)
            or DEFAULT_VERSION_NAME,
            "base_price": pricing.base_price if pricing is not None and pricing.base_price is not None else Decimal("0"),
            "feature_ids": [],
            "fulfillment_platform_ids": [],
        }
        if detail is not None:
            data.update(_pick(detail, _DETAIL_FIELDS - {"version_name", "description_short", "description_long"}))
        if pricing is not None:
            data.update(_pick(pricing, _PRICING_FIELDS - {"base_price"}))
        if content is not None:
            data.update(_pick(content, _CONTENT_FIELDS))
            data["language_ids"] = [
                link.language_id for link in content.content_languages if link.language_id is not None
            ]

        return ProductFormData.model_validate(data)

    # Internals

    @contextmanager
    def _write_scope(self, session: Session, operation: str) -> Iterator[trace.Span]:
        started = time.perf_counter()
        with tracer.start_as_current_span(f"catalog.{operation}") as span:
            try:
                yield span
                session.commit()
            except CatalogError:
                session.rollback()
                observe_catalog_write(operation, "rejected", time.perf_counter() - started)
                raise
            except SQLAlchemyError as exc:
                session.rollback()
                observe_catalog_write(operation, "failed", time.perf_counter() - started)
                logger.exception("catalog.write_failed", extra={"operation": operation, "error": str(exc)})
                raise StoreError(operation) from exc
        observe_catalog_write(operation, "committed", time.perf_counter() - started)

    def _load_products(self, session: Session, stmt: Any, *, operation: str) -> list[ProductWithRelations]:
        rows = self._read_all(session, stmt, operation)
        return [ProductWithRelations.model_validate(row) for row in rows]

    def _read_all(self, session: Session, stmt: Any, operation: str) -> list[Any]:
        try:
            return list(session.scalars(stmt).all())
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("catalog.read_failed", extra={"operation": operation, "error": str(exc)})
            raise StoreError(operation) from exc

    def _require_product(self, session: Session, offering_id: uuid.UUID) -> ProductWithRelations:
        product = self.get_product(session, offering_id)
        if product is None:
            raise NotFoundError("offering", offering_id)
        return product

    def _resolve_ecosystem_id(self, session: Session, payload: ProductFormData) -> int | None:
        if payload.ecosystem_id is not None:
            return payload.ecosystem_id

        brand = session.get(BrandLookup, payload.brand_id)
        if brand is not None and brand.ecosystem_id is not None:
            return brand.ecosystem_id

        fallback = session.scalar(select(Ecosystem.ecosystem_id).order_by(Ecosystem.ecosystem_id.asc()).limit(1))
        logger.warning(
            "catalog.ecosystem.fallback",
            extra={"brand_id": payload.brand_id, "ecosystem_id": fallback},
        )
        return fallback

    def _insert_version(self, session: Session, offering_id: uuid.UUID, payload: VersionFormData) -> int:
        version = SkuVersion(offering_id=offering_id, version_name=payload.version_name)
        session.add(version)
        session.flush()

        detail = SkuVersionDetail(sku_version=version.sku_version_id, **_pick(payload, _DETAIL_FIELDS))
        session.add(detail)
        session.flush()
        detail_id = detail.sku_version_detail_id

        session.add(SkuVersionPricing(sku_version_detail_id=detail_id, **_pick(payload, _PRICING_FIELDS)))

        if payload.has_content():
            content = SkuVersionContent(
                sku_version_detail_id=detail_id,
                description_short=payload.description_short,
                description_long=payload.description_long,
                **_pick(payload, _CONTENT_FIELDS),
            )
            session.add(content)
            session.flush()
            for language_id in payload.language_ids:
                session.add(
                    ContentLanguage(sku_version_content_id=content.sku_version_content_id, language_id=language_id)
                )

        for feature_id in payload.feature_ids:
            session.add(SkuVersionFeature(sku_version_detail_id=detail_id, feature_id=feature_id))

        for platform_id in payload.fulfillment_platform_ids:
            session.add(
                SkuVersionFulfillmentPlatform(
                    sku_version_id=version.sku_version_id,
                    fulfillment_platform_id=platform_id,
                )
            )

        session.flush()
        return version.sku_version_id


def _pick(source: BaseModel | Any, fields: set[str]) -> dict[str, Any]:
    if isinstance(source, BaseModel):
        return source.model_dump(mode="python", include=fields)
    return {name: getattr(source, name) for name in fields}


def _assign(target: Any, values: dict[str, Any]) -> None:
    for key, value in values.items():
        setattr(target, key, value)


def _with_suffix(base: str, suffix: str, limit: int) -> str:
    # The suffix always survives; the base is shortened to make room.
    return f"{base[: max(limit - len(suffix), 0)]}{suffix}"[:limit]
