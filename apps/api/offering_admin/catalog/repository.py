from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import Delete, Select, delete, or_, select
from sqlalchemy.orm import Session, selectinload

from offering_admin.catalog.models import (
    ContentLanguage,
    Offering,
    OfferingBrand,
    OfferingProduct,
    SkuVersion,
    SkuVersionContent,
    SkuVersionDetail,
    SkuVersionFeature,
    SkuVersionFulfillmentPlatform,
    SkuVersionPricing,
)


LIKE_ESCAPE = "\\"


def _escape_like(term: str) -> str:
    return term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2).replace("%", "\\%").replace("_", "\\_")


@dataclass(slots=True)
class OfferingChildIds:
    version_ids: list[int] = field(default_factory=list)
    detail_ids: list[int] = field(default_factory=list)
    content_ids: list[int] = field(default_factory=list)


class OfferingRepository:
    """Statement builders for the offering aggregate.

    Reads are two-phase: the root query selects offerings only, and every
    relation is batch-loaded with one ``IN`` query keyed by the root ids. A
    single flat join would multiply pricing, feature and platform rows.
    """

    def aggregate_query(self) -> Select[tuple[Offering]]:
        versions = selectinload(Offering.sku_versions)
        details = versions.selectinload(SkuVersion.details)
        return (
            select(Offering)
            .options(
                selectinload(Offering.offering_brands).selectinload(OfferingBrand.brand),
                selectinload(Offering.offering_products),
                details.selectinload(SkuVersionDetail.sku_version_pricing),
                details.selectinload(SkuVersionDetail.sku_version_features).selectinload(SkuVersionFeature.feature),
                details.selectinload(SkuVersionDetail.sku_version_contents)
                .selectinload(SkuVersionContent.content_languages)
                .selectinload(ContentLanguage.language),
                versions.selectinload(SkuVersion.sku_version_fulfillment_platforms).selectinload(
                    SkuVersionFulfillmentPlatform.fulfillment_platform
                ),
            )
            .order_by(Offering.name.asc(), Offering.offering_id.asc())
            .execution_options(populate_existing=True)
        )

    def apply_filters(
        self,
        query: Select[Any],
        *,
        offering_id: uuid.UUID | None = None,
        search: str | None = None,
        ecosystem_id: int | None = None,
        brand_id: int | None = None,
    ) -> Select[Any]:
        if offering_id is not None:
            query = query.where(Offering.offering_id == offering_id)

        term = (search or "").strip()
        if term:
            pattern = f"%{_escape_like(term)}%"
            query = query.where(
                or_(
                    Offering.name.ilike(pattern, escape=LIKE_ESCAPE),
                    Offering.sku.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )

        if ecosystem_id is not None:
            query = query.where(Offering.ecosystem_id == ecosystem_id)

        if brand_id is not None:
            query = query.where(
                Offering.offering_id.in_(
                    select(OfferingBrand.offering_id).where(OfferingBrand.brand_id == brand_id)
                )
            )

        return query

    def exists(self, session: Session, offering_id: uuid.UUID) -> bool:
        found = session.scalar(select(Offering.offering_id).where(Offering.offering_id == offering_id))
        return found is not None

    def collect_child_ids(self, session: Session, offering_id: uuid.UUID) -> OfferingChildIds:
        ids = OfferingChildIds()
        ids.version_ids = list(
            session.scalars(select(SkuVersion.sku_version_id).where(SkuVersion.offering_id == offering_id))
        )
        if ids.version_ids:
            ids.detail_ids = list(
                session.scalars(
                    select(SkuVersionDetail.sku_version_detail_id).where(
                        SkuVersionDetail.sku_version.in_(ids.version_ids)
                    )
                )
            )
        if ids.detail_ids:
            ids.content_ids = list(
                session.scalars(
                    select(SkuVersionContent.sku_version_content_id).where(
                        SkuVersionContent.sku_version_detail_id.in_(ids.detail_ids)
                    )
                )
            )
        return ids

    def delete_statements(self, offering_id: uuid.UUID, ids: OfferingChildIds) -> list[Delete]:
        """Deletes for the whole aggregate, children before parents."""
        statements: list[Delete] = []
        if ids.content_ids:
            statements.append(
                delete(ContentLanguage).where(ContentLanguage.sku_version_content_id.in_(ids.content_ids))
            )
            statements.append(
                delete(SkuVersionContent).where(SkuVersionContent.sku_version_content_id.in_(ids.content_ids))
            )
        if ids.detail_ids:
            statements.append(
                delete(SkuVersionFeature).where(SkuVersionFeature.sku_version_detail_id.in_(ids.detail_ids))
            )
            statements.append(
                delete(SkuVersionPricing).where(SkuVersionPricing.sku_version_detail_id.in_(ids.detail_ids))
            )
            statements.append(
                delete(SkuVersionDetail).where(SkuVersionDetail.sku_version_detail_id.in_(ids.detail_ids))
            )
        if ids.version_ids:
            statements.append(
                delete(SkuVersionFulfillmentPlatform).where(
                    SkuVersionFulfillmentPlatform.sku_version_id.in_(ids.version_ids)
                )
            )
            statements.append(
                delete(OfferingProduct).where(
                    or_(
                        OfferingProduct.offering_id == offering_id,
                        OfferingProduct.sku_version.in_(ids.version_ids),
                    )
                )
            )
            statements.append(delete(SkuVersion).where(SkuVersion.sku_version_id.in_(ids.version_ids)))
        else:
            statements.append(delete(OfferingProduct).where(OfferingProduct.offering_id == offering_id))
        statements.append(delete(OfferingBrand).where(OfferingBrand.offering_id == offering_id))
        statements.append(delete(Offering).where(Offering.offering_id == offering_id))
        return statements
