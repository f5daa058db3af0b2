from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    SmallInteger,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from offering_admin.core.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Ecosystem(Base):
    __tablename__ = "ecosystem"

    ecosystem_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    ecosystem_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    profession_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    brand_id: Mapped[int | None] = mapped_column(Integer, nullable=True)


class BrandLookup(Base):
    __tablename__ = "brand_lookup"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    description: Mapped[str | None] = mapped_column(String(256), nullable=True)
    ecosystem_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("ecosystem.ecosystem_id"),
        nullable=True,
    )


class FulfillmentPlatform(Base):
    __tablename__ = "fulfillment_platform"

    fulfillment_platform_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    url: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description_short: Mapped[str | None] = mapped_column(String(256), nullable=True)
    description_long: Mapped[str | None] = mapped_column(Text, nullable=True)
    active: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=True)
    create_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, default=utcnow)


class CostCenterLookup(Base):
    __tablename__ = "cost_center_lookup"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    cost_center_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    cost_center_description: Mapped[str | None] = mapped_column(String(256), nullable=True)


class ProductFeature(Base):
    __tablename__ = "product_features"

    product_feature_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    feature_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    feature_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")


class LanguageLookup(Base):
    __tablename__ = "language_lookup"

    # Identifiers are assigned by the reference data, not generated.
    language_id: Mapped[int] = mapped_column(SmallInteger, primary_key=True, autoincrement=False)
    language_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    language_abbr: Mapped[str | None] = mapped_column(String(4), nullable=True)


class Offering(Base):
    __tablename__ = "offering"

    offering_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    sku: Mapped[str] = mapped_column(String(255), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")
    description_short: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description_long: Mapped[str | None] = mapped_column(Text, nullable=True)
    not_for_sale: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    sequence_order: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    ecosystem_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("ecosystem.ecosystem_id"),
        nullable=True,
    )

    offering_brands: Mapped[list[OfferingBrand]] = relationship(
        "OfferingBrand",
        back_populates="offering",
        order_by="OfferingBrand.id",
    )
    offering_products: Mapped[list[OfferingProduct]] = relationship(
        "OfferingProduct",
        back_populates="offering",
        order_by="OfferingProduct.sku_version",
    )
    sku_versions: Mapped[list[SkuVersion]] = relationship(
        "SkuVersion",
        back_populates="offering",
        order_by="SkuVersion.sku_version_id",
    )

    __table_args__ = (
        Index("ix_offering_sku", "sku"),
        Index("ix_offering_ecosystem", "ecosystem_id"),
    )

    @property
    def product_status(self) -> str:
        if not self.active:
            return "inactive"
        if self.not_for_sale:
            return "not_for_sale"
        return "active"


class SkuVersion(Base):
    __tablename__ = "sku_version"

    sku_version_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    offering_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("offering.offering_id"),
        nullable=False,
    )
    version_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    offering: Mapped[Offering] = relationship("Offering", back_populates="sku_versions")
    details: Mapped[list[SkuVersionDetail]] = relationship(
        "SkuVersionDetail",
        back_populates="version",
        order_by="SkuVersionDetail.sku_version_detail_id",
    )
    sku_version_fulfillment_platforms: Mapped[list[SkuVersionFulfillmentPlatform]] = relationship(
        "SkuVersionFulfillmentPlatform",
        back_populates="version",
        order_by="SkuVersionFulfillmentPlatform.sku_fulfillment_platform_id",
    )

    __table_args__ = (Index("ix_sku_version_offering", "offering_id"),)

    @property
    def sku_version_detail(self) -> SkuVersionDetail | None:
        # One detail per version by convention; the table allows more.
        return self.details[0] if self.details else None


class SkuVersionDetail(Base):
    __tablename__ = "sku_version_detail"

    sku_version_detail_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sku_version: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("sku_version.sku_version_id"),
        nullable=True,
    )
    version_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")
    qualifying_education: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    continuing_education: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    description_short: Mapped[str | None] = mapped_column(String(256), nullable=True)
    description_long: Mapped[str | None] = mapped_column(Text, nullable=True)
    not_for_individual_sale: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default="false",
    )
    credit_hours: Mapped[int | None] = mapped_column(Integer, nullable=True)
    access_period: Mapped[str | None] = mapped_column(String(128), nullable=True)
    platform: Mapped[str | None] = mapped_column(String(128), nullable=True)
    hybrid_delivery: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    certifications_awarded: Mapped[str | None] = mapped_column(String(256), nullable=True)
    owner: Mapped[str | None] = mapped_column(String(128), nullable=True)

    version: Mapped[SkuVersion | None] = relationship("SkuVersion", back_populates="details")
    sku_version_pricing: Mapped[list[SkuVersionPricing]] = relationship(
        "SkuVersionPricing",
        order_by="SkuVersionPricing.sku_version_pricing_id",
    )
    sku_version_features: Mapped[list[SkuVersionFeature]] = relationship(
        "SkuVersionFeature",
        order_by="SkuVersionFeature.sku_feature_id",
    )
    sku_version_contents: Mapped[list[SkuVersionContent]] = relationship(
        "SkuVersionContent",
        order_by="SkuVersionContent.sku_version_content_id",
    )

    __table_args__ = (Index("ix_sku_version_detail_version", "sku_version"),)


class SkuVersionPricing(Base):
    __tablename__ = "sku_version_pricing"

    sku_version_pricing_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sku_version_detail_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("sku_version_detail.sku_version_detail_id"),
        nullable=True,
    )
    base_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    cogs: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    cost_center: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("cost_center_lookup.id"),
        nullable=True,
    )
    delivery_cost: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    subscription_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    msrp: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    promotional_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    discount_percentage: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    recognition_period_months: Mapped[int | None] = mapped_column(Integer, nullable=True)
    revenue_allocation_method: Mapped[str | None] = mapped_column(String(64), nullable=True)
    discount_eligibility: Mapped[str | None] = mapped_column(String(64), nullable=True)
    discount_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    additional_certificate_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    recognition_start_trigger: Mapped[str | None] = mapped_column(String(64), nullable=True)
    deferred_revenue_account: Mapped[str | None] = mapped_column(String(64), nullable=True)
    income_account: Mapped[str | None] = mapped_column(String(64), nullable=True)
    profit_center: Mapped[str | None] = mapped_column(String(64), nullable=True)
    revenue_category: Mapped[str | None] = mapped_column(String(64), nullable=True)
    revenue_subcategory: Mapped[str | None] = mapped_column(String(64), nullable=True)
    revenue_forecast_category: Mapped[str | None] = mapped_column(String(64), nullable=True)

    __table_args__ = (Index("ix_sku_version_pricing_detail", "sku_version_detail_id"),)


class SkuVersionContent(Base):
    __tablename__ = "sku_version_content"

    sku_version_content_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sku_version_detail_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("sku_version_detail.sku_version_detail_id"),
        nullable=True,
    )
    content_version: Mapped[str | None] = mapped_column(String(64), nullable=True)
    content_format: Mapped[str | None] = mapped_column(String(64), nullable=True)
    mobile_compatible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    description_short: Mapped[str | None] = mapped_column(String(256), nullable=True)
    description_long: Mapped[str | None] = mapped_column(Text, nullable=True)
    content_length: Mapped[str | None] = mapped_column(String(64), nullable=True)
    instructor_information: Mapped[str | None] = mapped_column(String(256), nullable=True)
    refresh_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    create_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, default=utcnow)

    content_languages: Mapped[list[ContentLanguage]] = relationship(
        "ContentLanguage",
        order_by="ContentLanguage.content_language_id",
    )


class ContentLanguage(Base):
    __tablename__ = "content_language"

    content_language_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sku_version_content_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("sku_version_content.sku_version_content_id"),
        nullable=True,
    )
    language_id: Mapped[int | None] = mapped_column(
        SmallInteger,
        ForeignKey("language_lookup.language_id"),
        nullable=True,
    )

    language: Mapped[LanguageLookup | None] = relationship("LanguageLookup")


class SkuVersionFeature(Base):
    __tablename__ = "sku_version_features"

    sku_feature_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sku_version_detail_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("sku_version_detail.sku_version_detail_id"),
        nullable=False,
    )
    feature_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("product_features.product_feature_id"),
        nullable=False,
    )
    regulatory_modifier: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    pricing_modifier: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")

    feature: Mapped[ProductFeature | None] = relationship("ProductFeature")

    __table_args__ = (Index("ix_sku_version_features_detail", "sku_version_detail_id"),)


class SkuVersionFulfillmentPlatform(Base):
    __tablename__ = "sku_version_fulfillment_platform"

    sku_fulfillment_platform_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sku_version_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("sku_version.sku_version_id"),
        nullable=False,
    )
    fulfillment_platform_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("fulfillment_platform.fulfillment_platform_id"),
        nullable=False,
    )

    version: Mapped[SkuVersion] = relationship("SkuVersion", back_populates="sku_version_fulfillment_platforms")
    fulfillment_platform: Mapped[FulfillmentPlatform | None] = relationship("FulfillmentPlatform")

    __table_args__ = (Index("ix_sku_version_fulfillment_platform_version", "sku_version_id"),)


class OfferingProduct(Base):
    __tablename__ = "offering_product"

    offering_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("offering.offering_id"),
        primary_key=True,
    )
    sku_version: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("sku_version.sku_version_id"),
        primary_key=True,
    )

    offering: Mapped[Offering] = relationship("Offering", back_populates="offering_products")


class OfferingBrand(Base):
    __tablename__ = "offering_brand"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    offering_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("offering.offering_id"),
        nullable=True,
    )
    brand_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("brand_lookup.id"),
        nullable=True,
    )

    offering: Mapped[Offering | None] = relationship("Offering", back_populates="offering_brands")
    brand: Mapped[BrandLookup | None] = relationship("BrandLookup")

    __table_args__ = (Index("ix_offering_brand_offering", "offering_id"),)
