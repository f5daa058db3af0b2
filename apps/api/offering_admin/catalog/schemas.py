from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


ProductStatus = Literal["active", "inactive", "not_for_sale"]

_ZERO = Decimal("0")


class VersionFormData(BaseModel):
    version_name: str = Field(min_length=1, max_length=128)
    description_short: str | None = Field(default=None, max_length=255)
    description_long: str | None = None
    qualifying_education: bool = False
    continuing_education: bool = False
    not_for_individual_sale: bool = False
    credit_hours: int | None = Field(default=None, ge=0)
    access_period: str | None = Field(default=None, max_length=128)
    platform: str | None = Field(default=None, max_length=128)
    hybrid_delivery: bool = False
    certifications_awarded: str | None = Field(default=None, max_length=256)
    owner: str | None = Field(default=None, max_length=128)

    base_price: Decimal = Field(ge=_ZERO)
    msrp: Decimal | None = Field(default=None, ge=_ZERO)
    cogs: Decimal | None = Field(default=None, ge=_ZERO)
    delivery_cost: Decimal | None = Field(default=None, ge=_ZERO)
    subscription_price: Decimal | None = Field(default=None, ge=_ZERO)
    promotional_price: Decimal | None = Field(default=None, ge=_ZERO)
    discount_percentage: Decimal | None = Field(default=None, ge=_ZERO, le=Decimal("100"))
    recognition_period_months: int | None = Field(default=None, ge=0)
    additional_certificate_price: Decimal | None = Field(default=None, ge=_ZERO)
    revenue_allocation_method: str | None = Field(default=None, max_length=64)
    discount_eligibility: str | None = Field(default=None, max_length=64)
    discount_type: str | None = Field(default=None, max_length=64)
    recognition_start_trigger: str | None = Field(default=None, max_length=64)

    content_format: str | None = Field(default=None, max_length=64)
    mobile_compatible: bool = False
    content_length: str | None = Field(default=None, max_length=64)
    instructor_information: str | None = Field(default=None, max_length=256)
    language_ids: list[int] = Field(default_factory=list)

    fulfillment_platform_ids: list[int] = Field(default_factory=list)
    feature_ids: list[int] = Field(default_factory=list)

    def has_content(self) -> bool:
        return (
            self.content_format is not None
            or self.content_length is not None
            or self.instructor_information is not None
            or self.mobile_compatible
            or bool(self.language_ids)
        )


class ProductFormData(VersionFormData):
    name: str = Field(min_length=1, max_length=128)
    sku: str = Field(min_length=1, max_length=255)
    ecosystem_id: int | None = Field(default=None, ge=1)
    brand_id: int = Field(gt=0)
    sequence_order: int | None = Field(default=None, ge=0, le=255)
    product_status: ProductStatus = "active"

    def offering_flags(self) -> dict[str, bool]:
        return {
            "active": self.product_status != "inactive",
            "not_for_sale": self.product_status == "not_for_sale",
        }


class EcosystemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    ecosystem_id: int
    ecosystem_name: str | None
    profession_id: int | None
    brand_id: int | None


class BrandRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str | None
    description: str | None
    ecosystem_id: int | None


class FulfillmentPlatformRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    fulfillment_platform_id: int
    name: str | None
    url: str | None
    description_short: str | None
    description_long: str | None
    active: bool | None
    create_date: datetime | None


class ProductFeatureRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_feature_id: int
    feature_name: str | None
    feature_description: str | None
    active: bool


class LanguageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    language_id: int
    language_name: str | None
    language_abbr: str | None


class OfferingBrandRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    offering_id: UUID | None
    brand_id: int | None
    brand: BrandRead | None


class OfferingProductRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    offering_id: UUID
    sku_version: int


class SkuVersionPricingRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sku_version_pricing_id: int
    sku_version_detail_id: int | None
    base_price: Decimal | None
    cogs: Decimal | None
    cost_center: int | None
    delivery_cost: Decimal | None
    subscription_price: Decimal | None
    msrp: Decimal | None
    promotional_price: Decimal | None
    discount_percentage: Decimal | None
    recognition_period_months: int | None
    revenue_allocation_method: str | None
    discount_eligibility: str | None
    discount_type: str | None
    additional_certificate_price: Decimal | None
    recognition_start_trigger: str | None
    deferred_revenue_account: str | None
    income_account: str | None
    profit_center: str | None
    revenue_category: str | None
    revenue_subcategory: str | None
    revenue_forecast_category: str | None


class ContentLanguageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    content_language_id: int
    sku_version_content_id: int | None
    language_id: int | None
    language: LanguageRead | None


class SkuVersionContentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sku_version_content_id: int
    sku_version_detail_id: int | None
    content_version: str | None
    content_format: str | None
    mobile_compatible: bool
    description_short: str | None
    description_long: str | None
    content_length: str | None
    instructor_information: str | None
    refresh_date: datetime | None
    create_date: datetime | None
    content_languages: list[ContentLanguageRead]


class SkuVersionFeatureRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sku_feature_id: int
    sku_version_detail_id: int
    feature_id: int
    regulatory_modifier: bool
    pricing_modifier: bool
    feature: ProductFeatureRead | None


class SkuVersionDetailRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sku_version_detail_id: int
    sku_version: int | None
    version_name: str | None
    active: bool
    qualifying_education: bool
    continuing_education: bool
    description_short: str | None
    description_long: str | None
    not_for_individual_sale: bool
    credit_hours: int | None
    access_period: str | None
    platform: str | None
    hybrid_delivery: bool
    certifications_awarded: str | None
    owner: str | None
    sku_version_pricing: list[SkuVersionPricingRead]
    sku_version_features: list[SkuVersionFeatureRead]
    sku_version_contents: list[SkuVersionContentRead]


class SkuVersionFulfillmentPlatformRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sku_fulfillment_platform_id: int
    sku_version_id: int
    fulfillment_platform_id: int
    fulfillment_platform: FulfillmentPlatformRead | None


class SkuVersionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sku_version_id: int
    offering_id: UUID
    version_name: str | None
    sku_version_detail: SkuVersionDetailRead | None
    sku_version_fulfillment_platforms: list[SkuVersionFulfillmentPlatformRead]


class ProductWithRelations(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    offering_id: UUID
    name: str | None
    sku: str
    active: bool
    not_for_sale: bool
    product_status: ProductStatus
    description_short: str | None
    description_long: str | None
    sequence_order: int | None
    ecosystem_id: int | None
    offering_brands: list[OfferingBrandRead]
    offering_products: list[OfferingProductRead]
    sku_versions: list[SkuVersionRead]
