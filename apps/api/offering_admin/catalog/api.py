from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from offering_admin.catalog.errors import NotFoundError
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
from offering_admin.catalog.service import CatalogService
from offering_admin.core.config import get_settings
from offering_admin.core.database import get_db


router = APIRouter(prefix="/api", tags=["catalog"])


def get_catalog_service() -> CatalogService:
    settings = get_settings()
    return CatalogService(
        clone_name_suffix=settings.clone_name_suffix,
        clone_sku_suffix=settings.clone_sku_suffix,
    )


@router.get("/products", response_model=list[ProductWithRelations])
def list_products(
    search: str | None = Query(default=None),
    ecosystem_id: int | None = Query(default=None),
    brand_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> list[ProductWithRelations]:
    return service.list_products(db, search=search, ecosystem_id=ecosystem_id, brand_id=brand_id)


@router.get("/products/{offering_id}", response_model=ProductWithRelations)
def get_product(
    offering_id: uuid.UUID,
    db: Session = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> ProductWithRelations:
    product = service.get_product(db, offering_id)
    if product is None:
        raise NotFoundError("offering", offering_id)
    return product


@router.post("/products", response_model=ProductWithRelations, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductFormData,
    db: Session = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> ProductWithRelations:
    return service.create_product(db, payload)


@router.put("/products/{offering_id}", response_model=ProductWithRelations)
def update_product(
    offering_id: uuid.UUID,
    payload: ProductFormData,
    db: Session = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> ProductWithRelations:
    return service.update_product(db, offering_id, payload)


@router.delete("/products/{offering_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    offering_id: uuid.UUID,
    db: Session = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> Response:
    service.delete_product(db, offering_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/products/{offering_id}/clone", response_model=ProductWithRelations, status_code=status.HTTP_201_CREATED)
def clone_product(
    offering_id: uuid.UUID,
    db: Session = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> ProductWithRelations:
    return service.clone_product(db, offering_id)


@router.post(
    "/products/{offering_id}/versions",
    response_model=ProductWithRelations,
    status_code=status.HTTP_201_CREATED,
)
def add_version(
    offering_id: uuid.UUID,
    payload: VersionFormData,
    db: Session = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> ProductWithRelations:
    return service.add_version(db, offering_id, payload)


@router.get("/brands", response_model=list[BrandRead])
def list_brands(
    db: Session = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> list[BrandRead]:
    return service.list_brands(db)


@router.get("/ecosystems", response_model=list[EcosystemRead])
def list_ecosystems(
    db: Session = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> list[EcosystemRead]:
    return service.list_ecosystems(db)


@router.get("/fulfillment-platforms", response_model=list[FulfillmentPlatformRead])
def list_fulfillment_platforms(
    db: Session = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> list[FulfillmentPlatformRead]:
    return service.list_fulfillment_platforms(db)


@router.get("/product-features", response_model=list[ProductFeatureRead])
def list_product_features(
    db: Session = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> list[ProductFeatureRead]:
    return service.list_product_features(db)


@router.get("/languages", response_model=list[LanguageRead])
def list_languages(
    db: Session = Depends(get_db),
    service: CatalogService = Depends(get_catalog_service),
) -> list[LanguageRead]:
    return service.list_languages(db)
