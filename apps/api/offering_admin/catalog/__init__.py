from offering_admin.catalog.api import router
from offering_admin.catalog.errors import CatalogError, IncompleteProductError, NotFoundError, StoreError
from offering_admin.catalog.schemas import ProductFormData, ProductWithRelations, VersionFormData
from offering_admin.catalog.service import CatalogService

__all__ = [
    "router",
    "CatalogError",
    "IncompleteProductError",
    "NotFoundError",
    "StoreError",
    "ProductFormData",
    "ProductWithRelations",
    "VersionFormData",
    "CatalogService",
]
