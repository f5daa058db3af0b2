from __future__ import annotations


class CatalogError(Exception):
    """Base error for catalog reads and writes."""


class NotFoundError(CatalogError):
    """Raised when the referenced offering does not exist."""

    def __init__(self, resource: str, identifier: object) -> None:
        self.resource = resource
        self.identifier = str(identifier)
        super().__init__(f"{resource} not found: {self.identifier}")


class IncompleteProductError(CatalogError):
    """Raised when an offering lacks a relation an operation depends on."""


class StoreError(CatalogError):
    """Raised when the database rejects or aborts a catalog transaction."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"catalog store failure during {operation}")
