"""
Storage protocols for the asset registry.

Contract:
    CatalogStore resolves reference data (categories, suppliers, locations,
    product models) by id; MutableCatalogStore adds the writes the registry
    service needs.  AssetRepository is the append/update/delete/list store
    for Asset records.  Lookups return None for unknown ids; update/delete
    of an unknown asset raises AssetNotFoundError.

Architecture: asset_modules/assets. Implementations live in ``memory.py``
(dict-backed) and ``repository.py`` (SQLAlchemy).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable
from uuid import UUID

from asset_modules.assets.models import (
    Asset,
    AssetCategory,
    Location,
    ProductModel,
    Supplier,
)


@runtime_checkable
class CatalogStore(Protocol):
    """Read-only lookup of reference data."""

    def get_category(self, category_id: UUID) -> AssetCategory | None:
        ...

    def get_supplier(self, supplier_id: UUID) -> Supplier | None:
        ...

    def get_supplier_by_tax_id(self, tax_id: str) -> Supplier | None:
        """Match CNPJ or CPF, comparing digits only on both sides."""
        ...

    def get_location(self, location_id: UUID) -> Location | None:
        ...

    def get_model(self, model_id: UUID) -> ProductModel | None:
        ...

    def is_category_referenced(self, category_id: UUID) -> bool:
        """True when at least one asset points at the category."""
        ...


@runtime_checkable
class MutableCatalogStore(CatalogStore, Protocol):
    """CatalogStore with the writes used by the registry service."""

    def list_categories(self) -> list[AssetCategory]:
        ...

    def save_category(self, category: AssetCategory) -> AssetCategory:
        """Insert or replace by id."""
        ...

    def delete_category(self, category_id: UUID) -> None:
        ...

    def save_supplier(self, supplier: Supplier) -> Supplier:
        ...

    def save_location(self, location: Location) -> Location:
        ...

    def save_model(self, model: ProductModel) -> ProductModel:
        ...


@runtime_checkable
class AssetRepository(Protocol):
    """Persistent collection of Asset records."""

    def append(self, asset: Asset) -> Asset:
        ...

    def update(self, asset: Asset) -> Asset:
        """Replace the stored asset with the same id (AssetNotFoundError if absent)."""
        ...

    def delete(self, asset_id: UUID) -> None:
        """Remove the asset (AssetNotFoundError if absent)."""
        ...

    def get(self, asset_id: UUID) -> Asset | None:
        ...

    def list(self) -> list[Asset]:
        ...
