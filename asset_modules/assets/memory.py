"""
In-memory catalog and asset repository.

Dict-backed implementations of ``CatalogStore``/``MutableCatalogStore`` and
``AssetRepository``, used by tests, scripts and any caller that keeps the
registry in process memory.  Insertion order is preserved.
"""

from __future__ import annotations

from uuid import UUID

from asset_kernel.exceptions import AssetNotFoundError
from asset_kernel.logging_config import get_logger
from asset_modules.assets.helpers import normalize_tax_id
from asset_modules.assets.models import (
    Asset,
    AssetCategory,
    Location,
    ProductModel,
    Supplier,
)
from asset_modules.assets.protocols import AssetRepository

logger = get_logger("modules.assets.memory")


class InMemoryAssetRepository:
    """AssetRepository backed by a dict keyed by asset id."""

    def __init__(self, assets: list[Asset] | None = None):
        self._assets: dict[UUID, Asset] = {}
        for asset in assets or ():
            self._assets[asset.id] = asset

    def append(self, asset: Asset) -> Asset:
        if asset.id in self._assets:
            raise ValueError(f"Asset already exists: {asset.id}")
        self._assets[asset.id] = asset
        logger.debug("asset_appended", extra={"asset_id": str(asset.id)})
        return asset

    def update(self, asset: Asset) -> Asset:
        if asset.id not in self._assets:
            raise AssetNotFoundError(str(asset.id))
        self._assets[asset.id] = asset
        return asset

    def delete(self, asset_id: UUID) -> None:
        if asset_id not in self._assets:
            raise AssetNotFoundError(str(asset_id))
        del self._assets[asset_id]

    def get(self, asset_id: UUID) -> Asset | None:
        return self._assets.get(asset_id)

    def list(self) -> list[Asset]:
        return list(self._assets.values())

    def __len__(self) -> int:
        return len(self._assets)


class InMemoryCatalogStore:
    """
    MutableCatalogStore backed by dicts.

    ``assets`` is consulted by ``is_category_referenced``; without it no
    category is ever considered referenced.
    """

    def __init__(
        self,
        *,
        categories: list[AssetCategory] | None = None,
        suppliers: list[Supplier] | None = None,
        locations: list[Location] | None = None,
        models: list[ProductModel] | None = None,
        assets: AssetRepository | None = None,
    ):
        self._categories = {c.id: c for c in categories or ()}
        self._suppliers = {s.id: s for s in suppliers or ()}
        self._locations = {loc.id: loc for loc in locations or ()}
        self._models = {m.id: m for m in models or ()}
        self._assets = assets

    def attach_assets(self, assets: AssetRepository) -> None:
        """Point reference checks at ``assets``."""
        self._assets = assets

    # -- lookups -----------------------------------------------------------

    def get_category(self, category_id: UUID) -> AssetCategory | None:
        return self._categories.get(category_id)

    def get_supplier(self, supplier_id: UUID) -> Supplier | None:
        return self._suppliers.get(supplier_id)

    def get_supplier_by_tax_id(self, tax_id: str) -> Supplier | None:
        wanted = normalize_tax_id(tax_id)
        if not wanted:
            return None
        for supplier in self._suppliers.values():
            if wanted in (normalize_tax_id(supplier.cnpj), normalize_tax_id(supplier.cpf)):
                return supplier
        return None

    def get_location(self, location_id: UUID) -> Location | None:
        return self._locations.get(location_id)

    def get_model(self, model_id: UUID) -> ProductModel | None:
        return self._models.get(model_id)

    def is_category_referenced(self, category_id: UUID) -> bool:
        if self._assets is None:
            return False
        return any(a.category_id == category_id for a in self._assets.list())

    # -- writes ------------------------------------------------------------

    def list_categories(self) -> list[AssetCategory]:
        return list(self._categories.values())

    def save_category(self, category: AssetCategory) -> AssetCategory:
        self._categories[category.id] = category
        return category

    def delete_category(self, category_id: UUID) -> None:
        self._categories.pop(category_id, None)

    def save_supplier(self, supplier: Supplier) -> Supplier:
        self._suppliers[supplier.id] = supplier
        return supplier

    def save_location(self, location: Location) -> Location:
        self._locations[location.id] = location
        return location

    def save_model(self, model: ProductModel) -> ProductModel:
        self._models[model.id] = model
        return model
