"""
Fixed Assets Module (``asset_modules.assets``).

Responsibility
--------------
The registry proper: asset, category, supplier, location and product-model
records; storage protocols with in-memory and SQLAlchemy implementations;
configuration; and ``AssetRegistryService``, which values assets on read
through ``asset_engines.depreciation``.

Architecture position
---------------------
**Modules layer** -- glue between the pure engines and storage.  Consumed
by ``asset_ingestion`` (NF-e import) and the command-line scripts.

Invariants enforced
-------------------
* Book value is never stored; it is derived on every read.
* ``previously_depreciated_value <= purchase_value``.
* Categories referenced by assets cannot be deleted.
"""

from asset_modules.assets.config import AssetConfig, ImportSettings
from asset_modules.assets.memory import InMemoryAssetRepository, InMemoryCatalogStore
from asset_modules.assets.models import (
    Asset,
    AssetCategory,
    DepreciationMethod,
    DepreciationRateType,
    Location,
    ProductModel,
    Supplier,
)
from asset_modules.assets.protocols import (
    AssetRepository,
    CatalogStore,
    MutableCatalogStore,
)
from asset_modules.assets.service import (
    AssetRegistryService,
    AssetValuationRow,
    PortfolioSummary,
)

__all__ = [
    "Asset",
    "AssetCategory",
    "DepreciationMethod",
    "DepreciationRateType",
    "Supplier",
    "Location",
    "ProductModel",
    "AssetConfig",
    "ImportSettings",
    "AssetRepository",
    "CatalogStore",
    "MutableCatalogStore",
    "InMemoryAssetRepository",
    "InMemoryCatalogStore",
    "AssetRegistryService",
    "AssetValuationRow",
    "PortfolioSummary",
]
