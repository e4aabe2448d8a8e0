"""
SQLAlchemy-backed catalog and asset repository.

Responsibility
--------------
Implement ``MutableCatalogStore`` and ``AssetRepository`` over the ORM
models in ``orm.py``.  Every write flushes so database constraint errors
surface at the call that caused them; the caller owns the transaction
boundary (``asset_kernel.db.engine.session_scope``).

Architecture position
---------------------
**Modules layer** -- persistence adapter.  Imports the kernel DB layer
indirectly through ``orm.py``.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import exists, or_, select
from sqlalchemy.orm import Session

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
from asset_modules.assets.orm import (
    AssetCategoryModel,
    AssetModel,
    LocationModel,
    ProductModelModel,
    SupplierModel,
)

logger = get_logger("modules.assets.repository")


class SqlAssetRepository:
    """AssetRepository over ``assets_assets``."""

    def __init__(self, session: Session, actor_id: UUID):
        self._session = session
        self._actor_id = actor_id

    def append(self, asset: Asset) -> Asset:
        row = AssetModel.from_dto(asset, created_by_id=self._actor_id)
        # Savepoint per asset: a failed insert leaves the session usable
        # for the remaining appends of a batch.
        with self._session.begin_nested():
            self._session.add(row)
        logger.debug("asset_appended", extra={"asset_id": str(asset.id)})
        return asset

    def update(self, asset: Asset) -> Asset:
        row = self._session.get(AssetModel, asset.id)
        if row is None:
            raise AssetNotFoundError(str(asset.id))
        row.apply_dto(asset, updated_by_id=self._actor_id)
        self._session.flush()
        return asset

    def delete(self, asset_id: UUID) -> None:
        row = self._session.get(AssetModel, asset_id)
        if row is None:
            raise AssetNotFoundError(str(asset_id))
        self._session.delete(row)
        self._session.flush()

    def get(self, asset_id: UUID) -> Asset | None:
        row = self._session.get(AssetModel, asset_id)
        return row.to_dto() if row is not None else None

    def list(self) -> list[Asset]:
        rows = self._session.scalars(
            select(AssetModel).order_by(AssetModel.created_at, AssetModel.asset_tag)
        )
        return [row.to_dto() for row in rows]


class SqlCatalogStore:
    """MutableCatalogStore over the catalog tables."""

    def __init__(self, session: Session, actor_id: UUID):
        self._session = session
        self._actor_id = actor_id

    # -- lookups -----------------------------------------------------------

    def get_category(self, category_id: UUID) -> AssetCategory | None:
        row = self._session.get(AssetCategoryModel, category_id)
        return row.to_dto() if row is not None else None

    def get_supplier(self, supplier_id: UUID) -> Supplier | None:
        row = self._session.get(SupplierModel, supplier_id)
        return row.to_dto() if row is not None else None

    def get_supplier_by_tax_id(self, tax_id: str) -> Supplier | None:
        digits = normalize_tax_id(tax_id)
        if not digits:
            return None
        row = self._session.scalars(
            select(SupplierModel)
            .where(or_(
                SupplierModel.cnpj_digits == digits,
                SupplierModel.cpf_digits == digits,
            ))
            .limit(1)
        ).first()
        return row.to_dto() if row is not None else None

    def get_location(self, location_id: UUID) -> Location | None:
        row = self._session.get(LocationModel, location_id)
        return row.to_dto() if row is not None else None

    def get_model(self, model_id: UUID) -> ProductModel | None:
        row = self._session.get(ProductModelModel, model_id)
        return row.to_dto() if row is not None else None

    def is_category_referenced(self, category_id: UUID) -> bool:
        return bool(self._session.scalar(
            select(exists().where(AssetModel.category_id == category_id))
        ))

    # -- writes ------------------------------------------------------------

    def list_categories(self) -> list[AssetCategory]:
        rows = self._session.scalars(
            select(AssetCategoryModel).order_by(AssetCategoryModel.name)
        )
        return [row.to_dto() for row in rows]

    def save_category(self, category: AssetCategory) -> AssetCategory:
        row = self._session.get(AssetCategoryModel, category.id)
        if row is None:
            self._session.add(
                AssetCategoryModel.from_dto(category, created_by_id=self._actor_id)
            )
        else:
            row.apply_dto(category, updated_by_id=self._actor_id)
        self._session.flush()
        return category

    def delete_category(self, category_id: UUID) -> None:
        row = self._session.get(AssetCategoryModel, category_id)
        if row is not None:
            self._session.delete(row)
            self._session.flush()

    def save_supplier(self, supplier: Supplier) -> Supplier:
        self._session.merge(SupplierModel.from_dto(supplier, created_by_id=self._actor_id))
        self._session.flush()
        return supplier

    def save_location(self, location: Location) -> Location:
        self._session.merge(LocationModel.from_dto(location, created_by_id=self._actor_id))
        self._session.flush()
        return location

    def save_model(self, model: ProductModel) -> ProductModel:
        self._session.merge(ProductModelModel.from_dto(model, created_by_id=self._actor_id))
        self._session.flush()
        return model
