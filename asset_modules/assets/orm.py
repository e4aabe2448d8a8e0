"""
Fixed Assets ORM Models (``asset_modules.assets.orm``).

Responsibility
--------------
SQLAlchemy persistence models for the registry -- asset categories,
suppliers, locations, product models and assets.  Maps the frozen domain
dataclasses from ``models.py`` to database tables.  There is no book value
column: current value is derived on read.

Architecture position
---------------------
**Modules layer** -- persistence.  Imports from ``asset_kernel.db.base``
and sibling ``models.py``.  MUST NOT be imported by ``asset_kernel``.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import JSON, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from asset_kernel.db.base import TrackedBase


# ---------------------------------------------------------------------------
# AssetCategoryModel
# ---------------------------------------------------------------------------

class AssetCategoryModel(TrackedBase):
    """
    ORM model for ``AssetCategory`` -- the depreciation rule shared by a
    group of assets.

    Table: ``assets_categories``
    """

    __tablename__ = "assets_categories"

    name: Mapped[str] = mapped_column(String(200))
    depreciation_method: Mapped[str] = mapped_column(String(50))
    useful_life_years: Mapped[int | None]
    residual_value_percentage: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    depreciation_rate_type: Mapped[str | None] = mapped_column(
        String(20), nullable=True,
    )
    depreciation_rate_value: Mapped[Decimal | None]

    assets: Mapped[list["AssetModel"]] = relationship(back_populates="category")

    __table_args__ = (
        Index("idx_assets_categories_name", "name"),
    )

    def to_dto(self):
        from asset_modules.assets.models import (
            AssetCategory,
            DepreciationMethod,
            DepreciationRateType,
        )
        return AssetCategory(
            id=self.id,
            name=self.name,
            depreciation_method=DepreciationMethod(self.depreciation_method),
            useful_life_years=self.useful_life_years,
            residual_value_percentage=self.residual_value_percentage,
            depreciation_rate_type=(
                DepreciationRateType(self.depreciation_rate_type)
                if self.depreciation_rate_type else None
            ),
            depreciation_rate_value=self.depreciation_rate_value,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "AssetCategoryModel":
        return cls(
            id=dto.id,
            name=dto.name,
            depreciation_method=dto.depreciation_method.value,
            useful_life_years=dto.useful_life_years,
            residual_value_percentage=dto.residual_value_percentage,
            depreciation_rate_type=(
                dto.depreciation_rate_type.value if dto.depreciation_rate_type else None
            ),
            depreciation_rate_value=dto.depreciation_rate_value,
            created_by_id=created_by_id,
        )

    def apply_dto(self, dto, updated_by_id: UUID) -> None:
        """Copy mutable fields from ``dto`` onto this row."""
        self.name = dto.name
        self.depreciation_method = dto.depreciation_method.value
        self.useful_life_years = dto.useful_life_years
        self.residual_value_percentage = dto.residual_value_percentage
        self.depreciation_rate_type = (
            dto.depreciation_rate_type.value if dto.depreciation_rate_type else None
        )
        self.depreciation_rate_value = dto.depreciation_rate_value
        self.updated_by_id = updated_by_id

    def __repr__(self) -> str:
        return f"<AssetCategoryModel(id={self.id!r}, name={self.name!r})>"


# ---------------------------------------------------------------------------
# SupplierModel
# ---------------------------------------------------------------------------

class SupplierModel(TrackedBase):
    """
    ORM model for ``Supplier``.  ``cnpj_digits`` and ``cpf_digits`` hold
    the digits of the tax ids so invoice lookups are one indexed match.

    Table: ``assets_suppliers``
    """

    __tablename__ = "assets_suppliers"

    name: Mapped[str] = mapped_column(String(200))
    legal_name: Mapped[str] = mapped_column(String(300), default="")
    cnpj: Mapped[str | None] = mapped_column(String(30), nullable=True)
    cpf: Mapped[str | None] = mapped_column(String(30), nullable=True)
    cnpj_digits: Mapped[str | None] = mapped_column(String(20), nullable=True)
    cpf_digits: Mapped[str | None] = mapped_column(String(20), nullable=True)

    __table_args__ = (
        Index("idx_assets_suppliers_cnpj_digits", "cnpj_digits"),
        Index("idx_assets_suppliers_cpf_digits", "cpf_digits"),
    )

    def to_dto(self):
        from asset_modules.assets.models import Supplier
        return Supplier(
            id=self.id,
            name=self.name,
            legal_name=self.legal_name,
            cnpj=self.cnpj,
            cpf=self.cpf,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "SupplierModel":
        from asset_modules.assets.helpers import normalize_tax_id
        return cls(
            id=dto.id,
            name=dto.name,
            legal_name=dto.legal_name,
            cnpj=dto.cnpj,
            cpf=dto.cpf,
            cnpj_digits=normalize_tax_id(dto.cnpj) or None,
            cpf_digits=normalize_tax_id(dto.cpf) or None,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return f"<SupplierModel(id={self.id!r}, name={self.name!r})>"


# ---------------------------------------------------------------------------
# LocationModel
# ---------------------------------------------------------------------------

class LocationModel(TrackedBase):
    """
    ORM model for ``Location``.

    Table: ``assets_locations``
    """

    __tablename__ = "assets_locations"

    name: Mapped[str] = mapped_column(String(200))

    def to_dto(self):
        from asset_modules.assets.models import Location
        return Location(id=self.id, name=self.name)

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "LocationModel":
        return cls(id=dto.id, name=dto.name, created_by_id=created_by_id)


# ---------------------------------------------------------------------------
# ProductModelModel
# ---------------------------------------------------------------------------

class ProductModelModel(TrackedBase):
    """
    ORM model for ``ProductModel`` (make/model catalog entry).

    Table: ``assets_models``
    """

    __tablename__ = "assets_models"

    name: Mapped[str] = mapped_column(String(200))
    brand: Mapped[str | None] = mapped_column(String(200), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    def to_dto(self):
        from asset_modules.assets.models import ProductModel
        return ProductModel(
            id=self.id,
            name=self.name,
            brand=self.brand,
            description=self.description,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "ProductModelModel":
        return cls(
            id=dto.id,
            name=dto.name,
            brand=dto.brand,
            description=dto.description,
            created_by_id=created_by_id,
        )


# ---------------------------------------------------------------------------
# AssetModel
# ---------------------------------------------------------------------------

class AssetModel(TrackedBase):
    """
    ORM model for ``Asset`` -- a fixed asset.

    Table: ``assets_assets``
    """

    __tablename__ = "assets_assets"

    name: Mapped[str] = mapped_column(String(300))
    asset_tag: Mapped[str] = mapped_column(String(100))
    invoice_number: Mapped[str] = mapped_column(String(100), default="")
    serial_number: Mapped[str | None] = mapped_column(String(200), nullable=True)
    category_id: Mapped[UUID] = mapped_column(ForeignKey("assets_categories.id"))
    supplier_id: Mapped[UUID] = mapped_column(ForeignKey("assets_suppliers.id"))
    location_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("assets_locations.id"), nullable=True,
    )
    model_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("assets_models.id"), nullable=True,
    )
    purchase_date: Mapped[date]
    currency: Mapped[str] = mapped_column(String(3))
    purchase_value: Mapped[Decimal]
    previously_depreciated_value: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    apply_depreciation: Mapped[bool] = mapped_column(default=True)
    archived: Mapped[bool] = mapped_column(default=False)
    additional_info: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_data_uris: Mapped[list] = mapped_column(JSON, default=list)
    invoice_file_data_uri: Mapped[str | None] = mapped_column(Text, nullable=True)
    invoice_file_name: Mapped[str | None] = mapped_column(String(300), nullable=True)

    category: Mapped["AssetCategoryModel"] = relationship(back_populates="assets")

    __table_args__ = (
        Index("idx_assets_assets_asset_tag", "asset_tag"),
        Index("idx_assets_assets_category_id", "category_id"),
        Index("idx_assets_assets_supplier_id", "supplier_id"),
        Index("idx_assets_assets_purchase_date", "purchase_date"),
    )

    def to_dto(self):
        from asset_kernel.domain.values import Money
        from asset_modules.assets.models import Asset
        return Asset(
            id=self.id,
            name=self.name,
            asset_tag=self.asset_tag,
            category_id=self.category_id,
            supplier_id=self.supplier_id,
            purchase_date=self.purchase_date,
            purchase_value=Money.of(self.purchase_value, self.currency),
            previously_depreciated_value=Money.of(
                self.previously_depreciated_value, self.currency,
            ),
            invoice_number=self.invoice_number,
            serial_number=self.serial_number,
            location_id=self.location_id,
            model_id=self.model_id,
            apply_depreciation=self.apply_depreciation,
            archived=self.archived,
            additional_info=self.additional_info,
            image_data_uris=tuple(self.image_data_uris or ()),
            invoice_file_data_uri=self.invoice_file_data_uri,
            invoice_file_name=self.invoice_file_name,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "AssetModel":
        row = cls(id=dto.id, created_by_id=created_by_id)
        row._copy_fields(dto)
        return row

    def apply_dto(self, dto, updated_by_id: UUID) -> None:
        """Copy every field except id from ``dto`` onto this row."""
        self._copy_fields(dto)
        self.updated_by_id = updated_by_id

    def _copy_fields(self, dto) -> None:
        self.name = dto.name
        self.asset_tag = dto.asset_tag
        self.invoice_number = dto.invoice_number
        self.serial_number = dto.serial_number
        self.category_id = dto.category_id
        self.supplier_id = dto.supplier_id
        self.location_id = dto.location_id
        self.model_id = dto.model_id
        self.purchase_date = dto.purchase_date
        self.currency = dto.purchase_value.currency.code
        self.purchase_value = dto.purchase_value.amount
        self.previously_depreciated_value = dto.previously_depreciated_value.amount
        self.apply_depreciation = dto.apply_depreciation
        self.archived = dto.archived
        self.additional_info = dto.additional_info
        self.image_data_uris = list(dto.image_data_uris)
        self.invoice_file_data_uri = dto.invoice_file_data_uri
        self.invoice_file_name = dto.invoice_file_name

    def __repr__(self) -> str:
        return (
            f"<AssetModel(id={self.id!r}, asset_tag={self.asset_tag!r}, "
            f"name={self.name!r})>"
        )
