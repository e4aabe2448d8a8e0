"""
Fixed Assets Domain Models.

The nouns of the registry: assets, categories, suppliers, locations and
product models.  Book value is not a field here; it is derived on read by
``asset_engines.depreciation``.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from uuid import UUID

from asset_engines.depreciation import DepreciationMethod, DepreciationRateType
from asset_kernel.domain.values import Money
from asset_kernel.logging_config import get_logger

logger = get_logger("modules.assets.models")

__all__ = [
    "Asset",
    "AssetCategory",
    "DepreciationMethod",
    "DepreciationRateType",
    "Location",
    "ProductModel",
    "Supplier",
]


@dataclass(frozen=True)
class AssetCategory:
    """A category whose depreciation rule governs its assets."""
    id: UUID
    name: str
    depreciation_method: DepreciationMethod = DepreciationMethod.LINEAR
    useful_life_years: int | None = None
    residual_value_percentage: Decimal = Decimal("0")
    depreciation_rate_type: DepreciationRateType | None = None
    depreciation_rate_value: Decimal | None = None


@dataclass(frozen=True)
class Supplier:
    """A vendor, identified on invoices by CNPJ (company) or CPF (person)."""
    id: UUID
    name: str
    legal_name: str = ""
    cnpj: str | None = None
    cpf: str | None = None


@dataclass(frozen=True)
class Location:
    """Where an asset is allocated."""
    id: UUID
    name: str


@dataclass(frozen=True)
class ProductModel:
    """A make/model shared by several assets."""
    id: UUID
    name: str
    brand: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class Asset:
    """A fixed asset."""
    id: UUID
    name: str
    asset_tag: str
    category_id: UUID
    supplier_id: UUID
    purchase_date: date
    purchase_value: Money
    previously_depreciated_value: Money
    invoice_number: str = ""
    serial_number: str | None = None
    location_id: UUID | None = None
    model_id: UUID | None = None
    apply_depreciation: bool = True
    archived: bool = False
    additional_info: str | None = None
    image_data_uris: tuple[str, ...] = field(default_factory=tuple)
    invoice_file_data_uri: str | None = None
    invoice_file_name: str | None = None

    @property
    def net_purchase_value(self) -> Money:
        """Purchase value less depreciation absorbed before registration."""
        return self.purchase_value - self.previously_depreciated_value

    def with_changes(self, **changes) -> "Asset":
        """Copy of this asset with the given fields replaced (id is kept)."""
        if "id" in changes and changes["id"] != self.id:
            raise ValueError("Asset id is immutable")
        return replace(self, **changes)
