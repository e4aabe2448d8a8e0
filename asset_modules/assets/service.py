"""
Fixed Assets Module Service (``asset_modules.assets.service``).

Responsibility
--------------
Orchestrates registry operations -- asset CRUD with edit-time validation,
on-read valuation, portfolio summaries and category maintenance -- by
delegating pure computation to ``asset_engines`` and storage to the
injected ``AssetRepository`` / ``MutableCatalogStore``.

Architecture position
---------------------
**Modules layer** -- thin glue.  ``AssetRegistryService`` is the public
entry point for registry operations.  It composes the stateless
``DepreciationEngine`` with the storage protocols.

Invariants enforced
-------------------
* Book value is derived on every read and never stored.
* ``previously_depreciated_value <= purchase_value`` on every create/update.
* A category referenced by an asset cannot be deleted.
* Valuation errors are per asset: listings and summaries never abort.

Failure modes
-------------
* ``NegativeValueError`` -- previously depreciated exceeds purchase value.
* ``ValidationError`` -- blank tag, unknown category/supplier/location/model,
  category rule violations.
* ``AssetNotFoundError`` / ``CategoryNotFoundError`` -- unknown ids.
* ``CategoryInUseError`` -- delete of a referenced category.
* ``ConfigurationError`` / ``UnsupportedMethodError`` -- from
  ``current_value`` for a single asset.

Usage::

    service = AssetRegistryService(repository, catalog, clock=clock)
    asset = service.register_asset(
        name="Notebook", asset_tag="PAT-001", category_id=cat.id,
        supplier_id=sup.id, purchase_date=date(2024, 1, 10),
        purchase_value=Decimal("4500.00"),
    )
    service.current_value(asset.id)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID, uuid4

from asset_engines.depreciation import AssetValuation, DepreciationEngine
from asset_kernel.domain.clock import Clock, SystemClock
from asset_kernel.domain.dtos import RowError
from asset_kernel.domain.values import Money
from asset_kernel.exceptions import (
    AssetNotFoundError,
    CategoryInUseError,
    CategoryNotFoundError,
    ValidationError,
    ValuationError,
)
from asset_kernel.logging_config import LogContext, get_logger
from asset_modules.assets.config import AssetConfig
from asset_modules.assets.helpers import (
    INVALID_FIELD,
    raise_for_errors,
    validate_category_rules,
    validate_purchase_values,
)
from asset_modules.assets.models import (
    Asset,
    AssetCategory,
    Location,
    ProductModel,
    Supplier,
)
from asset_modules.assets.protocols import AssetRepository, MutableCatalogStore

logger = get_logger("modules.assets.service")


@dataclass(frozen=True)
class AssetValuationRow:
    """
    One line of a valuation listing.

    ``value`` is None when the asset cannot be valued; ``error_code`` and
    ``error_message`` then say why and the row displays as "N/A".
    """

    asset: Asset
    category_name: str | None
    value: Money | None
    valuation: AssetValuation | None = None
    error_code: str | None = None
    error_message: str | None = None

    @property
    def is_valuable(self) -> bool:
        return self.value is not None

    @property
    def display_value(self) -> str:
        if self.value is None:
            return "N/A"
        return f"{self.value.amount} {self.value.currency.code}"


@dataclass(frozen=True)
class PortfolioSummary:
    """Totals over the valuable assets of the registry at ``as_of``."""

    as_of: date
    asset_count: int
    unvaluable_count: int
    total_purchase_value: Money
    total_current_value: Money

    @property
    def total_depreciation(self) -> Money:
        """Accumulated depreciation: purchase value less current value."""
        return self.total_purchase_value - self.total_current_value

    @property
    def valued_count(self) -> int:
        return self.asset_count - self.unvaluable_count


class AssetRegistryService:
    """
    Registry operations over injected storage.

    Contract
    --------
    * Storage writes go through ``AssetRepository`` / ``MutableCatalogStore``;
      the caller owns any transaction boundary (e.g. ``session_scope()``).
    * ``as_of`` defaults to ``clock.today()``.

    Non-goals
    ---------
    * Does NOT enforce asset tag uniqueness.
    * Does NOT render reports.
    """

    def __init__(
        self,
        repository: AssetRepository,
        catalog: MutableCatalogStore,
        config: AssetConfig | None = None,
        clock: Clock | None = None,
        engine: DepreciationEngine | None = None,
    ):
        self._repository = repository
        self._catalog = catalog
        self._config = config or AssetConfig.with_defaults()
        self._clock = clock or SystemClock()
        self._engine = engine or DepreciationEngine()

    # =========================================================================
    # Assets
    # =========================================================================

    def register_asset(
        self,
        *,
        name: str,
        asset_tag: str,
        category_id: UUID,
        supplier_id: UUID,
        purchase_date: date,
        purchase_value: Money | Decimal | str,
        previously_depreciated_value: Money | Decimal | str = Decimal("0"),
        invoice_number: str = "",
        serial_number: str | None = None,
        location_id: UUID | None = None,
        model_id: UUID | None = None,
        apply_depreciation: bool = True,
        archived: bool = False,
        additional_info: str | None = None,
        image_data_uris: tuple[str, ...] = (),
        invoice_file_data_uri: str | None = None,
        invoice_file_name: str | None = None,
    ) -> Asset:
        """Validate and append a new asset with a fresh id."""
        asset = Asset(
            id=uuid4(),
            name=name,
            asset_tag=asset_tag,
            category_id=category_id,
            supplier_id=supplier_id,
            purchase_date=purchase_date,
            purchase_value=self._money(purchase_value),
            previously_depreciated_value=self._money(previously_depreciated_value),
            invoice_number=invoice_number,
            serial_number=serial_number,
            location_id=location_id,
            model_id=model_id,
            apply_depreciation=apply_depreciation,
            archived=archived,
            additional_info=additional_info,
            image_data_uris=tuple(image_data_uris),
            invoice_file_data_uri=invoice_file_data_uri,
            invoice_file_name=invoice_file_name,
        )
        with LogContext.bind(asset_id=str(asset.id)):
            self._validate_asset(asset)
            self._repository.append(asset)
            logger.info("asset_registered", extra={
                "asset_tag": asset.asset_tag,
                "category_id": str(asset.category_id),
                "purchase_value": str(asset.purchase_value.amount),
            })
        return asset

    def update_asset(self, asset: Asset) -> Asset:
        """Validate and replace the stored asset with the same id."""
        with LogContext.bind(asset_id=str(asset.id)):
            if self._repository.get(asset.id) is None:
                raise AssetNotFoundError(str(asset.id))
            self._validate_asset(asset)
            self._repository.update(asset)
            logger.info("asset_updated", extra={"asset_tag": asset.asset_tag})
        return asset

    def delete_asset(self, asset_id: UUID) -> None:
        self._repository.delete(asset_id)
        logger.info("asset_deleted", extra={"asset_id": str(asset_id)})

    def get_asset(self, asset_id: UUID) -> Asset:
        asset = self._repository.get(asset_id)
        if asset is None:
            raise AssetNotFoundError(str(asset_id))
        return asset

    def set_archived(self, asset_id: UUID, archived: bool = True) -> Asset:
        """Archive (or restore) an asset; archived assets are still valued."""
        asset = self.get_asset(asset_id).with_changes(archived=archived)
        self._repository.update(asset)
        logger.info("asset_archive_flag_set", extra={
            "asset_id": str(asset_id), "archived": archived,
        })
        return asset

    # =========================================================================
    # Valuation
    # =========================================================================

    def current_value(self, asset_id: UUID, as_of: date | None = None) -> Money:
        """
        Book value of one asset.

        Raises:
            AssetNotFoundError, CategoryNotFoundError, ConfigurationError,
            UnsupportedMethodError.
        """
        return self.valuate(asset_id, as_of).current_value

    def valuate(self, asset_id: UUID, as_of: date | None = None) -> AssetValuation:
        """Full valuation breakdown of one asset."""
        asset = self.get_asset(asset_id)
        category = self._require_category(asset.category_id)
        return self._engine.valuate(asset, category, as_of or self._clock.today())

    def list_valuations(
        self,
        as_of: date | None = None,
        include_archived: bool = True,
    ) -> list[AssetValuationRow]:
        """
        Value every asset; unvaluable assets become N/A rows.

        Never raises a valuation error: a misconfigured category only
        affects the rows of its own assets.
        """
        as_of = as_of or self._clock.today()
        rows: list[AssetValuationRow] = []
        for asset in self._repository.list():
            if asset.archived and not include_archived:
                continue
            rows.append(self._valuation_row(asset, as_of))

        logger.info("valuations_listed", extra={
            "as_of": as_of,
            "row_count": len(rows),
            "unvaluable_count": sum(1 for r in rows if not r.is_valuable),
        })
        return rows

    def portfolio_summary(self, as_of: date | None = None) -> PortfolioSummary:
        """Totals of purchase value and current value over valuable assets."""
        as_of = as_of or self._clock.today()
        rows = self.list_valuations(
            as_of, include_archived=not self._config.exclude_archived_from_summary,
        )
        zero = Money.zero(self._config.currency_code)
        total_purchase = zero
        total_current = zero
        unvaluable = 0
        for row in rows:
            if row.value is None:
                unvaluable += 1
                continue
            total_purchase = total_purchase + row.asset.purchase_value
            total_current = total_current + row.value

        summary = PortfolioSummary(
            as_of=as_of,
            asset_count=len(rows),
            unvaluable_count=unvaluable,
            total_purchase_value=total_purchase,
            total_current_value=total_current,
        )
        logger.info("portfolio_summarized", extra={
            "as_of": as_of,
            "asset_count": summary.asset_count,
            "unvaluable_count": summary.unvaluable_count,
            "total_current_value": str(summary.total_current_value.amount),
        })
        return summary

    # =========================================================================
    # Catalog
    # =========================================================================

    def save_category(self, category: AssetCategory) -> AssetCategory:
        """Validate the category's depreciation rule and store it."""
        errors = validate_category_rules(
            name=category.name,
            useful_life_years=category.useful_life_years,
            residual_value_percentage=category.residual_value_percentage,
            depreciation_rate_type=category.depreciation_rate_type,
            depreciation_rate_value=category.depreciation_rate_value,
        )
        if errors:
            logger.warning("category_rejected", extra={
                "category_id": str(category.id),
                "fields": [e.field for e in errors],
            })
            raise ValidationError(errors)
        self._catalog.save_category(category)
        logger.info("category_saved", extra={
            "category_id": str(category.id),
            "method": category.depreciation_method.value,
        })
        return category

    def delete_category(self, category_id: UUID) -> None:
        category = self._require_category(category_id)
        if self._catalog.is_category_referenced(category_id):
            raise CategoryInUseError(str(category_id), category.name)
        self._catalog.delete_category(category_id)
        logger.info("category_deleted", extra={"category_id": str(category_id)})

    def save_supplier(self, supplier: Supplier) -> Supplier:
        self._require_name(supplier.name, "supplier")
        return self._catalog.save_supplier(supplier)

    def save_location(self, location: Location) -> Location:
        self._require_name(location.name, "location")
        return self._catalog.save_location(location)

    def save_model(self, model: ProductModel) -> ProductModel:
        self._require_name(model.name, "model")
        return self._catalog.save_model(model)

    # =========================================================================
    # Internals
    # =========================================================================

    def _money(self, value: Money | Decimal | str) -> Money:
        if isinstance(value, Money):
            return value
        return Money.of(value, self._config.currency_code)

    def _require_category(self, category_id: UUID) -> AssetCategory:
        category = self._catalog.get_category(category_id)
        if category is None:
            raise CategoryNotFoundError(str(category_id))
        return category

    @staticmethod
    def _require_name(name: str, kind: str) -> None:
        if not (name or "").strip():
            raise ValidationError([RowError(
                code=INVALID_FIELD, field="name",
                message=f"The {kind} name cannot be blank",
            )])

    def _validate_asset(self, asset: Asset) -> None:
        errors: list[RowError] = []
        if not asset.asset_tag.strip():
            errors.append(RowError(
                code=INVALID_FIELD, field="asset_tag",
                message="Asset tag cannot be blank",
            ))
        if self._catalog.get_category(asset.category_id) is None:
            errors.append(RowError(
                code=INVALID_FIELD, field="category_id",
                message=f"Unknown category {asset.category_id}",
            ))
        if self._catalog.get_supplier(asset.supplier_id) is None:
            errors.append(RowError(
                code=INVALID_FIELD, field="supplier_id",
                message=f"Unknown supplier {asset.supplier_id}",
            ))
        if asset.location_id is not None and self._catalog.get_location(asset.location_id) is None:
            errors.append(RowError(
                code=INVALID_FIELD, field="location_id",
                message=f"Unknown location {asset.location_id}",
            ))
        if asset.model_id is not None and self._catalog.get_model(asset.model_id) is None:
            errors.append(RowError(
                code=INVALID_FIELD, field="model_id",
                message=f"Unknown model {asset.model_id}",
            ))
        errors.extend(validate_purchase_values(
            asset.purchase_value,
            asset.previously_depreciated_value,
        ))
        if errors:
            logger.warning("asset_rejected", extra={
                "fields": [e.field for e in errors],
                "codes": sorted({e.code for e in errors}),
            })
        raise_for_errors(errors)

    def _valuation_row(self, asset: Asset, as_of: date) -> AssetValuationRow:
        category = self._catalog.get_category(asset.category_id)
        if category is None:
            return AssetValuationRow(
                asset=asset,
                category_name=None,
                value=None,
                error_code=CategoryNotFoundError.code,
                error_message=f"Category not found: {asset.category_id}",
            )
        try:
            valuation = self._engine.valuate(asset, category, as_of)
        except ValuationError as exc:
            logger.warning("asset_unvaluable", extra={
                "asset_id": str(asset.id),
                "error_code": exc.code,
            })
            return AssetValuationRow(
                asset=asset,
                category_name=category.name,
                value=None,
                error_code=exc.code,
                error_message=str(exc),
            )
        return AssetValuationRow(
            asset=asset,
            category_name=category.name,
            value=valuation.current_value,
            valuation=valuation,
        )
