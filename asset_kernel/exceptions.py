"""
Typed Exception Hierarchy for the Asset Kernel.

Every error has a TYPED exception class (catch by type, not message), a
``code`` class attribute (machine-readable, API-safe) and carries the
structured context a caller needs to render an actionable message
(category name, supplier tax id, row index).

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    AssetKernelError (base)
    |
    +-- ValuationError                  (per-asset; never aborts a listing)
    |   +-- ConfigurationError
    |   +-- UnsupportedMethodError
    |
    +-- ImportPipelineError             (batch precondition; nothing persisted)
    |   +-- EmptySelectionError
    |   +-- SupplierNotFoundError
    |
    +-- ValidationError                 (one or more RowError)
    |   +-- NegativeValueError
    |
    +-- RegistryError
        +-- AssetNotFoundError
        +-- CategoryNotFoundError
        +-- CategoryInUseError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category   | Code                            | When Raised
-----------|---------------------------------|--------------------------------------
Valuation  | CATEGORY_CONFIGURATION_ERROR    | No useful life and no explicit rate
           | UNSUPPORTED_DEPRECIATION_METHOD | Category method has no algorithm
-----------|---------------------------------|--------------------------------------
Import     | EMPTY_SELECTION                 | Zero units selected for import
           | SUPPLIER_NOT_FOUND              | Invoice tax id matches no supplier
-----------|---------------------------------|--------------------------------------
Validation | VALIDATION_ERROR                | Row metadata missing/invalid
           | NEGATIVE_BOOK_VALUE             | Previously depreciated > purchase
-----------|---------------------------------|--------------------------------------
Registry   | ASSET_NOT_FOUND                 | Update/delete of unknown asset id
           | CATEGORY_NOT_FOUND              | Unknown category id
           | CATEGORY_IN_USE                 | Delete of a referenced category

===============================================================================
HANDLING PATTERNS
===============================================================================

1. VALUATION ERRORS ARE PER ASSET:

    for asset in repository.list():
        try:
            value = engine.current_value(asset, category, as_of)
        except ValuationError as e:
            render_na(asset, e.code)   # keep going

2. IMPORT ERRORS REJECT THE WHOLE BATCH:

    try:
        outcome = reconciler.reconcile(tasks, metadata, supplier_id)
    except SupplierNotFoundError as e:
        open_supplier_form(e.tax_id, e.supplier_name)
    except ValidationError as e:
        for row in e.errors:
            highlight(row.row_index, row.field, row.message)
"""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from asset_kernel.domain.dtos import RowError


class AssetKernelError(Exception):
    """
    Base exception for all asset kernel errors.

    All subclasses must have a `code` class attribute
    for machine-readable error identification.
    """

    code: str = "ASSET_KERNEL_ERROR"


# Valuation exceptions


class ValuationError(AssetKernelError):
    """Base exception for errors computing an asset's book value."""

    code: str = "VALUATION_ERROR"


class ConfigurationError(ValuationError):
    """Category has neither a useful life nor an explicit depreciation rate."""

    code: str = "CATEGORY_CONFIGURATION_ERROR"

    def __init__(self, category_id: str, category_name: str):
        self.category_id = category_id
        self.category_name = category_name
        super().__init__(
            f"Category '{category_name}' ({category_id}) defines neither a "
            "useful life nor a depreciation rate"
        )


class UnsupportedMethodError(ValuationError):
    """Category uses a depreciation method with no defined algorithm."""

    code: str = "UNSUPPORTED_DEPRECIATION_METHOD"

    def __init__(self, category_id: str, category_name: str, method: str):
        self.category_id = category_id
        self.category_name = category_name
        self.method = method
        super().__init__(
            f"Depreciation method '{method}' of category '{category_name}' "
            f"({category_id}) is not supported"
        )


# Import pipeline exceptions


class ImportPipelineError(AssetKernelError):
    """Base exception for invoice import batch preconditions."""

    code: str = "IMPORT_PIPELINE_ERROR"


class EmptySelectionError(ImportPipelineError):
    """No invoice units were selected for import."""

    code: str = "EMPTY_SELECTION"

    def __init__(self, invoice_number: str = ""):
        self.invoice_number = invoice_number
        label = f" {invoice_number}" if invoice_number else ""
        super().__init__(f"No items selected for import from invoice{label}")


class SupplierNotFoundError(ImportPipelineError):
    """The invoice supplier, or the supplier chosen for a batch, is not registered."""

    code: str = "SUPPLIER_NOT_FOUND"

    def __init__(
        self,
        tax_id: str = "",
        supplier_name: str = "",
        supplier_id: UUID | None = None,
    ):
        self.tax_id = tax_id
        self.supplier_name = supplier_name
        self.supplier_id = supplier_id
        if supplier_id is not None:
            message = f"Supplier id {supplier_id} is not registered"
        elif tax_id or supplier_name:
            message = (
                f"Supplier {supplier_name or tax_id} (tax id '{tax_id}') is not "
                "registered; register it before importing"
            )
        else:
            message = "Supplier is not identified"
        super().__init__(message)


# Validation exceptions


class ValidationError(AssetKernelError):
    """One or more input rows failed validation."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, errors: Iterable[RowError], message: str | None = None):
        self.errors: tuple[RowError, ...] = tuple(errors)
        if message is None:
            details = "; ".join(e.describe() for e in self.errors[:5])
            more = len(self.errors) - 5
            if more > 0:
                details += f"; and {more} more"
            message = f"Validation failed: {details}"
        super().__init__(message)

    @property
    def row_indexes(self) -> tuple[int, ...]:
        """Distinct row indexes that failed, in first-seen order."""
        seen: list[int] = []
        for e in self.errors:
            if e.row_index is not None and e.row_index not in seen:
                seen.append(e.row_index)
        return tuple(seen)


class NegativeValueError(ValidationError):
    """Previously depreciated value exceeds the purchase value."""

    code: str = "NEGATIVE_BOOK_VALUE"

    def __init__(
        self,
        purchase_value: str,
        previously_depreciated_value: str,
        row_index: int | None = None,
        errors: Iterable[RowError] | None = None,
    ):
        self.purchase_value = purchase_value
        self.previously_depreciated_value = previously_depreciated_value
        self.row_index = row_index
        if errors is None:
            errors = (
                RowError(
                    code=self.code,
                    message=(
                        f"Previously depreciated value {previously_depreciated_value} "
                        f"exceeds purchase value {purchase_value}"
                    ),
                    row_index=row_index,
                    field="previously_depreciated_value",
                ),
            )
        super().__init__(errors)


# Registry exceptions


class RegistryError(AssetKernelError):
    """Base exception for asset/catalog lookup and integrity errors."""

    code: str = "REGISTRY_ERROR"


class AssetNotFoundError(RegistryError):
    """Asset was not found."""

    code: str = "ASSET_NOT_FOUND"

    def __init__(self, asset_id: str):
        self.asset_id = asset_id
        super().__init__(f"Asset not found: {asset_id}")


class CategoryNotFoundError(RegistryError):
    """Category was not found."""

    code: str = "CATEGORY_NOT_FOUND"

    def __init__(self, category_id: str):
        self.category_id = category_id
        super().__init__(f"Category not found: {category_id}")


class CategoryInUseError(RegistryError):
    """Attempted to delete a category that assets still reference."""

    code: str = "CATEGORY_IN_USE"

    def __init__(self, category_id: str, category_name: str):
        self.category_id = category_id
        self.category_name = category_name
        super().__init__(
            f"Category '{category_name}' ({category_id}) is referenced by "
            "existing assets and cannot be deleted"
        )
