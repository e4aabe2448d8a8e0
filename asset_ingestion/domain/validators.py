"""
Validators for NF-e import records.

Record-level checks of one (task, metadata) pair and consistency warnings
for an extracted invoice are pure.  Referential checks (category, location,
model exist) need the CatalogStore and live in the reconciler.

Architecture: asset_ingestion/domain. ZERO I/O.
"""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import Sequence

from asset_kernel.domain.dtos import RowError
from asset_kernel.domain.values import Money
from asset_modules.assets.helpers import INVALID_FIELD, validate_purchase_values

from asset_ingestion.domain.types import (
    ImportPreparationTask,
    InvoiceDocument,
    TaskMetadata,
)

# Line totals may differ from quantity x unit value by NF-e rounding.
_LINE_TOLERANCE = Decimal("0.05")


# -----------------------------------------------------------------------------
# Record-level validators (one task at a time)
# -----------------------------------------------------------------------------


def validate_task_metadata(
    task: ImportPreparationTask,
    metadata: TaskMetadata,
    row_index: int,
) -> list[RowError]:
    """Validate one task's user-entered metadata, without catalog lookups."""
    errors: list[RowError] = []

    if not (metadata.asset_tag or "").strip():
        errors.append(RowError(
            code=INVALID_FIELD, row_index=row_index, field="asset_tag",
            message="Asset tag is required",
        ))

    if metadata.category_id is None:
        errors.append(RowError(
            code=INVALID_FIELD, row_index=row_index, field="category_id",
            message="Category is required",
        ))

    if metadata.purchase_date is None and task.purchase_date is None:
        errors.append(RowError(
            code=INVALID_FIELD, row_index=row_index, field="purchase_date",
            message="Invoice has no emission date; a purchase date is required",
        ))

    previously = Money.of(
        metadata.previously_depreciated_value, task.purchase_value.currency,
    )
    errors.extend(validate_purchase_values(
        task.purchase_value,
        previously,
        row_index=row_index,
    ))
    return errors


# -----------------------------------------------------------------------------
# Cross-record validators (whole batch)
# -----------------------------------------------------------------------------


def find_duplicate_tags(metadata: Sequence[TaskMetadata]) -> dict[str, list[int]]:
    """Asset tags used by more than one row of the batch, with their rows."""
    seen: dict[str, list[int]] = defaultdict(list)
    for index, meta in enumerate(metadata):
        tag = (meta.asset_tag or "").strip()
        if tag:
            seen[tag].append(index)
    return {tag: rows for tag, rows in seen.items() if len(rows) > 1}


# -----------------------------------------------------------------------------
# Invoice consistency (warnings only)
# -----------------------------------------------------------------------------


def invoice_consistency_warnings(document: InvoiceDocument) -> list[str]:
    """
    Human-readable warnings about an extracted invoice.

    Never blocks an import: line totals stay authoritative for freight.
    """
    warnings: list[str] = []

    if not document.supplier_cnpj:
        warnings.append("Invoice has no supplier tax id")
    if document.emission_date is None:
        warnings.append("Invoice has no emission date")

    for index, product in enumerate(document.products):
        expected = product.unit_value.amount * product.quantity
        if abs(expected - product.total_value.amount) > _LINE_TOLERANCE:
            warnings.append(
                f"Line {index}: total {product.total_value.amount} differs from "
                f"quantity x unit value {expected}"
            )
        if product.quantity != product.quantity.to_integral_value():
            warnings.append(
                f"Line {index}: fractional quantity {product.quantity}; "
                f"{product.selectable_units} whole units can be imported"
            )

    return warnings
