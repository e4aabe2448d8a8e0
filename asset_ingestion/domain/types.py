"""
asset_ingestion.domain.types -- Pure frozen dataclasses for NF-e import.

ZERO I/O. Imports only from asset_kernel/domain/ and the assets models.

Flow of types:
    InvoiceDocument -> ImportPlan (ImportPreparationTask per unit)
    -> TaskMetadata per task -> ImportOutcome
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from asset_kernel.domain.values import Money
from asset_modules.assets.models import Asset, Supplier


# =============================================================================
# Invoice document (output of the external extraction service)
# =============================================================================


@dataclass(frozen=True)
class InvoiceProduct:
    """One NF-e line item.  ``total_value`` is authoritative for freight."""

    description: str
    quantity: Decimal
    unit_value: Money
    total_value: Money

    @property
    def selectable_units(self) -> int:
        """Whole units that can be imported from this line."""
        return int(self.quantity) if self.quantity > 0 else 0


@dataclass(frozen=True)
class InvoiceDocument:
    """Normalized NF-e data."""

    supplier_cnpj: str
    supplier_name: str
    invoice_number: str
    emission_date: datetime | None
    total_value: Money
    freight_value: Money
    products: tuple[InvoiceProduct, ...] = ()

    @property
    def purchase_date(self) -> date | None:
        """Calendar date of emission; the purchase date of imported assets."""
        return self.emission_date.date() if self.emission_date else None

    @property
    def currency(self) -> str:
        return self.total_value.currency.code


# =============================================================================
# Planning
# =============================================================================


@dataclass(frozen=True)
class ImportPreparationTask:
    """
    One unit of one invoice line, awaiting per-asset metadata.

    Transient: never persisted.  ``purchase_value`` is unit cost plus the
    unit's freight share.
    """

    line_index: int
    source_description: str
    purchase_value: Money
    invoice_number: str
    purchase_date: date | None
    supplier_id: UUID | None = None


@dataclass(frozen=True)
class LinePlan:
    """Selection summary for one invoice line."""

    line_index: int
    description: str
    invoice_quantity: Decimal
    selected_quantity: int
    ignored_quantity: Decimal
    unit_value: Money
    freight_per_unit: Money

    @property
    def unit_purchase_value(self) -> Money:
        return self.unit_value + self.freight_per_unit


@dataclass(frozen=True)
class ImportPlan:
    """Tasks in invoice line order, plus per-line ignored counts."""

    invoice_number: str
    tasks: tuple[ImportPreparationTask, ...]
    lines: tuple[LinePlan, ...]
    supplier_id: UUID | None = None

    @property
    def ignored_by_line(self) -> dict[int, Decimal]:
        return {line.line_index: line.ignored_quantity for line in self.lines}

    @property
    def task_count(self) -> int:
        return len(self.tasks)


# =============================================================================
# Reconciliation
# =============================================================================


@dataclass(frozen=True)
class TaskMetadata:
    """Per-task user input collected before committing an import."""

    asset_tag: str
    category_id: UUID | None
    name: str | None = None  # defaults to the task's source description
    location_id: UUID | None = None
    model_id: UUID | None = None
    serial_number: str | None = None
    apply_depreciation: bool = True
    previously_depreciated_value: Decimal = Decimal("0")
    additional_info: str | None = None
    purchase_date: date | None = None  # overrides the invoice emission date


@dataclass(frozen=True)
class ImportFailure:
    """A task whose asset could not be appended to the repository."""

    task_index: int
    asset_tag: str
    error_type: str
    message: str


@dataclass(frozen=True)
class ImportOutcome:
    """Result of committing one import batch."""

    invoice_number: str
    created: tuple[Asset, ...]
    failures: tuple[ImportFailure, ...] = ()

    @property
    def is_complete(self) -> bool:
        return not self.failures

    @property
    def failed_task_indexes(self) -> tuple[int, ...]:
        """Task indexes to retry."""
        return tuple(f.task_index for f in self.failures)


# =============================================================================
# Preview
# =============================================================================


@dataclass(frozen=True)
class LineSummary:
    """One invoice line as shown before selection."""

    line_index: int
    description: str
    quantity: Decimal
    unit_value: Money
    total_value: Money
    selectable_units: int


@dataclass(frozen=True)
class ImportPreview:
    """What an invoice would import, before any selection."""

    document: InvoiceDocument
    supplier: Supplier | None
    lines: tuple[LineSummary, ...]
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def supplier_registered(self) -> bool:
        return self.supplier is not None

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly summary for scripts."""
        return {
            "invoice_number": self.document.invoice_number,
            "supplier_cnpj": self.document.supplier_cnpj,
            "supplier_name": self.document.supplier_name,
            "supplier_registered": self.supplier_registered,
            "freight_value": str(self.document.freight_value.amount),
            "lines": [
                {
                    "line_index": line.line_index,
                    "description": line.description,
                    "quantity": str(line.quantity),
                    "unit_value": str(line.unit_value.amount),
                    "total_value": str(line.total_value.amount),
                    "selectable_units": line.selectable_units,
                }
                for line in self.lines
            ],
            "warnings": list(self.warnings),
        }
