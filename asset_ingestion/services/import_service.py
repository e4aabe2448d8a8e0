"""
NFeImportService -- orchestrates an NF-e import end to end.

Flow:
    preview(document)                     -> ImportPreview (no writes)
    prepare(document, selected_quantities) -> ImportPlan
        resolve supplier -> allocate freight -> plan tasks
    commit(plan, metadata)                 -> ImportOutcome
        validate every row -> append one asset per task

The service owns no transaction.  Callers wrap ``commit`` in
``session_scope()`` when the repository is SQL-backed.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from uuid import uuid4

from asset_engines.freight import FreightAllocator, FreightLine
from asset_kernel.exceptions import ImportPipelineError
from asset_kernel.logging_config import LogContext, get_logger
from asset_modules.assets.config import AssetConfig
from asset_modules.assets.protocols import AssetRepository, CatalogStore

from asset_ingestion.domain.types import (
    ImportOutcome,
    ImportPlan,
    ImportPreview,
    InvoiceDocument,
    LineSummary,
    TaskMetadata,
)
from asset_ingestion.domain.validators import invoice_consistency_warnings
from asset_ingestion.services.planner import ImportPlanner
from asset_ingestion.services.reconciler import ImportReconciler

logger = get_logger("ingestion.import_service")


class NFeImportService:
    """
    Invoice-to-assets import.

    Freight dilution follows ``config.import_settings``: disabled by
    default, and when enabled the scope decides which lines share the
    freight total.
    """

    def __init__(
        self,
        catalog: CatalogStore,
        repository: AssetRepository,
        config: AssetConfig | None = None,
        allocator: FreightAllocator | None = None,
        planner: ImportPlanner | None = None,
        reconciler: ImportReconciler | None = None,
    ):
        self._catalog = catalog
        self._config = config or AssetConfig.with_defaults()
        self._allocator = allocator or FreightAllocator()
        self._planner = planner or ImportPlanner()
        self._reconciler = reconciler or ImportReconciler(catalog, repository)

    @property
    def config(self) -> AssetConfig:
        return self._config

    def preview(self, document: InvoiceDocument) -> ImportPreview:
        """Summarize an invoice before selection.  Never raises for data issues."""
        self._check_currency(document)
        supplier = (
            self._catalog.get_supplier_by_tax_id(document.supplier_cnpj)
            if document.supplier_cnpj
            else None
        )
        warnings = invoice_consistency_warnings(document)
        if supplier is None:
            warnings.append(
                f"Supplier {document.supplier_name or '?'} "
                f"({document.supplier_cnpj or 'no tax id'}) is not registered"
            )
        lines = tuple(
            LineSummary(
                line_index=index,
                description=product.description,
                quantity=product.quantity,
                unit_value=product.unit_value,
                total_value=product.total_value,
                selectable_units=product.selectable_units,
            )
            for index, product in enumerate(document.products)
        )
        logger.info("import_previewed", extra={
            "invoice_number": document.invoice_number,
            "line_count": len(lines),
            "supplier_registered": supplier is not None,
            "warning_count": len(warnings),
        })
        return ImportPreview(
            document=document,
            supplier=supplier,
            lines=lines,
            warnings=tuple(warnings),
        )

    def prepare(
        self,
        document: InvoiceDocument,
        selected_quantities: Mapping[int, int],
    ) -> ImportPlan:
        """
        Resolve the supplier, dilute freight and expand the selection.

        Raises:
            SupplierNotFoundError: The invoice's tax id matches no supplier.
            ValidationError: Invalid selection.
            EmptySelectionError: Nothing selected.
        """
        self._check_currency(document)
        with LogContext.bind(invoice_number=document.invoice_number or None):
            supplier = self._reconciler.resolve_supplier(document)
            settings = self._config.import_settings
            lines: list[FreightLine] = []
            for index, product in enumerate(document.products):
                selected = selected_quantities.get(index, 0)
                lines.append(FreightLine(
                    line_value=product.total_value,
                    unit_value=product.unit_value,
                    invoice_quantity=product.quantity,
                    # Malformed selections are rejected by the planner below.
                    selected_quantity=selected if isinstance(selected, int) else 0,
                ))
            allocation = self._allocator.allocate(
                freight_total=document.freight_value,
                lines=lines,
                scope=settings.freight_scope,
                enabled=settings.allocate_freight,
            )
            return self._planner.plan(
                document,
                selected_quantities,
                per_unit_freight=allocation.per_unit_freight,
                supplier_id=supplier.id,
            )

    def commit(
        self,
        plan: ImportPlan,
        metadata: Sequence[TaskMetadata],
    ) -> ImportOutcome:
        """
        Persist one asset per task of ``plan``.

        Raises:
            SupplierNotFoundError, NegativeValueError, ValidationError:
                The batch was rejected before anything was written.
        """
        with LogContext.bind(
            invoice_number=plan.invoice_number or None,
            batch_id=str(uuid4()),
        ):
            logger.info("import_commit_started", extra={
                "task_count": plan.task_count,
            })
            return self._reconciler.reconcile(
                plan.tasks, metadata, plan.supplier_id,
            )

    def _check_currency(self, document: InvoiceDocument) -> None:
        if document.currency != self._config.currency_code:
            raise ImportPipelineError(
                f"Invoice currency {document.currency} differs from registry "
                f"currency {self._config.currency_code}"
            )
