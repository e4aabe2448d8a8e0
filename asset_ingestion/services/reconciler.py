"""
Import reconciler: tasks + per-task metadata -> persisted Asset records.

Contract:
    reconcile(tasks, metadata, supplier_id) validates EVERY row before
    persisting ANY asset.  Any row failure rejects the whole batch with no
    side effects.  Persistence is then a sequence of independent appends;
    an append failure is recorded per task in ``ImportOutcome.failures`` and
    the remaining tasks continue.

Error selection:
    - Unknown supplier                          -> SupplierNotFoundError
    - Only exceedances (previously > purchase)  -> NegativeValueError
    - Any other row problem                     -> ValidationError

Architecture: asset_ingestion/services. I/O only through the injected
CatalogStore and AssetRepository.
"""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID, uuid4

from asset_kernel.domain.dtos import RowError
from asset_kernel.domain.values import Money
from asset_kernel.exceptions import SupplierNotFoundError
from asset_kernel.logging_config import LogContext, get_logger
from asset_modules.assets.helpers import INVALID_FIELD, raise_for_errors
from asset_modules.assets.models import Asset, Supplier
from asset_modules.assets.protocols import AssetRepository, CatalogStore

from asset_ingestion.domain.types import (
    ImportFailure,
    ImportOutcome,
    ImportPreparationTask,
    InvoiceDocument,
    TaskMetadata,
)
from asset_ingestion.domain.validators import find_duplicate_tags, validate_task_metadata

logger = get_logger("ingestion.reconciler")


class ImportReconciler:
    """Validate-all-then-append committer of an import batch."""

    def __init__(self, catalog: CatalogStore, repository: AssetRepository):
        self._catalog = catalog
        self._repository = repository

    def resolve_supplier(self, document: InvoiceDocument) -> Supplier:
        """
        Find the registered supplier matching the invoice's tax id.

        Raises:
            SupplierNotFoundError: No tax id on the invoice, or no supplier
                with that CNPJ/CPF (digits compared).
        """
        supplier = None
        if document.supplier_cnpj:
            supplier = self._catalog.get_supplier_by_tax_id(document.supplier_cnpj)
        if supplier is None:
            logger.warning("supplier_not_found", extra={
                "tax_id": document.supplier_cnpj,
                "supplier_name": document.supplier_name,
            })
            raise SupplierNotFoundError(document.supplier_cnpj, document.supplier_name)
        return supplier

    def reconcile(
        self,
        tasks: Sequence[ImportPreparationTask],
        metadata: Sequence[TaskMetadata],
        supplier_id: UUID | None,
    ) -> ImportOutcome:
        """
        Validate the batch, then append one asset per task.

        Raises:
            SupplierNotFoundError: ``supplier_id`` missing or unknown.
            NegativeValueError: Only exceedance errors were found.
            ValidationError: Any other row error.
        """
        invoice_number = tasks[0].invoice_number if tasks else ""
        with LogContext.bind(invoice_number=invoice_number or None):
            if supplier_id is None or self._catalog.get_supplier(supplier_id) is None:
                logger.warning("reconcile_supplier_unresolved", extra={
                    "supplier_id": str(supplier_id) if supplier_id else None,
                })
                raise SupplierNotFoundError(supplier_id=supplier_id)

            errors = self._validate(tasks, metadata)
            if errors:
                logger.warning("reconcile_validation_failed", extra={
                    "task_count": len(tasks),
                    "error_count": len(errors),
                    "rows": sorted({e.row_index for e in errors if e.row_index is not None}),
                })
                raise_for_errors(errors)

            duplicates = find_duplicate_tags(metadata)
            if duplicates:
                logger.warning("reconcile_duplicate_tags", extra={
                    "tags": sorted(duplicates),
                })

            assets = [
                self._build_asset(task, meta, supplier_id)
                for task, meta in zip(tasks, metadata)
            ]
            return self._persist(invoice_number, assets)

    # -- internals -----------------------------------------------------------

    def _validate(
        self,
        tasks: Sequence[ImportPreparationTask],
        metadata: Sequence[TaskMetadata],
    ) -> list[RowError]:
        if len(tasks) != len(metadata):
            return [RowError(
                code=INVALID_FIELD, field="metadata",
                message=(
                    f"Got metadata for {len(metadata)} rows; "
                    f"the import has {len(tasks)} tasks"
                ),
            )]
        if not tasks:
            return [RowError(
                code=INVALID_FIELD, field="tasks",
                message="Nothing to import",
            )]

        errors: list[RowError] = []
        for index, (task, meta) in enumerate(zip(tasks, metadata)):
            errors.extend(validate_task_metadata(task, meta, index))
            errors.extend(self._check_references(meta, index))
        return errors

    def _check_references(self, meta: TaskMetadata, index: int) -> list[RowError]:
        errors: list[RowError] = []
        if meta.category_id is not None and self._catalog.get_category(meta.category_id) is None:
            errors.append(RowError(
                code=INVALID_FIELD, row_index=index, field="category_id",
                message=f"Unknown category {meta.category_id}",
            ))
        if meta.location_id is not None and self._catalog.get_location(meta.location_id) is None:
            errors.append(RowError(
                code=INVALID_FIELD, row_index=index, field="location_id",
                message=f"Unknown location {meta.location_id}",
            ))
        if meta.model_id is not None and self._catalog.get_model(meta.model_id) is None:
            errors.append(RowError(
                code=INVALID_FIELD, row_index=index, field="model_id",
                message=f"Unknown model {meta.model_id}",
            ))
        return errors

    @staticmethod
    def _build_asset(
        task: ImportPreparationTask,
        meta: TaskMetadata,
        supplier_id: UUID,
    ) -> Asset:
        currency = task.purchase_value.currency
        return Asset(
            id=uuid4(),
            name=(meta.name or "").strip() or task.source_description,
            asset_tag=meta.asset_tag.strip(),
            category_id=meta.category_id,
            supplier_id=supplier_id,
            purchase_date=meta.purchase_date or task.purchase_date,
            purchase_value=task.purchase_value,
            previously_depreciated_value=Money.of(meta.previously_depreciated_value, currency),
            invoice_number=task.invoice_number,
            serial_number=meta.serial_number,
            location_id=meta.location_id,
            model_id=meta.model_id,
            apply_depreciation=meta.apply_depreciation,
            additional_info=meta.additional_info,
        )

    def _persist(self, invoice_number: str, assets: list[Asset]) -> ImportOutcome:
        created: list[Asset] = []
        failures: list[ImportFailure] = []
        for index, asset in enumerate(assets):
            try:
                self._repository.append(asset)
            except Exception as exc:
                failures.append(ImportFailure(
                    task_index=index,
                    asset_tag=asset.asset_tag,
                    error_type=type(exc).__name__,
                    message=str(exc),
                ))
                logger.warning("asset_append_failed", extra={
                    "task_index": index,
                    "asset_tag": asset.asset_tag,
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                })
                continue
            created.append(asset)

        logger.info("import_committed", extra={
            "created_count": len(created),
            "failed_count": len(failures),
        })
        return ImportOutcome(
            invoice_number=invoice_number,
            created=tuple(created),
            failures=tuple(failures),
        )
