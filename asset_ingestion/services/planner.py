"""
Import planner: expand selected invoice lines into one task per unit.

Contract:
    plan(document, selected_quantities, per_unit_freight) produces exactly
    ``selected_quantity`` tasks per line, in invoice line order, each priced
    at ``unit_value + per_unit_freight[line]``.  The rest of the line's
    quantity is reported as ignored.

Invariants:
    - Out-of-range selections are rejected, never clamped.
    - The selectable maximum of a line is its whole-unit quantity.
    - A plan with zero tasks is an error (EmptySelectionError).

Architecture: asset_ingestion/services. Pure: no I/O, no storage.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from uuid import UUID

from asset_kernel.domain.dtos import RowError
from asset_kernel.domain.values import Money
from asset_kernel.exceptions import EmptySelectionError, ValidationError
from asset_kernel.logging_config import get_logger
from asset_modules.assets.helpers import INVALID_FIELD

from asset_ingestion.domain.types import (
    ImportPlan,
    ImportPreparationTask,
    InvoiceDocument,
    LinePlan,
)

logger = get_logger("ingestion.planner")


class ImportPlanner:
    """Stateless expander of invoice lines into import tasks."""

    def plan(
        self,
        document: InvoiceDocument,
        selected_quantities: Mapping[int, int],
        per_unit_freight: Sequence[Money] | None = None,
        supplier_id: UUID | None = None,
    ) -> ImportPlan:
        """
        Expand the selection into tasks.

        Args:
            document: The parsed invoice.
            selected_quantities: line index -> units to import; lines not
                present import nothing.
            per_unit_freight: Freight share per unit, index-aligned with
                ``document.products``; None means no freight.
            supplier_id: Resolved supplier, copied onto every task.

        Raises:
            ValidationError: Unknown line index, non-integer or out-of-range
                selection, or a freight list of the wrong length.
            EmptySelectionError: Nothing selected.
        """
        products = document.products
        currency = document.total_value.currency
        freight = (
            tuple(per_unit_freight)
            if per_unit_freight is not None
            else tuple(Money.zero(currency) for _ in products)
        )

        errors = self._validate_selection(document, selected_quantities)
        if len(freight) != len(products):
            errors.append(RowError(
                code=INVALID_FIELD, field="per_unit_freight",
                message=(
                    f"Freight shares cover {len(freight)} lines; "
                    f"invoice has {len(products)}"
                ),
            ))
        if errors:
            logger.warning("import_plan_rejected", extra={
                "invoice_number": document.invoice_number,
                "error_count": len(errors),
            })
            raise ValidationError(errors)

        tasks: list[ImportPreparationTask] = []
        lines: list[LinePlan] = []
        for index, product in enumerate(products):
            selected = selected_quantities.get(index, 0)
            unit_price = product.unit_value + freight[index]
            for _ in range(selected):
                tasks.append(ImportPreparationTask(
                    line_index=index,
                    source_description=product.description,
                    purchase_value=unit_price,
                    invoice_number=document.invoice_number,
                    purchase_date=document.purchase_date,
                    supplier_id=supplier_id,
                ))
            lines.append(LinePlan(
                line_index=index,
                description=product.description,
                invoice_quantity=product.quantity,
                selected_quantity=selected,
                ignored_quantity=product.quantity - selected,
                unit_value=product.unit_value,
                freight_per_unit=freight[index],
            ))

        if not tasks:
            logger.warning("import_plan_empty", extra={
                "invoice_number": document.invoice_number,
            })
            raise EmptySelectionError(document.invoice_number)

        logger.info("import_planned", extra={
            "invoice_number": document.invoice_number,
            "task_count": len(tasks),
            "line_count": len(products),
            "selected_lines": sum(1 for line in lines if line.selected_quantity),
        })
        return ImportPlan(
            invoice_number=document.invoice_number,
            tasks=tuple(tasks),
            lines=tuple(lines),
            supplier_id=supplier_id,
        )

    @staticmethod
    def _validate_selection(
        document: InvoiceDocument,
        selected_quantities: Mapping[int, int],
    ) -> list[RowError]:
        errors: list[RowError] = []
        line_count = len(document.products)
        for index, selected in selected_quantities.items():
            if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < line_count:
                errors.append(RowError(
                    code=INVALID_FIELD, row_index=None, field="line_index",
                    message=f"Invoice has no line {index!r}",
                ))
                continue
            if isinstance(selected, bool) or not isinstance(selected, int):
                errors.append(RowError(
                    code=INVALID_FIELD, row_index=index, field="selected_quantity",
                    message=f"Selected quantity must be a whole number, got {selected!r}",
                ))
                continue
            maximum = document.products[index].selectable_units
            if not 0 <= selected <= maximum:
                errors.append(RowError(
                    code=INVALID_FIELD, row_index=index, field="selected_quantity",
                    message=f"Selected quantity {selected} is outside 0..{maximum}",
                    details={"selected": selected, "maximum": maximum},
                ))
        return errors
