"""
Tests for the Import Planner.

Covers:
- One task per selected unit, in invoice line order
- Ignored quantities per line
- Freight added to the unit purchase value
- Rejection of invalid selections (never clamped)
- Empty selections
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from asset_ingestion.domain.types import InvoiceDocument, InvoiceProduct
from asset_ingestion.services.planner import ImportPlanner
from asset_kernel.domain.values import Money
from asset_kernel.exceptions import EmptySelectionError, ValidationError


def _brl(amount) -> Money:
    return Money.of(str(amount), "BRL")


def _product(description, quantity, unit_value) -> InvoiceProduct:
    quantity = Decimal(str(quantity))
    return InvoiceProduct(
        description=description,
        quantity=quantity,
        unit_value=_brl(unit_value),
        total_value=_brl(Decimal(str(unit_value)) * quantity),
    )


def _document(*products, emission=datetime(2024, 3, 10, 14, 30)) -> InvoiceDocument:
    return InvoiceDocument(
        supplier_cnpj="12345678000190",
        supplier_name="Tech Distribuidora Ltda",
        invoice_number="000123",
        emission_date=emission,
        total_value=_brl(sum((p.total_value.amount for p in products), Decimal("0"))),
        freight_value=Money.zero("BRL"),
        products=tuple(products),
    )


class TestExpansion:

    def setup_method(self):
        self.planner = ImportPlanner()

    def test_partial_selection_expands_selected_units(self):
        document = _document(_product("Chair", 10, 250))

        plan = self.planner.plan(document, {0: 3})

        assert plan.task_count == 3
        assert plan.ignored_by_line == {0: Decimal("7")}

    def test_tasks_copy_invoice_facts(self):
        supplier_id = uuid4()
        document = _document(_product("Chair", 2, 250))

        plan = self.planner.plan(document, {0: 1}, supplier_id=supplier_id)

        task = plan.tasks[0]
        assert task.line_index == 0
        assert task.source_description == "Chair"
        assert task.purchase_value == _brl(250)
        assert task.invoice_number == "000123"
        assert task.purchase_date == date(2024, 3, 10)
        assert task.supplier_id == supplier_id
        assert plan.supplier_id == supplier_id

    def test_tasks_follow_invoice_line_order(self):
        document = _document(_product("Chair", 2, 250), _product("Desk", 3, 900))

        plan = self.planner.plan(document, {1: 2, 0: 1})

        assert [t.line_index for t in plan.tasks] == [0, 1, 1]

    def test_unselected_lines_fully_ignored(self):
        document = _document(_product("Chair", 2, 250), _product("Desk", 3, 900))

        plan = self.planner.plan(document, {1: 3})

        assert plan.ignored_by_line == {0: Decimal("2"), 1: Decimal("0")}
        assert plan.lines[0].selected_quantity == 0

    def test_freight_added_to_unit_value(self):
        document = _document(_product("Chair", 3, 100), _product("Desk", 7, 100))

        plan = self.planner.plan(document, {0: 2}, per_unit_freight=[_brl(5), _brl(5)])

        assert all(t.purchase_value == _brl(105) for t in plan.tasks)
        assert plan.lines[0].unit_purchase_value == _brl(105)

    def test_full_precision_freight_kept(self):
        document = _document(_product("Chair", 3, 100))
        share = _brl(50) / Decimal(3)

        plan = self.planner.plan(document, {0: 1}, per_unit_freight=[share])

        assert plan.tasks[0].purchase_value == _brl(100) + share

    def test_fractional_quantity_allows_whole_units(self):
        document = _document(_product("Cable", "2.5", 10))

        plan = self.planner.plan(document, {0: 2})

        assert plan.task_count == 2
        assert plan.ignored_by_line == {0: Decimal("0.5")}

    def test_missing_emission_date_leaves_task_date_empty(self):
        document = _document(_product("Chair", 1, 250), emission=None)

        plan = self.planner.plan(document, {0: 1})

        assert plan.tasks[0].purchase_date is None

    def test_plan_logged(self, captured_logs):
        self.planner.plan(_document(_product("Chair", 10, 250)), {0: 3})
        planned = [r for r in captured_logs() if r["message"] == "import_planned"]
        assert planned and planned[0]["task_count"] == 3


class TestSelectionRejection:

    def setup_method(self):
        self.planner = ImportPlanner()
        self.document = _document(_product("Chair", 10, 250), _product("Desk", 3, 900))

    def test_more_than_invoiced_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            self.planner.plan(self.document, {0: 11})
        assert exc_info.value.row_indexes == (0,)
        assert exc_info.value.errors[0].details == {"selected": 11, "maximum": 10}

    def test_negative_rejected(self):
        with pytest.raises(ValidationError):
            self.planner.plan(self.document, {1: -1})

    def test_above_fractional_floor_rejected(self):
        document = _document(_product("Cable", "2.5", 10))
        with pytest.raises(ValidationError):
            self.planner.plan(document, {0: 3})

    def test_unknown_line_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            self.planner.plan(self.document, {5: 1})
        assert exc_info.value.errors[0].field == "line_index"

    def test_non_integer_rejected(self):
        with pytest.raises(ValidationError):
            self.planner.plan(self.document, {0: Decimal("1.5")})

    def test_boolean_rejected(self):
        with pytest.raises(ValidationError):
            self.planner.plan(self.document, {0: True})

    @pytest.mark.parametrize("index", [True, False])
    def test_boolean_line_index_rejected(self, index):
        with pytest.raises(ValidationError) as exc_info:
            self.planner.plan(self.document, {index: 1})
        assert exc_info.value.errors[0].field == "line_index"

    def test_freight_length_mismatch_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            self.planner.plan(self.document, {0: 1}, per_unit_freight=[_brl(5)])
        assert exc_info.value.errors[0].field == "per_unit_freight"

    def test_every_bad_line_reported(self):
        with pytest.raises(ValidationError) as exc_info:
            self.planner.plan(self.document, {0: 11, 1: 4})
        assert exc_info.value.row_indexes == (0, 1)


class TestEmptySelection:

    def setup_method(self):
        self.planner = ImportPlanner()

    def test_zero_units_selected(self):
        document = _document(_product("Chair", 10, 250))
        with pytest.raises(EmptySelectionError) as exc_info:
            self.planner.plan(document, {0: 0})
        assert exc_info.value.invoice_number == "000123"

    def test_no_selection_at_all(self):
        with pytest.raises(EmptySelectionError):
            self.planner.plan(_document(_product("Chair", 10, 250)), {})

    def test_invoice_without_products(self):
        with pytest.raises(EmptySelectionError):
            self.planner.plan(_document(), {})
