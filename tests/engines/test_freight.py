"""
Tests for the pro-rata Freight Allocator.

Covers:
- Worked example (line 300 of 1000, freight 50)
- Both proportioning scopes
- Zero guards (disabled, zero freight, zero denominator, zero quantity)
- Conservation of the freight total
"""

from decimal import Decimal

import pytest
from hypothesis import assume, given, settings
from hypothesis import strategies as st

from asset_engines.freight import FreightAllocator, FreightLine, FreightScope
from asset_kernel.domain.values import Money


def _line(value, quantity, selected=0, currency="BRL") -> FreightLine:
    quantity = Decimal(str(quantity))
    return FreightLine(
        line_value=Money.of(str(value), currency),
        unit_value=Money.of(str(Decimal(str(value)) / quantity), currency) if quantity else Money.zero(currency),
        invoice_quantity=quantity,
        selected_quantity=selected,
    )


def _brl(amount) -> Money:
    return Money.of(str(amount), "BRL")


class TestAllInvoiceItems:
    """Denominator is the sum of every line value."""

    def setup_method(self):
        self.allocator = FreightAllocator()
        self.lines = [_line(300, 3, selected=2), _line(700, 7)]

    def test_worked_example_per_unit_share(self):
        result = self.allocator.allocate(_brl(50), self.lines, FreightScope.ALL_INVOICE_ITEMS)
        assert result.per_unit_freight[0] == _brl(5)

    def test_unselected_lines_also_receive_share(self):
        result = self.allocator.allocate(_brl(50), self.lines, FreightScope.ALL_INVOICE_ITEMS)
        assert result.per_unit_freight[1] == _brl(5)
        assert result.line_freight == (_brl(15), _brl(35))

    def test_denominator(self):
        result = self.allocator.allocate(_brl(50), self.lines, FreightScope.ALL_INVOICE_ITEMS)
        assert result.denominator == _brl(1000)
        assert result.total_allocated == _brl(50)


class TestImportedItemsOnly:
    """Denominator is the sum over lines with at least one unit selected."""

    def setup_method(self):
        self.allocator = FreightAllocator()
        self.lines = [_line(300, 3, selected=2), _line(700, 7)]

    def test_selected_line_takes_whole_freight(self):
        result = self.allocator.allocate(_brl(50), self.lines, FreightScope.IMPORTED_ITEMS_ONLY)
        assert result.denominator == _brl(300)
        assert result.line_freight[0] == _brl(50)
        assert result.per_unit_freight[0] == _brl(50) / Decimal(3)

    def test_unselected_line_gets_zero(self):
        result = self.allocator.allocate(_brl(50), self.lines, FreightScope.IMPORTED_ITEMS_ONLY)
        assert result.per_unit_freight[1].is_zero

    def test_nothing_selected_allocates_nothing(self):
        lines = [_line(300, 3), _line(700, 7)]
        result = self.allocator.allocate(_brl(50), lines, FreightScope.IMPORTED_ITEMS_ONLY)
        assert all(share.is_zero for share in result.per_unit_freight)
        assert result.denominator.is_zero


class TestZeroGuards:

    def setup_method(self):
        self.allocator = FreightAllocator()

    def test_disabled_allocation(self):
        lines = [_line(300, 3, selected=3)]
        result = self.allocator.allocate(
            _brl(50), lines, FreightScope.ALL_INVOICE_ITEMS, enabled=False,
        )
        assert result.per_unit_freight == (Money.zero("BRL"),)
        assert result.denominator.is_zero

    def test_zero_freight(self):
        lines = [_line(300, 3), _line(700, 7)]
        result = self.allocator.allocate(Money.zero("BRL"), lines, FreightScope.ALL_INVOICE_ITEMS)
        assert all(share.is_zero for share in result.per_unit_freight)

    def test_zero_denominator(self):
        lines = [_line(0, 3), _line(0, 1)]
        result = self.allocator.allocate(_brl(50), lines, FreightScope.ALL_INVOICE_ITEMS)
        assert all(share.is_zero for share in result.per_unit_freight)

    def test_zero_quantity_line_gets_zero(self):
        lines = [_line(300, 0), _line(700, 7)]
        result = self.allocator.allocate(_brl(50), lines, FreightScope.ALL_INVOICE_ITEMS)
        assert result.per_unit_freight[0].is_zero
        assert result.per_unit_freight[1] == _brl(5)

    def test_no_lines(self):
        result = self.allocator.allocate(_brl(50), [], FreightScope.ALL_INVOICE_ITEMS)
        assert result.per_unit_freight == ()

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValueError, match="Currency mismatch"):
            self.allocator.allocate(
                _brl(50), [_line(100, 1, currency="USD")], FreightScope.ALL_INVOICE_ITEMS,
            )


class TestFreightLogging:

    def test_allocation_logged_and_traced(self, captured_logs):
        FreightAllocator().allocate(_brl(50), [_line(300, 3)], FreightScope.ALL_INVOICE_ITEMS)
        logs = captured_logs()
        assert any(r["message"] == "freight_allocated" for r in logs)
        traces = [r for r in logs if r["message"] == "ASSET_ENGINE_TRACE"]
        assert traces and traces[0]["engine_name"] == "freight"

    def test_skipped_allocation_logged(self, captured_logs):
        FreightAllocator().allocate(
            _brl(50), [_line(300, 3)], FreightScope.ALL_INVOICE_ITEMS, enabled=False,
        )
        assert any(r["message"] == "freight_not_allocated" for r in captured_logs())


# =============================================================================
# Properties
# =============================================================================

line_strategy = st.tuples(
    st.decimals(min_value=Decimal("0.01"), max_value=Decimal("1000000"), places=2),
    st.integers(min_value=1, max_value=500),
    st.integers(min_value=0, max_value=500),
)


class TestFreightProperties:

    @given(
        freight=st.decimals(min_value=Decimal("0.01"), max_value=Decimal("100000"), places=2),
        raw_lines=st.lists(line_strategy, min_size=1, max_size=20),
        scope=st.sampled_from(list(FreightScope)),
    )
    @settings(max_examples=200)
    def test_per_unit_shares_sum_to_freight(self, freight, raw_lines, scope):
        lines = [
            _line(value, quantity, selected=min(selected, quantity))
            for value, quantity, selected in raw_lines
        ]
        if scope == FreightScope.IMPORTED_ITEMS_ONLY:
            assume(any(line.is_selected for line in lines))

        result = FreightAllocator().allocate(_brl(freight), lines, scope)

        total = Money.zero("BRL")
        for line, share in zip(lines, result.per_unit_freight):
            total = total + share * line.invoice_quantity
        assert abs(total.amount - freight) <= Decimal("0.000001")

    @given(
        freight=st.decimals(min_value=Decimal("0"), max_value=Decimal("100000"), places=2),
        raw_lines=st.lists(line_strategy, min_size=1, max_size=10),
    )
    @settings(max_examples=100)
    def test_allocation_is_deterministic(self, freight, raw_lines):
        lines = [_line(v, q, selected=min(s, q)) for v, q, s in raw_lines]
        allocator = FreightAllocator()
        first = allocator.allocate(_brl(freight), lines, FreightScope.ALL_INVOICE_ITEMS)
        second = allocator.allocate(_brl(freight), lines, FreightScope.ALL_INVOICE_ITEMS)
        assert first == second
