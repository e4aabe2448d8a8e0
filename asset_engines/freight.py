"""
asset_engines.freight -- Pro-rata freight dilution across invoice line units.

Responsibility:
    Spread one invoice freight total across invoice lines proportionally to
    each line's value, then across the units of each line.  The resulting
    per-unit share is added to the unit cost of every asset imported from
    that line.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import asset_kernel/domain/values and sibling engine modules.
    Consumed by ``NFeImportService`` before planning.

Invariants enforced:
    - Conservation: the sum of per-unit shares over every unit of every line
      in the denominator equals the freight total (within rounding epsilon).
    - Full precision: shares are NOT rounded here; rounding happens once, at
      display or persistence.
    - Determinism: identical inputs and scope yield identical shares; the
      allocator holds no state between calls.

Failure modes:
    - ValueError on currency mismatch between freight total and lines.
    - Zero freight, disabled allocation or a zero denominator yield zeros
      rather than an error.

Usage:
    from asset_engines.freight import FreightAllocator, FreightLine, FreightScope

    result = FreightAllocator().allocate(
        freight_total=Money.of("50", "BRL"),
        lines=[FreightLine(line_value=Money.of("300", "BRL"), ...)],
        scope=FreightScope.ALL_INVOICE_ITEMS,
    )
    result.per_unit_freight[0]
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from asset_engines.tracer import traced_engine
from asset_kernel.domain.values import Money
from asset_kernel.logging_config import get_logger

logger = get_logger("engines.freight")


class FreightScope(str, Enum):
    """Which invoice lines form the freight proportioning denominator."""

    ALL_INVOICE_ITEMS = "all_invoice_items"  # every line, selected or not
    IMPORTED_ITEMS_ONLY = "imported_items_only"  # lines with >= 1 unit selected


@dataclass(frozen=True)
class FreightLine:
    """
    One invoice line as seen by the allocator.

    Contract:
        ``line_value`` is the invoice's authoritative line total (never
        recomputed as quantity x unit value).  ``invoice_quantity`` is the
        number of units the line share is spread over;
        ``selected_quantity`` only decides whether the line participates
        under IMPORTED_ITEMS_ONLY.
    """

    line_value: Money
    unit_value: Money
    invoice_quantity: Decimal
    selected_quantity: int = 0

    @property
    def is_selected(self) -> bool:
        return self.selected_quantity > 0


@dataclass(frozen=True)
class FreightAllocation:
    """
    Result of one allocation.

    Guarantees:
        - ``per_unit_freight`` is index-aligned with the input lines.
        - ``denominator`` is the summed line value the shares were
          proportioned against (zero when nothing was allocated).
    """

    freight_total: Money
    scope: FreightScope
    denominator: Money
    per_unit_freight: tuple[Money, ...]
    line_freight: tuple[Money, ...]

    @property
    def total_allocated(self) -> Money:
        """Sum of line shares (equals freight_total unless nothing applied)."""
        total = Money.zero(self.freight_total.currency)
        for share in self.line_freight:
            total = total + share
        return total


class FreightAllocator:
    """
    Proportional freight allocator.

    Contract:
        Pure function of (freight_total, lines, scope, enabled).
        No I/O, no database access.
    Non-goals:
        - Does not round shares.
        - Does not decide whether allocation is enabled; callers pass
          ``enabled`` from ImportSettings.
    """

    @traced_engine("freight", "1.0", fingerprint_fields=("freight_total", "scope", "enabled"))
    def allocate(
        self,
        freight_total: Money,
        lines: Sequence[FreightLine],
        scope: FreightScope,
        enabled: bool = True,
    ) -> FreightAllocation:
        """
        Allocate ``freight_total`` across ``lines``.

        Args:
            freight_total: Invoice freight (shipping) value.
            lines: Every invoice line, in invoice order.
            scope: Denominator strategy.
            enabled: When False every share is zero.

        Returns:
            FreightAllocation with per-unit and per-line shares.
        """
        currency = freight_total.currency
        zero = Money.zero(currency)

        for line in lines:
            if line.line_value.currency != currency:
                raise ValueError(
                    f"Currency mismatch: {line.line_value.currency} vs {currency}"
                )

        participating = [
            scope == FreightScope.ALL_INVOICE_ITEMS or line.is_selected
            for line in lines
        ]

        denominator = zero
        for line, included in zip(lines, participating):
            if included:
                denominator = denominator + line.line_value

        if not enabled or freight_total.is_zero or denominator.is_zero:
            logger.info("freight_not_allocated", extra={
                "freight_total": str(freight_total.amount),
                "enabled": enabled,
                "denominator": str(denominator.amount),
                "line_count": len(lines),
            })
            return FreightAllocation(
                freight_total=freight_total,
                scope=scope,
                denominator=denominator if enabled else zero,
                per_unit_freight=tuple(zero for _ in lines),
                line_freight=tuple(zero for _ in lines),
            )

        per_unit: list[Money] = []
        per_line: list[Money] = []
        for line, included in zip(lines, participating):
            if not included or line.line_value.is_zero or line.invoice_quantity <= 0:
                per_unit.append(zero)
                per_line.append(zero)
                continue
            ratio = line.line_value.amount / denominator.amount
            line_share = freight_total * ratio
            per_line.append(line_share)
            per_unit.append(line_share / Decimal(line.invoice_quantity))

        logger.info("freight_allocated", extra={
            "freight_total": str(freight_total.amount),
            "scope": scope.value,
            "denominator": str(denominator.amount),
            "line_count": len(lines),
            "participating_lines": sum(1 for p in participating if p),
        })

        return FreightAllocation(
            freight_total=freight_total,
            scope=scope,
            denominator=denominator,
            per_unit_freight=tuple(per_unit),
            line_freight=tuple(per_line),
        )
