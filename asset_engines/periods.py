"""
asset_engines.periods -- Calendar-anchored elapsed period arithmetic.

Responsibility:
    Measure the time between two calendar dates as a fractional number of
    years or months.  Whole periods are counted by anniversaries of the
    start date; the remainder is the fraction of days elapsed inside the
    next, partially elapsed period.

Architecture position:
    Engines -- pure helper functions, zero I/O.  Used by
    ``asset_engines.depreciation``.

Invariants enforced:
    - Results are ``Decimal`` and never negative.
    - Anniversaries land on whole periods: 2020-01-01 -> 2022-01-01 is
      exactly 2 years, 2020-01-31 -> 2020-02-29 is exactly 1 month.
    - Non-decreasing in ``end`` for a fixed ``start``.

Failure modes:
    (none -- ``end <= start`` yields zero)
"""

from __future__ import annotations

import calendar
from datetime import date
from decimal import Decimal


def add_months(start: date, months: int) -> date:
    """
    Shift ``start`` by a whole number of months.

    A day-of-month missing in the target month falls back to that month's
    last day (Jan 31 + 1 month = Feb 28/29).
    """
    index = start.year * 12 + (start.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(start.day, last_day))


def _elapsed(start: date, end: date, months_per_period: int) -> Decimal:
    if end <= start:
        return Decimal("0")

    month_diff = (end.year - start.year) * 12 + (end.month - start.month)
    whole = month_diff // months_per_period
    anchor = add_months(start, whole * months_per_period)
    if anchor > end:
        whole -= 1
        anchor = add_months(start, whole * months_per_period)

    next_anchor = add_months(start, (whole + 1) * months_per_period)
    span_days = (next_anchor - anchor).days
    into_days = (end - anchor).days
    return Decimal(whole) + Decimal(into_days) / Decimal(span_days)


def elapsed_years(start: date, end: date) -> Decimal:
    """Fractional years from ``start`` to ``end`` (0 when end <= start)."""
    return _elapsed(start, end, 12)


def elapsed_months(start: date, end: date) -> Decimal:
    """Fractional months from ``start`` to ``end`` (0 when end <= start)."""
    return _elapsed(start, end, 1)
