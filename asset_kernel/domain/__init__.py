"""
Pure domain layer.

Value objects and DTOs with NO dependencies on the ORM, the database or I/O
(SystemClock aside). All domain objects are immutable and deterministic.
"""

from asset_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from asset_kernel.domain.currency import CurrencyInfo, CurrencyRegistry
from asset_kernel.domain.dtos import RowError
from asset_kernel.domain.values import Currency, Money

__all__ = [
    "Clock",
    "SystemClock",
    "DeterministicClock",
    "CurrencyInfo",
    "CurrencyRegistry",
    "Currency",
    "Money",
    "RowError",
]
