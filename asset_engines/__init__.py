"""
Module: asset_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  The canonical import surface for higher layers
    (asset_modules, asset_ingestion).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import asset_kernel (domain values, exceptions, logging).
    MUST NOT import asset_modules or asset_ingestion.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Dates are passed in as explicit parameters.
    - Decimal-only arithmetic; floats are forbidden.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from asset_engines import DepreciationEngine, FreightAllocator, FreightScope
"""

from asset_engines.depreciation import (
    AssetValuation,
    DepreciationEngine,
    DepreciationMethod,
    DepreciationRateType,
    EffectiveRate,
    effective_rate,
)
from asset_engines.freight import (
    FreightAllocation,
    FreightAllocator,
    FreightLine,
    FreightScope,
)
from asset_engines.periods import add_months, elapsed_months, elapsed_years
from asset_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    # Depreciation
    "DepreciationEngine",
    "DepreciationMethod",
    "DepreciationRateType",
    "AssetValuation",
    "EffectiveRate",
    "effective_rate",
    # Freight
    "FreightAllocator",
    "FreightAllocation",
    "FreightLine",
    "FreightScope",
    # Periods
    "add_months",
    "elapsed_years",
    "elapsed_months",
    # Tracing
    "traced_engine",
    "compute_input_fingerprint",
]
