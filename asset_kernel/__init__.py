"""
Asset Kernel

Foundation layer for the fixed-asset registry:
- Money/Currency value objects (Decimal only, never float)
- Injectable clock for deterministic valuation
- Typed exception hierarchy with machine-readable codes
- Structured JSON logging
- SQLAlchemy declarative base and session management
"""

__version__ = "0.1.0"
