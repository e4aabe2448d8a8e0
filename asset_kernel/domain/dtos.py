"""
Data transfer objects shared across the registry.

Pure frozen dataclasses. No ORM, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RowError:
    """
    A single validation failure attached to an input row.

    Contract:
        Carries a machine-readable code, a human-readable message, the
        zero-based row index (None for whole-record checks) and the field
        that failed.

    Non-goals:
        - Does NOT raise -- it IS the error representation. Batches of
          these travel inside ``asset_kernel.exceptions.ValidationError``.
    """

    code: str
    message: str
    row_index: int | None = None
    field: str | None = None
    details: dict[str, Any] | None = None

    def describe(self) -> str:
        """One-line text suitable for a user-facing message."""
        prefix = f"row {self.row_index}: " if self.row_index is not None else ""
        return f"{prefix}{self.message}"
