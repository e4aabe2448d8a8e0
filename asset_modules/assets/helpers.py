"""
Fixed Assets Helpers (``asset_modules.assets.helpers``).

Responsibility
--------------
Pure functions shared by the registry service and the NF-e import
pipeline: tax id normalization and record validation (category rules,
asset purchase values).  Validators return ``RowError`` lists; callers
decide whether and how to raise.

Architecture position
---------------------
**Modules layer** -- pure helper functions.  No I/O, no session, no
clock, no database access.

Invariants enforced
-------------------
* Tax ids compare on digits only.
* ``previously_depreciated_value <= purchase_value`` whenever depreciation
  applies to the asset.
* All numeric inputs use ``Decimal`` -- NEVER ``float``.
"""

from __future__ import annotations

import re
from decimal import Decimal

from asset_kernel.domain.dtos import RowError
from asset_kernel.domain.values import Money
from asset_kernel.exceptions import NegativeValueError, ValidationError

_NON_DIGITS = re.compile(r"\D")
_HUNDRED = Decimal("100")

NEGATIVE_BOOK_VALUE = NegativeValueError.code
INVALID_FIELD = ValidationError.code


def normalize_tax_id(tax_id: str | None) -> str:
    """Strip every non-digit character ('12.345.678/0001-99' -> '12345678000199')."""
    if not tax_id:
        return ""
    return _NON_DIGITS.sub("", tax_id)


def validate_category_rules(
    *,
    name: str,
    useful_life_years: int | None,
    residual_value_percentage: Decimal,
    depreciation_rate_type: object | None,
    depreciation_rate_value: Decimal | None,
) -> list[RowError]:
    """
    Check a category's depreciation parameters.

    Rules:
        - name has at least 2 characters;
        - residual percentage and explicit rate lie in [0, 100];
        - useful life, when set, lies in [1, 100];
        - rate type and rate value are given together;
        - a useful life or an explicit rate must be present.
    """
    errors: list[RowError] = []

    if len((name or "").strip()) < 2:
        errors.append(RowError(
            code=INVALID_FIELD, field="name",
            message="Category name must have at least 2 characters",
        ))

    if not Decimal("0") <= residual_value_percentage <= _HUNDRED:
        errors.append(RowError(
            code=INVALID_FIELD, field="residual_value_percentage",
            message="Residual value percentage must be between 0 and 100",
        ))

    if useful_life_years is not None and not 1 <= useful_life_years <= 100:
        errors.append(RowError(
            code=INVALID_FIELD, field="useful_life_years",
            message="Useful life must be between 1 and 100 years",
        ))

    if depreciation_rate_value is not None and not (
        Decimal("0") <= depreciation_rate_value <= _HUNDRED
    ):
        errors.append(RowError(
            code=INVALID_FIELD, field="depreciation_rate_value",
            message="Depreciation rate must be between 0 and 100 percent",
        ))

    has_type = depreciation_rate_type is not None
    has_value = depreciation_rate_value is not None
    if has_type != has_value:
        errors.append(RowError(
            code=INVALID_FIELD, field="depreciation_rate_type",
            message="Depreciation rate type and rate value must be given together",
        ))
    elif useful_life_years is None and not has_value:
        errors.append(RowError(
            code=INVALID_FIELD, field="useful_life_years",
            message="Define a useful life or an explicit rate type and value",
        ))

    return errors


def validate_purchase_values(
    purchase_value: Money,
    previously_depreciated_value: Money,
    row_index: int | None = None,
) -> list[RowError]:
    """
    Check the purchase facts of one asset.

    An exceedance of previously depreciated over purchase value is
    reported as NEGATIVE_BOOK_VALUE so callers can raise
    ``NegativeValueError``.
    """
    errors: list[RowError] = []

    if purchase_value.is_negative:
        errors.append(RowError(
            code=INVALID_FIELD, row_index=row_index, field="purchase_value",
            message="Purchase value cannot be negative",
        ))

    if previously_depreciated_value.is_negative:
        errors.append(RowError(
            code=INVALID_FIELD, row_index=row_index,
            field="previously_depreciated_value",
            message="Previously depreciated value cannot be negative",
        ))
    elif previously_depreciated_value > purchase_value:
        errors.append(RowError(
            code=NEGATIVE_BOOK_VALUE, row_index=row_index,
            field="previously_depreciated_value",
            message=(
                f"Previously depreciated value {previously_depreciated_value.amount} "
                f"exceeds purchase value {purchase_value.amount}"
            ),
            details={
                "purchase_value": str(purchase_value.amount),
                "previously_depreciated_value": str(previously_depreciated_value.amount),
            },
        ))

    return errors


def raise_for_errors(errors: list[RowError]) -> None:
    """
    Raise the typed exception matching ``errors`` (no-op when empty).

    All exceedances -> NegativeValueError; anything else -> ValidationError.
    """
    if not errors:
        return
    if all(e.code == NEGATIVE_BOOK_VALUE for e in errors):
        first = errors[0]
        details = first.details or {}
        raise NegativeValueError(
            purchase_value=details.get("purchase_value", ""),
            previously_depreciated_value=details.get("previously_depreciated_value", ""),
            row_index=first.row_index,
            errors=errors,
        )
    raise ValidationError(errors)
