"""
asset_engines.depreciation -- Straight-line book value of a fixed asset.

Responsibility:
    Derive an asset's current book value from its purchase facts, its
    category's depreciation rule and an as-of date.  The value is computed
    on every read and never stored.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import asset_kernel (domain values, exceptions, logging) and
    sibling engine modules.  Consumed by ``AssetRegistryService``.

Invariants enforced:
    - Decimal-only arithmetic; the result is rounded to currency precision
      (ROUND_HALF_UP) once, at the end.
    - Depreciation never exceeds the depreciable amount, so the value never
      drops below the residual floor (when the depreciable base covers it).
    - Book value is non-increasing in ``as_of``.
    - ``as_of <= purchase_date`` yields the full depreciable base.
    - ``apply_depreciation = False`` freezes the value at
      ``purchase - previously depreciated``.
    - Purity: no clock access; callers pass ``as_of``.

Failure modes:
    - ConfigurationError: category has neither a useful life nor an explicit
      rate.
    - UnsupportedMethodError: category method has no algorithm
      (REDUCING_BALANCE).

Usage:
    from asset_engines.depreciation import DepreciationEngine

    engine = DepreciationEngine()
    value = engine.current_value(asset, category, date(2022, 1, 1))
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Protocol
from uuid import UUID

from asset_engines.periods import elapsed_months, elapsed_years
from asset_engines.tracer import traced_engine
from asset_kernel.domain.values import Money
from asset_kernel.exceptions import ConfigurationError, UnsupportedMethodError
from asset_kernel.logging_config import get_logger

logger = get_logger("engines.depreciation")

_HUNDRED = Decimal("100")
_ONE = Decimal("1")
_ZERO = Decimal("0")


class DepreciationMethod(Enum):
    """Depreciation methods a category may declare."""
    LINEAR = "linear"
    REDUCING_BALANCE = "reducing_balance"  # declared, no algorithm


class DepreciationRateType(Enum):
    """Period an explicit depreciation rate applies to."""
    ANNUAL = "annual"
    MONTHLY = "monthly"


class DepreciableAsset(Protocol):
    """Purchase facts the engine reads from an asset."""

    @property
    def purchase_date(self) -> date: ...

    @property
    def purchase_value(self) -> Money: ...

    @property
    def previously_depreciated_value(self) -> Money: ...

    @property
    def apply_depreciation(self) -> bool: ...


class DepreciationRule(Protocol):
    """Depreciation parameters the engine reads from a category."""

    @property
    def id(self) -> UUID: ...

    @property
    def name(self) -> str: ...

    @property
    def depreciation_method(self) -> DepreciationMethod: ...

    @property
    def useful_life_years(self) -> int | None: ...

    @property
    def residual_value_percentage(self) -> Decimal: ...

    @property
    def depreciation_rate_type(self) -> DepreciationRateType | None: ...

    @property
    def depreciation_rate_value(self) -> Decimal | None: ...


@dataclass(frozen=True)
class EffectiveRate:
    """Percentage depreciated per period, and the period it applies to."""
    percent: Decimal
    period: DepreciationRateType
    explicit: bool


@dataclass(frozen=True)
class AssetValuation:
    """
    Full breakdown of one valuation.

    Guarantees:
        - ``current_value == depreciable_base - elapsed_depreciation``
          (before final rounding).
        - ``rate`` and ``elapsed_periods`` are None for frozen assets.
    """

    as_of: date
    depreciable_base: Money
    residual_floor: Money
    depreciable_amount: Money
    rate: EffectiveRate | None
    elapsed_periods: Decimal | None
    elapsed_depreciation: Money
    current_value: Money

    @property
    def is_frozen(self) -> bool:
        """True when depreciation rules are not applied to the asset."""
        return self.rate is None

    @property
    def is_fully_depreciated(self) -> bool:
        """True when the whole depreciable amount has been absorbed."""
        return (
            not self.is_frozen
            and self.elapsed_depreciation.amount >= self.depreciable_amount.amount
        )


def effective_rate(category: DepreciationRule) -> EffectiveRate:
    """
    Resolve the periodic rate for a category.

    An explicit rate wins over the life-derived one; an explicit rate with
    no rate type is annual.  Otherwise the annual rate is
    ``100 / useful_life_years``.

    Raises:
        ConfigurationError: Neither a rate nor a useful life is set.
    """
    if category.depreciation_rate_value is not None:
        period = category.depreciation_rate_type or DepreciationRateType.ANNUAL
        return EffectiveRate(
            percent=Decimal(category.depreciation_rate_value),
            period=period,
            explicit=True,
        )
    if category.useful_life_years:
        return EffectiveRate(
            percent=_HUNDRED / Decimal(category.useful_life_years),
            period=DepreciationRateType.ANNUAL,
            explicit=False,
        )
    raise ConfigurationError(str(category.id), category.name)


class DepreciationEngine:
    """
    Straight-line depreciation calculator.

    Contract:
        Pure and deterministic: identical (asset, category, as_of) always
        yield the identical value.  No I/O, no database access.
    Non-goals:
        - Does not store the value.
        - Does not implement reducing-balance depreciation.
    """

    def current_value(
        self,
        asset: DepreciableAsset,
        category: DepreciationRule,
        as_of: date,
    ) -> Money:
        """Book value of ``asset`` at ``as_of``, rounded to currency precision."""
        return self.valuate(asset, category, as_of).current_value

    @traced_engine("depreciation", "1.0", fingerprint_fields=("category", "as_of"))
    def valuate(
        self,
        asset: DepreciableAsset,
        category: DepreciationRule,
        as_of: date,
    ) -> AssetValuation:
        """
        Compute the full valuation breakdown of ``asset`` at ``as_of``.

        Raises:
            UnsupportedMethodError: Category method is REDUCING_BALANCE.
            ConfigurationError: Category has no rate and no useful life.
        """
        purchase = asset.purchase_value
        currency = purchase.currency
        previously = asset.previously_depreciated_value
        zero = Money.zero(currency)

        depreciable_base = purchase - previously
        if depreciable_base.is_negative:
            logger.warning("depreciable_base_negative", extra={
                "purchase_value": str(purchase.amount),
                "previously_depreciated_value": str(previously.amount),
            })
            depreciable_base = zero

        if not asset.apply_depreciation:
            return AssetValuation(
                as_of=as_of,
                depreciable_base=depreciable_base,
                residual_floor=zero,
                depreciable_amount=zero,
                rate=None,
                elapsed_periods=None,
                elapsed_depreciation=zero,
                current_value=depreciable_base.round(),
            )

        if category.depreciation_method != DepreciationMethod.LINEAR:
            logger.warning("depreciation_method_unsupported", extra={
                "category_id": str(category.id),
                "method": category.depreciation_method.value,
            })
            raise UnsupportedMethodError(
                str(category.id), category.name, category.depreciation_method.value,
            )

        rate = effective_rate(category)

        residual_floor = purchase * (Decimal(category.residual_value_percentage) / _HUNDRED)
        depreciable_amount = depreciable_base - residual_floor
        if depreciable_amount.is_negative:
            depreciable_amount = zero

        if rate.period == DepreciationRateType.MONTHLY:
            periods = elapsed_months(asset.purchase_date, as_of)
        else:
            periods = elapsed_years(asset.purchase_date, as_of)

        fraction = min(rate.percent * periods / _HUNDRED, _ONE)
        if fraction < _ZERO:
            fraction = _ZERO
        elapsed_depreciation = depreciable_amount * fraction
        current = depreciable_base - elapsed_depreciation

        logger.debug("depreciation_computed", extra={
            "as_of": as_of,
            "rate_percent": str(rate.percent),
            "rate_period": rate.period.value,
            "elapsed_periods": str(periods),
            "current_value": str(current.amount),
        })

        return AssetValuation(
            as_of=as_of,
            depreciable_base=depreciable_base,
            residual_floor=residual_floor,
            depreciable_amount=depreciable_amount,
            rate=rate,
            elapsed_periods=periods,
            elapsed_depreciation=elapsed_depreciation,
            current_value=current.round(),
        )
