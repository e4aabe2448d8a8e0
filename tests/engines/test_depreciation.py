"""
Tests for the straight-line Depreciation Engine.

Covers:
- Worked example (1000 bought, 5 years, 10% residual, valued 2 years later)
- Residual floor and fully depreciated assets
- Explicit annual and monthly rates
- Frozen assets and previously depreciated value
- Configuration and unsupported-method errors
- Monotonicity, floor and no-negative-time properties
"""

from datetime import date, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from asset_engines.depreciation import (
    DepreciationEngine,
    DepreciationMethod,
    DepreciationRateType,
    effective_rate,
)
from asset_kernel.domain.values import Money
from asset_kernel.exceptions import ConfigurationError, UnsupportedMethodError, ValuationError
from asset_modules.assets.models import Asset, AssetCategory


def _category(**overrides) -> AssetCategory:
    fields = {
        "id": uuid4(),
        "name": "Computers",
        "useful_life_years": 5,
        "residual_value_percentage": Decimal("10"),
    }
    fields.update(overrides)
    return AssetCategory(**fields)


def _asset(
    purchase_value="1000",
    previously="0",
    purchase_date=date(2020, 1, 1),
    apply_depreciation=True,
    category_id=None,
) -> Asset:
    return Asset(
        id=uuid4(),
        name="Notebook",
        asset_tag="PAT-0001",
        category_id=category_id or uuid4(),
        supplier_id=uuid4(),
        purchase_date=purchase_date,
        purchase_value=Money.of(purchase_value, "BRL"),
        previously_depreciated_value=Money.of(previously, "BRL"),
        apply_depreciation=apply_depreciation,
    )


class TestWorkedExample:
    """1000 bought 2020-01-01, life 5y, residual 10%, valued 2022-01-01."""

    def setup_method(self):
        self.engine = DepreciationEngine()
        self.valuation = self.engine.valuate(_asset(), _category(), date(2022, 1, 1))

    def test_depreciable_amount(self):
        assert self.valuation.depreciable_amount == Money.of("900", "BRL")

    def test_residual_floor(self):
        assert self.valuation.residual_floor == Money.of("100", "BRL")

    def test_life_derived_annual_rate(self):
        assert self.valuation.rate.percent == Decimal("20")
        assert self.valuation.rate.period == DepreciationRateType.ANNUAL
        assert self.valuation.rate.explicit is False

    def test_anniversary_is_whole_years(self):
        assert self.valuation.elapsed_periods == Decimal("2")

    def test_elapsed_depreciation(self):
        assert self.valuation.elapsed_depreciation == Money.of("360", "BRL")

    def test_current_value_is_base_minus_elapsed(self):
        """Book value is the depreciable base less elapsed depreciation."""
        assert self.valuation.current_value == Money.of("640.00", "BRL")

    def test_current_value_shortcut_matches_valuation(self):
        value = self.engine.current_value(_asset(), _category(), date(2022, 1, 1))
        assert value == Money.of("640", "BRL")


class TestLinearDepreciation:
    """Timeline behavior of straight-line depreciation."""

    def setup_method(self):
        self.engine = DepreciationEngine()
        self.category = _category()

    def test_value_on_purchase_date_is_base(self):
        value = self.engine.current_value(_asset(), self.category, date(2020, 1, 1))
        assert value == Money.of("1000", "BRL")

    def test_value_before_purchase_date_is_base(self):
        valuation = self.engine.valuate(_asset(), self.category, date(2019, 6, 1))
        assert valuation.elapsed_periods == Decimal("0")
        assert valuation.current_value == Money.of("1000", "BRL")

    def test_partial_year_uses_day_fraction(self):
        # 2020 is a leap year: 182 of 366 days elapsed by July 1st.
        valuation = self.engine.valuate(_asset(), self.category, date(2020, 7, 1))
        assert valuation.elapsed_periods == Decimal(182) / Decimal(366)
        assert Money.of("900", "BRL") < valuation.current_value < Money.of("1000", "BRL")

    def test_end_of_life_reaches_residual_floor(self):
        valuation = self.engine.valuate(_asset(), self.category, date(2025, 1, 1))
        assert valuation.current_value == Money.of("100", "BRL")
        assert valuation.is_fully_depreciated

    def test_value_never_drops_below_floor_after_end_of_life(self):
        value = self.engine.current_value(_asset(), self.category, date(2040, 1, 1))
        assert value == Money.of("100", "BRL")

    def test_zero_residual_depreciates_to_zero(self):
        category = _category(residual_value_percentage=Decimal("0"))
        value = self.engine.current_value(_asset(), category, date(2026, 1, 1))
        assert value.is_zero

    def test_previously_depreciated_reduces_base(self):
        # base 700, floor 100, depreciable 600, 40% elapsed -> 240
        valuation = self.engine.valuate(
            _asset(previously="300"), self.category, date(2022, 1, 1),
        )
        assert valuation.depreciable_base == Money.of("700", "BRL")
        assert valuation.depreciable_amount == Money.of("600", "BRL")
        assert valuation.current_value == Money.of("460", "BRL")

    def test_base_below_floor_is_not_depreciated(self):
        valuation = self.engine.valuate(
            _asset(previously="950"), self.category, date(2022, 1, 1),
        )
        assert valuation.depreciable_amount.is_zero
        assert valuation.current_value == Money.of("50", "BRL")

    def test_result_rounded_half_up_to_currency_precision(self):
        category = _category(useful_life_years=3, residual_value_percentage=Decimal("0"))
        value = self.engine.current_value(_asset(), category, date(2021, 1, 1))
        assert value.amount == Decimal("666.67")

    def test_deterministic(self):
        first = self.engine.valuate(_asset(), self.category, date(2023, 5, 17))
        second = self.engine.valuate(_asset(), self.category, date(2023, 5, 17))
        assert first == second


class TestExplicitRates:
    """Explicit depreciation rates take precedence over useful life."""

    def setup_method(self):
        self.engine = DepreciationEngine()

    def test_explicit_annual_rate_wins_over_life(self):
        category = _category(
            useful_life_years=10,
            residual_value_percentage=Decimal("0"),
            depreciation_rate_type=DepreciationRateType.ANNUAL,
            depreciation_rate_value=Decimal("25"),
        )
        value = self.engine.current_value(_asset(), category, date(2022, 1, 1))
        assert value == Money.of("500", "BRL")

    def test_rate_without_type_is_annual(self):
        category = _category(
            useful_life_years=None,
            depreciation_rate_value=Decimal("10"),
        )
        rate = effective_rate(category)
        assert rate.period == DepreciationRateType.ANNUAL
        assert rate.explicit is True

    def test_monthly_rate_counts_months(self):
        category = _category(
            useful_life_years=None,
            residual_value_percentage=Decimal("0"),
            depreciation_rate_type=DepreciationRateType.MONTHLY,
            depreciation_rate_value=Decimal("2"),
        )
        valuation = self.engine.valuate(
            _asset(purchase_value="1200", purchase_date=date(2023, 1, 15)),
            category,
            date(2023, 7, 15),
        )
        assert valuation.elapsed_periods == Decimal("6")
        assert valuation.elapsed_depreciation == Money.of("144", "BRL")
        assert valuation.current_value == Money.of("1056", "BRL")

    def test_monthly_rate_caps_at_depreciable_amount(self):
        category = _category(
            useful_life_years=None,
            depreciation_rate_type=DepreciationRateType.MONTHLY,
            depreciation_rate_value=Decimal("5"),
        )
        value = self.engine.current_value(_asset(), category, date(2030, 1, 1))
        assert value == Money.of("100", "BRL")

    def test_zero_rate_keeps_base(self):
        category = _category(
            useful_life_years=None,
            depreciation_rate_type=DepreciationRateType.ANNUAL,
            depreciation_rate_value=Decimal("0"),
        )
        value = self.engine.current_value(_asset(), category, date(2030, 1, 1))
        assert value == Money.of("1000", "BRL")


class TestFrozenAssets:
    """Assets with depreciation disabled keep purchase less prior depreciation."""

    def setup_method(self):
        self.engine = DepreciationEngine()

    def test_frozen_value_ignores_time(self):
        asset = _asset(previously="200", apply_depreciation=False)
        for as_of in (date(2020, 1, 1), date(2022, 1, 1), date(2050, 1, 1)):
            assert self.engine.current_value(asset, _category(), as_of) == Money.of("800", "BRL")

    def test_frozen_valuation_has_no_rate(self):
        valuation = self.engine.valuate(
            _asset(apply_depreciation=False), _category(), date(2022, 1, 1),
        )
        assert valuation.is_frozen
        assert valuation.rate is None
        assert not valuation.is_fully_depreciated

    def test_frozen_asset_valued_under_misconfigured_category(self):
        category = _category(useful_life_years=None)
        value = self.engine.current_value(
            _asset(apply_depreciation=False), category, date(2022, 1, 1),
        )
        assert value == Money.of("1000", "BRL")


class TestValuationErrors:
    """Category problems surface as typed valuation errors."""

    def setup_method(self):
        self.engine = DepreciationEngine()

    def test_no_life_and_no_rate_is_configuration_error(self):
        category = _category(name="Furniture", useful_life_years=None)
        with pytest.raises(ConfigurationError) as exc_info:
            self.engine.current_value(_asset(), category, date(2022, 1, 1))
        assert exc_info.value.category_name == "Furniture"
        assert exc_info.value.category_id == str(category.id)
        assert exc_info.value.code == "CATEGORY_CONFIGURATION_ERROR"

    def test_reducing_balance_is_unsupported(self):
        category = _category(depreciation_method=DepreciationMethod.REDUCING_BALANCE)
        with pytest.raises(UnsupportedMethodError) as exc_info:
            self.engine.current_value(_asset(), category, date(2022, 1, 1))
        assert exc_info.value.method == "reducing_balance"
        assert isinstance(exc_info.value, ValuationError)

    def test_negative_base_clamped_and_logged(self, captured_logs):
        valuation = self.engine.valuate(
            _asset(previously="1200"), _category(), date(2022, 1, 1),
        )
        assert valuation.depreciable_base.is_zero
        assert valuation.current_value.is_zero
        assert any(r["message"] == "depreciable_base_negative" for r in captured_logs())


# =============================================================================
# Properties
# =============================================================================

amounts = st.decimals(
    min_value=Decimal("0"), max_value=Decimal("10000000"),
    places=2, allow_nan=False, allow_infinity=False,
)
purchase_dates = st.dates(min_value=date(2000, 1, 1), max_value=date(2030, 12, 31))
lives = st.integers(min_value=1, max_value=50)
residuals = st.integers(min_value=0, max_value=100).map(Decimal)


class TestDepreciationProperties:

    @given(
        purchase=amounts,
        life=lives,
        residual=residuals,
        purchase_date=purchase_dates,
        offset_a=st.integers(min_value=-400, max_value=20000),
        offset_b=st.integers(min_value=-400, max_value=20000),
    )
    @settings(max_examples=200)
    def test_value_never_increases_over_time(
        self, purchase, life, residual, purchase_date, offset_a, offset_b,
    ):
        engine = DepreciationEngine()
        category = _category(useful_life_years=life, residual_value_percentage=residual)
        asset = _asset(purchase_value=str(purchase), purchase_date=purchase_date)
        earlier = purchase_date + timedelta(days=min(offset_a, offset_b))
        later = purchase_date + timedelta(days=max(offset_a, offset_b))

        assert engine.current_value(asset, category, earlier) >= engine.current_value(
            asset, category, later,
        )

    @given(
        purchase=amounts,
        share=st.integers(min_value=0, max_value=100),
        life=lives,
        residual=residuals,
        days=st.integers(min_value=0, max_value=30000),
    )
    @settings(max_examples=200)
    def test_value_stays_between_floor_and_base(self, purchase, share, life, residual, days):
        engine = DepreciationEngine()
        previously = (purchase * Decimal(share) / Decimal(100)).quantize(Decimal("0.01"))
        category = _category(useful_life_years=life, residual_value_percentage=residual)
        asset = _asset(purchase_value=str(purchase), previously=str(previously))

        valuation = engine.valuate(asset, category, date(2020, 1, 1) + timedelta(days=days))

        lower = min(valuation.depreciable_base, valuation.residual_floor).round()
        assert lower <= valuation.current_value <= valuation.depreciable_base.round()

    @given(
        purchase=amounts,
        life=lives,
        residual=residuals,
        days_before=st.integers(min_value=0, max_value=5000),
    )
    @settings(max_examples=100)
    def test_no_depreciation_before_purchase(self, purchase, life, residual, days_before):
        engine = DepreciationEngine()
        category = _category(useful_life_years=life, residual_value_percentage=residual)
        asset = _asset(purchase_value=str(purchase))

        value = engine.current_value(asset, category, date(2020, 1, 1) - timedelta(days=days_before))

        assert value == Money.of(purchase, "BRL").round()

    @given(purchase=amounts, previously=amounts, days=st.integers(min_value=0, max_value=30000))
    @settings(max_examples=100)
    def test_frozen_value_is_constant(self, purchase, previously, days):
        engine = DepreciationEngine()
        asset = _asset(
            purchase_value=str(purchase), previously=str(previously), apply_depreciation=False,
        )
        value = engine.current_value(asset, _category(), date(2020, 1, 1) + timedelta(days=days))
        assert value == max(Money.of(purchase - previously, "BRL"), Money.zero("BRL")).round()
