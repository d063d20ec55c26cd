from dataclasses import replace
from datetime import date

import numpy as np
import pandas as pd
import pytest

from conftest import (
    DSC_CURVE_NAME,
    DSC_QUOTES,
    FWD_CURVE_NAME,
    FWD_QUOTES,
    VALUATION_DATE,
    usd_discount_group,
    usd_forward_group,
)
from ficcalib.calibration import CalibrationMeasures
from ficcalib.conventions import USD_FED_FUND, USD_LIBOR_3M, BuySell
from ficcalib.curves import CurveParameterSize
from ficcalib.instruments import IborFixingDepositTemplate
from ficcalib.market import MarketData
from ficcalib.pricing import (
    DiscountingIborFixingDepositPricer,
    DiscountingSwapPricer,
    FiniteDifferenceSensitivityCalculator,
    ImmutableRatesProvider,
    MissingFixingError,
)

ORDER = [CurveParameterSize(DSC_CURVE_NAME, 6), CurveParameterSize(FWD_CURVE_NAME, 6)]


def two_curve_provider(time_series=None):
    dsc = usd_discount_group().curve_definitions[0].curve(
        VALUATION_DATE, [0.0012, 0.0016, 0.0027, 0.0056, 0.0121, 0.0190]
    )
    fwd = usd_forward_group().curve_definitions[0].curve(
        VALUATION_DATE, [0.0031, 0.0041, 0.0052, 0.0081, 0.0152, 0.0223]
    )
    return ImmutableRatesProvider(
        VALUATION_DATE,
        discount_curves={"USD": dsc},
        index_curves={USD_LIBOR_3M: fwd, USD_FED_FUND: dsc},
        time_series=time_series,
    )


def all_trades():
    market_data = MarketData.of(VALUATION_DATE, {**DSC_QUOTES, **FWD_QUOTES})
    return (
        usd_discount_group().trades(VALUATION_DATE, market_data)
        + usd_forward_group().trades(VALUATION_DATE, market_data)
    )


TRADES = all_trades()
TRADE_IDS = [f"{type(t).__name__}-{t.end_date}" for t in TRADES]
PRICERS = CalibrationMeasures.present_value()


@pytest.mark.parametrize("trade", TRADES, ids=TRADE_IDS)
def test_present_value_is_zero_at_par(trade):
    provider = two_curve_provider()
    pricer = PRICERS.measure(trade).pricer
    par = pricer.par_rate(trade, provider)
    assert pricer.par_spread(trade, provider) == pytest.approx(par - _fixed_rate(trade))
    at_par = _with_rate(trade, par)
    assert pricer.present_value(at_par, provider) == pytest.approx(0.0, abs=1e-12)
    assert pricer.par_spread(at_par, provider) == pytest.approx(0.0, abs=1e-14)


@pytest.mark.parametrize("trade", TRADES, ids=TRADE_IDS)
def test_present_value_sensitivity_matches_finite_difference(trade):
    provider = two_curve_provider()
    pricer = PRICERS.measure(trade).pricer
    analytic = provider.parameter_sensitivity(pricer.present_value_sensitivity(trade, provider))
    numeric = FiniteDifferenceSensitivityCalculator(1e-7).sensitivity(
        provider, lambda p: pricer.present_value(trade, p)
    )
    np.testing.assert_allclose(analytic.to_array(ORDER), numeric.to_array(ORDER), atol=1e-6)


@pytest.mark.parametrize("trade", TRADES, ids=TRADE_IDS)
def test_par_spread_sensitivity_matches_finite_difference(trade):
    provider = two_curve_provider()
    pricer = PRICERS.measure(trade).pricer
    analytic = provider.parameter_sensitivity(pricer.par_spread_sensitivity(trade, provider))
    numeric = FiniteDifferenceSensitivityCalculator(1e-7).sensitivity(
        provider, lambda p: pricer.par_spread(trade, p)
    )
    np.testing.assert_allclose(analytic.to_array(ORDER), numeric.to_array(ORDER), atol=1e-6)


def test_swap_annuity_and_sign():
    provider = two_curve_provider()
    pricer = DiscountingSwapPricer()
    trade = TRADES[-1]
    annuity = pricer.annuity(trade, provider)
    assert 8.0 < annuity < 10.0
    bumped = _with_rate(trade, trade.fixed_rate + 0.0001)
    # BUY pays fixed
    assert pricer.present_value(bumped, provider) - pricer.present_value(trade, provider) == (
        pytest.approx(-0.0001 * annuity)
    )


def test_missing_past_fixing_raises():
    provider = two_curve_provider()
    trade = IborFixingDepositTemplate(USD_LIBOR_3M).to_trade(date(2015, 7, 1), BuySell.BUY, 1.0, 0.003)
    assert trade.fixing_date < VALUATION_DATE
    with pytest.raises(MissingFixingError, match="USD-LIBOR-3M"):
        DiscountingIborFixingDepositPricer().par_rate(trade, provider)


def test_valuation_date_fixing_is_forecast_when_absent():
    provider = two_curve_provider()
    trade = TRADES[6]
    assert trade.fixing_date == VALUATION_DATE
    pricer = DiscountingIborFixingDepositPricer()
    assert pricer.par_rate(trade, provider) != 0.005
    assert len(pricer.par_spread_sensitivity(trade, provider)) == 2


def test_known_fixing_is_used():
    past = IborFixingDepositTemplate(USD_LIBOR_3M).to_trade(date(2015, 7, 1), BuySell.BUY, 1.0, 0.003)
    series = pd.Series([0.0028, 0.005], index=[past.fixing_date, VALUATION_DATE])
    provider = two_curve_provider({"USD-LIBOR-3M": series})
    pricer = DiscountingIborFixingDepositPricer()
    trade = TRADES[6]
    assert pricer.par_rate(trade, provider) == 0.005
    assert len(pricer.par_spread_sensitivity(trade, provider)) == 0
    assert pricer.par_rate(past, provider) == 0.0028


def test_overnight_rate_compounds_known_fixings():
    series = pd.Series([0.0013, 0.0014], index=[date(2015, 7, 20), VALUATION_DATE])
    provider = two_curve_provider({USD_FED_FUND.name: series})
    start, end = date(2015, 7, 20), date(2015, 7, 23)
    dfs = provider.index_discount_factors(USD_FED_FUND)
    factor = (1 + 0.0013 / 360) * (1 + 0.0014 / 360)
    factor *= dfs.discount_factor(date(2015, 7, 22)) / dfs.discount_factor(end)
    assert provider.overnight_rate(USD_FED_FUND, start, end) == pytest.approx((factor - 1) / (3 / 360))
    points = provider.overnight_rate_sensitivity(USD_FED_FUND, start, end)
    assert {p.date for p in points} == {date(2015, 7, 22), end}


class TestProvider:
    def test_lookups(self):
        provider = two_curve_provider()
        assert set(provider.curves) == {DSC_CURVE_NAME, FWD_CURVE_NAME}
        assert provider.discount_factors("USD").curve_name == DSC_CURVE_NAME
        assert provider.index_discount_factors("USD-LIBOR-3M").curve_name == FWD_CURVE_NAME
        with pytest.raises(ValueError):
            provider.discount_factors("EUR")
        with pytest.raises(ValueError):
            provider.curve("EUR-ESTR-OIS")

    def test_with_curve_replaces_every_role(self):
        provider = two_curve_provider()
        dsc = provider.curve(DSC_CURVE_NAME)
        shifted = provider.with_curve(dsc.shift_parallel(0.001))
        assert shifted.discount_curves["USD"] is shifted.index_curves["USD-FED-FUND"]
        assert provider.curve(DSC_CURVE_NAME) is dsc
        assert shifted.curve(FWD_CURVE_NAME) is provider.curve(FWD_CURVE_NAME)

    def test_with_curves_keeps_fixings(self):
        series = pd.Series([0.005], index=[VALUATION_DATE])
        provider = ImmutableRatesProvider(VALUATION_DATE, time_series={"USD-LIBOR-3M": series})
        extended = provider.with_curves(index_curves={USD_LIBOR_3M: two_curve_provider().curve(FWD_CURVE_NAME)})
        assert extended.fixing(USD_LIBOR_3M, VALUATION_DATE) == 0.005
        assert list(extended.index_curves) == ["USD-LIBOR-3M"]
        assert provider.index_curves == {}

    def test_curve_names_must_be_unique(self):
        dsc = two_curve_provider().curve(DSC_CURVE_NAME)
        with pytest.raises(ValueError, match="share the name"):
            ImmutableRatesProvider(
                VALUATION_DATE,
                discount_curves={"USD": dsc},
                index_curves={"USD-FED-FUND": dsc.shift_parallel(0.001)},
            )


def _fixed_rate(trade):
    return getattr(trade, "fixed_rate", getattr(trade, "rate", None))


def _with_rate(trade, rate):
    field = "fixed_rate" if hasattr(trade, "fixed_rate") else "rate"
    return replace(trade, **{field: rate})
