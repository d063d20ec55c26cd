"""Shared fixtures: the USD single curve and the two-group OIS plus LIBOR setup."""

from datetime import date

import pytest

from ficcalib.calibration import CalibrationMeasures, CurveCalibrator
from ficcalib.conventions import ACT_365F, USD_FED_FUND, USD_LIBOR_3M
from ficcalib.curves import ValueType
from ficcalib.curves.definition import (
    CurveGroupDefinition,
    CurveGroupEntry,
    FixedIborSwapCurveNode,
    FixedOvernightSwapCurveNode,
    FraCurveNode,
    IborFixingDepositCurveNode,
    InterpolatedCurveDefinition,
    TermDepositCurveNode,
)
from ficcalib.instruments import (
    USD_DEPOSIT_T2,
    USD_FIXED_1Y_FED_FUND_OIS,
    USD_FIXED_6M_LIBOR_3M,
    FixedIborSwapTemplate,
    FixedOvernightSwapTemplate,
    FraTemplate,
    IborFixingDepositTemplate,
    TermDepositTemplate,
)
from ficcalib.market import MarketData
from ficcalib.pricing import ImmutableRatesProvider

VALUATION_DATE = date(2015, 7, 21)

USD_CURVE_NAME = "USD-ALL-FRAIRS3M"
USD_QUOTES = {
    "Fixing": 0.0420,
    "FRA3Mx6M": 0.0420,
    "FRA6Mx9M": 0.0420,
    "IRS1Y": 0.0420,
    "IRS2Y": 0.0430,
    "IRS3Y": 0.0470,
    "IRS5Y": 0.0540,
    "IRS7Y": 0.0570,
    "IRS10Y": 0.0600,
}
IRS_TENORS = ["1Y", "2Y", "3Y", "5Y", "7Y", "10Y"]

DSC_CURVE_NAME = "USD-DSCON-OIS"
FWD_CURVE_NAME = "USD-LIBOR3M-FRAIRS"
DSC_QUOTES = {
    "USD-DEP-1M": 0.0010,
    "USD-OIS-6M": 0.0015,
    "USD-OIS-1Y": 0.0025,
    "USD-OIS-2Y": 0.0055,
    "USD-OIS-5Y": 0.0120,
    "USD-OIS-10Y": 0.0190,
}
OIS_TENORS = ["6M", "1Y", "2Y", "5Y", "10Y"]
FWD_QUOTES = {
    "USD-LIBOR3M-FIX": 0.0030,
    "USD-FRA3Mx6M": 0.0040,
    "USD-IRS3M-1Y": 0.0050,
    "USD-IRS3M-2Y": 0.0080,
    "USD-IRS3M-5Y": 0.0150,
    "USD-IRS3M-10Y": 0.0220,
}
FWD_IRS_TENORS = ["1Y", "2Y", "5Y", "10Y"]


def usd_single_curve_group(
    interpolator: str = "LINEAR",
    value_type: ValueType = ValueType.ZERO_RATE,
    extrapolator_left: str = "FLAT",
) -> CurveGroupDefinition:
    nodes = [
        IborFixingDepositCurveNode(IborFixingDepositTemplate(USD_LIBOR_3M), "Fixing"),
        FraCurveNode(FraTemplate("3M", USD_LIBOR_3M), "FRA3Mx6M"),
        FraCurveNode(FraTemplate("6M", USD_LIBOR_3M), "FRA6Mx9M"),
    ] + [
        FixedIborSwapCurveNode(FixedIborSwapTemplate(tenor, USD_FIXED_6M_LIBOR_3M), f"IRS{tenor}")
        for tenor in IRS_TENORS
    ]
    definition = InterpolatedCurveDefinition(
        USD_CURVE_NAME, value_type, ACT_365F, nodes, interpolator, extrapolator_left, "FLAT"
    )
    return CurveGroupDefinition(
        "USD-SINGLE",
        [CurveGroupEntry(definition, discount_currencies=["USD"], indices=[USD_LIBOR_3M])],
    )


def usd_discount_group() -> CurveGroupDefinition:
    nodes = [TermDepositCurveNode(TermDepositTemplate("1M", USD_DEPOSIT_T2), "USD-DEP-1M")] + [
        FixedOvernightSwapCurveNode(
            FixedOvernightSwapTemplate(tenor, USD_FIXED_1Y_FED_FUND_OIS), f"USD-OIS-{tenor}"
        )
        for tenor in OIS_TENORS
    ]
    definition = InterpolatedCurveDefinition(DSC_CURVE_NAME, ValueType.ZERO_RATE, ACT_365F, nodes)
    return CurveGroupDefinition(
        "USD-DSC",
        [CurveGroupEntry(definition, discount_currencies=["USD"], indices=[USD_FED_FUND])],
    )


def usd_forward_group() -> CurveGroupDefinition:
    nodes = [
        IborFixingDepositCurveNode(IborFixingDepositTemplate(USD_LIBOR_3M), "USD-LIBOR3M-FIX"),
        FraCurveNode(FraTemplate("3M", USD_LIBOR_3M), "USD-FRA3Mx6M"),
    ] + [
        FixedIborSwapCurveNode(
            FixedIborSwapTemplate(tenor, USD_FIXED_6M_LIBOR_3M), f"USD-IRS3M-{tenor}"
        )
        for tenor in FWD_IRS_TENORS
    ]
    definition = InterpolatedCurveDefinition(FWD_CURVE_NAME, ValueType.ZERO_RATE, ACT_365F, nodes)
    return CurveGroupDefinition(
        "USD-FWD3M", [CurveGroupEntry(definition, indices=[USD_LIBOR_3M])]
    )


@pytest.fixture
def valuation_date():
    return VALUATION_DATE


@pytest.fixture
def usd_market_data():
    return MarketData.of(VALUATION_DATE, USD_QUOTES)


@pytest.fixture
def two_group_market_data():
    return MarketData.of(VALUATION_DATE, {**DSC_QUOTES, **FWD_QUOTES})


@pytest.fixture
def usd_group():
    return usd_single_curve_group()


@pytest.fixture
def two_groups():
    return [usd_discount_group(), usd_forward_group()]


@pytest.fixture
def known_data():
    return ImmutableRatesProvider(VALUATION_DATE)


@pytest.fixture
def calibrator():
    return CurveCalibrator(1e-9, 1e-9, 100, CalibrationMeasures.par_spread())
