import logging
from datetime import date

import numpy as np
import pandas as pd
import pytest

from conftest import (
    DSC_CURVE_NAME,
    DSC_QUOTES,
    FWD_CURVE_NAME,
    FWD_QUOTES,
    USD_CURVE_NAME,
    USD_QUOTES,
    VALUATION_DATE,
    usd_single_curve_group,
)
from ficcalib.calibration import (
    CalibrationConfig,
    CalibrationMeasures,
    CurveCalibrator,
    MarketQuoteSensitivityCalculator,
    ParSpreadMeasure,
)
from ficcalib.curves import ValueType
from ficcalib.curves.definition import CurveDefinitionError, CurveGroupDefinition, CurveGroupEntry
from ficcalib.instruments import TradeKind
from ficcalib.market import MarketData, MarketDataNotFoundError
from ficcalib.math import RootFindingError, SingularMatrixError
from ficcalib.pricing import CurveParameterSensitivities, DiscountingSwapPricer

PRESENT_VALUES = CalibrationMeasures.present_value()


def assert_repriced(groups, provider, market_data, tolerance=1e-6):
    for group in groups:
        for trade in group.trades(VALUATION_DATE, market_data):
            assert abs(PRESENT_VALUES.value(trade, provider)) < tolerance


def fd_jacobian(calibrator, groups, known_data, market_data, curve_name, keys, shift=1e-5):
    """Bump each quote up and down and recalibrate."""
    columns = []
    for key in keys:
        up, _ = calibrator.calibrate(groups, known_data, market_data.shifted(key, shift))
        down, _ = calibrator.calibrate(groups, known_data, market_data.shifted(key, -shift))
        columns.append(
            (up.curve(curve_name).y_values - down.curve(curve_name).y_values) / (2 * shift)
        )
    return np.column_stack(columns)


class TestSingleCurve:
    def test_reprices_calibration_trades(self, calibrator, usd_group, known_data, usd_market_data):
        provider, jacobians = calibrator.calibrate([usd_group], known_data, usd_market_data)
        assert_repriced([usd_group], provider, usd_market_data)
        assert provider.discount_curves["USD"] is provider.index_curves["USD-LIBOR-3M"]
        assert set(jacobians) == {USD_CURVE_NAME}
        assert jacobians[USD_CURVE_NAME].matrix.shape == (9, 9)
        assert provider.curve(USD_CURVE_NAME).metadata.jacobian is jacobians[USD_CURVE_NAME]

    def test_calibration_is_deterministic(self, calibrator, usd_group, known_data, usd_market_data):
        first, jac_first = calibrator.calibrate([usd_group], known_data, usd_market_data)
        second, jac_second = calibrator.calibrate([usd_group], known_data, usd_market_data)
        np.testing.assert_array_equal(
            first.curve(USD_CURVE_NAME).y_values, second.curve(USD_CURVE_NAME).y_values
        )
        np.testing.assert_array_equal(
            jac_first[USD_CURVE_NAME].matrix, jac_second[USD_CURVE_NAME].matrix
        )

    def test_jacobian_matches_recalibration(self, usd_group, known_data, usd_market_data):
        calibrator = CurveCalibrator(1e-12, 1e-12, 100, CalibrationMeasures.par_spread(), "NEWTON")
        _, jacobians = calibrator.calibrate([usd_group], known_data, usd_market_data)
        numeric = fd_jacobian(
            calibrator, [usd_group], known_data, usd_market_data, USD_CURVE_NAME, list(USD_QUOTES)
        )
        np.testing.assert_allclose(jacobians[USD_CURVE_NAME].matrix, numeric, atol=1e-6)

    def test_broyden_and_newton_agree(self, calibrator, usd_group, known_data, usd_market_data):
        newton = CurveCalibrator(1e-9, 1e-9, 100, CalibrationMeasures.par_spread(), "NEWTON")
        broyden_curve = calibrator.calibrate([usd_group], known_data, usd_market_data)[0].curve(USD_CURVE_NAME)
        newton_curve = newton.calibrate([usd_group], known_data, usd_market_data)[0].curve(USD_CURVE_NAME)
        np.testing.assert_allclose(broyden_curve.y_values, newton_curve.y_values, atol=1e-8)

    @pytest.mark.parametrize("extrapolator_left", ["FLAT", "LINEAR"])
    def test_discount_factor_curve(self, calibrator, known_data, usd_market_data, extrapolator_left):
        group = usd_single_curve_group("LOG_LINEAR", ValueType.DISCOUNT_FACTOR, extrapolator_left)
        provider, jacobians = calibrator.calibrate([group], known_data, usd_market_data)
        assert_repriced([group], provider, usd_market_data)
        y = provider.curve(USD_CURVE_NAME).y_values
        assert np.all(np.diff(y) < 0)
        assert np.all((y > 0) & (y < 1))
        assert jacobians[USD_CURVE_NAME].matrix.shape == (9, 9)
        assert provider.discount_factors("USD").discount_factor(VALUATION_DATE) == 1.0

    def test_present_value_measures(self, calibrator, usd_group, known_data, usd_market_data):
        pv_calibrator = CurveCalibrator(1e-9, 1e-9, 100, PRESENT_VALUES)
        provider, jacobians = pv_calibrator.calibrate([usd_group], known_data, usd_market_data)
        assert_repriced([usd_group], provider, usd_market_data)
        reference, _ = calibrator.calibrate([usd_group], known_data, usd_market_data)
        np.testing.assert_allclose(
            provider.curve(USD_CURVE_NAME).y_values,
            reference.curve(USD_CURVE_NAME).y_values,
            atol=1e-7,
        )
        assert jacobians[USD_CURVE_NAME].matrix.shape == (9, 9)

    def test_calibrate_group(self, calibrator, usd_group, known_data, usd_market_data):
        provider, _ = calibrator.calibrate_group(usd_group, VALUATION_DATE, usd_market_data)
        reference, _ = calibrator.calibrate([usd_group], known_data, usd_market_data)
        np.testing.assert_array_equal(
            provider.curve(USD_CURVE_NAME).y_values, reference.curve(USD_CURVE_NAME).y_values
        )

    def test_logs_group_progress(self, calibrator, usd_group, known_data, usd_market_data, caplog):
        with caplog.at_level(logging.INFO, logger="ficcalib"):
            calibrator.calibrate([usd_group], known_data, usd_market_data)
        assert "Calibrating group USD-SINGLE" in caplog.text
        assert "Converged in" in caplog.text


class TestCurveGroupChaining:
    def test_two_groups(self, calibrator, two_groups, known_data, two_group_market_data):
        provider, jacobians = calibrator.calibrate(two_groups, known_data, two_group_market_data)
        assert_repriced(two_groups, provider, two_group_market_data)
        assert provider.discount_curves["USD"].name == DSC_CURVE_NAME
        assert provider.index_curves["USD-FED-FUND"].name == DSC_CURVE_NAME
        assert provider.index_curves["USD-LIBOR-3M"].name == FWD_CURVE_NAME
        assert jacobians[DSC_CURVE_NAME].matrix.shape == (6, 6)
        assert jacobians[FWD_CURVE_NAME].matrix.shape == (6, 12)
        assert jacobians[FWD_CURVE_NAME].curve_names == [DSC_CURVE_NAME, FWD_CURVE_NAME]

    def test_later_quotes_do_not_move_earlier_groups(
        self, calibrator, two_groups, known_data, two_group_market_data
    ):
        base, _ = calibrator.calibrate(two_groups, known_data, two_group_market_data)
        bumped, _ = calibrator.calibrate(
            two_groups, known_data, two_group_market_data.shifted("USD-IRS3M-5Y", 1e-4)
        )
        np.testing.assert_array_equal(
            base.curve(DSC_CURVE_NAME).y_values, bumped.curve(DSC_CURVE_NAME).y_values
        )
        assert not np.array_equal(
            base.curve(FWD_CURVE_NAME).y_values, bumped.curve(FWD_CURVE_NAME).y_values
        )

    def test_composed_jacobian_matches_recalibration(
        self, two_groups, known_data, two_group_market_data
    ):
        calibrator = CurveCalibrator(1e-12, 1e-12, 100, CalibrationMeasures.par_spread(), "NEWTON")
        _, jacobians = calibrator.calibrate(two_groups, known_data, two_group_market_data)
        keys = list(DSC_QUOTES) + list(FWD_QUOTES)
        numeric = fd_jacobian(
            calibrator, two_groups, known_data, two_group_market_data, FWD_CURVE_NAME, keys
        )
        forward = jacobians[FWD_CURVE_NAME]
        np.testing.assert_allclose(forward.curve_block(DSC_CURVE_NAME), numeric[:, :6], atol=1e-6)
        np.testing.assert_allclose(forward.curve_block(FWD_CURVE_NAME), numeric[:, 6:], atol=1e-6)
        assert np.abs(forward.curve_block(DSC_CURVE_NAME)).max() > 1e-4

    def test_group_on_top_of_known_curves(self, calibrator, two_groups, known_data, two_group_market_data):
        first, jacobians = calibrator.calibrate(two_groups[:1], known_data, two_group_market_data)
        second, forward_jacobians = calibrator.calibrate(two_groups[1:], first, two_group_market_data)
        together, _ = calibrator.calibrate(two_groups, known_data, two_group_market_data)
        np.testing.assert_allclose(
            second.curve(FWD_CURVE_NAME).y_values,
            together.curve(FWD_CURVE_NAME).y_values,
            atol=1e-12,
        )
        # known curves are fixed, so only the group's own quotes appear
        assert forward_jacobians[FWD_CURVE_NAME].curve_names == [FWD_CURVE_NAME]
        assert set(forward_jacobians) == {FWD_CURVE_NAME}


class TestMarketQuoteSensitivity:
    def test_swap_sensitivity_is_its_annuity(
        self, calibrator, usd_group, known_data, usd_market_data
    ):
        provider, _ = calibrator.calibrate([usd_group], known_data, usd_market_data)
        trade = usd_group.trades(VALUATION_DATE, usd_market_data)[6]
        pricer = DiscountingSwapPricer()
        parameter_sensitivity = provider.parameter_sensitivity(
            pricer.present_value_sensitivity(trade, provider)
        )
        quote_sensitivity = MarketQuoteSensitivityCalculator().sensitivity(
            parameter_sensitivity, provider
        ).get(USD_CURVE_NAME)
        expected = np.zeros(9)
        expected[6] = pricer.annuity(trade, provider)
        np.testing.assert_allclose(quote_sensitivity, expected, atol=1e-6)

    def test_two_groups_split_by_curve(
        self, calibrator, two_groups, known_data, two_group_market_data
    ):
        provider, _ = calibrator.calibrate(two_groups, known_data, two_group_market_data)
        trade = two_groups[1].trades(VALUATION_DATE, two_group_market_data)[-1]
        pricer = DiscountingSwapPricer()
        parameter_sensitivity = provider.parameter_sensitivity(
            pricer.present_value_sensitivity(trade, provider)
        )
        result = MarketQuoteSensitivityCalculator().sensitivity(parameter_sensitivity, provider)
        assert set(result.names) == {DSC_CURVE_NAME, FWD_CURVE_NAME}
        expected = np.zeros(6)
        expected[-1] = pricer.annuity(trade, provider)
        np.testing.assert_allclose(result.get(FWD_CURVE_NAME), expected, atol=1e-6)
        # a par swap has no exposure to the discounting quotes
        np.testing.assert_allclose(result.get(DSC_CURVE_NAME), np.zeros(6), atol=1e-6)

    def test_uncalibrated_curves_are_skipped(
        self, calibrator, two_groups, known_data, two_group_market_data
    ):
        provider, _ = calibrator.calibrate(two_groups[:1], known_data, two_group_market_data)
        curve = provider.curve(DSC_CURVE_NAME)
        stripped = provider.with_curve(curve.with_metadata(curve.metadata.with_jacobian(None)))
        sensitivity = CurveParameterSensitivities({DSC_CURVE_NAME: np.ones(6)})
        assert len(MarketQuoteSensitivityCalculator().sensitivity(sensitivity, stripped)) == 0
        with pytest.raises(ValueError, match="rows"):
            MarketQuoteSensitivityCalculator().sensitivity(
                CurveParameterSensitivities({DSC_CURVE_NAME: np.ones(5)}), provider
            )


class TestCalibrationErrors:
    def test_no_groups(self, calibrator, known_data, usd_market_data):
        with pytest.raises(CurveDefinitionError):
            calibrator.calibrate([], known_data, usd_market_data)

    def test_missing_quote(self, calibrator, usd_group, known_data):
        quotes = {k: v for k, v in USD_QUOTES.items() if k != "IRS10Y"}
        with pytest.raises(MarketDataNotFoundError, match="IRS10Y"):
            calibrator.calibrate([usd_group], known_data, MarketData.of(VALUATION_DATE, quotes))

    def test_duplicate_curve_names(self, calibrator, usd_group, known_data, usd_market_data):
        with pytest.raises(CurveDefinitionError, match=USD_CURVE_NAME):
            calibrator.calibrate([usd_group, usd_group], known_data, usd_market_data)
        provider, _ = calibrator.calibrate([usd_group], known_data, usd_market_data)
        with pytest.raises(CurveDefinitionError, match="known data"):
            calibrator.calibrate([usd_group], provider, usd_market_data)

    def test_valuation_date_mismatch(self, calibrator, usd_group, known_data):
        market_data = MarketData.of(date(2015, 7, 22), USD_QUOTES)
        with pytest.raises(ValueError, match="2015-07-22"):
            calibrator.calibrate([usd_group], known_data, market_data)

    def test_unsupported_trade_kind(self, usd_group, known_data, usd_market_data):
        measures = CalibrationMeasures(
            "SwapsOnly", {TradeKind.SWAP: ParSpreadMeasure(DiscountingSwapPricer())}
        )
        calibrator = CurveCalibrator(1e-9, 1e-9, 100, measures)
        with pytest.raises(CurveDefinitionError, match="SwapsOnly"):
            calibrator.calibrate([usd_group], known_data, usd_market_data)

    def test_curve_roles_checked_before_solving(
        self, calibrator, two_groups, known_data, two_group_market_data, caplog
    ):
        dsc_group, fwd_group = two_groups
        with caplog.at_level(logging.INFO, logger="ficcalib"):
            with pytest.raises(CurveDefinitionError, match="no curve discounts USD"):
                calibrator.calibrate([fwd_group], known_data, two_group_market_data)
            # a later group cannot provide curves to an earlier one
            with pytest.raises(CurveDefinitionError, match="USD-FWD3M"):
                calibrator.calibrate([fwd_group, dsc_group], known_data, two_group_market_data)
        assert "Calibrating group" not in caplog.text

    def test_missing_index_curve(self, calibrator, usd_group, known_data, usd_market_data, caplog):
        entry = usd_group.entries[0]
        group = CurveGroupDefinition(
            "USD-NO-INDEX", [CurveGroupEntry(entry.curve_definition, discount_currencies=["USD"])]
        )
        with caplog.at_level(logging.INFO, logger="ficcalib"):
            with pytest.raises(CurveDefinitionError, match="no curve forwards USD-LIBOR-3M"):
                calibrator.calibrate([group], known_data, usd_market_data)
        assert "Calibrating group" not in caplog.text

    def test_not_converged(self, usd_group, known_data, usd_market_data, caplog):
        calibrator = CurveCalibrator(1e-15, 1e-15, 1, CalibrationMeasures.par_spread(), "NEWTON")
        with caplog.at_level(logging.ERROR, logger="ficcalib"):
            with pytest.raises(RootFindingError):
                calibrator.calibrate([usd_group], known_data, usd_market_data)
        assert "Calibration of group USD-SINGLE failed" in caplog.text

    def test_known_fixing_makes_node_singular(self, calibrator, usd_group, usd_market_data):
        series = pd.Series([USD_QUOTES["Fixing"]], index=[VALUATION_DATE])
        with pytest.raises(SingularMatrixError):
            calibrator.calibrate_group(
                usd_group, VALUATION_DATE, usd_market_data, time_series={"USD-LIBOR-3M": series}
            )


class TestConfig:
    def test_from_config(self):
        calibrator = CurveCalibrator.from_config(
            CalibrationConfig(1e-10, 1e-8, 50, "newton"), CalibrationMeasures.par_spread()
        )
        assert calibrator.root_finder.method == "newton"
        assert calibrator.root_finder.tolerance_abs == 1e-10
        assert calibrator.root_finder.max_steps == 50
        assert "ParSpread" in repr(calibrator)

    def test_verbose_logs_nodes(self, usd_group, known_data, usd_market_data, caplog):
        logger = logging.getLogger("ficcalib.calibration.calibrator")
        level = logger.level
        measures = CalibrationMeasures.par_spread()
        verbose = CurveCalibrator.from_config(CalibrationConfig(verbose=True), measures)
        quiet = CurveCalibrator.from_config(CalibrationConfig(), measures)
        assert verbose.verbose and not quiet.verbose
        with caplog.at_level(logging.INFO, logger="ficcalib"):
            quiet.calibrate([usd_group], known_data, usd_market_data)
            assert f"{USD_CURVE_NAME} 10Y" not in caplog.text
            verbose.calibrate([usd_group], known_data, usd_market_data)
        assert f"{USD_CURVE_NAME} 10Y" in caplog.text
        assert "residual" in caplog.text
        # the logger level is left to the caller
        assert logger.level == level

    def test_invalid_config(self):
        with pytest.raises(ValueError):
            CalibrationConfig(tolerance_abs=0.0)
        with pytest.raises(ValueError):
            CalibrationConfig(max_steps=0)
        with pytest.raises(ValueError):
            CalibrationConfig(root_finder="LEVENBERG")
