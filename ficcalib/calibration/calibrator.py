"""
Curve calibrator: solves curve groups in order and composes their Jacobians.

Each group is a root finding problem on its own parameters, priced against
the curves of the earlier groups. Once solved, the sensitivity of the group's
parameters to every quote calibrated so far is attached to its curves.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ficcalib.curves.base import CurveName
from ficcalib.curves.definition.curve import CurveDefinitionError
from ficcalib.curves.definition.group import CurveGroupDefinition
from ficcalib.curves.parameters import CurveParameterSize, JacobianCalibrationMatrix
from ficcalib.market.data import MarketData, MarketDataNotFoundError
from ficcalib.market.fx import FxMatrix
from ficcalib.math.decomposition import SingularMatrixError, SVDecomposition
from ficcalib.math.rootfinding import RootFindingError, create_root_finder
from ficcalib.pricing.provider import ImmutableRatesProvider

from .config import CalibrationConfig
from .functions import CalibrationDerivativeFunction, CalibrationValueFunction
from .generator import ImmutableRatesProviderGenerator
from .jacobian import group_jacobians
from .measures import BoundMeasure, CalibrationMeasures

logger = logging.getLogger(__name__)

CalibrationResult = Tuple[ImmutableRatesProvider, Dict[CurveName, JacobianCalibrationMatrix]]


class CurveCalibrator:
    """
    Calibrates curve groups to market quotes.

    Example:
        >>> calibrator = CurveCalibrator(1e-9, 1e-9, 100, CalibrationMeasures.par_spread())
        >>> provider, jacobians = calibrator.calibrate([group], known_data, market_data)
    """

    def __init__(
        self,
        tolerance_abs: float,
        tolerance_rel: float,
        max_steps: int,
        measures: CalibrationMeasures,
        root_finder: str = "BROYDEN",
        verbose: bool = False,
    ):
        """
        Initialize calibrator.

        Args:
            tolerance_abs: Absolute tolerance on the residual norm of a group
            tolerance_rel: Relative tolerance on the residual norm of a group
            max_steps: Maximum root finder iterations per group
            measures: Residual and derivative of each trade kind
            root_finder: "BROYDEN" or "NEWTON"
            verbose: Log every calibrated node and its residual at INFO
        """
        self.decomposition = SVDecomposition()
        self.root_finder = create_root_finder(
            root_finder, tolerance_abs, tolerance_rel, max_steps, self.decomposition
        )
        self.measures = measures
        self.verbose = verbose

    @classmethod
    def from_config(cls, config: CalibrationConfig, measures: CalibrationMeasures) -> "CurveCalibrator":
        return cls(
            config.tolerance_abs,
            config.tolerance_rel,
            config.max_steps,
            measures,
            config.root_finder,
            config.verbose,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def calibrate_group(
        self,
        group_definition: CurveGroupDefinition,
        valuation_date: date,
        market_data: MarketData,
        time_series: Optional[Mapping[str, pd.Series]] = None,
        fx_matrix: Optional[FxMatrix] = None,
    ) -> CalibrationResult:
        """Calibrate a single group starting from fixings and FX only."""
        known_data = ImmutableRatesProvider(
            valuation_date, fx_matrix=fx_matrix, time_series=time_series
        )
        return self.calibrate([group_definition], known_data, market_data)

    def calibrate(
        self,
        group_definitions: Sequence[CurveGroupDefinition],
        known_data: ImmutableRatesProvider,
        market_data: MarketData,
    ) -> CalibrationResult:
        """
        Calibrate groups in order, each on top of the previous ones.

        Args:
            group_definitions: Groups to calibrate; a group may only depend on
                curves of earlier groups or of ``known_data``
            known_data: Valuation date, FX, fixings and any fixed curves
            market_data: Quotes required by the nodes

        Returns:
            Provider holding every calibrated curve, and the Jacobian of each
            calibrated curve to the quotes calibrated up to its group

        Raises:
            CurveDefinitionError: If the definitions are inconsistent
            MarketDataNotFoundError: If a quote required by a node is missing
            RootFindingError: If a group does not converge
            SingularMatrixError: If a group's Jacobian cannot be inverted
        """
        group_definitions = list(group_definitions)
        valuation_date = known_data.valuation_date
        self._validate(group_definitions, known_data, market_data)
        # trades and measures for all groups before any solving
        prepared = [
            (group, self.measures.bind(group.trades(valuation_date, market_data)))
            for group in group_definitions
        ]
        self._validate_curve_roles(prepared, known_data)

        provider = known_data
        order_previous: List[CurveParameterSize] = []
        jacobians: Dict[CurveName, JacobianCalibrationMatrix] = {}
        for group, bound_measures in prepared:
            order_group = group.parameter_sizes()
            generator = ImmutableRatesProviderGenerator(
                provider, group.curve_definitions, group.discount_names, group.index_names
            )
            initial_guess = group.initial_guesses(valuation_date, market_data)
            logger.info(
                "Calibrating group %s: curves %s, %d parameters",
                group.name, group.curve_names, len(initial_guess),
            )
            try:
                parameters = self._solve(generator, bound_measures, initial_guess, order_group)
                calibrated = generator.generate(parameters)
                order_all = order_previous + order_group
                derivatives = np.vstack(
                    [bound.derivative(calibrated, order_all) for bound in bound_measures]
                )
                jacobians = group_jacobians(
                    derivatives, order_group, order_previous, jacobians, self.decomposition
                )
            except (RootFindingError, SingularMatrixError) as exc:
                logger.error("Calibration of group %s failed: %s", group.name, exc)
                raise
            provider = generator.generate(parameters, jacobians)
            order_previous = order_all
            self._log_group_details(group, bound_measures, provider)
        return provider, jacobians

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _solve(
        self,
        generator: ImmutableRatesProviderGenerator,
        bound_measures: Sequence[BoundMeasure],
        initial_guess: Sequence[float],
        order_group: Sequence[CurveParameterSize],
    ) -> np.ndarray:
        value_fn = CalibrationValueFunction(bound_measures, generator)
        derivative_fn = CalibrationDerivativeFunction(bound_measures, generator, order_group)
        result = self.root_finder.get_root(value_fn, derivative_fn, initial_guess)
        logger.info(
            "Converged in %d iterations, residual norm %.3e", result.iterations, result.residual_norm
        )
        return result.root

    def _validate(
        self,
        group_definitions: Sequence[CurveGroupDefinition],
        known_data: ImmutableRatesProvider,
        market_data: MarketData,
    ) -> None:
        if not group_definitions:
            raise CurveDefinitionError("At least one curve group is required")
        if (
            market_data.valuation_date is not None
            and market_data.valuation_date != known_data.valuation_date
        ):
            raise ValueError(
                f"Market data is for {market_data.valuation_date} but calibration "
                f"is for {known_data.valuation_date}"
            )
        seen = {name: "known data" for name in known_data.curves}
        missing = set()
        for group in group_definitions:
            for name in group.curve_names:
                if name in seen:
                    raise CurveDefinitionError(
                        f"Curve {name} of group {group.name} is already defined in {seen[name]}"
                    )
                seen[name] = f"group {group.name}"
            missing |= {key for key in group.requirements() if not market_data.contains(key)}
        if missing:
            raise MarketDataNotFoundError(
                f"Market data missing for {sorted(str(k) for k in missing)}"
            )

    def _validate_curve_roles(
        self,
        prepared: Sequence[Tuple[CurveGroupDefinition, Sequence[BoundMeasure]]],
        known_data: ImmutableRatesProvider,
    ) -> None:
        """Check that every trade is priced by curves known before its group is solved."""
        currencies = set(known_data.discount_curves)
        indices = set(known_data.index_curves)
        for group, bound_measures in prepared:
            currencies |= set(group.discount_names)
            indices |= set(group.index_names)
            for bound in bound_measures:
                trade = bound.trade
                if trade.currency not in currencies:
                    raise CurveDefinitionError(
                        f"Group {group.name}: no curve discounts {trade.currency}, "
                        f"needed by {type(trade).__name__} ending {trade.end_date}"
                    )
                for index in trade.index_names:
                    if index not in indices:
                        raise CurveDefinitionError(
                            f"Group {group.name}: no curve forwards {index}, "
                            f"needed by {type(trade).__name__} ending {trade.end_date}"
                        )

    def _log_group_details(
        self,
        group: CurveGroupDefinition,
        bound_measures: Sequence[BoundMeasure],
        provider: ImmutableRatesProvider,
    ) -> None:
        """
        Log each node of a calibrated group (if verbose).
        """
        if not self.verbose:
            return

        for definition in group.curve_definitions:
            curve = provider.curve(definition.name)
            for node, value in zip(curve.metadata.parameter_metadata, curve.y_values):
                logger.info("   %s %s: %.10f", definition.name, node.label, value)
        for bound in bound_measures:
            logger.info(
                "   %s ending %s: residual %.3e",
                type(bound.trade).__name__, bound.trade.end_date, bound.value(provider),
            )

    def __repr__(self) -> str:
        return (
            f"CurveCalibrator(root_finder={type(self.root_finder).__name__}, "
            f"tolerance_abs={self.root_finder.tolerance_abs}, "
            f"tolerance_rel={self.root_finder.tolerance_rel}, "
            f"max_steps={self.root_finder.max_steps}, measures={self.measures.name})"
        )
