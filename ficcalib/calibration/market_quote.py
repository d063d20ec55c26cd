"""
Sensitivity to market quotes from sensitivity to curve parameters.

Uses the Jacobians attached to calibrated curves, so no recalibration is needed.
"""

import logging
from typing import Dict

import numpy as np

from ficcalib.curves.base import CurveName
from ficcalib.pricing.provider import ImmutableRatesProvider
from ficcalib.pricing.sensitivity import CurveParameterSensitivities

logger = logging.getLogger(__name__)


class MarketQuoteSensitivityCalculator:
    """Chain rule through the calibration Jacobians.

    With par spread measures the result is the sensitivity to the quotes
    themselves; with present value measures it is the sensitivity to the
    present values of the calibration trades.
    """

    def sensitivity(
        self,
        parameter_sensitivities: CurveParameterSensitivities,
        provider: ImmutableRatesProvider,
    ) -> CurveParameterSensitivities:
        """
        Convert parameter sensitivities to market quote sensitivities.

        Args:
            parameter_sensitivities: d(value) / d(curve parameters), per curve
            provider: Provider whose curves carry calibration Jacobians

        Returns:
            d(value) / d(quotes), one array per calibrated curve holding the
            quotes of its nodes
        """
        result: Dict[CurveName, np.ndarray] = {}
        for name in parameter_sensitivities.names:
            jacobian = provider.curve(name).metadata.jacobian
            if jacobian is None:
                logger.debug("Curve %s was not calibrated, no quote sensitivity", name)
                continue
            values = parameter_sensitivities.get(name)
            if len(values) != jacobian.matrix.shape[0]:
                raise ValueError(
                    f"Curve {name} has {len(values)} sensitivities but its Jacobian "
                    f"has {jacobian.matrix.shape[0]} rows"
                )
            by_curve = jacobian.split(values @ jacobian.matrix)
            for quote_curve, quote_values in by_curve.items():
                if quote_curve in result:
                    result[quote_curve] = result[quote_curve] + quote_values
                else:
                    result[quote_curve] = quote_values
        return CurveParameterSensitivities(result)
