"""
Curve parameter sensitivities by bumping.

Used to check analytic derivatives: each parameter of each curve in the
provider is shifted in turn and the valuation function re-evaluated.
"""
import logging
from typing import Callable

from .provider import ImmutableRatesProvider
from .sensitivity import CurveParameterSensitivities

logger = logging.getLogger(__name__)


class FiniteDifferenceSensitivityCalculator:
    """Symmetric (or forward) finite difference on curve parameters."""

    def __init__(self, shift: float = 1e-6, symmetric: bool = True):
        if shift <= 0:
            raise ValueError(f"Shift must be positive, got {shift}")
        self.shift = shift
        self.symmetric = symmetric

    def sensitivity(
        self,
        provider: ImmutableRatesProvider,
        value_fn: Callable[[ImmutableRatesProvider], float],
    ) -> CurveParameterSensitivities:
        """
        Sensitivity of ``value_fn`` to every parameter of every curve.

        Args:
            provider: Base rates provider
            value_fn: Valuation returning a float for a provider

        Returns:
            One array per curve, aligned to the curve nodes
        """
        base = None if self.symmetric else value_fn(provider)
        result = {}
        for name, curve in provider.curves.items():
            values = []
            for i in range(curve.parameter_count):
                up = provider.with_curve(curve.with_parameter(i, curve.y_values[i] + self.shift))
                if self.symmetric:
                    down = provider.with_curve(curve.with_parameter(i, curve.y_values[i] - self.shift))
                    values.append((value_fn(up) - value_fn(down)) / (2.0 * self.shift))
                else:
                    values.append((value_fn(up) - base) / self.shift)
            result[name] = values
            logger.debug("Bumped %d parameters of curve %s", curve.parameter_count, name)
        return CurveParameterSensitivities(result)
