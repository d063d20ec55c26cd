"""
Residual and derivative functions handed to the root finder for one group.

Trade i is paired with parameter i: both lists follow the curve order of the
group, then the node order of each curve.
"""

from typing import List, Sequence

import numpy as np

from ficcalib.curves.parameters import CurveParameterSize, total_parameter_count

from .generator import ImmutableRatesProviderGenerator
from .measures import BoundMeasure


class CalibrationValueFunction:
    """Parameters of the group to the vector of trade residuals."""

    def __init__(self, bound_measures: Sequence[BoundMeasure], generator: ImmutableRatesProviderGenerator):
        self.bound_measures: List[BoundMeasure] = list(bound_measures)
        self.generator = generator

    def __call__(self, parameters: np.ndarray) -> np.ndarray:
        provider = self.generator.generate(parameters)
        return np.array([bound.value(provider) for bound in self.bound_measures])


class CalibrationDerivativeFunction:
    """Parameters of the group to the square matrix d(residual i) / d(parameter j)."""

    def __init__(
        self,
        bound_measures: Sequence[BoundMeasure],
        generator: ImmutableRatesProviderGenerator,
        curve_order: Sequence[CurveParameterSize],
    ):
        self.bound_measures: List[BoundMeasure] = list(bound_measures)
        self.generator = generator
        self.curve_order = list(curve_order)
        if total_parameter_count(self.curve_order) != len(self.bound_measures):
            raise ValueError(
                f"{len(self.bound_measures)} trades for "
                f"{total_parameter_count(self.curve_order)} parameters"
            )

    def __call__(self, parameters: np.ndarray) -> np.ndarray:
        provider = self.generator.generate(parameters)
        return np.vstack([bound.derivative(provider, self.curve_order) for bound in self.bound_measures])
