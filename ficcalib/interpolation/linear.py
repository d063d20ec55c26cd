"""
Linear interpolation methods for nodal curves.
"""
from typing import Tuple

import numpy as np

from .base import Interpolator


class LinearInterpolator(Interpolator):
    """Linear interpolation on the node values."""

    def _interpolate_segment(self, x: float, i: int) -> Tuple[float, np.ndarray]:
        x1, x2 = self.x_values[i], self.x_values[i + 1]
        weight = (x - x1) / (x2 - x1)
        sensitivity = np.zeros(self.size)
        sensitivity[i] = 1.0 - weight
        sensitivity[i + 1] = weight
        value = (1.0 - weight) * self.y_values[i] + weight * self.y_values[i + 1]
        return float(value), sensitivity


class LinearZeroTimesInterpolator(Interpolator):
    """Linear interpolation on y*x.

    With zero rates as y values this is linear interpolation on the log
    discount factor, which gives piecewise constant forward rates.
    """

    def _interpolate_segment(self, x: float, i: int) -> Tuple[float, np.ndarray]:
        x1, x2 = self.x_values[i], self.x_values[i + 1]
        if x == x1:
            return float(self.y_values[i]), self._unit(i)
        if x == x2:
            return float(self.y_values[i + 1]), self._unit(i + 1)
        weight = (x - x1) / (x2 - x1)
        yx = (1.0 - weight) * self.y_values[i] * x1 + weight * self.y_values[i + 1] * x2
        sensitivity = np.zeros(self.size)
        sensitivity[i] = (1.0 - weight) * x1 / x
        sensitivity[i + 1] = weight * x2 / x
        return float(yx / x), sensitivity


class PiecewiseConstantInterpolator(Interpolator):
    """Step function: the value of the left node holds until the next node."""

    def _interpolate_segment(self, x: float, i: int) -> Tuple[float, np.ndarray]:
        if x >= self.x_values[i + 1]:
            return float(self.y_values[i + 1]), self._unit(i + 1)
        return float(self.y_values[i]), self._unit(i)
