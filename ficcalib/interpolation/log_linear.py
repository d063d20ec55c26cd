"""
Log-linear interpolation for discount factor curves.
"""
from typing import Tuple

import numpy as np

from .base import Interpolator


class LogLinearInterpolator(Interpolator):
    """Linear interpolation on log(y).

    Applied to discount factors this is the step-forward continuous scheme:
    the instantaneous forward rate is constant between nodes. Node values are
    expected to be positive; a non-positive node yields NaN, which the root
    finder treats as a rejected step.
    """

    def _interpolate_segment(self, x: float, i: int) -> Tuple[float, np.ndarray]:
        x1, x2 = self.x_values[i], self.x_values[i + 1]
        y1, y2 = self.y_values[i], self.y_values[i + 1]
        weight = (x - x1) / (x2 - x1)
        with np.errstate(invalid="ignore", divide="ignore"):
            value = float(np.exp((1.0 - weight) * np.log(y1) + weight * np.log(y2)))
            sensitivity = np.zeros(self.size)
            sensitivity[i] = value * (1.0 - weight) / y1
            sensitivity[i + 1] = value * weight / y2
        return value, sensitivity
