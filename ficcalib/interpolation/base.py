"""
Base classes for nodal curve interpolation.

Besides the interpolated value, every interpolator reports the sensitivity of
that value to each node value. Calibration relies on these weights to build
analytic Jacobians.
"""
from abc import ABC, abstractmethod
from typing import Sequence, Tuple

import numpy as np

EXTRAPOLATORS = ("FLAT", "LINEAR")


class Interpolator(ABC):
    """Base class for interpolation over strictly increasing nodes."""

    def __init__(
        self,
        x_values: Sequence[float],
        y_values: Sequence[float],
        extrapolator_left: str = "FLAT",
        extrapolator_right: str = "FLAT",
    ):
        """
        Initialize interpolator.

        Args:
            x_values: Node abscissas (year fractions), strictly increasing
            y_values: Node values (zero rates, discount factors, ...)
            extrapolator_left: "FLAT" or "LINEAR" below the first node
            extrapolator_right: "FLAT" or "LINEAR" beyond the last node
        """
        self.x_values = np.asarray(x_values, dtype=float)
        self.y_values = np.asarray(y_values, dtype=float)
        if self.x_values.ndim != 1 or self.x_values.shape != self.y_values.shape:
            raise ValueError("x and y values must be 1-d arrays of the same length")
        if len(self.x_values) < 1:
            raise ValueError("Need at least 1 node for interpolation")
        if np.any(np.diff(self.x_values) <= 0):
            raise ValueError(f"x values must be strictly increasing: {self.x_values}")
        for name in (extrapolator_left, extrapolator_right):
            if name.upper() not in EXTRAPOLATORS:
                raise ValueError(f"Unknown extrapolator: {name}. Available: {list(EXTRAPOLATORS)}")
        self.extrapolator_left = extrapolator_left.upper()
        self.extrapolator_right = extrapolator_right.upper()

    @property
    def size(self) -> int:
        return len(self.x_values)

    def interpolate(self, x: float) -> float:
        """Value at x, extrapolating outside the node range."""
        return self._value_and_sensitivity(x)[0]

    def parameter_sensitivity(self, x: float) -> np.ndarray:
        """Derivative of the value at x with respect to each node value."""
        return self._value_and_sensitivity(x)[1]

    def interpolate_many(self, xs: Sequence[float]) -> np.ndarray:
        return np.array([self.interpolate(x) for x in xs])

    def _value_and_sensitivity(self, x: float) -> Tuple[float, np.ndarray]:
        if self.size == 1:
            return float(self.y_values[0]), np.ones(1)
        if x < self.x_values[0]:
            return self._extrapolate(x, 0, self.extrapolator_left)
        if x > self.x_values[-1]:
            return self._extrapolate(x, self.size - 1, self.extrapolator_right)
        # index of the segment [x_i, x_i+1] containing x
        i = int(np.searchsorted(self.x_values, x, side="right")) - 1
        i = min(max(i, 0), self.size - 2)
        return self._interpolate_segment(x, i)

    def _extrapolate(self, x: float, node: int, method: str) -> Tuple[float, np.ndarray]:
        value, sensitivity = self._interpolate_segment(
            self.x_values[node], min(node, self.size - 2)
        )
        if method == "FLAT":
            return value, sensitivity
        # linear continuation of the boundary segment
        i = min(node, self.size - 2)
        x1, x2 = self.x_values[i], self.x_values[i + 1]
        v1, s1 = self._interpolate_segment(x1, i)
        v2, s2 = self._interpolate_segment(x2, i)
        slope = (v2 - v1) / (x2 - x1)
        slope_sensitivity = (s2 - s1) / (x2 - x1)
        dx = x - self.x_values[node]
        return value + slope * dx, sensitivity + slope_sensitivity * dx

    @abstractmethod
    def _interpolate_segment(self, x: float, i: int) -> Tuple[float, np.ndarray]:
        """Value and node sensitivity for x inside segment i."""

    def _unit(self, i: int) -> np.ndarray:
        sensitivity = np.zeros(self.size)
        sensitivity[i] = 1.0
        return sensitivity
