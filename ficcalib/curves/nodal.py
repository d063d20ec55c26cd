"""
Curve defined by interpolation between a fixed set of nodes.

The node values are the curve parameters: calibration solves for them, and
the analytic Jacobian needs the sensitivity of any point on the curve to them.
"""
from typing import Sequence

import numpy as np

from ficcalib.interpolation import create_interpolator

from .base import CurveMetadata, CurveName


class InterpolatedNodalCurve:
    """
    Immutable nodal curve.

    Every ``with_*`` method returns a new curve; the node arrays are read-only.
    """

    def __init__(
        self,
        metadata: CurveMetadata,
        x_values: Sequence[float],
        y_values: Sequence[float],
        interpolator: str = "LINEAR",
        extrapolator_left: str = "FLAT",
        extrapolator_right: str = "FLAT",
    ):
        """
        Initialize nodal curve.

        Args:
            metadata: Curve name, value types, day count and node metadata
            x_values: Node times in years from the valuation date
            y_values: Node values, the curve parameters
            interpolator: Interpolation method name
            extrapolator_left: Extrapolation method below the first node
            extrapolator_right: Extrapolation method beyond the last node
        """
        x = np.array(x_values, dtype=float)
        y = np.array(y_values, dtype=float)
        if x.shape != y.shape:
            raise ValueError(
                f"Curve {metadata.curve_name}: {len(x)} x values but {len(y)} y values"
            )
        if metadata.parameter_metadata and len(metadata.parameter_metadata) != len(y):
            raise ValueError(
                f"Curve {metadata.curve_name}: {len(metadata.parameter_metadata)} "
                f"parameter metadata entries for {len(y)} parameters"
            )
        x.setflags(write=False)
        y.setflags(write=False)
        self.metadata = metadata
        self.x_values = x
        self.y_values = y
        self.interpolator = interpolator
        self.extrapolator_left = extrapolator_left
        self.extrapolator_right = extrapolator_right
        self._interpolator = create_interpolator(
            interpolator, x, y, extrapolator_left, extrapolator_right
        )

    @property
    def name(self) -> CurveName:
        return self.metadata.curve_name

    @property
    def parameter_count(self) -> int:
        return len(self.y_values)

    def y_value(self, x: float) -> float:
        return self._interpolator.interpolate(x)

    def y_value_parameter_sensitivity(self, x: float) -> np.ndarray:
        """Derivative of y_value(x) with respect to each node value."""
        return self._interpolator.parameter_sensitivity(x)

    def with_parameters(self, y_values: Sequence[float]) -> "InterpolatedNodalCurve":
        if len(y_values) != self.parameter_count:
            raise ValueError(
                f"Curve {self.name} expects {self.parameter_count} parameters, got {len(y_values)}"
            )
        return self._copy(y_values=y_values)

    def with_parameter(self, index: int, value: float) -> "InterpolatedNodalCurve":
        y = self.y_values.copy()
        y[index] = value
        return self._copy(y_values=y)

    def with_metadata(self, metadata: CurveMetadata) -> "InterpolatedNodalCurve":
        return self._copy(metadata=metadata)

    def shift_parallel(self, shift: float) -> "InterpolatedNodalCurve":
        """Add the same amount to every node value."""
        return self._copy(y_values=self.y_values + shift)

    def _copy(self, metadata=None, y_values=None) -> "InterpolatedNodalCurve":
        return InterpolatedNodalCurve(
            metadata=metadata if metadata is not None else self.metadata,
            x_values=self.x_values,
            y_values=y_values if y_values is not None else self.y_values,
            interpolator=self.interpolator,
            extrapolator_left=self.extrapolator_left,
            extrapolator_right=self.extrapolator_right,
        )

    def __repr__(self) -> str:
        return (
            f"InterpolatedNodalCurve(name={self.name!r}, nodes={self.parameter_count}, "
            f"interpolator={self.interpolator})"
        )
