"""
Factory for creating interpolators by name.
"""
from typing import Sequence

from .base import Interpolator
from .linear import (
    LinearInterpolator,
    LinearZeroTimesInterpolator,
    PiecewiseConstantInterpolator,
)
from .log_linear import LogLinearInterpolator

INTERPOLATORS = {
    "LINEAR": LinearInterpolator,
    "LOG_LINEAR": LogLinearInterpolator,
    "STEP_FORWARD_CONTINUOUS": LogLinearInterpolator,
    "LINEAR_ZERO_TIMES": LinearZeroTimesInterpolator,
    "PIECEWISE_CONSTANT": PiecewiseConstantInterpolator,
}


def validate_interpolator(method: str) -> str:
    """Return the canonical interpolator name or raise ValueError."""
    method_upper = method.upper()
    if method_upper not in INTERPOLATORS:
        raise ValueError(
            f"Unknown interpolation method: {method}. "
            f"Supported methods: {list(INTERPOLATORS.keys())}"
        )
    return method_upper


def create_interpolator(
    method: str,
    x_values: Sequence[float],
    y_values: Sequence[float],
    extrapolator_left: str = "FLAT",
    extrapolator_right: str = "FLAT",
) -> Interpolator:
    """
    Create an interpolator instance.

    Args:
        method: Interpolation method name
        x_values: Node abscissas
        y_values: Node values
        extrapolator_left: Extrapolation below the first node
        extrapolator_right: Extrapolation beyond the last node

    Returns:
        Interpolator instance

    Raises:
        ValueError: If the method or an extrapolator is unknown
    """
    interpolator_class = INTERPOLATORS[validate_interpolator(method)]
    return interpolator_class(x_values, y_values, extrapolator_left, extrapolator_right)
