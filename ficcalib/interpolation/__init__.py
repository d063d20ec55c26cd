"""
Interpolation methods for nodal curves.

Each interpolator returns the interpolated value and its sensitivity to the
node values, the building block of analytic calibration Jacobians.
"""

# Base classes
from .base import EXTRAPOLATORS, Interpolator

# Factory
from .factory import INTERPOLATORS, create_interpolator, validate_interpolator

# Linear interpolation methods
from .linear import (
    LinearInterpolator,
    LinearZeroTimesInterpolator,
    PiecewiseConstantInterpolator,
)

# Log-linear interpolation
from .log_linear import LogLinearInterpolator

__all__ = [
    # Base classes
    'Interpolator',
    'EXTRAPOLATORS',

    # Linear interpolation methods
    'LinearInterpolator',
    'LinearZeroTimesInterpolator',
    'PiecewiseConstantInterpolator',

    # Log-linear interpolation
    'LogLinearInterpolator',

    # Factory
    'INTERPOLATORS',
    'create_interpolator',
    'validate_interpolator',
]
