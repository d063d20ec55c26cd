"""
Curves package: nodal curves, discount factor views, metadata and parameter
bookkeeping, plus the curve definitions used to calibrate them.
"""

from .base import CurveMetadata, CurveName, TenorCurveNodeMetadata, ValueType
from .discount import (
    DiscountFactors,
    SimpleDiscountFactors,
    ZeroRateDiscountFactors,
    discount_factors,
)
from .nodal import InterpolatedNodalCurve
from .parameters import (
    CurveParameterSize,
    JacobianCalibrationMatrix,
    total_parameter_count,
)

__all__ = [
    # Base
    "CurveMetadata",
    "CurveName",
    "TenorCurveNodeMetadata",
    "ValueType",
    # Curves
    "InterpolatedNodalCurve",
    "DiscountFactors",
    "SimpleDiscountFactors",
    "ZeroRateDiscountFactors",
    "discount_factors",
    # Parameters
    "CurveParameterSize",
    "JacobianCalibrationMatrix",
    "total_parameter_count",
]
