"""
Curve calibration: measures, root finding functions, Jacobian composition and
the calibrator orchestrating curve groups.
"""

from .calibrator import CalibrationResult, CurveCalibrator
from .config import CalibrationConfig
from .functions import CalibrationDerivativeFunction, CalibrationValueFunction
from .generator import ImmutableRatesProviderGenerator
from .jacobian import ParameterBlock, group_jacobians, parameter_blocks, transition_matrix
from .market_quote import MarketQuoteSensitivityCalculator
from .measures import (
    BoundMeasure,
    CalibrationMeasure,
    CalibrationMeasures,
    ParSpreadMeasure,
    PresentValueMeasure,
)

__all__ = [
    # Calibrator
    "CurveCalibrator",
    "CalibrationConfig",
    "CalibrationResult",
    # Measures
    "CalibrationMeasure",
    "CalibrationMeasures",
    "ParSpreadMeasure",
    "PresentValueMeasure",
    "BoundMeasure",
    # Functions
    "CalibrationValueFunction",
    "CalibrationDerivativeFunction",
    "ImmutableRatesProviderGenerator",
    # Jacobians
    "ParameterBlock",
    "parameter_blocks",
    "transition_matrix",
    "group_jacobians",
    "MarketQuoteSensitivityCalculator",
]
