"""
ficcalib: calibration of interest rate curves to market quotes.

Curve groups are solved in order with a quasi-Newton root finder, and each
calibrated curve carries the Jacobian of its parameters to the market quotes.
"""

from ficcalib.calibration import CalibrationConfig, CalibrationMeasures, CurveCalibrator
from ficcalib.curves.definition import (
    CurveGroupDefinition,
    CurveGroupEntry,
    InterpolatedCurveDefinition,
)
from ficcalib.market import MarketData, QuoteKey
from ficcalib.pricing import ImmutableRatesProvider

__version__ = "0.1.0"

__all__ = [
    "CalibrationConfig",
    "CalibrationMeasures",
    "CurveCalibrator",
    "CurveGroupDefinition",
    "CurveGroupEntry",
    "InterpolatedCurveDefinition",
    "ImmutableRatesProvider",
    "MarketData",
    "QuoteKey",
]
