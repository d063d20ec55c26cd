"""
Pricing collaborators used by calibration: the rates provider, sensitivity
containers and the discounting pricers of the calibration instruments.
"""

from .base import TradePricer
from .deposit import DiscountingIborFixingDepositPricer, DiscountingTermDepositPricer
from .finite_difference import FiniteDifferenceSensitivityCalculator
from .fra import DiscountingFraPricer
from .provider import ImmutableRatesProvider, MissingFixingError
from .sensitivity import (
    CurveParameterSensitivities,
    DiscountFactorSensitivity,
    PointSensitivities,
)
from .swap import DiscountingSwapPricer

__all__ = [
    # Provider
    "ImmutableRatesProvider",
    "MissingFixingError",
    # Sensitivities
    "CurveParameterSensitivities",
    "DiscountFactorSensitivity",
    "PointSensitivities",
    "FiniteDifferenceSensitivityCalculator",
    # Pricers
    "TradePricer",
    "DiscountingTermDepositPricer",
    "DiscountingIborFixingDepositPricer",
    "DiscountingFraPricer",
    "DiscountingSwapPricer",
]
