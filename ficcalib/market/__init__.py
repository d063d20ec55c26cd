"""
Market data inputs: quote keys, quotes and FX rates.
"""

from .data import MarketData, MarketDataNotFoundError
from .fx import FxMatrix
from .keys import QuoteKey

__all__ = [
    "FxMatrix",
    "MarketData",
    "MarketDataNotFoundError",
    "QuoteKey",
]
