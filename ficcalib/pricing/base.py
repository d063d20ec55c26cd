"""
Interface shared by the discounting trade pricers.
"""
from abc import ABC, abstractmethod

from .provider import ImmutableRatesProvider
from .sensitivity import PointSensitivities


class TradePricer(ABC):
    """Prices one kind of trade against a rates provider."""

    @abstractmethod
    def present_value(self, trade, provider: ImmutableRatesProvider) -> float:
        """Present value in the trade currency."""

    @abstractmethod
    def present_value_sensitivity(self, trade, provider: ImmutableRatesProvider) -> PointSensitivities:
        """Point sensitivities of the present value."""

    @abstractmethod
    def par_rate(self, trade, provider: ImmutableRatesProvider) -> float:
        """Fixed rate for which the present value is zero."""

    @abstractmethod
    def par_spread(self, trade, provider: ImmutableRatesProvider) -> float:
        """Par rate minus the trade's fixed rate."""

    @abstractmethod
    def par_spread_sensitivity(self, trade, provider: ImmutableRatesProvider) -> PointSensitivities:
        """Point sensitivities of the par spread."""
