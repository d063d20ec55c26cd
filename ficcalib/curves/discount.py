"""
Discount factor views over nodal curves.

A curve stores zero rates or discount factors depending on its y value type.
The view is chosen once, when a pricer asks the provider for the discount
factors of a currency or an index, and then used for every cash flow date.
"""
import math
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Union

import numpy as np

from .base import CurveName, ValueType
from .nodal import InterpolatedNodalCurve


class DiscountFactors(ABC):
    """Discount factors from the valuation date, with parameter sensitivity."""

    def __init__(self, curve: InterpolatedNodalCurve, valuation_date: date):
        self.curve = curve
        self.valuation_date = valuation_date
        self._day_count = curve.metadata.day_count

    @property
    def curve_name(self) -> CurveName:
        return self.curve.name

    def relative_time(self, dt: Union[datetime, date, float]) -> float:
        """Convert a date to the curve's year fraction basis."""
        if isinstance(dt, (int, float)):
            return float(dt)
        if isinstance(dt, datetime):
            dt = dt.date()
        return self._day_count.year_fraction(self.valuation_date, dt)

    @abstractmethod
    def discount_factor(self, dt: Union[date, float]) -> float:
        """Discount factor at a date."""

    @abstractmethod
    def parameter_sensitivity(self, dt: Union[date, float]) -> np.ndarray:
        """Derivative of the discount factor at a date with respect to the curve parameters."""

    def zero_rate(self, dt: Union[date, float]) -> float:
        """Continuously compounded zero rate at a date."""
        t = self.relative_time(dt)
        if t <= 0:
            return 0.0
        return -math.log(self.discount_factor(t)) / t


class ZeroRateDiscountFactors(DiscountFactors):
    """Curve y values are continuously compounded zero rates: df = exp(-r(t) t)."""

    def discount_factor(self, dt: Union[date, float]) -> float:
        t = self.relative_time(dt)
        return math.exp(-self.curve.y_value(t) * t)

    def parameter_sensitivity(self, dt: Union[date, float]) -> np.ndarray:
        t = self.relative_time(dt)
        df = math.exp(-self.curve.y_value(t) * t)
        return -t * df * self.curve.y_value_parameter_sensitivity(t)

    def zero_rate(self, dt: Union[date, float]) -> float:
        return self.curve.y_value(self.relative_time(dt))


class SimpleDiscountFactors(DiscountFactors):
    """Curve y values are the discount factors themselves.

    Before the first node the discount factor is interpolated log-linearly
    from df(0) = 1, whatever the curve's left extrapolator. Without that
    anchor only ratios of node values would be priced.
    """

    def discount_factor(self, dt: Union[date, float]) -> float:
        t = self.relative_time(dt)
        if t == 0:
            return 1.0
        x0 = self.curve.x_values[0]
        if 0 < x0 and t < x0:
            return float(self.curve.y_values[0] ** (t / x0))
        return self.curve.y_value(t)

    def parameter_sensitivity(self, dt: Union[date, float]) -> np.ndarray:
        t = self.relative_time(dt)
        sensitivity = np.zeros(self.curve.parameter_count)
        if t == 0:
            return sensitivity
        x0 = self.curve.x_values[0]
        if 0 < x0 and t < x0:
            # d(y0 ** (t / x0)) / d y0
            sensitivity[0] = (t / x0) * self.curve.y_values[0] ** (t / x0 - 1.0)
            return sensitivity
        return self.curve.y_value_parameter_sensitivity(t)


_DISCOUNT_FACTOR_VIEWS = {
    ValueType.ZERO_RATE: ZeroRateDiscountFactors,
    ValueType.DISCOUNT_FACTOR: SimpleDiscountFactors,
}


def discount_factors(curve: InterpolatedNodalCurve, valuation_date: date) -> DiscountFactors:
    """Wrap a curve in the discount factor view matching its y value type."""
    y_type = curve.metadata.y_value_type
    if y_type not in _DISCOUNT_FACTOR_VIEWS:
        raise ValueError(
            f"Curve {curve.name} with y values of type {y_type.value} cannot provide discount factors"
        )
    return _DISCOUNT_FACTOR_VIEWS[y_type](curve, valuation_date)
