"""
Immutable snapshot of curves and exogenous market data used for pricing.

Discount curves are keyed by currency and forward curves by index name. The
same curve object may serve several roles; point sensitivities are reported
against the curve name, so they aggregate naturally.
"""
import logging
from datetime import date
from typing import Dict, Mapping, Optional, Union

import pandas as pd

from ficcalib.conventions.indices import IborIndex, OvernightIndex
from ficcalib.curves.base import CurveName
from ficcalib.curves.discount import DiscountFactors, discount_factors
from ficcalib.curves.nodal import InterpolatedNodalCurve
from ficcalib.market.fx import FxMatrix

from .sensitivity import CurveParameterSensitivities, PointSensitivities

logger = logging.getLogger(__name__)

IndexLike = Union[IborIndex, OvernightIndex, str]


class MissingFixingError(ValueError):
    """Raised when a fixing before the valuation date is not in the time series."""


def _index_name(index: IndexLike) -> str:
    return index if isinstance(index, str) else index.name


class ImmutableRatesProvider:
    """
    Rates provider holding calibrated or known curves.

    Never mutated: ``with_*`` methods return new providers.
    """

    def __init__(
        self,
        valuation_date: date,
        discount_curves: Optional[Mapping[str, InterpolatedNodalCurve]] = None,
        index_curves: Optional[Mapping[str, InterpolatedNodalCurve]] = None,
        fx_matrix: Optional[FxMatrix] = None,
        time_series: Optional[Mapping[str, pd.Series]] = None,
    ):
        """
        Initialize rates provider.

        Args:
            valuation_date: Date all curves are measured from
            discount_curves: Discount curve per currency code
            index_curves: Forward curve per index name
            fx_matrix: Exogenous FX rates
            time_series: Historical fixings per index name, indexed by date
        """
        self.valuation_date = valuation_date
        self.discount_curves: Dict[str, InterpolatedNodalCurve] = dict(discount_curves or {})
        self.index_curves: Dict[str, InterpolatedNodalCurve] = {
            _index_name(k): v for k, v in (index_curves or {}).items()
        }
        self.fx_matrix = fx_matrix if fx_matrix is not None else FxMatrix.empty()
        self.time_series: Dict[str, pd.Series] = {}
        for name, series in (time_series or {}).items():
            normalized = series.copy()
            normalized.index = pd.to_datetime(normalized.index)
            self.time_series[_index_name(name)] = normalized.sort_index()

        self._curves: Dict[CurveName, InterpolatedNodalCurve] = {}
        for curve in list(self.discount_curves.values()) + list(self.index_curves.values()):
            existing = self._curves.get(curve.name)
            if existing is not None and existing is not curve:
                raise ValueError(f"Two different curves share the name {curve.name}")
            self._curves[curve.name] = curve

    # ------------------------------------------------------------------
    # Curves
    # ------------------------------------------------------------------
    @property
    def curves(self) -> Dict[CurveName, InterpolatedNodalCurve]:
        return dict(self._curves)

    def curve(self, name: CurveName) -> InterpolatedNodalCurve:
        if name not in self._curves:
            raise ValueError(f"Unable to find curve {name}. Available: {list(self._curves)}")
        return self._curves[name]

    def discount_factors(self, currency: str) -> DiscountFactors:
        if currency not in self.discount_curves:
            raise ValueError(
                f"Unable to find discount curve for {currency}. "
                f"Available: {list(self.discount_curves)}"
            )
        return discount_factors(self.discount_curves[currency], self.valuation_date)

    def index_discount_factors(self, index: IndexLike) -> DiscountFactors:
        name = _index_name(index)
        if name not in self.index_curves:
            raise ValueError(
                f"Unable to find forward curve for {name}. Available: {list(self.index_curves)}"
            )
        return discount_factors(self.index_curves[name], self.valuation_date)

    def fx_rate(self, base: str, counter: str) -> float:
        return self.fx_matrix.fx_rate(base, counter)

    # ------------------------------------------------------------------
    # Fixings
    # ------------------------------------------------------------------
    def fixing(self, index: IndexLike, fixing_date: date) -> Optional[float]:
        """Historical fixing of an index, or None if not in the time series."""
        series = self.time_series.get(_index_name(index))
        if series is None:
            return None
        value = series.get(pd.Timestamp(fixing_date))
        return None if value is None or pd.isna(value) else float(value)

    def _known_fixing(self, index: IndexLike, fixing_date: date) -> Optional[float]:
        if fixing_date > self.valuation_date:
            return None
        value = self.fixing(index, fixing_date)
        if value is None and fixing_date < self.valuation_date:
            raise MissingFixingError(
                f"Missing fixing of {_index_name(index)} on {fixing_date} "
                f"(valuation date {self.valuation_date})"
            )
        if value is None:
            logger.debug(
                "No fixing for %s on valuation date, forecasting from curve", _index_name(index)
            )
        return value

    # ------------------------------------------------------------------
    # Ibor rates
    # ------------------------------------------------------------------
    def ibor_rate(self, index: IborIndex, fixing_date: date) -> float:
        """Fixing of an Ibor index, historical when known, otherwise forward."""
        known = self._known_fixing(index, fixing_date)
        if known is not None:
            return known
        start = index.effective_date(fixing_date)
        end = index.maturity_date(start)
        accrual = index.day_count.year_fraction(start, end)
        dfs = self.index_discount_factors(index)
        return (dfs.discount_factor(start) / dfs.discount_factor(end) - 1.0) / accrual

    def ibor_rate_sensitivity(self, index: IborIndex, fixing_date: date) -> PointSensitivities:
        if self._known_fixing(index, fixing_date) is not None:
            return PointSensitivities.empty()
        start = index.effective_date(fixing_date)
        end = index.maturity_date(start)
        accrual = index.day_count.year_fraction(start, end)
        dfs = self.index_discount_factors(index)
        df_start = dfs.discount_factor(start)
        df_end = dfs.discount_factor(end)
        return PointSensitivities.of(
            dfs.curve_name, start, 1.0 / (df_end * accrual)
        ).combined_with(
            PointSensitivities.of(dfs.curve_name, end, -df_start / (df_end * df_end * accrual))
        )

    # ------------------------------------------------------------------
    # Overnight rates
    # ------------------------------------------------------------------
    def _overnight_split(self, index: OvernightIndex, start: date, end: date):
        """Compound the known fixings from start; return (factor, first forward date)."""
        factor = 1.0
        current = start
        while current < end and current <= self.valuation_date:
            value = self._known_fixing(index, current)
            if value is None:
                break
            next_date = index.next_fixing_date(current)
            factor *= 1.0 + value * index.day_count.year_fraction(current, min(next_date, end))
            current = next_date
        return factor, min(current, end)

    def overnight_rate(self, index: OvernightIndex, start: date, end: date) -> float:
        """Daily compounded overnight rate over [start, end].

        Known fixings are compounded exactly; the forward part uses the
        discount factor ratio of the index curve.
        """
        accrual = index.day_count.year_fraction(start, end)
        factor, forward_start = self._overnight_split(index, start, end)
        if forward_start < end:
            dfs = self.index_discount_factors(index)
            factor *= dfs.discount_factor(forward_start) / dfs.discount_factor(end)
        return (factor - 1.0) / accrual

    def overnight_rate_sensitivity(self, index: OvernightIndex, start: date, end: date) -> PointSensitivities:
        accrual = index.day_count.year_fraction(start, end)
        factor, forward_start = self._overnight_split(index, start, end)
        if forward_start >= end:
            return PointSensitivities.empty()
        dfs = self.index_discount_factors(index)
        df_start = dfs.discount_factor(forward_start)
        df_end = dfs.discount_factor(end)
        return PointSensitivities.of(
            dfs.curve_name, forward_start, factor / (df_end * accrual)
        ).combined_with(
            PointSensitivities.of(
                dfs.curve_name, end, -factor * df_start / (df_end * df_end * accrual)
            )
        )

    # ------------------------------------------------------------------
    # Sensitivities
    # ------------------------------------------------------------------
    def parameter_sensitivity(self, points: PointSensitivities) -> CurveParameterSensitivities:
        """Convert point sensitivities to sensitivities to the curve parameters."""
        views: Dict[CurveName, DiscountFactors] = {}
        result: Dict[CurveName, object] = {}
        for point in points:
            view = views.get(point.curve_name)
            if view is None:
                view = discount_factors(self.curve(point.curve_name), self.valuation_date)
                views[point.curve_name] = view
            contribution = point.sensitivity * view.parameter_sensitivity(point.date)
            if point.curve_name in result:
                result[point.curve_name] = result[point.curve_name] + contribution
            else:
                result[point.curve_name] = contribution
        return CurveParameterSensitivities(result)

    # ------------------------------------------------------------------
    # Derived providers
    # ------------------------------------------------------------------
    def with_curves(
        self,
        discount_curves: Optional[Mapping[str, InterpolatedNodalCurve]] = None,
        index_curves: Optional[Mapping[str, InterpolatedNodalCurve]] = None,
    ) -> "ImmutableRatesProvider":
        """New provider with curves added or replaced for the given currencies and indices."""
        discount = dict(self.discount_curves)
        discount.update(discount_curves or {})
        index = dict(self.index_curves)
        index.update({_index_name(k): v for k, v in (index_curves or {}).items()})
        return ImmutableRatesProvider(
            self.valuation_date, discount, index, self.fx_matrix, self.time_series
        )

    def with_curve(self, curve: InterpolatedNodalCurve) -> "ImmutableRatesProvider":
        """New provider where every role played by the curve of the same name uses ``curve``."""
        self.curve(curve.name)
        discount = {k: curve if v.name == curve.name else v for k, v in self.discount_curves.items()}
        index = {k: curve if v.name == curve.name else v for k, v in self.index_curves.items()}
        return ImmutableRatesProvider(
            self.valuation_date, discount, index, self.fx_matrix, self.time_series
        )

    def __repr__(self) -> str:
        return (
            f"ImmutableRatesProvider(valuation_date={self.valuation_date}, "
            f"discount={ {k: v.name for k, v in self.discount_curves.items()} }, "
            f"index={ {k: v.name for k, v in self.index_curves.items()} })"
        )
