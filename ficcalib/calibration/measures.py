"""
Calibration measures: the residual each trade contributes and its derivative.

A measure is registered per trade kind. ``CalibrationMeasures.bind`` resolves
the measure of every trade once, before the root finder starts, so the solver
loop never looks up trade types.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np

from ficcalib.curves.definition.curve import CurveDefinitionError
from ficcalib.curves.parameters import CurveParameterSize
from ficcalib.instruments.base import Trade, TradeKind
from ficcalib.pricing.base import TradePricer
from ficcalib.pricing.deposit import DiscountingIborFixingDepositPricer, DiscountingTermDepositPricer
from ficcalib.pricing.fra import DiscountingFraPricer
from ficcalib.pricing.provider import ImmutableRatesProvider
from ficcalib.pricing.swap import DiscountingSwapPricer


class CalibrationMeasure(ABC):
    """Residual of one trade against a provider, zero when calibrated."""

    name = "measure"

    def __init__(self, pricer: TradePricer):
        self.pricer = pricer

    @abstractmethod
    def value(self, trade: Trade, provider: ImmutableRatesProvider) -> float:
        """Residual of the trade."""

    @abstractmethod
    def derivative(
        self,
        trade: Trade,
        provider: ImmutableRatesProvider,
        curve_order: Sequence[CurveParameterSize],
    ) -> np.ndarray:
        """Derivative of the residual, aligned to ``curve_order``."""


class ParSpreadMeasure(CalibrationMeasure):
    """Par rate of the trade minus its fixed rate."""

    name = "ParSpread"

    def value(self, trade, provider):
        return self.pricer.par_spread(trade, provider)

    def derivative(self, trade, provider, curve_order):
        points = self.pricer.par_spread_sensitivity(trade, provider)
        return provider.parameter_sensitivity(points).to_array(curve_order)


class PresentValueMeasure(CalibrationMeasure):
    """Present value of the trade."""

    name = "PresentValue"

    def value(self, trade, provider):
        return self.pricer.present_value(trade, provider)

    def derivative(self, trade, provider, curve_order):
        points = self.pricer.present_value_sensitivity(trade, provider)
        return provider.parameter_sensitivity(points).to_array(curve_order)


@dataclass(frozen=True)
class BoundMeasure:
    """A trade paired with the measure resolved for it."""

    trade: Trade
    measure: CalibrationMeasure

    def value(self, provider: ImmutableRatesProvider) -> float:
        return self.measure.value(self.trade, provider)

    def derivative(
        self, provider: ImmutableRatesProvider, curve_order: Sequence[CurveParameterSize]
    ) -> np.ndarray:
        return self.measure.derivative(self.trade, provider, curve_order)


class CalibrationMeasures:
    """Measures per trade kind."""

    def __init__(self, name: str, measures: Mapping[TradeKind, CalibrationMeasure]):
        self.name = name
        self._measures: Dict[TradeKind, CalibrationMeasure] = dict(measures)

    @classmethod
    def par_spread(cls) -> "CalibrationMeasures":
        """Par spread for every supported trade; the usual choice for calibration."""
        return cls("ParSpread", {
            TradeKind.TERM_DEPOSIT: ParSpreadMeasure(DiscountingTermDepositPricer()),
            TradeKind.IBOR_FIXING_DEPOSIT: ParSpreadMeasure(DiscountingIborFixingDepositPricer()),
            TradeKind.FRA: ParSpreadMeasure(DiscountingFraPricer()),
            TradeKind.SWAP: ParSpreadMeasure(DiscountingSwapPricer()),
        })

    @classmethod
    def present_value(cls) -> "CalibrationMeasures":
        return cls("PresentValue", {
            TradeKind.TERM_DEPOSIT: PresentValueMeasure(DiscountingTermDepositPricer()),
            TradeKind.IBOR_FIXING_DEPOSIT: PresentValueMeasure(DiscountingIborFixingDepositPricer()),
            TradeKind.FRA: PresentValueMeasure(DiscountingFraPricer()),
            TradeKind.SWAP: PresentValueMeasure(DiscountingSwapPricer()),
        })

    @property
    def trade_kinds(self) -> List[TradeKind]:
        return list(self._measures)

    def measure(self, trade: Trade) -> CalibrationMeasure:
        kind: Optional[TradeKind] = getattr(trade, "kind", None)
        if kind not in self._measures:
            raise CurveDefinitionError(
                f"Measures {self.name} cannot calibrate trade {type(trade).__name__}; "
                f"supported kinds: {[k.value for k in self._measures]}"
            )
        return self._measures[kind]

    def value(self, trade: Trade, provider: ImmutableRatesProvider) -> float:
        return self.measure(trade).value(trade, provider)

    def derivative(
        self,
        trade: Trade,
        provider: ImmutableRatesProvider,
        curve_order: Sequence[CurveParameterSize],
    ) -> np.ndarray:
        return self.measure(trade).derivative(trade, provider, curve_order)

    def bind(self, trades: Sequence[Trade]) -> List[BoundMeasure]:
        return [BoundMeasure(trade, self.measure(trade)) for trade in trades]

    def __repr__(self) -> str:
        return f"CalibrationMeasures({self.name})"
