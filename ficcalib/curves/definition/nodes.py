"""
Curve nodes: one market quote in, one calibration trade and one curve parameter out.
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import ClassVar, FrozenSet, Optional, Tuple, Type, Union

from ficcalib.curves.base import TenorCurveNodeMetadata, ValueType
from ficcalib.conventions.types import BuySell
from ficcalib.instruments.base import Trade
from ficcalib.instruments.deposit import IborFixingDepositTemplate, TermDepositTemplate
from ficcalib.instruments.fra import FraTemplate
from ficcalib.instruments.swap import FixedIborSwapTemplate, FixedOvernightSwapTemplate
from ficcalib.market.data import MarketData
from ficcalib.market.keys import QuoteKey


@dataclass(frozen=True)
class CurveNode:
    """
    Base curve node.

    Subclasses only restrict the template type; the quote is always the fixed
    rate of the generated trade, shifted by ``additional_spread``.
    """

    template_types: ClassVar[Tuple[Type, ...]] = ()

    template: object
    rate_key: Union[QuoteKey, str]
    additional_spread: float = 0.0
    label: Optional[str] = None

    def __post_init__(self):
        if self.template_types and not isinstance(self.template, self.template_types):
            raise TypeError(
                f"{type(self).__name__} expects a template of type "
                f"{' or '.join(t.__name__ for t in self.template_types)}, "
                f"got {type(self.template).__name__}"
            )
        if isinstance(self.rate_key, str):
            object.__setattr__(self, "rate_key", QuoteKey.of(self.rate_key))
        if self.label is None:
            object.__setattr__(self, "label", self.template.label)

    def requirements(self) -> FrozenSet[QuoteKey]:
        """Market data keys this node reads."""
        return frozenset([self.rate_key])

    def quote(self, market_data: MarketData) -> float:
        return market_data.value(self.rate_key)

    def trade(self, valuation_date: date, market_data: MarketData) -> Trade:
        """Trade to calibrate against: notional 1, fixed rate at the quote plus spread."""
        rate = self.quote(market_data) + self.additional_spread
        return self.template.to_trade(valuation_date, BuySell.BUY, 1.0, rate)

    def initial_guess(
        self, valuation_date: date, market_data: MarketData, value_type: ValueType
    ) -> float:
        """Seed for this node's parameter.

        ``ZERO_RATE`` returns the quote; ``DISCOUNT_FACTOR`` returns
        ``exp(-t * quote)`` with ``t`` the approximate maturity in years.
        """
        quote = self.quote(market_data)
        if value_type == ValueType.ZERO_RATE:
            return quote
        if value_type == ValueType.DISCOUNT_FACTOR:
            return math.exp(-self.template.approximate_maturity * quote)
        return 0.0

    def metadata(self, valuation_date: date) -> TenorCurveNodeMetadata:
        # dates do not depend on the rate, so a zero-rate trade gives the node date
        trade = self.template.to_trade(valuation_date, BuySell.BUY, 1.0, 0.0)
        return TenorCurveNodeMetadata(trade.end_date, self.label)


@dataclass(frozen=True)
class TermDepositCurveNode(CurveNode):
    template_types: ClassVar[Tuple[Type, ...]] = (TermDepositTemplate,)


@dataclass(frozen=True)
class IborFixingDepositCurveNode(CurveNode):
    template_types: ClassVar[Tuple[Type, ...]] = (IborFixingDepositTemplate,)


@dataclass(frozen=True)
class FraCurveNode(CurveNode):
    template_types: ClassVar[Tuple[Type, ...]] = (FraTemplate,)


@dataclass(frozen=True)
class FixedIborSwapCurveNode(CurveNode):
    template_types: ClassVar[Tuple[Type, ...]] = (FixedIborSwapTemplate,)


@dataclass(frozen=True)
class FixedOvernightSwapCurveNode(CurveNode):
    template_types: ClassVar[Tuple[Type, ...]] = (FixedOvernightSwapTemplate,)
