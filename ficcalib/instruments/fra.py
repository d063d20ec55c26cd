"""
Forward rate agreements.
"""

from dataclasses import dataclass
from datetime import date
from typing import ClassVar

from ficcalib.conventions.dates import add_tenor_adjusted, tenor_to_months
from ficcalib.conventions.indices import IborIndex
from ficcalib.conventions.types import BuySell

from .base import Trade, TradeKind
from .rates import IborRateComputation


@dataclass(frozen=True)
class FraTrade(Trade):
    """FRA settled at the start of the period with ISDA discounting.

    BUY pays the fixed rate and receives the index fixing.
    """

    kind: ClassVar[TradeKind] = TradeKind.FRA

    buy_sell: BuySell
    notional: float
    index: IborIndex
    fixing_date: date
    start_date: date
    end_date: date
    payment_date: date
    year_fraction: float
    fixed_rate: float

    @property
    def currency(self) -> str:
        return self.index.currency

    @property
    def rate_computation(self) -> IborRateComputation:
        return IborRateComputation(self.index, self.fixing_date)


@dataclass(frozen=True)
class FraTemplate:
    """FRA starting ``period_to_start`` after spot and ending ``period_to_end`` after spot.

    The end defaults to the start plus the index tenor, e.g. 3Mx6M on a 3M index.
    """

    period_to_start: str
    index: IborIndex
    period_to_end: str = ""

    def __post_init__(self):
        if not self.period_to_end:
            months = tenor_to_months(self.period_to_start) + tenor_to_months(self.index.tenor)
            object.__setattr__(self, "period_to_end", f"{months}M")
        if tenor_to_months(self.period_to_end) <= tenor_to_months(self.period_to_start):
            raise ValueError(
                f"FRA period to end {self.period_to_end} must be after period to start {self.period_to_start}"
            )

    @property
    def label(self) -> str:
        return self.period_to_end

    @property
    def approximate_maturity(self) -> float:
        return tenor_to_months(self.period_to_end) / 12.0

    def to_trade(self, valuation_date: date, buy_sell: BuySell, notional: float, rate: float) -> FraTrade:
        index = self.index
        spot = index.effective_date(valuation_date)
        start = add_tenor_adjusted(
            spot, self.period_to_start, index.effective_calendar,
            index.business_day_adjustment, index.end_of_month_rule,
        )
        end = add_tenor_adjusted(
            spot, self.period_to_end, index.effective_calendar,
            index.business_day_adjustment, index.end_of_month_rule,
        )
        return FraTrade(
            buy_sell=buy_sell,
            notional=notional,
            index=index,
            fixing_date=index.fixing_date(start),
            start_date=start,
            end_date=end,
            payment_date=start,
            year_fraction=index.day_count.year_fraction(start, end),
            fixed_rate=rate,
        )
