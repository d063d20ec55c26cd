"""
Term deposits and Ibor fixing deposits, with their conventions and templates.
"""

from dataclasses import dataclass
from datetime import date
from typing import ClassVar, Optional

from ficcalib.conventions.calendars import TARGET, USNY, Calendar
from ficcalib.conventions.dates import add_tenor_adjusted, get_spot_date, tenor_year_fraction
from ficcalib.conventions.daycount import ACT_360, DayCountConvention
from ficcalib.conventions.indices import IborIndex
from ficcalib.conventions.types import BusinessDayAdjustment, BuySell

from .base import Trade, TradeKind
from .rates import IborRateComputation


@dataclass(frozen=True)
class TermDepositConvention:
    """Specification for a term deposit convention."""

    name: str
    currency: str
    day_count: DayCountConvention
    calendar: Calendar
    spot_lag_days: int = 2
    business_day_adjustment: BusinessDayAdjustment = BusinessDayAdjustment.MODIFIED_FOLLOWING

    def to_trade(
        self,
        valuation_date: date,
        tenor: str,
        buy_sell: BuySell,
        notional: float,
        rate: float,
    ) -> "TermDepositTrade":
        start = get_spot_date(valuation_date, self.calendar, self.spot_lag_days)
        end = add_tenor_adjusted(start, tenor, self.calendar, self.business_day_adjustment)
        return TermDepositTrade(
            buy_sell=buy_sell,
            currency=self.currency,
            notional=notional,
            start_date=start,
            end_date=end,
            year_fraction=self.day_count.year_fraction(start, end),
            rate=rate,
        )


USD_DEPOSIT_T2 = TermDepositConvention("USD-DEPOSIT-T2", "USD", ACT_360, USNY, 2)
EUR_DEPOSIT_T2 = TermDepositConvention("EUR-DEPOSIT-T2", "EUR", ACT_360, TARGET, 2)


@dataclass(frozen=True)
class TermDepositTrade(Trade):
    """Fixed rate deposit: the notional is exchanged at start and repaid with interest at end.

    BUY places the money: pays the notional at start, receives it back with
    interest at end.
    """

    kind: ClassVar[TradeKind] = TradeKind.TERM_DEPOSIT

    buy_sell: BuySell
    currency: str
    notional: float
    start_date: date
    end_date: date
    year_fraction: float
    rate: float

    def __post_init__(self):
        if self.start_date >= self.end_date:
            raise ValueError(
                f"Deposit start {self.start_date} must be before end {self.end_date}"
            )


@dataclass(frozen=True)
class TermDepositTemplate:
    """Deposit of a given tenor starting at spot."""

    tenor: str
    convention: TermDepositConvention

    @property
    def label(self) -> str:
        return self.tenor

    @property
    def approximate_maturity(self) -> float:
        return tenor_year_fraction(self.tenor)

    def to_trade(self, valuation_date: date, buy_sell: BuySell, notional: float, rate: float) -> TermDepositTrade:
        return self.convention.to_trade(valuation_date, self.tenor, buy_sell, notional, rate)


@dataclass(frozen=True)
class IborFixingDepositTrade(Trade):
    """Deposit paying a fixed rate against the fixing of an Ibor index.

    BUY receives the fixed rate and pays the index fixing, settled at the end
    of the index period.
    """

    kind: ClassVar[TradeKind] = TradeKind.IBOR_FIXING_DEPOSIT

    buy_sell: BuySell
    notional: float
    index: IborIndex
    fixing_date: date
    start_date: date
    end_date: date
    year_fraction: float
    fixed_rate: float

    @property
    def currency(self) -> str:
        return self.index.currency

    @property
    def rate_computation(self) -> IborRateComputation:
        return IborRateComputation(self.index, self.fixing_date)


@dataclass(frozen=True)
class IborFixingDepositTemplate:
    """Deposit over the period of one index fixing, starting at spot."""

    index: IborIndex
    tenor: Optional[str] = None

    @property
    def deposit_tenor(self) -> str:
        return self.tenor or self.index.tenor

    @property
    def label(self) -> str:
        return self.deposit_tenor

    @property
    def approximate_maturity(self) -> float:
        return tenor_year_fraction(self.deposit_tenor)

    def to_trade(
        self, valuation_date: date, buy_sell: BuySell, notional: float, rate: float
    ) -> IborFixingDepositTrade:
        start = self.index.effective_date(valuation_date)
        end = add_tenor_adjusted(
            start,
            self.deposit_tenor,
            self.index.effective_calendar,
            self.index.business_day_adjustment,
            self.index.end_of_month_rule,
        )
        return IborFixingDepositTrade(
            buy_sell=buy_sell,
            notional=notional,
            index=self.index,
            fixing_date=self.index.fixing_date(start),
            start_date=start,
            end_date=end,
            year_fraction=self.index.day_count.year_fraction(start, end),
            fixed_rate=rate,
        )
