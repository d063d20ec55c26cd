"""
Fixed-float swaps: leg conventions, trade representation and curve templates.
"""

from dataclasses import dataclass
from datetime import date
from typing import ClassVar, Tuple, Union

from ficcalib.conventions.calendars import TARGET, USNY, USNY_GBLO, Calendar
from ficcalib.conventions.dates import add_tenor, get_spot_date, tenor_to_months, tenor_year_fraction
from ficcalib.conventions.daycount import ACT_360, THIRTY_360E, THIRTY_360U, DayCountConvention
from ficcalib.conventions.indices import (
    EUR_ESTR,
    EUR_EURIBOR_3M,
    EUR_EURIBOR_6M,
    USD_FED_FUND,
    USD_LIBOR_3M,
    IborIndex,
    OvernightIndex,
)
from ficcalib.conventions.schedule import SchedulePeriod, generate_schedule
from ficcalib.conventions.types import BusinessDayAdjustment, BuySell, Frequency

from .base import Trade, TradeKind
from .rates import IborRateComputation, OvernightCompoundedRateComputation

RateComputation = Union[IborRateComputation, OvernightCompoundedRateComputation]


@dataclass(frozen=True)
class FixedLegConvention:
    """Specification for the fixed leg of a swap."""

    currency: str
    day_count: DayCountConvention
    frequency: Frequency
    calendar: Calendar
    business_day_adjustment: BusinessDayAdjustment = BusinessDayAdjustment.MODIFIED_FOLLOWING

    def schedule(self, start: date, end: date):
        return generate_schedule(
            start, end, self.frequency, self.day_count, self.calendar, self.business_day_adjustment
        )


@dataclass(frozen=True)
class FloatingPeriod:
    """Accrual period of a floating leg with the observation fixing its rate."""

    period: SchedulePeriod
    rate_computation: RateComputation
    spread: float = 0.0

    @property
    def payment_date(self) -> date:
        return self.period.payment_date

    @property
    def year_fraction(self) -> float:
        return self.period.year_fraction


@dataclass(frozen=True)
class SwapTrade(Trade):
    """Fixed against floating swap in a single currency.

    BUY pays the fixed leg and receives the floating leg. Notionals are not
    exchanged.
    """

    kind: ClassVar[TradeKind] = TradeKind.SWAP

    buy_sell: BuySell
    currency: str
    notional: float
    fixed_rate: float
    fixed_periods: Tuple[SchedulePeriod, ...]
    floating_periods: Tuple[FloatingPeriod, ...]
    index: Union[IborIndex, OvernightIndex]

    def __post_init__(self):
        object.__setattr__(self, "fixed_periods", tuple(self.fixed_periods))
        object.__setattr__(self, "floating_periods", tuple(self.floating_periods))
        if not self.fixed_periods or not self.floating_periods:
            raise ValueError("Swap legs must have at least one period each")

    @property
    def start_date(self) -> date:
        return min(self.fixed_periods[0].start_date, self.floating_periods[0].period.start_date)

    @property
    def end_date(self) -> date:
        return max(self.fixed_periods[-1].end_date, self.floating_periods[-1].period.end_date)


@dataclass(frozen=True)
class FixedIborSwapConvention:
    """Market convention for swaps exchanging a fixed rate against an Ibor index."""

    name: str
    fixed_leg: FixedLegConvention
    index: IborIndex

    def to_trade(
        self,
        valuation_date: date,
        period_to_start: str,
        tenor: str,
        buy_sell: BuySell,
        notional: float,
        fixed_rate: float,
    ) -> SwapTrade:
        index = self.index
        spot = index.effective_date(valuation_date)
        start = add_tenor(spot, period_to_start)
        end = add_tenor(start, tenor)
        float_schedule = generate_schedule(
            start,
            end,
            Frequency.from_months(tenor_to_months(index.tenor)),
            index.day_count,
            index.effective_calendar,
            index.business_day_adjustment,
        )
        floating = tuple(
            FloatingPeriod(p, IborRateComputation(index, index.fixing_date(p.start_date)))
            for p in float_schedule
        )
        return SwapTrade(
            buy_sell=buy_sell,
            currency=self.fixed_leg.currency,
            notional=notional,
            fixed_rate=fixed_rate,
            fixed_periods=tuple(self.fixed_leg.schedule(start, end)),
            floating_periods=floating,
            index=index,
        )


@dataclass(frozen=True)
class FixedOvernightSwapConvention:
    """Market convention for overnight indexed swaps.

    Both legs pay with the fixed leg frequency; the floating leg compounds the
    overnight index over each period.
    """

    name: str
    fixed_leg: FixedLegConvention
    index: OvernightIndex
    spot_lag_days: int = 2

    def to_trade(
        self,
        valuation_date: date,
        period_to_start: str,
        tenor: str,
        buy_sell: BuySell,
        notional: float,
        fixed_rate: float,
    ) -> SwapTrade:
        index = self.index
        spot = get_spot_date(valuation_date, index.calendar, self.spot_lag_days)
        start = add_tenor(spot, period_to_start)
        end = add_tenor(start, tenor)
        float_schedule = generate_schedule(
            start,
            end,
            self.fixed_leg.frequency,
            index.day_count,
            index.calendar,
            self.fixed_leg.business_day_adjustment,
        )
        floating = tuple(
            FloatingPeriod(p, OvernightCompoundedRateComputation(index, p.start_date, p.end_date))
            for p in float_schedule
        )
        return SwapTrade(
            buy_sell=buy_sell,
            currency=self.fixed_leg.currency,
            notional=notional,
            fixed_rate=fixed_rate,
            fixed_periods=tuple(self.fixed_leg.schedule(start, end)),
            floating_periods=floating,
            index=index,
        )


USD_FIXED_6M_LIBOR_3M = FixedIborSwapConvention(
    name="USD-FIXED-6M-LIBOR-3M",
    fixed_leg=FixedLegConvention("USD", THIRTY_360U, Frequency.SEMIANNUAL, USNY_GBLO),
    index=USD_LIBOR_3M,
)

EUR_FIXED_1Y_EURIBOR_3M = FixedIborSwapConvention(
    name="EUR-FIXED-1Y-EURIBOR-3M",
    fixed_leg=FixedLegConvention("EUR", THIRTY_360E, Frequency.ANNUAL, TARGET),
    index=EUR_EURIBOR_3M,
)

EUR_FIXED_1Y_EURIBOR_6M = FixedIborSwapConvention(
    name="EUR-FIXED-1Y-EURIBOR-6M",
    fixed_leg=FixedLegConvention("EUR", THIRTY_360E, Frequency.ANNUAL, TARGET),
    index=EUR_EURIBOR_6M,
)

USD_FIXED_1Y_FED_FUND_OIS = FixedOvernightSwapConvention(
    name="USD-FIXED-1Y-FED-FUND-OIS",
    fixed_leg=FixedLegConvention("USD", ACT_360, Frequency.ANNUAL, USNY),
    index=USD_FED_FUND,
)

EUR_FIXED_1Y_ESTR_OIS = FixedOvernightSwapConvention(
    name="EUR-FIXED-1Y-ESTR-OIS",
    fixed_leg=FixedLegConvention("EUR", ACT_360, Frequency.ANNUAL, TARGET),
    index=EUR_ESTR,
)


@dataclass(frozen=True)
class FixedIborSwapTemplate:
    """Swap of a given tenor starting ``period_to_start`` after spot."""

    tenor: str
    convention: FixedIborSwapConvention
    period_to_start: str = "0M"

    @property
    def label(self) -> str:
        return self.tenor

    @property
    def approximate_maturity(self) -> float:
        return tenor_year_fraction(self.period_to_start) + tenor_year_fraction(self.tenor)

    def to_trade(self, valuation_date: date, buy_sell: BuySell, notional: float, rate: float) -> SwapTrade:
        return self.convention.to_trade(
            valuation_date, self.period_to_start, self.tenor, buy_sell, notional, rate
        )


@dataclass(frozen=True)
class FixedOvernightSwapTemplate:
    """Overnight indexed swap of a given tenor starting ``period_to_start`` after spot."""

    tenor: str
    convention: FixedOvernightSwapConvention
    period_to_start: str = "0M"

    @property
    def label(self) -> str:
        return self.tenor

    @property
    def approximate_maturity(self) -> float:
        return tenor_year_fraction(self.period_to_start) + tenor_year_fraction(self.tenor)

    def to_trade(self, valuation_date: date, buy_sell: BuySell, notional: float, rate: float) -> SwapTrade:
        return self.convention.to_trade(
            valuation_date, self.period_to_start, self.tenor, buy_sell, notional, rate
        )
