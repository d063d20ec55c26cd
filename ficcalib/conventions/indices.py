"""
Interest rate indices referenced by calibration instruments.

An index knows how to derive its accrual period from a fixing date, which is
what the rates provider needs to project a forward rate off an index curve.
"""

from dataclasses import dataclass
from datetime import date

from .calendars import GBLO, TARGET, USNY, USNY_GBLO, Calendar
from .dates import add_tenor_adjusted, tenor_year_fraction
from .daycount import ACT_360, DayCountConvention
from .types import BusinessDayAdjustment


@dataclass(frozen=True)
class IborIndex:
    """Term rate index such as USD-LIBOR-3M or EUR-EURIBOR-6M."""

    name: str
    currency: str
    tenor: str
    day_count: DayCountConvention
    fixing_calendar: Calendar
    effective_calendar: Calendar
    fixing_offset_days: int = 2
    business_day_adjustment: BusinessDayAdjustment = BusinessDayAdjustment.MODIFIED_FOLLOWING
    end_of_month_rule: bool = True

    def effective_date(self, fixing_date: date) -> date:
        """Start of the deposit period underlying a fixing."""
        return self.effective_calendar.add_business_days(
            self.fixing_calendar.adjust(fixing_date), self.fixing_offset_days
        )

    def fixing_date(self, effective_date: date) -> date:
        """Fixing date of a deposit period starting on effective_date."""
        return self.fixing_calendar.add_business_days(
            self.effective_calendar.adjust(effective_date), -self.fixing_offset_days
        )

    def maturity_date(self, effective_date: date) -> date:
        return add_tenor_adjusted(
            effective_date,
            self.tenor,
            self.effective_calendar,
            self.business_day_adjustment,
            self.end_of_month_rule,
        )

    @property
    def tenor_years(self) -> float:
        return tenor_year_fraction(self.tenor)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class OvernightIndex:
    """Overnight index such as USD-FED-FUND or EUR-ESTR."""

    name: str
    currency: str
    day_count: DayCountConvention
    calendar: Calendar

    def next_fixing_date(self, fixing_date: date) -> date:
        return self.calendar.add_business_days(fixing_date, 1)

    def __str__(self) -> str:
        return self.name


USD_LIBOR_3M = IborIndex("USD-LIBOR-3M", "USD", "3M", ACT_360, GBLO, USNY_GBLO)
USD_LIBOR_6M = IborIndex("USD-LIBOR-6M", "USD", "6M", ACT_360, GBLO, USNY_GBLO)
EUR_EURIBOR_3M = IborIndex("EUR-EURIBOR-3M", "EUR", "3M", ACT_360, TARGET, TARGET)
EUR_EURIBOR_6M = IborIndex("EUR-EURIBOR-6M", "EUR", "6M", ACT_360, TARGET, TARGET)

USD_FED_FUND = OvernightIndex("USD-FED-FUND", "USD", ACT_360, USNY)
EUR_ESTR = OvernightIndex("EUR-ESTR", "EUR", ACT_360, TARGET)

INDICES = {
    index.name: index
    for index in (
        USD_LIBOR_3M,
        USD_LIBOR_6M,
        EUR_EURIBOR_3M,
        EUR_EURIBOR_6M,
        USD_FED_FUND,
        EUR_ESTR,
    )
}


def get_index(name: str):
    """Get an Ibor or overnight index by name."""
    key = name.upper()
    if key not in INDICES:
        raise ValueError(f"Unknown index: {name}. Available: {list(INDICES.keys())}")
    return INDICES[key]
