"""
Market conventions: day counts, calendars, tenors, schedules and indices.
"""

from .calendars import CALENDARS, Calendar, get_calendar
from .dates import (
    add_tenor,
    add_tenor_adjusted,
    get_spot_date,
    parse_tenor,
    tenor_to_months,
    tenor_year_fraction,
)
from .daycount import (
    ACT_360,
    ACT_365F,
    ACT_ACT,
    DAY_COUNT_CONVENTIONS,
    THIRTY_360E,
    THIRTY_360U,
    DayCountConvention,
    get_day_count_convention,
)
from .indices import (
    EUR_ESTR,
    EUR_EURIBOR_3M,
    EUR_EURIBOR_6M,
    USD_FED_FUND,
    USD_LIBOR_3M,
    USD_LIBOR_6M,
    IborIndex,
    OvernightIndex,
    get_index,
)
from .schedule import SchedulePeriod, generate_schedule
from .types import BusinessDayAdjustment, BuySell, Frequency, StubType

__all__ = [
    # Day counts
    "DayCountConvention",
    "ACT_360",
    "ACT_365F",
    "ACT_ACT",
    "THIRTY_360E",
    "THIRTY_360U",
    "DAY_COUNT_CONVENTIONS",
    "get_day_count_convention",
    # Calendars
    "Calendar",
    "CALENDARS",
    "get_calendar",
    # Dates and schedules
    "add_tenor",
    "add_tenor_adjusted",
    "get_spot_date",
    "parse_tenor",
    "tenor_to_months",
    "tenor_year_fraction",
    "SchedulePeriod",
    "generate_schedule",
    # Indices
    "IborIndex",
    "OvernightIndex",
    "USD_LIBOR_3M",
    "USD_LIBOR_6M",
    "EUR_EURIBOR_3M",
    "EUR_EURIBOR_6M",
    "USD_FED_FUND",
    "EUR_ESTR",
    "get_index",
    # Types
    "BusinessDayAdjustment",
    "BuySell",
    "Frequency",
    "StubType",
]
