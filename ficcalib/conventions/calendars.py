"""
QuantLib-backed holiday calendars.

Calendars are looked up by the names used in index and swap conventions
("USNY", "GBLO", "TARGET", ...). Joint calendars are named with a "+".
"""

from datetime import date, datetime
from typing import Union

import QuantLib as ql

from .daycount import from_ql_date, to_ql_date
from .types import BusinessDayAdjustment

_QL_ADJUSTMENTS = {
    BusinessDayAdjustment.NO_ADJUSTMENT: ql.Unadjusted,
    BusinessDayAdjustment.FOLLOWING: ql.Following,
    BusinessDayAdjustment.MODIFIED_FOLLOWING: ql.ModifiedFollowing,
    BusinessDayAdjustment.PRECEDING: ql.Preceding,
    BusinessDayAdjustment.MODIFIED_PRECEDING: ql.ModifiedPreceding,
}


class Calendar:
    """Business day calendar backed by a QuantLib calendar."""

    def __init__(self, name: str, ql_calendar: ql.Calendar):
        self.name = name
        self._ql_calendar = ql_calendar

    def is_business_day(self, dt: Union[date, datetime]) -> bool:
        """Check if date is a business day (not weekend or holiday)."""
        return self._ql_calendar.isBusinessDay(to_ql_date(dt))

    def is_holiday(self, dt: Union[date, datetime]) -> bool:
        return self._ql_calendar.isHoliday(to_ql_date(dt))

    def add_business_days(self, start_date: Union[date, datetime], days: int) -> date:
        """Move by a number of business days; negative values move backwards."""
        ql_result = self._ql_calendar.advance(to_ql_date(start_date), days, ql.Days)
        return from_ql_date(ql_result)

    def adjust(
        self,
        dt: Union[date, datetime],
        adjustment: BusinessDayAdjustment = BusinessDayAdjustment.MODIFIED_FOLLOWING,
    ) -> date:
        """Apply a business day adjustment to a date."""
        if adjustment not in _QL_ADJUSTMENTS:
            raise ValueError(f"Unknown business day adjustment: {adjustment}")
        ql_result = self._ql_calendar.adjust(to_ql_date(dt), _QL_ADJUSTMENTS[adjustment])
        return from_ql_date(ql_result)

    def __eq__(self, other) -> bool:
        return isinstance(other, Calendar) and other.name == self.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"Calendar({self.name!r})"


TARGET = Calendar("TARGET", ql.TARGET())
USNY = Calendar("USNY", ql.UnitedStates(ql.UnitedStates.Settlement))
GBLO = Calendar("GBLO", ql.UnitedKingdom(ql.UnitedKingdom.Exchange))
USNY_GBLO = Calendar(
    "USNY+GBLO",
    ql.JointCalendar(
        ql.UnitedStates(ql.UnitedStates.Settlement),
        ql.UnitedKingdom(ql.UnitedKingdom.Exchange),
    ),
)
WEEKEND_ONLY = Calendar("WEEKEND", ql.WeekendsOnly())

CALENDARS = {
    "TARGET": TARGET,
    "EUR": TARGET,
    "USNY": USNY,
    "GBLO": GBLO,
    "USNY+GBLO": USNY_GBLO,
    "GBLO+USNY": USNY_GBLO,
    "WEEKEND": WEEKEND_ONLY,
}


def get_calendar(name: str) -> Calendar:
    """Get a calendar by name."""
    key = name.upper()
    if key not in CALENDARS:
        raise ValueError(
            f"Unknown calendar: {name}. Available: {list(CALENDARS.keys())}"
        )
    return CALENDARS[key]
