"""
Tenor arithmetic and spot-lag helpers.

Tenors are plain strings: "ON", "<n>D", "<n>W", "<n>M" and "<n>Y".
"""

from datetime import date, datetime, timedelta
from typing import Tuple, Union

from dateutil.relativedelta import relativedelta

from .calendars import Calendar
from .types import BusinessDayAdjustment

_TENOR_UNITS = ("D", "W", "M", "Y")


def parse_tenor(tenor: str) -> Tuple[int, str]:
    """Split a tenor string into its amount and unit, e.g. '18M' -> (18, 'M')."""
    t = tenor.upper().strip()
    if t == "ON":
        return 1, "D"
    if len(t) < 2 or t[-1] not in _TENOR_UNITS or not t[:-1].isdigit():
        raise ValueError(f"Unsupported tenor: {tenor}")
    return int(t[:-1]), t[-1]


def tenor_to_months(tenor: str) -> int:
    """Convert tenor string (e.g., '3M', '2Y') to number of months."""
    amount, unit = parse_tenor(tenor)
    if unit == "M":
        return amount
    if unit == "Y":
        return amount * 12
    raise ValueError(f"Tenor {tenor} is not a whole number of months")


def tenor_year_fraction(tenor: str) -> float:
    """Approximate length of a tenor in years."""
    amount, unit = parse_tenor(tenor)
    if unit == "Y":
        return float(amount)
    if unit == "M":
        return amount / 12.0
    if unit == "W":
        return amount * 7 / 365.0
    return amount / 365.0


def is_end_of_month(dt: date) -> bool:
    return dt == get_month_end(dt.year, dt.month)


def get_month_end(year: int, month: int) -> date:
    """Get the last calendar day of a given month."""
    return date(year, month, 1) + relativedelta(day=31)


def apply_end_of_month_rule(
    dt: Union[date, datetime], months_to_add: int, apply_eom_rule: bool = True
) -> date:
    """Add months to a date, keeping month ends on month ends if requested."""
    if isinstance(dt, datetime):
        dt = dt.date()
    # relativedelta clips e.g. Jan 31 + 1M to Feb 28/29
    result = dt + relativedelta(months=months_to_add)
    if apply_eom_rule and is_end_of_month(dt):
        return get_month_end(result.year, result.month)
    return result


def add_tenor(
    start_date: Union[date, datetime], tenor: str, end_of_month_rule: bool = True
) -> date:
    """Add a tenor to a date without business day adjustment."""
    if isinstance(start_date, datetime):
        start_date = start_date.date()
    amount, unit = parse_tenor(tenor)
    if unit == "D":
        return start_date + timedelta(days=amount)
    if unit == "W":
        return start_date + timedelta(weeks=amount)
    return apply_end_of_month_rule(start_date, tenor_to_months(tenor), end_of_month_rule)


def add_tenor_adjusted(
    start_date: Union[date, datetime],
    tenor: str,
    calendar: Calendar,
    business_day_adjustment: BusinessDayAdjustment = BusinessDayAdjustment.MODIFIED_FOLLOWING,
    end_of_month_rule: bool = True,
) -> date:
    """Add a tenor and roll the result onto a business day."""
    unadjusted = add_tenor(start_date, tenor, end_of_month_rule)
    return calendar.adjust(unadjusted, business_day_adjustment)


def get_spot_date(trade_date: Union[date, datetime], calendar: Calendar, spot_lag: int = 2) -> date:
    """Get spot date from trade date by moving spot_lag business days."""
    if isinstance(trade_date, datetime):
        trade_date = trade_date.date()
    return calendar.add_business_days(calendar.adjust(trade_date, BusinessDayAdjustment.FOLLOWING), spot_lag)
