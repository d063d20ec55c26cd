"""
Periodic schedule generation for swap legs.
"""

from dataclasses import dataclass
from datetime import date
from typing import List

from .calendars import Calendar
from .dates import apply_end_of_month_rule
from .daycount import DayCountConvention
from .types import BusinessDayAdjustment, Frequency, StubType


@dataclass(frozen=True)
class SchedulePeriod:
    """A single accrual period of a leg."""

    unadjusted_start: date
    unadjusted_end: date
    start_date: date
    end_date: date
    payment_date: date
    year_fraction: float
    is_stub: bool = False


def generate_schedule(
    start_date: date,
    end_date: date,
    frequency: Frequency,
    day_count: DayCountConvention,
    calendar: Calendar,
    business_day_adjustment: BusinessDayAdjustment = BusinessDayAdjustment.MODIFIED_FOLLOWING,
    stub_type: StubType = StubType.SHORT_FINAL,
    end_of_month_rule: bool = True,
) -> List[SchedulePeriod]:
    """
    Generate the accrual periods between two unadjusted dates.

    Args:
        start_date: Unadjusted start of the first period
        end_date: Unadjusted end of the last period
        frequency: Period length
        day_count: Day count used for the period year fractions
        calendar: Calendar used to adjust period boundaries
        business_day_adjustment: Adjustment applied to every boundary
        stub_type: Where a period shorter than the frequency is placed
        end_of_month_rule: Keep month-end dates on month ends when rolling

    Returns:
        List of schedule periods, payment on the adjusted period end
    """
    if start_date >= end_date:
        raise ValueError(
            f"Schedule start {start_date} must be before end {end_date}"
        )

    unadjusted = _unadjusted_dates(
        start_date, end_date, frequency.months(), stub_type, end_of_month_rule
    )
    adjusted = [calendar.adjust(d, business_day_adjustment) for d in unadjusted]

    periods = []
    for i in range(len(unadjusted) - 1):
        expected_end = apply_end_of_month_rule(
            unadjusted[i], frequency.months(), end_of_month_rule
        )
        periods.append(
            SchedulePeriod(
                unadjusted_start=unadjusted[i],
                unadjusted_end=unadjusted[i + 1],
                start_date=adjusted[i],
                end_date=adjusted[i + 1],
                payment_date=adjusted[i + 1],
                year_fraction=day_count.year_fraction(adjusted[i], adjusted[i + 1]),
                is_stub=expected_end != unadjusted[i + 1],
            )
        )
    return periods


def _unadjusted_dates(
    start_date: date,
    end_date: date,
    months: int,
    stub_type: StubType,
    end_of_month_rule: bool,
) -> List[date]:
    if stub_type == StubType.SHORT_FINAL:
        dates = [start_date]
        k = 1
        while True:
            next_date = apply_end_of_month_rule(start_date, k * months, end_of_month_rule)
            if next_date >= end_date:
                dates.append(end_date)
                return dates
            dates.append(next_date)
            k += 1

    if stub_type == StubType.SHORT_INITIAL:
        dates = [end_date]
        k = 1
        while True:
            prev_date = apply_end_of_month_rule(end_date, -k * months, end_of_month_rule)
            if prev_date <= start_date:
                dates.insert(0, start_date)
                return dates
            dates.insert(0, prev_date)
            k += 1

    raise ValueError(f"Unsupported stub type: {stub_type}")
