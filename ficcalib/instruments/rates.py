"""
Floating rate observations.

Each observation knows which rates provider query gives its rate, so pricers
never branch on the index type.
"""

from dataclasses import dataclass
from datetime import date

from ficcalib.conventions.indices import IborIndex, OvernightIndex


@dataclass(frozen=True)
class IborRateComputation:
    """Rate of an Ibor index fixed on ``fixing_date``."""

    index: IborIndex
    fixing_date: date

    def rate(self, provider) -> float:
        return provider.ibor_rate(self.index, self.fixing_date)

    def rate_sensitivity(self, provider):
        return provider.ibor_rate_sensitivity(self.index, self.fixing_date)


@dataclass(frozen=True)
class OvernightCompoundedRateComputation:
    """Overnight rate compounded daily between two dates."""

    index: OvernightIndex
    start_date: date
    end_date: date

    def rate(self, provider) -> float:
        return provider.overnight_rate(self.index, self.start_date, self.end_date)

    def rate_sensitivity(self, provider):
        return provider.overnight_rate_sensitivity(self.index, self.start_date, self.end_date)
