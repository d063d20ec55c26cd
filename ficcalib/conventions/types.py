"""
Basic enums shared by conventions, schedules and trades.
"""

from enum import Enum


class Frequency(Enum):
    """Payment frequencies, valued in months."""

    ANNUAL = 12
    SEMIANNUAL = 6
    QUARTERLY = 3
    MONTHLY = 1

    def months(self) -> int:
        return self.value

    @classmethod
    def from_months(cls, months: int) -> "Frequency":
        for freq in cls:
            if freq.value == months:
                return freq
        raise ValueError(f"No frequency with a period of {months} months")


class BusinessDayAdjustment(Enum):
    """Business day adjustment rules."""

    NO_ADJUSTMENT = "NO_ADJUSTMENT"
    FOLLOWING = "FOLLOWING"
    MODIFIED_FOLLOWING = "MODIFIED_FOLLOWING"
    PRECEDING = "PRECEDING"
    MODIFIED_PRECEDING = "MODIFIED_PRECEDING"


class StubType(Enum):
    """Stub period placement for schedule generation."""

    SHORT_INITIAL = "SHORT_INITIAL"
    SHORT_FINAL = "SHORT_FINAL"


class BuySell(Enum):
    """Direction of a trade.

    BUY pays the fixed rate on FRAs and swaps and places the money on deposits.
    """

    BUY = "BUY"
    SELL = "SELL"

    def normalize(self, amount: float) -> float:
        """Return the amount signed for this direction (positive for BUY)."""
        return abs(amount) if self is BuySell.BUY else -abs(amount)
