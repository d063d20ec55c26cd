"""
Market quote container consumed by curve nodes.
"""

from datetime import date
from typing import Dict, Iterator, Mapping, Optional, Union

from .keys import QuoteKey

KeyLike = Union[QuoteKey, str]


class MarketDataNotFoundError(ValueError):
    """Raised when a quote is requested for a key that is not present."""


def _to_key(key: KeyLike) -> QuoteKey:
    return key if isinstance(key, QuoteKey) else QuoteKey.of(key)


class MarketData:
    """
    Immutable set of quotes observed on a valuation date.

    String keys are accepted for convenience and mapped to QuoteKey with the
    default scheme.
    """

    def __init__(
        self,
        values: Mapping[KeyLike, float],
        valuation_date: Optional[date] = None,
    ):
        self._values: Dict[QuoteKey, float] = {
            _to_key(k): float(v) for k, v in values.items()
        }
        self.valuation_date = valuation_date

    @classmethod
    def of(cls, valuation_date: date, values: Mapping[KeyLike, float]) -> "MarketData":
        return cls(values, valuation_date)

    def value(self, key: KeyLike) -> float:
        """Get the quote for a key, failing if it is absent."""
        quote_key = _to_key(key)
        if quote_key not in self._values:
            raise MarketDataNotFoundError(
                f"No market data for {quote_key}. "
                f"Available: {sorted(str(k) for k in self._values)}"
            )
        return self._values[quote_key]

    def contains(self, key: KeyLike) -> bool:
        return _to_key(key) in self._values

    def keys(self):
        return self._values.keys()

    def with_value(self, key: KeyLike, value: float) -> "MarketData":
        """Return a copy with one quote added or replaced."""
        values = dict(self._values)
        values[_to_key(key)] = float(value)
        return MarketData(values, self.valuation_date)

    def shifted(self, key: KeyLike, shift: float) -> "MarketData":
        """Return a copy with one existing quote bumped by an additive shift."""
        return self.with_value(key, self.value(key) + shift)

    def __contains__(self, key: KeyLike) -> bool:
        return self.contains(key)

    def __iter__(self) -> Iterator[QuoteKey]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"MarketData(valuation_date={self.valuation_date}, quotes={len(self._values)})"
