"""
Exogenous FX rates carried alongside calibrated curves.
"""

from typing import Dict, Mapping, Optional, Tuple


class FxMatrix:
    """FX rates keyed by (base, counter) currency pairs.

    A rate of 1.10 for ("EUR", "USD") means 1 EUR = 1.10 USD.
    """

    def __init__(self, rates: Optional[Mapping[Tuple[str, str], float]] = None):
        self._rates: Dict[Tuple[str, str], float] = {}
        for (base, counter), rate in (rates or {}).items():
            if rate <= 0:
                raise ValueError(f"FX rate for {base}/{counter} must be positive, got {rate}")
            self._rates[(base.upper(), counter.upper())] = float(rate)

    @classmethod
    def empty(cls) -> "FxMatrix":
        return cls()

    def fx_rate(self, base: str, counter: str) -> float:
        """Rate converting one unit of base into counter."""
        base, counter = base.upper(), counter.upper()
        if base == counter:
            return 1.0
        if (base, counter) in self._rates:
            return self._rates[(base, counter)]
        if (counter, base) in self._rates:
            return 1.0 / self._rates[(counter, base)]
        raise ValueError(f"No FX rate available for {base}/{counter}")

    def with_rate(self, base: str, counter: str, rate: float) -> "FxMatrix":
        rates = dict(self._rates)
        rates[(base.upper(), counter.upper())] = rate
        return FxMatrix(rates)

    @property
    def currencies(self):
        return sorted({ccy for pair in self._rates for ccy in pair})

    def __len__(self) -> int:
        return len(self._rates)

    def __repr__(self) -> str:
        return f"FxMatrix({self._rates})"
