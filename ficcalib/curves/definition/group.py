"""
Curve groups: curves calibrated together, and the roles each curve plays.
"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, FrozenSet, List, Tuple, Union

from ficcalib.conventions.indices import IborIndex, OvernightIndex
from ficcalib.curves.base import CurveName
from ficcalib.curves.parameters import CurveParameterSize
from ficcalib.instruments.base import Trade
from ficcalib.market.data import MarketData
from ficcalib.market.keys import QuoteKey

from .curve import CurveDefinitionError, InterpolatedCurveDefinition

IndexLike = Union[IborIndex, OvernightIndex, str]


@dataclass(frozen=True)
class CurveGroupEntry:
    """A curve definition with the currencies it discounts and the indices it forwards."""

    curve_definition: InterpolatedCurveDefinition
    discount_currencies: Tuple[str, ...] = ()
    indices: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "discount_currencies", tuple(self.discount_currencies))
        object.__setattr__(
            self,
            "indices",
            tuple(i if isinstance(i, str) else i.name for i in self.indices),
        )
        if not self.discount_currencies and not self.indices:
            raise CurveDefinitionError(
                f"Curve {self.curve_name} is used neither for discounting nor for any index"
            )

    @property
    def curve_name(self) -> CurveName:
        return self.curve_definition.name


@dataclass(frozen=True)
class CurveGroupDefinition:
    """
    Curves solved simultaneously in one root finding problem.

    The flat parameter vector of the group is the concatenation of the
    parameters of each curve in entry order, and trade i pins parameter i.
    """

    name: str
    entries: Tuple[CurveGroupEntry, ...]

    def __post_init__(self):
        object.__setattr__(self, "entries", tuple(self.entries))
        if not self.entries:
            raise CurveDefinitionError(f"Curve group {self.name} has no curves")
        seen_names = set()
        currencies: Dict[str, CurveName] = {}
        indices: Dict[str, CurveName] = {}
        for entry in self.entries:
            if entry.curve_name in seen_names:
                raise CurveDefinitionError(
                    f"Curve group {self.name}: curve {entry.curve_name} defined twice"
                )
            seen_names.add(entry.curve_name)
            for currency in entry.discount_currencies:
                if currency in currencies:
                    raise CurveDefinitionError(
                        f"Curve group {self.name}: {currency} discounted by both "
                        f"{currencies[currency]} and {entry.curve_name}"
                    )
                currencies[currency] = entry.curve_name
            for index in entry.indices:
                if index in indices:
                    raise CurveDefinitionError(
                        f"Curve group {self.name}: index {index} forwarded by both "
                        f"{indices[index]} and {entry.curve_name}"
                    )
                indices[index] = entry.curve_name

    @property
    def curve_definitions(self) -> List[InterpolatedCurveDefinition]:
        return [entry.curve_definition for entry in self.entries]

    @property
    def curve_names(self) -> List[CurveName]:
        return [entry.curve_name for entry in self.entries]

    @property
    def discount_names(self) -> Dict[str, CurveName]:
        """Curve name per discounted currency."""
        return {c: e.curve_name for e in self.entries for c in e.discount_currencies}

    @property
    def index_names(self) -> Dict[str, CurveName]:
        """Curve name per forwarded index name."""
        return {i: e.curve_name for e in self.entries for i in e.indices}

    @property
    def total_parameter_count(self) -> int:
        return sum(d.parameter_count for d in self.curve_definitions)

    def parameter_sizes(self) -> List[CurveParameterSize]:
        return [d.parameter_size() for d in self.curve_definitions]

    def requirements(self) -> FrozenSet[QuoteKey]:
        keys = set()
        for definition in self.curve_definitions:
            keys |= definition.requirements()
        return frozenset(keys)

    def trades(self, valuation_date: date, market_data: MarketData) -> List[Trade]:
        trades = []
        for definition in self.curve_definitions:
            trades.extend(definition.trades(valuation_date, market_data))
        return trades

    def initial_guesses(self, valuation_date: date, market_data: MarketData) -> List[float]:
        guesses = []
        for definition in self.curve_definitions:
            guesses.extend(definition.initial_guesses(valuation_date, market_data))
        return guesses
