"""
Definition of a curve to calibrate: its nodes, value type and interpolation.
"""

from dataclasses import dataclass
from datetime import date
from typing import FrozenSet, List, Optional, Sequence, Tuple

import numpy as np

from ficcalib.conventions.daycount import DayCountConvention
from ficcalib.curves.base import CurveMetadata, CurveName, ValueType
from ficcalib.curves.nodal import InterpolatedNodalCurve
from ficcalib.curves.parameters import CurveParameterSize
from ficcalib.instruments.base import Trade
from ficcalib.interpolation.base import EXTRAPOLATORS
from ficcalib.interpolation.factory import validate_interpolator
from ficcalib.market.data import MarketData
from ficcalib.market.keys import QuoteKey

from .nodes import CurveNode


class CurveDefinitionError(ValueError):
    """Raised when curve or curve group definitions are inconsistent."""


@dataclass(frozen=True)
class InterpolatedCurveDefinition:
    """
    Nodal curve whose parameters are calibrated to the quotes of its nodes.

    There is one parameter per node; the node dates, as year fractions from
    the valuation date, are the curve x values.
    """

    name: CurveName
    value_type: ValueType
    day_count: DayCountConvention
    nodes: Tuple[CurveNode, ...]
    interpolator: str = "LINEAR"
    extrapolator_left: str = "FLAT"
    extrapolator_right: str = "FLAT"

    def __post_init__(self):
        object.__setattr__(self, "nodes", tuple(self.nodes))
        if not self.nodes:
            raise CurveDefinitionError(f"Curve {self.name} must have at least one node")
        if self.value_type not in (ValueType.ZERO_RATE, ValueType.DISCOUNT_FACTOR):
            raise CurveDefinitionError(
                f"Curve {self.name}: unsupported value type {self.value_type.value}"
            )
        try:
            validate_interpolator(self.interpolator)
        except ValueError as exc:
            raise CurveDefinitionError(f"Curve {self.name}: {exc}") from exc
        for extrapolator in (self.extrapolator_left, self.extrapolator_right):
            if extrapolator.upper() not in EXTRAPOLATORS:
                raise CurveDefinitionError(
                    f"Curve {self.name}: unknown extrapolator {extrapolator}. "
                    f"Available: {list(EXTRAPOLATORS)}"
                )

    @property
    def parameter_count(self) -> int:
        return len(self.nodes)

    def parameter_size(self) -> CurveParameterSize:
        return CurveParameterSize(self.name, self.parameter_count)

    def metadata(self, valuation_date: date) -> CurveMetadata:
        return CurveMetadata(
            curve_name=self.name,
            y_value_type=self.value_type,
            day_count=self.day_count,
            parameter_metadata=tuple(node.metadata(valuation_date) for node in self.nodes),
        )

    def x_values(self, valuation_date: date, metadata: Optional[CurveMetadata] = None) -> np.ndarray:
        """Node times in years; must be strictly increasing."""
        metadata = metadata or self.metadata(valuation_date)
        x = np.array(
            [self.day_count.year_fraction(valuation_date, m.date) for m in metadata.parameter_metadata]
        )
        if len(x) > 1 and np.any(np.diff(x) <= 0):
            labels = [m.label for m in metadata.parameter_metadata]
            raise CurveDefinitionError(
                f"Curve {self.name}: node dates must be strictly increasing, got "
                f"{list(zip(labels, np.round(x, 6)))}"
            )
        return x

    def curve(
        self,
        valuation_date: date,
        parameters: Sequence[float],
        metadata: Optional[CurveMetadata] = None,
        x_values: Optional[np.ndarray] = None,
    ) -> InterpolatedNodalCurve:
        """Build the curve for a parameter vector."""
        if len(parameters) != self.parameter_count:
            raise ValueError(
                f"Curve {self.name} expects {self.parameter_count} parameters, got {len(parameters)}"
            )
        metadata = metadata or self.metadata(valuation_date)
        if x_values is None:
            x_values = self.x_values(valuation_date, metadata)
        return InterpolatedNodalCurve(
            metadata,
            x_values,
            parameters,
            self.interpolator,
            self.extrapolator_left,
            self.extrapolator_right,
        )

    def trades(self, valuation_date: date, market_data: MarketData) -> List[Trade]:
        return [node.trade(valuation_date, market_data) for node in self.nodes]

    def initial_guesses(self, valuation_date: date, market_data: MarketData) -> List[float]:
        return [
            node.initial_guess(valuation_date, market_data, self.value_type) for node in self.nodes
        ]

    def requirements(self) -> FrozenSet[QuoteKey]:
        keys = set()
        for node in self.nodes:
            keys |= node.requirements()
        return frozenset(keys)
