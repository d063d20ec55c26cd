"""
Sensitivity containers.

Pricers report point sensitivities: the derivative of a value with respect to
the discount factor of a named curve at a date. The rates provider turns them
into parameter sensitivities, one array per curve aligned to its nodes.
"""
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

import numpy as np

from ficcalib.curves.base import CurveName
from ficcalib.curves.parameters import CurveParameterSize


@dataclass(frozen=True)
class DiscountFactorSensitivity:
    """d(value) / d(discount factor of ``curve_name`` at ``date``)."""

    curve_name: CurveName
    date: date
    sensitivity: float


class PointSensitivities:
    """Immutable list of point sensitivities."""

    def __init__(self, sensitivities: Iterable[DiscountFactorSensitivity] = ()):
        self.sensitivities = tuple(sensitivities)

    @classmethod
    def empty(cls) -> "PointSensitivities":
        return cls()

    @classmethod
    def of(cls, curve_name: CurveName, dt: date, sensitivity: float) -> "PointSensitivities":
        return cls((DiscountFactorSensitivity(curve_name, dt, sensitivity),))

    def combined_with(self, other: "PointSensitivities") -> "PointSensitivities":
        return PointSensitivities(self.sensitivities + other.sensitivities)

    def multiplied_by(self, factor: float) -> "PointSensitivities":
        return PointSensitivities(
            DiscountFactorSensitivity(s.curve_name, s.date, s.sensitivity * factor)
            for s in self.sensitivities
        )

    def __iter__(self) -> Iterator[DiscountFactorSensitivity]:
        return iter(self.sensitivities)

    def __len__(self) -> int:
        return len(self.sensitivities)

    def __repr__(self) -> str:
        return f"PointSensitivities({len(self.sensitivities)} entries)"


class CurveParameterSensitivities:
    """Sensitivity of a value to the parameters of each curve."""

    def __init__(self, sensitivities: Optional[Mapping[CurveName, Sequence[float]]] = None):
        self._sensitivities: Dict[CurveName, np.ndarray] = {
            name: np.asarray(values, dtype=float)
            for name, values in (sensitivities or {}).items()
        }

    @classmethod
    def empty(cls) -> "CurveParameterSensitivities":
        return cls()

    @property
    def names(self) -> List[CurveName]:
        return list(self._sensitivities)

    def get(self, name: CurveName) -> Optional[np.ndarray]:
        return self._sensitivities.get(name)

    def combined_with(self, other: "CurveParameterSensitivities") -> "CurveParameterSensitivities":
        """Sum two sets of sensitivities curve by curve."""
        merged = dict(self._sensitivities)
        for name, values in other._sensitivities.items():
            if name in merged:
                if merged[name].shape != values.shape:
                    raise ValueError(
                        f"Cannot combine sensitivities of curve {name}: "
                        f"shapes {merged[name].shape} and {values.shape}"
                    )
                merged[name] = merged[name] + values
            else:
                merged[name] = values
        return CurveParameterSensitivities(merged)

    def multiplied_by(self, factor: float) -> "CurveParameterSensitivities":
        return CurveParameterSensitivities(
            {name: values * factor for name, values in self._sensitivities.items()}
        )

    def to_array(self, order: Sequence[CurveParameterSize]) -> np.ndarray:
        """Flatten to one vector following ``order``; absent curves are zero."""
        blocks = []
        for size in order:
            values = self._sensitivities.get(size.name)
            if values is None:
                blocks.append(np.zeros(size.parameter_count))
                continue
            if len(values) != size.parameter_count:
                raise ValueError(
                    f"Curve {size.name} has {len(values)} sensitivities, "
                    f"order expects {size.parameter_count}"
                )
            blocks.append(values)
        return np.concatenate(blocks) if blocks else np.zeros(0)

    def __contains__(self, name: CurveName) -> bool:
        return name in self._sensitivities

    def __len__(self) -> int:
        return len(self._sensitivities)

    def __repr__(self) -> str:
        return f"CurveParameterSensitivities(curves={self.names})"
