"""
Bookkeeping of curve parameters across calibrated curves.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

import numpy as np
import pandas as pd

from .base import CurveName


@dataclass(frozen=True)
class CurveParameterSize:
    """Name of a curve and the number of parameters it contributes."""

    name: CurveName
    parameter_count: int

    def __post_init__(self):
        if self.parameter_count < 1:
            raise ValueError(
                f"Curve {self.name} must have at least one parameter, got {self.parameter_count}"
            )


def total_parameter_count(order: Sequence[CurveParameterSize]) -> int:
    return sum(size.parameter_count for size in order)


@dataclass(frozen=True, eq=False)
class JacobianCalibrationMatrix:
    """
    Sensitivity of one curve's parameters to the market quotes of every curve
    calibrated up to and including its group.

    Rows are the curve's own parameters. Columns follow ``order``: the quotes
    of each curve, in calibration order.
    """

    order: Tuple[CurveParameterSize, ...]
    matrix: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "order", tuple(self.order))
        matrix = np.array(self.matrix, dtype=float)
        if matrix.ndim != 2:
            raise ValueError(f"Jacobian must be a 2-d matrix, got shape {matrix.shape}")
        if matrix.shape[1] != total_parameter_count(self.order):
            raise ValueError(
                f"Jacobian has {matrix.shape[1]} columns but order describes "
                f"{total_parameter_count(self.order)} parameters"
            )
        matrix.setflags(write=False)
        object.__setattr__(self, "matrix", matrix)

    @property
    def total_parameter_count(self) -> int:
        return total_parameter_count(self.order)

    @property
    def curve_names(self) -> List[CurveName]:
        return [size.name for size in self.order]

    def contains(self, name: CurveName) -> bool:
        return name in self.curve_names

    def split(self, vector: Sequence[float]) -> Dict[CurveName, np.ndarray]:
        """Cut a vector aligned to the columns into one array per curve."""
        vector = np.asarray(vector, dtype=float)
        if vector.shape != (self.total_parameter_count,):
            raise ValueError(
                f"Vector of length {vector.shape} does not match {self.total_parameter_count} columns"
            )
        result = {}
        start = 0
        for size in self.order:
            result[size.name] = vector[start:start + size.parameter_count]
            start += size.parameter_count
        return result

    def curve_block(self, name: CurveName) -> np.ndarray:
        """Columns of the matrix belonging to the quotes of one curve."""
        start = 0
        for size in self.order:
            if size.name == name:
                return self.matrix[:, start:start + size.parameter_count]
            start += size.parameter_count
        raise ValueError(f"Curve {name} is not part of this Jacobian: {self.curve_names}")

    def to_frame(self) -> pd.DataFrame:
        """Matrix as a DataFrame with (curve, quote index) column labels."""
        columns = pd.MultiIndex.from_tuples(
            [(size.name, i) for size in self.order for i in range(size.parameter_count)],
            names=["curve", "quote"],
        )
        return pd.DataFrame(self.matrix, columns=columns)
