"""
Base definitions shared by all curves: value types and metadata.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Optional, Tuple

from ficcalib.conventions.daycount import DayCountConvention

if TYPE_CHECKING:
    from .parameters import JacobianCalibrationMatrix

CurveName = str


class ValueType(Enum):
    """What the x or y values of a curve represent."""

    YEAR_FRACTION = "YEAR_FRACTION"
    ZERO_RATE = "ZERO_RATE"
    DISCOUNT_FACTOR = "DISCOUNT_FACTOR"


@dataclass(frozen=True)
class TenorCurveNodeMetadata:
    """Describes one curve parameter: the node date and its tenor label."""

    date: date
    label: str

    def __str__(self) -> str:
        return f"{self.label} ({self.date.isoformat()})"


@dataclass(frozen=True, eq=False)
class CurveMetadata:
    """Descriptive information attached to a curve.

    The Jacobian is only present on curves produced by a calibration; it maps
    the curve parameters to the market quotes they were calibrated from.
    """

    curve_name: CurveName
    y_value_type: ValueType
    day_count: DayCountConvention
    parameter_metadata: Tuple[TenorCurveNodeMetadata, ...] = ()
    x_value_type: ValueType = ValueType.YEAR_FRACTION
    jacobian: Optional["JacobianCalibrationMatrix"] = None

    def __post_init__(self):
        object.__setattr__(self, "parameter_metadata", tuple(self.parameter_metadata))

    def with_jacobian(self, jacobian: "JacobianCalibrationMatrix") -> "CurveMetadata":
        return replace(self, jacobian=jacobian)

    def __repr__(self) -> str:
        return (
            f"CurveMetadata(name={self.curve_name!r}, y={self.y_value_type.value}, "
            f"day_count={self.day_count}, nodes={len(self.parameter_metadata)}, "
            f"jacobian={'yes' if self.jacobian is not None else 'no'})"
        )
