"""
Curve definitions: nodes, calibrated curve definitions and curve groups.
"""

from .curve import CurveDefinitionError, InterpolatedCurveDefinition
from .group import CurveGroupDefinition, CurveGroupEntry
from .nodes import (
    CurveNode,
    FixedIborSwapCurveNode,
    FixedOvernightSwapCurveNode,
    FraCurveNode,
    IborFixingDepositCurveNode,
    TermDepositCurveNode,
)

__all__ = [
    # Nodes
    "CurveNode",
    "TermDepositCurveNode",
    "IborFixingDepositCurveNode",
    "FraCurveNode",
    "FixedIborSwapCurveNode",
    "FixedOvernightSwapCurveNode",
    # Definitions
    "CurveDefinitionError",
    "InterpolatedCurveDefinition",
    "CurveGroupEntry",
    "CurveGroupDefinition",
]
