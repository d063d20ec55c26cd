"""
Composition of calibration Jacobians across curve groups.

For a group g with derivatives ``D = d(residuals of g) / d(all parameters)``,
split into the columns of earlier groups (``cross``) and of g (``direct``):

    d(params of g) / d(quotes of g)       = inverse(direct)
    d(params of g) / d(params of earlier) = -inverse(direct) @ cross
    d(params of g) / d(quotes of earlier) = -inverse(direct) @ cross @ T

where ``T`` maps earlier quotes to earlier parameters: the block of rows of
curve l and columns of curve k is the Jacobian of l restricted to the quotes
of k, or zero when l does not depend on k.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np

from ficcalib.curves.base import CurveName
from ficcalib.curves.parameters import (
    CurveParameterSize,
    JacobianCalibrationMatrix,
    total_parameter_count,
)
from ficcalib.math.decomposition import SVDecomposition

logger = logging.getLogger(__name__)

ILL_CONDITIONED = 1e12


@dataclass(frozen=True)
class ParameterBlock:
    """Range of a curve's parameters inside a flat parameter vector."""

    name: CurveName
    start: int
    size: int

    @property
    def stop(self) -> int:
        return self.start + self.size

    @property
    def slice(self) -> slice:
        return slice(self.start, self.stop)


def parameter_blocks(order: Sequence[CurveParameterSize], offset: int = 0) -> List[ParameterBlock]:
    """Consecutive blocks for each curve of ``order``, starting at ``offset``."""
    blocks = []
    start = offset
    for size in order:
        blocks.append(ParameterBlock(size.name, start, size.parameter_count))
        start += size.parameter_count
    return blocks


def transition_matrix(
    order_previous: Sequence[CurveParameterSize],
    jacobians: Mapping[CurveName, JacobianCalibrationMatrix],
) -> np.ndarray:
    """d(previous parameters) / d(previous quotes), assembled curve by curve."""
    blocks = parameter_blocks(order_previous)
    n = total_parameter_count(order_previous)
    transition = np.zeros((n, n))
    for row in blocks:
        if row.name not in jacobians:
            raise ValueError(f"No Jacobian available for previously calibrated curve {row.name}")
        jacobian = jacobians[row.name]
        for column in blocks:
            # curves of unrelated groups stay zero
            if jacobian.contains(column.name):
                transition[row.slice, column.slice] = jacobian.curve_block(column.name)
    return transition


def group_jacobians(
    derivatives: np.ndarray,
    order_group: Sequence[CurveParameterSize],
    order_previous: Sequence[CurveParameterSize],
    jacobians_previous: Mapping[CurveName, JacobianCalibrationMatrix],
    decomposition: Optional[SVDecomposition] = None,
) -> Dict[CurveName, JacobianCalibrationMatrix]:
    """
    Jacobians of the curves of a calibrated group, merged with the earlier ones.

    Args:
        derivatives: d(residual i of the group) / d(parameter j), with columns in
            ``order_previous`` then ``order_group`` order
        order_group: Curves of the group
        order_previous: Curves of every earlier group, in calibration order
        jacobians_previous: Jacobians of the curves in ``order_previous``
        decomposition: Used to invert the direct block, SVD by default

    Returns:
        Earlier Jacobians plus one new entry per curve of the group, whose
        columns cover ``order_previous`` followed by ``order_group``

    Raises:
        SingularMatrixError: If the direct block cannot be inverted
    """
    decomposition = decomposition or SVDecomposition()
    n_group = total_parameter_count(order_group)
    n_previous = total_parameter_count(order_previous)
    derivatives = np.asarray(derivatives, dtype=float)
    if derivatives.shape != (n_group, n_previous + n_group):
        raise ValueError(
            f"Derivatives of shape {derivatives.shape} do not match "
            f"{n_group} group and {n_previous} previous parameters"
        )

    direct = derivatives[:, n_previous:]
    svd = decomposition.decompose(direct)
    if svd.condition_number > ILL_CONDITIONED:
        logger.warning(
            "Direct Jacobian block is ill conditioned (condition number %.3e)", svd.condition_number
        )
    pdm_current = svd.inverse()

    full = np.zeros((n_group, n_previous + n_group))
    full[:, n_previous:] = pdm_current
    if n_previous > 0:
        cross = derivatives[:, :n_previous]
        pdp_previous = -pdm_current @ cross
        full[:, :n_previous] = pdp_previous @ transition_matrix(order_previous, jacobians_previous)
    logger.debug(
        "Composed Jacobian: %d group parameters, %d previous parameters", n_group, n_previous
    )

    order_all = tuple(order_previous) + tuple(order_group)
    result = dict(jacobians_previous)
    for block in parameter_blocks(order_group):
        result[block.name] = JacobianCalibrationMatrix(order_all, full[block.slice, :])
    return result
