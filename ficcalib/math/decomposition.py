"""Singular value decomposition for the linear solves of calibration.

A rank deficient matrix is an error: no regularization is applied.
"""

from __future__ import annotations

from dataclasses import dataclass

import logging

import numpy as np

logger = logging.getLogger(__name__)


class SingularMatrixError(ArithmeticError):
    """Raised when a matrix to invert or solve against is singular."""


@dataclass(frozen=True, eq=False)
class SVDecompositionResult:
    """Factors of ``matrix = u @ diag(s) @ vt``."""

    u: np.ndarray
    s: np.ndarray
    vt: np.ndarray

    @property
    def condition_number(self) -> float:
        return float(self.s[0] / self.s[-1])

    def solve(self, b: np.ndarray) -> np.ndarray:
        """Solve ``matrix @ x = b`` for a vector or a matrix of right-hand sides."""
        b = np.asarray(b, dtype=float)
        utb = self.u.T @ b
        if utb.ndim == 1:
            return self.vt.T @ (utb / self.s)
        return self.vt.T @ (utb / self.s[:, None])

    def inverse(self) -> np.ndarray:
        return self.vt.T @ np.diag(1.0 / self.s) @ self.u.T


class SVDecomposition:
    """SVD of square matrices with a relative singularity threshold."""

    def __init__(self, rcond: float = 1e-13):
        if not 0.0 < rcond < 1.0:
            raise ValueError(f"rcond must be in (0, 1), got {rcond}")
        self.rcond = rcond

    def decompose(self, matrix: np.ndarray) -> SVDecompositionResult:
        """
        Decompose a square matrix.

        Raises
        ------
        ValueError
            If the matrix is not square or holds non-finite entries.
        SingularMatrixError
            If the smallest singular value is below ``rcond`` times the largest.
        """
        m = np.asarray(matrix, dtype=float)
        if m.ndim != 2 or m.shape[0] != m.shape[1] or m.shape[0] == 0:
            raise ValueError(f"Expected a non-empty square matrix, got shape {m.shape}")
        if not np.all(np.isfinite(m)):
            raise ValueError("Matrix contains non-finite entries")
        u, s, vt = np.linalg.svd(m)
        if s[-1] <= self.rcond * s[0]:
            raise SingularMatrixError(
                f"Matrix of size {m.shape[0]} is singular: singular values range "
                f"from {s[0]:.3e} to {s[-1]:.3e}"
            )
        logger.debug("SVD of %dx%d matrix, condition number %.3e", m.shape[0], m.shape[1], s[0] / s[-1])
        return SVDecompositionResult(u, s, vt)

    def solve(self, matrix: np.ndarray, b: np.ndarray) -> np.ndarray:
        return self.decompose(matrix).solve(b)

    def inverse(self, matrix: np.ndarray) -> np.ndarray:
        return self.decompose(matrix).inverse()
