"""Vector root finders (Newton and Broyden) for curve calibration."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

import logging

import numpy as np

from .decomposition import SingularMatrixError, SVDecomposition

logger = logging.getLogger(__name__)

VectorFunction = Callable[[np.ndarray], np.ndarray]
MatrixFunction = Callable[[np.ndarray], np.ndarray]


@dataclass
class VectorRootResult:
    root: np.ndarray
    iterations: int
    residual_norm: float
    method: str


class RootFindingError(RuntimeError):
    """Raised when a root finder fails to converge."""

    def __init__(self, message: str, iterations: int = 0, residual_norm: float = float("nan")):
        super().__init__(message)
        self.iterations = iterations
        self.residual_norm = residual_norm


def finite_difference_jacobian(function: VectorFunction, shift: float = 1e-7) -> MatrixFunction:
    """Jacobian of ``function`` by central differences."""

    def jacobian(x: np.ndarray) -> np.ndarray:
        x = np.asarray(x, dtype=float)
        columns = []
        for i in range(len(x)):
            up = x.copy()
            down = x.copy()
            up[i] += shift
            down[i] -= shift
            columns.append((np.asarray(function(up)) - np.asarray(function(down))) / (2.0 * shift))
        return np.column_stack(columns)

    return jacobian


class BaseNewtonVectorRootFinder(ABC):
    """Newton-type iteration ``J(x_k) dx = -F(x_k)`` with backtracking.

    Parameters
    ----------
    tolerance_abs:
        Absolute tolerance on the residual norm.
    tolerance_rel:
        Relative tolerance on the residual norm, scaled by the initial residual
        norm (floored at 1).
    max_steps:
        Maximum number of Newton steps; exceeding it raises RootFindingError.
    decomposition:
        Decomposition used for the linear solve, SVD by default.
    max_backtracks:
        Number of step halvings tried when a full step does not reduce the
        residual norm.
    """

    method = "newton"

    def __init__(
        self,
        tolerance_abs: float = 1e-9,
        tolerance_rel: float = 1e-9,
        max_steps: int = 1000,
        decomposition: Optional[SVDecomposition] = None,
        *,
        max_backtracks: int = 20,
    ):
        if tolerance_abs <= 0 or tolerance_rel <= 0:
            raise ValueError(
                f"Tolerances must be positive, got abs={tolerance_abs} rel={tolerance_rel}"
            )
        if max_steps < 1:
            raise ValueError(f"max_steps must be at least 1, got {max_steps}")
        self.tolerance_abs = tolerance_abs
        self.tolerance_rel = tolerance_rel
        self.max_steps = max_steps
        self.decomposition = decomposition if decomposition is not None else SVDecomposition()
        self.max_backtracks = max_backtracks

    def get_root(
        self,
        function: VectorFunction,
        jacobian: Optional[MatrixFunction],
        start: Sequence[float],
    ) -> VectorRootResult:
        """Find x such that function(x) = 0.

        Parameters
        ----------
        function:
            Residual function R^n -> R^n.
        jacobian:
            Derivative of ``function``; central finite differences if None.
        start:
            Initial guess.

        Raises
        ------
        RootFindingError
            If the residual is not finite at the start, if backtracking cannot
            reduce the residual, or if ``max_steps`` is exceeded.
        SingularMatrixError
            If the Jacobian cannot be inverted.
        """
        if jacobian is None:
            jacobian = finite_difference_jacobian(function)
        x = np.array(start, dtype=float)
        f = np.asarray(function(x), dtype=float)
        if f.shape != x.shape:
            raise ValueError(
                f"Residual has shape {f.shape} but the start point has shape {x.shape}"
            )
        norm_f = float(np.linalg.norm(f))
        if not np.isfinite(norm_f):
            raise RootFindingError("Residual is not finite at the initial guess", 0, norm_f)
        scale = max(norm_f, 1.0)
        if self._converged(norm_f, scale):
            return VectorRootResult(x, 0, norm_f, self.method)

        j = np.asarray(jacobian(x), dtype=float)
        for step in range(1, self.max_steps + 1):
            try:
                x_new, f_new, dx = self._line_search(function, x, f, j)
            except RootFindingError:
                # the estimate may have drifted; retry once with a fresh Jacobian
                logger.debug("Step %s: backtracking failed, recomputing Jacobian", step)
                j = np.asarray(jacobian(x), dtype=float)
                try:
                    x_new, f_new, dx = self._line_search(function, x, f, j)
                except RootFindingError as exc:
                    raise RootFindingError(
                        f"Step {step}: {exc}", step, exc.residual_norm
                    ) from exc
            j = self._update_jacobian(jacobian, j, x_new, dx, f_new - f)
            x, f = x_new, f_new
            norm_f = float(np.linalg.norm(f))
            logger.debug(
                "%s step %s: |F|=%.3e |dx|=%.3e", self.method, step, norm_f, np.linalg.norm(dx)
            )
            if self._converged(norm_f, scale):
                return VectorRootResult(x, step, norm_f, self.method)

        raise RootFindingError(
            f"Failed to converge in {self.max_steps} steps, residual norm {norm_f:.3e}",
            self.max_steps,
            norm_f,
        )

    def _converged(self, norm_f: float, scale: float) -> bool:
        return norm_f <= self.tolerance_abs and norm_f <= self.tolerance_rel * scale

    def _line_search(
        self, function: VectorFunction, x: np.ndarray, f: np.ndarray, j: np.ndarray
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        direction = self.decomposition.solve(j, -f)
        norm_f = np.linalg.norm(f)
        lam = 1.0
        for _ in range(self.max_backtracks + 1):
            dx = lam * direction
            x_trial = x + dx
            f_trial = np.asarray(function(x_trial), dtype=float)
            norm_trial = np.linalg.norm(f_trial)
            if np.isfinite(norm_trial) and (norm_trial < norm_f or norm_trial <= self.tolerance_abs):
                return x_trial, f_trial, dx
            lam *= 0.5
            logger.debug("Backtracking, step scaled to %.3e", lam)
        raise RootFindingError(
            f"Backtracking failed to reduce residual norm {norm_f:.3e}", 0, float(norm_f)
        )

    @abstractmethod
    def _update_jacobian(
        self,
        jacobian: MatrixFunction,
        j: np.ndarray,
        x: np.ndarray,
        dx: np.ndarray,
        df: np.ndarray,
    ) -> np.ndarray:
        """Jacobian estimate at the new point ``x``."""


class NewtonVectorRootFinder(BaseNewtonVectorRootFinder):
    """Newton iteration recomputing the Jacobian at every step."""

    method = "newton"

    def _update_jacobian(self, jacobian, j, x, dx, df):
        return np.asarray(jacobian(x), dtype=float)


class BroydenVectorRootFinder(BaseNewtonVectorRootFinder):
    """Quasi-Newton iteration with Broyden's rank-one Jacobian update.

    The Jacobian function is only called at the start and when a step fails.
    """

    method = "broyden"

    def _update_jacobian(self, jacobian, j, x, dx, df):
        denominator = float(dx @ dx)
        if denominator == 0.0:
            return j
        return j + np.outer(df - j @ dx, dx) / denominator


ROOT_FINDERS = {
    "BROYDEN": BroydenVectorRootFinder,
    "NEWTON": NewtonVectorRootFinder,
}


def create_root_finder(
    name: str,
    tolerance_abs: float,
    tolerance_rel: float,
    max_steps: int,
    decomposition: Optional[SVDecomposition] = None,
) -> BaseNewtonVectorRootFinder:
    key = name.upper()
    if key not in ROOT_FINDERS:
        raise ValueError(f"Unknown root finder: {name}. Available: {list(ROOT_FINDERS)}")
    return ROOT_FINDERS[key](tolerance_abs, tolerance_rel, max_steps, decomposition)


__all__ = [
    "BaseNewtonVectorRootFinder",
    "BroydenVectorRootFinder",
    "NewtonVectorRootFinder",
    "RootFindingError",
    "SingularMatrixError",
    "VectorRootResult",
    "create_root_finder",
    "finite_difference_jacobian",
]
