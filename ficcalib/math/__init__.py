"""
Numerical routines for calibration: SVD linear solves and vector root finding.
"""

from .decomposition import SingularMatrixError, SVDecomposition, SVDecompositionResult
from .rootfinding import (
    BaseNewtonVectorRootFinder,
    BroydenVectorRootFinder,
    NewtonVectorRootFinder,
    RootFindingError,
    VectorRootResult,
    create_root_finder,
    finite_difference_jacobian,
)

__all__ = [
    # Decomposition
    "SVDecomposition",
    "SVDecompositionResult",
    "SingularMatrixError",
    # Root finding
    "BaseNewtonVectorRootFinder",
    "BroydenVectorRootFinder",
    "NewtonVectorRootFinder",
    "RootFindingError",
    "VectorRootResult",
    "create_root_finder",
    "finite_difference_jacobian",
]
