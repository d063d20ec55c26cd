"""Configuration of the curve calibrator."""

from dataclasses import dataclass

from ficcalib.math.rootfinding import ROOT_FINDERS


@dataclass(frozen=True)
class CalibrationConfig:
    """Root finder settings used for every curve group."""

    tolerance_abs: float = 1e-9
    tolerance_rel: float = 1e-9
    max_steps: int = 1000
    # "BROYDEN" or "NEWTON"
    root_finder: str = "BROYDEN"
    verbose: bool = False

    def __post_init__(self):
        if self.tolerance_abs <= 0 or self.tolerance_rel <= 0:
            raise ValueError(
                f"Tolerances must be positive, got abs={self.tolerance_abs} rel={self.tolerance_rel}"
            )
        if self.max_steps < 1:
            raise ValueError(f"max_steps must be at least 1, got {self.max_steps}")
        if self.root_finder.upper() not in ROOT_FINDERS:
            raise ValueError(
                f"Unknown root finder: {self.root_finder}. Available: {list(ROOT_FINDERS)}"
            )
