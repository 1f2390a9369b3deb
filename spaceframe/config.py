# spaceframe/config.py
"""
Analysis configuration and defaults.
"""

from dataclasses import dataclass


@dataclass
class AnalysisConfig:
    """Numerical tolerances and sampling defaults used by the analysis core."""

    # Elimination: pivots below this magnitude mean a singular system
    pivot_tolerance: float = 1e-12

    # Geometry
    min_length: float = 1e-10          # shorter members are rejected
    vertical_tolerance: float = 1e-10  # horizontal projection below this = vertical member
    roll_tolerance: float = 1e-10      # roll angles (deg) below this are ignored

    # Member loads: |w1 - w2| below this is treated as uniform
    uniform_tolerance: float = 1e-10

    # Force diagrams: n_points segments -> n_points + 1 samples per member
    n_points: int = 11

    # Run model validation before building elements
    validate: bool = True


# Global config instance
CONFIG = AnalysisConfig()
