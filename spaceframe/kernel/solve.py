# spaceframe/kernel/solve.py
"""Partitioned linear solve with fixed supports, reactions, and mechanism detection."""

import logging
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from ..errors import DimensionError, MechanismError, SingularMatrixError
from .matrix import Matrix

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssembledSystem:
    """
    Global stiffness matrix plus DOF partition, built once per model.

    Shared read-only by every load combination; solving never modifies it.
    """
    K: Matrix
    free: Tuple[int, ...]
    fixed: Tuple[int, ...]

    @property
    def ndof(self) -> int:
        return self.K.rows


def solve_linear(
    system: AssembledSystem,
    P: Sequence[float],
    pivot_tolerance: float = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Solve K·D = P with fixed DOFs held at zero, via partitioning.

        K_ff · D_f = P_f        (free DOFs)
        D_s = 0                 (fixed DOFs, no settlement)
        R = K · D - P           (reactions at every DOF)

    Args:
        system: Assembled stiffness matrix and free/fixed DOF sets
        P: Global load vector (ndof,)
        pivot_tolerance: Passed through to Matrix.solve

    Returns:
        D: Displacement vector (ndof,)
        R: Reaction vector (ndof,); zero (to round-off) at unloaded free DOFs

    Raises:
        MechanismError: If K_ff is singular (unstable / under-supported)
    """
    ndof = system.ndof
    P = np.asarray(P, dtype=float)
    if P.shape != (ndof,):
        raise DimensionError(f"Load vector length {P.size} doesn't match {ndof} DOFs")

    free = list(system.free)
    K_ff = system.K.sub_matrix(free, free)
    P_f = Matrix.extract_vector(P, free)
    logger.debug("Solving reduced system: %d free / %d fixed DOFs", len(free), len(system.fixed))

    try:
        D_f = K_ff.solve(P_f, pivot_tolerance=pivot_tolerance)
    except SingularMatrixError as e:
        raise MechanismError(
            f"{e}. The structure is unstable: check supports and member connectivity."
        ) from e

    D = np.zeros(ndof, dtype=float)
    Matrix.set_vector(D, free, D_f)

    R = system.K.multiply_vector(D) - P
    return D, R
