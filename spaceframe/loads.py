# spaceframe/loads.py
"""
FIXED-END REACTIONS FOR MEMBER LOADS
====================================

A load applied along a member is converted to nodal loads through its
fixed-end reactions (FER): the forces the two ends would receive if both were
fully fixed. The analyzer applies -FER to the nodes (the equivalent nodal
load) and adds FER back when it recovers member end forces.

All vectors here are 12-entry LOCAL vectors in element DOF order:

    [Fx_i, Fy_i, Fz_i, Mx_i, My_i, Mz_i, Fx_j, Fy_j, Fz_j, Mx_j, My_j, Mz_j]

SIGN CONVENTION:
----------------
FER act on the member and oppose the load. For a downward (-y) uniform load
w on a horizontal member the FER are upward shears -wL/2 at both ends.

ACCURACY:
---------
- full-span uniform loads, point forces and concentrated moments: exact
  Euler-Bernoulli fixed-end formulas
- partial-span uniform loads: resultant split statically between the ends
  (simple-beam reactions, no fixed-end moment)
- trapezoidal loads: uniform load at min(w1, w2) plus a uniform load at
  |w2 - w1| / 2 (same total force, resultant kept at the load centroid)

These two approximations are intentional; they keep the total load and
therefore global equilibrium exact.
"""

import logging

import numpy as np

from .config import CONFIG, AnalysisConfig
from .model import Direction, MemberLoad, MemberLoadType

logger = logging.getLogger(__name__)

# (end i, end j) local DOF pairs for loads that only split between the ends
_SPLIT_DOFS = {
    Direction.FX: (0, 6),
    Direction.FY: (1, 7),
    Direction.FZ: (2, 8),
    Direction.MX: (3, 9),
}


def uniform_load_fer(direction: Direction, w: float, x1: float, x2: float, L: float,
                     config: AnalysisConfig = None) -> np.ndarray:
    """
    FER of a uniform load w between absolute positions x1 and x2.

    Parameters:
    -----------
    direction : Direction
        FX (axial), FY / FZ (transverse), MX (distributed torque)
    w : float
        Intensity per unit length, positive along the local axis
    x1, x2 : float
        Start and end of the loaded length (0 <= x1 <= x2 <= L)
    L : float
        Member length
    config : AnalysisConfig, optional
        Supplies uniform_tolerance for the full-span test (default: global CONFIG)

    Returns:
    --------
    np.ndarray, shape (12,)
    """
    fer = np.zeros(12, dtype=float)
    if direction not in _SPLIT_DOFS:
        logger.warning("Distributed load in direction %s is not supported; ignored", direction.value)
        return fer

    tol = (config or CONFIG).uniform_tolerance * max(L, 1.0)
    full_span = abs(x1) < tol and abs(x2 - L) < tol

    if full_span:
        wL = w * L
        wL2 = w * L * L
        if direction == Direction.FY:
            fer[1] = -wL / 2
            fer[5] = -wL2 / 12
            fer[7] = -wL / 2
            fer[11] = wL2 / 12
        elif direction == Direction.FZ:
            fer[2] = -wL / 2
            fer[4] = wL2 / 12
            fer[8] = -wL / 2
            fer[10] = -wL2 / 12
        else:
            i, j = _SPLIT_DOFS[direction]
            fer[i] = -wL / 2
            fer[j] = -wL / 2
        return fer

    # Partial span: simple-beam reactions of the resultant at its centroid
    W = w * (x2 - x1)
    centroid = (x1 + x2) / 2
    i, j = _SPLIT_DOFS[direction]
    fer[i] = -W * (L - centroid) / L
    fer[j] = -W * centroid / L
    return fer


def linear_load_fer(direction: Direction, w1: float, w2: float, x1: float, x2: float, L: float,
                    config: AnalysisConfig = None) -> np.ndarray:
    """
    FER of a trapezoidal load (w1 at x1 to w2 at x2).

    Approximated as a uniform load at min(w1, w2) plus a uniform load at half
    the intensity difference over the same length.
    """
    w_min = min(w1, w2)
    w_half = abs(w2 - w1) / 2
    return (uniform_load_fer(direction, w_min, x1, x2, L, config)
            + uniform_load_fer(direction, w_half, x1, x2, L, config))


def point_load_fer(direction: Direction, P: float, a: float, L: float) -> np.ndarray:
    """
    FER of a concentrated force P at distance a from node i.

    Transverse forces use the exact fixed-end shears and moments:

        V_i = P b² (3a + b) / L³      M_i = P a b² / L²
        V_j = P a² (a + 3b) / L³      M_j = P a² b / L²

    with b = L - a (signs follow the bending plane). Axial forces split in
    proportion to position (P b / L, P a / L).
    """
    b = L - a
    L2 = L * L
    L3 = L2 * L
    fer = np.zeros(12, dtype=float)

    if direction == Direction.FY:
        fer[1] = -P * b * b * (3 * a + b) / L3
        fer[5] = -P * a * b * b / L2
        fer[7] = -P * a * a * (a + 3 * b) / L3
        fer[11] = P * a * a * b / L2
    elif direction == Direction.FZ:
        fer[2] = -P * b * b * (3 * a + b) / L3
        fer[4] = P * a * b * b / L2
        fer[8] = -P * a * a * (a + 3 * b) / L3
        fer[10] = -P * a * a * b / L2
    elif direction == Direction.FX:
        fer[0] = -P * b / L
        fer[6] = -P * a / L
    else:
        return moment_load_fer(direction, P, a, L)
    return fer


def moment_load_fer(direction: Direction, M: float, a: float, L: float) -> np.ndarray:
    """
    FER of a concentrated moment M at distance a from node i.

    Bending moments (MY, MZ) use the exact fixed-end formulas

        V = 6 M a b / L³      M_i = M b (2a - b) / L²      M_j = M a (2b - a) / L²

    with the sign pattern of each bending plane. Torques (MX) split in
    proportion to position.
    """
    b = L - a
    L2 = L * L
    L3 = L2 * L
    fer = np.zeros(12, dtype=float)

    if direction == Direction.MZ:
        fer[1] = 6 * M * a * b / L3
        fer[5] = M * b * (2 * a - b) / L2
        fer[7] = -6 * M * a * b / L3
        fer[11] = M * a * (2 * b - a) / L2
    elif direction == Direction.MY:
        fer[2] = -6 * M * a * b / L3
        fer[4] = M * b * (2 * a - b) / L2
        fer[8] = 6 * M * a * b / L3
        fer[10] = M * a * (2 * b - a) / L2
    elif direction == Direction.MX:
        fer[3] = -M * b / L
        fer[9] = -M * a / L
    else:
        logger.warning("Moment load with force direction %s ignored", direction.value)
    return fer


def member_load_fer(load: MemberLoad, L: float, config: AnalysisConfig = None) -> np.ndarray:
    """Dispatch one member load to its FER formula (local coordinates)."""
    config = config or CONFIG
    direction = Direction.parse(load.direction)

    if load.type == MemberLoadType.DISTRIBUTED:
        w1 = load.w1
        w2 = load.w1 if load.w2 is None else load.w2
        x1 = load.x1 * L
        x2 = load.x2 * L
        if abs(w1 - w2) < config.uniform_tolerance:
            return uniform_load_fer(direction, w1, x1, x2, L, config)
        return linear_load_fer(direction, w1, w2, x1, x2, L, config)

    if load.type == MemberLoadType.POINT:
        return point_load_fer(direction, load.magnitude, load.x * L, L)

    if load.type == MemberLoadType.MOMENT:
        return moment_load_fer(direction, load.magnitude, load.x * L, L)

    raise ValueError(f"Unknown member load type: {load.type!r}")
