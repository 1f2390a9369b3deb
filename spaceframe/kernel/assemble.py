# spaceframe/kernel/assemble.py
"""
ASSEMBLY: Global Stiffness Matrix and Load Vector
=================================================

Scatter-add of element contributions into the global system.

Assembly doesn't care what the element is. It only needs, per element:
- its DOF map (element DOF a -> global DOF dof_map[a])
- its stiffness matrix (or load vector) in GLOBAL coordinates

ALGORITHM:
----------
    K = zeros(ndof × ndof)
    for each element:
        for each (a, b):
            K[dof_map[a], dof_map[b]] += ke[a, b]

Shared nodes simply accumulate the contributions of every element meeting
there.
"""

import logging
from typing import List, Tuple

import numpy as np

from ..errors import DimensionError
from .matrix import Matrix

logger = logging.getLogger(__name__)


def assemble_global_K(
    ndof: int,
    contributions: List[Tuple[List[int], Matrix]]
) -> Matrix:
    """
    Assemble the global stiffness matrix from element contributions.

    Parameters:
    -----------
    ndof : int
        Total number of DOFs (6 × number of nodes)
    contributions : List[Tuple[List[int], Matrix]]
        (dof_map, ke) per element, ke in global coordinates with shape
        (len(dof_map), len(dof_map))

    Returns:
    --------
    Matrix
        Global stiffness matrix K (ndof × ndof), symmetric positive
        semi-definite before supports are applied
    """
    K = Matrix.zeros(ndof, ndof)

    for dof_map, ke in contributions:
        n = len(dof_map)
        if ke.shape != (n, n):
            raise DimensionError(
                f"Element ke shape {ke.shape} doesn't match dof_map length {n}"
            )
        for a in range(n):
            ia = dof_map[a]
            for b in range(n):
                K.add(ia, dof_map[b], ke.get(a, b))

    logger.debug("Assembled K: %d DOFs from %d elements", ndof, len(contributions))
    return K


def assemble_global_F(
    ndof: int,
    contributions: List[Tuple[List[int], np.ndarray]]
) -> np.ndarray:
    """
    Assemble a global load vector from element contributions.

    Same scatter-add as assemble_global_K, for vectors (fixed-end reactions
    of member loads, already in global coordinates).
    """
    F = np.zeros(ndof, dtype=float)

    for dof_map, fe in contributions:
        fe = np.asarray(fe, dtype=float)
        if fe.shape != (len(dof_map),):
            raise DimensionError(
                f"Element fe shape {fe.shape} doesn't match dof_map length {len(dof_map)}"
            )
        for a, ia in enumerate(dof_map):
            F[ia] += fe[a]

    return F


def add_nodal_load(
    F: np.ndarray,
    node_index: int,
    local_dof: int,
    value: float,
    dof_per_node: int = 6
) -> None:
    """
    Add a load to one DOF of a node (in place).

    >>> F = np.zeros(12)
    >>> add_nodal_load(F, node_index=1, local_dof=1, value=-1000.0)
    >>> F[7]
    -1000.0
    """
    F[dof_per_node * node_index + local_dof] += value
