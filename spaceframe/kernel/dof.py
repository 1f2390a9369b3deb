# spaceframe/kernel/dof.py
"""
DOF MANAGER: Degree of Freedom Indexing for 3D Frames
=====================================================

PURPOSE:
--------
Maps (node position, local DOF) to a global DOF index, and splits the global
DOFs into free and fixed sets from the support definitions.

A 3D frame node has 6 DOFs:

    0 = dx, 1 = dy, 2 = dz    (translations)
    3 = rx, 4 = ry, 5 = rz    (rotations)

so the global index is  6 * node_index + local_dof.

USAGE:
------
    dof = DOFManager()                    # 6 DOF per node
    dof.idx(2, 1)                         # -> 13  (node 2, dy)
    dof.element_dof_map([0, 3])           # -> [0..5, 18..23]
    free, fixed = classify_dofs([None, Support("N2", dx=True, ...)])
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

DOF_NAMES = ("dx", "dy", "dz", "rx", "ry", "rz")


@dataclass(frozen=True)
class DOFManager:
    """
    Manages degree-of-freedom indexing.

    Attributes:
    -----------
    dof_per_node : int
        Number of DOFs per node (6 for a 3D frame)

    Examples:
    ---------
    >>> dof = DOFManager()
    >>> dof.idx(0, 0)   # Node 0, dx
    0
    >>> dof.idx(1, 5)   # Node 1, rz
    11
    >>> dof.ndof(4)
    24
    """
    dof_per_node: int = 6

    def idx(self, node_index: int, local_dof: int) -> int:
        """Global DOF index for a node's local DOF."""
        return self.dof_per_node * node_index + local_dof

    def ndof(self, n_nodes: int) -> int:
        """Total DOFs for a system with n_nodes (size of K)."""
        return self.dof_per_node * n_nodes

    def node_dofs(self, node_index: int) -> List[int]:
        """
        All global DOF indices of one node.

        >>> DOFManager().node_dofs(2)
        [12, 13, 14, 15, 16, 17]
        """
        base = self.dof_per_node * node_index
        return list(range(base, base + self.dof_per_node))

    def element_dof_map(self, node_indices: Sequence[int]) -> List[int]:
        """
        DOF map of an element: the global indices its local DOFs scatter to.

        >>> DOFManager().element_dof_map([0, 1])
        [0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11]
        """
        result = []
        for node_index in node_indices:
            result.extend(self.node_dofs(node_index))
        return result


DOF_3D_FRAME = DOFManager(dof_per_node=6)


def classify_dofs(
    supports: Sequence[Optional[object]],
    dof: DOFManager = DOF_3D_FRAME,
) -> Tuple[List[int], List[int]]:
    """
    Split global DOFs into free and fixed lists.

    Parameters:
    -----------
    supports : sequence
        One entry per node in model order: a support (anything with a
        ``constraints`` tuple of 6 booleans) or None when the node is free

    Returns:
    --------
    (free, fixed) : both sorted ascending
    """
    free, fixed = [], []
    for node_index, support in enumerate(supports):
        constraints = support.constraints if support is not None else (False,) * dof.dof_per_node
        for local_dof, constrained in enumerate(constraints):
            target = fixed if constrained else free
            target.append(dof.idx(node_index, local_dof))
    return free, fixed
