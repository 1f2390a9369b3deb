# spaceframe/kernel - Linear algebra, DOF bookkeeping, assembly and solve
"""
KERNEL: THE NUMERICAL FOUNDATION
================================

Everything the direct stiffness method needs that is independent of the
element formulation:

- Matrix           dense matrix type with a partial-pivoting solver
- transform        member-local axes and the 12×12 transformation matrix
- DOFManager       (node, local DOF) -> global DOF index, free/fixed split
- assemble         scatter-add of element stiffness and load contributions
- solve            partitioned solve, reactions, mechanism detection
"""

from .matrix import Matrix
from .transform import create_rotation_matrix, create_transformation_matrix
from .dof import DOFManager, DOF_3D_FRAME, classify_dofs
from .assemble import assemble_global_K, assemble_global_F, add_nodal_load
from .solve import AssembledSystem, solve_linear

__all__ = [
    'Matrix',
    'create_rotation_matrix',
    'create_transformation_matrix',
    'DOFManager',
    'DOF_3D_FRAME',
    'classify_dofs',
    'assemble_global_K',
    'assemble_global_F',
    'add_nodal_load',
    'AssembledSystem',
    'solve_linear',
]
