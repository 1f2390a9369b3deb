# spaceframe/elements.py
"""
3D FRAME ELEMENT: Stiffness, Transformation, Fixed-End Reactions, Forces
========================================================================

A two-node Euler-Bernoulli space-frame element with 6 DOFs per node.

Local DOF order (12 entries):

    [u_i, v_i, w_i, θx_i, θy_i, θz_i,  u_j, v_j, w_j, θx_j, θy_j, θz_j]

    axial                 : u       (0, 6)     EA/L
    torsion               : θx      (3, 9)     GJ/L
    bending in x-y plane  : v, θz   (1, 5, 7, 11)   uses Iz
    bending in x-z plane  : w, θy   (2, 4, 8, 10)   uses Iy

The element references its nodes, material and section; it owns none of
them. Length and the transformation matrix are computed once.
"""

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Sequence

import numpy as np

from .config import CONFIG, AnalysisConfig
from .errors import DimensionError, ZeroLengthError
from .kernel.dof import DOF_3D_FRAME, DOFManager
from .kernel.matrix import Matrix
from .kernel.transform import create_transformation_matrix
from .loads import member_load_fer
from .model import Material, Member, MemberLoad, Node, Section


@dataclass
class ForcePoint:
    """Internal forces at one station along the member (local axes)."""
    x: float            # Distance from node i (0 to L)
    forces: np.ndarray  # [axial, shear_y, shear_z, torsion, moment_y, moment_z]


def frame3d_local_stiffness(
    E: float, G: float, A: float, Iy: float, Iz: float, J: float, L: float
) -> np.ndarray:
    """
    12×12 local stiffness matrix of a 3D Euler-Bernoulli frame element.

    The x-y plane (v, θz) has positive shear/rotation coupling, the x-z plane
    (w, θy) negative, because a positive θy rotates +z towards -x.
    """
    L2 = L * L
    L3 = L2 * L

    EA_L = E * A / L
    GJ_L = G * J / L

    EIz = E * Iz
    ky1 = 12 * EIz / L3
    ky2 = 6 * EIz / L2
    ky3 = 4 * EIz / L
    ky4 = 2 * EIz / L

    EIy = E * Iy
    kz1 = 12 * EIy / L3
    kz2 = 6 * EIy / L2
    kz3 = 4 * EIy / L
    kz4 = 2 * EIy / L

    k = np.zeros((12, 12), dtype=float)

    # Axial
    k[np.ix_([0, 6], [0, 6])] = EA_L * np.array([[1, -1], [-1, 1]])

    # Torsion
    k[np.ix_([3, 9], [3, 9])] = GJ_L * np.array([[1, -1], [-1, 1]])

    # Bending in the local x-y plane (v_i, θz_i, v_j, θz_j)
    k[np.ix_([1, 5, 7, 11], [1, 5, 7, 11])] = np.array([
        [ ky1,  ky2, -ky1,  ky2],
        [ ky2,  ky3, -ky2,  ky4],
        [-ky1, -ky2,  ky1, -ky2],
        [ ky2,  ky4, -ky2,  ky3],
    ])

    # Bending in the local x-z plane (w_i, θy_i, w_j, θy_j)
    k[np.ix_([2, 4, 8, 10], [2, 4, 8, 10])] = np.array([
        [ kz1, -kz2, -kz1, -kz2],
        [-kz2,  kz3,  kz2,  kz4],
        [-kz1,  kz2,  kz1,  kz2],
        [-kz2,  kz4,  kz2,  kz3],
    ])

    return k


class FrameElement:
    """
    One member of the model, ready for assembly.

    Parameters:
    -----------
    member : Member
        The member definition (id, end nodes, roll angle)
    node_i, node_j : Node
        Resolved end nodes
    material : Material
    section : Section
    config : AnalysisConfig, optional
        Length, orientation and load tolerances (default: global CONFIG)

    Raises:
    -------
    ZeroLengthError
        If the end nodes coincide
    """

    def __init__(self, member: Member, node_i: Node, node_j: Node,
                 material: Material, section: Section, config: AnalysisConfig = None):
        self.config = config or CONFIG
        self.id = member.id
        self.member = member
        self.node_i = node_i
        self.node_j = node_j
        self.material = material
        self.section = section
        self.rotation = member.rotation or 0.0

        dx = node_j.x - node_i.x
        dy = node_j.y - node_i.y
        dz = node_j.z - node_i.z
        self.length = float(np.sqrt(dx * dx + dy * dy + dz * dz))

        if self.length < self.config.min_length:
            raise ZeroLengthError(f"Member {member.id} has zero length")

        self._T = create_transformation_matrix(node_i, node_j, self.rotation, self.config)

    def __repr__(self) -> str:
        return f"FrameElement({self.id!r}, {self.node_i.id!r} -> {self.node_j.id!r}, L={self.length:g})"

    def dof_map(self, node_index: Mapping[str, int], dof: DOFManager = DOF_3D_FRAME) -> List[int]:
        """Global DOF indices of this element's 12 local DOFs (node i, then node j)."""
        return dof.element_dof_map([node_index[self.node_i.id], node_index[self.node_j.id]])

    # ------------------------------------------------------------------
    # Stiffness
    # ------------------------------------------------------------------

    def local_stiffness_matrix(self) -> Matrix:
        m, s = self.material, self.section
        return Matrix.from_array(
            frame3d_local_stiffness(m.E, m.G, s.A, s.Iy, s.Iz, s.J, self.length)
        )

    def transformation_matrix(self) -> Matrix:
        """12×12 global → local transformation T."""
        return self._T.copy()

    def global_stiffness_matrix(self) -> Matrix:
        """k_global = Tᵀ · k_local · T"""
        T = self._T
        return T.transpose().multiply(self.local_stiffness_matrix()).multiply(T)

    # ------------------------------------------------------------------
    # Member loads
    # ------------------------------------------------------------------

    def own_loads(self, member_loads: Iterable[MemberLoad]) -> List[MemberLoad]:
        return [load for load in member_loads if load.member == self.id]

    def fixed_end_reactions_local(self, member_loads: Iterable[MemberLoad]) -> np.ndarray:
        """Sum of FER (local coordinates) of the loads acting on this member."""
        fer = np.zeros(12, dtype=float)
        for load in self.own_loads(member_loads):
            fer += member_load_fer(load, self.length, self.config)
        return fer

    def fixed_end_reactions(self, member_loads: Iterable[MemberLoad]) -> np.ndarray:
        """
        FER of this member's loads in GLOBAL coordinates (Tᵀ · fer_local).

        Loads belonging to other members are ignored, so the whole load case
        can be passed in.
        """
        fer_local = self.fixed_end_reactions_local(member_loads)
        return self._T.transpose().multiply_vector(fer_local)

    # ------------------------------------------------------------------
    # Post-processing
    # ------------------------------------------------------------------

    def end_forces_local(self, displacements: Sequence[float],
                         member_loads: Iterable[MemberLoad] = ()) -> np.ndarray:
        """
        Member end forces in local coordinates.

            f_local = k_local · (T · d_global) + fer_local

        Parameters:
        -----------
        displacements : sequence of 12 floats
            This element's global nodal displacements (node i then node j)
        member_loads : iterable of MemberLoad
            Loads already scaled by the combination factors
        """
        d = np.asarray(displacements, dtype=float)
        if d.shape != (12,):
            raise DimensionError(f"Expected 12 element displacements, got {d.size}")
        d_local = self._T.multiply_vector(d)
        f_local = self.local_stiffness_matrix().multiply_vector(d_local)
        return f_local + self.fixed_end_reactions_local(member_loads)

    def compute_member_forces(self, displacements: Sequence[float],
                              member_loads: Iterable[MemberLoad] = (),
                              n_points: int = None) -> List[ForcePoint]:
        """
        Internal forces sampled at n_points + 1 equally spaced stations.

        End forces act ON the member, so the internal force at node i is
        -f_i and at node j is +f_j. Between the ends every component is
        interpolated linearly. That is exact for unloaded spans; under span
        loads it reproduces the end values only.

        Returns:
        --------
        List[ForcePoint]
            forces = [axial, shear_y, shear_z, torsion, moment_y, moment_z]
        """
        if n_points is None:
            n_points = self.config.n_points
        if n_points < 1:
            raise ValueError("n_points must be at least 1")

        f = self.end_forces_local(displacements, member_loads)
        start = -f[0:6]
        end = f[6:12]

        points = []
        for k in range(n_points + 1):
            ratio = k / n_points
            points.append(ForcePoint(
                x=ratio * self.length,
                forces=start * (1 - ratio) + end * ratio,
            ))
        return points
