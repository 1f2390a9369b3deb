# spaceframe/kernel/transform.py
"""
COORDINATE TRANSFORMATION: Member-Local Axes from Geometry
==========================================================

Each member has its own right-handed local axis system:

    x_local : along the member, from node i to node j
    y_local : global Y projected onto the plane normal to x_local
              (the "up" direction of the member's strong axis)
    z_local : x_local × y_local

Vertical members have no projection of global Y, so y_local is picked from
global X: -X when the member points up, +X when it points down. A roll angle
then rotates (y_local, z_local) about x_local.

The 12×12 transformation matrix T is block diagonal with the 3×3 direction
cosine block (local axes as rows) repeated for the translations and the
rotations of both nodes:

    d_local = T · d_global          k_global = Tᵀ · k_local · T
"""

import math
from typing import Tuple

import numpy as np

from ..config import CONFIG, AnalysisConfig
from ..errors import ZeroLengthError
from .matrix import Matrix


def member_axes(node_i, node_j, roll_degrees: float = 0.0,
                config: AnalysisConfig = None) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Unit vectors (x_local, y_local, z_local) in global components.

    node_i, node_j are anything with x, y, z attributes. Tolerances come from
    config (default: global CONFIG).

    Raises:
    -------
    ZeroLengthError
        If the two nodes are closer than config.min_length
    """
    config = config or CONFIG
    d = np.array([node_j.x - node_i.x, node_j.y - node_i.y, node_j.z - node_i.z], dtype=float)
    L = float(np.sqrt(d @ d))
    if L < config.min_length:
        raise ZeroLengthError("Member has zero length")

    x_local = d / L
    cx, cy, cz = x_local

    horizontal = math.sqrt(cx * cx + cz * cz)
    if horizontal < config.vertical_tolerance:
        # Vertical member
        y_local = np.array([-1.0, 0.0, 0.0]) if cy > 0 else np.array([1.0, 0.0, 0.0])
    else:
        y_local = np.array([-cy * cx / horizontal, horizontal, -cy * cz / horizontal])

    z_local = np.cross(x_local, y_local)

    if abs(roll_degrees) > config.roll_tolerance:
        rad = math.radians(roll_degrees)
        c, s = math.cos(rad), math.sin(rad)
        y_local, z_local = y_local * c + z_local * s, -y_local * s + z_local * c

    return x_local, y_local, z_local


def create_rotation_matrix(node_i, node_j, roll_degrees: float = 0.0,
                           config: AnalysisConfig = None) -> Matrix:
    """
    3×3 rotation matrix whose columns are the local axes.

    Row r holds global axis r expressed in local components, so the matrix
    maps local components to global ones: v_global = R · v_local.
    """
    x_local, y_local, z_local = member_axes(node_i, node_j, roll_degrees, config)
    return Matrix.from_array([x_local, y_local, z_local]).transpose()


def create_transformation_matrix(node_i, node_j, roll_degrees: float = 0.0,
                                 config: AnalysisConfig = None) -> Matrix:
    """
    12×12 global → local transformation matrix.

    Four copies of the direction cosine block Rᵀ (local axes as rows) on the
    diagonal: node i translations, node i rotations, node j translations,
    node j rotations.
    """
    lam = create_rotation_matrix(node_i, node_j, roll_degrees, config).transpose().to_array()
    T = np.zeros((12, 12), dtype=float)
    for block in range(4):
        o = 3 * block
        T[o:o + 3, o:o + 3] = lam
    return Matrix.from_array(T)
