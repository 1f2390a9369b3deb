# tests/test_transform.py
"""
COORDINATE TRANSFORMATION TESTS
===============================

Local axes, the 3×3 rotation matrix and the 12×12 transformation matrix.

Conventions being checked:
- x_local runs from node i to node j
- horizontal members: y_local is "up" (global +Y)
- vertical members: y_local is -X (pointing up) or +X (pointing down)
- roll rotates y/z about x_local
- T maps global to local: d_local = T · d_global
"""

import numpy as np
import pytest

from spaceframe.errors import ZeroLengthError
from spaceframe.kernel.transform import (
    create_rotation_matrix,
    create_transformation_matrix,
    member_axes,
)
from spaceframe.model import Node


def axes(p, q, roll=0.0):
    return member_axes(Node("i", *p), Node("j", *q), roll)


class TestMemberAxes:

    def test_along_global_x(self):
        x, y, z = axes((0, 0, 0), (5, 0, 0))
        np.testing.assert_allclose(x, [1, 0, 0], atol=1e-15)
        np.testing.assert_allclose(y, [0, 1, 0], atol=1e-15)
        np.testing.assert_allclose(z, [0, 0, 1], atol=1e-15)

    def test_along_global_z(self):
        x, y, z = axes((0, 0, 0), (0, 0, 2))
        np.testing.assert_allclose(y, [0, 1, 0], atol=1e-15)
        np.testing.assert_allclose(z, [-1, 0, 0], atol=1e-15)

    def test_vertical_up(self):
        x, y, z = axes((0, 0, 0), (0, 3, 0))
        np.testing.assert_allclose(x, [0, 1, 0])
        np.testing.assert_allclose(y, [-1, 0, 0])
        np.testing.assert_allclose(z, [0, 0, 1])

    def test_vertical_down(self):
        x, y, z = axes((0, 3, 0), (0, 0, 0))
        np.testing.assert_allclose(x, [0, -1, 0])
        np.testing.assert_allclose(y, [1, 0, 0])
        np.testing.assert_allclose(z, [0, 0, 1])

    def test_skew_in_xy_plane(self):
        x, y, z = axes((0, 0, 0), (3, 4, 0))
        np.testing.assert_allclose(x, [0.6, 0.8, 0.0])
        np.testing.assert_allclose(y, [-0.8, 0.6, 0.0], atol=1e-15)
        np.testing.assert_allclose(z, [0.0, 0.0, 1.0], atol=1e-15)

    def test_roll_90_degrees(self):
        x, y, z = axes((0, 0, 0), (5, 0, 0), roll=90.0)
        np.testing.assert_allclose(y, [0, 0, 1], atol=1e-15)
        np.testing.assert_allclose(z, [0, -1, 0], atol=1e-15)

    @pytest.mark.parametrize("q,roll", [
        ((1, 2, 3), 0.0),
        ((-4, 1, 2), 30.0),
        ((0, -5, 0), 45.0),
        ((2, 0, -7), -120.0),
    ])
    def test_right_handed_orthonormal(self, q, roll):
        x, y, z = axes((1, 1, 1), q, roll)
        R = np.array([x, y, z])
        np.testing.assert_allclose(R @ R.T, np.eye(3), atol=1e-12)
        assert np.linalg.det(R) == pytest.approx(1.0)

    def test_zero_length(self):
        with pytest.raises(ZeroLengthError):
            axes((1, 2, 3), (1, 2, 3))


class TestTransformationMatrix:

    def test_rotation_matrix_columns_are_local_axes(self):
        ni, nj = Node("i", 0, 0, 0), Node("j", 3, 4, 0)
        R = create_rotation_matrix(ni, nj).to_array()
        x, y, z = member_axes(ni, nj)
        np.testing.assert_allclose(R[:, 0], x)
        np.testing.assert_allclose(R[:, 1], y)
        np.testing.assert_allclose(R[:, 2], z)

    def test_block_diagonal_and_orthogonal(self):
        T = create_transformation_matrix(Node("i", 0, 0, 0), Node("j", 1, 2, 2), 15.0).to_array()
        assert T.shape == (12, 12)
        np.testing.assert_allclose(T @ T.T, np.eye(12), atol=1e-12)
        block = T[0:3, 0:3]
        for o in (3, 6, 9):
            np.testing.assert_array_equal(T[o:o + 3, o:o + 3], block)
        assert np.all(T[0:3, 3:12] == 0.0)

    def test_maps_global_to_local(self):
        # Member along global Z: a global X displacement is a local -z one
        T = create_transformation_matrix(Node("i", 0, 0, 0), Node("j", 0, 0, 4))
        d_global = np.zeros(12)
        d_global[0] = 1.0
        d_local = T.multiply_vector(d_global)
        np.testing.assert_allclose(d_local[0:3], [0.0, 0.0, -1.0], atol=1e-15)

    def test_skew_member_axial_component(self):
        # A global displacement along the member axis is purely axial locally
        T = create_transformation_matrix(Node("i", 0, 0, 0), Node("j", 3, 4, 0))
        d_global = np.zeros(12)
        d_global[6:9] = [0.6, 0.8, 0.0]
        d_local = T.multiply_vector(d_global)
        np.testing.assert_allclose(d_local[6:9], [1.0, 0.0, 0.0], atol=1e-15)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
