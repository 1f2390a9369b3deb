# tests/test_elements.py
"""
FRAME ELEMENT TESTS
===================

The 12×12 Euler-Bernoulli element: closed-form stiffness entries, symmetry,
rigid-body modes, and member end force recovery including fixed-end
reactions.
"""

import numpy as np
import pytest

from spaceframe.elements import FrameElement, frame3d_local_stiffness
from spaceframe.errors import DimensionError, ZeroLengthError
from spaceframe.model import Direction, Material, Member, MemberLoad, MemberLoadType, Node, Section

E, G = 210000.0, 81000.0
A, IY, IZ, J = 1000.0, 2.0e6, 1.0e6, 1.0e5

STEEL = Material("Steel", E=E, G=G)
SECTION = Section("S1", A=A, Iy=IY, Iz=IZ, J=J)


def make_element(p=(0.0, 0.0, 0.0), q=(4000.0, 0.0, 0.0), rotation=0.0, member_id="M1"):
    ni, nj = Node("N1", *p), Node("N2", *q)
    member = Member(member_id, "N1", "N2", "Steel", "S1", rotation=rotation)
    return FrameElement(member, ni, nj, STEEL, SECTION)


class TestLocalStiffness:

    def test_closed_form_entries(self):
        L = 4000.0
        k = frame3d_local_stiffness(E, G, A, IY, IZ, J, L)

        assert k[0, 0] == pytest.approx(E * A / L)
        assert k[0, 6] == pytest.approx(-E * A / L)
        assert k[3, 3] == pytest.approx(G * J / L)
        # x-y plane uses Iz
        assert k[1, 1] == pytest.approx(12 * E * IZ / L**3)
        assert k[1, 5] == pytest.approx(6 * E * IZ / L**2)
        assert k[5, 11] == pytest.approx(2 * E * IZ / L)
        # x-z plane uses Iy, with the opposite coupling sign
        assert k[2, 2] == pytest.approx(12 * E * IY / L**3)
        assert k[2, 4] == pytest.approx(-6 * E * IY / L**2)
        assert k[4, 4] == pytest.approx(4 * E * IY / L)

    def test_symmetric(self):
        k = frame3d_local_stiffness(E, G, A, IY, IZ, J, 3000.0)
        np.testing.assert_array_equal(k, k.T)

    def test_rigid_body_translation_gives_no_force(self):
        k = frame3d_local_stiffness(E, G, A, IY, IZ, J, 3000.0)
        for axis in range(3):
            d = np.zeros(12)
            d[axis] = d[axis + 6] = 1.0
            np.testing.assert_allclose(k @ d, 0.0, atol=1e-9)

    def test_rigid_body_rotation_gives_no_force(self):
        # Rotation θ about local z: v = θ·x, θz = θ at both ends
        L = 3000.0
        k = frame3d_local_stiffness(E, G, A, IY, IZ, J, L)
        d = np.zeros(12)
        d[5] = d[11] = 1e-3
        d[7] = 1e-3 * L
        np.testing.assert_allclose(k @ d, 0.0, atol=1e-6)


class TestFrameElement:

    def test_length(self):
        assert make_element(q=(3000.0, 4000.0, 0.0)).length == pytest.approx(5000.0)

    def test_zero_length(self):
        with pytest.raises(ZeroLengthError, match="M9"):
            make_element(q=(0.0, 0.0, 0.0), member_id="M9")

    def test_dof_map(self):
        element = make_element()
        assert element.dof_map({"N2": 0, "N1": 3}) == list(range(18, 24)) + list(range(0, 6))

    def test_global_stiffness_symmetric_for_skew_member(self):
        el = make_element(p=(100.0, -200.0, 50.0), q=(2100.0, 1300.0, -900.0), rotation=25.0)
        kg = el.global_stiffness_matrix().to_array()
        np.testing.assert_allclose(kg, kg.T, rtol=1e-12, atol=1e-9 * np.abs(kg).max())

    def test_global_stiffness_rigid_translation(self):
        el = make_element(p=(0.0, 0.0, 0.0), q=(1000.0, 2000.0, 2000.0))
        kg = el.global_stiffness_matrix().to_array()
        d = np.array([1, 1, 1, 0, 0, 0, 1, 1, 1, 0, 0, 0], dtype=float)
        np.testing.assert_allclose(kg @ d, 0.0, atol=1e-6)

    def test_axis_aligned_member_needs_no_transformation(self):
        el = make_element()
        np.testing.assert_allclose(
            el.global_stiffness_matrix().to_array(),
            el.local_stiffness_matrix().to_array(),
            atol=1e-9,
        )

    def test_fer_only_for_own_loads(self):
        el = make_element()
        loads = [
            MemberLoad("M1", MemberLoadType.DISTRIBUTED, Direction.FY, w1=-0.01),
            MemberLoad("M2", MemberLoadType.DISTRIBUTED, Direction.FY, w1=-5.0),
        ]
        fer = el.fixed_end_reactions_local(loads)
        assert fer[1] == pytest.approx(0.01 * 4000.0 / 2)
        assert fer[7] == pytest.approx(0.01 * 4000.0 / 2)

    def test_global_fer_of_vertical_member(self):
        # Local y of an upward column is global -X
        el = make_element(q=(0.0, 3000.0, 0.0))
        load = MemberLoad("M1", MemberLoadType.POINT, Direction.FY, magnitude=-10.0, x=0.5)
        fer = el.fixed_end_reactions([load])
        assert fer[0] == pytest.approx(-5.0)
        assert fer[6] == pytest.approx(-5.0)
        assert fer[1] == pytest.approx(0.0, abs=1e-12)


class TestEndForces:

    def test_end_forces_include_fer(self):
        el = make_element()
        load = MemberLoad("M1", MemberLoadType.DISTRIBUTED, Direction.FY, w1=-0.01)
        f = el.end_forces_local(np.zeros(12), [load])
        np.testing.assert_allclose(f, el.fixed_end_reactions_local([load]))

    def test_axial_stretch(self):
        el = make_element()
        d = np.zeros(12)
        d[6] = 1.0
        f = el.end_forces_local(d)
        assert f[0] == pytest.approx(-E * A / 4000.0)
        assert f[6] == pytest.approx(E * A / 4000.0)

        points = el.compute_member_forces(d, n_points=4)
        # Tension is positive along the whole member
        for p in points:
            assert p.forces[0] == pytest.approx(E * A / 4000.0)

    def test_wrong_displacement_length(self):
        with pytest.raises(DimensionError):
            make_element().end_forces_local(np.zeros(6))

    def test_sample_stations(self):
        el = make_element()
        points = el.compute_member_forces(np.zeros(12), n_points=11)
        assert len(points) == 12
        assert points[0].x == 0.0
        assert points[-1].x == pytest.approx(4000.0)
        assert points[6].x == pytest.approx(6 * 4000.0 / 11)

    def test_n_points_must_be_positive(self):
        with pytest.raises(ValueError):
            make_element().compute_member_forces(np.zeros(12), n_points=0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
