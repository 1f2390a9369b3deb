# tests/test_invariants.py
"""
PHYSICS INVARIANTS
==================

Properties every correct linear analysis must have, checked on a small 3D
frame (three columns, two beams and a skew brace):

1. K is symmetric (Maxwell-Betti reciprocity)
2. Global equilibrium: reactions balance the applied loads, forces and
   moments about the origin
3. Free DOFs carry no reaction
4. Linearity: a combination's results are the factored sum of its cases
5. Idempotence: analyzing twice gives identical results
"""

import numpy as np
import pytest

from spaceframe.analyzer import Analyzer
from spaceframe.model import (
    Direction,
    LoadCase,
    LoadCombination,
    Material,
    Member,
    MemberLoad,
    MemberLoadType,
    Model,
    ModelInfo,
    Node,
    NodeLoad,
    Section,
    Support,
)

FIXED = dict(dx=True, dy=True, dz=True, rx=True, ry=True, rz=True)

NODAL_LOADS = (
    NodeLoad("N5", Direction.FX, 10.0),
    NodeLoad("N6", Direction.FZ, -5.0),
    NodeLoad("N4", Direction.MY, 1000.0),
)
# Horizontal members have local y = global Y, so this is gravity
GRAVITY_W = -0.01
GRAVITY_SPAN = 4000.0


def frame_3d():
    nodes = (
        Node("N1", 0.0, 0.0, 0.0),
        Node("N2", 4000.0, 0.0, 0.0),
        Node("N3", 0.0, 0.0, 3000.0),
        Node("N4", 0.0, 3000.0, 0.0),
        Node("N5", 4000.0, 3000.0, 0.0),
        Node("N6", 0.0, 3000.0, 3000.0),
    )
    members = (
        Member("C1", "N1", "N4", "Steel", "COL"),
        Member("C2", "N2", "N5", "Steel", "COL"),
        Member("C3", "N3", "N6", "Steel", "COL", rotation=30.0),
        Member("B1", "N4", "N5", "Steel", "BEAM"),
        Member("B2", "N4", "N6", "Steel", "BEAM"),
        Member("BR", "N5", "N6", "Steel", "BEAM"),
    )
    return Model(
        info=ModelInfo("3D frame"),
        materials=(Material("Steel", E=210000.0, G=81000.0),),
        sections=(
            Section("COL", A=5000.0, Iy=2.0e7, Iz=4.0e7, J=1.0e6),
            Section("BEAM", A=3000.0, Iy=1.0e7, Iz=3.0e7, J=5.0e5),
        ),
        nodes=nodes,
        members=members,
        supports=tuple(Support(n, **FIXED) for n in ("N1", "N2", "N3")),
        load_cases=(
            LoadCase("NODAL", node_loads=NODAL_LOADS),
            LoadCase("GRAVITY", member_loads=(
                MemberLoad("B1", MemberLoadType.DISTRIBUTED, Direction.FY, w1=GRAVITY_W),
                MemberLoad("B2", MemberLoadType.POINT, Direction.FY, magnitude=-20.0, x=0.3),
            )),
        ),
        load_combinations=(
            LoadCombination("C_NODAL", {"NODAL": 1.0}),
            LoadCombination("C_GRAVITY", {"GRAVITY": 1.0}),
            LoadCombination("C_ALL", {"NODAL": 1.2, "GRAVITY": 1.5}),
        ),
    )


@pytest.fixture(scope="module")
def analyzer():
    return Analyzer(frame_3d())


def _vectors(result):
    D = np.array([n.displacement.as_tuple() for n in result.nodes])
    R = np.array([n.reaction.as_tuple() for n in result.nodes])
    return D, R


def test_stiffness_matrix_symmetry(analyzer):
    K = analyzer.system.K.to_array()
    np.testing.assert_allclose(K, K.T, rtol=1e-12, atol=1e-9 * np.abs(K).max(),
                               err_msg="Stiffness matrix is not symmetric!")
    print("✓ Stiffness matrix is symmetric")


def test_stiffness_assembled_once(analyzer):
    system = analyzer.system
    analyzer.analyze("C_NODAL")
    analyzer.analyze("C_GRAVITY")
    assert analyzer.system is system


def test_force_equilibrium(analyzer):
    result = analyzer.analyze("C_ALL")
    assert result.success, result.error
    _, R = _vectors(result)

    applied = np.zeros(3)
    applied[0] += 1.2 * 10.0
    applied[2] += 1.2 * -5.0
    applied[1] += 1.5 * (GRAVITY_W * GRAVITY_SPAN - 20.0)

    np.testing.assert_allclose(R[:, :3].sum(axis=0) + applied, 0.0, atol=1e-6)
    print("✓ ΣR + ΣP = 0")


def test_moment_equilibrium(analyzer):
    result = analyzer.analyze("C_NODAL")
    _, R = _vectors(result)
    model = analyzer.model
    coords = {n.id: np.array([n.x, n.y, n.z]) for n in model.nodes}

    total = np.zeros(3)
    for node, (r_force, r_moment) in zip(model.nodes, zip(R[:, :3], R[:, 3:])):
        total += np.cross(coords[node.id], r_force) + r_moment

    for load in NODAL_LOADS:
        vec = np.zeros(3)
        vec[load.direction.offset % 3] = load.magnitude
        if load.direction.is_moment:
            total += vec
        else:
            total += np.cross(coords[load.node], vec)

    np.testing.assert_allclose(total, 0.0, atol=1e-3)


def test_free_dofs_have_no_reaction(analyzer):
    result = analyzer.analyze("C_ALL")
    _, R = _vectors(result)
    R_flat = R.ravel()
    np.testing.assert_allclose(R_flat[list(analyzer.free_dofs)], 0.0, atol=1e-6)


def test_fixed_dofs_do_not_move(analyzer):
    result = analyzer.analyze("C_ALL")
    D, _ = _vectors(result)
    assert np.all(D.ravel()[list(analyzer.fixed_dofs)] == 0.0)


def test_combination_linearity(analyzer):
    D1, R1 = _vectors(analyzer.analyze("C_NODAL"))
    D2, R2 = _vectors(analyzer.analyze("C_GRAVITY"))
    D, R = _vectors(analyzer.analyze("C_ALL"))

    np.testing.assert_allclose(D, 1.2 * D1 + 1.5 * D2, rtol=1e-8, atol=1e-8 * np.abs(D).max())
    np.testing.assert_allclose(R, 1.2 * R1 + 1.5 * R2, rtol=1e-8, atol=1e-8 * np.abs(R).max())


def test_member_forces_linear(analyzer):
    f1 = analyzer.analyze("C_NODAL").member("B1").forces
    f2 = analyzer.analyze("C_GRAVITY").member("B1").forces
    f = analyzer.analyze("C_ALL").member("B1").forces
    for a, b, c in zip(f1, f2, f):
        assert c.moment_z == pytest.approx(1.2 * a.moment_z + 1.5 * b.moment_z, rel=1e-7, abs=1e-4)
        assert c.shear_y == pytest.approx(1.2 * a.shear_y + 1.5 * b.shear_y, rel=1e-7, abs=1e-6)


def test_scaling_a_combination_scales_results():
    model = frame_3d()
    doubled = Model(
        info=model.info, materials=model.materials, sections=model.sections,
        nodes=model.nodes, members=model.members, supports=model.supports,
        load_cases=model.load_cases,
        load_combinations=(LoadCombination("C2", {"NODAL": 2.0, "GRAVITY": 2.0}),
                           LoadCombination("C1", {"NODAL": 1.0, "GRAVITY": 1.0})),
    )
    analyzer = Analyzer(doubled)
    D2, R2 = _vectors(analyzer.analyze("C2"))
    D1, R1 = _vectors(analyzer.analyze("C1"))
    np.testing.assert_allclose(D2, 2.0 * D1, rtol=1e-10, atol=1e-12 * np.abs(D2).max())
    np.testing.assert_allclose(R2, 2.0 * R1, rtol=1e-10, atol=1e-12 * np.abs(R2).max())


def _assert_same(a, b):
    assert a.success and b.success
    assert a.load_case == b.load_case
    for x, y in zip(_vectors(a), _vectors(b)):
        np.testing.assert_allclose(x, y, rtol=1e-12, atol=1e-12 * np.abs(x).max())
    for ma, mb in zip(a.members, b.members):
        assert ma.member_id == mb.member_id
        assert len(ma.forces) == len(mb.forces)
        assert ma.max_forces.keys() == mb.max_forces.keys()


def test_idempotent(analyzer):
    _assert_same(analyzer.analyze("C_ALL"), analyzer.analyze("C_ALL"))


def test_fresh_analyzer_same_answer(analyzer):
    _assert_same(Analyzer(frame_3d()).analyze("C_ALL"), analyzer.analyze("C_ALL"))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
