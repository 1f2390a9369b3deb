# spaceframe/results.py
"""
Analysis result containers.

One ``AnalysisResult`` per load combination. Results are plain data: they
hold no reference to the analyzer and are never modified after they are
returned.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import pandas as pd

NODE_COMPONENTS = ("dx", "dy", "dz", "rx", "ry", "rz")
FORCE_COMPONENTS = ("axial", "shear_y", "shear_z", "torsion", "moment_y", "moment_z")
# Components reported in MemberResult.max_forces (every force component)
EXTREMUM_COMPONENTS = FORCE_COMPONENTS

_CAMEL = {
    "shear_y": "shearY",
    "shear_z": "shearZ",
    "moment_y": "momentY",
    "moment_z": "momentZ",
}


@dataclass(frozen=True)
class NodeDOF:
    """Six components at a node: displacements/rotations or forces/moments."""
    dx: float = 0.0
    dy: float = 0.0
    dz: float = 0.0
    rx: float = 0.0
    ry: float = 0.0
    rz: float = 0.0

    @classmethod
    def from_values(cls, values: Sequence[float]) -> "NodeDOF":
        return cls(*(float(v) for v in values))

    def as_tuple(self):
        return (self.dx, self.dy, self.dz, self.rx, self.ry, self.rz)

    def to_dict(self) -> Dict[str, float]:
        return dict(zip(NODE_COMPONENTS, self.as_tuple()))


@dataclass(frozen=True)
class NodeResult:
    node_id: str
    displacement: NodeDOF
    reaction: NodeDOF

    def to_dict(self) -> dict:
        return {
            "nodeId": self.node_id,
            "displacement": self.displacement.to_dict(),
            "reaction": self.reaction.to_dict(),
        }


@dataclass(frozen=True)
class MemberForces:
    """Internal forces at distance x from node i, in member-local axes."""
    x: float
    axial: float
    shear_y: float
    shear_z: float
    torsion: float
    moment_y: float
    moment_z: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, **{_CAMEL.get(c, c): getattr(self, c) for c in FORCE_COMPONENTS}}


@dataclass(frozen=True)
class Extremum:
    """Signed value with the largest magnitude and where it occurs."""
    value: float = 0.0
    location: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {"value": self.value, "location": self.location}


def find_extremum(forces: Sequence[MemberForces], component: str) -> Extremum:
    """
    Largest |value| of one component along the member.

    Ties keep the first station; an all-zero diagram gives Extremum(0, 0).
    """
    best = Extremum()
    for f in forces:
        value = getattr(f, component)
        if abs(value) > abs(best.value):
            best = Extremum(value, f.x)
    return best


@dataclass(frozen=True)
class MemberResult:
    member_id: str
    forces: List[MemberForces]
    max_forces: Dict[str, Extremum]

    @classmethod
    def from_forces(cls, member_id: str, forces: List[MemberForces]) -> "MemberResult":
        return cls(
            member_id=member_id,
            forces=forces,
            max_forces={c: find_extremum(forces, c) for c in EXTREMUM_COMPONENTS},
        )

    def to_dict(self) -> dict:
        return {
            "memberId": self.member_id,
            "forces": [f.to_dict() for f in self.forces],
            "maxForces": {_CAMEL.get(c, c): e.to_dict() for c, e in self.max_forces.items()},
        }


@dataclass(frozen=True)
class NodeExtremum:
    node_id: str = ""
    value: float = 0.0
    direction: str = ""

    def to_dict(self) -> dict:
        return {"nodeId": self.node_id, "value": self.value, "direction": self.direction}


@dataclass(frozen=True)
class MemberExtremum:
    member_id: str = ""
    value: float = 0.0
    location: float = 0.0

    def to_dict(self) -> dict:
        return {"memberId": self.member_id, "value": self.value, "location": self.location}


@dataclass(frozen=True)
class Summary:
    """
    Structure-wide absolute extrema.

    max_displacement / max_reaction look at the translational components
    (dx, dy, dz); max_moment is moment_z, max_shear is shear_y.
    """
    max_displacement: NodeExtremum = field(default_factory=NodeExtremum)
    max_reaction: NodeExtremum = field(default_factory=NodeExtremum)
    max_moment: MemberExtremum = field(default_factory=MemberExtremum)
    max_shear: MemberExtremum = field(default_factory=MemberExtremum)

    @classmethod
    def compute(cls, nodes: Sequence[NodeResult], members: Sequence[MemberResult]) -> "Summary":
        max_disp = NodeExtremum()
        max_reac = NodeExtremum()
        for node in nodes:
            for direction in ("dx", "dy", "dz"):
                d = getattr(node.displacement, direction)
                if abs(d) > abs(max_disp.value):
                    max_disp = NodeExtremum(node.node_id, d, direction)
                r = getattr(node.reaction, direction)
                if abs(r) > abs(max_reac.value):
                    max_reac = NodeExtremum(node.node_id, r, direction)

        max_moment = MemberExtremum()
        max_shear = MemberExtremum()
        for member in members:
            m = member.max_forces["moment_z"]
            if abs(m.value) > abs(max_moment.value):
                max_moment = MemberExtremum(member.member_id, m.value, m.location)
            v = member.max_forces["shear_y"]
            if abs(v.value) > abs(max_shear.value):
                max_shear = MemberExtremum(member.member_id, v.value, v.location)

        return cls(max_disp, max_reac, max_moment, max_shear)

    def to_dict(self) -> dict:
        return {
            "maxDisplacement": self.max_displacement.to_dict(),
            "maxReaction": self.max_reaction.to_dict(),
            "maxMoment": self.max_moment.to_dict(),
            "maxShear": self.max_shear.to_dict(),
        }


@dataclass(frozen=True)
class AnalysisResult:
    """
    Outcome of analyzing one load combination.

    success=False results carry the error message and no node/member data.
    """
    success: bool
    load_case: str
    nodes: List[NodeResult] = field(default_factory=list)
    members: List[MemberResult] = field(default_factory=list)
    summary: Summary = field(default_factory=Summary)
    error: Optional[str] = None

    @classmethod
    def failure(cls, load_case: str, message: str) -> "AnalysisResult":
        return cls(success=False, load_case=load_case, error=message)

    def node(self, node_id: str) -> NodeResult:
        for result in self.nodes:
            if result.node_id == node_id:
                return result
        raise KeyError(node_id)

    def member(self, member_id: str) -> MemberResult:
        for result in self.members:
            if result.member_id == member_id:
                return result
        raise KeyError(member_id)

    def to_dict(self) -> dict:
        data = {
            "success": self.success,
            "loadCase": self.load_case,
            "nodes": [n.to_dict() for n in self.nodes],
            "members": [m.to_dict() for m in self.members],
            "summary": self.summary.to_dict(),
        }
        if self.error is not None:
            data["error"] = self.error
        return data

    def nodes_dataframe(self) -> pd.DataFrame:
        """One row per node: displacements (u_*) and reactions (r_*)."""
        rows = []
        for n in self.nodes:
            row = {"node": n.node_id}
            row.update({f"u_{c}": v for c, v in n.displacement.to_dict().items()})
            row.update({f"r_{c}": v for c, v in n.reaction.to_dict().items()})
            rows.append(row)
        columns = ["node"] + [f"u_{c}" for c in NODE_COMPONENTS] + [f"r_{c}" for c in NODE_COMPONENTS]
        return pd.DataFrame(rows, columns=columns)

    def member_forces_dataframe(self) -> pd.DataFrame:
        """One row per (member, station)."""
        rows = [
            {"member": m.member_id, "x": f.x, **{c: getattr(f, c) for c in FORCE_COMPONENTS}}
            for m in self.members
            for f in m.forces
        ]
        return pd.DataFrame(rows, columns=["member", "x", *FORCE_COMPONENTS])
