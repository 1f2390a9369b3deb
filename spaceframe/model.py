# spaceframe/model.py
"""
MODEL DEFINITIONS: Nodes, Members, Supports and Loads
=====================================================

Immutable data structures describing a 3D frame model. A ``Model`` is built
once (usually by ``spaceframe.io``) and then read, never modified, by the
analysis core.

Each node carries 6 DOFs in the global system:
    dx, dy, dz  - translations along global X, Y, Z
    rx, ry, rz  - rotations about global X, Y, Z

The global DOF index of component c at the node in position i is 6*i + c.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Units:
    length: str = "mm"
    force: str = "kN"


@dataclass(frozen=True)
class ModelInfo:
    name: str = ""
    units: Units = field(default_factory=Units)


@dataclass(frozen=True)
class Material:
    """
    Linear-elastic isotropic material.

    Parameters:
    -----------
    E : float
        Young's modulus
    G : float
        Shear modulus (used for torsion, GJ/L)
    nu : float
        Poisson's ratio (descriptive, the element uses E and G directly)
    rho : float
        Density (descriptive)
    """
    id: str
    E: float
    G: float
    nu: float = 0.3
    rho: float = 0.0


@dataclass(frozen=True)
class Section:
    """
    Cross-section properties.

    Iz governs bending in the local x-y plane (shear_y / moment_z),
    Iy governs bending in the local x-z plane (shear_z / moment_y).
    """
    id: str
    A: float
    Iy: float
    Iz: float
    J: float


@dataclass(frozen=True)
class Node:
    id: str
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class EndRelease:
    fx: bool = False
    fy: bool = False
    fz: bool = False
    mx: bool = False
    my: bool = False
    mz: bool = False


@dataclass(frozen=True)
class MemberReleases:
    """End releases. Part of the model, not used by stiffness assembly."""
    i_node: EndRelease = field(default_factory=EndRelease)
    j_node: EndRelease = field(default_factory=EndRelease)


@dataclass(frozen=True)
class Member:
    """
    A two-node 3D frame member.

    rotation is the roll angle (degrees) of the local y/z axes about the
    member axis.
    """
    id: str
    i_node: str
    j_node: str
    material: str
    section: str
    rotation: float = 0.0
    releases: Optional[MemberReleases] = None


@dataclass(frozen=True)
class Support:
    node: str
    dx: bool = False
    dy: bool = False
    dz: bool = False
    rx: bool = False
    ry: bool = False
    rz: bool = False

    @property
    def constraints(self) -> Tuple[bool, bool, bool, bool, bool, bool]:
        """Constraint flags in DOF order (dx, dy, dz, rx, ry, rz)."""
        return (self.dx, self.dy, self.dz, self.rx, self.ry, self.rz)


class Direction(str, Enum):
    """Load direction tag. Forces along and moments about an axis."""
    FX = "FX"
    FY = "FY"
    FZ = "FZ"
    MX = "MX"
    MY = "MY"
    MZ = "MZ"

    @classmethod
    def parse(cls, tag) -> "Direction":
        if isinstance(tag, Direction):
            return tag
        try:
            return cls(str(tag).upper())
        except ValueError:
            raise ValueError(
                f"Unknown load direction {tag!r} (expected one of FX, FY, FZ, MX, MY, MZ)"
            ) from None

    @property
    def offset(self) -> int:
        """DOF offset within a node (0..5)."""
        return _DIRECTION_OFFSETS[self]

    @property
    def is_moment(self) -> bool:
        return self.value.startswith("M")


_DIRECTION_OFFSETS = {
    Direction.FX: 0,
    Direction.FY: 1,
    Direction.FZ: 2,
    Direction.MX: 3,
    Direction.MY: 4,
    Direction.MZ: 5,
}


class MemberLoadType(str, Enum):
    DISTRIBUTED = "distributed"
    POINT = "point"
    MOMENT = "moment"


@dataclass(frozen=True)
class NodeLoad:
    """Load applied directly to a global DOF of a node."""
    node: str
    direction: Direction
    magnitude: float


@dataclass(frozen=True)
class MemberLoad:
    """
    Load applied along a member, in member-local directions.

    Positions are normalized (0 = node i, 1 = node j).

    distributed : w1 at x1 varying linearly to w2 at x2 (w2=None -> w2=w1)
    point       : force ``magnitude`` at x
    moment      : concentrated moment ``magnitude`` at x
    """
    member: str
    type: MemberLoadType
    direction: Direction
    magnitude: float = 0.0
    w1: float = 0.0
    w2: Optional[float] = None
    x1: float = 0.0
    x2: float = 1.0
    x: float = 0.5

    def scaled(self, factor: float) -> "MemberLoad":
        """Copy of this load with every intensity multiplied by factor."""
        return replace(
            self,
            magnitude=self.magnitude * factor,
            w1=self.w1 * factor,
            w2=None if self.w2 is None else self.w2 * factor,
        )


@dataclass(frozen=True)
class LoadCase:
    name: str
    node_loads: Tuple[NodeLoad, ...] = ()
    member_loads: Tuple[MemberLoad, ...] = ()


@dataclass(frozen=True)
class LoadCombination:
    """Factor-weighted sum of load cases, keyed by case name."""
    name: str
    factors: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class Model:
    info: ModelInfo = field(default_factory=ModelInfo)
    materials: Tuple[Material, ...] = ()
    sections: Tuple[Section, ...] = ()
    nodes: Tuple[Node, ...] = ()
    members: Tuple[Member, ...] = ()
    supports: Tuple[Support, ...] = ()
    load_cases: Tuple[LoadCase, ...] = ()
    load_combinations: Tuple[LoadCombination, ...] = ()

    def node_index(self) -> Dict[str, int]:
        """Node id -> position in ``nodes`` (the DOF block index)."""
        return {node.id: i for i, node in enumerate(self.nodes)}

    def load_case(self, name: str) -> Optional[LoadCase]:
        for case in self.load_cases:
            if case.name == name:
                return case
        return None

    def load_combination(self, name: str) -> Optional[LoadCombination]:
        for combo in self.load_combinations:
            if combo.name == name:
                return combo
        return None
