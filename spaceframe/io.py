# spaceframe/io.py
"""
JSON model files.

The file format uses camelCase keys::

    {
      "model": {"name": "...", "units": {"length": "mm", "force": "kN"}},
      "materials": [{"id": "Steel", "E": 210000, "G": 81000, "nu": 0.3, "rho": 7.85e-9}],
      "sections":  [{"id": "S1", "A": 1000, "Iy": 1e6, "Iz": 1e6, "J": 1e5}],
      "nodes":     [{"id": "N1", "x": 0, "y": 0, "z": 0}],
      "members":   [{"id": "M1", "iNode": "N1", "jNode": "N2",
                     "material": "Steel", "section": "S1", "rotation": 0}],
      "supports":  [{"node": "N1", "dx": true, "dy": true, "dz": true,
                     "rx": true, "ry": true, "rz": true}],
      "loadCases": [{"name": "DEAD",
                     "nodeLoads":   [{"node": "N2", "direction": "FY", "magnitude": -10}],
                     "memberLoads": [{"member": "M1", "type": "distributed",
                                      "direction": "FY", "w1": -1, "w2": -1}]}],
      "loadCombinations": [{"name": "COMB1", "factors": {"DEAD": 1.0}}]
    }

The schema is checked with pydantic; the result is converted to the frozen
dataclasses of ``spaceframe.model``. Referential checks are left to
``spaceframe.validate``.
"""

import json
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ModelLoadError
from . import model as m


# =============================================================================
# File schema
# =============================================================================

class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class UnitsData(_Schema):
    length: str = "mm"
    force: str = "kN"


class ModelInfoData(_Schema):
    name: str = ""
    units: UnitsData = Field(default_factory=UnitsData)


class MaterialData(_Schema):
    id: str
    E: float
    G: float
    nu: float = 0.3
    rho: float = 0.0


class SectionData(_Schema):
    id: str
    A: float
    Iy: float
    Iz: float
    J: float


class NodeData(_Schema):
    id: str
    x: float
    y: float
    z: float = 0.0


class EndReleaseData(_Schema):
    fx: bool = False
    fy: bool = False
    fz: bool = False
    mx: bool = False
    my: bool = False
    mz: bool = False


class MemberReleasesData(_Schema):
    i_node: EndReleaseData = Field(default_factory=EndReleaseData, alias="iNode")
    j_node: EndReleaseData = Field(default_factory=EndReleaseData, alias="jNode")


class MemberData(_Schema):
    id: str
    i_node: str = Field(alias="iNode")
    j_node: str = Field(alias="jNode")
    material: str
    section: str
    rotation: float = 0.0
    releases: Optional[MemberReleasesData] = None


class SupportData(_Schema):
    node: str
    dx: bool = False
    dy: bool = False
    dz: bool = False
    rx: bool = False
    ry: bool = False
    rz: bool = False


class NodeLoadData(_Schema):
    node: str
    direction: m.Direction
    magnitude: float

    @field_validator("direction", mode="before")
    @classmethod
    def _upper(cls, v):
        return v.upper() if isinstance(v, str) else v


class MemberLoadData(_Schema):
    member: str
    type: m.MemberLoadType
    direction: m.Direction
    magnitude: float = 0.0
    w1: float = 0.0
    w2: Optional[float] = None
    x1: float = 0.0
    x2: float = 1.0
    x: float = 0.5

    @field_validator("direction", mode="before")
    @classmethod
    def _upper(cls, v):
        return v.upper() if isinstance(v, str) else v


class LoadCaseData(_Schema):
    name: str
    node_loads: List[NodeLoadData] = Field(default_factory=list, alias="nodeLoads")
    member_loads: List[MemberLoadData] = Field(default_factory=list, alias="memberLoads")


class LoadCombinationData(_Schema):
    name: str
    factors: Dict[str, float] = Field(default_factory=dict)


class ModelData(_Schema):
    model: ModelInfoData = Field(default_factory=ModelInfoData)
    materials: List[MaterialData] = Field(default_factory=list)
    sections: List[SectionData] = Field(default_factory=list)
    nodes: List[NodeData] = Field(default_factory=list)
    members: List[MemberData] = Field(default_factory=list)
    supports: List[SupportData] = Field(default_factory=list)
    load_cases: List[LoadCaseData] = Field(default_factory=list, alias="loadCases")
    load_combinations: List[LoadCombinationData] = Field(default_factory=list, alias="loadCombinations")


# =============================================================================
# Conversion
# =============================================================================

def _error_path(loc) -> str:
    path = ""
    for part in loc:
        path += f"[{part}]" if isinstance(part, int) else (f".{part}" if path else str(part))
    return path


def _to_model(data: ModelData) -> m.Model:
    def releases(r: Optional[MemberReleasesData]) -> Optional[m.MemberReleases]:
        if r is None:
            return None
        return m.MemberReleases(
            i_node=m.EndRelease(**r.i_node.model_dump()),
            j_node=m.EndRelease(**r.j_node.model_dump()),
        )

    return m.Model(
        info=m.ModelInfo(data.model.name, m.Units(**data.model.units.model_dump())),
        materials=tuple(m.Material(**x.model_dump()) for x in data.materials),
        sections=tuple(m.Section(**x.model_dump()) for x in data.sections),
        nodes=tuple(m.Node(**x.model_dump()) for x in data.nodes),
        members=tuple(
            m.Member(
                id=x.id, i_node=x.i_node, j_node=x.j_node,
                material=x.material, section=x.section,
                rotation=x.rotation, releases=releases(x.releases),
            )
            for x in data.members
        ),
        supports=tuple(m.Support(**x.model_dump()) for x in data.supports),
        load_cases=tuple(
            m.LoadCase(
                name=c.name,
                node_loads=tuple(m.NodeLoad(**nl.model_dump()) for nl in c.node_loads),
                member_loads=tuple(m.MemberLoad(**ml.model_dump()) for ml in c.member_loads),
            )
            for c in data.load_cases
        ),
        load_combinations=tuple(
            m.LoadCombination(c.name, dict(c.factors)) for c in data.load_combinations
        ),
    )


def model_from_dict(raw: dict) -> m.Model:
    """
    Convert parsed JSON data to a Model.

    Raises:
    -------
    ModelLoadError
        If the data doesn't match the file schema; one message per problem,
        prefixed with its path (``members[0].iNode: Field required``)
    """
    try:
        data = ModelData.model_validate(raw)
    except ValidationError as e:
        raise ModelLoadError(
            [f"{_error_path(err['loc'])}: {err['msg']}" for err in e.errors()]
        ) from e
    return _to_model(data)


def parse_model(text: str) -> m.Model:
    """Parse model JSON text."""
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise ModelLoadError([f"line {e.lineno}, column {e.colno}: {e.msg}"]) from e
    if not isinstance(raw, dict):
        raise ModelLoadError(["Model file must contain a JSON object"])
    return model_from_dict(raw)


def load_model(path: Union[str, Path]) -> m.Model:
    return parse_model(Path(path).read_text(encoding="utf-8"))


def model_to_dict(model: m.Model) -> dict:
    """Model back to the camelCase file structure."""
    data = ModelData(
        model=ModelInfoData(name=model.info.name, units=UnitsData(**vars(model.info.units))),
        materials=[MaterialData(**vars(x)) for x in model.materials],
        sections=[SectionData(**vars(x)) for x in model.sections],
        nodes=[NodeData(**vars(x)) for x in model.nodes],
        members=[
            MemberData(
                id=x.id, i_node=x.i_node, j_node=x.j_node,
                material=x.material, section=x.section, rotation=x.rotation,
                releases=None if x.releases is None else MemberReleasesData(
                    i_node=EndReleaseData(**vars(x.releases.i_node)),
                    j_node=EndReleaseData(**vars(x.releases.j_node)),
                ),
            )
            for x in model.members
        ],
        supports=[SupportData(**vars(x)) for x in model.supports],
        load_cases=[
            LoadCaseData(
                name=c.name,
                node_loads=[NodeLoadData(**vars(x)) for x in c.node_loads],
                member_loads=[MemberLoadData(**vars(x)) for x in c.member_loads],
            )
            for c in model.load_cases
        ],
        load_combinations=[
            LoadCombinationData(name=c.name, factors=dict(c.factors))
            for c in model.load_combinations
        ],
    )
    return data.model_dump(mode="json", by_alias=True, exclude_none=True)


def dump_model(model: m.Model) -> str:
    return json.dumps(model_to_dict(model), indent=2)


def default_model() -> m.Model:
    """Starter model: a 1000 mm steel cantilever with a tip load."""
    return model_from_dict({
        "model": {"name": "New Model", "units": {"length": "mm", "force": "kN"}},
        "materials": [{"id": "Steel", "E": 210000, "G": 81000, "nu": 0.3, "rho": 7.85e-9}],
        "sections": [{"id": "Default", "A": 1000, "Iy": 1e6, "Iz": 1e6, "J": 1e5}],
        "nodes": [
            {"id": "N1", "x": 0, "y": 0, "z": 0},
            {"id": "N2", "x": 1000, "y": 0, "z": 0},
        ],
        "members": [
            {"id": "M1", "iNode": "N1", "jNode": "N2", "material": "Steel", "section": "Default"},
        ],
        "supports": [
            {"node": "N1", "dx": True, "dy": True, "dz": True, "rx": True, "ry": True, "rz": True},
        ],
        "loadCases": [
            {"name": "DEAD", "nodeLoads": [{"node": "N2", "direction": "FY", "magnitude": -10}]},
        ],
        "loadCombinations": [{"name": "COMB1", "factors": {"DEAD": 1.0}}],
    })
