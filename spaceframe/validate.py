# spaceframe/validate.py
"""
Model validation.

Checks a ``Model`` for everything the analysis core assumes: unique ids,
resolvable references, non-degenerate members, sensible material and section
properties, and a support layout that can at least prevent rigid-body
translation. Each problem is reported with a path into the file format
(``members[2].material``) so it can be traced back to the source.
"""

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List

from .config import CONFIG, AnalysisConfig
from .model import Direction, MemberLoadType, Model

ERROR = "error"
WARNING = "warning"


@dataclass(frozen=True)
class ValidationIssue:
    path: str
    message: str
    severity: str = ERROR


def has_errors(issues: Iterable[ValidationIssue]) -> bool:
    return any(issue.severity == ERROR for issue in issues)


def _check_ids(items, collection: str, label: str, attr: str = "id") -> List[ValidationIssue]:
    issues = []
    seen = set()
    for i, item in enumerate(items):
        value = getattr(item, attr)
        path = f"{collection}[{i}].{attr}"
        if not value:
            issues.append(ValidationIssue(path, f"{label} has no {attr}"))
        elif value in seen:
            issues.append(ValidationIssue(path, f"Duplicate {label} {attr}: {value}"))
        else:
            seen.add(value)
    return issues


def _check_positive(obj, path: str, names: Iterable[str]) -> List[ValidationIssue]:
    return [
        ValidationIssue(f"{path}.{name}", f"{name} must be positive")
        for name in names
        if not getattr(obj, name) > 0
    ]


def validate_materials(model: Model) -> List[ValidationIssue]:
    issues = _check_ids(model.materials, "materials", "material")
    for i, mat in enumerate(model.materials):
        path = f"materials[{i}]"
        issues += _check_positive(mat, path, ("E", "G"))
        if not 0 <= mat.nu < 0.5:
            issues.append(ValidationIssue(f"{path}.nu", "nu must be in [0, 0.5)"))
    return issues


def validate_sections(model: Model) -> List[ValidationIssue]:
    issues = _check_ids(model.sections, "sections", "section")
    for i, sec in enumerate(model.sections):
        issues += _check_positive(sec, f"sections[{i}]", ("A", "Iy", "Iz", "J"))
    return issues


def validate_nodes(model: Model) -> List[ValidationIssue]:
    if not model.nodes:
        return [ValidationIssue("nodes", "No nodes defined", WARNING)]
    issues = _check_ids(model.nodes, "nodes", "node")
    for i, node in enumerate(model.nodes):
        if not all(math.isfinite(c) for c in (node.x, node.y, node.z)):
            issues.append(ValidationIssue(f"nodes[{i}]", "Node coordinates must be finite numbers"))
    return issues


def validate_members(model: Model, config: AnalysisConfig = None) -> List[ValidationIssue]:
    min_length = (config or CONFIG).min_length
    if not model.members:
        return [ValidationIssue("members", "No members defined", WARNING)]

    issues = _check_ids(model.members, "members", "member")
    nodes = {n.id: n for n in model.nodes}
    material_ids = {m.id for m in model.materials}
    section_ids = {s.id for s in model.sections}

    for i, member in enumerate(model.members):
        path = f"members[{i}]"
        for attr, key in (("i_node", "iNode"), ("j_node", "jNode")):
            ref = getattr(member, attr)
            if ref not in nodes:
                issues.append(ValidationIssue(f"{path}.{key}", f"Unknown node: {ref}"))
        if member.i_node == member.j_node:
            issues.append(ValidationIssue(path, "Start and end node are the same"))
        elif member.i_node in nodes and member.j_node in nodes:
            a, b = nodes[member.i_node], nodes[member.j_node]
            if math.dist((a.x, a.y, a.z), (b.x, b.y, b.z)) < min_length:
                issues.append(ValidationIssue(path, "Member has zero length"))
        if member.material not in material_ids:
            issues.append(ValidationIssue(f"{path}.material", f"Unknown material: {member.material}"))
        if member.section not in section_ids:
            issues.append(ValidationIssue(f"{path}.section", f"Unknown section: {member.section}"))
    return issues


def validate_supports(model: Model) -> List[ValidationIssue]:
    issues = []
    node_ids = {n.id for n in model.nodes}
    supported = set()
    for i, support in enumerate(model.supports):
        path = f"supports[{i}]"
        if support.node not in node_ids:
            issues.append(ValidationIssue(f"{path}.node", f"Unknown node: {support.node}"))
        elif support.node in supported:
            issues.append(ValidationIssue(
                f"{path}.node", f"Duplicate support for node: {support.node}", WARNING))
        else:
            supported.add(support.node)
        if not any(support.constraints):
            issues.append(ValidationIssue(path, "Support has no constraints", WARNING))
    return issues


def _check_position(value: float, path: str) -> List[ValidationIssue]:
    if not 0.0 <= value <= 1.0:
        return [ValidationIssue(path, "Position must be between 0 and 1")]
    return []


def validate_load_cases(model: Model) -> List[ValidationIssue]:
    issues = _check_ids(model.load_cases, "loadCases", "load case", attr="name")
    node_ids = {n.id for n in model.nodes}
    member_ids = {m.id for m in model.members}

    for i, case in enumerate(model.load_cases):
        path = f"loadCases[{i}]"
        for j, load in enumerate(case.node_loads):
            if load.node not in node_ids:
                issues.append(ValidationIssue(f"{path}.nodeLoads[{j}].node", f"Unknown node: {load.node}"))
            try:
                Direction.parse(load.direction)
            except ValueError as e:
                issues.append(ValidationIssue(f"{path}.nodeLoads[{j}].direction", str(e)))

        for j, load in enumerate(case.member_loads):
            lpath = f"{path}.memberLoads[{j}]"
            if load.member not in member_ids:
                issues.append(ValidationIssue(f"{lpath}.member", f"Unknown member: {load.member}"))
            try:
                direction = Direction.parse(load.direction)
            except ValueError as e:
                issues.append(ValidationIssue(f"{lpath}.direction", str(e)))
                continue
            if load.type == MemberLoadType.DISTRIBUTED:
                issues += _check_position(load.x1, f"{lpath}.x1")
                issues += _check_position(load.x2, f"{lpath}.x2")
                if load.x2 < load.x1:
                    issues.append(ValidationIssue(lpath, "x2 must not be less than x1"))
                if direction in (Direction.MY, Direction.MZ):
                    issues.append(ValidationIssue(
                        f"{lpath}.direction",
                        f"Distributed {direction.value} loads are not supported and will be ignored",
                        WARNING))
            else:
                issues += _check_position(load.x, f"{lpath}.x")
                if load.type == MemberLoadType.MOMENT and not direction.is_moment:
                    issues.append(ValidationIssue(
                        f"{lpath}.direction", "Moment loads need an MX, MY or MZ direction"))
    return issues


def validate_load_combinations(model: Model) -> List[ValidationIssue]:
    issues = _check_ids(model.load_combinations, "loadCombinations", "load combination", attr="name")
    case_names = {c.name for c in model.load_cases}
    for i, combo in enumerate(model.load_combinations):
        for case_name in combo.factors:
            if case_name not in case_names:
                issues.append(ValidationIssue(
                    f"loadCombinations[{i}].factors", f"Unknown load case: {case_name}"))
    return issues


def validate_stability(model: Model) -> List[ValidationIssue]:
    """Coarse rigid-body check: every global translation restrained somewhere."""
    if not model.supports:
        return [ValidationIssue("supports", "No supports defined; the structure is unstable")]

    issues = []
    restrained: Dict[str, bool] = {
        "X": any(s.dx for s in model.supports),
        "Y": any(s.dy for s in model.supports),
        "Z": any(s.dz for s in model.supports),
    }
    for axis, ok in restrained.items():
        if not ok:
            issues.append(ValidationIssue("supports", f"No support restrains translation in {axis}"))
    return issues


def validate_model(model: Model, check_stability: bool = True,
                   config: AnalysisConfig = None) -> List[ValidationIssue]:
    """
    Run every check and return all issues found (empty list = valid).

    Issues with severity "warning" don't prevent analysis. With
    check_stability=False the support layout isn't checked (the analyzer runs
    validate_stability on its own and fails every combination). config
    supplies the zero-length tolerance (default: global CONFIG).
    """
    issues: List[ValidationIssue] = []
    if not model.info.name:
        issues.append(ValidationIssue("model.name", "Model has no name", WARNING))
    issues += validate_materials(model)
    issues += validate_sections(model)
    issues += validate_nodes(model)
    issues += validate_members(model, config)
    issues += validate_supports(model)
    issues += validate_load_cases(model)
    issues += validate_load_combinations(model)
    if check_stability:
        issues += validate_stability(model)
    return issues
