# spaceframe/analyzer.py
"""
ANALYZER: Direct Stiffness Solve per Load Combination
=====================================================

Workflow for one combination:

    1. K     assembled once per model (shared AssembledSystem)
    2. P     Σ factor × (nodal loads - FER of member loads) over its cases
    3. D     K_ff · D_f = P_f, fixed DOFs at zero
    4. R     K · D - P
    5. post  node results, member force diagrams, summary extrema

``analyze`` never raises. A missing combination, a support layout that leaves
a global translation free, or any assembly/solve error comes back as a failed
AnalysisResult carrying the message, and nothing computed for one
combination leaks into another.
"""

import logging
from typing import Dict, List, Optional

import numpy as np

from .config import CONFIG, AnalysisConfig
from .elements import FrameElement
from .errors import ModelValidationError
from .kernel.assemble import add_nodal_load, assemble_global_F, assemble_global_K
from .kernel.dof import DOF_3D_FRAME, classify_dofs
from .kernel.solve import AssembledSystem, solve_linear
from .model import Direction, LoadCase, LoadCombination, MemberLoad, Model
from .results import (
    AnalysisResult,
    MemberForces,
    MemberResult,
    NodeDOF,
    NodeResult,
    Summary,
)
from .validate import WARNING, has_errors, validate_model, validate_stability

logger = logging.getLogger(__name__)


class Analyzer:
    """
    Linear static analysis of one model.

    Build once per model, then call ``analyze(name)`` for as many
    combinations as needed. The global stiffness matrix doesn't depend on the
    loads, so it is assembled on first use and shared by every call.

    Parameters:
    -----------
    model : Model
        The structure to analyze
    config : AnalysisConfig, optional
        Tolerances and sampling (default: global CONFIG)

    Raises:
    -------
    ModelValidationError
        If validation is enabled and the model has errors
    ZeroLengthError
        If a member has coincident end nodes (validation disabled)
    KeyError
        If a member references an unknown node, material or section
        (validation disabled)
    """

    def __init__(self, model: Model, config: AnalysisConfig = None):
        self.model = model
        self.config = config or CONFIG
        self.dof = DOF_3D_FRAME

        # Support layout problems don't block construction; they make every
        # combination fail with this message instead.
        stability = validate_stability(model)
        self.instability: Optional[str] = None
        if has_errors(stability):
            self.instability = (
                "Stiffness matrix is singular. The structure is unstable: "
                + "; ".join(i.message for i in stability)
            )
            logger.warning(self.instability)

        if self.config.validate:
            issues = validate_model(model, check_stability=False, config=self.config)
            for issue in issues:
                if issue.severity == WARNING:
                    logger.warning("%s: %s", issue.path or "<model>", issue.message)
            if has_errors(issues):
                raise ModelValidationError([i for i in issues if i.severity != WARNING])

        self.node_map = {n.id: n for n in model.nodes}
        self.node_index = model.node_index()
        self.material_map = {m.id: m for m in model.materials}
        self.section_map = {s.id: s for s in model.sections}
        self.support_map = {s.node: s for s in model.supports}

        self.elements: List[FrameElement] = [
            FrameElement(
                member,
                self.node_map[member.i_node],
                self.node_map[member.j_node],
                self.material_map[member.material],
                self.section_map[member.section],
                self.config,
            )
            for member in model.members
        ]

        self.ndof = self.dof.ndof(len(model.nodes))
        free, fixed = classify_dofs([self.support_map.get(n.id) for n in model.nodes], self.dof)
        self.free_dofs = tuple(free)
        self.fixed_dofs = tuple(fixed)
        self._system: Optional[AssembledSystem] = None

        logger.debug(
            "Analyzer ready: %d nodes, %d elements, %d DOFs (%d free)",
            len(model.nodes), len(self.elements), self.ndof, len(self.free_dofs),
        )

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------

    def element_dof_map(self, element: FrameElement) -> List[int]:
        return element.dof_map(self.node_index, self.dof)

    def assemble_stiffness(self):
        """Global stiffness matrix K (ndof × ndof), assembled from scratch."""
        contributions = [
            (self.element_dof_map(e), e.global_stiffness_matrix())
            for e in self.elements
        ]
        return assemble_global_K(self.ndof, contributions)

    @property
    def system(self) -> AssembledSystem:
        """K with its free/fixed partition; assembled once, then reused."""
        if self._system is None:
            self._system = AssembledSystem(
                K=self.assemble_stiffness(),
                free=self.free_dofs,
                fixed=self.fixed_dofs,
            )
        return self._system

    def load_vector(self, load_case: LoadCase) -> np.ndarray:
        """
        Global load vector of one load case.

        Nodal loads go straight to their DOF. Member loads enter with the
        sign of their FER reversed (the equivalent nodal load).
        """
        P = np.zeros(self.ndof, dtype=float)

        for load in load_case.node_loads:
            direction = Direction.parse(load.direction)
            add_nodal_load(P, self.node_index[load.node], direction.offset,
                           load.magnitude, self.dof.dof_per_node)

        contributions = [
            (self.element_dof_map(e), e.fixed_end_reactions(load_case.member_loads))
            for e in self.elements
        ]
        P -= assemble_global_F(self.ndof, contributions)
        return P

    def combined_load_vector(self, combination: LoadCombination) -> np.ndarray:
        """Σ factor × load_vector(case) over the cases of a combination."""
        P = np.zeros(self.ndof, dtype=float)
        for case_name, factor in combination.factors.items():
            load_case = self.model.load_case(case_name)
            if load_case is None:
                logger.warning("Combination %s: unknown load case %s skipped",
                               combination.name, case_name)
                continue
            P += factor * self.load_vector(load_case)
        return P

    def combined_member_loads(self, combination: LoadCombination) -> List[MemberLoad]:
        """Member loads of every referenced case, scaled by the case factor."""
        loads = []
        for case_name, factor in combination.factors.items():
            load_case = self.model.load_case(case_name)
            if load_case is None:
                continue
            loads.extend(load.scaled(factor) for load in load_case.member_loads)
        return loads

    # ------------------------------------------------------------------
    # Solve
    # ------------------------------------------------------------------

    def analyze(self, combination_name: str, n_points: int = None) -> AnalysisResult:
        """
        Analyze one load combination.

        Returns:
        --------
        AnalysisResult
            success=True with node/member results, or success=False with the
            error message (unknown combination, unstable structure, ...)
        """
        combo = self.model.load_combination(combination_name)
        if combo is None:
            message = f"Load combination '{combination_name}' not found"
            logger.error(message)
            return AnalysisResult.failure(combination_name, message)

        if self.instability is not None:
            logger.error("Combination %s failed: %s", combination_name, self.instability)
            return AnalysisResult.failure(combination_name, self.instability)

        try:
            P = self.combined_load_vector(combo)
            D, R = solve_linear(self.system, P, self.config.pivot_tolerance)

            node_results = self._node_results(D, R)
            member_results = self._member_results(D, self.combined_member_loads(combo), n_points)
        except Exception as e:  # any failure is reported on this combination only
            logger.error("Combination %s failed: %s", combination_name, e)
            return AnalysisResult.failure(combination_name, str(e))

        logger.info("Combination %s solved (%d free DOFs)", combination_name, len(self.free_dofs))
        return AnalysisResult(
            success=True,
            load_case=combination_name,
            nodes=node_results,
            members=member_results,
            summary=Summary.compute(node_results, member_results),
        )

    def analyze_all(self, n_points: int = None) -> Dict[str, AnalysisResult]:
        """Every combination in model order; a failure stays in its own result."""
        return {
            combo.name: self.analyze(combo.name, n_points)
            for combo in self.model.load_combinations
        }

    # ------------------------------------------------------------------
    # Post-processing
    # ------------------------------------------------------------------

    def _node_results(self, D: np.ndarray, R: np.ndarray) -> List[NodeResult]:
        results = []
        for i, node in enumerate(self.model.nodes):
            dofs = self.dof.node_dofs(i)
            results.append(NodeResult(
                node_id=node.id,
                displacement=NodeDOF.from_values(D[dofs]),
                reaction=NodeDOF.from_values(R[dofs]),
            ))
        return results

    def _member_results(self, D: np.ndarray, member_loads: List[MemberLoad],
                        n_points: int = None) -> List[MemberResult]:
        if n_points is None:
            n_points = self.config.n_points
        results = []
        for element in self.elements:
            d_elem = D[self.element_dof_map(element)]
            points = element.compute_member_forces(d_elem, member_loads, n_points)
            forces = [MemberForces(float(p.x), *(float(v) for v in p.forces)) for p in points]
            results.append(MemberResult.from_forces(element.id, forces))
        return results
