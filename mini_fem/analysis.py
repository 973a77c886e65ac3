# mini_fem/analysis.py
"""
ANALYSIS PIPELINE: Configuration In, Immutable Result Out
=========================================================

build_analysis() is the single entry point. It runs the whole pipeline

    config -> mesh -> element matrices -> assembly -> supports/loads
           -> solve -> strain/stress

from scratch and returns a frozen AnalysisResult whose arrays are
read-only. Nothing is cached between calls: a changed configuration means
a new call and a new result. Configuration and geometry errors are raised
before assembly completes, and a singular system raises before any
displacement exists, so a result object always holds a full solution.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple, Union

import numpy as np

from .config import AnalysisConfig, load_config
from .errors import ConfigurationError, OutOfRangeError
from .families import get_family
from .kernel.assemble import assemble_global_K, element_contributions
from .kernel.boundary import add_nodal_load, apply_penalty
from .kernel.dof import DOFManager
from .kernel.element import ElementFamily
from .kernel.matrix import ForceVector, StiffnessMatrix
from .kernel.solve import solve_linear, zero_energy_modes
from .mesh import beam_mesh, hex_grid_mesh, line_mesh, quad_grid_mesh, tri_grid_mesh, truss_mesh
from .model import Material, Mesh
from .post import (
    ElementResult,
    compute_nodal_displacements,
    compute_reactions,
    max_abs_displacement,
    recover_element_results,
)

logger = logging.getLogger(__name__)

SPARSE_THRESHOLD = 1e-3


def build_mesh(config: AnalysisConfig) -> Mesh:
    """Mesh for the configured family, options falling back to presets."""
    v = config.value
    family = config.family
    if family == "bar":
        return line_mesh(v("n_elements"), length=v("length"))
    if family == "beam":
        return beam_mesh(v("n_nodes"), v("n_elements"), spacing=v("spacing"))
    if family == "truss":
        return truss_mesh(v("n_nodes"), v("n_elements"), width=v("width"), bay=v("height"))
    if family == "cst":
        return tri_grid_mesh(v("nx"), v("ny"), width=v("width"), height=v("height"))
    if family == "quad":
        return quad_grid_mesh(v("nx"), v("ny"), width=v("width"), height=v("height"))
    if family == "hex":
        return hex_grid_mesh(
            v("nx"), v("ny"), v("nz"),
            width=v("width"), depth=v("depth"), height=v("height"),
        )
    raise ConfigurationError(f"No mesh generator for family {family!r}")


def build_material(config: AnalysisConfig) -> Material:
    v = config.value
    return Material(E=v("E"), nu=v("nu"), A=v("A"), t=v("t"), I=v("I"))


def _check_node(mesh: Mesh, node_id: int, what: str) -> None:
    if not 0 <= node_id < mesh.n_nodes:
        raise ConfigurationError(
            f"{what} references node {node_id}, mesh has {mesh.n_nodes} nodes"
        )


def _support_nodes(mesh: Mesh, rule: str) -> List[int]:
    if rule == "first_node":
        return [0]
    if rule == "first_two_nodes":
        return [0, 1]
    if rule in ("xmin", "zmin"):
        axis = 0 if rule == "xmin" else 2
        coords = np.array([[n.x, n.y, n.z] for n in mesh.nodes])
        lo = coords[:, axis].min()
        return [n.id for n in mesh.nodes if abs(coords[n.id, axis] - lo) <= 1e-9]
    raise ConfigurationError(f"Unknown support rule {rule!r}")


def resolve_supports(
    config: AnalysisConfig, mesh: Mesh, dof: DOFManager
) -> Tuple[List[int], List[float]]:
    """
    Constrained DOFs and their prescribed values.

    A DOF named by several explicit supports is constrained once; naming it
    again with a different value raises ConfigurationError.
    """
    fixed, values = [], []
    if config.supports is not None:
        prescribed: Dict[int, float] = {}
        for s in config.supports:
            _check_node(mesh, s.node, "Support")
            comps = s.components if s.components is not None else range(dof.dof_per_node)
            for c in comps:
                if not 0 <= c < dof.dof_per_node:
                    raise ConfigurationError(
                        f"Support component {c} outside [0, {dof.dof_per_node})"
                    )
                i = dof.idx(s.node, c)
                if i in prescribed:
                    if prescribed[i] != s.value:
                        raise ConfigurationError(
                            f"Conflicting supports on node {s.node} component {c}: "
                            f"{prescribed[i]} and {s.value}"
                        )
                    continue
                prescribed[i] = s.value
                fixed.append(i)
                values.append(s.value)
    else:
        defaults = config.defaults
        comps = defaults.support_components or range(dof.dof_per_node)
        for node_id in _support_nodes(mesh, defaults.support):
            for c in comps:
                fixed.append(dof.idx(node_id, c))
                values.append(0.0)
    return fixed, values


def resolve_loads(
    config: AnalysisConfig, mesh: Mesh, dof: DOFManager
) -> List[Tuple[int, float]]:
    """(global DOF, value) for every concentrated load."""
    loads = []
    if config.loads is not None:
        for load in config.loads:
            _check_node(mesh, load.node, "Load")
            if not 0 <= load.component < dof.dof_per_node:
                raise ConfigurationError(
                    f"Load component {load.component} outside [0, {dof.dof_per_node})"
                )
            loads.append((dof.idx(load.node, load.component), load.value))
    else:
        defaults = config.defaults
        nodes = [mesh.n_nodes - 1] if defaults.load_nodes == "last" else range(mesh.n_nodes)
        for node_id in nodes:
            for c, value in enumerate(defaults.load):
                if value != 0.0:
                    loads.append((dof.idx(node_id, c), value))
    return loads


def _readonly(a) -> np.ndarray:
    a = np.array(a, dtype=float)
    a.flags.writeable = False
    return a


@dataclass(frozen=True)
class AnalysisResult:
    """
    Solved state of one analysis run. All arrays are read-only.

    K, F                  assembled stiffness and applied loads (no penalty)
    K_constrained,        the system actually solved (penalty applied)
    F_constrained
    d                     nodal displacements, length ndof
    contributions         (dof_map, ke) per element, in element order
    """
    config: AnalysisConfig
    family: ElementFamily
    material: Material
    mesh: Mesh
    dof: DOFManager
    K: np.ndarray
    F: np.ndarray
    K_constrained: np.ndarray
    F_constrained: np.ndarray
    d: np.ndarray
    contributions: Tuple[Tuple[Tuple[int, ...], np.ndarray], ...]
    element_results: Tuple[ElementResult, ...]
    node_displacements: Mapping[int, np.ndarray]
    reactions: Mapping[int, float]
    fixed_dofs: Tuple[int, ...]
    penalty: float

    @property
    def ndof(self) -> int:
        return self.K.shape[0]

    @property
    def n_nodes(self) -> int:
        return self.mesh.n_nodes

    @property
    def n_elements(self) -> int:
        return self.mesh.n_elements

    @property
    def displacements(self) -> np.ndarray:
        return self.d

    # --- bounds checks -----------------------------------------------------

    def is_valid_dof(self, i: int) -> bool:
        return DOFManager.is_valid(i, self.ndof)

    def _dof(self, i: int) -> int:
        return DOFManager.check(i, self.ndof)

    def _element(self, e: int) -> int:
        if not 0 <= e < self.n_elements:
            raise OutOfRangeError(f"Element {e} outside [0, {self.n_elements})")
        return e

    def _node(self, n: int) -> int:
        if not 0 <= n < self.n_nodes:
            raise OutOfRangeError(f"Node {n} outside [0, {self.n_nodes})")
        return n

    # --- global system -----------------------------------------------------

    def stiffness(self, i: int, j: int) -> float:
        return float(self.K[self._dof(i), self._dof(j)])

    def force(self, i: int) -> float:
        return float(self.F[self._dof(i)])

    def displacement(self, i: int) -> float:
        return float(self.d[self._dof(i)])

    def node_displacement(self, node_id: int) -> np.ndarray:
        return self.node_displacements[self._node(node_id)]

    def highlight(self, i: int, threshold: float = SPARSE_THRESHOLD) -> np.ndarray:
        """
        Boolean mask of the non-zero K entries lying in row i or column i.
        """
        self._dof(i)
        mask = np.zeros(self.K.shape, dtype=bool)
        mask[i, :] = True
        mask[:, i] = True
        return mask & (np.abs(self.K) > threshold)

    def participates(self, i: int, row: int, col: int) -> bool:
        """Whether entry (row, col) lies in row/column i of K."""
        self._dof(i)
        self._dof(row)
        self._dof(col)
        return row == i or col == i

    def dofs_connected_to(self, i: int) -> List[int]:
        """DOFs coupled to DOF i through a non-zero stiffness entry."""
        return [int(j) for j in np.flatnonzero(self.K[self._dof(i)]) if j != i]

    def rigid_body_modes(self) -> int:
        """Zero-energy modes of the unconstrained K."""
        return zero_energy_modes(self.K)

    # --- elements ------------------------------------------------------------

    def element_stiffness(self, e: int) -> np.ndarray:
        return self.contributions[self._element(e)][1]

    def element_dofs(self, e: int) -> Tuple[int, ...]:
        return self.contributions[self._element(e)][0]

    def element_strain(self, e: int) -> np.ndarray:
        return self.element_results[self._element(e)].strain

    def element_stress(self, e: int) -> np.ndarray:
        return self.element_results[self._element(e)].stress

    def element_forces(self, e: int) -> np.ndarray:
        return self.element_results[self._element(e)].forces

    def elements_at_node(self, node_id: int) -> List[int]:
        self._node(node_id)
        return [el.id for el in self.mesh.elements if node_id in el.nodes]

    def summary(self) -> Dict[str, Any]:
        return {
            "family": self.family.name,
            "n_nodes": self.n_nodes,
            "n_elements": self.n_elements,
            "ndof": self.ndof,
            "n_fixed_dofs": len(self.fixed_dofs),
            "penalty": self.penalty,
            "max_displacement": max_abs_displacement(self.d),
        }


def build_analysis(config: Union[AnalysisConfig, Mapping[str, Any]]) -> AnalysisResult:
    """
    Run the complete pipeline for one configuration.

    Raises:
        ConfigurationError: invalid options or mesh parameters
        DegenerateGeometryError: zero length, non-positive area, bad Jacobian
        SingularSystemError: zero pivot (unconnected node, missing support)
    """
    config = load_config(config)
    family = get_family(config.family)
    material = build_material(config)
    mesh = build_mesh(config)
    dof = DOFManager(dof_per_node=family.dof_per_node)
    ndof = dof.ndof(mesh.n_nodes)
    logger.debug(
        "%s mesh: %d nodes, %d elements, %d DOFs",
        family.name, mesh.n_nodes, mesh.n_elements, ndof,
    )

    fixed, values = resolve_supports(config, mesh, dof)
    loads = resolve_loads(config, mesh, dof)

    contributions = element_contributions(mesh, family, material, dof, workers=config.workers)
    K = assemble_global_K(ndof, contributions)
    F = ForceVector(ndof)
    for i, value in loads:
        add_nodal_load(F, i, value)

    K_physical = K.to_numpy()
    F_applied = F.to_numpy()

    K_bc: StiffnessMatrix = K.copy()
    F_bc: ForceVector = F.copy()
    penalty = apply_penalty(K_bc, F_bc, fixed, values, penalty=config.penalty)

    d = solve_linear(K_bc, F_bc)

    element_results = recover_element_results(mesh, family, material, dof, d)
    result = AnalysisResult(
        config=config,
        family=family,
        material=material,
        mesh=mesh,
        dof=dof,
        K=_readonly(K_physical),
        F=_readonly(F_applied),
        K_constrained=K_bc.view(),
        F_constrained=F_bc.view(),
        d=_readonly(d),
        contributions=tuple((tuple(m), _readonly(ke)) for m, ke in contributions),
        element_results=element_results,
        node_displacements=MappingProxyType(compute_nodal_displacements(mesh, dof, d)),
        reactions=MappingProxyType(compute_reactions(K_physical, F_applied, d, fixed)),
        fixed_dofs=tuple(fixed),
        penalty=penalty,
    )
    logger.info(
        "%s analysis solved: %d DOFs, max |u| = %.4e",
        family.name, ndof, result.summary()["max_displacement"],
    )
    return result
