# element strain/stress, nodal displacements, reactions

import numpy as np
from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

from .kernel.dof import DOFManager
from .kernel.element import ElementFamily
from .model import Material, Mesh


@dataclass(frozen=True)
class ElementResult:
    """
    Secondary quantities of one element after the solve.

    strain, stress : labelled by family.strain_labels / stress_labels
    forces         : internal nodal forces k @ u_e, in local DOF order
    """
    id: int
    dofs: Tuple[int, ...]
    strain: np.ndarray
    stress: np.ndarray
    forces: np.ndarray


def _readonly(a: np.ndarray) -> np.ndarray:
    a = np.array(a, dtype=float)
    a.flags.writeable = False
    return a


def recover_element_results(
    mesh: Mesh,
    family: ElementFamily,
    material: Material,
    dof: DOFManager,
    d_global: np.ndarray,
) -> Tuple[ElementResult, ...]:
    """
    Strain, stress and internal forces of every element.

    The element displacements are gathered with the same DOF map used for
    assembly, and pushed through the same strain-displacement relation
    used for the stiffness:

        bar / truss   eps = elongation / L,  sigma = E * eps
        beam          kappa at both ends,    M = EI * kappa
        cst           eps = B u_e,           sigma = D eps
        quad / hex    as cst, at the element centroid
    """
    results = []
    for element in mesh.elements:
        dof_map = dof.element_dof_map(element.nodes)
        u_e = d_global[dof_map]
        xy = mesh.element_coords(element)
        strain, stress = family.strain_stress(xy, material, u_e)
        forces = family.internal_forces(xy, material, u_e)
        results.append(ElementResult(
            id=element.id,
            dofs=tuple(dof_map),
            strain=_readonly(strain),
            stress=_readonly(stress),
            forces=_readonly(forces),
        ))
    return tuple(results)


def compute_nodal_displacements(
    mesh: Mesh,
    dof: DOFManager,
    d_global: np.ndarray,
) -> Dict[int, np.ndarray]:
    """
    Mapping node_id -> displacement vector (length dof_per_node).
    """
    return {
        node.id: _readonly(d_global[dof.node_dofs(node.id)])
        for node in mesh.nodes
    }


def compute_reactions(
    K_physical: np.ndarray,
    F_applied: np.ndarray,
    d_global: np.ndarray,
    fixed_dofs: Sequence[int],
) -> Dict[int, float]:
    """
    Support reactions R = K u - F at the constrained DOFs.

    K_physical must be the assembled matrix WITHOUT the penalty terms, and
    F_applied the external loads without the penalty * value terms.
    """
    R = np.asarray(K_physical) @ d_global - np.asarray(F_applied)
    return {int(i): float(R[i]) for i in sorted(set(fixed_dofs))}


def max_abs_displacement(d_global: np.ndarray) -> float:
    return float(np.max(np.abs(d_global))) if d_global.size else 0.0
