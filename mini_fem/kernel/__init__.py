# mini_fem/kernel - Family-agnostic assembly and solve core
"""
KERNEL: THE FAMILY-AGNOSTIC FOUNDATION
======================================

Assembly, boundary conditions and solving do not care which element
family produced the matrices. They need:
- A way to map (node_id, component) -> global DOF index
- Element stiffness matrices (any size) with their DOF maps
- Constrained DOFs and a load vector

The element formulations are family-specific; the plumbing here is not.
"""

from .assemble import assemble_global_F, assemble_global_K, element_contributions
from .boundary import PENALTY, add_nodal_load, apply_penalty, set_nodal_load
from .dof import DOFManager
from .element import ElementFamily
from .matrix import ForceVector, StiffnessMatrix
from .solve import gaussian_elimination, solve_linear, zero_energy_modes

__all__ = [
    'DOFManager', 'ElementFamily', 'StiffnessMatrix', 'ForceVector',
    'element_contributions', 'assemble_global_K', 'assemble_global_F',
    'apply_penalty', 'add_nodal_load', 'set_nodal_load', 'PENALTY',
    'gaussian_elimination', 'solve_linear', 'zero_energy_modes',
]
