# mini_fem/kernel/assemble.py
"""
ASSEMBLY: Family-Agnostic Global Matrix Assembly
================================================

PURPOSE:
--------
The scatter-add that builds K and F from element-level data. Assembly does
not care about element TYPE, only about:
- Total number of DOFs
- For each element: its DOF map and its stiffness matrix

ALGORITHM:
----------
    K = zeros(ndof x ndof)
    for each element:
        for each (a, b) in ke:
            K[dof_map[a], dof_map[b]] += ke[a, b]

The global system is always rebuilt from zero, so nothing accumulates
across analysis runs. Because the scatter is a pure sum, the element order
does not change K beyond floating-point rounding.

PARALLELISM:
------------
element_contributions() can compute the local matrices on a thread pool.
Only that per-element work runs concurrently; the results are collected in
element order and scattered by the calling thread, so two elements sharing
a node never write the same global entry at the same time.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Tuple

import numpy as np

from .dof import DOFManager
from .element import ElementFamily
from .matrix import ForceVector, StiffnessMatrix
from ..model import Material, Mesh

logger = logging.getLogger(__name__)

Contribution = Tuple[List[int], np.ndarray]


def element_contributions(
    mesh: Mesh,
    family: ElementFamily,
    material: Material,
    dof: DOFManager,
    workers: int = 1,
) -> List[Contribution]:
    """
    (dof_map, ke) for every element of the mesh, in element order.

    Parameters:
    -----------
    mesh : Mesh
        Nodes and connectivity
    family : ElementFamily
        Supplies local_stiffness()
    material : Material
        Shared constants
    dof : DOFManager
        Must use family.dof_per_node
    workers : int
        Threads used for the local stiffness computations (1 = serial)
    """

    def _one(element):
        ke = family.local_stiffness(mesh.element_coords(element), material)
        return dof.element_dof_map(element.nodes), ke

    if workers > 1 and mesh.n_elements > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            contributions = list(pool.map(_one, mesh.elements))
    else:
        contributions = [_one(e) for e in mesh.elements]

    logger.debug(
        "Computed %d %s element matrices (workers=%d)",
        len(contributions), family.name, workers,
    )
    return contributions


def assemble_global_K(ndof: int, contributions: List[Contribution]) -> StiffnessMatrix:
    """
    Assemble the global stiffness matrix from (dof_map, ke) pairs.

    Returns:
    --------
    StiffnessMatrix
        Symmetric, positive semi-definite until boundary conditions are applied
    """
    K = StiffnessMatrix(ndof)
    for dof_map, ke in contributions:
        K.scatter_add(dof_map, ke)
    return K


def assemble_global_F(ndof: int, contributions: List[Contribution]) -> ForceVector:
    """Same scatter-add as assemble_global_K, for (dof_map, fe) load vectors."""
    F = ForceVector(ndof)
    for dof_map, fe in contributions:
        F.scatter_add(dof_map, fe)
    return F
