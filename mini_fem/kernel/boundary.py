# mini_fem/kernel/boundary.py
"""
BOUNDARY CONDITIONS: Penalty Supports and Concentrated Loads
============================================================

Prescribed displacements are enforced with the penalty method: a very
large stiffness P is added to the diagonal entry of each constrained DOF,
and P * value is added to the matching load entry. The system keeps its
size; the constrained DOF solves to value + O(F / P).

MAGNITUDE REQUIREMENT:
----------------------
P must exceed the largest physical stiffness entry by many orders of
magnitude or the support is not effectively enforced. The penalty actually
used is

    max(penalty, PENALTY_RATIO * max|diag K|)

with penalty = 1e20 by default, so stiff meshes raise it automatically.
The approximation is kept on purpose (not exact row/column elimination):
reactions and the non-zero residual at supports follow from it.
"""

import logging
from typing import Optional, Sequence

import numpy as np

from .matrix import ForceVector, StiffnessMatrix

logger = logging.getLogger(__name__)

PENALTY = 1e20
PENALTY_RATIO = 1e8


def effective_penalty(K: StiffnessMatrix, penalty: float = PENALTY) -> float:
    """Penalty raised, if needed, to PENALTY_RATIO times the stiffest diagonal."""
    diag_max = float(np.max(np.abs(K.diagonal()))) if K.size else 0.0
    required = PENALTY_RATIO * diag_max
    if required > penalty:
        logger.info(
            "Penalty %.3e too small for max diagonal %.3e; using %.3e",
            penalty, diag_max, required,
        )
        return required
    return float(penalty)


def apply_penalty(
    K: StiffnessMatrix,
    F: ForceVector,
    dofs: Sequence[int],
    values: Optional[Sequence[float]] = None,
    penalty: float = PENALTY,
) -> float:
    """
    Constrain DOFs in place with the penalty method.

    Parameters:
    -----------
    K, F : StiffnessMatrix, ForceVector
        Assembled system, modified in place
    dofs : Sequence[int]
        Constrained global DOF indices
    values : Sequence[float], optional
        Prescribed displacement per DOF (default all zero)
    penalty : float
        Minimum penalty stiffness

    Returns:
    --------
    float
        The penalty that was applied
    """
    if values is None:
        values = [0.0] * len(dofs)
    if len(values) != len(dofs):
        raise ValueError(f"{len(dofs)} constrained DOFs but {len(values)} values")

    P = effective_penalty(K, penalty)
    for dof, value in zip(dofs, values):
        K.add(dof, dof, P)
        if value != 0.0:
            F.add(dof, P * value)
    return P


def add_nodal_load(F: ForceVector, dof: int, value: float) -> None:
    """Accumulate a concentrated load into F[dof]."""
    F.add(dof, value)


def set_nodal_load(F: ForceVector, dof: int, value: float) -> None:
    """Overwrite F[dof] with a concentrated load."""
    F[dof] = value
