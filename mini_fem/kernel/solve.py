# mini_fem/kernel/solve.py
"""Dense Gaussian elimination with singular-pivot detection."""

import logging

import numpy as np
import scipy.linalg

from ..errors import SingularSystemError

logger = logging.getLogger(__name__)

PIVOT_TOL = 1e-10


def gaussian_elimination(K, F, pivot_tol: float = PIVOT_TOL) -> np.ndarray:
    """
    Solve K·d = F by forward elimination with partial (row) pivoting and
    back substitution. K and F are not modified.

    A pivot is treated as zero when |pivot| <= pivot_tol * max|K[:, k]|,
    the largest entry of the same column before elimination. Columns are
    never permuted, so column k is always DOF k; constrained DOFs carry
    the penalty in their own column and never trip the test.

    Args:
        K: Square system matrix (ndof x ndof), array-like
        F: Right-hand side (ndof,), array-like
        pivot_tol: Relative zero-pivot threshold

    Returns:
        d: Solution vector (ndof,)

    Raises:
        SingularSystemError: If a zero pivot is met (isolated node, or a
            rigid-body mode left unconstrained); .dof names the DOF
    """
    A = np.array(K, dtype=float, copy=True)
    b = np.array(F, dtype=float, copy=True)
    n = A.shape[0]
    if A.shape != (n, n) or b.shape != (n,):
        raise ValueError(f"Incompatible system shapes K{A.shape}, F{b.shape}")

    col_scale = np.abs(A).max(axis=0) if n else np.zeros(0)

    for k in range(n):
        p = k + int(np.argmax(np.abs(A[k:, k])))
        if p != k:
            A[[k, p]] = A[[p, k]]
            b[[k, p]] = b[[p, k]]

        pivot = A[k, k]
        if col_scale[k] == 0.0 or abs(pivot) <= pivot_tol * col_scale[k]:
            raise SingularSystemError(
                f"Zero pivot at DOF {k} (|pivot|={abs(pivot):.3e}, "
                f"column scale={col_scale[k]:.3e}). Check for unconnected "
                f"nodes or missing supports.",
                dof=k,
            )

        factors = A[k + 1:, k] / pivot
        A[k + 1:, k:] -= np.outer(factors, A[k, k:])
        b[k + 1:] -= factors * b[k]

    d = np.zeros(n, dtype=float)
    for i in range(n - 1, -1, -1):
        d[i] = (b[i] - A[i, i + 1:] @ d[i + 1:]) / A[i, i]

    if not np.all(np.isfinite(d)):
        raise SingularSystemError("Solution contains non-finite values")
    return d


def solve_linear(K, F, pivot_tol: float = PIVOT_TOL) -> np.ndarray:
    """
    Solve the boundary-condition-applied system K·d = F.

    Returns:
        d: Displacement vector (ndof,)
    """
    n = np.asarray(F).shape[0]
    logger.debug("Solving dense system with %d DOFs", n)
    return gaussian_elimination(K, F, pivot_tol=pivot_tol)


def zero_energy_modes(K, rtol: float = 1e-9) -> int:
    """
    Number of independent zero-energy modes of K (dimension of its null
    space). An unconstrained stiffness matrix has at least one; a properly
    supported one has none.
    """
    A = np.asarray(K, dtype=float)
    if A.size == 0:
        return 0
    return int(scipy.linalg.null_space(A, rcond=rtol).shape[1])
