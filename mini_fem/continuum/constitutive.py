# mini_fem/continuum/constitutive.py
"""
Linear elastic constitutive (D) matrices.

Voigt order:
    2D plane stress : [eps_xx, eps_yy, gamma_xy]
    3D solid        : [eps_xx, eps_yy, eps_zz, gamma_xy, gamma_yz, gamma_zx]
Shear strains are engineering strains (gamma = 2 * eps).
"""

import numpy as np

from ..errors import ConfigurationError


def _check(E: float, nu: float) -> None:
    if not E > 0.0:
        raise ConfigurationError(f"Young's modulus must be positive, got {E}")
    if not -1.0 < nu < 0.5:
        raise ConfigurationError(f"Poisson ratio must be in (-1, 0.5), got {nu}")


def plane_stress_D(E: float, nu: float) -> np.ndarray:
    """
    D = E / (1 - nu^2) * [[1, nu, 0], [nu, 1, 0], [0, 0, (1 - nu) / 2]]
    """
    _check(E, nu)
    c = E / (1.0 - nu * nu)
    return c * np.array([
        [1.0,  nu, 0.0],
        [ nu, 1.0, 0.0],
        [0.0, 0.0, (1.0 - nu) / 2.0],
    ])


def solid_D(E: float, nu: float) -> np.ndarray:
    """Isotropic 3D elasticity from the Lame constants lambda and mu."""
    _check(E, nu)
    lam = E * nu / ((1.0 + nu) * (1.0 - 2.0 * nu))
    mu = E / (2.0 * (1.0 + nu))
    D = np.zeros((6, 6))
    D[:3, :3] = lam
    D[0, 0] = D[1, 1] = D[2, 2] = lam + 2.0 * mu
    D[3, 3] = D[4, 4] = D[5, 5] = mu
    return D
