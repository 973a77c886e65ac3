# tests/test_continuum.py
"""
CONTINUUM ELEMENTS: CST, Quad4, Hex8
====================================

Checks against hand-integrated stiffness entries, rigid-body mode counts,
constant-strain reproduction on a single element, and the geometry
guards (collinear / clockwise / inverted elements).
"""

import numpy as np
import pytest

from mini_fem.continuum import CST, Hex8, Quad4, gauss_points, plane_stress_D, solid_D
from mini_fem.continuum.elements import cst_B, triangle_signed_area
from mini_fem.errors import ConfigurationError, DegenerateGeometryError
from mini_fem.kernel.solve import zero_energy_modes
from mini_fem.model import Material

UNIT_TRIANGLE = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])
UNIT_SQUARE = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])
UNIT_CUBE = np.array([
    [0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0],
    [0, 0, 1], [1, 0, 1], [1, 1, 1], [0, 1, 1],
], dtype=float)


def linear_field(xy, grad):
    """Nodal displacements of u = grad @ x, interleaved per node."""
    return (xy @ np.asarray(grad).T).ravel()


# =============================================================================
# Constitutive and quadrature
# =============================================================================

def test_plane_stress_D():
    D = plane_stress_D(1.0, 0.25)
    c = 1.0 / (1.0 - 0.0625)
    assert np.allclose(D, c * np.array([[1, 0.25, 0], [0.25, 1, 0], [0, 0, 0.375]]))


def test_solid_D_uniaxial_stress():
    E, nu = 2e5, 0.3
    eps = np.array([1.0, -nu, -nu, 0, 0, 0]) / E
    sigma = solid_D(E, nu) @ eps
    assert np.allclose(sigma, [1.0, 0, 0, 0, 0, 0], atol=1e-12)


def test_invalid_poisson_ratio():
    with pytest.raises(ConfigurationError):
        plane_stress_D(1.0, 0.5)
    with pytest.raises(ConfigurationError):
        solid_D(-1.0, 0.3)


def test_gauss_points_integrate_reference_volume():
    assert np.isclose(sum(w for _, w in gauss_points(2)), 4.0)
    assert np.isclose(sum(w for _, w in gauss_points(3)), 8.0)
    assert np.isclose(sum(w for _, w in gauss_points(2, order=3)), 4.0)
    pts = [p for p, _ in gauss_points(2)]
    assert np.allclose(np.abs(pts), 1.0 / np.sqrt(3.0))


# =============================================================================
# CST
# =============================================================================

def test_cst_area_and_B():
    B, A = cst_B(UNIT_TRIANGLE)
    assert np.isclose(A, 0.5)
    # b = (y2 - y3, y3 - y1, y1 - y2) = (-1, 1, 0); c = (x3 - x2, x1 - x3, x2 - x1) = (-1, 0, 1)
    assert np.allclose(B[0], [-1, 0, 1, 0, 0, 0])
    assert np.allclose(B[1], [0, -1, 0, 0, 0, 1])
    assert np.allclose(B[2], [-1, -1, 0, 1, 1, 0])


def test_cst_stiffness_symmetric_with_three_rigid_modes():
    k = CST().local_stiffness(UNIT_TRIANGLE, Material(E=3e7, nu=0.25, t=1.0))
    assert k.shape == (6, 6)
    assert np.allclose(k, k.T)
    assert zero_energy_modes(k) == 3


def test_cst_reproduces_constant_strain():
    xy = np.array([[0.0, 0.0], [4.0, 1.0], [1.0, 3.0]])
    grad = [[1e-3, 2e-4], [-3e-4, 5e-4]]
    strain, stress = CST().strain_stress(xy, Material(E=1.0, nu=0.25), linear_field(xy, grad))
    assert np.allclose(strain, [1e-3, 5e-4, -1e-4])
    assert np.allclose(stress, plane_stress_D(1.0, 0.25) @ strain)


def test_cst_collinear_or_clockwise_is_degenerate():
    with pytest.raises(DegenerateGeometryError):
        CST().local_stiffness(np.array([[0, 0], [1, 1], [2, 2]]), Material(E=1.0))
    with pytest.raises(DegenerateGeometryError):
        CST().local_stiffness(UNIT_TRIANGLE[::-1], Material(E=1.0))
    assert triangle_signed_area(UNIT_TRIANGLE[::-1]) < 0


# =============================================================================
# Quad4
# =============================================================================

def test_quad_unit_square_matches_hand_integration():
    """
    Unit square, t = 1, plane stress: the 2x2 Gauss stiffness is exact and
    equals E / (1 - nu^2) times the closed-form coefficients below.
    """
    E, nu = 1.0, 0.3
    k = Quad4().local_stiffness(UNIT_SQUARE, Material(E=E, nu=nu, t=1.0))

    k1 = 1 / 2 - nu / 6
    k2 = 1 / 8 + nu / 8
    k3 = -1 / 4 - nu / 12
    k4 = -1 / 8 + 3 * nu / 8
    k5 = -1 / 4 + nu / 12
    k6 = -1 / 8 - nu / 8
    k7 = nu / 6
    k8 = 1 / 8 - 3 * nu / 8
    c = E / (1 - nu**2)

    assert np.allclose(k[0], c * np.array([k1, k2, k3, k4, k5, k6, k7, k8]))
    assert np.allclose(k[1], c * np.array([k2, k1, k8, k7, k6, k5, k4, k3]))
    assert np.allclose(k, k.T)
    assert zero_energy_modes(k) == 3


def test_quad_stiffness_scales_with_thickness():
    mat1 = Material(E=7e4, nu=0.33, t=1.0)
    mat10 = Material(E=7e4, nu=0.33, t=10.0)
    xy = UNIT_SQUARE * [30.0, 15.0]
    assert np.allclose(Quad4().local_stiffness(xy, mat10), 10 * Quad4().local_stiffness(xy, mat1))


def test_quad_reproduces_linear_field_at_any_point():
    xy = np.array([[0.0, 0.0], [2.0, 0.2], [2.3, 1.7], [0.1, 1.5]])
    grad = [[1e-3, 2e-4], [-3e-4, 5e-4]]
    u_e = linear_field(xy, grad)
    for xi, eta in [(0.0, 0.0), (0.5, -0.5), (-1.0, 1.0)]:
        strain, _ = Quad4().strain_stress(xy, Material(E=1.0, nu=0.3), u_e, xi=xi, eta=eta)
        assert np.allclose(strain, [1e-3, 5e-4, -1e-4])


def test_clockwise_quad_is_degenerate():
    with pytest.raises(DegenerateGeometryError):
        Quad4().local_stiffness(UNIT_SQUARE[::-1], Material(E=1.0))


# =============================================================================
# Hex8
# =============================================================================

def test_hex_stiffness_symmetric_with_six_rigid_modes():
    k = Hex8().local_stiffness(UNIT_CUBE, Material(E=2e5, nu=0.3))
    assert k.shape == (24, 24)
    assert np.allclose(k, k.T)
    assert zero_energy_modes(k) == 6
    # rigid translation in x carries no force
    assert np.allclose(k @ np.tile([1.0, 0.0, 0.0], 8), 0.0, atol=1e-6)


def test_hex_reproduces_constant_strain():
    xyz = UNIT_CUBE * [2.0, 1.0, 3.0]
    grad = [[1e-3, 0.0, 2e-4], [0.0, -4e-4, 0.0], [1e-4, 3e-4, 6e-4]]
    strain, stress = Hex8().strain_stress(xyz, Material(E=1.0, nu=0.3), linear_field(xyz, grad))
    # xx, yy, zz, xy, yz, zx
    assert np.allclose(strain, [1e-3, -4e-4, 6e-4, 0.0, 3e-4, 3e-4])
    assert np.allclose(stress, solid_D(1.0, 0.3) @ strain)


def test_hex_energy_of_uniform_extension():
    """0.5 u^T k u equals 0.5 * sigma : eps * volume for a constant field."""
    xyz = UNIT_CUBE * [2.0, 1.0, 3.0]
    grad = np.diag([1e-3, 0.0, 0.0])
    u_e = linear_field(xyz, grad)
    mat = Material(E=2e5, nu=0.3)
    k = Hex8().local_stiffness(xyz, mat)
    eps = np.array([1e-3, 0, 0, 0, 0, 0])
    expected = eps @ solid_D(mat.E, mat.nu) @ eps * 6.0
    assert np.isclose(u_e @ k @ u_e, expected)


def test_inverted_hex_is_degenerate():
    flipped = UNIT_CUBE[[4, 5, 6, 7, 0, 1, 2, 3]]
    with pytest.raises(DegenerateGeometryError):
        Hex8().local_stiffness(flipped, Material(E=1.0, nu=0.3))
