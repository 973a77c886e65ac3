# tests/test_elements.py
"""
LINE ELEMENTS: bar, plane truss, Euler-Bernoulli beam
=====================================================

Each stiffness must be symmetric, singular with the expected number of
rigid-body modes, and reproduce the closed-form entries.
"""

import numpy as np
import pytest

from mini_fem.elements import Bar1D, Beam2D, Truss2D, element_geometry
from mini_fem.errors import ConfigurationError, DegenerateGeometryError
from mini_fem.kernel.solve import zero_energy_modes
from mini_fem.model import Material


def test_bar_stiffness_is_EA_over_L():
    mat = Material(E=210e9, A=0.01)
    k = Bar1D().local_stiffness(np.array([[0.0], [0.5]]), mat)
    EA_L = 210e9 * 0.01 / 0.5
    assert np.allclose(k, EA_L * np.array([[1, -1], [-1, 1]]))
    assert zero_energy_modes(k) == 1


def test_bar_strain_is_positive_in_tension_for_reversed_nodes():
    mat = Material(E=100.0, A=1.0)
    xy = np.array([[2.0], [0.0]])
    strain, stress = Bar1D().strain_stress(xy, mat, np.array([0.1, 0.0]))
    assert np.isclose(strain[0], 0.05)
    assert np.isclose(stress[0], 5.0)


def test_truss_stiffness_diagonal_member():
    mat = Material(E=1.0, A=1.0)
    xy = np.array([[0.0, 0.0], [3.0, 4.0]])
    L, c, s = element_geometry(xy)
    assert (L, c, s) == (5.0, 0.6, 0.8)

    k = Truss2D().local_stiffness(xy, mat)
    assert np.allclose(k, k.T)
    assert np.isclose(k[0, 0], c * c / L)
    assert np.isclose(k[0, 1], c * s / L)
    assert np.isclose(k[0, 2], -c * c / L)
    # axial stiffness only: 4 DOFs, rank 1
    assert zero_energy_modes(k) == 3


def test_truss_axial_force_sign():
    mat = Material(E=200.0, A=2.0)
    xy = np.array([[0.0, 0.0], [0.0, 10.0]])
    u_e = np.array([0.0, 0.0, 0.0, 0.5])
    assert np.isclose(Truss2D().axial_force(xy, mat, u_e), 200.0 * 2.0 * 0.05)
    assert np.isclose(Truss2D().axial_force(xy, mat, -u_e), -20.0)


def test_beam_stiffness_entries():
    E, I, L = 2e5, 4e6, 1000.0
    k = Beam2D().local_stiffness(np.array([[0.0, 0.0], [L, 0.0]]), Material(E=E, I=I))
    assert np.allclose(k, k.T)
    assert np.isclose(k[0, 0], 12 * E * I / L**3)
    assert np.isclose(k[1, 1], 4 * E * I / L)
    assert np.isclose(k[1, 3], 2 * E * I / L)
    assert np.isclose(k[0, 1], 6 * E * I / L**2)


def test_beam_rigid_modes_with_unit_properties():
    k = Beam2D().local_stiffness(np.array([[0.0, 0.0], [1.0, 0.0]]), Material(E=1.0, I=1.0))
    assert zero_energy_modes(k) == 2


def test_beam_curvature_of_pure_bending():
    # v = x^2 / 2 -> kappa = 1 everywhere
    L = 2.0
    u_e = np.array([0.0, 0.0, L**2 / 2, L])
    kappa, moment = Beam2D().strain_stress(
        np.array([[0.0, 0.0], [L, 0.0]]), Material(E=3.0, I=2.0), u_e
    )
    assert np.allclose(kappa, [1.0, 1.0])
    assert np.allclose(moment, [6.0, 6.0])


def test_zero_length_element_is_degenerate():
    xy = np.array([[1.0, 1.0], [1.0, 1.0]])
    with pytest.raises(DegenerateGeometryError):
        Truss2D().local_stiffness(xy, Material(E=1.0))
    with pytest.raises(DegenerateGeometryError):
        Bar1D().local_stiffness(np.array([[0.0], [0.0]]), Material(E=1.0))


def test_wrong_coordinate_shape():
    with pytest.raises(ConfigurationError):
        Bar1D().local_stiffness(np.array([[0.0, 0.0], [1.0, 0.0]]), Material(E=1.0))
