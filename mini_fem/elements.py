# Line element families: axial bar, Euler-Bernoulli beam, plane truss

import numpy as np
from typing import Tuple

from .errors import DegenerateGeometryError
from .kernel.element import ElementFamily
from .model import Material


def element_geometry(xy: np.ndarray) -> Tuple[float, float, float]:
    """
    Length and direction cosines of a two-node element.

    xy has one row per node and 1 or 2 columns; a 1D element has c = 1
    or -1 and s = 0.
    """
    d = xy[1] - xy[0]
    dx = float(d[0])
    dy = float(d[1]) if d.shape[0] > 1 else 0.0
    L = float(np.hypot(dx, dy))
    if L <= 0.0:
        raise DegenerateGeometryError(
            f"Element has zero length (both nodes at {tuple(xy[0])})"
        )
    return L, dx / L, dy / L


def beam_local_stiffness(E: float, I: float, L: float) -> np.ndarray:
    """
    Euler-Bernoulli beam stiffness.
    DOF order: [v_i, theta_i, v_j, theta_j]
    """
    EI_L3 = E * I / L**3
    L2 = L * L
    k = EI_L3 * np.array([
        [ 12.0,   6*L,  -12.0,   6*L],
        [  6*L,  4*L2,   -6*L,  2*L2],
        [-12.0,  -6*L,   12.0,  -6*L],
        [  6*L,  2*L2,   -6*L,  4*L2],
    ], dtype=float)
    return k


def beam_curvature_matrix(L: float) -> np.ndarray:
    """
    Second derivatives of the Hermite shape functions at both element ends.
    Row 0 gives the curvature at node i, row 1 at node j.
    """
    return np.array([
        [-6.0 / L**2, -4.0 / L,  6.0 / L**2, -2.0 / L],
        [ 6.0 / L**2,  2.0 / L, -6.0 / L**2,  4.0 / L],
    ], dtype=float)


class Bar1D(ElementFamily):
    """Two-node axial bar on the x axis, 1 DOF per node (u)."""
    name = "bar"
    dim = 1
    dof_per_node = 1
    nodes_per_element = 2
    dof_labels = ("u",)
    strain_labels = ("eps",)
    stress_labels = ("sigma",)

    def local_stiffness(self, xy, material: Material) -> np.ndarray:
        xy = self.check_coords(xy)
        L, _, _ = element_geometry(xy)
        k = material.E * material.A / L
        return k * np.array([[1.0, -1.0], [-1.0, 1.0]])

    def strain_stress(self, xy, material: Material, u_e):
        xy = self.check_coords(xy)
        L, c, _ = element_geometry(xy)
        # signed length keeps strain positive in tension for reversed nodes
        strain = (u_e[1] - u_e[0]) / (c * L)
        return np.array([strain]), np.array([material.E * strain])

    def axial_force(self, xy, material: Material, u_e) -> float:
        _, stress = self.strain_stress(xy, material, u_e)
        return float(stress[0] * material.A)


class Truss2D(ElementFamily):
    """
    Pin-jointed plane truss member, 2 DOF per node (ux, uy).

        ke = (EA/L) * g g^T,   g = [c, s, -c, -s]
    """
    name = "truss"
    dim = 2
    dof_per_node = 2
    nodes_per_element = 2
    dof_labels = ("ux", "uy")
    strain_labels = ("eps",)
    stress_labels = ("sigma",)

    def local_stiffness(self, xy, material: Material) -> np.ndarray:
        xy = self.check_coords(xy)
        L, c, s = element_geometry(xy)
        g = np.array([c, s, -c, -s])
        return (material.E * material.A / L) * np.outer(g, g)

    def strain_stress(self, xy, material: Material, u_e):
        xy = self.check_coords(xy)
        L, c, s = element_geometry(xy)
        u_e = np.asarray(u_e, dtype=float)
        elongation = c * (u_e[2] - u_e[0]) + s * (u_e[3] - u_e[1])
        strain = elongation / L
        return np.array([strain]), np.array([material.E * strain])

    def axial_force(self, xy, material: Material, u_e) -> float:
        """Positive = tension."""
        _, stress = self.strain_stress(xy, material, u_e)
        return float(stress[0] * material.A)


class Beam2D(ElementFamily):
    """
    Euler-Bernoulli beam along x, 2 DOF per node (v, theta).

    Generalized strain is the curvature at both ends; generalized stress is
    the bending moment EI * kappa at those ends.
    """
    name = "beam"
    dim = 2
    dof_per_node = 2
    nodes_per_element = 2
    dof_labels = ("v", "theta")
    strain_labels = ("kappa_i", "kappa_j")
    stress_labels = ("M_i", "M_j")

    def local_stiffness(self, xy, material: Material) -> np.ndarray:
        xy = self.check_coords(xy)
        L, _, _ = element_geometry(xy)
        return beam_local_stiffness(material.E, material.I, L)

    def strain_stress(self, xy, material: Material, u_e):
        xy = self.check_coords(xy)
        L, _, _ = element_geometry(xy)
        kappa = beam_curvature_matrix(L) @ np.asarray(u_e, dtype=float)
        return kappa, material.E * material.I * kappa
