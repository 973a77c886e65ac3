# mini_fem/continuum/elements.py
"""
CONTINUUM ELEMENTS: CST, Isoparametric Quad, Trilinear Hex
==========================================================

All three share the same recipe

    ke = integral( B^T D B ) over the element volume

and differ only in how B and the volume measure are obtained:

    CST     B constant, volume = A * t, no quadrature needed
    Quad4   B(xi, eta) through the 2x2 Jacobian, 2x2 Gauss, * t
    Hex8    B(xi, eta, zeta) through the 3x3 Jacobian, 2x2x2 Gauss

Node ordering (counter-clockwise, natural coordinates in brackets):

    Quad4                       Hex8 (bottom face z-, top face z+)
    3 (-1,+1) --- 2 (+1,+1)     7 ----- 6
    |                 |         |\\      |\\
    |                 |         | 4 ----- 5
    0 (-1,-1) --- 1 (+1,-1)     3 |---- 2 |
                                 \\|      \\|
                                  0 ----- 1

A clockwise quad, or any element whose Jacobian determinant is not
positive at a Gauss point, raises DegenerateGeometryError.
"""

from typing import Tuple

import numpy as np

from .constitutive import plane_stress_D, solid_D
from .quadrature import gauss_points
from ..errors import DegenerateGeometryError
from ..kernel.element import ElementFamily
from ..model import Material

AREA_TOL = 1e-12
DETJ_TOL = 1e-12

QUAD_NATURAL = np.array([
    [-1.0, -1.0],
    [ 1.0, -1.0],
    [ 1.0,  1.0],
    [-1.0,  1.0],
])

HEX_NATURAL = np.array([
    [-1.0, -1.0, -1.0],
    [ 1.0, -1.0, -1.0],
    [ 1.0,  1.0, -1.0],
    [-1.0,  1.0, -1.0],
    [-1.0, -1.0,  1.0],
    [ 1.0, -1.0,  1.0],
    [ 1.0,  1.0,  1.0],
    [-1.0,  1.0,  1.0],
])


def triangle_signed_area(xy: np.ndarray) -> float:
    """Positive when the three nodes are counter-clockwise."""
    (x1, y1), (x2, y2), (x3, y3) = xy
    return 0.5 * ((x2 - x1) * (y3 - y1) - (x3 - x1) * (y2 - y1))


def _characteristic_size(xy: np.ndarray) -> float:
    span = np.ptp(xy, axis=0)
    return float(np.max(span)) if span.size else 0.0


def cst_B(xy: np.ndarray) -> Tuple[np.ndarray, float]:
    """
    Strain-displacement matrix of a CST and its signed area.

    b_i = y_j - y_k,  c_i = x_k - x_j  (i, j, k cyclic)

        B = 1/(2A) [[b1, 0,  b2, 0,  b3, 0 ],
                    [0,  c1, 0,  c2, 0,  c3],
                    [c1, b1, c2, b2, c3, b3]]
    """
    A = triangle_signed_area(xy)
    h = _characteristic_size(xy)
    if A <= AREA_TOL * max(h * h, 1.0e-300):
        raise DegenerateGeometryError(
            f"Triangle area {A:.3e} is not positive (collinear or clockwise nodes)"
        )
    (x1, y1), (x2, y2), (x3, y3) = xy
    b = (y2 - y3, y3 - y1, y1 - y2)
    c = (x3 - x2, x1 - x3, x2 - x1)

    B = np.zeros((3, 6))
    for i in range(3):
        B[0, 2 * i] = b[i]
        B[1, 2 * i + 1] = c[i]
        B[2, 2 * i] = c[i]
        B[2, 2 * i + 1] = b[i]
    return B / (2.0 * A), A


def quad_shape_derivatives(xi: float, eta: float) -> np.ndarray:
    """dN/d(xi, eta) of the bilinear quad, shape (2, 4)."""
    return 0.25 * np.array([
        QUAD_NATURAL[:, 0] * (1.0 + QUAD_NATURAL[:, 1] * eta),
        QUAD_NATURAL[:, 1] * (1.0 + QUAD_NATURAL[:, 0] * xi),
    ])


def hex_shape_derivatives(xi: float, eta: float, zeta: float) -> np.ndarray:
    """dN/d(xi, eta, zeta) of the trilinear hex, shape (3, 8)."""
    a, b, c = HEX_NATURAL[:, 0], HEX_NATURAL[:, 1], HEX_NATURAL[:, 2]
    return 0.125 * np.array([
        a * (1.0 + b * eta) * (1.0 + c * zeta),
        b * (1.0 + a * xi) * (1.0 + c * zeta),
        c * (1.0 + a * xi) * (1.0 + b * eta),
    ])


def physical_gradients(dN_nat: np.ndarray, xy: np.ndarray) -> Tuple[np.ndarray, float]:
    """
    Map natural shape-function derivatives to x, y(, z).

        J = dN_nat @ xy          (J[i, j] = d x_j / d xi_i)
        dN_phys = J^-1 @ dN_nat

    Raises DegenerateGeometryError when det(J) is not positive.
    """
    J = dN_nat @ xy
    detJ = float(np.linalg.det(J))
    scale = _characteristic_size(xy) ** xy.shape[1]
    if detJ <= DETJ_TOL * max(scale, 1.0e-300):
        raise DegenerateGeometryError(
            f"Jacobian determinant {detJ:.3e} is not positive "
            f"(degenerate or inverted element)"
        )
    return np.linalg.solve(J, dN_nat), detJ


def plane_B(dN: np.ndarray) -> np.ndarray:
    """3 x 2n strain-displacement matrix from physical gradients (2, n)."""
    n = dN.shape[1]
    B = np.zeros((3, 2 * n))
    B[0, 0::2] = dN[0]
    B[1, 1::2] = dN[1]
    B[2, 0::2] = dN[1]
    B[2, 1::2] = dN[0]
    return B


def solid_B(dN: np.ndarray) -> np.ndarray:
    """6 x 3n strain-displacement matrix, Voigt order xx, yy, zz, xy, yz, zx."""
    n = dN.shape[1]
    B = np.zeros((6, 3 * n))
    B[0, 0::3] = dN[0]
    B[1, 1::3] = dN[1]
    B[2, 2::3] = dN[2]
    B[3, 0::3] = dN[1]
    B[3, 1::3] = dN[0]
    B[4, 1::3] = dN[2]
    B[4, 2::3] = dN[1]
    B[5, 0::3] = dN[2]
    B[5, 2::3] = dN[0]
    return B


class CST(ElementFamily):
    """Constant-strain triangle, plane stress, 2 DOF per node."""
    name = "cst"
    dim = 2
    dof_per_node = 2
    nodes_per_element = 3
    dof_labels = ("ux", "uy")
    strain_labels = ("eps_xx", "eps_yy", "gamma_xy")
    stress_labels = ("sigma_xx", "sigma_yy", "tau_xy")

    def local_stiffness(self, xy, material: Material) -> np.ndarray:
        xy = self.check_coords(xy)
        B, A = cst_B(xy)
        D = plane_stress_D(material.E, material.nu)
        return B.T @ D @ B * A * material.t

    def strain_stress(self, xy, material: Material, u_e):
        xy = self.check_coords(xy)
        B, _ = cst_B(xy)
        strain = B @ np.asarray(u_e, dtype=float)
        return strain, plane_stress_D(material.E, material.nu) @ strain


class Quad4(ElementFamily):
    """4-node isoparametric quadrilateral, plane stress, 2x2 Gauss."""
    name = "quad"
    dim = 2
    dof_per_node = 2
    nodes_per_element = 4
    dof_labels = ("ux", "uy")
    strain_labels = ("eps_xx", "eps_yy", "gamma_xy")
    stress_labels = ("sigma_xx", "sigma_yy", "tau_xy")

    def B_matrix(self, xy: np.ndarray, xi: float, eta: float) -> Tuple[np.ndarray, float]:
        dN, detJ = physical_gradients(quad_shape_derivatives(xi, eta), xy)
        return plane_B(dN), detJ

    def local_stiffness(self, xy, material: Material) -> np.ndarray:
        xy = self.check_coords(xy)
        D = plane_stress_D(material.E, material.nu)
        ke = np.zeros((8, 8))
        for (xi, eta), w in gauss_points(2):
            B, detJ = self.B_matrix(xy, xi, eta)
            ke += B.T @ D @ B * detJ * material.t * w
        return ke

    def strain_stress(self, xy, material: Material, u_e, xi: float = 0.0, eta: float = 0.0):
        """Strain and stress at (xi, eta); the centroid by default."""
        xy = self.check_coords(xy)
        B, _ = self.B_matrix(xy, xi, eta)
        strain = B @ np.asarray(u_e, dtype=float)
        return strain, plane_stress_D(material.E, material.nu) @ strain


class Hex8(ElementFamily):
    """8-node trilinear hexahedron, 3D elasticity, 2x2x2 Gauss."""
    name = "hex"
    dim = 3
    dof_per_node = 3
    nodes_per_element = 8
    dof_labels = ("ux", "uy", "uz")
    strain_labels = ("eps_xx", "eps_yy", "eps_zz", "gamma_xy", "gamma_yz", "gamma_zx")
    stress_labels = ("sigma_xx", "sigma_yy", "sigma_zz", "tau_xy", "tau_yz", "tau_zx")

    def B_matrix(self, xyz: np.ndarray, xi: float, eta: float, zeta: float):
        dN, detJ = physical_gradients(hex_shape_derivatives(xi, eta, zeta), xyz)
        return solid_B(dN), detJ

    def local_stiffness(self, xy, material: Material) -> np.ndarray:
        xyz = self.check_coords(xy)
        D = solid_D(material.E, material.nu)
        ke = np.zeros((24, 24))
        for (xi, eta, zeta), w in gauss_points(3):
            B, detJ = self.B_matrix(xyz, xi, eta, zeta)
            ke += B.T @ D @ B * detJ * w
        return ke

    def strain_stress(self, xy, material: Material, u_e,
                      xi: float = 0.0, eta: float = 0.0, zeta: float = 0.0):
        xyz = self.check_coords(xy)
        B, _ = self.B_matrix(xyz, xi, eta, zeta)
        strain = B @ np.asarray(u_e, dtype=float)
        return strain, solid_D(material.E, material.nu) @ strain
