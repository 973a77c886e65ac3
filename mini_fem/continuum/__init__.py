# mini_fem/continuum - plane stress and solid elements
"""
CONTINUUM: 2D and 3D Elasticity Elements
========================================

- CST:   3-node constant-strain triangle (closed form)
- Quad4: 4-node isoparametric quadrilateral (2x2 Gauss)
- Hex8:  8-node trilinear hexahedron (2x2x2 Gauss)

All plug into the same kernel assembly as the line elements.
"""

from .constitutive import plane_stress_D, solid_D
from .elements import CST, Hex8, Quad4
from .quadrature import gauss_points

__all__ = ['CST', 'Quad4', 'Hex8', 'plane_stress_D', 'solid_D', 'gauss_points']
