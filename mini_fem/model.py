# Node, Element, Material (frozen dataclasses) and the Mesh container

from dataclasses import dataclass
from typing import Tuple

import numpy as np


@dataclass(frozen=True)
class Node:
    """
    A mesh node. Coordinates beyond the mesh dimension stay at zero.
    """
    id: int
    x: float
    y: float = 0.0
    z: float = 0.0

    def coords(self, dim: int) -> Tuple[float, ...]:
        return (self.x, self.y, self.z)[:dim]


@dataclass(frozen=True)
class Element:
    """
    Element connectivity: ordered node ids. The order is the local DOF order
    expected by the element family (counter-clockwise for CST and quad).
    """
    id: int
    nodes: Tuple[int, ...]


@dataclass(frozen=True)
class Material:
    """
    Material and section constants shared by every element of a run.

    E  : Young's modulus
    nu : Poisson ratio (continuum families only)
    A  : cross-section area (bar, truss)
    t  : thickness (CST, quad)
    I  : second moment of area (beam)
    """
    E: float
    nu: float = 0.0
    A: float = 1.0
    t: float = 1.0
    I: float = 1.0


@dataclass(frozen=True)
class Mesh:
    """Nodes and elements produced by one of the generators in mesh.py."""
    dim: int
    nodes: Tuple[Node, ...]
    elements: Tuple[Element, ...]

    @property
    def n_nodes(self) -> int:
        return len(self.nodes)

    @property
    def n_elements(self) -> int:
        return len(self.elements)

    def element_coords(self, element: Element) -> np.ndarray:
        """Node coordinates of one element, shape (nodes_per_element, dim)."""
        return np.array(
            [self.nodes[n].coords(self.dim) for n in element.nodes], dtype=float
        )
