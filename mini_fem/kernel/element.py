# mini_fem/kernel/element.py
"""
ELEMENT FAMILY INTERFACE
========================

Assembly and solving never look inside an element. They need, per family:

    dof_per_node        how many global indices each node owns
    nodes_per_element   length of the connectivity tuple
    local_stiffness     (n_edof x n_edof) matrix from node coordinates
    strain_stress       secondary quantities from the element's displacements

Concrete families live in mini_fem/elements.py (bar, beam, truss) and
mini_fem/continuum/elements.py (CST, quad, hex).
"""

from abc import ABC, abstractmethod
from typing import Tuple

import numpy as np

from ..errors import ConfigurationError
from ..model import Material


class ElementFamily(ABC):
    name: str = ""
    dim: int = 1
    dof_per_node: int = 1
    nodes_per_element: int = 2
    dof_labels: Tuple[str, ...] = ()
    strain_labels: Tuple[str, ...] = ()
    stress_labels: Tuple[str, ...] = ()

    @property
    def n_edof(self) -> int:
        return self.dof_per_node * self.nodes_per_element

    def check_coords(self, xy: np.ndarray) -> np.ndarray:
        xy = np.asarray(xy, dtype=float)
        if xy.shape != (self.nodes_per_element, self.dim):
            raise ConfigurationError(
                f"{self.name} element expects coordinates of shape "
                f"({self.nodes_per_element}, {self.dim}), got {xy.shape}"
            )
        return xy

    @abstractmethod
    def local_stiffness(self, xy: np.ndarray, material: Material) -> np.ndarray:
        """Element stiffness in global orientation, shape (n_edof, n_edof)."""

    @abstractmethod
    def strain_stress(
        self, xy: np.ndarray, material: Material, u_e: np.ndarray
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Strain and stress vectors recovered from element displacements."""

    def internal_forces(
        self, xy: np.ndarray, material: Material, u_e: np.ndarray
    ) -> np.ndarray:
        """Nodal forces the element exerts for displacements u_e (k @ u_e)."""
        return self.local_stiffness(xy, material) @ np.asarray(u_e, dtype=float)

    def __repr__(self):
        return f"{self.__class__.__name__}()"
