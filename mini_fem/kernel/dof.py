# mini_fem/kernel/dof.py
"""
DOF MANAGER: Family-Agnostic Degree of Freedom Indexing
=======================================================

PURPOSE:
--------
Maps (node_id, component) to a global DOF index. This is the only thing
that changes between element families:

    Axial bar:              1 DOF/node (u)
    Beam:                   2 DOF/node (v, theta)
    Truss / CST / Quad:     2 DOF/node (ux, uy)
    Hexahedron:             3 DOF/node (ux, uy, uz)

    global = node_id * dof_per_node + component

Every node owns exactly dof_per_node contiguous indices, so the mapping is
total and deterministic. Indices outside the valid range are rejected with
OutOfRangeError instead of silently wrapping.

USAGE:
------
    dof = DOFManager(dof_per_node=2)
    dof.idx(node_id=2, local_dof=1)     # -> 5
    dof.element_dof_map([0, 3, 4])     # -> [0, 1, 6, 7, 8, 9]
"""

from dataclasses import dataclass
from typing import List, Sequence

from ..errors import ConfigurationError, OutOfRangeError


@dataclass(frozen=True)
class DOFManager:
    """
    Degree-of-freedom indexing for one element family.

    Attributes:
    -----------
    dof_per_node : int
        Number of DOFs per node (1, 2 or 3 for the families in this package)

    Examples:
    ---------
    >>> dof = DOFManager(dof_per_node=3)
    >>> dof.idx(1, 0)
    3
    >>> dof.ndof(4)
    12
    """
    dof_per_node: int

    def __post_init__(self):
        if self.dof_per_node < 1:
            raise ConfigurationError(
                f"dof_per_node must be >= 1, got {self.dof_per_node}"
            )

    def idx(self, node_id: int, local_dof: int) -> int:
        """
        Global DOF index of a node's local component.

        Raises:
        -------
        OutOfRangeError
            If node_id is negative or local_dof is not in [0, dof_per_node)
        """
        if node_id < 0:
            raise OutOfRangeError(f"Node id must be >= 0, got {node_id}")
        if not 0 <= local_dof < self.dof_per_node:
            raise OutOfRangeError(
                f"Local DOF {local_dof} outside [0, {self.dof_per_node})"
            )
        return self.dof_per_node * node_id + local_dof

    def ndof(self, n_nodes: int) -> int:
        """Total DOFs (size of K) for n_nodes nodes."""
        return self.dof_per_node * n_nodes

    def node_dofs(self, node_id: int) -> List[int]:
        """
        All global DOF indices of a single node.

        >>> DOFManager(dof_per_node=2).node_dofs(3)
        [6, 7]
        """
        base = self.idx(node_id, 0)
        return list(range(base, base + self.dof_per_node))

    def element_dof_map(self, node_ids: Sequence[int]) -> List[int]:
        """
        Flattened DOF map for an element, one run per node, in local order,
        so that ke[a, b] belongs at K[map[a], map[b]].

        >>> DOFManager(dof_per_node=2).element_dof_map([2, 5])
        [4, 5, 10, 11]
        """
        result = []
        for node_id in node_ids:
            result.extend(self.node_dofs(node_id))
        return result

    def node_of(self, dof: int) -> int:
        """Node owning a global DOF index."""
        return dof // self.dof_per_node

    def component_of(self, dof: int) -> int:
        """Local component of a global DOF index."""
        return dof % self.dof_per_node

    @staticmethod
    def is_valid(dof: int, ndof: int) -> bool:
        return 0 <= dof < ndof

    @staticmethod
    def check(dof: int, ndof: int) -> int:
        """Return dof unchanged, or raise OutOfRangeError."""
        if not 0 <= dof < ndof:
            raise OutOfRangeError(f"DOF {dof} outside [0, {ndof})")
        return dof
