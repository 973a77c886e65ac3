# mini_fem/mesh.py
"""
MESH GENERATORS: Structured Meshes for Every Element Family
===========================================================

Each generator returns a Mesh whose node order matches the global DOF
numbering (index order for lines, row-major for grids) and whose element
tuples follow the local ordering the family's stiffness expects:

    line        bar, beam       (i, i+1)
    ladder      truss           zig-zag nodes, triangulating members
    tri grid    cst             (n0, n1, n3), (n0, n3, n2) per cell, CCW
    quad grid   quad            (n0, n1, n3, n2), CCW
    hex grid    hex             bottom face CCW, then top face

Grid cell corners are named

    n2 --- n3
    |       |
    n0 --- n1

so the diagonal split always runs bottom-left to top-right.

Invalid parameters (fewer than one division, non-positive lengths) raise
ConfigurationError before any node is created.
"""

from typing import List, Tuple

from .errors import ConfigurationError
from .model import Element, Mesh, Node


def _require_count(name: str, value: int, minimum: int = 1) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")
    return value


def _require_length(name: str, value: float) -> float:
    if not value > 0.0:
        raise ConfigurationError(f"{name} must be positive, got {value!r}")
    return float(value)


def line_mesh(n_elements: int, length: float = 1.0) -> Mesh:
    """
    Equal-length 1D elements along x.

    >>> mesh = line_mesh(2, length=1.0)
    >>> [n.x for n in mesh.nodes]
    [0.0, 0.5, 1.0]
    """
    _require_count("n_elements", n_elements)
    length = _require_length("length", length)

    dx = length / n_elements
    nodes = tuple(Node(i, i * dx) for i in range(n_elements + 1))
    elements = tuple(Element(i, (i, i + 1)) for i in range(n_elements))
    return Mesh(dim=1, nodes=nodes, elements=elements)


def beam_mesh(n_nodes: int, n_elements: int = None, spacing: float = 1000.0) -> Mesh:
    """
    Beam nodes on the x axis, connected by the first n_elements segments.

    When n_elements < n_nodes - 1 the trailing nodes are left without any
    element; such a mesh assembles fine but cannot be solved.
    """
    _require_count("n_nodes", n_nodes, minimum=2)
    if n_elements is None:
        n_elements = n_nodes - 1
    _require_count("n_elements", n_elements)
    if n_elements > n_nodes - 1:
        raise ConfigurationError(
            f"A beam with {n_nodes} nodes has at most {n_nodes - 1} elements, "
            f"got {n_elements}"
        )
    spacing = _require_length("spacing", spacing)

    nodes = tuple(Node(i, i * spacing, 0.0) for i in range(n_nodes))
    elements = tuple(Element(i, (i, i + 1)) for i in range(n_elements))
    return Mesh(dim=2, nodes=nodes, elements=elements)


def ladder_members(n_nodes: int) -> List[Tuple[int, int]]:
    """
    Member list of a triangulated zig-zag ladder, in build order:
    (0,1), then for each new node k the pair (k-2, k), (k-1, k).
    """
    members = [(0, 1)]
    for k in range(2, n_nodes):
        members.append((k - 2, k))
        members.append((k - 1, k))
    return members


def truss_mesh(
    n_nodes: int,
    n_elements: int = None,
    width: float = 40.0,
    bay: float = 40.0,
) -> Mesh:
    """
    Zig-zag plane truss: node i sits at x = 0 (even i) or x = width (odd i),
    y = (i // 2) * bay. The first n_elements members of ladder_members()
    are kept; the full ladder (2*n_nodes - 3 members) is statically
    determinate once nodes 0 and 1 are pinned.
    """
    _require_count("n_nodes", n_nodes, minimum=3)
    members = ladder_members(n_nodes)
    if n_elements is None:
        n_elements = len(members)
    _require_count("n_elements", n_elements)
    if n_elements > len(members):
        raise ConfigurationError(
            f"A {n_nodes}-node ladder truss has at most {len(members)} members, "
            f"got {n_elements}"
        )
    width = _require_length("width", width)
    bay = _require_length("bay", bay)

    nodes = tuple(
        Node(i, 0.0 if i % 2 == 0 else width, (i // 2) * bay)
        for i in range(n_nodes)
    )
    elements = tuple(Element(e, members[e]) for e in range(n_elements))
    return Mesh(dim=2, nodes=nodes, elements=elements)


def _grid_nodes_2d(nx: int, ny: int, width: float, height: float) -> Tuple[Node, ...]:
    dx = width / nx
    dy = height / ny
    nodes = []
    for j in range(ny + 1):
        for i in range(nx + 1):
            nodes.append(Node(j * (nx + 1) + i, i * dx, j * dy))
    return tuple(nodes)


def _cell_corners(i: int, j: int, nx: int) -> Tuple[int, int, int, int]:
    n0 = j * (nx + 1) + i
    n1 = n0 + 1
    n2 = n0 + nx + 1
    n3 = n2 + 1
    return n0, n1, n2, n3


def tri_grid_mesh(nx: int, ny: int, width: float = 400.0, height: float = 400.0) -> Mesh:
    """Structured grid with every cell split into two CCW triangles."""
    _require_count("nx", nx)
    _require_count("ny", ny)
    width = _require_length("width", width)
    height = _require_length("height", height)

    nodes = _grid_nodes_2d(nx, ny, width, height)
    elements = []
    for j in range(ny):
        for i in range(nx):
            n0, n1, n2, n3 = _cell_corners(i, j, nx)
            elements.append(Element(len(elements), (n0, n1, n3)))
            elements.append(Element(len(elements), (n0, n3, n2)))
    return Mesh(dim=2, nodes=nodes, elements=tuple(elements))


def quad_grid_mesh(nx: int, ny: int, width: float = 60.0, height: float = 30.0) -> Mesh:
    """Structured grid of CCW 4-node quadrilaterals."""
    _require_count("nx", nx)
    _require_count("ny", ny)
    width = _require_length("width", width)
    height = _require_length("height", height)

    nodes = _grid_nodes_2d(nx, ny, width, height)
    elements = []
    for j in range(ny):
        for i in range(nx):
            n0, n1, n2, n3 = _cell_corners(i, j, nx)
            elements.append(Element(len(elements), (n0, n1, n3, n2)))
    return Mesh(dim=2, nodes=nodes, elements=tuple(elements))


def hex_grid_mesh(
    nx: int,
    ny: int,
    nz: int,
    width: float = 1.0,
    depth: float = 1.0,
    height: float = 1.0,
) -> Mesh:
    """
    Structured brick grid. Nodes run fastest in x, then y, then z; each
    element lists its bottom face counter-clockwise (seen from +z) followed
    by the matching top face.
    """
    _require_count("nx", nx)
    _require_count("ny", ny)
    _require_count("nz", nz)
    width = _require_length("width", width)
    depth = _require_length("depth", depth)
    height = _require_length("height", height)

    sx, sy = nx + 1, ny + 1
    dx, dy, dz = width / nx, depth / ny, height / nz

    nodes = []
    for k in range(nz + 1):
        for j in range(ny + 1):
            for i in range(nx + 1):
                nodes.append(Node(k * sx * sy + j * sx + i, i * dx, j * dy, k * dz))

    layer = sx * sy
    elements = []
    for k in range(nz):
        for j in range(ny):
            for i in range(nx):
                n0 = k * layer + j * sx + i
                bottom = (n0, n0 + 1, n0 + sx + 1, n0 + sx)
                top = tuple(n + layer for n in bottom)
                elements.append(Element(len(elements), bottom + top))
    return Mesh(dim=3, nodes=tuple(nodes), elements=tuple(elements))
