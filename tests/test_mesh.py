import numpy as np
import pytest

from mini_fem.continuum.elements import triangle_signed_area
from mini_fem.errors import ConfigurationError
from mini_fem.mesh import (
    beam_mesh,
    hex_grid_mesh,
    ladder_members,
    line_mesh,
    quad_grid_mesh,
    tri_grid_mesh,
    truss_mesh,
)


def test_line_mesh_nodes_and_connectivity():
    mesh = line_mesh(4, length=2.0)
    assert mesh.dim == 1
    assert mesh.n_nodes == 5
    assert [n.x for n in mesh.nodes] == [0.0, 0.5, 1.0, 1.5, 2.0]
    assert [e.nodes for e in mesh.elements] == [(0, 1), (1, 2), (2, 3), (3, 4)]


def test_beam_mesh_may_leave_trailing_nodes_unconnected():
    mesh = beam_mesh(4, n_elements=2, spacing=1000.0)
    assert mesh.n_nodes == 4
    assert mesh.n_elements == 2
    used = {n for e in mesh.elements for n in e.nodes}
    assert 3 not in used


def test_beam_mesh_rejects_too_many_elements():
    with pytest.raises(ConfigurationError):
        beam_mesh(3, n_elements=3)


def test_ladder_truss_is_triangulated():
    assert ladder_members(4) == [(0, 1), (0, 2), (1, 2), (1, 3), (2, 3)]
    mesh = truss_mesh(6)
    assert mesh.n_elements == 2 * 6 - 3
    assert (mesh.nodes[3].x, mesh.nodes[3].y) == (40.0, 40.0)


def test_tri_grid_triangles_are_counter_clockwise():
    mesh = tri_grid_mesh(3, 2, width=300.0, height=200.0)
    assert mesh.n_nodes == 4 * 3
    assert mesh.n_elements == 2 * 3 * 2
    areas = [triangle_signed_area(mesh.element_coords(e)) for e in mesh.elements]
    assert all(a > 0 for a in areas)
    assert np.isclose(sum(areas), 300.0 * 200.0)


def test_quad_grid_connectivity():
    mesh = quad_grid_mesh(2, 1)
    # n0, n1, n3, n2 of the first cell
    assert mesh.elements[0].nodes == (0, 1, 4, 3)
    assert mesh.elements[1].nodes == (1, 2, 5, 4)


def test_hex_grid_bottom_face_then_top_face():
    mesh = hex_grid_mesh(1, 1, 1)
    assert mesh.dim == 3
    assert mesh.n_nodes == 8
    assert mesh.elements[0].nodes == (0, 1, 3, 2, 4, 5, 7, 6)
    xyz = mesh.element_coords(mesh.elements[0])
    assert np.allclose(xyz[:4, 2], 0.0)
    assert np.allclose(xyz[4:, 2], 1.0)


@pytest.mark.parametrize("build", [
    lambda: line_mesh(0),
    lambda: line_mesh(2, length=0.0),
    lambda: tri_grid_mesh(0, 1),
    lambda: quad_grid_mesh(1, 1, width=-1.0),
    lambda: hex_grid_mesh(1, 0, 1),
    lambda: truss_mesh(2),
])
def test_invalid_mesh_parameters(build):
    with pytest.raises(ConfigurationError):
        build()
