import pytest

from halfmesh.hds import Mesh


CUBE_POINTS = [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [1.0, 1.0, 0.0],
               [0.0, 1.0, 0.0], [0.0, 0.0, 1.0], [1.0, 0.0, 1.0],
               [1.0, 1.0, 1.0], [0.0, 1.0, 1.0]]

# Outward facing quadrilaterals: bottom, top, front, right, back, left.
CUBE_FACES = [[0, 3, 2, 1], [4, 5, 6, 7], [0, 1, 5, 4],
              [1, 2, 6, 5], [2, 3, 7, 6], [3, 0, 4, 7]]


@pytest.fixture
def triangle():
    mesh = Mesh()
    a = mesh.add_vertex([0.0, 0.0, 0.0])
    b = mesh.add_vertex([1.0, 0.0, 0.0])
    c = mesh.add_vertex([0.0, 1.0, 0.0])
    mesh.add_face([a, b, c])
    return mesh


@pytest.fixture
def two_triangles():
    """Unit square split along the diagonal from (1, 0) to (0, 1)."""
    points = [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0],
              [0.0, 1.0, 0.0], [1.0, 1.0, 0.0]]
    return Mesh(points, [[0, 1, 2], [1, 3, 2]])


@pytest.fixture
def cube():
    return Mesh(CUBE_POINTS, CUBE_FACES, name='cube')


@pytest.fixture
def cube_soup():
    return [[CUBE_POINTS[v] for v in face] for face in CUBE_FACES]
