"""Tests for normals, areas and the other geometric traits."""
import math

import numpy as np
import pytest

import halfmesh.traits as traits
from halfmesh.hds import Mesh


class TestFaceNormal:

    def test_planar_triangle(self, triangle):
        np.testing.assert_allclose(triangle.face_normal(0), [0, 0, 1],
                                   atol=1e-10)

    def test_orientation(self):
        mesh = Mesh([[0, 0, 0], [1, 0, 0], [0, 1, 0]], [[0, 2, 1]])
        np.testing.assert_allclose(mesh.face_normal(0), [0, 0, -1],
                                   atol=1e-10)

    def test_cube_faces_point_outwards(self, cube):
        expected = [[0, 0, -1], [0, 0, 1], [0, -1, 0],
                    [1, 0, 0], [0, 1, 0], [-1, 0, 0]]
        for f, n in zip(range(6), expected):
            np.testing.assert_allclose(cube.face_normal(f), n, atol=1e-10)

    def test_first_corner_determines_normal(self):
        # Non-planar quadrilateral: only corners 0, 1, 2 matter.
        mesh = Mesh([[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 5]],
                    [[0, 1, 2, 3]])
        np.testing.assert_allclose(mesh.face_normal(0), [0, 0, 1],
                                   atol=1e-10)

    def test_collinear_corner(self):
        mesh = Mesh([[0, 0, 0], [1, 0, 0], [2, 0, 0]], [[0, 1, 2]])
        assert mesh.face_count == 1
        assert mesh.face_normal(0) is None

    def test_unknown_face(self, triangle):
        assert triangle.face_normal(3) is None

    def test_face_normals(self, two_triangles):
        normals = traits.face_normals(two_triangles)
        assert sorted(normals) == [0, 1]
        for n in normals.values():
            np.testing.assert_allclose(n, [0, 0, 1], atol=1e-10)


class TestFaceArea:

    def test_triangle(self, triangle):
        assert triangle.face_area(0) == pytest.approx(0.5, abs=1e-10)

    def test_rectangle(self):
        mesh = Mesh([[0, 0, 0], [2, 0, 0], [2, 1, 0], [0, 1, 0]],
                    [[0, 1, 2, 3]])
        assert mesh.face_area(0) == pytest.approx(2.0, abs=1e-10)

    def test_fan_triangulation_of_concave_polygon(self):
        # L-shaped hexagon of area 3. The fan around corner 0 covers part
        # of the notch twice.
        points = [[0, 0, 0], [2, 0, 0], [2, 2, 0],
                  [1, 2, 0], [1, 1, 0], [0, 1, 0]]
        mesh = Mesh(points, [list(range(6))])
        assert mesh.face_area(0) == pytest.approx(4.0, abs=1e-10)

    def test_degenerate(self):
        mesh = Mesh([[0, 0, 0], [1, 0, 0], [2, 0, 0]], [[0, 1, 2]])
        assert mesh.face_area(0) == 0.0

    def test_unknown_face(self, triangle):
        assert triangle.face_area(1) is None

    def test_total_area(self, cube):
        assert traits.area(cube) == pytest.approx(6.0)

    def test_area_tracks_positions(self, triangle):
        triangle.set_position(1, [2.0, 0.0, 0.0])
        assert triangle.face_area(0) == pytest.approx(1.0)


class TestVertexNormal:

    def test_shared_edge(self, two_triangles):
        for v in (1, 2):
            np.testing.assert_allclose(two_triangles.vertex_normal(v),
                                       [0, 0, 1], atol=1e-10)

    def test_cube_corner(self, cube):
        np.testing.assert_allclose(cube.vertex_normal(6),
                                   np.ones(3) / math.sqrt(3), atol=1e-10)

    def test_area_weighting(self):
        # Triangle of area 4.5 facing +z, triangle of area 1.5 facing -y.
        points = [[0, 0, 0], [3, 0, 0], [0, 3, 0], [0, 0, -1]]
        mesh = Mesh(points, [[0, 1, 2], [0, 3, 1]])
        n = mesh.vertex_normal(0)
        expected = 4.5 * np.array([0, 0, 1]) + 1.5 * np.array([0, -1, 0])
        np.testing.assert_allclose(n, expected / np.linalg.norm(expected),
                                   atol=1e-10)

    def test_isolated_and_unknown(self, triangle):
        v = triangle.add_vertex([1, 1, 1])
        assert triangle.vertex_normal(v) is None
        assert triangle.vertex_normal(99) is None

    def test_zero_area(self):
        mesh = Mesh([[0, 0, 0], [1, 0, 0], [2, 0, 0]], [[0, 1, 2]])
        assert mesh.vertex_normal(0) is None

    def test_cancelling_normals(self):
        mesh = Mesh([[0, 0, 0], [1, 0, 0], [0, 1, 0]], [[0, 1, 2]])
        mesh.add_vertex([1, 1, 0])
        mesh.add_face([0, 2, 3])
        mesh.set_position(3, [1, 0, 0])
        # Second face now mirrors the first one with opposite winding.
        assert mesh.vertex_normal(0) is None

    def test_vertex_normals(self, cube):
        normals = traits.vertex_normals(cube)
        for v in cube.vertices:
            np.testing.assert_allclose(normals[v], cube.vertex_normal(v),
                                       atol=1e-12)


class TestOtherTraits:

    def test_face_centroid(self, cube):
        np.testing.assert_allclose(traits.face_centroid(cube, 1),
                                   [0.5, 0.5, 1.0])
        assert traits.face_centroid(cube, 6) is None

    def test_edge_length(self, two_triangles):
        assert traits.edge_length(two_triangles, 1, 2) == \
            pytest.approx(math.sqrt(2))
        assert traits.edge_length(two_triangles, 0, 3) is None

    def test_bounds(self, cube):
        lo, hi = traits.bounds(cube.points)
        np.testing.assert_allclose(lo, [0, 0, 0])
        np.testing.assert_allclose(hi, [1, 1, 1])
