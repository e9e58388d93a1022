"""
Tests for split_edge and split_face.
"""

import pytest

from planemesh.core.exceptions import StaleHandleError
from planemesh.core.geometry import Point2
from planemesh.core.kernel import orientation


def assert_counter_clockwise(mesh):
    for face in mesh.faces():
        a, b, c = (mesh.position(n) for n in mesh.face_nodes(face))
        assert orientation(a, b, c) > 0


def centroid(mesh, face):
    points = [mesh.position(n) for n in mesh.face_nodes(face)]
    return Point2(sum(p.x for p in points) / 3, sum(p.y for p in points) / 3)


@pytest.mark.unit
class TestSplitFace:
    """Tests for split_face."""

    def test_one_triangle_becomes_three(self, triangle, assert_valid):
        mesh = triangle.mesh
        node = mesh.split_face(triangle.face, (0.25, 0.25))

        assert mesh.number_of_nodes() == 4
        assert mesh.number_of_edges() == 6
        assert mesh.number_of_faces() == 3
        assert mesh.position(node) == Point2(0.25, 0.25)
        assert mesh.degree(node) == 3
        assert not mesh.is_boundary_node(node)
        assert_counter_clockwise(mesh)
        assert_valid(mesh)

    def test_each_new_face_keeps_one_old_edge(self, triangle):
        mesh = triangle.mesh
        node = mesh.split_face(triangle.face, (0.2, 0.3))

        for old in (triangle.ab, triangle.bc, triangle.ca):
            face = mesh.face(old)
            assert face is not None
            assert node in mesh.face_nodes(face)

    def test_old_face_handle_is_stale(self, triangle):
        triangle.mesh.split_face(triangle.face, (0.25, 0.25))
        with pytest.raises(StaleHandleError):
            triangle.mesh.face_nodes(triangle.face)

    def test_square(self, square, assert_valid):
        face = next(square.faces())
        square.split_face(face, centroid(square, face))

        assert square.number_of_nodes() == 5
        assert square.number_of_faces() == 4
        assert_counter_clockwise(square)
        assert_valid(square)

    def test_repeated_refinement(self, triangle, assert_valid):
        mesh = triangle.mesh
        for _ in range(10):
            faces = list(mesh.faces())
            face = faces[len(faces) // 2]
            mesh.split_face(face, centroid(mesh, face))

        assert mesh.number_of_faces() == 21
        assert mesh.number_of_nodes() - mesh.number_of_edges() + mesh.number_of_faces() == 1
        assert_counter_clockwise(mesh)
        assert_valid(mesh)


@pytest.mark.unit
class TestSplitEdge:
    """Tests for split_edge."""

    def test_interior_edge(self, square, assert_valid):
        n0, _, n2, _ = square.nodes()
        diagonal = square.edge(square.find_halfedge(n0, n2))
        node = square.split_edge(diagonal, (0.5, 0.5))

        assert square.number_of_nodes() == 5
        assert square.number_of_edges() == 8
        assert square.number_of_faces() == 4
        assert square.degree(node) == 4
        assert not square.is_boundary_node(node)
        assert square.find_halfedge(n0, n2) is None
        assert_counter_clockwise(square)
        assert_valid(square)

    def test_boundary_edge(self, square, assert_valid):
        n0, n1, _, _ = square.nodes()
        edge = square.edge(square.find_halfedge(n0, n1))
        node = square.split_edge(edge, (0.5, 0.0))

        assert square.number_of_nodes() == 5
        assert square.number_of_edges() == 7
        assert square.number_of_faces() == 3
        assert square.degree(node) == 3
        assert square.is_boundary_node(node)
        assert_counter_clockwise(square)
        assert_valid(square)

    def test_boundary_edge_seen_from_outside(self, triangle, assert_valid):
        mesh = triangle.mesh
        node = mesh.split_edge(mesh.edge(triangle.bc), (0.5, 0.5))

        assert mesh.number_of_faces() == 2
        assert mesh.find_halfedge(node, triangle.a) is not None
        assert_counter_clockwise(mesh)
        assert_valid(mesh)

    def test_free_edge(self, assert_valid):
        from planemesh.mesh.triangulation import Triangulation

        mesh = Triangulation()
        a, b = mesh.add_node((0, 0)), mesh.add_node((2, 0))
        node = mesh.split_edge(mesh.edge(mesh.add_edge(a, b)), (1, 0))

        assert mesh.number_of_edges() == 2
        assert mesh.number_of_faces() == 0
        assert mesh.find_halfedge(node, a) is not None
        assert mesh.find_halfedge(node, b) is not None
        assert_valid(mesh)

    def test_old_edge_handle_is_stale(self, triangle):
        mesh = triangle.mesh
        edge = mesh.edge(triangle.ab)
        mesh.split_edge(edge, (0.5, 0))
        with pytest.raises(StaleHandleError):
            mesh.edge_nodes(edge)

    def test_split_every_fan_spoke(self, fan, assert_valid):
        centre = next(fan.nodes())
        spokes = [fan.edge(h) for h in fan.outgoing(centre)]
        for edge in spokes:
            a, b = (fan.position(n) for n in fan.edge_nodes(edge))
            fan.split_edge(edge, ((a.x + b.x) / 2, (a.y + b.y) / 2))

        assert fan.number_of_faces() == 18
        assert fan.degree(centre) == 6
        assert_counter_clockwise(fan)
        assert_valid(fan)
