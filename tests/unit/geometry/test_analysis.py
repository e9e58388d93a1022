"""
Tests for integrity checking and mesh analysis.
"""

import pytest

from planemesh.core.exceptions import TopologyError
from planemesh.geometry.analysis import analyze_mesh, check_integrity
from planemesh.mesh.store import NULL
from planemesh.mesh.triangulation import Triangulation


@pytest.mark.unit
class TestCheckIntegrity:
    """Tests for check_integrity."""

    def test_valid_square(self, square):
        report = check_integrity(square)
        assert report.is_valid
        assert report.halfedges_checked == 10
        report.raise_if_invalid()

    def test_empty_mesh(self):
        assert check_integrity(Triangulation()).is_valid

    def test_broken_face_reference(self, square):
        face = next(square.faces())
        square.he_face[square.face_he[face.index]] = NULL

        report = check_integrity(square)
        assert not report.is_valid
        assert any("refer back" in error for error in report.errors)

    def test_broken_prev_link(self, triangle):
        mesh = triangle.mesh
        h = triangle.ab.index
        mesh.he_prev[mesh.he_next[h]] = mesh.he_next[h]

        report = check_integrity(mesh)
        assert any("prev(next(h))" in error for error in report.errors)

    def test_broken_node_reference(self, triangle):
        mesh = triangle.mesh
        mesh.node_he[triangle.a.index] = triangle.bc.index

        report = check_integrity(mesh)
        assert any("does not start here" in error for error in report.errors)

    def test_raise_if_invalid(self, square):
        square.he_face[0] = NULL
        with pytest.raises(TopologyError, match="integrity") as exc_info:
            check_integrity(square).raise_if_invalid()
        assert exc_info.value.details["errors"]


@pytest.mark.unit
class TestAnalyzeMesh:
    """Tests for analyze_mesh."""

    def test_square(self, square):
        report = analyze_mesh(square)

        assert report["node_count"] == 4
        assert report["edge_count"] == 5
        assert report["face_count"] == 2
        assert report["boundary_edge_count"] == 4
        assert report["isolated_node_count"] == 0
        assert report["euler_characteristic"] == 1
        assert report["bounds_min"] == [0.0, 0.0]
        assert report["bounds_max"] == [1.0, 1.0]
        assert report["area"] == pytest.approx(1.0)
        assert report["is_valid"] is True

    def test_closed_mesh(self, triangle):
        mesh = triangle.mesh
        mesh.add_face(mesh.pair(triangle.ab), mesh.pair(triangle.ca), mesh.pair(triangle.bc))
        report = analyze_mesh(mesh)

        assert report["boundary_edge_count"] == 0
        assert report["euler_characteristic"] == 2
        assert report["area"] == pytest.approx(0.0)

    def test_fan_area(self, fan):
        assert analyze_mesh(fan)["area"] == pytest.approx(12.0)

    def test_empty(self):
        report = analyze_mesh(Triangulation())
        assert report["node_count"] == 0
        assert report["bounds_min"] is None
        assert report["area"] == 0.0

    def test_isolated_nodes(self, square):
        square.add_node((5, 5))
        report = analyze_mesh(square)
        assert report["isolated_node_count"] == 1
        assert report["bounds_max"] == [5.0, 5.0]
