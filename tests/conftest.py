"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path
from types import SimpleNamespace

import pytest

from planemesh.geometry.analysis import check_integrity
from planemesh.geometry.conversion import MeshConverter
from planemesh.mesh.triangulation import Triangulation

SQUARE_POINTS = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]
SQUARE_TRIANGLES = [(0, 1, 2), (0, 2, 3)]

# Centre node 0 and six rim nodes in counter-clockwise order. Integer
# coordinates keep every collinearity exact.
FAN_POINTS = [(0, 0), (2, 0), (1, 2), (-1, 2), (-2, 0), (-1, -2), (1, -2)]
FAN_TRIANGLES = [(0, i, i % 6 + 1) for i in range(1, 7)]


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def triangle():
    """Triangle A(0,0) B(1,0) C(0,1) built with the topology operators."""
    mesh = Triangulation()
    a, b, c = (mesh.add_node(p) for p in [(0, 0), (1, 0), (0, 1)])
    ab = mesh.add_edge(a, b)
    bc = mesh.add_edge(b, c)
    ca = mesh.add_edge(c, a)
    face = mesh.add_face(ab, bc, ca)
    return SimpleNamespace(mesh=mesh, a=a, b=b, c=c, ab=ab, bc=bc, ca=ca, face=face)


@pytest.fixture
def open_triangle():
    """Three nodes joined by three edges, no face."""
    mesh = Triangulation()
    a, b, c = (mesh.add_node(p) for p in [(0, 0), (1, 0), (0, 1)])
    ab = mesh.add_edge(a, b)
    bc = mesh.add_edge(b, c)
    ca = mesh.add_edge(c, a)
    return SimpleNamespace(mesh=mesh, a=a, b=b, c=c, ab=ab, bc=bc, ca=ca)


@pytest.fixture
def square():
    """Unit square split along the diagonal (0,0)-(1,1) into two faces."""
    return MeshConverter.from_triangles(SQUARE_POINTS, SQUARE_TRIANGLES)


@pytest.fixture
def fan():
    """Six triangles around a centre node."""
    return MeshConverter.from_triangles(FAN_POINTS, FAN_TRIANGLES)


@pytest.fixture
def bowtie():
    """Two triangles touching only at the node O(0,0)."""
    points = [(0, 0), (1, -0.5), (1, 0.5), (-1, 0.5), (-1, -0.5)]
    return MeshConverter.from_triangles(points, [(0, 1, 2), (0, 3, 4)])


@pytest.fixture
def square_file(temp_dir):
    """The unit square as a YAML mesh document."""
    path = temp_dir / "square.yaml"
    path.write_text(
        """
nodes:
  - [0.0, 0.0]
  - [1.0, 0.0]
  - [1.0, 1.0]
  - [0.0, 1.0]
triangles:
  - [0, 1, 2]
  - [0, 2, 3]
"""
    )
    return path


@pytest.fixture
def sample_settings_file(temp_dir):
    """Create a sample settings file."""
    path = temp_dir / "planemesh.yaml"
    path.write_text(
        """
mesh:
  kernel: float
  transactional_add_edge: false
  max_locate_steps: 100

logging:
  level: DEBUG
  json_output: true
"""
    )
    return path


@pytest.fixture
def assert_valid():
    """Return a checker that fails with the integrity errors of a mesh."""

    def check(mesh: Triangulation) -> None:
        report = check_integrity(mesh)
        assert report.is_valid, report.errors

    return check
