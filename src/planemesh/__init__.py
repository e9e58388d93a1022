"""
planemesh - Planar triangle meshes on a half-edge data structure.

Euler operators, edge and face refinement, and point location by walking
across faces, with exact orientation predicates.
"""

__version__ = "0.1.0"
__author__ = "planemesh Contributors"

from planemesh.core.config import MeshSettings
from planemesh.core.geometry import BoundingBox2, Point2
from planemesh.mesh import Location, PointLocation, Triangulation

__all__ = [
    "__version__",
    "MeshSettings",
    "Point2",
    "BoundingBox2",
    "Location",
    "PointLocation",
    "Triangulation",
]
