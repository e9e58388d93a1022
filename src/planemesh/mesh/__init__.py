"""
Mesh module - Half-edge storage, topology operators and point location.
"""

from planemesh.mesh.location import Location, PointLocation
from planemesh.mesh.store import (
    EdgeHandle,
    FaceHandle,
    HalfedgeHandle,
    MeshStore,
    NodeHandle,
    RecordPool,
)
from planemesh.mesh.triangulation import Triangulation

__all__ = [
    # Store
    "MeshStore",
    "RecordPool",
    "NodeHandle",
    "HalfedgeHandle",
    "EdgeHandle",
    "FaceHandle",
    # Location
    "Location",
    "PointLocation",
    # Mesh
    "Triangulation",
]
