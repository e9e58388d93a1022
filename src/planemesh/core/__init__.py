"""
Core module - Shared configuration, exceptions, value types and predicates.
"""

from planemesh.core.config import ConfigManager, LoggingSettings, MeshSettings, Settings
from planemesh.core.exceptions import (
    AddFaceError,
    AddFaceReason,
    ConfigurationError,
    GeometryError,
    LocateError,
    PlaneMeshError,
    StaleHandleError,
    TopologyError,
)
from planemesh.core.geometry import BoundingBox2, Point2
from planemesh.core.kernel import OrientedSide, orientation, oriented_side

__all__ = [
    # Config
    "ConfigManager",
    "Settings",
    "MeshSettings",
    "LoggingSettings",
    # Exceptions
    "PlaneMeshError",
    "ConfigurationError",
    "GeometryError",
    "TopologyError",
    "AddFaceError",
    "AddFaceReason",
    "StaleHandleError",
    "LocateError",
    # Geometry
    "Point2",
    "BoundingBox2",
    # Kernel
    "OrientedSide",
    "orientation",
    "oriented_side",
]
