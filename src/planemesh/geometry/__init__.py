"""
Geometry module - Conversion, file I/O and analysis of triangulations.
"""

from planemesh.geometry.analysis import IntegrityReport, analyze_mesh, check_integrity
from planemesh.geometry.conversion import MeshConverter
from planemesh.geometry.loader import MeshDocument, MeshLoader

__all__ = [
    "MeshConverter",
    "MeshLoader",
    "MeshDocument",
    "IntegrityReport",
    "check_integrity",
    "analyze_mesh",
]
