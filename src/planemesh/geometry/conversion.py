"""
Conversion between triangulations and other mesh representations.

Handles indexed triangle arrays, COMPAS meshes and Trimesh meshes. Planar
meshes are exported with z = 0; on import any z coordinate is dropped.
"""

import logging
from typing import Any

import numpy as np
import trimesh
from compas.datastructures import Mesh as CompasMesh

from planemesh.core.config import MeshSettings
from planemesh.core.exceptions import GeometryError, PlaneMeshError
from planemesh.core.kernel import orientation
from planemesh.mesh.triangulation import Triangulation

logger = logging.getLogger(__name__)


class MeshConverter:
    """
    Converter between Triangulation and indexed mesh formats.

    All builders go through the public topology operators, so the resulting
    triangulation satisfies the same invariants as one built by hand.
    """

    @staticmethod
    def from_triangles(
        points: Any,
        triangles: Any,
        settings: MeshSettings | None = None,
    ) -> Triangulation:
        """
        Build a triangulation from points and triangle index triples.

        Triangles given clockwise are reversed so that every face is
        counter-clockwise. Edges shared by two triangles are created once.

        Args:
            points: (N, 2) or (N, 3) array-like of coordinates
            triangles: (F, 3) array-like of node indices
            settings: Settings for the new triangulation

        Returns:
            Triangulation with N nodes and F faces

        Raises:
            GeometryError: If the input is malformed, a triangle is
                degenerate, or the triangles do not form a manifold mesh
        """
        pts = np.asarray(points, dtype=float)
        tris = np.asarray(triangles, dtype=np.int64)
        if pts.size == 0:
            pts = pts.reshape(0, 2)
        if tris.size == 0:
            tris = tris.reshape(0, 3)

        if pts.ndim != 2 or pts.shape[1] < 2:
            raise GeometryError(f"Points must have shape (N, 2) or (N, 3), got {pts.shape}")
        if tris.ndim != 2 or tris.shape[1] != 3:
            raise GeometryError(f"Triangles must have shape (F, 3), got {tris.shape}")
        if not np.isfinite(pts).all():
            raise GeometryError("Point coordinates must be finite")
        if len(tris) and (tris.min() < 0 or tris.max() >= len(pts)):
            raise GeometryError(
                "Triangle index out of range",
                details={"nodes": len(pts), "min": int(tris.min()), "max": int(tris.max())},
            )

        mesh = Triangulation(settings)
        nodes = [mesh.add_node(p) for p in pts[:, :2]]
        positions = [mesh.position(n) for n in nodes]

        for t, (a, b, c) in enumerate(tris.tolist()):
            turn = orientation(positions[a], positions[b], positions[c])
            if turn == 0:
                raise GeometryError(
                    f"Triangle {t} is degenerate", details={"nodes": (a, b, c)}
                )
            if turn < 0:
                b, c = c, b

            corners = (nodes[a], nodes[b], nodes[c])
            halfedges = []
            try:
                for i in range(3):
                    u, v = corners[i], corners[(i + 1) % 3]
                    h = mesh.find_halfedge(u, v)
                    halfedges.append(h if h is not None else mesh.add_edge(u, v))
                mesh.add_face(*halfedges)
            except PlaneMeshError as e:
                raise GeometryError(
                    f"Triangle {t} cannot be added: {e.message}",
                    details={"nodes": (a, b, c)},
                ) from e

        logger.info(
            "Built triangulation: %d nodes, %d edges, %d faces",
            mesh.number_of_nodes(), mesh.number_of_edges(), mesh.number_of_faces(),
        )
        return mesh

    @staticmethod
    def to_arrays(mesh: Triangulation) -> tuple[np.ndarray, np.ndarray]:
        """
        Export a triangulation as indexed arrays.

        Nodes are numbered in iteration order, which skips removed slots.

        Returns:
            (points, triangles): (N, 2) float array and (F, 3) int array
        """
        numbering = {node: i for i, node in enumerate(mesh.nodes())}
        points = mesh.node_positions()
        triangles = [
            [numbering[n] for n in mesh.face_nodes(face)] for face in mesh.faces()
        ]
        return points, np.array(triangles, dtype=np.int64).reshape(-1, 3)

    @staticmethod
    def to_compas(mesh: Triangulation) -> CompasMesh:
        """
        Convert a triangulation to a COMPAS Mesh (z = 0).

        Raises:
            GeometryError: If conversion fails
        """
        points, triangles = MeshConverter.to_arrays(mesh)
        try:
            vertices = [[x, y, 0.0] for x, y in points.tolist()]
            return CompasMesh.from_vertices_and_faces(vertices, triangles.tolist())
        except Exception as e:
            raise GeometryError(f"Failed to convert to COMPAS: {e}") from e

    @staticmethod
    def from_compas(mesh: CompasMesh, settings: MeshSettings | None = None) -> Triangulation:
        """
        Build a triangulation from a triangular COMPAS Mesh.

        Raises:
            GeometryError: If the mesh has non-triangular faces
        """
        keys = list(mesh.vertices())
        index = {key: i for i, key in enumerate(keys)}
        points = [mesh.vertex_coordinates(key)[:2] for key in keys]

        triangles = []
        for f in mesh.faces():
            corners = mesh.face_vertices(f)
            if len(corners) != 3:
                raise GeometryError(
                    f"Face {f} has {len(corners)} vertices, only triangles are supported"
                )
            triangles.append([index[key] for key in corners])

        return MeshConverter.from_triangles(points, triangles, settings)

    @staticmethod
    def to_trimesh(mesh: Triangulation) -> trimesh.Trimesh:
        """
        Convert a triangulation to a Trimesh (z = 0).

        Raises:
            GeometryError: If conversion fails
        """
        points, triangles = MeshConverter.to_arrays(mesh)
        try:
            vertices = np.column_stack([points, np.zeros(len(points))])
            return trimesh.Trimesh(vertices=vertices, faces=triangles, process=False)
        except Exception as e:
            raise GeometryError(f"Failed to convert to Trimesh: {e}") from e

    @staticmethod
    def from_trimesh(
        mesh: trimesh.Trimesh, settings: MeshSettings | None = None
    ) -> Triangulation:
        """Build a triangulation from a Trimesh, dropping z."""
        return MeshConverter.from_triangles(
            np.asarray(mesh.vertices)[:, :2], np.asarray(mesh.faces), settings
        )

