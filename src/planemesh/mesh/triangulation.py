"""
Triangulated planar meshes on a half-edge data structure.

``Triangulation`` owns its records and exposes the Euler operators that
change its topology (add/remove node, edge and face), the refinement
operators built from them (split edge, split face), point location and a
set of navigation queries.

Public methods take and return typed handles and validate them; the
``_``-prefixed counterparts do the work on raw store indices and are what the
composite operators chain together.

Example:
    >>> mesh = Triangulation()
    >>> a, b, c = (mesh.add_node(p) for p in [(0, 0), (1, 0), (0, 1)])
    >>> ab, bc, ca = mesh.add_edge(a, b), mesh.add_edge(b, c), mesh.add_edge(c, a)
    >>> face = mesh.add_face(ab, bc, ca)
    >>> mesh.locate((0.25, 0.25)).face == face
    True
"""

import logging
from typing import Any, Iterator

import numpy as np

from planemesh.core.config import MeshSettings
from planemesh.core.exceptions import AddFaceError, AddFaceReason, LocateError, TopologyError
from planemesh.core.geometry import BoundingBox2, Point2
from planemesh.core.kernel import get_predicate
from planemesh.mesh import adjacency
from planemesh.mesh.location import Location, walk
from planemesh.mesh.store import (
    NULL,
    EdgeHandle,
    FaceHandle,
    HalfedgeHandle,
    MeshStore,
    NodeHandle,
    edge_of,
    pair,
)

logger = logging.getLogger(__name__)


class Triangulation(MeshStore):
    """
    Planar triangle mesh with half-edge connectivity.

    Faces are counter-clockwise when built by the refinement operators or by
    ``MeshConverter.from_triangles``; point location assumes that
    orientation.
    """

    def __init__(self, settings: MeshSettings | None = None) -> None:
        super().__init__()
        self.settings = settings or MeshSettings()
        self._side_of = get_predicate(self.settings.kernel)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(nodes={self.number_of_nodes()}, "
            f"edges={self.number_of_edges()}, faces={self.number_of_faces()})"
        )

    # ==================================================================
    # Topology operators
    # ==================================================================

    def add_node(self, position: Any) -> NodeHandle:
        """
        Add an isolated node.

        Args:
            position: Point-like position (see ``Point2.of``)

        Returns:
            Handle of the new node
        """
        return self.node_handle(self._add_node(Point2.of(position)))

    def remove_node(self, node: NodeHandle) -> None:
        """Remove a node together with every edge and face touching it."""
        n = self.node_index(node)
        degree = self._remove_node(n)
        logger.debug("Removed node %d with %d incident edges", n, degree)

    def add_edge(self, n1: NodeHandle, n2: NodeHandle) -> HalfedgeHandle:
        """
        Connect two nodes with a new edge.

        Args:
            n1: Origin of the returned half-edge
            n2: Target of the returned half-edge

        Returns:
            The half-edge of the new edge running from ``n1`` to ``n2``

        Raises:
            ValueError: If ``n1`` and ``n2`` are the same node
            TopologyError: If either node is enclosed by faces
        """
        return self.halfedge_handle(self._add_edge(self.node_index(n1), self.node_index(n2)))

    def remove_edge(self, edge: EdgeHandle) -> None:
        """Remove an edge, first removing the faces on either side of it."""
        self._remove_edge(self.edge_index(edge))

    def add_face(
        self, he1: HalfedgeHandle, he2: HalfedgeHandle, he3: HalfedgeHandle
    ) -> FaceHandle:
        """
        Close three boundary half-edges into a triangle.

        The half-edges must be free (no face yet) and chained: each one ends
        where the next one starts, and the third ends where the first starts.

        Returns:
            Handle of the new face, whose half-edge is ``he1``

        Raises:
            AddFaceError: With reason NOT_FREE, NOT_A_CHAIN or NON_MANIFOLD
        """
        return self.face_handle(
            self._add_face(
                self.halfedge_index(he1),
                self.halfedge_index(he2),
                self.halfedge_index(he3),
            )
        )

    def remove_face(self, face: FaceHandle) -> None:
        """Remove a face; its half-edges become boundary half-edges."""
        self._remove_face(self.face_index(face))

    # ==================================================================
    # Composite operators
    # ==================================================================

    def split_edge(self, edge: EdgeHandle, position: Any) -> NodeHandle:
        """
        Insert a node on an edge and re-triangulate the faces around it.

        The edge becomes two edges; every triangle that bordered it becomes
        two triangles sharing an edge to the new node.

        Args:
            edge: Edge to split
            position: Position of the new node

        Returns:
            Handle of the new node
        """
        e = self.edge_index(edge)
        p = Point2.of(position)

        h1, h2 = 2 * e, 2 * e + 1
        n1 = self.he_origin[h1]
        n2 = self.he_origin[h2]
        left = self.he_face[h1] != NULL
        right = self.he_face[h2] != NULL

        if left:
            h5 = self.he_next[h1]
            h6 = self.he_prev[h1]
            n3 = self.he_origin[h6]
        if right:
            h7 = self.he_next[h2]
            h8 = self.he_prev[h2]
            n4 = self.he_origin[h8]

        self._remove_edge(e)
        m = self._add_node(p)
        to_n1 = self._add_edge(m, n1)
        to_n2 = self._add_edge(m, n2)

        if left:
            to_n3 = self._add_edge(m, n3)
            self._add_face(to_n2, h5, pair(to_n3))
            self._add_face(to_n3, h6, pair(to_n1))

        if right:
            to_n4 = self._add_edge(m, n4)
            self._add_face(to_n1, h7, pair(to_n4))
            self._add_face(to_n4, h8, pair(to_n2))

        logger.debug("Split edge %d at (%g, %g): new node %d", e, p.x, p.y, m)
        return self.node_handle(m)

    def split_face(self, face: FaceHandle, position: Any) -> NodeHandle:
        """
        Insert a node inside a triangle and connect it to the three corners.

        Args:
            face: Face to split
            position: Position of the new node

        Returns:
            Handle of the new node
        """
        f = self.face_index(face)
        p = Point2.of(position)

        h1 = self.face_he[f]
        h2 = self.he_next[h1]
        h3 = self.he_prev[h1]

        self._remove_face(f)
        m = self._add_node(p)
        h4 = self._add_edge(m, self.he_origin[h1])
        h5 = self._add_edge(m, self.he_origin[h2])
        h6 = self._add_edge(m, self.he_origin[h3])
        self._add_face(h4, h1, pair(h5))
        self._add_face(h5, h2, pair(h6))
        self._add_face(h6, h3, pair(h4))

        logger.debug("Split face %d at (%g, %g): new node %d", f, p.x, p.y, m)
        return self.node_handle(m)

    # ==================================================================
    # Point location and geometric queries
    # ==================================================================

    def locate(self, point: Any, start_face: FaceHandle | None = None) -> Location:
        """
        Classify a point against the mesh by walking from ``start_face``.

        Args:
            point: Query point
            start_face: Face to start the walk from (first face if None)

        Returns:
            Location whose kind is IN_FACE, ON_EDGE, ON_NODE or OUTSIDE_MESH

        Raises:
            LocateError: If the mesh has no face, or the configured step
                limit is exceeded
        """
        p = Point2.of(point)
        if start_face is None:
            f = next(self.face_indices(), NULL)
            if f == NULL:
                raise LocateError("Cannot locate a point in a mesh without faces")
        else:
            f = self.face_index(start_face)

        return walk(
            self,
            p,
            self.face_he[f],
            self._side_of,
            max_steps=self.settings.max_locate_steps,
        )

    def bounding_box(self) -> BoundingBox2:
        """Smallest axis-aligned box holding every node (empty if no nodes)."""
        return BoundingBox2.from_points(self.node_positions())

    def boundary_halfedge(self) -> HalfedgeHandle | None:
        """First boundary half-edge in edge order, or None for a closed mesh."""
        for e in self.edge_indices():
            for h in (2 * e, 2 * e + 1):
                if self.he_face[h] == NULL:
                    return self.halfedge_handle(h)
        return None

    # ==================================================================
    # Navigation
    # ==================================================================

    def pair(self, halfedge: HalfedgeHandle) -> HalfedgeHandle:
        return self.halfedge_handle(pair(self.halfedge_index(halfedge)))

    def next(self, halfedge: HalfedgeHandle) -> HalfedgeHandle:
        return self.halfedge_handle(self.he_next[self.halfedge_index(halfedge)])

    def prev(self, halfedge: HalfedgeHandle) -> HalfedgeHandle:
        return self.halfedge_handle(self.he_prev[self.halfedge_index(halfedge)])

    def origin(self, halfedge: HalfedgeHandle) -> NodeHandle:
        return self.node_handle(self.he_origin[self.halfedge_index(halfedge)])

    def target(self, halfedge: HalfedgeHandle) -> NodeHandle:
        return self.node_handle(self.he_origin[pair(self.halfedge_index(halfedge))])

    def face(self, halfedge: HalfedgeHandle) -> FaceHandle | None:
        """Face of a half-edge, None on the boundary."""
        return self.face_handle(self.he_face[self.halfedge_index(halfedge)])

    def edge(self, halfedge: HalfedgeHandle) -> EdgeHandle:
        return self.edge_handle(edge_of(self.halfedge_index(halfedge)))

    def is_boundary(self, halfedge: HalfedgeHandle) -> bool:
        return self.he_face[self.halfedge_index(halfedge)] == NULL

    def node_halfedge(self, node: NodeHandle) -> HalfedgeHandle | None:
        """Representative outgoing half-edge, None for an isolated node."""
        return self.halfedge_handle(self.node_he[self.node_index(node)])

    def position(self, node: NodeHandle) -> Point2:
        return self.node_position[self.node_index(node)]

    def is_isolated(self, node: NodeHandle) -> bool:
        return self.node_he[self.node_index(node)] == NULL

    def outgoing(self, node: NodeHandle) -> Iterator[HalfedgeHandle]:
        """Iterate over the outgoing half-edges of a node in rotation order."""
        for h in self._outgoing(self.node_index(node)):
            yield self.halfedge_handle(h)

    def degree(self, node: NodeHandle) -> int:
        return sum(1 for _ in self._outgoing(self.node_index(node)))

    def is_boundary_node(self, node: NodeHandle) -> bool:
        """Whether a node is isolated or touches a boundary half-edge."""
        n = self.node_index(node)
        if self.node_he[n] == NULL:
            return True
        return any(self.he_face[pair(h)] == NULL for h in self._outgoing(n))

    def edge_halfedges(self, edge: EdgeHandle) -> tuple[HalfedgeHandle, HalfedgeHandle]:
        e = self.edge_index(edge)
        return self.halfedge_handle(2 * e), self.halfedge_handle(2 * e + 1)

    def edge_nodes(self, edge: EdgeHandle) -> tuple[NodeHandle, NodeHandle]:
        e = self.edge_index(edge)
        return (
            self.node_handle(self.he_origin[2 * e]),
            self.node_handle(self.he_origin[2 * e + 1]),
        )

    def is_boundary_edge(self, edge: EdgeHandle) -> bool:
        e = self.edge_index(edge)
        return self.he_face[2 * e] == NULL or self.he_face[2 * e + 1] == NULL

    def face_halfedge(self, face: FaceHandle) -> HalfedgeHandle:
        return self.halfedge_handle(self.face_he[self.face_index(face)])

    def face_halfedges(self, face: FaceHandle) -> tuple[HalfedgeHandle, ...]:
        h1 = self.face_he[self.face_index(face)]
        h2 = self.he_next[h1]
        h3 = self.he_next[h2]
        return tuple(self.halfedge_handle(h) for h in (h1, h2, h3))

    def face_nodes(self, face: FaceHandle) -> tuple[NodeHandle, ...]:
        return tuple(self.origin(h) for h in self.face_halfedges(face))

    def find_halfedge(self, n1: NodeHandle, n2: NodeHandle) -> HalfedgeHandle | None:
        """Half-edge running from ``n1`` to ``n2``, or None if not connected."""
        a = self.node_index(n1)
        b = self.node_index(n2)
        for h in self._outgoing(a):
            if self.he_origin[pair(h)] == b:
                return self.halfedge_handle(h)
        return None

    def nodes(self) -> Iterator[NodeHandle]:
        return (self.node_handle(n) for n in self.node_indices())

    def edges(self) -> Iterator[EdgeHandle]:
        return (self.edge_handle(e) for e in self.edge_indices())

    def faces(self) -> Iterator[FaceHandle]:
        return (self.face_handle(f) for f in self.face_indices())

    def halfedges(self) -> Iterator[HalfedgeHandle]:
        for e in self.edge_indices():
            yield self.halfedge_handle(2 * e)
            yield self.halfedge_handle(2 * e + 1)

    def node_positions(self) -> np.ndarray:
        """(N, 2) array of node positions in node iteration order."""
        coords = [self.node_position[n].as_tuple() for n in self.node_indices()]
        return np.array(coords, dtype=float).reshape(-1, 2)

    # ==================================================================
    # Index-level implementation
    # ==================================================================

    def _outgoing(self, n: int) -> Iterator[int]:
        start = self.node_he[n]
        if start == NULL:
            return
        h = start
        while True:
            yield h
            h = self.he_next[pair(h)]
            if h == start:
                break

    def _add_node(self, p: Point2) -> int:
        n = self.new_node()
        self.node_position[n] = p
        return n

    def _remove_node(self, n: int) -> int:
        removed = 0
        while self.node_he[n] != NULL:
            self._remove_edge(edge_of(self.node_he[n]))
            removed += 1
        self.delete_node(n)
        return removed

    def _add_edge(self, n1: int, n2: int) -> int:
        if n1 == n2:
            raise ValueError(f"Cannot create a self-loop edge at node {n1}")

        e = self.new_edge()
        h1, h2 = 2 * e, 2 * e + 1

        attached = False
        try:
            adjacency.attach(self, h1, n1)
            attached = True
            adjacency.attach(self, h2, n2)
        except TopologyError as exc:
            if self.settings.transactional_add_edge:
                if attached:
                    adjacency.detach(self, h1)
                self.delete_edge(e)
            raise TopologyError(
                "Trying to attach an edge to a complete mesh",
                node=exc.node,
                details={"nodes": (n1, n2), "cause": exc.message},
            ) from exc

        return h1

    def _remove_edge(self, e: int) -> None:
        h1, h2 = 2 * e, 2 * e + 1

        if self.he_face[h1] != NULL:
            self._remove_face(self.he_face[h1])
        if self.he_face[h2] != NULL:
            self._remove_face(self.he_face[h2])

        adjacency.detach(self, h1)
        adjacency.detach(self, h2)
        self.delete_edge(e)

    def _add_face(self, h1: int, h2: int, h3: int) -> int:
        details = {"halfedges": (h1, h2, h3)}

        if not all(self.he_face[h] == NULL for h in (h1, h2, h3)):
            raise AddFaceError(
                "half-edges are not free, cannot add face",
                reason=AddFaceReason.NOT_FREE,
                details=details,
            )

        origin = self.he_origin
        if not (
            origin[pair(h1)] == origin[h2]
            and origin[pair(h2)] == origin[h3]
            and origin[pair(h3)] == origin[h1]
        ):
            raise AddFaceError(
                "half-edges do not form a chain, cannot add face",
                reason=AddFaceReason.NOT_A_CHAIN,
                details=details,
            )

        try:
            adjacency.merge_adjacent(self, h1, h2)
            adjacency.merge_adjacent(self, h2, h3)
            adjacency.merge_adjacent(self, h3, h1)
        except TopologyError as exc:
            raise AddFaceError(
                "attempting to create non-manifold mesh, cannot add face",
                reason=AddFaceReason.NON_MANIFOLD,
                details={**details, "node": exc.node},
            ) from exc

        f = self.new_face()
        self.face_he[f] = h1
        for h in (h1, h2, h3):
            self.he_face[h] = f
        return f

    def _remove_face(self, f: int) -> None:
        h = self.face_he[f]
        self.he_face[h] = NULL
        self.he_face[self.he_next[h]] = NULL
        self.he_face[self.he_prev[h]] = NULL
        self.delete_face(f)
