"""
Mesh analysis and integrity checking.

Provides:
- Integrity checks of the half-edge invariants (twins, loops, incidence
  cycles, triangle faces)
- Diagnostic report (counts, boundary, Euler characteristic, bounds, area)
"""

import logging
from dataclasses import dataclass, field

import numpy as np

from planemesh.core.exceptions import TopologyError
from planemesh.mesh.store import NULL, pair
from planemesh.mesh.triangulation import Triangulation

logger = logging.getLogger(__name__)


@dataclass
class IntegrityReport:
    """
    Outcome of ``check_integrity``.

    Attributes:
        errors: One human-readable line per violated invariant
        halfedges_checked: Number of live half-edges inspected
    """

    errors: list[str] = field(default_factory=list)
    halfedges_checked: int = 0

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def raise_if_invalid(self) -> None:
        """
        Raises:
            TopologyError: If any invariant is violated
        """
        if self.errors:
            raise TopologyError(
                f"Mesh integrity check failed with {len(self.errors)} error(s)",
                details={"errors": self.errors[:10]},
            )


def check_integrity(mesh: Triangulation) -> IntegrityReport:
    """
    Verify the half-edge invariants of a triangulation.

    Checked for every live half-edge ``h``: ``pair(pair(h)) == h``,
    ``next(prev(h)) == h``, ``prev(next(h)) == h``, the origin of ``next(h)``
    is the target of ``h``, and ``next``/``prev`` stay within live edges.
    For every node: its representative half-edge starts there and the
    incidence cycle is closed and reaches every outgoing half-edge. For
    every face: the loop has exactly three half-edges, all referring back to
    the face.
    """
    report = IntegrityReport()
    errors = report.errors

    live_nodes = set(mesh.node_indices())
    live_halfedges = set()
    for e in mesh.edge_indices():
        live_halfedges.update((2 * e, 2 * e + 1))

    outgoing_count: dict[int, int] = {}
    for h in sorted(live_halfedges):
        report.halfedges_checked += 1
        nxt = mesh.he_next[h]
        prv = mesh.he_prev[h]
        origin = mesh.he_origin[h]

        if pair(pair(h)) != h or pair(h) not in live_halfedges:
            errors.append(f"halfedge {h}: twin is not an involution")
        if nxt not in live_halfedges or prv not in live_halfedges:
            errors.append(f"halfedge {h}: next/prev point to a removed half-edge")
            continue
        if mesh.he_prev[nxt] != h:
            errors.append(f"halfedge {h}: prev(next(h)) != h")
        if mesh.he_next[prv] != h:
            errors.append(f"halfedge {h}: next(prev(h)) != h")
        if origin == NULL or origin not in live_nodes:
            errors.append(f"halfedge {h}: origin {origin} is not a live node")
            continue
        if mesh.he_origin[nxt] != mesh.he_origin[pair(h)]:
            errors.append(f"halfedge {h}: next(h) does not start at the target of h")
        if mesh.he_face[nxt] != mesh.he_face[h]:
            errors.append(f"halfedge {h}: next(h) lies in a different face")
        outgoing_count[origin] = outgoing_count.get(origin, 0) + 1

    for n in mesh.node_indices():
        start = mesh.node_he[n]
        expected = outgoing_count.get(n, 0)
        if start == NULL:
            if expected:
                errors.append(f"node {n}: isolated but has {expected} outgoing half-edge(s)")
            continue
        if start not in live_halfedges or mesh.he_origin[start] != n:
            errors.append(f"node {n}: representative half-edge does not start here")
            continue

        steps = 0
        h = start
        while True:
            steps += 1
            h = mesh.he_next[pair(h)]
            if h == start or steps > expected or mesh.he_origin[h] != n:
                break
        if h != start or steps != expected:
            errors.append(
                f"node {n}: incidence cycle visits {steps} of {expected} outgoing half-edges"
            )

    for f in mesh.face_indices():
        h1 = mesh.face_he[f]
        if h1 not in live_halfedges:
            errors.append(f"face {f}: half-edge {h1} is not live")
            continue
        loop = [h1, mesh.he_next[h1], mesh.he_next[mesh.he_next[h1]]]
        if mesh.he_next[loop[2]] != h1:
            errors.append(f"face {f}: loop is not a triangle")
        if any(mesh.he_face[h] != f for h in loop):
            errors.append(f"face {f}: half-edges do not refer back to the face")

    if errors:
        logger.warning("Integrity check found %d error(s)", len(errors))
    return report


def analyze_mesh(mesh: Triangulation) -> dict:
    """
    Analyze a triangulation and return a diagnostic report.

    Returns dict with: node_count, edge_count, face_count,
    boundary_edge_count, isolated_node_count, euler_characteristic,
    bounds_min, bounds_max, area, is_valid.
    """
    boundary_edges = sum(1 for e in mesh.edges() if mesh.is_boundary_edge(e))
    isolated = sum(1 for n in mesh.nodes() if mesh.is_isolated(n))
    bbox = mesh.bounding_box()

    area = 0.0
    for face in mesh.faces():
        a, b, c = (np.array(mesh.position(n).as_tuple()) for n in mesh.face_nodes(face))
        u, v = b - a, c - a
        area += 0.5 * float(u[0] * v[1] - u[1] * v[0])

    v_count = mesh.number_of_nodes()
    e_count = mesh.number_of_edges()
    f_count = mesh.number_of_faces()

    return {
        "node_count": v_count,
        "edge_count": e_count,
        "face_count": f_count,
        "boundary_edge_count": boundary_edges,
        "isolated_node_count": isolated,
        "euler_characteristic": v_count - e_count + f_count,
        "bounds_min": None if bbox.is_empty else [bbox.min_x, bbox.min_y],
        "bounds_max": None if bbox.is_empty else [bbox.max_x, bbox.max_y],
        "area": area,
        "is_valid": check_integrity(mesh).is_valid,
    }
