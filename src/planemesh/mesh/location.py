"""
Point location by walking across faces.

The walk keeps a cursor on one face loop and tests the query point against
each directed half-edge in turn. Points on the inner (left) side move the
cursor along the loop; points on the outer side make the walk cross into the
neighbouring face; leaving through a boundary half-edge ends the walk.
"""

from dataclasses import dataclass
from enum import Enum

from planemesh.core.exceptions import LocateError
from planemesh.core.geometry import Point2
from planemesh.core.kernel import OrientedSide, SidePredicate
from planemesh.mesh.store import NULL, EdgeHandle, FaceHandle, MeshStore, NodeHandle, edge_of, pair


class PointLocation(Enum):
    """Where a query point lies relative to the mesh."""

    IN_FACE = "in_face"
    ON_EDGE = "on_edge"
    ON_NODE = "on_node"
    OUTSIDE_MESH = "outside_mesh"


@dataclass(frozen=True)
class Location:
    """
    Result of a point-location query.

    Attributes:
        kind: Classification of the point
        face: Containing face for IN_FACE
        edge: Edge hit for ON_EDGE, boundary edge crossed for OUTSIDE_MESH
        node: Node hit for ON_NODE
    """

    kind: PointLocation
    face: FaceHandle | None = None
    edge: EdgeHandle | None = None
    node: NodeHandle | None = None


class _Collinear(Enum):
    INSIDE_SEGMENT = "inside"
    AT_ORIGIN = "origin"
    AT_TARGET = "target"
    BEYOND_SEGMENT = "beyond"


def _classify_collinear(p: Point2, p1: Point2, p2: Point2) -> _Collinear:
    if (min(p1.x, p2.x) < p.x < max(p1.x, p2.x)) or (
        min(p1.y, p2.y) < p.y < max(p1.y, p2.y)
    ):
        return _Collinear.INSIDE_SEGMENT
    if p == p1:
        return _Collinear.AT_ORIGIN
    if p == p2:
        return _Collinear.AT_TARGET
    return _Collinear.BEYOND_SEGMENT


def walk(
    store: MeshStore,
    point: Point2,
    start: int,
    side_of: SidePredicate,
    max_steps: int | None = None,
) -> Location:
    """
    Locate ``point`` starting from half-edge ``start`` of a face loop.

    Args:
        store: Mesh records
        point: Query point
        start: Face half-edge to start from
        side_of: Oriented-side predicate
        max_steps: Give up after this many half-edge tests (None: never)

    Raises:
        LocateError: If ``max_steps`` is exceeded
    """
    loop_start = start
    h = start
    steps = 0

    while True:
        steps += 1
        if max_steps is not None and steps > max_steps:
            raise LocateError(
                f"Point location did not finish within {max_steps} steps",
                details={"point": point.as_tuple()},
            )

        origin = store.he_origin[h]
        target = store.he_origin[pair(h)]
        p1 = store.node_position[origin]
        p2 = store.node_position[target]
        side = side_of(p1, p2, point)

        if side is OrientedSide.POSITIVE:
            h = store.he_next[h]
            if h == loop_start:
                return Location(
                    PointLocation.IN_FACE, face=store.face_handle(store.he_face[h])
                )
            continue

        if side is OrientedSide.ON_BOUNDARY:
            hit = _classify_collinear(point, p1, p2)
            if hit is _Collinear.INSIDE_SEGMENT:
                return Location(PointLocation.ON_EDGE, edge=store.edge_handle(edge_of(h)))
            if hit is _Collinear.AT_ORIGIN:
                return Location(PointLocation.ON_NODE, node=store.node_handle(origin))
            if hit is _Collinear.AT_TARGET:
                return Location(PointLocation.ON_NODE, node=store.node_handle(target))
            # BEYOND_SEGMENT: keep walking as if the point were outside this edge

        if store.he_face[pair(h)] == NULL:
            return Location(
                PointLocation.OUTSIDE_MESH, edge=store.edge_handle(edge_of(h))
            )

        loop_start = pair(h)
        h = store.he_next[loop_start]
