"""
Record storage for half-edge meshes.

Every mesh owns one ``MeshStore``: a set of growable integer tables holding
the node, half-edge and face fields, plus one ``RecordPool`` per record kind
that hands out slots, recycles released ones and bumps a per-slot generation
counter on release.

Half-edges are not allocated on their own. Edge ``e`` owns half-edges
``2 * e`` and ``2 * e + 1``, so the twin of ``h`` is ``h ^ 1`` and its edge is
``h >> 1``.

Callers outside the mesh package work with typed handles carrying
``(index, generation)``; a handle whose generation no longer matches its slot
refers to a removed record and is rejected with ``StaleHandleError``.
"""

from dataclasses import dataclass
from typing import Iterator

from planemesh.core.exceptions import StaleHandleError
from planemesh.core.geometry import Point2

NULL = -1


def pair(h: int) -> int:
    """Twin of half-edge ``h``."""
    return h ^ 1


def edge_of(h: int) -> int:
    """Edge owning half-edge ``h``."""
    return h >> 1


@dataclass(frozen=True)
class Handle:
    """Reference to a mesh record. Compares by value."""

    index: int
    generation: int = 0


@dataclass(frozen=True)
class NodeHandle(Handle):
    """Reference to a node."""


@dataclass(frozen=True)
class HalfedgeHandle(Handle):
    """Reference to a half-edge; the generation is that of its edge."""


@dataclass(frozen=True)
class EdgeHandle(Handle):
    """Reference to an edge."""


@dataclass(frozen=True)
class FaceHandle(Handle):
    """Reference to a face."""


class RecordPool:
    """
    Slot allocator for one kind of mesh record.

    Released slots are reused last-in first-out. Each slot keeps a
    generation counter that is incremented when the slot is released, so
    handles issued before the release stop validating.
    """

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._generations: list[int] = []
        self._alive: list[bool] = []
        self._free: list[int] = []
        self._count = 0

    def allocate(self) -> int:
        """Return the index of a fresh live slot."""
        if self._free:
            index = self._free.pop()
            self._alive[index] = True
        else:
            index = len(self._alive)
            self._alive.append(True)
            self._generations.append(0)
        self._count += 1
        return index

    def release(self, index: int) -> None:
        """Return a live slot to the pool."""
        if not self.is_live(index):
            raise StaleHandleError(
                f"Cannot release {self.kind} {index}: not alive", kind=self.kind
            )
        self._alive[index] = False
        self._generations[index] += 1
        self._free.append(index)
        self._count -= 1

    def is_live(self, index: int) -> bool:
        return 0 <= index < len(self._alive) and self._alive[index]

    def generation(self, index: int) -> int:
        return self._generations[index]

    def validate(self, index: int, generation: int) -> None:
        """
        Check that ``(index, generation)`` names a live record.

        Raises:
            StaleHandleError: If the slot is dead or was recycled since
        """
        if not self.is_live(index) or self._generations[index] != generation:
            raise StaleHandleError(
                f"Stale {self.kind} handle: {index} (generation {generation})",
                kind=self.kind,
                details={"index": index, "generation": generation},
            )

    @property
    def capacity(self) -> int:
        """Number of slots ever allocated, live or not."""
        return len(self._alive)

    def __iter__(self) -> Iterator[int]:
        """Iterate over live slots in index order."""
        return (i for i, alive in enumerate(self._alive) if alive)

    def __len__(self) -> int:
        return self._count


class MeshStore:
    """
    Arena of node, half-edge and face records owned by one mesh.

    The field tables are plain lists indexed by record slot and are shared
    with the adjacency primitives of this package; ``NULL`` marks an absent
    reference.
    """

    def __init__(self) -> None:
        self._node_pool = RecordPool("node")
        self._edge_pool = RecordPool("edge")
        self._face_pool = RecordPool("face")

        # node fields
        self.node_position: list[Point2 | None] = []
        self.node_he: list[int] = []

        # half-edge fields, two slots per edge
        self.he_origin: list[int] = []
        self.he_next: list[int] = []
        self.he_prev: list[int] = []
        self.he_face: list[int] = []

        # face fields
        self.face_he: list[int] = []

    # ------------------------------------------------------------------
    # Allocation
    # ------------------------------------------------------------------

    def new_node(self) -> int:
        n = self._node_pool.allocate()
        if n == len(self.node_he):
            self.node_position.append(None)
            self.node_he.append(NULL)
        else:
            self.node_position[n] = None
            self.node_he[n] = NULL
        return n

    def new_edge(self) -> int:
        """Allocate an edge whose two half-edges form a detached 2-cycle."""
        e = self._edge_pool.allocate()
        h1, h2 = 2 * e, 2 * e + 1
        if h1 == len(self.he_origin):
            self.he_origin.extend((NULL, NULL))
            self.he_next.extend((h2, h1))
            self.he_prev.extend((h2, h1))
            self.he_face.extend((NULL, NULL))
        else:
            self.he_origin[h1] = self.he_origin[h2] = NULL
            self.he_next[h1] = self.he_prev[h1] = h2
            self.he_next[h2] = self.he_prev[h2] = h1
            self.he_face[h1] = self.he_face[h2] = NULL
        return e

    def new_face(self) -> int:
        f = self._face_pool.allocate()
        if f == len(self.face_he):
            self.face_he.append(NULL)
        else:
            self.face_he[f] = NULL
        return f

    def delete_node(self, n: int) -> None:
        self._node_pool.release(n)
        self.node_position[n] = None
        self.node_he[n] = NULL

    def delete_edge(self, e: int) -> None:
        self._edge_pool.release(e)
        for h in (2 * e, 2 * e + 1):
            self.he_origin[h] = NULL
            self.he_face[h] = NULL

    def delete_face(self, f: int) -> None:
        self._face_pool.release(f)
        self.face_he[f] = NULL

    # ------------------------------------------------------------------
    # Iteration and counts
    # ------------------------------------------------------------------

    def node_indices(self) -> Iterator[int]:
        return iter(self._node_pool)

    def edge_indices(self) -> Iterator[int]:
        return iter(self._edge_pool)

    def face_indices(self) -> Iterator[int]:
        return iter(self._face_pool)

    def number_of_nodes(self) -> int:
        return len(self._node_pool)

    def number_of_edges(self) -> int:
        return len(self._edge_pool)

    def number_of_faces(self) -> int:
        return len(self._face_pool)

    # ------------------------------------------------------------------
    # Handles
    # ------------------------------------------------------------------

    def node_handle(self, n: int) -> NodeHandle | None:
        if n == NULL:
            return None
        return NodeHandle(n, self._node_pool.generation(n))

    def edge_handle(self, e: int) -> EdgeHandle | None:
        if e == NULL:
            return None
        return EdgeHandle(e, self._edge_pool.generation(e))

    def halfedge_handle(self, h: int) -> HalfedgeHandle | None:
        if h == NULL:
            return None
        return HalfedgeHandle(h, self._edge_pool.generation(edge_of(h)))

    def face_handle(self, f: int) -> FaceHandle | None:
        if f == NULL:
            return None
        return FaceHandle(f, self._face_pool.generation(f))

    def node_index(self, node: NodeHandle) -> int:
        _check_type(node, NodeHandle)
        self._node_pool.validate(node.index, node.generation)
        return node.index

    def edge_index(self, edge: EdgeHandle) -> int:
        _check_type(edge, EdgeHandle)
        self._edge_pool.validate(edge.index, edge.generation)
        return edge.index

    def halfedge_index(self, halfedge: HalfedgeHandle) -> int:
        _check_type(halfedge, HalfedgeHandle)
        if halfedge.index < 0:
            raise StaleHandleError(f"Invalid halfedge handle: {halfedge.index}", kind="halfedge")
        self._edge_pool.validate(edge_of(halfedge.index), halfedge.generation)
        return halfedge.index

    def face_index(self, face: FaceHandle) -> int:
        _check_type(face, FaceHandle)
        self._face_pool.validate(face.index, face.generation)
        return face.index


def _check_type(handle: object, expected: type) -> None:
    if not isinstance(handle, expected):
        raise TypeError(
            f"Expected {expected.__name__}, got {type(handle).__name__}"
        )
