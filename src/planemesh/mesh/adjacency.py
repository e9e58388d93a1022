"""
Incidence-cycle primitives for half-edge meshes.

These functions splice half-edges into and out of the rotation of half-edges
around a node. They work on raw store indices and do no handle validation;
the topology operators in ``planemesh.mesh.triangulation`` are their only
callers.

Around a node ``n`` the incoming half-edges are visited by ``h -> pair(next(h))``
and the outgoing ones by ``h -> next(pair(h))``. A *free* incoming half-edge
is one without a face: the gap right after it is where new half-edges can be
inserted without breaking the fan of faces around ``n``.
"""

from planemesh.core.exceptions import TopologyError
from planemesh.mesh.store import NULL, MeshStore, pair


def is_boundary(store: MeshStore, h: int) -> bool:
    """Whether half-edge ``h`` has no face."""
    return store.he_face[h] == NULL


def find_free_incident(store: MeshStore, n: int) -> int:
    """
    Return a free incoming half-edge of node ``n``.

    The search starts at the twin of the node's representative half-edge and
    walks the whole rotation once.

    Raises:
        TopologyError: If every incoming half-edge has a face
    """
    start = pair(store.node_he[n])
    h = start
    while True:
        if is_boundary(store, h):
            return h
        h = pair(store.he_next[h])
        if h == start:
            break

    raise TopologyError(f"Node {n} has no free incident half-edge", node=n)


def find_free_between(store: MeshStore, start: int, stop: int) -> int:
    """
    Return the first free incoming half-edge from ``start`` up to, but not
    including, ``stop``. Both must end at the same node.

    Raises:
        TopologyError: If no free half-edge lies in that range
    """
    h = start
    while True:
        if is_boundary(store, h):
            return h
        h = pair(store.he_next[h])
        if h == stop:
            break

    n = store.he_origin[pair(stop)]
    raise TopologyError(
        f"No free half-edge at node {n} between {start} and {stop}",
        node=n,
        details={"start": start, "stop": stop},
    )


def attach(store: MeshStore, h: int, n: int) -> None:
    """
    Make ``n`` the origin of ``h`` and splice ``h`` into the rotation of ``n``.

    Raises:
        TopologyError: If ``n`` is not isolated and has no free slot
    """
    store.he_origin[h] = n
    t = pair(h)

    if store.node_he[n] == NULL:
        store.node_he[n] = h
        store.he_prev[h] = t
        store.he_next[t] = h
        return

    free_in = find_free_incident(store, n)
    free_out = store.he_next[free_in]

    store.he_next[free_in] = h
    store.he_prev[h] = free_in
    store.he_next[t] = free_out
    store.he_prev[free_out] = t


def merge_adjacent(store: MeshStore, inc: int, out: int) -> None:
    """
    Relink the rotation at ``origin(out)`` so that ``next(inc) == out``.

    The half-edges that used to follow ``inc`` are moved behind a free
    incoming half-edge found between ``pair(out)`` and ``inc``.

    Raises:
        TopologyError: If no such free half-edge exists
    """
    if store.he_next[inc] == out:
        return

    b = store.he_next[inc]
    d = store.he_prev[out]
    g = find_free_between(store, pair(out), inc)
    h = store.he_next[g]

    store.he_next[inc] = out
    store.he_prev[out] = inc

    store.he_next[g] = b
    store.he_prev[b] = g

    store.he_next[d] = h
    store.he_prev[h] = d


def detach(store: MeshStore, h: int) -> None:
    """Remove ``h`` from the rotation of its origin node."""
    n = store.he_origin[h]
    after = store.he_next[pair(h)]

    if store.node_he[n] == h:
        store.node_he[n] = after if after != h else NULL

    prev = store.he_prev[h]
    store.he_next[prev] = after
    store.he_prev[after] = prev
