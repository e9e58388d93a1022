"""
Tests for record storage and handles.
"""

import pytest

from planemesh.core.exceptions import StaleHandleError
from planemesh.mesh.store import (
    NULL,
    EdgeHandle,
    FaceHandle,
    HalfedgeHandle,
    MeshStore,
    NodeHandle,
    RecordPool,
    edge_of,
    pair,
)


@pytest.mark.unit
class TestIndexArithmetic:
    """Tests for pair and edge_of."""

    def test_pair_is_involution(self):
        for h in range(10):
            assert pair(pair(h)) == h
            assert pair(h) != h

    def test_edge_of(self):
        assert edge_of(6) == edge_of(7) == 3
        assert edge_of(pair(6)) == 3


@pytest.mark.unit
class TestRecordPool:
    """Tests for RecordPool."""

    def test_allocate_sequential(self):
        pool = RecordPool("node")
        assert [pool.allocate() for _ in range(3)] == [0, 1, 2]
        assert len(pool) == 3
        assert list(pool) == [0, 1, 2]

    def test_release_reuses_last_freed(self):
        pool = RecordPool("node")
        for _ in range(4):
            pool.allocate()
        pool.release(1)
        pool.release(3)

        assert list(pool) == [0, 2]
        assert pool.allocate() == 3
        assert pool.allocate() == 1
        assert pool.allocate() == 4
        assert pool.capacity == 5

    def test_release_bumps_generation(self):
        pool = RecordPool("face")
        index = pool.allocate()
        pool.validate(index, 0)

        pool.release(index)
        assert pool.generation(index) == 1
        with pytest.raises(StaleHandleError):
            pool.validate(index, 0)

        assert pool.allocate() == index
        pool.validate(index, 1)
        with pytest.raises(StaleHandleError):
            pool.validate(index, 0)

    def test_double_release(self):
        pool = RecordPool("edge")
        index = pool.allocate()
        pool.release(index)
        with pytest.raises(StaleHandleError) as exc_info:
            pool.release(index)
        assert exc_info.value.kind == "edge"

    def test_out_of_range(self):
        pool = RecordPool("node")
        assert not pool.is_live(0)
        assert not pool.is_live(-1)
        with pytest.raises(StaleHandleError):
            pool.validate(5, 0)


@pytest.mark.unit
class TestMeshStore:
    """Tests for MeshStore."""

    def test_new_node_is_isolated(self):
        store = MeshStore()
        n = store.new_node()
        assert store.node_he[n] == NULL
        assert store.number_of_nodes() == 1

    def test_new_edge_is_two_cycle(self):
        store = MeshStore()
        e = store.new_edge()
        h1, h2 = 2 * e, 2 * e + 1

        assert store.he_next[h1] == h2
        assert store.he_prev[h1] == h2
        assert store.he_next[h2] == h1
        assert store.he_prev[h2] == h1
        assert store.he_face[h1] == store.he_face[h2] == NULL
        assert store.he_origin[h1] == store.he_origin[h2] == NULL

    def test_recycled_edge_is_reset(self):
        store = MeshStore()
        e = store.new_edge()
        store.he_next[2 * e] = 2 * e
        store.he_face[2 * e] = 0
        store.delete_edge(e)

        assert store.new_edge() == e
        assert store.he_next[2 * e] == 2 * e + 1
        assert store.he_face[2 * e] == NULL
        assert len(store.he_origin) == 2

    def test_iteration_skips_deleted(self):
        store = MeshStore()
        faces = [store.new_face() for _ in range(3)]
        store.delete_face(faces[1])

        assert list(store.face_indices()) == [faces[0], faces[2]]
        assert store.number_of_faces() == 2

    def test_handles_round_trip(self):
        store = MeshStore()
        n = store.new_node()
        e = store.new_edge()
        f = store.new_face()

        assert store.node_index(store.node_handle(n)) == n
        assert store.edge_index(store.edge_handle(e)) == e
        assert store.face_index(store.face_handle(f)) == f
        assert store.halfedge_index(store.halfedge_handle(2 * e + 1)) == 2 * e + 1

    def test_null_has_no_handle(self):
        store = MeshStore()
        assert store.node_handle(NULL) is None
        assert store.halfedge_handle(NULL) is None
        assert store.face_handle(NULL) is None

    def test_stale_handle_after_delete(self):
        store = MeshStore()
        handle = store.node_handle(store.new_node())
        store.delete_node(handle.index)
        store.new_node()

        with pytest.raises(StaleHandleError):
            store.node_index(handle)

    def test_halfedge_handle_follows_edge_generation(self):
        store = MeshStore()
        e = store.new_edge()
        h = store.halfedge_handle(2 * e)
        store.delete_edge(e)
        store.new_edge()

        assert store.halfedge_handle(2 * e).generation == 1
        with pytest.raises(StaleHandleError):
            store.halfedge_index(h)

    def test_wrong_handle_type(self):
        store = MeshStore()
        store.new_node()
        with pytest.raises(TypeError, match="NodeHandle"):
            store.node_index(FaceHandle(0))
        with pytest.raises(TypeError):
            store.halfedge_index(EdgeHandle(0))

    def test_handles_compare_by_value(self):
        assert NodeHandle(1, 2) == NodeHandle(1, 2)
        assert NodeHandle(1, 2) != NodeHandle(1, 3)
        assert HalfedgeHandle(1) != EdgeHandle(1)
