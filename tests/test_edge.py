import pytest

from ojo.edge import Edge, EdgeKind, NodeId, PatchId


def _patch(first):
    blank = PatchId.cur().data
    return PatchId(bytes([first]) + blank[1:])


def test_cur_patch_is_all_zero():
    data = PatchId.cur().data
    assert data == bytes(len(data))
    assert PatchId.cur() == PatchId()


def test_patch_id_wrong_length_rejected():
    n = len(PatchId.cur().data)
    with pytest.raises(ValueError):
        PatchId(bytes(n + 1))
    with pytest.raises(ValueError):
        PatchId(bytes(n - 1))


def test_patch_id_accepts_bytearray():
    n = len(PatchId.cur().data)
    assert PatchId(bytearray(n)) == PatchId.cur()


def test_patch_id_ordering():
    assert PatchId.cur() < _patch(1) < _patch(2)


def test_node_id_cur():
    n = NodeId.cur(7)
    assert n.node == 7
    assert n.patch == PatchId.cur()


def test_node_id_negative_rejected():
    with pytest.raises(ValueError):
        NodeId.cur(-1)


def test_node_id_ordering_by_patch_then_node():
    assert NodeId.cur(1) < NodeId.cur(2)
    assert NodeId.cur(5) < NodeId(_patch(1), 0)


def test_edge_kind_order():
    assert EdgeKind.from_deleted(False) < EdgeKind.PSEUDO < EdgeKind.from_deleted(True)
    dest = NodeId.cur(0)
    live = Edge.new_live(dest, PatchId.cur())
    pseudo = Edge.new_pseudo(dest)
    deleted = Edge.new_deleted(dest, PatchId.cur())
    assert sorted([deleted, pseudo, live]) == [live, pseudo, deleted]


def test_edge_kind_from_deleted():
    assert EdgeKind.from_deleted(True) is EdgeKind.DELETED
    assert EdgeKind.from_deleted(False) is EdgeKind.LIVE


def test_edge_constructors():
    dest = NodeId.cur(3)
    p = _patch(1)
    assert Edge.new_pseudo(dest) == Edge(EdgeKind.PSEUDO, dest, PatchId.cur())
    assert Edge.new_live(dest, p).kind is EdgeKind.LIVE
    assert Edge.new_deleted(dest, p).kind is EdgeKind.DELETED
    assert Edge.new_real(dest, True, p) == Edge.new_deleted(dest, p)
    assert Edge.new_real(dest, False, p) == Edge.new_live(dest, p)


def test_edge_target_and_not_deleted():
    dest = NodeId.cur(4)
    assert Edge.new_live(dest, PatchId.cur()).target() == dest
    assert Edge.new_live(dest, PatchId.cur()).not_deleted()
    assert Edge.new_pseudo(dest).not_deleted()
    assert not Edge.new_deleted(dest, PatchId.cur()).not_deleted()


def test_live_edges_sort_before_deleted():
    edges = [
        Edge.new_deleted(NodeId.cur(0), PatchId.cur()),
        Edge.new_pseudo(NodeId.cur(9)),
        Edge.new_live(NodeId.cur(5), PatchId.cur()),
        Edge.new_live(NodeId.cur(1), _patch(1)),
    ]
    kinds = [e.kind for e in sorted(edges)]
    assert kinds == [EdgeKind.LIVE, EdgeKind.LIVE, EdgeKind.PSEUDO, EdgeKind.DELETED]
    assert sorted(edges)[0].dest == NodeId.cur(1)


def test_smallest_live_edge_to_dest():
    dest = NodeId.cur(2)
    lowest = Edge.new_live(dest, PatchId.cur())
    assert lowest <= Edge.new_live(dest, _patch(3))
    assert lowest > Edge.new_live(NodeId.cur(1), _patch(3))


def test_edges_hashable():
    e = Edge.new_live(NodeId.cur(1), PatchId.cur())
    assert {e, Edge.new_live(NodeId.cur(1), PatchId.cur())} == {e}