"""Changes that can be applied to and removed from a graggle, and a full consistency check."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Set, Tuple, Union

from .edge import Edge, EdgeKind, NodeId, PatchId
from .graggle import GraggleData


@dataclass(frozen=True)
class NewNode:
    """Introduce a node with the given contents."""

    id: NodeId
    contents: bytes = b""


@dataclass(frozen=True)
class DeleteNode:
    """Mark an existing live node as deleted."""

    id: NodeId


@dataclass(frozen=True)
class NewEdge:
    """Add an edge between two existing nodes."""

    src: NodeId
    dest: NodeId


Change = Union[NewNode, DeleteNode, NewEdge]


@dataclass(frozen=True)
class ChangeSet:
    """A sequence of changes, all introduced by the patch ``patch``."""

    changes: Tuple[Change, ...]
    patch: PatchId = PatchId()

    def __post_init__(self) -> None:
        object.__setattr__(self, "changes", tuple(self.changes))

    def apply(self, graggle: GraggleData) -> None:
        """Apply every change, in order."""
        for change in self.changes:
            match change:
                case NewNode(id=node):
                    graggle.add_node(node)
                case DeleteNode(id=node):
                    graggle.delete_node(node)
                case NewEdge(src=src, dest=dest):
                    graggle.add_edge(src, dest, self.patch)
                case _:
                    raise TypeError(f"unknown change: {change!r}")

    def unapply(self, graggle: GraggleData) -> None:
        """Undo :meth:`apply`: edges and deletions first, new nodes last."""
        for change in self.changes:
            match change:
                case DeleteNode(id=node):
                    graggle.undelete_node(node)
                case NewEdge(src=src, dest=dest):
                    graggle.unadd_edge(src, dest, self.patch)
                case NewNode():
                    pass
                case _:
                    raise TypeError(f"unknown change: {change!r}")
        for change in self.changes:
            if isinstance(change, NewNode):
                graggle.unadd_node(change.id)


def _has_live_edge(data: GraggleData, src: NodeId, dest: NodeId) -> bool:
    return any(
        e.dest == dest and e.kind == EdgeKind.LIVE for e in data.all_out_edges(src)
    )


def expected_pseudo_edges(data: GraggleData, node: NodeId) -> Set[NodeId]:
    """Compute by brute force the destinations of the pseudo-edges that should leave ``node``.

    These are the live nodes reachable from ``node`` through deleted nodes only,
    ignoring existing pseudo-edges, and not already joined to it by a live edge.
    """

    def usable(src: NodeId, edge: Edge) -> bool:
        if edge.kind == EdgeKind.PSEUDO:
            return False
        if src == node:
            return edge.dest not in data.nodes
        return src not in data.nodes

    result: Set[NodeId] = set()
    seen = {node}
    stack = [node]
    while stack:
        src = stack.pop()
        for edge in data.all_out_edges(src):
            if not usable(src, edge) or edge.dest in seen:
                continue
            dst = edge.dest
            seen.add(dst)
            stack.append(dst)
            if dst in data.nodes and not _has_live_edge(data, node, dst):
                result.add(dst)
    return result


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise AssertionError(message)


def check_consistent(data: GraggleData) -> None:
    """Check every invariant of ``data``; raise AssertionError on the first violation."""
    _require(
        data.nodes.isdisjoint(data.deleted_nodes),
        "live and deleted nodes overlap",
    )

    def exists(node: NodeId) -> bool:
        return node in data.nodes or node in data.deleted_nodes

    seen_back_edges = set()
    for src, edge in data.edges:
        _require(exists(src), f"edge source {src!r} does not exist")
        _require(exists(edge.dest), f"edge destination {edge.dest!r} does not exist")
        _require(src != edge.dest, f"self-loop at {src!r}")
        _require(
            (edge.dest in data.deleted_nodes) == (edge.kind == EdgeKind.DELETED),
            f"edge {src!r} -> {edge!r} has the wrong kind",
        )
        if edge.kind == EdgeKind.PSEUDO:
            back_kind = EdgeKind.PSEUDO
        else:
            back_kind = EdgeKind.from_deleted(src in data.deleted_nodes)
        back_edge = Edge(back_kind, src, edge.patch)
        _require(
            data.back_edges.contains(edge.dest, back_edge),
            f"edge {src!r} -> {edge!r} has no matching back-edge",
        )
        seen_back_edges.add((edge.dest, back_edge))

    for src, back_edge in data.back_edges:
        _require(
            (src, back_edge) in seen_back_edges,
            f"back-edge {src!r} -> {back_edge!r} has no matching edge",
        )

    for u in data.deleted_nodes:
        _require(u in data.deleted_partition, f"deleted node {u!r} is not partitioned")

    if data.dirty_reps:
        return

    for part in data.deleted_partition.parts():
        for u in part:
            _require(u in data.deleted_nodes, f"partitioned node {u!r} is not deleted")

    for src, edge in data.edges:
        if edge.kind == EdgeKind.PSEUDO:
            _require(
                next(data.pseudo_edge_reasons.get((src, edge.dest)), None) is not None,
                f"pseudo-edge {src!r} -> {edge.dest!r} has no reason",
            )

    for (src, dest), _ in data.pseudo_edge_reasons:
        _require(
            data.edges.contains(src, Edge.new_pseudo(dest)),
            f"reason recorded for missing pseudo-edge {src!r} -> {dest!r}",
        )

    for reason, _ in data.reason_pseudo_edges:
        _require(
            data.deleted_partition.is_rep(reason),
            f"reason {reason!r} is not a representative",
        )

    for u in data.nodes:
        expected = expected_pseudo_edges(data, u)
        actual = {e.dest for e in data.all_out_edges(u) if e.kind == EdgeKind.PSEUDO}
        _require(
            expected == actual,
            f"pseudo-edges from {u!r} are {actual!r}, expected {expected!r}",
        )