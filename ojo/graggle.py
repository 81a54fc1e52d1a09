"""Mutable graggle storage: live and deleted nodes, edges, and pseudo-edges."""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, Iterator, List, Set, Tuple

from .edge import Edge, EdgeKind, NodeId, PatchId
from .multimap import MultiMap
from .view import Graggle

NodePair = Tuple[NodeId, NodeId]


class _Partition:
    """A partition of nodes into disjoint parts, each named by a representative."""

    __slots__ = ("_rep", "_parts")

    def __init__(self) -> None:
        self._rep: Dict[NodeId, NodeId] = {}
        self._parts: Dict[NodeId, Set[NodeId]] = {}

    def copy(self) -> _Partition:
        new = _Partition()
        new._rep = dict(self._rep)
        new._parts = {rep: set(members) for rep, members in self._parts.items()}
        return new

    def __contains__(self, node: object) -> bool:
        return node in self._rep

    def insert(self, node: NodeId) -> None:
        """Add ``node`` as a part of its own, unless it is already present."""
        if node not in self._rep:
            self._rep[node] = node
            self._parts[node] = {node}

    def representative(self, node: NodeId) -> NodeId:
        return self._rep[node]

    def is_rep(self, node: NodeId) -> bool:
        return node in self._parts

    def merge(self, a: NodeId, b: NodeId) -> None:
        """Join the parts containing ``a`` and ``b``."""
        keep, drop = self._rep[a], self._rep[b]
        if keep == drop:
            return
        if len(self._parts[keep]) < len(self._parts[drop]):
            keep, drop = drop, keep
        moved = self._parts.pop(drop)
        for member in moved:
            self._rep[member] = keep
        self._parts[keep] |= moved

    def remove_part(self, rep: NodeId) -> None:
        """Remove every member of the part represented by ``rep``."""
        for member in self._parts.pop(rep, ()):
            del self._rep[member]

    def parts(self) -> Iterator[FrozenSet[NodeId]]:
        for members in self._parts.values():
            yield frozenset(members)


class GraggleData:
    """The data behind a graggle, together with the bookkeeping for pseudo-edges.

    Two instances are equal when they have the same live nodes, deleted nodes,
    edges and back-edges (pseudo-edges included); the rest is caching.
    """

    def __init__(self) -> None:
        self.nodes: Set[NodeId] = set()
        self.deleted_nodes: Set[NodeId] = set()
        self.edges: MultiMap[NodeId, Edge] = MultiMap()
        self.back_edges: MultiMap[NodeId, Edge] = MultiMap()
        # Weakly connected components of the deleted nodes.
        self.deleted_partition = _Partition()
        # Forward pseudo-edges -> representatives of the parts responsible for them.
        self.pseudo_edge_reasons: MultiMap[NodePair, NodeId] = MultiMap()
        # Representatives -> the pseudo-edges they are responsible for.
        self.reason_pseudo_edges: MultiMap[NodeId, NodePair] = MultiMap()
        # Representatives whose components need their connectivity recomputed.
        self.dirty_reps: Set[NodeId] = set()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GraggleData):
            return NotImplemented
        return (
            self.nodes == other.nodes
            and self.deleted_nodes == other.deleted_nodes
            and self.edges == other.edges
            and self.back_edges == other.back_edges
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"GraggleData(nodes={sorted(self.nodes)!r}, "
            f"deleted_nodes={sorted(self.deleted_nodes)!r}, edges={self.edges!r})"
        )

    def copy(self) -> GraggleData:
        new = GraggleData()
        new.nodes = set(self.nodes)
        new.deleted_nodes = set(self.deleted_nodes)
        new.edges = self.edges.copy()
        new.back_edges = self.back_edges.copy()
        new.deleted_partition = self.deleted_partition.copy()
        new.pseudo_edge_reasons = self.pseudo_edge_reasons.copy()
        new.reason_pseudo_edges = self.reason_pseudo_edges.copy()
        new.dirty_reps = set(self.dirty_reps)
        return new

    def as_graggle(self) -> Graggle:
        return Graggle(self)

    def all_out_edges(self, node: NodeId) -> Iterator[Edge]:
        return self.edges.get(node)

    def all_in_edges(self, node: NodeId) -> Iterator[Edge]:
        return self.back_edges.get(node)

    def pseudo_edge_pairs(self) -> Set[NodePair]:
        """All (source, destination) pairs joined by a forward pseudo-edge."""
        return {(src, e.dest) for src, e in self.edges if e.kind == EdgeKind.PSEUDO}

    def add_node(self, node: NodeId) -> None:
        self.nodes.add(node)

    def _has_live_edge(self, src: NodeId, dest: NodeId) -> bool:
        # The smallest edge that could possibly go from src to dest.
        smallest = Edge.new_live(dest, PatchId.cur())
        actual = next(self.edges.get_from(src, smallest), None)
        return actual is not None and actual.dest == dest and actual.kind == EdgeKind.LIVE

    def _remove_pseudo_edge_reasons(self, src: NodeId, dest: NodeId) -> None:
        pair = (src, dest)
        reasons = list(self.pseudo_edge_reasons.get(pair))
        self.pseudo_edge_reasons.remove_all(pair)
        for reason in reasons:
            self.reason_pseudo_edges.remove(reason, pair)

    def _internal_delete_edge(self, src: NodeId, edge: Edge) -> None:
        """Remove an edge in both directions, with no further bookkeeping."""
        self.edges.remove(src, edge)
        self.back_edges.remove(edge.dest, Edge(edge.kind, src, edge.patch))

    def _internal_delete_back_edge(self, dest: NodeId, back_edge: Edge) -> None:
        self.back_edges.remove(dest, back_edge)
        self.edges.remove(back_edge.dest, Edge(back_edge.kind, dest, back_edge.patch))

    def unadd_node(self, node: NodeId) -> None:
        """Remove a live node and every edge touching it.

        Raises ValueError unless ``node`` is live.
        """
        if node not in self.nodes:
            raise ValueError(f"cannot unadd {node!r}: it is not a live node")
        self.nodes.remove(node)

        for e in list(self.all_out_edges(node)):
            self._internal_delete_edge(node, e)
            if e.kind == EdgeKind.PSEUDO:
                self._remove_pseudo_edge_reasons(node, e.dest)
        for e in list(self.all_in_edges(node)):
            self._internal_delete_back_edge(node, e)
            if e.kind == EdgeKind.PSEUDO:
                self._remove_pseudo_edge_reasons(e.dest, node)

    def delete_node(self, node: NodeId) -> None:
        """Turn a live node into a tombstone.

        Raises ValueError unless ``node`` is live.
        """
        if node not in self.nodes:
            raise ValueError(f"cannot delete {node!r}: it is not a live node")
        self.nodes.remove(node)
        self.deleted_nodes.add(node)
        self.deleted_partition.insert(node)

        out_edges = list(self.all_out_edges(node))
        in_edges = list(self.all_in_edges(node))
        for e in out_edges:
            self._delete_opposite_edge(node, e, forwards=True)
        for e in in_edges:
            self._delete_opposite_edge(node, e, forwards=False)
        self._mark_dirty(node)

    def undelete_node(self, node: NodeId) -> None:
        """Make a deleted node live again.

        Raises ValueError unless ``node`` is deleted.
        """
        if node not in self.deleted_nodes:
            raise ValueError(f"cannot undelete {node!r}: it is not a deleted node")
        self.deleted_nodes.remove(node)
        self.nodes.add(node)

        out_edges = list(self.all_out_edges(node))
        in_edges = list(self.all_in_edges(node))
        for e in out_edges:
            self._undelete_opposite_edge(node, e, forwards=True)
        for e in in_edges:
            self._undelete_opposite_edge(node, e, forwards=False)
        # The node stays in its part; the whole part is recomputed when resolving.
        self._mark_dirty(node)

    def _delete_opposite_edge(self, src: NodeId, edge: Edge, forwards: bool) -> None:
        """``src`` was just deleted; mark the edge from ``edge.dest`` back to it."""
        opposite = self.back_edges if forwards else self.edges
        if edge.kind == EdgeKind.PSEUDO:
            opposite.remove(edge.dest, Edge.new_pseudo(src))
        else:
            opposite.remove(edge.dest, Edge.new_live(src, edge.patch))
            opposite.insert(edge.dest, Edge.new_deleted(src, edge.patch))

        if edge.kind == EdgeKind.DELETED:
            self._merge_components(src, edge.dest)

    def _undelete_opposite_edge(self, src: NodeId, edge: Edge, forwards: bool) -> None:
        """``src`` was just undeleted; mark the edge from ``edge.dest`` back to it."""
        opposite = self.back_edges if forwards else self.edges
        opposite.remove(edge.dest, Edge.new_deleted(src, edge.patch))
        opposite.insert(edge.dest, Edge.new_live(src, edge.patch))

    def _merge_components(self, id1: NodeId, id2: NodeId) -> None:
        rep1 = self.deleted_partition.representative(id1)
        rep2 = self.deleted_partition.representative(id2)
        self.deleted_partition.merge(rep1, rep2)
        new_rep = self.deleted_partition.representative(rep1)

        self._delete_obsolete_reason(rep1)
        self._delete_obsolete_reason(rep2)

        self.dirty_reps.discard(rep1)
        self.dirty_reps.discard(rep2)
        self.dirty_reps.add(new_rep)

    def _delete_obsolete_reason(self, reason: NodeId) -> None:
        """Drop every pseudo-edge justified only by ``reason``."""
        for src, dest in list(self.reason_pseudo_edges.get(reason)):
            self.pseudo_edge_reasons.remove((src, dest), reason)
            if next(self.pseudo_edge_reasons.get((src, dest)), None) is None:
                self._internal_delete_edge(src, Edge.new_pseudo(dest))
        self.reason_pseudo_edges.remove_all(reason)

    def _mark_dirty(self, node: NodeId) -> None:
        rep = self.deleted_partition.representative(node)
        self._delete_obsolete_reason(rep)
        self.dirty_reps.add(rep)

    def _check_exists(self, node: NodeId) -> None:
        if node not in self.nodes and node not in self.deleted_nodes:
            raise ValueError(f"{node!r} is not a node of this graggle")

    def add_edge(self, src: NodeId, dest: NodeId, patch: PatchId) -> None:
        """Add an edge introduced by ``patch``; both ends must exist."""
        self._check_exists(src)
        self._check_exists(dest)
        src_deleted = src not in self.nodes
        dest_deleted = dest not in self.nodes

        self.edges.insert(src, Edge.new_real(dest, dest_deleted, patch))
        self.back_edges.insert(dest, Edge.new_real(src, src_deleted, patch))

        if src_deleted and dest_deleted:
            self._merge_components(src, dest)
        elif src_deleted:
            self._mark_dirty(src)
        elif dest_deleted:
            self._mark_dirty(dest)

    def unadd_edge(self, src: NodeId, dest: NodeId, patch: PatchId) -> None:
        """Remove an edge introduced by ``patch``; both ends must still exist."""
        self._check_exists(src)
        self._check_exists(dest)
        src_deleted = src in self.deleted_nodes
        dest_deleted = dest in self.deleted_nodes

        self.edges.remove(src, Edge.new_real(dest, dest_deleted, patch))
        self.back_edges.remove(dest, Edge.new_real(src, src_deleted, patch))

        if src_deleted:
            self._mark_dirty(src)
        if dest_deleted:
            self._mark_dirty(dest)

    def resolve_pseudo_edges(self) -> None:
        """Recompute the components and pseudo-edges of every dirty part."""
        dirty, self.dirty_reps = self.dirty_reps, set()

        in_scope = {
            u
            for u in self.deleted_nodes
            if self.deleted_partition.representative(u) in dirty
        }
        components = self._weak_components(in_scope)

        for rep in dirty:
            self.deleted_partition.remove_part(rep)
        for component in components:
            first, *rest = sorted(component)
            self.deleted_partition.insert(first)
            for u in rest:
                self.deleted_partition.insert(u)
                self.deleted_partition.merge(first, u)

        for component in components:
            self._add_component_pseudo_edges(component)

    def _neighbors(self, node: NodeId) -> Iterator[NodeId]:
        for e in self.all_out_edges(node):
            yield e.dest
        for e in self.all_in_edges(node):
            yield e.dest

    def _weak_components(self, scope: Set[NodeId]) -> List[Set[NodeId]]:
        seen: Set[NodeId] = set()
        components: List[Set[NodeId]] = []
        for start in sorted(scope):
            if start in seen:
                continue
            component = {start}
            stack = [start]
            while stack:
                u = stack.pop()
                for v in self._neighbors(u):
                    if v in scope and v not in component:
                        component.add(v)
                        stack.append(v)
            seen |= component
            components.append(component)
        return components

    def _reachable_through(self, start: NodeId, component: Set[NodeId]) -> Set[NodeId]:
        """Nodes reachable from ``start`` by entering ``component`` and moving within it."""
        seen = {start}
        stack = [start]
        while stack:
            src = stack.pop()
            for e in self.all_out_edges(src):
                usable = (src == start and e.dest in component) or src in component
                if usable and e.dest not in seen:
                    seen.add(e.dest)
                    stack.append(e.dest)
        seen.discard(start)
        return seen

    def _add_component_pseudo_edges(self, component: Set[NodeId]) -> None:
        """Add the pseudo-edges induced by one non-empty component of deleted nodes."""
        neighborhood: Set[NodeId] = set(component)
        for u in component:
            neighborhood.update(self._neighbors(u))
        rep = self.deleted_partition.representative(next(iter(component)))

        pairs: List[NodePair] = []
        for u in sorted(n for n in neighborhood if n in self.nodes):
            reached = self._reachable_through(u, component)
            pairs.extend((u, v) for v in sorted(reached) if v in self.nodes)

        for src, dest in pairs:
            if not self._has_live_edge(src, dest):
                self.edges.insert(src, Edge.new_pseudo(dest))
                self.back_edges.insert(dest, Edge.new_pseudo(src))
                self.pseudo_edge_reasons.insert((src, dest), rep)
                self.reason_pseudo_edges.insert(rep, (src, dest))

    @classmethod
    def _from_live(cls, nodes: Iterable[NodeId]) -> GraggleData:
        data = cls()
        data.nodes.update(nodes)
        return data