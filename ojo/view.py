"""Read-only views of a graggle, and graph wrappers over them."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import chain, takewhile
from typing import AbstractSet, Iterator, Protocol

from .edge import Edge, NodeId
from .multimap import MultiMap


class GraggleStore(Protocol):
    """What a view needs from the underlying graggle data."""

    nodes: AbstractSet[NodeId]
    deleted_nodes: AbstractSet[NodeId]
    edges: MultiMap[NodeId, Edge]
    back_edges: MultiMap[NodeId, Edge]


@dataclass(frozen=True)
class Graggle:
    """A read-only view of a graggle: lines forming a directed graph.

    Nodes may be live or deleted; deleted nodes are kept as tombstones.
    Some methods ignore deleted nodes while others expose them.
    """

    data: GraggleStore

    def nodes(self) -> Iterator[NodeId]:
        """All live nodes, in order."""
        return iter(sorted(self.data.nodes))

    def out_edges(self, node: NodeId) -> Iterator[Edge]:
        """Edges from ``node`` to live nodes (including pseudo-edges)."""
        return takewhile(Edge.not_deleted, self.data.edges.get(node))

    def out_neighbors(self, node: NodeId) -> Iterator[NodeId]:
        """Live out-neighbours of ``node``."""
        return (e.dest for e in self.out_edges(node))

    def in_neighbors(self, node: NodeId) -> Iterator[NodeId]:
        """Live in-neighbours of ``node``."""
        return (e.dest for e in self.in_edges(node))

    def all_out_edges(self, node: NodeId) -> Iterator[Edge]:
        """Every edge out of ``node``, including those to deleted nodes."""
        return self.data.edges.get(node)

    def in_edges(self, node: NodeId) -> Iterator[Edge]:
        """Backward edges from ``node`` to live nodes."""
        return takewhile(Edge.not_deleted, self.data.back_edges.get(node))

    def all_in_edges(self, node: NodeId) -> Iterator[Edge]:
        """Every backward edge out of ``node``, including those to deleted nodes."""
        return self.data.back_edges.get(node)

    def has_node(self, node: NodeId) -> bool:
        """Whether ``node`` belongs to this graggle, live or deleted."""
        return node in self.data.nodes or node in self.data.deleted_nodes

    def is_live(self, node: NodeId) -> bool:
        """Whether ``node`` is live.

        Raises KeyError unless ``node`` belongs to this graggle.
        """
        if not self.has_node(node):
            raise KeyError(node)
        return node in self.data.nodes

    def as_live_graph(self) -> LiveGraph:
        return LiveGraph(self)

    def as_full_graph(self) -> FullGraph:
        return FullGraph(self)


@dataclass(frozen=True)
class LiveGraph:
    """The live part of a graggle, as a graph."""

    graggle: Graggle

    def nodes(self) -> Iterator[NodeId]:
        return self.graggle.nodes()

    def out_edges(self, u: NodeId) -> Iterator[Edge]:
        return self.graggle.out_edges(u)

    def in_edges(self, u: NodeId) -> Iterator[Edge]:
        return self.graggle.in_edges(u)


@dataclass(frozen=True)
class FullGraph:
    """The whole graggle, deleted nodes included, as a graph."""

    graggle: Graggle

    def nodes(self) -> Iterator[NodeId]:
        """Live nodes in order, followed by deleted nodes in order."""
        data = self.graggle.data
        return chain(sorted(data.nodes), sorted(data.deleted_nodes))

    def out_edges(self, u: NodeId) -> Iterator[Edge]:
        return self.graggle.all_out_edges(u)

    def in_edges(self, u: NodeId) -> Iterator[Edge]:
        return self.graggle.all_in_edges(u)