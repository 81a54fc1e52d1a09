"""Identifiers for patches and nodes, and the directed edges of a graggle."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

PATCH_ID_LEN = 32
_MAX_NODE = 2**64


@dataclass(frozen=True, order=True)
class PatchId:
    """The hash identifying a patch."""

    data: bytes = bytes(PATCH_ID_LEN)

    def __post_init__(self) -> None:
        if isinstance(self.data, (bytearray, memoryview)):
            object.__setattr__(self, "data", bytes(self.data))
        if not isinstance(self.data, bytes):
            raise TypeError("PatchId data must be bytes")
        if len(self.data) != PATCH_ID_LEN:
            raise ValueError(
                f"PatchId data must be {PATCH_ID_LEN} bytes long, got {len(self.data)}"
            )

    @classmethod
    def cur(cls) -> PatchId:
        """The blank id, standing for the patch currently being built."""
        return cls()


@dataclass(frozen=True, order=True)
class NodeId:
    """A node, named by the patch that introduced it and its index in that patch."""

    patch: PatchId
    node: int

    def __post_init__(self) -> None:
        if not 0 <= self.node < _MAX_NODE:
            raise ValueError(f"node index out of range: {self.node}")

    @classmethod
    def cur(cls, node: int) -> NodeId:
        """A node belonging to the blank patch id."""
        return cls(PatchId.cur(), node)


class EdgeKind(IntEnum):
    """The kinds of edge.

    The order matters: deleted edges sort last, so iterating the neighbours of
    a node and stopping at the first deleted edge skips all deleted ones.
    """

    LIVE = 0
    PSEUDO = 1
    DELETED = 2

    @classmethod
    def from_deleted(cls, deleted: bool) -> EdgeKind:
        return cls.DELETED if deleted else cls.LIVE


@dataclass(frozen=True, order=True)
class Edge:
    """A directed edge; only the destination is stored, not the source.

    Edges are ordered by kind first, so live edges come before deleted ones.
    Pseudo-edges carry the blank patch id.
    """

    kind: EdgeKind
    dest: NodeId
    patch: PatchId

    def not_deleted(self) -> bool:
        return self.kind != EdgeKind.DELETED

    def target(self) -> NodeId:
        return self.dest

    @classmethod
    def new_pseudo(cls, dest: NodeId) -> Edge:
        return cls(EdgeKind.PSEUDO, dest, PatchId.cur())

    @classmethod
    def new_live(cls, dest: NodeId, patch: PatchId) -> Edge:
        return cls(EdgeKind.LIVE, dest, patch)

    @classmethod
    def new_deleted(cls, dest: NodeId, patch: PatchId) -> Edge:
        return cls(EdgeKind.DELETED, dest, patch)

    @classmethod
    def new_real(cls, dest: NodeId, deleted: bool, patch: PatchId) -> Edge:
        """A live or deleted (never pseudo) edge."""
        return cls(EdgeKind.from_deleted(deleted), dest, patch)