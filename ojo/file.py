"""A linearly ordered file: a sequence of nodes, each holding one line."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .edge import NodeId


@dataclass(frozen=True)
class File:
    """Read-only access to the nodes of a totally ordered graggle.

    Node ``i`` occupies ``contents[boundaries[i]:boundaries[i + 1]]``, so
    ``boundaries`` is always one longer than ``ids``.
    """

    ids: Tuple[NodeId, ...]
    contents: bytes
    boundaries: Tuple[int, ...]

    @classmethod
    def from_bytes(cls, data: bytes) -> File:
        """Split raw bytes into lines.

        Node ids are synthesised: blank patch ids and consecutive indices
        starting from zero.
        """
        data = bytes(data)
        boundaries = [0]
        boundaries.extend(i + 1 for i, b in enumerate(data) if b == ord("\n"))
        if data and not data.endswith(b"\n"):
            boundaries.append(len(data))
        ids = tuple(NodeId.cur(i) for i in range(len(boundaries) - 1))
        return cls(ids, data, tuple(boundaries))

    def num_nodes(self) -> int:
        return len(self.ids)

    def _check(self, idx: int) -> None:
        if not 0 <= idx < len(self.ids):
            raise IndexError(f"node index {idx} out of range")

    def node(self, idx: int) -> bytes:
        """Contents of the node at ``idx``, including its newline if any."""
        self._check(idx)
        return self.contents[self.boundaries[idx]:self.boundaries[idx + 1]]

    def node_id(self, idx: int) -> NodeId:
        self._check(idx)
        return self.ids[idx]

    def as_bytes(self) -> bytes:
        return self.contents