# ojo

The storage core of a small, experimental version control system. A file is
not kept as a list of lines. It is kept as a *graggle*, which is a directed
graph of lines. Lines are never erased. Deleting a line turns it into a
tombstone. *Pseudo-edges* let the live part of the graph skip over runs of
deleted lines.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `ojo.edge` holds the identifiers and edges:
  - `PatchId` is a 32-byte patch hash. `PatchId.cur()` gives the blank id.
  - `NodeId` is a patch id plus a node index. `NodeId.cur(n)` gives node `n` of the blank patch.
  - `EdgeKind` has the kinds `LIVE`, `PSEUDO` and `DELETED`.
  - `Edge` stores the kind, the destination and the patch. Edges sort by kind first, so live edges come first, then pseudo-edges, then deleted ones. The constructors are `Edge.new_live`, `new_deleted`, `new_pseudo` and `new_real`.
- `ojo.multimap` holds `MultiMap`. It maps each key to a sorted set of values. Its methods are `get`, `get_from`, `insert`, `remove`, `remove_all`, `contains`, `copy`, `to_list` and `from_pairs`. Iterating over it yields `(key, value)` pairs in order. Two maps compare equal when they hold the same bindings.
- `ojo.file` holds `File`, a linear sequence of nodes. `File.from_bytes` splits raw bytes into lines and gives the nodes blank-patch ids numbered from 0. Its methods are `num_nodes`, `node`, `node_id` and `as_bytes`.
- `ojo.view` holds the read-only views:
  - `Graggle` is a read-only view. Its methods are `nodes`, `out_edges`, `in_edges`, `out_neighbors`, `in_neighbors`, `all_out_edges`, `all_in_edges`, `has_node` and `is_live`. The methods without `all_` skip edges to deleted nodes. `is_live` raises `KeyError` for a node that does not belong to the graggle.
  - `LiveGraph` is a graph wrapper over the live nodes.
  - `FullGraph` is a graph wrapper over both live and deleted nodes.
- `ojo.graggle` holds `GraggleData`, the mutable graggle.
  - Changing it: `add_node`, `delete_node`, `add_edge`, and the matching undo operations `unadd_node`, `undelete_node` and `unadd_edge`. Operations on nodes in the wrong state raise `ValueError`.
  - Pseudo-edges: `resolve_pseudo_edges` recomputes them for every part of the graph that changed. `pseudo_edge_pairs` returns them as `(src, dest)` pairs.
- `ojo.consistency` holds the changes and the checks:
  - The change types are `NewNode`, `DeleteNode` and `NewEdge`.
  - `ChangeSet` applies a patch's changes to a `GraggleData` and undoes them.
  - `expected_pseudo_edges` computes the correct pseudo-edges leaving a node by brute force.
  - `check_consistent` checks every invariant of a graggle and raises `AssertionError` on the first one that is violated.

## Example

```python
from ojo.edge import NodeId, PatchId
from ojo.graggle import GraggleData

g = GraggleData()
for n in (0, 1, 2):
    g.add_node(NodeId.cur(n))
g.add_edge(NodeId.cur(0), NodeId.cur(1), PatchId.cur())
g.add_edge(NodeId.cur(1), NodeId.cur(2), PatchId.cur())

g.delete_node(NodeId.cur(1))
g.resolve_pseudo_edges()
print({(s.node, d.node) for s, d in g.pseudo_edge_pairs()})   # {(0, 2)}
```

Changes can be bundled into a `ChangeSet`, then applied and undone:

```python
from ojo.consistency import ChangeSet, DeleteNode, check_consistent

before = g.copy()
changes = ChangeSet([DeleteNode(NodeId.cur(0))], PatchId.cur())
changes.apply(g)
g.resolve_pseudo_edges()
check_consistent(g)

changes.unapply(g)
g.resolve_pseudo_edges()
assert g == before
```

Splitting bytes into a file:

```python
from ojo.file import File

f = File.from_bytes(b"first\nsecond\n")
print(f.num_nodes())   # 2
print(f.node(1))       # b'second\n'
```

## What this package does not do

This package is the in-memory graggle and nothing else. It does not provide:

- a command-line tool;
- a repository on disk;
- branches;
- hashing or storing patches;
- computing a diff between a file and a graggle;
- rendering a graggle back into a file;
- interactive conflict resolution.

Patch ids and node contents are supplied by the caller.