# bptree

An in-memory B+ tree that maps integer keys to values of any type. All
values are stored in the leaves, and the leaves are linked to one another.
Inner nodes hold only separator keys. A node that reaches the tree's degree
in keys is split. A node that falls below half the degree in keys after a
removal borrows from a sibling or merges with one.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Usage

```python
from bptree.tree import BTree, KeyNotFound

tree = BTree(6)          # degree (default 6); a node splits once it holds this many keys

tree.set(1, "one")
tree.set(2, "two")
tree.set(2, "TWO")       # overwrites the existing value

tree.find(2)             # -> "TWO"
tree.find(15)            # -> None
2 in tree                # -> True
tree[1]                  # -> "one"

try:
    tree[15]
except KeyNotFound as exc:
    print(exc)           # Key not found: 15

tree.remove(1)           # removing a missing key does nothing
tree.is_empty()          # -> False

print(tree.format_tree())
tree.print_tree()        # writes the same picture to standard output, or to file=...

tree.clear()             # back to a single empty leaf
```

A degree below 2 passed to `BTree` raises `InvalidDegree`, a `ValueError`.
`KeyNotFound` is a `KeyError`. `TreeCorrupted` is raised when a lookup
descends into an inner node that has no child at the position it needs.

`format_tree()` draws one node per line, with its keys in brackets. Child
nodes are indented under their parent. After inserting the keys 1 to 11
into a tree of degree 6, it gives:

```
├ [4, 7]
   ├ [1, 2, 3]
   ├ [4, 5, 6]
   ├ [7, 8, 9, 10, 11]
```

The lower-level building block is `bptree.node.Node`, together with the
`NodeType` enumeration (`ROOT`, `INTERNAL`, `LEAF`). A `Node` supports key
lookup (`find_key`, `key_insert_index`, `index_of_child`) and `set`. It can
split itself with `split_node`. It also provides the borrow and merge steps
for leaves and inner nodes, and `BTree` is built from these steps.

## Demo

```
bptree-demo
```

The demo can also be run with `python -m bptree.demo`. It builds a tree of
degree 6 and inserts the keys 1 to 11, then prints the tree. It looks up
keys 5 and 15, removes 1, 5, 3 and 8, and prints the tree again.

## Limits

The tree lives only in memory. Nothing is saved to disk, and keys must be
integers.