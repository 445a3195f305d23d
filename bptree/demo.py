"""Small demonstration of building, querying and shrinking a tree."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from bptree.tree import BTree

_ENTRIES = [
    (1, "one"),
    (2, "two"),
    (3, "three"),
    (4, "four"),
    (5, "five"),
    (6, "six"),
    (7, "seven"),
    (9, "nine"),
    (11, "eleven"),
    (8, "eight"),
    (10, "ten"),
]

_REMOVED = [1, 5, 3, 8]


def _report(tree: BTree[str], key: int) -> None:
    value = tree.find(key)
    if value is not None:
        print(f"Key {key}: {value}")
    else:
        print(f"Key {key} not found")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the demonstration and return the exit status."""
    parser = argparse.ArgumentParser(
        description="Build a B+ tree of degree 6, query it and remove a few keys."
    )
    parser.parse_args(argv)

    tree: BTree[str] = BTree(6)

    print("Inserting values into B-tree...")
    for key, value in _ENTRIES:
        tree.set(key, value)

    print("\nB-tree structure after insertions:")
    tree.print_tree()

    print("\nTesting find operations:")
    _report(tree, 5)
    _report(tree, 15)

    print(f"\nRemoving keys: {', '.join(str(key) for key in _REMOVED)}")
    for key in _REMOVED:
        tree.remove(key)

    print("\nB-tree structure after removals:")
    tree.print_tree()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())