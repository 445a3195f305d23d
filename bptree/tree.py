"""A B+ tree mapping integer keys to values."""

from __future__ import annotations

import sys
from typing import Generic, Iterator, Optional, TextIO, TypeVar

from bptree.node import Node, NodeType

V = TypeVar("V")

DEFAULT_DEGREE = 6

TREE_NODE_SYMBOL = "├ "
TREE_PREFIX_LAST = "   "
TREE_PREFIX_CONT = "╎  "


class InvalidDegree(ValueError):
    """Raised when a tree is created with a degree it cannot work with."""

    def __init__(self, degree: int) -> None:
        super().__init__(f"Invalid B-tree degree: {degree}")
        self.degree = degree


class KeyNotFound(KeyError):
    """Raised when a key is looked up that the tree does not hold."""

    def __init__(self, key: int) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Key not found: {self.key}"


class TreeCorrupted(RuntimeError):
    """Raised when the tree's structure is found to be broken."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Tree corruption detected: {message}")


class BTree(Generic[V]):
    """A B+ tree whose nodes split once they hold ``degree`` keys."""

    def __init__(self, degree: int = DEFAULT_DEGREE) -> None:
        if degree < 2:
            raise InvalidDegree(degree)
        self.degree = degree
        self.depth = 1
        self.root: Node[V] = Node(type=NodeType.LEAF)

    # ------------------------------------------------------------------
    # Lookup

    def _find_leaf(self, key: int) -> Node[V]:
        node = self.root
        while not node.is_leaf:
            index = node.key_insert_index(key)
            try:
                node = node.children[index]
            except IndexError as exc:
                raise TreeCorrupted(
                    f"node {node.keys} has no child at position {index}"
                ) from exc
        return node

    def find(self, key: int) -> Optional[V]:
        """Return the value stored under ``key``, or None if there is none."""
        leaf = self._find_leaf(key)
        index = leaf.find_key(key)
        if index is None:
            return None
        return leaf.vals[index]

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, int):
            return False
        leaf = self._find_leaf(key)
        return leaf.find_key(key) is not None

    def __getitem__(self, key: int) -> V:
        leaf = self._find_leaf(key)
        index = leaf.find_key(key)
        if index is None:
            raise KeyNotFound(key)
        return leaf.vals[index]

    # ------------------------------------------------------------------
    # Insertion

    def set(self, key: int, val: V) -> None:
        """Store ``val`` under ``key``, replacing any earlier value."""
        node: Optional[Node[V]] = self._find_leaf(key)
        existed = node.find_key(key) is not None
        node.set(key, val)
        if existed:
            return

        while node is not None and node.size >= self.degree:
            new_root = node.split_node()
            if new_root is not None:
                self.depth += 1
                self.root = new_root
            node = node.parent

    # ------------------------------------------------------------------
    # Removal

    def remove(self, key: int) -> None:
        """Remove ``key`` from the tree; a missing key is ignored."""
        node: Optional[Node[V]] = self._find_leaf(key)
        if node.find_key(key) is None:
            return

        min_capacity = self.degree // 2
        while node is not None:
            if node.is_leaf:
                node.remove_from_leaf(key)
            else:
                node.remove_from_internal(key)

            if node.size < min_capacity:
                node = self._rebalance(node, min_capacity)

            node = node.parent if node is not None else None

    def _rebalance(self, node: Node[V], min_capacity: int) -> Optional[Node[V]]:
        """Fix an underfull node; return the node the walk upward continues from."""
        if node.type is NodeType.ROOT:
            return self._collapse_root(node)
        if node.type is NodeType.INTERNAL:
            return self._rebalance_internal(node, min_capacity)
        return self._rebalance_leaf(node, min_capacity)

    def _collapse_root(self, node: Node[V]) -> Optional[Node[V]]:
        if node.size or not node.children:
            return node
        new_root = node.children[0]
        node._release()
        new_root.parent = None
        self.root = new_root
        self.depth -= 1
        new_root.type = NodeType.ROOT if self.depth > 1 else NodeType.LEAF
        return None

    @staticmethod
    def _rebalance_internal(node: Node[V], min_capacity: int) -> Node[V]:
        parent = node.parent
        index = parent.index_of_child(node)
        right = parent.children[index + 1] if index + 1 < len(parent.children) else None
        left = parent.children[index - 1] if index > 0 else None
        right_ok = right is not None and right.parent is parent
        left_ok = left is not None and left.parent is parent

        if right_ok and right.size > min_capacity:
            node.borrow_from_right_internal(right)
        elif left_ok and left.size > min_capacity:
            node.borrow_from_left_internal(left)
        elif right_ok:
            node.merge_with_right_internal(right)
        elif left_ok:
            node.merge_with_left_internal(left)
            return left
        return node

    @staticmethod
    def _rebalance_leaf(node: Node[V], min_capacity: int) -> Node[V]:
        parent = node.parent
        right = node.next
        left = node.prev
        right_ok = right is not None and right.parent is parent
        left_ok = left is not None and left.parent is parent

        if right_ok and right.size > min_capacity:
            node.borrow_from_right_leaf()
        elif left_ok and left.size > min_capacity:
            node.borrow_from_left_leaf()
        elif right_ok:
            node.merge_with_right_leaf()
        elif left_ok:
            node.merge_with_left_leaf()
            return left
        return node

    # ------------------------------------------------------------------
    # Display and housekeeping

    def _tree_lines(self, node: Node[V], prefix: str, last: bool) -> Iterator[str]:
        keys = ", ".join(str(key) for key in node.keys)
        yield f"{prefix}{TREE_NODE_SYMBOL}[{keys}]"
        child_prefix = prefix + (TREE_PREFIX_LAST if last else TREE_PREFIX_CONT)
        if not node.is_leaf:
            final = len(node.children) - 1
            for position, child in enumerate(node.children):
                yield from self._tree_lines(child, child_prefix, position == final)

    def format_tree(self) -> str:
        """Return the tree's structure as text, one node per line."""
        return "".join(line + "\n" for line in self._tree_lines(self.root, "", True))

    def print_tree(self, file: Optional[TextIO] = None) -> None:
        """Write the tree's structure to ``file`` (standard output by default)."""
        out = sys.stdout if file is None else file
        out.write(self.format_tree())

    def is_empty(self) -> bool:
        """Return True if the root holds no keys."""
        return self.root.size == 0

    def clear(self) -> None:
        """Drop every entry, leaving an empty tree."""
        self.root = Node(type=NodeType.LEAF)
        self.depth = 1