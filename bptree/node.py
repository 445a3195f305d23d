"""Nodes of a B+ tree keyed by integers."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Optional, TypeVar

V = TypeVar("V")


class NodeType(Enum):
    """Role of a node inside the tree."""

    ROOT = "root"
    INTERNAL = "internal"
    LEAF = "leaf"


@dataclass(eq=False)
class Node(Generic[V]):
    """A B+ tree node.

    Internal and root nodes hold separator keys and children; leaves hold
    keys with their values and are chained through ``prev`` and ``next``.
    """

    type: NodeType = NodeType.LEAF
    keys: list[int] = field(default_factory=list)
    vals: list[V] = field(default_factory=list)
    children: list[Node[V]] = field(default_factory=list, repr=False)
    parent: Optional[Node[V]] = field(default=None, repr=False)
    prev: Optional[Node[V]] = field(default=None, repr=False)
    next: Optional[Node[V]] = field(default=None, repr=False)

    @property
    def size(self) -> int:
        """Number of keys held by the node."""
        return len(self.keys)

    @property
    def is_leaf(self) -> bool:
        return self.type is NodeType.LEAF

    # ------------------------------------------------------------------
    # Key lookups

    def find_key(self, key: int) -> Optional[int]:
        """Return the position of ``key`` in this node, or None if absent."""
        index = bisect_left(self.keys, key)
        if index < len(self.keys) and self.keys[index] == key:
            return index
        return None

    def key_insert_index(self, key: int) -> int:
        """Return the position of the first key greater than ``key``."""
        return bisect_right(self.keys, key)

    def index_of_child(self, child: Node[V]) -> Optional[int]:
        """Return the position of ``child`` among the children, or None."""
        return next((i for i, c in enumerate(self.children) if c is child), None)

    # ------------------------------------------------------------------
    # Removal

    def remove_from_leaf(self, key: int) -> None:
        """Drop ``key`` from this leaf, refreshing the parent's separator."""
        index = self.find_key(key)
        if index is None:
            return
        del self.keys[index]
        del self.vals[index]

        if self.parent is not None and index == 0 and self.keys:
            child_index = self.parent.index_of_child(self)
            if child_index is not None and child_index > 0:
                self.parent.keys[child_index - 1] = self.keys[0]

    def remove_from_internal(self, key: int) -> None:
        """Replace separator ``key`` with the smallest key to its right."""
        index = self.find_key(key)
        if index is None:
            return
        leaf = self.children[index + 1]
        while not leaf.is_leaf:
            leaf = leaf.children[0]
        if leaf.keys:
            self.keys[index] = leaf.keys[0]

    # ------------------------------------------------------------------
    # Leaf rebalancing

    def borrow_from_right_leaf(self) -> None:
        """Move the first entry of the next leaf into this one."""
        sibling = self.next
        self.keys.append(sibling.keys.pop(0))
        self.vals.append(sibling.vals.pop(0))

        parent = sibling.parent
        if parent is None or not sibling.keys:
            return
        sibling_index = parent.index_of_child(sibling)
        if sibling_index is not None and sibling_index > 0:
            parent.keys[sibling_index - 1] = sibling.keys[0]
        own_index = parent.index_of_child(self)
        if (
            own_index is not None
            and own_index + 1 < len(parent.children)
            and parent.children[own_index + 1] is sibling
        ):
            parent.keys[own_index] = sibling.keys[0]

    def borrow_from_left_leaf(self) -> None:
        """Move the last entry of the previous leaf into this one."""
        sibling = self.prev
        self.keys.insert(0, sibling.keys.pop())
        self.vals.insert(0, sibling.vals.pop())

        if self.parent is not None:
            child_index = self.parent.index_of_child(self)
            if child_index is not None and child_index > 0:
                self.parent.keys[child_index - 1] = self.keys[0]

    def merge_with_right_leaf(self) -> None:
        """Absorb the next leaf and unlink it from the tree."""
        sibling = self.next
        parent = sibling.parent
        for key, val in zip(sibling.keys, sibling.vals):
            self.set(key, val)

        self.next = sibling.next
        if self.next is not None:
            self.next.prev = self

        if parent is not None:
            child_index = parent.index_of_child(sibling)
            if child_index is not None:
                own_index = parent.index_of_child(self)
                if own_index is not None and own_index + 1 == child_index:
                    key_index = own_index
                else:
                    key_index = child_index - 1
                if 0 <= key_index < len(parent.keys):
                    del parent.keys[key_index]
                    del parent.children[child_index]

        sibling._release()

    def merge_with_left_leaf(self) -> None:
        """Pour this leaf into the previous one and unlink it."""
        sibling = self.prev
        parent = self.parent
        for key, val in zip(list(self.keys), list(self.vals)):
            sibling.set(key, val)

        sibling.next = self.next
        if sibling.next is not None:
            sibling.next.prev = sibling

        if parent is not None:
            child_index = parent.index_of_child(self)
            if child_index is not None:
                key_index = child_index - 1
                if 0 <= key_index < len(parent.keys):
                    del parent.keys[key_index]
                    del parent.children[child_index]

        self._release()

    # ------------------------------------------------------------------
    # Internal rebalancing

    def borrow_from_right_internal(self, sibling: Node[V]) -> None:
        """Rotate one key and child from the right sibling through the parent."""
        parent = self.parent
        child_index = parent.index_of_child(self)
        self.keys.append(parent.keys[child_index])
        parent.keys[child_index] = sibling.keys.pop(0)

        child = sibling.children.pop(0)
        self.children.append(child)
        child.parent = self

    def borrow_from_left_internal(self, sibling: Node[V]) -> None:
        """Rotate one key and child from the left sibling through the parent."""
        parent = self.parent
        child_index = parent.index_of_child(self)
        self.keys.insert(0, parent.keys[child_index - 1])
        parent.keys[child_index - 1] = sibling.keys.pop()

        child = sibling.children.pop()
        self.children.insert(0, child)
        child.parent = self

    def merge_with_right_internal(self, sibling: Node[V]) -> None:
        """Absorb the right sibling together with the separating parent key."""
        parent = self.parent
        child_index = parent.index_of_child(self)
        self.keys.append(parent.keys.pop(child_index))
        del parent.children[child_index + 1]

        self.keys.extend(sibling.keys)
        for child in sibling.children:
            self.children.append(child)
            child.parent = self

        sibling._release()

    def merge_with_left_internal(self, sibling: Node[V]) -> None:
        """Pour this node, with the separating parent key, into the left sibling."""
        parent = self.parent
        child_index = parent.index_of_child(self)
        sibling.keys.append(parent.keys.pop(child_index - 1))
        del parent.children[child_index]

        sibling.keys.extend(self.keys)
        for child in self.children:
            sibling.children.append(child)
            child.parent = sibling

        self._release()

    # ------------------------------------------------------------------
    # Insertion and splitting

    def set(self, key: int, val: V) -> None:
        """Store ``val`` under ``key``, keeping keys in order."""
        index = self.find_key(key)
        if index is not None:
            self.vals[index] = val
            return
        index = self.key_insert_index(key)
        self.keys.insert(index, key)
        self.vals.insert(index, val)

    def split_node(self) -> Optional[Node[V]]:
        """Split this node in two around its middle key.

        The middle key moves up into the parent. If there is no parent a new
        root is created and returned; otherwise None is returned.
        """
        split_at = self.size // 2
        separator = self.keys[split_at]

        if self.is_leaf:
            sibling = self._split_leaf(split_at)
        else:
            sibling = self._split_internal(split_at)

        if self.parent is not None:
            parent = self.parent
            index = parent.key_insert_index(separator)
            parent.keys.insert(index, separator)
            parent.children.insert(index + 1, sibling)
            sibling.parent = parent
            return None

        new_root: Node[V] = Node(
            type=NodeType.ROOT, keys=[separator], children=[self, sibling]
        )
        if self.type is NodeType.ROOT:
            self.type = NodeType.INTERNAL
        self.parent = new_root
        sibling.parent = new_root
        return new_root

    def _split_leaf(self, split_at: int) -> Node[V]:
        sibling: Node[V] = Node(
            type=NodeType.LEAF,
            keys=self.keys[split_at:],
            vals=self.vals[split_at:],
            prev=self,
            next=self.next,
        )
        self.next = sibling
        if sibling.next is not None:
            sibling.next.prev = sibling
        del self.keys[split_at:]
        del self.vals[split_at:]
        return sibling

    def _split_internal(self, split_at: int) -> Node[V]:
        sibling: Node[V] = Node(
            type=NodeType.INTERNAL,
            keys=self.keys[split_at + 1:],
            children=self.children[split_at + 1:],
        )
        for child in sibling.children:
            child.parent = sibling
        del self.keys[split_at:]
        del self.children[split_at + 1:]
        return sibling

    def _release(self) -> None:
        self.keys.clear()
        self.vals.clear()
        self.children.clear()
        self.parent = None
        self.prev = None
        self.next = None