import io
import random

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from bptree.tree import BTree, InvalidDegree, KeyNotFound, TreeCorrupted


def leaf_keys(tree):
    node = tree.root
    while not node.is_leaf:
        node = node.children[0]
    keys = []
    while node is not None:
        keys.extend(node.keys)
        node = node.next
    return keys


def test_basic_operations():
    tree = BTree(4)
    assert tree.is_empty()
    assert tree.find(1) is None

    tree.set(5, "five")
    assert not tree.is_empty()
    assert tree.find(5) == "five"

    tree.set(3, "three")
    tree.set(7, "seven")
    tree.set(1, "one")
    tree.set(9, "nine")

    assert tree.find(3) == "three"
    assert tree.find(10) is None


def test_overwrite_values():
    tree = BTree(4)
    tree.set(5, "five")
    tree.set(5, "FIVE")
    assert tree.find(5) == "FIVE"


def test_deletion_operations():
    tree = BTree(4)
    for key in range(1, 11):
        tree.set(key, f"value_{key}")

    tree.remove(5)
    assert tree.find(5) is None
    assert tree.find(4) == "value_4"

    tree.remove(1)
    tree.remove(10)
    tree.remove(3)

    assert tree.find(1) is None
    assert tree.find(10) is None
    assert tree.find(3) is None
    assert tree.find(2) == "value_2"
    assert leaf_keys(tree) == [2, 4, 6, 7, 8, 9]


def test_large_dataset():
    tree = BTree(6)
    num_elements = 1000
    for i in range(1, num_elements + 1):
        tree.set(i, i * 10)

    assert all(tree.find(i) == i * 10 for i in range(1, num_elements + 1))
    assert tree.depth > 1

    for i in range(1, num_elements + 1, 2):
        tree.remove(i)

    found = [tree.find(i) for i in range(1, num_elements + 1)]
    expected = [None if i % 2 == 1 else i * 10 for i in range(1, num_elements + 1)]
    assert found == expected
    assert leaf_keys(tree) == list(range(2, num_elements + 1, 2))


@pytest.mark.parametrize("seed", range(6))
def test_random_operations(seed):
    rng = random.Random(seed)
    tree = BTree(5)
    inserted = []
    for _ in range(50):
        key = rng.randint(1, 100)
        tree.set(key, f"val_{key}")
        if key not in inserted:
            inserted.append(key)

    assert [tree.find(key) for key in inserted] == [f"val_{key}" for key in inserted]

    rng.shuffle(inserted)
    to_delete = len(inserted) // 2
    deleted = inserted[:to_delete]
    remaining = inserted[to_delete:]
    for key in deleted:
        tree.remove(key)

    assert [tree.find(key) for key in remaining] == [f"val_{key}" for key in remaining]
    assert [tree.find(key) for key in deleted] == [None] * len(deleted)
    assert leaf_keys(tree) == sorted(remaining)


@pytest.mark.parametrize("degree", [3, 4, 5, 6, 10, 20])
def test_different_degrees(degree):
    tree = BTree(degree)
    for i in range(1, 21):
        tree.set(i, i * i)
    assert all(tree.find(i) == i * i for i in range(1, 21))
    assert leaf_keys(tree) == list(range(1, 21))


def test_edge_cases():
    tree = BTree(3)
    tree.remove(999)
    assert tree.is_empty()
    assert tree.find(999) is None

    tree.set(5, "five")
    tree.remove(5)
    tree.remove(5)
    assert tree.find(5) is None

    small = BTree(2)
    for i in range(1, 11):
        small.set(i, i)
    assert all(small.find(i) == i for i in range(1, 11))


@pytest.mark.parametrize("degree", [1, 0, -3])
def test_invalid_degree(degree):
    with pytest.raises(InvalidDegree) as info:
        BTree(degree)
    assert str(info.value) == f"Invalid B-tree degree: {degree}"
    assert info.value.degree == degree


def test_getitem_and_contains():
    tree = BTree(4)
    tree.set(7, "seven")
    assert tree[7] == "seven"
    assert 7 in tree
    assert 8 not in tree
    assert "7" not in tree
    with pytest.raises(KeyNotFound) as info:
        tree[8]
    assert str(info.value) == "Key not found: 8"
    assert isinstance(info.value, KeyError)


def test_format_tree_after_insertions_and_removals():
    tree = BTree(6)
    for key, value in [(1, "one"), (2, "two"), (3, "three"), (4, "four"),
                       (5, "five"), (6, "six"), (7, "seven"), (9, "nine"),
                       (11, "eleven"), (8, "eight"), (10, "ten")]:
        tree.set(key, value)
    assert tree.format_tree() == (
        "├ [4, 7]\n"
        "   ├ [1, 2, 3]\n"
        "   ├ [4, 5, 6]\n"
        "   ├ [7, 8, 9, 10, 11]\n"
    )

    for key in (1, 5, 3, 8):
        tree.remove(key)
    assert tree.format_tree() == (
        "├ [7]\n"
        "   ├ [2, 4, 6]\n"
        "   ├ [7, 9, 10, 11]\n"
    )


def test_format_empty_tree():
    assert BTree(4).format_tree() == "├ []\n"


def test_print_tree_writes_format():
    tree = BTree(3)
    for i in range(1, 15):
        tree.set(i, str(i))
    out = io.StringIO()
    tree.print_tree(out)
    assert out.getvalue() == tree.format_tree()
    assert "╎  " in out.getvalue()


def test_print_tree_defaults_to_stdout(capsys):
    tree = BTree(4)
    tree.set(1, "one")
    tree.print_tree()
    assert capsys.readouterr().out == tree.format_tree()


def test_clear_resets_tree():
    tree = BTree(3)
    for i in range(30):
        tree.set(i, i)
    tree.clear()
    assert tree.is_empty()
    assert tree.depth == 1
    assert tree.find(5) is None
    tree.set(5, 50)
    assert tree.find(5) == 50


def test_depth_shrinks_back_to_one():
    tree = BTree(3)
    for i in range(1, 10):
        tree.set(i, i)
    assert tree.depth > 1
    for i in range(1, 10):
        tree.remove(i)
    assert all(tree.find(i) is None for i in range(1, 10))


def test_corrupted_tree_detected():
    tree = BTree(3)
    for i in range(1, 10):
        tree.set(i, i)
    tree.root.children.pop()
    with pytest.raises(TreeCorrupted) as info:
        tree.find(100)
    assert str(info.value).startswith("Tree corruption detected: ")


@settings(max_examples=60, deadline=None)
@given(
    degree=st.integers(min_value=2, max_value=8),
    entries=st.lists(st.tuples(st.integers(-500, 500), st.integers()), max_size=120),
)
def test_insert_round_trip(degree, entries):
    tree = BTree(degree)
    expected = {}
    for key, value in entries:
        tree.set(key, value)
        expected[key] = value
    assert {key: tree.find(key) for key in expected} == expected
    assert leaf_keys(tree) == sorted(expected)
    assert tree.is_empty() == (not expected)