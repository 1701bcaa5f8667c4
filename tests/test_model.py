"""
Tests for the decision tree model objects.

These tests verify:
    - Atom immutability and equality
    - Branch access on decision nodes
    - Tree walks and the resolution check
"""

import pytest

from contributions.model import Atom, Branch, DecisionNode, DecisionTree


class TestAtom:

    def test_create_atom(self):
        atom = Atom("a == 42", 1, key="a")
        assert atom.text == "a == 42"
        assert atom.depth == 1
        assert atom.key == "a"

    def test_atom_immutable(self):
        atom = Atom("a", 1)
        with pytest.raises(AttributeError):
            atom.text = "b"

    def test_key_does_not_affect_equality(self):
        assert Atom("a", 1, key="a") == Atom("a", 1)
        assert Atom("a", 1) != Atom("a", 2)


class TestDecisionNode:

    def test_new_node_is_unresolved(self):
        node = DecisionNode(Atom("a", 1))
        assert node.true_branch is Branch.UNRESOLVED
        assert node.false_branch is Branch.UNRESOLVED
        assert node.children() == []

    def test_set_and_get_branch(self):
        node = DecisionNode(Atom("a", 1))
        child = DecisionNode(Atom("b", 2))
        node.set_branch(True, child)
        node.set_branch(False, False)
        assert node.branch(True) is child
        assert node.branch(False) is False
        assert node.children() == [child]

    def test_root_detection(self):
        assert DecisionTree().root.is_root
        assert not DecisionNode(Atom("a", 1)).is_root


def build_tree():
    """a ? (b == 1) : (a == 2 && d == 4), as the compiler would record it."""
    tree = DecisionTree()
    a = DecisionNode(Atom("a", 1, key="a"))
    b = DecisionNode(Atom("b == 1", 2, key="b"))
    a2 = DecisionNode(Atom("a == 2", 2, key="a"))
    d = DecisionNode(Atom("d == 4", 3, key="d"))
    tree.root.true_branch = a
    a.true_branch, a.false_branch = b, a2
    b.true_branch, b.false_branch = True, False
    a2.true_branch, a2.false_branch = d, False
    d.true_branch, d.false_branch = True, False
    return tree


class TestDecisionTree:

    def test_empty_tree(self):
        tree = DecisionTree()
        assert list(tree.nodes()) == []
        assert tree.max_depth == 0
        assert not tree.is_resolved()

    def test_nodes_breadth_first(self):
        tree = build_tree()
        assert [n.atom.text for n in tree.nodes()] == ["a", "b == 1", "a == 2", "d == 4"]

    def test_atom_texts_and_keys(self):
        tree = build_tree()
        assert tree.atom_texts() == ["a", "b == 1", "a == 2", "d == 4"]
        assert tree.context_keys() == ["a", "b", "d"]

    def test_max_depth(self):
        assert build_tree().max_depth == 3

    def test_is_resolved(self):
        tree = build_tree()
        assert tree.is_resolved()
        tree.root.true_branch.false_branch.false_branch = Branch.UNRESOLVED
        assert not tree.is_resolved()

    def test_leaves(self):
        assert sorted(build_tree().leaves()) == [False, False, False, True, True]
