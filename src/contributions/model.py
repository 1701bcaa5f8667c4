"""
Decision Tree Model Objects

Defines the structure the when-clause compiler discovers while it runs a
predicate function under different truth assignments:
    - Atoms (one indivisible predicate test)
    - Decision nodes (an atom and its two outcomes)
    - Decision trees (the synthetic root and a read-only view of the nodes)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about the output grammar (belongs in backends)
        - Know nothing about how assignments are scheduled (belongs in when)
        - Record structure, not behavior
"""

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Union


@dataclass(frozen=True)
class Atom:
    """
    One indivisible predicate test.

    Examples:
        - "a == 42"   (equality)
        - "b ~= foo"  (pattern match)
        - "b"         (truthiness)

    Properties:
        text:
            Canonical rendering of the test, exactly as it appears in the
            compiled when-clause

        depth:
            Order in which the atom was first discovered along its path.
            The synthetic root is depth 0, the first predicate read is
            depth 1. Assigned once, at creation.

        key:
            Context key the test reads. Informational only; two atoms are
            the same test when text and depth match.
    """

    text: str
    depth: int
    key: str = field(default="", compare=False)


class Branch(Enum):
    """Marker for a branch that no execution has reached yet."""
    UNRESOLVED = "unresolved"


BranchValue = Union[Branch, bool, "DecisionNode"]


class DecisionNode:
    """
    A predicate test and the two positions that follow it.

    Each branch is one of:
        - Branch.UNRESOLVED: no execution has taken this outcome yet
        - True / False: the function returned without reading more predicates
        - DecisionNode: the next predicate the function read

    Nodes compare by identity; two nodes with the same atom at different
    positions are different nodes.
    """

    __slots__ = ("atom", "true_branch", "false_branch")

    def __init__(self, atom: Atom):
        self.atom = atom
        self.true_branch: BranchValue = Branch.UNRESOLVED
        self.false_branch: BranchValue = Branch.UNRESOLVED

    @property
    def depth(self) -> int:
        return self.atom.depth

    @property
    def is_root(self) -> bool:
        return self.atom.depth == 0

    def branch(self, outcome: bool) -> BranchValue:
        """Return the branch taken when this node's test evaluates to ``outcome``."""
        return self.true_branch if outcome else self.false_branch

    def set_branch(self, outcome: bool, value: BranchValue) -> None:
        if outcome:
            self.true_branch = value
        else:
            self.false_branch = value

    def children(self) -> List["DecisionNode"]:
        return [b for b in (self.true_branch, self.false_branch) if isinstance(b, DecisionNode)]

    def __repr__(self) -> str:
        return f"DecisionNode({self.atom.text!r}, depth={self.atom.depth})"


class DecisionTree:
    """
    Root container for everything one compile discovered.

    The synthetic root holds an empty atom at depth 0 and stands for
    "before any predicate has been read". The first predicate a function
    reads always lands on the root's true branch, so the root's false
    branch stays unresolved for the lifetime of the tree.

    INVARIANTS (after exploration):
        - Every node below the root has both branches resolved
        - Each position holds exactly one atom text
    """

    def __init__(self):
        self.root = DecisionNode(Atom("", 0))

    def nodes(self) -> Iterator[DecisionNode]:
        """Breadth-first walk over every node below the root."""
        queue = deque(self.root.children())
        while queue:
            node = queue.popleft()
            yield node
            queue.extend(node.children())

    def atoms(self) -> List[Atom]:
        return [node.atom for node in self.nodes()]

    def atom_texts(self) -> List[str]:
        """Distinct atom texts, in discovery order."""
        seen = {}
        for node in self.nodes():
            seen.setdefault(node.atom.text, None)
        return list(seen)

    def context_keys(self) -> List[str]:
        """Distinct context keys read by the function, in discovery order."""
        seen = {}
        for node in self.nodes():
            seen.setdefault(node.atom.key, None)
        return list(seen)

    @property
    def max_depth(self) -> int:
        return max((node.depth for node in self.nodes()), default=0)

    def is_resolved(self) -> bool:
        """True if the root's true branch and every branch below it are resolved."""
        if self.root.true_branch is Branch.UNRESOLVED:
            return False
        return all(
            node.true_branch is not Branch.UNRESOLVED and node.false_branch is not Branch.UNRESOLVED
            for node in self.nodes()
        )

    def leaves(self) -> List[bool]:
        """Terminal results in breadth-first order (including the root's)."""
        results = []
        for node in [self.root, *self.nodes()]:
            for value in (node.true_branch, node.false_branch):
                if isinstance(value, bool):
                    results.append(value)
        return results
