"""
When-clause backend.

Converts an explored DecisionTree into the flat expression grammar the host
rule evaluator parses:

    a && b == 1 || a && c == 2 && c == 4 || !a && a == 2 && d == 4

Grammar:
    - atoms: `key == value`, `key ~= pattern`, bare `key`
    - negation: prefix `!`
    - conjunction: `&&`, disjunction: `||`
    - NO parentheses; the evaluator binds `&&` tighter than `||`

Each clause is one path to a True leaf. The traversal uses an explicit
stack, so a path as deep as the compiler allows never touches the
recursion limit.
"""

from typing import Iterator, List, Tuple

from contributions.model import Branch, DecisionNode, DecisionTree

AND = " && "
OR = " || "
TRUE = "true"


def _literal(node: DecisionNode, outcome: bool) -> str:
    return node.atom.text if outcome else f"!{node.atom.text}"


def iter_clauses(tree: DecisionTree) -> Iterator[str]:
    """
    Yield one conjunction per satisfying path, in depth-first order.

    Rules at each node:
        - both branches True: the test is irrelevant, the path so far is a clause
        - a branch is True: the path plus that branch's literal is a clause
        - a branch is False: nothing
        - a branch is a node: its clauses, prefixed by this node's literal
          unless the opposite branch is True (`x || !x && y` is `x || y`)

    The synthetic root contributes no literal. Calling again restarts the walk.
    """
    start = tree.root.true_branch
    if start is Branch.UNRESOLVED or start is False:
        return
    if start is True:
        yield ""
        return

    stack: List[Tuple[DecisionNode, Tuple[str, ...]]] = [(start, ())]
    while stack:
        node, prefix = stack.pop()
        t, f = node.true_branch, node.false_branch

        if t is True and f is True:
            yield AND.join(prefix)
            continue

        include_self = t is not True and f is not True
        if t is True:
            yield AND.join(prefix + (_literal(node, True),))
        elif f is True:
            yield AND.join(prefix + (_literal(node, False),))

        pending = []
        for outcome, child in ((True, t), (False, f)):
            if isinstance(child, DecisionNode):
                nested = prefix + (_literal(node, outcome),) if include_self else prefix
                pending.append((child, nested))
        # true side is explored first
        stack.extend(reversed(pending))


def serialize_tree(tree: DecisionTree) -> str:
    """
    Join every clause of the tree into one when-clause.

    Returns:
        "" if no path returns True, "true" if some clause is unconditional,
        otherwise the clauses joined with " || "
    """
    clauses = []
    for clause in iter_clauses(tree):
        if not clause:
            return TRUE
        clauses.append(clause)
    return OR.join(clauses)


__all__ = ["iter_clauses", "serialize_tree"]
