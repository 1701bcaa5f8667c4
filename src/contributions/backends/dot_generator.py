"""
Graphviz DOT diagram generator for when() decision trees.

Converts an explored DecisionTree into Graphviz DOT format, which makes it
easy to see why a function compiled to the clause it did.

Supports two modes:
    - SIMPLE: Predicate nodes and true/false edges
    - DETAILED: Also labels each node with its depth and the clauses below it
"""

from enum import Enum
from typing import Dict, List

from contributions.backends.when_clause import iter_clauses
from contributions.model import Branch, DecisionNode, DecisionTree


class DotMode(Enum):
    """Visualization modes for DOT output."""
    SIMPLE = "simple"
    DETAILED = "detailed"


def _escape_dot_string(s: str) -> str:
    """Escape special characters for DOT labels."""
    if not s:
        return '""'
    # Escape backslashes first
    s = s.replace('\\', '\\\\')
    s = s.replace('"', '\\"')
    s = s.replace('\n', '\\n')
    return f'"{s}"'


def _leaf_id(value: bool) -> str:
    return "TRUE" if value else "FALSE"


def generate_dot(tree: DecisionTree, mode: DotMode = DotMode.SIMPLE) -> str:
    """
    Generate Graphviz DOT format for a decision tree.

    Args:
        tree: Explored DecisionTree
        mode: Visualization mode (SIMPLE, DETAILED)

    Returns:
        String containing DOT graph definition
    """
    lines = []

    # Header
    lines.append("digraph when {")
    lines.append("  rankdir=TB;")
    lines.append("  node [shape=box, style=filled, fillcolor=lightblue];")

    # =========================================================================
    # NODES
    # =========================================================================

    lines.append('  ROOT [shape=ellipse, fillcolor=lightgrey, label="when"];')
    lines.append('  TRUE [shape=ellipse, fillcolor=lightgreen, label="true"];')
    lines.append('  FALSE [shape=ellipse, fillcolor=salmon, label="false"];')

    node_ids: Dict[int, str] = {id(tree.root): "ROOT"}
    nodes: List[DecisionNode] = list(tree.nodes())
    for index, node in enumerate(nodes, start=1):
        node_ids[id(node)] = f"n{index}"
        label = node.atom.text
        if mode == DotMode.DETAILED:
            label = f"{label}\ndepth {node.depth}"
        lines.append(f"  n{index} [label={_escape_dot_string(label)}];")

    # =========================================================================
    # EDGES
    # =========================================================================

    for node in [tree.root, *nodes]:
        source = node_ids[id(node)]
        for outcome in (True, False):
            target = node.branch(outcome)
            if target is Branch.UNRESOLVED:
                continue
            if isinstance(target, DecisionNode):
                target_id = node_ids[id(target)]
            else:
                target_id = _leaf_id(target)
            if node.is_root:
                lines.append(f"  {source} -> {target_id};")
            else:
                style = "solid" if outcome else "dashed"
                lines.append(f'  {source} -> {target_id} [label="{str(outcome).lower()}", style={style}];')

    if mode == DotMode.DETAILED:
        clauses = list(iter_clauses(tree))
        summary = "\n".join(clauses) if clauses else "(never true)"
        lines.append(f"  label={_escape_dot_string(summary)};")

    # Footer
    lines.append("}")

    return "\n".join(lines)


def save_dot_file(tree: DecisionTree, filename: str, mode: DotMode = DotMode.SIMPLE) -> None:
    """
    Generate DOT and save to file.

    Args:
        tree: DecisionTree to visualize
        filename: Output file path (.dot extension recommended)
        mode: Visualization mode
    """
    dot = generate_dot(tree, mode=mode)
    with open(filename, 'w') as f:
        f.write(dot)


__all__ = ["DotMode", "generate_dot", "save_dot_file"]
