"""
When Analyzer: diagnostics for compiled when() expressions.

This module provides lightweight analysis of an explored DecisionTree:
    - Predicate inventory (atoms, context keys)
    - Tree shape (depth, node and leaf counts)
    - Output size (clause count, clause length)
    - Warning flags for expressions that are constant or close to capacity

IMPORTANT: This is read-only. It never changes the tree and never calls the
predicate function again.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from contributions.backends.when_clause import iter_clauses, serialize_tree
from contributions.config import CompilerSettings, load_settings
from contributions.model import DecisionTree
from contributions.when import WhenExpression

# Warn once a path uses this share of the available depth.
CAPACITY_WARNING_RATIO = 0.75


@dataclass
class WhenReport:
    """Analysis report for one when() expression."""

    clause: str
    passes: int = 0

    # Predicate inventory
    atom_count: int = 0
    distinct_atoms: List[str] = field(default_factory=list)
    context_keys: List[str] = field(default_factory=list)
    key_usage: Dict[str, int] = field(default_factory=dict)

    # Tree shape
    max_depth: int = 0
    max_atoms: int = 0
    true_leaves: int = 0
    false_leaves: int = 0

    # Output
    clause_count: int = 0
    longest_clause: int = 0

    always_true: bool = False
    always_false: bool = False

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_tree(tree: DecisionTree, settings: Optional[CompilerSettings] = None) -> WhenReport:
    """
    Build a WhenReport from an already explored tree.

    Args:
        tree: DecisionTree returned by WhenExpression.explore()
        settings: Settings the tree was explored with (for the capacity check)
    """
    settings = settings or load_settings()
    clauses = list(iter_clauses(tree))
    report = WhenReport(clause=serialize_tree(tree), max_atoms=settings.max_atoms)

    # =========================================================================
    # 1. PREDICATE INVENTORY
    # =========================================================================

    atoms = tree.atoms()
    report.atom_count = len(atoms)
    report.distinct_atoms = tree.atom_texts()
    report.context_keys = tree.context_keys()
    report.key_usage = dict(Counter(atom.key for atom in atoms))

    # =========================================================================
    # 2. TREE SHAPE
    # =========================================================================

    report.max_depth = tree.max_depth
    leaves = tree.leaves()
    report.true_leaves = sum(1 for leaf in leaves if leaf)
    report.false_leaves = len(leaves) - report.true_leaves

    # =========================================================================
    # 3. OUTPUT
    # =========================================================================

    report.clause_count = len(clauses)
    report.longest_clause = max((len(c) for c in clauses), default=0)
    report.always_false = report.true_leaves == 0
    report.always_true = report.false_leaves == 0 and report.true_leaves > 0

    # =========================================================================
    # 4. WARNING FLAGS
    # =========================================================================

    if report.always_false:
        report.add_warning("Expression is never true; the compiled clause is empty")

    if report.always_true:
        report.add_warning("Expression is always true; the compiled clause is 'true'")

    if report.max_depth >= settings.max_atoms * CAPACITY_WARNING_RATIO:
        report.add_warning(
            f"Deepest path reads {report.max_depth} of {settings.max_atoms} allowed predicates"
        )

    repeated = sorted(text for text, n in Counter(a.text for a in atoms).items() if n > 1)
    for text in repeated:
        depths = sorted({a.depth for a in atoms if a.text == text})
        if len(depths) > 1:
            report.add_warning(f"Predicate {text!r} is read at several depths: {depths}")

    return report


def analyze_when(expression: WhenExpression) -> WhenReport:
    """
    Explore an expression and analyze the result.

    Raises whatever WhenExpression.explore() raises.
    """
    tree = expression.explore()
    report = analyze_tree(tree, expression.settings)
    report.passes = expression.passes
    return report
