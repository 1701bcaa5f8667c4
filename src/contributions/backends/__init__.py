"""Backends for decision tree output (when-clause strings, DOT)."""

from .dot_generator import DotMode, generate_dot, save_dot_file
from .when_clause import iter_clauses, serialize_tree

__all__ = ["DotMode", "generate_dot", "save_dot_file", "iter_clauses", "serialize_tree"]
