"""
Tests for the when() analyzer.

Tests verify that the analyzer correctly:
    - Inventories atoms and context keys
    - Measures tree shape and clause output
    - Flags constant expressions and deep paths
"""

from contributions.analyzer import analyze_tree, analyze_when
from contributions.config import CompilerSettings
from contributions.when import when


def nested(c):
    if c["a"].truthy():
        return c["b"].equals(1) or (c["c"].equals(2) and c["c"].equals(4))
    return c["a"].equals(2) and c["d"].equals(4)


def test_nested_expression_inventory():
    report = analyze_when(when(nested))

    assert report.clause == "a && b == 1 || a && c == 2 && c == 4 || !a && a == 2 && d == 4"
    assert report.atom_count == 6
    assert report.context_keys == ["a", "b", "c", "d"]
    assert report.key_usage == {"a": 2, "b": 1, "c": 2, "d": 1}
    assert report.max_depth == 4
    assert report.clause_count == 3
    assert report.passes == 7
    assert report.warnings == []


def test_leaf_counts():
    report = analyze_when(when(lambda c: c["b"].truthy() and c["a"].equals(42)))
    assert report.true_leaves == 1
    assert report.false_leaves == 2
    assert not report.always_true
    assert not report.always_false


def test_never_true():
    report = analyze_when(when(lambda c: c["a"].truthy() and False))
    assert report.always_false
    assert report.clause == ""
    assert any("never true" in w for w in report.warnings)


def test_always_true():
    report = analyze_when(when(lambda c: True))
    assert report.always_true
    assert report.clause == "true"
    assert report.atom_count == 0
    assert any("always true" in w for w in report.warnings)


def test_deep_path_warning():
    settings = CompilerSettings(max_atoms=4)
    report = analyze_when(when(lambda c: all(c[k].truthy() for k in "abc"), settings=settings))
    assert report.max_atoms == 4
    assert any("3 of 4" in w for w in report.warnings)


def test_repeated_predicate_warning():
    report = analyze_when(when(lambda c: c["a"].truthy() and c["b"].truthy() and c["a"].truthy()))
    assert any("'a'" in w and "[1, 3]" in w for w in report.warnings)


def test_analyze_existing_tree():
    expression = when(lambda c: c["x"].truthy())
    tree = expression.explore()
    report = analyze_tree(tree)
    assert report.clause == "x"
    assert report.distinct_atoms == ["x"]
    assert report.longest_clause == 1
    # passes are only known when the analyzer runs the exploration itself
    assert report.passes == 0
