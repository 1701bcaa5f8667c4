#!/usr/bin/env python3
"""
Demo: compile when() functions, analyze them, and build the example manifest.
"""

import json

from contributions import when
from contributions.analyzer import analyze_when
from contributions.backends import DotMode, generate_dot
from contributions.examples import build_example_contributions
from contributions.serialization import package_json_to_yaml


def show_in_explorer(c):
    if c["explorerViewletVisible"].truthy():
        return c["resourceScheme"].equals("file") or c["resourceScheme"].equals("vscode-remote")
    return c["view"].equals("workbench.explorer.fileView") and not c["listMultiSelection"].truthy()


def main():
    print("=" * 80)
    print("WHEN COMPILER DEMO")
    print("=" * 80)

    expression = when(show_in_explorer)
    report = analyze_when(expression)

    print(f"\nClause:   {report.clause}")
    print(f"Passes:   {report.passes}")
    print(f"Atoms:    {report.atom_count} ({', '.join(report.distinct_atoms)})")
    print(f"Depth:    {report.max_depth}/{report.max_atoms}")
    for warning in report.warnings:
        print(f"Warning:  {warning}")

    print("\nDECISION TREE (DOT):")
    print("-" * 80)
    print(generate_dot(expression.explore(), mode=DotMode.DETAILED))

    contributions = build_example_contributions()
    print("\nMANIFEST (JSON):")
    print("-" * 80)
    print(json.dumps(contributions.to_json(), indent=2))

    print("\nMANIFEST (YAML):")
    print("-" * 80)
    print(package_json_to_yaml(contributions.package_json()))


if __name__ == "__main__":
    main()
