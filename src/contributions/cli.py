"""
Command line for building manifests and compiling when-clauses.

Usage:
  python -m contributions manifest my_ext.contrib:contributions [--format json|yaml] [--merge package.json]
  python -m contributions compile my_ext.rules:show_refresh [--report] [--dot tree.dot]

TARGET is `module:attribute`. For `manifest` the attribute is a Contributions
object (or a function returning one); for `compile` it is a WhenExpression or
a plain predicate function. The current directory is importable.
"""

from __future__ import annotations

import argparse
import importlib
import json
import logging
import os
import sys
from typing import Any

from contributions.analyzer import analyze_when
from contributions.backends.dot_generator import DotMode, save_dot_file
from contributions.backends.when_clause import serialize_tree
from contributions.config import load_settings
from contributions.errors import ContributionsError
from contributions.registry import Contributions
from contributions.serialization import merge_package_json, package_json_to_yaml
from contributions.when import WhenExpression

logger = logging.getLogger("contributions.cli")


def load_target(target: str) -> Any:
    """Import `module:attribute` and return the attribute."""
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Target must look like 'module:attribute', got {target!r}")
    if os.getcwd() not in sys.path:
        sys.path.insert(0, os.getcwd())
    module = importlib.import_module(module_name)
    obj = module
    for part in attr.split("."):
        obj = getattr(obj, part)
    return obj


def manifest_command(args: argparse.Namespace) -> int:
    obj = load_target(args.target)
    contributions = obj() if callable(obj) else obj
    if not isinstance(contributions, Contributions):
        raise ValueError(f"{args.target} is not a Contributions object")

    if args.merge:
        merge_package_json(args.merge, contributions.to_json())
        print(f"Updated {args.merge}")
        return 0

    if args.format == "yaml":
        print(package_json_to_yaml(contributions.package_json()), end="")
    else:
        print(json.dumps(contributions.to_json(), indent=2))
    return 0


def compile_command(args: argparse.Namespace) -> int:
    obj = load_target(args.target)
    expression = obj if isinstance(obj, WhenExpression) else WhenExpression(obj, settings=load_settings())

    if args.report:
        report = analyze_when(expression)
        print(report.clause)
        print(f"passes: {report.passes}  atoms: {report.atom_count}  "
              f"depth: {report.max_depth}/{report.max_atoms}  clauses: {report.clause_count}")
        for warning in report.warnings:
            print(f"warning: {warning}")
    else:
        print(expression.compile())

    if args.dot:
        tree = expression.explore()
        save_dot_file(tree, args.dot, mode=DotMode.DETAILED)
        logger.info("Wrote %s for %r", args.dot, serialize_tree(tree))
    return 0


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="contributions", description="Build extension manifests and when-clauses.")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log compiler passes")
    sub = ap.add_subparsers(dest="command", required=True)

    mp = sub.add_parser("manifest", help="Print or merge the manifest fragment of a Contributions object")
    mp.add_argument("target", help="module:attribute of a Contributions object")
    mp.add_argument("--format", choices=["json", "yaml"], default="json", help="Output format")
    mp.add_argument("--merge", metavar="PACKAGE_JSON", help="Merge into this package.json instead of printing")
    mp.set_defaults(func=manifest_command)

    cp = sub.add_parser("compile", help="Compile a when() function to a clause")
    cp.add_argument("target", help="module:attribute of a WhenExpression or predicate function")
    cp.add_argument("--report", action="store_true", help="Print analysis of the decision tree")
    cp.add_argument("--dot", metavar="FILE", help="Also write the decision tree as Graphviz DOT")
    cp.set_defaults(func=compile_command)

    args = ap.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings()
        if not args.verbose:
            logging.getLogger().setLevel(settings.log_level)
        return args.func(args)
    except ContributionsError as e:
        logger.error("%s", e.message)
        if e.details:
            logger.error("details: %s", e.details)
        return 1
    except (ImportError, AttributeError, ValueError) as e:
        logger.error("%s", e)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
