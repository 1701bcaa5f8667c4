"""
Declarative extension contributions.

Declare commands, menus and context keys in Python, and write menu
visibility rules as ordinary boolean functions. when() compiles those
functions into the flat `&&` / `||` / `!` clauses the host evaluates, by
running them under every reachable combination of predicate outcomes.

    from contributions import Contributions, CommandDescriptor, MenuItem, when

    contributions = Contributions()
    hello = contributions.command(CommandDescriptor(id="ext.hello", title="Hello"))
    contributions.menu("commandPalette").add(
        MenuItem(command=hello, when=when(lambda c: c["editorLangId"].equals("python")))
    )

The compiler itself lives in:
    model        decision tree data structures
    context_key  the accessor that intercepts predicate reads
    when         the exploration driver
    backends     clause serialization and DOT rendering
"""

import logging

from .command import Command, CommandDescriptor, ExternalCommand
from .context_key import ContextAccessor, ContextKey
from .errors import (
    AccessorMisuseError,
    ContributionsError,
    DepthExceededError,
    NonDeterministicPredicateError,
    WhenCompileError,
)
from .manifest import ThemeMap
from .menu import Menu, MenuItem
from .registry import Contributions
from .when import WhenExpression, compile_when, when

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AccessorMisuseError",
    "Command",
    "CommandDescriptor",
    "ContextAccessor",
    "ContextKey",
    "Contributions",
    "ContributionsError",
    "DepthExceededError",
    "ExternalCommand",
    "Menu",
    "MenuItem",
    "NonDeterministicPredicateError",
    "ThemeMap",
    "WhenCompileError",
    "WhenExpression",
    "compile_when",
    "when",
]
