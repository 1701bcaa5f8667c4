"""
Menus: items that show commands in a host menu, gated by when-clauses.

    menu = contributions.menu("view/title")
    menu.group("navigation", [
        MenuItem(command=refresh, when=when(lambda c: c["view"].equals("myView"))),
    ])

A when-clause may be a WhenExpression (compiled immediately, so a broken
predicate function fails at declaration time) or a hand-written string.
"""

import logging
import warnings
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from contributions.command import Command
from contributions.errors import WhenClauseSyntaxError
from contributions.manifest import MenuItemContribution, PackageJson
from contributions.parser import parse_when_clause
from contributions.when import WhenExpression

logger = logging.getLogger(__name__)

WhenClause = Union[str, WhenExpression]


@dataclass
class MenuItem:
    """
    Declaration of one menu entry.

    Properties:
        command: Command the item runs
        alt: Command run when the alt modifier is held (optional)
        when: Visibility rule, either a WhenExpression or a clause string (optional)
    """

    command: Command
    alt: Optional[Command] = None
    when: Optional[WhenClause] = None


def _resolve_when(when: Optional[WhenClause]) -> Optional[str]:
    if when is None:
        return None
    if isinstance(when, WhenExpression):
        clause = when.compile()
        logger.debug("Compiled %r to %r", when, clause)
        return clause
    try:
        parse_when_clause(when)
    except WhenClauseSyntaxError as e:
        # the host understands more than the compiler emits; keep the text
        warnings.warn(f"when-clause {when!r} may not be understood by the host: {e.message}", stacklevel=3)
    return when


class Menu:
    """Items contributed to one host menu, identified by its menu ID."""

    # menus need no host-side registration
    is_registered = True

    def __init__(self, menu_id: str):
        self.id = menu_id
        self.items: List[MenuItemContribution] = []

    def _item(self, item: MenuItem, group: Optional[str] = None) -> MenuItemContribution:
        return MenuItemContribution(
            command=item.command.descriptor.id,
            alt=item.alt.descriptor.id if item.alt else None,
            when=_resolve_when(item.when),
            group=group,
        )

    def group(self, group_name: str, items: Sequence[MenuItem]) -> None:
        """Add several items to a group of the menu."""
        self.items.extend(self._item(item, group_name) for item in items)

    def add(self, item: MenuItem) -> None:
        """Add an ungrouped item to the menu."""
        self.items.append(self._item(item))

    def contribute(self, package_json: PackageJson) -> None:
        package_json.menu_items(self.id).extend(self.items)

    def __str__(self) -> str:
        return f"Menu({self.id})"
