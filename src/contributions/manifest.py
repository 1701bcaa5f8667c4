"""
Manifest Model Objects

Defines the records contributions write into an extension manifest
(package.json):
    - ThemeMap (per-theme icon paths)
    - CommandContribution (an entry of contributes.commands)
    - MenuItemContribution (an entry of contributes.menus.<menu id>)
    - PackageJson (the manifest fragment being assembled)

ARCHITECTURAL RULE:
    These objects:
        - Are pure data, assembled by Command.contribute() and Menu.contribute()
        - Know nothing about the host API
        - Are turned into dicts / JSON / YAML by serialization
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Union


@dataclass
class ThemeMap:
    """
    Theme-specific variants of a value, typically an icon path.

    Properties:
        light, dark, high_contrast, high_contrast_dark:
            Value for each theme kind (optional)
    """

    light: Optional[str] = None
    dark: Optional[str] = None
    high_contrast: Optional[str] = None
    high_contrast_dark: Optional[str] = None


Icon = Union[str, ThemeMap]


@dataclass
class CommandContribution:
    """
    One entry of ``contributes.commands``.

    Properties:
        command: Command ID (e.g., "myExtension.sayHello")
        title: Human-readable title
        category: Prefix shown in the command palette (optional)
        icon: Icon path or ThemeMap (optional)
    """

    command: str
    title: Optional[str] = None
    category: Optional[str] = None
    icon: Optional[Icon] = None


@dataclass
class MenuItemContribution:
    """
    One entry of ``contributes.menus[<menu id>]``.

    Properties:
        command: ID of the command the item runs
        alt: ID of the command run with the alt modifier (optional)
        when: Compiled when-clause controlling visibility (optional)
        group: Menu group, e.g. "navigation" or "1_modification@2" (optional)
    """

    command: str
    alt: Optional[str] = None
    when: Optional[str] = None
    group: Optional[str] = None


@dataclass
class PackageJson:
    """
    The manifest fragment produced from a set of contributions.

    Properties:
        activation_events:
            Events that activate the extension, e.g. "onCommand:foo".
            A set; serialization sorts it.

        commands:
            contributes.commands, in declaration order

        menus:
            contributes.menus, keyed by menu ID, in declaration order
    """

    activation_events: Set[str] = field(default_factory=set)
    commands: List[CommandContribution] = field(default_factory=list)
    menus: Dict[str, List[MenuItemContribution]] = field(default_factory=dict)

    def menu_items(self, menu_id: str) -> List[MenuItemContribution]:
        """Return the item list for a menu, creating it on first use."""
        return self.menus.setdefault(menu_id, [])
