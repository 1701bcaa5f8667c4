"""
Commands: declared in the manifest, registered and invoked through the host.

    greet = contributions.command(CommandDescriptor(id="ext.greet", title="Greet"))
    ...
    greet.register(lambda name: print(f"hello {name}"))
    greet.call("world")
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from contributions.host import HostApi
from contributions.manifest import CommandContribution, Icon, PackageJson

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandDescriptor:
    """
    Everything the manifest needs to know about a command.

    Properties:
        id: Unique command ID
        title: Human-readable command title
        activates: Whether invoking the command activates the extension
            (adds an ``onCommand:<id>`` activation event). Defaults to True.
        category: Category shown as a prefix (optional)
        icon: Icon path, or a ThemeMap of paths (optional)
    """

    id: str
    title: str
    activates: bool = True
    category: Optional[str] = None
    icon: Optional[Icon] = None


class ExternalCommand:
    """A command owned by the host or another extension: callable, never registered."""

    def __init__(self, api: HostApi, command_id: str):
        self.api = api
        self.id = command_id

    def call(self, *args: Any) -> Any:
        """Execute the command through the host and return its result."""
        logger.debug("Executing command %s", self.id)
        return self.api.get().commands.execute_command(self.id, *args)

    def __str__(self) -> str:
        return f"ExternalCommand({self.id})"


class Command(ExternalCommand):
    """A command this extension declares, registers and contributes."""

    def __init__(self, api: HostApi, descriptor: CommandDescriptor):
        super().__init__(api, descriptor.id)
        self.descriptor = descriptor
        self.is_registered = False

    def register(self, fn: Callable[..., Any]) -> Any:
        """
        Register the command's implementation with the host.

        Returns:
            Whatever the host returns (usually a disposable)
        """
        self.is_registered = True
        return self.api.get().commands.register_command(self.descriptor.id, fn)

    def contribute(self, package_json: PackageJson) -> None:
        package_json.commands.append(
            CommandContribution(
                command=self.descriptor.id,
                title=self.descriptor.title,
                category=self.descriptor.category,
                icon=self.descriptor.icon,
            )
        )
        if self.descriptor.activates:
            package_json.activation_events.add(f"onCommand:{self.descriptor.id}")

    def __str__(self) -> str:
        return f"Command({self.descriptor.id})"
