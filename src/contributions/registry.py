"""
Contributions: the single object an extension declares everything on.

    contributions = Contributions()

    refresh = contributions.command(CommandDescriptor(id="ext.refresh", title="Refresh"))
    open_file = contributions.external_command("vscode.open")
    focused = contributions.context_key("ext.focused")

    contributions.menu("view/title").add(
        MenuItem(command=refresh, when=when(lambda c: c[focused].truthy()))
    )

    # at activation time
    contributions.attach(host)
    refresh.register(do_refresh)
    contributions.assert_registered()

    # at build time
    manifest = contributions.to_json()
"""

import logging
from typing import Any, Dict, List, Union

from contributions.command import Command, CommandDescriptor, ExternalCommand
from contributions.context_key import ContextKey
from contributions.errors import UnregisteredContributionsError
from contributions.host import HostApi
from contributions.manifest import PackageJson
from contributions.menu import Menu
from contributions.serialization import package_json_to_dict

logger = logging.getLogger(__name__)

Contribution = Union[Command, Menu]


class Contributions:
    """Creates contributions and aggregates them into a manifest."""

    def __init__(self):
        self.api = HostApi()
        self.contributions: List[Contribution] = []

    def attach(self, host: Any) -> None:
        """Bind the host API object handed to the extension on activation."""
        self.api.set(host)

    def command(self, descriptor: CommandDescriptor) -> Command:
        """Create a command this extension contributes and must register."""
        command = Command(self.api, descriptor)
        self.contributions.append(command)
        return command

    def external_command(self, command_id: str) -> ExternalCommand:
        """Create a callable reference to a command this extension does not own."""
        return ExternalCommand(self.api, command_id)

    def context_key(self, key: str) -> ContextKey:
        """Create a context key whose value is pushed to the host on change."""
        return ContextKey(self.api, key)

    def menu(self, menu_id: str) -> Menu:
        """Create a menu reference to add items to."""
        menu = Menu(menu_id)
        self.contributions.append(menu)
        return menu

    def assert_registered(self) -> None:
        """
        Check that every declared command was registered.

        Shows an error in the host when attached, otherwise raises.

        Raises:
            UnregisteredContributionsError: If something was not registered
                and no host is attached
        """
        missing = [c for c in self.contributions if not c.is_registered]
        if not missing:
            return

        msg = f"One or more contributions were not registered: {', '.join(str(c) for c in missing)}"
        if self.api.is_attached:
            logger.error(msg)
            self.api.get().window.show_error_message(msg)
        else:
            raise UnregisteredContributionsError(msg, details={"missing": [str(c) for c in missing]})

    def package_json(self) -> PackageJson:
        """Assemble a fresh PackageJson from every contribution."""
        package_json = PackageJson()
        for contribution in self.contributions:
            contribution.contribute(package_json)
        return package_json

    def to_json(self) -> Dict[str, Any]:
        """Manifest fragment as plain data, ready for json.dumps."""
        return package_json_to_dict(self.package_json())
