"""
Example contribution set for a small file-explorer extension.

Declares three commands, one external command, two context keys and an
editor title menu whose items are gated by compiled when-clauses. Used by
the demo script and the tests.
"""
import re

from contributions.command import CommandDescriptor
from contributions.manifest import ThemeMap
from contributions.menu import MenuItem
from contributions.registry import Contributions
from contributions.when import when


def build_example_contributions() -> Contributions:
    contributions = Contributions()

    refresh = contributions.command(CommandDescriptor(
        id="explorer.refresh",
        title="Refresh",
        category="Explorer",
        icon=ThemeMap(light="media/refresh-light.svg", dark="media/refresh-dark.svg"),
    ))
    collapse = contributions.command(CommandDescriptor(
        id="explorer.collapseAll",
        title="Collapse All",
        category="Explorer",
        icon="$(collapse-all)",
    ))
    preview = contributions.command(CommandDescriptor(
        id="explorer.preview",
        title="Open Preview",
        activates=False,
    ))

    contributions.external_command("vscode.open")

    view = contributions.context_key("view")
    busy = contributions.context_key("explorer.busy")

    title_menu = contributions.menu("view/title")
    title_menu.group("navigation", [
        MenuItem(
            command=refresh,
            alt=collapse,
            when=when(lambda c: c[view].equals("explorer") and not c[busy].truthy()),
        ),
        MenuItem(command=collapse, when=when(lambda c: c[view].equals("explorer"))),
    ])

    markdown = re.compile(r"\.(md|markdown)$")
    contributions.menu("editor/title").add(
        MenuItem(
            command=preview,
            when=when(lambda c: c["resourceFilename"].matches(markdown) or c["resourceLangId"].equals("markdown")),
        )
    )

    return contributions
