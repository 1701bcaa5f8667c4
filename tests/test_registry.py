"""
Tests for Contributions, commands and menus.

These tests verify:
    - Commands contribute manifest entries and activation events
    - Commands proxy registration and invocation to the host
    - Menus compile WhenExpressions and keep hand-written clauses
    - assert_registered() reports missing registrations
"""

import warnings

import pytest

from contributions import CommandDescriptor, Contributions, MenuItem, ThemeMap, when
from contributions.errors import (
    HostApiNotAttachedError,
    NonDeterministicPredicateError,
    UnregisteredContributionsError,
)
from contributions.examples import build_example_contributions


class TestCommands:

    def test_command_contribution(self):
        c = Contributions()
        c.command(CommandDescriptor(id="ext.hello", title="Hello", category="Ext", icon="$(smiley)"))
        manifest = c.to_json()
        assert manifest["contributes"]["commands"] == [
            {"command": "ext.hello", "title": "Hello", "category": "Ext", "icon": "$(smiley)"}
        ]
        assert manifest["activationEvents"] == ["onCommand:ext.hello"]

    def test_command_without_activation(self):
        c = Contributions()
        c.command(CommandDescriptor(id="ext.quiet", title="Quiet", activates=False))
        assert c.to_json()["activationEvents"] == []

    def test_register_and_call(self, host):
        c = Contributions()
        greet = c.command(CommandDescriptor(id="ext.greet", title="Greet"))
        c.attach(host)

        disposable = greet.register(lambda name: f"hello {name}")

        assert disposable == "disposable:ext.greet"
        assert greet.is_registered
        assert greet.call("world") == "hello world"
        assert host.commands.executed == [("ext.greet", ("world",))]

    def test_external_command(self, host):
        c = Contributions()
        open_file = c.external_command("vscode.open")
        c.attach(host)
        open_file.call("/tmp/a.txt")
        assert host.commands.executed == [("vscode.open", ("/tmp/a.txt",))]
        # external commands are never part of the manifest
        assert c.to_json()["contributes"] == {}

    def test_call_before_attach(self):
        c = Contributions()
        cmd = c.command(CommandDescriptor(id="ext.x", title="X"))
        with pytest.raises(HostApiNotAttachedError):
            cmd.call()

    def test_str(self):
        c = Contributions()
        assert str(c.command(CommandDescriptor(id="ext.x", title="X"))) == "Command(ext.x)"
        assert str(c.menu("view/title")) == "Menu(view/title)"


class TestMenus:

    def test_when_expression_is_compiled(self):
        c = Contributions()
        cmd = c.command(CommandDescriptor(id="ext.a", title="A"))
        c.menu("view/title").add(
            MenuItem(command=cmd, when=when(lambda ctx: ctx["view"].equals("ext") and not ctx["busy"].truthy()))
        )
        assert c.to_json()["contributes"]["menus"] == {
            "view/title": [{"command": "ext.a", "when": "view == ext && !busy"}]
        }

    def test_typed_context_key(self):
        c = Contributions()
        cmd = c.command(CommandDescriptor(id="ext.a", title="A"))
        hello = c.context_key("hello")
        c.menu("commandPalette").add(MenuItem(command=cmd, when=when(lambda ctx: ctx[hello].equals("world"))))
        assert c.to_json()["contributes"]["menus"]["commandPalette"][0]["when"] == "hello == world"

    def test_group(self):
        c = Contributions()
        a = c.command(CommandDescriptor(id="ext.a", title="A"))
        b = c.command(CommandDescriptor(id="ext.b", title="B"))
        c.menu("editor/title").group("navigation", [MenuItem(command=a, alt=b), MenuItem(command=b, when="editorFocus")])
        assert c.to_json()["contributes"]["menus"]["editor/title"] == [
            {"command": "ext.a", "alt": "ext.b", "group": "navigation"},
            {"command": "ext.b", "when": "editorFocus", "group": "navigation"},
        ]

    def test_same_menu_from_two_references(self):
        c = Contributions()
        a = c.command(CommandDescriptor(id="ext.a", title="A"))
        c.menu("view/title").add(MenuItem(command=a))
        c.menu("view/title").add(MenuItem(command=a, when="b"))
        assert len(c.to_json()["contributes"]["menus"]["view/title"]) == 2

    def test_unparseable_string_clause_warns(self):
        c = Contributions()
        a = c.command(CommandDescriptor(id="ext.a", title="A"))
        with pytest.warns(UserWarning, match="may not be understood"):
            c.menu("view/title").add(MenuItem(command=a, when="resourceScheme != file"))
        assert c.to_json()["contributes"]["menus"]["view/title"][0]["when"] == "resourceScheme != file"

    def test_valid_string_clause_does_not_warn(self):
        c = Contributions()
        a = c.command(CommandDescriptor(id="ext.a", title="A"))
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            c.menu("view/title").add(MenuItem(command=a, when="a && !b || c == 1"))

    def test_broken_predicate_fails_at_declaration(self):
        c = Contributions()
        a = c.command(CommandDescriptor(id="ext.a", title="A"))
        calls = []

        def flaky(ctx):
            calls.append(1)
            return ctx["x" if len(calls) == 1 else "y"].truthy()

        with pytest.raises(NonDeterministicPredicateError):
            c.menu("view/title").add(MenuItem(command=a, when=when(flaky)))


class TestAssertRegistered:

    def test_all_registered(self, host):
        c = Contributions()
        cmd = c.command(CommandDescriptor(id="ext.a", title="A"))
        c.menu("view/title")
        c.attach(host)
        cmd.register(lambda: None)
        c.assert_registered()
        assert host.window.errors == []

    def test_missing_without_host_raises(self):
        c = Contributions()
        c.command(CommandDescriptor(id="ext.a", title="A"))
        c.command(CommandDescriptor(id="ext.b", title="B"))
        with pytest.raises(UnregisteredContributionsError) as exc:
            c.assert_registered()
        assert exc.value.details["missing"] == ["Command(ext.a)", "Command(ext.b)"]

    def test_missing_with_host_shows_error(self, host):
        c = Contributions()
        c.command(CommandDescriptor(id="ext.a", title="A"))
        c.attach(host)
        c.assert_registered()
        assert host.window.errors == ["One or more contributions were not registered: Command(ext.a)"]


def test_example_contributions():
    manifest = build_example_contributions().to_json()

    assert manifest["activationEvents"] == ["onCommand:explorer.collapseAll", "onCommand:explorer.refresh"]
    commands = {c["command"]: c for c in manifest["contributes"]["commands"]}
    assert commands["explorer.refresh"]["icon"] == {
        "light": "media/refresh-light.svg",
        "dark": "media/refresh-dark.svg",
    }
    menus = manifest["contributes"]["menus"]
    assert menus["view/title"][0] == {
        "command": "explorer.refresh",
        "alt": "explorer.collapseAll",
        "when": "view == explorer && !explorer.busy",
        "group": "navigation",
    }
    assert menus["editor/title"][0]["when"] == (
        r"resourceFilename ~= \.(md|markdown)$ || resourceLangId == markdown"
    )


def test_theme_map_is_exported():
    assert ThemeMap(light="x").light == "x"
