"""Pytest configuration and shared fixtures."""

import pytest

from contributions.config import LOG_LEVEL_ENV, MAX_ATOMS_ENV


class FakeCommands:
    """Records what the code under test asks the host to do."""

    def __init__(self):
        self.executed = []
        self.registered = {}

    def execute_command(self, command_id, *args):
        self.executed.append((command_id, args))
        handler = self.registered.get(command_id)
        return handler(*args) if handler else None

    def register_command(self, command_id, fn):
        self.registered[command_id] = fn
        return f"disposable:{command_id}"


class FakeWindow:
    def __init__(self):
        self.errors = []

    def show_error_message(self, message):
        self.errors.append(message)


class FakeHost:
    def __init__(self):
        self.commands = FakeCommands()
        self.window = FakeWindow()


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Compiler settings come from the environment; start every test from defaults."""
    monkeypatch.delenv(MAX_ATOMS_ENV, raising=False)
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
