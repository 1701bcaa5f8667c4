"""
Reference to the host editor API.

Contributions are declared at import time, long before the host hands the
extension its API object. Every command and context key holds the same
HostApi reference and resolves it lazily when it actually talks to the host.

The host object is duck-typed. The pieces used are:
    host.commands.execute_command(command_id, *args)
    host.commands.register_command(command_id, callback)
    host.window.show_error_message(message)
"""

from typing import Any, Optional

from .errors import HostApiNotAttachedError


class HostApi:
    """Late-bound holder for the host API object."""

    def __init__(self):
        self.value: Optional[Any] = None

    def set(self, api: Any) -> None:
        self.value = api

    def get(self) -> Any:
        if self.value is None:
            raise HostApiNotAttachedError(
                "Cannot use the host API before calling contributions.attach(host)"
            )
        return self.value

    @property
    def is_attached(self) -> bool:
        return self.value is not None
