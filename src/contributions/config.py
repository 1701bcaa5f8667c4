"""
Compiler settings.

Settings are read from the environment once, at the call site that needs
them. Nothing here is cached at import time, so tests can monkeypatch the
environment freely.

Environment variables:
    CONTRIBUTIONS_MAX_ATOMS: predicates allowed along one path (default 31)
    CONTRIBUTIONS_LOG_LEVEL: log level used by the command line (default WARNING)
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

# Assignments were historically 32-bit integers with bit 0 left for the root.
DEFAULT_MAX_ATOMS = 31

MAX_ATOMS_ENV = "CONTRIBUTIONS_MAX_ATOMS"
LOG_LEVEL_ENV = "CONTRIBUTIONS_LOG_LEVEL"


@dataclass(frozen=True)
class CompilerSettings:
    """
    Settings for the when-clause compiler.

    Properties:
        max_atoms:
            Maximum depth of the decision tree, i.e. how many predicates a
            single execution path may read. 31 keeps compiled clauses
            compatible with hosts that evaluate with 32-bit masks.

        log_level:
            Name of the logging level the command line configures.
    """

    max_atoms: int = DEFAULT_MAX_ATOMS
    log_level: str = "WARNING"

    def __post_init__(self):
        if self.max_atoms < 1:
            raise ValueError(f"max_atoms must be positive, got {self.max_atoms}")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level: {self.log_level}")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> CompilerSettings:
    """
    Build CompilerSettings from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        CompilerSettings with defaults for unset variables

    Raises:
        ValueError: If a variable is set to an invalid value
    """
    env = os.environ if environ is None else environ

    raw_max = env.get(MAX_ATOMS_ENV, "").strip()
    try:
        max_atoms = int(raw_max) if raw_max else DEFAULT_MAX_ATOMS
    except ValueError:
        raise ValueError(f"{MAX_ATOMS_ENV} must be an integer, got {raw_max!r}") from None

    log_level = env.get(LOG_LEVEL_ENV, "").strip() or "WARNING"

    return CompilerSettings(max_atoms=max_atoms, log_level=log_level.upper())
