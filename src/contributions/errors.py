"""
Exceptions raised by the contributions package.

Every error carries a human-readable ``message`` and a ``details`` dict with
the offending key, atom text or depth, so the predicate function or the
contribution declaration can be fixed without a debugger.

None of these are retried or recovered internally. They are programmer
errors and surface immediately to the caller.
"""

from typing import Any, Dict, Optional


class ContributionsError(Exception):
    """Base exception for all contributions errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class WhenCompileError(ContributionsError):
    """Raised when a when() predicate function cannot be compiled."""
    pass


class NonDeterministicPredicateError(WhenCompileError):
    """
    The predicate function branched differently than on a previous run.

    Examples:
        - A different predicate was read at an already-visited position
        - A predicate was read where a previous run already returned
        - A run returned a different result on an already-resolved path

    The function depends on something other than the predicates it reads
    (a counter, the clock, random numbers, mutable globals).
    """
    pass


class DepthExceededError(WhenCompileError):
    """More predicates were read along one path than the compiler supports."""
    pass


class AccessorMisuseError(WhenCompileError):
    """
    The context accessor was used incorrectly.

    Examples:
        - A key that is not a string (or ContextKey)
        - A test invoked after its compile pass finished
        - A compile() started while the same expression is compiling
    """
    pass


class WhenClauseSyntaxError(ContributionsError):
    """Raised when a when-clause string cannot be parsed."""
    pass


class HostApiNotAttachedError(ContributionsError):
    """The host API was used before Contributions.attach() was called."""
    pass


class UnregisteredContributionsError(ContributionsError):
    """One or more commands were declared but never registered."""
    pass
